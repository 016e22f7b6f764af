from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Any, Callable, Coroutine

logger = logging.getLogger(__name__)

Listener = Callable[[dict[str, Any]], Coroutine[Any, Any, None]]


class EventBus:
    """Async pub/sub between the worklist and its transports.

    A worklist has two buses. On the inbound bus the push transport
    publishes ``worklist-item-changed`` and ``stage-item-updated`` and the
    reconciler listens. On the outbound bus the dispatcher publishes
    ``join`` and ``move-item`` and the command transport listens.

    Listeners subscribe to an event type (or "*" for all events) and
    receive ``{"type", "timestamp", "payload"}`` with the payload passed
    through untouched. A failing transport is logged and reported back to
    the publisher without stopping the other listeners.
    """

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = {}

    def subscribe(self, event_type: str, listener: Listener) -> None:
        self._listeners.setdefault(event_type, []).append(listener)

    def unsubscribe(self, event_type: str, listener: Listener) -> None:
        listeners = self._listeners.get(event_type, [])
        if listener in listeners:
            listeners.remove(listener)

    def has_listeners(self, event_type: str) -> bool:
        return bool(self._listeners.get(event_type) or self._listeners.get("*"))

    async def publish(self, event_type: str, payload: Any = None) -> list[Exception]:
        """Fire an event to all matching listeners.

        Returns the exceptions raised by listeners, each already logged.
        """
        event = {
            "type": event_type,
            "timestamp": datetime.now().isoformat(),
            "payload": payload,
        }

        targets: list[Listener] = []
        targets.extend(self._listeners.get(event_type, []))
        targets.extend(self._listeners.get("*", []))

        if not targets:
            return []

        results = await asyncio.gather(
            *(listener(event) for listener in targets),
            return_exceptions=True,
        )
        errors: list[Exception] = []
        for result in results:
            if isinstance(result, Exception):
                logger.error("Event listener error for %s: %s", event_type, result)
                errors.append(result)
        return errors
