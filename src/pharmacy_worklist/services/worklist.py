from __future__ import annotations

import asyncio
import logging
from typing import Any

from pharmacy_worklist.exceptions import WorklistLoadError
from pharmacy_worklist.models.view import WorklistView
from pharmacy_worklist.services.dispatcher import CommandDispatcher
from pharmacy_worklist.services.event_bus import EventBus
from pharmacy_worklist.services.reconciler import EventReconciler, Fetcher
from pharmacy_worklist.services.state_store import StateStore
from pharmacy_worklist.services.view_projector import RenderCallback, ViewProjector
from pharmacy_worklist.utils.config import Config

logger = logging.getLogger(__name__)


class PharmacyWorklist:
    """Owns one worklist: its store, reconciler, dispatcher and projector.

    ``inbound`` carries push events into the worklist; transports publish
    on it. ``outbound`` carries intents out; transports subscribe to it.
    """

    def __init__(
        self,
        config: Config,
        fetcher: Fetcher,
        render: RenderCallback | None = None,
        inbound: EventBus | None = None,
        outbound: EventBus | None = None,
    ):
        self.config = config
        self.inbound = inbound or EventBus()
        self.outbound = outbound or EventBus()
        self.store = StateStore()
        self.projector = ViewProjector(self.store, render)
        self.reconciler = EventReconciler(self.store, fetcher, stage_status=config.stage_status)
        self.dispatcher = CommandDispatcher(
            self.store, self.outbound, revert_on_failure=config.revert_on_send_failure
        )
        self._started = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Announce, start listening for pushes, then do the first load."""
        if self._started:
            return
        self._started = True
        await self.dispatcher.announce(self.config.role, self.config.hospital_id)
        self.reconciler.attach(self.inbound)
        try:
            await self.reconciler.reload()
        except WorklistLoadError as exc:
            logger.error("Initial worklist load failed: %s", exc)
            raise

    async def stop(self) -> None:
        if not self._started:
            return
        self.reconciler.detach(self.inbound)
        await self.dispatcher.drain()
        self._started = False

    # ------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------

    async def push(self, event_type: str, payload: Any) -> list[Exception]:
        """Deliver a push event as if it came off the push channel."""
        return await self.inbound.publish(event_type, payload)

    async def reload(self) -> int:
        return await self.reconciler.reload()

    def prepare(self, item_id: int) -> asyncio.Task[bool]:
        return self.dispatcher.prepare(item_id)

    def deliver(self, item_id: int) -> asyncio.Task[bool]:
        return self.dispatcher.deliver(item_id)

    def set_search(self, term: str) -> WorklistView:
        return self.projector.set_search(term)

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    @property
    def view(self) -> WorklistView:
        return self.projector.current
