from __future__ import annotations

import asyncio
import logging
from typing import Any

from pharmacy_worklist.models.commands import JOIN, MOVE_ITEM, JoinAnnouncement, MoveItemIntent
from pharmacy_worklist.models.work_item import PharmacyState
from pharmacy_worklist.services.event_bus import EventBus
from pharmacy_worklist.services.state_store import StateStore

logger = logging.getLogger(__name__)

COMPLETED_STATUS = "completed"


class CommandDispatcher:
    """Turns user actions into optimistic store patches plus outbound intents.

    Sends are fire-and-forget: the local patch is applied before the send
    is scheduled and nothing waits on the backend. A failed send is
    logged; with ``revert_on_failure`` the optimistic fields are restored
    as long as nothing else has overwritten them meanwhile.
    """

    def __init__(self, store: StateStore, outbound: EventBus, revert_on_failure: bool = False):
        self.store = store
        self.outbound = outbound
        self.revert_on_failure = revert_on_failure
        self._pending: set[asyncio.Task[bool]] = set()

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def prepare(self, item_id: int) -> asyncio.Task[bool]:
        return self._move(item_id, PharmacyState.PREPARED)

    def deliver(self, item_id: int) -> asyncio.Task[bool]:
        return self._move(item_id, PharmacyState.DELIVERED, status=COMPLETED_STATUS)

    async def announce(self, role: str, hospital_id: str | None) -> bool:
        announcement = JoinAnnouncement(role=role, hospital_id=hospital_id)
        errors = await self.outbound.publish(JOIN, announcement.to_payload())
        if errors:
            logger.error("Join announcement failed for role %s: %s", role, errors[0])
            return False
        logger.info("Joined as %s (hospital=%s)", role, hospital_id)
        return True

    async def drain(self) -> None:
        """Wait for in-flight sends. Used on shutdown and in tests."""
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _move(
        self, item_id: int, state: PharmacyState, status: str | None = None
    ) -> asyncio.Task[bool]:
        intent = MoveItemIntent(id=item_id, pharmacy_state=state, status=status)
        fields: dict[str, Any] = {"pharmacy_state": state}
        if status is not None:
            fields["status"] = status

        previous = self.store.get(item_id)
        if self.store.patch(item_id, **fields) is None:
            logger.warning("Item #%d not in worklist; sending %s without local update", item_id, state.value)
        else:
            logger.info("Item #%d marked %s", item_id, state.value)

        undo = None
        if previous is not None:
            undo = {name: getattr(previous, name) for name in fields}

        task = asyncio.get_running_loop().create_task(self._send(intent, fields, undo))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _send(
        self,
        intent: MoveItemIntent,
        applied: dict[str, Any],
        undo: dict[str, Any] | None,
    ) -> bool:
        if not self.outbound.has_listeners(MOVE_ITEM):
            logger.warning("No transport for %s; item #%d not sent", MOVE_ITEM, intent.id)
        errors = await self.outbound.publish(MOVE_ITEM, intent.to_payload())
        if not errors:
            return True

        logger.error(
            "Failed to send %s for item #%d: %s", MOVE_ITEM, intent.id, errors[0]
        )
        if self.revert_on_failure and undo is not None:
            self._revert(intent.id, applied, undo)
        return False

    def _revert(self, item_id: int, applied: dict[str, Any], undo: dict[str, Any]) -> None:
        current = self.store.get(item_id)
        if current is None:
            return
        if any(getattr(current, name) != value for name, value in applied.items()):
            logger.info("Item #%d changed since the optimistic update; not reverting", item_id)
            return
        self.store.patch(item_id, **undo)
        logger.warning("Reverted optimistic update on item #%d", item_id)
