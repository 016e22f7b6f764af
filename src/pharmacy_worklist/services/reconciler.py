from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Iterable

from pharmacy_worklist.exceptions import MalformedEventError, WorklistLoadError
from pharmacy_worklist.models.commands import ITEM_CHANGED, STAGE_ITEM_UPDATED
from pharmacy_worklist.models.work_item import WorkItem
from pharmacy_worklist.services.event_bus import EventBus
from pharmacy_worklist.services.relevance import DEFAULT_STAGE_STATUS, is_relevant
from pharmacy_worklist.services.state_store import StateStore

logger = logging.getLogger(__name__)

Fetcher = Callable[[], Awaitable[list[dict[str, Any]]]]


class EventReconciler:
    """Merges bulk snapshots and push events into the state store.

    Every path ends in an upsert or remove keyed by id, so replaying an
    event is harmless. There is no ordering between events and local
    optimistic patches: whichever reaches the store last wins.
    """

    def __init__(
        self,
        store: StateStore,
        fetcher: Fetcher,
        stage_status: str = DEFAULT_STAGE_STATUS,
    ):
        self.store = store
        self._fetch = fetcher
        self._stage_status = stage_status

    # ------------------------------------------------------------------
    # Bulk snapshot
    # ------------------------------------------------------------------

    def apply_snapshot(self, records: Iterable[Any]) -> int:
        """Replace the store with a server snapshot. Returns the item count."""
        items: list[WorkItem] = []
        for record in records:
            try:
                items.append(WorkItem.from_payload(record))
            except MalformedEventError as exc:
                logger.warning("Dropping malformed snapshot record: %s", exc)
        self.store.replace_all(items)
        logger.info("Loaded %d worklist items", len(items))
        return len(items)

    async def reload(self) -> int:
        """Fetch a fresh snapshot and apply it.

        On failure the store is left as it was and ``WorklistLoadError``
        is raised.
        """
        try:
            records = await self._fetch()
        except WorklistLoadError:
            logger.error("Worklist load failed; keeping %d existing items", len(self.store))
            raise
        except Exception as exc:
            logger.error("Worklist load failed; keeping %d existing items", len(self.store))
            raise WorklistLoadError(str(exc)) from exc
        return self.apply_snapshot(records)

    # ------------------------------------------------------------------
    # Push events
    # ------------------------------------------------------------------

    async def handle_item_changed(self, payload: Any) -> None:
        """Cross-stage item change; ``None`` means state is unknown."""
        record = None
        if isinstance(payload, dict):
            record = payload.get("item", payload.get("patient"))
        elif payload is not None:
            logger.warning("Dropping malformed %s event: %r", ITEM_CHANGED, payload)
            return
        if record is None:
            logger.info("Item change without an item, reloading worklist")
            await self.reload()
            return

        try:
            item = WorkItem.from_payload(record)
        except MalformedEventError as exc:
            logger.warning("Dropping malformed %s event: %s", ITEM_CHANGED, exc)
            return

        if is_relevant(item, self._stage_status):
            self.store.upsert(item)
        elif self.store.remove(item.id):
            logger.info("Item #%d no longer relevant, removed", item.id)

    def handle_stage_item_updated(self, payload: Any) -> None:
        """Pharmacy-scoped update; always upserted, no relevance check."""
        try:
            item = WorkItem.from_payload(payload)
        except MalformedEventError as exc:
            logger.warning("Dropping malformed %s event: %s", STAGE_ITEM_UPDATED, exc)
            return
        self.store.upsert(item)

    # ------------------------------------------------------------------
    # Bus wiring
    # ------------------------------------------------------------------

    def attach(self, bus: EventBus) -> None:
        bus.subscribe(ITEM_CHANGED, self._on_item_changed)
        bus.subscribe(STAGE_ITEM_UPDATED, self._on_stage_item_updated)

    def detach(self, bus: EventBus) -> None:
        bus.unsubscribe(ITEM_CHANGED, self._on_item_changed)
        bus.unsubscribe(STAGE_ITEM_UPDATED, self._on_stage_item_updated)

    async def _on_item_changed(self, event: dict[str, Any]) -> None:
        await self.handle_item_changed(event.get("payload"))

    async def _on_stage_item_updated(self, event: dict[str, Any]) -> None:
        self.handle_stage_item_updated(event.get("payload"))
