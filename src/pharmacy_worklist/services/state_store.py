from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Callable, Iterable, Iterator

from pharmacy_worklist.models.work_item import WorkItem

logger = logging.getLogger(__name__)

StoreListener = Callable[["StateStore"], None]


class StateStore:
    """Canonical in-memory collection of work items keyed by id.

    Design:
    - A dict keyed by ``id`` keeps one entry per item and preserves
      insertion order; replacing an existing key keeps its position.
    - Items are frozen models, so readers can never mutate store state.
    - Every mutation that changes something notifies subscribers once it
      is fully applied. ``batch()`` coalesces several mutations into a
      single notification.
    """

    def __init__(self) -> None:
        self._items: dict[int, WorkItem] = {}
        self._listeners: list[StoreListener] = []
        self._batch_depth = 0
        self._dirty = False

    # ------------------------------------------------------------------
    # Subscription
    # ------------------------------------------------------------------

    def subscribe(self, listener: StoreListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: StoreListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    @contextmanager
    def batch(self) -> Iterator[StateStore]:
        """Defer notifications until the outermost batch exits."""
        self._batch_depth += 1
        try:
            yield self
        finally:
            self._batch_depth -= 1
            if self._batch_depth == 0 and self._dirty:
                self._dirty = False
                self._notify()

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def upsert(self, item: WorkItem) -> None:
        """Insert a new item at the end, or replace an existing one in place."""
        self._items[item.id] = item
        self._changed()

    def remove(self, item_id: int) -> bool:
        if self._items.pop(item_id, None) is None:
            return False
        self._changed()
        return True

    def replace_all(self, items: Iterable[WorkItem]) -> None:
        """Swap in a whole new collection; repeated ids keep the last record."""
        replacement: dict[int, WorkItem] = {}
        for item in items:
            replacement[item.id] = item
        self._items = replacement
        self._changed()

    def patch(self, item_id: int, **fields: Any) -> WorkItem | None:
        """Merge ``fields`` into an existing item.

        Returns the updated item, or ``None`` when ``item_id`` is unknown.
        Patching never creates an item.
        """
        current = self._items.get(item_id)
        if current is None:
            logger.debug("Ignoring patch for unknown item #%s", item_id)
            return None
        updated = current.merged(**fields)
        self._items[item_id] = updated
        self._changed()
        return updated

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, item_id: int) -> WorkItem | None:
        return self._items.get(item_id)

    def all(self) -> tuple[WorkItem, ...]:
        return tuple(self._items.values())

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._items

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _changed(self) -> None:
        if self._batch_depth:
            self._dirty = True
            return
        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.exception("Store listener %r failed", listener)
