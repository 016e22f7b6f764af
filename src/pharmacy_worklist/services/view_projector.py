from __future__ import annotations

from typing import Callable, Iterable

from pharmacy_worklist.models.view import StatusCounts, WorklistView
from pharmacy_worklist.models.work_item import PharmacyState, WorkItem
from pharmacy_worklist.services.state_store import StateStore

RenderCallback = Callable[[WorklistView], None]


def count_states(items: Iterable[WorkItem]) -> StatusCounts:
    counts = StatusCounts()
    for item in items:
        state = item.effective_state
        if state == PharmacyState.PENDING:
            counts.pending += 1
        elif state == PharmacyState.PREPARED:
            counts.prepared += 1
        elif state == PharmacyState.DELIVERED:
            counts.delivered += 1
    return counts


def project(items: Iterable[WorkItem], search: str = "") -> WorklistView:
    """Build the view for a search term.

    Names are matched case-insensitively as substrings, keeping store
    order. Counts always cover every item, not just the matches.
    """
    all_items = list(items)
    term = search.lower()
    matches = [item for item in all_items if term in item.name.lower()]
    return WorklistView(items=matches, counts=count_states(all_items), search=search)


class ViewProjector:
    """Recomputes the view on every store change and search change."""

    def __init__(self, store: StateStore, render: RenderCallback | None = None):
        self.store = store
        self._render = render
        self._search = ""
        self._current = project(store.all())
        store.subscribe(self._on_store_changed)

    @property
    def search(self) -> str:
        return self._search

    @property
    def current(self) -> WorklistView:
        return self._current

    def set_search(self, term: str) -> WorklistView:
        self._search = term
        return self.refresh()

    def refresh(self) -> WorklistView:
        self._current = project(self.store.all(), self._search)
        if self._render is not None:
            self._render(self._current)
        return self._current

    def close(self) -> None:
        self.store.unsubscribe(self._on_store_changed)

    def _on_store_changed(self, store: StateStore) -> None:
        self.refresh()
