from __future__ import annotations

from pharmacy_worklist.models.view import StatusCounts, WorklistView
from pharmacy_worklist.models.work_item import PharmacyState, WorkItem
from pharmacy_worklist.services.state_store import StateStore
from pharmacy_worklist.services.view_projector import ViewProjector, count_states, project


class TestProject:
    def test_counts_by_state(self) -> None:
        states = ["pending", "pending", "prepared", "delivered", None]
        items = [WorkItem(id=i, pharmacy_state=s) for i, s in enumerate(states)]

        assert count_states(items) == StatusCounts(pending=3, prepared=1, delivered=1)

    def test_search_is_case_insensitive_and_keeps_order(self) -> None:
        items = [
            WorkItem(id=1, name="Alice", pharmacy_state=PharmacyState.PREPARED),
            WorkItem(id=2, name="bob"),
            WorkItem(id=3, name="Ally"),
        ]
        view = project(items, "al")

        assert [i.name for i in view.items] == ["Alice", "Ally"]
        assert view.counts == StatusCounts(pending=2, prepared=1, delivered=0)
        assert view.search == "al"

    def test_blank_search_shows_everything(self) -> None:
        items = [WorkItem(id=1, name="Alice"), WorkItem(id=2, name="")]
        assert len(project(items).items) == 2

    def test_no_match_is_empty_view(self) -> None:
        view = project([WorkItem(id=1, name="Alice")], "zed")
        assert view.is_empty
        assert view.counts.pending == 1

    def test_empty_store(self) -> None:
        view = project([])
        assert view.is_empty
        assert view.counts == StatusCounts()


class TestViewProjector:
    def test_recomputes_on_store_change(self, store: StateStore, item) -> None:
        rendered: list[WorklistView] = []
        projector = ViewProjector(store, rendered.append)

        store.upsert(item(1, name="Alice"))

        assert len(rendered) == 1
        assert projector.current.items[0].name == "Alice"

    def test_recomputes_on_search_change(self, store: StateStore, item) -> None:
        rendered: list[WorklistView] = []
        projector = ViewProjector(store, rendered.append)
        store.replace_all([item(1, name="Alice"), item(2, name="bob")])

        view = projector.set_search("BO")

        assert [i.name for i in view.items] == ["bob"]
        assert rendered[-1] is view
        assert projector.search == "BO"

    def test_search_survives_store_changes(self, store: StateStore, item) -> None:
        projector = ViewProjector(store)
        projector.set_search("ali")
        store.upsert(item(1, name="Alice"))
        store.upsert(item(2, name="Bob"))

        assert [i.name for i in projector.current.items] == ["Alice"]
        assert projector.current.counts.pending == 2

    def test_empty_replace_zeroes_everything(self, store: StateStore, item) -> None:
        projector = ViewProjector(store)
        store.replace_all(
            [item(1, pharmacyState="prepared"), item(2, pharmacyState="delivered"), item(3)]
        )
        store.replace_all([])

        assert projector.current.is_empty
        assert projector.current.counts == StatusCounts(pending=0, prepared=0, delivered=0)

    def test_close_stops_recomputing(self, store: StateStore, item) -> None:
        rendered: list[WorklistView] = []
        projector = ViewProjector(store, rendered.append)
        projector.close()
        store.upsert(item(1))
        assert rendered == []


class TestCountStates:
    def test_counts_states_held_as_plain_strings(self) -> None:
        items = [
            WorkItem(id=1).model_copy(update={"pharmacy_state": "prepared"}),
            WorkItem(id=2).model_copy(update={"pharmacy_state": "delivered"}),
        ]
        assert count_states(items) == StatusCounts(pending=0, prepared=1, delivered=1)
