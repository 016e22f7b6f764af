from __future__ import annotations

from typing import Any, Callable

import pytest

from pharmacy_worklist.models.work_item import WorkItem
from pharmacy_worklist.services.event_bus import EventBus
from pharmacy_worklist.services.reconciler import EventReconciler
from pharmacy_worklist.services.state_store import StateStore
from pharmacy_worklist.utils.config import Config


def make_record(item_id: int, **fields: Any) -> dict[str, Any]:
    record: dict[str, Any] = {
        "id": item_id,
        "token": item_id,
        "name": f"Patient {item_id}",
        "age": 40,
        "gender": "F",
        "prescription": "Paracetamol 500mg",
        "status": "pharmacy",
    }
    record.update(fields)
    return record


class FakeBackend:
    """Stand-in for the bulk-fetch endpoint."""

    def __init__(self, records: list[dict[str, Any]] | None = None):
        self.records = records or []
        self.calls = 0
        self.error: Exception | None = None

    async def fetch(self) -> list[dict[str, Any]]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.records)


@pytest.fixture
def record() -> Callable[..., dict[str, Any]]:
    return make_record


@pytest.fixture
def item() -> Callable[..., WorkItem]:
    def _item(item_id: int, **fields: Any) -> WorkItem:
        return WorkItem.model_validate(make_record(item_id, **fields))

    return _item


@pytest.fixture
def store() -> StateStore:
    return StateStore()


@pytest.fixture
def event_bus() -> EventBus:
    return EventBus()


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def reconciler(store: StateStore, backend: FakeBackend) -> EventReconciler:
    return EventReconciler(store, backend.fetch)


@pytest.fixture
def config() -> Config:
    return Config(
        api_base="http://backend.test",
        command_url=None,
        role="pharmacy",
        hospital_id="h-1",
        stage_status="pharmacy",
        revert_on_send_failure=False,
    )
