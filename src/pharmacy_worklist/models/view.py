from __future__ import annotations

from pydantic import BaseModel, Field

from pharmacy_worklist.models.work_item import WorkItem


class StatusCounts(BaseModel):
    """Aggregate pharmacy-state counts over the whole worklist."""

    pending: int = 0
    prepared: int = 0
    delivered: int = 0


class WorklistView(BaseModel):
    """What the rendering layer receives after every change."""

    items: list[WorkItem] = Field(default_factory=list)
    counts: StatusCounts = Field(default_factory=StatusCounts)
    search: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.items
