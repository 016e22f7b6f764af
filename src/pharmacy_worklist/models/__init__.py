from pharmacy_worklist.models.commands import JoinAnnouncement, MoveItemIntent
from pharmacy_worklist.models.view import StatusCounts, WorklistView
from pharmacy_worklist.models.work_item import PharmacyState, WorkItem

__all__ = [
    "JoinAnnouncement",
    "MoveItemIntent",
    "PharmacyState",
    "StatusCounts",
    "WorkItem",
    "WorklistView",
]
