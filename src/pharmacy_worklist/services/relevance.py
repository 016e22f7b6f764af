from __future__ import annotations

from pharmacy_worklist.models.work_item import WorkItem

DEFAULT_STAGE_STATUS = "pharmacy"


def is_relevant(item: WorkItem, stage_status: str = DEFAULT_STAGE_STATUS) -> bool:
    """Whether an item belongs on the pharmacy worklist.

    An item qualifies if it carries a prescription, sits in the pharmacy
    stage, or has already been given a pharmacy state.
    """
    if item.prescription:
        return True
    if item.status == stage_status:
        return True
    return item.pharmacy_state is not None
