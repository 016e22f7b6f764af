from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from pharmacy_worklist.models.work_item import PharmacyState

# Inbound push events
ITEM_CHANGED = "worklist-item-changed"
STAGE_ITEM_UPDATED = "stage-item-updated"

# Outbound intents
MOVE_ITEM = "move-item"
JOIN = "join"


class MoveItemIntent(BaseModel):
    """Request to move an item to a new pharmacy state."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    pharmacy_state: PharmacyState = Field(alias="pharmacyState")
    status: Optional[str] = None

    def to_payload(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class JoinAnnouncement(BaseModel):
    """Sent once on startup so the backend knows who is listening."""

    model_config = ConfigDict(populate_by_name=True)

    role: str
    hospital_id: Optional[str] = Field(default=None, alias="hospitalId")

    def to_payload(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
