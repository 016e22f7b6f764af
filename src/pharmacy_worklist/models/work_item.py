from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from pharmacy_worklist.exceptions import MalformedEventError


class PharmacyState(str, Enum):
    PENDING = "pending"
    PREPARED = "prepared"
    DELIVERED = "delivered"


class WorkItem(BaseModel):
    """One patient's prescription as it moves through the pharmacy stage.

    Items are immutable. Fields owned by other departments are kept as
    extras so that replacing an item never loses them.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="allow")

    id: int
    token: int | float | str | None = None
    name: str = ""
    age: int | float | str | None = None
    gender: int | float | str | None = None
    prescription: Optional[str] = None
    pharmacy_state: Optional[PharmacyState] = Field(default=None, alias="pharmacyState")
    status: Optional[str] = None  # waiting, consultation, pharmacy, completed, ...

    @field_validator("name", mode="before")
    @classmethod
    def _name_as_text(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("prescription", "status", "pharmacy_state", mode="before")
    @classmethod
    def _blank_is_unset(cls, value: Any) -> Any:
        return None if value == "" else value

    @property
    def effective_state(self) -> PharmacyState:
        """Pharmacy state with an unset value read as pending."""
        return self.pharmacy_state or PharmacyState.PENDING

    def merged(self, **fields: Any) -> WorkItem:
        """Return a validated copy with ``fields`` applied.

        Keys may be field names or wire aliases (``pharmacy_state`` or
        ``pharmacyState``).
        """
        data = self.model_dump(by_alias=True)
        for key, value in fields.items():
            field = type(self).model_fields.get(key)
            if field is not None and field.alias:
                key = field.alias
            data[key] = value
        return type(self).model_validate(data)

    @classmethod
    def from_payload(cls, data: Any) -> WorkItem:
        if not isinstance(data, dict):
            raise MalformedEventError(f"Expected an object, got {type(data).__name__}", data)
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise MalformedEventError(str(exc), data) from exc

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
