"""
Core Data Models for the Ledger

These models define the schemas for every record the ledger produces.
They are designed to:
1. Be immutable once created (frozen models)
2. Serialize to the wire format (camelCase keys, ISO-8601 timestamps)
3. Accept stored payloads through the same aliases

DESIGN DECISION: Attributes are snake_case in Python and camelCase on the
wire. Both spellings are accepted on input.
"""

from datetime import datetime
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
    model_validator,
)

from ledger.clock import ensure_utc, format_timestamp
from ledger.validation import normalize_name


class LedgerRecord(BaseModel):
    """Shared configuration for all ledger records."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    def to_wire(self) -> dict:
        """Convert to the stored/serialized representation."""
        return self.model_dump(by_alias=True)


# =============================================================================
# ENTRIES
# =============================================================================

class Entry(LedgerRecord):
    """
    A named entity that assignments reference.

    ``normalized_name`` is the uniqueness key within one entries collection.
    """

    name: str = Field(
        ...,
        min_length=1,
        description="Display name, trimmed, original case"
    )
    normalized_name: str = Field(
        ...,
        alias="normalizedName",
        description="Trimmed and lowercased name"
    )
    created_at: datetime = Field(
        ...,
        alias="createdAt",
        description="When the entry was created (UTC)"
    )

    @field_validator("created_at")
    @classmethod
    def to_utc(cls, v: datetime) -> datetime:
        return ensure_utc(v)

    @field_serializer("created_at")
    def serialize_created_at(self, v: datetime) -> str:
        return format_timestamp(v)


# =============================================================================
# ASSIGNMENTS
# =============================================================================

class Assignment(LedgerRecord):
    """
    A monetary amount attached to an entry at a point in time.

    ``name`` and ``normalized_name`` are copied from the entry when the
    assignment is recorded, never from the text the user typed.
    """

    name: str = Field(
        ...,
        description="Display name of the entry at creation time"
    )
    normalized_name: str = Field(
        ...,
        alias="normalizedName",
        description="Key of the entry this assignment belongs to"
    )
    amount: float = Field(
        ...,
        allow_inf_nan=False,
        description="Finite amount"
    )
    created_at: datetime = Field(
        ...,
        alias="createdAt",
        description="When the assignment was recorded (UTC)"
    )

    @model_validator(mode="before")
    @classmethod
    def fill_legacy_fields(cls, data: Any) -> Any:
        """
        Older stored records may lack ``normalizedName`` or ``amount``.

        The key is derived from ``name`` and a missing amount counts as 0.
        """
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if "normalizedName" not in data and "normalized_name" not in data:
            if isinstance(data.get("name"), str):
                data["normalizedName"] = normalize_name(data["name"])
        if data.get("amount") is None:
            data["amount"] = 0.0
        return data

    @field_validator("created_at")
    @classmethod
    def to_utc(cls, v: datetime) -> datetime:
        return ensure_utc(v)

    @field_serializer("created_at")
    def serialize_created_at(self, v: datetime) -> str:
        return format_timestamp(v)


class TotalsRecord(LedgerRecord):
    """Sum of all assignments sharing one normalized name. Derived, never stored."""

    name: str
    normalized_name: str = Field(..., alias="normalizedName")
    total: float


# =============================================================================
# OPERATION RESULTS
# =============================================================================

class EntryCreated(BaseModel):
    """Result of adding an entry: the new entry and the new collection."""
    model_config = ConfigDict(frozen=True)

    entry: Entry
    entries: list[Entry]


class AssignmentRecorded(BaseModel):
    """Result of recording an assignment: the record and the new collection."""
    model_config = ConfigDict(frozen=True)

    record: Assignment
    assignments: list[Assignment]
