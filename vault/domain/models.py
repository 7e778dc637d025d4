"""
Domain models for the Record Vault.

Defines the single stored entity (a named numeric record) and the summary
produced by the stats reporter. Field aliases are the camelCase names used in
backup snapshots.
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field


class Record(BaseModel):
    """
    Representation of a single vault record.
    """

    id: str = Field(..., description="Opaque identifier assigned by the storage layer.")
    name: str = Field(..., description="Non-empty, whitespace-trimmed label.")
    value: float = Field(..., description="Finite numeric value.")
    created_at: datetime = Field(..., alias="createdAt", description="Creation timestamp.")
    updated_at: datetime = Field(..., alias="updatedAt", description="Last update timestamp.")

    model_config = {
        "frozen": True,
        "populate_by_name": True,
        "arbitrary_types_allowed": False,
    }

    @property
    def last_modified(self) -> datetime:
        return self.updated_at

    def to_snapshot(self) -> dict:
        """JSON-ready mapping with camelCase keys, as written to backups."""
        return self.model_dump(mode="json", by_alias=True)


class VaultStats(BaseModel):
    """
    Aggregates over the full record set.

    Every aggregate is None when the vault is empty; check `is_empty` first.
    """

    total: int = 0
    last_modified: Optional[datetime] = None
    longest_name: Optional[Record] = None
    earliest: Optional[date] = None
    latest: Optional[date] = None

    model_config = {"frozen": True}

    @property
    def is_empty(self) -> bool:
        return self.total == 0


def format_value(value: float) -> str:
    """Render whole-number values without a trailing `.0`."""
    if value.is_integer():
        return str(int(value))
    return repr(value)


__all__ = ["Record", "VaultStats", "format_value"]
