"""
Search and sort descriptors shared by every storage backend.

The search predicate is an explicit two-branch union so matching semantics do
not depend on any backend's query language: the in-memory repository calls
`RecordQuery.matches` directly, and the Postgres repository translates the
same two branches into SQL.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from vault.domain.models import Record

_ALL_DIGITS = re.compile(r"[0-9]+")


@dataclass(frozen=True)
class RecordQuery:
    """Case-insensitive name containment OR exact numeric value equality."""

    name_contains: str
    value_equals: Optional[float] = None

    @classmethod
    def from_term(cls, term: str) -> Optional["RecordQuery"]:
        """
        Build a query from raw user input.

        Returns None for a blank term; callers treat that as "no results"
        rather than "all records".
        """
        cleaned = (term or "").strip()
        if not cleaned:
            return None
        value = float(cleaned) if _ALL_DIGITS.fullmatch(cleaned) else None
        return cls(name_contains=cleaned, value_equals=value)

    def matches(self, record: Record) -> bool:
        if self.name_contains.lower() in record.name.lower():
            return True
        return self.value_equals is not None and record.value == self.value_equals


class SortField(str, Enum):
    NAME = "name"
    CREATED_AT = "created_at"

    @classmethod
    def parse(cls, raw: str) -> "SortField":
        """`name` in any case selects the name; anything else is creation time."""
        if (raw or "").strip().lower() == "name":
            return cls.NAME
        return cls.CREATED_AT


class SortOrder(str, Enum):
    ASCENDING = "asc"
    DESCENDING = "desc"

    @classmethod
    def parse(cls, raw: str) -> "SortOrder":
        """`ascending` in any case is ascending; anything else is descending."""
        if (raw or "").strip().lower() == "ascending":
            return cls.ASCENDING
        return cls.DESCENDING


__all__ = ["RecordQuery", "SortField", "SortOrder"]
