"""
Record store: validated CRUD, search and sort over a storage repository.

Every successful mutation publishes one event on the bus it was constructed
with; the backup writer subscribes to those events. Reads never publish.

Usage:
    store = RecordStore(InMemoryRecordRepository(), EventBus())
    record = await store.add("Groceries", 42.5)
    await store.update(record.id, "Groceries", 40)
"""

from __future__ import annotations

import math
import numbers
from typing import Any, List, Optional, Tuple

from vault.domain.models import Record
from vault.domain.query import RecordQuery, SortField, SortOrder
from vault.errors import ValidationError
from vault.events import EventBus, EventKind
from vault.storage.abstract import RecordRepository
from vault.utils.logging import get_logger

log = get_logger(__name__)


def validate_record(name: Any, value: Any) -> Tuple[str, float]:
    """
    Check the name/value contract and return the normalized pair.

    Raises
    ------
    ValidationError
        If `name` is not a non-blank string or `value` is not a finite real
        number. Booleans are not accepted as numbers.
    """
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("Name is required and must be a non-empty string")
    if (
        isinstance(value, bool)
        or not isinstance(value, numbers.Real)
        or not math.isfinite(value)
    ):
        raise ValidationError("Value must be a valid finite number")
    return name.strip(), float(value)


class RecordStore:
    """Authoritative access point for vault records."""

    def __init__(self, repository: RecordRepository, events: Optional[EventBus] = None) -> None:
        self.repository = repository
        self.events = events if events is not None else EventBus()

    async def add(self, name: Any, value: Any) -> Record:
        clean_name, clean_value = validate_record(name, value)
        record = await self.repository.insert(clean_name, clean_value)
        log.info("Record added", extra={"record_id": record.id})
        await self.events.publish(EventKind.RECORD_ADDED, record)
        return record

    async def get(self, record_id: str) -> Optional[Record]:
        return await self.repository.get(record_id)

    async def list(self) -> List[Record]:
        return await self.repository.find_all()

    async def update(self, record_id: str, name: Any, value: Any) -> Optional[Record]:
        """Returns None when no record has `record_id`."""
        clean_name, clean_value = validate_record(name, value)
        record = await self.repository.update(record_id, clean_name, clean_value)
        if record is None:
            log.info("Update matched no record", extra={"record_id": record_id})
            return None
        log.info("Record updated", extra={"record_id": record.id})
        await self.events.publish(EventKind.RECORD_UPDATED, record)
        return record

    async def delete(self, record_id: str) -> Optional[Record]:
        """Returns the removed record, or None when no record has `record_id`."""
        record = await self.repository.delete(record_id)
        if record is None:
            log.info("Delete matched no record", extra={"record_id": record_id})
            return None
        log.info("Record deleted", extra={"record_id": record.id})
        await self.events.publish(EventKind.RECORD_DELETED, record)
        return record

    async def search(self, term: str) -> List[Record]:
        """
        Records whose name contains `term` (any case) or, for an all-digit
        term, whose value equals it. A blank term matches nothing.
        """
        query = RecordQuery.from_term(term)
        if query is None:
            return []
        return await self.repository.find_matching(query)

    async def sort_by(self, field: str, order: str) -> List[Record]:
        return await self.repository.find_sorted(SortField.parse(field), SortOrder.parse(order))


__all__ = ["RecordStore", "validate_record"]
