"""
Process-local storage backend.

Used by the test suite and by `VAULT_STORAGE_BACKEND=memory` for throwaway
sessions; records vanish when the process exits.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional

from vault.domain.models import Record
from vault.storage.abstract import AbstractRecordRepository

Clock = Callable[[], datetime]

_TICK = timedelta(microseconds=1)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryRecordRepository(AbstractRecordRepository):
    """
    Dictionary-backed repository preserving insertion order.

    Ids are random UUID hex strings so they are never reused after a delete.
    """

    name: str = "memory"

    def __init__(self, clock: Optional[Clock] = None) -> None:
        self._clock = clock or _utcnow
        self._records: Dict[str, Record] = {}

    async def insert(self, name: str, value: float) -> Record:
        now = self._clock()
        record = Record(
            id=uuid.uuid4().hex,
            name=name,
            value=value,
            created_at=now,
            updated_at=now,
        )
        self._records[record.id] = record
        return record

    async def get(self, record_id: str) -> Optional[Record]:
        return self._records.get(record_id)

    async def update(self, record_id: str, name: str, value: float) -> Optional[Record]:
        current = self._records.get(record_id)
        if current is None:
            return None
        # updated_at must move forward even if the clock has not.
        updated_at = max(self._clock(), current.updated_at + _TICK)
        record = current.model_copy(
            update={"name": name, "value": value, "updated_at": updated_at}
        )
        self._records[record_id] = record
        return record

    async def delete(self, record_id: str) -> Optional[Record]:
        return self._records.pop(record_id, None)

    async def find_all(self) -> List[Record]:
        return list(self._records.values())


__all__ = ["InMemoryRecordRepository"]
