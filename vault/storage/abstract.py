"""
Storage collaborator interface for the Record Vault.

Concrete repositories (PostgreSQL, in-memory) implement the RecordRepository
protocol. Repositories own id generation and timestamp maintenance; input
validation belongs to the store layer above them.
"""

from __future__ import annotations

import abc
from typing import List, Optional, Protocol, runtime_checkable

from vault.domain.models import Record
from vault.domain.query import RecordQuery, SortField, SortOrder


@runtime_checkable
class RecordRepository(Protocol):
    """
    Common interface all storage backends must implement.

    Attributes
    ----------
    name : str
        A short machine-friendly identifier of the backend.
    """

    name: str

    async def insert(self, name: str, value: float) -> Record:
        """
        Persist a new record with a fresh id and both timestamps set to now.
        """
        ...

    async def get(self, record_id: str) -> Optional[Record]: ...

    async def update(self, record_id: str, name: str, value: float) -> Optional[Record]:
        """
        Replace name/value and refresh `updated_at`.

        Returns None when no record has `record_id`.
        """
        ...

    async def delete(self, record_id: str) -> Optional[Record]:
        """Remove and return the record, or None when absent."""
        ...

    async def find_all(self) -> List[Record]: ...

    async def find_matching(self, query: RecordQuery) -> List[Record]: ...

    async def find_sorted(self, field: SortField, order: SortOrder) -> List[Record]: ...

    async def close(self) -> None: ...


class AbstractRecordRepository(abc.ABC):
    """
    Optional ABC helper for class-based implementations.

    Subclasses implement the primitive operations; `find_matching` and
    `find_sorted` default to filtering/sorting `find_all` in Python.
    """

    name: str

    @abc.abstractmethod
    async def insert(self, name: str, value: float) -> Record:  # pragma: no cover
        raise NotImplementedError

    @abc.abstractmethod
    async def get(self, record_id: str) -> Optional[Record]:  # pragma: no cover
        raise NotImplementedError

    @abc.abstractmethod
    async def update(
        self, record_id: str, name: str, value: float
    ) -> Optional[Record]:  # pragma: no cover
        raise NotImplementedError

    @abc.abstractmethod
    async def delete(self, record_id: str) -> Optional[Record]:  # pragma: no cover
        raise NotImplementedError

    @abc.abstractmethod
    async def find_all(self) -> List[Record]:  # pragma: no cover
        raise NotImplementedError

    async def find_matching(self, query: RecordQuery) -> List[Record]:
        return [record for record in await self.find_all() if query.matches(record)]

    async def find_sorted(self, field: SortField, order: SortOrder) -> List[Record]:
        if field is SortField.NAME:
            key = lambda record: record.name  # noqa: E731
        else:
            key = lambda record: record.created_at  # noqa: E731
        return sorted(await self.find_all(), key=key, reverse=order is SortOrder.DESCENDING)

    async def close(self) -> None:
        """Release backend resources. No-op by default."""


__all__ = [
    "RecordRepository",
    "AbstractRecordRepository",
]
