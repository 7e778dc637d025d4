"""
PostgreSQL storage backend.

Records live in a single table; timestamps are maintained by the database
(`now()` on insert so both columns are equal, and a forward-only bump on
update). Every psycopg error is translated into StorageError.
"""

from __future__ import annotations

import uuid
from contextlib import contextmanager
from typing import Any, Dict, Generator, List, Optional, Tuple

import psycopg
from psycopg import sql
from psycopg.rows import dict_row
from psycopg_pool import AsyncConnectionPool

from vault.domain.models import Record
from vault.domain.query import RecordQuery, SortField, SortOrder
from vault.errors import StorageError
from vault.storage.abstract import RecordRepository

TABLE = "vault_records"

SCHEMA_SQL = f"""
CREATE TABLE IF NOT EXISTS public.{TABLE} (
    id          TEXT PRIMARY KEY,
    name        TEXT NOT NULL CHECK (btrim(name) <> ''),
    value       DOUBLE PRECISION NOT NULL,
    created_at  TIMESTAMPTZ NOT NULL,
    updated_at  TIMESTAMPTZ NOT NULL,
    CHECK (created_at <= updated_at)
);
"""

_COLUMNS = "id, name, value, created_at, updated_at"


@contextmanager
def _storage_errors(operation: str) -> Generator[None, None, None]:
    try:
        yield
    except psycopg.Error as exc:
        raise StorageError(f"{operation} failed: {exc}") from exc


def _to_record(row: Dict[str, Any]) -> Record:
    return Record(**row)


def search_clause(query: RecordQuery) -> Tuple[str, List[Any]]:
    """
    Translate the two search branches into a WHERE clause and its parameters.
    """
    clause = "strpos(lower(name), lower(%s)) > 0"
    params: List[Any] = [query.name_contains]
    if query.value_equals is not None:
        clause += " OR value = %s"
        params.append(query.value_equals)
    return clause, params


def order_clause(field: SortField, order: SortOrder) -> sql.Composed:
    """ORDER BY for a sort request; names compare by code point."""
    direction = sql.SQL("ASC" if order is SortOrder.ASCENDING else "DESC")
    if field is SortField.NAME:
        column = sql.SQL('name COLLATE "C"')
    else:
        column = sql.SQL("created_at")
    return sql.SQL("ORDER BY {} {}, id").format(column, direction)


class PostgresRecordRepository(RecordRepository):
    """
    Repository backed by a psycopg AsyncConnectionPool.

    The pool is owned by the caller (see `vault.bootstrap`); `close` releases it.
    """

    name: str = "postgres"

    def __init__(self, pool: AsyncConnectionPool) -> None:
        self._pool = pool

    async def ensure_schema(self) -> None:
        with _storage_errors("schema setup"):
            async with self._pool.connection() as conn:
                await conn.execute(SCHEMA_SQL)

    async def _fetch_one(self, operation: str, query: Any, params: Any) -> Optional[Record]:
        with _storage_errors(operation):
            async with self._pool.connection() as conn:
                async with conn.cursor(row_factory=dict_row) as cur:
                    await cur.execute(query, params)
                    row = await cur.fetchone()
        return _to_record(row) if row else None

    async def _fetch_all(self, operation: str, query: Any, params: Any = None) -> List[Record]:
        with _storage_errors(operation):
            async with self._pool.connection() as conn:
                async with conn.cursor(row_factory=dict_row) as cur:
                    await cur.execute(query, params)
                    rows = await cur.fetchall()
        return [_to_record(row) for row in rows]

    async def insert(self, name: str, value: float) -> Record:
        record = await self._fetch_one(
            "insert",
            f"INSERT INTO public.{TABLE} ({_COLUMNS}) "
            f"VALUES (%s, %s, %s, now(), now()) RETURNING {_COLUMNS};",
            (uuid.uuid4().hex, name, value),
        )
        if record is None:  # pragma: no cover - INSERT ... RETURNING always yields a row
            raise StorageError("insert returned no row")
        return record

    async def get(self, record_id: str) -> Optional[Record]:
        return await self._fetch_one(
            "get",
            f"SELECT {_COLUMNS} FROM public.{TABLE} WHERE id = %s;",
            (record_id,),
        )

    async def update(self, record_id: str, name: str, value: float) -> Optional[Record]:
        return await self._fetch_one(
            "update",
            f"UPDATE public.{TABLE} SET name = %s, value = %s, "
            "updated_at = GREATEST(clock_timestamp(), updated_at + interval '1 microsecond') "
            f"WHERE id = %s RETURNING {_COLUMNS};",
            (name, value, record_id),
        )

    async def delete(self, record_id: str) -> Optional[Record]:
        return await self._fetch_one(
            "delete",
            f"DELETE FROM public.{TABLE} WHERE id = %s RETURNING {_COLUMNS};",
            (record_id,),
        )

    async def find_all(self) -> List[Record]:
        return await self._fetch_all(
            "list",
            f"SELECT {_COLUMNS} FROM public.{TABLE} ORDER BY created_at, id;",
        )

    async def find_matching(self, query: RecordQuery) -> List[Record]:
        clause, params = search_clause(query)
        return await self._fetch_all(
            "search",
            f"SELECT {_COLUMNS} FROM public.{TABLE} WHERE {clause} ORDER BY created_at, id;",
            params,
        )

    async def find_sorted(self, field: SortField, order: SortOrder) -> List[Record]:
        query = sql.SQL("SELECT {} FROM {} {};").format(
            sql.SQL(_COLUMNS),
            sql.Identifier("public", TABLE),
            order_clause(field, order),
        )
        return await self._fetch_all("sort", query)

    async def close(self) -> None:
        await self._pool.close()


__all__ = [
    "PostgresRecordRepository",
    "SCHEMA_SQL",
    "order_clause",
    "search_clause",
]
