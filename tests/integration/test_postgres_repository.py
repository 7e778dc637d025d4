"""
Integration tests for the PostgreSQL storage backend.

These tests run against a real PostgreSQL instance and verify that the SQL
backend honours the same contract as the in-memory one.

Run with: RUN_INTEGRATION_TESTS=1 pytest tests/integration/
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import AsyncIterator

import pytest

from vault.bootstrap import Vault, build_vault
from vault.config import Settings
from vault.domain.query import SortField, SortOrder
from vault.errors import StorageError
from vault.infrastructure.db_factory import open_async_pool
from vault.storage.postgres import TABLE, PostgresRecordRepository

pytestmark = pytest.mark.skipif(
    os.getenv("RUN_INTEGRATION_TESTS", "0") != "1",
    reason="Integration tests require RUN_INTEGRATION_TESTS=1 and reachable Postgres",
)


@pytest.fixture
def pg_settings(tmp_path: Path) -> Settings:
    return Settings(
        db_host=os.getenv("DB_HOST", "localhost"),
        db_port=int(os.getenv("DB_PORT", "5432")),
        db_user=os.getenv("DB_USER", "postgres"),
        db_password=os.getenv("DB_PASSWORD", "postgres"),
        db_name=os.getenv("DB_NAME", "vault"),
        db_connect_attempts=1,
        backups_dir=tmp_path / "backups",
        export_path=tmp_path / "export.txt",
    )


@pytest.fixture
async def repository(pg_settings: Settings) -> AsyncIterator[PostgresRecordRepository]:
    pool = await open_async_pool(pg_settings)
    repo = PostgresRecordRepository(pool)
    await repo.ensure_schema()
    async with pool.connection() as conn:
        await conn.execute(f"TRUNCATE TABLE public.{TABLE};")
    try:
        yield repo
    finally:
        async with pool.connection() as conn:
            await conn.execute(f"TRUNCATE TABLE public.{TABLE};")
        await repo.close()


@pytest.fixture
def pg_vault(pg_settings: Settings, repository: PostgresRecordRepository) -> Vault:
    return build_vault(pg_settings, repository)


async def test_insert_sets_equal_timestamps(repository: PostgresRecordRepository) -> None:
    record = await repository.insert("Rent", 1200)

    assert record.created_at == record.updated_at
    assert await repository.get(record.id) == record


async def test_update_bumps_updated_at_and_keeps_identity(
    repository: PostgresRecordRepository,
) -> None:
    record = await repository.insert("Rent", 1200)

    updated = await repository.update(record.id, "Mortgage", 950)

    assert updated.id == record.id
    assert updated.created_at == record.created_at
    assert updated.updated_at > record.updated_at
    assert await repository.update("missing", "x", 1) is None


async def test_delete_returns_removed_row(repository: PostgresRecordRepository) -> None:
    keep = await repository.insert("Keep", 1)
    drop = await repository.insert("Drop", 2)

    assert await repository.delete(drop.id) == drop
    assert await repository.delete(drop.id) is None
    assert await repository.find_all() == [keep]


async def test_search_and_sort_match_in_memory_semantics(pg_vault: Vault) -> None:
    store = pg_vault.store
    shop = await store.add("7-Eleven", 3)
    seven = await store.add("lottery", 7)
    await store.add("Unrelated", 70)

    found = await store.search("7")
    names = [r.name for r in await store.sort_by("Name", "Ascending")]

    assert sorted(r.id for r in found) == sorted([shop.id, seven.id])
    assert names == ["7-Eleven", "Unrelated", "lottery"]


async def test_find_sorted_by_creation_descending(repository: PostgresRecordRepository) -> None:
    first = await repository.insert("first", 1)
    second = await repository.insert("second", 2)

    records = await repository.find_sorted(SortField.CREATED_AT, SortOrder.DESCENDING)

    assert [r.id for r in records] == [second.id, first.id]


async def test_mutations_write_backups(pg_vault: Vault, pg_settings: Settings) -> None:
    record = await pg_vault.store.add("Rent", 1200)
    await pg_vault.store.delete(record.id)

    assert len(list(pg_settings.backups_dir.glob("backup_*.json"))) == 2


async def test_unreachable_database_raises_storage_error(pg_settings: Settings) -> None:
    bad = pg_settings.model_copy(update={"db_port": 1, "db_connect_timeout": 1.0})

    with pytest.raises(StorageError):
        await open_async_pool(bad)
