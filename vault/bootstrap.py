"""
Application wiring for the Record Vault.

`open_vault` builds the repository for the configured backend, the event bus,
the record store, the backup writer (subscribed to every mutation event) and
the reporter, and tears the repository down on exit.

Usage:
    async with open_vault(get_settings()) as vault:
        await vault.store.add("Rent", 1200)
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Optional

from vault.backup import BackupWriter
from vault.config import Settings, get_settings
from vault.events import EventBus
from vault.infrastructure.db_factory import open_async_pool
from vault.reporter import VaultReporter
from vault.storage.abstract import RecordRepository
from vault.storage.memory import InMemoryRecordRepository
from vault.storage.postgres import PostgresRecordRepository
from vault.store import RecordStore
from vault.utils.logging import get_logger

log = get_logger(__name__)


@dataclass
class Vault:
    settings: Settings
    events: EventBus
    store: RecordStore
    backups: BackupWriter
    reporter: VaultReporter


def build_vault(settings: Settings, repository: RecordRepository) -> Vault:
    """Wire the components around an already-open repository."""
    events = EventBus(strict=settings.strict_backups)
    store = RecordStore(repository, events)
    backups = BackupWriter(store, settings.backups_dir)
    backups.attach(events)
    reporter = VaultReporter(store, settings.export_path)
    return Vault(
        settings=settings,
        events=events,
        store=store,
        backups=backups,
        reporter=reporter,
    )


async def create_repository(settings: Settings) -> RecordRepository:
    """
    Open the configured storage backend.

    Raises
    ------
    StorageError
        If PostgreSQL cannot be reached or the schema cannot be created.
    """
    if settings.storage_backend == "memory":
        return InMemoryRecordRepository()

    pool = await open_async_pool(settings)
    repository = PostgresRecordRepository(pool)
    try:
        await repository.ensure_schema()
    except Exception:
        await repository.close()
        raise
    return repository


@asynccontextmanager
async def open_vault(
    settings: Optional[Settings] = None,
    repository: Optional[RecordRepository] = None,
) -> AsyncIterator[Vault]:
    settings = settings or get_settings()
    owned = repository is None
    if repository is None:
        repository = await create_repository(settings)
    log.debug("Vault opened", extra={"backend": repository.name})
    try:
        yield build_vault(settings, repository)
    finally:
        if owned:
            await repository.close()


__all__ = ["Vault", "build_vault", "create_repository", "open_vault"]
