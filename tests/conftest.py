"""
Pytest configuration for the Record Vault.

Provides fixtures for:
- Settings pointing backups/exports at a temporary directory
- A deterministic clock and an in-memory repository
- A fully wired vault (store + event bus + backup writer + reporter)
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, List

import pytest

from vault.bootstrap import Vault, build_vault
from vault.config import Settings
from vault.store import RecordStore
from vault.storage.memory import InMemoryRecordRepository

START = datetime(2024, 3, 1, 9, 0, 0, tzinfo=timezone.utc)


class StepClock:
    """Returns START, START+step, START+2*step, ... on successive calls."""

    def __init__(self, start: datetime = START, step: timedelta = timedelta(seconds=1)) -> None:
        self.current = start
        self.step = step

    def __call__(self) -> datetime:
        moment = self.current
        self.current = self.current + self.step
        return moment


@pytest.fixture
def clock() -> StepClock:
    return StepClock()


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """
    Settings fixture with test-specific overrides.
    """
    return Settings(
        storage_backend="memory",
        backups_dir=tmp_path / "backups",
        export_path=tmp_path / "export.txt",
        log_level="DEBUG",
    )


@pytest.fixture
def repository(clock: StepClock) -> InMemoryRecordRepository:
    return InMemoryRecordRepository(clock=clock)


@pytest.fixture
def vault(test_settings: Settings, repository: InMemoryRecordRepository) -> Vault:
    return build_vault(test_settings, repository)


@pytest.fixture
def store(vault: Vault) -> RecordStore:
    return vault.store


@pytest.fixture
def backup_files(test_settings: Settings) -> Callable[[], List[Path]]:
    """Callable listing the backup snapshots written so far, oldest first."""

    def _list() -> List[Path]:
        if not test_settings.backups_dir.exists():
            return []
        return sorted(test_settings.backups_dir.glob("backup_*.json"))

    return _list
