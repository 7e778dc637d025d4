"""
Backup writer: full JSON snapshots of the vault.

A snapshot is written after every mutation (the writer subscribes to all
mutation events) and on demand. Each call re-reads the whole record set from
the store, so the file reflects the store at write time.

Files are named `backup_<UTC timestamp>_<sequence>.json` inside the backups
directory. The timestamp has microsecond resolution, the sequence increases
per writer, and files are created exclusively, so no snapshot ever replaces
another.
"""

from __future__ import annotations

import itertools
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Optional

from vault.errors import BackupError
from vault.events import MUTATION_EVENTS, EventBus, MutationEvent
from vault.store import RecordStore
from vault.utils.logging import get_logger

log = get_logger(__name__)

_MAX_NAME_ATTEMPTS = 1000


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BackupWriter:
    def __init__(
        self,
        store: RecordStore,
        backups_dir: Path | str = "backups",
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.store = store
        self.backups_dir = Path(backups_dir)
        self._clock = clock or _utcnow
        self._sequence = itertools.count(1)

    def attach(self, bus: EventBus) -> None:
        """Subscribe to every mutation event on `bus`."""
        bus.subscribe_many(MUTATION_EVENTS, self.on_mutation)

    async def on_mutation(self, event: MutationEvent) -> None:
        path = await self.backup()
        log.debug(
            "Backup triggered by mutation",
            extra={"event": event.kind.value, "record_id": event.record.id, "path": str(path)},
        )

    def _filename(self) -> str:
        stamp = self._clock().strftime("%Y-%m-%dT%H-%M-%S-%fZ")
        return f"backup_{stamp}_{next(self._sequence):06d}.json"

    async def backup(self) -> Path:
        """
        Write a snapshot of every record and return its path.

        Raises
        ------
        BackupError
            If the directory cannot be created or the file cannot be written.
        """
        records = await self.store.list()
        payload = json.dumps([record.to_snapshot() for record in records], indent=2)

        try:
            self.backups_dir.mkdir(parents=True, exist_ok=True)
            for _ in range(_MAX_NAME_ATTEMPTS):
                path = self.backups_dir / self._filename()
                try:
                    with path.open("x", encoding="utf-8") as f:
                        f.write(payload)
                    break
                except FileExistsError:
                    continue
            else:
                raise BackupError(f"No free backup filename in {self.backups_dir}")
        except OSError as exc:
            raise BackupError(f"Backup to {self.backups_dir} failed: {exc}") from exc

        log.info("Backup created", extra={"path": str(path), "records": len(records)})
        return path


__all__ = ["BackupWriter"]
