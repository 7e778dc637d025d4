from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Optional, Sequence

from rich import box
from rich.console import Console
from rich.table import Table

from vault.domain.models import Record, VaultStats, format_value
from vault.errors import BackupError
from vault.store import RecordStore
from vault.utils.logging import get_logger

log = get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def isoformat(moment: datetime) -> str:
    """UTC ISO-8601 with millisecond precision and a `Z` suffix."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace(
        "+00:00", "Z"
    )


def export_line(record: Record) -> str:
    return (
        f"ID: {record.id} | Name: {record.name} | Value: {format_value(record.value)} "
        f"| Created: {isoformat(record.created_at)}"
    )


class VaultReporter:
    """
    Read-only reports over the full record set.

    Both reports re-read the store when called and never publish events.
    """

    def __init__(
        self,
        store: RecordStore,
        export_path: Path | str = "export.txt",
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.store = store
        self.export_path = Path(export_path)
        self._clock = clock or _utcnow

    async def export(self) -> Path:
        """
        Write a flat text listing of every record, replacing any prior export.
        """
        records = await self.store.list()
        header = (
            f"Exported At: {isoformat(self._clock())}\n"
            f"Total Records: {len(records)}\n\n"
        )
        content = "\n".join(export_line(record) for record in records)
        try:
            self.export_path.parent.mkdir(parents=True, exist_ok=True)
            self.export_path.write_text(header + content, encoding="utf-8")
        except OSError as exc:
            raise BackupError(f"Export to {self.export_path} failed: {exc}") from exc

        log.info("Export written", extra={"path": str(self.export_path), "records": len(records)})
        return self.export_path

    async def stats(self) -> VaultStats:
        """
        Summary statistics; an empty vault yields `VaultStats(total=0)` with
        no aggregates.
        """
        records = await self.store.list()
        if not records:
            return VaultStats()

        longest = records[0]
        for record in records[1:]:
            # Strictly longer only, so the first record reaching the max wins.
            if len(record.name) > len(longest.name):
                longest = record

        created = sorted(record.created_at.astimezone(timezone.utc) for record in records)
        return VaultStats(
            total=len(records),
            last_modified=max(record.last_modified for record in records),
            longest_name=longest,
            earliest=created[0].date(),
            latest=created[-1].date(),
        )


def print_records(
    records: Sequence[Record],
    title: str = "Records",
    empty_message: str = "No records found.",
    console: Optional[Console] = None,
) -> None:
    """
    Render records as a rich table, numbered from 1.
    """
    console = console or Console()

    if not records:
        console.print(f"[yellow]{empty_message}[/yellow]")
        return

    table = Table(
        title=f"{title} ({len(records)})",
        box=box.ROUNDED,
    )
    table.add_column("#", justify="right", style="dim")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name", style="magenta")
    table.add_column("Value", justify="right", style="green")
    table.add_column("Created", style="yellow")

    for index, record in enumerate(records, start=1):
        table.add_row(
            str(index),
            record.id,
            record.name,
            format_value(record.value),
            isoformat(record.created_at),
        )

    console.print(table)


def print_stats(stats: VaultStats, console: Optional[Console] = None) -> None:
    console = console or Console()

    if stats.is_empty:
        console.print("[yellow]Vault is empty.[/yellow]")
        return

    longest = stats.longest_name.name if stats.longest_name else ""

    table = Table(title="Vault Statistics", box=box.ROUNDED, show_header=False)
    table.add_column("Metric", style="cyan", no_wrap=True)
    table.add_column("Value", style="bold")
    table.add_row("Total Records", str(stats.total))
    table.add_row(
        "Last Modified", isoformat(stats.last_modified) if stats.last_modified else "N/A"
    )
    table.add_row("Longest Name", f"{longest} ({len(longest)} characters)")
    table.add_row("Earliest Record", stats.earliest.isoformat() if stats.earliest else "N/A")
    table.add_row("Latest Record", stats.latest.isoformat() if stats.latest else "N/A")

    console.print(table)


__all__ = [
    "VaultReporter",
    "export_line",
    "isoformat",
    "print_records",
    "print_stats",
]
