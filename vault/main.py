from __future__ import annotations

import asyncio
import re
import sys
from typing import Awaitable, Callable, Dict

import typer

from vault.bootstrap import Vault, open_vault
from vault.config import get_settings
from vault.domain.models import Record, format_value
from vault.errors import VaultError
from vault.events import HandlerFailure
from vault.reporter import print_records, print_stats
from vault.utils.logging import configure_logging

app = typer.Typer(help="Record Vault CLI.")

Action = Callable[[Vault], Awaitable[None]]

_NUMERIC_PREFIX = re.compile(r"\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")

MENU = """
===== Record Vault =====
1. Add Record
2. List Records
3. Update Record
4. Delete Record
5. Search Records
6. Sort Records
7. Export Data
8. View Vault Statistics
9. Create Manual Backup
10. Exit
========================"""


def parse_value(raw: str) -> float:
    """
    Lenient number parsing for typed input: the longest leading numeric prefix
    wins (`"12abc"` -> 12.0); no prefix yields NaN, which the store rejects.
    """
    match = _NUMERIC_PREFIX.match(raw or "")
    if match is None:
        return float("nan")
    return float(match.group(0))


def _describe(record: Record) -> str:
    return f"ID: {record.id} | Name: {record.name} | Value: {format_value(record.value)}"


def _report_side_effect_failure(failure: HandlerFailure) -> None:
    typer.echo(f"Warning: change saved, but {failure.describe()}", err=True)


def _run(action: Action) -> None:
    """
    Open the vault, run one action, and map vault errors to exit code 1.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)

    async def runner() -> None:
        async with open_vault(settings) as vault:
            vault.events.on_error(_report_side_effect_failure)
            await action(vault)

    try:
        asyncio.run(runner())
    except VaultError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1)


async def _add(vault: Vault, name: str, value: str) -> None:
    record = await vault.store.add(name, parse_value(value))
    typer.echo("Record added successfully!")
    typer.echo(_describe(record))


async def _update(vault: Vault, record_id: str, name: str, value: str) -> None:
    updated = await vault.store.update(record_id.strip(), name, parse_value(value))
    typer.echo("Record updated!" if updated else "Record not found.")


async def _delete(vault: Vault, record_id: str) -> None:
    deleted = await vault.store.delete(record_id.strip())
    typer.echo("Record deleted!" if deleted else "Record not found.")


async def _search(vault: Vault, term: str) -> None:
    results = await vault.store.search(term)
    print_records(results, title="Matching Records", empty_message="No matching records found.")


async def _sort(vault: Vault, field: str, order: str) -> None:
    records = await vault.store.sort_by(field, order)
    print_records(
        records, title=f"Sorted Records ({field} - {order})", empty_message="No records to sort."
    )


async def _export(vault: Vault) -> None:
    path = await vault.reporter.export()
    typer.echo(f"Data exported to {path}")


async def _backup(vault: Vault) -> None:
    path = await vault.backups.backup()
    typer.echo(f"Manual backup created: {path}")


async def _list(vault: Vault) -> None:
    print_records(await vault.store.list(), title="Total Records")


async def _stats(vault: Vault) -> None:
    print_stats(await vault.reporter.stats())


@app.callback(invoke_without_command=True)
def entry(ctx: typer.Context) -> None:
    """
    Manage named numeric records. Without a command, starts the interactive menu.
    """
    if ctx.invoked_subcommand is None:
        shell()


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"backend={settings.storage_backend} | "
        f"DB={settings.db_user}@{settings.db_host}:{settings.db_port}/{settings.db_name} | "
        f"backups={settings.backups_dir} export={settings.export_path} "
        f"strict_backups={settings.strict_backups}"
    )


_NEGATIVE_VALUES = {"ignore_unknown_options": True}


@app.command(context_settings=_NEGATIVE_VALUES)
def add(
    name: str = typer.Argument(..., help="Record name."),
    value: str = typer.Argument(..., help="Numeric value."),
) -> None:
    """Add a record."""
    _run(lambda vault: _add(vault, name, value))


@app.command("list")
def list_records() -> None:
    """List all records."""
    _run(_list)


@app.command(context_settings=_NEGATIVE_VALUES)
def update(
    record_id: str = typer.Argument(..., metavar="ID"),
    name: str = typer.Argument(..., help="New name."),
    value: str = typer.Argument(..., help="New numeric value."),
) -> None:
    """Replace the name and value of a record."""
    _run(lambda vault: _update(vault, record_id, name, value))


@app.command()
def delete(record_id: str = typer.Argument(..., metavar="ID")) -> None:
    """Delete a record."""
    _run(lambda vault: _delete(vault, record_id))


@app.command()
def search(
    term: str = typer.Argument(..., help="Name fragment or exact whole-number value."),
) -> None:
    """Search records by name or value."""
    _run(lambda vault: _search(vault, term))


@app.command()
def sort(
    by: str = typer.Option("CreatedAt", "--by", "-b", help="Name or CreatedAt."),
    order: str = typer.Option("Descending", "--order", "-o", help="Ascending or Descending."),
) -> None:
    """List records sorted by name or creation time."""
    _run(lambda vault: _sort(vault, by, order))


@app.command()
def export() -> None:
    """Write every record to the export file."""
    _run(_export)


@app.command()
def stats() -> None:
    """Show vault statistics."""
    _run(_stats)


@app.command()
def backup() -> None:
    """Write a backup snapshot now."""
    _run(_backup)


def _ask(label: str) -> str:
    # Blocks the event loop while waiting for input; the shell runs one
    # operation at a time, so nothing else is scheduled meanwhile.
    return typer.prompt(label, default="", show_default=False)


async def _menu_add(vault: Vault) -> None:
    name = _ask("Enter name").strip()
    await _add(vault, name, _ask("Enter value"))


async def _menu_update(vault: Vault) -> None:
    record_id = _ask("Enter record ID to update")
    name = _ask("New name").strip()
    await _update(vault, record_id, name, _ask("New value"))


async def _menu_delete(vault: Vault) -> None:
    await _delete(vault, _ask("Enter record ID to delete"))


async def _menu_search(vault: Vault) -> None:
    await _search(vault, _ask("Enter search term (name or value)").strip())


async def _menu_sort(vault: Vault) -> None:
    field = _ask("Sort by (Name/CreatedAt)").strip()
    await _sort(vault, field, _ask("Order (Ascending/Descending)").strip())


MENU_ACTIONS: Dict[str, Action] = {
    "1": _menu_add,
    "2": _list,
    "3": _menu_update,
    "4": _menu_delete,
    "5": _menu_search,
    "6": _menu_sort,
    "7": _export,
    "8": _stats,
    "9": _backup,
}


async def run_shell(vault: Vault) -> None:
    """
    Interactive menu loop; one operation at a time, errors never end the loop.
    """
    while True:
        typer.echo(MENU)
        try:
            choice = _ask("Choose option").strip()
        except typer.Abort:
            break
        if choice == "10":
            break
        action = MENU_ACTIONS.get(choice)
        if action is None:
            typer.echo("Invalid option.")
            continue
        try:
            await action(vault)
        except VaultError as exc:
            typer.echo(f"Error: {exc}")
        except typer.Abort:
            break
    typer.echo("Exiting Record Vault...")


@app.command()
def shell() -> None:
    """Start the interactive menu."""
    typer.echo("Starting Record Vault...")
    _run(run_shell)


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
