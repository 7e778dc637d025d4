"""
Sample data seeding script for the Record Vault.

Adds deterministic pseudo-random records through the RecordStore, so seeding
goes through validation and triggers a backup per record like any other
mutation.
"""

from __future__ import annotations

import asyncio
import random
from typing import List, Tuple

import typer

from vault.bootstrap import open_vault
from vault.config import get_settings
from vault.store import RecordStore
from vault.utils.logging import configure_logging, get_logger

app = typer.Typer(help="Seed the vault with sample records.")
log = get_logger(__name__)

_NOUNS = ["Groceries", "Rent", "Fuel", "Savings", "Gym", "Books", "Coffee", "Internet"]
_QUALIFIERS = ["January", "February", "March", "Weekly", "Monthly", "Annual"]


def _generate_rows(rows: int, seed: int) -> List[Tuple[str, float]]:
    rng = random.Random(seed)
    generated: List[Tuple[str, float]] = []
    for _ in range(rows):
        name = f"{rng.choice(_NOUNS)} {rng.choice(_QUALIFIERS)}"
        value = round(rng.uniform(1, 2_000), 2)
        generated.append((name, value))
    return generated


async def seed_store(store: RecordStore, rows: int, seed: int = 42) -> int:
    for name, value in _generate_rows(rows, seed):
        await store.add(name, value)
    return rows


@app.command()
def main(
    rows: int = typer.Option(10, "--rows", "-r", min=1, help="Number of records to add."),
    seed: int = typer.Option(42, "--seed", help="Random seed for reproducible data."),
) -> None:
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)

    async def runner() -> int:
        async with open_vault(settings) as vault:
            return await seed_store(vault.store, rows, seed)

    added = asyncio.run(runner())
    log.info("Seeding complete", extra={"rows": added})
    typer.echo(f"Added {added} records.")


if __name__ == "__main__":
    app()
