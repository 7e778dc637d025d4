"""
Storage package for the Record Vault.

This module re-exports the repository interfaces and the concrete backends so
downstream code can import from `vault.storage` directly.
"""

from vault.storage.abstract import AbstractRecordRepository, RecordRepository
from vault.storage.memory import InMemoryRecordRepository
from vault.storage.postgres import PostgresRecordRepository

__all__ = [
    # Abstracts
    "AbstractRecordRepository",
    "RecordRepository",
    # Concrete backends
    "InMemoryRecordRepository",
    "PostgresRecordRepository",
]
