"""
Record Vault - personal record keeping with automatic JSON backups.

This package provides a small command-line vault for named numeric records:

- Validated add/update/delete with list, search and two-key sorting
- PostgreSQL (psycopg async pool) or in-memory storage backends
- A publish/subscribe bus that triggers a full backup after every mutation
- Flat-text export and summary statistics
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from vault.backup import BackupWriter
from vault.bootstrap import Vault, build_vault, open_vault
from vault.config import Settings, get_settings
from vault.domain import Record, RecordQuery, SortField, SortOrder, VaultStats
from vault.errors import BackupError, StorageError, ValidationError, VaultError
from vault.events import EventBus, EventKind, HandlerFailure, MutationEvent
from vault.reporter import VaultReporter
from vault.store import RecordStore
from vault.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Wiring
    "Vault",
    "build_vault",
    "open_vault",
    # Domain
    "Record",
    "RecordQuery",
    "SortField",
    "SortOrder",
    "VaultStats",
    # Components
    "BackupWriter",
    "EventBus",
    "EventKind",
    "HandlerFailure",
    "MutationEvent",
    "RecordStore",
    "VaultReporter",
    # Errors
    "BackupError",
    "StorageError",
    "ValidationError",
    "VaultError",
    # Logging
    "configure_logging",
    "get_logger",
]
