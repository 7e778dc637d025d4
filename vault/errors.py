"""
Exception hierarchy for the Record Vault.

Not-found is deliberately absent: update/delete report a missing record by
returning ``None``.
"""

from __future__ import annotations


class VaultError(Exception):
    """Base class for errors surfaced to the command-line layer."""


class ValidationError(VaultError):
    """Input failed the name/value contract; nothing was written."""


class StorageError(VaultError):
    """The storage backend is unreachable or rejected an operation."""


class BackupError(VaultError):
    """Writing a backup snapshot or export artifact failed."""


__all__ = ["VaultError", "ValidationError", "StorageError", "BackupError"]
