"""
Infrastructure package for the Record Vault.

Centralizes database connectivity concerns (DSN, async pooling with retry).
Keep this layer focused on I/O and resource management, decoupled from
store/backup logic.
"""

from vault.infrastructure.db_factory import build_dsn, open_async_pool

__all__ = [
    "build_dsn",
    "open_async_pool",
]
