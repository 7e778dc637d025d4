"""
Database connection factory utilities for the Record Vault.

Provides DSN composition and an async PostgreSQL connection pool that is opened
once at startup. Opening the pool retries transient connection failures using
tenacity; after the last attempt the failure surfaces as a StorageError and the
CLI treats it as fatal.
"""

from __future__ import annotations

from typing import Optional

import psycopg
from psycopg_pool import AsyncConnectionPool
from tenacity import (
    AsyncRetrying,
    RetryError,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from vault.config import Settings, get_settings
from vault.errors import StorageError
from vault.utils.logging import get_logger

log = get_logger(__name__)


def build_dsn(settings: Optional[Settings] = None) -> str:
    """Compose a DSN string from settings."""
    settings = settings or get_settings()
    return (
        f"postgresql://{settings.db_user}:{settings.db_password}"
        f"@{settings.db_host}:{settings.db_port}/{settings.db_name}"
    )


async def _open_pool_once(dsn: str, settings: Settings) -> AsyncConnectionPool:
    pool = AsyncConnectionPool(
        conninfo=dsn,
        min_size=settings.db_pool_min_size,
        max_size=settings.db_pool_max_size,
        timeout=settings.db_connect_timeout,
        open=False,
    )
    try:
        await pool.open(wait=True, timeout=settings.db_connect_timeout)
    except Exception:
        await pool.close()
        raise
    return pool


async def open_async_pool(
    settings: Optional[Settings] = None, dsn_override: Optional[str] = None
) -> AsyncConnectionPool:
    """
    Open an asynchronous connection pool, retrying transient failures.

    Parameters
    ----------
    settings : Settings | None
        Pool sizing, timeout and retry budget. Defaults to cached settings.
    dsn_override : str | None
        Explicit DSN, mainly for tests.

    Returns
    -------
    AsyncConnectionPool
        An opened pool; the caller owns closing it.

    Raises
    ------
    StorageError
        If the database stays unreachable after all retry attempts.
    """
    settings = settings or get_settings()
    dsn = dsn_override or build_dsn(settings)

    try:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(settings.db_connect_attempts),
            wait=wait_exponential(multiplier=1, min=1, max=10),
            retry=retry_if_exception_type((psycopg.OperationalError, OSError)),
            reraise=True,
        ):
            with attempt:
                if attempt.retry_state.attempt_number > 1:
                    log.warning(
                        "Retrying database connection",
                        extra={"attempt": attempt.retry_state.attempt_number},
                    )
                pool = await _open_pool_once(dsn, settings)
    except (psycopg.OperationalError, OSError, RetryError) as exc:
        raise StorageError(
            f"Cannot connect to PostgreSQL at {settings.db_host}:{settings.db_port}"
            f"/{settings.db_name}: {exc}"
        ) from exc

    log.info(
        "Database pool opened",
        extra={"host": settings.db_host, "db": settings.db_name},
    )
    return pool


__all__ = [
    "build_dsn",
    "open_async_pool",
]
