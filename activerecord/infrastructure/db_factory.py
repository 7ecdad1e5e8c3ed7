"""
Database connection factory utilities for the Active Record layer.

Builds DSNs from settings and opens psycopg connections, with retry logic for
transient connection failures using tenacity. Pools are created on request
but their lifecycle belongs to the caller.
"""

from __future__ import annotations

from typing import Optional

import psycopg
from psycopg import Connection, sql
from psycopg_pool import ConnectionPool
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from activerecord.config import get_settings


def build_dsn() -> str:
    """Compose a DSN string from settings."""
    settings = get_settings()
    return (
        f"postgresql://{settings.db_user}:{settings.db_password}"
        f"@{settings.db_host}:{settings.db_port}/{settings.db_name}"
    )


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception_type((psycopg.OperationalError, psycopg.InterfaceError)),
    reraise=True,
)
def get_sync_connection(dsn: Optional[str] = None, autocommit: bool = False) -> Connection:
    """
    Acquire a dedicated synchronous connection with automatic retry.

    Retries up to 3 times with exponential backoff for transient connection errors.

    Parameters
    ----------
    dsn : str, optional
        Connection string. Defaults to the DSN built from settings.
    autocommit : bool
        Whether every statement commits on its own.

    Returns
    -------
    Connection
        A new psycopg connection instance.

    Raises
    ------
    psycopg.OperationalError
        If connection fails after all retry attempts.
    """
    return psycopg.connect(dsn or build_dsn(), autocommit=autocommit)


def get_sync_pool(
    dsn: Optional[str] = None, min_size: int = 1, max_size: int = 10
) -> ConnectionPool:
    """
    Create a synchronous connection pool. The caller is responsible for closing it.

    Parameters
    ----------
    dsn : str, optional
        Connection string. Defaults to the DSN built from settings.
    min_size : int
        Minimum number of idle connections to keep.
    max_size : int
        Maximum total connections in the pool.
    """
    return ConnectionPool(conninfo=dsn or build_dsn(), min_size=min_size, max_size=max_size, open=True)


def apply_statement_timeout(cursor: psycopg.Cursor, timeout_ms: int) -> None:
    """Set a session statement timeout; 0 disables it."""
    cursor.execute(
        sql.SQL("SET statement_timeout = {}").format(sql.Literal(int(timeout_ms)))
    )


__all__ = [
    "build_dsn",
    "get_sync_connection",
    "get_sync_pool",
    "apply_statement_timeout",
]
