"""
psycopg-backed executor for the statements produced by ``Sql``.

The adapter accepts a DSN, a caller-owned connection, or a connection pool:

- DSN (or ``None`` for the settings DSN): the adapter opens its own
  autocommit connection lazily and closes it in ``close()``.
- ``psycopg.Connection``: used as-is; never committed, rolled back or closed
  here, so the caller keeps full control of the transaction.
- ``psycopg_pool.ConnectionPool``: a connection is borrowed per statement.

Rows are returned as dictionaries via ``psycopg.rows.dict_row``.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Generator, Iterator, List, Optional, Sequence, Union

from psycopg import Connection, sql
from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool

from activerecord.config import get_settings
from activerecord.errors import ConfigurationError
from activerecord.infrastructure.db_factory import (
    apply_statement_timeout,
    build_dsn,
    get_sync_connection,
)
from activerecord.utils.logging import get_logger

log = get_logger(__name__)

Query = Union[str, sql.Composable]


@dataclass
class Result:
    """
    Outcome of one statement. Iterating yields the fetched rows, if any.
    """

    rows: List[Dict[str, Any]] = field(default_factory=list)
    affected_rows: int = -1
    is_query_result: bool = False

    def __iter__(self) -> Iterator[Dict[str, Any]]:
        return iter(self.rows)

    def count(self) -> int:
        return len(self.rows)


class Adapter:
    def __init__(
        self,
        source: Union[str, Connection, ConnectionPool, None] = None,
        statement_timeout_ms: Optional[int] = None,
    ) -> None:
        self._dsn: Optional[str] = None
        self._connection: Optional[Connection] = None
        self._pool: Optional[ConnectionPool] = None
        self._owns_connection = False

        if source is None:
            self._dsn = build_dsn()
        elif isinstance(source, str):
            self._dsn = source
        elif isinstance(source, ConnectionPool):
            self._pool = source
        elif isinstance(source, Connection):
            self._connection = source
        else:
            raise ConfigurationError(
                "A valid psycopg connection, connection pool or DSN was not provided."
            )

        if statement_timeout_ms is None:
            statement_timeout_ms = get_settings().db_statement_timeout_ms
        self.statement_timeout_ms = statement_timeout_ms

    @contextmanager
    def _checkout(self) -> Generator[Connection, None, None]:
        if self._pool is not None:
            with self._pool.connection() as conn:
                yield conn
            return
        if self._connection is None:
            log.debug("Opening adapter connection")
            self._connection = get_sync_connection(self._dsn, autocommit=True)
            self._owns_connection = True
        yield self._connection

    def execute(self, query: Query, params: Optional[Sequence[Any]] = None) -> Result:
        """
        Run one statement and return its rows (reads) or affected row count (writes).

        Database errors propagate unchanged.
        """
        log.debug("Executing statement", extra={"params": len(params or ())})
        with self._checkout() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                if self.statement_timeout_ms:
                    apply_statement_timeout(cur, self.statement_timeout_ms)
                cur.execute(query, list(params) if params else None)
                if cur.description is not None:
                    rows = cur.fetchall()
                    return Result(rows=rows, affected_rows=cur.rowcount, is_query_result=True)
                return Result(affected_rows=cur.rowcount)

    def close(self) -> None:
        """Close the connection if the adapter opened it."""
        if self._owns_connection and self._connection is not None:
            self._connection.close()
            self._connection = None
            self._owns_connection = False

    def __enter__(self) -> "Adapter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        del exc_type, exc, tb
        self.close()


__all__ = ["Adapter", "Result"]
