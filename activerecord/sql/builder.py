"""
Statement builder bound to one adapter and, optionally, one table.

``Sql`` hands out ``Select``/``Update``/``Delete`` specifications for its table
and turns a finished specification into an executable ``Statement``.
"""

from __future__ import annotations

from typing import Any, List, Optional

from psycopg import sql

from activerecord.sql.compiler import SqlObject, compile_sql_object
from activerecord.sql.dml import Delete, Update
from activerecord.sql.identifier import TableLike, same_table
from activerecord.sql.select import Select
from activerecord.utils.logging import get_logger

log = get_logger(__name__)


class Statement:
    """A compiled statement waiting to be run by its adapter."""

    def __init__(self, adapter: Any, query: sql.Composed, params: List[Any]) -> None:
        self.adapter = adapter
        self.query = query
        self.params = params

    def execute(self) -> Any:
        return self.adapter.execute(self.query, self.params)


class Sql:
    def __init__(self, adapter: Any, table: Optional[TableLike] = None) -> None:
        self._adapter = adapter
        self._table = table

    @property
    def adapter(self) -> Any:
        return self._adapter

    @property
    def table(self) -> Optional[TableLike]:
        return self._table

    def has_table(self) -> bool:
        return self._table is not None

    def _resolve_table(self, table: Optional[TableLike]) -> Optional[TableLike]:
        if table is None:
            return self._table
        if self._table is not None and not same_table(table, self._table):
            raise ValueError(
                f"This Sql object is intended to work with only the table '{self._table}' provided "
                "at construction time."
            )
        return table

    def select(self, table: Optional[TableLike] = None) -> Select:
        return Select(self._resolve_table(table))

    def update(self, table: Optional[TableLike] = None) -> Update:
        return Update(self._resolve_table(table))

    def delete(self, table: Optional[TableLike] = None) -> Delete:
        return Delete(self._resolve_table(table))

    def prepare_statement_for_sql_object(self, sql_object: SqlObject) -> Statement:
        query, params = compile_sql_object(sql_object)
        log.debug(
            "Prepared statement",
            extra={"statement": type(sql_object).__name__, "table": str(sql_object.table), "params": len(params)},
        )
        return Statement(self._adapter, query, params)

    def build_sql_string(self, sql_object: SqlObject) -> str:
        """
        Render the statement text with ``%s`` placeholders left in place.
        """
        query, _ = compile_sql_object(sql_object)
        return query.as_string(None)


__all__ = ["Sql", "Statement"]
