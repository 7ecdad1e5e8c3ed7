"""
Concrete Active Record wired from a primary key, a table and an adapter or
statement builder.
"""

from __future__ import annotations

from typing import Any, Sequence, Union

from psycopg import Connection
from psycopg_pool import ConnectionPool

from activerecord.errors import ConfigurationError
from activerecord.infrastructure.adapter import Adapter
from activerecord.record.abstract import AbstractActiveRecord
from activerecord.record.protocols import Executor, StatementBuilder
from activerecord.sql.builder import Sql
from activerecord.sql.identifier import TableLike, same_table


class ActiveRecord(AbstractActiveRecord):
    """
    You can use this class directly by passing the primary key, table and
    adapter to the constructor, or subclass it per table:

        class User(ActiveRecord):
            def __init__(self, adapter):
                super().__init__("id", "users", adapter)

    ``adapter_or_sql`` is one of:

    - a statement builder already bound to ``table``, used as-is
    - an executor (anything with ``execute`` returning row mappings, such as
      ``Adapter``), wrapped in ``Sql(adapter, table)``
    - a ``psycopg.Connection`` or ``psycopg_pool.ConnectionPool``, wrapped in
      ``Adapter`` first

    Other DB-API connections are rejected: their ``execute`` returns tuple
    rows that cannot populate a record.
    """

    def __init__(
        self,
        primary_key_columns: Union[str, Sequence[str]],
        table: TableLike,
        adapter_or_sql: Any = None,
        row_prototype: Any = None,
    ) -> None:
        # primary key is always a tuple even if it's a single column
        if isinstance(primary_key_columns, str):
            primary_key_columns = (primary_key_columns,)
        if not primary_key_columns:
            raise ConfigurationError("At least one primary key column is required.")

        if isinstance(adapter_or_sql, (Connection, ConnectionPool)):
            adapter_or_sql = Adapter(adapter_or_sql)

        if isinstance(adapter_or_sql, StatementBuilder):
            sql = adapter_or_sql
        elif isinstance(adapter_or_sql, Executor) and not hasattr(adapter_or_sql, "cursor"):
            sql = Sql(adapter_or_sql, table)
        else:
            raise ConfigurationError("A valid Sql object or adapter was not provided.")

        if not same_table(sql.table, table):
            raise ConfigurationError(
                "The Sql object provided does not have a table that matches this row object"
            )

        self._initialize(primary_key_columns, table, sql, row_prototype)


__all__ = ["ActiveRecord"]
