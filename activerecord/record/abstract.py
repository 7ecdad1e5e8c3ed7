"""
Active Record base class.

A record owns its table name, its primary key columns, a statement builder
and a query builder facade. Chain clause methods on it, then call one of the
terminal operations:

    users.columns(["id", "name"]).where({"status": "active"}).order("name").limit(10)
    for user in users.fetch():
        print(user["name"])

Reads return clones of the row prototype (the record itself by default);
writes return the record and never touch its attributes.
"""

from __future__ import annotations

import abc
import copy
from collections.abc import Mapping
from typing import Any, Dict, Optional, Sequence, Tuple

from activerecord.errors import TooFewPrimaryKeyValuesError, TooManyPrimaryKeyValuesError
from activerecord.record.protocols import StatementBuilder
from activerecord.record.query_builder import QueryBuilder
from activerecord.record.result_set import ResultSet
from activerecord.sql.identifier import STAR, TableLike
from activerecord.sql.predicate import Combination, PredicateLike
from activerecord.sql.select import JoinType, Select, SelectPart
from activerecord.utils.logging import get_logger

log = get_logger(__name__)


class AbstractActiveRecord(abc.ABC):
    """
    Subclasses must call ``_initialize`` with the primary key columns, the
    table and a statement builder bound to that table.
    """

    primary_key_columns: Tuple[str, ...]
    table: TableLike
    sql: StatementBuilder

    @abc.abstractmethod
    def __init__(self, *args: Any, **kwargs: Any) -> None:  # pragma: no cover - interface only
        raise NotImplementedError

    def _initialize(
        self,
        primary_key_columns: Sequence[str],
        table: TableLike,
        sql: StatementBuilder,
        row_prototype: Any = None,
    ) -> None:
        self.primary_key_columns = tuple(primary_key_columns)
        self.table = table
        self.sql = sql
        self._attributes: Dict[str, Any] = {}
        self._query = QueryBuilder(sql)
        self._result_set_prototype = ResultSet(self if row_prototype is None else row_prototype)

    def __copy__(self) -> "AbstractActiveRecord":
        clone = self.__class__.__new__(self.__class__)
        clone.__dict__.update(self.__dict__)
        clone._attributes = {}
        clone._query = QueryBuilder(self.sql)
        if self._result_set_prototype.prototype is self:
            clone._result_set_prototype = ResultSet(clone)
        return clone

    # ------------------------------------------------------------------
    # Row state
    # ------------------------------------------------------------------

    @property
    def attributes(self) -> Dict[str, Any]:
        return self._attributes

    def populate(self, data: Mapping[str, Any]) -> "AbstractActiveRecord":
        self._attributes = dict(data)
        return self

    def clear(self) -> None:
        self._attributes = {}

    def clean(self) -> "AbstractActiveRecord":
        """Clear all data. The query specification is left untouched."""
        self.populate({})
        return self

    def to_dict(self) -> Dict[str, Any]:
        return dict(self._attributes)

    def get(self, column: str, default: Any = None) -> Any:
        return self._attributes.get(column, default)

    def __getitem__(self, column: str) -> Any:
        return self._attributes[column]

    def __contains__(self, column: object) -> bool:
        return column in self._attributes

    def __repr__(self) -> str:
        return f"{type(self).__name__}(table={str(self.table)!r}, attributes={self._attributes!r})"

    # ------------------------------------------------------------------
    # Query builder facade
    # ------------------------------------------------------------------

    def select(self) -> Select:
        """
        Get the instance of select used by the clause methods until it is reset.
        """
        return self._query.select()

    def reset(self, part: Optional[SelectPart | str] = None) -> "AbstractActiveRecord":
        """
        Reset one named part of the select, or discard the whole select when
        ``part`` is omitted.
        """
        self._query.reset(part)
        return self

    def columns(self, columns: Any, prefix_columns_with_table: bool = True) -> "AbstractActiveRecord":
        self._query.columns(columns, prefix_columns_with_table)
        return self

    def join(
        self, name: Any, on: Any, columns: Any = (STAR,), type: JoinType = JoinType.INNER
    ) -> "AbstractActiveRecord":
        self._query.join(name, on, columns, type)
        return self

    def where(self, predicate: PredicateLike, combination: Combination = Combination.AND) -> "AbstractActiveRecord":
        self._query.where(predicate, combination)
        return self

    def group(self, group: Any) -> "AbstractActiveRecord":
        self._query.group(group)
        return self

    def having(self, predicate: PredicateLike, combination: Combination = Combination.AND) -> "AbstractActiveRecord":
        self._query.having(predicate, combination)
        return self

    def order(self, order: Any) -> "AbstractActiveRecord":
        self._query.order(order)
        return self

    def limit(self, limit: int) -> "AbstractActiveRecord":
        self._query.limit(limit)
        return self

    def offset(self, offset: int) -> "AbstractActiveRecord":
        self._query.offset(offset)
        return self

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def load(self, *values: Any) -> Any:
        """
        Load a row by its primary key values, given in key column order.

        Returns the populated record, or None if no row matches. The number of
        values must equal the number of primary key columns.
        """
        return self.load_by(values)

    def load_by(self, values: Sequence[Any]) -> Any:
        """Same as ``load`` with the primary key values passed as one sequence."""
        self.clean()

        expected = len(self.primary_key_columns)
        if len(values) < expected:
            raise TooFewPrimaryKeyValuesError(expected, len(values))
        if len(values) > expected:
            raise TooManyPrimaryKeyValuesError(expected, len(values))

        # primary key is always a tuple even if it's a single column
        where = {column: values[position] for position, column in enumerate(self.primary_key_columns)}
        log.debug("Loading record", extra={"table": str(self.table), "primary_key": where})

        self.reset()
        self.where(where)
        return self.fetch().current()

    def fetch(self, select: Optional[Select] = None) -> ResultSet:
        """
        Fetch the rows for the current select, or for ``select`` when given.

        A new select can be obtained from ``record.sql.select()``. Neither form
        modifies or resets the record's own select.
        """
        if select is None:
            select = self.select()
        statement = self.sql.prepare_statement_for_sql_object(select)
        result = statement.execute()

        result_set = copy.copy(self._result_set_prototype)
        return result_set.initialize(result)

    def fetch_one(self) -> Any:
        """Limit the current select to one row and return it, or None."""
        self.limit(1)
        return self.fetch().current()

    def fetch_pairs(self, key_column: str, value_column: str) -> Dict[Any, Any]:
        """
        Fetch ``{key: value}`` pairs from the key and value columns.

        Later rows overwrite earlier ones that share a key.
        """
        pairs: Dict[Any, Any] = {}

        self.columns([key_column, value_column])
        for row in self.fetch():
            pairs[row[key_column]] = row[value_column]

        return pairs

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def update(self, set: Mapping[str, Any], predicate: PredicateLike) -> "AbstractActiveRecord":
        """
        Update the columns of the rows that satisfy ``predicate``.

        The record's attributes are not refreshed; load it again to see the change.
        """
        update = self.sql.update().set(set).where(predicate)
        statement = self.sql.prepare_statement_for_sql_object(update)
        statement.execute()
        return self

    def delete_where(self, predicate: PredicateLike) -> "AbstractActiveRecord":
        """Delete the rows that satisfy ``predicate``."""
        delete = self.sql.delete().where(predicate)
        statement = self.sql.prepare_statement_for_sql_object(delete)
        statement.execute()
        return self


__all__ = ["AbstractActiveRecord"]
