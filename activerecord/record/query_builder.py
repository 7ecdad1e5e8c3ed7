"""
Lazy query builder facade owned by each record.

The facade keeps one ``Select`` per owner, builds it on first use, and lets the
owner reset it whole or one clause at a time. Nothing here performs I/O.
"""

from __future__ import annotations

from typing import Any, Optional, Union

from activerecord.sql.identifier import STAR
from activerecord.sql.predicate import Combination
from activerecord.sql.select import JoinType, Select, SelectPart


class QueryBuilder:
    def __init__(self, sql: Any) -> None:
        self._sql = sql
        self._select: Optional[Select] = None

    @property
    def is_initialized(self) -> bool:
        return self._select is not None

    def select(self) -> Select:
        """
        Return the current specification, creating an empty one on first access.

        This instance is used by the clause methods below until it is reset.
        """
        if self._select is None:
            self._select = self._sql.select()
        return self._select

    def reset(self, part: Union[SelectPart, str, None] = None) -> "QueryBuilder":
        """
        Reset ``part`` of the current specification, or discard the whole
        specification when ``part`` is omitted.
        """
        if part:
            self.select().reset(part)
        else:
            self._select = None
        return self

    def columns(self, columns: Any, prefix_columns_with_table: bool = True) -> "QueryBuilder":
        self.select().columns(columns, prefix_columns_with_table)
        return self

    def join(
        self, name: Any, on: Any, columns: Any = (STAR,), type: JoinType = JoinType.INNER
    ) -> "QueryBuilder":
        self.select().join(name, on, columns, type)
        return self

    def where(self, predicate: Any, combination: Combination = Combination.AND) -> "QueryBuilder":
        self.select().where(predicate, combination)
        return self

    def group(self, group: Any) -> "QueryBuilder":
        self.select().group(group)
        return self

    def having(self, predicate: Any, combination: Combination = Combination.AND) -> "QueryBuilder":
        self.select().having(predicate, combination)
        return self

    def order(self, order: Any) -> "QueryBuilder":
        self.select().order(order)
        return self

    def limit(self, limit: int) -> "QueryBuilder":
        self.select().limit(limit)
        return self

    def offset(self, offset: int) -> "QueryBuilder":
        self.select().offset(offset)
        return self


__all__ = ["QueryBuilder"]
