"""
SELECT specification.

A ``Select`` accumulates clauses without executing anything. Its clauses live
in an explicit ``SelectState`` so that ``reset(part)`` can put exactly one of
them back to its zero value.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from activerecord.sql.identifier import STAR, TableLike
from activerecord.sql.predicate import Combination, Expression, Having, Predicate, PredicateLike, Where

Column = Union[str, Expression]
ColumnSpec = Tuple[Optional[str], Column]
OrderSpec = Tuple[Column, str]


class SelectPart(str, Enum):
    COLUMNS = "columns"
    JOINS = "joins"
    WHERE = "where"
    GROUP = "group"
    HAVING = "having"
    ORDER = "order"
    LIMIT = "limit"
    OFFSET = "offset"


class JoinType(str, Enum):
    INNER = "INNER"
    OUTER = "FULL OUTER"
    LEFT = "LEFT"
    RIGHT = "RIGHT"
    LEFT_OUTER = "LEFT OUTER"
    RIGHT_OUTER = "RIGHT OUTER"


@dataclass
class Join:
    """
    One join clause. ``name`` is a table or an ``{alias: table}`` mapping;
    ``on`` is an opaque SQL condition or a predicate.
    """

    name: Union[TableLike, Mapping]
    on: Union[str, Predicate]
    columns: List[ColumnSpec]
    type: JoinType = JoinType.INNER


def _column_specs(columns: Union[Sequence[Column], Mapping[str, Column], Column]) -> List[ColumnSpec]:
    if isinstance(columns, (str, Expression)):
        return [(None, columns)]
    if isinstance(columns, Mapping):
        return [(alias, column) for alias, column in columns.items()]
    return [(None, column) for column in columns]


def _order_specs(order: Union[str, Expression, Sequence, Mapping[str, str]]) -> List[OrderSpec]:
    if isinstance(order, Expression):
        return [(order, "")]
    if isinstance(order, Mapping):
        items = list(order.items())
    elif isinstance(order, str):
        items = []
        for chunk in order.split(","):
            words = chunk.split()
            if not words:
                continue
            if len(words) > 2:
                raise ValueError(f"Cannot parse order specification {chunk.strip()!r}")
            items.append((words[0], words[1] if len(words) > 1 else "ASC"))
    else:
        specs: List[OrderSpec] = []
        for item in order:
            specs.extend(_order_specs(item))
        return specs

    specs = []
    for column, direction in items:
        direction = direction.upper()
        if direction not in ("ASC", "DESC"):
            raise ValueError(f"Order direction must be ASC or DESC, got {direction!r}")
        specs.append((column, direction))
    return specs


def _non_negative_int(value: Any, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} expects an integer, got {value!r}")
    if value < 0:
        raise ValueError(f"{name} must not be negative, got {value}")
    return value


@dataclass
class SelectState:
    """Per-clause state of a SELECT; every field's default is its zero value."""

    columns: List[ColumnSpec] = field(default_factory=lambda: [(None, STAR)])
    prefix_columns_with_table: bool = True
    joins: List[Join] = field(default_factory=list)
    where: Where = field(default_factory=Where)
    group: List[Column] = field(default_factory=list)
    having: Having = field(default_factory=Having)
    order: List[OrderSpec] = field(default_factory=list)
    limit: Optional[int] = None
    offset: Optional[int] = None


class Select:
    def __init__(self, table: Optional[TableLike] = None) -> None:
        self.table = table
        self.state = SelectState()

    def columns(
        self,
        columns: Union[Sequence[Column], Mapping[str, Column], Column],
        prefix_columns_with_table: bool = True,
    ) -> "Select":
        """
        Replace the projection. An empty sequence means the full row.
        """
        specs = _column_specs(columns)
        self.state.columns = specs or [(None, STAR)]
        self.state.prefix_columns_with_table = prefix_columns_with_table
        return self

    def join(
        self,
        name: Union[TableLike, Mapping],
        on: Union[str, Predicate],
        columns: Union[Sequence[Column], Mapping[str, Column], Column] = (STAR,),
        type: JoinType = JoinType.INNER,
    ) -> "Select":
        self.state.joins.append(Join(name, on, _column_specs(columns), JoinType(type)))
        return self

    def where(self, predicate: PredicateLike, combination: Combination = Combination.AND) -> "Select":
        self.state.where.add_predicates(predicate, combination)
        return self

    def group(self, group: Union[Column, Sequence[Column]]) -> "Select":
        if isinstance(group, (str, Expression)):
            group = [group]
        self.state.group.extend(group)
        return self

    def having(self, predicate: PredicateLike, combination: Combination = Combination.AND) -> "Select":
        self.state.having.add_predicates(predicate, combination)
        return self

    def order(self, order: Union[str, Expression, Sequence, Mapping[str, str]]) -> "Select":
        self.state.order.extend(_order_specs(order))
        return self

    def limit(self, limit: int) -> "Select":
        self.state.limit = _non_negative_int(limit, "limit")
        return self

    def offset(self, offset: int) -> "Select":
        self.state.offset = _non_negative_int(offset, "offset")
        return self

    def reset(self, part: Union[SelectPart, str]) -> "Select":
        try:
            part = SelectPart(part)
        except ValueError:
            raise ValueError(
                f"Unknown select part '{part}'. Available: {', '.join(p.value for p in SelectPart)}"
            ) from None
        zero = SelectState()
        setattr(self.state, part.value, getattr(zero, part.value))
        if part is SelectPart.COLUMNS:
            self.state.prefix_columns_with_table = zero.prefix_columns_with_table
        return self

    def raw_state(self) -> Dict[str, Any]:
        state = {f.name: getattr(self.state, f.name) for f in fields(self.state)}
        state["table"] = self.table
        return state

    def __repr__(self) -> str:
        return f"Select(table={self.table!r}, state={self.state!r})"


__all__ = ["Select", "SelectState", "SelectPart", "Join", "JoinType"]
