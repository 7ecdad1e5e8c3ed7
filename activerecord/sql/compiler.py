"""
Render SELECT/UPDATE/DELETE specifications into ``psycopg.sql`` statements.

Identifiers are always quoted with ``sql.Identifier`` and values are always
bound through ``%s`` placeholders; the returned parameter list follows the
placeholder order of the rendered statement.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, List, Optional, Tuple, Union

from psycopg import sql

from activerecord.sql.dml import Delete, Update
from activerecord.sql.identifier import TableLike, as_table_identifier, column_sql, table_sql
from activerecord.sql.predicate import Expression, Predicate, PredicateSet
from activerecord.sql.select import ColumnSpec, Join, Select

Compiled = Tuple[sql.Composed, List[Any]]
SqlObject = Union[Select, Update, Delete]


def _column(column: Union[str, Expression], prefix: Tuple[str, ...], params: List[Any]) -> sql.Composable:
    if isinstance(column, Expression):
        fragment, values = column.to_sql()
        params.extend(values)
        return fragment
    return column_sql(column, prefix)


def _projection(specs: List[ColumnSpec], prefix: Tuple[str, ...], params: List[Any]) -> List[sql.Composable]:
    rendered: List[sql.Composable] = []
    for alias, column in specs:
        fragment = _column(column, prefix, params)
        if alias is not None:
            fragment = sql.SQL("{} AS {}").format(fragment, sql.Identifier(alias))
        rendered.append(fragment)
    return rendered


def _join_target(join: Join) -> Tuple[sql.Composable, Tuple[str, ...]]:
    if isinstance(join.name, Mapping):
        if len(join.name) != 1:
            raise ValueError("A join alias mapping must hold exactly one {alias: table} entry")
        ((alias, table),) = join.name.items()
        return sql.SQL("{} AS {}").format(table_sql(table), sql.Identifier(alias)), (alias,)
    return table_sql(join.name), as_table_identifier(join.name).parts


def _predicate(predicate: Union[str, Predicate], params: List[Any]) -> sql.Composable:
    if isinstance(predicate, str):
        predicate = Expression.literal(predicate)
    fragment, values = predicate.to_sql()
    params.extend(values)
    return fragment


def _where(keyword: str, predicates: PredicateSet, parts: List[sql.Composable], params: List[Any]) -> None:
    if not predicates.is_empty():
        fragment, values = predicates.to_sql()
        parts.extend([sql.SQL(keyword), fragment])
        params.extend(values)


def compile_select(select: Select) -> Compiled:
    state = select.state
    params: List[Any] = []
    table: Optional[TableLike] = select.table
    prefix: Tuple[str, ...] = ()
    if table is not None and state.prefix_columns_with_table:
        prefix = as_table_identifier(table).parts

    projection = _projection(state.columns, prefix, params)
    join_parts: List[sql.Composable] = []
    for join in state.joins:
        target, join_prefix = _join_target(join)
        projection.extend(_projection(join.columns, join_prefix, params))
        join_parts.append(
            sql.SQL("{} JOIN {} ON {}").format(
                sql.SQL(join.type.value), target, _predicate(join.on, params)
            )
        )

    parts: List[sql.Composable] = [sql.SQL("SELECT"), sql.SQL(", ").join(projection)]
    if table is not None:
        parts.extend([sql.SQL("FROM"), table_sql(table)])
    parts.extend(join_parts)
    _where("WHERE", state.where, parts, params)
    if state.group:
        group = [_column(column, (), params) for column in state.group]
        parts.extend([sql.SQL("GROUP BY"), sql.SQL(", ").join(group)])
    _where("HAVING", state.having, parts, params)
    if state.order:
        order = []
        for column, direction in state.order:
            fragment = _column(column, (), params)
            order.append(sql.SQL("{} {}").format(fragment, sql.SQL(direction)) if direction else fragment)
        parts.extend([sql.SQL("ORDER BY"), sql.SQL(", ").join(order)])
    if state.limit is not None:
        parts.extend([sql.SQL("LIMIT"), sql.Placeholder()])
        params.append(state.limit)
    if state.offset is not None:
        parts.extend([sql.SQL("OFFSET"), sql.Placeholder()])
        params.append(state.offset)
    return sql.SQL(" ").join(parts), params


def compile_update(update: Update) -> Compiled:
    if update.table is None:
        raise ValueError("UPDATE requires a table")
    if not update.state.set:
        raise ValueError("UPDATE requires at least one column to set")
    params: List[Any] = []
    assignments = []
    for column, value in update.state.set.items():
        if isinstance(value, Expression):
            target = _column(value, (), params)
        else:
            target = sql.Placeholder()
            params.append(value)
        assignments.append(sql.SQL("{} = {}").format(sql.Identifier(column), target))

    parts: List[sql.Composable] = [
        sql.SQL("UPDATE"),
        table_sql(update.table),
        sql.SQL("SET"),
        sql.SQL(", ").join(assignments),
    ]
    _where("WHERE", update.state.where, parts, params)
    return sql.SQL(" ").join(parts), params


def compile_delete(delete: Delete) -> Compiled:
    if delete.table is None:
        raise ValueError("DELETE requires a table")
    params: List[Any] = []
    parts: List[sql.Composable] = [sql.SQL("DELETE FROM"), table_sql(delete.table)]
    _where("WHERE", delete.state.where, parts, params)
    return sql.SQL(" ").join(parts), params


def compile_sql_object(sql_object: SqlObject) -> Compiled:
    if isinstance(sql_object, Select):
        return compile_select(sql_object)
    if isinstance(sql_object, Update):
        return compile_update(sql_object)
    if isinstance(sql_object, Delete):
        return compile_delete(sql_object)
    raise TypeError(f"Cannot compile {type(sql_object).__name__}; expected Select, Update or Delete")


__all__ = ["compile_select", "compile_update", "compile_delete", "compile_sql_object", "SqlObject"]
