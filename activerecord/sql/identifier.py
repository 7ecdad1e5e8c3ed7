"""
Table and column identifiers rendered as quoted ``psycopg.sql`` composables.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from psycopg import sql

STAR = "*"


@dataclass(frozen=True)
class TableIdentifier:
    """
    A table name, optionally qualified by its schema.
    """

    table: str
    schema: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.table:
            raise ValueError("TableIdentifier requires a non-empty table name")

    @property
    def parts(self) -> tuple[str, ...]:
        return (self.schema, self.table) if self.schema else (self.table,)

    def __str__(self) -> str:
        return ".".join(self.parts)


TableLike = Union[str, TableIdentifier]


def as_table_identifier(table: TableLike) -> TableIdentifier:
    """Normalise a plain table name into a TableIdentifier."""
    if isinstance(table, TableIdentifier):
        return table
    if isinstance(table, str) and table:
        return TableIdentifier(table)
    raise TypeError(f"Expected a table name or TableIdentifier, got {type(table).__name__}")


def same_table(left: Optional[TableLike], right: Optional[TableLike]) -> bool:
    if left is None or right is None:
        return left is right
    return as_table_identifier(left) == as_table_identifier(right)


def table_sql(table: TableLike) -> sql.Identifier:
    return sql.Identifier(*as_table_identifier(table).parts)


def column_sql(column: str, prefix: tuple[str, ...] = ()) -> sql.Composable:
    """
    Render a column reference.

    Dotted names are treated as already qualified and ignore ``prefix``;
    ``*`` and ``table.*`` render as a bare star.
    """
    if "." in column:
        *qualifier, name = column.split(".")
        prefix = tuple(qualifier)
        column = name
    if column == STAR:
        if prefix:
            return sql.Composed([sql.Identifier(*prefix), sql.SQL(".*")])
        return sql.SQL(STAR)
    return sql.Identifier(*prefix, column)


__all__ = [
    "STAR",
    "TableIdentifier",
    "TableLike",
    "as_table_identifier",
    "same_table",
    "table_sql",
    "column_sql",
]
