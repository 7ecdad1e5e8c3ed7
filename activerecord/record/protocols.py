"""
Collaborator interfaces for the Active Record layer.

Records talk to two external collaborators, a statement builder and an
executor, and map rows onto a row prototype. The bundled ``Sql`` and
``Adapter`` implement the first two; any object with the same shape can
stand in for them.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence, runtime_checkable

from activerecord.errors import CapabilityError


@runtime_checkable
class RowPrototype(Protocol):
    """
    Anything that can be cleared and repopulated from a column -> value mapping.

    Row prototypes are cloned with ``copy.copy`` once per result row, so a
    clone must not share mutable row state with its prototype after
    ``clear()``.
    """

    def clear(self) -> None:
        ...

    def populate(self, data: Mapping[str, Any]) -> Any:
        ...


@runtime_checkable
class StatementBuilder(Protocol):
    """
    Produces SELECT/UPDATE/DELETE specifications for one table and prepares
    them into statements exposing ``execute()``.
    """

    table: Any

    def select(self) -> Any:
        ...

    def update(self) -> Any:
        ...

    def delete(self) -> Any:
        ...

    def prepare_statement_for_sql_object(self, sql_object: Any) -> Any:
        ...


@runtime_checkable
class Executor(Protocol):
    """Runs a prepared query and returns an iterable of rows or a write result."""

    def execute(self, query: Any, params: Optional[Sequence[Any]] = None) -> Any:
        ...


def ensure_row_prototype(prototype: Any) -> RowPrototype:
    if not isinstance(prototype, RowPrototype):
        raise CapabilityError(
            "Result prototype must be an object and implement clear() and populate()"
        )
    return prototype


__all__ = ["RowPrototype", "StatementBuilder", "Executor", "ensure_row_prototype"]
