"""
Forward-only result set that maps raw rows onto clones of a row prototype.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import Any, Iterable, Iterator, List, Optional

from activerecord.record.protocols import RowPrototype, ensure_row_prototype


class ResultSet:
    """
    Wraps the rows returned by an executor.

    Each mapping row is copied onto a fresh clone of the prototype; anything
    else is passed through unchanged. The result set is consumed as it is
    iterated and cannot be restarted without re-running the query.
    """

    def __init__(self, prototype: Any) -> None:
        self._prototype: RowPrototype = ensure_row_prototype(prototype)
        self._source: Optional[Iterator[Any]] = None

    @property
    def prototype(self) -> RowPrototype:
        return self._prototype

    def initialize(self, source: Iterable[Any]) -> "ResultSet":
        self._source = iter(source)
        return self

    def _hydrate(self, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        row = copy.copy(self._prototype)
        row.clear()
        row.populate(data)
        return row

    def __iter__(self) -> "ResultSet":
        return self

    def __next__(self) -> Any:
        if self._source is None:
            raise StopIteration
        return self._hydrate(next(self._source))

    def current(self) -> Any:
        """Return the next populated row, or ``None`` once the rows are exhausted."""
        return next(self, None)

    def to_list(self) -> List[Any]:
        return list(self)


__all__ = ["ResultSet"]
