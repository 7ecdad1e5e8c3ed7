"""UPDATE and DELETE specifications."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from activerecord.sql.identifier import TableLike
from activerecord.sql.predicate import Combination, PredicateLike, Where


@dataclass
class UpdateState:
    set: Dict[str, Any] = field(default_factory=dict)
    where: Where = field(default_factory=Where)


class Update:
    def __init__(self, table: Optional[TableLike] = None) -> None:
        self.table = table
        self.state = UpdateState()

    def set(self, values: Mapping[str, Any]) -> "Update":
        self.state.set.update(values)
        return self

    def where(self, predicate: PredicateLike, combination: Combination = Combination.AND) -> "Update":
        self.state.where.add_predicates(predicate, combination)
        return self


@dataclass
class DeleteState:
    where: Where = field(default_factory=Where)


class Delete:
    def __init__(self, table: Optional[TableLike] = None) -> None:
        self.table = table
        self.state = DeleteState()

    def where(self, predicate: PredicateLike, combination: Combination = Combination.AND) -> "Delete":
        self.state.where.add_predicates(predicate, combination)
        return self


__all__ = ["Update", "UpdateState", "Delete", "DeleteState"]
