"""
Predicates for WHERE and HAVING clauses.

Each predicate renders itself into a ``psycopg.sql`` fragment plus the ordered
list of values bound to its ``%s`` placeholders. Values are never inlined.

Accepted forms for ``where(...)``/``having(...)`` arguments:

- a ``Predicate`` instance, added as-is
- a ``str``, added as plain SQL via ``Expression.literal`` (a ``%`` in it is
  kept literally)
- a mapping of column to value: ``None`` becomes ``IS NULL``, a list, tuple or
  set becomes ``IN``, anything else becomes ``=``
- a callable, invoked with the target ``Where`` so it can add predicates
- a list or tuple of any of the above
"""

from __future__ import annotations

import abc
import re
from collections.abc import Mapping
from enum import Enum
from typing import Any, Callable, Iterable, List, Optional, Tuple, Union

from psycopg import sql

from activerecord.sql.identifier import column_sql

Fragment = Tuple[sql.Composable, List[Any]]

# "%%", "%s", or a stray "%" followed by any other character
_PERCENT_TOKEN = re.compile(r"%(?:%|s|.|$)", re.DOTALL)


class Combination(str, Enum):
    AND = "AND"
    OR = "OR"


class Predicate(abc.ABC):
    """Base class for anything that renders into a boolean SQL fragment."""

    @abc.abstractmethod
    def to_sql(self) -> Fragment:  # pragma: no cover - interface only
        raise NotImplementedError


class Expression(Predicate):
    """
    Raw SQL fragment with ``%s`` placeholders, e.g. ``Expression("age > %s", 18)``.

    A literal percent sign must be written ``%%``, as psycopg expects:
    ``Expression("name LIKE 'A%%' AND age > %s", 18)``. Use ``literal()`` for
    plain SQL text without placeholders; it escapes ``%`` itself.

    Also usable as a projected column or an UPDATE value.
    """

    def __init__(self, text: str, *params: Any) -> None:
        placeholders = 0
        for token in _PERCENT_TOKEN.findall(text):
            if token == "%s":
                placeholders += 1
            elif token != "%%":
                raise ValueError(
                    f"Expression {text!r} contains {token!r}; use %s for a parameter "
                    "and %% for a literal percent sign"
                )
        if placeholders != len(params):
            raise ValueError(
                f"Expression {text!r} has {placeholders} placeholder(s) "
                f"but {len(params)} parameter(s) were given"
            )
        self.text = text
        self.params = list(params)

    @classmethod
    def literal(cls, text: str) -> "Expression":
        """Plain SQL text taking no parameters; every ``%`` is kept literally."""
        return cls(text.replace("%", "%%"))

    def to_sql(self) -> Fragment:
        return sql.SQL(self.text), list(self.params)

    def __repr__(self) -> str:
        return f"Expression({self.text!r}, params={self.params!r})"


class Operator(Predicate):
    OPERATORS = frozenset({"=", "!=", "<>", "<", "<=", ">", ">=", "LIKE", "NOT LIKE", "ILIKE"})

    def __init__(self, column: str, operator: str, value: Any) -> None:
        normalized = operator.upper()
        if normalized not in self.OPERATORS:
            raise ValueError(f"Unsupported operator '{operator}'")
        self.column = column
        self.operator = normalized
        self.value = value

    def to_sql(self) -> Fragment:
        fragment = sql.SQL("{} {} {}").format(
            column_sql(self.column), sql.SQL(self.operator), sql.Placeholder()
        )
        return fragment, [self.value]

    def __repr__(self) -> str:
        return f"Operator({self.column!r}, {self.operator!r}, {self.value!r})"


class IsNull(Predicate):
    keyword = "IS NULL"

    def __init__(self, column: str) -> None:
        self.column = column

    def to_sql(self) -> Fragment:
        return sql.SQL("{} " + self.keyword).format(column_sql(self.column)), []


class IsNotNull(IsNull):
    keyword = "IS NOT NULL"


class In(Predicate):
    def __init__(self, column: str, values: Iterable[Any]) -> None:
        self.column = column
        self.values = list(values)

    def to_sql(self) -> Fragment:
        if not self.values:
            # An empty IN list matches nothing.
            return sql.SQL("FALSE"), []
        placeholders = sql.SQL(", ").join([sql.Placeholder()] * len(self.values))
        fragment = sql.SQL("{} IN ({})").format(column_sql(self.column), placeholders)
        return fragment, list(self.values)


class Between(Predicate):
    def __init__(self, column: str, minimum: Any, maximum: Any) -> None:
        self.column = column
        self.minimum = minimum
        self.maximum = maximum

    def to_sql(self) -> Fragment:
        fragment = sql.SQL("{} BETWEEN {} AND {}").format(
            column_sql(self.column), sql.Placeholder(), sql.Placeholder()
        )
        return fragment, [self.minimum, self.maximum]


PredicateLike = Union[Predicate, str, Mapping, Callable[["Where"], Any], list, tuple]


def _from_mapping(conditions: Mapping) -> List[Predicate]:
    predicates: List[Predicate] = []
    for column, value in conditions.items():
        if value is None:
            predicates.append(IsNull(column))
        elif isinstance(value, (list, tuple, set, frozenset)):
            predicates.append(In(column, value))
        else:
            predicates.append(Operator(column, "=", value))
    return predicates


class PredicateSet(Predicate):
    """
    Ordered predicates joined by AND/OR. Nested sets are parenthesised.

    The combination stored with the first predicate is ignored when rendering.
    """

    def __init__(
        self,
        predicates: Optional[Iterable[Predicate]] = None,
        combination: Combination = Combination.AND,
    ) -> None:
        self._predicates: List[Tuple[Combination, Predicate]] = []
        for predicate in predicates or ():
            self.add_predicate(predicate, combination)

    @property
    def predicates(self) -> List[Tuple[Combination, Predicate]]:
        return list(self._predicates)

    def add_predicate(
        self, predicate: Predicate, combination: Combination = Combination.AND
    ) -> "PredicateSet":
        self._predicates.append((Combination(combination), predicate))
        return self

    def add_predicates(
        self, predicate: PredicateLike, combination: Combination = Combination.AND
    ) -> "PredicateSet":
        """
        Normalise ``predicate`` and add it with ``combination``.

        When the argument expands to several predicates (a multi-item mapping
        or a list), they are grouped with AND into one nested set so that
        ``combination`` applies to the group as a whole.
        """
        if isinstance(predicate, Predicate):
            return self.add_predicate(predicate, combination)
        if callable(predicate):
            predicate(self)
            return self

        if isinstance(predicate, str):
            expanded: List[Predicate] = [Expression.literal(predicate)]
        elif isinstance(predicate, Mapping):
            expanded = _from_mapping(predicate)
        elif isinstance(predicate, (list, tuple)):
            group = PredicateSet()
            for item in predicate:
                group.add_predicates(item)
            expanded = [p for _, p in group._predicates]
        else:
            raise TypeError(f"Unsupported predicate type: {type(predicate).__name__}")

        if len(expanded) == 1:
            self.add_predicate(expanded[0], combination)
        elif expanded:
            self.add_predicate(PredicateSet(expanded), combination)
        return self

    def __len__(self) -> int:
        return len(self._predicates)

    def is_empty(self) -> bool:
        """True when nothing would render, counting only non-empty nested sets."""
        return all(
            isinstance(predicate, PredicateSet) and predicate.is_empty()
            for _, predicate in self._predicates
        )

    def to_sql(self) -> Fragment:
        pieces: List[sql.Composable] = []
        params: List[Any] = []
        for combination, predicate in self._predicates:
            if isinstance(predicate, PredicateSet):
                if predicate.is_empty():
                    continue
                fragment, values = predicate.to_sql()
                fragment = sql.Composed([sql.SQL("("), fragment, sql.SQL(")")])
            else:
                fragment, values = predicate.to_sql()
            if pieces:
                pieces.append(sql.SQL(combination.value))
            pieces.append(fragment)
            params.extend(values)
        return sql.SQL(" ").join(pieces), params


class Where(PredicateSet):
    """
    Predicate set with fluent helpers.

    ``where.equal_to("a", 1).or_.is_null("b")`` renders ``"a" = %s OR "b" IS NULL``.
    The ``or_``/``and_`` switches apply to the next predicate only.
    """

    def __init__(
        self,
        predicates: Optional[Iterable[Predicate]] = None,
        combination: Combination = Combination.AND,
        parent: Optional["Where"] = None,
    ) -> None:
        super().__init__(predicates, combination)
        self._next_combination = Combination.AND
        self._parent = parent

    @property
    def or_(self) -> "Where":
        self._next_combination = Combination.OR
        return self

    @property
    def and_(self) -> "Where":
        self._next_combination = Combination.AND
        return self

    def _add(self, predicate: Predicate) -> "Where":
        self.add_predicate(predicate, self._next_combination)
        self._next_combination = Combination.AND
        return self

    def equal_to(self, column: str, value: Any) -> "Where":
        return self._add(Operator(column, "=", value))

    def not_equal_to(self, column: str, value: Any) -> "Where":
        return self._add(Operator(column, "!=", value))

    def less_than(self, column: str, value: Any) -> "Where":
        return self._add(Operator(column, "<", value))

    def less_than_or_equal_to(self, column: str, value: Any) -> "Where":
        return self._add(Operator(column, "<=", value))

    def greater_than(self, column: str, value: Any) -> "Where":
        return self._add(Operator(column, ">", value))

    def greater_than_or_equal_to(self, column: str, value: Any) -> "Where":
        return self._add(Operator(column, ">=", value))

    def like(self, column: str, pattern: str) -> "Where":
        return self._add(Operator(column, "LIKE", pattern))

    def not_like(self, column: str, pattern: str) -> "Where":
        return self._add(Operator(column, "NOT LIKE", pattern))

    def is_null(self, column: str) -> "Where":
        return self._add(IsNull(column))

    def is_not_null(self, column: str) -> "Where":
        return self._add(IsNotNull(column))

    def in_(self, column: str, values: Iterable[Any]) -> "Where":
        return self._add(In(column, values))

    def between(self, column: str, minimum: Any, maximum: Any) -> "Where":
        return self._add(Between(column, minimum, maximum))

    def expression(self, text: str, *params: Any) -> "Where":
        return self._add(Expression(text, *params))

    def nest(self) -> "Where":
        """Open a parenthesised group; close it with ``unnest()``."""
        child = type(self)(parent=self)
        self._add(child)
        return child

    def unnest(self) -> "Where":
        if self._parent is None:
            raise RuntimeError("unnest() called on a predicate set that is not nested")
        return self._parent


class Having(Where):
    pass


__all__ = [
    "Combination",
    "Predicate",
    "PredicateLike",
    "PredicateSet",
    "Expression",
    "Operator",
    "IsNull",
    "IsNotNull",
    "In",
    "Between",
    "Where",
    "Having",
]
