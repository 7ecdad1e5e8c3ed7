"""
SQL package for the Active Record layer.

Holds the default statement builder: SELECT/UPDATE/DELETE specifications,
predicates, and the compiler that renders them with ``psycopg.sql``.
"""

from activerecord.sql.builder import Sql, Statement
from activerecord.sql.compiler import compile_sql_object
from activerecord.sql.dml import Delete, Update
from activerecord.sql.identifier import STAR, TableIdentifier, TableLike
from activerecord.sql.predicate import (
    Between,
    Combination,
    Expression,
    Having,
    In,
    IsNotNull,
    IsNull,
    Operator,
    Predicate,
    PredicateSet,
    Where,
)
from activerecord.sql.select import Join, JoinType, Select, SelectPart

__all__ = [
    # Builder
    "Sql",
    "Statement",
    "compile_sql_object",
    # Specifications
    "Select",
    "SelectPart",
    "Join",
    "JoinType",
    "Update",
    "Delete",
    # Identifiers
    "STAR",
    "TableIdentifier",
    "TableLike",
    # Predicates
    "Combination",
    "Predicate",
    "PredicateSet",
    "Where",
    "Having",
    "Expression",
    "Operator",
    "IsNull",
    "IsNotNull",
    "In",
    "Between",
]
