"""
Record package for the Active Record layer.

Re-exports the record classes, the row mapping components and the
collaborator protocols so downstream code can import from
`activerecord.record` directly.
"""

from activerecord.record.abstract import AbstractActiveRecord
from activerecord.record.active_record import ActiveRecord
from activerecord.record.model_row import ModelRow
from activerecord.record.protocols import (
    Executor,
    RowPrototype,
    StatementBuilder,
    ensure_row_prototype,
)
from activerecord.record.query_builder import QueryBuilder
from activerecord.record.result_set import ResultSet

__all__ = [
    # Records
    "AbstractActiveRecord",
    "ActiveRecord",
    # Row mapping
    "ModelRow",
    "ResultSet",
    "QueryBuilder",
    # Protocols
    "Executor",
    "RowPrototype",
    "StatementBuilder",
    "ensure_row_prototype",
]
