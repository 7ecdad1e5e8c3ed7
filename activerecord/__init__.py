"""
Active Record layer for PostgreSQL tables.

This package lets a table-backed record type build SELECT queries
incrementally, run them, and map the result rows onto typed record instances:

- A lazy, resettable query builder facade on every record
- Primary key loading with strict key-count validation
- Result sets that clone and populate a row prototype per row
- Predicate-based UPDATE and DELETE

Statements are built with ``psycopg.sql`` and executed through a psycopg
adapter; both collaborators can be swapped for any object with the same shape.
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from activerecord.config import Settings, get_settings
from activerecord.errors import (
    ActiveRecordError,
    ArgumentCountError,
    CapabilityError,
    ConfigurationError,
    TooFewPrimaryKeyValuesError,
    TooManyPrimaryKeyValuesError,
)
from activerecord.infrastructure.adapter import Adapter, Result
from activerecord.record import (
    AbstractActiveRecord,
    ActiveRecord,
    ModelRow,
    QueryBuilder,
    ResultSet,
    RowPrototype,
)
from activerecord.sql import (
    Combination,
    Expression,
    JoinType,
    Select,
    SelectPart,
    Sql,
    TableIdentifier,
    Where,
)
from activerecord.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Records
    "AbstractActiveRecord",
    "ActiveRecord",
    "ModelRow",
    "QueryBuilder",
    "ResultSet",
    "RowPrototype",
    # Collaborators
    "Adapter",
    "Result",
    "Sql",
    "Select",
    "SelectPart",
    "JoinType",
    "Combination",
    "Expression",
    "TableIdentifier",
    "Where",
    # Errors
    "ActiveRecordError",
    "ArgumentCountError",
    "TooFewPrimaryKeyValuesError",
    "TooManyPrimaryKeyValuesError",
    "ConfigurationError",
    "CapabilityError",
    # Logging
    "configure_logging",
    "get_logger",
]
