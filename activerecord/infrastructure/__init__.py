"""
Infrastructure package for the Active Record layer.

Centralizes database connectivity concerns (connection factory and the
psycopg-backed adapter). Keep this layer focused on I/O and resource
management, decoupled from query building and row mapping.
"""

from activerecord.infrastructure.adapter import Adapter, Result
from activerecord.infrastructure.db_factory import (
    apply_statement_timeout,
    build_dsn,
    get_sync_connection,
    get_sync_pool,
)

__all__ = [
    "Adapter",
    "Result",
    "apply_statement_timeout",
    "build_dsn",
    "get_sync_connection",
    "get_sync_pool",
]
