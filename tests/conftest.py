"""
Pytest configuration for the Active Record layer.

Provides fixtures for:
- An in-memory statement builder so unit tests exercise records without a database
- Database connection management
- Seeding the demo users table for integration tests
"""

from __future__ import annotations

import os
from typing import Any, Dict, Generator, Iterable, List

import psycopg
import pytest

from activerecord.config import Settings
from activerecord.infrastructure.adapter import Result
from activerecord.record.active_record import ActiveRecord
from activerecord.sql.builder import Sql
from activerecord.sql.dml import Delete, Update
from activerecord.sql.identifier import STAR
from activerecord.sql.predicate import (
    Combination,
    In,
    IsNotNull,
    IsNull,
    Operator,
    Predicate,
    PredicateSet,
)
from activerecord.sql.select import Select

# =============================================================================
# In-memory statement builder
# =============================================================================


def _matches(predicate: Predicate, row: Dict[str, Any]) -> bool:
    if isinstance(predicate, PredicateSet):
        outcome = None
        for combination, inner in predicate.predicates:
            value = _matches(inner, row)
            if outcome is None:
                outcome = value
            elif combination is Combination.OR:
                outcome = outcome or value
            else:
                outcome = outcome and value
        return True if outcome is None else outcome
    if isinstance(predicate, Operator) and predicate.operator == "=":
        return row.get(predicate.column) == predicate.value
    if isinstance(predicate, IsNotNull):
        return row.get(predicate.column) is not None
    if isinstance(predicate, IsNull):
        return row.get(predicate.column) is None
    if isinstance(predicate, In):
        return row.get(predicate.column) in predicate.values
    raise NotImplementedError(f"In-memory table cannot evaluate {predicate!r}")


class _InMemoryStatement:
    def __init__(self, owner: "InMemorySql", sql_object: Any) -> None:
        self._owner = owner
        self._sql_object = sql_object

    def execute(self) -> Result:
        self._owner.executed.append(self._sql_object)
        obj = self._sql_object
        rows = self._owner.rows
        matching = [row for row in rows if _matches(obj.state.where, row)]

        if isinstance(obj, Update):
            for row in matching:
                row.update(obj.state.set)
            return Result(affected_rows=len(matching))
        if isinstance(obj, Delete):
            self._owner.rows = [row for row in rows if row not in matching]
            return Result(affected_rows=len(matching))

        state = obj.state
        start = state.offset or 0
        stop = start + state.limit if state.limit is not None else None
        projected = []
        for row in matching[start:stop]:
            if state.columns == [(None, STAR)]:
                projected.append(dict(row))
            else:
                projected.append({alias or column: row[column] for alias, column in state.columns})
        return Result(rows=projected, affected_rows=len(projected), is_query_result=True)


class InMemorySql(Sql):
    """
    Statement builder that evaluates equality/IN/NULL predicates against a
    list of dicts and records every prepared and executed specification.
    """

    def __init__(self, table: Any, rows: Iterable[Dict[str, Any]]) -> None:
        super().__init__(adapter=None, table=table)
        self.rows: List[Dict[str, Any]] = [dict(row) for row in rows]
        self.prepared: List[Any] = []
        self.executed: List[Any] = []

    def prepare_statement_for_sql_object(self, sql_object: Any) -> _InMemoryStatement:
        self.prepared.append(sql_object)
        return _InMemoryStatement(self, sql_object)

    @property
    def last_select(self) -> Select:
        return [obj for obj in self.prepared if isinstance(obj, Select)][-1]


USERS = [
    {"id": 41, "name": "Bob", "status": "pending"},
    {"id": 42, "name": "Ann", "status": "pending"},
    {"id": 43, "name": "Cleo", "status": "active"},
]

MEMBERSHIPS = [
    {"user_id": 7, "team": "core", "role": "member"},
    {"user_id": 7, "team": "infra", "role": "owner"},
    {"user_id": 8, "team": "infra", "role": "member"},
]


@pytest.fixture
def users_sql() -> InMemorySql:
    return InMemorySql("users", USERS)


@pytest.fixture
def users(users_sql: InMemorySql) -> ActiveRecord:
    return ActiveRecord("id", "users", users_sql)


@pytest.fixture
def memberships_sql() -> InMemorySql:
    return InMemorySql("memberships", MEMBERSHIPS)


@pytest.fixture
def memberships(memberships_sql: InMemorySql) -> ActiveRecord:
    return ActiveRecord(["user_id", "team"], "memberships", memberships_sql)


# =============================================================================
# Database fixtures
# =============================================================================


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """
    Settings fixture with test-specific overrides.

    Can be overridden via environment variables in CI or local testing.
    """
    return Settings(
        db_host=os.getenv("DB_HOST", "localhost"),
        db_port=int(os.getenv("DB_PORT", "5432")),
        db_user=os.getenv("DB_USER", "postgres"),
        db_password=os.getenv("DB_PASSWORD", "postgres"),
        db_name=os.getenv("DB_NAME", "activerecord"),
        log_level="DEBUG",
    )


@pytest.fixture(scope="session")
def test_dsn(test_settings: Settings) -> str:
    """
    Database connection string for tests.
    """
    return (
        f"postgresql://{test_settings.db_user}:{test_settings.db_password}"
        f"@{test_settings.db_host}:{test_settings.db_port}/{test_settings.db_name}"
    )


@pytest.fixture(scope="session")
def db_connection_available(test_dsn: str) -> bool:
    """
    Check if database is reachable.

    Used to conditionally skip integration tests when DB is not available.
    """
    try:
        with psycopg.connect(test_dsn, connect_timeout=5) as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1;")
                cur.fetchone()
        return True
    except psycopg.Error:
        return False


@pytest.fixture(scope="session")
def db_connection(
    test_dsn: str, db_connection_available: bool
) -> Generator[psycopg.Connection, None, None]:
    """
    Provide a session-scoped autocommit connection for integration tests.

    Skips tests if database is not available.
    """
    if not db_connection_available:
        pytest.skip("Database not available for integration tests")

    conn = psycopg.connect(test_dsn, autocommit=True)
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture(scope="function")
def seeded_users(db_connection: psycopg.Connection, test_dsn: str) -> int:
    """
    Recreate and seed the users table (50 rows) before each test function.

    Returns the number of rows seeded.
    """
    from scripts.seed_users import seed

    seed(test_dsn, rows=50, seed=42)

    with db_connection.cursor() as cur:
        cur.execute("SELECT COUNT(*) FROM public.users;")
        count = cur.fetchone()[0]

    return count
