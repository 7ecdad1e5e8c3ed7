from __future__ import annotations

from contextlib import contextmanager

import pytest

from activerecord.errors import ConfigurationError
from activerecord.infrastructure import adapter as adapter_module
from activerecord.infrastructure.adapter import Adapter, Result

DSN = "postgresql://u:p@db:5432/app"


class _FakeCursor:
    def __init__(self, conn: "_FakeConnection") -> None:
        self._conn = conn
        self.description = None
        self.rowcount = -1

    def execute(self, query, params=None) -> None:
        self._conn.executed.append((query, params))
        if self._conn.rows is not None:
            self.description = [("id",)]
            self.rowcount = len(self._conn.rows)
        else:
            self.rowcount = self._conn.affected

    def fetchall(self):
        return list(self._conn.rows)


class _FakeConnection:
    def __init__(self, rows=None, affected=0) -> None:
        self.rows = rows
        self.affected = affected
        self.executed: list = []
        self.row_factories: list = []
        self.closed = False

    @contextmanager
    def cursor(self, row_factory=None):
        self.row_factories.append(row_factory)
        yield _FakeCursor(self)

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def opened(monkeypatch):
    connections = []

    def fake_connect(dsn=None, autocommit=False):
        conn = _FakeConnection(rows=[{"id": 1}, {"id": 2}])
        connections.append((dsn, autocommit, conn))
        return conn

    monkeypatch.setattr(adapter_module, "get_sync_connection", fake_connect)
    return connections


def test_unsupported_source_raises() -> None:
    with pytest.raises(ConfigurationError, match="connection, connection pool or DSN"):
        Adapter(source=42, statement_timeout_ms=0)


def test_dsn_connection_is_opened_lazily(opened) -> None:
    adapter = Adapter(DSN, statement_timeout_ms=0)

    assert opened == []

    adapter.execute("SELECT 1")
    adapter.execute("SELECT 2")

    assert len(opened) == 1
    dsn, autocommit, _ = opened[0]
    assert dsn == DSN
    assert autocommit is True


def test_read_returns_dict_rows(opened) -> None:
    from psycopg.rows import dict_row

    adapter = Adapter(DSN, statement_timeout_ms=0)

    result = adapter.execute("SELECT id FROM users WHERE id = ANY(%s)", [[1, 2]])

    assert isinstance(result, Result)
    assert result.is_query_result
    assert list(result) == [{"id": 1}, {"id": 2}]
    assert result.count() == 2
    conn = opened[0][2]
    assert conn.row_factories == [dict_row]
    assert conn.executed == [("SELECT id FROM users WHERE id = ANY(%s)", [[1, 2]])]


def test_empty_params_are_passed_as_none(opened) -> None:
    Adapter(DSN, statement_timeout_ms=0).execute("SELECT 1", [])

    assert opened[0][2].executed == [("SELECT 1", None)]


def test_write_returns_affected_rows(monkeypatch) -> None:
    conn = _FakeConnection(rows=None, affected=3)
    monkeypatch.setattr(adapter_module, "get_sync_connection", lambda dsn=None, autocommit=False: conn)

    result = Adapter(DSN, statement_timeout_ms=0).execute("DELETE FROM users")

    assert not result.is_query_result
    assert result.affected_rows == 3
    assert list(result) == []


def test_statement_timeout_is_applied_before_the_statement(opened) -> None:
    Adapter(DSN, statement_timeout_ms=250).execute("SELECT 1")

    executed = opened[0][2].executed
    assert len(executed) == 2
    assert "statement_timeout" in repr(executed[0][0])
    assert executed[1] == ("SELECT 1", None)


def test_close_releases_only_owned_connection(opened) -> None:
    with Adapter(DSN, statement_timeout_ms=0) as adapter:
        adapter.execute("SELECT 1")

    assert opened[0][2].closed

    adapter.close()


def test_timeout_defaults_to_settings(monkeypatch) -> None:
    monkeypatch.setenv("DB_STATEMENT_TIMEOUT_MS", "1500")
    adapter_module.get_settings.cache_clear()
    try:
        assert Adapter(DSN).statement_timeout_ms == 1500
    finally:
        adapter_module.get_settings.cache_clear()
