from __future__ import annotations

import pytest

from activerecord.record.query_builder import QueryBuilder
from activerecord.sql.builder import Sql
from activerecord.sql.select import JoinType, Select, SelectPart


class _NoIoAdapter:
    def execute(self, query, params=None):
        raise AssertionError("query builder must not execute statements")


@pytest.fixture
def builder() -> QueryBuilder:
    return QueryBuilder(Sql(_NoIoAdapter(), "users"))


def test_select_is_created_lazily_and_reused(builder) -> None:
    assert not builder.is_initialized

    first = builder.select()

    assert builder.is_initialized
    assert isinstance(first, Select)
    assert first.table == "users"
    assert builder.select() is first


def test_reset_without_part_discards_the_select(builder) -> None:
    builder.columns(["id"]).where({"status": "active"}).order("name").limit(5)
    before = builder.select()

    builder.reset()

    assert not builder.is_initialized
    after = builder.select()
    assert after is not before
    assert after.state.columns == [(None, "*")]
    assert len(after.state.where) == 0
    assert after.state.order == []
    assert after.state.limit is None


def test_reset_where_keeps_other_clauses(builder) -> None:
    builder.columns(["id", "name"]).where({"status": "active"}).order("name DESC").limit(5)

    builder.reset(SelectPart.WHERE)

    state = builder.select().state
    assert len(state.where) == 0
    assert state.columns == [(None, "id"), (None, "name")]
    assert state.order == [("name", "DESC")]
    assert state.limit == 5


def test_reset_accepts_part_names(builder) -> None:
    builder.limit(5).offset(10)

    builder.reset("limit")

    assert builder.select().state.limit is None
    assert builder.select().state.offset == 10


def test_reset_part_on_fresh_builder_creates_the_select(builder) -> None:
    builder.reset("order")

    assert builder.is_initialized


def test_reset_unknown_part_raises(builder) -> None:
    with pytest.raises(ValueError, match="Unknown select part"):
        builder.reset("window")


def test_columns_reset_restores_full_row_projection(builder) -> None:
    builder.columns({"n": "name"}, prefix_columns_with_table=False)

    builder.reset("columns")

    state = builder.select().state
    assert state.columns == [(None, "*")]
    assert state.prefix_columns_with_table is True


def test_clause_methods_chain_on_the_builder(builder) -> None:
    result = (
        builder.columns(["id"])
        .join("memberships", "users.id = memberships.user_id", ["role"], JoinType.LEFT)
        .where({"status": "active"})
        .group("team")
        .having("count(*) > 1")
        .order({"name": "asc"})
        .limit(10)
        .offset(20)
    )

    assert result is builder
    state = builder.select().state
    assert state.joins[0].type is JoinType.LEFT
    assert state.group == ["team"]
    assert len(state.having) == 1
    assert state.order == [("name", "ASC")]
    assert (state.limit, state.offset) == (10, 20)


def test_record_facade_chains_on_the_record(users) -> None:
    assert users.columns(["id"]).where({"id": 1}).order("id").limit(1).offset(0) is users
    assert users.reset("limit") is users
    assert users.reset() is users


def test_chained_clauses_reach_the_executed_select(users, users_sql) -> None:
    rows = users.columns(["id"]).where({"id": 42}).limit(5).fetch().to_list()

    assert [row["id"] for row in rows] == [42]
    state = users_sql.last_select.raw_state()
    assert state["columns"] == [(None, "id")]
    assert state["limit"] == 5
    (_, predicate), = state["where"].predicates
    assert (predicate.column, predicate.operator, predicate.value) == ("id", "=", 42)


def test_chaining_performs_no_io(users, users_sql) -> None:
    users.columns(["id"]).where({"status": "active"}).order("name").limit(3)

    assert users_sql.prepared == []
    assert users_sql.executed == []


@pytest.mark.parametrize("value", [-1, 1.5, "10", True])
def test_invalid_limit_and_offset_raise(builder, value) -> None:
    with pytest.raises(ValueError):
        builder.limit(value)
    with pytest.raises(ValueError):
        builder.offset(value)


def test_invalid_order_direction_raises(builder) -> None:
    with pytest.raises(ValueError, match="ASC or DESC"):
        builder.order("name SIDEWAYS")
