from typer.testing import CliRunner

from activerecord import config
from activerecord.infrastructure.db_factory import build_dsn
from activerecord.main import app
from activerecord.reporter import build_records_table
from scripts import seed_users

runner = CliRunner()


def test_get_settings_defaults():
    settings = config.Settings(_env_file=None)
    assert settings.db_host == "localhost"
    assert settings.db_port == 5432
    assert settings.db_user == "postgres"
    assert settings.db_name == "activerecord"
    assert settings.db_statement_timeout_ms == 0
    assert settings.log_json is False


def test_settings_read_environment_aliases(monkeypatch):
    monkeypatch.setenv("DB_NAME", "inventory")
    monkeypatch.setenv("DB_PORT", "6543")
    settings = config.Settings(_env_file=None)
    assert settings.db_name == "inventory"
    assert settings.db_port == 6543


def test_build_dsn_uses_settings(monkeypatch):
    monkeypatch.setattr(
        "activerecord.infrastructure.db_factory.get_settings",
        lambda: config.Settings(db_user="app", db_password="secret", db_host="db", db_port=5433, db_name="crm"),
    )
    assert build_dsn() == "postgresql://app:secret@db:5433/crm"


def test_records_table_merges_columns_in_first_seen_order():
    table = build_records_table([{"id": 1, "name": "Ann"}, {"id": 2, "team": None}], title="users")
    assert [column.header for column in table.columns] == ["id", "name", "team"]
    assert table.row_count == 2
    assert table.caption == "2 row(s)"


def test_generate_users_is_deterministic():
    first = seed_users._generate_users(5, seed=123)
    second = seed_users._generate_users(5, seed=123)
    assert first == second
    assert [user[0] for user in first] == [1, 2, 3, 4, 5]
    assert all(user[3] in seed_users.STATUSES for user in first)


def test_fetch_explain_prints_sql_without_connecting():
    result = runner.invoke(
        app,
        ["fetch", "users", "-c", "id", "-c", "name", "-w", "status=active", "-o", "name DESC", "-l", "5", "--explain"],
    )
    assert result.exit_code == 0, result.output
    assert result.output.strip() == (
        'SELECT "users"."id", "users"."name" FROM "users" WHERE "status" = %s ORDER BY "name" DESC LIMIT %s'
    )


def test_fetch_rejects_malformed_where():
    result = runner.invoke(app, ["fetch", "users", "-w", "status", "--explain"])
    assert result.exit_code != 0
