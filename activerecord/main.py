from __future__ import annotations

import sys
from typing import Dict, List, Optional

import typer

from activerecord.config import get_settings
from activerecord.infrastructure.adapter import Adapter
from activerecord.record.active_record import ActiveRecord
from activerecord.reporter import print_pairs, print_records
from activerecord.sql.identifier import TableIdentifier
from activerecord.utils.logging import configure_logging

app = typer.Typer(help="Active Record CLI for ad-hoc table reads.")


def _parse_conditions(conditions: Optional[List[str]]) -> Dict[str, str]:
    parsed: Dict[str, str] = {}
    for condition in conditions or []:
        column, sep, value = condition.partition("=")
        if not sep or not column.strip():
            raise typer.BadParameter(f"Expected COLUMN=VALUE, got {condition!r}", param_hint="--where")
        parsed[column.strip()] = value
    return parsed


def _record(table: str, schema: Optional[str], primary_key: List[str], adapter: Adapter) -> ActiveRecord:
    target = TableIdentifier(table, schema) if schema else table
    return ActiveRecord(primary_key, target, adapter)


@app.callback()
def setup() -> None:
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"DB={settings.db_user}@{settings.db_host}:{settings.db_port}/{settings.db_name} | "
        f"statement_timeout_ms={settings.db_statement_timeout_ms} | env={settings.app_env}"
    )


@app.command()
def load(
    table: str = typer.Argument(..., help="Table to read from."),
    values: List[str] = typer.Argument(..., help="Primary key values, in key column order."),
    primary_key: List[str] = typer.Option(["id"], "--pk", "-k", help="Primary key column (repeat for composite keys)."),
    schema: Optional[str] = typer.Option(None, "--schema", help="Schema of the table."),
) -> None:
    """
    Load one row by primary key.
    """
    with Adapter() as adapter:
        record = _record(table, schema, primary_key, adapter).load(*values)
        print_records([record] if record is not None else [], title=f"{table} {tuple(values)}")


@app.command()
def fetch(
    table: str = typer.Argument(..., help="Table to read from."),
    columns: Optional[List[str]] = typer.Option(None, "--column", "-c", help="Column to project (repeatable)."),
    where: Optional[List[str]] = typer.Option(None, "--where", "-w", help="COLUMN=VALUE equality filter (repeatable)."),
    order: Optional[str] = typer.Option(None, "--order", "-o", help='Order specification, e.g. "name DESC".'),
    limit: Optional[int] = typer.Option(None, "--limit", "-l", min=0),
    offset: Optional[int] = typer.Option(None, "--offset", min=0),
    primary_key: List[str] = typer.Option(["id"], "--pk", "-k", help="Primary key column (repeat for composite keys)."),
    schema: Optional[str] = typer.Option(None, "--schema", help="Schema of the table."),
    explain: bool = typer.Option(False, "--explain", help="Print the SQL instead of running it."),
) -> None:
    """
    Fetch rows matching simple equality filters.
    """
    conditions = _parse_conditions(where)
    with Adapter() as adapter:
        record = _record(table, schema, primary_key, adapter)
        if columns:
            record.columns(columns)
        if conditions:
            record.where(conditions)
        if order:
            record.order(order)
        if limit is not None:
            record.limit(limit)
        if offset is not None:
            record.offset(offset)

        if explain:
            typer.echo(record.sql.build_sql_string(record.select()))
            return

        print_records(record.fetch(), title=table)


@app.command()
def pairs(
    table: str = typer.Argument(..., help="Table to read from."),
    key_column: str = typer.Argument(..., help="Column used as key."),
    value_column: str = typer.Argument(..., help="Column used as value."),
    where: Optional[List[str]] = typer.Option(None, "--where", "-w", help="COLUMN=VALUE equality filter (repeatable)."),
    primary_key: List[str] = typer.Option(["id"], "--pk", "-k"),
    schema: Optional[str] = typer.Option(None, "--schema", help="Schema of the table."),
) -> None:
    """
    Fetch KEY_COLUMN -> VALUE_COLUMN pairs.
    """
    conditions = _parse_conditions(where)
    with Adapter() as adapter:
        record = _record(table, schema, primary_key, adapter)
        if conditions:
            record.where(conditions)
        print_pairs(record.fetch_pairs(key_column, value_column), key_column, value_column)


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
