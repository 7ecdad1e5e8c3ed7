"""
Seed script for the demo ``users`` table.

Creates the table if needed and loads deterministic pseudo-random rows with
Postgres COPY. Integration fixtures reuse the helpers below.
"""

from __future__ import annotations

import random
import sys
import time

import psycopg
import typer

from activerecord.infrastructure.db_factory import build_dsn

app = typer.Typer(help="Create and seed the demo users table.")

USERS_DDL = """
CREATE TABLE IF NOT EXISTS public.users (
    id BIGINT PRIMARY KEY,
    name TEXT NOT NULL,
    email TEXT NOT NULL,
    status TEXT NOT NULL DEFAULT 'pending',
    team TEXT
);
CREATE TABLE IF NOT EXISTS public.memberships (
    user_id BIGINT NOT NULL REFERENCES public.users (id) ON DELETE CASCADE,
    team TEXT NOT NULL,
    role TEXT NOT NULL,
    PRIMARY KEY (user_id, team)
);
"""

FIRST_NAMES = ["Ann", "Bob", "Cleo", "Dev", "Eli", "Fay", "Gus", "Hana"]
STATUSES = ["pending", "active", "suspended"]
TEAMS = ["core", "infra", "data"]


def _build_dsn(dsn_override: str | None) -> str:
    if dsn_override:
        return dsn_override
    return build_dsn()


def _generate_users(rows: int, seed: int) -> list[tuple]:
    rng = random.Random(seed)
    users = []
    for user_id in range(1, rows + 1):
        name = f"{rng.choice(FIRST_NAMES)} {user_id}"
        users.append(
            (
                user_id,
                name,
                f"user{user_id}@example.com",
                rng.choice(STATUSES),
                rng.choice(TEAMS),
            )
        )
    return users


def _create_schema(conn: psycopg.Connection) -> None:
    with conn.cursor() as cur:
        cur.execute(USERS_DDL)


def _copy_users(conn: psycopg.Connection, users: list[tuple]) -> int:
    with conn.cursor() as cur:
        with cur.copy("COPY public.users (id, name, email, status, team) FROM STDIN") as copy:
            for user in users:
                copy.write_row(user)
        with cur.copy("COPY public.memberships (user_id, team, role) FROM STDIN") as copy:
            for user in users:
                copy.write_row((user[0], user[4], "member"))
    return len(users)


def seed(dsn: str, rows: int, seed: int = 42, truncate: bool = True) -> int:
    with psycopg.connect(dsn) as conn:
        _create_schema(conn)
        if truncate:
            with conn.cursor() as cur:
                cur.execute("TRUNCATE public.users, public.memberships")
        loaded = _copy_users(conn, _generate_users(rows, seed))
        conn.commit()
    return loaded


@app.command()
def main(
    rows: int = typer.Option(
        100,
        "--rows",
        "-r",
        help="Number of users to generate.",
    ),
    seed_value: int = typer.Option(
        42,
        "--seed",
        help="Deterministic RNG seed.",
    ),
    dsn: str | None = typer.Option(
        None,
        "--dsn",
        help="Optional DSN override for Postgres.",
    ),
    keep: bool = typer.Option(
        False,
        "--keep",
        help="Keep existing rows instead of truncating first.",
    ),
) -> None:
    """
    Create the users table and load generated rows using COPY.
    """
    start = time.perf_counter()
    typer.echo(f"Seeding {rows:,} users (seed={seed_value})")
    loaded = seed(_build_dsn(dsn), rows=rows, seed=seed_value, truncate=not keep)
    typer.echo(f"Loaded {loaded:,} users in {time.perf_counter() - start:.2f}s.")


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)
