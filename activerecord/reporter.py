from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Dict, Iterable, List, Optional

from rich import box
from rich.console import Console
from rich.table import Table


def _row_dict(row: Any) -> Dict[str, Any]:
    if isinstance(row, Mapping):
        return dict(row)
    if hasattr(row, "to_dict"):
        return row.to_dict()
    raise TypeError(f"Cannot render row of type {type(row).__name__}")


def build_records_table(rows: Iterable[Any], title: str = "Records") -> Table:
    """
    Build a rich table from populated records or plain row mappings.

    Columns follow the first-seen order across all rows; missing values render
    as an empty cell.
    """
    data: List[Dict[str, Any]] = [_row_dict(row) for row in rows]

    columns: List[str] = []
    for item in data:
        for column in item:
            if column not in columns:
                columns.append(column)

    table = Table(
        title=title,
        box=box.ROUNDED,
        caption=f"{len(data)} row(s)",
    )
    for column in columns:
        table.add_column(column, style="cyan" if column == columns[0] else None)

    for item in data:
        table.add_row(*("" if item.get(c) is None else str(item[c]) for c in columns))

    return table


def print_records(rows: Iterable[Any], title: str = "Records", console: Optional[Console] = None) -> None:
    """Render records as a rich table."""
    console = console or Console()
    rows = list(rows)

    if not rows:
        console.print("[yellow]No rows matched.[/yellow]")
        return

    console.print(build_records_table(rows, title=title))


def print_pairs(pairs: Dict[Any, Any], key_column: str, value_column: str, console: Optional[Console] = None) -> None:
    console = console or Console()

    if not pairs:
        console.print("[yellow]No rows matched.[/yellow]")
        return

    table = Table(box=box.ROUNDED)
    table.add_column(key_column, style="cyan", no_wrap=True)
    table.add_column(value_column, style="magenta")
    for key, value in pairs.items():
        table.add_row(str(key), "" if value is None else str(value))
    console.print(table)


__all__ = ["build_records_table", "print_records", "print_pairs"]
