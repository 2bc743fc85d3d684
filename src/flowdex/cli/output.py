"""Output helpers for rendering catalog data in the CLI."""

from __future__ import annotations
from collections.abc import Collection, Iterable, Sequence
from typing import Any
from rich.console import Console
from rich.table import Table
from rich.text import Text


def render_table(
    console: Console,
    *,
    title: str,
    columns: Sequence[str],
    rows: Iterable[Sequence[Any]],
    numeric: Collection[str] = (),
) -> None:
    """Render ``rows`` under ``columns``; ``numeric`` columns align right."""
    table = Table(title=title, title_justify="left")
    for column in columns:
        table.add_column(column, justify="right" if column in numeric else "left")
    for row in rows:
        table.add_row(*(str(cell) for cell in row))
    console.print(table)


def render_json(console: Console, payload: Any, *, title: str | None = None) -> None:
    """Print ``payload`` as indented JSON, optionally under a bold heading."""
    if title:
        console.print(Text(title, style="bold"))
    console.print_json(data=payload, ensure_ascii=False)


def render_list(console: Console, *, title: str, items: Sequence[str]) -> None:
    """Render a numbered list under a bold heading."""
    console.print(Text(title, style="bold"))
    for position, item in enumerate(items, start=1):
        console.print(f"  {position}. {item}", markup=False)


__all__ = ["render_json", "render_list", "render_table"]
