"""Runtime state shared across CLI commands."""

from __future__ import annotations
from dataclasses import dataclass
from rich.console import Console
from flowdex.catalog import CatalogService


@dataclass(slots=True)
class CLIState:
    """Object stored on :class:`typer.Context` for command access."""

    service: CatalogService
    console: Console


__all__ = ["CLIState"]
