"""Flowdex CLI entrypoint."""

from __future__ import annotations
import sys
from pathlib import Path
from typing import Annotated
import click
import typer
from rich.console import Console
from flowdex.catalog import CatalogService, get_catalog_service
from flowdex.cli.catalog import catalog_app
from flowdex.cli.state import CLIState
from flowdex.config import get_settings


app = typer.Typer(help="Index and search a library of automation workflows.")
app.add_typer(catalog_app, name="catalog")


@app.callback()
def main(
    ctx: typer.Context,
    workflows_dir: Annotated[
        Path | None,
        typer.Option(
            "--workflows-dir",
            help="Corpus root; defaults to FLOWDEX_WORKFLOWS_DIR.",
            file_okay=False,
        ),
    ] = None,
) -> None:
    """Configure shared CLI state."""
    console = Console()
    try:
        if workflows_dir is None:
            service = get_catalog_service()
        else:
            settings = get_settings()
            service = CatalogService.from_directory(
                workflows_dir,
                max_workers=settings.index_max_workers,
                build_timeout=settings.index_build_timeout_seconds,
                max_file_bytes=settings.index_max_file_bytes,
                default_limit=settings.search_default_limit,
            )
    except ValueError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1) from exc
    ctx.obj = CLIState(service=service, console=console)


@app.command("serve")
def serve(
    ctx: typer.Context,
    host: Annotated[
        str | None, typer.Option("--host", help="Interface to bind.")
    ] = None,
    port: Annotated[int | None, typer.Option("--port", help="Port to bind.")] = None,
) -> None:
    """Run the catalog HTTP API with uvicorn."""
    import uvicorn
    from flowdex_backend.app import create_app

    state: CLIState = ctx.ensure_object(CLIState)
    settings = get_settings()
    uvicorn.run(
        create_app(state.service),
        host=host or settings.host,
        port=port if port is not None else settings.port,
    )


def run() -> None:
    """Entry point used by console scripts."""
    console = Console()
    try:
        exit_code = app(standalone_mode=False)
    except click.UsageError as exc:
        console.print(f"[red]Error:[/red] {exc.message}")
        if exc.ctx and exc.ctx.command_path:
            help_cmd = f"{exc.ctx.command_path} --help"
            console.print(f"\nRun '[cyan]{help_cmd}[/cyan]' for usage information.")
        sys.exit(1)
    if isinstance(exit_code, int) and exit_code:
        sys.exit(exit_code)


__all__ = ["app", "main", "run"]
