"""Catalog CLI commands."""

from __future__ import annotations
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Annotated
import typer
from rich.console import Console
from flowdex.catalog import CatalogError, CatalogService, InvalidWorkflowIdError
from flowdex.cli.output import render_json, render_list, render_table
from flowdex.cli.state import CLIState


catalog_app = typer.Typer(help="Search and inspect the workflow catalog.")

QueryArgument = Annotated[str, typer.Argument(help="Keywords to search for.")]
WorkflowIdArgument = Annotated[
    str, typer.Argument(help="Workflow id as shown by 'flowdex catalog search'.")
]
LimitOption = Annotated[
    int | None,
    typer.Option("--limit", "-n", min=1, help="Maximum number of results."),
]
TagOption = Annotated[
    list[str] | None,
    typer.Option("--tag", "-t", help="Require a tag containing this text."),
]
JsonOption = Annotated[
    bool, typer.Option("--json", help="Print machine-readable JSON output.")
]


def _state(ctx: typer.Context) -> tuple[CatalogService, Console]:
    state: CLIState = ctx.ensure_object(CLIState)
    return state.service, state.console


@contextmanager
def _catalog_errors(console: Console) -> Iterator[None]:
    try:
        yield
    except InvalidWorkflowIdError as exc:
        console.print(f"[red]Invalid workflow id:[/red] {exc.workflow_id}")
        raise typer.Exit(code=1) from exc
    except CatalogError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1) from exc


@catalog_app.command("search")
def search_workflows(
    ctx: typer.Context,
    query: QueryArgument = "",
    limit: LimitOption = None,
    tag: TagOption = None,
    as_json: JsonOption = False,
) -> None:
    """Rank catalog workflows for QUERY."""
    service, console = _state(ctx)
    with _catalog_errors(console):
        hits = service.search_catalog(query, limit=limit, required_tags=tag or [])

    if as_json:
        payload = [
            {"score": hit.score, **hit.workflow.model_dump(mode="json")}
            for hit in hits
        ]
        render_json(console, payload)
        return
    if not hits:
        console.print("No matching workflows.")
        return
    render_table(
        console,
        title=f"Catalog matches for {query!r}",
        columns=["Score", "Name", "Complexity", "Tags", "ID"],
        numeric=["Score"],
        rows=[
            [
                hit.score,
                hit.workflow.name,
                hit.workflow.complexity.value,
                ", ".join(hit.workflow.tags[:4]),
                hit.workflow.id,
            ]
            for hit in hits
        ],
    )


@catalog_app.command("show")
def show_workflow(ctx: typer.Context, workflow_id: WorkflowIdArgument) -> None:
    """Display metadata and the install plan for a workflow."""
    service, console = _state(ctx)
    with _catalog_errors(console):
        workflow = service.get_workflow(workflow_id)
    plan = service.build_install_plan(workflow)

    console.print(f"[bold]{workflow.name}[/bold] ({workflow.complexity.value})")
    console.print(workflow.description, markup=False)
    console.print(f"Path: {workflow.relative_path}", markup=False)
    console.print(f"Nodes: {workflow.node_count}")
    if workflow.tags:
        console.print(f"Tags: {', '.join(workflow.tags)}", markup=False)
    if plan.credential_checklist:
        render_list(console, title="Credentials", items=plan.credential_checklist)
    render_list(console, title="Install steps", items=plan.install_steps)
    render_list(console, title="Test steps", items=plan.test_steps)
    render_list(console, title="Risk notes", items=plan.risk_notes)


@catalog_app.command("raw")
def show_raw_workflow(ctx: typer.Context, workflow_id: WorkflowIdArgument) -> None:
    """Print the workflow definition JSON."""
    service, console = _state(ctx)
    with _catalog_errors(console):
        payload = service.read_workflow_json_by_id(workflow_id)
    render_json(console, payload)


@catalog_app.command("stats")
def show_stats(ctx: typer.Context, as_json: JsonOption = False) -> None:
    """Summarise the indexed corpus."""
    service, console = _state(ctx)
    with _catalog_errors(console):
        stats = service.catalog_stats()
        snapshot = service.get_catalog_snapshot()

    if as_json:
        render_json(console, stats.model_dump(mode="json"))
        return
    console.print(f"Corpus: {service.root}", markup=False)
    console.print(f"Workflows: {stats.workflows} (skipped {stats.skipped})")
    render_table(
        console,
        title="Complexity",
        columns=["Level", "Workflows"],
        numeric=["Workflows"],
        rows=[[level, count] for level, count in stats.complexity.items()],
    )
    if stats.top_tags:
        render_table(
            console,
            title="Top tags",
            columns=["Tag", "Workflows"],
            numeric=["Workflows"],
            rows=[[tag, count] for tag, count in stats.top_tags],
        )
    if snapshot.skipped:
        render_table(
            console,
            title="Skipped files",
            columns=["Path", "Reason"],
            rows=[[item.relative_path, item.reason] for item in snapshot.skipped],
        )


@catalog_app.command("rewrite")
def rewrite(ctx: typer.Context, query: QueryArgument) -> None:
    """Expand a free-text request into a keyword query with tag filters."""
    service, console = _state(ctx)
    result = service.rewrite_query(query)
    render_json(
        console,
        {
            "query": result.query,
            "required_tags": list(result.required_tags),
            "keywords": list(result.keywords),
            "notes": result.notes,
        },
        title="Query rewrite",
    )


__all__ = ["catalog_app"]
