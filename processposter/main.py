"""processposter CLI.

Commands:
    processposter post     : Upload a file and post a new process for it
    processposter workflow : Inspect the workflow a process would spawn from
    processposter version  : Show version
"""

from __future__ import annotations

import asyncio
import json
from contextlib import nullcontext
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from processposter.utils import setup_logging

# Initialize logging on import
setup_logging()

app = typer.Typer(
    name="processposter",
    help="Post processes to a Capture API",
    no_args_is_help=True,
    rich_markup_mode="rich",
)
console = Console()
# Spinners, errors and warnings; stdout is reserved for results.
err_console = Console(stderr=True)


def _make_gateway(url: str | None, user: str | None, password: str | None):
    from processposter.gateway import CaptureGateway
    from processposter.tools.capture_api import CaptureApiClient

    return CaptureGateway(CaptureApiClient(base_url=url, username=user, password=password))


# ── processposter post ────────────────────────────────────────


@app.command()
def post(
    workflow_id: str = typer.Argument(..., help="Workflow to spawn the process from"),
    container_id: int = typer.Argument(..., help="Portal to post the process to"),
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Local file for the process"),
    url: str = typer.Option(None, "--url", help="Capture API URL (default: CAPTURE_API_URL)"),
    user: str = typer.Option(None, "--user", "-u", help="Authorizing user"),
    password: str = typer.Option(None, "--password", "-p", help="Password for the user"),
    as_json: bool = typer.Option(False, "--json", help="Print the stored process as JSON"),
):
    """📤 Upload a file and post a new process for it."""
    asyncio.run(_post(workflow_id, container_id, file, url, user, password, as_json))


async def _post(
    workflow_id: str,
    container_id: int,
    file: Path,
    url: str | None,
    user: str | None,
    password: str | None,
    as_json: bool,
):
    from processposter.errors import CaptureError

    gateway = _make_gateway(url, user, password)
    try:
        spinner = err_console.status(f"[dim]Posting {file.name}...[/]", spinner="dots")
        with nullcontext() if as_json else spinner:
            process = await gateway.create_process(workflow_id, container_id, file)
    except CaptureError as e:
        err_console.print(f"[red]✗ {e.phase.value}: {e.message}[/]")
        if e.uploaded_path:
            err_console.print(f"[dim]Uploaded file left at {e.uploaded_path}[/]")
        raise typer.Exit(code=1)
    finally:
        await gateway.close()

    if as_json:
        typer.echo(json.dumps(process.to_wire(), indent=2))
        return

    table = Table(title="Process posted", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="white")
    table.add_row("ID", str(process.id))
    table.add_row("Workflow", f"{process.workflow_name} ({process.workflow_id})")
    table.add_row("Current node", process.current_node)
    table.add_row("Status", process.status.name)
    table.add_row("BatchID", process.batch_id or "")
    table.add_row("FilePath", process.file_path or "")
    console.print(table)


# ── processposter workflow ────────────────────────────────────


@app.command()
def workflow(
    workflow_id: str = typer.Argument(..., help="Workflow to inspect"),
    container_id: int = typer.Argument(..., help="Portal the workflow belongs to"),
    url: str = typer.Option(None, "--url", help="Capture API URL (default: CAPTURE_API_URL)"),
    user: str = typer.Option(None, "--user", "-u", help="Authorizing user"),
    password: str = typer.Option(None, "--password", "-p", help="Password for the user"),
):
    """🔎 Show a workflow's nodes and default properties."""
    asyncio.run(_workflow(workflow_id, container_id, url, user, password))


async def _workflow(
    workflow_id: str,
    container_id: int,
    url: str | None,
    user: str | None,
    password: str | None,
):
    from processposter.errors import CaptureError
    from processposter.models.property import ReservedProperty
    from processposter.models.workflow import INITIATOR_CATEGORY

    gateway = _make_gateway(url, user, password)
    try:
        snapshot = await gateway.fetch_workflow(workflow_id, container_id)
    except CaptureError as e:
        err_console.print(f"[red]✗ {e.phase.value}: {e.message}[/]")
        raise typer.Exit(code=1)
    finally:
        await gateway.close()

    console.print(f"[bold cyan]{snapshot.name}[/] [dim]({snapshot.id})[/]")

    nodes = Table(title="Nodes")
    nodes.add_column("Node", style="cyan")
    nodes.add_column("Category")
    for key, node in snapshot.nodes.items():
        marker = " [green]← initiator[/]" if node.category == INITIATOR_CATEGORY else ""
        nodes.add_row(key, node.category + marker)
    console.print(nodes)

    props = Table(title="Properties")
    props.add_column("ID", justify="right")
    props.add_column("Name", style="cyan")
    props.add_column("Type", justify="right")
    props.add_column("Default")
    for prop in snapshot.properties:
        reserved = any(slot.matches(prop) for slot in ReservedProperty)
        name = f"[bold]{prop.name}[/] [green](reserved)[/]" if reserved else prop.name
        props.add_row(str(prop.id), name, str(prop.type), prop.value or "")
    console.print(props)

    try:
        snapshot.initiator_node()
    except CaptureError as e:
        err_console.print(f"[yellow]⚠ {e.message}[/]")
    for slot in ReservedProperty:
        if not any(slot.matches(prop) for prop in snapshot.properties):
            err_console.print(f"[yellow]⚠ Missing reserved property {slot.prop_name} (id {slot.prop_id})[/]")


# ── processposter version ─────────────────────────────────────


@app.command()
def version():
    """📦 Show processposter version."""
    from processposter import __version__
    console.print(f"[bold cyan]processposter[/] v{__version__}")


# ── Entry point ───────────────────────────────────────────────

if __name__ == "__main__":
    app()
