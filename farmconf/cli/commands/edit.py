"""Edit command - review local web applications and their config files."""

from pathlib import Path
from typing import Annotated

from rich.console import Console
import typer

from ...bootstrap import create_runtime
from ...domain.model import OperatingMode, WorkflowOutcome
from ..errors import handle_cli_errors
from ..main import GlobalOptions
from ..services import ConsoleWorkflowUI

app = typer.Typer(
    name="edit",
    help="Review local web applications and the config files to edit",
    invoke_without_command=True,
)

console = Console()


@app.callback(invoke_without_command=True)
@handle_cli_errors
def edit_command(
    ctx: typer.Context,
    non_interactive: Annotated[
        bool,
        typer.Option("--non-interactive", "-y", help="Accept without prompting"),
    ] = False,
    node: Annotated[
        str | None,
        typer.Option("--node", "-n", help="Node name to discover for (default: this machine)"),
    ] = None,
    topology: Annotated[
        Path | None,
        typer.Option("--topology", "-t", help="Path to the farm topology file"),
    ] = None,
):
    """Show the local web applications with the path of each config file.

    Nothing is written; edit the listed files to change a single web
    application's settings.

    Examples:
        farmconf edit
        farmconf edit -y --node srv01
    """
    global_opts: GlobalOptions = ctx.obj if ctx.obj else GlobalOptions()
    settings = global_opts.settings(node_name=node, topology_path=topology)
    runtime = create_runtime(settings)

    console.print(f"\n[bold]Web applications on {settings.node_name}[/bold]")
    ui = ConsoleWorkflowUI(
        console,
        OperatingMode.EDIT,
        interactive=not non_interactive,
        select_all=True,
        config_path_for=runtime.propagator.target_path,
    )
    run = runtime.workflow_service.run(OperatingMode.EDIT, ui)

    if run.discovery.no_local_instances:
        raise typer.Exit(1)
    if run.outcome is WorkflowOutcome.CANCELLED:
        raise typer.Abort()
