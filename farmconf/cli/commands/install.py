"""Install command - write search settings to the local web applications.

Steps:
1. Discover the web applications hosted on this node
2. Select the ones to configure (all are preselected)
3. Collect the search appliance parameters
4. Write the parameters into each selected application's config file
"""

import errno
from pathlib import Path
from typing import Annotated

from rich.console import Console
import typer

from ...bootstrap import create_runtime
from ...domain.exceptions import PropagationError
from ...domain.model import OperatingMode, WorkflowOutcome
from ..errors import CLIError, handle_cli_errors, PermissionError
from ..main import GlobalOptions
from ..services import ConsoleWorkflowUI, get_all_parameters, parse_assignments

app = typer.Typer(
    name="install",
    help="Write search settings to the web applications hosted on this node",
    invoke_without_command=True,
)

console = Console()


def _split_keys(value: str | None) -> list[str]:
    if not value:
        return []
    return [key.strip() for key in value.split(",") if key.strip()]


def _propagation_error(error: PropagationError) -> CLIError:
    """Translate a failed write into a CLI error listing what was already written."""
    cause = error.__cause__
    while cause is not None:
        if isinstance(cause, OSError) and cause.errno in (errno.EACCES, errno.EPERM):
            return PermissionError(error.path, "write")
        cause = cause.__cause__

    if error.written:
        reason = "Already updated (not rolled back):\n" + "\n".join(f"  {path}" for path in error.written)
    else:
        reason = "No config file was changed."
    return CLIError(
        message=f"Could not write {error.path} for '{error.instance_name}': {error.reason}",
        reason=reason,
        suggestions=[
            "Fix the problem and run 'farmconf install' again; files already updated are rewritten",
        ],
    )


@app.callback(invoke_without_command=True)
@handle_cli_errors
def install_command(
    ctx: typer.Context,
    non_interactive: Annotated[
        bool,
        typer.Option("--non-interactive", "-y", help="Run without prompts, using --set values and defaults"),
    ] = False,
    select_all: Annotated[
        bool,
        typer.Option("--all", help="Configure every local web application"),
    ] = False,
    instances_opt: Annotated[
        str | None,
        typer.Option("--instances", help="Comma-separated web application names or paths"),
    ] = None,
    set_values: Annotated[
        list[str] | None,
        typer.Option("--set", help="Parameter value as name=value (repeatable)"),
    ] = None,
    base_path: Annotated[
        str | None,
        typer.Option("--base-path", help="Installation base path recorded in each config file"),
    ] = None,
    node: Annotated[
        str | None,
        typer.Option("--node", "-n", help="Node name to discover for (default: this machine)"),
    ] = None,
    topology: Annotated[
        Path | None,
        typer.Option("--topology", "-t", help="Path to the farm topology file"),
    ] = None,
):
    """Write search settings to the web applications hosted on this node.

    Examples:
        farmconf install
        farmconf install -y --set appliance_url=http://gsa.corp.local
        farmconf install -y --instances Intranet --set appliance_url=http://gsa --set access_level=p
    """
    global_opts: GlobalOptions = ctx.obj if ctx.obj else GlobalOptions()

    try:
        values = parse_assignments(set_values or [])
    except ValueError as e:
        raise CLIError(
            message=str(e),
            suggestions=[f"Known parameters: {', '.join(p.name for p in get_all_parameters())}"],
        ) from e
    if base_path:
        values["base_path"] = base_path

    settings = global_opts.settings(node_name=node, topology_path=topology)
    runtime = create_runtime(settings)

    console.print(f"\n[bold]Step 1:[/bold] Discovering web applications on {settings.node_name}...")
    ui = ConsoleWorkflowUI(
        console,
        OperatingMode.INSTALL,
        interactive=not non_interactive,
        selected_keys=_split_keys(instances_opt),
        select_all=select_all,
        parameter_values=values,
        parameter_defaults=settings.parameters,
    )

    try:
        run = runtime.workflow_service.run(OperatingMode.INSTALL, ui)
    except PropagationError as e:
        raise _propagation_error(e) from e

    if run.discovery.no_local_instances:
        raise typer.Exit(1)
    if run.outcome is WorkflowOutcome.CANCELLED:
        console.print("\n[yellow]Cancelled. No config file was changed.[/yellow]")
        raise typer.Abort()

    console.print(f"\n[bold green]Configured {run.report.count} web applications.[/bold green]")
