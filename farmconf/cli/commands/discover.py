"""Discover command - list the web applications hosted on this node."""

import json
from pathlib import Path
from typing import Annotated

from rich.console import Console
import typer

from ...bootstrap import create_runtime
from ..errors import handle_cli_errors
from ..main import GlobalOptions
from ..services import render_instances

app = typer.Typer(
    name="discover",
    help="List the web applications hosted on this node",
    invoke_without_command=True,
)

console = Console()


@app.callback(invoke_without_command=True)
@handle_cli_errors
def discover_command(
    ctx: typer.Context,
    node: Annotated[
        str | None,
        typer.Option("--node", "-n", help="Node name to discover for (default: this machine)"),
    ] = None,
    topology: Annotated[
        Path | None,
        typer.Option("--topology", "-t", help="Path to the farm topology file"),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Print the result as JSON"),
    ] = False,
):
    """List the web applications hosted on this node.

    Exits with status 1 when no local web application is found.

    Examples:
        farmconf discover
        farmconf discover --node srv01 --json
    """
    global_opts: GlobalOptions = ctx.obj if ctx.obj else GlobalOptions()
    settings = global_opts.settings(node_name=node, topology_path=topology)
    runtime = create_runtime(settings)

    result = runtime.workflow_service.discover()

    if json_output:
        data = {
            "node": result.node_name,
            "instances": [
                {**instance.to_dict(), "config_file": runtime.propagator.target_path(instance)}
                for instance in result.instances
            ],
            "issues": [
                {
                    "directory": issue.directory,
                    "candidate": issue.candidate,
                    "error_type": issue.error_type,
                    "message": issue.message,
                }
                for issue in result.issues
            ],
        }
        console.print_json(json.dumps(data))
    else:
        console.print(f"\n[bold]Web applications on {result.node_name}[/bold]")
        render_instances(console, result, runtime.propagator.target_path)

    if result.no_local_instances:
        raise typer.Exit(1)
