"""Configure command - write the farmconf settings file."""

import errno
from pathlib import Path
from typing import Annotated, Any

from rich.console import Console
import typer

from ...config import DEFAULT_CONFIG_PATH, FarmconfSettings, SettingsFileManager
from ...domain.exceptions import ConfigurationError
from ..errors import CLIError, handle_cli_errors, PermissionError
from ..main import GlobalOptions
from ..services import get_all_parameters, parse_assignments

app = typer.Typer(
    name="configure",
    help="Write node, topology and parameter defaults to the settings file",
    invoke_without_command=True,
)

console = Console()


@app.callback(invoke_without_command=True)
@handle_cli_errors
def configure_command(
    ctx: typer.Context,
    node: Annotated[
        str | None,
        typer.Option("--node", "-n", help="Node name to discover for"),
    ] = None,
    topology: Annotated[
        Path | None,
        typer.Option("--topology", "-t", help="Path to the farm topology file"),
    ] = None,
    config_filename: Annotated[
        str | None,
        typer.Option("--config-filename", help="Config file name inside each web application root"),
    ] = None,
    path_separator: Annotated[
        str | None,
        typer.Option("--path-separator", help="Path separator of the web application roots: / or \\"),
    ] = None,
    set_values: Annotated[
        list[str] | None,
        typer.Option("--set", help="Default install parameter as name=value (repeatable)"),
    ] = None,
    no_backup: Annotated[
        bool,
        typer.Option("--no-backup", help="Do not back up the existing settings file"),
    ] = False,
):
    """Write node, topology and parameter defaults to the settings file.

    Values not given are kept from the existing file.

    Examples:
        farmconf configure --node srv01 --topology /etc/farmconf/topology.yaml
        farmconf configure --set appliance_url=http://gsa.corp.local --set collection=intranet
    """
    global_opts: GlobalOptions = ctx.obj if ctx.obj else GlobalOptions()
    manager = SettingsFileManager(global_opts.config or DEFAULT_CONFIG_PATH)

    try:
        parameters = parse_assignments(set_values or [])
    except ValueError as e:
        raise CLIError(
            message=str(e),
            suggestions=[f"Known parameters: {', '.join(p.name for p in get_all_parameters())}"],
        ) from e

    try:
        data: dict[str, Any] = manager.load()
    except ConfigurationError as e:
        raise CLIError(
            message="Existing settings file is invalid",
            reason=e.message,
            suggestions=[f"Fix or remove {manager.config_path}"],
        ) from e

    updates = {
        "node_name": node,
        "topology_path": str(topology) if topology else None,
        "config_filename": config_filename,
        "path_separator": path_separator,
    }
    data.update({key: value for key, value in updates.items() if value is not None})
    if parameters:
        data["parameters"] = {**(data.get("parameters") or {}), **parameters}

    try:
        FarmconfSettings.from_dict(data)
    except ConfigurationError as e:
        raise CLIError(message="Invalid settings", reason=e.message) from e

    try:
        backup = None if no_backup else manager.backup()
        manager.save(data)
    except OSError as e:
        if e.errno in (errno.EACCES, errno.EPERM):
            raise PermissionError(str(manager.config_path), "write") from e
        raise CLIError(
            message=f"Could not write {manager.config_path}",
            reason=e.strerror or str(e),
            suggestions=["Check free disk space and that the parent directory is writable"],
        ) from e

    if backup:
        console.print(f"  [dim]Backed up previous settings to {backup}[/dim]")
    console.print(f"  [green]Settings written to {manager.config_path}[/green]")
