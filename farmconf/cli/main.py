"""farmconf command line interface.

Commands:
    discover   List the web applications hosted on this node
    install    Select web applications and write search settings to their web.config
    edit       Review web applications and their config files
    configure  Write the farmconf settings file
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Any

import typer

from ..config import FarmconfSettings, load_settings
from ..domain.exceptions import ConfigurationError
from ..logging_config import setup_logging
from .errors import CLIError


@dataclass
class GlobalOptions:
    """Options shared by all commands."""

    config: Path | None = None
    log_level: str | None = None
    json_logs: bool = False

    def settings(self, **overrides: Any) -> FarmconfSettings:
        """Load settings with command-line overrides and configure logging.

        Raises:
            CLIError: The settings file or an override is invalid.
        """
        logging_overrides: dict[str, Any] = {}
        if self.log_level:
            logging_overrides["level"] = self.log_level
        if self.json_logs:
            logging_overrides["json_format"] = True
        if logging_overrides:
            overrides["logging"] = logging_overrides

        try:
            settings = load_settings(self.config, **overrides)
        except ConfigurationError as e:
            raise CLIError(
                message="Invalid farmconf settings",
                reason=e.message,
                suggestions=["Fix the settings file or run 'farmconf configure'"],
            ) from e

        setup_logging(settings.log_level, json_format=settings.json_logs)
        return settings


app = typer.Typer(
    name="farmconf",
    help="Discover farm web applications on this node and propagate configuration to them",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    ctx: typer.Context,
    config: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Path to the farmconf settings file"),
    ] = None,
    log_level: Annotated[
        str | None,
        typer.Option("--log-level", help="Log level: DEBUG, INFO, WARNING, ERROR"),
    ] = None,
    json_logs: Annotated[
        bool,
        typer.Option("--json-logs", help="Emit JSON log lines on stderr"),
    ] = False,
):
    """Discover farm web applications on this node and propagate configuration to them."""
    ctx.obj = GlobalOptions(config=config, log_level=log_level, json_logs=json_logs)


def _register_commands() -> None:
    from .commands import configure, discover, edit, install

    app.add_typer(discover.app)
    app.add_typer(install.app)
    app.add_typer(edit.app)
    app.add_typer(configure.app)


_register_commands()


def main() -> None:
    app()


if __name__ == "__main__":
    main()
