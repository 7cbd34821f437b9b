"""CLI errors with reasons and suggestions.

Commands are wrapped with :func:`handle_cli_errors`, which prints a
``CLIError`` in a panel on stderr and exits with its ``exit_code`` instead
of showing a traceback.
"""

from functools import wraps
from typing import Any, Callable, TypeVar

from rich.console import Console
from rich.panel import Panel
from rich.text import Text
import typer

F = TypeVar("F", bound=Callable[..., Any])

error_console = Console(stderr=True)


class CLIError(Exception):
    """User-facing CLI error.

    Attributes:
        message: One-line summary.
        reason: Optional explanation of what went wrong.
        suggestions: Steps the user can take to fix the problem.
        exit_code: Process exit code.
    """

    def __init__(
        self,
        message: str,
        reason: str | None = None,
        suggestions: list[str] | None = None,
        exit_code: int = 1,
    ):
        super().__init__(message)
        self.message = message
        self.reason = reason
        self.suggestions = suggestions or []
        self.exit_code = exit_code

    def format_message(self) -> str:
        lines = [self.message]
        if self.reason:
            lines.extend(["", self.reason])
        if self.suggestions:
            lines.extend(["", "Try:"])
            lines.extend(f"  - {suggestion}" for suggestion in self.suggestions)
        return "\n".join(lines)

    def render(self, console: Console | None = None) -> None:
        # paths and OS messages may contain square brackets, so no markup
        (console or error_console).print(
            Panel(Text(self.format_message()), title="Error", title_align="left", border_style="red")
        )


class PermissionError(CLIError):
    """A file could not be read or written."""

    def __init__(self, path: str, operation: str = "write"):
        super().__init__(
            message=f"Permission denied: cannot {operation} {path}",
            reason="The current user lacks access to this file or its directory.",
            suggestions=[
                "Run the command from an elevated shell",
                f"Check the permissions of {path}",
            ],
        )
        self.path = path
        self.operation = operation


def handle_cli_errors(func: F) -> F:
    """Turn a ``CLIError`` raised by a command into an error panel and exit code."""

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except CLIError as e:
            e.render()
            raise typer.Exit(e.exit_code) from e

    return wrapper  # type: ignore[return-value]
