"""Shared CLI utilities: exit codes, banners and consoles."""

from enum import IntEnum
from typing import TYPE_CHECKING, Never

from rich.console import Console
from rich.panel import Panel

if TYPE_CHECKING:
    from ideaflow.idea import IdeaWorkflow


class ExitCode(IntEnum):
    """Standard exit codes for ideaflow CLI commands."""

    SUCCESS = 0
    LOAD_ERROR = 1
    VALIDATION_ERROR = 2
    NOT_FOUND = 3
    REMOTE_ERROR = 4
    INTERNAL_ERROR = 5


def get_console() -> Console:
    return Console()


def get_error_console() -> Console:
    """Get a Rich console configured for error output to stderr."""
    return Console(stderr=True)


def print_banners(workflow: "IdeaWorkflow", console: Console | None = None) -> None:
    """Show the workflow's inline success and error messages."""
    console = console or get_console()
    if workflow.success:
        console.print(Panel(workflow.success, style="green", title="Success"))
    if workflow.error:
        console.print(Panel(workflow.error, style="red", title="Error"))


def exit_with_error(
    message: str,
    code: ExitCode = ExitCode.INTERNAL_ERROR,
    *,
    console: Console | None = None,
) -> Never:
    """Print an error message and exit with the given code.

    Raises:
        SystemExit: Always.
    """
    (console or get_error_console()).print(f"[red]Error:[/red] {message}")
    raise SystemExit(code)
