"""
Standardized error handling and exit codes for the todosync CLI.

Provides consistent error messages with actionable guidance and the exit
codes used across all commands.
"""

import traceback
from enum import IntEnum

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

from todosync.core.exceptions import TodoSyncError

console = Console()


class ExitCode(IntEnum):
    """Standard exit codes for todosync operations."""

    SUCCESS = 0
    """Operation completed successfully."""

    GENERAL_ERROR = 1
    """Store or network failure, or a sync with failed items."""

    USER_ERROR = 2
    """Invalid input such as a bad title, id or concurrency token."""

    SIGINT = 130
    """Terminated by SIGINT (Ctrl+C) - Unix standard."""


def print_error(
    problem: str,
    *,
    reason: str | None = None,
    solution: str | None = None,
) -> None:
    """
    Print a standardized error message with actionable guidance.

    Args:
        problem: Brief description of what went wrong
        reason: Optional explanation of why it happened
        solution: Optional command or action to fix it

    Example:
        >>> print_error(
        ...     "Invalid concurrency 'abc'",
        ...     solution="todosync sync 1 2 3 --concurrency 4",
        ... )
    """
    console.print(f"[red]Error:[/red] {escape(problem)}", highlight=False)

    if reason:
        console.print(f"[dim]{reason}[/dim]")

    if solution:
        console.print(f"[cyan]→ Try:[/cyan] {solution}")


def handle_error(error: Exception, command_name: str, *, debug: bool = False) -> None:
    """
    Display an unexpected or infrastructure error in a panel.

    Args:
        error: The exception that was raised
        command_name: Name of the command that failed
        debug: If True, print the full traceback
    """
    error_text = Text()
    if isinstance(error, TodoSyncError):
        error_text.append("Error: ", style="bold red")
        error_text.append(str(error))

        if error.context:
            error_text.append("\n\nContext:\n", style="dim")
            for key, value in error.context.items():
                error_text.append(f"  {key}: ", style="cyan")
                error_text.append(f"{value}\n", style="white")
        title = "[bold red]Error[/bold red]"
    else:
        error_text.append("Unexpected error in ", style="bold red")
        error_text.append(command_name, style="bold yellow")
        error_text.append(": ", style="bold red")
        error_text.append(str(error))
        title = "[bold red]Unexpected Error[/bold red]"

    console.print()
    console.print(Panel(error_text, title=title, border_style="red", expand=False))

    if debug:
        console.print("\n[dim]Full traceback:[/dim]")
        console.print(traceback.format_exc(), markup=False, highlight=False)
    else:
        console.print("[dim]Run with --debug for full traceback[/dim]")


def print_invalid_concurrency_error(message: str) -> None:
    """Print error when the --concurrency token is rejected."""
    print_error(
        message,
        reason="Concurrency is a positive whole number or the word 'unbounded'",
        solution="todosync sync 1 2 3 --concurrency 4  # or --concurrency unbounded",
    )


def print_store_error(error: TodoSyncError) -> None:
    """Print error when the local database cannot be used."""
    print_error(
        str(error),
        reason="The local database could not be read or written",
        solution="todosync --db <path> init  # to use or create another database",
    )


__all__ = [
    "ExitCode",
    "print_error",
    "handle_error",
    "print_invalid_concurrency_error",
    "print_store_error",
]
