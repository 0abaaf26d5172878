"""
todosync CLI - Main application entry point.

Sets up the Typer application, resolves configuration once in the root
callback and registers the todo and sync commands.
"""

import logging
import sys
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console

from todosync import __version__
from todosync.cli import sync, todos
from todosync.cli.errors import ExitCode, print_error
from todosync.cli.state import CliState
from todosync.core.config import load_config, load_layered_env
from todosync.core.todos import TodoStore
from todosync.core.todos.models import describe_validation_error

PANEL_TODOS = "Manage Local Todos"
PANEL_SYNC = "Sync from the API"

app = typer.Typer(
    name="todosync",
    help="Manage todos in a local database and sync them from a remote API",
    no_args_is_help=True,
    context_settings={"help_option_names": ["--help", "-h"]},
)

console = Console()


def setup_logging(debug: bool = False) -> None:
    """
    Configure logging for all commands.

    Args:
        debug: If True, enable DEBUG level logging
    """
    level = logging.DEBUG if debug else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"todosync version {__version__}")
        raise typer.Exit(0)


@app.callback()
def main(
    ctx: typer.Context,
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug output with detailed logging",
    ),
    db: Path | None = typer.Option(
        None,
        "--db",
        help="Database file to use instead of the configured one",
        dir_okay=False,
    ),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show todosync version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """
    todosync - local todo manager with concurrent API sync.

    Quick Start:
        todosync init                       # Create the database with samples
        todosync list                       # Show all local todos
        todosync create 1 "Buy milk"        # Add a todo for user 1
        todosync sync 1 2 3 -c 2            # Fetch todos 1-3, two at a time

    Configuration:
        .todosync.json                      # Project config
        ~/.config/todosync/config.json      # User config
        TODOSYNC_DB_PATH, TODOSYNC_API_URL  # Environment overrides
    """
    # Precedence: OS env > project .env > user .env
    load_layered_env()
    setup_logging(debug)

    try:
        config = load_config()
    except ValidationError as e:
        print_error(
            "Invalid configuration",
            reason=describe_validation_error(e),
            solution="Fix .todosync.json or the TODOSYNC_* environment variables",
        )
        raise typer.Exit(ExitCode.USER_ERROR)

    db_path = db if db is not None else Path(config.database.path)
    ctx.obj = CliState(debug=debug, config=config, store=TodoStore(db_path))


# =============================================================================
# Manage Local Todos
# =============================================================================

app.command(name="init", rich_help_panel=PANEL_TODOS)(todos.init)
app.command(name="get", rich_help_panel=PANEL_TODOS)(todos.get)
app.command(name="list", rich_help_panel=PANEL_TODOS)(todos.list_todos)
app.command(name="create", rich_help_panel=PANEL_TODOS)(todos.create)
app.command(name="clear", rich_help_panel=PANEL_TODOS)(todos.clear)

# =============================================================================
# Sync from the API
# =============================================================================

app.command(name="sync", rich_help_panel=PANEL_SYNC)(sync.sync)


def cli_main() -> None:
    """Main CLI entry point."""
    app()


__all__ = ["app", "cli_main", "setup_logging"]
