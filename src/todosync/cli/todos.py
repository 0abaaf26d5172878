"""
todosync CLI - Local todo commands.

init, get, list, create and clear operate on the local database only.
"""

from typing import NoReturn

import typer
from rich.console import Console
from rich.markup import escape

from todosync.cli.errors import ExitCode, handle_error, print_error, print_store_error
from todosync.cli.state import get_state
from todosync.core.exceptions import StoreError, TodoNotFoundError, TodoValidationError

console = Console()

_TRUE_WORDS = {"true", "1", "yes", "y", "completed", "done"}
_FALSE_WORDS = {"false", "0", "no", "n", "pending"}


def parse_completed(value: str | None) -> bool:
    """
    Parse the optional COMPLETED argument of ``create``.

    Raises:
        TodoValidationError: If the word is not recognized
    """
    if value is None:
        return False
    word = value.strip().lower()
    if word in _TRUE_WORDS:
        return True
    if word in _FALSE_WORDS:
        return False
    raise TodoValidationError(
        f"Invalid completed value '{value}': use true/false or completed/pending",
        field="completed",
    )


def _fail(error: Exception, command_name: str, debug: bool) -> NoReturn:
    """Report a store or unexpected error and exit with GENERAL_ERROR."""
    if isinstance(error, StoreError):
        print_store_error(error)
    else:
        handle_error(error, command_name, debug=debug)
    raise typer.Exit(ExitCode.GENERAL_ERROR)


def init(ctx: typer.Context) -> None:
    """
    Create the database and seed sample todos if it is empty.

    Running init again never duplicates the sample todos.
    """
    state = get_state(ctx)
    try:
        seeded = state.store.initialize()
    except Exception as e:
        _fail(e, "init", state.debug)

    console.print("✅ Database initialized successfully!")
    if seeded:
        console.print(f"[dim]Added sample todos to {state.store.db_path}[/dim]")


def get(
    ctx: typer.Context,
    todo_id: int = typer.Argument(..., help="Id of the todo to show"),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Also show when the todo was created and last updated",
    ),
) -> None:
    """Show one todo from the local database."""
    state = get_state(ctx)
    try:
        record = state.store.get_record(todo_id)
    except TodoNotFoundError:
        console.print(f"❌ Todo {todo_id} not found in local database")
        return
    except Exception as e:
        _fail(e, "get", state.debug)

    console.print("💾 From Local Database:")
    console.print(escape(record.todo.pretty()), highlight=False)
    if verbose:
        console.print(f"[dim]Created:[/dim] {record.created_at}")
        console.print(f"[dim]Updated:[/dim] {record.updated_at}")


def list_todos(ctx: typer.Context) -> None:
    """List every todo in the local database."""
    state = get_state(ctx)
    try:
        todos = state.store.list_all()
    except Exception as e:
        _fail(e, "list", state.debug)

    if not todos:
        console.print("[yellow]No todos in local database[/yellow]")
        console.print("[dim]Run 'todosync init' or 'todosync sync <id>...' to add some[/dim]")
        return

    console.print("💾 All Todos from Local Database:")
    for todo in todos:
        console.print(escape(todo.pretty()), highlight=False)
        console.print("---")


def create(
    ctx: typer.Context,
    user_id: int = typer.Argument(..., help="Id of the owning user (positive)"),
    title: str = typer.Argument(..., help="Todo title (1-255 characters)"),
    completed: str | None = typer.Argument(
        None,
        help="true/false or completed/pending (default: pending)",
        show_default=False,
    ),
) -> None:
    """
    Create a todo in the local database.

    The database assigns the id.

    Examples:
        todosync create 1 "Buy milk"
        todosync create 2 "Write report" completed
    """
    state = get_state(ctx)
    try:
        todo = state.store.create(user_id, title, parse_completed(completed))
    except TodoValidationError as e:
        print_error(str(e), solution='todosync create 1 "A short title"')
        raise typer.Exit(ExitCode.USER_ERROR)
    except Exception as e:
        _fail(e, "create", state.debug)

    console.print("✅ Created new todo:")
    console.print(escape(todo.pretty()), highlight=False)


def clear(ctx: typer.Context) -> None:
    """Delete every todo from the local database."""
    state = get_state(ctx)
    try:
        removed = state.store.clear()
    except Exception as e:
        _fail(e, "clear", state.debug)

    console.print(f"✅ Cleared all todos ({removed} removed)")
