"""
todosync CLI - Sync command.

Fetches todos by id from the remote API and upserts them into the local
database, optionally with several requests in flight at once.
"""

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from todosync.cli.errors import (
    ExitCode,
    handle_error,
    print_error,
    print_invalid_concurrency_error,
)
from todosync.cli.state import get_state
from todosync.core.exceptions import TodoValidationError
from todosync.core.progress import TerminalProgressReporter
from todosync.core.sync import ConcurrencyPolicy, SyncOutcome, run_sync
from todosync.core.todos.models import validate_positive_id

console = Console()


def _print_failures(outcome: SyncOutcome) -> None:
    table = Table(title=f"Failed ({outcome.failed})", show_header=True, header_style="bold")
    table.add_column("ID", style="cyan", justify="right")
    table.add_column("Kind", style="yellow")
    table.add_column("Reason")

    for failure in outcome.failures:
        table.add_row(str(failure.todo_id), failure.kind.value, escape(failure.message))

    console.print(table)


def sync(
    ctx: typer.Context,
    ids: list[int] = typer.Argument(
        None,
        help="Ids of the todos to fetch",
        show_default=False,
    ),
    concurrency: str | None = typer.Option(
        None,
        "--concurrency",
        "-c",
        help="Requests in flight at once: a positive integer or 'unbounded' "
        "(default from config, normally 1)",
    ),
) -> None:
    """
    Fetch todos from the API and save them to the local database.

    Existing todos with the same id are updated in place; new ids are
    inserted. A failure for one id does not stop the others.

    Examples:
        todosync sync 1 2 3                 # One at a time
        todosync sync 1 2 3 -c 2            # At most two requests at once
        todosync sync 1 2 3 -c unbounded    # All at once
    """
    state = get_state(ctx)
    token = concurrency if concurrency is not None else state.config.sync.default_concurrency

    try:
        policy = ConcurrencyPolicy.parse(token)
    except TodoValidationError as e:
        print_invalid_concurrency_error(str(e))
        raise typer.Exit(ExitCode.USER_ERROR)

    if not ids:
        console.print("❌ Please provide at least one todo ID to sync")
        return

    try:
        for todo_id in ids:
            validate_positive_id(todo_id)
    except TodoValidationError as e:
        print_error(str(e), solution="todosync sync 1 2 3")
        raise typer.Exit(ExitCode.USER_ERROR)

    console.print(f"📡 Syncing {len(ids)} todo(s) from API ({policy.describe()})...")

    try:
        outcome = run_sync(
            ids,
            policy,
            store=state.store,
            fetch_config=state.config.fetch,
            reporter=TerminalProgressReporter(console),
        )
    except KeyboardInterrupt:
        console.print("\n[yellow]Sync interrupted[/yellow]")
        raise typer.Exit(ExitCode.SIGINT)
    except Exception as e:
        handle_error(e, "sync", debug=state.debug)
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    if outcome.succeeded:
        console.print(
            f"🎉 Successfully synced {outcome.succeeded} todo(s) to local database!"
        )

    if outcome.failures:
        console.print()
        _print_failures(outcome)

    if outcome.cancelled:
        skipped = ", ".join(str(todo_id) for todo_id in outcome.skipped)
        console.print(f"[yellow]Interrupted, not started:[/yellow] {skipped}")
        raise typer.Exit(ExitCode.SIGINT)

    if outcome.failures:
        console.print(f"[red]{outcome.summary()}[/red]")
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    if outcome.duration_seconds is not None:
        console.print(f"[dim]Completed in {outcome.duration_seconds:.2f}s[/dim]")
