"""
Shared state handed from the root callback to every command.
"""

from dataclasses import dataclass

import typer

from todosync.core.config import TodoSyncConfig
from todosync.core.todos import TodoStore


@dataclass
class CliState:
    """Objects resolved once per invocation from global options and config."""

    debug: bool
    config: TodoSyncConfig
    store: TodoStore


def get_state(ctx: typer.Context) -> CliState:
    """Return the state stored on the root context by the app callback."""
    state = ctx.find_root().obj
    if not isinstance(state, CliState):
        raise RuntimeError("todosync commands must be invoked through the root app")
    return state
