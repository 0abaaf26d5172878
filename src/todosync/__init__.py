"""
todosync - local todo manager with concurrent API sync

A CLI tool that keeps todos in a local SQLite database and pulls todos from a
remote JSON API with bounded concurrency and retry.
"""

__version__ = "0.1.0"

# Re-export core models for convenience
from todosync.core.config.models import TodoSyncConfig
from todosync.core.todos.models import Todo

__all__ = ["TodoSyncConfig", "Todo", "__version__"]
