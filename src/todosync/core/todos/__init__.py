"""
Todo domain: models, local storage and the remote fetcher.

Example:
    >>> from todosync.core.todos import TodoStore
    >>> store = TodoStore(Path("todos.db"))
    >>> store.initialize()
    >>> [todo.title for todo in store.list_all()]
"""

from todosync.core.todos.models import CompletionStatus, StoredTodo, Todo
from todosync.core.todos.store import TodoStore

__all__ = [
    "CompletionStatus",
    "StoredTodo",
    "Todo",
    "TodoStore",
]
