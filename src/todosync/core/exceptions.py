"""
Exceptions for todosync.

Every error raised by the core carries an ``ErrorKind`` discriminator so
callers can branch on a closed set of failure kinds instead of probing
exception types one at a time.

Exception Hierarchy:
    TodoSyncError (base)
    ├── TodoValidationError (bad input, raised before any I/O)
    ├── TodoNotFoundError (point lookup miss)
    ├── StoreError (persistence failures)
    └── FetchError (remote retrieval failures)

Example:
    >>> from todosync.core.exceptions import ErrorKind, FetchError
    >>> try:
    ...     raise FetchError(42, "HTTP 404")
    ... except FetchError as e:
    ...     assert e.kind is ErrorKind.FETCH
    ...     print(e)
    Failed to fetch todo 42: HTTP 404
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Closed set of error kinds surfaced by the core."""

    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    STORE = "store"
    FETCH = "fetch"


class TodoSyncError(Exception):
    """
    Base exception for all todosync errors.

    Attributes:
        message: Human-readable error message
        context: Optional dictionary of additional context
    """

    kind: ErrorKind

    def __init__(self, message: str, **context: object) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        return self.message


class TodoValidationError(TodoSyncError):
    """
    Raised when a title, id, user id or concurrency token is invalid.

    Always raised before touching the network or the store.
    """

    kind = ErrorKind.VALIDATION

    def __init__(self, message: str, *, field: str | None = None, **context: object) -> None:
        super().__init__(message, field=field, **context)
        self.field = field


class TodoNotFoundError(TodoSyncError):
    """Raised when a todo id does not exist in the local store."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, todo_id: int) -> None:
        super().__init__(f"Todo {todo_id} not found", todo_id=todo_id)
        self.todo_id = todo_id


class StoreError(TodoSyncError):
    """
    Raised when a persistence operation fails.

    Covers connectivity problems, constraint violations and rows that no
    longer validate as a Todo when read back.
    """

    kind = ErrorKind.STORE


class FetchError(TodoSyncError):
    """
    Raised when a todo cannot be retrieved from the remote API.

    The original exception is preserved via ``__cause__``.
    """

    kind = ErrorKind.FETCH

    def __init__(self, todo_id: int, message: str, **context: object) -> None:
        super().__init__(message, todo_id=todo_id, **context)
        self.todo_id = todo_id

    def __str__(self) -> str:
        return f"Failed to fetch todo {self.todo_id}: {self.message}"


__all__ = [
    "ErrorKind",
    "TodoSyncError",
    "TodoValidationError",
    "TodoNotFoundError",
    "StoreError",
    "FetchError",
]
