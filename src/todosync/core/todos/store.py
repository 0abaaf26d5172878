"""
Todo storage layer backed by SQLite.

Manages the local todo database (``todos.db`` by default). Every operation
opens its own connection, so a single store can be shared by worker threads
during a sync.

Example:
    store = TodoStore(Path("todos.db"))
    store.initialize()

    todo = store.create(user_id=1, title="Write tests")
    assert store.get_by_id(todo.id) == todo

    # Synced todos keep their remote id
    store.upsert(Todo(user_id=3, id=120, title="Remote todo", completed=True))
"""

import logging
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from todosync.core.db.connection import execute_one, execute_query, get_connection
from todosync.core.db.schema import SAMPLE_TODOS
from todosync.core.exceptions import StoreError, TodoNotFoundError
from todosync.core.todos.models import (
    CompletionStatus,
    StoredTodo,
    Todo,
    describe_validation_error,
    validate_positive_id,
    validate_title,
)

logger = logging.getLogger(__name__)

_SELECT_COLUMNS = "id, user_id, title, completed, created_at, updated_at"


def _parse_timestamp(value: Any) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value))
    except ValueError:
        return None


def row_to_todo(row: dict[str, Any]) -> Todo:
    """
    Convert a database row to a Todo.

    Raises:
        StoreError: If the row does not validate as a Todo
    """
    try:
        return Todo(
            user_id=row["user_id"],
            id=row["id"],
            title=row["title"],
            completed=CompletionStatus(row["completed"]).to_bool(),
        )
    except (ValidationError, ValueError) as e:
        if isinstance(e, ValidationError):
            detail = describe_validation_error(e)
        else:
            detail = str(e)
        raise StoreError(
            f"Stored todo {row.get('id')} failed validation: {detail}",
            todo_id=row.get("id"),
        ) from e


class TodoStore:
    """
    Storage layer for todo items.

    All sqlite failures surface as ``StoreError``; point lookups that miss
    raise ``TodoNotFoundError`` so callers can tell the two apart.
    """

    def __init__(self, db_path: Path | str) -> None:
        """
        Initialize store with a database path.

        Args:
            db_path: Path to the SQLite database file (created on first use)
        """
        self.db_path = Path(db_path)

    def initialize(self) -> bool:
        """
        Ensure the schema exists and seed sample todos into an empty table.

        Safe to call repeatedly: sample rows are only inserted when the
        table holds no rows at all.

        Returns:
            True if sample todos were inserted by this call

        Raises:
            StoreError: If the schema cannot be created or seeded
        """
        try:
            with get_connection(self.db_path) as conn:
                row = execute_one(conn, "SELECT COUNT(*) AS count FROM todos")
                if row is not None and row["count"] > 0:
                    logger.debug("Database %s already holds %d todos", self.db_path, row["count"])
                    return False
                conn.executemany(
                    "INSERT INTO todos (user_id, title, completed) VALUES (?, ?, ?)",
                    SAMPLE_TODOS,
                )
        except sqlite3.Error as e:
            raise StoreError(f"Failed to initialize database: {e}", path=str(self.db_path)) from e

        logger.info("Seeded %d sample todos into %s", len(SAMPLE_TODOS), self.db_path)
        return True

    def get_record(self, todo_id: int) -> StoredTodo:
        """
        Retrieve a todo together with its timestamps.

        Raises:
            TodoNotFoundError: If no todo has this id
            StoreError: If the query fails or the row is invalid
        """
        try:
            with get_connection(self.db_path) as conn:
                row = execute_one(
                    conn, f"SELECT {_SELECT_COLUMNS} FROM todos WHERE id = ?", (todo_id,)
                )
        except sqlite3.Error as e:
            raise StoreError(f"Database query error: {e}", todo_id=todo_id) from e

        if row is None:
            raise TodoNotFoundError(todo_id)

        return StoredTodo(
            todo=row_to_todo(row),
            created_at=_parse_timestamp(row["created_at"]),
            updated_at=_parse_timestamp(row["updated_at"]),
        )

    def get_by_id(self, todo_id: int) -> Todo:
        """
        Retrieve a single todo by id.

        Raises:
            TodoNotFoundError: If no todo has this id
            StoreError: If the query fails or the row is invalid
        """
        return self.get_record(todo_id).todo

    def list_all(self) -> list[Todo]:
        """
        Retrieve all todos ordered by ascending id.

        Raises:
            StoreError: If the query fails or any row is invalid
        """
        try:
            with get_connection(self.db_path) as conn:
                rows = execute_query(conn, f"SELECT {_SELECT_COLUMNS} FROM todos ORDER BY id")
        except sqlite3.Error as e:
            raise StoreError(f"Failed to fetch todos: {e}") from e

        return [row_to_todo(row) for row in rows]

    def count(self) -> int:
        """Return the number of stored todos."""
        try:
            with get_connection(self.db_path) as conn:
                row = execute_one(conn, "SELECT COUNT(*) AS count FROM todos")
        except sqlite3.Error as e:
            raise StoreError(f"Failed to count todos: {e}") from e
        return int(row["count"]) if row else 0

    def create(self, user_id: int, title: str, completed: bool = False) -> Todo:
        """
        Create a new todo with a store-assigned id.

        Inputs are validated before anything is written.

        Args:
            user_id: Owning user (positive integer)
            title: Todo title (1-255 characters)
            completed: Initial completion flag

        Returns:
            The persisted Todo

        Raises:
            TodoValidationError: If user_id or title is invalid
            StoreError: If the insert fails
        """
        validate_positive_id(user_id, field="user_id")
        validate_title(title)
        status = CompletionStatus.from_bool(completed)

        try:
            with get_connection(self.db_path) as conn:
                cursor = conn.execute(
                    "INSERT INTO todos (user_id, title, completed) VALUES (?, ?, ?)",
                    (user_id, title, status.value),
                )
                new_id = cursor.lastrowid
        except sqlite3.Error as e:
            raise StoreError(f"Failed to create todo: {e}") from e

        if new_id is None:
            raise StoreError("Failed to create todo: no id assigned")

        logger.debug("Created todo %d", new_id)
        return self.get_by_id(new_id)

    def clear(self) -> int:
        """
        Delete every todo. The schema is left in place.

        Returns:
            Number of todos removed

        Raises:
            StoreError: If the delete fails
        """
        try:
            with get_connection(self.db_path) as conn:
                cursor = conn.execute("DELETE FROM todos")
                removed = cursor.rowcount
        except sqlite3.Error as e:
            raise StoreError(f"Failed to clear todos: {e}") from e

        logger.info("Cleared %d todos", removed)
        return removed

    def upsert(self, todo: Todo) -> Todo:
        """
        Insert a todo or replace the stored one with the same id.

        Existing rows get new user_id, title and completed values and a fresh
        updated_at; created_at is preserved. New rows use ``todo.id``
        verbatim instead of an auto-generated id.

        Args:
            todo: Complete todo to save

        Returns:
            The persisted Todo

        Raises:
            StoreError: If the write fails
        """
        try:
            with get_connection(self.db_path) as conn:
                conn.execute(
                    """
                    INSERT INTO todos (id, user_id, title, completed)
                    VALUES (?, ?, ?, ?)
                    ON CONFLICT(id) DO UPDATE SET
                        user_id = excluded.user_id,
                        title = excluded.title,
                        completed = excluded.completed,
                        updated_at = CURRENT_TIMESTAMP
                    """,
                    (todo.id, todo.user_id, todo.title, todo.status.value),
                )
                row = execute_one(
                    conn, f"SELECT {_SELECT_COLUMNS} FROM todos WHERE id = ?", (todo.id,)
                )
        except sqlite3.Error as e:
            raise StoreError(f"Failed to save todo {todo.id}: {e}", todo_id=todo.id) from e

        if row is None:
            raise StoreError(f"Failed to save todo {todo.id}: row missing after write")
        return row_to_todo(row)


__all__ = ["TodoStore", "row_to_todo"]
