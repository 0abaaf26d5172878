"""
Database connection management for the todo database.

The connection module follows SQLite best practices:
- WAL mode so readers are not blocked by the sync writer
- A busy timeout so concurrent writers wait instead of failing
- Row factory for dict-like access
- Context managers for safe transaction handling

Usage:
    from todosync.core.db import get_connection, init_db

    # Initialize database
    init_db(Path("todos.db")).close()

    # Query with context manager
    with get_connection(db_path) as conn:
        cursor = conn.execute("SELECT * FROM todos WHERE id = ?", (1,))
        row = cursor.fetchone()
"""

import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from todosync.core.db.schema import create_schema, needs_migration

# Seconds a connection waits on a locked database before giving up
BUSY_TIMEOUT_SECONDS = 30.0


def dict_factory(cursor: sqlite3.Cursor, row: tuple[Any, ...]) -> dict[str, Any]:
    """
    Row factory that returns rows as dictionaries.

    Enables dict-like access to query results: row["column_name"]
    instead of positional access: row[0].
    """
    fields = [column[0] for column in cursor.description]
    return dict(zip(fields, row))


def configure_connection(conn: sqlite3.Connection) -> None:
    """
    Configure a SQLite connection.

    Settings applied:
    - WAL mode: readers don't block on the writer
    - dict_factory: Enable dict-like row access

    Args:
        conn: SQLite connection to configure
    """
    conn.execute("PRAGMA journal_mode=WAL")
    conn.row_factory = dict_factory


def connect(db_path: Path | str) -> sqlite3.Connection:
    """Open and configure a connection without touching the schema."""
    conn = sqlite3.connect(str(db_path), timeout=BUSY_TIMEOUT_SECONDS)
    configure_connection(conn)
    return conn


def init_db(db_path: Path | str) -> sqlite3.Connection:
    """
    Initialize the todo database.

    Creates the database file if it doesn't exist, applies the schema,
    and returns a configured connection.

    Args:
        db_path: Path to the SQLite database file

    Returns:
        Configured SQLite connection
    """
    db_path = Path(db_path)

    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = connect(db_path)

    if needs_migration(conn):
        create_schema(conn)

    return conn


@contextmanager
def get_connection(db_path: Path | str) -> Iterator[sqlite3.Connection]:
    """
    Get a database connection as a context manager.

    The schema is created on first use. The transaction is committed when
    the block exits normally and rolled back if an exception escapes; the
    connection is always closed.

    Args:
        db_path: Path to the SQLite database file

    Yields:
        Configured SQLite connection
    """
    conn = init_db(db_path)

    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def execute_query(
    conn: sqlite3.Connection,
    query: str,
    params: tuple[Any, ...] | dict[str, Any] | None = None,
) -> list[dict[str, Any]]:
    """Execute a query and return all results as a list of dicts."""
    if params is None:
        params = ()

    cursor = conn.execute(query, params)
    return cursor.fetchall()


def execute_one(
    conn: sqlite3.Connection,
    query: str,
    params: tuple[Any, ...] | dict[str, Any] | None = None,
) -> dict[str, Any] | None:
    """Execute a query and return the first result as a dict, or None."""
    if params is None:
        params = ()

    cursor = conn.execute(query, params)
    result = cursor.fetchone()
    # fetchone() returns dict[str, Any] or None when dict_factory is configured
    return result  # type: ignore[no-any-return]
