"""
SQLite schema for the local todo database.

Schema Design:
- todos: One row per todo item, keyed by the todo id. Ids are normally
  assigned by SQLite, but synced todos keep the id they have remotely.
- schema_info: Version tracking for migrations

The completion flag is stored as one of two literal strings
('completed', 'pending') enforced by a CHECK constraint.
"""

import sqlite3

# Schema version for migrations
SCHEMA_VERSION = 1

# Rows inserted by TodoStore.initialize() into an empty table
SAMPLE_TODOS: list[tuple[int, str, str]] = [
    (1, "Learn Python", "pending"),
    (1, "Build a CLI app", "completed"),
    (2, "Master type hints", "pending"),
    (1, "Use SQLite from Python", "pending"),
    (2, "Write documentation", "completed"),
]


SCHEMA_DDL = """
-- Schema version tracking
CREATE TABLE IF NOT EXISTS schema_info (
    version INTEGER PRIMARY KEY,
    applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    description TEXT
);

-- Todo items
CREATE TABLE IF NOT EXISTS todos (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL CHECK(user_id > 0),
    title TEXT NOT NULL,
    completed TEXT NOT NULL CHECK(completed IN ('completed', 'pending')) DEFAULT 'pending',

    -- Timestamps
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);

CREATE INDEX IF NOT EXISTS idx_todos_user_id ON todos(user_id);
"""


def create_schema(conn: sqlite3.Connection) -> None:
    """
    Create the database schema.

    Executes all DDL statements to create tables and indexes.
    This is idempotent - safe to call multiple times.

    Args:
        conn: SQLite database connection

    Example:
        >>> import sqlite3
        >>> conn = sqlite3.connect(":memory:")
        >>> create_schema(conn)
        >>> cursor = conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
        >>> assert "todos" in [row[0] for row in cursor.fetchall()]
    """
    conn.executescript(SCHEMA_DDL)

    conn.execute(
        """
        INSERT OR REPLACE INTO schema_info (version, description)
        VALUES (?, ?)
        """,
        (SCHEMA_VERSION, "Initial schema with todos table"),
    )

    conn.commit()


def get_schema_version(conn: sqlite3.Connection) -> int | None:
    """
    Get the current schema version from the database.

    Returns:
        Current schema version, or None if schema_info table doesn't exist
    """
    try:
        cursor = conn.execute("SELECT MAX(version) AS version FROM schema_info")
        row = cursor.fetchone()
    except sqlite3.OperationalError:
        # schema_info table doesn't exist
        return None
    if row is None:
        return None
    version = row["version"] if isinstance(row, dict) else row[0]
    return int(version) if version is not None else None


def needs_migration(conn: sqlite3.Connection) -> bool:
    """
    Check if database needs migration to current schema version.

    Example:
        >>> import sqlite3
        >>> conn = sqlite3.connect(":memory:")
        >>> assert needs_migration(conn) is True  # No schema yet
        >>> create_schema(conn)
        >>> assert needs_migration(conn) is False  # Up to date
    """
    current_version = get_schema_version(conn)
    if current_version is None:
        return True
    return current_version < SCHEMA_VERSION
