"""
Database layer for the local todo store.

Provides the SQLite schema and connection management used by
``todosync.core.todos.store``.

Main components:
- schema.py: SQL schema definitions and version tracking
- connection.py: Database connection management and query helpers

Usage:
    from todosync.core.db import get_connection, init_db

    with get_connection(db_path) as conn:
        rows = conn.execute("SELECT * FROM todos ORDER BY id").fetchall()
"""

from todosync.core.db.connection import get_connection, init_db
from todosync.core.db.schema import SCHEMA_VERSION, create_schema

__all__ = [
    "get_connection",
    "init_db",
    "create_schema",
    "SCHEMA_VERSION",
]
