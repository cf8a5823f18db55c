"""
SQLite database integration and simple migration system.

This module provides functions for obtaining a database connection
(``get_connection``) and applying migrations (``init_db``).  SQLite is
used as a lightweight embedded backing file for the record store: each
entity is stored as one JSON document keyed by ``(entity_type, id)``.

Applied migration versions are stored in the ``migrations`` table and
new migrations are executed in order.
"""

import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from .config import settings

MIGRATIONS: list[tuple[int, str]] = [
    # Migration 1: one table for every entity type
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS records (
            entity_type TEXT NOT NULL,
            id INTEGER NOT NULL,
            data TEXT NOT NULL,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            PRIMARY KEY (entity_type, id)
        );
        """,
    ),
    # Migration 2: speed up full scans of a single entity type
    (
        2,
        """
        CREATE INDEX IF NOT EXISTS idx_records_entity_type ON records(entity_type);
        """,
    ),
    # Migration 3: highest id ever allocated per entity type
    (
        3,
        """
        CREATE TABLE IF NOT EXISTS sequences (
            entity_type TEXT PRIMARY KEY,
            last_id INTEGER NOT NULL
        );
        INSERT OR IGNORE INTO sequences (entity_type, last_id)
            SELECT entity_type, MAX(id) FROM records GROUP BY entity_type;
        """,
    ),
]


def get_database_path(db_url: Optional[str] = None) -> str:
    """Compute the path to the SQLite database file.

    Absolute paths are used as is; relative paths are resolved against
    the project root.  ``:memory:`` is refused: every cursor opens its
    own connection, so an in-memory database would vanish between them.
    Use ``STORE_BACKEND=memory`` instead.
    """
    db_url = db_url or settings.database_url
    if db_url == ":memory:":
        raise ValueError("In-memory SQLite is not supported; use STORE_BACKEND=memory")
    if os.path.isabs(db_url):
        return db_url
    base_dir = Path(__file__).resolve().parent.parent.parent.parent
    return str((base_dir / db_url).resolve())


def get_connection(db_url: Optional[str] = None) -> sqlite3.Connection:
    """Create and return a new SQLite connection with name-based rows."""
    conn = sqlite3.connect(get_database_path(db_url))
    conn.row_factory = sqlite3.Row
    return conn


@contextmanager
def get_cursor(db_url: Optional[str] = None) -> Iterator[sqlite3.Cursor]:
    """Yield a cursor, commit on success and always close the connection."""
    conn = get_connection(db_url)
    try:
        yield conn.cursor()
        conn.commit()
    finally:
        conn.close()


def init_db(db_url: Optional[str] = None) -> int:
    """Initialise the database and apply pending migrations.

    Returns the schema version after migrating.  To change the schema,
    append a new entry to ``MIGRATIONS`` with an incremented version.
    """
    with get_cursor(db_url) as cursor:
        cursor.execute(
            "CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)"
        )
        cursor.execute("SELECT MAX(version) as version FROM migrations")
        row = cursor.fetchone()
        current_version = row["version"] if row and row["version"] is not None else 0

        for version, sql in MIGRATIONS:
            if version > current_version:
                cursor.executescript(sql)
                cursor.execute(
                    "INSERT INTO migrations (version) VALUES (?)", (version,)
                )
                current_version = version
    return current_version
