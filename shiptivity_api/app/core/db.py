"""
SQLite database integration and simple migration system.

The service keeps one SQLite connection for the whole life of the
process: ``open_database`` is called on application startup and
``close_database`` on shutdown (uvicorn turns SIGINT/SIGTERM into a
shutdown).  Every use of the connection goes through a process-wide
re-entrant lock, and ``transaction`` holds that lock for the whole
``BEGIN IMMEDIATE`` ... ``COMMIT`` span, so no reader or writer ever
observes another request's half-applied changes.

The migration mechanism stores applied migration versions in the
``migrations`` table and executes new migrations in order.
"""

from __future__ import annotations

import logging
import os
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from .config import settings

logger = logging.getLogger(__name__)

_connection: Optional[sqlite3.Connection] = None
_lock = threading.RLock()

MIGRATIONS: list[tuple[int, list[str]]] = [
    # Migration 1: clients table.  ``status`` is the lane and
    # ``priority`` the 1-based rank within it.
    (
        1,
        [
            """
            CREATE TABLE IF NOT EXISTS clients (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT,
                description TEXT,
                status TEXT NOT NULL DEFAULT 'backlog',
                priority INTEGER NOT NULL
            )
            """,
        ],
    ),
    # Migration 2: lane lookups and range shifts filter on both columns.
    # Not UNIQUE: a shift moves rows one at a time and would trip it.
    (
        2,
        [
            "CREATE INDEX IF NOT EXISTS idx_clients_status_priority ON clients(status, priority)",
        ],
    ),
]


def get_database_path() -> str:
    """Compute the path to the SQLite database file.

    ``:memory:`` and absolute paths are used as is; anything else is
    resolved relative to the ``shiptivity_api`` package directory.
    """
    db_url = settings.database_url
    if db_url == ":memory:" or os.path.isabs(db_url):
        return db_url
    base_dir = Path(__file__).resolve().parent.parent.parent  # shiptivity_api/
    return str((base_dir / db_url).resolve())


def open_database() -> sqlite3.Connection:
    """Open the shared connection if it is not open yet and return it.

    Transactions are managed explicitly (``isolation_level=None``) and
    the connection may be used from any thread, because FastAPI runs
    handlers both on the event loop and in its thread pool.
    """
    global _connection
    with _lock:
        if _connection is None:
            db_path = get_database_path()
            conn = sqlite3.connect(db_path, check_same_thread=False, isolation_level=None)
            # Return rows as dict-like objects keyed by column name
            conn.row_factory = sqlite3.Row
            _connection = conn
            logger.info("Opened database %s", db_path)
        return _connection


def close_database() -> None:
    """Close the shared connection.  Safe to call when it is not open."""
    global _connection
    with _lock:
        if _connection is not None:
            _connection.close()
            _connection = None
            logger.info("Closed database")


def get_connection() -> sqlite3.Connection:
    """Return the shared connection opened by ``open_database``."""
    if _connection is None:
        raise RuntimeError("Database is not open; call open_database() first")
    return _connection


@contextmanager
def locked() -> Iterator[sqlite3.Connection]:
    """Hold the connection lock and yield the shared connection."""
    with _lock:
        yield get_connection()


@contextmanager
def transaction() -> Iterator[sqlite3.Connection]:
    """Run the enclosed statements as one serialized transaction.

    Commits when the block exits normally and rolls back on any
    exception, which is re-raised unchanged.
    """
    with _lock:
        conn = get_connection()
        conn.execute("BEGIN IMMEDIATE")
        try:
            yield conn
            conn.commit()
        except BaseException:
            if conn.in_transaction:
                conn.rollback()
            raise


def init_db() -> None:
    """Apply pending migrations to the shared connection.

    Creates the ``migrations`` table if it does not exist, checks the
    current schema version and applies any newer entries of
    ``MIGRATIONS``.  To add a migration, append it with an incremented
    version number.
    """
    with transaction() as conn:
        conn.execute("CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)")
        row = conn.execute("SELECT MAX(version) AS version FROM migrations").fetchone()
        current_version = row["version"] if row and row["version"] is not None else 0

        for version, statements in MIGRATIONS:
            if version > current_version:
                for statement in statements:
                    conn.execute(statement)
                conn.execute("INSERT INTO migrations (version) VALUES (?)", (version,))
                logger.info("Applied migration %s", version)
                current_version = version
