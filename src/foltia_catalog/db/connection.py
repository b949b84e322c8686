"""Database connection management for the subtitle catalog."""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = Path.home() / ".foltia-catalog" / "catalog.db"


def get_default_db_path() -> Path:
    """Return the default database path (~/.foltia-catalog/catalog.db)."""
    return DEFAULT_DB_PATH


def ensure_db_directory(db_path: Path) -> None:
    """Ensure the database directory exists, creating it if necessary."""
    db_path.parent.mkdir(parents=True, exist_ok=True)


def open_connection(db_path: Path | None = None, timeout: float = 30.0) -> sqlite3.Connection:
    """Open a database connection with the catalog's settings.

    The connection is in autocommit mode; multi-statement writes are
    grouped with SqliteQueryExecutor.transaction().

    Args:
        db_path: Path to the database file. Defaults to
            ~/.foltia-catalog/catalog.db.
        timeout: How long to wait for locks (seconds). Default 30s.

    Returns:
        An sqlite3 Connection returning sqlite3.Row rows.
    """
    if db_path is None:
        db_path = get_default_db_path()

    ensure_db_directory(db_path)

    conn = sqlite3.connect(str(db_path), timeout=timeout, isolation_level=None)

    conn.execute("PRAGMA foreign_keys = ON")

    # Enable WAL mode for better concurrency (multiple readers, single writer)
    conn.execute("PRAGMA journal_mode = WAL")

    # Increase busy timeout for better handling of lock contention
    conn.execute("PRAGMA busy_timeout = 10000")

    conn.row_factory = sqlite3.Row
    logger.debug("Opened catalog database %s", db_path)
    return conn


@contextmanager
def get_connection(
    db_path: Path | None = None, timeout: float = 30.0
) -> Iterator[sqlite3.Connection]:
    """Get a database connection that is closed on exit.

    Args:
        db_path: Path to the database file. Defaults to
            ~/.foltia-catalog/catalog.db.
        timeout: How long to wait for locks (seconds). Default 30s.

    Yields:
        An sqlite3 Connection object.

    Raises:
        sqlite3.OperationalError: If database is locked and timeout exceeded.
    """
    conn = open_connection(db_path, timeout=timeout)
    try:
        yield conn
    finally:
        conn.close()
