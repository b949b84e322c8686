"""Query execution capability for the catalog.

The repository depends only on the QueryExecutor protocol; the sqlite3
implementation below is what the CLI and the tests use.
"""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import Any, Protocol

logger = logging.getLogger(__name__)

Params = Mapping[str, Any]


class QueryExecutor(Protocol):
    """Protocol for parameterized query execution.

    Statements use named parameters (:name). Backing-store errors are
    raised unchanged.
    """

    def query_one(self, sql: str, params: Params | None = None) -> Any | None:
        """Return the first row of a query, or None if there is none."""
        ...

    def query_many(self, sql: str, params: Params | None = None) -> list[Any]:
        """Return all rows of a query."""
        ...

    def execute(self, sql: str, params: Params | None = None) -> int:
        """Execute a write statement and return the affected row count."""
        ...

    def transaction(self) -> Any:
        """Context manager grouping statements into one unit of work."""
        ...


class SqliteQueryExecutor:
    """QueryExecutor backed by a sqlite3 connection.

    The connection is switched to autocommit mode so that statements
    outside transaction() are committed immediately and transaction()
    controls BEGIN/COMMIT explicitly.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        """Initialize the executor.

        Args:
            conn: Open SQLite connection. Rows are returned as sqlite3.Row.
        """
        conn.isolation_level = None
        conn.row_factory = sqlite3.Row
        self._conn = conn
        self._depth = 0

    @property
    def connection(self) -> sqlite3.Connection:
        return self._conn

    def query_one(self, sql: str, params: Params | None = None) -> sqlite3.Row | None:
        cursor = self._conn.execute(sql, dict(params or {}))
        return cursor.fetchone()

    def query_many(self, sql: str, params: Params | None = None) -> list[sqlite3.Row]:
        cursor = self._conn.execute(sql, dict(params or {}))
        return cursor.fetchall()

    def execute(self, sql: str, params: Params | None = None) -> int:
        cursor = self._conn.execute(sql, dict(params or {}))
        return cursor.rowcount

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Run the enclosed statements as one transaction.

        Commits on normal exit and rolls back on any exception, which is
        then re-raised. Nested calls join the outermost transaction.

        Example:
            with executor.transaction():
                executor.execute("UPDATE ...", params)
                executor.execute("INSERT ...", params)
        """
        if self._depth:
            self._depth += 1
            try:
                yield
            finally:
                self._depth -= 1
            return

        self._conn.execute("BEGIN")
        self._depth = 1
        try:
            yield
        except BaseException:
            self._conn.rollback()
            logger.debug("Transaction rolled back")
            raise
        else:
            self._conn.commit()
        finally:
            self._depth = 0
