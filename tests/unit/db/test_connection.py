"""Tests for catalog database connections and schema creation."""

import sqlite3

import pytest

from foltia_catalog.db.connection import get_connection, open_connection
from foltia_catalog.db.schema import create_schema


class TestOpenConnection:
    def test_creates_parent_directory(self, tmp_path):
        db_path = tmp_path / "nested" / "catalog.db"
        conn = open_connection(db_path)
        try:
            assert db_path.parent.is_dir()
            assert conn.row_factory is sqlite3.Row
            assert conn.isolation_level is None
            mode = conn.execute("PRAGMA journal_mode").fetchone()[0]
            assert mode.lower() == "wal"
            assert conn.execute("PRAGMA foreign_keys").fetchone()[0] == 1
        finally:
            conn.close()

    def test_get_connection_closes(self, tmp_path):
        with get_connection(tmp_path / "catalog.db") as conn:
            conn.execute("SELECT 1")
        with pytest.raises(sqlite3.ProgrammingError):
            conn.execute("SELECT 1")


class TestCreateSchema:
    def test_idempotent(self, db_conn):
        create_schema(db_conn)
        create_schema(db_conn)

    def test_counter_columns_default_to_zero(self, db_conn):
        db_conn.execute(
            "INSERT INTO foltia_subtitle (pid, tid, stationid) VALUES (1, 5, 1)"
        )
        row = db_conn.execute(
            "SELECT startoffset, lengthmin, syobocalrev FROM foltia_subtitle"
        ).fetchone()
        assert tuple(row) == (0, 0, 0)
