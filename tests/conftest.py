"""Shared test fixtures for the subtitle catalog."""

from __future__ import annotations

import sqlite3
from datetime import datetime, timedelta

import pytest

from foltia_catalog.cache import TTLCacheRegions
from foltia_catalog.db.executor import SqliteQueryExecutor
from foltia_catalog.db.queries.helpers import encode_foltia_datetime
from foltia_catalog.db.repository import SubtitleRepository
from foltia_catalog.db.schema import create_schema
from foltia_catalog.db.types import VIDEO_TABLES, VideoType

BASE_START = datetime(2024, 1, 1, 0, 0)


class CatalogSeeder:
    """Inserts programs, stations, subtitles and video files directly."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    def program(self, tid: int, title: str | None = None, **columns) -> None:
        values = {
            "tid": tid,
            "title": title if title is not None else f"Program {tid}",
            "shorttitle": None,
            "titleyomi": None,
            "titleen": None,
        }
        values.update(columns)
        self.conn.execute(
            "INSERT OR REPLACE INTO foltia_program "
            "(tid, title, shorttitle, titleyomi, titleen) "
            "VALUES (:tid, :title, :shorttitle, :titleyomi, :titleen)",
            values,
        )

    def station(self, stationid: int, receiving: bool = True) -> None:
        self.conn.execute(
            "INSERT OR REPLACE INTO foltia_station (stationid, stationname, receiving) "
            "VALUES (?, ?, ?)",
            (stationid, f"Station {stationid}", 1 if receiving else 0),
        )

    def subtitle(
        self,
        pid: int,
        tid: int = 5,
        stationid: int = 1,
        *,
        start: datetime | None = None,
        with_refs: bool = True,
        **columns,
    ) -> None:
        """Insert a subtitle; by default also its program and station rows."""
        if with_refs:
            self.conn.execute(
                "INSERT OR IGNORE INTO foltia_program (tid, title) VALUES (?, ?)",
                (tid, f"Program {tid}"),
            )
            self.conn.execute(
                "INSERT OR IGNORE INTO foltia_station (stationid, stationname, receiving) "
                "VALUES (?, ?, 1)",
                (stationid, f"Station {stationid}"),
            )
        if start is None:
            start = BASE_START + timedelta(hours=pid)
        values = {
            "pid": pid,
            "tid": tid,
            "stationid": stationid,
            "countno": None,
            "subtitle": None,
            "startdatetime": encode_foltia_datetime(start),
            "enddatetime": encode_foltia_datetime(start + timedelta(minutes=30)),
            "startoffset": 0,
            "lengthmin": 30,
            "m2pfilename": None,
            "pspfilename": None,
            "epgaddedby": None,
            "lastupdate": None,
            "filestatus": None,
            "aspect": None,
            "encodesetting": None,
            "mp4hd": None,
            "syobocalflag": None,
            "syobocalrev": 0,
        }
        values.update(columns)
        names = ", ".join(values)
        placeholders = ", ".join(f":{name}" for name in values)
        self.conn.execute(
            f"INSERT INTO foltia_subtitle ({names}) VALUES ({placeholders})", values
        )

    def video_file(self, video_type: VideoType, filename: str, tid: int = 5) -> None:
        video_table = VIDEO_TABLES[video_type]
        if video_table.keyed_by_tid:
            self.conn.execute(
                f"INSERT INTO {video_table.table} (tid, {video_table.filename_column}) "
                "VALUES (?, ?)",
                (tid, filename),
            )
        else:
            self.conn.execute(
                f"INSERT INTO {video_table.table} ({video_table.filename_column}) "
                "VALUES (?)",
                (filename,),
            )

    def video_files(self, video_type: VideoType) -> list[tuple]:
        video_table = VIDEO_TABLES[video_type]
        return [
            tuple(row)
            for row in self.conn.execute(f"SELECT * FROM {video_table.table}")
        ]

    def raw_subtitle(self, pid: int) -> tuple | None:
        row = self.conn.execute(
            "SELECT * FROM foltia_subtitle WHERE pid = ?", (pid,)
        ).fetchone()
        return tuple(row) if row is not None else None


@pytest.fixture
def db_conn():
    """Create an in-memory database with schema."""
    conn = sqlite3.connect(":memory:", isolation_level=None)
    conn.row_factory = sqlite3.Row
    create_schema(conn)
    yield conn
    conn.close()


@pytest.fixture
def executor(db_conn: sqlite3.Connection) -> SqliteQueryExecutor:
    return SqliteQueryExecutor(db_conn)


@pytest.fixture
def cache() -> TTLCacheRegions:
    return TTLCacheRegions(ttl_seconds=300, max_entries=100)


@pytest.fixture
def repository(executor: SqliteQueryExecutor, cache: TTLCacheRegions) -> SubtitleRepository:
    return SubtitleRepository(executor, cache)


@pytest.fixture
def catalog(db_conn: sqlite3.Connection) -> CatalogSeeder:
    return CatalogSeeder(db_conn)
