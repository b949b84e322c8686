"""Table definitions for a local catalog database.

The production catalog is owned by the recorder, which creates and
migrates these tables. create_schema() builds the same layout in a local
SQLite file or an in-memory database so the catalog can be exercised
without a recorder.
"""

import sqlite3

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS foltia_program (
    tid INTEGER PRIMARY KEY,
    title TEXT,
    shorttitle TEXT,
    titleyomi TEXT,
    titleen TEXT
);

CREATE TABLE IF NOT EXISTS foltia_station (
    stationid INTEGER PRIMARY KEY,
    stationname TEXT,
    receiving INTEGER NOT NULL DEFAULT 0
);

CREATE TABLE IF NOT EXISTS foltia_subtitle (
    pid INTEGER PRIMARY KEY,
    tid INTEGER NOT NULL,
    stationid INTEGER NOT NULL,
    countno INTEGER,
    subtitle TEXT,
    startdatetime INTEGER,
    enddatetime INTEGER,
    startoffset INTEGER NOT NULL DEFAULT 0,
    lengthmin INTEGER NOT NULL DEFAULT 0,
    m2pfilename TEXT,
    pspfilename TEXT,
    epgaddedby INTEGER,
    lastupdate TEXT,
    filestatus INTEGER,
    aspect INTEGER,
    encodesetting INTEGER,
    mp4hd TEXT,
    syobocalflag INTEGER,
    syobocalrev INTEGER NOT NULL DEFAULT 0
);

CREATE INDEX IF NOT EXISTS idx_subtitle_startdatetime
    ON foltia_subtitle(startdatetime);
CREATE INDEX IF NOT EXISTS idx_subtitle_tid ON foltia_subtitle(tid);

CREATE TABLE IF NOT EXISTS foltia_m2pfiles (
    m2pfilename TEXT PRIMARY KEY
);

CREATE TABLE IF NOT EXISTS foltia_mp4files (
    tid INTEGER NOT NULL,
    mp4filename TEXT NOT NULL,
    PRIMARY KEY (tid, mp4filename)
);

CREATE TABLE IF NOT EXISTS foltia_hdmp4files (
    tid INTEGER NOT NULL,
    hdmp4filename TEXT NOT NULL,
    PRIMARY KEY (tid, hdmp4filename)
);
"""


def create_schema(conn: sqlite3.Connection) -> None:
    """Create the catalog tables if they do not exist.

    Args:
        conn: Database connection.
    """
    conn.executescript(SCHEMA_SQL)
