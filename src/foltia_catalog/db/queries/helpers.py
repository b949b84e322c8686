"""Shared helper functions for database queries.

This module provides utility functions used across multiple query modules:
- SQL pattern escaping for LIKE queries
- foltia integer timestamp conversion
- Row mapping from foltia_subtitle rows to Subtitle records
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from foltia_catalog.db.exceptions import SubtitleDecodeError
from foltia_catalog.db.types import (
    FileStatus,
    Subtitle,
    SyobocalFlag,
    TranscodeQuality,
)


def _escape_like_pattern(value: str) -> str:
    """Escape special characters in SQL LIKE patterns.

    SQLite LIKE patterns treat %, _, and [ as special characters.
    This function escapes them so they match literally.

    Args:
        value: The string to escape for use in a LIKE pattern.

    Returns:
        Escaped string safe for LIKE pattern matching.

    Note:
        Queries using this must include ESCAPE '\\' clause.
    """
    return (
        value.replace("\\", "\\\\")
        .replace("%", "\\%")
        .replace("_", "\\_")
        .replace("[", "\\[")
    )


def decode_foltia_datetime(value: int | None) -> datetime | None:
    """Convert a foltia timestamp (YYYYMMDDhhmm integer) to a datetime.

    Args:
        value: Stored integer such as 202401152330, or None.

    Returns:
        Naive local datetime, or None when the column is NULL.

    Raises:
        SubtitleDecodeError: If the integer is not a valid timestamp.
    """
    if value is None:
        return None
    try:
        return datetime.strptime(f"{int(value):012d}", "%Y%m%d%H%M")
    except ValueError:
        raise SubtitleDecodeError("datetime", value) from None


def encode_foltia_datetime(value: datetime) -> int:
    """Convert a datetime to a foltia timestamp (YYYYMMDDhhmm integer)."""
    return int(value.strftime("%Y%m%d%H%M"))


def _decode_timestamp(value: Any) -> datetime | None:
    """Decode a stored timestamp column into an aware datetime.

    Accepts ISO 8601 text (as SQLite stores it) or a datetime. Naive
    values are taken as UTC.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(str(value))
        except ValueError:
            raise SubtitleDecodeError("lastupdate", value) from None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _row_to_subtitle(row: Mapping[str, Any]) -> Subtitle:
    """Convert a database row to Subtitle using named columns.

    Nullable integer columns are checked for None explicitly so that a
    stored 0 is preserved. Coded columns fail loudly on unknown codes.

    Args:
        row: sqlite3.Row from a SELECT on foltia_subtitle.

    Returns:
        Subtitle instance populated from the row.

    Raises:
        SubtitleDecodeError: If a coded column holds an unknown value.
    """
    file_status = row["filestatus"]
    encode_setting = row["encodesetting"]
    syobocal_flag = row["syobocalflag"]
    return Subtitle(
        pid=row["pid"],
        tid=row["tid"],
        station_id=row["stationid"],
        count_no=row["countno"],
        subtitle=row["subtitle"],
        start_datetime=decode_foltia_datetime(row["startdatetime"]),
        end_datetime=decode_foltia_datetime(row["enddatetime"]),
        start_offset=row["startoffset"] or 0,
        length_min=row["lengthmin"] or 0,
        m2p_filename=row["m2pfilename"],
        psp_filename=row["pspfilename"],
        epg_added_by=row["epgaddedby"],
        last_update=_decode_timestamp(row["lastupdate"]),
        file_status=(
            FileStatus.from_code(file_status) if file_status is not None else None
        ),
        aspect=row["aspect"],
        encode_setting=(
            TranscodeQuality.from_code(encode_setting)
            if encode_setting is not None
            else None
        ),
        mp4hd=row["mp4hd"],
        syobocal_flag=(
            SyobocalFlag.decode(syobocal_flag)
            if syobocal_flag is not None
            else frozenset()
        ),
        syobocal_rev=row["syobocalrev"] or 0,
    )
