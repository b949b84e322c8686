"""Subtitle query and write operations.

This module contains the SQL for the foltia_subtitle table and its video
satellite tables:
- Filter composition and paginated search
- Lookup by pid
- Partial field updates
- Video filename attach/detach statements

Note:
    These functions do NOT manage transactions or caching. The
    repository groups them into units of work.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from foltia_catalog.db.exceptions import EmptyMutationError
from foltia_catalog.db.executor import QueryExecutor
from foltia_catalog.db.types import (
    VIDEO_TABLES,
    RecordingType,
    Subtitle,
    SubtitleQueryInput,
    SubtitleResult,
    SubtitleUpdateInput,
    VideoType,
)

from .helpers import _escape_like_pattern, _row_to_subtitle

logger = logging.getLogger(__name__)

DEFAULT_PAGE_ROWS = 100
MAX_PAGE_ROWS = 1000

_RECORDING_TYPE_CONDITIONS = {
    RecordingType.PROGRAM: "S.tid > 0",
    RecordingType.EPG: "S.tid = 0",
    RecordingType.KEYWORD: "S.tid = -1",
}

_KEYWORD_COLUMNS = (
    "S.subtitle",
    "P.title",
    "P.shorttitle",
    "P.titleyomi",
    "P.titleen",
)

_SUBTITLE_FROM = """
    FROM foltia_subtitle AS S
    INNER JOIN foltia_program AS P ON S.tid = P.tid
    INNER JOIN foltia_station AS ST ON S.stationid = ST.stationid
"""


def _clamp_page_rows(page_rows: int | None, max_rows: int = MAX_PAGE_ROWS) -> int:
    """Clamp a page size into [1, max_rows]; None gives the default."""
    if page_rows is None:
        return DEFAULT_PAGE_ROWS
    return max(1, min(page_rows, max_rows))


def _has_recording_condition() -> str:
    """Any filename column set AND backed by a row in its satellite table."""
    parts = []
    for video_table in VIDEO_TABLES.values():
        column = f"S.{video_table.subtitle_column}"
        parts.append(
            f"({column} IS NOT NULL AND EXISTS ("
            f"SELECT 1 FROM {video_table.table} AS V "
            f"WHERE V.{video_table.filename_column} = {column}))"
        )
    return "(" + " OR ".join(parts) + ")"


def _no_recording_condition() -> str:
    parts = [
        f"S.{video_table.subtitle_column} IS NULL"
        for video_table in VIDEO_TABLES.values()
    ]
    return "(" + " AND ".join(parts) + ")"


def build_subtitle_filter(
    query: SubtitleQueryInput | None,
) -> tuple[str, dict[str, Any]]:
    """Build the WHERE clause for a subtitle search.

    Only fields that are not None contribute a condition; all
    conditions are AND'ed. Column aliases assume the S/P/ST joins of
    find_subtitles().

    Args:
        query: Search filters, or None for no filtering.

    Returns:
        Tuple of (where_clause, params). where_clause is empty or starts
        with " WHERE ".
    """
    conditions: list[str] = []
    params: dict[str, Any] = {}

    if query is None:
        return "", params

    if query.tid is not None:
        conditions.append("S.tid = :tid")
        params["tid"] = query.tid

    if query.recording_type is not None:
        conditions.append(_RECORDING_TYPE_CONDITIONS[query.recording_type])

    if query.receivable_station is not None:
        conditions.append("ST.receiving = :receivable_station")
        params["receivable_station"] = 1 if query.receivable_station else 0

    if query.has_recording is True:
        conditions.append(_has_recording_condition())
    elif query.has_recording is False:
        conditions.append(_no_recording_condition())

    if query.keyword is not None:
        conditions.append(
            "("
            + " OR ".join(
                f"{column} LIKE :keyword ESCAPE '\\'" for column in _KEYWORD_COLUMNS
            )
            + ")"
        )
        params["keyword"] = f"%{_escape_like_pattern(query.keyword)}%"

    where_clause = ""
    if conditions:
        where_clause = " WHERE " + " AND ".join(conditions)
    return where_clause, params


def find_subtitles(
    executor: QueryExecutor,
    query: SubtitleQueryInput | None = None,
    page: int = 0,
    page_rows: int | None = None,
) -> SubtitleResult:
    """Search subtitles, newest broadcast first.

    Rows whose program or station cannot be resolved are excluded by the
    inner joins. Order among equal start times is unspecified.

    Args:
        executor: Query executor.
        query: Search filters, or None for all subtitles.
        page: Zero-based page index.
        page_rows: Rows per page (default 100, clamped to 1..1000).

    Returns:
        SubtitleResult with the echoed page, the total match count and
        the rows of the requested page.

    Raises:
        ValueError: If page is negative.
    """
    if page < 0:
        raise ValueError(f"page must be zero or positive, got {page}")
    page_rows = _clamp_page_rows(page_rows)

    where_clause, params = build_subtitle_filter(query)

    count_row = executor.query_one(
        "SELECT COUNT(*) AS total" + _SUBTITLE_FROM + where_clause, params
    )
    total = count_row["total"] if count_row is not None else 0

    page_params = dict(params)
    page_params["limit"] = page_rows
    page_params["offset"] = page_rows * page
    rows = executor.query_many(
        "SELECT S.*"
        + _SUBTITLE_FROM
        + where_clause
        + " ORDER BY S.startdatetime DESC LIMIT :limit OFFSET :offset",
        page_params,
    )
    logger.debug(
        "find_subtitles: where=%r page=%d rows=%d total=%d",
        where_clause,
        page,
        page_rows,
        total,
    )
    return SubtitleResult(
        page=page, total=total, items=[_row_to_subtitle(row) for row in rows]
    )


def get_subtitle(executor: QueryExecutor, pid: int) -> Subtitle | None:
    """Get a subtitle by pid.

    Returns:
        Subtitle if found, None otherwise.
    """
    row = executor.query_one(
        "SELECT * FROM foltia_subtitle WHERE pid = :pid", {"pid": pid}
    )
    if row is None:
        return None
    return _row_to_subtitle(row)


def update_subtitle(executor: QueryExecutor, update: SubtitleUpdateInput) -> int:
    """Write the fields an update defines.

    A field is written when its *_defined flag is set. The subtitle text
    is additionally skipped when blank; a defined None for file_status or
    encode_setting writes NULL.

    Returns:
        Number of rows updated (0 when pid does not exist).

    Raises:
        EmptyMutationError: If no field qualifies.
    """
    sets: list[str] = []
    params: dict[str, Any] = {"pid": update.pid}

    if update.subtitle_defined and update.subtitle and update.subtitle.strip():
        sets.append("subtitle = :subtitle")
        params["subtitle"] = update.subtitle
    if update.file_status_defined:
        sets.append("filestatus = :file_status")
        params["file_status"] = (
            update.file_status.code if update.file_status is not None else None
        )
    if update.encode_setting_defined:
        sets.append("encodesetting = :encode_setting")
        params["encode_setting"] = (
            update.encode_setting.code if update.encode_setting is not None else None
        )

    if not sets:
        raise EmptyMutationError(f"Update of subtitle {update.pid} defines no fields")

    return executor.execute(
        f"UPDATE foltia_subtitle SET {', '.join(sets)} WHERE pid = :pid", params
    )


def set_video_filename(
    executor: QueryExecutor, pid: int, video_type: VideoType, filename: str
) -> int:
    """Point a subtitle's filename column for a format at filename."""
    column = VIDEO_TABLES[video_type].subtitle_column
    return executor.execute(
        f"UPDATE foltia_subtitle SET {column} = :filename WHERE pid = :pid",
        {"pid": pid, "filename": filename},
    )


def clear_video_filenames(
    executor: QueryExecutor, pid: int, video_types: Iterable[VideoType]
) -> int:
    """Set the filename columns of the given formats to NULL in one UPDATE.

    Raises:
        EmptyMutationError: If video_types is empty.
    """
    columns = sorted({VIDEO_TABLES[video_type].subtitle_column for video_type in video_types})
    if not columns:
        raise EmptyMutationError(f"No video types given for subtitle {pid}")
    sets = ", ".join(f"{column} = NULL" for column in columns)
    return executor.execute(
        f"UPDATE foltia_subtitle SET {sets} WHERE pid = :pid", {"pid": pid}
    )


def insert_video_file(
    executor: QueryExecutor, video_type: VideoType, tid: int, filename: str
) -> int:
    """Register a file in its format's satellite table.

    Inserting a key that already exists is a no-op.

    Returns:
        1 if a row was inserted, 0 if it already existed.
    """
    video_table = VIDEO_TABLES[video_type]
    if video_table.keyed_by_tid:
        return executor.execute(
            f"INSERT INTO {video_table.table} (tid, {video_table.filename_column}) "
            "VALUES (:tid, :filename) ON CONFLICT DO NOTHING",
            {"tid": tid, "filename": filename},
        )
    return executor.execute(
        f"INSERT INTO {video_table.table} ({video_table.filename_column}) "
        "VALUES (:filename) ON CONFLICT DO NOTHING",
        {"filename": filename},
    )


def delete_video_file(executor: QueryExecutor, video_type: VideoType, filename: str) -> int:
    """Remove a file from its format's satellite table by filename."""
    video_table = VIDEO_TABLES[video_type]
    return executor.execute(
        f"DELETE FROM {video_table.table} WHERE {video_table.filename_column} = :filename",
        {"filename": filename},
    )
