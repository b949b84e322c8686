"""Output formatting for subtitle records."""

from __future__ import annotations

from typing import Any

from foltia_catalog.db.types import Subtitle


def subtitle_to_dict(subtitle: Subtitle) -> dict[str, Any]:
    """Convert a Subtitle to a JSON-serializable dict."""
    return {
        "pid": subtitle.pid,
        "tid": subtitle.tid,
        "recording_type": subtitle.recording_type.value,
        "station_id": subtitle.station_id,
        "count_no": subtitle.count_no,
        "subtitle": subtitle.subtitle,
        "start_datetime": (
            subtitle.start_datetime.isoformat() if subtitle.start_datetime else None
        ),
        "end_datetime": (
            subtitle.end_datetime.isoformat() if subtitle.end_datetime else None
        ),
        "start_offset": subtitle.start_offset,
        "length_min": subtitle.length_min,
        "m2p_filename": subtitle.m2p_filename,
        "psp_filename": subtitle.psp_filename,
        "mp4hd": subtitle.mp4hd,
        "epg_added_by": subtitle.epg_added_by,
        "last_update": (
            subtitle.last_update.isoformat() if subtitle.last_update else None
        ),
        "file_status": (
            subtitle.file_status.name if subtitle.file_status is not None else None
        ),
        "aspect": subtitle.aspect,
        "encode_setting": (
            subtitle.encode_setting.name if subtitle.encode_setting is not None else None
        ),
        "syobocal_flag": sorted(flag.name for flag in subtitle.syobocal_flag),
        "syobocal_rev": subtitle.syobocal_rev,
    }


def format_subtitle_line(subtitle: Subtitle, title_width: int = 40) -> str:
    """Format a subtitle as one table row."""
    start = (
        subtitle.start_datetime.strftime("%Y-%m-%d %H:%M")
        if subtitle.start_datetime
        else "-"
    )
    title = subtitle.subtitle or "-"
    if len(title) > title_width:
        title = title[: title_width - 3] + "..."
    videos = "".join(
        mark if filename else "-"
        for mark, filename in (
            ("T", subtitle.m2p_filename),
            ("S", subtitle.psp_filename),
            ("H", subtitle.mp4hd),
        )
    )
    return (
        f"{subtitle.pid:>8}  {subtitle.tid:>6}  {start:<16}  "
        f"{videos:<3}  {title:<{title_width}}"
    )
