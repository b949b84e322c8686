"""Filename resolvers for attached video files.

A resolver maps a subtitle and a video format to the filename recorded in
the catalog. The default follows the recorder's naming:

    TS  {tid}-{countno}-{YYYYMMDD}-{hhmm}.m2t
    SD  MAQ-{tid}-{countno}-{YYYYMMDD}-{hhmm}.MP4
    HD  MHD-{tid}-{countno}-{YYYYMMDD}-{hhmm}.MP4
"""

from __future__ import annotations

from foltia_catalog.db.repository import FilenameResolver
from foltia_catalog.db.types import Subtitle, VideoType

_PREFIXES = {
    VideoType.TS: "",
    VideoType.SD: "MAQ-",
    VideoType.HD: "MHD-",
}

_EXTENSIONS = {
    VideoType.TS: ".m2t",
    VideoType.SD: ".MP4",
    VideoType.HD: ".MP4",
}


def default_filename_resolver(subtitle: Subtitle, video_type: VideoType) -> str:
    """Build the recorder-style filename of a subtitle's video.

    Raises:
        ValueError: If the subtitle has no start time.
    """
    if subtitle.start_datetime is None:
        raise ValueError(f"Subtitle {subtitle.pid} has no start time")
    count_no = "" if subtitle.count_no is None else str(subtitle.count_no)
    stamp = subtitle.start_datetime.strftime("%Y%m%d-%H%M")
    return (
        f"{_PREFIXES[video_type]}{subtitle.tid}-{count_no}-{stamp}"
        f"{_EXTENSIONS[video_type]}"
    )


def fixed_filename_resolver(filename: str) -> FilenameResolver:
    """Return a resolver that always answers filename."""

    def resolve(subtitle: Subtitle, video_type: VideoType) -> str:
        return filename

    return resolve
