"""Query functions for the subtitle catalog.

Re-exports the subtitle query and write operations from submodules.
"""

from .subtitles import (
    DEFAULT_PAGE_ROWS,
    MAX_PAGE_ROWS,
    build_subtitle_filter,
    clear_video_filenames,
    delete_video_file,
    find_subtitles,
    get_subtitle,
    insert_video_file,
    set_video_filename,
    update_subtitle,
)

__all__ = [
    "DEFAULT_PAGE_ROWS",
    "MAX_PAGE_ROWS",
    "build_subtitle_filter",
    "clear_video_filenames",
    "delete_video_file",
    "find_subtitles",
    "get_subtitle",
    "insert_video_file",
    "set_video_filename",
    "update_subtitle",
]
