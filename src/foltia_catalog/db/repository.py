"""Subtitle repository: cached lookup, search and the update workflows.

SubtitleRepository ties the single-statement functions in
queries.subtitles to an executor and a cache. Every mutating method runs
its statements in one transaction and evicts the subtitle's cache entry
before re-reading.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from foltia_catalog.cache import (
    SUBTITLE_CACHE_REGION,
    CacheRegions,
    subtitle_cache_key,
)
from foltia_catalog.db.exceptions import EmptyMutationError, SubtitleVanishedError
from foltia_catalog.db.executor import QueryExecutor
from foltia_catalog.db.queries.subtitles import (
    DEFAULT_PAGE_ROWS,
    clear_video_filenames,
    delete_video_file,
    find_subtitles,
    get_subtitle,
    insert_video_file,
    set_video_filename,
    update_subtitle,
)
from foltia_catalog.db.types import (
    Subtitle,
    SubtitleQueryInput,
    SubtitleResult,
    SubtitleUpdateInput,
    VideoType,
)

logger = logging.getLogger(__name__)


def _video_context(
    subtitle: Subtitle, video_type: VideoType, filename: str
) -> dict[str, object]:
    return {
        "pid": subtitle.pid,
        "tid": subtitle.tid,
        "video_type": video_type,
        "video_file": filename,
    }


FilenameResolver = Callable[[Subtitle, VideoType], str]


class SubtitleRepository:
    """Data access for foltia_subtitle and its video satellite tables."""

    def __init__(
        self,
        executor: QueryExecutor,
        cache: CacheRegions,
        *,
        default_page_rows: int = DEFAULT_PAGE_ROWS,
    ) -> None:
        """Initialize the repository.

        Args:
            executor: Parameterized query execution.
            cache: Cache regions used for get() and evicted on mutation.
            default_page_rows: Page size used when find() is given none.
        """
        self._executor = executor
        self._cache = cache
        self.default_page_rows = default_page_rows

    def get(self, pid: int) -> Subtitle | None:
        """Get a subtitle by pid through the cache.

        Returns:
            Subtitle if found, None otherwise. Misses are cached too.
        """
        return self._cache.get_or_compute(
            SUBTITLE_CACHE_REGION,
            subtitle_cache_key(pid),
            lambda: get_subtitle(self._executor, pid),
        )

    def find(
        self,
        query: SubtitleQueryInput | None = None,
        page: int = 0,
        page_rows: int | None = None,
    ) -> SubtitleResult:
        """Search subtitles. See find_subtitles() for the filter semantics."""
        if page_rows is None:
            page_rows = self.default_page_rows
        return find_subtitles(self._executor, query, page, page_rows)

    def evict(self, pid: int) -> None:
        """Drop the cached entry of a subtitle."""
        self._cache.evict(SUBTITLE_CACHE_REGION, subtitle_cache_key(pid))

    def update(self, update: SubtitleUpdateInput) -> int:
        """Apply a partial update and invalidate the cached entry.

        Returns:
            Number of rows updated (0 when pid does not exist).

        Raises:
            EmptyMutationError: If the update defines no writable field.
        """
        with self._executor.transaction():
            count = update_subtitle(self._executor, update)
        self.evict(update.pid)
        logger.info(
            "Updated subtitle %d (%d row(s))",
            update.pid,
            count,
            extra={"pid": update.pid, "rows": count},
        )
        return count

    def update_video(
        self,
        pid: int,
        video_type: VideoType,
        filename_resolver: FilenameResolver,
    ) -> Subtitle | None:
        """Attach a video file of the given format to a subtitle.

        The filename column and the satellite row are written in one
        transaction; the satellite insert is idempotent. A different file
        previously attached for the same format loses its satellite row.

        Args:
            pid: Subtitle identifier.
            video_type: Format of the file.
            filename_resolver: Computes the filename from the subtitle.

        Returns:
            The refreshed subtitle, or None if pid does not exist.
        """
        subtitle = self.get(pid)
        if subtitle is None:
            return None

        filename = filename_resolver(subtitle, video_type)
        with self._executor.transaction():
            current = get_subtitle(self._executor, pid)
            replaced = current.video_filename(video_type) if current else None
            set_video_filename(self._executor, pid, video_type, filename)
            insert_video_file(self._executor, video_type, subtitle.tid, filename)
            if replaced is not None and replaced != filename:
                delete_video_file(self._executor, video_type, replaced)
                logger.info(
                    "Replaced %s video %s of subtitle %d",
                    video_type.name,
                    replaced,
                    pid,
                    extra=_video_context(subtitle, video_type, replaced),
                )
        self.evict(pid)

        logger.info(
            "Attached %s video %s to subtitle %d",
            video_type.name,
            filename,
            pid,
            extra=_video_context(subtitle, video_type, filename),
        )
        return self.get(pid)

    def delete_video(
        self, pid: int, video_types: Iterable[VideoType]
    ) -> tuple[Subtitle, Subtitle] | None:
        """Detach video files of the given formats from a subtitle.

        All requested filename columns are cleared by one UPDATE.
        Satellite rows are deleted only for formats that had a filename.

        Args:
            pid: Subtitle identifier.
            video_types: Formats to detach.

        Returns:
            Tuple of (before, after) snapshots, or None if pid does not
            exist.

        Raises:
            EmptyMutationError: If video_types is empty.
            SubtitleVanishedError: If the subtitle is gone after the update.
        """
        video_types = frozenset(video_types)
        if not video_types:
            raise EmptyMutationError(f"No video types given for subtitle {pid}")

        before = self.get(pid)
        if before is None:
            return None

        with self._executor.transaction():
            clear_video_filenames(self._executor, pid, video_types)
            for video_type in sorted(video_types, key=lambda v: v.name):
                filename = before.video_filename(video_type)
                if filename is None:
                    continue
                delete_video_file(self._executor, video_type, filename)
                logger.info(
                    "Detached %s video %s from subtitle %d",
                    video_type.name,
                    filename,
                    pid,
                    extra=_video_context(before, video_type, filename),
                )
        self.evict(pid)

        after = self.get(pid)
        if after is None:
            raise SubtitleVanishedError(pid)
        return before, after
