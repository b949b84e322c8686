"""Database module for the subtitle catalog.

This module provides the public API for database operations. All types and
functions are re-exported here for convenient access.

Module organization:
- types.py: Enums, dataclasses, and the video format table
- exceptions.py: Catalog error hierarchy
- executor.py: Query execution protocol and its sqlite3 implementation
- queries/: SQL for search, lookup and updates
- repository.py: Cached lookup and the video attach/detach workflows
- schema.py: Local table definitions
- connection.py: Connection management

Usage:
    from foltia_catalog.db import SubtitleRepository, SqliteQueryExecutor
    from foltia_catalog.db import SubtitleQueryInput, RecordingType
"""

from .connection import (
    ensure_db_directory,
    get_connection,
    get_default_db_path,
    open_connection,
)
from .exceptions import (
    CatalogError,
    EmptyMutationError,
    SubtitleDecodeError,
    SubtitleVanishedError,
)
from .executor import QueryExecutor, SqliteQueryExecutor
from .repository import FilenameResolver, SubtitleRepository
from .schema import create_schema
from .types import (
    VIDEO_TABLES,
    FileStatus,
    RecordingType,
    Subtitle,
    SubtitleQueryInput,
    SubtitleResult,
    SubtitleUpdateInput,
    SyobocalFlag,
    TranscodeQuality,
    VideoTable,
    VideoType,
)

__all__ = [
    # Connection
    "ensure_db_directory",
    "get_connection",
    "get_default_db_path",
    "open_connection",
    # Exceptions
    "CatalogError",
    "EmptyMutationError",
    "SubtitleDecodeError",
    "SubtitleVanishedError",
    # Execution
    "QueryExecutor",
    "SqliteQueryExecutor",
    # Repository
    "FilenameResolver",
    "SubtitleRepository",
    # Schema
    "create_schema",
    # Types
    "VIDEO_TABLES",
    "FileStatus",
    "RecordingType",
    "Subtitle",
    "SubtitleQueryInput",
    "SubtitleResult",
    "SubtitleUpdateInput",
    "SyobocalFlag",
    "TranscodeQuality",
    "VideoTable",
    "VideoType",
]
