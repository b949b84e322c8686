"""Data type definitions for the subtitle catalog database layer.

This module contains all enums and dataclasses for the database layer:
- Coded enumerations stored as integers (FileStatus, TranscodeQuality)
- The syobocal flag bitmask (SyobocalFlag)
- Video formats and their satellite tables (VideoType, VIDEO_TABLES)
- The Subtitle record and the query/update inputs around it
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from foltia_catalog.db.exceptions import SubtitleDecodeError

logger = logging.getLogger(__name__)


class RecordingType(Enum):
    """Category of a subtitle, derived from the sign of its tid."""

    PROGRAM = "program"  # tid > 0
    EPG = "epg"  # tid == 0
    KEYWORD = "keyword"  # tid == -1

    @classmethod
    def from_tid(cls, tid: int) -> RecordingType:
        """Derive the recording type from a program identifier.

        Raises:
            SubtitleDecodeError: If tid is negative but not -1.
        """
        if tid > 0:
            return cls.PROGRAM
        if tid == 0:
            return cls.EPG
        if tid == -1:
            return cls.KEYWORD
        raise SubtitleDecodeError("tid", tid)


class VideoType(Enum):
    """Format of a generated video file."""

    TS = "ts"  # Raw transport stream
    SD = "sd"  # SD transcode
    HD = "hd"  # HD transcode


@dataclass(frozen=True)
class VideoTable:
    """Where a video format lives in the database."""

    table: str
    """Satellite table holding one row per attached file."""

    filename_column: str
    """Filename column in the satellite table."""

    subtitle_column: str
    """Filename column on foltia_subtitle."""

    keyed_by_tid: bool
    """True when the satellite key is (tid, filename) rather than filename."""

    attribute: str
    """Matching field name on Subtitle."""


VIDEO_TABLES: dict[VideoType, VideoTable] = {
    VideoType.TS: VideoTable(
        "foltia_m2pfiles", "m2pfilename", "m2pfilename", False, "m2p_filename"
    ),
    VideoType.SD: VideoTable(
        "foltia_mp4files", "mp4filename", "pspfilename", True, "psp_filename"
    ),
    VideoType.HD: VideoTable(
        "foltia_hdmp4files", "hdmp4filename", "mp4hd", True, "mp4hd"
    ),
}


class _CodedEnum(Enum):
    """Enum whose values are the integer codes stored in the database."""

    @classmethod
    def from_code(cls, code: int):
        """Look up a member by its stored code.

        Raises:
            SubtitleDecodeError: If the code is not in the closed set.
        """
        try:
            return cls(code)
        except ValueError:
            raise SubtitleDecodeError(cls.__name__, code) from None

    @property
    def code(self) -> int:
        return self.value


class FileStatus(_CodedEnum):
    """Recording/transcoding progress of a subtitle (filestatus column)."""

    RESERVING = 10
    RECORDING = 20
    RECORD_TS_SPLITTING = 30
    RECORD_END = 40
    WAITING_CAPTURE = 50
    CAPTURE = 55
    CAPTURE_END = 60
    THUMBNAIL_CREATE = 65
    TRANSCODE_WAIT = 70
    TRANSCODE_TS_SPLITTING = 71
    TRANSCODE_FFMPEG = 72
    TRANSCODE_WAVE = 73
    TRANSCODE_AAC = 74
    TRANSCODE_MP4BOX = 75
    TRANSCODE_ATOM = 76
    TRANSCODE_COMPLETE = 80
    ALL_COMPLETE = 200


class TranscodeQuality(_CodedEnum):
    """Transcode quality setting (encodesetting column)."""

    NONE = 0
    HIGH = 1
    MIDDLE = 2
    LOW = 3


class SyobocalFlag(Enum):
    """Program flags published by the syobocal schedule source.

    Stored together as a bitmask in the syobocalflag column.
    """

    NOTE = 1
    NEW = 2
    FINAL = 4
    RERUN = 8

    @classmethod
    def decode(cls, mask: int) -> frozenset[SyobocalFlag]:
        """Decode a bitmask into the set of flags it contains.

        Bits outside the known flags are ignored.
        """
        flags = frozenset(flag for flag in cls if mask & flag.value)
        unknown = mask & ~cls.encode(flags)
        if unknown:
            logger.warning("Ignoring unknown syobocal flag bits: %#x", unknown)
        return flags

    @staticmethod
    def encode(flags: Iterable[SyobocalFlag]) -> int:
        """Encode a set of flags into a bitmask."""
        mask = 0
        for flag in flags:
            mask |= flag.value
        return mask


@dataclass(frozen=True)
class Subtitle:
    """Database record for foltia_subtitle (one broadcast instance)."""

    pid: int
    tid: int
    station_id: int
    count_no: int | None
    subtitle: str | None
    start_datetime: datetime | None
    end_datetime: datetime | None
    start_offset: int
    length_min: int
    m2p_filename: str | None
    psp_filename: str | None
    epg_added_by: int | None
    last_update: datetime | None
    file_status: FileStatus | None
    aspect: int | None
    encode_setting: TranscodeQuality | None
    mp4hd: str | None
    syobocal_flag: frozenset[SyobocalFlag] = field(default_factory=frozenset)
    syobocal_rev: int = 0

    @property
    def recording_type(self) -> RecordingType:
        return RecordingType.from_tid(self.tid)

    def video_filename(self, video_type: VideoType) -> str | None:
        """Return the attached filename for a video format, if any."""
        return getattr(self, VIDEO_TABLES[video_type].attribute)


@dataclass
class SubtitleQueryInput:
    """Filters for searching subtitles.

    None means "no constraint" for every field.
    """

    tid: int | None = None
    recording_type: RecordingType | None = None
    receivable_station: bool | None = None
    # True: has a resolvable video file; False: no filename at all
    has_recording: bool | None = None
    keyword: str | None = None


@dataclass
class SubtitleUpdateInput:
    """Partial update of a subtitle's mutable fields.

    Each *_defined flag says whether the caller intends to write that
    field, independently of whether the value is None.
    """

    pid: int
    subtitle: str | None = None
    subtitle_defined: bool = False
    file_status: FileStatus | None = None
    file_status_defined: bool = False
    encode_setting: TranscodeQuality | None = None
    encode_setting_defined: bool = False

    @classmethod
    def of(cls, pid: int, **fields) -> SubtitleUpdateInput:
        """Build an update that defines exactly the given fields.

        Example:
            SubtitleUpdateInput.of(1, subtitle="Ep1", file_status=None)
        """
        kwargs: dict = {"pid": pid}
        for name, value in fields.items():
            if name not in ("subtitle", "file_status", "encode_setting"):
                raise TypeError(f"Unknown updatable field: {name}")
            kwargs[name] = value
            kwargs[f"{name}_defined"] = True
        return cls(**kwargs)


@dataclass
class SubtitleResult:
    """One page of a subtitle search."""

    page: int
    total: int
    items: list[Subtitle] = field(default_factory=list)
