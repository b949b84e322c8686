"""Unit tests for db/queries/helpers.py."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from foltia_catalog.db.exceptions import SubtitleDecodeError
from foltia_catalog.db.queries.helpers import (
    _decode_timestamp,
    _escape_like_pattern,
    _row_to_subtitle,
    decode_foltia_datetime,
    encode_foltia_datetime,
)
from foltia_catalog.db.types import FileStatus, SyobocalFlag, TranscodeQuality


class TestEscapeLikePattern:
    """Tests for LIKE pattern escaping."""

    def test_escapes_percent(self) -> None:
        """Percent sign is escaped."""
        assert _escape_like_pattern("100%") == "100\\%"

    def test_escapes_underscore(self) -> None:
        """Underscore is escaped."""
        assert _escape_like_pattern("ep_1") == "ep\\_1"

    def test_escapes_backslash(self) -> None:
        """Backslash is escaped first so later escapes are not doubled."""
        assert _escape_like_pattern("a\\b") == "a\\\\b"

    def test_escapes_bracket(self) -> None:
        assert _escape_like_pattern("[SP]") == "\\[SP]"

    def test_japanese_text_unchanged(self) -> None:
        """Non-ASCII titles pass through unchanged."""
        assert _escape_like_pattern("最終回") == "最終回"


class TestFoltiaDatetime:
    """Tests for the YYYYMMDDhhmm timestamp codec."""

    def test_decode(self) -> None:
        assert decode_foltia_datetime(202401152330) == datetime(2024, 1, 15, 23, 30)

    def test_decode_none(self) -> None:
        assert decode_foltia_datetime(None) is None

    def test_encode(self) -> None:
        assert encode_foltia_datetime(datetime(2024, 1, 15, 23, 30)) == 202401152330

    def test_decode_impossible_date(self) -> None:
        """An impossible date is a decode error."""
        with pytest.raises(SubtitleDecodeError) as exc_info:
            decode_foltia_datetime(202402302330)
        assert exc_info.value.field == "datetime"

    def test_decode_too_many_digits(self) -> None:
        with pytest.raises(SubtitleDecodeError):
            decode_foltia_datetime(20240115233000)


class TestDecodeTimestamp:
    """Tests for lastupdate decoding."""

    def test_naive_text_is_utc(self) -> None:
        result = _decode_timestamp("2024-01-15 12:00:00")
        assert result == datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)

    def test_offset_preserved(self) -> None:
        result = _decode_timestamp("2024-01-15T21:00:00+09:00")
        assert result.utcoffset() == timedelta(hours=9)

    def test_datetime_accepted(self) -> None:
        value = datetime(2024, 1, 15, 12, 0)
        assert _decode_timestamp(value).tzinfo is timezone.utc

    def test_none(self) -> None:
        assert _decode_timestamp(None) is None

    def test_garbage_raises(self) -> None:
        with pytest.raises(SubtitleDecodeError, match="lastupdate"):
            _decode_timestamp("yesterday")


def _row(**overrides) -> dict:
    row = {
        "pid": 1,
        "tid": 5,
        "stationid": 3,
        "countno": 1,
        "subtitle": "Ep1",
        "startdatetime": 202401152330,
        "enddatetime": 202401160000,
        "startoffset": 0,
        "lengthmin": 30,
        "m2pfilename": None,
        "pspfilename": "ep1.mp4",
        "epgaddedby": None,
        "lastupdate": None,
        "filestatus": None,
        "aspect": None,
        "encodesetting": None,
        "mp4hd": None,
        "syobocalflag": None,
        "syobocalrev": 0,
    }
    row.update(overrides)
    return row


class TestRowToSubtitle:
    """Tests for mapping foltia_subtitle rows."""

    def test_maps_columns(self) -> None:
        subtitle = _row_to_subtitle(_row())
        assert subtitle.pid == 1
        assert subtitle.tid == 5
        assert subtitle.station_id == 3
        assert subtitle.subtitle == "Ep1"
        assert subtitle.start_datetime == datetime(2024, 1, 15, 23, 30)
        assert subtitle.end_datetime == datetime(2024, 1, 16, 0, 0)
        assert subtitle.psp_filename == "ep1.mp4"

    def test_nullable_columns_stay_none(self) -> None:
        """NULL coded columns map to None, not to a default member."""
        subtitle = _row_to_subtitle(_row())
        assert subtitle.file_status is None
        assert subtitle.encode_setting is None
        assert subtitle.syobocal_flag == frozenset()

    def test_zero_codes_preserved(self) -> None:
        """A stored 0 is a real value, not NULL."""
        subtitle = _row_to_subtitle(_row(encodesetting=0, countno=0, aspect=0))
        assert subtitle.encode_setting is TranscodeQuality.NONE
        assert subtitle.count_no == 0
        assert subtitle.aspect == 0

    def test_null_counters_become_zero(self) -> None:
        subtitle = _row_to_subtitle(
            _row(startoffset=None, lengthmin=None, syobocalrev=None)
        )
        assert subtitle.start_offset == 0
        assert subtitle.length_min == 0
        assert subtitle.syobocal_rev == 0

    def test_decodes_coded_columns(self) -> None:
        subtitle = _row_to_subtitle(
            _row(filestatus=80, encodesetting=2, syobocalflag=2 | 8)
        )
        assert subtitle.file_status is FileStatus.TRANSCODE_COMPLETE
        assert subtitle.encode_setting is TranscodeQuality.MIDDLE
        assert subtitle.syobocal_flag == frozenset(
            {SyobocalFlag.NEW, SyobocalFlag.RERUN}
        )

    def test_unknown_file_status_raises(self) -> None:
        with pytest.raises(SubtitleDecodeError):
            _row_to_subtitle(_row(filestatus=12345))

    def test_unknown_encode_setting_raises(self) -> None:
        with pytest.raises(SubtitleDecodeError):
            _row_to_subtitle(_row(encodesetting=42))

    def test_last_update_is_aware(self) -> None:
        subtitle = _row_to_subtitle(_row(lastupdate="2024-01-15 12:00:00"))
        assert subtitle.last_update.tzinfo is not None
