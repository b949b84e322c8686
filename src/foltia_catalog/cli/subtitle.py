"""CLI commands for searching and updating subtitles.

Examples:

    # Latest recordings with a video file
    foltia-catalog subtitle find --has-recording

    # Attach an HD transcode using the recorder's naming
    foltia-catalog subtitle attach-video 1234 hd

    # Detach TS and SD files
    foltia-catalog subtitle detach-video 1234 ts sd
"""

from __future__ import annotations

import functools
import json
import logging
import sqlite3
from collections.abc import Callable
from typing import NoReturn

import click

from foltia_catalog.cli import get_repository
from foltia_catalog.cli.exit_codes import ExitCode
from foltia_catalog.cli.formatting import format_subtitle_line, subtitle_to_dict
from foltia_catalog.db.exceptions import EmptyMutationError, SubtitleDecodeError
from foltia_catalog.db.types import (
    FileStatus,
    RecordingType,
    SubtitleQueryInput,
    SubtitleUpdateInput,
    TranscodeQuality,
    VideoType,
)
from foltia_catalog.filenames import default_filename_resolver, fixed_filename_resolver

logger = logging.getLogger(__name__)

_VIDEO_TYPE_CHOICE = click.Choice([v.value for v in VideoType], case_sensitive=False)


def _fail(message: str, code: ExitCode) -> NoReturn:
    click.echo(f"Error: {message}", err=True)
    raise SystemExit(int(code))


def _handle_catalog_errors(func: Callable) -> Callable:
    """Map catalog and database errors to exit codes."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except EmptyMutationError as e:
            _fail(str(e), ExitCode.INVALID_ARGUMENTS)
        except SubtitleDecodeError as e:
            _fail(str(e), ExitCode.CORRUPT_RECORD)
        except sqlite3.Error as e:
            logger.error("Database error: %s", e)
            _fail(f"Database error: {e}", ExitCode.DATABASE_ERROR)

    return wrapper


def _coded(enum_cls):
    """Click callback parsing an integer code into a coded enum member."""

    def convert(ctx, param, value):
        if value is None:
            return None
        try:
            return enum_cls.from_code(value)
        except SubtitleDecodeError:
            codes = ", ".join(str(member.code) for member in enum_cls)
            raise click.BadParameter(f"must be one of {codes}") from None

    return convert


def _echo_subtitle(subtitle, json_output: bool) -> None:
    if json_output:
        click.echo(json.dumps(subtitle_to_dict(subtitle), indent=2, ensure_ascii=False))
        return
    for key, value in subtitle_to_dict(subtitle).items():
        click.echo(f"{key:<16} {value if value is not None else '-'}")


@click.group("subtitle")
def subtitle_group() -> None:
    """Search and maintain subtitles (broadcast instances)."""


@subtitle_group.command("find")
@click.option("--tid", type=int, default=None, help="Program identifier.")
@click.option(
    "--type",
    "recording_type",
    type=click.Choice([t.value for t in RecordingType], case_sensitive=False),
    default=None,
    help="Recording type.",
)
@click.option(
    "--receivable/--not-receivable",
    "receivable_station",
    default=None,
    help="Only stations that are (or are not) received.",
)
@click.option(
    "--has-recording/--no-recording",
    "has_recording",
    default=None,
    help="Only subtitles with (or without) a video file.",
)
@click.option("--keyword", default=None, help="Substring of subtitle or program title.")
@click.option("--page", type=click.IntRange(min=0), default=0, help="Zero-based page.")
@click.option(
    "--rows", type=click.IntRange(min=1), default=None, help="Rows per page."
)
@click.option("--json", "json_output", is_flag=True, help="Output as JSON.")
@click.pass_context
@_handle_catalog_errors
def find_command(
    ctx: click.Context,
    tid: int | None,
    recording_type: str | None,
    receivable_station: bool | None,
    has_recording: bool | None,
    keyword: str | None,
    page: int,
    rows: int | None,
    json_output: bool,
) -> None:
    """Search subtitles, newest first."""
    repository = get_repository(ctx)
    query = SubtitleQueryInput(
        tid=tid,
        recording_type=RecordingType(recording_type.lower()) if recording_type else None,
        receivable_station=receivable_station,
        has_recording=has_recording,
        keyword=keyword,
    )
    result = repository.find(query, page=page, page_rows=rows)

    if json_output:
        output = {
            "page": result.page,
            "total": result.total,
            "items": [subtitle_to_dict(s) for s in result.items],
        }
        click.echo(json.dumps(output, indent=2, ensure_ascii=False))
        return

    if not result.items:
        click.echo("No subtitles found.")
        return

    click.echo(f"Subtitles: {result.total} (page {result.page})")
    click.echo()
    header = f"{'PID':>8}  {'TID':>6}  {'Start':<16}  {'TSH':<3}  Subtitle"
    click.echo(header)
    click.echo("─" * len(header))
    for subtitle in result.items:
        click.echo(format_subtitle_line(subtitle))


@subtitle_group.command("get")
@click.argument("pid", type=int)
@click.option("--json", "json_output", is_flag=True, help="Output as JSON.")
@click.pass_context
@_handle_catalog_errors
def get_command(ctx: click.Context, pid: int, json_output: bool) -> None:
    """Show one subtitle."""
    subtitle = get_repository(ctx).get(pid)
    if subtitle is None:
        _fail(f"Subtitle {pid} not found.", ExitCode.SUBTITLE_NOT_FOUND)
    _echo_subtitle(subtitle, json_output)


@subtitle_group.command("update")
@click.argument("pid", type=int)
@click.option("--subtitle", "text", default=None, help="New subtitle text.")
@click.option(
    "--file-status",
    type=int,
    default=None,
    callback=_coded(FileStatus),
    help="File status code.",
)
@click.option(
    "--encode-setting",
    type=int,
    default=None,
    callback=_coded(TranscodeQuality),
    help="Transcode quality code.",
)
@click.pass_context
@_handle_catalog_errors
def update_command(
    ctx: click.Context,
    pid: int,
    text: str | None,
    file_status: FileStatus | None,
    encode_setting: TranscodeQuality | None,
) -> None:
    """Update the subtitle text, file status or transcode setting."""
    fields = {}
    if text is not None:
        fields["subtitle"] = text
    if file_status is not None:
        fields["file_status"] = file_status
    if encode_setting is not None:
        fields["encode_setting"] = encode_setting

    count = get_repository(ctx).update(SubtitleUpdateInput.of(pid, **fields))
    if count == 0:
        _fail(f"Subtitle {pid} not found.", ExitCode.SUBTITLE_NOT_FOUND)
    click.echo(f"Updated subtitle {pid}.")


@subtitle_group.command("attach-video")
@click.argument("pid", type=int)
@click.argument("video_type", type=_VIDEO_TYPE_CHOICE)
@click.option(
    "--filename",
    default=None,
    help="Filename to record (default: the recorder's naming scheme).",
)
@click.pass_context
@_handle_catalog_errors
def attach_video_command(
    ctx: click.Context, pid: int, video_type: str, filename: str | None
) -> None:
    """Record a video file of the given format for a subtitle."""
    resolver = (
        fixed_filename_resolver(filename) if filename else default_filename_resolver
    )
    try:
        subtitle = get_repository(ctx).update_video(
            pid, VideoType(video_type.lower()), resolver
        )
    except SubtitleDecodeError:
        raise
    except ValueError as e:
        # Raised by the resolver, e.g. a subtitle without a start time
        _fail(str(e), ExitCode.INVALID_ARGUMENTS)
    if subtitle is None:
        _fail(f"Subtitle {pid} not found.", ExitCode.SUBTITLE_NOT_FOUND)
    click.echo(
        f"Attached {subtitle.video_filename(VideoType(video_type.lower()))} "
        f"to subtitle {pid}."
    )


@subtitle_group.command("detach-video")
@click.argument("pid", type=int)
@click.argument("video_types", type=_VIDEO_TYPE_CHOICE, nargs=-1, required=True)
@click.pass_context
@_handle_catalog_errors
def detach_video_command(ctx: click.Context, pid: int, video_types: tuple[str, ...]) -> None:
    """Forget video files of the given formats for a subtitle."""
    result = get_repository(ctx).delete_video(
        pid, {VideoType(v.lower()) for v in video_types}
    )
    if result is None:
        _fail(f"Subtitle {pid} not found.", ExitCode.SUBTITLE_NOT_FOUND)
    before, _after = result
    for video_type in sorted({VideoType(v.lower()) for v in video_types}, key=lambda v: v.name):
        filename = before.video_filename(video_type)
        if filename is None:
            click.echo(f"{video_type.name}: nothing attached")
        else:
            click.echo(f"{video_type.name}: detached {filename}")
