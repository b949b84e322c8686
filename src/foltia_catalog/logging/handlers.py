"""Log formatters that carry catalog record context.

Repository mutations pass the subtitle, video format and file they touch
through ``extra=``. Both formatters lift those fields out of the record so
a log line can be traced back to a foltia_subtitle row and its satellite
file tables.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any

# Record attributes treated as catalog context, in output order.
CONTEXT_FIELDS: tuple[str, ...] = ("pid", "tid", "video_type", "video_file", "rows")

TEXT_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
TEXT_DATEFMT = "%Y-%m-%dT%H:%M:%S%z"


def record_context(record: logging.LogRecord) -> dict[str, Any]:
    """Return the catalog fields attached to a record.

    Enum members are rendered by name; absent and None fields are left out.
    """
    context: dict[str, Any] = {}
    for name in CONTEXT_FIELDS:
        value = getattr(record, name, None)
        if value is None:
            continue
        context[name] = value.name if isinstance(value, Enum) else value
    return context


class CatalogTextFormatter(logging.Formatter):
    """Plain-text formatter that appends catalog context.

    Example:
        2024-01-15T23:30:00+0900 INFO    foltia_catalog.db.repository:
        Attached SD video ep1.mp4 to subtitle 1 [pid=1 video_type=SD video_file=ep1.mp4]
    """

    def __init__(self) -> None:
        super().__init__(TEXT_FORMAT, datefmt=TEXT_DATEFMT)

    def formatMessage(self, record: logging.LogRecord) -> str:
        line = super().formatMessage(record)
        context = record_context(record)
        if not context:
            return line
        fields = " ".join(f"{key}={value}" for key, value in context.items())
        return f"{line} [{fields}]"


class JSONFormatter(logging.Formatter):
    """Format each record as one JSON object per line.

    Keys: ``ts`` (UTC, millisecond precision), ``level`` (lower case),
    ``logger``, ``msg``, any catalog context fields at the top level, and
    ``exc`` when the record carries an exception.
    """

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry: dict[str, Any] = {
            "ts": created.isoformat(timespec="milliseconds"),
            "level": record.levelname.lower(),
            "logger": record.name,
            "msg": record.getMessage(),
        }
        entry.update(record_context(record))
        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str, ensure_ascii=False)
