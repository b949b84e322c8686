"""Root logger setup from LoggingConfig."""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING

from foltia_catalog.logging.handlers import CatalogTextFormatter, JSONFormatter

if TYPE_CHECKING:
    from foltia_catalog.config.models import LoggingConfig


def _make_formatter(log_format: str) -> logging.Formatter:
    if log_format.lower() == "json":
        return JSONFormatter()
    return CatalogTextFormatter()


def _open_log_file(config: LoggingConfig) -> RotatingFileHandler | None:
    """Open the rotating log file, or return None if it cannot be written."""
    path = Path(config.file).expanduser()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        return RotatingFileHandler(
            path,
            maxBytes=config.max_bytes,
            backupCount=config.backup_count,
            encoding="utf-8",
        )
    except OSError as exc:
        print(
            f"foltia-catalog: cannot write log file {path} ({exc}); logging to stderr",
            file=sys.stderr,
        )
        return None


def configure_logging(config: LoggingConfig) -> None:
    """Replace the root logger's handlers according to config.

    Records go to the rotating log file when one is configured and can be
    opened, and to stderr when no file is in use or include_stderr is set.
    """
    handlers: list[logging.Handler] = []
    if config.file is not None:
        file_handler = _open_log_file(config)
        if file_handler is not None:
            handlers.append(file_handler)
    if config.include_stderr or not handlers:
        handlers.append(logging.StreamHandler(sys.stderr))

    formatter = _make_formatter(config.format)
    for handler in handlers:
        handler.setFormatter(formatter)

    level = logging.getLevelNamesMapping()[config.level.upper()]
    logging.basicConfig(level=level, handlers=handlers, force=True)
