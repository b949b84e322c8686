"""CLI module for the subtitle catalog."""

import atexit
import logging
import sqlite3
from pathlib import Path

import click

from foltia_catalog.cache import NullCacheRegions, TTLCacheRegions
from foltia_catalog.config import CatalogConfig, get_config
from foltia_catalog.db import SqliteQueryExecutor, SubtitleRepository, open_connection

_db_conn: sqlite3.Connection | None = None
_logging_configured: bool = False

logger = logging.getLogger(__name__)


def _cleanup_db_connection() -> None:
    """Close the CLI database connection on exit."""
    global _db_conn
    if _db_conn is not None:
        _db_conn.close()
        _db_conn = None


def _get_db_connection(config: CatalogConfig) -> sqlite3.Connection:
    """Open the database connection shared by subcommands.

    The connection lives for the rest of the process and is closed by an
    atexit handler.
    """
    global _db_conn
    if _db_conn is None:
        _db_conn = open_connection(config.database.path, timeout=config.database.timeout)
        atexit.register(_cleanup_db_connection)
    return _db_conn


def _configure_logging(
    config: CatalogConfig,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> None:
    """Configure logging once per process from config plus CLI options."""
    global _logging_configured
    if _logging_configured:
        return

    from foltia_catalog.logging import configure_logging

    configure_logging(
        config.logging.with_overrides(
            level=log_level,
            file=log_file,
            format="json" if log_json else None,
        )
    )
    _logging_configured = True


def get_repository(ctx: click.Context) -> SubtitleRepository:
    """Build a SubtitleRepository from the Click context.

    Raises:
        click.ClickException: If no connection is available.
    """
    repository = ctx.obj.get("repository")
    if repository is not None:
        return repository

    conn = ctx.obj.get("db_conn")
    if conn is None:
        raise click.ClickException("Failed to connect to database.")

    config: CatalogConfig = ctx.obj.get("config") or CatalogConfig()
    if config.cache.enabled:
        cache = TTLCacheRegions(
            ttl_seconds=config.cache.ttl_seconds,
            max_entries=config.cache.max_entries,
        )
    else:
        cache = NullCacheRegions()

    repository = SubtitleRepository(
        SqliteQueryExecutor(conn),
        cache,
        default_page_rows=config.query.default_page_rows,
    )
    ctx.obj["repository"] = repository
    return repository


@click.group()
@click.version_option(package_name="foltia-catalog")
@click.option(
    "--db",
    "db_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Catalog database file (default: ~/.foltia-catalog/catalog.db).",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file (default: ~/.foltia-catalog/config.toml).",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default=None,
    help="Override log level (default: info).",
)
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Override log file path.",
)
@click.option(
    "--log-json",
    is_flag=True,
    default=False,
    help="Use JSON log format.",
)
@click.pass_context
def main(
    ctx: click.Context,
    db_path: Path | None,
    config_path: Path | None,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> None:
    """foltia-catalog - Search and maintain a foltia recording catalog."""
    ctx.ensure_object(dict)

    if "config" not in ctx.obj:
        try:
            ctx.obj["config"] = get_config(config_path=config_path, database_path=db_path)
        except ValueError as e:
            raise click.ClickException(f"Invalid configuration: {e}") from e
    config: CatalogConfig = ctx.obj["config"]

    _configure_logging(config, log_level, log_file, log_json)

    # Preserve a connection passed in by tests
    if "db_conn" not in ctx.obj:
        ctx.obj["db_conn"] = _get_db_connection(config)


def _register_commands():
    from foltia_catalog.cli.db import db_group
    from foltia_catalog.cli.subtitle import subtitle_group

    main.add_command(db_group)
    main.add_command(subtitle_group)


_register_commands()
