"""Configuration models for the subtitle catalog."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path


@dataclass
class DatabaseConfig:
    """Location of the catalog database."""

    # None = ~/.foltia-catalog/catalog.db
    path: Path | None = None

    # Seconds to wait for a locked database
    timeout: float = 30.0

    def __post_init__(self) -> None:
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")


@dataclass
class CacheConfig:
    """Read-through cache for subtitle lookups."""

    enabled: bool = True
    ttl_seconds: int = 300
    max_entries: int = 4096

    def __post_init__(self) -> None:
        if self.ttl_seconds < 1:
            raise ValueError(f"ttl_seconds must be at least 1, got {self.ttl_seconds}")
        if self.max_entries < 1:
            raise ValueError(f"max_entries must be at least 1, got {self.max_entries}")


@dataclass
class QueryConfig:
    """Search defaults."""

    default_page_rows: int = 100

    def __post_init__(self) -> None:
        if not 1 <= self.default_page_rows <= 1000:
            raise ValueError(
                f"default_page_rows must be between 1 and 1000, "
                f"got {self.default_page_rows}"
            )


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    # Log level: debug, info, warning, error
    level: str = "info"

    # Log file path (None = stderr only)
    file: Path | None = None

    # Log format: text or json
    format: str = "text"

    # Also log to stderr when file is set
    include_stderr: bool = False

    # Rotation threshold in bytes (default 10MB)
    max_bytes: int = 10_485_760

    # Number of rotated files to keep
    backup_count: int = 5

    def __post_init__(self) -> None:
        """Validate configuration."""
        valid_levels = {"debug", "info", "warning", "error"}
        if self.level.lower() not in valid_levels:
            raise ValueError(f"level must be one of {valid_levels}, got {self.level}")
        valid_formats = {"text", "json"}
        if self.format.lower() not in valid_formats:
            raise ValueError(
                f"format must be one of {valid_formats}, got {self.format}"
            )

    def with_overrides(self, **overrides: object) -> LoggingConfig:
        """Return a copy with every non-None override applied.

        The copy is validated again, so an invalid override raises ValueError.
        """
        changes = {name: value for name, value in overrides.items() if value is not None}
        if not changes:
            return self
        return replace(self, **changes)


@dataclass
class CatalogConfig:
    """Top-level configuration."""

    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    query: QueryConfig = field(default_factory=QueryConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
