"""Logging setup for the subtitle catalog."""

from foltia_catalog.logging.config import configure_logging
from foltia_catalog.logging.handlers import (
    CatalogTextFormatter,
    JSONFormatter,
    record_context,
)

__all__ = [
    "CatalogTextFormatter",
    "JSONFormatter",
    "configure_logging",
    "record_context",
]
