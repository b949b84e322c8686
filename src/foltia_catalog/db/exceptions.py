"""Custom exceptions for the subtitle catalog.

This module provides specific exception types for catalog operations,
enabling callers to tell data corruption apart from usage errors.
Not-found is never an exception: lookups return None instead.
"""


class CatalogError(Exception):
    """Base exception for catalog errors.

    All catalog exceptions inherit from this class, allowing callers
    to catch them with a single except clause if desired.
    """


class SubtitleDecodeError(CatalogError, ValueError):
    """Raised when a stored coded value is outside its closed set.

    Attributes:
        field: Name of the coded field that failed to decode.
        value: The offending stored value.
    """

    def __init__(self, field: str, value: object) -> None:
        """Initialize the exception.

        Args:
            field: Name of the coded field that failed to decode.
            value: The offending stored value.
        """
        self.field = field
        self.value = value
        super().__init__(f"Unknown {field} code: {value!r}")


class EmptyMutationError(CatalogError, ValueError):
    """Raised when a mutation would produce an empty SET list."""


class SubtitleVanishedError(CatalogError, RuntimeError):
    """Raised when a subtitle disappears between a write and its re-read.

    Attributes:
        pid: Identifier of the subtitle that vanished.
    """

    def __init__(self, pid: int) -> None:
        self.pid = pid
        super().__init__(f"Subtitle {pid} vanished after update")
