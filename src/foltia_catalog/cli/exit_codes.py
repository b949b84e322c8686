"""Centralized exit codes for all CLI commands.

Exit code ranges:
    0: Success
    1-9: General errors
    10-19: Validation errors (config, input)
    20-29: Target errors
    40-49: Operation errors
"""

from enum import IntEnum


class ExitCode(IntEnum):
    """Exit codes for foltia-catalog CLI commands."""

    # Success (0)
    SUCCESS = 0

    # General errors (1-9)
    GENERAL_ERROR = 1

    # Validation errors (10-19)
    INVALID_ARGUMENTS = 10
    CONFIG_ERROR = 11

    # Target errors (20-29)
    SUBTITLE_NOT_FOUND = 20

    # Operation errors (40-49)
    DATABASE_ERROR = 40
    CORRUPT_RECORD = 41
