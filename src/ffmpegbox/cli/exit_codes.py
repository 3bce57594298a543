"""Centralized exit codes for all CLI commands.

Exit codes:
    0: Success
    1: Fatal error (unusable configuration, ffmpeg binary not runnable)
    2: Task rejected by the admission gate
"""

from enum import IntEnum, unique


@unique
class ExitCode(IntEnum):
    """Exit codes for ffmpegbox CLI commands."""

    SUCCESS = 0
    GENERAL_ERROR = 1
    VALIDATION_ERROR = 2
