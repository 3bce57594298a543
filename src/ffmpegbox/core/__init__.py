"""Core utilities package.

Pure helpers with no dependency on the rest of ffmpegbox.
"""

from ffmpegbox.core.subprocess_utils import run_command

__all__ = [
    "run_command",
]
