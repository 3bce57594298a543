"""Execution layer for ffmpegbox.

Module organization:
- command.py: ffmpeg argument construction for admitted tasks
- naming.py: Output filename derivation
- service.py: FFmpegService (command line, process launch, version query)
- runner.py: run_task, single-run execution with cancellation

Usage:
    from ffmpegbox.executor import FFmpegService, build_command_args
"""

from .command import build_command_args
from .naming import derive_output_filename, strip_extension
from .runner import RunResult, run_task
from .service import FFmpegService

__all__ = [
    "FFmpegService",
    "RunResult",
    "build_command_args",
    "derive_output_filename",
    "run_task",
    "strip_extension",
]
