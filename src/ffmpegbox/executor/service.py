"""FFmpeg service: the single place that talks to the ffmpeg binary.

Wraps the ffmpeg section of the configuration and provides command
construction for admitted tasks, non-blocking process creation, and the
binary's version query.
"""

from __future__ import annotations

import logging
import subprocess  # nosec B404 - subprocess is required for FFmpeg invocation
from pathlib import Path
from typing import Any

from ffmpegbox.admission.gate import AdmittedTask
from ffmpegbox.config.models import FFmpegConfig
from ffmpegbox.core.subprocess_utils import run_command
from ffmpegbox.domain.models import Task
from ffmpegbox.exceptions import ExecutionError
from ffmpegbox.executor.command import build_command_args
from ffmpegbox.executor.naming import derive_output_filename

logger = logging.getLogger(__name__)

VERSION_FLAG = "-version"

# Timeout for the version query (seconds)
VERSION_TIMEOUT = 10


class FFmpegService:
    """Builds and launches ffmpeg invocations for admitted tasks."""

    def __init__(self, config: FFmpegConfig) -> None:
        self._config = config

    @property
    def binary_path(self) -> str:
        return self._config.binary_path

    def build_command(
        self,
        input_path: Path | str,
        output_path: Path | str,
        admitted: AdmittedTask,
    ) -> list[str]:
        """Full command line: binary path followed by the task's arguments."""
        args = build_command_args(input_path, output_path, admitted)
        return [self.binary_path, *args]

    def build_process(
        self,
        input_path: Path | str,
        output_path: Path | str,
        admitted: AdmittedTask,
        **popen_kwargs: Any,
    ) -> subprocess.Popen:
        """Start ffmpeg for an admitted task without waiting for it.

        Lifetime and cancellation of the returned process belong to the
        caller.

        Args:
            input_path: Source media file.
            output_path: Destination file.
            admitted: Parameters returned by the admission gate.
            **popen_kwargs: Passed through to subprocess.Popen.

        Returns:
            The running process.

        Raises:
            ExecutionError: If the binary cannot be started.
        """
        cmd = self.build_command(input_path, output_path, admitted)
        logger.debug(
            "Starting ffmpeg: %s",
            " ".join(cmd),
            extra={"task_id": admitted.task_id},
        )
        try:
            return subprocess.Popen(cmd, **popen_kwargs)  # nosec B603 - admitted args
        except OSError as e:
            raise ExecutionError(f"failed to start ffmpeg: {e}") from e

    def get_version(self, timeout: float = VERSION_TIMEOUT) -> str:
        """Query the binary's self-reported version.

        Runs ``<binary> -version`` and returns the first line of its output.

        Args:
            timeout: Seconds to wait for the binary.

        Returns:
            First output line, stripped, e.g. "ffmpeg version 6.1.1 ...".

        Raises:
            ExecutionError: If the binary cannot be run, exits non-zero,
                times out, or prints nothing.
        """
        try:
            stdout, stderr, rc = run_command(
                [self.binary_path, VERSION_FLAG], timeout=timeout
            )
        except subprocess.TimeoutExpired as e:
            raise ExecutionError(
                f"failed to get ffmpeg version: timed out after {timeout}s"
            ) from e
        except OSError as e:
            raise ExecutionError(f"failed to get ffmpeg version: {e}") from e

        if rc != 0:
            raise ExecutionError(
                f"failed to get ffmpeg version: exit status {rc}",
                returncode=rc,
                stderr=stderr,
            )

        first_line = stdout.split("\n", 1)[0].strip()
        if not first_line:
            raise ExecutionError(
                "failed to get ffmpeg version: empty output",
                returncode=rc,
                stderr=stderr,
            )
        return first_line

    def generate_output_filename(
        self,
        task_id: str,
        input_filename: str,
        task: Task | AdmittedTask,
    ) -> str:
        """Derive the output filename for ``task``; see derive_output_filename."""
        return derive_output_filename(task_id, input_filename, task.output_format)
