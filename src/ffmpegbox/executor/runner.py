"""Single-run execution of an admitted task.

``run_task`` is the building block a worker pool uses to execute one task:
it moves the task to processing, runs ffmpeg, and always leaves the task in
a terminal state. Cancellation (via a threading.Event) and timeouts
terminate the process and fail the task; nothing is retried.
"""

from __future__ import annotations

import logging
import subprocess  # nosec B404 - subprocess is required for FFmpeg invocation
import threading
import time
from collections import deque
from dataclasses import dataclass
from pathlib import Path
from typing import IO

from ffmpegbox.admission.gate import AdmittedTask
from ffmpegbox.domain.enums import TaskStatus
from ffmpegbox.domain.lifecycle import mark_failed, transition
from ffmpegbox.domain.models import Task
from ffmpegbox.exceptions import ExecutionError
from ffmpegbox.executor.service import FFmpegService
from ffmpegbox.logging.context import task_context

logger = logging.getLogger(__name__)

POLL_INTERVAL = 0.5  # Seconds between cancellation/timeout checks
TERMINATE_GRACE = 5.0  # Seconds to wait after SIGTERM before SIGKILL
STDERR_TAIL_LINES = 20


@dataclass
class RunResult:
    """Outcome of a single task run."""

    success: bool
    returncode: int | None = None
    error_message: str | None = None
    cancelled: bool = False
    timed_out: bool = False


def _drain(stream: IO[str], tail: deque[str]) -> None:
    """Read a pipe to EOF, keeping its last lines."""
    for line in stream:
        tail.append(line.rstrip())


def _stop_process(process: subprocess.Popen) -> None:
    """Terminate ``process``, escalating to kill if it ignores SIGTERM."""
    process.terminate()
    try:
        process.wait(timeout=TERMINATE_GRACE)
    except subprocess.TimeoutExpired:
        logger.warning(
            "ffmpeg did not exit after SIGTERM, killing pid %s", process.pid
        )
        process.kill()
        process.wait()


def _fail(task: Task, message: str, **flags: bool) -> RunResult:
    mark_failed(task, message)
    logger.error("Task failed: %s", message)
    return RunResult(success=False, error_message=message, **flags)


def run_task(
    task: Task,
    admitted: AdmittedTask,
    service: FFmpegService,
    input_path: Path | str,
    output_path: Path | str,
    cancel_event: threading.Event | None = None,
    timeout: float | None = None,
) -> RunResult:
    """Run ffmpeg for one task and record the outcome on the task.

    Args:
        task: Task in ready_to_start. Updated in place.
        admitted: The task's admitted parameters.
        service: FFmpeg service holding the binary path.
        input_path: Source media file.
        output_path: Destination file.
        cancel_event: Set by the caller to request cancellation.
        timeout: Maximum run time in seconds. None means no limit.

    Returns:
        RunResult describing the outcome. The task is completed on success
        and failed (with an error message) otherwise.

    Raises:
        InvalidStatusTransitionError: If the task is not ready_to_start.
    """
    event = cancel_event if cancel_event is not None else threading.Event()

    with task_context(task.id, task.client_name):
        transition(task, TaskStatus.PROCESSING)

        if event.is_set():
            return _fail(task, "task cancelled before start", cancelled=True)

        try:
            process = service.build_process(
                input_path,
                output_path,
                admitted,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.PIPE,
                text=True,
                errors="replace",
            )
        except ExecutionError as e:
            return _fail(task, str(e))

        stderr_tail: deque[str] = deque(maxlen=STDERR_TAIL_LINES)
        drain_thread = threading.Thread(
            target=_drain, args=(process.stderr, stderr_tail), daemon=True
        )
        drain_thread.start()

        start = time.monotonic()
        cancelled = False
        timed_out = False
        try:
            while process.poll() is None:
                if event.wait(POLL_INTERVAL):
                    cancelled = True
                    break
                if timeout is not None and time.monotonic() - start > timeout:
                    timed_out = True
                    break
        except BaseException:
            _stop_process(process)
            mark_failed(task, "task interrupted")
            raise

        if cancelled or timed_out:
            _stop_process(process)

        drain_thread.join(timeout=TERMINATE_GRACE)

        if cancelled:
            return _fail(task, "task cancelled", cancelled=True)
        if timed_out:
            return _fail(task, f"task timed out after {timeout}s", timed_out=True)

        rc = process.returncode
        if rc != 0:
            detail = stderr_tail[-1] if stderr_tail else ""
            message = f"ffmpeg exited with code {rc}"
            if detail:
                message = f"{message}: {detail}"
            result = _fail(task, message)
            result.returncode = rc
            return result

        transition(task, TaskStatus.COMPLETED)
        elapsed = time.monotonic() - start
        logger.info(
            "Task completed in %.2fs",
            elapsed,
            extra={"elapsed_seconds": round(elapsed, 3)},
        )
        return RunResult(success=True, returncode=rc)
