"""Tests for run_task()."""

import threading
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from ffmpegbox.admission import AdmittedTask
from ffmpegbox.config import FFmpegConfig
from ffmpegbox.domain import InvalidStatusTransitionError, Task, TaskStatus
from ffmpegbox.executor import FFmpegService, run_task

POPEN = "ffmpegbox.executor.service.subprocess.Popen"


@pytest.fixture(autouse=True)
def fast_polling():
    """Poll quickly so cancellation and timeout tests finish fast."""
    with patch("ffmpegbox.executor.runner.POLL_INTERVAL", 0.01):
        yield


@pytest.fixture
def service(ffmpeg_config: FFmpegConfig) -> FFmpegService:
    return FFmpegService(ffmpeg_config)


@pytest.fixture
def task() -> Task:
    return Task(
        id="t1",
        output_format="mp4",
        client_name="alpha",
        status=TaskStatus.READY_TO_START,
    )


@pytest.fixture
def admitted() -> AdmittedTask:
    return AdmittedTask(task_id="t1", output_format="mp4")


def _mock_process(returncode=0, poll=None, stderr_lines=()) -> MagicMock:
    process = MagicMock()
    process.returncode = returncode
    process.pid = 4242
    if poll is not None:
        process.poll.side_effect = poll
    else:
        process.poll.return_value = None
    lines = list(stderr_lines)
    process.stderr.__iter__ = lambda self: iter(lines)
    return process


class TestRunTask:
    """Tests for run_task with a mocked ffmpeg process."""

    def test_success(self, task, admitted, service) -> None:
        """A zero exit completes the task."""
        process = _mock_process(returncode=0, poll=[None, 0])
        with patch(POPEN, return_value=process) as mock_popen:
            result = run_task(task, admitted, service, "in.avi", "out.mp4")

        assert result.success is True
        assert result.returncode == 0
        assert task.status is TaskStatus.COMPLETED
        assert task.error_message is None
        cmd = mock_popen.call_args[0][0]
        assert cmd == ["/usr/bin/ffmpeg", "-i", "in.avi", "-f", "mp4", "-y", "out.mp4"]

    def test_non_zero_exit(self, task, admitted, service) -> None:
        """A non-zero exit fails the task with the last stderr line."""
        process = _mock_process(
            returncode=1,
            poll=[None, 1],
            stderr_lines=["frame=  10 fps=0.0\n", "Conversion failed!\n"],
        )
        with patch(POPEN, return_value=process):
            result = run_task(task, admitted, service, "in.avi", "out.mp4")

        assert result.success is False
        assert result.returncode == 1
        assert task.status is TaskStatus.FAILED
        assert task.error_message == "ffmpeg exited with code 1: Conversion failed!"

    def test_start_failure(self, task, admitted, service) -> None:
        """A binary that cannot start fails the task."""
        with patch(POPEN, side_effect=FileNotFoundError("missing")):
            result = run_task(task, admitted, service, "in.avi", "out.mp4")

        assert result.success is False
        assert task.status is TaskStatus.FAILED
        assert task.error_message.startswith("failed to start ffmpeg")

    def test_cancelled_before_start(self, task, admitted, service) -> None:
        """A pre-set event fails the task without spawning ffmpeg."""
        event = threading.Event()
        event.set()
        with patch(POPEN) as mock_popen:
            result = run_task(
                task, admitted, service, "in.avi", "out.mp4", cancel_event=event
            )

        mock_popen.assert_not_called()
        assert result.cancelled is True
        assert task.error_message == "task cancelled before start"

    def test_cancelled_while_running(self, task, admitted, service) -> None:
        """Setting the event terminates ffmpeg and fails the task."""
        process = _mock_process(returncode=-15)
        event = threading.Event()
        timer = threading.Timer(0.05, event.set)
        with patch(POPEN, return_value=process):
            timer.start()
            result = run_task(
                task, admitted, service, "in.avi", "out.mp4", cancel_event=event
            )
        timer.join()

        process.terminate.assert_called_once()
        assert result.cancelled is True
        assert task.status is TaskStatus.FAILED
        assert task.error_message == "task cancelled"

    def test_timeout(self, task, admitted, service) -> None:
        """Exceeding the timeout terminates ffmpeg and fails the task."""
        process = _mock_process(returncode=-15)
        with patch(POPEN, return_value=process):
            result = run_task(
                task, admitted, service, "in.avi", "out.mp4", timeout=0.05
            )

        process.terminate.assert_called_once()
        assert result.timed_out is True
        assert task.error_message == "task timed out after 0.05s"

    def test_requires_ready_to_start(self, admitted, service) -> None:
        """Only ready_to_start tasks can be run."""
        task = Task(id="t1", output_format="mp4")
        with patch(POPEN) as mock_popen:
            with pytest.raises(InvalidStatusTransitionError):
                run_task(task, admitted, service, "in.avi", "out.mp4")
        mock_popen.assert_not_called()
        assert task.status is TaskStatus.NEW


class TestRunTaskWithRealProcess:
    """Tests for run_task against a stand-in ffmpeg script."""

    def _service(self, temp_dir: Path, body: str) -> FFmpegService:
        script = temp_dir / "ffmpeg"
        script.write_text(f"#!/bin/sh\n{body}\n")
        script.chmod(0o755)
        return FFmpegService(
            FFmpegConfig(
                binary_path=str(script),
                allowed_output_formats=["mp4"],
                allowed_video_codecs=["libx264"],
                allowed_audio_codecs=["aac"],
                allowed_presets=["fast"],
                max_resolution="1920x1080",
                max_framerate=60,
            )
        )

    def test_receives_arguments(self, temp_dir: Path, task, admitted) -> None:
        """The script receives the synthesized arguments."""
        args_file = temp_dir / "args.txt"
        service = self._service(temp_dir, f'printf "%s\\n" "$@" > "{args_file}"')

        result = run_task(task, admitted, service, "in.avi", temp_dir / "out.mp4")

        assert result.success is True
        assert args_file.read_text().splitlines() == [
            "-i",
            "in.avi",
            "-f",
            "mp4",
            "-y",
            str(temp_dir / "out.mp4"),
        ]

    def test_failure_message(self, temp_dir: Path, task, admitted) -> None:
        """stderr's last line is included in the failure message."""
        service = self._service(temp_dir, 'echo "in.avi: No such file" >&2\nexit 1')

        result = run_task(task, admitted, service, "in.avi", "out.mp4")

        assert result.success is False
        assert task.error_message == "ffmpeg exited with code 1: in.avi: No such file"

    def test_cancel_long_running(self, temp_dir: Path, task, admitted) -> None:
        """A long-running process is stopped on cancellation."""
        service = self._service(temp_dir, "exec sleep 30")
        event = threading.Event()
        timer = threading.Timer(0.1, event.set)
        timer.start()

        result = run_task(
            task, admitted, service, "in.avi", "out.mp4", cancel_event=event
        )
        timer.join()

        assert result.cancelled is True
        assert task.status is TaskStatus.FAILED
