"""Tests for core subprocess utilities."""

import logging
import subprocess
import sys
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from ffmpegbox.core.subprocess_utils import run_command


def _completed(stdout="", stderr="", returncode=0) -> MagicMock:
    result = MagicMock()
    result.stdout = stdout
    result.stderr = stderr
    result.returncode = returncode
    return result


class TestRunCommand:
    """Tests for run_command function."""

    def test_successful_command(self):
        """run_command returns stdout, stderr, returncode for successful command."""
        stdout, stderr, returncode = run_command(["echo", "hello"])

        assert stdout.strip() == "hello"
        assert returncode == 0

    def test_non_zero_exit_is_returned(self):
        """A failing command is reported through its return code, not raised."""
        stdout, stderr, returncode = run_command(
            [sys.executable, "-c", "import sys; sys.stderr.write('boom'); sys.exit(3)"]
        )

        assert returncode == 3
        assert "boom" in stderr

    def test_timeout_raises_exception(self):
        """run_command raises TimeoutExpired for long-running commands."""
        with pytest.raises(subprocess.TimeoutExpired):
            run_command(["sleep", "10"], timeout=0.5)

    def test_missing_executable_raises(self, temp_dir: Path):
        """A binary that does not exist raises OSError."""
        with pytest.raises(OSError):
            run_command([temp_dir / "no-such-ffmpeg", "-version"])

    @patch("ffmpegbox.core.subprocess_utils.subprocess.run")
    def test_path_args_converted(self, mock_run: MagicMock):
        """Path arguments are passed as strings."""
        mock_run.return_value = _completed()

        run_command([Path("/usr/bin/ffmpeg"), "-version"])

        assert mock_run.call_args[0][0] == ["/usr/bin/ffmpeg", "-version"]

    @patch("ffmpegbox.core.subprocess_utils.subprocess.run")
    def test_fixed_options(self, mock_run: MagicMock):
        """Output is captured as text with replacement and a 120s timeout."""
        mock_run.return_value = _completed()

        run_command(["ffmpeg", "-version"])

        call_kwargs = mock_run.call_args[1]
        assert call_kwargs["capture_output"] is True
        assert call_kwargs["text"] is True
        assert call_kwargs["errors"] == "replace"
        assert call_kwargs["timeout"] == 120

    @patch("ffmpegbox.core.subprocess_utils.subprocess.run")
    def test_custom_timeout(self, mock_run: MagicMock):
        """The caller's timeout is passed through."""
        mock_run.return_value = _completed()

        run_command(["ffmpeg", "-version"], timeout=5)

        assert mock_run.call_args[1]["timeout"] == 5

    def test_timeout_logged(self, caplog: pytest.LogCaptureFixture):
        """A timeout is logged as a warning before it propagates."""
        with caplog.at_level(logging.WARNING, logger="ffmpegbox.core"):
            with pytest.raises(subprocess.TimeoutExpired):
                run_command(["sleep", "10"], timeout=0.2)

        assert "sleep timed out after 0.2s" in caplog.text

    @patch("ffmpegbox.core.subprocess_utils.subprocess.run")
    def test_handles_none_output(self, mock_run: MagicMock):
        """None stdout/stderr are returned as empty strings."""
        mock_run.return_value = _completed(stdout=None, stderr=None)

        stdout, stderr, returncode = run_command(["ffmpeg", "-version"])

        assert stdout == ""
        assert stderr == ""
        assert returncode == 0
