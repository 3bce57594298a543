"""Short-lived external commands with captured text output."""

from __future__ import annotations

import logging
import subprocess  # nosec B404 - ffmpeg is an external binary
from collections.abc import Sequence
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 120.0


def run_command(
    args: Sequence[str | Path], timeout: float = DEFAULT_TIMEOUT
) -> tuple[str, str, int]:
    """Run a command to completion and return (stdout, stderr, returncode).

    Output is decoded as text, replacing undecodable bytes. A non-zero exit
    status is returned, not raised.

    Raises:
        subprocess.TimeoutExpired: The command outlived ``timeout``. It has
            already been killed.
        OSError: The executable could not be started.
    """
    argv = [str(arg) for arg in args]
    logger.debug("Running %s", argv[0], extra={"argv": argv, "timeout": timeout})

    try:
        result = subprocess.run(  # nosec B603 - argv comes from config
            argv, capture_output=True, text=True, errors="replace", timeout=timeout
        )
    except subprocess.TimeoutExpired:
        logger.warning(
            "%s timed out after %ss", argv[0], timeout, extra={"argv": argv}
        )
        raise

    logger.debug("%s exited with status %d", argv[0], result.returncode)
    return result.stdout or "", result.stderr or "", result.returncode
