"""Logging configuration for ffmpegbox.

Provides configure_logging() to set up logging based on LoggingConfig.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, TextIO

from ffmpegbox.logging.context import TaskContextFilter
from ffmpegbox.logging.handlers import JSONFormatter

if TYPE_CHECKING:
    from ffmpegbox.config.models import LoggingConfig

# Map of configuration level names to logging module constants.
_LEVEL_MAP: dict[str, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def get_log_level(name: str) -> int:
    """Map a configured level name to a logging constant (default INFO)."""
    return _LEVEL_MAP.get(name.casefold(), logging.INFO)


def configure_logging(
    config: LoggingConfig,
    level: str | None = None,
    log_format: str | None = None,
    stream: TextIO | None = None,
) -> None:
    """Configure the root logger.

    CLI overrides are passed separately so the loaded configuration object
    stays untouched.

    Args:
        config: Logging section of the loaded configuration.
        level: Level override (debug, info, warn, error).
        log_format: Format override (json, text).
        stream: Output stream. Defaults to stderr.
    """
    effective_level = get_log_level(level or config.level)
    effective_format = (log_format or config.format).casefold()

    root_logger = logging.getLogger()
    root_logger.setLevel(effective_level)
    root_logger.handlers.clear()

    if effective_format == "json":
        formatter: logging.Formatter = JSONFormatter()
    else:
        # task_tag is "[<task id>] " inside a task context, empty otherwise
        formatter = logging.Formatter(
            "%(asctime)s - %(task_tag)s%(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S%z",
        )

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setLevel(effective_level)
    handler.setFormatter(formatter)
    handler.addFilter(TaskContextFilter())
    root_logger.addHandler(handler)
