"""Structured logging module for ffmpegbox.

Provides configurable logging with JSON format support and task context
tagging.
"""

from ffmpegbox.logging.config import configure_logging, get_log_level
from ffmpegbox.logging.context import (
    TaskContextFilter,
    get_task_context,
    task_context,
)
from ffmpegbox.logging.handlers import JSONFormatter

__all__ = [
    "JSONFormatter",
    "TaskContextFilter",
    "configure_logging",
    "get_log_level",
    "get_task_context",
    "task_context",
]
