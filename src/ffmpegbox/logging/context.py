"""Task context for structured logging.

Provides context propagation using contextvars, so that every log record
emitted while a task is being handled carries its task_id and client_name
without passing them to each logging call.
"""

from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Generator

_task_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "task_id", default=None
)
_client_name: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "client_name", default=None
)


def get_task_context() -> tuple[str | None, str | None]:
    """Get current task context.

    Returns:
        Tuple of (task_id, client_name), either may be None.
    """
    return _task_id.get(), _client_name.get()


@contextmanager
def task_context(
    task_id: str,
    client_name: str | None = None,
) -> Generator[None, None, None]:
    """Context manager that tags log records with a task.

    Restores the previous context on exit. Thread-safe via contextvars.

    Example:
        with task_context("3f2a", "acme"):
            logger.info("Starting ffmpeg")  # Includes task_id and client_name
    """
    task_token = _task_id.set(task_id)
    client_token = _client_name.set(client_name or None)
    try:
        yield
    finally:
        _client_name.reset(client_token)
        _task_id.reset(task_token)


class TaskContextFilter(logging.Filter):
    """Logging filter that injects task context into log records.

    Adds task_id and client_name attributes, unless the call already passed
    them through ``extra``. For text format, also adds a compact task_tag
    such as ``[3f2a] ``.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        """Inject task context into log record.

        Args:
            record: The log record to process.

        Returns:
            Always True (does not filter, only enriches).
        """
        task_id, client_name = get_task_context()

        if getattr(record, "task_id", None) is None:
            record.task_id = task_id
        if getattr(record, "client_name", None) is None:
            record.client_name = client_name

        record.task_tag = f"[{record.task_id}] " if record.task_id else ""

        return True  # Never filter out records
