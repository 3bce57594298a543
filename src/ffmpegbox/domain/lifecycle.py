"""Task status lifecycle and concurrency accounting.

The lifecycle is monotonic: tasks only move forward through
new → ready_to_start → processing → completed, and may drop into failed
from any non-terminal state. Terminal states never change again.

Concurrency caps (per client and global) are enforced by the scheduler,
not here. The scheduler counts tasks whose status is in LIMITED_STATUSES;
``count_limited`` and ``has_capacity`` implement that count.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from ffmpegbox.domain.enums import LIMITED_STATUSES, TERMINAL_STATUSES, TaskStatus
from ffmpegbox.domain.models import Task
from ffmpegbox.exceptions import ErrorKind, FFmpegBoxError

logger = logging.getLogger(__name__)

# Valid state transitions for TaskStatus
TASK_STATUS_TRANSITIONS: dict[TaskStatus, frozenset[TaskStatus]] = {
    TaskStatus.NEW: frozenset({TaskStatus.READY_TO_START, TaskStatus.FAILED}),
    TaskStatus.READY_TO_START: frozenset({TaskStatus.PROCESSING, TaskStatus.FAILED}),
    TaskStatus.PROCESSING: frozenset({TaskStatus.COMPLETED, TaskStatus.FAILED}),
    TaskStatus.COMPLETED: frozenset(),  # Terminal state
    TaskStatus.FAILED: frozenset(),  # Terminal state
}


class InvalidStatusTransitionError(FFmpegBoxError):
    """Raised when attempting a status change the lifecycle does not allow."""

    kind = ErrorKind.VALIDATION

    def __init__(self, current: TaskStatus, target: TaskStatus) -> None:
        self.current = current
        self.target = target
        super().__init__(
            f"Cannot transition task from '{current.value}' to '{target.value}'",
            field="status",
        )

    def __reduce__(self) -> tuple[Any, ...]:
        return (type(self), (self.current, self.target), self.__dict__)


def is_limited(status: TaskStatus) -> bool:
    """True if a task in ``status`` occupies a concurrency slot."""
    return status in LIMITED_STATUSES


def is_terminal(status: TaskStatus) -> bool:
    """True if ``status`` is completed or failed."""
    return status in TERMINAL_STATUSES


def can_transition(current: TaskStatus, target: TaskStatus) -> bool:
    """Check whether ``current`` may move to ``target``."""
    return target in TASK_STATUS_TRANSITIONS[current]


def transition(
    task: Task,
    target: TaskStatus,
    error_message: str | None = None,
) -> None:
    """Move a task to a new status.

    A failure message is required when the target is FAILED and refused
    otherwise, which keeps ``error_message`` populated exactly when the
    task has failed.

    Args:
        task: Task to update in place.
        target: Requested status.
        error_message: Failure description (FAILED only).

    Raises:
        InvalidStatusTransitionError: If the lifecycle forbids the move.
        ValueError: If the error message does not match the target.
    """
    if not can_transition(task.status, target):
        raise InvalidStatusTransitionError(task.status, target)

    if target is TaskStatus.FAILED:
        if not error_message:
            raise ValueError("error_message is required when failing a task")
        task.error_message = error_message
    elif error_message is not None:
        raise ValueError(f"error_message is only allowed for '{target.value}'")

    logger.debug(
        "Task %s: %s -> %s",
        task.id,
        task.status.value,
        target.value,
        extra={"task_id": task.id, "client_name": task.client_name},
    )
    task.status = target


def mark_failed(task: Task, message: str) -> None:
    """Fail a task with ``message``.

    Raises:
        InvalidStatusTransitionError: If the task is already terminal.
    """
    transition(task, TaskStatus.FAILED, error_message=message)


def count_limited(tasks: Iterable[Task], client_name: str | None = None) -> int:
    """Count tasks currently occupying a concurrency slot.

    Args:
        tasks: Tasks to inspect.
        client_name: Only count this client's tasks. None counts all.

    Returns:
        Number of tasks in new, ready_to_start or processing.
    """
    return sum(
        1
        for task in tasks
        if task.status in LIMITED_STATUSES
        and (client_name is None or task.client_name == client_name)
    )


def has_capacity(
    tasks: Iterable[Task],
    limit: int,
    client_name: str | None = None,
) -> bool:
    """Check whether another task fits under ``limit``.

    Args:
        tasks: Tasks to inspect.
        limit: Maximum number of slot-occupying tasks.
        client_name: Apply the limit to this client only. None is global.

    Returns:
        True if fewer than ``limit`` tasks occupy a slot.
    """
    return count_limited(tasks, client_name) < limit
