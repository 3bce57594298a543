"""Domain models and status lifecycle for ffmpegbox.

- Domain models: Task
- Domain enums: TaskStatus, LIMITED_STATUSES, TERMINAL_STATUSES
- Lifecycle: transition table, transition helpers, concurrency accounting

Usage:
    from ffmpegbox.domain import Task, TaskStatus
    from ffmpegbox.domain import transition, count_limited
"""

from .enums import LIMITED_STATUSES, TERMINAL_STATUSES, TaskStatus
from .lifecycle import (
    TASK_STATUS_TRANSITIONS,
    InvalidStatusTransitionError,
    can_transition,
    count_limited,
    has_capacity,
    is_limited,
    is_terminal,
    mark_failed,
    transition,
)
from .models import Task

__all__ = [
    # Models
    "Task",
    # Enums
    "TaskStatus",
    "LIMITED_STATUSES",
    "TERMINAL_STATUSES",
    # Lifecycle
    "TASK_STATUS_TRANSITIONS",
    "InvalidStatusTransitionError",
    "can_transition",
    "count_limited",
    "has_capacity",
    "is_limited",
    "is_terminal",
    "mark_failed",
    "transition",
]
