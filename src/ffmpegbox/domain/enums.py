"""Domain enums for ffmpegbox."""

from enum import Enum


class TaskStatus(Enum):
    """Lifecycle status of a transcoding task.

    State transitions:
        new → ready_to_start → processing → completed
        new / ready_to_start / processing → failed

    Terminal states: completed, failed
    """

    NEW = "new"  # Accepted, input not yet stored
    READY_TO_START = "ready_to_start"  # Waiting for a worker
    PROCESSING = "processing"  # External binary running
    COMPLETED = "completed"  # Output produced (terminal)
    FAILED = "failed"  # Error message populated (terminal)


# Statuses that occupy a concurrency slot for the owning client and globally.
LIMITED_STATUSES: frozenset[TaskStatus] = frozenset(
    {
        TaskStatus.NEW,
        TaskStatus.READY_TO_START,
        TaskStatus.PROCESSING,
    }
)

TERMINAL_STATUSES: frozenset[TaskStatus] = frozenset(
    {
        TaskStatus.COMPLETED,
        TaskStatus.FAILED,
    }
)
