"""Exception hierarchy for ffmpegbox.

Three disjoint error kinds exist:

- Validation: caused by the client, recoverable by resubmitting corrected
  parameters (TaskValidationError, InvalidStatusTransitionError).
- Execution: the environment or the external binary failed
  (ExecutionError).
- Config: the configuration document is unusable; fatal at startup
  (ConfigError).

Every error carries a human-readable message and, where one applies, the
dotted path of the offending field. Context is added by wrapping: the outer
error's message is prefixed with the context and its ``__cause__`` points at
the inner error, so the whole chain is reconstructable without a traceback.
"""

from __future__ import annotations

import copy
from enum import Enum
from typing import Any, TypeVar

_E = TypeVar("_E", bound="FFmpegBoxError")


class ErrorKind(Enum):
    """Discriminates the three error families."""

    VALIDATION = "validation"
    EXECUTION = "execution"
    CONFIG = "config"


class FFmpegBoxError(Exception):
    """Base class for all ffmpegbox errors.

    Attributes:
        kind: Error family.
        message: Human-readable message, including any wrapped context.
        field: Dotted path of the offending field, or None.
    """

    kind: ErrorKind = ErrorKind.EXECUTION

    def __init__(self, message: str, field: str | None = None) -> None:
        self.message = message
        self.field = field
        super().__init__(message)

    def wrap(self: _E, context: str, field: str | None = None) -> _E:
        """Return a copy of this error with ``context`` prepended.

        The copy keeps every attribute of the original (value, allowed
        bounds, ...) and records the original as its cause, so callers
        raise the result as-is.

        Args:
            context: Text to prefix the message with.
            field: Replacement field path. Keeps the current one when None.

        Returns:
            New error of the same class.
        """
        wrapped = copy.copy(self)
        wrapped.message = f"{context}: {self.message}"
        wrapped.args = (wrapped.message,)
        if field is not None:
            wrapped.field = field
        wrapped.__cause__ = self
        wrapped.__traceback__ = None
        return wrapped

    def __str__(self) -> str:
        return self.message


class TaskValidationError(FFmpegBoxError):
    """A task parameter is outside the configured policy.

    Attributes:
        value: The rejected value as supplied by the client.
        allowed: The allow-list or numeric bound that was violated.
    """

    kind = ErrorKind.VALIDATION

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
        allowed: Any = None,
    ) -> None:
        super().__init__(message, field)
        self.value = value
        self.allowed = allowed

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        allowed = self.allowed
        if isinstance(allowed, (tuple, frozenset, set)):
            allowed = list(allowed)
        return {
            "kind": self.kind.value,
            "field": self.field,
            "value": self.value,
            "allowed": allowed,
            "message": self.message,
        }


class ExecutionError(FFmpegBoxError):
    """The external binary could not be run or reported failure.

    Attributes:
        returncode: Process exit code, or None if it never ran.
        stderr: Captured standard error, if any.
    """

    kind = ErrorKind.EXECUTION

    def __init__(
        self,
        message: str,
        returncode: int | None = None,
        stderr: str | None = None,
    ) -> None:
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


class ConfigError(FFmpegBoxError):
    """The configuration document failed to load or validate.

    Attributes:
        section: Top-level section the failure belongs to, if known.
    """

    kind = ErrorKind.CONFIG

    def __init__(
        self,
        message: str,
        section: str | None = None,
        field: str | None = None,
    ) -> None:
        super().__init__(message, field)
        self.section = section
