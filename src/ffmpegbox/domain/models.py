"""Domain models for ffmpegbox."""

from dataclasses import dataclass, field
from datetime import datetime, timezone

from ffmpegbox.domain.enums import TaskStatus


@dataclass
class Task:
    """One transcoding request and its current lifecycle state.

    Optional parameters are None when the client did not request them; the
    external binary's defaults then apply. Zero is treated the same way for
    numeric parameters. Status changes go through
    ``ffmpegbox.domain.lifecycle`` so that ``error_message`` is set exactly
    when the task has failed.
    """

    id: str
    output_format: str
    client_name: str = ""
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    status: TaskStatus = TaskStatus.NEW
    input_filename: str = ""
    output_filename: str | None = None  # Set once the output name is derived
    error_message: str | None = None  # Set only when status is FAILED
    video_codec: str | None = None
    audio_codec: str | None = None
    video_bitrate: int | None = None  # bits per second
    audio_bitrate: int | None = None  # bits per second
    width: int | None = None
    height: int | None = None
    framerate: int | None = None
    preset: str | None = None

    def __post_init__(self) -> None:
        """Validate invariants that hold for every task, including rehydrated ones."""
        if not self.output_format:
            raise ValueError("output_format is required")
        if (self.status is TaskStatus.FAILED) != bool(self.error_message):
            raise ValueError(
                "error_message must be set if and only if status is failed"
            )
