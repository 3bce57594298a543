"""Admission gate for transcoding tasks.

Every task passes through ``validate_task`` before any external process
may be spawned for it. The gate compares the requested parameters against
the operator's ffmpeg allow-lists and bounds and either rejects the task
with a TaskValidationError or returns an AdmittedTask: an immutable
snapshot of the accepted parameters. The command synthesizer only accepts
AdmittedTask, so a command can never be built from unchecked input.

Optional parameters that are None, zero, or empty are "not requested":
their check is skipped and the corresponding flag is omitted, letting
ffmpeg apply its defaults. A framerate that is not positive is also
not requested. Negative widths, heights and bitrates are rejected.

Validation is pure. It never touches the filesystem and never spawns a
process, so it is safe to call from any number of threads.
"""

from __future__ import annotations

import logging
from collections.abc import Collection
from dataclasses import dataclass

from ffmpegbox.config.models import FFmpegConfig
from ffmpegbox.domain.models import Task
from ffmpegbox.exceptions import TaskValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdmittedTask:
    """Parameters of a task that passed the admission gate.

    Produced only by ``validate_task``. Unrequested parameters are None,
    whatever their representation on the original Task.
    """

    task_id: str
    output_format: str
    video_codec: str | None = None
    audio_codec: str | None = None
    video_bitrate: int | None = None
    audio_bitrate: int | None = None
    width: int | None = None
    height: int | None = None
    framerate: int | None = None
    preset: str | None = None

    @property
    def resolution(self) -> str | None:
        """WIDTHxHEIGHT string, or None if no resolution was requested."""
        if self.width is None or self.height is None:
            return None
        return f"{self.width}x{self.height}"


def _requested(value: int | str | None) -> bool:
    """True if an optional parameter was actually requested."""
    return value is not None and value != 0 and value != ""


def _check_allowed(
    value: str,
    allowed: Collection[str],
    label: str,
    field: str,
) -> None:
    if value not in allowed:
        raise TaskValidationError(
            f"{label} {value!r} not allowed. Allowed: {list(allowed)}",
            field=field,
            value=value,
            allowed=tuple(allowed),
        )


def _check_resolution(width: int, height: int, config: FFmpegConfig) -> None:
    if width <= 0 or height <= 0:
        raise TaskValidationError(
            f"resolution dimensions must be positive, got {width}x{height}",
            field="resolution",
            value=f"{width}x{height}",
            allowed="> 0",
        )

    if width > config.max_width:
        raise TaskValidationError(
            f"width {width} exceeds maximum {config.max_width}",
            field="width",
            value=width,
            allowed=f"<= {config.max_width}",
        )

    if height > config.max_height:
        raise TaskValidationError(
            f"height {height} exceeds maximum {config.max_height}",
            field="height",
            value=height,
            allowed=f"<= {config.max_height}",
        )


def _check_framerate(framerate: int, config: FFmpegConfig) -> None:
    if framerate > config.max_framerate:
        raise TaskValidationError(
            f"framerate {framerate} exceeds maximum {config.max_framerate}",
            field="framerate",
            value=framerate,
            allowed=f"1-{config.max_framerate}",
        )


def _check_bitrate(bitrate: int) -> None:
    if bitrate <= 0:
        raise TaskValidationError(
            f"bitrate must be positive, got {bitrate}",
            field="bitrate",
            value=bitrate,
            allowed="> 0",
        )


def validate_task(task: Task, config: FFmpegConfig) -> AdmittedTask:
    """Check a task's parameters against the ffmpeg policy.

    Checks run in a fixed order and the first failure is raised:
    output format, video codec, audio codec, preset, resolution,
    framerate, video bitrate, audio bitrate.

    Args:
        task: Task to check. Not modified.
        config: The ffmpeg section of the loaded configuration.

    Returns:
        Snapshot of the admitted parameters.

    Raises:
        TaskValidationError: If any parameter is outside the policy. The
            error names the field, the rejected value and the allowed set
            or bound.
    """
    _check_allowed(
        task.output_format,
        config.allowed_output_formats,
        "output format",
        "output_format",
    )

    if _requested(task.video_codec):
        _check_allowed(
            task.video_codec,
            config.allowed_video_codecs,
            "video codec",
            "video_codec",
        )

    if _requested(task.audio_codec):
        _check_allowed(
            task.audio_codec,
            config.allowed_audio_codecs,
            "audio codec",
            "audio_codec",
        )

    if _requested(task.preset):
        _check_allowed(task.preset, config.allowed_presets, "preset", "preset")

    has_resolution = _requested(task.width) or _requested(task.height)
    if has_resolution:
        _check_resolution(task.width or 0, task.height or 0, config)

    framerate = task.framerate if task.framerate and task.framerate > 0 else None
    if framerate is not None:
        _check_framerate(framerate, config)

    if _requested(task.video_bitrate):
        try:
            _check_bitrate(task.video_bitrate)
        except TaskValidationError as e:
            raise e.wrap("video bitrate", field="video_bitrate")

    if _requested(task.audio_bitrate):
        try:
            _check_bitrate(task.audio_bitrate)
        except TaskValidationError as e:
            raise e.wrap("audio bitrate", field="audio_bitrate")

    admitted = AdmittedTask(
        task_id=task.id,
        output_format=task.output_format,
        video_codec=task.video_codec or None,
        audio_codec=task.audio_codec or None,
        video_bitrate=task.video_bitrate or None,
        audio_bitrate=task.audio_bitrate or None,
        width=task.width if has_resolution else None,
        height=task.height if has_resolution else None,
        framerate=framerate,
        preset=task.preset or None,
    )
    logger.debug(
        "Task %s admitted",
        task.id,
        extra={"task_id": task.id, "output_format": task.output_format},
    )
    return admitted


class AdmissionGate:
    """Holds a read-only reference to the ffmpeg policy and admits tasks."""

    def __init__(self, config: FFmpegConfig) -> None:
        self._config = config

    @property
    def config(self) -> FFmpegConfig:
        return self._config

    def admit(self, task: Task) -> AdmittedTask:
        """Validate ``task``; see ``validate_task``."""
        try:
            return validate_task(task, self._config)
        except TaskValidationError as e:
            logger.info(
                "Task %s rejected: %s",
                task.id,
                e,
                extra={"task_id": task.id, "field": e.field},
            )
            raise
