"""Admission gate: parameter validation before any process is spawned.

Usage:
    from ffmpegbox.admission import validate_task
    admitted = validate_task(task, config.ffmpeg)
"""

from .gate import AdmissionGate, AdmittedTask, validate_task

__all__ = [
    "AdmissionGate",
    "AdmittedTask",
    "validate_task",
]
