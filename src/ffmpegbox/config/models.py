"""Configuration data models.

This module defines the Pydantic models for the ffmpegbox configuration
document. Every model is frozen: configuration is loaded once per process
and is read-only afterwards, so any number of threads may share it.

Human-readable values are converted at load time: durations ("30s",
"1h30m") become ``timedelta`` objects, and the ffmpeg resolution bound is
exposed as integer width/height accessors.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictInt,
    ValidationInfo,
    field_validator,
    model_validator,
)

from ffmpegbox.config.parsing import parse_duration, parse_resolution

MAX_FRAMERATE_LIMIT = 240

VALID_LOG_LEVELS = ("debug", "info", "warn", "error")
VALID_LOG_FORMATS = ("json", "text")

BYTES_PER_MB = 1024 * 1024


def _parse_duration_field(value: Any, info: ValidationInfo) -> timedelta:
    """Shared before-validator for duration fields."""
    if isinstance(value, timedelta):
        return value
    try:
        return parse_duration(value)
    except ValueError as e:
        raise ValueError(f"invalid {info.field_name}: {e}") from e


def _require_non_empty(value: str, info: ValidationInfo) -> str:
    if not value:
        raise ValueError(f"{info.field_name} cannot be empty")
    return value


class _FrozenModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class ServerConfig(_FrozenModel):
    """Network settings for the request-handling layer."""

    port: StrictInt
    read_timeout: timedelta
    write_timeout: timedelta
    bind_address: str

    @field_validator("port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        """Validate TCP port range."""
        if v <= 0 or v > 65535:
            raise ValueError(f"invalid port {v}, must be 1-65535")
        return v

    @field_validator("read_timeout", "write_timeout", mode="before")
    @classmethod
    def parse_timeouts(cls, v: Any, info: ValidationInfo) -> timedelta:
        """Parse timeout duration strings."""
        return _parse_duration_field(v, info)

    @field_validator("bind_address")
    @classmethod
    def validate_bind_address(cls, v: str, info: ValidationInfo) -> str:
        """Validate that a bind address is set."""
        return _require_non_empty(v, info)


class ClientConfig(_FrozenModel):
    """A client allowed to submit tasks.

    Fields default to empty values so that an incomplete client entry is
    reported by AuthConfig with its index rather than as a missing field.
    Entries are only checked when authentication is enabled.
    """

    api_key: str = ""
    name: str = ""
    max_parallel_tasks: StrictInt = 0


class AuthConfig(_FrozenModel):
    """Client list for API key authentication."""

    enabled: bool = False
    clients: tuple[ClientConfig, ...] = ()

    @model_validator(mode="after")
    def validate_clients(self) -> AuthConfig:
        """Validate client entries when authentication is enabled."""
        if not self.enabled:
            return self

        if not self.clients:
            raise ValueError("auth is enabled but no clients configured")

        seen_keys: set[str] = set()
        seen_names: set[str] = set()
        for i, client in enumerate(self.clients):
            if not client.api_key:
                raise ValueError(f"client[{i}]: api_key cannot be empty")
            if client.api_key in seen_keys:
                raise ValueError(f"client[{i}]: duplicate api_key")
            seen_keys.add(client.api_key)

            if not client.name:
                raise ValueError(f"client[{i}]: name cannot be empty")
            if client.name in seen_names:
                raise ValueError(f"client[{i}]: duplicate name {client.name!r}")
            seen_names.add(client.name)

            if client.max_parallel_tasks < 1:
                raise ValueError(
                    f"client[{i}] ({client.name}): max_parallel_tasks must be >= 1"
                )
        return self

    def get_client_by_api_key(self, api_key: str) -> ClientConfig | None:
        """Find the client owning ``api_key``.

        Returns:
            The matching client, or None if no client uses this key.
        """
        for client in self.clients:
            if client.api_key == api_key:
                return client
        return None


class ProcessingConfig(_FrozenModel):
    """Task processing limits."""

    global_max_parallel_tasks: StrictInt
    worker_count: StrictInt
    max_file_size_mb: StrictInt
    task_timeout: timedelta
    cleanup_age: timedelta

    @field_validator("global_max_parallel_tasks", "worker_count", "max_file_size_mb")
    @classmethod
    def validate_at_least_one(cls, v: int, info: ValidationInfo) -> int:
        """Validate that counters and sizes are at least 1."""
        if v < 1:
            raise ValueError(f"{info.field_name} must be >= 1")
        return v

    @field_validator("task_timeout", "cleanup_age", mode="before")
    @classmethod
    def parse_durations(cls, v: Any, info: ValidationInfo) -> timedelta:
        """Parse duration strings."""
        return _parse_duration_field(v, info)

    @property
    def max_file_size_bytes(self) -> int:
        """Maximum upload size in bytes."""
        return self.max_file_size_mb * BYTES_PER_MB


class FFmpegConfig(_FrozenModel):
    """Binary location and parameter allow-lists for ffmpeg.

    This is the only section the admission gate reads.
    """

    binary_path: str
    allowed_output_formats: tuple[str, ...] = Field(default=(), validate_default=True)
    allowed_video_codecs: tuple[str, ...] = Field(default=(), validate_default=True)
    allowed_audio_codecs: tuple[str, ...] = Field(default=(), validate_default=True)
    allowed_presets: tuple[str, ...] = Field(default=(), validate_default=True)
    max_resolution: str
    max_framerate: StrictInt

    @field_validator("binary_path")
    @classmethod
    def validate_binary_path(cls, v: str, info: ValidationInfo) -> str:
        """Validate that a binary path is set."""
        return _require_non_empty(v, info)

    @field_validator(
        "allowed_output_formats",
        "allowed_video_codecs",
        "allowed_audio_codecs",
        "allowed_presets",
    )
    @classmethod
    def validate_allow_list(
        cls, v: tuple[str, ...], info: ValidationInfo
    ) -> tuple[str, ...]:
        """Validate that allow-lists are not empty."""
        if not v:
            raise ValueError(f"{info.field_name} cannot be empty")
        return v

    @field_validator("max_resolution")
    @classmethod
    def validate_max_resolution(cls, v: str) -> str:
        """Validate WIDTHxHEIGHT format."""
        try:
            parse_resolution(v)
        except ValueError as e:
            raise ValueError(
                f"invalid max_resolution format: {v!r} (expected WIDTHxHEIGHT)"
            ) from e
        return v

    @field_validator("max_framerate")
    @classmethod
    def validate_max_framerate(cls, v: int) -> int:
        """Validate framerate bound."""
        if v < 1 or v > MAX_FRAMERATE_LIMIT:
            raise ValueError(
                f"max_framerate must be 1-{MAX_FRAMERATE_LIMIT}, got {v}"
            )
        return v

    @property
    def max_width(self) -> int:
        """Maximum output width in pixels."""
        return parse_resolution(self.max_resolution)[0]

    @property
    def max_height(self) -> int:
        """Maximum output height in pixels."""
        return parse_resolution(self.max_resolution)[1]

    @property
    def max_resolution_pixels(self) -> int:
        """Maximum output frame area (width * height)."""
        width, height = parse_resolution(self.max_resolution)
        return width * height


class StorageConfig(_FrozenModel):
    """On-disk locations."""

    temp_dir: str
    database_path: str

    @field_validator("temp_dir", "database_path")
    @classmethod
    def validate_paths(cls, v: str, info: ValidationInfo) -> str:
        """Validate that storage paths are set."""
        return _require_non_empty(v, info)


class LoggingConfig(_FrozenModel):
    """Log level and output format."""

    level: str
    format: str

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level."""
        if v not in VALID_LOG_LEVELS:
            raise ValueError(
                f"invalid log level {v!r}, must be one of: "
                f"{', '.join(VALID_LOG_LEVELS)}"
            )
        return v

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        """Validate log format."""
        if v not in VALID_LOG_FORMATS:
            raise ValueError(
                f"invalid log format {v!r}, must be one of: "
                f"{', '.join(VALID_LOG_FORMATS)}"
            )
        return v


class AppConfig(_FrozenModel):
    """Complete ffmpegbox configuration document."""

    server: ServerConfig
    auth: AuthConfig = Field(default_factory=AuthConfig)
    processing: ProcessingConfig
    ffmpeg: FFmpegConfig
    storage: StorageConfig
    logging: LoggingConfig


CONFIG_SECTIONS: tuple[str, ...] = tuple(AppConfig.model_fields)
