"""Shared test fixtures for ffmpegbox."""

import shutil
import tempfile
from pathlib import Path
from textwrap import dedent
from typing import Any

import pytest

from ffmpegbox.config import FFmpegConfig, clear_config_cache


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test isolation."""
    dir_path = tempfile.mkdtemp()
    yield Path(dir_path)
    shutil.rmtree(dir_path, ignore_errors=True)


@pytest.fixture(autouse=True)
def reset_config_cache():
    """Make sure no test sees a configuration cached by another."""
    clear_config_cache()
    yield
    clear_config_cache()


@pytest.fixture
def ffmpeg_config() -> FFmpegConfig:
    """Return an ffmpeg policy with a small allow-list."""
    return FFmpegConfig(
        binary_path="/usr/bin/ffmpeg",
        allowed_output_formats=("mp4", "webm", "mp3"),
        allowed_video_codecs=("libx264", "libvpx-vp9"),
        allowed_audio_codecs=("aac", "libopus"),
        allowed_presets=("fast", "medium", "slow"),
        max_resolution="3840x2160",
        max_framerate=120,
    )


@pytest.fixture
def valid_config_dict() -> dict[str, Any]:
    """Return a complete, valid configuration mapping."""
    return {
        "server": {
            "port": 8080,
            "bind_address": "127.0.0.1",
            "read_timeout": "30s",
            "write_timeout": "5m",
        },
        "auth": {
            "enabled": True,
            "clients": [
                {"api_key": "key-alpha", "name": "alpha", "max_parallel_tasks": 2},
                {"api_key": "key-beta", "name": "beta", "max_parallel_tasks": 1},
            ],
        },
        "processing": {
            "global_max_parallel_tasks": 4,
            "worker_count": 2,
            "max_file_size_mb": 100,
            "task_timeout": "1h",
            "cleanup_age": "24h",
        },
        "ffmpeg": {
            "binary_path": "/usr/bin/ffmpeg",
            "allowed_output_formats": ["mp4", "webm", "mp3"],
            "allowed_video_codecs": ["libx264", "libvpx-vp9"],
            "allowed_audio_codecs": ["aac", "libopus"],
            "allowed_presets": ["fast", "medium", "slow"],
            "max_resolution": "3840x2160",
            "max_framerate": 120,
        },
        "storage": {
            "temp_dir": "/tmp/ffmpegbox",
            "database_path": "/tmp/ffmpegbox/tasks.db",
        },
        "logging": {"level": "info", "format": "text"},
    }


VALID_CONFIG_YAML = dedent(
    """\
    server:
      port: 8080
      bind_address: "127.0.0.1"
      read_timeout: "30s"
      write_timeout: "5m"
    auth:
      enabled: true
      clients:
        - api_key: "key-alpha"
          name: "alpha"
          max_parallel_tasks: 2
    processing:
      global_max_parallel_tasks: 4
      worker_count: 2
      max_file_size_mb: 100
      task_timeout: "1h"
      cleanup_age: "24h"
    ffmpeg:
      binary_path: "/usr/bin/ffmpeg"
      allowed_output_formats: [mp4, webm, mp3]
      allowed_video_codecs: [libx264, libvpx-vp9]
      allowed_audio_codecs: [aac, libopus]
      allowed_presets: [fast, medium, slow]
      max_resolution: "3840x2160"
      max_framerate: 120
    storage:
      temp_dir: "/tmp/ffmpegbox"
      database_path: "/tmp/ffmpegbox/tasks.db"
    logging:
      level: "info"
      format: "text"
    """
)


@pytest.fixture
def config_file(temp_dir: Path) -> Path:
    """Write a valid configuration file and return its path."""
    path = temp_dir / "config.yaml"
    path.write_text(VALID_CONFIG_YAML)
    return path
