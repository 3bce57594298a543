"""Configuration management for ffmpegbox.

The configuration document is loaded once at process start and is
immutable afterwards:

- models: Frozen Pydantic models for each section (AppConfig and children)
- loader: YAML loading, first-failure error reporting, process-wide cache
- parsing: Duration and resolution parsing
"""

from ffmpegbox.config.loader import (
    clear_config_cache,
    get_config,
    get_default_config_path,
    load_config,
    load_config_bytes,
    load_config_dict,
)
from ffmpegbox.config.models import (
    AppConfig,
    AuthConfig,
    ClientConfig,
    FFmpegConfig,
    LoggingConfig,
    ProcessingConfig,
    ServerConfig,
    StorageConfig,
)
from ffmpegbox.config.parsing import parse_duration, parse_resolution

__all__ = [
    # Models
    "AppConfig",
    "AuthConfig",
    "ClientConfig",
    "FFmpegConfig",
    "LoggingConfig",
    "ProcessingConfig",
    "ServerConfig",
    "StorageConfig",
    # Loader
    "clear_config_cache",
    "get_config",
    "get_default_config_path",
    "load_config",
    "load_config_bytes",
    "load_config_dict",
    # Parsing
    "parse_duration",
    "parse_resolution",
]
