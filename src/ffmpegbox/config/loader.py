"""Configuration loader.

The configuration document is YAML with the sections ``server``, ``auth``,
``processing``, ``ffmpeg``, ``storage`` and ``logging``. It is loaded once
per process; failure to load is fatal and the process must not start
serving.

The config file path is resolved with the following precedence:
1. Explicit path argument (CLI --config)
2. FFMPEGBOX_CONFIG_PATH environment variable
3. config.yaml in the current working directory

Validation stops at the first failing rule. The error message names the
section it belongs to, e.g.::

    config validation failed: ffmpeg config: max_framerate must be 1-240, got 300
"""

from __future__ import annotations

import logging
import os
import threading
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from ffmpegbox.config.models import CONFIG_SECTIONS, AppConfig
from ffmpegbox.exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = Path("config.yaml")
CONFIG_PATH_ENV = "FFMPEGBOX_CONFIG_PATH"

_config_cache: dict[Path, AppConfig] = {}
_config_cache_lock = threading.Lock()


def get_default_config_path() -> Path:
    """Get the default config file path.

    Can be overridden by the FFMPEGBOX_CONFIG_PATH environment variable.

    Returns:
        Path to config file.
    """
    env_path = os.environ.get(CONFIG_PATH_ENV)
    if env_path:
        return Path(env_path).expanduser()
    return DEFAULT_CONFIG_FILE


def load_config(path: Path | str) -> AppConfig:
    """Load and validate the configuration file at ``path``.

    Args:
        path: Path to the YAML configuration file.

    Returns:
        Validated, immutable configuration.

    Raises:
        ConfigError: If the file cannot be read, parsed, or validated.
    """
    path = Path(path)
    try:
        raw = path.read_bytes()
    except OSError as e:
        raise ConfigError(f"failed to read config file: {e}") from e

    return load_config_bytes(raw)


def load_config_bytes(raw: bytes | str) -> AppConfig:
    """Parse a YAML document and validate it.

    Args:
        raw: Document contents.

    Returns:
        Validated, immutable configuration.

    Raises:
        ConfigError: If the document cannot be parsed or validated.
    """
    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"failed to parse config YAML: {e}") from e

    if data is None:
        raise ConfigError("failed to parse config YAML: document is empty")

    if not isinstance(data, dict):
        raise ConfigError("failed to parse config YAML: document must be a mapping")

    return load_config_dict(data)


def load_config_dict(data: dict[str, Any]) -> AppConfig:
    """Validate an already-parsed configuration mapping.

    Args:
        data: Mapping of section name to section contents.

    Returns:
        Validated, immutable configuration.

    Raises:
        ConfigError: If any validation rule fails.
    """
    try:
        return AppConfig.model_validate(data)
    except ValidationError as e:
        error = _first_config_error(e)
        raise error.wrap("config validation failed")


def _first_config_error(error: ValidationError) -> ConfigError:
    """Convert the first Pydantic error into a section-prefixed ConfigError."""
    errors = error.errors()
    if not errors:
        return ConfigError(str(error))

    first = errors[0]
    loc = tuple(first.get("loc", ()))
    text = _error_text(first)

    if not loc or loc[0] not in CONFIG_SECTIONS:
        # Unknown top-level key or a problem with the document root.
        field = _format_loc(loc) or None
        message = f"{field}: {text}" if field else text
        return ConfigError(message, field=field)

    section = str(loc[0])
    field_path = _format_loc(loc[1:])
    dotted = _format_loc(loc)

    if not field_path and first.get("type") == "missing":
        text = "section is missing"

    # Messages raised by our own validators already name the field.
    if first.get("type") == "value_error" or not field_path:
        inner = ConfigError(text, section=section, field=dotted)
    else:
        inner = ConfigError(f"{field_path}: {text}", section=section, field=dotted)

    inner.__cause__ = error
    return inner.wrap(f"{section} config")


def _error_text(error: dict[str, Any]) -> str:
    """Extract the human-readable text from a Pydantic error entry."""
    if error.get("type") == "value_error":
        cause = error.get("ctx", {}).get("error")
        if cause is not None:
            return str(cause)
    return str(error.get("msg", "invalid value"))


def _format_loc(loc: tuple[Any, ...]) -> str:
    """Format a Pydantic error location as a dotted path.

    List indexes are rendered in brackets: ``("clients", 0, "name")`` becomes
    ``clients[0].name``.
    """
    parts: list[str] = []
    for item in loc:
        if isinstance(item, int) and parts:
            parts[-1] = f"{parts[-1]}[{item}]"
        else:
            parts.append(str(item))
    return ".".join(parts)


def get_config(config_path: Path | str | None = None) -> AppConfig:
    """Get the process-wide configuration, loading it on first use.

    Thread-safe: concurrent first calls load the file only once.

    Args:
        config_path: Config file path. None uses get_default_config_path().

    Returns:
        The cached configuration for that path.

    Raises:
        ConfigError: If the configuration cannot be loaded.
    """
    path = Path(config_path) if config_path is not None else get_default_config_path()

    cached = _config_cache.get(path)
    if cached is not None:
        return cached

    with _config_cache_lock:
        cached = _config_cache.get(path)
        if cached is not None:
            return cached

        config = load_config(path)
        _config_cache[path] = config
        logger.debug("Configuration loaded from %s", path)
        return config


def clear_config_cache() -> None:
    """Clear the configuration cache.

    Primarily useful for testing.
    """
    with _config_cache_lock:
        _config_cache.clear()
