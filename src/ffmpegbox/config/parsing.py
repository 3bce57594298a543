"""Parsing helpers for human-readable configuration values.

Durations follow the Go duration syntax used by existing ffmpegbox
configuration files ("30s", "1h30m", "1.5h", "250ms"). Resolutions are
written as WIDTHxHEIGHT.
"""

from __future__ import annotations

import re
from datetime import timedelta

RESOLUTION_PATTERN = re.compile(r"\d+x\d+", re.ASCII)

# Unit suffix -> microseconds. Nanoseconds are kept as a fraction.
_DURATION_UNITS: dict[str, float] = {
    "ns": 0.001,
    "us": 1.0,
    "µs": 1.0,
    "μs": 1.0,
    "ms": 1_000.0,
    "s": 1_000_000.0,
    "m": 60_000_000.0,
    "h": 3_600_000_000.0,
}

_DURATION_COMPONENT = re.compile(
    r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)", re.ASCII
)


def parse_duration(text: str) -> timedelta:
    """Parse a duration string into a timedelta.

    Accepts an optional sign followed by one or more number+unit
    components. The bare string "0" is also accepted.

    Args:
        text: Duration string such as "30s" or "1h15m".

    Returns:
        Parsed duration.

    Raises:
        ValueError: If the string is empty or malformed.
    """
    if not isinstance(text, str):
        raise ValueError(f"invalid duration {text!r}: expected a string")

    raw = text.strip()
    if not raw:
        raise ValueError('invalid duration "": empty string')

    sign = 1
    body = raw
    if body[0] in "+-":
        sign = -1 if body[0] == "-" else 1
        body = body[1:]

    if body == "0":
        return timedelta(0)

    if not body:
        raise ValueError(f'invalid duration "{text}"')

    total_us = 0.0
    pos = 0
    while pos < len(body):
        match = _DURATION_COMPONENT.match(body, pos)
        if match is None:
            raise ValueError(f'invalid duration "{text}"')
        number, unit = match.groups()
        total_us += float(number) * _DURATION_UNITS[unit]
        pos = match.end()

    return timedelta(microseconds=sign * total_us)


def parse_resolution(text: str) -> tuple[int, int]:
    """Parse a WIDTHxHEIGHT string.

    Args:
        text: Resolution such as "3840x2160".

    Returns:
        Tuple of (width, height).

    Raises:
        ValueError: If the format is wrong or a dimension is below 1.
    """
    if not isinstance(text, str) or not RESOLUTION_PATTERN.fullmatch(text):
        raise ValueError(
            f"invalid resolution format: {text!r} (expected WIDTHxHEIGHT)"
        )

    width_str, height_str = text.split("x")
    width, height = int(width_str), int(height_str)
    if width < 1 or height < 1:
        raise ValueError("resolution dimensions must be positive")
    return width, height


def is_valid_resolution(text: str) -> bool:
    """True if ``text`` is a WIDTHxHEIGHT string with positive dimensions."""
    try:
        parse_resolution(text)
    except ValueError:
        return False
    return True
