"""JSON log output, one object per line."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

# Attributes every LogRecord carries. Anything else arrived through
# ``extra`` or a filter and belongs in the entry's context.
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}

# Text-format helpers that duplicate context fields.
_TEXT_ONLY_ATTRS = frozenset({"task_tag"})


def _context(record: logging.LogRecord) -> dict[str, Any]:
    return {
        key: value
        for key, value in vars(record).items()
        if value is not None
        and not key.startswith("_")
        and key not in _RECORD_ATTRS
        and key not in _TEXT_ONLY_ATTRS
    }


class JSONFormatter(logging.Formatter):
    """Render log records as JSON.

    Keys: ``timestamp`` (UTC, ISO-8601), ``level``, ``message``,
    ``logger`` (absent for the root logger), ``context`` (extra fields
    that are not None) and ``exception`` (formatted traceback). Values
    JSON cannot represent are written with ``str()``.
    """

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry: dict[str, Any] = {
            "timestamp": created.isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
        }
        if record.name != "root":
            entry["logger"] = record.name

        context = _context(record)
        if context:
            entry["context"] = context
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)
