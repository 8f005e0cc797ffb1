"""
Formatters for entrykit_logging.

JsonFormatter writes one object per line for log files and log shippers;
ConsoleFormatter writes one readable line per record for stderr.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any


CONTEXT_FIELDS = ("run_id", "operation", "target")

# Attributes every LogRecord has; anything else came in through extra=
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {
    "message",
    "asctime",
}


def record_context(record: logging.LogRecord) -> dict[str, Any]:
    return {name: getattr(record, name) for name in CONTEXT_FIELDS if getattr(record, name, None)}


def record_fields(record: logging.LogRecord) -> dict[str, Any]:
    """Keyword fields given to the log call, context fields excluded."""
    return {
        key: value
        for key, value in vars(record).items()
        if key not in _RECORD_ATTRS and key not in CONTEXT_FIELDS and not key.startswith("_")
    }


def stderr_supports_color() -> bool:
    if os.environ.get("NO_COLOR"):
        return False
    return hasattr(sys.stderr, "isatty") and sys.stderr.isatty()


class JsonFormatter(logging.Formatter):
    """Format records as JSON lines.

    Example:
        {"timestamp": "2025-11-28T12:34:56.789Z", "severity": "INFO",
         "logger": "entrykit.polling", "message": "Waiting",
         "context": {"run_id": "...", "operation": "wait-for-port"},
         "extra": {"timeout": 300.0}}
    """

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry: dict[str, Any] = {
            "timestamp": created.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "severity": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        context = record_context(record)
        if context:
            entry["context"] = context

        fields = record_fields(record)
        if fields:
            entry["extra"] = fields

        return json.dumps(entry, default=str, ensure_ascii=False)


class ConsoleFormatter(logging.Formatter):
    """Format records as a single human-readable line.

    Example:
        2025-11-28 12:34:56 INFO entrykit.polling: Waiting (op=wait-for-port target=db:5432)
    """

    LEVEL_COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(self, use_colors: bool | None = None):
        super().__init__()
        self.use_colors = stderr_supports_color() if use_colors is None else use_colors

    def format(self, record: logging.LogRecord) -> str:
        level = record.levelname
        if self.use_colors:
            level = f"{self.LEVEL_COLORS.get(level, '')}{level}{self.RESET}"

        line = (
            f"{self.formatTime(record, '%Y-%m-%d %H:%M:%S')} {level} "
            f"{record.name}: {record.getMessage()}"
        )

        tags = []
        if getattr(record, "operation", None):
            tags.append(f"op={record.operation}")
        if getattr(record, "target", None):
            tags.append(f"target={record.target}")
        if tags:
            line += f" ({' '.join(tags)})"

        return line
