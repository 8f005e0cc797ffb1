"""
EntrykitLogger: keyword-field logging on top of the standard logging module.

All loggers share one process-wide setup (level, console format, optional
JSON log file) applied by configure_logging(). Console handlers are attached
on first use, so they write to whatever sys.stderr is at that moment.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

from .context import get_current_context
from .formatters import ConsoleFormatter, JsonFormatter


LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5


class _Setup:
    """Process-wide logging settings."""

    level: int = logging.WARNING
    json_format: bool = False
    file_handler: logging.Handler | None = None


_setup = _Setup()


def _coerce_level(level: int | str) -> int:
    return level if isinstance(level, int) else logging.getLevelName(level.upper())


class _FieldLogging:
    """Level methods taking keyword fields instead of extra=."""

    def _log(self, level: int, msg: str, fields: dict[str, Any]) -> None:
        raise NotImplementedError

    def debug(self, msg: str, **fields: Any) -> None:
        self._log(logging.DEBUG, msg, fields)

    def info(self, msg: str, **fields: Any) -> None:
        self._log(logging.INFO, msg, fields)

    def warning(self, msg: str, **fields: Any) -> None:
        self._log(logging.WARNING, msg, fields)

    def error(self, msg: str, **fields: Any) -> None:
        self._log(logging.ERROR, msg, fields)


class EntrykitLogger(_FieldLogging):
    """Logger for one entrykit component.

    Usage:
        logger = get_logger("entrykit", component="polling")
        logger.info("Port not reachable yet", host="db", port=5432)
    """

    def __init__(
        self,
        name: str,
        component: str | None = None,
        level: int | str | None = None,
    ):
        self.name = name
        self.component = component
        self._fixed_level = None if level is None else _coerce_level(level)
        self._logger = logging.getLogger(f"{name}.{component}" if component else name)
        self._logger.propagate = False
        self.apply_setup()

    def apply_setup(self) -> None:
        """Take over the current process-wide settings."""
        self._logger.setLevel(self._fixed_level if self._fixed_level is not None else _setup.level)
        self.reset_handlers()

    def reset_handlers(self) -> None:
        for handler in list(self._logger.handlers):
            self._logger.removeHandler(handler)
            # The file handler is shared and owned by configure_logging
            if handler is not _setup.file_handler:
                handler.close()

    def _attach_handlers(self) -> None:
        if self._logger.handlers:
            return

        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(JsonFormatter() if _setup.json_format else ConsoleFormatter())
        self._logger.addHandler(console)

        if _setup.file_handler is not None:
            self._logger.addHandler(_setup.file_handler)

    def _log(self, level: int, msg: str, fields: dict[str, Any]) -> None:
        if not self._logger.isEnabledFor(level):
            return
        self._attach_handlers()

        extra: dict[str, Any] = {}
        ctx = get_current_context()
        if ctx is not None:
            extra.update(ctx.to_dict())
        extra.update(fields)

        self._logger.log(level, msg, extra=extra)

    def with_context(self, **fields: Any) -> "BoundLogger":
        """Return a logger that adds these fields to every record."""
        return BoundLogger(self, fields)


class BoundLogger(_FieldLogging):
    """An EntrykitLogger with fields bound to every call."""

    def __init__(self, parent: EntrykitLogger, fields: dict[str, Any]):
        self._parent = parent
        self._fields = fields

    def _log(self, level: int, msg: str, fields: dict[str, Any]) -> None:
        self._parent._log(level, msg, {**self._fields, **fields})

    def with_context(self, **fields: Any) -> "BoundLogger":
        return BoundLogger(self._parent, {**self._fields, **fields})


_loggers: dict[str, EntrykitLogger] = {}


def get_logger(
    name: str,
    component: str | None = None,
    level: int | str | None = None,
) -> EntrykitLogger:
    """Return the cached logger for name and component, creating it if needed."""
    key = f"{name}:{component or ''}"
    if key not in _loggers:
        _loggers[key] = EntrykitLogger(name, component, level)
    return _loggers[key]


def open_log_file(path: str | Path) -> logging.Handler:
    """Open a rotating JSON log file, creating its directory.

    Raises:
        OSError: If the directory or the file cannot be created
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        path,
        maxBytes=LOG_FILE_MAX_BYTES,
        backupCount=LOG_FILE_BACKUPS,
        encoding="utf-8",
    )
    handler.setFormatter(JsonFormatter())
    return handler


def configure_logging(
    level: int | str = logging.WARNING,
    json_format: bool = False,
    log_file: str | Path | None = None,
) -> None:
    """Apply process-wide logging settings to all loggers, present and future.

    The log file is opened here rather than on first use, so an unusable
    path is reported by the caller before any operation runs. Loggers
    created with an explicit level keep it.

    Raises:
        OSError: If log_file cannot be opened; the previous settings stay
    """
    file_handler = open_log_file(log_file) if log_file else None

    previous = _setup.file_handler
    _setup.level = _coerce_level(level)
    _setup.json_format = json_format
    _setup.file_handler = file_handler

    for logger in _loggers.values():
        logger.apply_setup()

    if previous is not None:
        previous.close()
