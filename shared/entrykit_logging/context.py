"""
Log context for entrykit_logging.

The dispatcher opens a ContextScope per operation; every record logged
inside it carries the run id, the operation name and its target.
"""

import os
import secrets
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any


_current_context: ContextVar["LogContext | None"] = ContextVar("entrykit_log_context", default=None)


def _new_run_id() -> str:
    # A wrapping entrypoint script can export ENTRYKIT_RUN_ID to tie several calls together
    return os.environ.get("ENTRYKIT_RUN_ID") or secrets.token_hex(8)


@dataclass(frozen=True)
class LogContext:
    """Fields attached to every record logged in a scope.

    Attributes:
        run_id: Identifier shared by all records of one run
        operation: Operation being executed (e.g. "wait-for-port")
        target: What the operation acts on (a path, "host:port", a user)
    """

    run_id: str = field(default_factory=_new_run_id)
    operation: str | None = None
    target: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            name: value
            for name, value in (
                ("run_id", self.run_id),
                ("operation", self.operation),
                ("target", self.target),
            )
            if value
        }


def get_current_context() -> LogContext | None:
    return _current_context.get()


def set_current_context(ctx: LogContext | None) -> None:
    _current_context.set(ctx)


class ContextScope:
    """Bind a LogContext for the duration of a with block.

    A nested scope keeps the run id of the enclosing one and, unless given
    its own, its operation.

    Usage:
        with ContextScope(operation="wait-for-port", target="db:5432"):
            logger.info("Waiting")
    """

    def __init__(
        self,
        run_id: str | None = None,
        operation: str | None = None,
        target: str | None = None,
    ):
        self._run_id = run_id
        self._operation = operation
        self._target = target
        self._token: Any = None

    def __enter__(self) -> LogContext:
        outer = get_current_context()
        run_id = self._run_id or (outer.run_id if outer else _new_run_id())
        operation = self._operation or (outer.operation if outer else None)
        ctx = LogContext(run_id=run_id, operation=operation, target=self._target)
        self._token = _current_context.set(ctx)
        return ctx

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        _current_context.reset(self._token)
