"""
entrykit_logging - Structured logging for entrykit.

Usage:
    from entrykit_logging import ContextScope, get_logger

    logger = get_logger("entrykit", component="polling")
    logger.info("Port not reachable yet", host="db", port=5432)

    # Every record in the scope carries run_id, operation and target
    with ContextScope(operation="wait-for-port", target="db:5432"):
        logger.info("Waiting")

    # Fields bound once, included in every call
    bound = logger.with_context(path="/run/ready")
    bound.debug("Checking")

Records go to stderr as text (or JSON) and, when configured, to a rotating
JSON log file. Set ENTRYKIT_RUN_ID to share one run id across several
entrypoint-tool calls.
"""

from .context import ContextScope, LogContext, get_current_context, set_current_context
from .formatters import ConsoleFormatter, JsonFormatter
from .logger import BoundLogger, EntrykitLogger, configure_logging, get_logger


__all__ = [
    "BoundLogger",
    "ConsoleFormatter",
    "ContextScope",
    "EntrykitLogger",
    "JsonFormatter",
    "LogContext",
    "configure_logging",
    "get_current_context",
    "get_logger",
    "set_current_context",
]

__version__ = "0.1.0"
