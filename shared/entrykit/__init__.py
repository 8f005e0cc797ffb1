"""
entrykit - helpers for container entrypoints.

Colored progress output, ${VAR} substitution in template files, running a
command as another user, and waits that block startup until a TCP port or
a file is available.

Usage:
    from entrykit import substitute_in_tree, wait_for_port, exec_as

    substitute_in_tree("/etc/nginx", "*.conf")
    wait_for_port("db", 5432)
    sys.exit(exec_as("app", ["gunicorn", "app:wsgi"]))

The same operations are available from shell scripts through the
``entrypoint-tool`` command.
"""

from .colors import Color, colored_output, colorize
from .dispatcher import Operation, dispatch
from .errors import (
    ConfigError,
    EntrykitError,
    ExecError,
    PrivilegeError,
    SubstitutionError,
    UnknownOperationError,
    UsageError,
    WaitTimeoutError,
)
from .polling import (
    WaitResult,
    WaitState,
    file_exists,
    is_port_reachable,
    wait_for,
    wait_for_file,
    wait_for_port,
)
from .privileged import exec_as
from .substitute import substitute_in_file, substitute_in_tree, substitute_text


__all__ = [
    "Color",
    "ConfigError",
    "EntrykitError",
    "ExecError",
    "Operation",
    "PrivilegeError",
    "SubstitutionError",
    "UnknownOperationError",
    "UsageError",
    "WaitResult",
    "WaitState",
    "WaitTimeoutError",
    "colored_output",
    "colorize",
    "dispatch",
    "exec_as",
    "file_exists",
    "is_port_reachable",
    "substitute_in_file",
    "substitute_in_tree",
    "substitute_text",
    "wait_for",
    "wait_for_file",
    "wait_for_port",
]

__version__ = "0.1.0"
