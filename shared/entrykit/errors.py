"""
Exceptions raised by entrykit operations.

Library functions raise these; only the CLI turns them into exit codes.
"""


class EntrykitError(Exception):
    """Base class for all entrykit errors."""

    exit_code = 1


class UsageError(EntrykitError):
    """Wrong arguments for an operation."""

    def __init__(self, message: str, usage: str | None = None):
        super().__init__(message)
        self.usage = usage


class UnknownOperationError(EntrykitError):
    """The dispatcher was asked for an operation it does not know."""

    def __init__(self, name: str):
        super().__init__(f"Unknown command: {name}")
        self.name = name


class ConfigError(EntrykitError):
    """The process configuration is invalid."""


class SubstitutionError(EntrykitError, OSError):
    """A substitution target could not be read or written."""


class PrivilegeError(EntrykitError, PermissionError):
    """Switching user requires privileges the process does not have."""


class ExecError(EntrykitError):
    """The command (or the user-switching launcher) could not be started."""


class WaitTimeoutError(EntrykitError, TimeoutError):
    """A dependency did not become available within the poll timeout."""

    def __init__(self, target: str, timeout: float):
        super().__init__(f"Timed out after {timeout:g}s waiting for {target}")
        self.target = target
        self.timeout = timeout
