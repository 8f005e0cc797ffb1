"""
Reusable validation functions for configuration values.

Each validator returns a tuple of (is_valid, error_message) where
error_message is None if the value is valid.
"""


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMATS = ("console", "json")


def validate_positive(value: float, name: str) -> tuple[bool, str | None]:
    """Validate that a numeric setting is strictly positive.

    Args:
        value: The value to validate
        name: Setting name used in the error message

    Returns:
        Tuple of (is_valid, error_message).
    """
    if value <= 0:
        return False, f"{name} must be positive, got {value}"
    return True, None


def validate_log_level(level: str) -> tuple[bool, str | None]:
    """Validate a log level name.

    Args:
        level: Level name such as "INFO" (case-insensitive)

    Returns:
        Tuple of (is_valid, error_message).
    """
    if not level:
        return False, "Log level is empty"

    if level.upper() not in LOG_LEVELS:
        return False, f"Unknown log level {level!r} (expected one of {', '.join(LOG_LEVELS)})"

    return True, None


def validate_log_format(log_format: str) -> tuple[bool, str | None]:
    """Validate a log output format.

    Args:
        log_format: "console" or "json"

    Returns:
        Tuple of (is_valid, error_message).
    """
    if log_format not in LOG_FORMATS:
        return False, f"Unknown log format {log_format!r} (expected one of {', '.join(LOG_FORMATS)})"
    return True, None


def validate_port(value: str | int) -> tuple[bool, str | None]:
    """Validate a TCP port number.

    Args:
        value: Port as given on the command line or in config

    Returns:
        Tuple of (is_valid, error_message).
    """
    # Plain ASCII digits only: int() would also take "+80", " 80" and "8_0"
    text = str(value) if isinstance(value, int) and not isinstance(value, bool) else value
    if not isinstance(text, str) or not (text.isascii() and text.isdigit()):
        return False, f"Port must be an integer, got {value!r}"

    port = int(text)

    if not 1 <= port <= 65535:
        return False, f"Port must be between 1 and 65535, got {port}"

    return True, None
