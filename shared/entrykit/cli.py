"""
entrypoint-tool command line.

Usage:
    entrypoint-tool colored-output COLOR MESSAGE
    entrypoint-tool substitute-in-file FILE
    entrypoint-tool substitute-in-tree DIRECTORY [NAME_PATTERN]
    entrypoint-tool exec-as USER COMMAND [ARGS...]
    entrypoint-tool is-port-reachable HOST PORT
    entrypoint-tool wait-for-port HOST PORT
    entrypoint-tool wait-for-file FILE

This is the only place that turns errors into exit codes: 0 on success,
1 on usage errors, unknown operations (including -h and --help), invalid
configuration, I/O and privilege failures and timeouts. exec-as exits with
the command's status.
"""

import sys
from collections.abc import Sequence

from entrykit_config import EntrykitConfig
from entrykit_logging import configure_logging, get_logger

from .colors import Color, colored_output
from .dispatcher import create_parser, dispatch, resolve
from .errors import ConfigError, EntrykitError, UnknownOperationError, UsageError


logger = get_logger("entrykit", component="cli")


def load_config() -> EntrykitConfig:
    """Load and validate the process configuration, then set up logging.

    Raises:
        ConfigError: If the configuration cannot be loaded, is invalid, or
            names a log file that cannot be opened
    """
    try:
        config = EntrykitConfig.from_env()
    except ValueError as e:
        raise ConfigError(str(e)) from e

    result = config.validate()
    if not result.is_usable:
        raise ConfigError("Invalid configuration: " + "; ".join(result.errors))

    try:
        configure_logging(config.log_level, config.json_logs, config.log_file)
    except OSError as e:
        raise ConfigError(f"Cannot open log file {config.log_file}: {e.strerror or e}") from e

    for message in result.errors + result.warnings:
        logger.warning(message)

    return config


def report_error(error: EntrykitError) -> None:
    """Print an error in red on stderr, followed by usage where it helps."""
    colored_output(Color.RED, str(error), sys.stderr)
    if isinstance(error, UsageError) and error.usage:
        print(error.usage, file=sys.stderr)
    elif isinstance(error, UnknownOperationError):
        parser, _operation_parsers = create_parser()
        print(parser.format_help(), end="", file=sys.stderr)


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point."""
    argv = list(sys.argv[1:] if argv is None else argv)

    if not argv:
        return 0

    try:
        # Unknown names are rejected before the configuration is read
        resolve(argv[0])
        config = load_config()
        return dispatch(argv, config)
    except EntrykitError as e:
        report_error(e)
        logger.error("Operation failed", error=type(e).__name__, detail=str(e))
        return e.exit_code


if __name__ == "__main__":
    sys.exit(main())
