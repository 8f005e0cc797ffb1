"""
Operation dispatcher.

Maps the operation name given as the first command-line argument to its
handler. The name is looked up in the Operation enum first; the remaining
arguments are then parsed by that operation's argparse parser, whose errors
are raised as UsageError instead of exiting the process.
"""

import argparse
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import NoReturn

from entrykit_config import EntrykitConfig
from entrykit_config.validators import validate_port
from entrykit_logging import ContextScope, get_logger

from .colors import colored_output
from .errors import ConfigError, UnknownOperationError, UsageError
from .polling import is_port_reachable, wait_for_file, wait_for_port
from .privileged import exec_as
from .substitute import substitute_in_file, substitute_in_tree


PROG = "entrypoint-tool"

logger = get_logger("entrykit", component="dispatcher")


class Operation(Enum):
    """Operations available on the command line."""

    COLORED_OUTPUT = "colored-output"
    SUBSTITUTE_IN_FILE = "substitute-in-file"
    SUBSTITUTE_IN_TREE = "substitute-in-tree"
    EXEC_AS = "exec-as"
    IS_PORT_REACHABLE = "is-port-reachable"
    WAIT_FOR_PORT = "wait-for-port"
    WAIT_FOR_FILE = "wait-for-file"


class OperationParser(argparse.ArgumentParser):
    """ArgumentParser that raises UsageError instead of printing and exiting."""

    def error(self, message: str) -> NoReturn:
        raise UsageError(f"{self.prog}: {message}", usage=self.format_usage().strip())


def port_number(value: str) -> int:
    ok, error = validate_port(value)
    if not ok:
        raise argparse.ArgumentTypeError(error)
    return int(value)


def _substitution_env(config: EntrykitConfig) -> dict[str, str]:
    try:
        return config.substitution_env()
    except ValueError as e:
        raise ConfigError(str(e)) from e


# =============================================================================
# Handlers
# =============================================================================


def cmd_colored_output(args: argparse.Namespace, config: EntrykitConfig) -> int:
    colored_output(args.color, args.message)
    return 0


def cmd_substitute_in_file(args: argparse.Namespace, config: EntrykitConfig) -> int:
    substitute_in_file(args.file, _substitution_env(config))
    return 0


def cmd_substitute_in_tree(args: argparse.Namespace, config: EntrykitConfig) -> int:
    substitute_in_tree(args.directory, args.pattern, _substitution_env(config))
    return 0


def cmd_exec_as(args: argparse.Namespace, config: EntrykitConfig) -> int:
    return exec_as(args.user, [args.command, *args.args])


def cmd_is_port_reachable(args: argparse.Namespace, config: EntrykitConfig) -> int:
    return 0 if is_port_reachable(args.host, args.port, config.connect_timeout) else 1


def cmd_wait_for_port(args: argparse.Namespace, config: EntrykitConfig) -> int:
    wait_for_port(args.host, args.port, config.poll_policy)
    return 0


def cmd_wait_for_file(args: argparse.Namespace, config: EntrykitConfig) -> int:
    wait_for_file(args.file, config.poll_policy)
    return 0


# =============================================================================
# Arguments
# =============================================================================


def _colored_output_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("color", metavar="COLOR", help="RED, GREEN, ORANGE or CYAN")
    parser.add_argument("message", metavar="MESSAGE", help="Text, backslash escapes allowed")


def _file_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("file", metavar="FILE")


def _tree_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("directory", metavar="DIRECTORY")
    parser.add_argument(
        "pattern", metavar="NAME_PATTERN", nargs="?", default="*", help="Case-insensitive glob"
    )


def _exec_as_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("user", metavar="USER", help="User name or numeric uid")
    parser.add_argument("command", metavar="COMMAND")
    parser.add_argument("args", metavar="ARGS", nargs=argparse.REMAINDER)


def _host_port_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("host", metavar="HOST")
    parser.add_argument("port", metavar="PORT", type=port_number)


Handler = Callable[[argparse.Namespace, EntrykitConfig], int]


@dataclass(frozen=True)
class OperationSpec:
    """Handler, arguments and one-line help of an operation."""

    handler: Handler
    add_arguments: Callable[[argparse.ArgumentParser], None]
    help: str


REGISTRY: dict[Operation, OperationSpec] = {
    Operation.COLORED_OUTPUT: OperationSpec(
        cmd_colored_output, _colored_output_arguments, "Print a message in color"
    ),
    Operation.SUBSTITUTE_IN_FILE: OperationSpec(
        cmd_substitute_in_file, _file_argument, "Replace ${VAR} tokens in a file"
    ),
    Operation.SUBSTITUTE_IN_TREE: OperationSpec(
        cmd_substitute_in_tree, _tree_arguments, "Replace ${VAR} tokens in matching files"
    ),
    Operation.EXEC_AS: OperationSpec(cmd_exec_as, _exec_as_arguments, "Run a command as another user"),
    Operation.IS_PORT_REACHABLE: OperationSpec(
        cmd_is_port_reachable, _host_port_arguments, "Exit 0 if a TCP port accepts connections"
    ),
    Operation.WAIT_FOR_PORT: OperationSpec(
        cmd_wait_for_port, _host_port_arguments, "Wait until a TCP port accepts connections"
    ),
    Operation.WAIT_FOR_FILE: OperationSpec(
        cmd_wait_for_file, _file_argument, "Wait until a regular file exists"
    ),
}


def _check_registry() -> None:
    missing = [operation.value for operation in Operation if operation not in REGISTRY]
    if missing:
        raise RuntimeError(f"Operations without a handler: {', '.join(missing)}")


_check_registry()


def create_parser() -> tuple[OperationParser, dict[Operation, OperationParser]]:
    """Create the top-level parser and one subparser per operation.

    There is no -h/--help option: every first argument must name an
    operation.
    """
    parser = OperationParser(
        prog=PROG,
        add_help=False,
        description="Helpers for container entrypoint scripts.",
    )
    subparsers = parser.add_subparsers(
        dest="operation", metavar="OPERATION", parser_class=OperationParser
    )

    operation_parsers = {}
    for operation, spec in REGISTRY.items():
        subparser = subparsers.add_parser(operation.value, help=spec.help, add_help=False)
        spec.add_arguments(subparser)
        operation_parsers[operation] = subparser

    return parser, operation_parsers


def resolve(name: str) -> Operation:
    """Return the operation with this exact name.

    Raises:
        UnknownOperationError: If there is none
    """
    try:
        return Operation(name)
    except ValueError:
        raise UnknownOperationError(name) from None


def parse_operation(argv: Sequence[str]) -> tuple[Operation, argparse.Namespace]:
    """Resolve argv[0] and parse the rest with that operation's parser.

    Raises:
        UnknownOperationError: If argv[0] names no operation
        UsageError: If the arguments do not fit the operation
    """
    operation = resolve(argv[0])
    _parser, operation_parsers = create_parser()
    return operation, operation_parsers[operation].parse_args(list(argv[1:]))


def dispatch(argv: Sequence[str], config: EntrykitConfig | None = None) -> int:
    """Run the operation named by argv[0] with the remaining arguments.

    With no arguments nothing is done and 0 is returned.

    Returns:
        The operation's exit status

    Raises:
        UnknownOperationError: If argv[0] names no operation
        UsageError: If the arguments do not fit the operation
    """
    if not argv:
        return 0

    operation, args = parse_operation(argv)
    config = config or EntrykitConfig()

    with ContextScope(operation=operation.value, target=argv[1]):
        logger.debug("Dispatching", arguments=list(argv[1:]))
        return REGISTRY[operation].handler(args, config)
