"""
Run a command as another user through gosu.

The command inherits the calling process's environment (not the target
user's login environment); only HOME and USER are set for the target user.
"""

import os
import pwd
import subprocess
from collections.abc import Mapping, Sequence

from entrykit_logging import get_logger

from .errors import ExecError, PrivilegeError, UsageError


GOSU = "gosu"

logger = get_logger("entrykit", component="privileged")


def resolve_user(user: str) -> pwd.struct_passwd:
    """Look up a user by name or numeric uid.

    Raises:
        UsageError: If no such user exists
    """
    try:
        if user.isdigit():
            return pwd.getpwuid(int(user))
        return pwd.getpwnam(user)
    except KeyError:
        raise UsageError(f"Unknown user: {user}") from None


def build_command(entry: pwd.struct_passwd, command: Sequence[str]) -> list[str]:
    """Return the argv that runs command as the given user.

    No launcher is needed when the target is the current user.

    Raises:
        PrivilegeError: If switching user is required but we are not root
    """
    euid = os.geteuid()
    if entry.pw_uid == euid:
        return list(command)
    if euid != 0:
        raise PrivilegeError(
            f"Cannot run as {entry.pw_name}: switching user requires root (running as uid {euid})"
        )
    return [GOSU, entry.pw_name, *command]


def exec_as(user: str, command: Sequence[str], env: Mapping[str, str] | None = None) -> int:
    """Run a command as another user and return its exit status.

    Args:
        user: Target user name or uid
        command: Program and its arguments
        env: Environment to pass on (defaults to the process environment)

    Returns:
        The command's exit status; 128 + N if it was killed by signal N

    Raises:
        UsageError: If the command is empty or the user is unknown
        PrivilegeError: If the process may not switch to the user
        ExecError: If the launcher or the command cannot be executed
    """
    if not command:
        raise UsageError("No command given to run")

    entry = resolve_user(user)
    run_env = dict(os.environ if env is None else env)
    run_env["HOME"] = entry.pw_dir
    run_env["USER"] = entry.pw_name

    cmd = build_command(entry, command)
    logger.info("Running command as user", user=entry.pw_name, command=list(command))

    try:
        result = subprocess.run(cmd, env=run_env, check=False)
    except FileNotFoundError as e:
        raise ExecError(f"Cannot execute {cmd[0]}: command not found") from e
    except PermissionError as e:
        raise ExecError(f"Cannot execute {cmd[0]}: permission denied") from e

    returncode = result.returncode
    if returncode < 0:
        returncode = 128 - returncode

    logger.debug("Command finished", user=entry.pw_name, exit_status=returncode)
    return returncode
