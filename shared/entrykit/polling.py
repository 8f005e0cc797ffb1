"""
Availability polling: wait for a TCP port or a file before continuing startup.

Both waits share one state machine:

    UNCHECKED -> WAITING -> AVAILABLE | TIMED_OUT

The target is checked once up front; if it is already available the wait
returns without sleeping or printing anything. Otherwise the check is
repeated every ``policy.interval`` seconds until it succeeds or
``policy.timeout`` seconds of waiting have elapsed, in which case
WaitTimeoutError is raised.

SIGINT received while waiting is acknowledged and the wait goes on.
"""

import contextlib
import signal
import socket
import threading
import time
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TextIO

from entrykit_config import PollPolicy
from entrykit_logging import get_logger

from .colors import Color, colored_output
from .errors import WaitTimeoutError


logger = get_logger("entrykit", component="polling")


class WaitState(Enum):
    """States of an availability wait."""

    UNCHECKED = "unchecked"
    WAITING = "waiting"
    AVAILABLE = "available"
    TIMED_OUT = "timed_out"


@dataclass(frozen=True)
class WaitResult:
    """Outcome of a successful wait.

    Attributes:
        target: Human-readable description of what was waited for
        state: Always WaitState.AVAILABLE for a returned result
        checks: Number of times the check ran
        elapsed: Seconds of waiting accumulated (0 if ready immediately)
    """

    target: str
    state: WaitState
    checks: int
    elapsed: float


def is_port_reachable(host: str, port: int, timeout: float = 1.0) -> bool:
    """Return True if a TCP connection to host:port can be established.

    The connection is closed straight away; whatever the remote does next
    does not matter. Refused, timed out and unresolvable all count as
    unreachable.
    """
    try:
        with socket.create_connection((host, port), timeout=timeout):
            return True
    except OSError as e:
        logger.debug("Port not reachable", host=host, port=port, reason=str(e))
        return False


def file_exists(path: str | Path) -> bool:
    """Return True if path exists as a regular file."""
    return Path(path).is_file()


@contextlib.contextmanager
def acknowledge_interrupts(target: str, stream: TextIO | None = None) -> Iterator[None]:
    """Keep waiting through SIGINT, reporting each one.

    Outside the main thread signal handlers cannot be installed and this
    is a no-op.
    """
    if threading.current_thread() is not threading.main_thread():
        yield
        return

    def _handler(signum, frame):
        logger.info("Interrupt received while waiting; continuing", signal=signum)
        colored_output(
            Color.CYAN, f"Received interrupt while waiting for {target}; continuing", stream
        )

    previous = signal.signal(signal.SIGINT, _handler)
    try:
        yield
    finally:
        signal.signal(signal.SIGINT, previous)


def wait_for(
    check: Callable[[], bool],
    target: str,
    policy: PollPolicy | None = None,
    stream: TextIO | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> WaitResult:
    """Run check until it succeeds or the policy's timeout is used up.

    Args:
        check: Predicate returning True once the target is available
        target: Description used in progress messages
        policy: Retry policy (defaults to 1s interval, 300s timeout)
        stream: Where progress messages go (stdout by default)
        sleep: Sleep function, replaceable in tests

    Returns:
        WaitResult describing the successful wait

    Raises:
        WaitTimeoutError: If the target did not become available in time
    """
    policy = policy or PollPolicy()
    bound = logger.with_context(target=target)

    checks = 1
    if check():
        bound.debug("Available without waiting")
        return WaitResult(target, WaitState.AVAILABLE, checks, 0.0)

    state = WaitState.WAITING
    bound.info("Waiting", state=state.value, timeout=policy.timeout)
    colored_output(Color.ORANGE, f"Waiting for {target}...", stream)

    elapsed = 0.0
    guard = (
        acknowledge_interrupts(target, stream)
        if policy.trap_interrupts
        else contextlib.nullcontext()
    )
    with guard:
        while elapsed < policy.timeout:
            sleep(policy.interval)
            elapsed += policy.interval
            checks += 1
            if check():
                state = WaitState.AVAILABLE
                bound.info("Available", state=state.value, checks=checks, elapsed=elapsed)
                colored_output(Color.GREEN, f"{target} is available", stream)
                return WaitResult(target, state, checks, elapsed)
            colored_output(
                Color.ORANGE,
                f"Still waiting for {target} ({elapsed:g}s/{policy.timeout:g}s)",
                stream,
            )

    state = WaitState.TIMED_OUT
    bound.info("Timed out", state=state.value, checks=checks, elapsed=elapsed)
    raise WaitTimeoutError(target, policy.timeout)


def wait_for_port(
    host: str,
    port: int,
    policy: PollPolicy | None = None,
    stream: TextIO | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> WaitResult:
    """Wait until host:port accepts TCP connections."""
    policy = policy or PollPolicy()
    return wait_for(
        lambda: is_port_reachable(host, port, policy.connect_timeout),
        f"{host}:{port}",
        policy,
        stream,
        sleep,
    )


def wait_for_file(
    path: str | Path,
    policy: PollPolicy | None = None,
    stream: TextIO | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> WaitResult:
    """Wait until path exists as a regular file."""
    return wait_for(lambda: file_exists(path), str(path), policy, stream, sleep)
