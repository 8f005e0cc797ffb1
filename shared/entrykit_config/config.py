"""
Configuration for entrypoint-tool.

Settings come from three layers, lowest precedence first: built-in
defaults, the YAML file named by $ENTRYKIT_CONFIG (default
/etc/entrykit/config.yaml), and ENTRYKIT_* environment variables.
"""

import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

from .base import BaseConfig, ValidationResult
from .utils import load_env_file, load_yaml_file, parse_bool, parse_float
from .validators import validate_log_format, validate_log_level, validate_positive


DEFAULT_CONFIG_FILE = Path("/etc/entrykit/config.yaml")

DEFAULT_WAIT_INTERVAL = 1.0
DEFAULT_WAIT_TIMEOUT = 300.0
DEFAULT_CONNECT_TIMEOUT = 1.0


@dataclass(frozen=True)
class PollPolicy:
    """Retry policy for the availability waits.

    Attributes:
        interval: Seconds slept between two checks
        timeout: Seconds of waiting after which the wait gives up
        connect_timeout: Per-attempt TCP connect timeout in seconds
        trap_interrupts: Acknowledge SIGINT during a wait instead of aborting
    """

    interval: float = DEFAULT_WAIT_INTERVAL
    timeout: float = DEFAULT_WAIT_TIMEOUT
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT
    trap_interrupts: bool = True


# Environment variable and YAML key for every setting
_SOURCES = {
    "wait_interval": "ENTRYKIT_WAIT_INTERVAL",
    "wait_timeout": "ENTRYKIT_WAIT_TIMEOUT",
    "connect_timeout": "ENTRYKIT_CONNECT_TIMEOUT",
    "trap_interrupts": "ENTRYKIT_TRAP_INTERRUPTS",
    "log_level": "ENTRYKIT_LOG_LEVEL",
    "log_format": "ENTRYKIT_LOG_FORMAT",
    "log_file": "ENTRYKIT_LOG_FILE",
    "env_file": "ENTRYKIT_ENV_FILE",
}


@dataclass
class EntrykitConfig(BaseConfig):
    """Process-level configuration of entrypoint-tool."""

    wait_interval: float = DEFAULT_WAIT_INTERVAL
    wait_timeout: float = DEFAULT_WAIT_TIMEOUT
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT
    trap_interrupts: bool = True
    log_level: str = "WARNING"
    log_format: str = "console"
    log_file: str | None = None
    env_file: str | None = None
    source_file: str | None = field(default=None, compare=False)
    # Values from_env could not parse; reported by validate()
    load_errors: list[str] = field(default_factory=list, compare=False, repr=False)

    @property
    def poll_policy(self) -> PollPolicy:
        """The retry policy handed to each wait."""
        return PollPolicy(
            interval=self.wait_interval,
            timeout=self.wait_timeout,
            connect_timeout=self.connect_timeout,
            trap_interrupts=self.trap_interrupts,
        )

    @property
    def json_logs(self) -> bool:
        return self.log_format == "json"

    def substitution_env(self) -> dict[str, str]:
        """Environment used for ${VAR} substitution.

        Process variables win; the env file only fills in names the
        process does not define.

        Raises:
            ValueError: If the env file exists but cannot be read
        """
        env: dict[str, str] = {}
        if self.env_file:
            env.update(load_env_file(Path(self.env_file)))
        env.update(os.environ)
        return env

    def validate(self) -> ValidationResult:
        errors = list(self.load_errors)
        warnings = []

        for name in ("wait_interval", "wait_timeout", "connect_timeout"):
            ok, error = validate_positive(getattr(self, name), name)
            if not ok:
                errors.append(error)

        ok, error = validate_log_level(self.log_level)
        if not ok:
            errors.append(error)

        ok, error = validate_log_format(self.log_format)
        if not ok:
            errors.append(error)

        if self.wait_interval > self.wait_timeout:
            warnings.append(
                f"wait_interval ({self.wait_interval}) exceeds wait_timeout "
                f"({self.wait_timeout}); waits will retry only once"
            )

        if self.env_file and Path(self.env_file).exists() and not Path(self.env_file).is_file():
            errors.append(f"env_file {self.env_file} is not a regular file")

        if errors:
            return ValidationResult.invalid(errors, warnings)

        if self.env_file and not Path(self.env_file).exists():
            return ValidationResult.degraded(
                [f"env_file {self.env_file} does not exist; it will be ignored"], warnings
            )

        return ValidationResult.valid(warnings)

    def to_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self) if f.name != "load_errors"}

    @classmethod
    def from_env(cls) -> "EntrykitConfig":
        """Load configuration from the YAML file and the environment.

        A value that cannot be parsed keeps its default and is recorded in
        load_errors, which makes validate() report the config as invalid.

        Raises:
            ValueError: If the config file cannot be read or is not a YAML mapping
        """
        config_file = Path(os.environ.get("ENTRYKIT_CONFIG") or DEFAULT_CONFIG_FILE)
        values: dict[str, Any] = {}
        origins: dict[str, str] = {}

        for key, value in load_yaml_file(config_file).items():
            if key in _SOURCES:
                values[key] = value
                origins[key] = str(config_file)

        for key, env_var in _SOURCES.items():
            if os.environ.get(env_var):
                values[key] = os.environ[env_var]
                origins[key] = env_var

        load_errors: list[str] = []

        def parsed(key, parse, default):
            if key not in values:
                return default
            try:
                return parse(values[key])
            except ValueError as e:
                load_errors.append(f"Invalid {key} from {origins[key]}: {e}")
                return default

        return cls(
            wait_interval=parsed("wait_interval", parse_float, DEFAULT_WAIT_INTERVAL),
            wait_timeout=parsed("wait_timeout", parse_float, DEFAULT_WAIT_TIMEOUT),
            connect_timeout=parsed("connect_timeout", parse_float, DEFAULT_CONNECT_TIMEOUT),
            trap_interrupts=parsed("trap_interrupts", parse_bool, True),
            log_level=str(values.get("log_level", "WARNING")).upper(),
            log_format=str(values.get("log_format", "console")).lower(),
            log_file=values.get("log_file") or None,
            env_file=values.get("env_file") or None,
            source_file=str(config_file) if config_file.exists() else None,
            load_errors=load_errors,
        )
