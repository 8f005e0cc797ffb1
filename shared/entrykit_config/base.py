"""
Base types for entrykit configuration classes.

A configuration class loads itself with from_env(), checks itself with
validate() and reports a ValidationResult. A DEGRADED result still allows
the program to run; an INVALID one does not.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ConfigStatus(Enum):
    VALID = "valid"
    INVALID = "invalid"
    DEGRADED = "degraded"


@dataclass
class ValidationResult:
    """Status of a configuration plus the messages explaining it."""

    status: ConfigStatus
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_usable(self) -> bool:
        return self.status is not ConfigStatus.INVALID

    @classmethod
    def valid(cls, warnings: list[str] | None = None) -> "ValidationResult":
        return cls(ConfigStatus.VALID, [], list(warnings or []))

    @classmethod
    def invalid(cls, errors: list[str], warnings: list[str] | None = None) -> "ValidationResult":
        return cls(ConfigStatus.INVALID, list(errors), list(warnings or []))

    @classmethod
    def degraded(cls, errors: list[str], warnings: list[str] | None = None) -> "ValidationResult":
        """Problems that disable an optional feature only."""
        return cls(ConfigStatus.DEGRADED, list(errors), list(warnings or []))


class BaseConfig(ABC):
    """Interface of a configuration class."""

    @abstractmethod
    def validate(self) -> ValidationResult: ...

    @abstractmethod
    def to_dict(self) -> dict[str, Any]:
        """Settings as a plain dictionary, for display."""

    @classmethod
    @abstractmethod
    def from_env(cls) -> "BaseConfig":
        """Build the configuration from defaults, config files and the environment."""
