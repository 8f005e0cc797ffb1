"""
Configuration framework for entrykit.

This module provides:
- BaseConfig: Abstract base class for configurations
- ValidationResult: Result of configuration validation
- EntrykitConfig: Process-level settings of entrypoint-tool
- PollPolicy: Immutable retry policy for availability waits

Usage:
    from entrykit_config import EntrykitConfig

    config = EntrykitConfig.from_env()
    result = config.validate()
    if not result.is_usable:
        print("Configuration errors found")
"""

from .base import (
    BaseConfig,
    ConfigStatus,
    ValidationResult,
)
from .config import EntrykitConfig, PollPolicy


__all__ = [
    # Base classes
    "BaseConfig",
    "ConfigStatus",
    "EntrykitConfig",
    "PollPolicy",
    "ValidationResult",
]
