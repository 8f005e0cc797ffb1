"""
Loading and parsing helpers for configuration values.

The loaders turn every problem with a file (unreadable, malformed, wrong
shape) into ValueError, so a caller has one exception to report.
"""

from pathlib import Path
from typing import Any

import yaml
from dotenv import dotenv_values


TRUE_WORDS = ("true", "yes", "on", "1")
FALSE_WORDS = ("false", "no", "off", "0")


def load_env_file(path: Path) -> dict[str, str]:
    """Load a .env style file into a dictionary.

    Supports comments, quoted values, ``export`` prefixes and ``${VAR}``
    expansion as understood by python-dotenv. Keys declared without a
    value are dropped.

    Returns:
        Dictionary of key-value pairs (empty if the file does not exist)

    Raises:
        ValueError: If the path exists but is not a readable regular file
    """
    if not path.exists():
        return {}
    # dotenv reads anything that is not a regular file as empty
    if not path.is_file():
        raise ValueError(f"Cannot read {path}: not a regular file")

    try:
        values = dotenv_values(path)
    except OSError as e:
        raise ValueError(f"Cannot read {path}: {e.strerror or e}") from e

    return {key: value for key, value in values.items() if value is not None}


def load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a YAML mapping from a file.

    Returns:
        The mapping, or an empty dict if the file is missing or empty

    Raises:
        ValueError: If the file cannot be read, is not valid YAML or is not a mapping
    """
    if not path.exists():
        return {}

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except OSError as e:
        raise ValueError(f"Cannot read {path}: {e.strerror or e}") from e
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Expected a mapping at the top of {path}, got {type(data).__name__}")

    return data


def parse_float(value: Any) -> float:
    """Parse a number given as a string or a YAML scalar.

    Raises:
        ValueError: If value is not a number
    """
    if isinstance(value, bool):
        raise ValueError(f"expected a number, got {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValueError(f"expected a number, got {value!r}") from None


def parse_bool(value: Any) -> bool:
    """Parse true/false, yes/no, on/off or 1/0 (any case); YAML booleans pass through.

    Raises:
        ValueError: If value is none of these
    """
    if isinstance(value, bool):
        return value

    word = str(value).strip().lower()
    if word in TRUE_WORDS:
        return True
    if word in FALSE_WORDS:
        return False
    raise ValueError(f"expected one of {'/'.join(TRUE_WORDS)} or {'/'.join(FALSE_WORDS)}, got {value!r}")
