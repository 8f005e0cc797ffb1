"""
Pytest configuration and shared fixtures for entrykit tests.
"""

import io
import sys
from pathlib import Path

import pytest


# Add project paths to sys.path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "shared"))

from entrykit_logging import configure_logging, set_current_context  # noqa: E402


ENTRYKIT_ENV_VARS = (
    "ENTRYKIT_CONFIG",
    "ENTRYKIT_WAIT_INTERVAL",
    "ENTRYKIT_WAIT_TIMEOUT",
    "ENTRYKIT_CONNECT_TIMEOUT",
    "ENTRYKIT_TRAP_INTERRUPTS",
    "ENTRYKIT_LOG_LEVEL",
    "ENTRYKIT_LOG_FORMAT",
    "ENTRYKIT_LOG_FILE",
    "ENTRYKIT_ENV_FILE",
    "ENTRYKIT_RUN_ID",
)


@pytest.fixture(autouse=True)
def clean_entrykit_env(monkeypatch, tmp_path):
    """Isolate tests from ENTRYKIT_* settings and any system config file."""
    for name in ENTRYKIT_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("ENTRYKIT_CONFIG", str(tmp_path / "no-such-config.yaml"))
    yield
    configure_logging()
    set_current_context(None)


@pytest.fixture
def out():
    """A text stream collecting progress messages."""
    return io.StringIO()
