"""Shared pytest fixtures for logvalues tests.

Fixtures are organized by category:
- Template fixtures: Common message templates
- Logging fixtures: Captured log streams and logger cleanup
- Configuration fixtures: Test configs for various scenarios
"""

import io
import logging
from pathlib import Path
from typing import Any

import pytest

from logvalues.utils.logging import LogMode, setup_logging

# =============================================================================
# Template Fixtures
# =============================================================================


@pytest.fixture
def login_template() -> str:
    """Return a template with two placeholders."""
    return "User {UserId} logged in from {IpAddress}"


@pytest.fixture
def escaped_template() -> str:
    """Return a template mixing escaped braces and placeholders."""
    return "{{prefix{{{Argument}}}suffix}}"


# =============================================================================
# Logging Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_package_logger() -> Any:
    """Detach handlers installed on the package logger during a test."""
    yield
    logger = logging.getLogger("logvalues")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def log_stream() -> io.StringIO:
    """Capture human-mode log output at DEBUG level."""
    stream = io.StringIO()
    setup_logging(mode=LogMode.HUMAN, level=logging.DEBUG, stream=stream)
    return stream


@pytest.fixture
def json_log_stream() -> io.StringIO:
    """Capture JSON-mode log output at INFO level."""
    stream = io.StringIO()
    setup_logging(mode=LogMode.JSON, level=logging.INFO, stream=stream)
    return stream


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run the test from an empty directory so no config is discovered."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def full_config() -> dict[str, Any]:
    """Return a complete configuration with all options."""
    return {
        "output": {"format": "json"},
        "values": {"typed": False},
        "logging": {"mode": "verbose"},
        "ci": {"fail_on_error": False},
    }
