"""
Pytest configuration and shared fixtures for launcher tests.
"""

import io
import logging
from pathlib import Path

import pytest

from twlauncher.core.platform import PlatformKey
from twlauncher.core.retry import RetryPolicy


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="run integration tests that require network access",
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --integration flag is provided."""
    if not config.getoption("--integration"):
        skip_integration = pytest.mark.skip(reason="need --integration option to run")
        for item in items:
            if "integration" in item.keywords:
                item.add_marker(skip_integration)


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    """Create an empty launcher cache directory."""
    directory = tmp_path / "go-tw"
    directory.mkdir()
    return directory


@pytest.fixture
def linux_key() -> PlatformKey:
    """Platform key for glibc Linux on x86-64."""
    return PlatformKey(os="linux", arch="amd64")


@pytest.fixture
def windows_key() -> PlatformKey:
    """Platform key for Windows on x86-64."""
    return PlatformKey(os="windows", arch="amd64")


@pytest.fixture
def sleeps():
    """Record of delays requested by retry loops instead of sleeping."""
    return []


@pytest.fixture
def fast_policy() -> RetryPolicy:
    """Default retry policy; pair with the ``sleeps`` fixture to avoid waiting."""
    return RetryPolicy(max_attempts=3, delay_seconds=2.0)


@pytest.fixture
def output_streams():
    """In-memory stdout and stderr."""
    return io.StringIO(), io.StringIO()


@pytest.fixture
def isolated_env(tmp_path: Path, monkeypatch) -> Path:
    """Point every per-user and config location at a temporary directory."""
    home = tmp_path / "home"
    home.mkdir()

    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    monkeypatch.setenv("XDG_CACHE_HOME", str(home / ".cache"))
    monkeypatch.setenv("LOCALAPPDATA", str(home / "AppData" / "Local"))
    monkeypatch.delenv("TWLAUNCHER_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)

    return home


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo root logger changes made by CLI tests."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level

    yield

    root.handlers[:] = handlers
    root.setLevel(level)
