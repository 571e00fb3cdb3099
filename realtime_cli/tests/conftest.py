"""Pytest configuration for the realtime CLI test suite.

Every test gets its own XDG config/state directories and config file path so
settings, history and stored credentials never leak from the developer's
machine into assertions.
"""

from __future__ import annotations

from typing import Dict, Iterator

import pytest
from prompt_toolkit.input import create_pipe_input

from realtime_cli.catalog import CommandCatalog, load_catalog
from realtime_cli.tests.helpers import StdinPipe


@pytest.fixture(autouse=True)
def isolated_dirs(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Point XDG and config lookups at a per-test temporary directory."""

    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_STATE_HOME", str(tmp_path / "state"))
    monkeypatch.setenv("REALTIME_CONFIG_FILE", str(tmp_path / "realtime.toml"))
    for name in (
        "REALTIME_WEB_CLI_MODE",
        "REALTIME_ANONYMOUS_USER_MODE",
        "REALTIME_SHOW_DEV_FLAGS",
        "REALTIME_API_KEY",
        "REALTIME_ACCESS_TOKEN",
        "REALTIME_MANIFEST",
        "REALTIME_WRAPPER_MODE",
        "REALTIME_HISTORY_FILE",
        "REALTIME_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture()
def enable_mock_clients(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Enable the in-memory SDK clients via the environment toggle."""

    monkeypatch.setenv("REALTIME_USE_MOCKS", "1")
    yield
    monkeypatch.delenv("REALTIME_USE_MOCKS", raising=False)


@pytest.fixture(scope="session")
def catalog() -> CommandCatalog:
    """The bundled command catalog (loaded once per test session)."""

    return load_catalog()


@pytest.fixture()
def shell_env(tmp_path) -> Dict[str, str]:
    """Explicit environment mapping for sessions and dispatchers under test."""

    return {
        "REALTIME_USE_MOCKS": "1",
        "REALTIME_SUPPRESS_WELCOME": "1",
        "REALTIME_CONFIG_FILE": str(tmp_path / "realtime.toml"),
    }


@pytest.fixture()
def stdin_pipe() -> Iterator[StdinPipe]:
    """A prompt_toolkit pipe input standing in for stdin."""

    with create_pipe_input() as pipe:
        yield StdinPipe(pipe)
