"""Tests for verbosity aliases and console log suppression during commands."""

from __future__ import annotations

import io
import logging
from typing import Iterator, List

import pytest

from realtime_cli.shell.cli_utils import parse_verbosity, suppress_console_logs


@pytest.fixture
def shell_loggers() -> Iterator[List[logging.Logger]]:
    """Yield the base and a child logger, restoring their configuration afterwards."""
    loggers = [logging.getLogger("realtime"), logging.getLogger("realtime.testing")]
    snapshot = [(lg.handlers[:], lg.level, lg.propagate) for lg in loggers]
    yield loggers
    for lg, (handlers, level, propagate) in zip(loggers, snapshot):
        lg.handlers = handlers
        lg.setLevel(level)
        lg.propagate = propagate


def _stream_on(logger: logging.Logger) -> io.StringIO:
    buffer = io.StringIO()
    logger.addHandler(logging.StreamHandler(buffer))
    logger.setLevel(logging.DEBUG)
    return buffer


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("debug", "DEBUG"),
        ("verbose", "DEBUG"),
        (" Warn ", "WARNING"),
        ("quiet", "ERROR"),
        ("CRITICAL", "CRITICAL"),
        ("loud", None),
    ],
)
def test_parse_verbosity(raw: str, expected: str | None) -> None:
    assert parse_verbosity(raw) == expected  # nosec B101 - pytest assertion in test


def test_console_output_pauses_while_command_runs(shell_loggers: List[logging.Logger]) -> None:
    base = shell_loggers[0]
    buffer = _stream_on(base)

    with suppress_console_logs():
        base.warning("during publish")
    assert buffer.getvalue() == ""  # nosec B101 - pytest assertion in test

    base.warning("back at the prompt")
    assert "back at the prompt" in buffer.getvalue()  # nosec B101 - pytest assertion in test


def test_log_file_keeps_receiving_records(shell_loggers: List[logging.Logger], tmp_path) -> None:
    base = shell_loggers[0]
    base.setLevel(logging.DEBUG)
    log_file = tmp_path / "shell.log"
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler._realtime_file_handler = True  # type: ignore[attr-defined]
    base.addHandler(file_handler)
    try:
        with suppress_console_logs():
            base.info("subscription attached")
        file_handler.flush()
        assert "subscription attached" in log_file.read_text(encoding="utf-8")  # nosec B101 - pytest assertion in test
    finally:
        base.removeHandler(file_handler)
        file_handler.close()


def test_child_loggers_stop_propagating(shell_loggers: List[logging.Logger]) -> None:
    base, child = shell_loggers
    buffer = _stream_on(base)
    child.handlers = []
    child.setLevel(logging.DEBUG)
    child.propagate = True

    with suppress_console_logs():
        assert not child.propagate  # nosec B101 - pytest assertion in test
        child.debug("sdk chatter")
    assert buffer.getvalue() == ""  # nosec B101 - pytest assertion in test

    child.debug("after dispatch")
    assert child.propagate  # nosec B101 - pytest assertion in test
    assert "after dispatch" in buffer.getvalue()  # nosec B101 - pytest assertion in test


def test_verbose_runs_leave_console_attached(shell_loggers: List[logging.Logger]) -> None:
    buffer = _stream_on(shell_loggers[0])
    with suppress_console_logs(enabled=False):
        shell_loggers[0].info("verbose run")
    assert "verbose run" in buffer.getvalue()  # nosec B101 - pytest assertion in test
