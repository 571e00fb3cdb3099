"""Unit coverage for structured logging utilities."""

from __future__ import annotations

import json
import logging
from typing import Iterator

import pytest

from realtime_cli.base.log_support import JsonFormatter, LogContext
from realtime_cli.base.logging import (
    _parse_level,  # type: ignore[attr-defined]
    configure_logger,
    get_logger,
    log_event,
)


class _ListHandler(logging.Handler):
    """Capture log records into a list for assertions."""

    def __init__(self) -> None:
        super().__init__(level=logging.DEBUG)
        self.messages: list[str] = []

    def emit(self, record: logging.LogRecord) -> None:  # pragma: no cover - exercised via tests
        self.messages.append(record.getMessage())


@pytest.fixture
def captured(monkeypatch: pytest.MonkeyPatch) -> Iterator[_ListHandler]:
    monkeypatch.delenv("REALTIME_LOG_LEVEL", raising=False)
    logger = get_logger("realtime.testing.logging")
    handler = _ListHandler()
    logger.handlers[:] = [handler]
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    yield handler
    logger.handlers[:] = []
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


def test_parse_level_variants() -> None:
    assert _parse_level(None) == logging.WARNING  # nosec B101
    assert _parse_level("debug") == logging.DEBUG  # nosec B101
    assert _parse_level("WARN") == logging.WARNING  # nosec B101
    assert _parse_level("unknown", default=logging.ERROR) == logging.ERROR  # nosec B101


def test_log_event_merges_context_and_drops_none(captured: _ListHandler) -> None:
    logger = logging.getLogger("realtime.testing.logging")
    ctx = LogContext(command="channels:publish", mode="normal", extra={"attempt": None, "tty": False})
    log_event(logger, "shell.dispatch.start", ctx, level=logging.DEBUG, argv=["news"], error=None)
    payload = json.loads(captured.messages[-1])
    assert payload == {  # nosec B101
        "event": "shell.dispatch.start",
        "command": "channels:publish",
        "mode": "normal",
        "tty": False,
        "argv": ["news"],
    }
    log_event(logger, "shell.dispatch.end", level=logging.DEBUG, keep_none=True, error=None)
    assert json.loads(captured.messages[-1])["error"] is None  # nosec B101


def test_log_event_respects_level(captured: _ListHandler) -> None:
    logger = logging.getLogger("realtime.testing.logging")
    logger.setLevel(logging.WARNING)
    log_event(logger, "shell.dispatch.start", level=logging.DEBUG)
    assert captured.messages == []  # nosec B101


def test_json_formatter_hoists_event_fields() -> None:
    record = logging.LogRecord(
        "realtime.shell", logging.WARNING, __file__, 1, json.dumps({"event": "shell.dispatch.error", "code": "auth"}), None, None
    )
    data = json.loads(JsonFormatter().format(record))
    assert data["event"] == "shell.dispatch.error"  # nosec B101
    assert data["code"] == "auth"  # nosec B101
    assert data["level"] == "WARNING"  # nosec B101
    assert "msg" not in data  # nosec B101
    plain = logging.LogRecord("realtime", logging.INFO, __file__, 1, "hello", None, None)
    assert json.loads(JsonFormatter().format(plain))["msg"] == "hello"  # nosec B101


def test_configure_logger_manages_file_handler(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("REALTIME_LOG_LEVEL", raising=False)
    base = get_logger()
    saved_level = base.level
    log_file = tmp_path / "logs" / "shell.log"
    try:
        logger = configure_logger(level="INFO", file_path=str(log_file))
        managed = [h for h in logger.handlers if getattr(h, "_realtime_file_handler", False)]
        assert len(managed) == 1  # nosec B101
        assert logger.level == logging.INFO  # nosec B101
        # same path again reuses the handler
        configure_logger(file_path=str(log_file))
        assert len([h for h in logger.handlers if getattr(h, "_realtime_file_handler", False)]) == 1  # nosec B101
        log_event(logger, "shell.settings.applied", level=logging.WARNING, verbosity="INFO")
        managed[0].flush()
        line = log_file.read_text(encoding="utf-8").strip().splitlines()[-1]
        assert json.loads(line)["event"] == "shell.settings.applied"  # nosec B101
    finally:
        configure_logger(level=saved_level, file_path=None)
    assert not [h for h in base.handlers if getattr(h, "_realtime_file_handler", False)]  # nosec B101
