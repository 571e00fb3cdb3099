"""Structured logging for the ``realtime`` command line and shell.

One logger tree rooted at ``realtime`` carries every diagnostic line. The root
owns a single stderr console handler (never stdout, which belongs to command
output) and, when the user asks for it, one rotating file handler. Modules ask
for children (``realtime.shell``, ``realtime.sdk.control``) that own no
handlers and propagate upwards, so ``configure_logger`` governs all of them.

The default level is WARNING: an interactive session prints nothing besides
the prompt and command output unless verbosity is raised through settings,
``--log-level`` or ``REALTIME_LOG_LEVEL``.
"""
from __future__ import annotations

import contextlib
import json
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Any, Optional

from .log_support import JsonFormatter, LogContext

BASE_LOGGER_NAME = "realtime"
LOG_LEVEL_ENV = "REALTIME_LOG_LEVEL"

_READY_ATTR = "_realtime_logger_initialized"
_CONSOLE_HANDLER_ATTR = "_realtime_console_handler"
_FILE_HANDLER_ATTR = "_realtime_file_handler"
_TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
_FILE_MAX_BYTES = 5 * 1024 * 1024
_FILE_BACKUPS = 3

_LEVEL_NAMES = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def _parse_level(value: str | None, default: int = logging.WARNING) -> int:
    """Map a level name (any case) to its number; ``default`` when unknown."""
    if not value:
        return default
    return _LEVEL_NAMES.get(value.strip().upper(), default)


def _formatter(json_mode: bool) -> logging.Formatter:
    return JsonFormatter() if json_mode else logging.Formatter(_TEXT_FORMAT)


def _console_handler(json_mode: bool) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(_formatter(json_mode))
    setattr(handler, _CONSOLE_HANDLER_ATTR, True)
    return handler


def _is_managed_file(handler: logging.Handler) -> bool:
    return bool(getattr(handler, _FILE_HANDLER_ATTR, False))


def _rebind_console(logger: logging.Logger, json_mode: bool) -> None:
    """Point the console handler at the current ``sys.stderr``.

    ``sys.stderr`` is swapped under us by test capture and by terminal
    wrappers; a handler still holding a closed stream is replaced.
    """
    for handler in list(logger.handlers):
        if not getattr(handler, _CONSOLE_HANDLER_ATTR, False):
            continue
        stream = getattr(handler, "stream", None)
        if stream is not None and not getattr(stream, "closed", False):
            if isinstance(handler, logging.StreamHandler) and stream is not sys.stderr:
                handler.setStream(sys.stderr)
            continue
        logger.removeHandler(handler)
        with contextlib.suppress(Exception):
            handler.close()
        logger.addHandler(_console_handler(json_mode))


def _root_logger(json_mode: bool, level: int) -> logging.Logger:
    logger = logging.getLogger(BASE_LOGGER_NAME)
    env_level = os.getenv(LOG_LEVEL_ENV)
    if getattr(logger, _READY_ATTR, False):
        if env_level:
            logger.setLevel(_parse_level(env_level, default=logger.level))
        _rebind_console(logger, json_mode)
        return logger
    logger.setLevel(_parse_level(env_level, default=level))
    logger.handlers[:] = [_console_handler(json_mode)]
    logger.propagate = False
    setattr(logger, _READY_ATTR, True)
    return logger


def get_logger(
    name: str = BASE_LOGGER_NAME,
    json_mode: bool = True,
    level: int = logging.WARNING,
) -> logging.Logger:
    """Return the ``realtime`` logger, or a child of it that propagates to it."""
    root = _root_logger(json_mode=json_mode, level=level)
    if name == BASE_LOGGER_NAME:
        return root
    child = logging.getLogger(name)
    for handler in [h for h in child.handlers if getattr(h, _CONSOLE_HANDLER_ATTR, False)]:
        child.removeHandler(handler)
    child.setLevel(logging.NOTSET)
    child.propagate = True
    return child


def configure_logger(
    *,
    level: int | str | None = None,
    file_path: Optional[str] = None,
    json_mode: bool = True,
) -> logging.Logger:
    """Apply a level and the optional log file to the ``realtime`` tree.

    ``level`` may be a number or a name; ``None`` leaves it unchanged.
    ``file_path`` attaches a rotating file handler (reused when it already
    writes there); ``None`` removes the managed file handler. Console
    handlers are left as they are.
    """
    logger = get_logger(BASE_LOGGER_NAME, json_mode=json_mode)
    if isinstance(level, str):
        logger.setLevel(_parse_level(level, default=logger.level))
    elif level is not None:
        logger.setLevel(level)

    target = os.path.abspath(os.path.expanduser(file_path)) if file_path else None
    kept: Optional[logging.Handler] = None
    for handler in [h for h in logger.handlers if _is_managed_file(h)]:
        if target is not None and getattr(handler, "baseFilename", None) == target:
            kept = handler
            continue
        logger.removeHandler(handler)
        with contextlib.suppress(Exception):
            handler.close()
    if target is None:
        return logger

    if kept is None:
        os.makedirs(os.path.dirname(target), exist_ok=True)
        kept = RotatingFileHandler(target, maxBytes=_FILE_MAX_BYTES, backupCount=_FILE_BACKUPS, encoding="utf-8")
        setattr(kept, _FILE_HANDLER_ATTR, True)
        logger.addHandler(kept)
    kept.setFormatter(_formatter(json_mode))
    return logger


def log_event(
    logger: logging.Logger,
    event: str,
    ctx: LogContext | None = None,
    *,
    level: int = logging.INFO,
    keep_none: bool = False,
    **fields: Any,
) -> None:
    """Log ``event`` as one JSON object line.

    ``ctx`` contributes the command, mode and session fields. ``None`` valued
    fields are dropped unless ``keep_none``. Nothing is serialized when the
    logger would discard the record anyway, so DEBUG lifecycle events cost
    nothing on the hot path.
    """
    if not logger.isEnabledFor(level):
        return
    payload: dict[str, Any] = {"event": event}
    if ctx is not None:
        payload.update(ctx.to_dict())
    payload.update(fields if keep_none else {k: v for k, v in fields.items() if v is not None})
    logger.log(level, json.dumps(payload, ensure_ascii=False, default=str))


__all__ = [
    "BASE_LOGGER_NAME",
    "LOG_LEVEL_ENV",
    "LogContext",
    "get_logger",
    "configure_logger",
    "log_event",
]
