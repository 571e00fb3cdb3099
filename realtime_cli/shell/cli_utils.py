# -*- coding: utf-8 -*-
"""Small helpers shared by the argument parser and the dispatcher.

``parse_verbosity`` accepts the level names and the friendlier aliases that
``--log-level`` and the ``log_level`` setting allow. ``suppress_console_logs``
keeps stderr log lines out of a command's streamed output while it runs.
"""

from __future__ import annotations

import contextlib
import logging
from typing import Iterator, List, Tuple

from ..base.logging import BASE_LOGGER_NAME

_ALIASES = {
    "DEBUG": ("debug", "verbose"),
    "INFO": ("info", "low"),
    "WARNING": ("warning", "warn", "medium", "med"),
    "ERROR": ("error", "err", "high", "quiet"),
    "CRITICAL": ("critical", "crit", "silent"),
}
_BY_ALIAS = {alias: level for level, aliases in _ALIASES.items() for alias in aliases}


def parse_verbosity(value: str) -> str | None:
    """Canonical level name for ``value`` (case-insensitive), else ``None``."""
    return _BY_ALIAS.get(value.strip().lower())


def _shell_loggers() -> List[logging.Logger]:
    """The ``realtime`` logger followed by every realized descendant."""
    prefix = BASE_LOGGER_NAME + "."
    names = sorted(
        name
        for name, entry in list(logging.Logger.manager.loggerDict.items())
        if name.startswith(prefix) and isinstance(entry, logging.Logger)
    )
    return [logging.getLogger(BASE_LOGGER_NAME)] + [logging.getLogger(name) for name in names]


def _is_console(handler: logging.Handler) -> bool:
    if getattr(handler, "_realtime_file_handler", False):
        return False
    return isinstance(handler, logging.StreamHandler) or hasattr(handler, "stream")


@contextlib.contextmanager
def suppress_console_logs(enabled: bool = True) -> Iterator[None]:
    """Detach console handlers of the ``realtime`` tree for the duration.

    The managed log file keeps receiving records. Propagation is switched off
    so nothing escapes to the root logger, and every handler and flag is put
    back on exit. ``enabled=False`` (a ``--verbose`` run) does nothing.
    """
    if not enabled:
        yield
        return
    propagation: List[Tuple[logging.Logger, bool]] = []
    removed: List[Tuple[logging.Logger, logging.Handler]] = []
    try:
        for logger in _shell_loggers():
            propagation.append((logger, logger.propagate))
            logger.propagate = False
            for handler in [h for h in logger.handlers if _is_console(h)]:
                handler.flush()
                logger.removeHandler(handler)
                removed.append((logger, handler))
        yield
    finally:
        for logger, flag in propagation:
            logger.propagate = flag
        for logger, handler in removed:
            logger.addHandler(handler)


__all__ = ["parse_verbosity", "suppress_console_logs"]
