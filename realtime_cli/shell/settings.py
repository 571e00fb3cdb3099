"""User preferences that survive between shell sessions.

Stored as JSON at ``$XDG_CONFIG_HOME/realtime_cli/cli.json`` (``~/.config``
when unset). The log file and line history live in the state directory,
``$XDG_STATE_HOME/realtime_cli`` (``~/.local/state``), unless the user points
them elsewhere; ``REALTIME_HISTORY_FILE`` overrides the history default.
Account credentials are not kept here, see :mod:`realtime_cli.config.store`.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Tuple

from ..base.logging import configure_logger, get_logger, log_event
from ..config.defaults import HISTORY_SIZE_DEFAULT

APP_DIR = "realtime_cli"
SETTINGS_FILE = "cli.json"
DEFAULT_LOG_FILE = "realtime_shell.log"
HISTORY_FILE_ENV = "REALTIME_HISTORY_FILE"
_KNOWN_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _xdg_dir(env_var: str, *fallback: str) -> Path:
    configured = os.environ.get(env_var)
    root = Path(configured).expanduser() if configured else Path.home().joinpath(*fallback)
    return root / APP_DIR


def _settings_file() -> Path:
    return _xdg_dir("XDG_CONFIG_HOME", ".config") / SETTINGS_FILE


def _state_file(name: str) -> str:
    return str(_xdg_dir("XDG_STATE_HOME", ".local", "state") / name)


def _history_default() -> str:
    return os.environ.get(HISTORY_FILE_ENV) or _state_file("history")


@dataclass
class CLISettings:
    """Shell preferences.

    ``verbosity`` is a level name; ``log_to_file`` mirrors log records into
    ``log_file_path``. ``history_size`` caps the persisted history.
    """

    verbosity: str = "WARNING"
    log_to_file: bool = False
    log_file_path: str = field(default_factory=lambda: _state_file(DEFAULT_LOG_FILE))
    ui_colors: bool = True
    history_file_path: str = field(default_factory=_history_default)
    history_size: int = HISTORY_SIZE_DEFAULT


def _sanitize(raw: Dict[str, Any]) -> CLISettings:
    """Build settings from stored JSON, replacing anything unusable with defaults."""
    settings = CLISettings()
    known = {f.name for f in fields(CLISettings)}
    values = {key: value for key, value in raw.items() if key in known and value not in (None, "")}

    level = str(values.get("verbosity", settings.verbosity)).strip().upper()
    settings.verbosity = level if level in _KNOWN_LEVELS else "WARNING"
    settings.log_to_file = bool(values.get("log_to_file", settings.log_to_file))
    settings.ui_colors = bool(values.get("ui_colors", settings.ui_colors))
    settings.log_file_path = str(values.get("log_file_path", settings.log_file_path))
    settings.history_file_path = str(values.get("history_file_path", settings.history_file_path))
    try:
        size = int(values.get("history_size", settings.history_size))
    except (TypeError, ValueError):
        size = HISTORY_SIZE_DEFAULT
    settings.history_size = size if size > 0 else HISTORY_SIZE_DEFAULT
    return settings


def load_settings() -> CLISettings:
    """Read the settings file; defaults when it is missing, unreadable or malformed."""
    path = _settings_file()
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return CLISettings()
    return _sanitize(raw) if isinstance(raw, dict) else CLISettings()


def save_settings(settings: CLISettings) -> Tuple[bool, str | None]:
    """Write ``settings`` through a temp file and rename; ``(ok, error)``."""
    path = _settings_file()
    staging = path.with_name(path.name + ".tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        staging.write_text(json.dumps(asdict(settings), ensure_ascii=False, indent=2), encoding="utf-8")
        os.replace(staging, path)
    except OSError as exc:
        return False, str(exc)
    return True, None


def normalize_log_path(raw_path: str) -> str:
    """Absolute log file path for ``raw_path``.

    Directories, and missing paths without an extension, are treated as
    folders and get :data:`DEFAULT_LOG_FILE` appended.
    """
    path = Path(raw_path).expanduser()
    looks_like_dir = path.is_dir() or (not path.exists() and not path.suffix)
    return str((path / DEFAULT_LOG_FILE if looks_like_dir else path).resolve())


def apply_logging(settings: CLISettings) -> None:
    """Push verbosity and the optional log file onto the ``realtime`` logger.

    A log path that had to be normalized is written back to the settings
    file so the next session starts from the concrete path.
    """
    level = logging.getLevelName(settings.verbosity.upper())
    if not isinstance(level, int):
        level = logging.WARNING
    target: str | None = None
    if settings.log_to_file:
        target = normalize_log_path(settings.log_file_path)
        if target != settings.log_file_path:
            settings.log_file_path = target
            save_settings(settings)
    configure_logger(level=level, file_path=target)
    log_event(
        get_logger("realtime.shell"),
        "shell.settings.applied",
        level=logging.DEBUG,
        verbosity=settings.verbosity,
        log_file=target,
    )


__all__ = [
    "CLISettings",
    "DEFAULT_LOG_FILE",
    "HISTORY_FILE_ENV",
    "load_settings",
    "save_settings",
    "apply_logging",
    "normalize_log_path",
]
