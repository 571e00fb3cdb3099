"""realtime_cli.config.env
=======================

Centralized environment variable names and helpers.

Purpose
-------
- Single source of truth for the environment variables the CLI and shell
  consume (mode selection, developer toggles, credentials).
- Small helpers to read boolean flags consistently.

Failure Modes
-------------
Helpers never raise on unset variables; callers decide how to proceed.
"""

from __future__ import annotations

import os
from typing import Mapping, Optional

# Mode selection (read by Mode.from_env)
WEB_CLI_MODE = "REALTIME_WEB_CLI_MODE"
ANONYMOUS_USER_MODE = "REALTIME_ANONYMOUS_USER_MODE"
SHOW_DEV_FLAGS = "REALTIME_SHOW_DEV_FLAGS"

# Shell presentation and lifecycle
SUPPRESS_WELCOME = "REALTIME_SUPPRESS_WELCOME"
WRAPPER_MODE = "REALTIME_WRAPPER_MODE"
INTERACTIVE_MODE = "REALTIME_INTERACTIVE_MODE"

# Collaborators
USE_MOCKS = "REALTIME_USE_MOCKS"
MANIFEST_PATH = "REALTIME_MANIFEST"
CONFIG_FILE = "REALTIME_CONFIG_FILE"
API_KEY = "REALTIME_API_KEY"  # pragma: allowlist secret - env var name, not a secret
ACCESS_TOKEN = "REALTIME_ACCESS_TOKEN"
CONTROL_HOST = "REALTIME_CONTROL_HOST"

_TRUTHY = frozenset({"1", "true", "yes", "on", "y", "t"})


def is_truthy(value: Optional[str]) -> bool:
    """Return True for the usual truthy strings (``1``, ``true``, ``yes``, ``on``)."""
    if value is None:
        return False
    return value.strip().lower() in _TRUTHY


def env_flag(name: str, env: Optional[Mapping[str, str]] = None) -> bool:
    """Read a boolean flag from ``env`` (defaults to ``os.environ``)."""
    source = os.environ if env is None else env
    return is_truthy(source.get(name))


def env_value(name: str, env: Optional[Mapping[str, str]] = None) -> Optional[str]:
    """Return a stripped, non-empty value or ``None``."""
    source = os.environ if env is None else env
    raw = source.get(name)
    if raw is None:
        return None
    raw = raw.strip()
    return raw or None


__all__ = [
    "WEB_CLI_MODE",
    "ANONYMOUS_USER_MODE",
    "SHOW_DEV_FLAGS",
    "SUPPRESS_WELCOME",
    "WRAPPER_MODE",
    "INTERACTIVE_MODE",
    "USE_MOCKS",
    "MANIFEST_PATH",
    "CONFIG_FILE",
    "API_KEY",
    "ACCESS_TOKEN",
    "CONTROL_HOST",
    "is_truthy",
    "env_flag",
    "env_value",
]
