"""Configuration layer for the CLI.

Goals
-----
* Centralize defaults (prompt, exit codes, history size, control API host).
* Name every environment variable in one place (``config.env``).
* Expose stored account/app/key values through a read-only accessor
  (``config.store``).

Public API
----------
* ``ConfigAccessor`` / ``TomlConfigStore`` / ``AccountInfo``
* ``env_flag`` / ``env_value`` / ``is_truthy``
"""
from __future__ import annotations

from .env import env_flag, env_value, is_truthy
from .store import AccountInfo, ConfigAccessor, TomlConfigStore, default_config_path

__all__ = [
    "AccountInfo",
    "ConfigAccessor",
    "TomlConfigStore",
    "default_config_path",
    "env_flag",
    "env_value",
    "is_truthy",
]
