"""Read-only accessor for account, app and key configuration.

Purpose
-------
Commands need a handful of values from the user's stored configuration
(current account, current app, API key, access token). This module exposes
them behind the narrow :class:`ConfigAccessor` protocol so commands and tests
never touch the file format directly.

Storage format
--------------
A TOML document, by default ``~/.realtime/config`` (``REALTIME_CONFIG_FILE``
overrides)::

    [current]
    account = "default"

    [accounts.default]
    accessToken = "..."
    accountId = "acc-1"
    accountName = "My Account"
    userEmail = "me@example.com"
    currentAppId = "app-1"

    [accounts.default.apps.app-1]
    appName = "Demo"
    apiKey = "app-1.key:secret"

Environment variables ``REALTIME_API_KEY`` and ``REALTIME_ACCESS_TOKEN`` take
precedence over stored values. Writing the file is out of scope here.
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Protocol

from ..base.errors import ErrorCode, ShellError
from . import env as env_names
from .defaults import CONFIG_DIR_NAME, CONFIG_FILE_NAME


class ConfigAccessor(Protocol):
    """What commands may ask of the configuration layer."""

    def current_account_alias(self) -> Optional[str]: ...

    def current_account(self) -> Optional["AccountInfo"]: ...

    def current_app_id(self) -> Optional[str]: ...

    def api_key(self, app_id: Optional[str] = None) -> Optional[str]: ...

    def access_token(self) -> Optional[str]: ...

    def app_name(self, app_id: str) -> Optional[str]: ...


@dataclass(frozen=True)
class AccountInfo:
    """Identity details stored for one account alias."""

    alias: str
    account_id: Optional[str] = None
    account_name: Optional[str] = None
    user_email: Optional[str] = None


def default_config_path(env: Optional[Mapping[str, str]] = None) -> Path:
    """Return the config file path honoring ``REALTIME_CONFIG_FILE``."""
    override = env_names.env_value(env_names.CONFIG_FILE, env)
    if override:
        return Path(override).expanduser()
    return Path.home() / CONFIG_DIR_NAME / CONFIG_FILE_NAME


class TomlConfigStore:
    """:class:`ConfigAccessor` backed by the TOML config file.

    The file is parsed lazily on first access and cached. A missing file is an
    empty configuration; a malformed one raises ``ShellError`` so the command
    that needed it reports a readable message.
    """

    def __init__(self, path: Optional[Path] = None, env: Optional[Mapping[str, str]] = None) -> None:
        self._env = env
        self._path = path if path is not None else default_config_path(env)
        self._data: Optional[Dict[str, Any]] = None

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> Dict[str, Any]:
        if self._data is not None:
            return self._data
        if not self._path.is_file():
            self._data = {}
            return self._data
        try:
            with self._path.open("rb") as fh:
                self._data = tomllib.load(fh)
        except tomllib.TOMLDecodeError as exc:
            raise ShellError(
                ErrorCode.VALIDATION,
                f"Config file {self._path} is not valid TOML: {exc}",
                raw=exc,
            ) from exc
        return self._data

    def _account_block(self) -> Dict[str, Any]:
        alias = self.current_account_alias()
        if not alias:
            return {}
        block = self._load().get("accounts", {}).get(alias, {})
        return block if isinstance(block, dict) else {}

    def current_account_alias(self) -> Optional[str]:
        current = self._load().get("current", {})
        alias = current.get("account") if isinstance(current, dict) else None
        return str(alias) if alias else None

    def current_account(self) -> Optional[AccountInfo]:
        alias = self.current_account_alias()
        if not alias:
            return None
        block = self._account_block()
        return AccountInfo(
            alias=alias,
            account_id=block.get("accountId"),
            account_name=block.get("accountName"),
            user_email=block.get("userEmail"),
        )

    def current_app_id(self) -> Optional[str]:
        app_id = self._account_block().get("currentAppId")
        return str(app_id) if app_id else None

    def _app_block(self, app_id: str) -> Dict[str, Any]:
        apps = self._account_block().get("apps", {})
        block = apps.get(app_id, {}) if isinstance(apps, dict) else {}
        return block if isinstance(block, dict) else {}

    def api_key(self, app_id: Optional[str] = None) -> Optional[str]:
        override = env_names.env_value(env_names.API_KEY, self._env)
        if override:
            return override
        target = app_id or self.current_app_id()
        if not target:
            return None
        key = self._app_block(target).get("apiKey")
        return str(key) if key else None

    def access_token(self) -> Optional[str]:
        override = env_names.env_value(env_names.ACCESS_TOKEN, self._env)
        if override:
            return override
        token = self._account_block().get("accessToken")
        return str(token) if token else None

    def app_name(self, app_id: str) -> Optional[str]:
        name = self._app_block(app_id).get("appName")
        return str(name) if name else None


__all__ = ["ConfigAccessor", "AccountInfo", "TomlConfigStore", "default_config_path"]
