"""Client construction for commands.

``REALTIME_USE_MOCKS=1`` routes every request to the in-memory mock clients;
otherwise the realtime client is the ``ably`` adapter and the control client
talks HTTP. The mock clients are cached on the factory so one interactive
session sees its own published messages in ``channels history``.
"""
from __future__ import annotations

from typing import Mapping, Optional

from ..config import env as env_names
from ..config.store import ConfigAccessor
from .interfaces import ControlClient, RealtimeClient
from .mock import MockControlClient, MockRealtimeClient


def use_mocks(env: Optional[Mapping[str, str]] = None) -> bool:
    return env_names.env_flag(env_names.USE_MOCKS, env)


def create_realtime_client(
    config: ConfigAccessor,
    env: Optional[Mapping[str, str]] = None,
    *,
    api_key: Optional[str] = None,
    client_id: Optional[str] = None,
) -> RealtimeClient:
    if use_mocks(env):
        return MockRealtimeClient(client_id=client_id)
    from .ably_adapter import AblyRealtimeAdapter

    return AblyRealtimeAdapter(api_key or config.api_key() or "", client_id=client_id)


def create_control_client(
    config: ConfigAccessor,
    env: Optional[Mapping[str, str]] = None,
    *,
    access_token: Optional[str] = None,
    host: Optional[str] = None,
) -> ControlClient:
    if use_mocks(env):
        return MockControlClient()
    from .control_api import ControlApiClient

    return ControlApiClient(
        access_token or config.access_token() or "",
        host or env_names.env_value(env_names.CONTROL_HOST, env),
    )


class ClientFactory:
    """Per-session client provider handed to commands."""

    def __init__(self, config: ConfigAccessor, env: Optional[Mapping[str, str]] = None) -> None:
        self.config = config
        self.env = env
        self._mock_realtime: Optional[MockRealtimeClient] = None
        self._mock_control: Optional[MockControlClient] = None

    @property
    def mocked(self) -> bool:
        return use_mocks(self.env)

    def realtime(self, *, api_key: Optional[str] = None, client_id: Optional[str] = None) -> RealtimeClient:
        if self.mocked:
            if self._mock_realtime is None:
                self._mock_realtime = MockRealtimeClient(client_id=client_id)
            return self._mock_realtime
        return create_realtime_client(self.config, self.env, api_key=api_key, client_id=client_id)

    def control(self, *, access_token: Optional[str] = None, host: Optional[str] = None) -> ControlClient:
        if self.mocked:
            if self._mock_control is None:
                self._mock_control = MockControlClient()
            return self._mock_control
        return create_control_client(self.config, self.env, access_token=access_token, host=host)

    async def aclose(self) -> None:
        """Close cached mock clients at session teardown."""
        if self._mock_realtime is not None:
            await self._mock_realtime.close()
            self._mock_realtime = None
        if self._mock_control is not None:
            await self._mock_control.aclose()
            self._mock_control = None


__all__ = ["ClientFactory", "create_realtime_client", "create_control_client", "use_mocks"]
