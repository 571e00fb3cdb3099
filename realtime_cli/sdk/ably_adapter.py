"""Adapter exposing the ``ably`` SDK through the ``RealtimeClient`` protocol.

The ``ably`` package is imported when the adapter is constructed, so the
shell, completion and the mock path never pay for it. Realtime operations
(connect, publish, subscribe) go through ``AblyRealtime``; history and
channel enumeration use ``AblyRest``.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from ..base.errors import ErrorCode, ShellError
from ..base.logging import get_logger, log_event
from .interfaces import ChannelMessage, Listener


def _to_message(raw: Any, channel: str) -> ChannelMessage:
    return ChannelMessage(
        name=getattr(raw, "name", None),
        data=getattr(raw, "data", None),
        id=getattr(raw, "id", None),
        client_id=getattr(raw, "client_id", None),
        timestamp=getattr(raw, "timestamp", None),
        channel=channel,
    )


class AblyChannel:
    def __init__(self, name: str, realtime: Any, rest: Any) -> None:
        self.name = name
        self._realtime_channel = realtime.channels.get(name)
        self._rest = rest
        self._wrapped: Dict[int, Any] = {}

    async def publish(self, name: Optional[str], data: Any) -> None:
        await self._realtime_channel.publish(name, data)

    async def subscribe(self, listener: Listener) -> None:
        def _wrap(raw: Any) -> Any:
            return listener(_to_message(raw, self.name))

        self._wrapped[id(listener)] = _wrap
        await self._realtime_channel.subscribe(_wrap)

    async def unsubscribe(self, listener: Optional[Listener] = None) -> None:
        if listener is None:
            self._realtime_channel.unsubscribe()
            self._wrapped.clear()
            return
        wrapped = self._wrapped.pop(id(listener), None)
        if wrapped is not None:
            self._realtime_channel.unsubscribe(wrapped)

    async def history(self, limit: int = 50, direction: str = "backwards") -> List[ChannelMessage]:
        result = await self._rest.channels.get(self.name).history(limit=limit, direction=direction)
        return [_to_message(item, self.name) for item in result.items]


class _AblyChannels:
    def __init__(self, adapter: "AblyRealtimeAdapter") -> None:
        self._adapter = adapter
        self._cache: Dict[str, AblyChannel] = {}

    def get(self, name: str) -> AblyChannel:
        if name not in self._cache:
            self._cache[name] = AblyChannel(name, self._adapter.realtime, self._adapter.rest)
        return self._cache[name]


class AblyRealtimeAdapter:
    """``RealtimeClient`` backed by the ``ably`` package."""

    def __init__(self, api_key: str, *, client_id: Optional[str] = None, **options: Any) -> None:
        if not api_key:
            raise ShellError(
                ErrorCode.AUTH,
                "No API key configured. Select an app with 'apps switch' or set REALTIME_API_KEY",
            )
        from ably import AblyRealtime, AblyRest

        self._logger = get_logger("realtime.sdk.ably")
        kwargs: Dict[str, Any] = {"key": api_key, **options}
        if client_id:
            kwargs["client_id"] = client_id
        self.realtime = AblyRealtime(auto_connect=False, **kwargs)
        self.rest = AblyRest(**kwargs)
        self.channels = _AblyChannels(self)

    async def connect(self) -> None:
        self.realtime.connect()
        await self.realtime.connection.once_async("connected")
        log_event(self._logger, "ably.connected", level=logging.DEBUG)

    async def list_channels(self, prefix: Optional[str] = None, limit: int = 100) -> List[str]:
        params: Dict[str, Any] = {"limit": limit}
        if prefix:
            params["prefix"] = prefix
        response = await self.rest.request("GET", "/channels", version=3, params=params)
        names: List[str] = []
        for item in response.items:
            name = item.get("channelId") if isinstance(item, dict) else item
            if name:
                names.append(str(name))
        return names

    async def close(self) -> None:
        await self.realtime.close()
        await self.rest.close()


__all__ = ["AblyRealtimeAdapter", "AblyChannel"]
