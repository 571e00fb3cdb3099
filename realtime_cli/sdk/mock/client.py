"""Deterministic in-memory clients backed by JSON fixtures.

Purpose
-------
Let the shell and its commands run end to end without network access
(``REALTIME_USE_MOCKS=1``). Channels live in memory: publishing appends to the
channel history and fans the message out to every subscriber through a
per-subscription ``asyncio.Queue`` drained by a pump task, so listeners run
on the event loop exactly as with a real SDK.

External dependencies
---------------------
Standard library only. Seed data (account, apps, channel history) is loaded
via ``importlib.resources`` from ``realtime_cli.sdk.mock.fixtures``.
"""
from __future__ import annotations

import asyncio
import copy
import inspect
import itertools
import json
import logging
import time
from importlib import resources
from typing import Any, Dict, List, Optional

from ...base.errors import ErrorCode, ShellError
from ...base.logging import get_logger, log_event
from ..interfaces import ChannelMessage, Listener

_FIXTURE_RESOURCE = "mock_data.json"


def load_fixture_catalog(resource: str = _FIXTURE_RESOURCE) -> Dict[str, Any]:
    """Load the JSON fixture bundled with the mock clients."""
    package = "realtime_cli.sdk.mock.fixtures"
    data = resources.files(package).joinpath(resource).read_text(encoding="utf-8")
    return json.loads(data)


class _Subscription:
    def __init__(self, listener: Listener, logger: logging.Logger) -> None:
        self.listener = listener
        self.queue: asyncio.Queue[ChannelMessage] = asyncio.Queue()
        self._logger = logger
        self.task = asyncio.ensure_future(self._pump())

    async def _pump(self) -> None:
        while True:
            message = await self.queue.get()
            try:
                result = self.listener(message)
                if inspect.isawaitable(result):
                    await result
            except Exception as exc:
                log_event(self._logger, "mock.listener.failed", level=logging.WARNING, error=str(exc))

    def stop(self) -> None:
        self.task.cancel()


class MockChannel:
    def __init__(self, name: str, hub: "MockRealtimeClient") -> None:
        self.name = name
        self._hub = hub
        self._subs: List[_Subscription] = []

    async def publish(self, name: Optional[str], data: Any) -> None:
        self._hub.ensure_open()
        message = ChannelMessage(
            name=name,
            data=data,
            id=f"mock-{next(self._hub.ids)}",
            client_id=self._hub.client_id,
            timestamp=int(time.time() * 1000),
            channel=self.name,
        )
        self._hub.history_for(self.name).append(message)
        for sub in list(self._subs):
            sub.queue.put_nowait(message)
        log_event(self._hub.logger, "mock.publish", level=logging.DEBUG, channel=self.name, name=name)

    async def subscribe(self, listener: Listener) -> None:
        self._hub.ensure_open()
        self._subs.append(_Subscription(listener, self._hub.logger))

    async def unsubscribe(self, listener: Optional[Listener] = None) -> None:
        keep: List[_Subscription] = []
        for sub in self._subs:
            if listener is None or sub.listener is listener:
                sub.stop()
            else:
                keep.append(sub)
        self._subs = keep

    async def history(self, limit: int = 50, direction: str = "backwards") -> List[ChannelMessage]:
        items = list(self._hub.history_for(self.name))
        if direction == "backwards":
            items.reverse()
        return items[: max(0, limit)]

    @property
    def subscriber_count(self) -> int:
        return len(self._subs)


class _MockChannels:
    def __init__(self, hub: "MockRealtimeClient") -> None:
        self._hub = hub
        self._channels: Dict[str, MockChannel] = {}

    def get(self, name: str) -> MockChannel:
        if name not in self._channels:
            self._channels[name] = MockChannel(name, self._hub)
        return self._channels[name]

    def active(self) -> Dict[str, MockChannel]:
        return dict(self._channels)


class MockRealtimeClient:
    """In-memory stand-in for the realtime SDK client."""

    def __init__(self, *, client_id: Optional[str] = None, catalog: Optional[Dict[str, Any]] = None) -> None:
        self.client_id = client_id or "mock-client"
        self.logger = get_logger("realtime.sdk.mock")
        self.ids = itertools.count(1)
        self.connected = False
        self.closed = False
        self._history: Dict[str, List[ChannelMessage]] = {}
        fixture = catalog if catalog is not None else load_fixture_catalog()
        for channel, messages in fixture.get("channels", {}).items():
            self._history[channel] = [
                ChannelMessage(
                    name=m.get("name"),
                    data=m.get("data"),
                    id=m.get("id"),
                    client_id=m.get("clientId"),
                    timestamp=m.get("timestamp"),
                    channel=channel,
                )
                for m in messages
            ]
        self.channels = _MockChannels(self)

    def history_for(self, channel: str) -> List[ChannelMessage]:
        return self._history.setdefault(channel, [])

    def ensure_open(self) -> None:
        if self.closed:
            raise ShellError(ErrorCode.UNAVAILABLE, "Connection closed")

    async def connect(self) -> None:
        self.closed = False
        self.connected = True
        log_event(self.logger, "mock.connect", level=logging.DEBUG, client_id=self.client_id)

    async def list_channels(self, prefix: Optional[str] = None, limit: int = 100) -> List[str]:
        names = set(self._history) | {
            name for name, ch in self.channels.active().items() if ch.subscriber_count
        }
        matched = sorted(n for n in names if not prefix or n.startswith(prefix))
        return matched[: max(0, limit)]

    async def close(self) -> None:
        for channel in self.channels.active().values():
            await channel.unsubscribe()
        self.connected = False
        self.closed = True


class MockControlClient:
    """Control API stand-in with a fixed account and mutable app list."""

    def __init__(self, *, catalog: Optional[Dict[str, Any]] = None) -> None:
        fixture = catalog if catalog is not None else load_fixture_catalog()
        self._me = copy.deepcopy(fixture.get("me", {}))
        self._apps: List[Dict[str, Any]] = copy.deepcopy(fixture.get("apps", []))

    async def me(self) -> Dict[str, Any]:
        return copy.deepcopy(self._me)

    async def list_apps(self, account_id: str) -> List[Dict[str, Any]]:
        return [copy.deepcopy(app) for app in self._apps if app.get("accountId") in (None, account_id)]

    async def delete_app(self, app_id: str) -> None:
        before = len(self._apps)
        self._apps = [app for app in self._apps if app.get("id") != app_id]
        if len(self._apps) == before:
            raise ShellError(ErrorCode.NOT_FOUND, f"App {app_id} not found")

    async def aclose(self) -> None:
        return None


__all__ = ["MockRealtimeClient", "MockControlClient", "MockChannel", "load_fixture_catalog"]
