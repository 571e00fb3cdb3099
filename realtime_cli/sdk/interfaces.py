"""Protocols for the realtime SDK and the control API.

Commands depend on these narrow shapes only. The mock client, the ``ably``
adapter and the HTTP control client all satisfy them, so switching between
them is a factory decision.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional, Protocol, Union


@dataclass
class ChannelMessage:
    """A message as commands see it, independent of the SDK in use."""

    name: Optional[str]
    data: Any
    id: Optional[str] = None
    client_id: Optional[str] = None
    timestamp: Optional[int] = None
    channel: Optional[str] = None
    extras: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            k: v
            for k, v in {
                "id": self.id,
                "channel": self.channel,
                "name": self.name,
                "data": self.data,
                "clientId": self.client_id,
                "timestamp": self.timestamp,
            }.items()
            if v is not None
        }


Listener = Callable[[ChannelMessage], Union[None, Awaitable[None]]]


class RealtimeChannel(Protocol):
    name: str

    async def publish(self, name: Optional[str], data: Any) -> None: ...

    async def subscribe(self, listener: Listener) -> None: ...

    async def unsubscribe(self, listener: Optional[Listener] = None) -> None: ...

    async def history(self, limit: int = 50, direction: str = "backwards") -> List[ChannelMessage]: ...


class ChannelCollection(Protocol):
    def get(self, name: str) -> RealtimeChannel: ...


class RealtimeClient(Protocol):
    channels: ChannelCollection

    async def connect(self) -> None: ...

    async def list_channels(self, prefix: Optional[str] = None, limit: int = 100) -> List[str]: ...

    async def close(self) -> None: ...


class ControlClient(Protocol):
    async def me(self) -> Dict[str, Any]: ...

    async def list_apps(self, account_id: str) -> List[Dict[str, Any]]: ...

    async def delete_app(self, app_id: str) -> None: ...

    async def aclose(self) -> None: ...


__all__ = [
    "ChannelMessage",
    "Listener",
    "RealtimeChannel",
    "ChannelCollection",
    "RealtimeClient",
    "ControlClient",
]
