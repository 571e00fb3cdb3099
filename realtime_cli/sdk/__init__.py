"""Realtime SDK and control API access behind narrow protocols."""
from __future__ import annotations

from .factory import ClientFactory, create_control_client, create_realtime_client, use_mocks
from .interfaces import ChannelMessage, ControlClient, RealtimeChannel, RealtimeClient

__all__ = [
    "ChannelMessage",
    "ClientFactory",
    "ControlClient",
    "RealtimeChannel",
    "RealtimeClient",
    "create_control_client",
    "create_realtime_client",
    "use_mocks",
]
