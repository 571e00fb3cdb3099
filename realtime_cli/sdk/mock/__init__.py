"""Mock clients exposing deterministic fixtures for tests and offline use."""

from .client import MockChannel, MockControlClient, MockRealtimeClient, load_fixture_catalog

__all__ = ["MockChannel", "MockControlClient", "MockRealtimeClient", "load_fixture_catalog"]
