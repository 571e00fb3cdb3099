"""Shared helpers for tests that drive the event loop."""

from __future__ import annotations

import asyncio
import io
from typing import Callable, Optional

from prompt_toolkit.input import PipeInput
from prompt_toolkit.output import DummyOutput

from realtime_cli.shell.terminal import Terminal


async def wait_until(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
    """Poll ``predicate`` on the running loop until it holds or ``timeout`` passes."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not reached before timeout")
        await asyncio.sleep(0.01)


class StdinPipe:
    """A prompt_toolkit pipe standing in for stdin; the test owns the write end."""

    def __init__(self, pipe: PipeInput) -> None:
        self.input = pipe

    def send(self, data: bytes) -> None:
        self.input.send_bytes(data)

    def close_writer(self) -> None:
        self.input.close()

    def terminal(self, out: Optional[io.StringIO] = None) -> Terminal:
        return Terminal(self.input, DummyOutput(), out if out is not None else io.StringIO())
