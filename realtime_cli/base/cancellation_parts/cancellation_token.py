"""Cancellation token shared by the dispatcher and a running command.

The dispatcher owns the token and cancels it on Ctrl-C. A command observes it
the way that suits its shape: a publishing loop polls ``raise_if_cancelled``
between messages, and a subscription awaits ``wait()``. Everything runs on the
shell's single event loop, so no locking is involved.
"""

from __future__ import annotations

import asyncio
from typing import Optional

from .cancelled_error import CancelledError


class CancellationToken:
    """One-shot cancellation flag with a reason."""

    def __init__(self) -> None:
        self._cancelled = False
        self._reason: Optional[str] = None
        self._event: Optional[asyncio.Event] = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def reason(self) -> Optional[str]:
        return self._reason

    def cancel(self, reason: Optional[str] = None) -> bool:
        """Flip the token; ``False`` when it was already cancelled."""
        if self._cancelled:
            return False
        self._cancelled, self._reason = True, reason
        if self._event is not None:
            self._event.set()
        return True

    def raise_if_cancelled(self) -> None:
        if self._cancelled:
            raise CancelledError(self._reason or "command cancelled")

    async def wait(self) -> None:
        """Return once the token is cancelled."""
        if self._cancelled:
            return
        if self._event is None:
            self._event = asyncio.Event()
        await self._event.wait()

    def __repr__(self) -> str:  # pragma: no cover - introspection aid
        return f"CancellationToken(cancelled={self._cancelled}, reason={self._reason!r})"


__all__ = ["CancellationToken"]
