"""Cancellation error type."""

from __future__ import annotations


class CancelledError(RuntimeError):
    """Raised when a command observes a cooperative cancellation request.

    Distinct from ``asyncio.CancelledError``: commands that poll their token
    (rather than being interrupted at an ``await``) raise this one, and the
    dispatcher maps both to the same cancelled outcome.
    """


__all__ = ["CancelledError"]
