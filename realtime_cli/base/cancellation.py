"""Cooperative cancellation primitives (public API facade).

Purpose
-------
Expose the cancellation constructs via ``realtime_cli.base.cancellation``
while the implementations live under ``cancellation_parts``.

Notes
-----
- ``CancellationToken`` lets the shell signal a running command that the user
  pressed Ctrl-C.
- ``CancelledError`` is raised by commands that observe a cancellation request.
"""

from .cancellation_parts.cancellation_token import CancellationToken
from .cancellation_parts.cancelled_error import CancelledError

__all__ = ["CancellationToken", "CancelledError"]
