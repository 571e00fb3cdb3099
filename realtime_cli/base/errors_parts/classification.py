"""Map arbitrary exceptions raised under a command onto :class:`ErrorCode`.

Control API failures surface as ``httpx.HTTPStatusError`` (status on the
response) and realtime SDK failures carry ``status_code`` directly, so the
status lookup covers both before falling back to message text.
"""
from __future__ import annotations

import asyncio
from typing import Dict, Optional

import httpx

from ..cancellation_parts.cancelled_error import CancelledError
from .error_code import ErrorCode
from .shell_error import ShellError, UsageError

_STATUS_CODES: Dict[int, ErrorCode] = {
    400: ErrorCode.VALIDATION,
    401: ErrorCode.AUTH,
    403: ErrorCode.AUTH,
    404: ErrorCode.NOT_FOUND,
    408: ErrorCode.TIMEOUT,
    409: ErrorCode.CONFLICT,
    422: ErrorCode.VALIDATION,
    429: ErrorCode.RATE_LIMIT,
    500: ErrorCode.SERVER_ERROR,
    502: ErrorCode.UNAVAILABLE,
    503: ErrorCode.UNAVAILABLE,
    504: ErrorCode.TIMEOUT,
}

# first match wins
_TEXT_HINTS = (
    (ErrorCode.RATE_LIMIT, ("rate limit", "too many requests")),
    (ErrorCode.TIMEOUT, ("timeout", "timed out")),
    (ErrorCode.AUTH, ("unauthorized", "forbidden", "api key", "token expired")),
    (ErrorCode.NOT_FOUND, ("not found", "does not exist")),
    (ErrorCode.CONFLICT, ("conflict", "already exists")),
    (ErrorCode.UNAVAILABLE, ("unavailable", "connection refused")),
    (ErrorCode.VALIDATION, ("invalid", "malformed")),
)


def _status_of(exc: BaseException) -> Optional[int]:
    holders = (exc, getattr(exc, "response", None))
    for holder in holders:
        if holder is None:
            continue
        value = getattr(holder, "status_code", None) or getattr(holder, "status", None)
        if isinstance(value, int) and 100 <= value < 600:
            return value
    return None


def _code_from_text(text: str) -> Optional[ErrorCode]:
    lowered = text.lower()
    return next(
        (code for code, hints in _TEXT_HINTS if any(hint in lowered for hint in hints)),
        None,
    )


def classify_exception(exc: BaseException) -> ErrorCode:
    """Return the :class:`ErrorCode` that best describes ``exc``.

    Shell errors keep their own code. Cancellation, timeouts and connection
    failures are recognized by type, then HTTP status is consulted, then the
    message text. Anything left is ``UNKNOWN``.
    """
    if isinstance(exc, ShellError):
        return exc.code
    if isinstance(exc, UsageError):
        return ErrorCode.USAGE
    if isinstance(exc, (CancelledError, asyncio.CancelledError)):
        return ErrorCode.CANCELLED
    if isinstance(exc, (TimeoutError, asyncio.TimeoutError, httpx.TimeoutException)):
        return ErrorCode.TIMEOUT
    if isinstance(exc, (httpx.ConnectError, ConnectionError)):
        return ErrorCode.UNAVAILABLE
    status = _status_of(exc)
    if status in _STATUS_CODES:
        return _STATUS_CODES[status]
    return _code_from_text(str(exc)) or ErrorCode.UNKNOWN


__all__ = ["classify_exception"]
