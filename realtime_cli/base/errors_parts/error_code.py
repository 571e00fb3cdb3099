"""Failure categories shared by command errors and log events.

Values are lowercase snake_case; they appear in ``--json`` error output and
in ``shell.dispatch.end`` log records.
"""
from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Why a command failed."""

    USAGE = "usage"
    VALIDATION = "validation"
    AUTH = "auth"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    RATE_LIMIT = "rate_limit"
    TIMEOUT = "timeout"
    UNAVAILABLE = "unavailable"
    SERVER_ERROR = "server_error"
    UNSUPPORTED = "unsupported"
    CANCELLED = "cancelled"
    UNKNOWN = "unknown"


__all__ = ["ErrorCode"]
