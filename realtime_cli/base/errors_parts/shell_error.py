"""
Structured error types raised by commands, the catalog and the shell.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .error_code import ErrorCode


@dataclass
class ShellError(Exception):
    """A command or SDK failure with a normalized error code.

    Attributes:
        code: Normalized :class:`ErrorCode` classification for the failure.
        message: Human-readable message shown to the user.
        command: Colon-joined command id where the error originated.
        retryable: Hint only; the shell never retries on its own.
        raw: Optional original exception for diagnostics.
    """

    code: ErrorCode
    message: str
    command: Optional[str] = None
    retryable: bool = False
    raw: Optional[Exception] = None

    def __str__(self) -> str:
        return self.message


class UsageError(ValueError):
    """Bad flags, unknown options or missing required arguments."""


class CatalogError(ValueError):
    """The command manifest could not be read or failed validation."""


class CommandExit(Exception):
    """A command asked to stop with an exit code instead of killing the process."""

    def __init__(self, code: int = 0) -> None:
        super().__init__(f"Command exited with code {code}")
        self.exit_code = code


__all__ = ["ShellError", "UsageError", "CatalogError", "CommandExit"]
