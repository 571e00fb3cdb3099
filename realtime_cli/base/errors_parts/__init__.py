"""Errors parts package public surface.

Prefer importing from ``realtime_cli.base.errors`` for the stable surface.
"""

from .classification import classify_exception
from .error_code import ErrorCode
from .shell_error import CatalogError, CommandExit, ShellError, UsageError

__all__ = ["ErrorCode", "ShellError", "UsageError", "CatalogError", "CommandExit", "classify_exception"]
