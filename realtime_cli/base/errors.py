"""Error taxonomy public surface.

Re-exports the implementations under ``realtime_cli.base.errors_parts``.
"""

from .errors_parts.classification import classify_exception
from .errors_parts.error_code import ErrorCode
from .errors_parts.shell_error import CatalogError, CommandExit, ShellError, UsageError

__all__ = ["ErrorCode", "ShellError", "UsageError", "CatalogError", "CommandExit", "classify_exception"]
