"""Interactive shell and command-line entry point for ``realtime``.

Running with no arguments (or ``interactive``) starts the shell; anything
else is dispatched once through the same catalog, restriction policy and
dispatcher the shell uses.

Public API re-exports:
- ``main``: CLI entrypoint callable
- ``InteractiveSession``: the session loop
- ``Dispatcher``: resolution, gating and supervised command runs
"""

from __future__ import annotations

import sys
from typing import Optional

from .. import __version__
from ..base.logging import configure_logger
from ..config.defaults import PROGRAM_NAME
from .cli_actions import handle_command, handle_shell
from .cli_parser import SHELL_COMMAND, build_parser
from .dispatch import Dispatcher, DispatchOutcome, DispatchStatus
from .session import InteractiveSession

_HELP_SWITCHES = ("--help", "-h")


def main(argv: Optional[list[str]] = None) -> int:
    """CLI entrypoint.

    Parameters
    ----------
    argv: Optional[list[str]]
        Argument vector; when ``None`` uses ``sys.argv[1:]``.

    Returns
    -------
    int
        Process exit code: 0 ok, 1 error, 2 usage, 130 interrupted, or the
        shell's own exit code.
    """
    argv_list = list(sys.argv[1:] if argv is None else argv)
    # top-level --help is the catalog's root help, not argparse's
    if argv_list and argv_list[0] in _HELP_SWITCHES:
        argv_list = ["help", *argv_list[1:]]
    args = build_parser().parse_args(argv_list)
    if args.version:
        sys.stdout.write(f"{PROGRAM_NAME}/{__version__}\n")
        return 0
    if args.log_level:
        configure_logger(level=args.log_level)
    tokens = list(args.command)
    if not tokens or tokens == [SHELL_COMMAND]:
        return handle_shell()
    return handle_command(tokens)


__all__ = ["main", "InteractiveSession", "Dispatcher", "DispatchOutcome", "DispatchStatus"]
