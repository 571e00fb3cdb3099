"""CLI parser construction for the ``realtime`` program.

Only the outer switches live here; everything after them is handed to the
dispatcher untouched, so command flags are parsed against the catalog in one
place for both the shell and one-shot runs.
"""

from __future__ import annotations

import argparse

from ..config.defaults import PROGRAM_NAME
from .cli_utils import parse_verbosity

SHELL_COMMAND = "interactive"


def _verbosity(value: str) -> str:
    level = parse_verbosity(value)
    if level is None:
        raise argparse.ArgumentTypeError(f"unknown verbosity {value!r}")
    return level


def build_parser() -> argparse.ArgumentParser:
    """Construct the top-level parser.

    Returns
    -------
    argparse.ArgumentParser
        Parser with ``--version``, ``--log-level`` and a remainder
        ``command`` list. Performs no I/O.
    """
    p = argparse.ArgumentParser(
        prog=PROGRAM_NAME,
        description="Command-line client for realtime messaging",
        add_help=False,
    )
    p.add_argument("--version", action="store_true", help="Print the version and exit")
    p.add_argument("--log-level", type=_verbosity, default=None, help="Logging verbosity for this run")
    p.add_argument("command", nargs=argparse.REMAINDER, help=f"Command to run; '{SHELL_COMMAND}' or nothing starts the shell")
    return p


__all__ = ["SHELL_COMMAND", "build_parser"]
