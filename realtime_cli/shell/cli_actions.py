"""Action handlers for the ``realtime`` entry point.

``handle_shell`` starts the interactive session; ``handle_command`` runs one
command through the same dispatcher the shell uses and maps its outcome to a
process exit code.
"""

from __future__ import annotations

import asyncio
import sys
from typing import List, Mapping, Optional, TextIO

from ..catalog import load_catalog
from ..config.defaults import EXIT_CODE_INTERRUPTED
from ..policy import Mode
from .dispatch import Dispatcher, DispatchOutcome
from .prompts import Prompter
from .session import run_interactive
from .settings import apply_logging, load_settings
from .terminal import Terminal


def handle_shell(env: Optional[Mapping[str, str]] = None) -> int:
    """Apply persisted logging settings and run the interactive shell."""
    settings = load_settings()
    apply_logging(settings)
    return run_interactive(settings=settings, env=env)


async def _run_command(
    tokens: List[str],
    env: Optional[Mapping[str, str]],
    out: Optional[TextIO],
) -> DispatchOutcome:
    catalog = load_catalog(env=env)
    prompter = Prompter(Terminal()) if sys.stdin.isatty() else None
    dispatcher = Dispatcher(catalog, prompter=prompter, out=out, interactive=False, env=env)
    try:
        return await dispatcher.dispatch(tokens, Mode.from_env(env))
    finally:
        await dispatcher.clients.aclose()


def handle_command(
    tokens: List[str],
    env: Optional[Mapping[str, str]] = None,
    out: Optional[TextIO] = None,
    err: Optional[TextIO] = None,
) -> int:
    """Run ``tokens`` as one command and return the exit code."""
    err_stream = err if err is not None else sys.stderr
    try:
        outcome = asyncio.run(_run_command(tokens, env, out))
    except KeyboardInterrupt:
        err_stream.write("\n")
        return EXIT_CODE_INTERRUPTED
    if outcome.message:
        stream = err_stream if outcome.is_error else (out if out is not None else sys.stdout)
        stream.write(outcome.message + "\n")
    return outcome.exit_code


__all__ = ["handle_command", "handle_shell"]
