"""Leaf command registry.

Commands register with :func:`command` under their colon-joined id and are
run as coroutines taking a :class:`CommandContext`. Built-in modules are
imported lazily on first lookup so the catalog and completion never load
SDK code.
"""
from __future__ import annotations

import importlib
from typing import Awaitable, Callable, Dict, Optional

from .base import CommandContext, Confirmer

CommandFunc = Callable[[CommandContext], Awaitable[None]]

_REGISTRY: Dict[str, CommandFunc] = {}
_BUILTIN_MODULES = ("accounts", "apps", "auth", "channels", "status")
_loaded = False


def command(command_id: str) -> Callable[[CommandFunc], CommandFunc]:
    """Register the decorated coroutine function as ``command_id``."""

    def _register(func: CommandFunc) -> CommandFunc:
        if command_id in _REGISTRY and _REGISTRY[command_id] is not func:
            raise ValueError(f"command {command_id!r} registered twice")
        _REGISTRY[command_id] = func
        return func

    return _register


def load_builtin_commands() -> None:
    global _loaded
    if _loaded:
        return
    for name in _BUILTIN_MODULES:
        importlib.import_module(f"{__name__}.{name}")
    _loaded = True


def get_command(command_id: str) -> Optional[CommandFunc]:
    load_builtin_commands()
    return _REGISTRY.get(command_id)


__all__ = [
    "CommandContext",
    "CommandFunc",
    "Confirmer",
    "command",
    "get_command",
    "load_builtin_commands",
]
