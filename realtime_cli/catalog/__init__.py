"""Command catalog: what commands exist, their flags and their help text."""
from __future__ import annotations

from .catalog import VIRTUAL_COMMANDS, CommandCatalog, as_path
from .loader import catalog_from_mapping, load_catalog
from .models import ArgSpec, CommandHelp, CommandNode, FlagSpec

__all__ = [
    "ArgSpec",
    "CommandCatalog",
    "CommandHelp",
    "CommandNode",
    "FlagSpec",
    "VIRTUAL_COMMANDS",
    "as_path",
    "catalog_from_mapping",
    "load_catalog",
]
