"""Typed catalog records: commands, flags and positional arguments.

Purpose
-------
Describe every command the CLI knows about in a form the shell can enumerate
without importing command implementations. Records are produced once by the
manifest loader and never mutated afterwards.

External dependencies
---------------------
- Pydantic v2 ``BaseModel`` for manifest validation. Runtime records are
  frozen so they can be shared freely between the catalog, the completion
  engine and the dispatcher.
"""
from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class FlagSpec(BaseModel):
    """One ``--flag`` accepted by a command."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    alias: Optional[str] = Field(default=None, alias="char")
    description: str = ""
    kind: Literal["boolean", "option"] = Field(default="boolean", alias="type")
    hidden: bool = False
    required: bool = False
    default: Any = None
    options: Tuple[str, ...] = ()
    multiple: bool = False

    @field_validator("alias")
    @classmethod
    def _single_char(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and len(value) != 1:
            raise ValueError("flag alias must be a single character")
        return value

    @property
    def long(self) -> str:
        return f"--{self.name}"

    @property
    def short(self) -> Optional[str]:
        return f"-{self.alias}" if self.alias else None


class ArgSpec(BaseModel):
    """A positional argument."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str = ""
    required: bool = False
    multiple: bool = False


class CommandNode(BaseModel):
    """A single invokable command.

    ``path`` holds the ordered segments (``("channels", "publish")``);
    ``flags`` keeps manifest order, which is the order completion lists them.
    """

    model_config = ConfigDict(frozen=True)

    path: Tuple[str, ...]
    description: str = ""
    hidden: bool = False
    usage: Optional[str] = None
    examples: Tuple[str, ...] = ()
    flags: Dict[str, FlagSpec] = Field(default_factory=dict)
    args: Tuple[ArgSpec, ...] = ()

    @property
    def command_id(self) -> str:
        return ":".join(self.path)

    def flag_for_token(self, token: str) -> Optional[FlagSpec]:
        """Resolve ``--name`` or ``-c`` (an ``=value`` suffix is ignored)."""
        bare = token.split("=", 1)[0]
        for spec in self.flags.values():
            if bare == spec.long or (spec.short is not None and bare == spec.short):
                return spec
        return None


class CommandHelp(BaseModel):
    """Help payload rendered by ``help <path>`` and ``<path> --help``."""

    model_config = ConfigDict(frozen=True)

    path: Tuple[str, ...]
    description: str = ""
    usage: str = ""
    examples: Tuple[str, ...] = ()
    args: Tuple[ArgSpec, ...] = ()
    flags: Tuple[FlagSpec, ...] = ()
    is_topic: bool = False
    subcommands: Tuple[Tuple[str, str], ...] = ()


# ---- Manifest document shapes (input side) ----


class ManifestFlag(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    char: Optional[str] = None
    description: str = ""
    type: Literal["boolean", "option"] = "boolean"
    hidden: bool = False
    required: bool = False
    default: Any = None
    options: List[str] = Field(default_factory=list)
    multiple: bool = False


class ManifestArg(BaseModel):
    model_config = ConfigDict(extra="ignore")

    description: str = ""
    required: bool = False
    multiple: bool = False


class ManifestCommand(BaseModel):
    model_config = ConfigDict(extra="ignore")

    description: str = ""
    hidden: bool = False
    usage: Optional[str] = None
    examples: List[str] = Field(default_factory=list)
    flags: Dict[str, ManifestFlag] = Field(default_factory=dict)
    args: Dict[str, ManifestArg] = Field(default_factory=dict)


class CatalogDocument(BaseModel):
    """Root manifest document: command ids to entries plus topic blurbs.

    ``globalFlags`` are appended to every command after its own flags.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    version: Optional[str] = None
    commands: Dict[str, ManifestCommand]
    topics: Dict[str, str] = Field(default_factory=dict)
    global_flags: Dict[str, ManifestFlag] = Field(default_factory=dict, alias="globalFlags")

    @field_validator("commands")
    @classmethod
    def _valid_ids(cls, value: Dict[str, ManifestCommand]) -> Dict[str, ManifestCommand]:
        for command_id in value:
            if not command_id or any(not seg for seg in command_id.split(":")):
                raise ValueError(f"invalid command id {command_id!r}")
            if " " in command_id:
                raise ValueError(f"command id {command_id!r} must not contain spaces")
        return value


__all__ = [
    "FlagSpec",
    "ArgSpec",
    "CommandNode",
    "CommandHelp",
    "CatalogDocument",
    "ManifestCommand",
    "ManifestFlag",
    "ManifestArg",
]
