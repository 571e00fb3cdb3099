"""Manifest loading for the command catalog.

The bundled manifest ships as package data (``realtime_cli/catalog/data``)
and is read through ``importlib.resources``. ``REALTIME_MANIFEST`` points the
loader at another file; ``.yaml``/``.yml`` files are parsed with PyYAML,
anything else as JSON. Every failure surfaces as ``CatalogError``.
"""
from __future__ import annotations

import json
import logging
from importlib import resources
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

import yaml
from pydantic import ValidationError

from ..base.errors import CatalogError
from ..base.logging import get_logger, log_event
from ..config import env as env_names
from .catalog import CommandCatalog
from .models import ArgSpec, CatalogDocument, CommandNode, FlagSpec, ManifestFlag

_BUNDLED_RESOURCE = "manifest.json"
_CACHE: Dict[str, CommandCatalog] = {}

logger = get_logger("realtime.catalog")


def _parse_text(text: str, source: str) -> Any:
    try:
        if source.endswith((".yaml", ".yml")):
            return yaml.safe_load(text)
        return json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise CatalogError(f"Manifest {source} could not be parsed: {exc}") from exc


def _read_source(path: Optional[Path]) -> Tuple[str, str]:
    if path is None:
        resource = resources.files("realtime_cli.catalog.data").joinpath(_BUNDLED_RESOURCE)
        return resource.read_text(encoding="utf-8"), f"<bundled {_BUNDLED_RESOURCE}>"
    try:
        return path.read_text(encoding="utf-8"), str(path)
    except OSError as exc:
        raise CatalogError(f"Manifest {path} could not be read: {exc}") from exc


def _flag(name: str, raw: ManifestFlag) -> FlagSpec:
    return FlagSpec(
        name=name,
        char=raw.char,
        description=raw.description,
        type=raw.type,
        hidden=raw.hidden,
        required=raw.required,
        default=raw.default,
        options=tuple(raw.options),
        multiple=raw.multiple,
    )


def build_nodes(document: CatalogDocument) -> List[CommandNode]:
    """Turn a validated manifest into frozen ``CommandNode`` records."""
    global_flags = {name: _flag(name, raw) for name, raw in document.global_flags.items()}
    nodes: List[CommandNode] = []
    for command_id, entry in document.commands.items():
        flags: Dict[str, FlagSpec] = {name: _flag(name, raw) for name, raw in entry.flags.items()}
        for name, spec in global_flags.items():
            flags.setdefault(name, spec)
        nodes.append(
            CommandNode(
                path=tuple(command_id.split(":")),
                description=entry.description,
                hidden=entry.hidden,
                usage=entry.usage,
                examples=tuple(entry.examples),
                flags=flags,
                args=tuple(
                    ArgSpec(name=name, description=arg.description, required=arg.required, multiple=arg.multiple)
                    for name, arg in entry.args.items()
                ),
            )
        )
    return nodes


def catalog_from_mapping(data: Any, source: str = "<memory>") -> CommandCatalog:
    """Validate an already-parsed manifest mapping and build a catalog."""
    if not isinstance(data, Mapping):
        raise CatalogError(f"Manifest {source} must be a mapping at the top level")
    try:
        document = CatalogDocument.model_validate(data)
        nodes = build_nodes(document)
    except ValidationError as exc:
        raise CatalogError(f"Manifest {source} failed validation: {exc}") from exc
    return CommandCatalog(nodes, topics=document.topics)


def manifest_path_from_env(env: Optional[Mapping[str, str]] = None) -> Optional[Path]:
    override = env_names.env_value(env_names.MANIFEST_PATH, env)
    return Path(override).expanduser() if override else None


def load_catalog(
    path: Optional[Path] = None,
    *,
    env: Optional[Mapping[str, str]] = None,
    use_cache: bool = True,
) -> CommandCatalog:
    """Load (once per process) and return the command catalog.

    Parameters
    ----------
    path: Optional[Path]
        Explicit manifest file. When ``None``, ``REALTIME_MANIFEST`` is
        consulted and then the bundled manifest is used.
    env: Optional[Mapping[str, str]]
        Environment mapping for the override lookup (defaults to ``os.environ``).
    use_cache: bool
        Reuse a catalog already built from the same source.

    Raises
    ------
    CatalogError
        The file is missing, unparsable, or fails validation.
    """
    target = path if path is not None else manifest_path_from_env(env)
    key = str(target) if target is not None else _BUNDLED_RESOURCE
    if use_cache and key in _CACHE:
        return _CACHE[key]
    text, source = _read_source(target)
    catalog = catalog_from_mapping(_parse_text(text, source), source)
    log_event(logger, "catalog.loaded", level=logging.DEBUG, source=source, commands=len(catalog.command_ids()))
    if use_cache:
        _CACHE[key] = catalog
    return catalog


def clear_cache() -> None:
    _CACHE.clear()


__all__ = ["load_catalog", "catalog_from_mapping", "build_nodes", "manifest_path_from_env", "clear_cache"]
