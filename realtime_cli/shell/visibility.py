"""Mode-filtered view over the command catalog.

Listings are memoized per :attr:`Mode.key`. Because the key is derived from
the mode value passed in, a mode change simply selects another cache bucket;
no explicit invalidation is required.
"""
from __future__ import annotations

from typing import Dict, List, Tuple

from ..catalog import VIRTUAL_COMMANDS, CommandCatalog, as_path
from ..catalog.catalog import PathLike
from ..policy import Mode, is_restricted


class CommandView:
    """Answers "what can this mode see" for the completion engine and help."""

    def __init__(self, catalog: CommandCatalog) -> None:
        self.catalog = catalog
        self._visible: Dict[str, Dict[Tuple[str, ...], bool]] = {}
        self._listings: Dict[str, Dict[Tuple[str, ...], List[str]]] = {}

    def _bucket(self, store: Dict[str, Dict], mode: Mode) -> Dict:
        return store.setdefault(mode.key, {})

    def is_visible(self, path: PathLike, mode: Mode) -> bool:
        """A path is visible when its own id is unrestricted and it leads somewhere.

        "Leads somewhere" means it is itself a non-hidden command or has at
        least one unrestricted, non-hidden descendant.
        """
        key = as_path(path)
        if not key:
            return True
        if len(key) == 1 and key[0] in VIRTUAL_COMMANDS:
            return True
        bucket = self._bucket(self._visible, mode)
        if key in bucket:
            return bucket[key]
        visible = self._compute_visible(key, mode)
        bucket[key] = visible
        return visible

    def _compute_visible(self, key: Tuple[str, ...], mode: Mode) -> bool:
        if is_restricted(":".join(key), mode):
            return False
        node = self.catalog.find(key)
        if node is not None and not node.hidden:
            return True
        return any(not is_restricted(child.command_id, mode) for child in self.catalog.descendants(key))

    def top_level(self, mode: Mode) -> List[str]:
        bucket = self._bucket(self._listings, mode)
        if () not in bucket:
            bucket[()] = sorted(
                name for name in self.catalog.list_top_level() if self.is_visible((name,), mode)
            )
        return list(bucket[()])

    def subcommands(self, path: PathLike, mode: Mode) -> List[str]:
        key = as_path(path)
        if not key:
            return self.top_level(mode)
        bucket = self._bucket(self._listings, mode)
        if key not in bucket:
            bucket[key] = [
                name for name in self.catalog.list_subcommands(key) if self.is_visible(key + (name,), mode)
            ]
        return list(bucket[key])

    def cached_modes(self) -> List[str]:
        return sorted(set(self._visible) | set(self._listings))


__all__ = ["CommandView"]
