"""In-memory command catalog.

The catalog indexes every :class:`CommandNode` by its path and answers the
structural questions the shell asks: which segments exist at a level, which
flags a command takes, what help to show. It knows nothing about restriction
modes; filtering by mode happens in ``realtime_cli.shell.visibility``.

Hidden commands never appear in listings. Lookups are case-sensitive and
match whole segments only.
"""
from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Set, Tuple, Union

from .models import CommandHelp, CommandNode

PathLike = Union[str, Sequence[str]]

VIRTUAL_COMMANDS: Tuple[str, ...] = ("exit", "help")


def as_path(path: PathLike) -> Tuple[str, ...]:
    """Normalize ``"a:b"``, ``"a b"`` or ``["a", "b"]`` into a segment tuple."""
    if isinstance(path, str):
        return tuple(seg for seg in path.replace(" ", ":").split(":") if seg)
    return tuple(seg for seg in path if seg)


class CommandCatalog:
    """Read-only index of commands, built once from a manifest."""

    def __init__(self, nodes: Iterable[CommandNode], topics: Optional[Mapping[str, str]] = None) -> None:
        self._nodes: Dict[Tuple[str, ...], CommandNode] = {}
        for node in nodes:
            self._nodes[node.path] = node
        self._topics: Dict[str, str] = dict(topics or {})
        # prefix -> direct child segments leading to a non-hidden command
        self._children: Dict[Tuple[str, ...], Set[str]] = {}
        for node in self._nodes.values():
            if node.hidden:
                continue
            for depth in range(len(node.path)):
                self._children.setdefault(node.path[:depth], set()).add(node.path[depth])

    # ---- lookups ----

    def find(self, path: PathLike) -> Optional[CommandNode]:
        return self._nodes.get(as_path(path))

    def is_topic(self, path: PathLike) -> bool:
        """True when ``path`` has visible children but no command of its own."""
        key = as_path(path)
        return bool(key) and key not in self._nodes and bool(self._children.get(key))

    def exists(self, path: PathLike) -> bool:
        key = as_path(path)
        return key in self._nodes or bool(self._children.get(key))

    def command_ids(self, include_hidden: bool = False) -> List[str]:
        return sorted(
            node.command_id for node in self._nodes.values() if include_hidden or not node.hidden
        )

    def nodes(self, include_hidden: bool = False) -> List[CommandNode]:
        return [n for n in self._nodes.values() if include_hidden or not n.hidden]

    def descendants(self, path: PathLike) -> List[CommandNode]:
        """Non-hidden commands strictly below ``path``."""
        key = as_path(path)
        depth = len(key)
        return [
            node
            for node in self._nodes.values()
            if not node.hidden and len(node.path) > depth and node.path[:depth] == key
        ]

    # ---- listings ----

    def list_top_level(self) -> Set[str]:
        names = set(self._children.get((), set()))
        names.update(VIRTUAL_COMMANDS)
        return names

    def list_subcommands(self, path: PathLike) -> List[str]:
        return sorted(self._children.get(as_path(path), set()))

    def flags_for(self, path: PathLike, show_hidden: bool = False) -> List[str]:
        node = self.find(path)
        if node is None:
            return []
        tokens: List[str] = []
        for spec in node.flags.values():
            if spec.hidden and not show_hidden:
                continue
            tokens.append(spec.long)
            if spec.short:
                tokens.append(spec.short)
        return tokens

    # ---- descriptions ----

    def description(self, path: PathLike) -> str:
        key = as_path(path)
        if key == ("exit",):
            return "Exit the interactive shell"
        if key == ("help",):
            return "Show help for a command or topic"
        node = self._nodes.get(key)
        if node is not None and node.description:
            return node.description
        topic = self._topics.get(":".join(key))
        if topic:
            return topic
        if self._children.get(key):
            return f"Commands for {' '.join(key)}"
        return ""

    def flag_description(self, path: PathLike, token: str) -> str:
        node = self.find(path)
        if node is None:
            return ""
        spec = node.flag_for_token(token)
        return spec.description if spec is not None else ""

    def describe(self, path: PathLike) -> Optional[CommandHelp]:
        """Build the help payload for a command or topic, ``None`` if unknown."""
        key = as_path(path)
        node = self._nodes.get(key)
        subcommands = tuple(
            (name, self.description(key + (name,))) for name in self.list_subcommands(key)
        )
        if node is None:
            if not subcommands:
                return None
            return CommandHelp(
                path=key,
                description=self.description(key),
                usage=f"{' '.join(key)} COMMAND",
                is_topic=True,
                subcommands=subcommands,
            )
        return CommandHelp(
            path=key,
            description=node.description,
            usage=node.usage or _default_usage(node),
            examples=node.examples,
            args=node.args,
            flags=tuple(node.flags.values()),
            subcommands=subcommands,
        )


def _default_usage(node: CommandNode) -> str:
    parts = [" ".join(node.path)]
    for arg in node.args:
        parts.append(arg.name.upper() if arg.required else f"[{arg.name.upper()}]")
    if node.flags:
        parts.append("[FLAGS]")
    return " ".join(parts)


__all__ = ["CommandCatalog", "as_path", "VIRTUAL_COMMANDS", "PathLike"]
