"""Tab completion over the mode-filtered command namespace.

The engine is pure: it reads only the in-memory catalog and the mode passed
in, so repeated calls with the same input return the same candidates.

Candidate kinds
---------------
``command``
    Subcommands at the resolved path (top level when nothing is typed yet).
    Filtered by case-sensitive prefix first, then by the restriction policy.
``flag``
    ``--name`` and ``-c`` tokens of the resolved command, in manifest order.
    Hidden flags are offered only with ``mode.show_dev_flags``.

Once the typed path reaches a leaf command, word completion offers nothing:
positional arguments are free text.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from ..catalog import VIRTUAL_COMMANDS
from ..policy import Mode
from .parsing import split_command_line
from .visibility import CommandView

KIND_COMMAND = "command"
KIND_FLAG = "flag"


@dataclass(frozen=True)
class CompletionResult:
    """Outcome of a Tab press.

    ``buffer`` is the new line contents: rewritten for a single match, the
    original text otherwise. ``candidates`` lists every match.
    """

    buffer: str
    candidates: Tuple[str, ...] = ()
    partial: str = ""
    kind: str = KIND_COMMAND
    path: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def replaced(self) -> bool:
        return len(self.candidates) == 1


class CompletionEngine:
    def __init__(self, view: CommandView) -> None:
        self.view = view
        self.catalog = view.catalog

    # ---- path resolution ----

    def resolve_path(self, tokens: Sequence[str]) -> Tuple[Tuple[str, ...], List[str]]:
        """Walk non-flag tokens down the catalog tree.

        Returns the deepest existing path and the positional words left over
        after it. A ``topic:command`` word is split into segments.
        """
        words: List[str] = []
        for tok in tokens:
            if tok.startswith("-"):
                continue
            if not words and ":" in tok:
                words.extend(seg for seg in tok.split(":") if seg)
            else:
                words.append(tok)
        path: Tuple[str, ...] = ()
        for idx, word in enumerate(words):
            candidate = path + (word,)
            if not self.catalog.exists(candidate):
                return path, words[idx:]
            path = candidate
        return path, []

    def _is_leaf(self, path: Tuple[str, ...]) -> bool:
        return self.catalog.find(path) is not None and not self.catalog.list_subcommands(path)

    # ---- public API ----

    def complete(self, tokens: Sequence[str], partial: str, kind: str, mode: Mode) -> List[str]:
        path, rest = self.resolve_path(tokens)
        if path and not self.view.is_visible(path, mode):
            return []
        if kind == KIND_FLAG:
            # positional words typed after the command do not change its flags
            if self.catalog.find(path) is None:
                return []
            return [
                tok
                for tok in self.catalog.flags_for(path, show_hidden=mode.show_dev_flags)
                if tok.startswith(partial)
            ]
        if rest or self._is_leaf(path):
            return []
        if not path and ":" in partial:
            return self._complete_colon(partial, mode)
        if path:
            names = self.catalog.list_subcommands(path)
        else:
            names = sorted(self.catalog.list_top_level())
        matched = [name for name in names if name.startswith(partial)]
        return [name for name in matched if self.view.is_visible(path + (name,), mode)]

    def _complete_colon(self, partial: str, mode: Mode) -> List[str]:
        *head, tail = partial.split(":")
        prefix = tuple(seg for seg in head if seg)
        if not prefix or not self.view.is_visible(prefix, mode):
            return []
        base = ":".join(prefix)
        return [
            f"{base}:{name}"
            for name in self.catalog.list_subcommands(prefix)
            if name.startswith(tail) and self.view.is_visible(prefix + (name,), mode)
        ]

    def complete_line(self, buffer: str, mode: Mode) -> CompletionResult:
        tokens = split_command_line(buffer, warn=None)
        if not buffer or buffer[-1].isspace() or not tokens:
            partial = ""
            start = len(buffer)
        else:
            partial = tokens.pop()
            start = max(buffer.rfind(" "), buffer.rfind("\t")) + 1
        kind = KIND_FLAG if partial.startswith("-") else KIND_COMMAND
        candidates = self.complete(tokens, partial, kind, mode)
        path, _ = self.resolve_path(tokens)
        if len(candidates) == 1:
            return CompletionResult(
                buffer=buffer[:start] + candidates[0] + " ",
                candidates=tuple(candidates),
                partial=partial,
                kind=kind,
                path=path,
            )
        return CompletionResult(buffer=buffer, candidates=tuple(candidates), partial=partial, kind=kind, path=path)

    def render_candidates(self, candidates: Sequence[str], kind: str, path: Sequence[str] = ()) -> str:
        if not candidates:
            return ""
        width = max(len(c) for c in candidates)
        lines: List[str] = []
        for cand in candidates:
            desc = self.describe(cand, kind, tuple(path))
            lines.append(f"  {cand.ljust(width)}  {desc}".rstrip())
        return "\n".join(lines)

    def describe(self, candidate: str, kind: str, path: Tuple[str, ...] = ()) -> str:
        """One-line catalog description shown next to ``candidate``."""
        if kind == KIND_FLAG:
            return self.catalog.flag_description(path, candidate)
        if ":" in candidate:
            return self.catalog.description(candidate)
        if not path and candidate in VIRTUAL_COMMANDS:
            return self.catalog.description((candidate,))
        return self.catalog.description(path + (candidate,))


def render_result(engine: CompletionEngine, result: CompletionResult) -> Optional[str]:
    """Listing to print below the prompt, or ``None`` when nothing should be shown."""
    if len(result.candidates) < 2:
        return None
    return engine.render_candidates(result.candidates, result.kind, result.path)


__all__ = [
    "CompletionEngine",
    "CompletionResult",
    "KIND_COMMAND",
    "KIND_FLAG",
    "render_result",
]
