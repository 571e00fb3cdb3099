"""Help text rendering for the root, topics and commands."""
from __future__ import annotations

from typing import List

from ..catalog import CommandHelp, FlagSpec
from ..config.defaults import PROGRAM_NAME, PROMPT
from ..policy import Mode
from .visibility import CommandView

_CLI_PREFIX = f"$ {PROGRAM_NAME} "


def _section(title: str, rows: List[str]) -> List[str]:
    if not rows:
        return []
    return ["", title, *rows]


def _table(pairs: List[tuple[str, str]], indent: str = "  ") -> List[str]:
    if not pairs:
        return []
    width = max(len(left) for left, _ in pairs)
    return [f"{indent}{left.ljust(width)}  {right}".rstrip() for left, right in pairs]


def _flag_label(spec: FlagSpec) -> str:
    short = f"{spec.short}, " if spec.short else "    "
    label = f"{short}{spec.long}"
    if spec.kind == "option":
        label += f"=<{'|'.join(spec.options)}>" if spec.options else "=<value>"
    return label


class HelpRenderer:
    """Render help, rewriting ``$ realtime `` to the shell prompt when interactive."""

    def __init__(self, view: CommandView, *, interactive: bool = True) -> None:
        self.view = view
        self.catalog = view.catalog
        self.interactive = interactive

    def _finish(self, lines: List[str]) -> str:
        text = "\n".join(lines).strip("\n")
        if self.interactive:
            text = text.replace(_CLI_PREFIX, PROMPT)
        return text

    def root(self, mode: Mode) -> str:
        names = [n for n in self.view.top_level(mode) if self.interactive or n not in ("exit", "help")]
        rows = _table([(name, self.catalog.description((name,))) for name in names])
        lines = [
            "realtime - command-line client for realtime messaging",
            "",
            "USAGE",
            f"  {_CLI_PREFIX}[COMMAND]",
            *_section("COMMANDS", rows),
        ]
        if self.interactive:
            lines += ["", "Type 'help <command>' for details or press TAB to complete."]
        return self._finish(lines)

    def topic(self, info: CommandHelp, mode: Mode) -> str:
        visible = set(self.view.subcommands(info.path, mode))
        rows = _table([(name, desc) for name, desc in info.subcommands if name in visible])
        lines = [
            info.description,
            "",
            "USAGE",
            f"  {_CLI_PREFIX}{' '.join(info.path)} COMMAND",
            *_section("COMMANDS", rows),
        ]
        return self._finish(lines)

    def command(self, info: CommandHelp, mode: Mode) -> str:
        args = _table([(a.name.upper(), a.description) for a in info.args])
        flags = _table(
            [
                (_flag_label(f), f.description + (" (required)" if f.required else ""))
                for f in info.flags
                if mode.show_dev_flags or not f.hidden
            ]
        )
        visible = set(self.view.subcommands(info.path, mode))
        subcommands = _table([(n, d) for n, d in info.subcommands if n in visible])
        lines = [
            info.description,
            "",
            "USAGE",
            f"  {_CLI_PREFIX}{info.usage}",
            *_section("ARGUMENTS", args),
            *_section("FLAGS", flags),
            *_section("COMMANDS", subcommands),
            *_section("EXAMPLES", [f"  $ {ex}" for ex in info.examples]),
        ]
        return self._finish(lines)

    def render(self, info: CommandHelp, mode: Mode) -> str:
        return self.topic(info, mode) if info.is_topic else self.command(info, mode)


__all__ = ["HelpRenderer"]
