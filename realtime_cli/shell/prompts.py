"""Nested confirmation prompts.

A command may stop and ask the user a yes/no question (``apps delete``
without ``--force``). The prompt borrows the terminal through
:meth:`Terminal.handed_off`, so the editor's listener and raw flag come back
exactly as they were whatever the answer, or if reading fails. End of input
counts as "no".
"""
from __future__ import annotations

import re
from typing import Optional

from .terminal import Terminal

_YES_NO_MARKER = re.compile(r"[\[(]\s*y(es)?\s*/\s*n(o)?\s*[\])]", re.IGNORECASE)
_ACCEPT = frozenset({"y", "yes"})


class Prompter:
    def __init__(self, terminal: Terminal) -> None:
        self.terminal = terminal

    async def confirm(self, message: str) -> bool:
        text = message if _YES_NO_MARKER.search(message) else f"{message} [yes/no]"
        with self.terminal.handed_off() as term:
            answer = await term.read_line(f"{text} ")
        return (answer or "").strip().lower() in _ACCEPT

    async def ask(self, message: str, default: Optional[str] = None) -> str:
        suffix = f" [{default}]" if default else ""
        with self.terminal.handed_off() as term:
            answer = (await term.read_line(f"{message}{suffix}: ") or "").strip()
        return answer or (default or "")


__all__ = ["Prompter"]
