"""Command-line tokenizing for the interactive shell.

Quoting rules
-------------
- Whitespace separates tokens; runs of whitespace collapse.
- Double or single quotes group text; the quotes themselves are dropped, so
  ``--opt="a b"`` becomes the single token ``--opt=a b``.
- Inside quotes, a backslash before the same quote character escapes it.
- ``""`` yields an empty-string token.
- Outside quotes a backslash is kept literally.
- An unclosed quote keeps the remaining text as the last token and prints a
  warning on stderr.
"""
from __future__ import annotations

import sys
from typing import Callable, List, Optional, Sequence

Warn = Callable[[str], None]

_QUOTE_NAMES = {'"': "double", "'": "single"}


def _stderr_warn(message: str) -> None:
    sys.stderr.write(message + "\n")
    sys.stderr.flush()


def split_command_line(line: str, warn: Optional[Warn] = _stderr_warn) -> List[str]:
    tokens: List[str] = []
    current: List[str] = []
    in_token = False
    quote: Optional[str] = None
    i = 0
    n = len(line)
    while i < n:
        ch = line[i]
        if quote is not None:
            if ch == "\\" and i + 1 < n and line[i + 1] == quote:
                current.append(quote)
                i += 2
                continue
            if ch == quote:
                quote = None
            else:
                current.append(ch)
            i += 1
            continue
        if ch in _QUOTE_NAMES:
            quote = ch
            in_token = True
        elif ch.isspace():
            if in_token:
                tokens.append("".join(current))
                current = []
                in_token = False
        else:
            current.append(ch)
            in_token = True
        i += 1
    if quote is not None and warn is not None:
        warn(f"Warning: Unclosed {_QUOTE_NAMES[quote]} quote in command")
    if in_token:
        tokens.append("".join(current))
    return tokens


def expand_command_id(tokens: Sequence[str]) -> List[str]:
    """Split a leading ``topic:command`` token into path segments.

    Only the first token is expanded; arguments may legitimately contain
    colons (API keys, timestamps).
    """
    if not tokens:
        return []
    first = tokens[0]
    if ":" in first and not first.startswith("-"):
        head = [seg for seg in first.split(":") if seg]
        return head + list(tokens[1:])
    return list(tokens)


__all__ = ["split_command_line", "expand_command_id"]
