"""Execution context handed to every leaf command."""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Protocol, TextIO, Union

from ..base.cancellation import CancellationToken
from ..base.errors import UsageError
from ..config.store import ConfigAccessor
from ..policy import Mode
from ..sdk.factory import ClientFactory


class Confirmer(Protocol):
    async def confirm(self, message: str) -> bool: ...


@dataclass
class CommandContext:
    """Everything a command may touch.

    ``flags`` is keyed by manifest flag name (``"api-key"``); ``args`` by
    argument name. Commands write through :meth:`print`/:meth:`emit` so the
    ``--json``/``--pretty-json`` switches behave uniformly.
    """

    command_id: str
    flags: Dict[str, Any]
    args: Dict[str, Any]
    out: TextIO
    config: ConfigAccessor
    clients: ClientFactory
    token: CancellationToken = field(default_factory=CancellationToken)
    mode: Mode = field(default_factory=Mode)
    prompter: Optional[Confirmer] = None
    interactive: bool = False

    def flag(self, name: str, default: Any = None) -> Any:
        value = self.flags.get(name)
        return default if value is None else value

    def int_flag(self, name: str, default: int) -> int:
        raw = self.flag(name, default)
        try:
            return int(raw)
        except (TypeError, ValueError) as exc:
            raise UsageError(f"--{name} expects an integer, got {raw!r}") from exc

    @property
    def json_mode(self) -> bool:
        return bool(self.flag("json") or self.flag("pretty-json"))

    def print(self, text: str = "") -> None:
        self.out.write(text + "\n")
        self.out.flush()

    def emit(self, data: Any, human: Union[str, Callable[[], str]]) -> None:
        """Print ``data`` as JSON in JSON mode, otherwise the human rendering."""
        if self.json_mode:
            indent = 2 if self.flag("pretty-json") else None
            self.print(json.dumps(data, ensure_ascii=False, indent=indent, default=str))
            return
        self.print(human() if callable(human) else human)

    async def confirm(self, message: str) -> bool:
        if self.prompter is None:
            raise UsageError("Confirmation required; re-run with --force")
        return await self.prompter.confirm(message)


__all__ = ["CommandContext", "Confirmer"]
