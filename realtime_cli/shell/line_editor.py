"""prompt_toolkit pieces behind the ``realtime>`` prompt.

:class:`ShellHistory` keeps the bounded list of submitted lines and persists
it with :class:`~prompt_toolkit.history.FileHistory`. :class:`ShellCompleter`
exposes the completion engine to prompt_toolkit's completion menu and
:func:`shell_key_bindings` maps Ctrl-C, Ctrl-D and Tab onto the session.
"""
from __future__ import annotations

import logging
from enum import Enum
from itertools import islice
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Iterable, List, Union

from prompt_toolkit.buffer import Buffer
from prompt_toolkit.completion import CompleteEvent, Completer, Completion
from prompt_toolkit.document import Document
from prompt_toolkit.history import FileHistory, History
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.key_binding.key_processor import KeyPressEvent

from ..base.logging import get_logger, log_event
from ..config.defaults import HISTORY_SIZE_DEFAULT
from ..policy import Mode

if TYPE_CHECKING:
    from .completion import CompletionEngine

logger = get_logger("realtime.shell")


class EditorState(str, Enum):
    IDLE = "idle"
    EDITING = "editing"
    DISPATCHING = "dispatching"
    EXITING = "exiting"


class LineInterrupted(KeyboardInterrupt):
    """Ctrl-C at the prompt; ``text`` is what the buffer held."""

    def __init__(self, text: str = "") -> None:
        super().__init__(text)
        self.text = text


class ShellHistory(History):
    """Bounded command history; skips blank lines and consecutive duplicates.

    Without a ``path`` the history lives in memory only. With one, lines are
    appended to that file in prompt_toolkit's history format and the newest
    ``max_size`` of them are loaded back by the next session.
    """

    def __init__(self, max_size: int = HISTORY_SIZE_DEFAULT, path: Union[str, Path, None] = None) -> None:
        super().__init__()
        self.max_size = max(1, int(max_size))
        self.path = Path(path).expanduser() if path is not None else None
        self._file = FileHistory(str(self.path)) if self.path is not None else None

    @property
    def entries(self) -> List[str]:
        """Oldest first."""
        return self.get_strings()

    def load_history_strings(self) -> Iterable[str]:
        if self._file is None:
            return []
        try:
            return list(islice(self._file.load_history_strings(), self.max_size))
        except OSError as exc:
            log_event(logger, "shell.history.load_failed", level=logging.WARNING, path=str(self.path), error=str(exc))
            return []

    def store_string(self, string: str) -> None:
        if self._file is None or self.path is None:
            return
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._file.store_string(string)
        except OSError as exc:
            log_event(logger, "shell.history.save_failed", level=logging.WARNING, path=str(self.path), error=str(exc))

    def append_string(self, string: str) -> None:
        if not string.strip():
            return
        if self._loaded_strings and self._loaded_strings[0] == string:
            return
        super().append_string(string)
        del self._loaded_strings[self.max_size :]


class ShellCompleter(Completer):
    """Completion menu entries, each carrying the candidate's description."""

    def __init__(self, engine: "CompletionEngine", mode: Callable[[], Mode]) -> None:
        self.engine = engine
        self.mode = mode

    def get_completions(self, document: Document, complete_event: CompleteEvent) -> Iterable[Completion]:
        result = self.engine.complete_line(document.text_before_cursor, self.mode())
        for candidate in result.candidates:
            yield Completion(
                candidate,
                start_position=-len(result.partial),
                display_meta=self.engine.describe(candidate, result.kind, result.path),
            )


def shell_key_bindings(on_tab: Callable[[Buffer], None]) -> KeyBindings:
    """Ctrl-C, Ctrl-D, Tab and Ctrl-Space for the shell prompt."""
    bindings = KeyBindings()

    @bindings.add("c-c")
    def _interrupt(event: KeyPressEvent) -> None:
        event.app.exit(exception=LineInterrupted(event.current_buffer.text))

    @bindings.add("c-d")
    def _eof_or_delete(event: KeyPressEvent) -> None:
        buffer = event.current_buffer
        if buffer.text:
            buffer.delete()
        else:
            event.app.exit(exception=EOFError())

    @bindings.add("tab")
    def _complete(event: KeyPressEvent) -> None:
        on_tab(event.current_buffer)

    @bindings.add("c-space")
    def _menu(event: KeyPressEvent) -> None:
        event.current_buffer.start_completion(select_first=False)

    return bindings


def accept_completion(buffer: Buffer, text: str) -> None:
    """Replace everything before the cursor with ``text``, keeping the rest."""
    after = buffer.document.text_after_cursor
    buffer.document = Document(text + after, cursor_position=len(text))


__all__ = [
    "EditorState",
    "LineInterrupted",
    "ShellCompleter",
    "ShellHistory",
    "accept_completion",
    "shell_key_bindings",
]
