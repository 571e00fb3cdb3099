"""Terminal ownership for the interactive shell.

Purpose
-------
The ``realtime>`` prompt, the command it dispatches and any nested prompt that
command opens share one prompt_toolkit :class:`~prompt_toolkit.input.Input`,
one stdout and one raw-mode flag. :class:`Terminal` moves them explicitly and
never lets two parties hold them at once:

- :meth:`Terminal.editing` wraps each line the editor reads: raw mode, one
  line listener (the prompt_toolkit application reading keys).
- :meth:`Terminal.handed_off` lends the input to a running command or a nested
  prompt: cooked mode, no listener. Whatever was there before comes back on
  every exit path.

External dependencies
---------------------
``prompt_toolkit`` owns the actual mode switching (``Input.raw_mode`` and
``Input.cooked_mode``) and key reading. Pipes (tests, scripted sessions) make
the mode switches no-ops but keep the same bookkeeping.

Failure modes
-------------
A tty that cannot be switched back (``termios.error`` or ``OSError``) is
logged as ``shell.restore.failed``. The terminal is forced to cooked mode and
``restore_failed`` tells the session to read its next line with
:meth:`Terminal.read_line` instead of the full editor.
"""
from __future__ import annotations

import asyncio
import contextlib
import logging
import os
import sys
import termios
from typing import ContextManager, Iterator, List, Optional, TextIO

from prompt_toolkit.input import Input, create_input
from prompt_toolkit.output import Output, create_output

from ..base.logging import get_logger, log_event

logger = get_logger("realtime.shell")

TERMINAL_FAULTS = (termios.error, OSError)
_LINE_ENDINGS = ("\r", "\n")


class Terminal:
    """Input, prompt output and stdout with explicit ownership."""

    def __init__(
        self,
        input: Optional[Input] = None,
        output: Optional[Output] = None,
        stdout: Optional[TextIO] = None,
    ) -> None:
        self.input = input if input is not None else create_input()
        self.output = output if output is not None else create_output()
        self.stdout = stdout if stdout is not None else sys.stdout
        self.restore_failed = False
        self._listeners = 0
        self._raw = False
        self._pending: List[str] = []

    @property
    def raw(self) -> bool:
        return self._raw

    @property
    def listener_count(self) -> int:
        return self._listeners

    def write(self, text: str) -> None:
        self.stdout.write(text)
        self.stdout.flush()

    def writeln(self, text: str = "") -> None:
        self.write(text + "\n")

    # ---- mode switching; overridable seams ----

    def _raw_mode(self) -> ContextManager[None]:
        return self.input.raw_mode()

    def _cooked_mode(self) -> ContextManager[None]:
        return self.input.cooked_mode()

    def _force_cooked(self) -> None:
        fd = self.input.fileno()
        if not os.isatty(fd):
            return
        attrs = termios.tcgetattr(fd)
        attrs[0] |= termios.ICRNL
        attrs[3] |= termios.ECHO | termios.ICANON | termios.ISIG | termios.IEXTEN
        termios.tcsetattr(fd, termios.TCSANOW, attrs)

    # ---- ownership ----

    @contextlib.contextmanager
    def editing(self) -> Iterator["Terminal"]:
        """The line editor owns the input for one line."""
        if self._listeners:
            raise RuntimeError("the line editor is already reading")
        stack = contextlib.ExitStack()
        stack.enter_context(self._raw_mode())
        self._listeners, self._raw = 1, True
        try:
            yield self
        finally:
            self._listeners, self._raw = 0, False
            try:
                stack.close()
            except TERMINAL_FAULTS as exc:
                self.fall_back(exc)

    @contextlib.contextmanager
    def handed_off(self) -> Iterator["Terminal"]:
        """Lend the input to a command or nested prompt and take it back."""
        listeners, raw = self._listeners, self._raw
        stack = contextlib.ExitStack()
        stack.enter_context(self._cooked_mode())
        self._listeners, self._raw = 0, False
        try:
            yield self
        finally:
            try:
                stack.close()
            except TERMINAL_FAULTS as exc:
                self.fall_back(exc)
            # the listener comes back even when the mode could not be restored
            self._listeners = listeners
            self._raw = raw and not self.restore_failed

    def fall_back(self, exc: BaseException) -> None:
        """Record a restore fault and leave the tty in cooked mode."""
        self.restore_failed = True
        log_event(logger, "shell.restore.failed", level=logging.ERROR, error=str(exc) or type(exc).__name__)
        try:
            self._force_cooked()
        except TERMINAL_FAULTS as again:
            log_event(logger, "shell.restore.cooked_failed", level=logging.ERROR, error=str(again))

    @property
    def has_pending(self) -> bool:
        """Keys typed ahead of a line-at-a-time read are still buffered."""
        return bool(self._pending)

    async def read_line(self, prompt: str = "") -> Optional[str]:
        """Read one line without the editor; ``None`` at end of input."""
        if prompt:
            self.write(prompt)
        line = self._take_line()
        if line is not None:
            return line
        done: asyncio.Future[Optional[str]] = asyncio.get_running_loop().create_future()

        def _ready() -> None:
            self._pending.extend(key_press.data for key_press in self.input.read_keys())
            if done.done():
                return
            line = self._take_line()
            if line is not None:
                done.set_result(line)
            elif self.input.closed:
                rest, self._pending = "".join(self._pending), []
                done.set_result(rest or None)

        with self.input.attach(_ready):
            return await done

    def _take_line(self) -> Optional[str]:
        for index, data in enumerate(self._pending):
            if data in _LINE_ENDINGS:
                line = "".join(self._pending[:index])
                del self._pending[: index + 1]
                return line
        return None


__all__ = ["TERMINAL_FAULTS", "Terminal"]
