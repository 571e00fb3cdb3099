"""Interactive session loop.

Purpose
-------
Run one ``realtime>`` session on a single asyncio loop: read a line with a
prompt_toolkit :class:`~prompt_toolkit.PromptSession`, hand it to the
:class:`Dispatcher` and show the prompt again when the command finishes.

State machine
-------------
``IDLE`` (empty buffer) and ``EDITING`` belong to the prompt. A submitted line
moves to ``DISPATCHING`` until the command's outcome has been printed, then
back to ``IDLE`` with exactly one new prompt. ``exit``, ``quit``, Ctrl-D on an
empty line or end of input move to ``EXITING``, which resolves :meth:`run`.

Signals
-------
One SIGINT handler per session, installed in :meth:`run` and removed at
teardown; prompts run with ``handle_sigint=False`` so they leave it alone.
While a command runs the tty is in cooked mode, so Ctrl-C arrives as SIGINT;
while editing it arrives as a key press. Both end in :meth:`interrupt`.

Terminal faults
---------------
If the tty cannot be put back into raw mode the session keeps going in cooked
mode: the next line is read by :meth:`Terminal.read_line` and the editor is
tried again for the line after it.
"""
from __future__ import annotations

import asyncio
import logging
import os
import signal
import sys
import uuid
from typing import Any, Mapping, MutableMapping, Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.application import run_in_terminal
from prompt_toolkit.buffer import Buffer

from ..base.logging import LogContext, get_logger, log_event
from ..catalog import CommandCatalog, load_catalog
from ..config import env as env_names
from ..config.defaults import (
    EXIT_CODE_ERROR,
    EXIT_CODE_OK,
    EXIT_CODE_USER_EXIT,
    INTERRUPT_HINT,
    PROMPT,
    WELCOME_BANNER,
)
from ..policy import Mode
from .completion import CompletionEngine, render_result
from .dispatch import Dispatcher, DispatchOutcome, DispatchStatus
from .line_editor import (
    EditorState,
    LineInterrupted,
    ShellCompleter,
    ShellHistory,
    accept_completion,
    shell_key_bindings,
)
from .parsing import split_command_line
from .prompts import Prompter
from .settings import CLISettings, load_settings
from .terminal import TERMINAL_FAULTS, Terminal
from .visibility import CommandView

logger = get_logger("realtime.shell")


class InteractiveSession:
    """One interactive shell session bound to a :class:`Terminal`."""

    def __init__(
        self,
        catalog: Optional[CommandCatalog] = None,
        *,
        terminal: Optional[Terminal] = None,
        settings: Optional[CLISettings] = None,
        env: Optional[Mapping[str, str]] = None,
        install_signals: bool = True,
        persist_history: bool = True,
    ) -> None:
        self.env: Mapping[str, str] = os.environ if env is None else env
        self.catalog = catalog if catalog is not None else load_catalog(env=self.env)
        self.settings = settings if settings is not None else load_settings()
        self.terminal = terminal if terminal is not None else Terminal()
        self.session_id = uuid.uuid4().hex[:12]
        self.view = CommandView(self.catalog)
        self.completer = CompletionEngine(self.view)
        self.prompter = Prompter(self.terminal)
        self.dispatcher = Dispatcher(
            self.catalog,
            view=self.view,
            terminal=self.terminal,
            prompter=self.prompter,
            interactive=True,
            session_id=self.session_id,
            env=self.env,
        )
        self.history = ShellHistory(
            self.settings.history_size,
            self.settings.history_file_path if persist_history else None,
        )
        self.prompt: PromptSession[str] = PromptSession(
            history=self.history,
            completer=ShellCompleter(self.completer, self.mode),
            complete_while_typing=False,
            key_bindings=shell_key_bindings(self.complete),
            input=self.terminal.input,
            output=self.terminal.output,
        )
        self.prompt.default_buffer.on_text_changed += self._on_text_changed
        self.state = EditorState.IDLE
        self.exit_code: Optional[int] = None
        self.redraw_count = 0
        self.install_signals = install_signals
        self._signal_installed = False

    # ---- helpers ----

    def mode(self) -> Mode:
        """Re-read on every request so a changed environment takes effect."""
        return Mode.from_env(self.env)

    @property
    def wrapper_mode(self) -> bool:
        return env_names.env_flag(env_names.WRAPPER_MODE, self.env)

    @property
    def buffer_text(self) -> str:
        return self.prompt.default_buffer.text

    def _log_ctx(self) -> LogContext:
        return LogContext(mode=self.mode().key, session_id=self.session_id)

    def _warn(self, message: str) -> None:
        self.terminal.writeln(message)

    def _on_text_changed(self, buffer: Buffer) -> None:
        if self.state in (EditorState.IDLE, EditorState.EDITING):
            self.state = EditorState.EDITING if buffer.text else EditorState.IDLE

    # ---- editing ----

    def complete(self, buffer: Buffer) -> None:
        """Tab: rewrite a single match in place, list several below the prompt."""
        result = self.completer.complete_line(buffer.document.text_before_cursor, self.mode())
        if result.replaced:
            accept_completion(buffer, result.buffer)
            return
        listing = render_result(self.completer, result)
        if listing:
            line = PROMPT + buffer.text
            run_in_terminal(lambda: self.terminal.writeln(f"{line}\n{listing}"))

    async def _next_line(self) -> Optional[str]:
        """One prompt; ``None`` means the user asked to leave."""
        self.state = EditorState.IDLE
        self.redraw_count += 1
        terminal = self.terminal
        if not terminal.restore_failed and not terminal.has_pending:
            try:
                with terminal.editing():
                    return await self.prompt.prompt_async(PROMPT, handle_sigint=False)
            except EOFError:
                return None
            except TERMINAL_FAULTS as exc:
                terminal.fall_back(exc)
        log_event(logger, "shell.prompt.cooked", self._log_ctx(), level=logging.DEBUG)
        line = await terminal.read_line(PROMPT)
        terminal.restore_failed = False
        return line

    def _interrupted(self, had_text: bool) -> None:
        self.terminal.write("^C\n" if had_text else f"^C\n{INTERRUPT_HINT}\n")
        self.state = EditorState.IDLE

    def interrupt(self) -> None:
        """SIGINT / Ctrl-C entry point; never exits the shell."""
        if self.state is EditorState.DISPATCHING:
            self.dispatcher.interrupt()
            return
        if self.state is EditorState.EXITING:
            return
        app = self.prompt.app
        if app.is_running and not app.is_done:
            app.exit(exception=LineInterrupted(self.buffer_text))
            return
        self._interrupted(False)

    # ---- dispatch ----

    async def _loop(self) -> int:
        while True:
            try:
                line = await self._next_line()
            except LineInterrupted as exc:
                self._interrupted(bool(exc.text))
                continue
            if line is None:
                self.terminal.write("\n")
                return EXIT_CODE_OK
            tokens = split_command_line(line, warn=self._warn)
            if not tokens:
                continue
            self.state = EditorState.DISPATCHING
            outcome = await self.dispatcher.dispatch(tokens, self.mode())
            self._report(outcome)
            if outcome.status is DispatchStatus.EXIT:
                return EXIT_CODE_USER_EXIT if self.wrapper_mode else EXIT_CODE_OK

    def _report(self, outcome: DispatchOutcome) -> None:
        if outcome.message:
            self.terminal.writeln(outcome.message)
        if outcome.is_error or outcome.status is DispatchStatus.CANCELLED:
            log_event(
                logger,
                "shell.command.outcome",
                self._log_ctx(),
                level=logging.DEBUG,
                command=outcome.command_id,
                status=outcome.status.value,
                code=outcome.error_code.value if outcome.error_code else None,
            )

    # ---- lifecycle ----

    def _install_signal_handler(self, loop: asyncio.AbstractEventLoop) -> None:
        if not self.install_signals:
            return
        try:
            loop.add_signal_handler(signal.SIGINT, self.interrupt)
        except (NotImplementedError, RuntimeError) as exc:
            log_event(logger, "shell.signal.unavailable", level=logging.WARNING, error=str(exc))
            return
        self._signal_installed = True

    def _remove_signal_handler(self, loop: asyncio.AbstractEventLoop) -> None:
        if self._signal_installed:
            loop.remove_signal_handler(signal.SIGINT)
            self._signal_installed = False

    def _mark_interactive(self) -> None:
        if isinstance(self.env, MutableMapping):
            self.env[env_names.INTERACTIVE_MODE] = "true"

    async def run(self) -> int:
        """Run until the user exits; returns the process exit code."""
        loop = asyncio.get_running_loop()
        self._mark_interactive()
        log_event(logger, "shell.session.start", self._log_ctx(), level=logging.DEBUG)
        fatal: Optional[BaseException] = None
        self._install_signal_handler(loop)
        try:
            if not env_names.env_flag(env_names.SUPPRESS_WELCOME, self.env):
                self.terminal.writeln(WELCOME_BANNER)
            code = await self._loop()
        except Exception as exc:
            fatal = exc
            code = EXIT_CODE_ERROR
        finally:
            self.state = EditorState.EXITING
            await self._teardown(loop)
        if fatal is not None:
            log_event(logger, "shell.session.fatal", self._log_ctx(), level=logging.ERROR, error=str(fatal))
            sys.stderr.write(f"Error: {fatal}\n")
        log_event(logger, "shell.session.end", self._log_ctx(), level=logging.DEBUG, exit_code=code)
        self.exit_code = code
        return code

    async def _teardown(self, loop: asyncio.AbstractEventLoop) -> None:
        self._remove_signal_handler(loop)
        self.dispatcher.interrupt()
        await self.dispatcher.clients.aclose()


def run_interactive(**kwargs: Any) -> int:
    """Blocking entry point used by the command line."""
    return asyncio.run(InteractiveSession(**kwargs).run())


__all__ = ["InteractiveSession", "run_interactive"]
