"""Tests for nested confirmation prompts and terminal ownership hand-off.

The terminal reads from a prompt_toolkit pipe, so raw mode is bookkeeping
only; the listener count and raw flag are what the editor relies on.
"""

from __future__ import annotations

import asyncio
import contextlib
import io
import termios
from typing import ContextManager, Dict, Iterator

from prompt_toolkit.output import DummyOutput

from realtime_cli.catalog import CommandCatalog
from realtime_cli.policy import NORMAL
from realtime_cli.shell.dispatch import Dispatcher, DispatchStatus
from realtime_cli.shell.prompts import Prompter
from realtime_cli.shell.terminal import Terminal
from realtime_cli.tests.helpers import StdinPipe


def test_confirm_accepts_yes_and_restores_state(stdin_pipe: StdinPipe) -> None:
    out = io.StringIO()
    terminal = stdin_pipe.terminal(out)

    async def scenario():
        with terminal.editing():
            stdin_pipe.send(b"Yes\n")
            answer = await Prompter(terminal).confirm("Delete app?")
            return answer, (terminal.listener_count, terminal.raw)

    answer, state = asyncio.run(scenario())
    assert answer is True  # nosec B101 - pytest assertion in test
    assert state == (1, True)  # nosec B101 - pytest assertion in test
    assert "Delete app? [yes/no] " in out.getvalue()  # nosec B101 - pytest assertion in test
    assert (terminal.listener_count, terminal.raw) == (0, False)  # nosec B101 - pytest assertion in test


def test_confirm_decline_and_existing_marker(stdin_pipe: StdinPipe) -> None:
    out = io.StringIO()
    terminal = stdin_pipe.terminal(out)

    async def scenario():
        with terminal.editing():
            stdin_pipe.send(b"n\n")
            answer = await Prompter(terminal).confirm("Proceed? (y/n)")
            return answer, (terminal.listener_count, terminal.raw)

    answer, state = asyncio.run(scenario())
    assert answer is False  # nosec B101 - pytest assertion in test
    assert state == (1, True)  # nosec B101 - pytest assertion in test
    assert "[yes/no]" not in out.getvalue()  # nosec B101 - pytest assertion in test


def test_confirm_on_end_of_input_declines(stdin_pipe: StdinPipe) -> None:
    terminal = stdin_pipe.terminal()

    async def scenario():
        with terminal.editing():
            stdin_pipe.close_writer()
            answer = await Prompter(terminal).confirm("Continue?")
            return answer, (terminal.listener_count, terminal.raw)

    answer, state = asyncio.run(scenario())
    assert answer is False  # nosec B101 - pytest assertion in test
    assert state == (1, True)  # nosec B101 - pytest assertion in test


def test_ask_uses_default_on_empty_answer(stdin_pipe: StdinPipe) -> None:
    async def scenario():
        stdin_pipe.send(b"\n")
        return await Prompter(stdin_pipe.terminal()).ask("Alias", default="default")

    assert asyncio.run(scenario()) == "default"  # nosec B101 - pytest assertion in test


def test_answers_typed_ahead_are_read_one_line_at_a_time(stdin_pipe: StdinPipe) -> None:
    terminal = stdin_pipe.terminal()

    async def scenario():
        stdin_pipe.send(b"first\nsecond\n")
        prompter = Prompter(terminal)
        return await prompter.ask("One"), terminal.has_pending, await prompter.ask("Two")

    assert asyncio.run(scenario()) == ("first", True, "second")  # nosec B101 - pytest assertion in test
    assert not terminal.has_pending  # nosec B101 - pytest assertion in test


def test_handed_off_restores_after_exception(stdin_pipe: StdinPipe) -> None:
    terminal = stdin_pipe.terminal()
    with terminal.editing():
        try:
            with terminal.handed_off():
                assert terminal.listener_count == 0 and not terminal.raw  # nosec B101 - pytest assertion in test
                raise RuntimeError("command failed")
        except RuntimeError:
            pass
        state = (terminal.listener_count, terminal.raw)

    assert state == (1, True)  # nosec B101 - pytest assertion in test
    assert not terminal.restore_failed  # nosec B101 - pytest assertion in test


class _BrokenRestoreTerminal(Terminal):
    def _cooked_mode(self) -> ContextManager[None]:
        return _fails_on_exit()


@contextlib.contextmanager
def _fails_on_exit() -> Iterator[None]:
    yield
    raise termios.error(5, "Input/output error")


def test_handed_off_restore_fault_reattaches_listener_in_cooked_mode(stdin_pipe: StdinPipe) -> None:
    terminal = _BrokenRestoreTerminal(stdin_pipe.input, DummyOutput(), io.StringIO())
    with terminal.editing():
        with terminal.handed_off():
            pass
        state = (terminal.listener_count, terminal.raw, terminal.restore_failed)

    assert state == (1, False, True)  # nosec B101 - pytest assertion in test


def test_apps_delete_confirms_through_dispatcher(
    catalog: CommandCatalog, shell_env: Dict[str, str], stdin_pipe: StdinPipe
) -> None:
    out = io.StringIO()
    terminal = stdin_pipe.terminal(out)

    async def scenario():
        dispatcher = Dispatcher(
            catalog, terminal=terminal, prompter=Prompter(terminal), out=out, env=shell_env
        )
        with terminal.editing():
            stdin_pipe.send(b"no\n")
            declined = await dispatcher.dispatch(["apps", "delete", "mock-app-1"], NORMAL)
            stdin_pipe.send(b"y\n")
            accepted = await dispatcher.dispatch(["apps", "delete", "mock-app-1"], NORMAL)
            forced = await dispatcher.dispatch(["apps", "delete", "mock-app-2", "--force"], NORMAL)
            state = (terminal.listener_count, terminal.raw)
        return declined, accepted, forced, state

    declined, accepted, forced, state = asyncio.run(scenario())
    text = out.getvalue()
    assert declined.status is DispatchStatus.OK  # nosec B101 - pytest assertion in test
    assert "Deletion cancelled." in text  # nosec B101 - pytest assertion in test
    assert accepted.status is DispatchStatus.OK  # nosec B101 - pytest assertion in test
    assert "App mock-app-1 deleted." in text  # nosec B101 - pytest assertion in test
    assert forced.status is DispatchStatus.OK  # nosec B101 - pytest assertion in test
    assert state == (1, True)  # nosec B101 - pytest assertion in test
