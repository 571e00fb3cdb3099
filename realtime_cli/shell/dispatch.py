"""Dispatch and lifecycle guard.

Purpose
-------
Turn a tokenized line into exactly one of: a special verb (``exit``,
``help``), a help page, a rejection, or a supervised command run. Unknown and
restricted commands come back as ``NOT_FOUND`` outcomes; this module never
raises for bad user input.

Lifecycle
---------
While a command runs it owns the terminal: the editor's reader is detached
and the tty is in cooked mode (:meth:`Terminal.handed_off`). At most one
:class:`ActiveInvocation` exists at a time. :meth:`Dispatcher.interrupt`
cancels it once; further interrupts while cleanup is in flight are ignored
and logged. Every exit path restores the terminal.
"""
from __future__ import annotations

import argparse
import asyncio
import contextlib
import logging
import sys
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, TextIO, Tuple

from ..base.cancellation import CancellationToken, CancelledError
from ..base.errors import CommandExit, ErrorCode, ShellError, UsageError, classify_exception
from ..base.logging import LogContext, get_logger, log_event
from ..catalog import CommandCatalog, CommandNode
from ..commands import CommandContext, Confirmer, get_command
from ..config.defaults import (
    EXIT_CODE_ERROR,
    EXIT_CODE_INTERRUPTED,
    EXIT_CODE_OK,
    EXIT_CODE_USAGE,
    PROGRAM_NAME,
)
from ..config.store import ConfigAccessor, TomlConfigStore
from ..policy import Mode, restriction_message, restriction_reason
from ..sdk.factory import ClientFactory
from .cli_utils import suppress_console_logs
from .help import HelpRenderer
from .parsing import expand_command_id
from .terminal import Terminal
from .visibility import CommandView

logger = get_logger("realtime.shell.dispatch")

EXIT_VERBS = frozenset({"exit", "quit"})
HELP_FLAGS = frozenset({"--help", "-h"})
ALREADY_INTERACTIVE = (
    "You're already in interactive mode. Type 'help' or press TAB to see available commands."
)


class DispatchStatus(str, Enum):
    OK = "ok"
    EXIT = "exit"
    HELP = "help"
    NOT_FOUND = "not_found"
    USAGE_ERROR = "usage_error"
    COMMAND_ERROR = "command_error"
    CANCELLED = "cancelled"
    EMPTY = "empty"


_STATUS_EXIT_CODES = {
    DispatchStatus.OK: EXIT_CODE_OK,
    DispatchStatus.EXIT: EXIT_CODE_OK,
    DispatchStatus.HELP: EXIT_CODE_OK,
    DispatchStatus.EMPTY: EXIT_CODE_OK,
    DispatchStatus.NOT_FOUND: EXIT_CODE_ERROR,
    DispatchStatus.USAGE_ERROR: EXIT_CODE_USAGE,
    DispatchStatus.COMMAND_ERROR: EXIT_CODE_ERROR,
    DispatchStatus.CANCELLED: EXIT_CODE_INTERRUPTED,
}


@dataclass(frozen=True)
class DispatchOutcome:
    status: DispatchStatus
    message: str = ""
    command_id: Optional[str] = None
    error_code: Optional[ErrorCode] = None
    command_exit_code: Optional[int] = None

    @property
    def exit_code(self) -> int:
        """Process exit code for one-shot runs."""
        if self.command_exit_code is not None:
            return self.command_exit_code
        return _STATUS_EXIT_CODES[self.status]

    @property
    def is_error(self) -> bool:
        return self.status in (
            DispatchStatus.NOT_FOUND,
            DispatchStatus.USAGE_ERROR,
            DispatchStatus.COMMAND_ERROR,
        )


@dataclass
class ActiveInvocation:
    """The single in-flight command of a session."""

    command_id: str
    task: "asyncio.Task[Any]"
    token: CancellationToken
    cancellable: bool = True
    cancel_requested: bool = False
    cleaned_up: bool = False

    def request_cancel(self, reason: str = "interrupted") -> bool:
        """Cancel once; returns ``False`` when nothing was done."""
        if not self.cancellable or self.cancel_requested or self.task.done():
            return False
        self.cancel_requested = True
        self.token.cancel(reason)
        self.task.cancel()
        return True

    def cleanup(self) -> bool:
        if self.cleaned_up:
            return False
        self.cleaned_up = True
        if not self.task.done():
            self.task.cancel()
        return True


class ShellArgumentParser(argparse.ArgumentParser):
    """``argparse`` parser that raises instead of printing and exiting."""

    def error(self, message: str) -> None:  # type: ignore[override]
        raise UsageError(message)

    def exit(self, status: int = 0, message: Optional[str] = None) -> None:  # type: ignore[override]
        raise UsageError((message or f"exited with status {status}").strip())


def _flag_dest(name: str) -> str:
    return "flag_" + name.replace("-", "_")


def _arg_dest(name: str) -> str:
    return "arg_" + name


def build_argument_parser(node: CommandNode) -> ShellArgumentParser:
    """Mirror a catalog node's flags and arguments into an argparse parser."""
    parser = ShellArgumentParser(prog=" ".join(node.path), add_help=False, allow_abbrev=False)
    taken: set[str] = set()
    for spec in node.flags.values():
        # a command's own flag wins a short alias shared with a global flag
        names = [spec.long] + ([spec.short] if spec.short and spec.short not in taken else [])
        taken.update(names)
        if spec.kind == "boolean":
            parser.add_argument(*names, dest=_flag_dest(spec.name), action="store_true", default=False)
            continue
        kwargs: Dict[str, Any] = {
            "dest": _flag_dest(spec.name),
            "default": spec.default,
            "required": spec.required,
            "metavar": "VALUE",
        }
        if spec.options:
            kwargs["choices"] = list(spec.options)
        if spec.multiple:
            kwargs["action"] = "append"
        parser.add_argument(*names, **kwargs)
    for arg in node.args:
        if arg.multiple:
            nargs = "+" if arg.required else "*"
        else:
            nargs = None if arg.required else "?"
        parser.add_argument(_arg_dest(arg.name), metavar=arg.name.upper(), nargs=nargs)
    return parser


def parse_invocation(node: CommandNode, argv: Sequence[str]) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """Return ``(flags, args)`` keyed by manifest names; raises ``UsageError``."""
    namespace = build_argument_parser(node).parse_args(list(argv))
    flags = {spec.name: getattr(namespace, _flag_dest(spec.name)) for spec in node.flags.values()}
    args = {arg.name: getattr(namespace, _arg_dest(arg.name)) for arg in node.args}
    return flags, args


class Dispatcher:
    """Resolve, gate and run commands for the shell and one-shot CLI."""

    def __init__(
        self,
        catalog: CommandCatalog,
        *,
        view: Optional[CommandView] = None,
        terminal: Optional[Terminal] = None,
        prompter: Optional[Confirmer] = None,
        config: Optional[ConfigAccessor] = None,
        clients: Optional[ClientFactory] = None,
        out: Optional[TextIO] = None,
        interactive: bool = True,
        session_id: Optional[str] = None,
        env: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.catalog = catalog
        self.view = view if view is not None else CommandView(catalog)
        self.terminal = terminal
        self.prompter = prompter
        self.config = config if config is not None else TomlConfigStore(env=env)
        self.clients = clients if clients is not None else ClientFactory(self.config, env)
        self._out = out
        self.interactive = interactive
        self.session_id = session_id
        self.help = HelpRenderer(self.view, interactive=interactive)
        self.active: Optional[ActiveInvocation] = None

    @property
    def out(self) -> TextIO:
        if self._out is not None:
            return self._out
        if self.terminal is not None:
            return self.terminal.stdout
        return sys.stdout

    # ---- resolution ----

    def _resolve(self, words: Sequence[str]) -> Tuple[Tuple[str, ...], List[str]]:
        path: Tuple[str, ...] = ()
        for word in words:
            if word.startswith("-") or not self.catalog.exists(path + (word,)):
                break
            path += (word,)
        return path, list(words[len(path) :])

    def _blocked(self, path: Tuple[str, ...], mode: Mode) -> Optional[str]:
        for depth in range(1, len(path) + 1):
            command_id = ":".join(path[:depth])
            reason = restriction_reason(command_id, mode)
            if reason is not None:
                return restriction_message(":".join(path), reason)
        return None

    def _not_found(self, attempted: Sequence[str], parent: Tuple[str, ...], mode: Mode) -> DispatchOutcome:
        display = " ".join(attempted)
        alternatives = self.view.subcommands(parent, mode)
        lines = [f"Command {display} not found."]
        if alternatives:
            scope = f"{' '.join(parent)} commands" if parent else "commands"
            lines.append(f"Available {scope}: {', '.join(alternatives)}")
        lines.append("Type 'help' to see all available commands.")
        return DispatchOutcome(DispatchStatus.NOT_FOUND, "\n".join(lines), command_id=":".join(attempted))

    # ---- dispatch ----

    async def dispatch(self, tokens: Sequence[str], mode: Mode) -> DispatchOutcome:
        words = expand_command_id(tokens)
        if not words:
            return DispatchOutcome(DispatchStatus.EMPTY)
        head = words[0]
        if head in EXIT_VERBS:
            return DispatchOutcome(DispatchStatus.EXIT)
        if self.interactive and head == PROGRAM_NAME:
            return DispatchOutcome(DispatchStatus.OK, ALREADY_INTERACTIVE)
        if head == "help":
            return self._help(expand_command_id(words[1:]), mode)

        path, rest = self._resolve(words)
        if not path:
            return self._not_found(words[:1], (), mode)
        blocked = self._blocked(path, mode)
        if blocked is not None:
            return DispatchOutcome(DispatchStatus.NOT_FOUND, blocked, command_id=":".join(path))

        node = self.catalog.find(path)
        positional = [w for w in rest if not w.startswith("-")]
        if node is None:
            if positional:
                return self._not_found(path + (positional[0],), path, mode)
            return self._help_page(path, mode)
        if any(w in HELP_FLAGS for w in rest):
            return self._help_page(path, mode)

        try:
            flags, args = parse_invocation(node, rest)
        except UsageError as exc:
            return self._usage_error(node, str(exc))
        return await self._run(node, flags, args, mode)

    def _help(self, words: Sequence[str], mode: Mode) -> DispatchOutcome:
        if not words:
            return DispatchOutcome(DispatchStatus.HELP, self.help.root(mode))
        path, rest = self._resolve(words)
        positional = [w for w in rest if not w.startswith("-")]
        if not path:
            return self._not_found(words[:1], (), mode)
        blocked = self._blocked(path, mode)
        if blocked is not None:
            return DispatchOutcome(DispatchStatus.NOT_FOUND, blocked, command_id=":".join(path))
        if positional and self.catalog.find(path) is None:
            return self._not_found(path + (positional[0],), path, mode)
        return self._help_page(path, mode)

    def _help_page(self, path: Tuple[str, ...], mode: Mode) -> DispatchOutcome:
        info = self.catalog.describe(path)
        if info is None or not self.view.is_visible(path, mode):
            return self._not_found(path, path[:-1], mode)
        return DispatchOutcome(DispatchStatus.HELP, self.help.render(info, mode), command_id=":".join(path))

    def _usage_error(self, node: CommandNode, message: str) -> DispatchOutcome:
        display = " ".join(node.path)
        first_line = message.strip().splitlines()[0] if message.strip() else "invalid usage"
        return DispatchOutcome(
            DispatchStatus.USAGE_ERROR,
            f"Error: {first_line}\nSee \"help {display}\" for more information.",
            command_id=node.command_id,
            error_code=ErrorCode.USAGE,
        )

    def _handoff(self) -> contextlib.AbstractContextManager[Any]:
        if self.terminal is None:
            return contextlib.nullcontext()
        return self.terminal.handed_off()

    async def _run(
        self, node: CommandNode, flags: Dict[str, Any], args: Dict[str, Any], mode: Mode
    ) -> DispatchOutcome:
        command_id = node.command_id
        func = get_command(command_id)
        if func is None:
            return DispatchOutcome(
                DispatchStatus.COMMAND_ERROR,
                f"Error: '{' '.join(node.path)}' is not implemented in this build",
                command_id=command_id,
                error_code=ErrorCode.UNSUPPORTED,
            )
        token = CancellationToken()
        ctx = CommandContext(
            command_id=command_id,
            flags=flags,
            args=args,
            out=self.out,
            config=self.config,
            clients=self.clients,
            token=token,
            mode=mode,
            prompter=self.prompter,
            interactive=self.interactive,
        )
        log_ctx = LogContext(command=command_id, mode=mode.key, session_id=self.session_id)
        log_event(logger, "shell.dispatch.start", log_ctx, level=logging.DEBUG)
        started = time.monotonic()
        outcome: DispatchOutcome
        with self._handoff(), suppress_console_logs(enabled=not flags.get("verbose")):
            invocation = ActiveInvocation(command_id, asyncio.ensure_future(func(ctx)), token)
            self.active = invocation
            try:
                await invocation.task
                outcome = DispatchOutcome(DispatchStatus.OK, command_id=command_id)
            except asyncio.CancelledError:
                if not invocation.cancel_requested:
                    raise
                outcome = DispatchOutcome(DispatchStatus.CANCELLED, command_id=command_id)
            except CancelledError:
                outcome = DispatchOutcome(DispatchStatus.CANCELLED, command_id=command_id)
            except CommandExit as exc:
                status = DispatchStatus.OK if exc.exit_code == 0 else DispatchStatus.COMMAND_ERROR
                outcome = DispatchOutcome(status, command_id=command_id, command_exit_code=exc.exit_code)
            except UsageError as exc:
                outcome = self._usage_error(node, str(exc))
            except Exception as exc:
                code = classify_exception(exc)
                message = exc.message if isinstance(exc, ShellError) else str(exc) or type(exc).__name__
                outcome = DispatchOutcome(
                    DispatchStatus.COMMAND_ERROR,
                    f"Error: {message}",
                    command_id=command_id,
                    error_code=code,
                )
                log_event(
                    logger,
                    "shell.dispatch.error",
                    log_ctx,
                    level=logging.WARNING,
                    code=code.value,
                    error=message,
                )
            finally:
                invocation.cleanup()
                self.active = None
        log_event(
            logger,
            "shell.dispatch.end",
            log_ctx,
            level=logging.DEBUG,
            status=outcome.status.value,
            duration_ms=int((time.monotonic() - started) * 1000),
        )
        return outcome

    def interrupt(self) -> bool:
        """Cancel the active invocation; ignored (and logged) if already cancelling."""
        invocation = self.active
        if invocation is None:
            return False
        accepted = invocation.request_cancel()
        log_event(
            logger,
            "shell.invocation.cancel" if accepted else "shell.invocation.cancel_ignored",
            LogContext(command=invocation.command_id, session_id=self.session_id),
            level=logging.DEBUG,
        )
        return accepted


__all__ = [
    "ActiveInvocation",
    "Dispatcher",
    "DispatchOutcome",
    "DispatchStatus",
    "ShellArgumentParser",
    "build_argument_parser",
    "parse_invocation",
]
