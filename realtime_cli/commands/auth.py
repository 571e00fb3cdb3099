"""``auth keys`` commands."""
from __future__ import annotations

from ..base.errors import ErrorCode, ShellError
from . import command
from .base import CommandContext


@command("auth:keys:current")
async def keys_current(ctx: CommandContext) -> None:
    app_id = ctx.flag("app") or ctx.config.current_app_id()
    key = ctx.flag("api-key") or ctx.config.api_key(app_id)
    if not key:
        target = f" for app {app_id}" if app_id else ""
        raise ShellError(ErrorCode.NOT_FOUND, f"No API key configured{target}")
    key_name = key.split(":", 1)[0]
    ctx.emit(
        {"app": app_id, "key": {"name": key_name, "value": key}},
        "\n".join(
            [
                f"API key: {key_name}",
                f"Key value: {key}",
                *([f"App: {app_id}"] if app_id else []),
            ]
        ),
    )
