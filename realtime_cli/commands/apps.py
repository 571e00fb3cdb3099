"""``apps`` commands: list, current, delete."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..base.errors import ErrorCode, ShellError
from ..sdk.interfaces import ControlClient
from . import command
from .base import CommandContext


async def _account_id(control: ControlClient) -> str:
    me = await control.me()
    account_id = (me.get("account") or {}).get("id")
    if not account_id:
        raise ShellError(ErrorCode.AUTH, "Could not determine the current account")
    return str(account_id)


def _find(apps: List[Dict[str, Any]], app_id: str) -> Optional[Dict[str, Any]]:
    return next((app for app in apps if app.get("id") == app_id), None)


@command("apps:list")
async def list_apps(ctx: CommandContext) -> None:
    control = ctx.clients.control(access_token=ctx.flag("access-token"))
    try:
        apps = await control.list_apps(await _account_id(control))
    finally:
        await control.aclose()
    current_id = ctx.config.current_app_id()

    def _human() -> str:
        if not apps:
            return "No apps found."
        lines = [f"Found {len(apps)} app(s):"]
        for app in apps:
            marker = "*" if app.get("id") == current_id else " "
            lines.append(f"{marker} {app.get('id')}  {app.get('name', '')}  ({app.get('status', 'unknown')})")
        return "\n".join(lines)

    ctx.emit({"apps": apps, "currentAppId": current_id}, _human)


@command("apps:current")
async def current(ctx: CommandContext) -> None:
    app_id = ctx.config.current_app_id()
    if not app_id:
        raise ShellError(ErrorCode.NOT_FOUND, "No app selected. Use 'apps switch' to select one")
    name = ctx.config.app_name(app_id)
    key = ctx.config.api_key(app_id)
    key_name = key.split(":", 1)[0] if key else None
    lines = [f"App: {name or 'unnamed'} ({app_id})"]
    if key_name:
        lines.append(f"API key: {key_name}")
    ctx.emit({"app": {"id": app_id, "name": name}, "key": key_name}, "\n".join(lines))


@command("apps:delete")
async def delete(ctx: CommandContext) -> None:
    app_id = ctx.args.get("id") or ctx.flag("app") or ctx.config.current_app_id()
    if not app_id:
        raise ShellError(ErrorCode.VALIDATION, "No app ID provided and no app selected")
    control = ctx.clients.control(access_token=ctx.flag("access-token"))
    try:
        apps = await control.list_apps(await _account_id(control))
        app = _find(apps, app_id)
        if app is None:
            raise ShellError(ErrorCode.NOT_FOUND, f"App {app_id} not found")
        if not ctx.flag("force"):
            confirmed = await ctx.confirm(
                f"Are you sure you want to delete app \"{app.get('name', app_id)}\" ({app_id})?"
            )
            if not confirmed:
                ctx.emit({"success": False, "appId": app_id, "cancelled": True}, "Deletion cancelled.")
                return
        await control.delete_app(app_id)
    finally:
        await control.aclose()
    ctx.emit({"success": True, "appId": app_id}, f"App {app_id} deleted.")
