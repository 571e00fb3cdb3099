"""``accounts`` commands."""
from __future__ import annotations

from . import command
from .base import CommandContext


@command("accounts:current")
async def current(ctx: CommandContext) -> None:
    control = ctx.clients.control(access_token=ctx.flag("access-token"))
    try:
        me = await control.me()
    finally:
        await control.aclose()
    account = me.get("account", {}) or {}
    user = me.get("user", {}) or {}
    alias = ctx.config.current_account_alias()
    data = {
        "alias": alias,
        "account": {"id": account.get("id"), "name": account.get("name")},
        "user": {"email": user.get("email")},
    }
    lines = [f"Account: {account.get('name', 'unknown')} (ID: {account.get('id', 'unknown')})"]
    if user.get("email"):
        lines.append(f"User: {user['email']}")
    if alias:
        lines.append(f"Alias: {alias}")
    ctx.emit(data, "\n".join(lines))
