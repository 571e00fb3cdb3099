"""``status``: report whether the realtime service is up."""
from __future__ import annotations

import httpx

from ..base.errors import ShellError, classify_exception
from ..config.defaults import STATUS_PAGE_URL, STATUS_URL
from . import command
from .base import CommandContext


async def _probe(ctx: CommandContext) -> bool:
    if ctx.clients.mocked:
        return True
    try:
        async with httpx.AsyncClient(timeout=10.0) as client:
            response = await client.get(STATUS_URL)
            response.raise_for_status()
            body = response.json()
    except httpx.HTTPError as exc:
        raise ShellError(classify_exception(exc), f"Could not fetch service status: {exc}", raw=exc) from exc
    return bool(body.get("status")) if isinstance(body, dict) else False


@command("status")
async def status(ctx: CommandContext) -> None:
    up = await _probe(ctx)
    text = "Service is operational. No incidents reported." if up else "Service incident in progress."
    if ctx.flag("open"):
        text += f"\nStatus page: {STATUS_PAGE_URL}"
    ctx.emit({"status": "operational" if up else "incident", "statusPage": STATUS_PAGE_URL}, text)
