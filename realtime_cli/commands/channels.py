"""``channels`` commands: publish, subscribe, history, list."""
from __future__ import annotations

import asyncio
import json
from datetime import datetime, timezone
from typing import Any, List, Optional, Tuple

from ..sdk.interfaces import ChannelMessage, RealtimeClient
from . import command
from .base import CommandContext

_COUNT_PLACEHOLDER = "{{.Count}}"


def _client(ctx: CommandContext) -> RealtimeClient:
    return ctx.clients.realtime(api_key=ctx.flag("api-key"), client_id=ctx.flag("client-id"))


def _format_time(timestamp: Optional[int]) -> str:
    if timestamp is None:
        return "-"
    return datetime.fromtimestamp(timestamp / 1000, tz=timezone.utc).isoformat(timespec="milliseconds")


def _format_data(data: Any) -> str:
    if isinstance(data, (dict, list)):
        return json.dumps(data, ensure_ascii=False)
    return "" if data is None else str(data)


def _format_message(message: ChannelMessage) -> str:
    event = f" event={message.name}" if message.name else ""
    return f"[{_format_time(message.timestamp)}] {message.channel}{event}: {_format_data(message.data)}"


def _parse_payload(raw: str, name_flag: Optional[str]) -> Tuple[Optional[str], Any]:
    """Split a message argument into event name and data.

    A JSON object with ``name``/``data`` keys supplies both; any other JSON
    value is the data; text that is not JSON is sent as-is.
    """
    try:
        parsed = json.loads(raw)
    except ValueError:
        return name_flag, raw
    if isinstance(parsed, dict) and ("data" in parsed or "name" in parsed):
        return name_flag or parsed.get("name"), parsed.get("data")
    return name_flag, parsed


@command("channels:publish")
async def publish(ctx: CommandContext) -> None:
    channel_name: str = ctx.args["channel"]
    count = max(1, ctx.int_flag("count", 1))
    delay_ms = max(0, ctx.int_flag("delay", 40))
    client = _client(ctx)
    await client.connect()
    published = 0
    try:
        channel = client.channels.get(channel_name)
        for index in range(1, count + 1):
            ctx.token.raise_if_cancelled()
            text = ctx.args["message"].replace(_COUNT_PLACEHOLDER, str(index))
            name, data = _parse_payload(text, ctx.flag("name"))
            await channel.publish(name, data)
            published += 1
            if index < count and delay_ms:
                await asyncio.sleep(delay_ms / 1000)
    finally:
        await client.close()
    summary = {"success": True, "channel": channel_name, "published": published}
    if count == 1:
        human = f"Message published to channel '{channel_name}'."
    else:
        human = f"{published}/{count} messages published to channel '{channel_name}'."
    ctx.emit(summary, human)


@command("channels:subscribe")
async def subscribe(ctx: CommandContext) -> None:
    names: List[str] = list(ctx.args["channels"])
    rewind = max(0, ctx.int_flag("rewind", 0))
    duration = ctx.flag("duration")
    client = _client(ctx)
    await client.connect()

    def _on_message(message: ChannelMessage) -> None:
        ctx.emit(message.to_dict(), lambda: _format_message(message))

    channels = [client.channels.get(name) for name in names]
    try:
        for channel in channels:
            if rewind:
                for message in reversed(await channel.history(limit=rewind)):
                    _on_message(message)
            await channel.subscribe(_on_message)
        if not ctx.json_mode:
            ctx.print(f"Subscribed to {', '.join(names)}. Listening for messages; press Ctrl+C to stop.")
        if duration is not None:
            try:
                await asyncio.wait_for(ctx.token.wait(), timeout=float(duration))
            except asyncio.TimeoutError:
                if not ctx.json_mode:
                    ctx.print(f"Duration of {duration}s elapsed.")
        else:
            await ctx.token.wait()
    finally:
        for channel in channels:
            await channel.unsubscribe()
        await client.close()
        if not ctx.json_mode:
            ctx.print("Unsubscribed.")


@command("channels:history")
async def history(ctx: CommandContext) -> None:
    channel_name: str = ctx.args["channel"]
    limit = ctx.int_flag("limit", 50)
    direction = ctx.flag("direction", "backwards")
    client = _client(ctx)
    await client.connect()
    try:
        messages = await client.channels.get(channel_name).history(limit=limit, direction=direction)
    finally:
        await client.close()

    def _human() -> str:
        if not messages:
            return f"No messages found in channel '{channel_name}'."
        lines = [f"Found {len(messages)} message(s) in channel '{channel_name}':"]
        lines.extend(_format_message(m) for m in messages)
        return "\n".join(lines)

    ctx.emit([m.to_dict() for m in messages], _human)


@command("channels:list")
async def list_channels(ctx: CommandContext) -> None:
    prefix = ctx.flag("prefix")
    limit = ctx.int_flag("limit", 100)
    client = _client(ctx)
    await client.connect()
    try:
        names = await client.list_channels(prefix=prefix, limit=limit)
    finally:
        await client.close()

    def _human() -> str:
        if not names:
            return "No active channels found."
        return "\n".join([f"Found {len(names)} active channel(s):", *(f"  {n}" for n in names)])

    ctx.emit({"channels": names, "total": len(names)}, _human)
