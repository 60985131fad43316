from __future__ import annotations

import math
import platform
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Sequence

import discord

from ..core.types import CommandDescriptor

# NOTE:
# Shared embed builders for every command module. Keep colors/prefixes here so
# both bots render the same.

COLOR_SUCCESS = 0x00FF00
COLOR_ERROR = 0xFF0000
COLOR_BLURPLE = 0x5865F2
COLOR_GREEN = 0x57F287

# Discord hard limit for embed field values.
FIELD_VALUE_LIMIT = 1024


def _now() -> datetime:
    return datetime.now(timezone.utc)


def truncate(s: str, limit: int = FIELD_VALUE_LIMIT) -> str:
    if not s:
        return ""
    if len(s) <= limit:
        return s
    return s[: max(0, limit - 3)] + "..."


def _decorate(
    embed: discord.Embed,
    *,
    fields: Optional[Sequence[Dict[str, Any]]] = None,
    footer: Optional[str] = None,
    thumbnail: Optional[str] = None,
    image: Optional[str] = None,
    author: Optional[str] = None,
) -> discord.Embed:
    for f in fields or ():
        embed.add_field(name=f["name"], value=truncate(str(f["value"])), inline=bool(f.get("inline", False)))
    if footer:
        embed.set_footer(text=footer)
    if thumbnail:
        embed.set_thumbnail(url=thumbnail)
    if image:
        embed.set_image(url=image)
    if author:
        embed.set_author(name=author)
    return embed


def custom_embed(title: str, description: str = "", color: int = COLOR_BLURPLE, **options: Any) -> discord.Embed:
    embed = discord.Embed(title=title, description=description or None, color=color, timestamp=_now())
    return _decorate(embed, **options)


def success_embed(description: str, title: str = "Success", **options: Any) -> discord.Embed:
    return custom_embed(f"✅ {title}", description, COLOR_SUCCESS, **options)


def error_embed(description: str, title: str = "Error", **options: Any) -> discord.Embed:
    return custom_embed(f"❌ {title}", description, COLOR_ERROR, **options)


def group_by_category(descriptors: Iterable[CommandDescriptor]) -> Dict[str, List[CommandDescriptor]]:
    groups: Dict[str, List[CommandDescriptor]] = {}
    for d in descriptors:
        groups.setdefault(d.category or "Uncategorized", []).append(d)
    for cmds in groups.values():
        cmds.sort(key=lambda d: d.name)
    return dict(sorted(groups.items()))


def format_uptime(seconds: float) -> str:
    total = int(max(0, seconds))
    hours, rem = divmod(total, 3600)
    minutes, secs = divmod(rem, 60)
    return f"{hours}h {minutes}m {secs}s"


def websocket_latency_ms(client: Any) -> Optional[int]:
    # discord.Client.latency is NaN until the first heartbeat.
    latency = getattr(client, "latency", None)
    if not isinstance(latency, (int, float)) or not math.isfinite(latency):
        return None
    return round(latency * 1000)


def latency_quality(latency_ms: float) -> str:
    if latency_ms < 100:
        return "🟢 Excellent"
    if latency_ms < 200:
        return "🟡 Good"
    if latency_ms < 400:
        return "🟠 Fair"
    return "🔴 Poor"


def status_embed(client: discord.Client, bot_name: str, uptime_s: float) -> discord.Embed:
    ping = websocket_latency_ms(client)
    return custom_embed(
        f"🤖 {bot_name} Status",
        color=COLOR_SUCCESS,
        fields=[
            {"name": "Servers", "value": str(len(client.guilds)), "inline": True},
            {"name": "Users", "value": str(len(client.users)), "inline": True},
            {"name": "Uptime", "value": format_uptime(uptime_s), "inline": True},
            {"name": "Ping", "value": f"{ping}ms" if ping is not None else "n/a", "inline": True},
            {"name": "Python", "value": platform.python_version(), "inline": True},
            {"name": "discord.py", "value": discord.__version__, "inline": True},
        ],
    )


__all__ = [
    "COLOR_SUCCESS",
    "COLOR_ERROR",
    "COLOR_BLURPLE",
    "COLOR_GREEN",
    "truncate",
    "custom_embed",
    "success_embed",
    "error_embed",
    "group_by_category",
    "format_uptime",
    "websocket_latency_ms",
    "latency_quality",
    "status_embed",
]
