from __future__ import annotations

from typing import TYPE_CHECKING

from ..shared import COLOR_BLURPLE, custom_embed, latency_quality, websocket_latency_ms

if TYPE_CHECKING:
    from ...core.types import InvocationContext

name = "ping"
description = "Check the bot's latency and API response time"
aliases = ["latency", "pong"]
cooldown = 3


async def execute(ctx: "InvocationContext") -> None:
    message = ctx.message
    sent = await message.reply("🏓 Pinging...")

    round_trip_ms = round((sent.created_at - message.created_at).total_seconds() * 1000)
    ws_ms = websocket_latency_ms(ctx.bot)

    embed = custom_embed(
        "🏓 Pong!",
        color=COLOR_BLURPLE,
        fields=[
            {
                "name": "Round Trip Latency",
                "value": f"{round_trip_ms}ms\n{latency_quality(round_trip_ms)}",
                "inline": True,
            },
            {
                "name": "WebSocket Latency",
                "value": f"{ws_ms}ms\n{latency_quality(ws_ms)}" if ws_ms is not None else "n/a",
                "inline": True,
            },
        ],
        footer="Lower is better",
    )

    await sent.edit(content=None, embed=embed)
