from __future__ import annotations

from typing import TYPE_CHECKING

from ..shared import status_embed

if TYPE_CHECKING:
    from ...core.types import InvocationContext

name = "status"
description = "Show the bot's servers, users, uptime and ping"
aliases = ["uptime", "stats"]
cooldown = 10


async def execute(ctx: "InvocationContext") -> None:
    bot = ctx.bot
    await ctx.message.reply(embed=status_embed(bot, bot.config.name, bot.uptime_s))
