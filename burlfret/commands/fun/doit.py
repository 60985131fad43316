from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord

from ..shared import COLOR_GREEN, custom_embed

if TYPE_CHECKING:
    from ...core.types import InvocationContext

logger = logging.getLogger(__name__)

name = "doit"
description = "Do it for Burl Fret!"
aliases = ["doitforburl", "burl"]
cooldown = 5

CLIP_URL = "https://cdn.discordapp.com/attachments/764971562205184002/767324313987579914/video0.mov"
REACTION = "🎸"


async def execute(ctx: "InvocationContext") -> None:
    message = ctx.message
    embed = custom_embed(
        "🎸 Do it for Burl Fret! 🎸",
        "*Do it for her...*",
        COLOR_GREEN,
        image=CLIP_URL,
        footer="Remember why you started",
    )

    try:
        await message.channel.send(embed=embed)
    except discord.HTTPException:
        # Embeds may be blocked in this channel; plain text still works.
        logger.warning("doit: embed send failed, falling back to text", exc_info=True)
        await message.channel.send(f"Do it for Burl Fret! {CLIP_URL}")

    try:
        await message.add_reaction(REACTION)
    except discord.HTTPException:
        logger.debug("doit: could not add reaction", exc_info=True)
