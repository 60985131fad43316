from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

import discord

from ..shared import error_embed, success_embed

if TYPE_CHECKING:
    from ...core.types import InvocationContext

logger = logging.getLogger(__name__)

name = "set"
description = "Change a user's nickname"
aliases = ["setnick", "nickname"]
permissions = ["ManageNicknames"]

# Discord limit.
MAX_NICKNAME_LENGTH = 32

USAGE = "Usage: `set @user <new nickname>`"


def _first_mentioned_member(message: discord.Message) -> Optional[discord.Member]:
    for m in message.mentions or []:
        if isinstance(m, discord.Member):
            return m
    return None


async def _fail(message: discord.Message, text: str) -> None:
    await message.reply(embed=error_embed(text))


async def execute(ctx: "InvocationContext") -> None:
    """
    set @user <nickname>

    Guards run in order and stop at the first failure:
      guild -> bot permission -> mention -> nickname present -> length
      -> not the owner -> role hierarchy
    """
    message: discord.Message = ctx.message
    guild = message.guild
    if guild is None:
        await _fail(message, "This command can only be used in a server!")
        return

    me = guild.me
    if me is None or not me.guild_permissions.manage_nicknames:
        await _fail(message, "I don't have permission to manage nicknames!")
        return

    target = _first_mentioned_member(message)
    if target is None:
        await _fail(message, f"You need to mention a user!\n\n{USAGE}")
        return

    nickname = " ".join(ctx.raw_args[1:]).strip()
    if not nickname:
        await _fail(message, f"You need to provide a new nickname!\n\n{USAGE}")
        return

    if len(nickname) > MAX_NICKNAME_LENGTH:
        await _fail(message, f"Nickname must be {MAX_NICKNAME_LENGTH} characters or less!")
        return

    if target.id == guild.owner_id:
        await _fail(message, "I cannot change the server owner's nickname!")
        return

    if me.top_role.position <= target.top_role.position:
        await _fail(message, "I cannot change the nickname of someone with a higher or equal role!")
        return

    try:
        await target.edit(nick=nickname, reason=f"set command by {message.author} ({message.author.id})")
    except discord.HTTPException:
        logger.warning(
            "set: nickname change failed (user=%s target=%s guild=%s)",
            message.author.id,
            target.id,
            guild.id,
            exc_info=True,
        )
        await _fail(
            message,
            "Failed to change nickname. Please make sure I have the proper permissions "
            "and the user's role is lower than mine!",
        )
        return

    await message.reply(embed=success_embed(f"Successfully changed **{target}**'s nickname to **{nickname}**"))
