"""Shared fixtures: fake discord messages and small registries."""

from datetime import datetime, timezone
from typing import Iterable, Optional
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from burlfret.core.registry import Registry
from burlfret.core.types import CommandDescriptor

BOT_USER_ID = 999
CALLER_ID = 111


def make_message(
    content: str,
    *,
    author_id: int = CALLER_ID,
    author_is_bot: bool = False,
    in_guild: bool = True,
    permissions: Iterable[str] = (),
) -> MagicMock:
    """A stand-in for discord.Message with async reply/send/react."""
    message = MagicMock(name="message")
    message.content = content
    message.author.id = author_id
    message.author.bot = author_is_bot
    message.author.__str__.return_value = "caller#0001"
    message.author.guild_permissions = discord.Permissions(**{p: True for p in permissions})
    message.created_at = datetime(2024, 1, 1, tzinfo=timezone.utc)

    if in_guild:
        message.guild = MagicMock(name="guild")
        message.guild.id = 1
        message.guild.name = "Burl Fret"
        message.guild.owner_id = 42
    else:
        message.guild = None

    message.mentions = []
    message.reply = AsyncMock(name="reply")
    message.channel.send = AsyncMock(name="send")
    message.add_reaction = AsyncMock(name="add_reaction")
    return message


def make_descriptor(
    name: str,
    *,
    aliases: Iterable[str] = (),
    required: Iterable[str] = (),
    cooldown: Optional[float] = None,
    execute=None,
    category: str = "Test",
) -> CommandDescriptor:
    return CommandDescriptor(
        name=name,
        description=f"{name} command",
        execute=execute or AsyncMock(name=f"{name}.execute"),
        aliases=frozenset(aliases),
        required_capabilities=frozenset(required),
        cooldown_seconds=cooldown,
        category=category,
    )


class FakeClock:
    """Manually advanced clock for cooldown tests (seconds)."""

    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def registry() -> Registry:
    reg = Registry()
    reg.register(make_descriptor("ping", aliases=["pong", "latency"], cooldown=3))
    reg.register(make_descriptor("set", aliases=["setnick"], required=["manage_nicknames"]))
    reg.register(make_descriptor("free"))
    return reg.freeze()
