from __future__ import annotations

import logging
import sys
import time
from typing import Any, Optional

import discord

from ..core.cooldowns import CooldownTracker
from ..core.dispatcher import Dispatcher
from ..core.registry import Registry
from .config import BotConfig
from .errors import log_discord_error

logger = logging.getLogger(__name__)


class PrefixBot(discord.Client):
    """
    Text-prefix command bot.

    Notes:
    - Every bot instance shares the same frozen Registry but owns its own
      CooldownTracker, so a cooldown on Bumbles never blocks DiscoCowboy.
    - All command handling goes through self.dispatcher; this class only wires
      gateway events.
    """

    def __init__(
        self,
        config: BotConfig,
        registry: Registry,
        *,
        cooldowns: Optional[CooldownTracker] = None,
    ) -> None:
        intents = discord.Intents.default()
        intents.guilds = True
        intents.messages = True
        # Required for prefix commands
        intents.message_content = True
        # Required for nickname changes (mention -> Member resolution)
        intents.members = True

        super().__init__(intents=intents)

        self.config = config
        self.registry = registry
        self.dispatcher = Dispatcher(
            registry,
            config.prefix,
            cooldowns=cooldowns if cooldowns is not None else CooldownTracker(),
            bot=self,
        )
        self.started_at = time.monotonic()

    @property
    def uptime_s(self) -> float:
        return time.monotonic() - self.started_at

    async def on_ready(self) -> None:
        logger.info(
            "%s %s is online as %s (id=%s, guilds=%s, prefix=%r, commands=%s)",
            self.config.emoji,
            self.config.name,
            str(self.user),
            getattr(self.user, "id", None),
            len(self.guilds),
            self.config.prefix,
            len(self.registry.commands()),
        )

    async def on_message(self, message: discord.Message) -> None:
        self_id = self.user.id if self.user is not None else None
        await self.dispatcher.handle(message, self_id=self_id)

    async def on_disconnect(self) -> None:
        logger.warning("%s disconnected from gateway", self.config.name)

    async def on_resumed(self) -> None:
        logger.info("%s resumed gateway session", self.config.name)

    async def on_error(self, event_method: str, /, *args: Any, **kwargs: Any) -> None:
        # Called from inside the failing handler's except block.
        exc = sys.exc_info()[1]
        if exc is None:
            logger.error("%s: unknown error in %s", self.config.name, event_method)
            return
        log_discord_error(logger, exc, context=f"{self.config.name}.{event_method}")


__all__ = ["PrefixBot"]
