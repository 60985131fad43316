from __future__ import annotations

import logging
from typing import Dict

import discord

# Discord JSON error codes we expect to see in normal operation.
KNOWN_API_ERRORS: Dict[int, str] = {
    10008: "Attempted to interact with unknown message",
    50001: "Bot is missing access to perform this action",
    50013: "Bot is missing required permissions",
    50035: "Invalid data sent to Discord API",
}


def log_discord_error(logger: logging.Logger, exc: BaseException, context: str = "Discord API") -> None:
    """
    Log an exception raised inside a gateway event handler.

    Known Discord API error codes are expected operational noise and are logged
    as warnings; everything else gets a full traceback.
    """
    if isinstance(exc, discord.HTTPException):
        hint = KNOWN_API_ERRORS.get(exc.code)
        if hint:
            logger.warning("%s: %s (code=%s status=%s)", context, hint, exc.code, exc.status)
            return
        logger.error(
            "Discord API error in %s: %s (code=%s status=%s)",
            context,
            exc.text or exc,
            exc.code,
            exc.status,
            exc_info=(type(exc), exc, exc.__traceback__),
        )
        return

    logger.error("Error in %s: %s", context, exc, exc_info=(type(exc), exc, exc.__traceback__))


__all__ = ["KNOWN_API_ERRORS", "log_discord_error"]
