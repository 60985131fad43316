"""
Discord integration package.

Design goals:
- Keep the command pipeline (burlfret.core) free of discord imports.
- PrefixBot only wires gateway events to the dispatcher.
"""

from .client import PrefixBot
from .config import BotConfig, load_bot_config
from .runner import run_bots

__all__ = [
    "BotConfig",
    "PrefixBot",
    "load_bot_config",
    "run_bots",
]
