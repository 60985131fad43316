from __future__ import annotations

import asyncio
import logging
import signal
from typing import Any, Dict, List, Optional, Sequence

import uvicorn
from dotenv import find_dotenv, load_dotenv

from ..commands import load_commands
from ..config import Settings
from ..health import BotMonitor, create_app
from ..logs import configure_logging
from .client import PrefixBot
from .config import BotConfig, load_bot_config

logger = logging.getLogger(__name__)


def load_configs(settings: Settings, keys: Optional[Sequence[str]] = None) -> List[BotConfig]:
    """
    Load and validate every selected bot's config. Raises ConfigError on the first bad one.
    """
    configs: List[BotConfig] = []
    for key in keys or settings.bots:
        cfg = load_bot_config(key)
        cfg.validate()
        configs.append(cfg)
    return configs


def _log_task_exception(loop: asyncio.AbstractEventLoop, context: Dict[str, Any]) -> None:
    exc = context.get("exception")
    logger.error(
        "Unhandled asyncio error: %s",
        context.get("message", "unknown"),
        exc_info=(type(exc), exc, exc.__traceback__) if exc is not None else None,
    )


def _install_stop_signals(loop: asyncio.AbstractEventLoop, stop: asyncio.Event) -> None:
    for sig in (signal.SIGTERM, signal.SIGINT):
        try:
            loop.add_signal_handler(sig, stop.set)
        except (NotImplementedError, RuntimeError):
            # Windows event loops have no add_signal_handler.
            pass


async def serve(settings: Settings, configs: Sequence[BotConfig]) -> None:
    """
    Run every configured bot (and the health server) on one event loop until
    any of them stops or a stop signal arrives.
    """
    loop = asyncio.get_running_loop()
    loop.set_exception_handler(_log_task_exception)

    registry = load_commands()
    stats = registry.stats()
    logger.info("Loaded %s commands (%s aliases)", stats["total"], stats["aliases"])

    monitor = BotMonitor()
    bots: List[PrefixBot] = []
    for cfg in configs:
        logger.info("%s Starting %s bot (prefix=%r)", cfg.emoji, cfg.name, cfg.prefix)
        bot = PrefixBot(cfg, registry)
        monitor.register(cfg.name, bot)
        bots.append(bot)

    stop = asyncio.Event()
    _install_stop_signals(loop, stop)

    tasks = [asyncio.create_task(b.start(b.config.token), name=f"bot:{b.config.key}") for b in bots]

    server: Optional[uvicorn.Server] = None
    if settings.health_enabled:
        server = uvicorn.Server(
            uvicorn.Config(
                create_app(monitor, settings),
                host=settings.host,
                port=settings.port,
                log_config=None,
                log_level=settings.log_level.lower(),
            )
        )
        tasks.append(asyncio.create_task(server.serve(), name="health"))
        logger.info("Health check server listening on %s:%s", settings.host, settings.port)

    tasks.append(asyncio.create_task(stop.wait(), name="stop-signal"))

    try:
        done, _ = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
        for t in done:
            if t.cancelled():
                continue
            exc = t.exception()
            if exc is not None:
                logger.error("Task %s failed: %s", t.get_name(), exc, exc_info=(type(exc), exc, exc.__traceback__))
                raise exc
            logger.info("Task %s finished; shutting down", t.get_name())
    finally:
        logger.info("Shutting down %s bot(s)", len(bots))
        if server is not None:
            server.should_exit = True
        for b in bots:
            if not b.is_closed():
                await b.close()
        for t in tasks:
            if not t.done():
                t.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)


def run_bots(keys: Optional[Sequence[str]] = None) -> None:
    """
    Process entrypoint. Configuration is validated before anything connects.
    """
    load_dotenv(find_dotenv(usecwd=True))
    settings = Settings()

    tag = keys[0] if keys and len(keys) == 1 else "bots"
    configure_logging(tag, settings.log_level, settings.log_dir, settings.log_to_file)

    settings.validate_runtime()
    configs = load_configs(settings, keys)

    asyncio.run(serve(settings, configs))


__all__ = ["load_configs", "serve", "run_bots"]
