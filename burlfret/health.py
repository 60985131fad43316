from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import psutil
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .commands.shared import format_uptime, websocket_latency_ms
from .config import Settings, settings as default_settings

logger = logging.getLogger(__name__)


def _iso_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _memory_mb() -> Dict[str, int]:
    info = psutil.Process().memory_info()
    return {"rss": round(info.rss / 1024 / 1024), "vms": round(info.vms / 1024 / 1024)}


class BotMonitor:
    """
    Tracks the discord clients served by this process.

    Readiness is read live from each client (is_ready / is_closed), so nothing
    has to hook into the client's ready event.
    """

    def __init__(self) -> None:
        self._clients: Dict[str, Any] = {}
        self.started_at = time.monotonic()

    def register(self, name: str, client: Any) -> None:
        self._clients[name] = client
        logger.info("Bot %s registered with health check server", name)

    def __len__(self) -> int:
        return len(self._clients)

    @property
    def names(self) -> list:
        return list(self._clients)

    @property
    def uptime_s(self) -> int:
        return int(time.monotonic() - self.started_at)

    def statuses(self) -> Dict[str, Dict[str, Any]]:
        out: Dict[str, Dict[str, Any]] = {}
        for name, client in self._clients.items():
            ready = bool(client.is_ready())
            out[name] = {
                "ready": ready,
                "online": ready and not client.is_closed(),
                "guilds": len(client.guilds) if ready else 0,
                "users": len(client.users) if ready else 0,
                "ping": websocket_latency_ms(client) if ready else None,
            }
        return out


def create_app(monitor: BotMonitor, settings: Optional[Settings] = None) -> FastAPI:
    cfg = settings or default_settings

    app = FastAPI(title=cfg.app_name, version=cfg.app_version)

    # --- Error envelope ---
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        if exc.status_code == 404:
            return JSONResponse(status_code=404, content={"error": "Not found"})
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error("Health server error on %s: %s", request.url.path, exc, exc_info=exc)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    # --- Meta ---
    @app.get("/", tags=["meta"])
    def root() -> Dict[str, Any]:
        return {
            "service": cfg.app_name,
            "bots": monitor.names,
            "version": cfg.app_version,
            "endpoints": {"health": "/health", "ready": "/ready", "status": "/status"},
        }

    @app.get("/health", tags=["meta"])
    def health() -> JSONResponse:
        uptime = monitor.uptime_s
        if not len(monitor):
            logger.warning("Health check failed: No bots registered")
            return JSONResponse(
                status_code=503,
                content={
                    "status": "unhealthy",
                    "reason": "No bots registered",
                    "uptime": uptime,
                    "timestamp": _iso_now(),
                },
            )

        bots = monitor.statuses()
        memory_used = _memory_mb()["rss"]
        limit = int(cfg.health_memory_limit_mb)

        bots_ok = all(s["ready"] and s["online"] for s in bots.values())
        memory_ok = memory_used < limit
        latency_ok = all(s["ping"] is None or s["ping"] < cfg.health_max_ping_ms for s in bots.values())
        healthy = bots_ok and memory_ok and latency_ok

        body = {
            "status": "healthy" if healthy else "unhealthy",
            "uptime": uptime,
            "timestamp": _iso_now(),
            "checks": {
                "bots": "pass" if bots_ok else "fail",
                "memory": "pass" if memory_ok else "fail",
                "latency": "pass" if latency_ok else "fail",
            },
            "bots": bots,
            "memory": {"used": memory_used, "limit": limit, "unit": "MB"},
        }

        if healthy:
            logger.debug("Health check passed (uptime=%s)", uptime)
            return JSONResponse(status_code=200, content=body)

        logger.warning("Health check failed (bots=%s memory=%s latency=%s)", bots_ok, memory_ok, latency_ok)
        return JSONResponse(status_code=503, content=body)

    @app.get("/ready", tags=["meta"])
    def ready() -> JSONResponse:
        bots = monitor.statuses()
        if bots and all(s["ready"] for s in bots.values()):
            return JSONResponse(status_code=200, content={"status": "ready", "bots": bots})
        return JSONResponse(status_code=503, content={"status": "not ready", "bots": bots})

    @app.get("/status", tags=["meta"])
    def status() -> Dict[str, Any]:
        uptime = monitor.uptime_s
        memory = _memory_mb()
        return {
            "service": cfg.app_name,
            "version": cfg.app_version,
            "uptime": {"seconds": uptime, "formatted": format_uptime(uptime)},
            "memory": {"used": memory["rss"], "total": memory["vms"], "unit": "MB"},
            "bots": monitor.statuses(),
            "timestamp": _iso_now(),
        }

    return app


__all__ = ["BotMonitor", "create_app"]
