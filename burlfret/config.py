from __future__ import annotations

from typing import Any, List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .core.errors import ConfigError

KNOWN_BOTS = ("bumbles", "discocowboy")
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def _split_names(raw: Any) -> List[str]:
    """
    Normalize the BOTS selection from env.

    Supports:
      - comma-separated string: "bumbles, discocowboy"
      - empty -> every known bot
    """
    items = [p.strip().lower() for p in str(raw or "").split(",")]
    items = [x for x in items if x]
    return items or list(KNOWN_BOTS)


class Settings(BaseSettings):
    """
    Process-wide settings (logging + health server + which bots to run).

    Per-bot secrets live in burlfret.bot.config so each bot validates its own.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    app_name: str = Field(default="Burl-Fret Discord Bots", alias="APP_NAME")
    app_version: str = Field(default="2.0.0", alias="APP_VERSION")

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_dir: str = Field(default="./logs", alias="LOG_DIR")
    log_to_file: bool = Field(default=True, alias="LOG_TO_FILE")

    # Health server runtime (uvicorn)
    health_enabled: bool = Field(default=True, alias="HEALTH_ENABLED")
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=3000, alias="PORT")
    health_memory_limit_mb: int = Field(default=450, alias="HEALTH_MEMORY_LIMIT_MB")
    health_max_ping_ms: int = Field(default=1000, alias="HEALTH_MAX_PING_MS")

    # Which bots this process runs
    # Comma-separated; kept as a plain string so env parsing never tries JSON.
    bots_raw: str = Field(default="", alias="BOTS")

    # -------------------------
    # Validators / normalizers
    # -------------------------

    @field_validator("log_level", mode="before")
    @classmethod
    def _norm_log_level(cls, v: Any) -> str:
        s = ("" if v is None else str(v)).strip().upper()
        return s or "INFO"

    @field_validator("host", mode="before")
    @classmethod
    def _norm_host(cls, v: Any) -> str:
        s = ("" if v is None else str(v)).strip()
        return s or "0.0.0.0"

    # -------------------------
    # Derived helpers
    # -------------------------

    @property
    def bots(self) -> List[str]:
        return _split_names(self.bots_raw)

    def validate_runtime(self) -> None:
        """
        Strict validation for boot safety. Raises ConfigError.
        """
        if self.log_level not in LOG_LEVELS:
            raise ConfigError(f"LOG_LEVEL must be one of: {', '.join(LOG_LEVELS)}")
        if not (0 < self.port < 65536):
            raise ConfigError("PORT must be between 1 and 65535.")
        if self.health_memory_limit_mb <= 0:
            raise ConfigError("HEALTH_MEMORY_LIMIT_MB must be > 0.")
        unknown = [b for b in self.bots if b not in KNOWN_BOTS]
        if unknown:
            raise ConfigError(f"BOTS contains unknown bot(s): {', '.join(unknown)} (known: {', '.join(KNOWN_BOTS)})")


settings = Settings()

__all__ = ["Settings", "settings", "KNOWN_BOTS", "LOG_LEVELS"]
