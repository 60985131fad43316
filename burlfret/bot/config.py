from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Dict

from ..core.errors import ConfigError


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    if v is None:
        return default
    return v


def _norm_str(raw: str, fallback: str) -> str:
    s = (raw or "").strip()
    return s if s else fallback


@dataclass(frozen=True)
class BotProfile:
    """Static identity of a bot; secrets come from <ENV_PREFIX>_* variables."""

    key: str
    name: str
    env_prefix: str
    default_prefix: str
    color: int
    emoji: str


PROFILES: Dict[str, BotProfile] = {
    "bumbles": BotProfile(
        key="bumbles",
        name="Bumbles",
        env_prefix="BUMBLES",
        default_prefix="!",
        color=0x5865F2,  # Discord blurple
        emoji="🐝",
    ),
    "discocowboy": BotProfile(
        key="discocowboy",
        name="DiscoCowboy",
        env_prefix="DISCOCOWBOY",
        default_prefix="?",
        color=0x57F287,  # Discord green
        emoji="🤠",
    ),
}

MAX_PREFIX_LENGTH = 5


@dataclass(frozen=True)
class BotConfig:
    """
    Settings for one bot instance.

    Rules:
    - Immutable once loaded
    - Fail fast on missing secrets (the process must not come up half-configured)
    """

    key: str
    name: str
    token: str
    client_id: str
    prefix: str
    color: int
    emoji: str

    @property
    def token_env(self) -> str:
        return f"{PROFILES[self.key].env_prefix}_TOKEN"

    @property
    def client_id_env(self) -> str:
        return f"{PROFILES[self.key].env_prefix}_CLIENT_ID"

    def validate(self) -> None:
        if not self.token:
            raise ConfigError(f"{self.token_env} environment variable is required")

        if not self.client_id:
            raise ConfigError(f"{self.client_id_env} environment variable is required")
        if not self.client_id.isdigit():
            raise ConfigError(f"{self.client_id_env} must be a numeric Discord application id")

        if not self.prefix or len(self.prefix) > MAX_PREFIX_LENGTH:
            raise ConfigError(f"{self.name} prefix must be 1-{MAX_PREFIX_LENGTH} characters.")
        if any(ch.isspace() for ch in self.prefix):
            raise ConfigError(f"{self.name} prefix must not contain whitespace.")


def load_bot_config(key: str) -> BotConfig:
    """
    Read one bot's configuration from the environment (call after .env is loaded).
    """
    profile = PROFILES.get((key or "").strip().lower())
    if profile is None:
        raise ConfigError(f"Unknown bot '{key}'. Known bots: {', '.join(PROFILES)}")

    p = profile.env_prefix
    return BotConfig(
        key=profile.key,
        name=profile.name,
        token=_env(f"{p}_TOKEN", "").strip(),
        client_id=_env(f"{p}_CLIENT_ID", "").strip(),
        prefix=_norm_str(_env(f"{p}_PREFIX", profile.default_prefix), profile.default_prefix),
        color=profile.color,
        emoji=profile.emoji,
    )


__all__ = ["BotProfile", "BotConfig", "PROFILES", "load_bot_config"]
