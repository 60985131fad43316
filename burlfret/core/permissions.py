from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from typing import AbstractSet, FrozenSet, Iterable, Optional

from .types import Capability


class Rejection(str, enum.Enum):
    NO_GUILD_CONTEXT = "no_guild_context"
    MISSING_CAPABILITIES = "missing_capabilities"


@dataclass(frozen=True)
class PermissionDecision:
    allowed: bool
    reason: Optional[Rejection] = None
    missing: FrozenSet[Capability] = frozenset()


class PermissionGate:
    """
    Capability check for a single invocation.

    Capability-gated commands only exist inside a guild; in a private channel
    they are rejected no matter what the caller holds.
    """

    def check(
        self,
        required: AbstractSet[Capability],
        caller_capabilities: AbstractSet[Capability],
        is_private_channel: bool,
    ) -> PermissionDecision:
        if not required:
            return PermissionDecision(allowed=True)

        if is_private_channel:
            return PermissionDecision(allowed=False, reason=Rejection.NO_GUILD_CONTEXT)

        missing = frozenset(required) - frozenset(caller_capabilities)
        if missing:
            return PermissionDecision(allowed=False, reason=Rejection.MISSING_CAPABILITIES, missing=missing)

        return PermissionDecision(allowed=True)


_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def normalize_capability(raw: str) -> Capability:
    """
    "ManageNicknames" / "MANAGE_NICKNAMES" / "manage nicknames" -> "manage_nicknames".
    """
    s = (raw or "").strip()
    s = _CAMEL_BOUNDARY.sub("_", s)
    s = re.sub(r"[\s\-]+", "_", s)
    return s.lower()


def normalize_capabilities(raw: Iterable[str]) -> FrozenSet[Capability]:
    return frozenset(c for c in (normalize_capability(r) for r in raw) if c)


def humanize_capability(cap: Capability) -> str:
    """'manage_nicknames' -> 'Manage Nicknames'"""
    return " ".join(part.capitalize() for part in cap.split("_") if part)


__all__ = [
    "Rejection",
    "PermissionDecision",
    "PermissionGate",
    "normalize_capability",
    "normalize_capabilities",
    "humanize_capability",
]
