from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

logger = logging.getLogger(__name__)

CooldownKey = Tuple[int, str]


@dataclass(frozen=True)
class CooldownDecision:
    allowed: bool
    remaining_seconds: float = 0.0


ALLOWED = CooldownDecision(allowed=True)


class CooldownTracker:
    """
    Per (caller, command) last-use timestamps.

    Pruning is a soft bound, not a TTL: entries are only swept once the table
    grows past PRUNE_HIGH_WATER, and then only those older than RETENTION_S.

    check() has no await inside, so on the event loop the read-modify-write is
    atomic per invocation.
    """

    PRUNE_HIGH_WATER = 100
    RETENTION_S = 300.0

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._last_used: Dict[CooldownKey, float] = {}

    def check(
        self,
        caller_id: int,
        command_name: str,
        cooldown_seconds: Optional[float],
        now: Optional[float] = None,
    ) -> CooldownDecision:
        if cooldown_seconds is None:
            return ALLOWED

        if now is None:
            now = self._clock()

        key = (caller_id, command_name)
        last = self._last_used.get(key)
        if last is not None and (now - last) < float(cooldown_seconds):
            remaining = math.ceil(last + float(cooldown_seconds) - now)
            return CooldownDecision(allowed=False, remaining_seconds=float(max(1, remaining)))

        self._last_used[key] = now
        self._prune(now)
        return ALLOWED

    def _prune(self, now: float) -> None:
        if len(self._last_used) <= self.PRUNE_HIGH_WATER:
            return

        before = len(self._last_used)
        cutoff = now - self.RETENTION_S
        self._last_used = {k: ts for k, ts in self._last_used.items() if ts >= cutoff}
        logger.debug("cooldown table pruned: %s -> %s entries", before, len(self._last_used))

    def __len__(self) -> int:
        return len(self._last_used)


__all__ = ["CooldownDecision", "CooldownTracker", "ALLOWED"]
