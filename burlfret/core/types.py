from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, FrozenSet, Optional, Tuple

# Opaque permission identifier. The bots use discord.py Permissions attribute
# names ("manage_nicknames"), but nothing in core depends on that.
Capability = str

Execute = Callable[["InvocationContext"], Awaitable[Any]]


@dataclass(frozen=True)
class CommandDescriptor:
    """
    One command's identity, guards and behavior.

    The same instance is stored under the canonical name and every alias.
    """

    name: str
    description: str
    execute: Execute
    aliases: FrozenSet[str] = frozenset()
    required_capabilities: FrozenSet[Capability] = frozenset()
    cooldown_seconds: Optional[float] = None
    category: str = "Uncategorized"

    @property
    def keys(self) -> Tuple[str, ...]:
        return (self.name, *sorted(self.aliases))


@dataclass(frozen=True)
class InvocationContext:
    """Built by the dispatcher for a single inbound message."""

    caller_id: int
    caller_capabilities: FrozenSet[Capability]
    is_private_channel: bool
    raw_args: Tuple[str, ...]
    command_key: str
    descriptor: CommandDescriptor
    # Platform objects the command bodies reply through (discord.Message / PrefixBot).
    message: Any = field(default=None, compare=False, repr=False)
    bot: Any = field(default=None, compare=False, repr=False)


__all__ = ["Capability", "Execute", "CommandDescriptor", "InvocationContext"]
