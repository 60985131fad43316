from __future__ import annotations

import enum
import logging
import re
from typing import Any, Callable, FrozenSet, Optional, Tuple

from .cooldowns import CooldownTracker
from .permissions import PermissionDecision, PermissionGate, Rejection, humanize_capability
from .registry import Registry
from .types import Capability, InvocationContext

logger = logging.getLogger(__name__)

GENERIC_FAILURE_REPLY = "❌ An error occurred while executing that command!"
NO_GUILD_REPLY = "❌ This command can only be used in a server!"

_WHITESPACE = re.compile(r"\s+")


class DispatchOutcome(str, enum.Enum):
    IGNORED = "ignored"
    REJECTED_PERMISSION = "rejected_permission"
    REJECTED_COOLDOWN = "rejected_cooldown"
    EXECUTED = "executed"
    FAILED = "failed"


def member_capabilities(message: Any) -> FrozenSet[Capability]:
    """
    Capability tokens held by the message author in the current guild.

    discord.Permissions iterates as (name, enabled) pairs; DMs have no guild
    permissions, so the set is empty there.
    """
    if getattr(message, "guild", None) is None:
        return frozenset()
    perms = getattr(getattr(message, "author", None), "guild_permissions", None)
    if perms is None:
        return frozenset()
    return frozenset(name for name, enabled in perms if enabled)


def parse_command(content: str, prefix: str) -> Optional[Tuple[str, Tuple[str, ...]]]:
    """
    "!Ping  a b" -> ("ping", ("a", "b")). None when there is no command token.
    """
    if not prefix or not content or not content.startswith(prefix):
        return None
    body = content[len(prefix):].strip()
    if not body:
        return None
    tokens = _WHITESPACE.split(body)
    return tokens[0].lower(), tuple(tokens[1:])


class Dispatcher:
    """
    Prefix-command pipeline for one bot.

    Stages (terminal on first failure):
      ignore -> parse -> resolve -> permission gate -> cooldown gate -> execute

    The permission gate always runs before the cooldown gate so that a caller
    without permission never burns their cooldown.
    """

    def __init__(
        self,
        registry: Registry,
        prefix: str,
        *,
        cooldowns: Optional[CooldownTracker] = None,
        gate: Optional[PermissionGate] = None,
        capabilities_of: Callable[[Any], FrozenSet[Capability]] = member_capabilities,
        bot: Any = None,
    ) -> None:
        self.registry = registry
        self.prefix = prefix
        self.cooldowns = cooldowns if cooldowns is not None else CooldownTracker()
        self.gate = gate if gate is not None else PermissionGate()
        self.capabilities_of = capabilities_of
        self.bot = bot

    async def handle(self, message: Any, *, self_id: Optional[int] = None) -> DispatchOutcome:
        author = message.author
        if getattr(author, "bot", False) or (self_id is not None and author.id == self_id):
            return DispatchOutcome.IGNORED

        parsed = parse_command(message.content or "", self.prefix)
        if parsed is None:
            return DispatchOutcome.IGNORED
        command_key, args = parsed

        descriptor = self.registry.lookup(command_key)
        if descriptor is None:
            return DispatchOutcome.IGNORED

        is_private = message.guild is None
        capabilities: FrozenSet[Capability] = frozenset()

        if descriptor.required_capabilities:
            capabilities = self.capabilities_of(message)
            decision = self.gate.check(descriptor.required_capabilities, capabilities, is_private)
            if not decision.allowed:
                logger.info(
                    "Permission denied: command=%s user=%s reason=%s missing=%s",
                    descriptor.name,
                    author.id,
                    decision.reason.value if decision.reason else None,
                    sorted(decision.missing),
                )
                await self._reply(message, _permission_reply(decision))
                return DispatchOutcome.REJECTED_PERMISSION

        if descriptor.cooldown_seconds is not None:
            cooldown = self.cooldowns.check(author.id, descriptor.name, descriptor.cooldown_seconds)
            if not cooldown.allowed:
                await self._reply(message, _cooldown_reply(descriptor.name, cooldown.remaining_seconds))
                return DispatchOutcome.REJECTED_COOLDOWN

        ctx = InvocationContext(
            caller_id=author.id,
            caller_capabilities=capabilities,
            is_private_channel=is_private,
            raw_args=args,
            command_key=command_key,
            descriptor=descriptor,
            message=message,
            bot=self.bot,
        )

        guild_name = getattr(message.guild, "name", None)
        logger.info("Executing command: %s (user=%s guild=%s)", descriptor.name, author.id, guild_name)
        try:
            await descriptor.execute(ctx)
        except Exception:
            logger.exception(
                "Error executing command: %s (user=%s guild=%s args=%s)",
                descriptor.name,
                author.id,
                guild_name,
                list(args),
            )
            await self._reply(message, GENERIC_FAILURE_REPLY)
            return DispatchOutcome.FAILED

        return DispatchOutcome.EXECUTED

    async def _reply(self, message: Any, content: str) -> None:
        # One attempt only; failing to report a failure must not fail again.
        try:
            await message.reply(content)
        except Exception:
            logger.warning("Could not send reply in channel=%s", getattr(message.channel, "id", None), exc_info=True)


def _permission_reply(decision: PermissionDecision) -> str:
    if decision.reason is Rejection.NO_GUILD_CONTEXT:
        return NO_GUILD_REPLY
    names = ", ".join(f"**{humanize_capability(c)}**" for c in sorted(decision.missing))
    return f"❌ You need the following permission(s) to use this command: {names}"


def _cooldown_reply(command_name: str, remaining_seconds: float) -> str:
    n = int(remaining_seconds)
    unit = "second" if n == 1 else "seconds"
    return f"⏳ Please wait {n} more {unit} before reusing the `{command_name}` command."


__all__ = [
    "DispatchOutcome",
    "Dispatcher",
    "GENERIC_FAILURE_REPLY",
    "NO_GUILD_REPLY",
    "member_capabilities",
    "parse_command",
]
