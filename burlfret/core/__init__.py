"""
Command dispatch and guard pipeline.

Nothing in here imports discord; the platform objects are only touched through
the attributes the dispatcher documents (author, content, guild, reply).
"""

from .cooldowns import CooldownDecision, CooldownTracker
from .dispatcher import DispatchOutcome, Dispatcher, parse_command
from .errors import (
    BurlFretError,
    CommandValidationError,
    ConfigError,
    DuplicateAliasError,
    DuplicateNameError,
    RegistryError,
    RegistryFrozenError,
)
from .permissions import PermissionDecision, PermissionGate, Rejection
from .registry import Registry
from .types import CommandDescriptor, InvocationContext

__all__ = [
    "BurlFretError",
    "CommandDescriptor",
    "CommandValidationError",
    "ConfigError",
    "CooldownDecision",
    "CooldownTracker",
    "DispatchOutcome",
    "Dispatcher",
    "DuplicateAliasError",
    "DuplicateNameError",
    "InvocationContext",
    "PermissionDecision",
    "PermissionGate",
    "Registry",
    "RegistryError",
    "RegistryFrozenError",
    "Rejection",
    "parse_command",
]
