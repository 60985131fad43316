from __future__ import annotations


class BurlFretError(Exception):
    """Base class for errors raised by the bots."""


class ConfigError(BurlFretError, RuntimeError):
    """Startup configuration is missing or invalid. Fatal."""


class RegistryError(BurlFretError):
    pass


class DuplicateNameError(RegistryError):
    def __init__(self, name: str) -> None:
        super().__init__(f"command name already registered: {name}")
        self.name = name


class DuplicateAliasError(RegistryError):
    def __init__(self, alias: str, command: str, existing: str) -> None:
        super().__init__(f"alias '{alias}' of command '{command}' collides with '{existing}'")
        self.alias = alias
        self.command = command
        self.existing = existing


class RegistryFrozenError(RegistryError):
    pass


class CommandValidationError(BurlFretError):
    """A command module does not expose a usable descriptor surface."""


__all__ = [
    "BurlFretError",
    "ConfigError",
    "RegistryError",
    "DuplicateNameError",
    "DuplicateAliasError",
    "RegistryFrozenError",
    "CommandValidationError",
]
