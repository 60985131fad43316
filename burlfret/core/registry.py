from __future__ import annotations

import logging
from typing import Dict, List, Optional

from .errors import DuplicateAliasError, DuplicateNameError, RegistryFrozenError
from .types import CommandDescriptor

logger = logging.getLogger(__name__)


class Registry:
    """
    Lookup table from command name or alias to its descriptor.

    Rules:
    - Names and aliases share a single key space; no key may be claimed twice.
    - A rejected registration leaves the table untouched (first one wins).
    - Built once at startup, then frozen. The read path never mutates.
    """

    def __init__(self) -> None:
        self._by_key: Dict[str, CommandDescriptor] = {}
        self._frozen = False

    def register(self, descriptor: CommandDescriptor) -> None:
        if self._frozen:
            raise RegistryFrozenError(f"registry is frozen; cannot register '{descriptor.name}'")

        name = descriptor.name
        # Also covers a name that is already taken as another command's alias.
        if name in self._by_key:
            raise DuplicateNameError(name)

        for alias in sorted(descriptor.aliases):
            if alias == name:
                raise DuplicateAliasError(alias, name, name)
            clash = self._by_key.get(alias)
            if clash is not None:
                raise DuplicateAliasError(alias, name, clash.name)

        self._by_key[name] = descriptor
        for alias in descriptor.aliases:
            self._by_key[alias] = descriptor
            logger.debug("Registered alias: %s -> %s", alias, name)

    def lookup(self, key: str) -> Optional[CommandDescriptor]:
        return self._by_key.get(key)

    def freeze(self) -> "Registry":
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def commands(self) -> List[CommandDescriptor]:
        """Unique descriptors (aliases collapsed), sorted by name."""
        unique = {d.name: d for d in self._by_key.values()}
        return [unique[n] for n in sorted(unique)]

    def stats(self) -> Dict[str, object]:
        unique = self.commands()
        categories: Dict[str, int] = {}
        for d in unique:
            categories[d.category] = categories.get(d.category, 0) + 1
        total = len(unique)
        return {
            "total": total,
            "categories": categories,
            "aliases": len(self._by_key) - total,
        }

    def __contains__(self, key: object) -> bool:
        return key in self._by_key

    def __len__(self) -> int:
        return len(self._by_key)


__all__ = ["Registry"]
