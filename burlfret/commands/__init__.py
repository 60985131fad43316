from __future__ import annotations

import importlib
import inspect
import logging
import numbers
from types import ModuleType
from typing import Dict, Optional, Sequence, Tuple

from ..core.errors import CommandValidationError, RegistryError
from ..core.permissions import normalize_capabilities
from ..core.registry import Registry
from ..core.types import CommandDescriptor

logger = logging.getLogger(__name__)

# Single list of command modules shared by every bot, as "<category>.<module>".
# Add new commands here; the category becomes the help-page heading.
MODULES: Sequence[str] = (
    "fun.doit",
    "utility.help",
    "utility.ping",
    "utility.set",
    "utility.status",
)

__all__ = ["MODULES", "load_commands", "descriptor_from_module"]


def _import_module(mod_path: str) -> Tuple[Optional[ModuleType], Optional[str]]:
    """
    Import a command module safely.

    Returns: (module_or_none, error_string_or_none)
    """
    try:
        return importlib.import_module(mod_path), None
    except ModuleNotFoundError as e:
        missing_name = getattr(e, "name", "") or ""
        if missing_name and (missing_name == mod_path or missing_name.startswith(mod_path + ".")):
            return None, f"missing module: {missing_name}"
        return None, f"import error (dependency missing): {missing_name or str(e)}"
    except Exception as e:
        return None, f"import error: {e}"


def _category_for(module_name: str) -> str:
    parts = module_name.split(".")
    if len(parts) < 2 or not parts[0]:
        return "Uncategorized"
    return parts[0][:1].upper() + parts[0][1:]


def descriptor_from_module(mod: ModuleType, category: str = "Uncategorized") -> CommandDescriptor:
    """
    Build a descriptor from a command module's public attributes.

    Required: name, description, async execute(ctx).
    Optional: aliases, permissions, cooldown. An invalid optional attribute is
    logged and ignored rather than rejecting the whole command.
    """
    label = getattr(mod, "__name__", repr(mod))

    name = getattr(mod, "name", None)
    if not isinstance(name, str) or not name.strip():
        raise CommandValidationError(f"{label} is missing 'name' property")

    description = getattr(mod, "description", None)
    if not isinstance(description, str) or not description.strip():
        raise CommandValidationError(f"{label} is missing 'description' property")

    execute = getattr(mod, "execute", None)
    if not callable(execute):
        raise CommandValidationError(f"{label} is missing 'execute' function")
    if not inspect.iscoroutinefunction(execute):
        raise CommandValidationError(f"{label} 'execute' must be an async function")

    aliases = getattr(mod, "aliases", ())
    if not isinstance(aliases, (list, tuple, set, frozenset)) or not all(isinstance(a, str) for a in aliases):
        logger.warning("Command %s has invalid 'aliases' property (must be a list of strings)", label)
        aliases = ()

    permissions = getattr(mod, "permissions", ())
    if not isinstance(permissions, (list, tuple, set, frozenset)) or not all(isinstance(p, str) for p in permissions):
        logger.warning("Command %s has invalid 'permissions' property (must be a list of strings)", label)
        permissions = ()

    cooldown = getattr(mod, "cooldown", None)
    if cooldown is not None:
        if isinstance(cooldown, bool) or not isinstance(cooldown, numbers.Real) or cooldown < 0:
            logger.warning("Command %s has invalid 'cooldown' property (must be a non-negative number)", label)
            cooldown = None
        else:
            cooldown = float(cooldown)

    return CommandDescriptor(
        name=name.strip().lower(),
        description=description.strip(),
        execute=execute,
        aliases=frozenset(a.strip().lower() for a in aliases if a.strip()),
        required_capabilities=normalize_capabilities(permissions),
        cooldown_seconds=cooldown,
        category=category,
    )


def load_commands(
    modules: Sequence[str] = MODULES,
    *,
    package: str = __name__,
    registry: Optional[Registry] = None,
) -> Registry:
    """
    Import every command module, register the valid ones and freeze the registry.

    A module that fails to import, validate or register is logged and skipped;
    the rest still load.
    """
    registry = registry if registry is not None else Registry()
    results: Dict[str, str] = {}

    for name in modules:
        mod_path = f"{package}.{name}" if package else name
        mod, err = _import_module(mod_path)
        if mod is None:
            logger.error("Failed to load command %s: %s", mod_path, err)
            results[name] = f"not loaded ({err})"
            continue

        try:
            descriptor = descriptor_from_module(mod, _category_for(name))
            registry.register(descriptor)
        except CommandValidationError as e:
            logger.error("Command %s rejected: %s", mod_path, e)
            results[name] = f"invalid ({e})"
            continue
        except RegistryError as e:
            logger.error("Command %s not registered: %s", mod_path, e)
            results[name] = f"register failed ({e})"
            continue

        logger.debug("Loaded command: %s from %s", descriptor.name, mod_path)
        results[name] = "registered"

    summary = ", ".join(f"{k}={results.get(k, 'unknown')}" for k in modules)
    logger.info("command registration summary: %s", summary)

    loaded = sum(1 for v in results.values() if v == "registered")
    logger.info("Command loading complete: %s commands loaded, %s errors", loaded, len(results) - loaded)
    return registry.freeze()
