from __future__ import annotations

from typing import TYPE_CHECKING, List

from ...core.permissions import humanize_capability
from ..shared import COLOR_BLURPLE, custom_embed, group_by_category, truncate

if TYPE_CHECKING:
    from ...core.registry import Registry
    from ...core.types import CommandDescriptor, InvocationContext

name = "help"
description = "Display a list of all available commands or info about a specific command"
aliases = ["commands", "h"]
cooldown = 5


def _plural(n: int, word: str, suffix: str = "s") -> str:
    return f"{n} {word}{'' if n == 1 else suffix}"


def _command_line(d: "CommandDescriptor") -> str:
    alias_info = f" ({', '.join(sorted(d.aliases))})" if d.aliases else ""
    return f"`{d.name}`{alias_info} - {d.description}"


def command_detail(d: "CommandDescriptor"):
    fields: List[dict] = []
    if d.aliases:
        fields.append({"name": "Aliases", "value": ", ".join(f"`{a}`" for a in sorted(d.aliases))})
    if d.required_capabilities:
        fields.append(
            {
                "name": "Required Permissions",
                "value": ", ".join(f"`{humanize_capability(c)}`" for c in sorted(d.required_capabilities)),
            }
        )
    if d.cooldown_seconds:
        fields.append({"name": "Cooldown", "value": f"{d.cooldown_seconds:g} seconds", "inline": True})
    if d.category:
        fields.append({"name": "Category", "value": d.category, "inline": True})

    return custom_embed(f"📖 Command: {d.name}", d.description, COLOR_BLURPLE, fields=fields)


def command_list(registry: "Registry", prefix: str):
    descriptors = registry.commands()
    embed = custom_embed(
        "📖 Command List",
        f"Use `{prefix}help <command>` for more info about a specific command.\n\u200b",
        COLOR_BLURPLE,
    )
    for category, cmds in group_by_category(descriptors).items():
        value = "\n".join(_command_line(d) for d in cmds)
        embed.add_field(name=category, value=truncate(value) or "No commands", inline=False)

    stats = registry.stats()
    embed.set_footer(
        text=f"Total: {_plural(stats['total'], 'command')}, {_plural(stats['aliases'], 'alias', 'es')}"
    )
    return embed


async def execute(ctx: "InvocationContext") -> None:
    message = ctx.message
    registry = getattr(ctx.bot, "registry", None)
    if registry is None or not len(registry):
        await message.reply("No commands are currently available.")
        return

    if ctx.raw_args:
        key = ctx.raw_args[0].lower()
        d = registry.lookup(key)
        if d is None:
            await message.reply(f"❌ Command `{key}` not found!")
            return
        await message.reply(embed=command_detail(d))
        return

    prefix = getattr(getattr(ctx.bot, "config", None), "prefix", "")
    await message.reply(embed=command_list(registry, prefix))
