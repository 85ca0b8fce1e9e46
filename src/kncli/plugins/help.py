"""Plugin sections for contextual help output.

``kn service --help`` should mention ``kn-service-log`` even though
``log`` is not a built-in sub-command. :func:`render_plugins_help` produces
that section for any Click context::

      log-2   Tail the logs of a service
      stats   /home/me/.config/kn/plugins/kn-service-stats

An empty string means "no plugins here" and the caller omits the section.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

import click

from kncli.plugins.base import Plugin
from kncli.plugins.manager import PluginManager

logger = logging.getLogger(__name__)

NO_DESCRIPTION = "(no description available)"
"""Shown when a plugin fails to describe itself."""


def command_group(ctx: click.Context) -> list[str]:
    """Return the command path of *ctx* without the program name.

    ``kn service create`` yields ``["service", "create"]``; the root
    context yields ``[]``.
    """
    parts: list[str] = []
    while ctx.parent is not None:
        parts.append(ctx.info_name or ctx.command.name or "")
        ctx = ctx.parent
    return parts[::-1]


def _describe(plugin: Plugin) -> str:
    try:
        return plugin.description()
    except Exception as exc:
        logger.debug("Plugin '%s' failed to describe itself: %s", plugin.name, exc)
        return NO_DESCRIPTION


def format_plugins_help(plugins: Sequence[Plugin], group_size: int = 0) -> str:
    """Format one aligned line per plugin.

    Each line has the plugin's command parts beyond the first *group_size*
    joined with ``-``, padded to the widest entry, and its description.
    """
    if not plugins:
        return ""
    rows = [("-".join(plugin.command_parts[group_size:]), _describe(plugin)) for plugin in plugins]
    width = max(len(short) for short, _ in rows)
    return "\n".join(f"  {short:<{width}}  {desc}".rstrip() for short, desc in rows)


def render_plugins_help(manager: PluginManager, ctx: click.Context) -> str:
    """Return the plugin section for the command behind *ctx*.

    For a sub-command, plugins nested under its command path are listed.
    For the root, plugins not belonging to any built-in group are listed.
    """
    group = command_group(ctx)
    if group:
        plugins = manager.list_plugins_for_command_group(group)
    else:
        builtins: list[str] = []
        if isinstance(ctx.command, click.Group):
            builtins = ctx.command.list_commands(ctx)
        plugins = manager.list_top_level_plugins(builtins)
    return format_plugins_help(plugins, len(group))
