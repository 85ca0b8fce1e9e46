"""Typer group class that falls back to plugins for unknown sub-commands.

Every command group of the ``kn`` application is created with
``cls=PluginAwareGroup``. The class changes two things:

* :meth:`PluginAwareGroup.resolve_command` -- when Click cannot find a
  built-in sub-command, the group path plus the remaining arguments are
  handed to :meth:`~kncli.plugins.manager.PluginManager.find_plugin`. A
  match becomes a :class:`PluginCommand`; otherwise the usual "No such
  command" error stands.
* :meth:`PluginAwareGroup.format_help` -- appends a *Plugins* section
  rendered by :func:`~kncli.plugins.help.render_plugins_help`.

Plugins only run when no built-in command matched, so a plugin can extend a
built-in group but never replace a built-in command.

The manager is taken from ``ctx.obj["plugin_manager"]`` when present,
otherwise built from the root ``--plugins-dir`` / ``--lookup-plugins``
options and ``ctx.obj["internal_plugins"]``.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import click
from typer.core import TyperGroup

from kncli.config import resolve_plugin_settings
from kncli.exceptions import KncliError
from kncli.plugins.base import Plugin
from kncli.plugins.help import command_group, render_plugins_help
from kncli.plugins.manager import PluginManager

logger = logging.getLogger(__name__)

MANAGER_KEY = "plugin_manager"
INTERNAL_PLUGINS_KEY = "internal_plugins"


def manager_for_context(ctx: click.Context) -> PluginManager:
    """Return the :class:`PluginManager` for the invocation behind *ctx*.

    Raises:
        ConfigError: If plugin settings cannot be resolved.
    """
    root = ctx.find_root()
    obj: dict[str, Any] = root.obj if isinstance(root.obj, dict) else {}
    manager = obj.get(MANAGER_KEY)
    if isinstance(manager, PluginManager):
        return manager
    settings = resolve_plugin_settings(
        root.params.get("plugins_dir"),
        root.params.get("lookup_plugins"),
    )
    return PluginManager.from_settings(settings, obj.get(INTERNAL_PLUGINS_KEY, ()))


class PluginCommand(click.Command):
    """Synthetic command that runs a resolved plugin.

    The residual arguments are fixed at construction, so Click's own parser
    never sees (or rewrites) them.
    """

    def __init__(self, plugin: Plugin, args: list[str]) -> None:
        super().__init__(
            name=plugin.name,
            add_help_option=False,
            context_settings={"ignore_unknown_options": True, "allow_extra_args": True},
        )
        self.plugin = plugin
        self.plugin_args = list(args)

    def invoke(self, ctx: click.Context) -> Any:
        logger.debug("Running plugin '%s' with %s", self.plugin.name, self.plugin_args)
        self.plugin.execute(self.plugin_args)
        return None


class PluginAwareGroup(TyperGroup):
    """A :class:`~typer.core.TyperGroup` that knows about kn plugins."""

    def resolve_command(
        self, ctx: click.Context, args: list[str]
    ) -> tuple[Optional[str], Optional[click.Command], list[str]]:
        try:
            return super().resolve_command(ctx, args)
        except click.UsageError:
            if not args or args[0].startswith("-"):
                raise
            group = command_group(ctx)
            tokens = [*group, *args]
            match = manager_for_context(ctx).find_plugin(tokens)
            if match is None or match.consumed <= len(group):
                raise
            command = PluginCommand(match.plugin, match.residual_args(tokens))
            return match.plugin.name, command, []

    def format_help(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        super().format_help(ctx, formatter)
        try:
            section = render_plugins_help(manager_for_context(ctx), ctx)
        except KncliError as exc:
            logger.debug("Skipping plugin help section: %s", exc)
            return
        if section:
            formatter.write_paragraph()
            formatter.write_heading("Plugins")
            formatter.write(section + "\n")
