"""Plugin commands -- inspect the plugins kn can see.

Provides the ``kn plugin`` sub-command group. ``kn plugin list`` prints
every discovered plugin executable; with ``--verbose`` it also reports
plugins that can never run:

* files in the plugin directory without the executable bit,
* plugins hidden by an earlier plugin with the same name,
* plugins whose name is already taken by a built-in command.
"""

from __future__ import annotations

from pathlib import Path

import click
import typer

from kncli.output import info, print_table, suggest, warning
from kncli.plugins.base import Plugin
from kncli.plugins.group import PluginAwareGroup, manager_for_context
from kncli.plugins.locator import is_executable


plugin_app = typer.Typer(cls=PluginAwareGroup, no_args_is_help=True)
"""Typer application for the ``plugin`` command group."""


def _builtin_command(root_ctx: click.Context, parts: list[str]) -> bool:
    """Return True if *parts* names an existing built-in command."""
    command: click.Command = root_ctx.command
    for part in parts:
        if not isinstance(command, click.Group):
            return False
        sub = command.get_command(root_ctx, part)
        if sub is None:
            return False
        command = sub
    return bool(parts)


def find_plugin_problems(plugins: list[Plugin], root_ctx: click.Context) -> list[str]:
    """Describe why some of *plugins* cannot be used.

    *plugins* must be in resolution order: the first plugin with a given
    name is the one that runs.
    """
    problems: list[str] = []
    first_by_name: dict[str, Plugin] = {}
    for plugin in plugins:
        if not is_executable(Path(plugin.path)):
            problems.append(f"{plugin.path} is not executable")
        earlier = first_by_name.setdefault(plugin.name, plugin)
        if earlier is not plugin:
            problems.append(f"{plugin.path} is shadowed by {earlier.path}")
        if _builtin_command(root_ctx, plugin.command_parts):
            problems.append(
                f"{plugin.path} cannot be used: '{plugin.name}' is a built-in command"
            )
    return problems


@plugin_app.command("list")
def plugin_list(
    ctx: typer.Context,
    verbose: bool = typer.Option(
        False, "--verbose", help="Also report plugins that cannot be used."
    ),
) -> None:
    """List plugins found in the plugin directory and on PATH.

    The plugin directory and PATH lookup follow ``--plugins-dir`` and
    ``--lookup-plugins`` on the root command.

    Example::

        kn plugin list
        kn --lookup-plugins plugin list --verbose
        kn --json plugin list
    """
    manager = manager_for_context(ctx)
    plugins = manager.list_plugins()

    if not plugins:
        info("No plugins found.")
        hint = f"Add kn-* executables to {manager.plugins_dir}"
        if not manager.lookup_in_path:
            hint += " or enable --lookup-plugins"
        suggest(hint)
        return

    print_table(
        ["NAME", "PATH"],
        [[plugin.name, plugin.path] for plugin in plugins],
        title="Plugins",
    )

    if verbose:
        problems = find_plugin_problems(plugins, ctx.find_root())
        for problem in problems:
            warning(problem)
        if problems:
            raise typer.Exit(code=1)
