"""Plugin engine for kn -- discovery, matching, help and invocation.

A plugin is an executable named ``kn-<word>[-<word>...]`` in the plugin
directory (or on ``PATH``), or an in-process :class:`InternalPlugin`. When
``kn`` meets a command it does not know, :class:`PluginManager` resolves
the longest matching plugin and runs it with the remaining arguments.

Key classes:

* :class:`Plugin` -- Abstract base shared by both plugin kinds.
* :class:`ExternalPlugin` -- Plugin backed by an executable file.
* :class:`InternalPlugin` -- Plugin backed by a Python callable.
* :class:`ExecutableLocator` -- Finds plugin files on disk.
* :class:`ProcessInvoker` -- Replaces or spawns the plugin process.
* :class:`PluginManager` -- Resolution, inventories and dispatch.

Example:
    Typical usage::

        from kncli.plugins import PluginManager

        manager = PluginManager("~/.config/kn/plugins")
        if not manager.dispatch(["hello", "world"]):
            print("unknown command")
"""

from kncli.plugins.base import Plugin, sort_plugins
from kncli.plugins.external import ExternalPlugin
from kncli.plugins.internal import InternalPlugin
from kncli.plugins.invoker import ProcessInvoker
from kncli.plugins.locator import ExecutableLocator
from kncli.plugins.manager import PluginManager, PluginMatch

__all__ = [
    "Plugin",
    "ExternalPlugin",
    "InternalPlugin",
    "ExecutableLocator",
    "ProcessInvoker",
    "PluginManager",
    "PluginMatch",
    "sort_plugins",
]
