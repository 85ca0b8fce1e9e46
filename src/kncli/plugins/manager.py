"""Plugin manager -- resolution, inventories and dispatch.

:class:`PluginManager` is the entry point the rest of kn uses:

* :meth:`~PluginManager.find_plugin` resolves command-line tokens to a
  plugin by greedy longest-prefix matching. In-process plugins are tried
  first at every length, then executables via the
  :class:`~kncli.plugins.locator.ExecutableLocator`.
* :meth:`~PluginManager.list_plugins` and
  :meth:`~PluginManager.list_plugins_for_command_group` build sorted
  inventories for ``kn plugin list`` and help output.
* :meth:`~PluginManager.dispatch` finds and runs a plugin in one step.

Nothing is cached. Every call looks at the filesystem again, since plugins
may come and go between invocations of a short-lived CLI.

Example:
    Typical usage::

        manager = PluginManager("~/.config/kn/plugins", lookup_in_path=True)
        match = manager.find_plugin(["service", "log", "--follow"])
        if match is not None:
            match.plugin.execute(match.residual_args(["service", "log", "--follow"]))
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Optional

from kncli.models import DEFAULT_PLUGINS_DIR, PluginsConfig
from kncli.plugins.base import Plugin, sort_plugins
from kncli.plugins.external import ExternalPlugin
from kncli.plugins.invoker import ProcessInvoker
from kncli.plugins.locator import DEFAULT_PREFIXES, ExecutableLocator

logger = logging.getLogger(__name__)


def _is_flag(token: str) -> bool:
    return token.startswith("-")


@dataclass(frozen=True)
class PluginMatch:
    """Result of a successful :meth:`PluginManager.find_plugin` call.

    Attributes:
        plugin: The resolved plugin.
        consumed: Number of command words covered by the plugin's name.
    """

    plugin: Plugin
    consumed: int

    def residual_args(self, tokens: Sequence[str]) -> list[str]:
        """Return the original *tokens* after the first ``consumed`` positions.

        The cut is positional: a flag given between command words shifts
        the cut, it is not skipped over. Tokens are returned verbatim.
        """
        return list(tokens[self.consumed:])


class PluginManager:
    """Finds, lists and runs kn plugins.

    Args:
        plugins_dir: Directory holding ``kn-*`` executables. May start
            with ``~``.
        lookup_in_path: Also look for plugins on ``$PATH``.
        internal_plugins: In-process plugins. They are consulted before
            executables and are never modified by the manager.
        prefixes: File name prefixes that identify plugin executables.
        invoker: Process invoker shared by every external plugin the manager
            creates.
    """

    def __init__(
        self,
        plugins_dir: str = DEFAULT_PLUGINS_DIR,
        lookup_in_path: bool = False,
        internal_plugins: Iterable[Plugin] = (),
        prefixes: Sequence[str] = DEFAULT_PREFIXES,
        invoker: Optional[ProcessInvoker] = None,
    ) -> None:
        self._locator = ExecutableLocator(plugins_dir, lookup_in_path, prefixes)
        self._internal: tuple[Plugin, ...] = tuple(internal_plugins)
        self._invoker = invoker if invoker is not None else ProcessInvoker()

    @classmethod
    def from_settings(
        cls,
        settings: PluginsConfig,
        internal_plugins: Iterable[Plugin] = (),
        invoker: Optional[ProcessInvoker] = None,
    ) -> PluginManager:
        """Create a manager from resolved :class:`~kncli.models.PluginsConfig`."""
        return cls(
            settings.directory,
            settings.path_lookup,
            internal_plugins=internal_plugins,
            invoker=invoker,
        )

    @property
    def plugins_dir(self) -> str:
        return self._locator.plugins_dir

    @property
    def lookup_in_path(self) -> bool:
        return self._locator.lookup_in_path

    @property
    def internal_plugins(self) -> tuple[Plugin, ...]:
        return self._internal

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def find_plugin(self, tokens: Sequence[str]) -> Optional[PluginMatch]:
        """Resolve command-line *tokens* to the most specific plugin.

        Flag-like tokens are ignored. For the remaining words, prefixes are
        tried from longest to shortest: first against every in-process
        plugin, then against executables named after the prefix (with ``-``
        inside a word treated as ``_``).

        Args:
            tokens: Command-line tokens that did not match a built-in command.

        Returns:
            A :class:`PluginMatch`, or ``None`` when no plugin matches. Not
            finding a plugin is not an error.
        """
        words = [token for token in tokens if not _is_flag(token)]
        if not words:
            return None
        return self._find_internal(words) or self._find_external(words)

    def _find_internal(self, words: list[str]) -> Optional[PluginMatch]:
        for length in range(len(words), 0, -1):
            candidate = words[:length]
            for plugin in self._internal:
                if plugin.command_parts == candidate:
                    logger.debug("Resolved internal plugin '%s'", plugin.name)
                    return PluginMatch(plugin, length)
        return None

    def _find_external(self, words: list[str]) -> Optional[PluginMatch]:
        for length in range(len(words), 0, -1):
            name = "-".join(word.replace("-", "_") for word in words[:length])
            path = self._locator.lookup(name)
            if path is not None:
                logger.debug("Resolved plugin executable %s", path)
                plugin = ExternalPlugin(path, words[:length], self._invoker)
                return PluginMatch(plugin, length)
        return None

    def dispatch(self, tokens: Sequence[str]) -> bool:
        """Find a plugin for *tokens* and run it with the residual arguments.

        Returns:
            ``False`` if no plugin matched. ``True`` after an in-process
            plugin returned; executables do not return on success.

        Raises:
            PluginExecutionError: If the plugin fails to launch or exits
                non-zero.
        """
        match = self.find_plugin(tokens)
        if match is None:
            return False
        match.plugin.execute(match.residual_args(tokens))
        return True

    # ------------------------------------------------------------------
    # Inventories
    # ------------------------------------------------------------------

    def list_plugins(self) -> list[Plugin]:
        """List every plugin executable, sorted by name.

        Covers the plugin directory and, when enabled, ``$PATH``. A plugin
        present in several places is listed once per location. In-process
        plugins are not included.
        """
        plugins = [
            ExternalPlugin.from_file(path, prefix, self._invoker)
            for prefix, path in self._locator.discover()
        ]
        return sort_plugins(plugins)

    def list_plugins_for_command_group(self, group: Sequence[str]) -> list[Plugin]:
        """List plugins nested under the command *group*, sorted by name.

        A plugin qualifies when its command path starts with *group* and is
        strictly longer, so ``service`` itself is not listed for
        ``["service"]``. In-process plugins are included.

        Returns:
            The matching plugins; empty when *group* is empty.
        """
        group = list(group)
        if not group:
            return []
        size = len(group)
        return sort_plugins(
            plugin
            for plugin in self._all_plugins()
            if len(plugin.command_parts) > size and plugin.command_parts[:size] == group
        )

    def list_top_level_plugins(self, builtin_commands: Iterable[str] = ()) -> list[Plugin]:
        """List plugins that do not extend one of the *builtin_commands*.

        Used for the root help screen, where plugins nested under a built-in
        group are already shown in that group's help.
        """
        builtins = set(builtin_commands)
        return sort_plugins(
            plugin
            for plugin in self._all_plugins()
            if plugin.command_parts and plugin.command_parts[0] not in builtins
        )

    def _all_plugins(self) -> list[Plugin]:
        return [*self.list_plugins(), *self._internal]
