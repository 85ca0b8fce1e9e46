"""Abstract base class shared by every kind of kn plugin.

A plugin is anything that can stand in for a ``kn`` sub-command. Two
implementations exist:

* :class:`~kncli.plugins.external.ExternalPlugin` -- an executable file
  named ``kn-<word>[-<word>...]`` found in the plugin directory or on
  ``PATH``.
* :class:`~kncli.plugins.internal.InternalPlugin` -- a Python callable
  registered with the :class:`~kncli.plugins.manager.PluginManager` at
  construction time.

Matching, listing and help rendering only use the members defined here, so
they work the same for both kinds.

Example:
    Minimal in-process plugin::

        class Hello(Plugin):
            @property
            def command_parts(self) -> list[str]:
                return ["hello"]

            def description(self) -> str:
                return "Say hello"

            def execute(self, args: list[str]) -> None:
                print("hello", *args)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable


class Plugin(ABC):
    """Base class for all kn plugins.

    Subclasses implement :attr:`command_parts`, :meth:`description` and
    :meth:`execute`. :attr:`name` and :attr:`stem` are derived from the
    command parts.
    """

    @property
    @abstractmethod
    def command_parts(self) -> list[str]:
        """Return the identity tokens, e.g. ``["service", "log"]``."""
        ...

    @property
    def name(self) -> str:
        """Space-joined identity, e.g. ``"service log"``. Used for sorting."""
        return " ".join(self.command_parts)

    @property
    def stem(self) -> str:
        """Hyphen-joined identity, e.g. ``"service-log"``."""
        return "-".join(self.command_parts)

    @property
    def path(self) -> str:
        """Filesystem path of the executable, or ``""`` for in-process plugins."""
        return ""

    @abstractmethod
    def description(self) -> str:
        """Return a one-line description for help output.

        Raises:
            PluginError: If no description can be produced. Callers that
                render help substitute a placeholder.
        """
        ...

    @abstractmethod
    def execute(self, args: list[str]) -> None:
        """Run the plugin with the residual command-line arguments.

        External plugins do not return on success (the process is replaced
        or exits with the plugin's status).

        Raises:
            PluginExecutionError: If the plugin cannot be run or fails.
        """
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


def sort_plugins(plugins: Iterable[Plugin]) -> list[Plugin]:
    """Return *plugins* as a new list ordered by :attr:`Plugin.name`.

    The ordering is plain case-sensitive string comparison and the sort is
    stable, so plugins with equal names keep their discovery order.
    """
    return sorted(plugins, key=lambda plugin: plugin.name)
