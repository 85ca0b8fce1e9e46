"""In-process plugins registered with the plugin manager.

An :class:`InternalPlugin` pairs a fixed command path with a Python
callable. Internal plugins take priority over executables with the same
name and are passed to :class:`~kncli.plugins.manager.PluginManager` when
it is constructed; there is no global registry.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence

from kncli.plugins.base import Plugin


class InternalPlugin(Plugin):
    """A plugin implemented by a Python callable.

    Args:
        command_parts: Identity tokens, e.g. ``["source", "kafka"]``.
        handler: Called with the residual arguments when the plugin runs.
        description: Text shown in help output.

    Raises:
        ValueError: If *command_parts* is empty.
    """

    def __init__(
        self,
        command_parts: Sequence[str],
        handler: Callable[[list[str]], None],
        description: str = "",
    ) -> None:
        if not command_parts:
            raise ValueError("An internal plugin needs at least one command part")
        self._parts = tuple(command_parts)
        self._handler = handler
        self._description = description

    @property
    def command_parts(self) -> list[str]:
        return list(self._parts)

    def description(self) -> str:
        return self._description

    def execute(self, args: list[str]) -> None:
        self._handler(list(args))
