"""Plugins backed by an executable file.

File names map to command paths by dropping the ``kn-`` prefix and
splitting on ``-``. An underscore inside a segment is shown as a hyphen,
so ``kn-service-log_2`` is the plugin ``service log-2`` and is invoked as
``kn service log-2`` or ``kn service log_2``.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Optional

from kncli.plugins.base import Plugin
from kncli.plugins.invoker import ProcessInvoker
from kncli.plugins.locator import DEFAULT_PREFIXES, strip_windows_extension


def command_parts_from_filename(filename: str, prefix: str = DEFAULT_PREFIXES[0]) -> list[str]:
    """Turn a plugin file name into its identity tokens.

    Example::

        >>> command_parts_from_filename("kn-zz-test_in_dir")
        ['zz', 'test-in-dir']
    """
    stem = strip_windows_extension(filename)
    marker = f"{prefix}-"
    if stem.startswith(marker):
        stem = stem[len(marker):]
    return [part.replace("_", "-") for part in stem.split("-") if part]


class ExternalPlugin(Plugin):
    """A plugin executable found in the plugin directory or on ``PATH``.

    Args:
        path: Resolved path of the executable.
        command_parts: Identity tokens the plugin answers to.
        invoker: Runs the executable. A default
            :class:`~kncli.plugins.invoker.ProcessInvoker` is used if omitted.
    """

    def __init__(
        self,
        path: str,
        command_parts: Sequence[str],
        invoker: Optional[ProcessInvoker] = None,
    ) -> None:
        self._path = str(path)
        self._parts = list(command_parts)
        self._invoker = invoker if invoker is not None else ProcessInvoker()

    @classmethod
    def from_file(
        cls,
        path: Path,
        prefix: str = DEFAULT_PREFIXES[0],
        invoker: Optional[ProcessInvoker] = None,
    ) -> ExternalPlugin:
        """Build a plugin whose identity is derived from *path*'s file name."""
        return cls(str(path), command_parts_from_filename(path.name, prefix), invoker)

    @property
    def command_parts(self) -> list[str]:
        return list(self._parts)

    @property
    def path(self) -> str:
        return self._path

    def description(self) -> str:
        """Return the reported description, falling back to the plugin path."""
        return self._invoker.describe(self._path) or self._path

    def execute(self, args: list[str]) -> None:
        self._invoker.execute(self._path, [self._path, *args])
