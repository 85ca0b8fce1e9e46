"""Executable locator -- finds ``kn-*`` plugin files on disk.

:class:`ExecutableLocator` answers two questions:

* :meth:`~ExecutableLocator.lookup` -- is there an executable for a given
  hyphen-joined command name? Checked in the plugin directory first, then
  (optionally) on ``PATH``.
* :meth:`~ExecutableLocator.discover` -- which plugin files exist at all?
  Used to build inventories for ``kn plugin list`` and help output.

Problems with the plugin directory (unexpandable ``~``, missing or
unreadable directory) never raise. They make the directory contribute no
plugins.
"""

from __future__ import annotations

import logging
import os
import platform
import shutil
from collections.abc import Iterator, Sequence
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_PREFIXES: tuple[str, ...] = ("kn",)
"""File name prefixes that mark an executable as a kn plugin."""

WINDOWS_EXTENSIONS: tuple[str, ...] = (".bat", ".cmd", ".com", ".exe", ".ps1")
"""Extensions tried, in order, for plugin files on Windows."""


def _is_windows() -> bool:
    return platform.system() == "Windows"


def _is_file(path: Path) -> bool:
    try:
        return path.is_file()
    except OSError:
        # e.g. ENAMETOOLONG for very long token runs
        return False


def is_executable(path: Path) -> bool:
    """Return True if *path* can be run as a program on this platform."""
    if _is_windows():
        return path.suffix.lower() in WINDOWS_EXTENSIONS
    return os.access(path, os.X_OK)


def strip_windows_extension(filename: str) -> str:
    """Drop a trailing Windows executable extension; no-op elsewhere."""
    if _is_windows():
        stem, ext = os.path.splitext(filename)
        if ext.lower() in WINDOWS_EXTENSIONS:
            return stem
    return filename


class ExecutableLocator:
    """Looks up plugin executables by name.

    Args:
        plugins_dir: Plugin directory. May start with ``~``.
        lookup_in_path: Also search the directories listed in ``$PATH``.
        prefixes: File name prefixes tried in order (``"kn"`` means files
            are named ``kn-<name>``).
    """

    def __init__(
        self,
        plugins_dir: str,
        lookup_in_path: bool = False,
        prefixes: Sequence[str] = DEFAULT_PREFIXES,
    ) -> None:
        self.plugins_dir = plugins_dir
        self.lookup_in_path = lookup_in_path
        self.prefixes = tuple(prefixes)

    def expanded_plugins_dir(self) -> Optional[Path]:
        """Return the plugin directory with ``~`` expanded.

        Returns ``None`` when no directory is configured or the home
        directory cannot be determined.
        """
        if not self.plugins_dir:
            return None
        try:
            return Path(self.plugins_dir).expanduser()
        except RuntimeError as exc:
            logger.debug("Cannot expand plugin directory %s: %s", self.plugins_dir, exc)
            return None

    def lookup(self, name: str) -> Optional[str]:
        """Find the executable for the hyphen-joined command *name*.

        For each prefix, the plugin directory is checked for
        ``<prefix>-<name>`` (and, on Windows, the same name with each of
        :data:`WINDOWS_EXTENSIONS`), then ``PATH`` if enabled.

        Returns:
            The path of the first match, or ``None``. An unexpandable plugin
            directory also yields ``None``, without consulting ``PATH``.
        """
        plugins_dir = self.expanded_plugins_dir()
        if self.plugins_dir and plugins_dir is None:
            return None
        for prefix in self.prefixes:
            filename = f"{prefix}-{name}"

            if plugins_dir is not None:
                candidate = plugins_dir / filename
                if _is_file(candidate):
                    return str(candidate)
                if _is_windows():
                    for ext in WINDOWS_EXTENSIONS:
                        with_ext = plugins_dir / (filename + ext)
                        if _is_file(with_ext):
                            return str(with_ext)

            if self.lookup_in_path:
                found = shutil.which(filename)
                if found:
                    return found

        logger.debug("No plugin executable for '%s'", name)
        return None

    def search_path_directories(self) -> list[Path]:
        """Return the ``$PATH`` directories, in order and without repeats.

        An empty entry stands for the current directory, as it does for
        :func:`shutil.which`.
        """
        seen: set[str] = set()
        directories: list[Path] = []
        for entry in os.environ.get("PATH", "").split(os.pathsep):
            entry = entry or os.curdir
            if entry not in seen:
                seen.add(entry)
                directories.append(Path(entry))
        return directories

    def candidates(
        self, directory: Path, executable_only: bool = False
    ) -> Iterator[tuple[str, Path]]:
        """Yield ``(prefix, path)`` for each plugin file in *directory*.

        Entries are yielded in file name order. Directories, files without a
        ``<prefix>-`` name and files with no command words after the prefix
        are skipped; an unreadable *directory* yields nothing.
        """
        try:
            entries = sorted(directory.iterdir())
        except OSError as exc:
            logger.debug("Skipping plugin directory %s: %s", directory, exc)
            return

        for entry in entries:
            prefix = next(
                (p for p in self.prefixes if entry.name.startswith(f"{p}-")), None
            )
            if prefix is None or not _is_file(entry):
                continue
            if not strip_windows_extension(entry.name[len(prefix) + 1:]).strip("-"):
                continue
            if executable_only and not is_executable(entry):
                continue
            yield prefix, entry

    def discover(self) -> list[tuple[str, Path]]:
        """Return every plugin file visible to this locator.

        Files from the plugin directory come first (whether or not they are
        executable), followed by executables from each ``PATH`` directory when
        path lookup is enabled. The same plugin may appear more than once.
        """
        found: list[tuple[str, Path]] = []
        plugins_dir = self.expanded_plugins_dir()
        if plugins_dir is not None:
            found.extend(self.candidates(plugins_dir))
        if self.lookup_in_path:
            for directory in self.search_path_directories():
                found.extend(self.candidates(directory, executable_only=True))
        return found
