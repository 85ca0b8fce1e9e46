"""Process invoker -- hands control to a resolved plugin executable.

:class:`ProcessInvoker` has two modes:

* **Replace** (POSIX default) -- ``os.execve`` swaps the current process
  image for the plugin. Nothing after the call runs; the plugin's exit
  status becomes ``kn``'s exit status.
* **Spawn** (Windows, or when replacement is turned off) -- the plugin runs
  as a child sharing ``kn``'s stdin/stdout/stderr. A zero exit ends ``kn``
  with status 0; any other status is raised as
  :class:`~kncli.exceptions.PluginExecutionError` carrying that status.

It also runs the description request (``<plugin> --plugin-info``), the only
place where a plugin is run with captured output and a timeout.
"""

from __future__ import annotations

import logging
import os
import platform
import subprocess
import sys
from collections.abc import Mapping, Sequence
from typing import NoReturn, Optional

from kncli.exceptions import PluginExecutionError
from kncli.exit_codes import EXIT_SUCCESS

logger = logging.getLogger(__name__)

DESCRIPTION_FLAG = "--plugin-info"
"""Argument passed to a plugin to ask for its description."""

DEFAULT_DESCRIBE_TIMEOUT = 5.0
"""Seconds to wait for a plugin to answer the description request."""


def _is_windows() -> bool:
    return platform.system() == "Windows"


def parse_description(output: str) -> Optional[str]:
    """Extract the description from the output of a description request.

    The first non-empty ``description: <text>`` line wins (the key is
    case-insensitive). Returns ``None`` if there is no such line.
    """
    for line in output.splitlines():
        key, sep, value = line.partition(":")
        if sep and key.strip().lower() == "description" and value.strip():
            return value.strip()
    return None


class ProcessInvoker:
    """Runs plugin executables.

    Args:
        replace_process: Use ``os.execve`` instead of spawning a child.
            Defaults to ``True`` where ``execve`` exists and the platform is
            not Windows.
        describe_timeout: Timeout in seconds for the description request.
    """

    def __init__(
        self,
        replace_process: Optional[bool] = None,
        describe_timeout: float = DEFAULT_DESCRIBE_TIMEOUT,
    ) -> None:
        if replace_process is None:
            replace_process = hasattr(os, "execve") and not _is_windows()
        self.replace_process = replace_process
        self.describe_timeout = describe_timeout

    def execute(
        self,
        path: str,
        argv: Sequence[str],
        env: Optional[Mapping[str, str]] = None,
    ) -> NoReturn:
        """Run the plugin at *path* and never return normally.

        Args:
            path: Resolved path of the plugin executable.
            argv: Full argument vector; ``argv[0]`` is conventionally *path*
                and the rest are forwarded untouched.
            env: Environment for the plugin. Defaults to ``os.environ``.

        Raises:
            SystemExit: With status 0 after a successful spawned run.
            PluginExecutionError: If the plugin cannot be started or exits
                non-zero in spawn mode.
        """
        environment = dict(os.environ if env is None else env)
        arguments = list(argv) or [path]
        logger.debug("Executing plugin %s with args %s", path, arguments[1:])

        if self.replace_process:
            try:
                os.execve(path, arguments, environment)
            except OSError as exc:
                raise PluginExecutionError(
                    f"Cannot execute plugin {path}: {exc.strerror or exc}", path=path
                ) from exc

        returncode = self.run(path, arguments, environment)
        if returncode == 0:
            sys.exit(EXIT_SUCCESS)
        raise PluginExecutionError(
            f"Plugin {path} exited with status {returncode}",
            path=path,
            returncode=returncode,
        )

    def run(
        self,
        path: str,
        argv: Sequence[str],
        env: Optional[Mapping[str, str]] = None,
    ) -> int:
        """Run the plugin as a child with inherited stdio and return its status.

        Raises:
            PluginExecutionError: If the executable cannot be started.
        """
        command = [path, *list(argv)[1:]]
        try:
            completed = subprocess.run(
                command,
                env=dict(os.environ if env is None else env),
                check=False,
            )
        except OSError as exc:
            raise PluginExecutionError(
                f"Cannot execute plugin {path}: {exc.strerror or exc}", path=path
            ) from exc
        return completed.returncode

    def describe(self, path: str, flag: str = DESCRIPTION_FLAG) -> Optional[str]:
        """Ask the plugin at *path* for its description.

        Returns:
            The description, or ``None`` if the plugin could not be run,
            timed out, exited non-zero, or printed no ``description:`` line.
        """
        try:
            completed = subprocess.run(
                [path, flag],
                stdin=subprocess.DEVNULL,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self.describe_timeout,
                check=False,
            )
        except subprocess.TimeoutExpired:
            logger.warning(
                "Plugin %s did not answer %s within %.1fs", path, flag, self.describe_timeout
            )
            return None
        except OSError as exc:
            logger.debug("Cannot ask plugin %s for a description: %s", path, exc)
            return None

        if completed.returncode != 0:
            logger.debug("Plugin %s exited %d on %s", path, completed.returncode, flag)
            return None
        return parse_description(completed.stdout)
