"""Exception hierarchy for kncli.

All exceptions inherit from :class:`KncliError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`kncli.exit_codes`.
:func:`kncli.app.main` catches ``KncliError`` and exits with that code;
unexpected exceptions produce a crash log and exit with
:data:`EXIT_GENERIC_FAILURE`.

"Plugin not found" is not an exception: lookups return ``None`` and the
host decides whether to report an unknown command.

Subclass hierarchy::

    KncliError (exit 1)
    +-- ConfigError              (exit 1)
    +-- PluginError              (exit 10)
        +-- PluginExecutionError (exit 10, or the plugin's own status)
"""

from kncli.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_PLUGIN_ERROR,
)


class KncliError(Exception):
    """Base exception for all kncli errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class ConfigError(KncliError):
    """Raised for configuration problems (invalid JSON, bad environment values)."""

    exit_code = EXIT_GENERIC_FAILURE


class PluginError(KncliError):
    """Raised when a plugin cannot describe itself or cannot be run."""

    exit_code = EXIT_PLUGIN_ERROR


class PluginExecutionError(PluginError):
    """Raised when a resolved plugin fails to launch or exits non-zero.

    When the plugin ran and returned a non-zero status, ``returncode`` holds
    that status and ``exit_code`` mirrors it so the host exits exactly as the
    plugin did. A plugin killed by a signal maps to ``128 + signal``.

    Args:
        message: Human-readable error description.
        path: Filesystem path of the plugin executable.
        returncode: The plugin's exit status, or ``None`` if it never started.
    """

    def __init__(self, message: str, path: str = "", returncode: int | None = None):
        exit_code = None
        if returncode is not None:
            exit_code = returncode if returncode > 0 else 128 - returncode
        super().__init__(message, exit_code)
        self.path = path
        self.returncode = returncode
