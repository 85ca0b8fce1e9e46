"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to an error category and is referenced by the matching
:class:`~kncli.exceptions.KncliError` subclass. A plugin that exits with
its own non-zero status propagates that status unchanged instead.

Example::

    $ kn broken-plugin
    $ echo $?
    10  # EXIT_PLUGIN_ERROR -- the matched plugin could not be launched
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_PLUGIN_ERROR = 10
"""A plugin could not be launched."""

EXIT_INTERRUPTED = 130
"""The user pressed Ctrl-C."""
