"""Typer application and CLI entry point for kn.

This module wires the top-level Typer application, registers built-in
sub-commands (``plugin``), and declares the global options that control
plugin discovery (``--plugins-dir``, ``--lookup-plugins``).

Every group uses :class:`~kncli.plugins.group.PluginAwareGroup`, so an
unknown sub-command is looked up as a plugin before Click reports it.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs signal handlers, runs the Typer app, and
maps :class:`~kncli.exceptions.KncliError` to exit codes. Unhandled
exceptions are written to a crash log under the data directory.

See Also:
    :mod:`kncli.config`: Plugin settings precedence.
    :mod:`kncli.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import logging
import signal
import sys
import traceback
from collections.abc import Iterable
from datetime import datetime
from typing import Any, Optional

import typer

from kncli import __version__
from kncli.exit_codes import EXIT_GENERIC_FAILURE, EXIT_INTERRUPTED
from kncli.plugins.base import Plugin
from kncli.plugins.group import INTERNAL_PLUGINS_KEY, PluginAwareGroup


app = typer.Typer(
    name="kn",
    cls=PluginAwareGroup,
    help="Knative client with support for kn-* plugins.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

# ------------------------------------------------------------------ #
# Built-in commands
# ------------------------------------------------------------------ #

from kncli.commands.plugin import plugin_app  # noqa: E402

app.add_typer(plugin_app, name="plugin", help="Manage and inspect kn plugins.")

DEFAULT_INTERNAL_PLUGINS: tuple[Plugin, ...] = ()
"""In-process plugins shipped with kn. Passed to every invocation by :func:`main`."""


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"kn {__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    """Send ``kncli`` log records to stderr, at DEBUG level when verbose."""
    logging.basicConfig(
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
        level=logging.WARNING,
    )
    logging.getLogger("kncli").setLevel(logging.DEBUG if verbose else logging.WARNING)


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    plugins_dir: Optional[str] = typer.Option(
        None,
        "--plugins-dir",
        help="Directory holding kn-* plugins (default: ~/.config/kn/plugins).",
    ),
    lookup_plugins: Optional[bool] = typer.Option(
        None,
        "--lookup-plugins/--no-lookup-plugins",
        help="Also search $PATH for kn-* plugins.",
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug output."),
) -> None:
    """Root callback executed before every sub-command and plugin.

    Installs the global :class:`~kncli.output.OutputManager` and configures
    logging. ``--plugins-dir`` and ``--lookup-plugins`` are read from the
    context by :func:`~kncli.plugins.group.manager_for_context`.
    """
    from kncli.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))
    _configure_logging(verbose)

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write the current traceback to the data directory and return its path."""
    from kncli.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def run(
    args: Optional[list[str]] = None,
    internal_plugins: Iterable[Plugin] = DEFAULT_INTERNAL_PLUGINS,
) -> None:
    """Invoke the Typer application with the given in-process plugins.

    Args:
        args: Command-line arguments; defaults to ``sys.argv[1:]``.
        internal_plugins: In-process plugins made available to the plugin
            manager for this invocation.
    """
    app(
        args=args,
        prog_name="kn",
        obj={INTERNAL_PLUGINS_KEY: tuple(internal_plugins)},
    )


def main() -> None:
    """CLI entry point invoked by the ``kn`` console script.

    A plugin that ran and failed has already written its own diagnostics,
    so kn exits with the plugin's status without adding an error line.
    Other :class:`~kncli.exceptions.KncliError` instances are printed and
    mapped to their ``exit_code``. Anything else produces a crash log.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        run()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)
    except Exception as exc:
        from kncli.exceptions import KncliError, PluginExecutionError
        from kncli.output import debug, error

        if isinstance(exc, PluginExecutionError) and exc.returncode is not None:
            debug(str(exc))
            sys.exit(exc.exit_code)
        if isinstance(exc, KncliError):
            error(str(exc))
            sys.exit(exc.exit_code)
        log_path = _write_crash_log(exc)
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
