"""Shared test fixtures for kncli.

Provides isolated config directories, temporary plugin and ``PATH``
directories, a helper for writing shell-script plugins, and a plugin
manager whose invoker spawns children instead of replacing the test
process.
"""

from __future__ import annotations

import os
import stat
import tempfile
from collections.abc import Callable
from pathlib import Path

import pytest

from kncli.output import reset_output
from kncli.plugins.invoker import ProcessInvoker
from kncli.plugins.manager import PluginManager


OK_SCRIPT = '#!/bin/sh\necho "OK $*"\n'
"""Plugin body that echoes its arguments."""


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager keeps references to sys.stdout/sys.stderr, which the
    Typer CliRunner swaps out during a test.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point XDG directories at *tmp_path* and clear KN_* variables."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setattr("kncli.config._is_xdg_platform", lambda: True)
    for var in ["KN_PLUGINS_DIR", "KN_LOOKUP_PLUGINS"]:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Plugin fixtures
# ---------------------------------------------------------------------------


def write_plugin(directory: Path, name: str, script: str = OK_SCRIPT, mode: int = 0o755) -> Path:
    """Write an executable plugin script plus some decoy entries.

    Next to the plugin, a file without the ``kn-`` prefix and an empty
    ``kn-bogus-dir*`` directory are created; neither may be picked up as a
    plugin.
    """
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / name
    path.write_text(script)
    path.chmod(mode)
    decoy = directory / f"non-plugin-prefix-{name}"
    decoy.write_text("")
    decoy.chmod(stat.S_IRUSR | stat.S_IXUSR)
    tempfile.mkdtemp(prefix="kn-bogus-dir", dir=directory)
    return path


@pytest.fixture
def plugins_dir(tmp_path: Path) -> Path:
    path = tmp_path / "plugins"
    path.mkdir()
    return path


@pytest.fixture
def path_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """A temporary directory that is the first entry on ``$PATH``."""
    path = tmp_path / "bin"
    path.mkdir()
    monkeypatch.setenv("PATH", f"{path}{os.pathsep}fast-forward-this-year-plz")
    return path


@pytest.fixture
def plugin_writer() -> Callable[..., Path]:
    """Return :func:`write_plugin` for tests that need other directories."""
    return write_plugin


@pytest.fixture
def make_plugin(plugins_dir: Path) -> Callable[..., Path]:
    """Return a factory writing plugins into the plugin directory."""

    def _make(name: str, script: str = OK_SCRIPT, mode: int = 0o755) -> Path:
        return write_plugin(plugins_dir, name, script, mode)

    return _make


@pytest.fixture
def spawn_invoker() -> ProcessInvoker:
    """An invoker that runs plugins as children so tests survive execution."""
    return ProcessInvoker(replace_process=False)


@pytest.fixture
def manager(plugins_dir: Path, spawn_invoker: ProcessInvoker) -> PluginManager:
    """A PluginManager over the temporary plugin directory, PATH lookup off."""
    return PluginManager(str(plugins_dir), invoker=spawn_invoker)


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
