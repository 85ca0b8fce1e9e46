"""Configuration management with XDG paths and precedence resolution.

This module handles the persistent configuration for kncli:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.kn/`` on macOS and Windows. See :func:`get_config_dir` and
  :func:`get_data_dir`.
* **Global config** -- A single :class:`~kncli.models.GlobalConfig` JSON
  file holding the plugin directory and the ``PATH`` lookup switch.
* **Precedence resolution** -- :func:`resolve_plugin_settings` merges CLI
  flags, environment variables and the config file into the effective
  :class:`~kncli.models.PluginsConfig`.

The plugin directory itself is never created or validated here. A missing
directory simply yields no plugins.
"""

from __future__ import annotations

import json
import os
import platform
from pathlib import Path
from typing import Optional

from kncli.exceptions import ConfigError
from kncli.models import GlobalConfig, PluginsConfig

_APP_NAME = "kn"
_CONFIG_FILENAME = "config.json"

ENV_PLUGINS_DIR = "KN_PLUGINS_DIR"
ENV_LOOKUP_PLUGINS = "KN_LOOKUP_PLUGINS"

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off", "")


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory.

    On Linux/BSD: ``$XDG_CONFIG_HOME/kn/`` (default ``~/.config/kn/``).
    On macOS/Windows: ``~/.kn/``.

    The directory is only located, never created. Reading configuration
    must work on a read-only or broken home directory.
    """
    if _is_xdg_platform():
        return _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    return _fallback_base_dir()


def get_data_dir() -> Path:
    """Return the data directory used for crash logs, creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/kn/`` (default ``~/.local/share/kn/``).
    On macOS/Windows: ``~/.kn/logs/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Global config ---


def _global_config_path() -> Path:
    """Path to the global config file."""
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Load the global configuration from the config directory.

    Returns:
        The deserialised :class:`~kncli.models.GlobalConfig`, or a default
        instance when the file does not exist or its directory cannot be
        reached.

    Raises:
        ConfigError: If the file exists but cannot be read, contains invalid
            JSON or fails Pydantic validation.
    """
    path = _global_config_path()
    try:
        if not path.is_file():
            return GlobalConfig()
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot read global config at {path}: {exc}") from exc
    try:
        return GlobalConfig.model_validate(json.loads(text))
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


# --- Precedence resolution ---


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigError(f"Invalid boolean value for {name}: {value!r}")


def resolve_plugin_settings(
    cli_plugins_dir: Optional[str] = None,
    cli_lookup: Optional[bool] = None,
) -> PluginsConfig:
    """Resolve plugin discovery settings with the full precedence chain.

    Precedence (high to low):
        1. CLI flags (``--plugins-dir``, ``--lookup-plugins``)
        2. Environment variables (``KN_PLUGINS_DIR``, ``KN_LOOKUP_PLUGINS``)
        3. User config (``~/.config/kn/config.json``)
        4. Defaults

    Args:
        cli_plugins_dir: Value of ``--plugins-dir``, if given.
        cli_lookup: Value of ``--lookup-plugins/--no-lookup-plugins``, if given.

    Returns:
        The effective :class:`~kncli.models.PluginsConfig`. The directory is
        returned unexpanded; ``~`` is resolved at lookup time.

    Raises:
        ConfigError: If the config file is invalid or ``KN_LOOKUP_PLUGINS``
            is not a recognisable boolean.
    """
    settings = load_global_config().plugins.model_copy()

    env_dir = os.environ.get(ENV_PLUGINS_DIR)
    if env_dir:
        settings.directory = env_dir
    env_lookup = os.environ.get(ENV_LOOKUP_PLUGINS)
    if env_lookup is not None:
        settings.path_lookup = _parse_bool(ENV_LOOKUP_PLUGINS, env_lookup)

    if cli_plugins_dir is not None:
        settings.directory = cli_plugins_dir
    if cli_lookup is not None:
        settings.path_lookup = cli_lookup

    return settings
