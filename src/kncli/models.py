"""Pydantic models for persisted kncli configuration.

:class:`GlobalConfig` is serialised as JSON in the user's config directory
(see :mod:`kncli.config`). It currently holds only plugin discovery
settings, grouped under :class:`PluginsConfig`.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


DEFAULT_PLUGINS_DIR = "~/.config/kn/plugins"
"""Default plugin directory. The ``~`` is expanded at lookup time."""


class PluginsConfig(BaseModel):
    """Plugin discovery settings.

    Example::

        PluginsConfig(directory="~/kn-plugins", path_lookup=True)
    """

    directory: str = Field(
        default=DEFAULT_PLUGINS_DIR,
        description="Directory searched for kn-* plugin executables",
    )
    path_lookup: bool = Field(
        default=False,
        description="Also search the directories on $PATH for plugins",
    )


class GlobalConfig(BaseModel):
    """User-wide configuration read from ``~/.config/kn/config.json``.

    Loaded by :func:`~kncli.config.load_global_config`. Values here have the
    lowest precedence and are overridden by environment variables and CLI
    flags; see :func:`~kncli.config.resolve_plugin_settings`.
    """

    plugins: PluginsConfig = Field(default_factory=PluginsConfig)
