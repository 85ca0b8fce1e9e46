"""kncli -- plugin resolution and invocation for the ``kn`` command line.

When ``kn`` is given a command it does not know, the tokens are handed to
the plugin engine. The engine looks for an executable named after the
command path (``kn service log`` -> ``kn-service-log``) in the plugin
directory and, optionally, on ``PATH``, and hands control to it. The same
inventory feeds a *Plugins* section in contextual help output.

Typical workflow::

    cp kn-hello ~/.config/kn/plugins/   # drop a plugin in place
    kn hello world                      # runs kn-hello with "world"
    kn plugin list                      # shows every discovered plugin

Modules:
    app: Typer application and console-script entry point.
    models: Pydantic configuration models.
    config: XDG-aware configuration loading and precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting with Rich support.
    plugins: Discovery, matching, help rendering and invocation.
"""

__version__ = "0.3.0"
