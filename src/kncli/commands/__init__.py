"""Built-in ``kn`` sub-commands.

Each module defines a Typer sub-application that is mounted by
:mod:`kncli.app`.
"""
