"""
CLI layer for schemaspine.

Provides a Typer application with sub-commands that delegate to
``schemaspine.migrations``. All migration logic lives there; this package
handles only terminal transport: argument parsing, coloured output, and
table formatting.

Entry point::

    schemaspine --help
"""

from schemaspine.cli.app import app

__all__ = ["app"]
