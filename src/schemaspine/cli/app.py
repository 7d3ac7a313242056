"""
Root Typer application for the schemaspine CLI.
"""

from __future__ import annotations

import typer
from typer import Typer

app = Typer(
    name="schemaspine",
    help="schemaspine: ordered, transactional SQL schema migrations.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        from importlib.metadata import PackageNotFoundError
        from importlib.metadata import version as pkg_version

        from schemaspine import __version__

        try:
            v = pkg_version("schemaspine")
        except PackageNotFoundError:
            v = __version__
        typer.echo(f"schemaspine {v}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """schemaspine CLI: apply and inspect SQL migrations."""


# ── Sub-command registration ─────────────────────────────────────────────

from schemaspine.cli.config import app as config_app  # noqa: E402
from schemaspine.cli.migrate import app as migrate_app  # noqa: E402

app.add_typer(migrate_app, name="migrate", help="Apply and inspect migrations.")
app.add_typer(config_app, name="config", help="Configuration inspection.")
