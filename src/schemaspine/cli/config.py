"""
CLI: ``schemaspine config``: configuration inspection.
"""

from __future__ import annotations

import typer
from rich.markup import escape
from rich.table import Table
from sqlalchemy import exc as sa_exc
from sqlalchemy.engine import make_url

from schemaspine.cli.utils import console, err_console, load_settings, print_json

app = typer.Typer(no_args_is_help=True)

_REDACTED = "***"


def _redact_url(url: str) -> str:
    if "://" not in url:
        return url
    try:
        return make_url(url).render_as_string(hide_password=True)
    except sa_exc.ArgumentError:
        return url.split("://", 1)[0] + "://" + _REDACTED


@app.command("show")
def show_config(
    format: str = typer.Option("table", "--format", "-f", help="Output format: table, json"),
) -> None:
    """Show the effective configuration (passwords redacted)."""
    settings = load_settings()

    values = settings.model_dump(mode="json")
    if values.get("postgres_password"):
        values["postgres_password"] = _REDACTED
    if values.get("database_url"):
        values["database_url"] = _redact_url(values["database_url"])
    values["resolved_database_url"] = _redact_url(settings.resolved_database_url())

    if format == "json":
        print_json(values)
        return
    if format != "table":
        err_console.print(f"[red]Error:[/red] unknown format {escape(format)!r}; use table or json")
        raise typer.Exit(1)

    table = Table(title="schemaspine settings")
    table.add_column("Setting")
    table.add_column("Value", overflow="fold")
    for key, value in values.items():
        table.add_row(key, escape(str(value)))
    console.print(table)
