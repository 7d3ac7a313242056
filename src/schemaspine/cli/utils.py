"""
CLI utility helpers: settings loading, database handles and output.
"""

from __future__ import annotations

import json
from typing import Any, NoReturn

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from schemaspine.core.connection import create_adapter
from schemaspine.core.errors import ConfigError, MigrationError
from schemaspine.core.logging import configure_logging
from schemaspine.core.settings import SchemaSpineSettings, get_settings
from schemaspine.migrations.models import MigrationFile, MigrationSummary

console = Console()
err_console = Console(stderr=True)


# ── Settings / connection helpers ────────────────────────────────────────


def load_settings(**overrides: Any) -> SchemaSpineSettings:
    """Load settings from the environment, applying non-``None`` CLI overrides.

    Without overrides the cached ``get_settings()`` instance is returned.
    Invalid values exit with code 1.
    """
    values = {key: value for key, value in overrides.items() if value is not None}
    try:
        return SchemaSpineSettings(**values) if values else get_settings()
    except ValidationError as e:
        err_console.print("[bold red]Configuration error[/bold red]")
        for error in e.errors():
            field = ".".join(str(part) for part in error["loc"]) or "settings"
            err_console.print(f"  [cyan]{escape(field)}[/cyan]: {escape(error['msg'])}", soft_wrap=True)
        raise typer.Exit(code=1) from e


def setup_logging(settings: SchemaSpineSettings) -> None:
    """Configure structlog from settings; logs go to stderr."""
    configure_logging(level=settings.log_level, json_format=settings.json_logs)


def open_database(settings: SchemaSpineSettings) -> Any:
    """Create (but do not connect) the adapter for the configured database."""
    try:
        return create_adapter(settings.resolved_database_url())
    except ConfigError as e:
        err_console.print(f"[bold red]Error[/bold red] ({e.category.value}): {escape(e.message)}", soft_wrap=True)
        raise typer.Exit(code=1) from e


def fail(error: MigrationError) -> NoReturn:
    """Print a fatal migration error and exit with code 1."""
    err_console.print(f"[bold red]✗ Migration failed:[/bold red] {escape(describe_error(error))}", soft_wrap=True)
    raise typer.Exit(code=1)


def describe_error(error: MigrationError) -> str:
    """``<filename>: <cause>`` (or just the message when no file is involved)."""
    cause = error.cause
    if cause is not None:
        detail = getattr(cause, "message", None) or str(cause)
    else:
        detail = error.message
    return f"{error.filename}: {detail}" if error.filename else detail


# ── Output helpers ───────────────────────────────────────────────────────


class ConsoleReporter:
    """Prints run progress as one line per migration."""

    def __init__(self, out: Console | None = None):
        self._out = out or console

    def run_started(self, directory: str, candidates: list[MigrationFile]) -> None:
        self._out.print("[bold]🔄 schemaspine migration runner[/bold]")
        self._out.print(f"Directory: {escape(directory)} ({len(candidates)} migration files)\n", soft_wrap=True)

    def migration_skipped(self, migration: MigrationFile) -> None:
        self._out.print(f"[dim]⊘ {escape(migration.filename)} (already applied)[/dim]", soft_wrap=True)

    def migration_started(self, migration: MigrationFile) -> None:
        self._out.print(f"→ Applying {escape(migration.filename)}...", soft_wrap=True)

    def migration_applied(self, migration: MigrationFile, duration_ms: float) -> None:
        self._out.print(
            f"[green]✓[/green] {escape(migration.filename)} applied successfully "
            f"[dim]({duration_ms:.0f} ms)[/dim]",
            soft_wrap=True,
        )

    def migration_failed(self, migration: MigrationFile, error: MigrationError) -> None:
        self._out.print(f"[red]✗[/red] {escape(migration.filename)} rolled back", soft_wrap=True)

    def run_completed(self, summary: MigrationSummary) -> None:
        print_summary(summary, out=self._out)

    def run_failed(self, summary: MigrationSummary) -> None:
        print_summary(summary, out=self._out)


def print_summary(summary: MigrationSummary, *, out: Console | None = None) -> None:
    """Render the end-of-run summary block."""
    out = out or console
    out.print("\n================================")
    out.print("[bold]Migration Summary:[/bold]")
    out.print(f"  Total migrations: {summary.total_candidates}")
    out.print(f"  Already applied: {summary.already_applied}")
    out.print(f"  Newly applied: {summary.newly_applied}")
    out.print("================================\n")


def print_json(payload: Any) -> None:
    """Print ``payload`` as JSON on stdout."""
    console.print_json(json.dumps(payload, default=str))


def print_table(title: str, columns: list[str], rows: list[list[str]]) -> None:
    """Render rows as a Rich table, or a dim notice when empty."""
    if not rows:
        console.print("[dim]No items.[/dim]")
        return
    table = Table(title=title or None, show_lines=False, pad_edge=False)
    for col in columns:
        table.add_column(col, overflow="fold")
    for row in rows:
        table.add_row(*(escape(cell) for cell in row))
    console.print(table)
