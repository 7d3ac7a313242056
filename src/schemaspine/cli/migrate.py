"""
CLI: ``schemaspine migrate``: apply and inspect migrations.
"""

from __future__ import annotations

from pathlib import Path

import typer

from schemaspine.cli.utils import (
    ConsoleReporter,
    console,
    err_console,
    fail,
    load_settings,
    open_database,
    print_json,
    print_table,
    setup_logging,
)
from schemaspine.core.errors import MigrationError
from schemaspine.core.timestamps import to_iso8601
from schemaspine.migrations import CompositeReporter, LoggingReporter, MigrationRunner

app = typer.Typer(no_args_is_help=True)

_DATABASE = typer.Option(None, "--database", "-d", help="Database URL or SQLite path")
_DIR = typer.Option(None, "--dir", "-m", help="Migration directory")
_TABLE = typer.Option(
    None,
    "--table",
    help=(
        "Tracking table name (default _migrations). Pass an existing table such as "
        "'migrations' to adopt a database already tracked there; otherwise every file is re-applied."
    ),
)
_EXTENSION = typer.Option(None, "--extension", help="Migration file extension")
_JSON = typer.Option(False, "--json", help="JSON output")
_LOG_LEVEL = typer.Option(None, "--log-level", help="DEBUG, INFO, WARNING, ERROR")


def _runner(
    database: str | None,
    directory: Path | None,
    table: str | None,
    extension: str | None,
    log_level: str | None,
    *,
    quiet: bool = False,
) -> MigrationRunner:
    settings = load_settings(
        database_url=database,
        migrations_dir=directory,
        table_name=table,
        extension=extension,
        log_level=log_level,
    )
    setup_logging(settings)
    reporter = LoggingReporter() if quiet else CompositeReporter(ConsoleReporter(), LoggingReporter())
    return MigrationRunner(
        open_database(settings),
        settings.migrations_dir,
        reporter=reporter,
        table_name=settings.table_name,
        extension=settings.extension,
    )


@app.command()
def up(
    database: str | None = _DATABASE,
    directory: Path | None = _DIR,
    table: str | None = _TABLE,
    extension: str | None = _EXTENSION,
    json_out: bool = _JSON,
    log_level: str | None = _LOG_LEVEL,
) -> None:
    """Apply all pending migrations in filename order."""
    runner = _runner(database, directory, table, extension, log_level, quiet=json_out)
    summary = runner.run()

    if json_out:
        print_json(summary.to_dict())
        if not summary.success:
            raise typer.Exit(code=1)
        return

    if not summary.success:
        assert summary.error is not None
        fail(summary.error)


@app.command()
def status(
    database: str | None = _DATABASE,
    directory: Path | None = _DIR,
    table: str | None = _TABLE,
    extension: str | None = _EXTENSION,
    json_out: bool = _JSON,
    log_level: str | None = _LOG_LEVEL,
) -> None:
    """Show every migration file with its applied time or ``pending``."""
    runner = _runner(database, directory, table, extension, log_level, quiet=True)
    try:
        statuses = runner.status()
    except MigrationError as e:
        fail(e)

    if json_out:
        print_json(
            [
                {"filename": s.filename, "applied": s.applied, "applied_at": to_iso8601(s.applied_at)}
                for s in statuses
            ]
        )
        return

    rows = [
        [s.filename, to_iso8601(s.applied_at) if s.applied else "pending"]
        for s in statuses
    ]
    print_table("Migration Status", ["Migration", "Applied at"], rows)
    pending_count = sum(1 for s in statuses if not s.applied)
    console.print(f"\n[dim]{len(statuses) - pending_count} applied, {pending_count} pending[/dim]")


@app.command()
def pending(
    database: str | None = _DATABASE,
    directory: Path | None = _DIR,
    table: str | None = _TABLE,
    extension: str | None = _EXTENSION,
    json_out: bool = _JSON,
    log_level: str | None = _LOG_LEVEL,
) -> None:
    """List the migrations the next ``up`` would apply, in order."""
    runner = _runner(database, directory, table, extension, log_level, quiet=True)
    try:
        migrations = runner.pending()
    except MigrationError as e:
        fail(e)

    if json_out:
        print_json([m.filename for m in migrations])
        return

    if not migrations:
        console.print("[green]✓ Database is up to date[/green]")
        return
    for migration in migrations:
        console.print(migration.filename, markup=False, soft_wrap=True)


@app.command()
def history(
    database: str | None = _DATABASE,
    table: str | None = _TABLE,
    json_out: bool = _JSON,
    log_level: str | None = _LOG_LEVEL,
) -> None:
    """Show the tracking table, oldest first."""
    runner = _runner(database, None, table, None, log_level, quiet=True)
    try:
        records = runner.history()
    except MigrationError as e:
        fail(e)

    if json_out:
        print_json(
            [
                {"id": r.id, "filename": r.filename, "applied_at": to_iso8601(r.applied_at)}
                for r in records
            ]
        )
        return

    if not records:
        err_console.print("[dim]No migrations have been applied.[/dim]")
        return
    print_table(
        "Migration History",
        ["ID", "Migration", "Applied at"],
        [[str(r.id), r.filename, to_iso8601(r.applied_at) or ""] for r in records],
    )
