"""SQL migration runner.

Reads migration files from a directory, tracks applied migrations in the
tracking table, and applies pending ones in filename order, each in its
own transaction.

Manifesto:
    A run either applies every pending migration or stops at the first one
    that fails. The failing migration leaves no trace: its statements and
    its tracking record are rolled back together, and migrations committed
    before it stay committed. Re-running after a fix resumes where the
    failed run stopped.

Architecture:
    ::

        IDLE ──► SCHEMA_READY ──► SCANNING ──► APPLYING(i) ──► COMMITTED(i) ──┐
          │           │               │             │                          │
          │           │               │             ▼                          │
          │           │               │        ROLLED_BACK(i)          next i ◄┘
          ▼           ▼               ▼             ▼                     │
        FAILED ◄──────┴───────────────┴─────────  FAILED                  ▼
                                                                         DONE

    ``run()`` always returns a :class:`MigrationSummary`; a fatal error is
    recorded in ``summary.error`` with ``summary.state == FAILED``.

Examples:
    >>> from schemaspine.core import create_adapter
    >>> from schemaspine.migrations import MigrationRunner
    >>> with create_adapter("sqlite:///app.db") as db:
    ...     summary = MigrationRunner(db, "migrations").run()
    >>> summary.newly_applied  # doctest: +SKIP
    2

Guardrails:
    ❌ DON'T: Put BEGIN/COMMIT in a migration file
    ✅ DO: Let the runner scope the transaction of each migration

    ❌ DON'T: Edit a migration after it was applied
    ✅ DO: Add a new, later-sorting file

Tags:
    migrations, schema, sql, transactions, state-machine, schemaspine

Doc-Types:
    - API Reference
"""

from __future__ import annotations

import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path

from schemaspine.core.errors import (
    ApplyError,
    DuplicateRecord,
    MigrationError,
    ReadError,
    SchemaSpineError,
    StoreUnavailable,
)
from schemaspine.core.logging import LogContext, get_logger
from schemaspine.core.protocols import Connection
from schemaspine.core.settings import DEFAULT_EXTENSION, DEFAULT_TABLE_NAME
from schemaspine.core.timestamps import generate_ulid, utc_now

from .models import MigrationFile, MigrationRecord, MigrationStatus, MigrationSummary, RunState
from .reporting import LoggingReporter, MigrationReporter
from .source import MigrationSource
from .store import MigrationStore

logger = get_logger(__name__)


class MigrationRunner:
    """Applies pending SQL migrations from a directory.

    Parameters
    ----------
    database
        Database handle. If it is not connected yet the runner connects it
        for the duration of a call and disconnects it afterwards; a handle
        the caller connected is left open.
    directory
        Directory holding the migration files.
    source, store
        Override the default :class:`MigrationSource` /
        :class:`MigrationStore` (tests, alternative storage).
    reporter
        Receives progress events; :class:`LoggingReporter` by default.
    table_name, extension, clock
        Forwarded to the default store and source.

    Example::

        from schemaspine.core import SQLiteAdapter
        from schemaspine.migrations import MigrationRunner

        with SQLiteAdapter("app.db") as db:
            summary = MigrationRunner(db, "migrations").run()
        print(f"Applied {summary.newly_applied} migrations")
    """

    def __init__(
        self,
        database: Connection,
        directory: Path | str,
        *,
        source: MigrationSource | None = None,
        store: MigrationStore | None = None,
        reporter: MigrationReporter | None = None,
        table_name: str = DEFAULT_TABLE_NAME,
        extension: str = DEFAULT_EXTENSION,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._db = database
        self.directory = Path(directory)
        self.source = source or MigrationSource(extension=extension)
        self.store = store or MigrationStore(database, table_name=table_name, clock=clock)
        self.reporter = reporter or LoggingReporter()
        self._clock = clock
        self._state = RunState.IDLE
        self.transitions: list[tuple[RunState, str | None]] = []

    @property
    def state(self) -> RunState:
        """Current state of the last (or running) run."""
        return self._state

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def run(self) -> MigrationSummary:
        """Apply all pending migrations in filename order.

        Stops at the first failure. The returned summary holds the counts
        and, when the run failed, the fatal error.
        """
        self._state = RunState.IDLE
        self.transitions = [(RunState.IDLE, None)]
        summary = MigrationSummary(
            run_id=generate_ulid(),
            directory=str(self.directory),
            started_at=self._clock(),
        )

        with LogContext(run_id=summary.run_id):
            try:
                with self._session():
                    self._apply_all(summary)
            except MigrationError as e:
                self._transition(RunState.FAILED, e.filename)
                summary.error = e
                summary.state = RunState.FAILED
                summary.finished_at = self._clock()
                self.reporter.run_failed(summary)
                return summary

            summary.state = RunState.DONE
            summary.finished_at = self._clock()
            self.reporter.run_completed(summary)
        return summary

    def pending(self) -> list[MigrationFile]:
        """Return the migrations a run would apply, in order. Applies nothing."""
        with self._session():
            self.store.ensure_schema()
            applied = self.store.list_applied()
            candidates = self.source.list_candidates(self.directory)
        return [c for c in candidates if c.filename not in applied]

    def status(self) -> list[MigrationStatus]:
        """Return the applied/pending status of every candidate, in order."""
        with self._session():
            self.store.ensure_schema()
            records = {r.filename: r for r in self.store.list_records()}
            candidates = self.source.list_candidates(self.directory)
        return [
            MigrationStatus(
                filename=c.filename,
                applied_at=records[c.filename].applied_at if c.filename in records else None,
            )
            for c in candidates
        ]

    def history(self) -> list[MigrationRecord]:
        """Return every tracking record, oldest first."""
        with self._session():
            self.store.ensure_schema()
            return self.store.list_records()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @contextmanager
    def _session(self) -> Iterator[None]:
        """Connect for the duration of the block unless already connected."""
        opened = False
        if not self._db.is_connected:
            try:
                self._db.connect()
            except SchemaSpineError as e:
                raise StoreUnavailable(
                    f"Cannot open database session: {e.message}", cause=e
                ) from e
            opened = True
        try:
            yield
        finally:
            if opened:
                self._db.disconnect()

    def _apply_all(self, summary: MigrationSummary) -> None:
        self.store.ensure_schema()
        self._transition(RunState.SCHEMA_READY)

        applied = self.store.list_applied()
        candidates = self.source.list_candidates(self.directory)
        self._transition(RunState.SCANNING)

        summary.total_candidates = len(candidates)
        self.reporter.run_started(str(self.directory), candidates)

        pending: list[MigrationFile] = []
        for candidate in candidates:
            if candidate.filename in applied:
                summary.skipped.append(candidate.filename)
                self.reporter.migration_skipped(candidate)
            else:
                pending.append(candidate)
        summary.already_applied = len(summary.skipped)

        for migration in pending:
            with LogContext(migration=migration.filename):
                self._apply_one(migration)
            summary.applied.append(migration.filename)

        self._transition(RunState.DONE)

    def _apply_one(self, migration: MigrationFile) -> None:
        """Apply one migration in its own transaction, or raise."""
        try:
            body = self.source.read_body(migration)
        except ReadError as e:
            self.reporter.migration_failed(migration, e)
            raise

        self._transition(RunState.APPLYING, migration.filename)
        self.reporter.migration_started(migration)
        started = time.perf_counter()

        try:
            with self._db.transaction():
                self._db.execute_script(body)
                self.store.record_applied(migration.filename)
        except DuplicateRecord as e:
            error: MigrationError = e
        except Exception as e:
            detail = e.message if isinstance(e, SchemaSpineError) else str(e)
            error = ApplyError(
                f"Failed to apply {migration.filename}: {detail}",
                filename=migration.filename,
                cause=e,
            )
        else:
            self._transition(RunState.COMMITTED, migration.filename)
            self.reporter.migration_applied(migration, (time.perf_counter() - started) * 1000)
            return

        self._transition(RunState.ROLLED_BACK, migration.filename)
        self.reporter.migration_failed(migration, error)
        raise error

    def _transition(self, state: RunState, filename: str | None = None) -> None:
        self._state = state
        self.transitions.append((state, filename))
        logger.debug("migration.state", state=state.value, filename=filename)


__all__ = [
    "MigrationRunner",
]
