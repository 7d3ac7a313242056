"""Run progress reporting.

The runner announces every step of a run to a :class:`MigrationReporter`.
``LoggingReporter`` turns them into structured log events; the CLI adds a
Rich console reporter on top of it.

Events::

    migration.run_started     directory, candidates
    migration.skipped         migration (already applied)
    migration.applying        migration
    migration.applied         migration, duration_ms
    migration.failed          migration, error
    migration.run_completed   total_candidates, already_applied, newly_applied
    migration.run_failed      failed_filename, error
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from schemaspine.core.errors import MigrationError
from schemaspine.core.logging import get_logger

from .models import MigrationFile, MigrationSummary

logger = get_logger(__name__)


@runtime_checkable
class MigrationReporter(Protocol):
    """Receives run progress from the runner."""

    def run_started(self, directory: str, candidates: list[MigrationFile]) -> None: ...

    def migration_skipped(self, migration: MigrationFile) -> None: ...

    def migration_started(self, migration: MigrationFile) -> None: ...

    def migration_applied(self, migration: MigrationFile, duration_ms: float) -> None: ...

    def migration_failed(self, migration: MigrationFile, error: MigrationError) -> None: ...

    def run_completed(self, summary: MigrationSummary) -> None: ...

    def run_failed(self, summary: MigrationSummary) -> None: ...


class NullReporter:
    """Discards every event."""

    def run_started(self, directory: str, candidates: list[MigrationFile]) -> None:
        pass

    def migration_skipped(self, migration: MigrationFile) -> None:
        pass

    def migration_started(self, migration: MigrationFile) -> None:
        pass

    def migration_applied(self, migration: MigrationFile, duration_ms: float) -> None:
        pass

    def migration_failed(self, migration: MigrationFile, error: MigrationError) -> None:
        pass

    def run_completed(self, summary: MigrationSummary) -> None:
        pass

    def run_failed(self, summary: MigrationSummary) -> None:
        pass


class LoggingReporter:
    """Emits structlog events for each step.

    ``run_id`` and ``migration`` come from the log context the runner binds,
    so they are not repeated in the event arguments unless needed.
    """

    def __init__(self, log: Any | None = None):
        self._log = log or logger

    def run_started(self, directory: str, candidates: list[MigrationFile]) -> None:
        self._log.info("migration.run_started", directory=directory, candidates=len(candidates))

    def migration_skipped(self, migration: MigrationFile) -> None:
        self._log.debug("migration.skipped", migration=migration.filename, reason="already_applied")

    def migration_started(self, migration: MigrationFile) -> None:
        self._log.info("migration.applying")

    def migration_applied(self, migration: MigrationFile, duration_ms: float) -> None:
        self._log.info("migration.applied", duration_ms=round(duration_ms, 2))

    def migration_failed(self, migration: MigrationFile, error: MigrationError) -> None:
        self._log.error("migration.failed", error=error.to_dict())

    def run_completed(self, summary: MigrationSummary) -> None:
        self._log.info(
            "migration.run_completed",
            total_candidates=summary.total_candidates,
            already_applied=summary.already_applied,
            newly_applied=summary.newly_applied,
            duration_ms=summary.duration_ms,
        )

    def run_failed(self, summary: MigrationSummary) -> None:
        self._log.error(
            "migration.run_failed",
            failed_filename=summary.failed_filename,
            newly_applied=summary.newly_applied,
            error=summary.error.to_dict() if summary.error is not None else None,
        )


class CompositeReporter:
    """Forwards every event to several reporters, in order."""

    def __init__(self, *reporters: MigrationReporter):
        self.reporters = list(reporters)

    def run_started(self, directory: str, candidates: list[MigrationFile]) -> None:
        for reporter in self.reporters:
            reporter.run_started(directory, candidates)

    def migration_skipped(self, migration: MigrationFile) -> None:
        for reporter in self.reporters:
            reporter.migration_skipped(migration)

    def migration_started(self, migration: MigrationFile) -> None:
        for reporter in self.reporters:
            reporter.migration_started(migration)

    def migration_applied(self, migration: MigrationFile, duration_ms: float) -> None:
        for reporter in self.reporters:
            reporter.migration_applied(migration, duration_ms)

    def migration_failed(self, migration: MigrationFile, error: MigrationError) -> None:
        for reporter in self.reporters:
            reporter.migration_failed(migration, error)

    def run_completed(self, summary: MigrationSummary) -> None:
        for reporter in self.reporters:
            reporter.run_completed(summary)

    def run_failed(self, summary: MigrationSummary) -> None:
        for reporter in self.reporters:
            reporter.run_failed(summary)


__all__ = [
    "CompositeReporter",
    "LoggingReporter",
    "MigrationReporter",
    "NullReporter",
]
