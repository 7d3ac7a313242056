"""Data model of a migration run."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any

from schemaspine.core.errors import MigrationError
from schemaspine.core.timestamps import to_iso8601


class RunState(str, Enum):
    """States of :class:`~schemaspine.migrations.runner.MigrationRunner`.

    ``DONE`` is the only normal terminal state.
    """

    IDLE = "idle"
    SCHEMA_READY = "schema_ready"
    SCANNING = "scanning"
    APPLYING = "applying"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class MigrationFile:
    """A candidate migration on disk.

    Identity is the filename. The body is not held here: it is read fresh
    through ``MigrationSource.read_body()`` when the migration is applied.
    """

    filename: str
    path: Path


@dataclass(frozen=True)
class MigrationRecord:
    """Row of the tracking table: one applied migration."""

    id: int
    filename: str
    applied_at: datetime


@dataclass(frozen=True)
class MigrationStatus:
    """Applied/pending state of one candidate."""

    filename: str
    applied_at: datetime | None = None

    @property
    def applied(self) -> bool:
        return self.applied_at is not None


@dataclass
class MigrationSummary:
    """Result of a migration run.

    ``total_candidates``, ``already_applied`` and ``newly_applied`` are the
    counts reported after every run. On failure ``error`` holds the fatal
    error and ``state`` is ``FAILED``.
    """

    run_id: str
    directory: str
    total_candidates: int = 0
    already_applied: int = 0
    applied: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    state: RunState = RunState.IDLE
    error: MigrationError | None = None
    started_at: datetime | None = None
    finished_at: datetime | None = None

    @property
    def newly_applied(self) -> int:
        return len(self.applied)

    @property
    def success(self) -> bool:
        return self.state is RunState.DONE

    @property
    def failed_filename(self) -> str | None:
        return self.error.filename if self.error is not None else None

    @property
    def duration_ms(self) -> float | None:
        if self.started_at is None or self.finished_at is None:
            return None
        return (self.finished_at - self.started_at).total_seconds() * 1000

    def to_dict(self) -> dict[str, Any]:
        """Serialise for JSON output and structured logs."""
        return {
            "run_id": self.run_id,
            "directory": self.directory,
            "state": self.state.value,
            "success": self.success,
            "total_candidates": self.total_candidates,
            "already_applied": self.already_applied,
            "newly_applied": self.newly_applied,
            "applied": list(self.applied),
            "skipped": list(self.skipped),
            "failed_filename": self.failed_filename,
            "error": self.error.to_dict() if self.error is not None else None,
            "started_at": to_iso8601(self.started_at),
            "finished_at": to_iso8601(self.finished_at),
        }


__all__ = [
    "MigrationFile",
    "MigrationRecord",
    "MigrationStatus",
    "MigrationSummary",
    "RunState",
]
