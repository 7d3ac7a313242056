"""
Shared pytest fixtures for schemaspine tests.

This module provides:
- Environment isolation (no stray SCHEMASPINE_* / POSTGRES_* variables or .env)
- A connected in-memory SQLite adapter
- A temporary migrations directory with a helper to write files
- A deterministic, strictly increasing clock
- A reporter that records every event it receives
"""

from __future__ import annotations

import os
from collections.abc import Callable, Generator
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest
import structlog

from schemaspine.core.adapters import SQLiteAdapter
from schemaspine.core.logging import clear_context
from schemaspine.core.settings import reset_settings


# =============================================================================
# Test Markers Configuration
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Mark every test without an explicit marker as a unit test."""
    for item in items:
        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration"}):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Isolation
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Generator[None, None, None]:
    """Run each test in its own cwd with no schemaspine configuration set."""
    for key in list(os.environ):
        if key.startswith(("SCHEMASPINE_", "POSTGRES_")) and key != "SCHEMASPINE_TEST_POSTGRES_URL":
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    reset_settings()
    yield
    reset_settings()
    clear_context()
    structlog.reset_defaults()


# =============================================================================
# Database / filesystem fixtures
# =============================================================================


@pytest.fixture
def db() -> Generator[SQLiteAdapter, None, None]:
    """Connected in-memory SQLite adapter."""
    adapter = SQLiteAdapter(":memory:")
    adapter.connect()
    yield adapter
    adapter.disconnect()


@pytest.fixture
def migrations_dir(tmp_path: Path) -> Path:
    d = tmp_path / "migrations"
    d.mkdir()
    return d


@pytest.fixture
def write_migration(migrations_dir: Path) -> Callable[[str, str], Path]:
    """Write ``body`` to ``migrations_dir / name`` and return the path."""

    def _write(name: str, body: str) -> Path:
        path = migrations_dir / name
        path.write_text(body, encoding="utf-8")
        return path

    return _write


class TickingClock:
    """Clock that advances one second on every call."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2026, 1, 1, tzinfo=UTC)

    def __call__(self) -> datetime:
        self.now += timedelta(seconds=1)
        return self.now


@pytest.fixture
def clock() -> TickingClock:
    return TickingClock()


# =============================================================================
# Reporter
# =============================================================================


class RecordingReporter:
    """Records ``(event, filename_or_None)`` tuples."""

    def __init__(self):
        self.events: list[tuple[str, str | None]] = []
        self.summaries = []
        self.errors = []

    def run_started(self, directory, candidates):
        self.events.append(("run_started", None))

    def migration_skipped(self, migration):
        self.events.append(("skipped", migration.filename))

    def migration_started(self, migration):
        self.events.append(("started", migration.filename))

    def migration_applied(self, migration, duration_ms):
        self.events.append(("applied", migration.filename))

    def migration_failed(self, migration, error):
        self.events.append(("failed", migration.filename))
        self.errors.append(error)

    def run_completed(self, summary):
        self.events.append(("run_completed", None))
        self.summaries.append(summary)

    def run_failed(self, summary):
        self.events.append(("run_failed", None))
        self.summaries.append(summary)


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()
