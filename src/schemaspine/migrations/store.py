"""Tracking table access.

The tracking table records which migrations have been applied::

    CREATE TABLE IF NOT EXISTS _migrations (
        id          <auto-increment primary key>,
        filename    <identifier> NOT NULL UNIQUE,
        applied_at  <timestamp> NOT NULL DEFAULT CURRENT_TIMESTAMP
    )

Rows are inserted once, inside the transaction of the migration they
describe, and never updated or deleted. Column types come from the
connection's :class:`~schemaspine.core.dialect.Dialect`.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

from schemaspine.core.errors import (
    DatabaseError,
    DuplicateRecord,
    IntegrityError,
    InvalidConfigError,
    StoreUnavailable,
)
from schemaspine.core.logging import get_logger
from schemaspine.core.protocols import Connection
from schemaspine.core.settings import DEFAULT_TABLE_NAME, validate_identifier
from schemaspine.core.timestamps import coerce_utc, utc_now

from .models import MigrationRecord

logger = get_logger(__name__)


class MigrationStore:
    """Reads and writes the tracking table.

    Parameters
    ----------
    database
        Open (or lazily connecting) database handle.
    table_name
        Tracking table name; must be a plain SQL identifier.
    clock
        Source of ``applied_at`` timestamps (aware UTC datetimes).
    """

    def __init__(
        self,
        database: Connection,
        *,
        table_name: str = DEFAULT_TABLE_NAME,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._db = database
        try:
            self.table_name = validate_identifier(table_name)
        except ValueError as e:
            raise InvalidConfigError("table_name", table_name, str(e)) from e
        self._clock = clock

    def ensure_schema(self) -> None:
        """Create the tracking table if it does not exist. Safe to call every run."""
        dialect = self._db.dialect
        ddl = (
            f"CREATE TABLE IF NOT EXISTS {self.table_name} (\n"
            f"    id {dialect.auto_increment()},\n"
            f"    filename {dialect.identifier_type()} NOT NULL UNIQUE,\n"
            f"    applied_at {dialect.timestamp_type()} NOT NULL {dialect.timestamp_default_now()}\n"
            f")"
        )
        try:
            self._db.execute(ddl)
        except DatabaseError as e:
            raise self._unavailable(f"Cannot create tracking table {self.table_name}", e) from e
        logger.debug("migration.schema_ready", table=self.table_name)

    def list_applied(self) -> set[str]:
        """Filenames of every applied migration."""
        try:
            rows = self._db.query(f"SELECT filename FROM {self.table_name}")
        except DatabaseError as e:
            raise self._unavailable(f"Cannot read tracking table {self.table_name}", e) from e
        return {row[0] for row in rows}

    def list_records(self) -> list[MigrationRecord]:
        """Every tracking record, oldest first."""
        try:
            rows = self._db.query(
                f"SELECT id, filename, applied_at FROM {self.table_name} "
                "ORDER BY applied_at, id"
            )
        except DatabaseError as e:
            raise self._unavailable(f"Cannot read tracking table {self.table_name}", e) from e
        return [
            MigrationRecord(id=row[0], filename=row[1], applied_at=coerce_utc(row[2]))
            for row in rows
        ]

    def record_applied(self, filename: str) -> MigrationRecord:
        """Insert the record for ``filename``.

        Must run inside the transaction that applied the migration so the
        schema change and its record commit together.

        Raises
        ------
        DuplicateRecord
            If ``filename`` is already recorded.
        StoreUnavailable
            If the insert fails for any other reason.
        """
        applied_at = self._clock()
        try:
            self._db.execute(
                f"INSERT INTO {self.table_name} (filename, applied_at) VALUES (?, ?)",
                (filename, self._db.dialect.timestamp_value(applied_at)),
            )
            rows = self._db.query(
                f"SELECT id FROM {self.table_name} WHERE filename = ?",
                (filename,),
            )
        except IntegrityError as e:
            raise DuplicateRecord(
                f"{filename} is already recorded in {self.table_name}",
                filename=filename,
                cause=e,
            ).with_context(table=self.table_name) from e
        except DatabaseError as e:
            raise self._unavailable(f"Cannot record {filename}", e, filename=filename) from e
        return MigrationRecord(id=rows[0][0], filename=filename, applied_at=applied_at)

    def _unavailable(
        self, message: str, cause: DatabaseError, filename: str | None = None
    ) -> StoreUnavailable:
        error = StoreUnavailable(f"{message}: {cause.message}", filename=filename, cause=cause)
        error.with_context(table=self.table_name)
        return error


__all__ = [
    "MigrationStore",
]
