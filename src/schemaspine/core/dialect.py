"""SQL dialect abstraction for the tracking table.

Migration bodies are written by hand for one database and run verbatim;
the only SQL schemaspine generates itself is the tracking table and its
two statements. ``Dialect`` supplies the backend-specific fragments for
that DDL and adapts timestamp parameters to what each driver stores.

Architecture::

    ┌──────────────────────────────────────────────────────────────────┐
    │  CREATE TABLE IF NOT EXISTS _migrations (                        │
    │      id          {auto_increment()},                             │
    │      filename    {identifier_type()} NOT NULL UNIQUE,            │
    │      applied_at  {timestamp_type()} NOT NULL                     │
    │                  {timestamp_default_now()}                       │
    │  )                                                               │
    └──────────────────────────────────────────────────────────────────┘
                              │
              ┌───────────────┼────────────────┐
              ▼               ▼                ▼
        ┌──────────┐   ┌──────────────┐  ┌──────────┐
        │ SQLite   │   │ PostgreSQL   │  │  MySQL   │
        │ TEXT     │   │ TIMESTAMP    │  │ DATETIME │
        └──────────┘   └──────────────┘  └──────────┘

Examples:
    >>> from schemaspine.core.dialect import get_dialect
    >>> get_dialect("postgresql").auto_increment()
    'SERIAL PRIMARY KEY'

Tags:
    dialect, sql, ddl, portability, schemaspine

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Dialect(Protocol):
    """SQL dialect contract for tracking-table DDL and parameters."""

    @property
    def name(self) -> str:
        """Dialect name (e.g. ``'sqlite'``)."""
        ...

    def auto_increment(self) -> str:
        """Full column type of an auto-incrementing surrogate primary key."""
        ...

    def identifier_type(self) -> str:
        """Column type for a migration filename."""
        ...

    def timestamp_type(self) -> str:
        """Column type for ``applied_at``."""
        ...

    def timestamp_default_now(self) -> str:
        """DDL ``DEFAULT`` clause for ``applied_at``."""
        ...

    def timestamp_value(self, value: datetime) -> Any:
        """Adapt an aware datetime to the parameter the driver stores."""
        ...


class SQLiteDialect:
    """SQLite dialect: timestamps stored as sortable UTC text."""

    @property
    def name(self) -> str:
        return "sqlite"

    def auto_increment(self) -> str:
        return "INTEGER PRIMARY KEY AUTOINCREMENT"

    def identifier_type(self) -> str:
        return "TEXT"

    def timestamp_type(self) -> str:
        return "TEXT"

    def timestamp_default_now(self) -> str:
        return "DEFAULT CURRENT_TIMESTAMP"

    def timestamp_value(self, value: datetime) -> str:
        # Same shape as CURRENT_TIMESTAMP plus microseconds; sorts lexically.
        return value.astimezone(UTC).strftime("%Y-%m-%d %H:%M:%S.%f")


class PostgreSQLDialect:
    """PostgreSQL dialect: ``SERIAL`` key, naive UTC ``TIMESTAMP``."""

    @property
    def name(self) -> str:
        return "postgresql"

    def auto_increment(self) -> str:
        return "SERIAL PRIMARY KEY"

    def identifier_type(self) -> str:
        return "VARCHAR(255)"

    def timestamp_type(self) -> str:
        return "TIMESTAMP"

    def timestamp_default_now(self) -> str:
        return "DEFAULT CURRENT_TIMESTAMP"

    def timestamp_value(self, value: datetime) -> datetime:
        return value.astimezone(UTC).replace(tzinfo=None)


class MySQLDialect:
    """MySQL / MariaDB dialect."""

    @property
    def name(self) -> str:
        return "mysql"

    def auto_increment(self) -> str:
        return "INTEGER AUTO_INCREMENT PRIMARY KEY"

    def identifier_type(self) -> str:
        return "VARCHAR(255)"

    def timestamp_type(self) -> str:
        return "DATETIME(6)"

    def timestamp_default_now(self) -> str:
        return "DEFAULT CURRENT_TIMESTAMP(6)"

    def timestamp_value(self, value: datetime) -> datetime:
        return value.astimezone(UTC).replace(tzinfo=None)


# Pre-instantiated singletons (dialects are stateless)
_DIALECTS: dict[str, Dialect] = {
    "sqlite": SQLiteDialect(),
    "postgresql": PostgreSQLDialect(),
    "postgres": PostgreSQLDialect(),  # alias
    "mysql": MySQLDialect(),
    "mariadb": MySQLDialect(),
}


def get_dialect(db_type: str) -> Dialect:
    """Get a dialect by database type name.

    Raises:
        ValueError: If ``db_type`` is not recognised.
    """
    key = db_type.lower()
    if key not in _DIALECTS:
        raise ValueError(
            f"Unknown dialect '{db_type}'. "
            f"Supported: {sorted(set(_DIALECTS) - {'postgres', 'mariadb'})}"
        )
    return _DIALECTS[key]


def register_dialect(name: str, dialect: Dialect) -> None:
    """Register a custom dialect implementation (third-party backends, tests)."""
    _DIALECTS[name.lower()] = dialect


__all__ = [
    "Dialect",
    "SQLiteDialect",
    "PostgreSQLDialect",
    "MySQLDialect",
    "get_dialect",
    "register_dialect",
]
