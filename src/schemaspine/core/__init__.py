"""
schemaspine.core: platform primitives for the migration runner.

Modules
-------
adapters      DatabaseAdapter + SQLite / SQLAlchemy implementations
connection    create_adapter() factory from URL, path or keyword
dialect       Tracking-table DDL fragments per backend
errors        SchemaSpineError hierarchy and run-level MigrationError kinds
logging       structlog configuration and scoped log context
protocols     Connection / FileSystem structural contracts
settings      pydantic-settings configuration
timestamps    utc_now(), ULIDs, driver timestamp normalisation
"""

from schemaspine.core.adapters import (
    ConnectionInfo,
    DatabaseAdapter,
    SQLAlchemyAdapter,
    SQLiteAdapter,
)
from schemaspine.core.connection import create_adapter, parse_url
from schemaspine.core.errors import (
    ApplyError,
    ConfigError,
    DatabaseConnectionError,
    DatabaseError,
    DuplicateRecord,
    ErrorCategory,
    ErrorContext,
    IntegrityError,
    MigrationError,
    QueryError,
    ReadError,
    SchemaSpineError,
    SourceUnavailable,
    StoreUnavailable,
)

__all__ = [
    "ApplyError",
    "ConfigError",
    "ConnectionInfo",
    "DatabaseAdapter",
    "DatabaseConnectionError",
    "DatabaseError",
    "DuplicateRecord",
    "ErrorCategory",
    "ErrorContext",
    "IntegrityError",
    "MigrationError",
    "QueryError",
    "ReadError",
    "SQLAlchemyAdapter",
    "SQLiteAdapter",
    "SchemaSpineError",
    "SourceUnavailable",
    "StoreUnavailable",
    "create_adapter",
    "parse_url",
]
