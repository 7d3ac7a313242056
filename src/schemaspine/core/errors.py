"""
Structured error types for schemaspine.

Provides a small hierarchy of typed errors with metadata for error
categorisation, reporting, and root cause analysis through error chaining.

Instead of generic exceptions that lose context, SchemaSpineError and its
subclasses carry:
- **Category:** What kind of error (database, source, migration, config)
- **Context:** Structured metadata (filename, directory, table, database)
- **Cause:** Chained underlying exception (driver error, OSError, ...)

Manifesto:
    - **Typed Error Hierarchy:** One error kind per failure mode of a run
    - **Rich Context:** Errors carry the filename that broke the run
    - **Error Chaining:** Preserve driver exceptions while adding context

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────────┐
        │                     SchemaSpineError                             │
        │                 (category, context, cause)                       │
        ├─────────────────────────────────────────────────────────────────┤
        │                                                                  │
        │  ConfigError       DatabaseError            MigrationError       │
        │  (CONFIG)          (DATABASE)               (filename)           │
        │       │                 │                        │               │
        │  InvalidConfig     DatabaseConnection       StoreUnavailable     │
        │                    QueryError               SourceUnavailable    │
        │                    IntegrityError           ReadError            │
        │                                             ApplyError           │
        │                                               └ DuplicateRecord  │
        └─────────────────────────────────────────────────────────────────┘

    DatabaseError subclasses are raised by adapters (driver-level);
    MigrationError subclasses are the run-level kinds surfaced by the
    store, the source and the runner.

Examples:
    Wrapping a driver failure:

    >>> try:
    ...     raise RuntimeError("no such table: t")
    ... except RuntimeError as e:
    ...     error = ApplyError("Failed to apply 0002_b.sql", filename="0002_b.sql", cause=e)
    >>> error.filename
    '0002_b.sql'
    >>> error.to_dict()["category"]
    'MIGRATION'

Guardrails:
    ❌ DON'T: Raise bare Exception from a store or source
    ✅ DO: Raise the MigrationError subclass for the failure mode

    ❌ DON'T: Swallow the original driver exception
    ✅ DO: Pass it as cause= for error chaining

Tags:
    error-handling, exception-hierarchy, error-context, migrations,
    schemaspine

Doc-Types:
    - API Reference
    - Error Handling Guide
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """
    Standard error categories for classification and routing.

    Attributes:
        DATABASE: Connection, query, constraint errors
        SOURCE: Migration directory or file errors
        MIGRATION: A migration body failed to apply
        CONFIG: Missing or invalid settings
        INTERNAL: Bugs, unexpected state
    """

    DATABASE = "DATABASE"
    SOURCE = "SOURCE"
    MIGRATION = "MIGRATION"
    CONFIG = "CONFIG"
    INTERNAL = "INTERNAL"


@dataclass
class ErrorContext:
    """
    Structured metadata context for errors.

    Any additional metadata can be stored in the ``metadata`` dict. The
    ``to_dict()`` method serializes all non-None fields for logging.

    Examples:
        >>> ctx = ErrorContext(filename="0001_init.sql", table="_migrations")
        >>> ctx.to_dict()
        {'filename': '0001_init.sql', 'table': '_migrations'}

    Attributes:
        filename: Migration file the error relates to
        directory: Migration directory being scanned
        table: Tracking table name
        database: Redacted database URL or path
        metadata: Additional key-value pairs
    """

    filename: str | None = None
    directory: str | None = None
    table: str | None = None
    database: str | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["filename", "directory", "table", "database"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class SchemaSpineError(Exception):
    """
    Base exception for all schemaspine errors.

    All SchemaSpineError instances carry:
    - **category:** ErrorCategory enum for classification
    - **context:** ErrorContext with structured metadata
    - **cause:** Optional underlying exception for chaining

    Subclasses set ``default_category`` to provide a sensible default for
    their domain.

    Examples:
        >>> error = SchemaSpineError("Something went wrong")
        >>> error.category
        <ErrorCategory.INTERNAL: 'INTERNAL'>

        >>> error = SchemaSpineError("Scan failed").with_context(directory="db/migrations")
        >>> error.context.directory
        'db/migrations'
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> SchemaSpineError:
        """
        Add context to this error (fluent API).

        Usage:
            raise SourceUnavailable("Cannot list directory").with_context(
                directory="db/migrations",
            )
        """
        for key, value in kwargs.items():
            if key != "metadata" and hasattr(self.context, key):
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigError(SchemaSpineError):
    """Configuration error. The configuration must be fixed."""

    default_category = ErrorCategory.CONFIG


class InvalidConfigError(ConfigError):
    """Configuration value is invalid."""

    def __init__(self, key: str, value: Any, message: str | None = None):
        self.key = key
        self.value = value
        super().__init__(message or f"Invalid configuration for {key}: {value!r}")


# =============================================================================
# DATABASE ERRORS (raised by adapters)
# =============================================================================


class DatabaseError(SchemaSpineError):
    """Database query or transaction error."""

    default_category = ErrorCategory.DATABASE


class DatabaseConnectionError(DatabaseError):
    """Database connection could not be opened or was lost."""


class QueryError(DatabaseError):
    """SQL statement failed."""


class IntegrityError(DatabaseError):
    """Database integrity constraint violation."""


# =============================================================================
# MIGRATION RUN ERRORS
# =============================================================================


class MigrationError(SchemaSpineError):
    """
    Fatal error of a migration run.

    Every subclass aborts the run immediately. ``filename`` names the
    migration involved when one is known.
    """

    default_category = ErrorCategory.MIGRATION

    def __init__(self, message: str, *, filename: str | None = None, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.filename = filename
        if filename is not None:
            self.context.filename = filename


class StoreUnavailable(MigrationError):
    """Tracking table cannot be created or read, or the session cannot open."""

    default_category = ErrorCategory.DATABASE


class SourceUnavailable(MigrationError):
    """Migration directory is missing or unreadable."""

    default_category = ErrorCategory.SOURCE


class ReadError(MigrationError):
    """A migration file vanished or became unreadable before it was applied."""

    default_category = ErrorCategory.SOURCE


class ApplyError(MigrationError):
    """A migration body failed; its transaction was rolled back."""


class DuplicateRecord(ApplyError):
    """The tracking table already holds a record for this filename."""


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "SchemaSpineError",
    "ConfigError",
    "InvalidConfigError",
    "DatabaseError",
    "DatabaseConnectionError",
    "QueryError",
    "IntegrityError",
    "MigrationError",
    "StoreUnavailable",
    "SourceUnavailable",
    "ReadError",
    "ApplyError",
    "DuplicateRecord",
]
