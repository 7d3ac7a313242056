"""Database adapter base class.

Manifesto:
    Every adapter shares the same lifecycle (connect/disconnect), the same
    transaction semantics and the same error translation contract. The
    abstract base class implements the scoped transaction once, so a
    migration is committed or rolled back identically on every backend.

Features:
    - Abstract ``connect()``, ``disconnect()``, ``execute()``, ``query()``,
      ``execute_script()`` and the begin/commit/rollback primitives
    - ``transaction()`` context manager: begin → yield → commit, rollback
      and re-raise on any exception
    - Context-manager protocol for connection lifecycle
    - Lazy connect on first use

Tags:
    schemaspine, database, abstract-base, adapter-pattern, transaction

Doc-Types:
    api-reference
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any

from schemaspine.core.dialect import Dialect, get_dialect
from schemaspine.core.errors import QueryError
from schemaspine.core.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ConnectionInfo:
    """Metadata about a database connection."""

    backend: str
    """Backend identifier: ``"sqlite"``, ``"postgresql"``, etc."""

    persistent: bool
    """Whether data survives process exit."""

    url: str
    """The URL or path, password redacted."""

    resolved_path: str | None = None
    """For file-based SQLite, the resolved absolute path."""

    def __repr__(self) -> str:
        parts = [f"backend={self.backend!r}", f"persistent={self.persistent}"]
        if self.resolved_path:
            parts.append(f"path={self.resolved_path!r}")
        else:
            parts.append(f"url={self.url!r}")
        return f"ConnectionInfo({', '.join(parts)})"

    @property
    def display(self) -> str:
        """Short human-readable location for logs and CLI output."""
        return self.resolved_path or self.url


class DatabaseAdapter(ABC):
    """
    Abstract base class for database adapters.

    Subclasses implement the driver calls; this class owns the
    transaction scope. Driver exceptions must be translated into
    :class:`~schemaspine.core.errors.DatabaseError` subclasses with the
    original exception chained.
    """

    def __init__(self, backend: str):
        self._dialect: Dialect = get_dialect(backend)
        self._in_transaction = False

    @property
    def dialect(self) -> Dialect:
        """SQL dialect for this adapter's database type."""
        return self._dialect

    @property
    @abstractmethod
    def info(self) -> ConnectionInfo:
        """Connection metadata (URL redacted)."""
        ...

    @property
    @abstractmethod
    def is_connected(self) -> bool:
        """Whether adapter is connected."""
        ...

    @property
    def in_transaction(self) -> bool:
        """Whether an explicit transaction is open."""
        return self._in_transaction

    @abstractmethod
    def connect(self) -> None:
        """Establish connection to database."""
        ...

    @abstractmethod
    def disconnect(self) -> None:
        """Close connection to database."""
        ...

    @abstractmethod
    def execute(self, sql: str, params: Sequence[Any] = ()) -> None:
        """Execute one statement with qmark parameters."""
        ...

    @abstractmethod
    def query(self, sql: str, params: Sequence[Any] = ()) -> list[tuple[Any, ...]]:
        """Execute one statement and return all rows as tuples."""
        ...

    @abstractmethod
    def execute_script(self, script: str) -> None:
        """Execute the raw text of a migration, which may hold several statements."""
        ...

    @abstractmethod
    def _begin(self) -> None: ...

    @abstractmethod
    def _commit(self) -> None: ...

    @abstractmethod
    def _rollback(self) -> None: ...

    @contextmanager
    def transaction(self) -> Iterator[DatabaseAdapter]:
        """Transaction context manager.

        Commits when the block exits normally; rolls back and re-raises
        when it raises, including when the commit itself fails.
        """
        if self._in_transaction:
            raise QueryError("Nested transactions are not supported")
        self._begin()
        self._in_transaction = True
        try:
            yield self
            self._commit()
        except BaseException:
            self._safe_rollback()
            raise
        finally:
            self._in_transaction = False

    def _safe_rollback(self) -> None:
        """Roll back, logging (not raising) a rollback failure.

        The exception that triggered the rollback is the one the caller
        needs to see.
        """
        try:
            self._rollback()
        except Exception as exc:
            logger.warning("database.rollback_failed", error=str(exc), database=self.info.display)

    def __enter__(self) -> DatabaseAdapter:
        """Context manager entry."""
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        self.disconnect()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.info.display!r})"


__all__ = [
    "ConnectionInfo",
    "DatabaseAdapter",
]
