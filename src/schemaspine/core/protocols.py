"""
Canonical protocol definitions for schemaspine.

Manifesto:
    The runner must not care which driver sits behind the database handle
    it was given. It needs exactly one capability set: begin a transaction,
    execute statement(s), commit, roll back, query. ``Connection`` is that
    contract; :class:`~schemaspine.core.adapters.DatabaseAdapter` is the
    shipped implementation, and tests may pass any object of the same shape.

Architecture:
    ::

        Connection Protocol:
        ┌────────────────────────────────────────────────────────┐
        │ connect() / disconnect()   → scoped session            │
        │ execute(sql, params)       → single statement, no rows │
        │ query(sql, params)         → single statement, rows    │
        │ execute_script(script)     → one or more statements    │
        │ transaction()              → begin / commit / rollback │
        └────────────────────────────────────────────────────────┘

    Parameters use qmark (``?``) placeholders regardless of backend.

Tags:
    protocol, connection, database, schemaspine, contracts

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from collections.abc import Sequence
from contextlib import AbstractContextManager
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from schemaspine.core.dialect import Dialect


@runtime_checkable
class Connection(Protocol):
    """Database capability set required by the migration store and runner."""

    @property
    def dialect(self) -> Dialect:
        """Dialect used for tracking-table DDL."""
        ...

    @property
    def is_connected(self) -> bool:
        """Whether a session is currently open."""
        ...

    @property
    def in_transaction(self) -> bool:
        """Whether an explicit transaction is open."""
        ...

    def connect(self) -> None:
        """Open the session."""
        ...

    def disconnect(self) -> None:
        """Release the session."""
        ...

    def execute(self, sql: str, params: Sequence[Any] = ()) -> None:
        """Execute one statement with qmark parameters."""
        ...

    def query(self, sql: str, params: Sequence[Any] = ()) -> list[tuple[Any, ...]]:
        """Execute one statement and return all rows."""
        ...

    def execute_script(self, script: str) -> None:
        """Execute the raw text of a migration (one or more statements)."""
        ...

    def transaction(self) -> AbstractContextManager[Any]:
        """Scoped transaction: commit on normal exit, rollback on exception."""
        ...


@runtime_checkable
class FileSystem(Protocol):
    """Directory listing and file reading capability used by the source."""

    def list_files(self, directory: Path) -> list[str]:
        """Names of regular files directly inside ``directory``."""
        ...

    def read_text(self, path: Path) -> str:
        """Full text content of ``path``."""
        ...


__all__ = [
    "Connection",
    "FileSystem",
]
