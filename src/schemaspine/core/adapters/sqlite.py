"""SQLite database adapter.

Uses the stdlib ``sqlite3`` module in autocommit mode and issues ``BEGIN``
explicitly, so DDL and DML inside one migration commit or roll back
together. ``sqlite3.Connection.executescript`` is not used: it commits any
open transaction before running, which would break that guarantee.
Instead a migration body is split into complete statements with
``sqlite3.complete_statement`` and each is executed on the same cursor.
"""

from __future__ import annotations

import re
import sqlite3
from collections.abc import Iterator, Sequence
from pathlib import Path
from typing import Any

from schemaspine.core.errors import DatabaseConnectionError, IntegrityError, QueryError

from .base import ConnectionInfo, DatabaseAdapter

_COMMENTS = re.compile(r"--[^\n]*|/\*.*?\*/", re.DOTALL)


def _is_blank(sql: str) -> bool:
    """True when ``sql`` holds only whitespace, comments and semicolons."""
    return not _COMMENTS.sub("", sql).strip().strip(";").strip()


def iter_statements(script: str) -> Iterator[str]:
    """Split a SQL script into complete statements.

    Semicolons inside string literals, comments and ``CREATE TRIGGER ...
    BEGIN ... END`` blocks do not end a statement. A trailing statement
    without a terminating semicolon is still yielded. Fragments holding
    only comments are skipped.
    """
    pieces = script.split(";")
    buffer = ""
    for piece in pieces[:-1]:
        buffer += piece + ";"
        if sqlite3.complete_statement(buffer):
            if not _is_blank(buffer):
                yield buffer.strip()
            buffer = ""
    buffer += pieces[-1]
    if not _is_blank(buffer):
        yield buffer.strip()


class SQLiteAdapter(DatabaseAdapter):
    """
    SQLite database adapter.

    Suitable for:
    - Development and testing (``:memory:``)
    - Single-file application databases
    """

    def __init__(
        self,
        path: str = ":memory:",
        *,
        timeout: float = 5.0,
        foreign_keys: bool = True,
    ):
        super().__init__("sqlite")
        self._path = path
        self._timeout = timeout
        self._foreign_keys = foreign_keys
        self._conn: sqlite3.Connection | None = None

    @property
    def info(self) -> ConnectionInfo:
        if self._path == ":memory:":
            return ConnectionInfo(backend="sqlite", persistent=False, url=":memory:")
        return ConnectionInfo(
            backend="sqlite",
            persistent=True,
            url=self._path,
            resolved_path=str(Path(self._path).resolve()),
        )

    @property
    def is_connected(self) -> bool:
        return self._conn is not None

    @property
    def raw(self) -> sqlite3.Connection:
        """Access the underlying ``sqlite3.Connection`` (e.g. for pragmas)."""
        return self._connection()

    def connect(self) -> None:
        """Connect to SQLite database."""
        if self._conn is not None:
            return
        try:
            conn = sqlite3.connect(
                self._path,
                timeout=self._timeout,
                isolation_level=None,
                check_same_thread=False,
            )
            if self._foreign_keys:
                conn.execute("PRAGMA foreign_keys = ON")
        except sqlite3.Error as e:
            raise DatabaseConnectionError(
                f"Failed to connect to SQLite: {e}",
                cause=e,
            ).with_context(database=self.info.display) from e
        self._conn = conn

    def disconnect(self) -> None:
        """Close SQLite connection."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            self.connect()
        assert self._conn is not None
        return self._conn

    # -- statements --------------------------------------------------------

    def execute(self, sql: str, params: Sequence[Any] = ()) -> None:
        self._run(sql, params)

    def query(self, sql: str, params: Sequence[Any] = ()) -> list[tuple[Any, ...]]:
        cursor = self._run(sql, params)
        try:
            return [tuple(row) for row in cursor.fetchall()]
        except sqlite3.Error as e:
            raise QueryError(f"Failed to fetch rows: {e}", cause=e) from e

    def execute_script(self, script: str) -> None:
        for statement in iter_statements(script):
            self._run(statement, ())

    def _run(self, sql: str, params: Sequence[Any]) -> sqlite3.Cursor:
        conn = self._connection()
        try:
            return conn.execute(sql, tuple(params))
        except sqlite3.IntegrityError as e:
            raise IntegrityError(str(e), cause=e) from e
        except sqlite3.Error as e:
            raise QueryError(str(e), cause=e).with_context(statement=_preview(sql)) from e

    # -- transaction primitives -------------------------------------------

    def _begin(self) -> None:
        self._run("BEGIN", ())

    def _commit(self) -> None:
        try:
            self._connection().commit()
        except sqlite3.Error as e:
            raise QueryError(f"Commit failed: {e}", cause=e) from e

    def _rollback(self) -> None:
        if self._conn is not None:
            self._conn.rollback()


def _preview(sql: str, limit: int = 120) -> str:
    text = " ".join(sql.split())
    return text if len(text) <= limit else text[: limit - 3] + "..."


__all__ = [
    "SQLiteAdapter",
    "iter_statements",
]
