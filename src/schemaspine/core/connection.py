"""
Database adapter factory.

Turns the database URL, path or keyword from settings or the command line
into a ready-to-use (not yet connected) adapter::

    from schemaspine.core.connection import create_adapter

    adapter = create_adapter("sqlite:///app.db")
    print(adapter.info)
    # ConnectionInfo(backend='sqlite', persistent=True, path='/srv/app.db')

Routing
-------
- ``None``, ``""``, ``"memory"``, ``":memory:"``: in-memory SQLite
- ``"sqlite:///path"`` / ``"sqlite+pysqlite:///path"`` / bare path: SQLite file
- ``"postgres://..."``: normalised to ``postgresql://...``
- any other ``scheme://...``: SQLAlchemy

Connection failures raise
:class:`~schemaspine.core.errors.DatabaseConnectionError` when the adapter
connects; nothing silently falls back to another database.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from sqlalchemy import exc as sa_exc

from schemaspine.core.adapters import DatabaseAdapter, SQLAlchemyAdapter, SQLiteAdapter
from schemaspine.core.errors import ConfigError


def parse_url(db: str | None) -> tuple[str, str]:
    """Parse a database URL into (scheme, target).

    Returns
    -------
    tuple[str, str]
        (scheme, target) where scheme is one of:
        ``"memory"``, ``"sqlite"``, ``"sqlalchemy"``.
    """
    if db is None or db in ("", "memory", ":memory:"):
        return "memory", ":memory:"

    if db.startswith("sqlite"):
        head, sep, path = db.partition("://")
        if sep and head in ("sqlite", "sqlite+pysqlite"):
            # sqlite:///relative.db and sqlite:////abs.db both leave one leading slash
            if path.startswith("/"):
                path = path[1:]
            if not path or path == ":memory:":
                return "memory", ":memory:"
            return "sqlite", path

    if db.startswith("postgres://"):
        return "sqlalchemy", "postgresql://" + db[len("postgres://"):]

    if "://" in db:
        return "sqlalchemy", db

    # Bare file path: treat as SQLite file
    return "sqlite", db


def create_adapter(db: str | None = None, **options: Any) -> DatabaseAdapter:
    """Create a database adapter from a URL, path, or keyword.

    Parameters
    ----------
    db:
        Database URL, file path, or keyword (see module docstring).
    options:
        Forwarded to the adapter (``timeout=`` for SQLite, ``echo=`` and
        engine options for SQLAlchemy).

    Raises
    ------
    ConfigError
        If the URL cannot be parsed or names an unsupported backend.
    """
    scheme, target = parse_url(db)

    if scheme == "memory":
        return SQLiteAdapter(":memory:", **options)

    if scheme == "sqlite":
        Path(target).parent.mkdir(parents=True, exist_ok=True)
        return SQLiteAdapter(target, **options)

    try:
        return SQLAlchemyAdapter(target, **options)
    except sa_exc.ArgumentError as e:
        raise ConfigError(f"Invalid database URL: {e}", cause=e) from e
    except ValueError as e:
        raise ConfigError(f"Unsupported database backend: {e}", cause=e) from e


__all__ = [
    "create_adapter",
    "parse_url",
]
