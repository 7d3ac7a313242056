"""Database adapters -- the caller-owned database handle.

Manifesto:
    The migration runner talks to exactly one database through one
    handle that the caller creates, owns and passes in. Adapters give that
    handle a uniform shape (connect, execute, query, execute a whole
    migration body, scoped transaction) and translate driver exceptions
    into :mod:`schemaspine.core.errors` types.

Architecture::

    DatabaseAdapter (base.py)        Abstract base: lifecycle + transaction()
        |-- SQLiteAdapter            stdlib sqlite3 (always available)
        |-- SQLAlchemyAdapter        any SQLAlchemy URL (postgresql, mysql, ...)

    ConnectionInfo (base.py)         Backend metadata, password redacted

Modules
-------
base            Abstract DatabaseAdapter base class + ConnectionInfo
sqlite          SQLite adapter and statement splitter
sqlalchemy      SQLAlchemy adapter

Guardrails:
    ❌ ``adapter.execute("INSERT ... VALUES ('" + name + "')")``
    ✅ ``adapter.execute("INSERT ... VALUES (?)", (name,))``
    ❌ Opening a second transaction inside ``transaction()``
    ✅ One ``transaction()`` block per migration

Tags:
    schemaspine, database, adapters, sqlite, sqlalchemy, postgresql

Doc-Types:
    package-overview, module-index
"""

from .base import ConnectionInfo, DatabaseAdapter
from .sqlalchemy import SQLAlchemyAdapter
from .sqlite import SQLiteAdapter, iter_statements

__all__ = [
    "ConnectionInfo",
    "DatabaseAdapter",
    "SQLAlchemyAdapter",
    "SQLiteAdapter",
    "iter_statements",
]
