"""
schemaspine - ordered, transactional SQL schema migrations.

Applies the ``.sql`` files of a directory to a database in filename order,
each inside its own transaction, and records every applied file in a
tracking table so later runs only apply what is new.

Quick start::

    from schemaspine import MigrationRunner, create_adapter

    with create_adapter("sqlite:///app.db") as db:
        summary = MigrationRunner(db, "migrations").run()
"""

__version__ = "0.1.0"

from schemaspine.core import *  # noqa: F403
from schemaspine.core import __all__ as _core_all
from schemaspine.migrations import *  # noqa: F403
from schemaspine.migrations import __all__ as _migrations_all

__all__ = ["__version__", *_core_all, *_migrations_all]
