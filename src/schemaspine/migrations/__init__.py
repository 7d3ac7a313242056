"""SQL migration tracking and application.

- :class:`MigrationStore` - tracking table (ensure / list / record)
- :class:`MigrationSource` - candidate discovery and body reading
- :class:`MigrationRunner` - applies pending migrations, one transaction each
"""

from schemaspine.migrations.models import (
    MigrationFile,
    MigrationRecord,
    MigrationStatus,
    MigrationSummary,
    RunState,
)
from schemaspine.migrations.reporting import (
    CompositeReporter,
    LoggingReporter,
    MigrationReporter,
    NullReporter,
)
from schemaspine.migrations.runner import MigrationRunner
from schemaspine.migrations.source import LocalFileSystem, MigrationSource, select_candidates
from schemaspine.migrations.store import MigrationStore

__all__ = [
    "CompositeReporter",
    "LocalFileSystem",
    "LoggingReporter",
    "MigrationFile",
    "MigrationRecord",
    "MigrationReporter",
    "MigrationRunner",
    "MigrationSource",
    "MigrationStatus",
    "MigrationStore",
    "MigrationSummary",
    "NullReporter",
    "RunState",
    "select_candidates",
]
