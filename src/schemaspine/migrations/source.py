"""Migration file discovery.

Lists the candidate migrations of a directory and reads their bodies.
Candidates are the regular files directly inside the directory whose name
ends with the configured extension, in ascending code-point order of the
filename. Subdirectories are not descended into.
"""

from __future__ import annotations

import os
from collections.abc import Iterable
from pathlib import Path

from schemaspine.core.errors import InvalidConfigError, ReadError, SourceUnavailable
from schemaspine.core.logging import get_logger
from schemaspine.core.protocols import FileSystem
from schemaspine.core.settings import DEFAULT_EXTENSION, normalize_extension

from .models import MigrationFile

logger = get_logger(__name__)


class LocalFileSystem:
    """:class:`~schemaspine.core.protocols.FileSystem` over the local disk."""

    def list_files(self, directory: Path) -> list[str]:
        with os.scandir(directory) as entries:
            return [entry.name for entry in entries if entry.is_file()]

    def read_text(self, path: Path) -> str:
        return path.read_text(encoding="utf-8")


def select_candidates(names: Iterable[str], extension: str = DEFAULT_EXTENSION) -> list[str]:
    """Filter ``names`` by extension and sort them.

    The match is a case-sensitive suffix match, so ``0001.SQL`` is not a
    candidate for ``.sql``. Sorting is by code point, which puts ``0010``
    after ``0002`` and ``B`` before ``a``.
    """
    return sorted(name for name in names if name.endswith(extension))


class MigrationSource:
    """Reads migration files from a directory.

    Parameters
    ----------
    extension
        Filename suffix of migration files (default ``.sql``).
    filesystem
        Directory listing and file reading backend; the local disk unless
        a test substitutes one.
    """

    def __init__(
        self,
        *,
        extension: str = DEFAULT_EXTENSION,
        filesystem: FileSystem | None = None,
    ) -> None:
        try:
            self.extension = normalize_extension(extension)
        except ValueError as e:
            raise InvalidConfigError("extension", extension, str(e)) from e
        self._fs = filesystem or LocalFileSystem()

    def list_candidates(self, directory: Path | str) -> list[MigrationFile]:
        """Return the candidate migrations of ``directory`` in apply order.

        Raises
        ------
        SourceUnavailable
            If the directory does not exist or cannot be listed.
        """
        directory = Path(directory)
        try:
            names = self._fs.list_files(directory)
        except OSError as e:
            raise SourceUnavailable(
                f"Cannot list migration directory {str(directory)!r}: {e.strerror or e}",
                cause=e,
            ).with_context(directory=str(directory)) from e

        candidates = [
            MigrationFile(filename=name, path=directory / name)
            for name in select_candidates(names, self.extension)
        ]
        logger.debug(
            "migration.source_scanned",
            directory=str(directory),
            files=len(names),
            candidates=len(candidates),
        )
        return candidates

    def read_body(self, migration: MigrationFile) -> str:
        """Return the full text of ``migration``.

        Raises
        ------
        ReadError
            If the file vanished or cannot be read as UTF-8 text.
        """
        try:
            return self._fs.read_text(migration.path)
        except OSError as e:
            raise ReadError(
                f"Cannot read {migration.filename}: {e.strerror or e}",
                filename=migration.filename,
                cause=e,
            ) from e
        except UnicodeDecodeError as e:
            raise ReadError(
                f"Cannot read {migration.filename}: not valid UTF-8 ({e.reason})",
                filename=migration.filename,
                cause=e,
            ) from e


__all__ = [
    "LocalFileSystem",
    "MigrationSource",
    "select_candidates",
]
