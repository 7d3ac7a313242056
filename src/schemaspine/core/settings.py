"""Settings for schemaspine.

Manifesto:
    Configuration should be explicit, validated, and environment-driven.
    A migration run needs very little (where the database is, where the
    files are, what the tracking table is called) but every one of those
    values has to be right before the first statement executes.

    - **Pydantic validation:** Type-checked at startup, not mid-run
    - **Environment-driven:** ``SCHEMASPINE_*`` variables and ``.env`` files
    - **Postgres-friendly:** Plain ``POSTGRES_*`` variables are honoured
    - **Sensible defaults:** A local SQLite file out of the box

Examples:
    >>> from schemaspine.core.settings import SchemaSpineSettings
    >>> settings = SchemaSpineSettings(database_url="sqlite:///app.db")
    >>> settings.resolved_database_url()
    'sqlite:///app.db'

Tags:
    settings, configuration, pydantic, environment, schemaspine

Doc-Types:
    - API Reference
    - Configuration Guide
"""

from __future__ import annotations

import re
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL

DEFAULT_TABLE_NAME = "_migrations"
DEFAULT_EXTENSION = ".sql"

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def validate_identifier(value: str) -> str:
    """Return ``value`` if it is a plain SQL identifier, else raise ``ValueError``."""
    if not _IDENTIFIER.match(value):
        raise ValueError(f"not a plain SQL identifier: {value!r}")
    return value


def normalize_extension(value: str) -> str:
    """Return the extension with a leading dot (``sql`` -> ``.sql``)."""
    value = value.strip()
    if not value or value == ".":
        raise ValueError("extension must not be empty")
    return value if value.startswith(".") else f".{value}"


class SchemaSpineSettings(BaseSettings):
    """schemaspine configuration.

    All fields can be set via ``SCHEMASPINE_*`` environment variables (e.g.
    ``SCHEMASPINE_DATABASE_URL=postgresql://...``) or through a ``.env``
    file. The Postgres connection fields additionally accept the plain
    ``POSTGRES_HOST`` / ``POSTGRES_PORT`` / ``POSTGRES_DB`` /
    ``POSTGRES_USER`` / ``POSTGRES_PASSWORD`` variables.
    """

    model_config = SettingsConfigDict(
        env_prefix="SCHEMASPINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # ── Database ─────────────────────────────────────────────────
    database_url: str | None = Field(
        default=None,
        description="Database URL or SQLite path; overrides the Postgres fields",
    )
    sqlite_path: str = Field(default="schemaspine.db")

    postgres_host: str = Field(
        default="localhost",
        validation_alias=AliasChoices("SCHEMASPINE_POSTGRES_HOST", "POSTGRES_HOST", "postgres_host"),
    )
    postgres_port: int = Field(
        default=5432,
        validation_alias=AliasChoices("SCHEMASPINE_POSTGRES_PORT", "POSTGRES_PORT", "postgres_port"),
    )
    postgres_db: str | None = Field(
        default=None,
        validation_alias=AliasChoices("SCHEMASPINE_POSTGRES_DB", "POSTGRES_DB", "postgres_db"),
    )
    postgres_user: str | None = Field(
        default=None,
        validation_alias=AliasChoices("SCHEMASPINE_POSTGRES_USER", "POSTGRES_USER", "postgres_user"),
    )
    postgres_password: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "SCHEMASPINE_POSTGRES_PASSWORD", "POSTGRES_PASSWORD", "postgres_password"
        ),
        repr=False,
    )

    # ── Migrations ───────────────────────────────────────────────
    migrations_dir: Path = Field(default=Path("migrations"))
    extension: str = Field(default=DEFAULT_EXTENSION)
    table_name: str = Field(default=DEFAULT_TABLE_NAME)

    # ── Logging ──────────────────────────────────────────────────
    log_level: str = Field(default="INFO")
    log_format: Literal["auto", "json", "console"] = Field(default="auto")

    @field_validator("table_name")
    @classmethod
    def _check_table_name(cls, value: str) -> str:
        return validate_identifier(value)

    @field_validator("extension")
    @classmethod
    def _check_extension(cls, value: str) -> str:
        return normalize_extension(value)

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        value = value.upper()
        if value not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {value!r}")
        return value

    # ── Derived ──────────────────────────────────────────────────

    def resolved_database_url(self) -> str:
        """Database URL the runner should connect to.

        ``database_url`` wins; otherwise a PostgreSQL URL is built when
        ``postgres_db`` is set; otherwise the local SQLite file is used.
        """
        if self.database_url:
            return self.database_url
        if self.postgres_db:
            url = URL.create(
                "postgresql",
                username=self.postgres_user,
                password=self.postgres_password,
                host=self.postgres_host,
                port=self.postgres_port,
                database=self.postgres_db,
            )
            return url.render_as_string(hide_password=False)
        return f"sqlite:///{self.sqlite_path}"

    @property
    def json_logs(self) -> bool | None:
        """``configure_logging`` json_format value (None = auto-detect)."""
        if self.log_format == "auto":
            return None
        return self.log_format == "json"


@lru_cache(maxsize=1)
def get_settings() -> SchemaSpineSettings:
    """Load and cache settings from the environment."""
    return SchemaSpineSettings()


def reset_settings() -> None:
    """Clear the cached settings (tests, reloading ``.env``)."""
    get_settings.cache_clear()


__all__ = [
    "DEFAULT_EXTENSION",
    "DEFAULT_TABLE_NAME",
    "SchemaSpineSettings",
    "get_settings",
    "normalize_extension",
    "reset_settings",
    "validate_identifier",
]
