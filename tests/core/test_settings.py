"""Tests for core.settings module.

Covers:
- SchemaSpineSettings instantiation with defaults
- SCHEMASPINE_* and plain POSTGRES_* environment overrides
- Field validation (table name, extension, log level)
- resolved_database_url() precedence
- get_settings() caching
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from schemaspine.core.settings import (
    SchemaSpineSettings,
    get_settings,
    normalize_extension,
    reset_settings,
    validate_identifier,
)


class TestDefaults:
    def test_defaults(self):
        s = SchemaSpineSettings()
        assert s.database_url is None
        assert s.migrations_dir == Path("migrations")
        assert s.extension == ".sql"
        assert s.table_name == "_migrations"
        assert s.log_level == "INFO"
        assert s.log_format == "auto"

    def test_default_database_is_local_sqlite(self):
        assert SchemaSpineSettings().resolved_database_url() == "sqlite:///schemaspine.db"


class TestEnvOverride:
    def test_database_url_from_env(self, monkeypatch):
        monkeypatch.setenv("SCHEMASPINE_DATABASE_URL", "sqlite:///other.db")
        assert SchemaSpineSettings().resolved_database_url() == "sqlite:///other.db"

    def test_migrations_dir_from_env(self, monkeypatch):
        monkeypatch.setenv("SCHEMASPINE_MIGRATIONS_DIR", "db/migrations")
        assert SchemaSpineSettings().migrations_dir == Path("db/migrations")

    def test_plain_postgres_variables(self, monkeypatch):
        monkeypatch.setenv("POSTGRES_HOST", "db.example")
        monkeypatch.setenv("POSTGRES_PORT", "5433")
        monkeypatch.setenv("POSTGRES_DB", "jobs")
        monkeypatch.setenv("POSTGRES_USER", "app")
        monkeypatch.setenv("POSTGRES_PASSWORD", "pw")
        s = SchemaSpineSettings()
        assert s.postgres_port == 5433
        assert s.resolved_database_url() == "postgresql://app:pw@db.example:5433/jobs"

    def test_prefixed_postgres_variables(self, monkeypatch):
        monkeypatch.setenv("SCHEMASPINE_POSTGRES_DB", "jobs")
        assert SchemaSpineSettings().resolved_database_url() == "postgresql://localhost:5432/jobs"

    def test_database_url_wins_over_postgres(self, monkeypatch):
        monkeypatch.setenv("POSTGRES_DB", "jobs")
        s = SchemaSpineSettings(database_url="sqlite:///explicit.db")
        assert s.resolved_database_url() == "sqlite:///explicit.db"

    def test_dotenv_file(self, tmp_path):
        (tmp_path / ".env").write_text("SCHEMASPINE_TABLE_NAME=schema_history\n")
        assert SchemaSpineSettings().table_name == "schema_history"

    def test_password_not_in_repr(self):
        s = SchemaSpineSettings(postgres_password="hunter2")
        assert "hunter2" not in repr(s)


class TestValidation:
    def test_invalid_table_name(self):
        with pytest.raises(ValidationError):
            SchemaSpineSettings(table_name="migrations; DROP TABLE users")

    def test_extension_gets_leading_dot(self):
        assert SchemaSpineSettings(extension="sql").extension == ".sql"

    def test_empty_extension_rejected(self):
        with pytest.raises(ValidationError):
            SchemaSpineSettings(extension="")

    def test_log_level_upper_cased(self):
        assert SchemaSpineSettings(log_level="debug").log_level == "DEBUG"

    def test_unknown_log_level(self):
        with pytest.raises(ValidationError):
            SchemaSpineSettings(log_level="LOUD")

    def test_unknown_log_format(self):
        with pytest.raises(ValidationError):
            SchemaSpineSettings(log_format="xml")

    @pytest.mark.parametrize("fmt, expected", [("auto", None), ("json", True), ("console", False)])
    def test_json_logs(self, fmt, expected):
        assert SchemaSpineSettings(log_format=fmt).json_logs is expected


class TestHelpers:
    @pytest.mark.parametrize("name", ["_migrations", "schema_history", "T1"])
    def test_valid_identifiers(self, name):
        assert validate_identifier(name) == name

    @pytest.mark.parametrize("name", ["", "1abc", "a-b", "a b", "public.migrations"])
    def test_invalid_identifiers(self, name):
        with pytest.raises(ValueError):
            validate_identifier(name)

    def test_normalize_extension(self):
        assert normalize_extension(".sql") == ".sql"
        assert normalize_extension(" up.sql ") == ".up.sql"
        with pytest.raises(ValueError):
            normalize_extension(".")


class TestGetSettings:
    def test_cached(self):
        assert get_settings() is get_settings()

    def test_reset(self, monkeypatch):
        first = get_settings()
        monkeypatch.setenv("SCHEMASPINE_TABLE_NAME", "history")
        assert get_settings().table_name == "_migrations"
        reset_settings()
        second = get_settings()
        assert second is not first
        assert second.table_name == "history"
