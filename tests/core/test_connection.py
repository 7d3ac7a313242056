"""Tests for ``schemaspine.core.connection``: adapter factory."""

from __future__ import annotations

import pytest

from schemaspine.core.adapters import SQLAlchemyAdapter, SQLiteAdapter
from schemaspine.core.connection import create_adapter, parse_url
from schemaspine.core.errors import ConfigError


class TestParseUrl:
    @pytest.mark.parametrize("db", [None, "", "memory", ":memory:", "sqlite://", "sqlite:///:memory:"])
    def test_memory(self, db):
        assert parse_url(db) == ("memory", ":memory:")

    def test_relative_sqlite_url(self):
        assert parse_url("sqlite:///app.db") == ("sqlite", "app.db")

    def test_absolute_sqlite_url(self):
        assert parse_url("sqlite:////var/lib/app.db") == ("sqlite", "/var/lib/app.db")

    def test_pysqlite_driver(self):
        assert parse_url("sqlite+pysqlite:///app.db") == ("sqlite", "app.db")

    def test_bare_path(self):
        assert parse_url("data/app.db") == ("sqlite", "data/app.db")

    def test_postgres_alias_normalised(self):
        assert parse_url("postgres://u:p@h/db") == ("sqlalchemy", "postgresql://u:p@h/db")

    def test_other_urls_go_to_sqlalchemy(self):
        assert parse_url("postgresql+psycopg2://u@h/db") == ("sqlalchemy", "postgresql+psycopg2://u@h/db")
        assert parse_url("mysql://u@h/db") == ("sqlalchemy", "mysql://u@h/db")


class TestCreateAdapter:
    def test_memory(self):
        adapter = create_adapter()
        assert isinstance(adapter, SQLiteAdapter)
        assert adapter.info.persistent is False

    def test_sqlite_file_creates_parent_directory(self, tmp_path):
        target = tmp_path / "nested" / "dir" / "app.db"
        adapter = create_adapter(f"sqlite:///{target}")
        assert isinstance(adapter, SQLiteAdapter)
        assert target.parent.is_dir()
        assert adapter.info.resolved_path == str(target.resolve())

    def test_does_not_connect(self, tmp_path):
        adapter = create_adapter(str(tmp_path / "app.db"))
        assert adapter.is_connected is False
        assert not (tmp_path / "app.db").exists()

    def test_sqlite_options_forwarded(self):
        adapter = create_adapter(":memory:", timeout=1.0)
        assert adapter._timeout == 1.0

    def test_postgres(self):
        adapter = create_adapter("postgres://u:p@localhost/app")
        assert isinstance(adapter, SQLAlchemyAdapter)
        assert adapter.dialect.name == "postgresql"
        assert adapter.is_connected is False

    def test_unsupported_backend(self):
        with pytest.raises(ConfigError, match="Unsupported database backend"):
            create_adapter("oracle://u@h/db")

    def test_invalid_url(self):
        with pytest.raises(ConfigError, match="Invalid database URL"):
            create_adapter("://nohost")


def test_adapters_satisfy_connection_protocol():
    from schemaspine.core.protocols import Connection

    assert isinstance(create_adapter(), Connection)
    assert isinstance(create_adapter("postgresql://u@h/db"), Connection)
