"""
Tests for storage.database module.

Tests cover:
- Opening SQLite databases (parent directory creation, foreign keys on)
- Product name inference from the driver module
- Parameter marker rewriting per paramstyle
- Scoped cursors closed on every exit path
- Connection factory loading and open_database()
"""

import sqlite3
import sys
import types
from unittest.mock import MagicMock

import pytest

from dbmigrate.config.schema import DatabaseSettings, MigrationSettings, RuntimeConfig
from dbmigrate.ddl.dialects import Dialect
from dbmigrate.exceptions import ConfigValidationError, DatabaseConnectionError
from dbmigrate.storage.database import (
    Database,
    infer_product_name,
    load_connection_factory,
    open_database,
)


def _fake_connection(module: str, **attributes):
    connection_class = type("Connection", (), {"__module__": module, **attributes})
    return connection_class()


# ============================================================================
# SQLite Tests
# ============================================================================


class TestConnectSqlite:
    def test_creates_parent_directory(self, tmp_path):
        db_path = tmp_path / "var" / "nested" / "app.db"

        with Database.connect_sqlite(db_path) as database:
            database.execute("CREATE TABLE t (id INTEGER)")
            database.commit()

        assert db_path.exists()

    def test_product_and_dialect(self, tmp_path):
        with Database.connect_sqlite(tmp_path / "app.db") as database:
            assert database.product_name == "SQLite"
            assert database.dialect is Dialect.SQLITE
            assert database.dialect_tag == "SQLite"

    def test_foreign_keys_enabled(self, tmp_path):
        with Database.connect_sqlite(tmp_path / "app.db") as database:
            assert database.query("PRAGMA foreign_keys") == [(1,)]

    def test_memory_database(self):
        with Database.connect_sqlite(":memory:") as database:
            database.execute("CREATE TABLE t (id INTEGER)")
            assert database.execute("INSERT INTO t (id) VALUES (?)", (7,)) == 1
            assert database.query("SELECT id FROM t WHERE id = ?", [7]) == [(7,)]

    def test_unopenable_path(self, tmp_path):
        with pytest.raises(DatabaseConnectionError):
            Database.connect_sqlite(tmp_path)

    def test_rollback_discards_changes(self, tmp_path):
        with Database.connect_sqlite(tmp_path / "app.db") as database:
            database.execute("CREATE TABLE t (id INTEGER)")
            database.commit()
            database.execute("INSERT INTO t (id) VALUES (?)", (1,))
            database.rollback()

            assert database.query("SELECT COUNT(*) FROM t") == [(0,)]


# ============================================================================
# Product Name Tests
# ============================================================================


class TestInferProductName:
    def test_sqlite3(self):
        connection = sqlite3.connect(":memory:")
        try:
            assert infer_product_name(connection) == "SQLite"
        finally:
            connection.close()

    @pytest.mark.parametrize(
        "module,expected",
        [
            ("psycopg2.extensions", "PostgreSQL"),
            ("psycopg", "PostgreSQL"),
            ("pymysql.connections", "MySQL"),
            ("mysql.connector.connection", "MySQL"),
            ("oracledb.connection", "Oracle"),
            ("pymssql._pymssql", "Microsoft SQL Server"),
        ],
    )
    def test_known_drivers(self, module, expected):
        assert infer_product_name(_fake_connection(module)) == expected

    def test_pyodbc_asks_the_driver(self):
        connection = _fake_connection("pyodbc", getinfo=lambda self, code: "Microsoft SQL Server")
        assert infer_product_name(connection) == "Microsoft SQL Server"

    def test_unknown_driver(self):
        with pytest.raises(DatabaseConnectionError, match="product_name"):
            infer_product_name(_fake_connection("somedriver.core"))

    def test_explicit_product_name_wins(self):
        database = Database(_fake_connection("somedriver"), "PostgreSQL")
        assert database.dialect is Dialect.POSTGRESQL

    def test_dialect_tag_replaces_spaces(self):
        database = Database(MagicMock(), "Microsoft SQL Server")
        assert database.dialect_tag == "Microsoft_SQL_Server"
        assert database.dialect is Dialect.SQLSERVER


# ============================================================================
# Parameter Binding and Cursor Tests
# ============================================================================


class TestBind:
    def test_qmark_unchanged(self):
        database = Database(MagicMock(), "SQLite")
        assert database.bind("a = ? AND b = ?") == "a = ? AND b = ?"

    def test_format(self):
        database = Database(MagicMock(), "PostgreSQL")
        assert database.bind("a = ? AND b = ?") == "a = %s AND b = %s"

    def test_numeric(self):
        database = Database(MagicMock(), "Oracle")
        assert database.bind("a = ? AND b = ?") == "a = :1 AND b = :2"

    def test_driver_paramstyle_wins_over_dialect(self, monkeypatch):
        driver = types.ModuleType("pymssql")
        driver.paramstyle = "pyformat"
        monkeypatch.setitem(sys.modules, "pymssql", driver)

        database = Database(_fake_connection("pymssql"))

        assert database.dialect is Dialect.SQLSERVER
        assert database.paramstyle == "pyformat"
        assert database.bind("UPDATE t SET version = ?") == "UPDATE t SET version = %s"

    def test_named_driver_uses_positional_binds(self, monkeypatch):
        driver = types.ModuleType("oracledb")
        driver.paramstyle = "named"
        monkeypatch.setitem(sys.modules, "oracledb", driver)

        database = Database(_fake_connection("oracledb"))

        assert database.bind("a = ? AND b = ?") == "a = :1 AND b = :2"

    def test_sqlite_driver_paramstyle(self, tmp_path):
        with Database.connect_sqlite(tmp_path / "app.db") as database:
            assert database.paramstyle == "qmark"

    def test_execute_binds_parameters(self):
        connection = MagicMock()
        database = Database(connection, "MySQL")

        database.execute("UPDATE t SET v = ?", (3,))

        cursor = connection.cursor.return_value
        cursor.execute.assert_called_once_with("UPDATE t SET v = %s", (3,))
        cursor.close.assert_called_once()


class TestCursor:
    def test_closed_after_error(self):
        connection = MagicMock()
        database = Database(connection, "SQLite")

        with pytest.raises(RuntimeError):
            with database.cursor():
                raise RuntimeError("boom")

        connection.cursor.return_value.close.assert_called_once()

    def test_closed_when_query_fails(self):
        connection = MagicMock()
        connection.cursor.return_value.execute.side_effect = RuntimeError("bad sql")
        database = Database(connection, "SQLite")

        with pytest.raises(RuntimeError):
            database.query("SELECT nothing")

        connection.cursor.return_value.close.assert_called_once()


# ============================================================================
# Connection Factory Tests
# ============================================================================


class TestConnectionFactory:
    def test_loads_callable(self):
        assert load_connection_factory("sqlite3:connect") is sqlite3.connect

    @pytest.mark.parametrize("spec", ["sqlite3", ":connect", "sqlite3:"])
    def test_malformed(self, spec):
        with pytest.raises(ConfigValidationError):
            load_connection_factory(spec)

    def test_missing_module(self):
        with pytest.raises(ConfigValidationError, match="Cannot import"):
            load_connection_factory("no_such_module_for_dbmigrate:connect")

    def test_missing_attribute(self):
        with pytest.raises(ConfigValidationError, match="Cannot import"):
            load_connection_factory("sqlite3:no_such_function")

    def test_not_callable(self):
        with pytest.raises(ConfigValidationError, match="not callable"):
            load_connection_factory("math:pi")


class TestOpenDatabase:
    def test_sqlite_path(self, tmp_path):
        config = RuntimeConfig(
            database=DatabaseSettings(path=str(tmp_path / "app.db")),
            migrations=MigrationSettings(),
        )

        with open_database(config) as database:
            assert database.dialect is Dialect.SQLITE

    def test_factory_receives_dsn(self, tmp_path):
        config = RuntimeConfig(
            database=DatabaseSettings(connect="sqlite3:connect", env_dsn="APP_DSN"),
            migrations=MigrationSettings(),
            dsn=str(tmp_path / "factory.db"),
        )

        with open_database(config) as database:
            assert database.product_name == "SQLite"

        assert (tmp_path / "factory.db").exists()

    def test_factory_failure_wrapped(self):
        config = RuntimeConfig(
            database=DatabaseSettings(connect="json:loads", product_name="PostgreSQL"),
            migrations=MigrationSettings(),
        )

        with pytest.raises(DatabaseConnectionError, match="json:loads"):
            open_database(config)
