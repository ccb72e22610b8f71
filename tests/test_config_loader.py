"""
Tests for config.loader and config.schema modules.

This module tests configuration loading, validation, and DSN resolution:
- YAML loading and parsing
- Pydantic schema validation (all validators)
- Environment variable resolution for the DSN
- Error handling for missing files, invalid YAML, and missing env vars
- Edge cases (empty files, whitespace-only values, duplicate modules)
"""

import pytest
import yaml
from pydantic import ValidationError

from dbmigrate.config.loader import load_config, resolve_dsn
from dbmigrate.config.schema import (
    DatabaseSettings,
    MigrateConfig,
    MigrationSettings,
    RuntimeConfig,
)
from dbmigrate.exceptions import (
    ConfigFileNotFoundError,
    ConfigurationError,
    ConfigValidationError,
    DSNMissingError,
)

# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def valid_config_dict():
    """Return a valid configuration dictionary for testing."""
    return {
        "database": {
            "connect": "psycopg:connect",
            "env_dsn": "APP_DATABASE_DSN",
        },
        "migrations": {
            "base_name": "Migration_",
            "start_index": 1,
            "version_table": "schema_version",
            "modules": ["app.migrations"],
        },
    }


@pytest.fixture
def write_config(tmp_path):
    """Write a configuration dict (or raw text) and return the file path."""

    def _write(content, name="dbmigrate.yaml"):
        config_file = tmp_path / name
        if isinstance(content, str):
            config_file.write_text(content, encoding="utf-8")
        else:
            with config_file.open("w", encoding="utf-8") as f:
                yaml.dump(content, f)
        return config_file

    return _write


@pytest.fixture
def dsn_env(monkeypatch):
    """Set the DSN environment variable used by valid_config_dict."""
    monkeypatch.setenv("APP_DATABASE_DSN", "postgresql://app:secret@db/app")


# ============================================================================
# Schema Tests
# ============================================================================


class TestDatabaseSettings:
    """Test DatabaseSettings validation."""

    def test_sqlite_path(self):
        settings = DatabaseSettings(path="./var/app.db")
        assert settings.connect is None

    def test_connection_factory(self):
        settings = DatabaseSettings(connect="oracledb:connect", env_dsn="ORA_DSN")
        assert settings.env_dsn == "ORA_DSN"

    def test_rejects_neither(self):
        with pytest.raises(ValidationError, match="exactly one"):
            DatabaseSettings()

    def test_rejects_both(self):
        with pytest.raises(ValidationError, match="exactly one"):
            DatabaseSettings(path="app.db", connect="sqlite3:connect")

    def test_env_dsn_requires_connect(self):
        with pytest.raises(ValidationError, match="requires 'connect'"):
            DatabaseSettings(path="app.db", env_dsn="APP_DSN")

    @pytest.mark.parametrize("connect", ["psycopg", "psycopg:", ":connect", " :connect"])
    def test_rejects_malformed_connect(self, connect):
        with pytest.raises(ValidationError, match="module:function"):
            DatabaseSettings(connect=connect)

    def test_rejects_whitespace_path(self):
        with pytest.raises(ValidationError, match="cannot be empty"):
            DatabaseSettings(path="   ")


class TestMigrationSettings:
    """Test MigrationSettings defaults and validation."""

    def test_defaults(self):
        settings = MigrationSettings()
        assert settings.base_name == "Migration_"
        assert settings.start_index == 1
        assert settings.version_table == "schema_version"
        assert settings.modules == []

    @pytest.mark.parametrize("base_name", ["", "   ", "Migration$", "Step1"])
    def test_rejects_bad_base_name(self, base_name):
        with pytest.raises(ValidationError, match="base_name"):
            MigrationSettings(base_name=base_name)

    def test_start_index_zero_allowed(self):
        assert MigrationSettings(start_index=0).start_index == 0

    def test_rejects_negative_start_index(self):
        with pytest.raises(ValidationError, match="start_index"):
            MigrationSettings(start_index=-1)

    @pytest.mark.parametrize("table", ["schema version", "1versions", "v; DROP TABLE x", ""])
    def test_rejects_bad_version_table(self, table):
        with pytest.raises(ValidationError, match="version_table"):
            MigrationSettings(version_table=table)

    def test_rejects_duplicate_modules(self):
        with pytest.raises(ValidationError, match="Duplicate module"):
            MigrationSettings(modules=["app.migrations", "app.migrations"])

    def test_rejects_empty_module(self):
        with pytest.raises(ValidationError, match="cannot be empty"):
            MigrationSettings(modules=["app.migrations", " "])


class TestMigrateConfig:
    """Test root MigrateConfig model."""

    def test_valid_config(self, valid_config_dict):
        config = MigrateConfig.model_validate(valid_config_dict)
        assert config.migrations.modules == ["app.migrations"]

    def test_migrations_section_optional(self):
        config = MigrateConfig.model_validate({"database": {"path": "app.db"}})
        assert config.migrations.base_name == "Migration_"

    def test_database_section_required(self):
        with pytest.raises(ValidationError):
            MigrateConfig.model_validate({"migrations": {}})


class TestRuntimeConfig:
    """Test RuntimeConfig keeps the DSN out of its repr."""

    def test_dsn_not_in_repr(self):
        config = RuntimeConfig(
            database=DatabaseSettings(connect="psycopg:connect", env_dsn="APP_DSN"),
            migrations=MigrationSettings(),
            dsn="postgresql://app:secret@db/app",
        )
        assert "secret" not in repr(config)
        assert config.dsn == "postgresql://app:secret@db/app"


# ============================================================================
# Loader Tests
# ============================================================================


class TestLoadConfig:
    """Test load_config() end to end."""

    def test_loads_valid_config_file(self, write_config, valid_config_dict, dsn_env):
        config = load_config(write_config(valid_config_dict))

        assert isinstance(config, RuntimeConfig)
        assert config.database.connect == "psycopg:connect"
        assert config.dsn == "postgresql://app:secret@db/app"

    def test_accepts_string_path(self, write_config, valid_config_dict, dsn_env):
        config = load_config(str(write_config(valid_config_dict)))
        assert config.migrations.version_table == "schema_version"

    def test_sqlite_needs_no_dsn(self, write_config):
        config = load_config(write_config({"database": {"path": "./var/app.db"}}))
        assert config.dsn is None

    def test_raises_for_missing_file(self, tmp_path):
        with pytest.raises(ConfigFileNotFoundError, match="not found"):
            load_config(tmp_path / "missing.yaml")

    def test_raises_on_empty_yaml_file(self, write_config):
        with pytest.raises(ConfigValidationError, match="empty"):
            load_config(write_config(""))

    def test_raises_on_invalid_yaml_syntax(self, write_config):
        with pytest.raises(ConfigValidationError, match="Invalid YAML"):
            load_config(write_config("database: [unclosed\n"))

    def test_validation_errors_list_locations(self, write_config):
        path = write_config({"database": {"path": "app.db"}, "migrations": {"start_index": -3}})

        with pytest.raises(ConfigValidationError) as exc_info:
            load_config(path)

        message = str(exc_info.value)
        assert "Configuration validation failed" in message
        assert "  - migrations.start_index:" in message

    def test_missing_dsn_variable(self, write_config, valid_config_dict, monkeypatch):
        monkeypatch.delenv("APP_DATABASE_DSN", raising=False)

        with pytest.raises(DSNMissingError, match="APP_DATABASE_DSN"):
            load_config(write_config(valid_config_dict))

    def test_errors_share_base_class(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_config(tmp_path / "missing.yaml")


class TestResolveDsn:
    """Test resolve_dsn()."""

    def test_none_without_env_dsn(self):
        config = MigrateConfig.model_validate({"database": {"connect": "pymysql:connect"}})
        assert resolve_dsn(config) is None

    def test_whitespace_value(self, valid_config_dict, monkeypatch):
        monkeypatch.setenv("APP_DATABASE_DSN", "   ")
        config = MigrateConfig.model_validate(valid_config_dict)

        with pytest.raises(DSNMissingError, match="whitespace"):
            resolve_dsn(config)

    def test_empty_value(self, valid_config_dict, monkeypatch):
        monkeypatch.setenv("APP_DATABASE_DSN", "")
        config = MigrateConfig.model_validate(valid_config_dict)

        with pytest.raises(DSNMissingError, match="not set"):
            resolve_dsn(config)
