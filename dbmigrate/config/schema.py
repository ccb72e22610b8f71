"""
Configuration schema models for dbmigrate.

This module defines Pydantic models for validating and parsing the
dbmigrate.yaml file.

Models:
    DatabaseSettings: Where the managed database lives and how to connect
    MigrationSettings: Naming convention, start index, version table, modules
    MigrateConfig: Root configuration model (validates entire YAML)
    RuntimeConfig: Validated configuration with the DSN resolved from the
        environment
"""

import re

from pydantic import BaseModel, Field, field_validator, model_validator

from .constants import (
    DEFAULT_BASE_NAME,
    DEFAULT_START_INDEX,
    DEFAULT_VERSION_TABLE,
    DIALECT_SEPARATOR,
)

IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class DatabaseSettings(BaseModel):
    """
    Database connection settings.

    Exactly one of ``path`` (SQLite file) or ``connect`` (connection factory)
    must be given.

    Attributes:
        path: SQLite database file, or ":memory:"
        connect: Connection factory as "module:function"; called with the DSN
        env_dsn: Environment variable holding the DSN for the factory
        product_name: Override for the product name the driver reports
    """

    path: str | None = None
    connect: str | None = None
    env_dsn: str | None = None
    product_name: str | None = None

    @field_validator("path", "env_dsn", "product_name")
    @classmethod
    def validate_not_blank(cls, v: str | None) -> str | None:
        """Validate optional strings are non-empty when given."""
        if v is not None and (not v or v.isspace()):
            raise ValueError("value cannot be empty")
        return v

    @field_validator("connect")
    @classmethod
    def validate_connect(cls, v: str | None) -> str | None:
        """Validate connect looks like module:function."""
        if v is None:
            return v
        module_name, sep, attribute = v.partition(":")
        if not sep or not module_name.strip() or not attribute.strip():
            raise ValueError(f"connect must look like 'module:function', got: {v}")
        return v

    @model_validator(mode="after")
    def validate_target(self) -> "DatabaseSettings":
        """Validate exactly one connection method is configured."""
        if (self.path is None) == (self.connect is None):
            raise ValueError("exactly one of 'path' or 'connect' must be set")
        if self.env_dsn is not None and self.connect is None:
            raise ValueError("'env_dsn' requires 'connect'")
        return self


class MigrationSettings(BaseModel):
    """
    Migration discovery and bookkeeping settings.

    Attributes:
        base_name: Unit name prefix; the ordinal follows it
        start_index: First ordinal discovery probes
        version_table: Bookkeeping table name
        modules: Modules or packages to import so their units register
    """

    base_name: str = DEFAULT_BASE_NAME
    start_index: int = DEFAULT_START_INDEX
    version_table: str = DEFAULT_VERSION_TABLE
    modules: list[str] = []

    @field_validator("base_name")
    @classmethod
    def validate_base_name(cls, v: str) -> str:
        """Validate base_name is non-empty and free of the dialect separator."""
        if not v or v.isspace():
            raise ValueError("base_name cannot be empty")
        if DIALECT_SEPARATOR in v:
            raise ValueError(f"base_name cannot contain '{DIALECT_SEPARATOR}'")
        if v[-1].isdigit():
            raise ValueError("base_name cannot end with a digit")
        return v

    @field_validator("start_index")
    @classmethod
    def validate_start_index(cls, v: int) -> int:
        """Validate start_index is not negative."""
        if v < 0:
            raise ValueError(f"start_index must be >= 0, got: {v}")
        return v

    @field_validator("version_table")
    @classmethod
    def validate_version_table(cls, v: str) -> str:
        """Validate version_table is a plain identifier."""
        if not IDENTIFIER_PATTERN.match(v):
            raise ValueError(f"version_table must be a plain identifier, got: {v!r}")
        return v

    @field_validator("modules")
    @classmethod
    def validate_modules(cls, v: list[str]) -> list[str]:
        """Validate module names are non-empty and unique (case-sensitive)."""
        seen: set[str] = set()
        for module_name in v:
            if not module_name or module_name.isspace():
                raise ValueError("module names cannot be empty")
            if module_name in seen:
                raise ValueError(f"Duplicate module: {module_name}")
            seen.add(module_name)
        return v


class MigrateConfig(BaseModel):
    """
    Root configuration model for dbmigrate.yaml.

    Attributes:
        database: Connection settings
        migrations: Discovery and bookkeeping settings
    """

    database: DatabaseSettings
    migrations: MigrationSettings = Field(default_factory=MigrationSettings)


class RuntimeConfig(BaseModel):
    """
    Configuration ready for a run, with the DSN resolved.

    Attributes:
        database: Connection settings
        migrations: Discovery and bookkeeping settings
        dsn: Resolved DSN (NEVER log this)
    """

    database: DatabaseSettings
    migrations: MigrationSettings
    dsn: str | None = Field(default=None, repr=False)
