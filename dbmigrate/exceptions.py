"""
Custom exceptions for dbmigrate.

This module provides a hierarchy of exceptions that enable type-safe error
handling throughout the migration runner. All exceptions inherit from the base
DBMigrateError for consistent catching.

Exception Hierarchy:
    DBMigrateError (base)
    ├── ConfigurationError
    │   ├── ConfigFileNotFoundError
    │   ├── ConfigValidationError
    │   ├── DSNMissingError
    │   └── MigrationConfigurationError
    │       ├── MigrationRegistrationError
    │       └── DuplicateMigrationError
    ├── InvalidTargetError
    ├── SchemaValidationError
    ├── UnsupportedFeatureError
    ├── DatabaseError
    │   ├── DatabaseConnectionError
    │   ├── VersionStoreError
    │   └── IntrospectionError
    └── MigrationFailedError
        ├── MigrationExecutionError
        └── MigrationUnsupportedError

Usage:
    from dbmigrate.exceptions import MigrationFailedError

    try:
        engine.migrate(7)
    except MigrationFailedError as e:
        logger.error(f"Stopped at version {e.reached_version}: {e}")
        sys.exit(3)
"""


class DBMigrateError(Exception):
    """
    Base exception for all dbmigrate errors.

    All custom exceptions in this package inherit from this class, so callers
    can catch every migration-runner failure with a single except clause.
    """

    pass


# ============================================================================
# Configuration Errors
# ============================================================================


class ConfigurationError(DBMigrateError):
    """
    Base class for configuration-related errors.

    Raised when configuration loading, parsing, or validation fails.
    Should be caught and result in exit code 1 (configuration error).
    """

    pass


class ConfigFileNotFoundError(ConfigurationError):
    """
    Configuration file does not exist at the specified path.

    Example:
        raise ConfigFileNotFoundError("/path/to/dbmigrate.yaml")
    """

    pass


class ConfigValidationError(ConfigurationError):
    """
    Configuration file is invalid (schema validation failed).

    Example:
        raise ConfigValidationError("Field 'migrations.start_index' must be >= 0")
    """

    pass


class DSNMissingError(ConfigurationError):
    """
    Environment variable holding the database DSN is not set.

    Example:
        raise DSNMissingError("APP_DATABASE_DSN environment variable not set")
    """

    pass


class MigrationConfigurationError(ConfigurationError):
    """Migration units are declared in a way the engine cannot run."""

    pass


class MigrationRegistrationError(MigrationConfigurationError):
    """
    A migration unit could not be registered.

    Raised for duplicate registration names or unparseable names.
    """

    pass


class DuplicateMigrationError(MigrationConfigurationError):
    """
    Two candidate migration units resolve to the same ordinal.

    Attributes:
        ordinal: The ordinal claimed by more than one unit
        names: Names of the conflicting units
    """

    def __init__(self, message: str, ordinal: int, names: list[str]):
        super().__init__(message)
        self.ordinal = ordinal
        self.names = names


class InvalidTargetError(DBMigrateError):
    """
    Requested target version is not a usable schema version.

    Example:
        raise InvalidTargetError("'abc' is not a valid version number")
    """

    pass


# ============================================================================
# DDL Errors
# ============================================================================


class SchemaValidationError(DBMigrateError):
    """
    A schema-object description was rejected before any SQL was produced.

    Raised for missing required arguments, scale without precision, empty
    column lists, and column counts above a dialect ceiling.

    Example:
        raise SchemaValidationError("Scale of column price is defined, but precision isn't.")
    """

    pass


class UnsupportedFeatureError(DBMigrateError):
    """
    The dialect cannot express the requested statement at all.

    Optional clauses that a dialect cannot express are dropped with a
    warning instead; this error is only for statements with no equivalent
    (for example ALTER COLUMN on SQLite).
    """

    pass


# ============================================================================
# Database Errors
# ============================================================================


class DatabaseError(DBMigrateError):
    """
    Base class for database-related errors.

    Should be caught and result in exit code 2 (database error).
    """

    pass


class DatabaseConnectionError(DatabaseError):
    """
    Database connection could not be opened.

    Example:
        raise DatabaseConnectionError("Failed to open ./var/app.db: permission denied")
    """

    pass


class VersionStoreError(DatabaseError):
    """
    Reading, writing or initializing the schema version failed.

    Always fatal: the run stops without attempting further work.
    """

    pass


class IntrospectionError(DatabaseError):
    """
    A table or index existence lookup failed.

    Example:
        raise IntrospectionError("Failed to look up table 'users'")
    """

    pass


# ============================================================================
# Migration Errors
# ============================================================================


class MigrationFailedError(DBMigrateError):
    """
    A migration unit did not complete.

    Raised after the engine has recorded the last version it reached.

    Attributes:
        name: Registered name of the failing unit
        ordinal: Ordinal of the failing unit
        reached_version: Version persisted before this error was raised
    """

    def __init__(
        self,
        message: str,
        name: str | None = None,
        ordinal: int | None = None,
        reached_version: int | None = None,
    ):
        super().__init__(message)
        self.name = name
        self.ordinal = ordinal
        self.reached_version = reached_version


class MigrationExecutionError(MigrationFailedError):
    """A unit's setup(), up() or down() raised an exception."""

    pass


class MigrationUnsupportedError(MigrationFailedError):
    """
    A unit reported that it does not support the connected database.

    No statements were run by the unit; the reason is kept in ``reason``.
    """

    def __init__(
        self,
        message: str,
        reason: str,
        name: str | None = None,
        ordinal: int | None = None,
        reached_version: int | None = None,
    ):
        super().__init__(message, name, ordinal, reached_version)
        self.reason = reason
