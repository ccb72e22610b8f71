"""
Configuration loader for dbmigrate.

This module loads YAML configuration files, validates them with Pydantic
models, and resolves the database DSN from an environment variable to
create a RuntimeConfig.

Credentials stay out of the YAML file: the file names the environment
variable (database.env_dsn), and only the RuntimeConfig holds the value.

Functions:
    load_config: Main entrypoint to load and validate dbmigrate.yaml
    resolve_dsn: Helper to resolve the DSN environment variable
"""

import os
from pathlib import Path

import yaml
from pydantic import ValidationError

from dbmigrate.exceptions import (
    ConfigFileNotFoundError,
    ConfigValidationError,
    DSNMissingError,
)

from .schema import MigrateConfig, RuntimeConfig


def load_config(config_path: str | Path) -> RuntimeConfig:
    """
    Load dbmigrate.yaml and resolve the DSN from the environment.

    This function:
    1. Loads YAML from the specified path
    2. Validates structure using the MigrateConfig Pydantic model
    3. Resolves database.env_dsn to the actual DSN
    4. Returns RuntimeConfig ready for open_database()

    Args:
        config_path: Path to dbmigrate.yaml (relative or absolute)

    Returns:
        RuntimeConfig with the resolved DSN and validated settings

    Raises:
        ConfigFileNotFoundError: If config file doesn't exist at the specified path
        ConfigValidationError: If YAML is invalid or config validation fails
        DSNMissingError: If the DSN environment variable is not set

    Example:
        >>> config = load_config("dbmigrate.yaml")
        >>> config.migrations.base_name
        'Migration_'

    Security:
        - DSNs are loaded from environment variables only
        - Uses yaml.safe_load() to prevent code injection
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise ConfigFileNotFoundError(f"Configuration file not found: {config_path}")

    try:
        with config_path.open(encoding="utf-8") as f:
            raw_config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigValidationError(f"Invalid YAML syntax in {config_path}: {e}") from e
    except Exception as e:
        raise ConfigValidationError(
            f"Failed to read configuration file {config_path}: {e}"
        ) from e

    if raw_config is None:
        raise ConfigValidationError(f"Configuration file is empty: {config_path}")

    try:
        migrate_config = MigrateConfig.model_validate(raw_config)
    except ValidationError as e:
        # Format validation errors in a user-friendly way
        error_messages = []
        for error in e.errors():
            loc = ".".join(str(x) for x in error["loc"])
            msg = error["msg"]
            error_messages.append(f"  - {loc}: {msg}")

        raise ConfigValidationError(
            f"Configuration validation failed in {config_path}:\n"
            + "\n".join(error_messages)
        ) from e

    return RuntimeConfig(
        database=migrate_config.database,
        migrations=migrate_config.migrations,
        dsn=resolve_dsn(migrate_config),
    )


def resolve_dsn(config: MigrateConfig) -> str | None:
    """
    Resolve database.env_dsn to the DSN it names.

    Args:
        config: Validated MigrateConfig

    Returns:
        The DSN, or None when no env_dsn is configured

    Raises:
        DSNMissingError: If the environment variable is unset or blank

    Security:
        - NEVER logs the DSN (it usually embeds a password)
    """
    env_var_name = config.database.env_dsn
    if env_var_name is None:
        return None

    dsn = os.environ.get(env_var_name)

    if not dsn:
        raise DSNMissingError(
            f"Environment variable ${env_var_name} not set "
            f"(required for database.connect={config.database.connect}). "
            f"Please set it in your environment or .env file."
        )

    if dsn.isspace():
        raise DSNMissingError(f"Environment variable ${env_var_name} is empty or whitespace")

    return dsn
