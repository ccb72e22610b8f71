"""
CLI entrypoint for dbmigrate.

Provides a dual-mode command-line interface with:
- Human-friendly output: Rich spinners, tables, colored text
- Agent-friendly output: Structured JSON for automation
- Quiet mode: Tab-separated minimal output for shell scripts

Commands:
    migrate: Bring the schema to a version (default: the latest one)
    status: Show the current version and which migrations are applied
    validate: Validate configuration and migration modules without a database

Exit codes:
    0: Success
    1: Configuration error (invalid YAML, missing DSN, bad migration modules)
    2: Database error (cannot connect, cannot read/write the version)
    3: Migration failed (progress up to the failing unit was recorded)
    4: Invalid target version argument

Examples:
    # Migrate to the newest discovered version
    dbmigrate migrate --config dbmigrate.yaml

    # Roll back to version 3
    dbmigrate migrate 3

    # Agent-friendly JSON output
    dbmigrate status --format json

Security:
    - DSNs are loaded from environment variables only
    - Errors may contain file paths but never DSNs
"""

import logging
import traceback
from dataclasses import asdict
from pathlib import Path
from typing import NoReturn

import typer
from rich.traceback import install as install_rich_traceback

from dbmigrate.config.constants import DEFAULT_CONFIG_FILENAME
from dbmigrate.config.loader import load_config
from dbmigrate.config.schema import RuntimeConfig
from dbmigrate.exceptions import (
    ConfigFileNotFoundError,
    ConfigurationError,
    DatabaseError,
    DBMigrateError,
    DSNMissingError,
    InvalidTargetError,
    MigrationFailedError,
    MigrationUnsupportedError,
)
from dbmigrate.migrations.engine import Engine
from dbmigrate.migrations.registry import default_registry
from dbmigrate.storage.database import Database, open_database
from dbmigrate.storage.version_store import DEFAULT_GATE
from dbmigrate.utils.console import (
    error,
    info,
    output_mode,
    print_banner,
    print_run_summary,
    print_status_table,
    spinner,
    success,
    warning,
)
from dbmigrate.utils.logging import get_logger, log_with_context, setup_logging
from dbmigrate.utils.time import parse_timestamp, utc_timestamp

# Install Rich tracebacks for better error messages
install_rich_traceback(show_locals=False)

logger = get_logger(__name__)

# Exit codes
EXIT_SUCCESS = 0  # Target reached
EXIT_CONFIG_ERROR = 1  # Config or migration modules invalid
EXIT_DB_ERROR = 2  # Connection or version store failed
EXIT_MIGRATION_FAILED = 3  # A unit failed; partial progress recorded
EXIT_INVALID_TARGET = 4  # Target argument is not a version number

# Create Typer app
app = typer.Typer(
    name="dbmigrate",
    help="Apply and roll back numbered schema migrations",
    add_completion=False,
)


def _fail(message: str, code: int, error_type: str, verbose: bool = False, **details) -> NoReturn:
    """Report an error in the active output mode and exit with code."""
    error(message)

    if output_mode.is_agent():
        output_mode.add_json("error_type", error_type)
        for key, value in details.items():
            output_mode.add_json(key, value)
        output_mode.flush_json()

    if verbose:
        traceback.print_exc()

    raise typer.Exit(code)


def parse_target(value: str | None) -> int | None:
    """
    Parse the TARGET argument.

    Args:
        value: Raw argument, or None for "latest"

    Returns:
        Target version, or None

    Raises:
        InvalidTargetError: If value is not a non-negative integer
    """
    if value is None:
        return None

    try:
        target = int(value.strip())
    except ValueError:
        raise InvalidTargetError(f"'{value}' is not a valid version number") from None

    if target < 0:
        raise InvalidTargetError(f"Version number must be >= 0, got: {target}")
    return target


def _configure_output(format: str, quiet: bool, verbose: bool) -> None:
    output_mode.format = format
    output_mode.quiet = quiet

    # Suppress JSON logs in human mode (unless verbose=True)
    setup_logging(verbose=verbose, quiet_logs=output_mode.is_human())


def _load(config: Path, verbose: bool) -> RuntimeConfig:
    try:
        with spinner("Loading configuration..."):
            runtime_config = load_config(config)
            default_registry.load_modules(runtime_config.migrations.modules)
    except ConfigFileNotFoundError as e:
        _fail(f"Configuration file not found: {e}", EXIT_CONFIG_ERROR, "file_not_found")
    except DSNMissingError as e:
        _fail(f"Database DSN missing: {e}", EXIT_CONFIG_ERROR, "dsn_missing")
    except ConfigurationError as e:
        _fail(f"Configuration validation failed: {e}", EXIT_CONFIG_ERROR, "validation_error", verbose)

    success(f"Loaded configuration from {config}")
    return runtime_config


def _open(runtime_config: RuntimeConfig, verbose: bool) -> Database:
    try:
        with spinner("Connecting to database..."):
            database = open_database(runtime_config)
    except ConfigurationError as e:
        _fail(f"Configuration validation failed: {e}", EXIT_CONFIG_ERROR, "validation_error", verbose)
    except DatabaseError as e:
        _fail(f"Failed to connect to database: {e}", EXIT_DB_ERROR, "database_error", verbose)

    success(f"Connected to {database.product_name}")
    return database


@app.command()
def migrate(
    target: str | None = typer.Argument(
        None,
        help="Version to migrate to (default: latest discovered version)",
        show_default=False,
    ),
    config: Path = typer.Option(
        Path(DEFAULT_CONFIG_FILENAME),
        "--config",
        "-c",
        help="Path to YAML configuration file",
    ),
    format: str = typer.Option(
        "text",
        "--format",
        "-f",
        help="Output format: 'text' (human-friendly) or 'json' (machine-readable)",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Minimal output",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging",
    ),
):
    """
    Apply or roll back migrations until the schema reaches TARGET.

    Without TARGET, migrates up to the highest discovered version. When a
    migration fails, the version reached before it is still recorded.

    Exit codes:
      0: Target reached
      1: Configuration error
      2: Database error
      3: Migration failed (partial progress recorded)
      4: Invalid target

    Examples:
      dbmigrate migrate
      dbmigrate migrate 12 --config deploy/dbmigrate.yaml
      dbmigrate migrate 0 --format json
    """
    _configure_output(format, quiet, verbose)

    # Validated before any configuration or database access
    try:
        target_version = parse_target(target)
    except InvalidTargetError as e:
        _fail(str(e), EXIT_INVALID_TARGET, "invalid_target")

    print_banner(_read_version())
    runtime_config = _load(config, verbose)
    database = _open(runtime_config, verbose)
    run_id = utc_timestamp()

    try:
        engine = Engine(runtime_config.migrations, database, default_registry, DEFAULT_GATE)
        with spinner("Migrating..."):
            result = engine.migrate(target_version)
    except MigrationFailedError as e:
        log_with_context(
            logger,
            logging.ERROR,
            "Migration run failed",
            context={"migration": e.name, "reached_version": e.reached_version},
            run_id=run_id,
        )
        details = {"migration": e.name, "reached_version": e.reached_version}
        if isinstance(e, MigrationUnsupportedError):
            details["reason"] = e.reason
        _fail(
            f"{e} (schema is at version {e.reached_version})",
            EXIT_MIGRATION_FAILED,
            "migration_failed",
            verbose,
            **details,
        )
    except ConfigurationError as e:
        _fail(f"Migration configuration error: {e}", EXIT_CONFIG_ERROR, "validation_error", verbose)
    except DatabaseError as e:
        _fail(f"Database error: {e}", EXIT_DB_ERROR, "database_error", verbose)
    except DBMigrateError as e:
        _fail(f"Migration run failed: {e}", EXIT_MIGRATION_FAILED, "migration_failed", verbose)
    finally:
        database.close()

    log_with_context(
        logger,
        logging.INFO,
        "Migration run complete",
        context=result.to_dict(),
        run_id=run_id,
    )
    print_run_summary(result.to_dict())
    success("Done")
    output_mode.flush_json()
    raise typer.Exit(EXIT_SUCCESS)


@app.command()
def status(
    config: Path = typer.Option(
        Path(DEFAULT_CONFIG_FILENAME),
        "--config",
        "-c",
        help="Path to YAML configuration file",
    ),
    format: str = typer.Option(
        "text",
        "--format",
        "-f",
        help="Output format: 'text' or 'json'",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Minimal output (tab-separated values)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging",
    ),
):
    """
    Show the current schema version and the discovered migrations.

    Reading the version creates the bookkeeping table on a database that
    has never been migrated.

    Examples:
      dbmigrate status
      dbmigrate status --quiet | grep pending
    """
    _configure_output(format, quiet, verbose)

    runtime_config = _load(config, verbose)
    database = _open(runtime_config, verbose)

    try:
        engine = Engine(runtime_config.migrations, database, default_registry, DEFAULT_GATE)
        current = engine.current_version()
        statuses = engine.status()
        updated_at = engine.version_store.updated_at()
    except ConfigurationError as e:
        _fail(f"Migration configuration error: {e}", EXIT_CONFIG_ERROR, "validation_error", verbose)
    except DatabaseError as e:
        _fail(f"Database error: {e}", EXIT_DB_ERROR, "database_error", verbose)
    finally:
        database.close()

    print_status_table(current, [asdict(item) for item in statuses])

    if updated_at is not None:
        if output_mode.is_agent():
            output_mode.add_json("updated_at", updated_at)
        else:
            try:
                info(f"Last changed {parse_timestamp(updated_at):%Y-%m-%d %H:%M:%S} UTC")
            except ValueError:
                info(f"Last changed {updated_at}")

    output_mode.flush_json()
    raise typer.Exit(EXIT_SUCCESS)


@app.command()
def validate(
    config: Path = typer.Option(
        Path(DEFAULT_CONFIG_FILENAME),
        "--config",
        "-c",
        help="Path to YAML configuration file",
    ),
    format: str = typer.Option(
        "text",
        "--format",
        "-f",
        help="Output format: 'text' or 'json'",
    ),
):
    """
    Validate configuration and migration modules without touching a database.

    Checks:
    - YAML syntax is valid and all fields pass validation rules
    - The DSN environment variable is set (when one is configured)
    - Every configured migration module imports

    Exit codes:
      0: Configuration is valid
      1: Configuration is invalid

    Examples:
      dbmigrate validate --config dbmigrate.yaml
      dbmigrate validate --format json
    """
    output_mode.format = format

    runtime_config = _load(config, verbose=False)
    settings = runtime_config.migrations
    names = [name for name in default_registry.names() if name.startswith(settings.base_name)]

    success("Configuration is valid")
    info(f"Migration modules: {len(settings.modules)}")
    info(f"Registered migrations: {len(names)}")
    info(f"Version table: {settings.version_table}")
    if not names:
        warning(f"No migrations registered under base name '{settings.base_name}'")

    if output_mode.is_agent():
        output_mode.add_json("valid", True)
        output_mode.add_json("modules_count", len(settings.modules))
        output_mode.add_json("migrations", names)
        output_mode.add_json("version_table", settings.version_table)
        output_mode.flush_json()

    raise typer.Exit(EXIT_SUCCESS)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit",
    ),
):
    """
    dbmigrate - numbered schema migrations for relational databases.

    Exit codes:
      0: Success
      1: Configuration error
      2: Database error
      3: Migration failed
      4: Invalid target

    Use 'dbmigrate COMMAND --help' for detailed command documentation.
    """
    if version:
        from rich.console import Console

        console = Console()
        console.print(f"[bold cyan]dbmigrate[/bold cyan] version {_read_version()}")
        raise typer.Exit(EXIT_SUCCESS)

    if ctx.invoked_subcommand is None:
        from rich.console import Console

        console = Console()
        console.print("[yellow]Use --help to see available commands[/yellow]")
        console.print()
        console.print("Commands:")
        console.print("  migrate   Apply or roll back migrations to a version")
        console.print("  status    Show the current version and pending migrations")
        console.print("  validate  Validate configuration without a database")


def _read_version() -> str:
    """
    Read version from package metadata (pyproject.toml).

    Returns:
        Version string (e.g., "0.1.0")
    """
    try:
        from importlib.metadata import version

        return version("dbmigrate")
    except Exception:
        # Fallback if package metadata is not available
        from dbmigrate import __version__

        return __version__


if __name__ == "__main__":
    app()
