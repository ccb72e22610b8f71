"""
Database connection wrapper for dbmigrate.

The engine, the version store and the DDL generator all talk to the
database through Database, a thin wrapper over any DB-API 2.0 connection
that adds what they need on top of the driver:

- product_name / dialect_tag: which product is connected, used to pick a
  Dialect and as the qualifier when discovering dialect-specific migrations
- bind(): statements are written with '?' markers and rewritten to the
  driver's paramstyle
- cursor(): scoped cursor that is closed on every exit path

SQLite connections are opened directly with the standard-library sqlite3
module. Other products come from a connection factory named in the
configuration ("module:function"), which receives the resolved DSN.

Example:
    >>> with Database.connect_sqlite("./var/app.db") as database:
    ...     database.execute("CREATE TABLE t (id INTEGER)")
    ...     database.commit()
    >>> database.dialect_tag
    'SQLite'

Security:
    - ALL queries issued by dbmigrate itself use parameter markers
    - DSNs are never logged unredacted (see utils.logging)
"""

import importlib
import logging
import re
import sqlite3
import sys
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Any

from dbmigrate.ddl.dialects import Dialect
from dbmigrate.exceptions import ConfigValidationError, DatabaseConnectionError

if TYPE_CHECKING:
    from dbmigrate.config.schema import RuntimeConfig

logger = logging.getLogger(__name__)

# Driver module (first dotted segment of the connection class' module) to
# the product name that driver talks to.
DRIVER_PRODUCT_NAMES: dict[str, str] = {
    "sqlite3": "SQLite",
    "psycopg": "PostgreSQL",
    "psycopg2": "PostgreSQL",
    "pg8000": "PostgreSQL",
    "pymysql": "MySQL",
    "MySQLdb": "MySQL",
    "mysql": "MySQL",
    "oracledb": "Oracle",
    "cx_Oracle": "Oracle",
    "pymssql": "Microsoft SQL Server",
}

# ODBC info type for the DBMS product name (SQL_DBMS_NAME).
SQL_DBMS_NAME = 17

_MARKER = re.compile(r"\?")


def infer_product_name(connection: Any) -> str:
    """
    Work out which database product a DB-API connection talks to.

    Args:
        connection: Open DB-API connection

    Returns:
        Product name, e.g. "PostgreSQL"

    Raises:
        DatabaseConnectionError: If the driver is not recognised
    """
    driver = type(connection).__module__.split(".")[0]

    if driver == "pyodbc":
        try:
            return connection.getinfo(SQL_DBMS_NAME)
        except Exception as e:
            raise DatabaseConnectionError(
                "Cannot determine database product name from ODBC connection"
            ) from e

    try:
        return DRIVER_PRODUCT_NAMES[driver]
    except KeyError:
        raise DatabaseConnectionError(
            f"Cannot determine database product name for driver '{driver}'. "
            "Set database.product_name in the configuration."
        ) from None


def driver_paramstyle(connection: Any) -> str | None:
    """Return the DB-API paramstyle declared by the connection's driver module, if any."""
    driver = sys.modules.get(type(connection).__module__.split(".")[0])
    paramstyle = getattr(driver, "paramstyle", None)
    return paramstyle if isinstance(paramstyle, str) else None


class Database:
    """
    A live connection plus the product it is connected to.

    Attributes:
        connection: Underlying DB-API connection
        product_name: Product name as reported/configured (e.g. "Microsoft SQL Server")
        dialect: Dialect resolved from the product name
        paramstyle: Marker style of the driver, or of the dialect's usual
            driver when the driver module does not declare one
    """

    def __init__(
        self,
        connection: Any,
        product_name: str | None = None,
        dialect: Dialect | None = None,
    ):
        self.connection = connection
        self.product_name = product_name or infer_product_name(connection)
        self.dialect = dialect or Dialect.from_product_name(self.product_name)
        self.paramstyle = driver_paramstyle(connection) or self.dialect.capabilities.paramstyle

    @classmethod
    def connect_sqlite(cls, path: str | Path) -> "Database":
        """
        Open (creating if needed) a SQLite database file.

        Creates the parent directory like the rest of the storage layer
        does; ":memory:" is passed through untouched.

        Args:
            path: Filesystem path or ":memory:"

        Returns:
            Database wrapping the sqlite3 connection

        Raises:
            DatabaseConnectionError: If the file cannot be opened
        """
        try:
            if str(path) != ":memory:":
                Path(path).parent.mkdir(parents=True, exist_ok=True)
            connection = sqlite3.connect(str(path))
            # Foreign keys are off by default in SQLite
            connection.execute("PRAGMA foreign_keys = ON")
        except (sqlite3.Error, OSError) as e:
            raise DatabaseConnectionError(f"Failed to open SQLite database {path}: {e}") from e

        return cls(connection, "SQLite", Dialect.SQLITE)

    @property
    def dialect_tag(self) -> str:
        """Product name with spaces replaced by underscores."""
        return self.product_name.replace(" ", "_")

    def bind(self, sql: str) -> str:
        """
        Rewrite '?' parameter markers to the driver's paramstyle.

        Only statements built by dbmigrate go through here; they never
        contain a literal '?'.

        Args:
            sql: Statement using '?' markers

        Returns:
            Statement using the driver's markers
        """
        match self.paramstyle:
            case "format" | "pyformat":
                return _MARKER.sub("%s", sql)
            case "numeric" | "named":
                counter = iter(range(1, sql.count("?") + 1))
                return _MARKER.sub(lambda _: f":{next(counter)}", sql)
            case _:
                return sql

    @contextmanager
    def cursor(self) -> Iterator[Any]:
        """Yield a cursor and close it on every exit path."""
        cursor = self.connection.cursor()
        try:
            yield cursor
        finally:
            cursor.close()

    def execute(self, sql: str, params: Sequence[Any] = ()) -> int:
        """
        Execute one statement.

        Args:
            sql: Statement text, '?' markers for parameters
            params: Parameter values

        Returns:
            Cursor rowcount (-1 where the driver does not report one)
        """
        logger.debug(f"Executing: {sql}")
        with self.cursor() as cursor:
            if params:
                cursor.execute(self.bind(sql), tuple(params))
            else:
                cursor.execute(sql)
            return cursor.rowcount

    def query(self, sql: str, params: Sequence[Any] = ()) -> list[tuple]:
        """
        Execute a query and fetch all rows.

        Args:
            sql: Query text, '?' markers for parameters
            params: Parameter values

        Returns:
            All result rows as tuples
        """
        with self.cursor() as cursor:
            if params:
                cursor.execute(self.bind(sql), tuple(params))
            else:
                cursor.execute(sql)
            return [tuple(row) for row in cursor.fetchall()]

    def commit(self) -> None:
        self.connection.commit()

    def rollback(self) -> None:
        self.connection.rollback()

    def close(self) -> None:
        self.connection.close()

    def __enter__(self) -> "Database":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"<Database {self.product_name} ({self.dialect.name})>"


def load_connection_factory(spec: str):
    """
    Import a connection factory named "module:function".

    Args:
        spec: Dotted module path and attribute, separated by a colon

    Returns:
        The factory callable

    Raises:
        ConfigValidationError: If the spec is malformed or cannot be imported
    """
    module_name, sep, attribute = spec.partition(":")
    if not sep or not module_name or not attribute:
        raise ConfigValidationError(
            f"Connection factory must look like 'module:function', got: {spec}"
        )

    try:
        module = importlib.import_module(module_name)
        factory = getattr(module, attribute)
    except (ImportError, AttributeError) as e:
        raise ConfigValidationError(f"Cannot import connection factory {spec}: {e}") from e

    if not callable(factory):
        raise ConfigValidationError(f"Connection factory {spec} is not callable")
    return factory


def open_database(config: "RuntimeConfig") -> Database:
    """
    Open the database described by a runtime configuration.

    Args:
        config: Loaded configuration with resolved DSN

    Returns:
        Connected Database

    Raises:
        ConfigValidationError: If the connection factory cannot be loaded
        DatabaseConnectionError: If connecting fails
    """
    settings = config.database

    if settings.path is not None:
        database = Database.connect_sqlite(settings.path)
        logger.info(f"Opened SQLite database {settings.path}")
        return database

    factory = load_connection_factory(settings.connect)
    try:
        connection = factory(config.dsn) if config.dsn is not None else factory()
    except Exception as e:
        raise DatabaseConnectionError(f"Connection factory {settings.connect} failed: {e}") from e

    database = Database(connection, settings.product_name)
    logger.info(f"Connected to {database.product_name} via {settings.connect}")
    return database
