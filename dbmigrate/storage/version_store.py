"""
Persisted schema version bookkeeping.

The current schema version lives in a one-row table (default name
"schema_version") inside the managed database:

    version     INTEGER NOT NULL
    updated_at  VARCHAR(32)        -- ISO 8601 UTC, 'Z' suffix

The table is created lazily the first time a VersionStore is used against a
database that has never been managed, and seeded with version 0. Creation
goes through the DDL generator, so the bookkeeping table is portable across
dialects like any migration.

Self-initialization is serialized by an InitGate: one per process, created
at start-up and handed to every VersionStore. The gate holds a reentrant
lock plus a "running" flag; a caller that finds initialization already
running on its own thread skips it, other threads wait for the lock and
then see that the table exists.

Example:
    >>> gate = InitGate()
    >>> store = VersionStore(database, "schema_version", gate)
    >>> store.current_version()
    0
    >>> store.update_version(3)
    >>> store.current_version()
    3
"""

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Optional

from dbmigrate.ddl.generator import DDLGenerator
from dbmigrate.ddl.schema import Column, ColumnType, Table
from dbmigrate.exceptions import VersionStoreError

from ..utils.time import utc_timestamp
from .database import Database

logger = logging.getLogger(__name__)

# Sentinel for "no version recorded"
UNKNOWN_VERSION = -1

# Bookkeeping column names
VERSION_COLUMN = "version"
UPDATED_AT_COLUMN = "updated_at"

# Version written when the bookkeeping table is first created
INITIAL_VERSION = 0


class InitGate:
    """
    Process-wide gate around version table self-initialization.

    Attributes:
        running: True while some caller holds the gate and is initializing
    """

    def __init__(self):
        self._lock = threading.RLock()
        self.running = False

    @contextmanager
    def hold(self) -> Iterator[bool]:
        """
        Acquire the gate for one initialization attempt.

        Yields:
            True if the caller should initialize, False if an initialization
            is already running (reentrant call on the same thread)

        The running flag is cleared on every exit path, including when the
        initialization raises.
        """
        with self._lock:
            if self.running:
                yield False
                return

            self.running = True
            try:
                yield True
            finally:
                self.running = False


# Shared by every engine in this process unless a caller passes its own
DEFAULT_GATE = InitGate()


class VersionStore:
    """
    Reads and writes the single persisted schema version.

    Args:
        database: Managed database
        table_name: Name of the bookkeeping table
        gate: Shared initialization gate
        generator: DDL generator for the database (built if omitted)
    """

    def __init__(
        self,
        database: Database,
        table_name: str,
        gate: InitGate,
        generator: Optional[DDLGenerator] = None,
    ):
        self.database = database
        self.table_name = table_name
        self.gate = gate
        self.generator = generator or DDLGenerator(database)
        self._initialized = False

    @property
    def table(self) -> Table:
        """Description of the bookkeeping table."""
        return Table(
            self.table_name,
            [
                Column(VERSION_COLUMN, ColumnType.INTEGER, nullable=False),
                Column(UPDATED_AT_COLUMN, ColumnType.VARCHAR, length=32),
            ],
        )

    def _rollback(self) -> None:
        try:
            self.database.rollback()
        except Exception:
            logger.warning("Rollback after version store failure also failed", exc_info=True)

    def _columns(self) -> tuple[str, str]:
        # Quoted like the CREATE TABLE, so case-folding dialects find them
        return self.generator.quote(VERSION_COLUMN), self.generator.quote(UPDATED_AT_COLUMN)

    def _insert(self, version: int) -> None:
        version_column, updated_at_column = self._columns()
        self.database.execute(
            f"INSERT INTO {self.generator.quote(self.table_name)} "
            f"({version_column}, {updated_at_column}) VALUES (?, ?)",
            (version, utc_timestamp()),
        )

    def _seed(self) -> None:
        self._insert(INITIAL_VERSION)

    def ensure_initialized(self) -> None:
        """
        Create and seed the bookkeeping table if it does not exist yet.

        Idempotent: once a store has seen the table it never checks again,
        and a table that exists is never recreated. A table that exists but
        holds no row is seeded again.

        Raises:
            VersionStoreError: If the table cannot be checked, created or seeded
        """
        if self._initialized:
            return

        with self.gate.hold() as acquired:
            if not acquired:
                logger.debug(
                    f"Initialization of {self.table_name} already running, not repeating it"
                )
                return

            try:
                if not self.generator.table_exists(self.table_name):
                    logger.info(f"Creating version table {self.table_name}")
                    self.database.execute(self.generator.create_table(self.table))
                    self._seed()
                elif not self.database.query(
                    f"SELECT {self.generator.quote(VERSION_COLUMN)} "
                    f"FROM {self.generator.quote(self.table_name)}"
                ):
                    logger.warning(f"Version table {self.table_name} is empty, seeding it")
                    self._seed()
                self.database.commit()
            except Exception as e:
                self._rollback()
                logger.error(f"Failed to initialize version table {self.table_name}", exc_info=True)
                raise VersionStoreError(
                    f"Failed to initialize version table {self.table_name}: {e}"
                ) from e

            self._initialized = True

    def _read(self, column: str):
        self.ensure_initialized()
        try:
            rows = self.database.query(
                f"SELECT MAX({self.generator.quote(column)}) "
                f"FROM {self.generator.quote(self.table_name)}"
            )
        except Exception as e:
            raise VersionStoreError(f"Failed to read {self.table_name}: {e}") from e
        return rows[0][0] if rows else None

    def current_version(self) -> int:
        """
        Return the persisted schema version.

        Returns:
            Current version, or UNKNOWN_VERSION if no row is recorded

        Raises:
            VersionStoreError: If the version cannot be read or is not an integer
        """
        value = self._read(VERSION_COLUMN)
        if value is None:
            return UNKNOWN_VERSION

        try:
            return int(value)
        except (TypeError, ValueError):
            raise VersionStoreError(
                f"Version table {self.table_name} holds a non-integer version: {value!r}"
            ) from None

    def updated_at(self) -> str | None:
        """Return the timestamp of the last version change, if any."""
        value = self._read(UPDATED_AT_COLUMN)
        return str(value) if value is not None else None

    def update_version(self, version: int) -> None:
        """
        Persist a new schema version and commit it.

        The version is durable when this returns.

        Args:
            version: New current version (>= 0)

        Raises:
            VersionStoreError: If the version is negative or cannot be written
        """
        if version < 0:
            raise VersionStoreError(f"Schema version must be >= 0, got: {version}")

        self.ensure_initialized()
        version_column, updated_at_column = self._columns()
        try:
            updated = self.database.execute(
                f"UPDATE {self.generator.quote(self.table_name)} "
                f"SET {version_column} = ?, {updated_at_column} = ?",
                (version, utc_timestamp()),
            )
            if updated == 0:
                self._insert(version)
            self.database.commit()
        except Exception as e:
            self._rollback()
            logger.error(f"Failed to record schema version {version}", exc_info=True)
            raise VersionStoreError(f"Failed to record schema version {version}: {e}") from e

        logger.info(f"Schema version recorded: {version}")
