"""
Migration unit base class.

A migration unit is one numbered, hand-written schema change. Subclass
Migration, implement up() and down(), and register the class under its
numbered name (see migrations.registry):

    >>> from dbmigrate.migrations import Migration, migration
    >>> from dbmigrate.ddl import Column, ColumnType, Table
    >>>
    >>> @migration
    ... class Migration_1(Migration):
    ...     '''Create the users table.'''
    ...
    ...     def up(self):
    ...         self.create_table(Table("users", [
    ...             Column("id", ColumnType.INTEGER, nullable=False, primary_key=True),
    ...             Column("email", ColumnType.VARCHAR, length=255, nullable=False),
    ...         ]))
    ...
    ...     def down(self):
    ...         self.drop_table("users")

A unit that cannot express its change on the connected database returns
``self.unsupported(...)`` from up() or down() instead of raising; the
engine reports it as MigrationUnsupportedError. Anything raised is a
MigrationExecutionError.

Dialect-specific variants are separate classes registered with a dialect
qualifier; discovery prefers them over the generic class.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from dbmigrate.ddl.dialects import Dialect
from dbmigrate.ddl.generator import DDLGenerator
from dbmigrate.ddl.schema import Column, ForeignKey, Index, Table
from dbmigrate.exceptions import MigrationConfigurationError
from dbmigrate.storage.database import Database

if TYPE_CHECKING:
    from dbmigrate.config.schema import MigrationSettings


@dataclass(frozen=True)
class Unsupported:
    """
    Outcome of up()/down() meaning "this database is not supported".

    Returning it tells the engine the unit ran no statements.

    Attributes:
        reason: Human-readable explanation
    """

    reason: str


@dataclass(frozen=True)
class MigrationContext:
    """
    What a unit needs to run: settings, the live database and its generator.

    Attributes:
        settings: Migration settings of the current run (read-only)
        database: Managed database
        generator: DDL generator bound to the database's dialect
    """

    settings: "MigrationSettings"
    database: Database
    generator: DDLGenerator

    @property
    def dialect(self) -> Dialect:
        return self.generator.dialect


class Migration(ABC):
    """
    Base class for migration units.

    Lifecycle per run: instantiate, bind(context), setup(), then up() or
    down(). Units are discovered fresh on every run and hold no state
    between runs.
    """

    def __init__(self):
        self._context: MigrationContext | None = None

    @classmethod
    def description(cls) -> str:
        """First line of the class docstring, or an empty string."""
        doc = (cls.__doc__ or "").strip()
        return doc.splitlines()[0] if doc else ""

    def bind(self, context: MigrationContext) -> None:
        """Inject the run context. Called by the engine before setup()."""
        self._context = context

    @property
    def context(self) -> MigrationContext:
        if self._context is None:
            raise MigrationConfigurationError(
                f"{type(self).__name__} is not bound to a migration context"
            )
        return self._context

    @property
    def settings(self) -> "MigrationSettings":
        return self.context.settings

    @property
    def database(self) -> Database:
        return self.context.database

    @property
    def generator(self) -> DDLGenerator:
        return self.context.generator

    @property
    def dialect(self) -> Dialect:
        return self.context.dialect

    def setup(self) -> None:
        """One-time hook run after bind() and before up()/down()."""

    @abstractmethod
    def up(self) -> Unsupported | None:
        """Apply the change."""

    @abstractmethod
    def down(self) -> Unsupported | None:
        """Revert the change."""

    def unsupported(self, reason: str | None = None) -> Unsupported:
        """Build the "not supported on this database" outcome."""
        if reason is None:
            reason = f"{type(self).__name__} does not support {self.database.product_name}"
        return Unsupported(reason)

    # ------------------------------------------------------------------
    # Statement helpers
    # ------------------------------------------------------------------

    def execute(self, sql: str, params: Sequence[Any] = ()) -> int:
        """Run a raw statement ('?' parameter markers) and return its rowcount."""
        return self.database.execute(sql, params)

    def create_table(self, table: Table, options: str | None = None) -> None:
        self.execute(self.generator.create_table(table, options))

    def drop_table(self, table_name: str) -> None:
        self.execute(self.generator.drop_table(table_name))

    def add_column(
        self,
        column: Column,
        table_name: str,
        after: str | None = None,
        position: int | None = None,
    ) -> None:
        self.execute(self.generator.add_column(column, table_name, after, position))

    def alter_column(self, column: Column, table_name: str) -> None:
        self.execute(self.generator.alter_column(column, table_name))

    def drop_column(self, column_name: str, table_name: str) -> None:
        self.execute(self.generator.drop_column(column_name, table_name))

    def rename_column(self, old_name: str, new_name: str, table_name: str) -> None:
        self.execute(self.generator.rename_column(old_name, new_name, table_name))

    def rename_table(self, table_name: str, new_name: str) -> None:
        self.execute(self.generator.rename_table(table_name, new_name))

    def add_index(self, index: Index) -> None:
        self.execute(self.generator.add_index(index))

    def drop_index(self, index_name: str, table_name: str) -> None:
        self.execute(self.generator.drop_index(index_name, table_name))

    def add_foreign_key(self, foreign_key: ForeignKey) -> None:
        self.execute(self.generator.add_foreign_key(foreign_key))

    def drop_foreign_key(self, foreign_key_name: str, table_name: str) -> None:
        self.execute(self.generator.drop_foreign_key(foreign_key_name, table_name))

    def table_exists(self, table_name: str) -> bool:
        return self.generator.table_exists(table_name)

    def index_exists(self, index_name: str, table_name: str) -> bool:
        return self.generator.index_exists(index_name, table_name)
