"""
Dialect-aware DDL statement synthesis and schema introspection.

DDLGenerator turns the immutable descriptions from ddl.schema into SQL
text for one Dialect. Constants (quoting, type names, ceilings, cascade
support) come from the dialect's capability record; statement shapes that
differ between products are chosen with an explicit match on the dialect.

Three kinds of outcome:
- Invalid input (missing names, scale without precision, empty column
  lists, too many key/index columns) raises SchemaValidationError before
  any statement text is produced.
- Optional clauses the dialect cannot express (autoincrement, column
  position, cascade rules, primary key indexes) are dropped with a
  logged warning; the rest of the statement is still produced.
- Whole statements with no equivalent in the dialect raise
  UnsupportedFeatureError.

Synthesis is pure. Only table_exists(), index_exists() and column_names()
touch the database, through read-only metadata queries.

Example:
    >>> generator = DDLGenerator(dialect=Dialect.POSTGRESQL)
    >>> generator.create_table(Table("tags", [
    ...     Column("id", ColumnType.INTEGER, nullable=False, primary_key=True,
    ...            autoincrement=True),
    ...     Column("label", ColumnType.VARCHAR, length=50, nullable=False),
    ... ]))
    'CREATE TABLE "tags" ("id" SERIAL NOT NULL PRIMARY KEY, "label" VARCHAR(50) NOT NULL)'
"""

import logging
from typing import TYPE_CHECKING, Any

from dbmigrate.exceptions import (
    IntrospectionError,
    SchemaValidationError,
    UnsupportedFeatureError,
)

from .dialects import Dialect
from .schema import CascadeRule, Column, ColumnType, ForeignKey, Index, Table

if TYPE_CHECKING:
    from dbmigrate.storage.database import Database

logger = logging.getLogger(__name__)

SERIAL_TYPES = {
    ColumnType.SMALLINT: "SMALLSERIAL",
    ColumnType.INTEGER: "SERIAL",
    ColumnType.BIGINT: "BIGSERIAL",
}

CASCADE_CLAUSES = {
    CascadeRule.CASCADE: "CASCADE",
    CascadeRule.SETNULL: "SET NULL",
}


def _require(value: Any, message: str) -> None:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise SchemaValidationError(message)


class DDLGenerator:
    """
    Builds DDL statements for one database dialect.

    Args:
        database: Live database, needed only for introspection. When given
            without a dialect, its dialect is used.
        dialect: Target dialect. Defaults to the database's dialect, or
            GENERIC when there is no database.
    """

    def __init__(self, database: "Database | None" = None, dialect: Dialect | None = None):
        if dialect is None:
            dialect = database.dialect if database is not None else Dialect.GENERIC

        self.database = database
        self.dialect = dialect
        self.capabilities = dialect.capabilities

    @property
    def product(self) -> str:
        """Product name used in warnings and error messages."""
        if self.database is not None:
            return self.database.product_name
        return self.dialect.name.title()

    def quote(self, name: str) -> str:
        """Quote an identifier with the dialect's quote characters."""
        caps = self.capabilities
        escaped = name.replace(caps.quote_close, caps.quote_close * 2)
        return f"{caps.quote_open}{escaped}{caps.quote_close}"

    def literal(self, value: Any) -> str:
        """Render a value as a quoted SQL string literal."""
        return "'" + str(value).replace("'", "''") + "'"

    def _quote_list(self, names: tuple[str, ...]) -> str:
        return ", ".join(self.quote(name) for name in names)

    # ------------------------------------------------------------------
    # Column clauses
    # ------------------------------------------------------------------

    def _validate_column(self, column: Column) -> None:
        _require(column, "Column can not be null")
        _require(column.name, "Column name can not be null")

        if not isinstance(column.type, ColumnType):
            raise SchemaValidationError(
                f"Column {column.name} has no valid type: {column.type!r}"
            )

        caps = self.capabilities
        if column.type in caps.length_types:
            if column.length is not None and column.length <= 0:
                raise SchemaValidationError(
                    f"Length of column {column.name} must be positive, got: {column.length}"
                )
            if column.length is None and not caps.length_optional:
                raise SchemaValidationError(
                    f"{self.product} requires a length for column {column.name} "
                    f"of type {column.type.value}"
                )

        if column.scale is not None and column.precision is None:
            raise SchemaValidationError(
                f"Scale of column {column.name} is defined, but precision isn't."
            )

    def _type_clause(self, column: Column, autoincrement: bool = False) -> str:
        caps = self.capabilities
        type_name = caps.type_name(column.type)

        if autoincrement and self.dialect is Dialect.POSTGRESQL:
            type_name = SERIAL_TYPES[column.type]

        if column.type in caps.length_types and column.length is not None:
            type_name += f"({column.length})"

        if (column.type in caps.scale_types or column.type is ColumnType.NUMERIC) and (
            column.precision is not None
        ):
            if column.scale is not None:
                type_name += f"({column.precision},{column.scale})"
            else:
                type_name += f"({column.precision})"

        return type_name

    def _autoincrement_allowed(self, column: Column, primary_key_inline: bool) -> bool:
        if not self.capabilities.supports_autoincrement:
            logger.warning(
                f"{self.product} does not support autoincrement columns. "
                f"The directive on column {column.name} has been ignored."
            )
            return False

        match self.dialect:
            case Dialect.POSTGRESQL if column.type not in SERIAL_TYPES:
                logger.warning(
                    f"{self.product} only supports autoincrement on integer columns. "
                    f"The directive on column {column.name} has been ignored."
                )
                return False
            case Dialect.SQLITE if not (
                primary_key_inline and column.type is ColumnType.INTEGER
            ):
                logger.warning(
                    f"{self.product} only supports autoincrement on a single INTEGER "
                    f"PRIMARY KEY column. The directive on column {column.name} has "
                    "been ignored."
                )
                return False

        return True

    def _column_definition(
        self,
        column: Column,
        suppress_primary_key: bool = False,
        autoincrement: bool = False,
    ) -> str:
        self._validate_column(column)

        primary_key_inline = column.primary_key and not suppress_primary_key
        if autoincrement:
            autoincrement = self._autoincrement_allowed(column, primary_key_inline)

        parts = [self.quote(column.name), self._type_clause(column, autoincrement)]

        if autoincrement and self.dialect is Dialect.SQLSERVER:
            parts.append("IDENTITY(1,1)")

        if not column.nullable:
            parts.append("NOT NULL")

        if column.default is not None:
            parts.append(f"DEFAULT {self.literal(column.default)}")

        if autoincrement and self.dialect is Dialect.MYSQL:
            parts.append("AUTO_INCREMENT")

        if primary_key_inline:
            parts.append("PRIMARY KEY")

        if autoincrement and self.dialect is Dialect.SQLITE:
            parts.append("AUTOINCREMENT")

        return " ".join(parts)

    def column_clause(self, column: Column, suppress_primary_key: bool = False) -> str:
        """
        Build the clause describing one column.

        Shape: <name> <type>[(<length>)][(<precision>[,<scale>])] [NOT NULL]
        [DEFAULT '<value>'] [PRIMARY KEY], with the dialect's autoincrement
        marker where it has one.

        Args:
            column: Column description
            suppress_primary_key: Leave out the inline PRIMARY KEY marker
                (used when the key is emitted as a table constraint)

        Returns:
            The column clause

        Raises:
            SchemaValidationError: If the column description is invalid
        """
        return self._column_definition(column, suppress_primary_key, column.autoincrement)

    # ------------------------------------------------------------------
    # Tables
    # ------------------------------------------------------------------

    def create_table(self, table: Table, options: str | None = None) -> str:
        """
        Generate a CREATE TABLE statement.

        A single primary key column is marked inline. Several primary key
        columns are emitted as a trailing CONSTRAINT <table>_pk PRIMARY KEY
        clause instead.

        Args:
            table: Table description
            options: Raw text appended after the column list
                (e.g. "ENGINE=InnoDB")

        Returns:
            The CREATE TABLE statement

        Raises:
            SchemaValidationError: If the table has no columns, too many
                primary key columns, or an invalid column
        """
        _require(table, "Table can not be null")
        _require(table.name, "Table name can not be null")

        columns = table.columns
        if not columns:
            raise SchemaValidationError("At least one column must exist")

        primary_keys = table.primary_key_columns
        ceiling = self.capabilities.max_primary_key_columns
        if len(primary_keys) > ceiling:
            raise SchemaValidationError(
                f"{self.product} is limited to {ceiling} PRIMARY KEY columns."
            )
        has_multiple_primary_keys = len(primary_keys) > 1

        autoincrement_columns = table.autoincrement_columns
        if len(autoincrement_columns) > 1:
            logger.warning(
                f"Table {table.name} declares {len(autoincrement_columns)} autoincrement "
                "columns; only the first one is kept."
            )
        kept_autoincrement = autoincrement_columns[0] if autoincrement_columns else None

        clauses = [
            self._column_definition(
                column,
                suppress_primary_key=has_multiple_primary_keys,
                autoincrement=column is kept_autoincrement,
            )
            for column in columns
        ]

        if has_multiple_primary_keys:
            key_columns = self._quote_list(tuple(column.name for column in primary_keys))
            clauses.append(
                f"CONSTRAINT {self.quote(table.name + '_pk')} PRIMARY KEY({key_columns})"
            )

        statement = f"CREATE TABLE {self.quote(table.name)} ({', '.join(clauses)})"
        if options:
            statement += f" {options}"
        return statement

    def drop_table(self, table_name: str) -> str:
        """Generate a DROP TABLE statement."""
        _require(table_name, "Table name can not be null")
        return f"DROP TABLE {self.quote(table_name)}"

    def rename_table(self, table_name: str, new_name: str) -> str:
        """
        Generate a statement renaming a table.

        Args:
            table_name: Current table name
            new_name: New table name

        Returns:
            The rename statement in the dialect's syntax
        """
        _require(table_name, "Table name can not be null")
        _require(new_name, "New table name can not be null")

        match self.dialect:
            case Dialect.ORACLE:
                return f"RENAME {self.quote(table_name)} TO {self.quote(new_name)}"
            case Dialect.MYSQL:
                return f"RENAME TABLE {self.quote(table_name)} TO {self.quote(new_name)}"
            case Dialect.SQLSERVER:
                return f"EXEC sp_rename {self.literal(table_name)}, {self.literal(new_name)}"
            case _:
                return f"ALTER TABLE {self.quote(table_name)} RENAME TO {self.quote(new_name)}"

    # ------------------------------------------------------------------
    # Columns
    # ------------------------------------------------------------------

    def add_column(
        self,
        column: Column,
        table_name: str,
        after: str | None = None,
        position: int | None = None,
    ) -> str:
        """
        Generate a statement adding a column to a table.

        Only MySQL can place the new column; every other dialect appends it
        and logs a warning when a position was requested.

        Args:
            column: Column to add
            table_name: Table receiving the column
            after: Place the new column after this existing column
            position: Zero-based position of the new column

        Returns:
            The ALTER TABLE statement

        Raises:
            SchemaValidationError: If both after and position are given,
                or the column is invalid
        """
        _require(table_name, "Table name can not be null")
        if after is not None and position is not None:
            raise SchemaValidationError("Specify either after or position, not both")
        if position is not None and position < 0:
            raise SchemaValidationError(f"Column position must be >= 0, got: {position}")

        clause = self._column_definition(column, autoincrement=column.autoincrement)

        match self.dialect:
            case Dialect.ORACLE | Dialect.SQLSERVER:
                statement = f"ALTER TABLE {self.quote(table_name)} ADD {clause}"
            case _:
                statement = f"ALTER TABLE {self.quote(table_name)} ADD COLUMN {clause}"

        if after is None and position is None:
            return statement

        if not self.capabilities.supports_column_position:
            logger.warning(
                f"Add column: {self.product} does not support specifying the position "
                f"of a new column. Column {column.name} is appended to {table_name}."
            )
            return statement

        if after is not None:
            return f"{statement} AFTER {self.quote(after)}"
        if position == 0:
            return f"{statement} FIRST"

        existing = self.column_names(table_name)
        if position > len(existing):
            logger.warning(
                f"Add column: position {position} is past the end of {table_name} "
                f"({len(existing)} columns). Column {column.name} is appended."
            )
            return statement
        return f"{statement} AFTER {self.quote(existing[position - 1])}"

    def alter_column(self, column: Column, table_name: str) -> str:
        """
        Generate a statement changing a column to match a new definition.

        Args:
            column: The column as it should be after the change
            table_name: Table containing the column

        Returns:
            A single ALTER TABLE statement

        Raises:
            UnsupportedFeatureError: On SQLite, which cannot alter columns
        """
        _require(table_name, "Table name can not be null")
        self._validate_column(column)
        table = self.quote(table_name)

        match self.dialect:
            case Dialect.SQLITE:
                raise UnsupportedFeatureError(
                    f"{self.product} does not support altering column {column.name}; "
                    "rebuild the table instead."
                )
            case Dialect.ORACLE:
                return f"ALTER TABLE {table} MODIFY ({self.column_clause(column)})"
            case Dialect.MYSQL:
                return f"ALTER TABLE {table} MODIFY COLUMN {self.column_clause(column)}"
            case Dialect.POSTGRESQL:
                return f"ALTER TABLE {table} {self._postgres_alter_actions(column)}"
            case Dialect.SQLSERVER:
                if column.default is not None:
                    logger.warning(
                        f"{self.product} cannot change a default in ALTER COLUMN. "
                        f"The default of column {column.name} has been ignored."
                    )
                null_clause = "NULL" if column.nullable else "NOT NULL"
                return (
                    f"ALTER TABLE {table} ALTER COLUMN {self.quote(column.name)} "
                    f"{self._type_clause(column)} {null_clause}"
                )
            case _:
                return f"ALTER TABLE {table} ALTER COLUMN {self.column_clause(column)}"

    def _postgres_alter_actions(self, column: Column) -> str:
        if column.primary_key or column.autoincrement:
            logger.warning(
                f"{self.product} cannot change primary key or autoincrement in ALTER COLUMN. "
                f"Those properties of column {column.name} have been ignored."
            )

        name = self.quote(column.name)
        actions = [f"ALTER COLUMN {name} TYPE {self._type_clause(column)}"]
        actions.append(
            f"ALTER COLUMN {name} DROP NOT NULL"
            if column.nullable
            else f"ALTER COLUMN {name} SET NOT NULL"
        )
        actions.append(
            f"ALTER COLUMN {name} DROP DEFAULT"
            if column.default is None
            else f"ALTER COLUMN {name} SET DEFAULT {self.literal(column.default)}"
        )
        return ", ".join(actions)

    def drop_column(self, column_name: str, table_name: str) -> str:
        """Generate an ALTER TABLE ... DROP COLUMN statement."""
        _require(column_name, "Column name can not be null")
        _require(table_name, "Table name can not be null")
        return f"ALTER TABLE {self.quote(table_name)} DROP COLUMN {self.quote(column_name)}"

    def rename_column(self, old_name: str, new_name: str, table_name: str) -> str:
        """
        Generate a statement renaming a column.

        Args:
            old_name: Current column name
            new_name: New column name
            table_name: Table containing the column
        """
        _require(old_name, "Old column name can not be null")
        _require(new_name, "New column name can not be null")
        _require(table_name, "Table name can not be null")

        match self.dialect:
            case Dialect.SQLSERVER:
                return (
                    f"EXEC sp_rename {self.literal(table_name + '.' + old_name)}, "
                    f"{self.literal(new_name)}, 'COLUMN'"
                )
            case _:
                return (
                    f"ALTER TABLE {self.quote(table_name)} RENAME COLUMN "
                    f"{self.quote(old_name)} TO {self.quote(new_name)}"
                )

    # ------------------------------------------------------------------
    # Indexes
    # ------------------------------------------------------------------

    def add_index(self, index: Index) -> str:
        """
        Generate CREATE [UNIQUE] INDEX <name> ON <table>(<columns>).

        Args:
            index: Index description

        Returns:
            The CREATE INDEX statement

        Raises:
            SchemaValidationError: If the index has no columns or more than
                the dialect allows
        """
        _require(index, "Index can not be null")
        _require(index.name, "Index name can not be null")
        _require(index.table, "Index table name can not be null")

        if not index.columns:
            raise SchemaValidationError(f"Index {index.name} must cover at least one column")

        ceiling = self.capabilities.max_index_columns
        if len(index.columns) > ceiling:
            raise SchemaValidationError(
                f"{self.product} does not support indexes on more than {ceiling} columns"
            )

        if index.primary_key and self.capabilities.auto_primary_key_index:
            logger.warning(
                f"{self.product} creates primary key indexes automatically for primary "
                f"key constraints. The primary key property of index {index.name} has "
                "been ignored."
            )

        unique = "UNIQUE " if index.unique else ""
        return (
            f"CREATE {unique}INDEX {self.quote(index.name)} "
            f"ON {self.quote(index.table)}({self._quote_list(index.columns)})"
        )

    def drop_index(self, index_name: str, table_name: str) -> str:
        """Generate a DROP INDEX statement."""
        _require(index_name, "Index name can not be null")
        _require(table_name, "Table name can not be null")

        match self.dialect:
            case Dialect.MYSQL | Dialect.SQLSERVER:
                return f"DROP INDEX {self.quote(index_name)} ON {self.quote(table_name)}"
            case _:
                return f"DROP INDEX {self.quote(index_name)}"

    # ------------------------------------------------------------------
    # Foreign keys
    # ------------------------------------------------------------------

    def add_foreign_key(self, foreign_key: ForeignKey) -> str:
        """
        Generate ALTER TABLE ... ADD CONSTRAINT ... FOREIGN KEY ... REFERENCES.

        Cascade rules the dialect cannot express are left out with a
        warning; the constraint itself is still created.

        Args:
            foreign_key: Foreign key description

        Returns:
            The ALTER TABLE statement

        Raises:
            SchemaValidationError: If names or columns are missing, or the
                column lists differ in length
            UnsupportedFeatureError: On SQLite, which only accepts foreign
                keys inside CREATE TABLE
        """
        _require(foreign_key, "Foreign key can not be null")
        _require(foreign_key.name, "Foreign key name can not be null")
        _require(foreign_key.child_table, "Child table name can not be null")
        _require(foreign_key.parent_table, "Parent table name can not be null")

        if not foreign_key.child_columns or not foreign_key.parent_columns:
            raise SchemaValidationError(
                f"Foreign key {foreign_key.name} must list child and parent columns"
            )
        if len(foreign_key.child_columns) != len(foreign_key.parent_columns):
            raise SchemaValidationError(
                f"Foreign key {foreign_key.name} has {len(foreign_key.child_columns)} child "
                f"columns but {len(foreign_key.parent_columns)} parent columns"
            )

        if self.dialect is Dialect.SQLITE:
            raise UnsupportedFeatureError(
                f"{self.product} does not support adding foreign key {foreign_key.name} "
                "to an existing table."
            )

        statement = (
            f"ALTER TABLE {self.quote(foreign_key.child_table)} "
            f"ADD CONSTRAINT {self.quote(foreign_key.name)} "
            f"FOREIGN KEY ({self._quote_list(foreign_key.child_columns)}) "
            f"REFERENCES {self.quote(foreign_key.parent_table)} "
            f"({self._quote_list(foreign_key.parent_columns)})"
        )

        statement += self._cascade_clause(
            foreign_key, "DELETE", foreign_key.on_delete, self.capabilities.delete_rules
        )
        statement += self._cascade_clause(
            foreign_key, "UPDATE", foreign_key.on_update, self.capabilities.update_rules
        )
        return statement

    def _cascade_clause(
        self, foreign_key: ForeignKey, event: str, rule: CascadeRule, supported: frozenset
    ) -> str:
        if rule is CascadeRule.NONE:
            return ""

        if rule not in supported:
            logger.warning(
                f"{self.product} does not support cascade rule {rule.value} on "
                f"{event.lower()}. Constraint {foreign_key.name} has been created without it."
            )
            return ""

        return f" ON {event} {CASCADE_CLAUSES[rule]}"

    def drop_foreign_key(self, foreign_key_name: str, table_name: str) -> str:
        """Generate a statement dropping a foreign key constraint."""
        _require(foreign_key_name, "Foreign key name can not be null")
        _require(table_name, "Table name can not be null")

        match self.dialect:
            case Dialect.SQLITE:
                raise UnsupportedFeatureError(
                    f"{self.product} does not support dropping foreign key {foreign_key_name}."
                )
            case Dialect.MYSQL:
                return (
                    f"ALTER TABLE {self.quote(table_name)} "
                    f"DROP FOREIGN KEY {self.quote(foreign_key_name)}"
                )
            case _:
                return (
                    f"ALTER TABLE {self.quote(table_name)} "
                    f"DROP CONSTRAINT {self.quote(foreign_key_name)}"
                )

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def _lookup(self, sql: str, params: tuple, what: str) -> list[tuple]:
        if self.database is None:
            raise IntrospectionError(f"Cannot look up {what}: no database connection")

        try:
            return self.database.query(sql, params)
        except Exception as e:
            logger.error(f"Failed to look up {what}", exc_info=True)
            raise IntrospectionError(f"Failed to look up {what}: {e}") from e

    def table_exists(self, table_name: str) -> bool:
        """
        Check whether a table exists, ignoring case.

        Raises:
            IntrospectionError: If the metadata query fails
        """
        _require(table_name, "Table name can not be null")

        match self.dialect:
            case Dialect.SQLITE:
                sql = (
                    "SELECT name FROM sqlite_master "
                    "WHERE type = 'table' AND lower(name) = lower(?)"
                )
            case Dialect.ORACLE:
                sql = "SELECT table_name FROM user_tables WHERE upper(table_name) = upper(?)"
            case Dialect.MYSQL:
                sql = (
                    "SELECT table_name FROM information_schema.tables "
                    "WHERE table_schema = DATABASE() AND lower(table_name) = lower(?)"
                )
            case Dialect.POSTGRESQL:
                sql = (
                    "SELECT table_name FROM information_schema.tables "
                    "WHERE table_schema = current_schema() AND lower(table_name) = lower(?)"
                )
            case _:
                sql = (
                    "SELECT table_name FROM information_schema.tables "
                    "WHERE lower(table_name) = lower(?)"
                )

        rows = self._lookup(sql, (table_name,), f"table {table_name}")
        return any(str(row[0]).lower() == table_name.lower() for row in rows)

    def index_exists(self, index_name: str, table_name: str) -> bool:
        """
        Check whether an index with exactly this name exists on a table.

        Raises:
            IntrospectionError: If the metadata query fails
            UnsupportedFeatureError: For GENERIC, which has no portable
                index catalog
        """
        _require(index_name, "Index name can not be null")
        _require(table_name, "Table name can not be null")

        match self.dialect:
            case Dialect.SQLITE:
                sql = (
                    "SELECT name FROM sqlite_master "
                    "WHERE type = 'index' AND lower(tbl_name) = lower(?)"
                )
            case Dialect.ORACLE:
                sql = "SELECT index_name FROM user_indexes WHERE upper(table_name) = upper(?)"
            case Dialect.MYSQL:
                sql = (
                    "SELECT index_name FROM information_schema.statistics "
                    "WHERE table_schema = DATABASE() AND lower(table_name) = lower(?)"
                )
            case Dialect.POSTGRESQL:
                sql = (
                    "SELECT indexname FROM pg_indexes "
                    "WHERE schemaname = current_schema() AND lower(tablename) = lower(?)"
                )
            case Dialect.SQLSERVER:
                sql = (
                    "SELECT i.name FROM sys.indexes i "
                    "JOIN sys.tables t ON i.object_id = t.object_id "
                    "WHERE lower(t.name) = lower(?)"
                )
            case _:
                raise UnsupportedFeatureError(
                    f"Index lookup is not available for {self.product}"
                )

        rows = self._lookup(sql, (table_name,), f"indexes of table {table_name}")
        return any(row[0] == index_name for row in rows)

    def column_names(self, table_name: str) -> list[str]:
        """
        Return the column names of a table in their physical order.

        Raises:
            IntrospectionError: If the metadata query fails
        """
        _require(table_name, "Table name can not be null")

        match self.dialect:
            case Dialect.SQLITE:
                sql = "SELECT name FROM pragma_table_info(?) ORDER BY cid"
            case Dialect.ORACLE:
                sql = (
                    "SELECT column_name FROM user_tab_columns "
                    "WHERE table_name = ? ORDER BY column_id"
                )
            case Dialect.MYSQL:
                sql = (
                    "SELECT column_name FROM information_schema.columns "
                    "WHERE table_schema = DATABASE() AND table_name = ? "
                    "ORDER BY ordinal_position"
                )
            case _:
                sql = (
                    "SELECT column_name FROM information_schema.columns "
                    "WHERE table_name = ? ORDER BY ordinal_position"
                )

        rows = self._lookup(sql, (table_name,), f"columns of table {table_name}")
        return [str(row[0]) for row in rows]
