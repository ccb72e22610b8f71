"""
Schema-object descriptions consumed by the DDL generator.

Migration units build these immutable values and hand them to a
DDLGenerator, which turns them into dialect-specific SQL. Nothing here is
validated at construction time; the generator rejects bad descriptions
before emitting any statement text.

Types:
    ColumnType: Portable column type codes (mirrors the SQL standard types)
    CascadeRule: Foreign key ON DELETE / ON UPDATE behaviour
    Column: One column of a table
    Table: Table name plus ordered columns
    Index: Named index over ordered columns of one table
    ForeignKey: Named constraint from child columns to parent columns

Example:
    >>> users = Table(
    ...     "users",
    ...     [
    ...         Column("id", ColumnType.INTEGER, primary_key=True, nullable=False,
    ...                autoincrement=True),
    ...         Column("email", ColumnType.VARCHAR, length=255, nullable=False),
    ...     ],
    ... )
    >>> users.primary_key_columns[0].name
    'id'
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum


class ColumnType(Enum):
    """Portable column type codes, translated to native names per dialect."""

    BIT = "BIT"
    BOOLEAN = "BOOLEAN"
    TINYINT = "TINYINT"
    SMALLINT = "SMALLINT"
    INTEGER = "INTEGER"
    BIGINT = "BIGINT"
    REAL = "REAL"
    FLOAT = "FLOAT"
    DOUBLE = "DOUBLE"
    NUMERIC = "NUMERIC"
    DECIMAL = "DECIMAL"
    CHAR = "CHAR"
    VARCHAR = "VARCHAR"
    LONGVARCHAR = "LONGVARCHAR"
    CLOB = "CLOB"
    DATE = "DATE"
    TIME = "TIME"
    TIMESTAMP = "TIMESTAMP"
    BINARY = "BINARY"
    VARBINARY = "VARBINARY"
    BLOB = "BLOB"


class CascadeRule(Enum):
    """What happens to child rows when the referenced parent row changes."""

    NONE = "none"
    CASCADE = "cascade"
    SETNULL = "setnull"


def _as_tuple(values: Sequence | None) -> tuple:
    # Strings are sequences too; a bare column name means one column.
    if values is None:
        return ()
    if isinstance(values, str):
        return (values,)
    return tuple(values)


@dataclass(frozen=True)
class Column:
    """
    One column of a table.

    Attributes:
        name: Column name (quoted by the generator)
        type: Portable type code
        length: Length for length-bearing types (CHAR, VARCHAR, ...)
        nullable: False emits NOT NULL
        primary_key: Part of the table's primary key
        default: Default value, emitted as a quoted literal
        autoincrement: Ask the database to generate values
        precision: Total digits for scale-bearing types
        scale: Digits after the decimal point; requires precision
    """

    name: str
    type: ColumnType
    length: int | None = None
    nullable: bool = True
    primary_key: bool = False
    default: str | int | float | None = None
    autoincrement: bool = False
    precision: int | None = None
    scale: int | None = None


@dataclass(frozen=True)
class Table:
    """Table name plus its ordered columns."""

    name: str
    columns: tuple[Column, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "columns", _as_tuple(self.columns))

    @property
    def primary_key_columns(self) -> tuple[Column, ...]:
        """Columns flagged as primary key, in declaration order."""
        return tuple(column for column in self.columns if column.primary_key)

    @property
    def autoincrement_columns(self) -> tuple[Column, ...]:
        """Columns flagged as autoincrement, in declaration order."""
        return tuple(column for column in self.columns if column.autoincrement)


@dataclass(frozen=True)
class Index:
    """
    Named index over ordered columns of one table.

    Attributes:
        name: Index name
        table: Owning table name
        columns: Ordered column names
        unique: Emit CREATE UNIQUE INDEX
        primary_key: Informational; dialects that build primary key
            indexes themselves ignore it with a warning
    """

    name: str
    table: str
    columns: tuple[str, ...] = field(default_factory=tuple)
    unique: bool = False
    primary_key: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "columns", _as_tuple(self.columns))


@dataclass(frozen=True)
class ForeignKey:
    """
    Named foreign key constraint.

    Attributes:
        name: Constraint name
        child_table: Table holding the referencing columns
        child_columns: Referencing columns
        parent_table: Referenced table
        parent_columns: Referenced columns
        on_delete: Requested ON DELETE behaviour
        on_update: Requested ON UPDATE behaviour
    """

    name: str
    child_table: str
    child_columns: tuple[str, ...]
    parent_table: str
    parent_columns: tuple[str, ...]
    on_delete: CascadeRule = CascadeRule.NONE
    on_update: CascadeRule = CascadeRule.NONE

    def __post_init__(self) -> None:
        object.__setattr__(self, "child_columns", _as_tuple(self.child_columns))
        object.__setattr__(self, "parent_columns", _as_tuple(self.parent_columns))
