"""
Supported database products and what each one can express.

Dialect is a closed enumeration: one member per supported product plus a
GENERIC fallback speaking ANSI SQL. Each member carries a frozen
DialectCapabilities record with the constants the DDL generator needs
(quoting, native type names, ceilings, cascade support). Statement shapes
that differ beyond these constants are selected by the generator with an
explicit match on the member.

Example:
    >>> Dialect.from_product_name("Microsoft SQL Server") is Dialect.SQLSERVER
    True
    >>> Dialect.ORACLE.capabilities.max_primary_key_columns
    32
"""

from dataclasses import dataclass, field
from enum import Enum

from .schema import CascadeRule, ColumnType

BASE_TYPE_NAMES: dict[ColumnType, str] = {
    column_type: column_type.value for column_type in ColumnType
} | {
    ColumnType.DOUBLE: "DOUBLE PRECISION",
    ColumnType.LONGVARCHAR: "LONG VARCHAR",
}

DEFAULT_LENGTH_TYPES = frozenset(
    {ColumnType.CHAR, ColumnType.VARCHAR, ColumnType.BINARY, ColumnType.VARBINARY}
)

DEFAULT_SCALE_TYPES = frozenset({ColumnType.NUMERIC, ColumnType.DECIMAL})

BOTH_RULES = frozenset({CascadeRule.CASCADE, CascadeRule.SETNULL})


@dataclass(frozen=True)
class DialectCapabilities:
    """
    Constants describing one database product.

    Attributes:
        key: Short identifier, unique per dialect
        product_names: Lower-cased product names reported by drivers
        quote_open: Character opening a quoted identifier
        quote_close: Character closing a quoted identifier
        type_overrides: Native type names differing from BASE_TYPE_NAMES
        length_types: Types that take a (length) clause
        length_optional: Length-bearing types may be emitted without a length
        scale_types: Types that take a (precision, scale) clause
        max_primary_key_columns: Primary key column ceiling
        max_index_columns: Index column ceiling
        supports_autoincrement: Whether autoincrement can be expressed
        supports_column_position: Whether ADD COLUMN can place a column
        delete_rules: Cascade rules allowed in ON DELETE
        update_rules: Cascade rules allowed in ON UPDATE
        auto_primary_key_index: Primary key constraints create their own index
        paramstyle: DB-API paramstyle of the usual driver
    """

    key: str
    product_names: tuple[str, ...]
    quote_open: str = '"'
    quote_close: str = '"'
    type_overrides: dict[ColumnType, str] = field(default_factory=dict, hash=False)
    length_types: frozenset[ColumnType] = DEFAULT_LENGTH_TYPES
    length_optional: bool = False
    scale_types: frozenset[ColumnType] = DEFAULT_SCALE_TYPES
    max_primary_key_columns: int = 16
    max_index_columns: int = 16
    supports_autoincrement: bool = False
    supports_column_position: bool = False
    delete_rules: frozenset[CascadeRule] = BOTH_RULES
    update_rules: frozenset[CascadeRule] = frozenset()
    auto_primary_key_index: bool = True
    paramstyle: str = "qmark"

    def type_name(self, column_type: ColumnType) -> str:
        """Return the native SQL name for a portable type code."""
        return self.type_overrides.get(column_type, BASE_TYPE_NAMES[column_type])


class Dialect(Enum):
    """Closed set of database products the generator can target."""

    ORACLE = DialectCapabilities(
        key="oracle",
        product_names=("oracle",),
        type_overrides={
            ColumnType.BIT: "NUMBER(1)",
            ColumnType.BOOLEAN: "NUMBER(1)",
            ColumnType.TINYINT: "NUMBER(3)",
            ColumnType.BIGINT: "NUMBER(19)",
            ColumnType.NUMERIC: "NUMBER",
            ColumnType.VARCHAR: "VARCHAR2",
            ColumnType.LONGVARCHAR: "CLOB",
            ColumnType.TIME: "DATE",
            ColumnType.BINARY: "RAW",
            ColumnType.VARBINARY: "RAW",
        },
        max_primary_key_columns=32,
        max_index_columns=32,
        paramstyle="numeric",
    )
    MYSQL = DialectCapabilities(
        key="mysql",
        product_names=("mysql", "mariadb"),
        quote_open="`",
        quote_close="`",
        type_overrides={
            ColumnType.BOOLEAN: "TINYINT(1)",
            ColumnType.DOUBLE: "DOUBLE",
            ColumnType.LONGVARCHAR: "TEXT",
            ColumnType.CLOB: "LONGTEXT",
            ColumnType.TIMESTAMP: "DATETIME",
            ColumnType.BLOB: "LONGBLOB",
        },
        supports_autoincrement=True,
        supports_column_position=True,
        update_rules=BOTH_RULES,
        paramstyle="format",
    )
    POSTGRESQL = DialectCapabilities(
        key="postgresql",
        product_names=("postgresql", "postgres"),
        type_overrides={
            ColumnType.BIT: "BOOLEAN",
            ColumnType.TINYINT: "SMALLINT",
            ColumnType.LONGVARCHAR: "TEXT",
            ColumnType.CLOB: "TEXT",
            ColumnType.BINARY: "BYTEA",
            ColumnType.VARBINARY: "BYTEA",
            ColumnType.BLOB: "BYTEA",
        },
        length_types=frozenset({ColumnType.CHAR, ColumnType.VARCHAR}),
        length_optional=True,
        max_primary_key_columns=32,
        max_index_columns=32,
        supports_autoincrement=True,
        update_rules=BOTH_RULES,
        paramstyle="format",
    )
    SQLITE = DialectCapabilities(
        key="sqlite",
        product_names=("sqlite",),
        type_overrides={
            ColumnType.DOUBLE: "DOUBLE",
            ColumnType.LONGVARCHAR: "TEXT",
            ColumnType.CLOB: "TEXT",
            ColumnType.BINARY: "BLOB",
            ColumnType.VARBINARY: "BLOB",
        },
        length_types=frozenset({ColumnType.CHAR, ColumnType.VARCHAR}),
        length_optional=True,
        max_primary_key_columns=2000,
        max_index_columns=2000,
        supports_autoincrement=True,
        update_rules=BOTH_RULES,
    )
    SQLSERVER = DialectCapabilities(
        key="sqlserver",
        product_names=("microsoft sql server", "sql server", "mssql"),
        quote_open="[",
        quote_close="]",
        type_overrides={
            ColumnType.BOOLEAN: "BIT",
            ColumnType.DOUBLE: "FLOAT",
            ColumnType.LONGVARCHAR: "VARCHAR(MAX)",
            ColumnType.CLOB: "VARCHAR(MAX)",
            ColumnType.TIMESTAMP: "DATETIME2",
            ColumnType.BLOB: "VARBINARY(MAX)",
        },
        max_index_columns=32,
        supports_autoincrement=True,
        update_rules=BOTH_RULES,
    )
    GENERIC = DialectCapabilities(
        key="generic",
        product_names=(),
    )

    @property
    def capabilities(self) -> DialectCapabilities:
        """The constants record for this dialect."""
        return self.value

    @classmethod
    def from_product_name(cls, product_name: str | None) -> "Dialect":
        """
        Resolve a driver-reported product name to a dialect.

        Matching is case-insensitive and treats underscores as spaces, so
        both "Microsoft SQL Server" and the discovery tag
        "Microsoft_SQL_Server" resolve to SQLSERVER. Unknown products fall
        back to GENERIC.

        Args:
            product_name: Product name as reported by the connection

        Returns:
            The matching Dialect, or Dialect.GENERIC
        """
        if not product_name:
            return cls.GENERIC

        normalized = product_name.replace("_", " ").strip().lower()
        for dialect in cls:
            if normalized in dialect.capabilities.product_names:
                return dialect
        return cls.GENERIC
