"""
Tests for ddl.dialects and ddl.schema modules.

Tests cover:
- Product name resolution (case, underscores, fallback to GENERIC)
- Native type names per dialect
- Capability constants the generator relies on
- Schema value types normalise sequences to tuples and stay immutable
"""

import dataclasses

import pytest

from dbmigrate.ddl.dialects import Dialect
from dbmigrate.ddl.schema import CascadeRule, Column, ColumnType, ForeignKey, Index, Table


class TestFromProductName:
    @pytest.mark.parametrize(
        "product_name,expected",
        [
            ("Oracle", Dialect.ORACLE),
            ("MySQL", Dialect.MYSQL),
            ("MariaDB", Dialect.MYSQL),
            ("PostgreSQL", Dialect.POSTGRESQL),
            ("SQLite", Dialect.SQLITE),
            ("Microsoft SQL Server", Dialect.SQLSERVER),
            ("Microsoft_SQL_Server", Dialect.SQLSERVER),
            ("  postgresql ", Dialect.POSTGRESQL),
        ],
    )
    def test_known_products(self, product_name, expected):
        assert Dialect.from_product_name(product_name) is expected

    @pytest.mark.parametrize("product_name", ["Informix", "", None])
    def test_unknown_falls_back_to_generic(self, product_name):
        assert Dialect.from_product_name(product_name) is Dialect.GENERIC


class TestCapabilities:
    def test_type_names(self):
        assert Dialect.ORACLE.capabilities.type_name(ColumnType.VARCHAR) == "VARCHAR2"
        assert Dialect.MYSQL.capabilities.type_name(ColumnType.CLOB) == "LONGTEXT"
        assert Dialect.POSTGRESQL.capabilities.type_name(ColumnType.BLOB) == "BYTEA"
        assert Dialect.SQLSERVER.capabilities.type_name(ColumnType.BOOLEAN) == "BIT"
        assert Dialect.GENERIC.capabilities.type_name(ColumnType.DOUBLE) == "DOUBLE PRECISION"

    def test_ceilings(self):
        assert Dialect.ORACLE.capabilities.max_primary_key_columns == 32
        assert Dialect.MYSQL.capabilities.max_index_columns == 16
        assert Dialect.SQLSERVER.capabilities.max_primary_key_columns == 16
        assert Dialect.SQLSERVER.capabilities.max_index_columns == 32

    def test_only_mysql_positions_columns(self):
        positioning = [d for d in Dialect if d.capabilities.supports_column_position]
        assert positioning == [Dialect.MYSQL]

    def test_oracle_has_no_update_rules(self):
        assert Dialect.ORACLE.capabilities.update_rules == frozenset()
        assert CascadeRule.SETNULL in Dialect.ORACLE.capabilities.delete_rules

    def test_members_are_distinct(self):
        assert len({d.capabilities.key for d in Dialect}) == len(list(Dialect))

    def test_paramstyles(self):
        assert Dialect.SQLITE.capabilities.paramstyle == "qmark"
        assert Dialect.POSTGRESQL.capabilities.paramstyle == "format"
        assert Dialect.ORACLE.capabilities.paramstyle == "numeric"


class TestSchemaValues:
    def test_table_columns_become_tuple(self):
        table = Table("t", [Column("a", ColumnType.INTEGER)])
        assert isinstance(table.columns, tuple)

    def test_primary_key_and_autoincrement_columns(self):
        table = Table(
            "t",
            [
                Column("a", ColumnType.INTEGER, primary_key=True, autoincrement=True),
                Column("b", ColumnType.INTEGER, primary_key=True),
                Column("c", ColumnType.INTEGER),
            ],
        )
        assert [c.name for c in table.primary_key_columns] == ["a", "b"]
        assert [c.name for c in table.autoincrement_columns] == ["a"]

    def test_index_bare_string_column(self):
        assert Index("ix", "t", "a").columns == ("a",)

    def test_foreign_key_defaults(self):
        fk = ForeignKey("fk", "child", ["a"], "parent", ["b"])
        assert fk.child_columns == ("a",)
        assert fk.on_delete is CascadeRule.NONE
        assert fk.on_update is CascadeRule.NONE

    def test_values_are_frozen(self):
        column = Column("a", ColumnType.INTEGER)
        with pytest.raises(dataclasses.FrozenInstanceError):
            column.name = "b"
