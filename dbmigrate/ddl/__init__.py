"""
Portable schema-object descriptions and dialect-aware DDL generation.
"""

from .dialects import Dialect, DialectCapabilities
from .generator import DDLGenerator
from .schema import CascadeRule, Column, ColumnType, ForeignKey, Index, Table

__all__ = [
    "CascadeRule",
    "Column",
    "ColumnType",
    "DDLGenerator",
    "Dialect",
    "DialectCapabilities",
    "ForeignKey",
    "Index",
    "Table",
]
