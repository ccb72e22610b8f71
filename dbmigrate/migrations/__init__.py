"""
Migration units, their registry, and the engine that runs them.

Example:
    >>> from dbmigrate.migrations import Engine, Migration, migration
    >>>
    >>> @migration
    ... class Migration_1(Migration):
    ...     '''Create the users table.'''
    ...     def up(self):
    ...         self.execute("CREATE TABLE users (id INTEGER PRIMARY KEY)")
    ...     def down(self):
    ...         self.drop_table("users")
"""

from .base import Migration, MigrationContext, Unsupported
from .engine import Engine, MigrationResult, MigrationStatus, order_migrations, version_number
from .registry import DiscoveredMigration, MigrationRegistry, default_registry, migration

__all__ = [
    "DiscoveredMigration",
    "Engine",
    "Migration",
    "MigrationContext",
    "MigrationRegistry",
    "MigrationResult",
    "MigrationStatus",
    "Unsupported",
    "default_registry",
    "migration",
    "order_migrations",
    "version_number",
]
