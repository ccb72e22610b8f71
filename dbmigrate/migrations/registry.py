"""
Registry of migration units and discovery over it.

Units are registered by name at import time, usually with the module-level
@migration decorator. A name is either generic ("Migration_7") or
qualified with the database product it targets ("Migration_7$PostgreSQL",
spaces in the product name replaced by underscores).

Discovery walks ordinals upward from a start index and, for each one,
takes the qualified variant for the connected product if registered,
otherwise the generic one. It stops at the first ordinal with neither:
migrations must be numbered contiguously, and anything past a hole is
never seen.

Example:
    >>> registry = MigrationRegistry()
    >>>
    >>> @registry.register
    ... class Migration_1(Migration):
    ...     def up(self): ...
    ...     def down(self): ...
    >>>
    >>> @registry.register(name="Migration_1", dialect="PostgreSQL")
    ... class CreateUsersPostgres(Migration):
    ...     def up(self): ...
    ...     def down(self): ...
    >>>
    >>> [unit.name for unit in registry.discover("Migration_", "PostgreSQL")]
    ['Migration_1$PostgreSQL']
    >>> [unit.name for unit in registry.discover("Migration_", "MySQL")]
    ['Migration_1']
"""

import importlib
import inspect
import logging
import pkgutil
from collections.abc import Iterable
from typing import NamedTuple

from dbmigrate.config.constants import DEFAULT_START_INDEX, DIALECT_SEPARATOR
from dbmigrate.exceptions import MigrationConfigurationError, MigrationRegistrationError

from .base import Migration

logger = logging.getLogger(__name__)


class DiscoveredMigration(NamedTuple):
    """A unit found by discovery: its registered name and class."""

    name: str
    migration_class: type[Migration]


def qualified_name(name: str, dialect: str | None) -> str:
    """
    Build the registration name of a unit.

    Example:
        >>> qualified_name("Migration_3", "Microsoft SQL Server")
        'Migration_3$Microsoft_SQL_Server'
    """
    if not dialect:
        return name
    return f"{name}{DIALECT_SEPARATOR}{dialect.replace(' ', '_')}"


class MigrationRegistry:
    """
    Mapping of unit names to migration classes.

    One registry is normally shared per process (default_registry); tests
    and embedding applications can build their own.
    """

    def __init__(self):
        self._entries: dict[str, type] = {}

    def register(self, cls: type | None = None, *, name: str | None = None, dialect: str | None = None):
        """
        Register a migration class. Usable as @register or @register(...).

        Args:
            cls: Class to register
            name: Unit name; defaults to the class name
            dialect: Product name this variant is restricted to

        Returns:
            The class unchanged (or a decorator when called with options)

        Raises:
            MigrationRegistrationError: If the name is already taken by
                another class
        """

        def decorator(target: type) -> type:
            key = qualified_name(name or target.__name__, dialect)
            existing = self._entries.get(key)
            if existing is not None and existing is not target:
                raise MigrationRegistrationError(
                    f"Migration '{key}' already registered by {existing.__module__}."
                    f"{existing.__qualname__}"
                )

            self._entries[key] = target
            logger.debug(f"Registered migration: {key} ({target.__qualname__})")
            return target

        if cls is None:
            return decorator
        return decorator(cls)

    def names(self) -> list[str]:
        """All registered unit names, sorted."""
        return sorted(self._entries)

    def __contains__(self, name: str) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def lookup(self, name: str) -> type[Migration] | None:
        """
        Return the migration class registered under a name.

        Entries that are not concrete Migration subclasses are logged and
        treated as absent.
        """
        entry = self._entries.get(name)
        if entry is None:
            return None

        if not (isinstance(entry, type) and issubclass(entry, Migration)):
            logger.warning(f"'{name}' is registered but is not a Migration subclass; ignoring it")
            return None
        if inspect.isabstract(entry):
            logger.warning(f"'{name}' is registered but does not implement up()/down(); ignoring it")
            return None
        return entry

    def discover(
        self,
        base_name: str,
        dialect_tag: str | None,
        start_index: int = DEFAULT_START_INDEX,
    ) -> list[DiscoveredMigration]:
        """
        Find the contiguous run of units starting at start_index.

        Args:
            base_name: Unit name prefix, e.g. "Migration_"
            dialect_tag: Connected product name, spaces as underscores
            start_index: First ordinal to probe

        Returns:
            Units in ascending ordinal order; empty if start_index itself
            is missing
        """
        found: list[DiscoveredMigration] = []
        ordinal = start_index

        while True:
            generic = f"{base_name}{ordinal}"
            candidates = [generic]
            if dialect_tag:
                candidates.insert(0, qualified_name(generic, dialect_tag))

            for candidate in candidates:
                migration_class = self.lookup(candidate)
                if migration_class is not None:
                    found.append(DiscoveredMigration(candidate, migration_class))
                    break
            else:
                break

            ordinal += 1

        logger.debug(
            f"Discovered {len(found)} migrations from {base_name}{start_index} "
            f"for {dialect_tag or 'any database'}"
        )
        return found

    def load_modules(self, module_names: Iterable[str]) -> None:
        """
        Import modules so the units they define register themselves.

        Packages are walked recursively.

        Raises:
            MigrationConfigurationError: If a module cannot be imported
        """
        for module_name in module_names:
            module = _import(module_name)
            if not hasattr(module, "__path__"):
                continue

            for info in pkgutil.walk_packages(module.__path__, prefix=f"{module_name}."):
                _import(info.name)


def _import(module_name: str):
    try:
        module = importlib.import_module(module_name)
    except Exception as e:
        raise MigrationConfigurationError(
            f"Cannot import migration module {module_name}: {e}"
        ) from e
    logger.debug(f"Loaded migration module {module_name}")
    return module


# Process-wide registry used by the @migration decorator and the CLI
default_registry = MigrationRegistry()


def migration(cls: type | None = None, *, name: str | None = None, dialect: str | None = None):
    """Register a class in default_registry. See MigrationRegistry.register."""
    return default_registry.register(cls, name=name, dialect=dialect)
