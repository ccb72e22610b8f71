"""
Migration engine: moves a database from its current version to a target.

One run of Engine.migrate(target):

1. Read the current version C (creating the version table on first use).
2. If C equals the target, stop. Nothing runs and nothing is written.
3. Discover units for the connected product (see migrations.registry).
4. Keep units whose ordinal lies in (min(C, T), max(C, T)], ascending
   when migrating up, descending when migrating down.
5. Run them one at a time: bind, setup(), then up() or down(). Each unit is
   committed when it succeeds. The first failing unit is rolled back and
   stops the run.
6. If the reached version differs from C, persist it, even when step 5
   stopped early.
7. Raise the unit failure, if any, after that write.

Version store failures in steps 1 and 6 abort the run immediately.

Example:
    >>> engine = Engine(config.migrations, database, default_registry, DEFAULT_GATE)
    >>> result = engine.migrate(7)
    >>> result.direction, result.start_version, result.end_version
    ('up', 3, 7)
"""

import logging
from collections.abc import Iterable
from dataclasses import asdict, dataclass, field
from typing import TYPE_CHECKING

from dbmigrate.config.constants import DIALECT_SEPARATOR
from dbmigrate.ddl.generator import DDLGenerator
from dbmigrate.exceptions import (
    DuplicateMigrationError,
    InvalidTargetError,
    MigrationExecutionError,
    MigrationFailedError,
    MigrationUnsupportedError,
)
from dbmigrate.storage.database import Database
from dbmigrate.storage.version_store import DEFAULT_GATE, InitGate, VersionStore

from .base import MigrationContext, Unsupported
from .registry import DiscoveredMigration, MigrationRegistry, default_registry

if TYPE_CHECKING:
    from dbmigrate.config.schema import MigrationSettings

logger = logging.getLogger(__name__)

# Returned by version_number() for names that do not parse
INVALID_ORDINAL = -1


def version_number(name: str, base_name: str) -> int:
    """
    Parse the ordinal out of a unit name.

    The dialect qualifier is stripped first, then the base name prefix.

    Args:
        name: Registered unit name, e.g. "Migration_12$MySQL"
        base_name: Unit name prefix, e.g. "Migration_"

    Returns:
        The ordinal, or INVALID_ORDINAL if the name does not parse

    Example:
        >>> version_number("Migration_12$MySQL", "Migration_")
        12
        >>> version_number("Seed_3", "Migration_")
        -1
    """
    unqualified = name.split(DIALECT_SEPARATOR, 1)[0]
    if not unqualified.startswith(base_name):
        return INVALID_ORDINAL

    digits = unqualified[len(base_name) :]
    if not (digits.isascii() and digits.isdigit()):
        return INVALID_ORDINAL
    return int(digits)


@dataclass(frozen=True)
class PlannedMigration:
    """A unit scheduled for execution in one run."""

    ordinal: int
    name: str
    migration_class: type


def order_migrations(
    candidates: Iterable[DiscoveredMigration],
    base_name: str,
    current: int,
    target: int,
) -> list[PlannedMigration]:
    """
    Select and order the units a run from current to target executes.

    Args:
        candidates: Discovered units
        base_name: Unit name prefix used to parse ordinals
        current: Current schema version
        target: Requested schema version

    Returns:
        Units with ordinal in (min, max], ascending if target > current,
        descending otherwise

    Raises:
        DuplicateMigrationError: If two candidates share an ordinal
    """
    low, high = min(current, target), max(current, target)
    names_by_ordinal: dict[int, list[str]] = {}
    planned: list[PlannedMigration] = []

    for candidate in candidates:
        ordinal = version_number(candidate.name, base_name)
        if ordinal == INVALID_ORDINAL:
            logger.error(
                f"Cannot parse an ordinal from migration name '{candidate.name}'; skipping it"
            )
            continue

        names_by_ordinal.setdefault(ordinal, []).append(candidate.name)
        if low < ordinal <= high:
            planned.append(PlannedMigration(ordinal, candidate.name, candidate.migration_class))

    for ordinal, names in names_by_ordinal.items():
        if len(names) > 1:
            raise DuplicateMigrationError(
                f"Migrations {', '.join(names)} all resolve to version {ordinal}",
                ordinal=ordinal,
                names=names,
            )

    planned.sort(key=lambda unit: unit.ordinal, reverse=target < current)
    return planned


@dataclass
class MigrationResult:
    """
    Outcome of a completed run.

    Attributes:
        start_version: Version before the run
        end_version: Version after the run
        target_version: Requested version
        direction: "up", "down", or None when nothing had to be done
        executed: Names of the units that ran, in execution order
    """

    start_version: int
    end_version: int
    target_version: int
    direction: str | None = None
    executed: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class MigrationStatus:
    """One discovered unit and whether the current version includes it."""

    ordinal: int
    name: str
    description: str
    applied: bool


class Engine:
    """
    Runs migration units against one database.

    Args:
        settings: Migration settings (base name, start index, version table)
        database: Managed database
        registry: Where units are discovered (default_registry if omitted)
        gate: Shared version table initialization gate (DEFAULT_GATE if omitted)
        generator: DDL generator handed to units (built if omitted)
    """

    def __init__(
        self,
        settings: "MigrationSettings",
        database: Database,
        registry: MigrationRegistry | None = None,
        gate: InitGate | None = None,
        generator: DDLGenerator | None = None,
    ):
        self.settings = settings
        self.database = database
        self.registry = registry if registry is not None else default_registry
        self.gate = gate if gate is not None else DEFAULT_GATE
        self.generator = generator or DDLGenerator(database)
        self.version_store = VersionStore(
            database, settings.version_table, self.gate, self.generator
        )

    def current_version(self) -> int:
        """Persisted schema version (initializing the version table if needed)."""
        return self.version_store.current_version()

    def discover(self) -> list[DiscoveredMigration]:
        """Units available to this database, in ascending ordinal order."""
        return self.registry.discover(
            self.settings.base_name, self.database.dialect_tag, self.settings.start_index
        )

    def latest_version(self, candidates: list[DiscoveredMigration] | None = None) -> int | None:
        """Highest discovered ordinal, or None when no unit is discovered."""
        if candidates is None:
            candidates = self.discover()
        ordinals = [
            version_number(candidate.name, self.settings.base_name) for candidate in candidates
        ]
        valid = [ordinal for ordinal in ordinals if ordinal != INVALID_ORDINAL]
        return max(valid) if valid else None

    def status(self) -> list[MigrationStatus]:
        """
        List discovered units with whether each is applied.

        A unit is applied when its ordinal is at or below the current version.
        """
        current = self.current_version()
        statuses = []
        for candidate in self.discover():
            ordinal = version_number(candidate.name, self.settings.base_name)
            statuses.append(
                MigrationStatus(
                    ordinal=ordinal,
                    name=candidate.name,
                    description=candidate.migration_class.description(),
                    applied=ordinal != INVALID_ORDINAL and ordinal <= current,
                )
            )
        return statuses

    def migrate(self, target: int | None = None) -> MigrationResult:
        """
        Bring the schema to the target version.

        Args:
            target: Version to reach; None means the highest discovered one

        Returns:
            MigrationResult describing what ran

        Raises:
            InvalidTargetError: If target is negative (before any database access)
            VersionStoreError: If the version cannot be read or recorded
            DuplicateMigrationError: If two units resolve to the same ordinal
            MigrationFailedError: If a unit failed; raised after the reached
                version has been recorded
        """
        if target is not None and target < 0:
            raise InvalidTargetError(f"Target version must be >= 0, got: {target}")

        current = self.current_version()

        candidates = None
        if target is None:
            candidates = self.discover()
            latest = self.latest_version(candidates)
            target = latest if latest is not None else current

        if current == target:
            logger.info(f"Schema already at version {current}")
            return MigrationResult(current, current, target)

        if candidates is None:
            candidates = self.discover()

        up = target > current
        direction = "up" if up else "down"
        plan = order_migrations(candidates, self.settings.base_name, current, target)
        logger.info(
            f"Migrating {direction} from version {current} to {target} "
            f"({len(plan)} migrations on {self.database.product_name})"
        )

        reached = current
        executed: list[str] = []
        failure: MigrationFailedError | None = None
        cause: BaseException | None = None

        for unit in plan:
            logger.info(f"Running {unit.name} ({direction})")
            try:
                instance = unit.migration_class()
                instance.bind(MigrationContext(self.settings, self.database, self.generator))
                instance.setup()
                outcome = instance.up() if up else instance.down()
                if not isinstance(outcome, Unsupported):
                    self.database.commit()
            except Exception as e:
                logger.error(f"Migration {unit.name} failed", exc_info=True)
                self._rollback()
                failure = MigrationExecutionError(
                    f"Migration {unit.name} failed: {e}", name=unit.name, ordinal=unit.ordinal
                )
                cause = e
                break

            if isinstance(outcome, Unsupported):
                logger.error(f"Migration {unit.name} is not supported: {outcome.reason}")
                self._rollback()
                failure = MigrationUnsupportedError(
                    f"Migration {unit.name} does not support "
                    f"{self.database.product_name}: {outcome.reason}",
                    reason=outcome.reason,
                    name=unit.name,
                    ordinal=unit.ordinal,
                )
                break

            executed.append(unit.name)
            reached = unit.ordinal if up else unit.ordinal - 1

        if reached != current:
            self.version_store.update_version(reached)

        if failure is not None:
            failure.reached_version = reached
            raise failure from cause

        logger.info(f"Schema migrated from version {current} to {reached}")
        return MigrationResult(current, reached, target, direction, executed)

    def _rollback(self) -> None:
        try:
            self.database.rollback()
        except Exception:
            logger.warning("Rollback after migration failure also failed", exc_info=True)
