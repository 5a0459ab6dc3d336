"""
Versioned schema migrations and ledger consistency checks.

Migration files live beside this module as ``vNNN_name.sql`` and are applied
in version order. Each applied file is recorded in ``schema_migrations`` with
a checksum; an applied migration whose file has since been edited stops the
run instead of being re-applied over live stock data.
"""

import hashlib
import re
import time
from dataclasses import dataclass, field
from pathlib import Path

import aiosqlite

from recipe_inventory.config import get_logger, get_settings
from recipe_inventory.core.exceptions import DatabaseError

logger = get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).parent

_FILENAME = re.compile(r"v(\d+)_(.+)\.sql")


@dataclass
class Migration:
    version: str
    name: str
    path: Path
    checksum: str

    @classmethod
    def from_file(cls, path: Path) -> "Migration":
        match = _FILENAME.fullmatch(path.name)
        if not match:
            raise ValueError(f"Invalid migration filename: {path.name}")
        digest = hashlib.sha256(path.read_bytes()).hexdigest()[:16]
        return cls(version=match.group(1), name=match.group(2), path=path, checksum=digest)


@dataclass
class MigrationResult:
    version: str
    name: str
    execution_time_ms: int


@dataclass
class LedgerCheck:
    """One consistency rule over the stock and recipe tables."""

    name: str
    violations: int
    examples: list[int] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return self.violations == 0


# name -> query returning the offending row ids
LEDGER_CHECKS: dict[str, str] = {
    "non_negative_stock": """
        SELECT id FROM inventory_items WHERE on_hand_quantity < 0
    """,
    "movement_arithmetic": """
        SELECT id FROM stock_movements
        WHERE ABS(previous_quantity + quantity_delta - new_quantity) > 1e-6
    """,
    "recipe_links_within_store": """
        SELECT ri.id FROM recipe_ingredients ri
        JOIN recipes r ON r.id = ri.recipe_id
        JOIN inventory_items i ON i.id = ri.inventory_item_id
        WHERE i.store_id != r.store_id
    """,
    "mappings_within_store": """
        SELECT m.id FROM ingredient_mappings m
        JOIN inventory_items i ON i.id = m.inventory_item_id
        WHERE i.store_id != m.store_id
    """,
    "positive_conversion_factors": """
        SELECT id FROM recipe_ingredients WHERE conversion_factor <= 0
    """,
}


def discover_migrations() -> list[Migration]:
    """Migration files in version order."""
    migrations = []
    for path in sorted(MIGRATIONS_DIR.glob("v*.sql")):
        try:
            migrations.append(Migration.from_file(path))
        except ValueError as e:
            logger.warning("skipping_invalid_migration", path=str(path), error=str(e))
    return migrations


async def _applied_checksums(conn: aiosqlite.Connection) -> dict[str, str]:
    try:
        cursor = await conn.execute("SELECT version, checksum FROM schema_migrations")
    except aiosqlite.OperationalError:
        # Fresh database: the table arrives with v001
        return {}
    return {row[0]: row[1] for row in await cursor.fetchall()}


async def _apply(conn: aiosqlite.Connection, migration: Migration) -> MigrationResult:
    started = time.perf_counter()
    try:
        await conn.executescript(migration.path.read_text(encoding="utf-8"))
        elapsed = int((time.perf_counter() - started) * 1000)
        await conn.execute(
            """
            INSERT INTO schema_migrations (version, name, checksum, execution_time_ms)
            VALUES (?, ?, ?, ?)
            """,
            (migration.version, migration.name, migration.checksum, elapsed),
        )
        await conn.commit()
    except aiosqlite.Error as e:
        await conn.rollback()
        logger.error("migration_failed", version=migration.version, error=str(e))
        raise DatabaseError(f"migration v{migration.version}", str(e)) from e

    logger.info(
        "migration_applied",
        version=migration.version,
        name=migration.name,
        execution_time_ms=elapsed,
    )
    return MigrationResult(migration.version, migration.name, elapsed)


async def run_migrations(db_path: Path | None = None) -> list[MigrationResult]:
    """
    Apply every pending migration to the database.

    Returns the migrations applied by this call; an up-to-date database
    yields an empty list.

    Raises:
        DatabaseError: A migration failed, or an applied one was edited
    """
    db_path = db_path or get_settings().storage.db_path
    db_path.parent.mkdir(parents=True, exist_ok=True)

    results: list[MigrationResult] = []
    async with aiosqlite.connect(db_path) as conn:
        await conn.execute("PRAGMA journal_mode=WAL")
        await conn.execute("PRAGMA foreign_keys=ON")

        applied = await _applied_checksums(conn)
        for migration in discover_migrations():
            checksum = applied.get(migration.version)
            if checksum == migration.checksum:
                continue
            if checksum is not None:
                raise DatabaseError(
                    f"migration v{migration.version}",
                    "file changed after it was applied",
                )
            results.append(await _apply(conn, migration))

    logger.info("database_migrated", db_path=str(db_path), applied=len(results))
    return results


async def verify_ledger(conn: aiosqlite.Connection, sample: int = 5) -> list[LedgerCheck]:
    """Run every ledger rule plus SQLite's foreign key check."""
    checks = []
    cursor = await conn.execute("PRAGMA foreign_key_check")
    orphans = await cursor.fetchall()
    checks.append(LedgerCheck(name="foreign_keys", violations=len(orphans)))

    for name, query in LEDGER_CHECKS.items():
        cursor = await conn.execute(query)
        ids = [row[0] for row in await cursor.fetchall()]
        checks.append(LedgerCheck(name=name, violations=len(ids), examples=ids[:sample]))

    failed = [c.name for c in checks if not c.passed]
    if failed:
        logger.warning("ledger_check_failed", checks=failed)
    return checks
