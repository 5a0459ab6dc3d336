"""Tests for the schema migrator and ledger checks."""

import shutil

import aiosqlite
import pytest

from recipe_inventory.core.exceptions import DatabaseError
from recipe_inventory.infrastructure.storage.sqlite.migrations import (
    discover_migrations,
    migrator,
    run_migrations,
    verify_ledger,
)

TABLES = {
    "inventory_items",
    "stock_movements",
    "recipe_templates",
    "template_ingredients",
    "ingredient_mappings",
    "recipes",
    "recipe_ingredients",
    "catalog_entries",
    "inventory_sync_audit",
    "replenishment_requests",
    "schema_migrations",
}


@pytest.fixture
def migrations_dir(tmp_path, monkeypatch):
    """A private copy of the migrations that tests may edit."""
    target = tmp_path / "migrations"
    target.mkdir()
    for migration in discover_migrations():
        shutil.copy(migration.path, target / migration.path.name)
    monkeypatch.setattr(migrator, "MIGRATIONS_DIR", target)
    return target


async def _insert_item(conn, store_id: str, quantity: float = 10.0) -> int:
    cursor = await conn.execute(
        """
        INSERT INTO inventory_items (store_id, name, unit, on_hand_quantity, created_at, updated_at)
        VALUES (?, 'Whole Milk', 'ml', ?, '2026-01-01T00:00:00', '2026-01-01T00:00:00')
        """,
        (store_id, quantity),
    )
    return cursor.lastrowid


class TestDiscovery:
    def test_initial_schema_found(self):
        migrations = discover_migrations()
        assert migrations[0].version == "001"
        assert migrations[0].name == "initial_schema"
        assert len(migrations[0].checksum) == 16

    def test_bad_filename_skipped(self, migrations_dir):
        (migrations_dir / "v2-oops.sql").write_text("SELECT 1;")
        assert [m.version for m in discover_migrations()] == ["001"]


class TestRunMigrations:
    async def test_fresh_database(self, tmp_path):
        db_path = tmp_path / "fresh.db"
        results = await run_migrations(db_path)

        assert [r.version for r in results] == ["001"]
        async with aiosqlite.connect(db_path) as conn:
            cursor = await conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
            tables = {row[0] for row in await cursor.fetchall()}
        assert TABLES <= tables

    async def test_rerun_is_noop(self, tmp_path):
        db_path = tmp_path / "again.db"
        await run_migrations(db_path)
        assert await run_migrations(db_path) == []

    async def test_new_migration_applied_on_top(self, tmp_path, migrations_dir):
        db_path = tmp_path / "upgrade.db"
        await run_migrations(db_path)
        (migrations_dir / "v002_supplier_notes.sql").write_text(
            "ALTER TABLE inventory_items ADD COLUMN supplier_notes TEXT;"
        )

        results = await run_migrations(db_path)

        assert [r.version for r in results] == ["002"]

    async def test_edited_migration_stops_run(self, tmp_path, migrations_dir):
        db_path = tmp_path / "edited.db"
        await run_migrations(db_path)
        schema = migrations_dir / "v001_initial_schema.sql"
        schema.write_text(schema.read_text() + "\n-- tweak\n")

        with pytest.raises(DatabaseError, match="changed after it was applied"):
            await run_migrations(db_path)

    async def test_failed_migration_not_recorded(self, tmp_path, migrations_dir):
        db_path = tmp_path / "broken.db"
        (migrations_dir / "v002_broken.sql").write_text("CREATE TABLE half (")

        with pytest.raises(DatabaseError):
            await run_migrations(db_path)

        async with aiosqlite.connect(db_path) as conn:
            cursor = await conn.execute("SELECT version FROM schema_migrations")
            versions = [row[0] for row in await cursor.fetchall()]
        assert versions == ["001"]


class TestVerifyLedger:
    async def test_clean_database_passes(self, tmp_path):
        db_path = tmp_path / "clean.db"
        await run_migrations(db_path)

        async with aiosqlite.connect(db_path) as conn:
            await _insert_item(conn, "store-a")
            checks = await verify_ledger(conn)

        assert "foreign_keys" in {c.name for c in checks}
        assert all(c.passed for c in checks)

    async def test_unbalanced_movement_reported(self, tmp_path):
        db_path = tmp_path / "unbalanced.db"
        await run_migrations(db_path)

        async with aiosqlite.connect(db_path) as conn:
            item_id = await _insert_item(conn, "store-a")
            cursor = await conn.execute(
                """
                INSERT INTO stock_movements (
                    inventory_item_id, movement_type, quantity_delta,
                    previous_quantity, new_quantity, created_at
                ) VALUES (?, 'sale', -2, 10, 9, '2026-01-01T00:00:00')
                """,
                (item_id,),
            )
            movement_id = cursor.lastrowid
            checks = {c.name: c for c in await verify_ledger(conn)}

        assert checks["movement_arithmetic"].violations == 1
        assert checks["movement_arithmetic"].examples == [movement_id]
        assert checks["non_negative_stock"].passed

    async def test_recipe_linked_to_other_store_reported(self, tmp_path):
        db_path = tmp_path / "cross.db"
        await run_migrations(db_path)

        async with aiosqlite.connect(db_path) as conn:
            other_item = await _insert_item(conn, "store-b")
            cursor = await conn.execute(
                "INSERT INTO recipes (store_id, name, created_at) "
                "VALUES ('store-a', 'Latte', '2026-01-01T00:00:00')"
            )
            recipe_id = cursor.lastrowid
            await conn.execute(
                """
                INSERT INTO recipe_ingredients (
                    recipe_id, ingredient_name, normalized_name, quantity, unit, inventory_item_id
                ) VALUES (?, 'Whole Milk', 'whole milk', 200, 'ml', ?)
                """,
                (recipe_id, other_item),
            )
            checks = {c.name: c for c in await verify_ledger(conn)}

        assert not checks["recipe_links_within_store"].passed
        assert checks["mappings_within_store"].passed
