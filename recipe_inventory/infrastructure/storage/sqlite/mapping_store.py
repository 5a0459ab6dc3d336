"""SQLite implementation of ingredient mapping storage."""

import aiosqlite

from recipe_inventory.config import get_logger
from recipe_inventory.core.entities.recipe import IngredientMapping, MatchTier, normalize_name
from recipe_inventory.core.interfaces.recipe_store import IMappingStore
from recipe_inventory.infrastructure.storage.sqlite.connection import (
    get_connection,
    get_transaction,
)
from recipe_inventory.infrastructure.storage.sqlite.rows import (
    now_utc,
    parse_datetime,
    to_iso,
)

logger = get_logger(__name__)


class SQLiteMappingStore(IMappingStore):
    """Store-level ingredient mapping memory, one row per (store, normalized name)."""

    async def get_mapping(
        self, store_id: str, ingredient_name: str
    ) -> IngredientMapping | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM ingredient_mappings WHERE store_id = ? AND normalized_name = ?",
                (store_id, normalize_name(ingredient_name)),
            )
            row = await cursor.fetchone()
            return self._row_to_mapping(row) if row else None

    async def list_mappings(self, store_id: str) -> list[IngredientMapping]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM ingredient_mappings WHERE store_id = ? ORDER BY normalized_name",
                (store_id,),
            )
            return [self._row_to_mapping(row) for row in await cursor.fetchall()]

    async def upsert_mapping(self, mapping: IngredientMapping) -> IngredientMapping:
        mapping.updated_at = now_utc()
        async with get_transaction() as conn:
            await conn.execute(
                """
                INSERT INTO ingredient_mappings (
                    store_id, ingredient_name, normalized_name, inventory_item_id,
                    confidence, conversion_factor, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(store_id, normalized_name) DO UPDATE SET
                    ingredient_name = excluded.ingredient_name,
                    inventory_item_id = excluded.inventory_item_id,
                    confidence = excluded.confidence,
                    conversion_factor = excluded.conversion_factor,
                    updated_at = excluded.updated_at
                """,
                (
                    mapping.store_id,
                    mapping.ingredient_name,
                    mapping.normalized_name,
                    mapping.inventory_item_id,
                    mapping.confidence.value,
                    mapping.conversion_factor,
                    to_iso(mapping.updated_at),
                ),
            )
            cursor = await conn.execute(
                "SELECT id FROM ingredient_mappings WHERE store_id = ? AND normalized_name = ?",
                (mapping.store_id, mapping.normalized_name),
            )
            row = await cursor.fetchone()
            mapping.id = row["id"] if row else None

        logger.info(
            "ingredient_mapping_saved",
            store_id=mapping.store_id,
            ingredient=mapping.ingredient_name,
            inventory_item_id=mapping.inventory_item_id,
            confidence=mapping.confidence.value,
        )
        return mapping

    @staticmethod
    def _row_to_mapping(row: aiosqlite.Row) -> IngredientMapping:
        return IngredientMapping(
            id=row["id"],
            store_id=row["store_id"],
            ingredient_name=row["ingredient_name"],
            normalized_name=row["normalized_name"],
            inventory_item_id=row["inventory_item_id"],
            confidence=MatchTier(row["confidence"]),
            conversion_factor=(
                float(row["conversion_factor"])
                if row["conversion_factor"] is not None
                else None
            ),
            updated_at=parse_datetime(row["updated_at"]),
        )
