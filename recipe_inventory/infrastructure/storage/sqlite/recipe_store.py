"""SQLite implementation of store recipe, category and catalog storage."""

import aiosqlite

from recipe_inventory.config import get_logger
from recipe_inventory.core.entities.inventory import InventoryItem
from recipe_inventory.core.entities.recipe import (
    CatalogEntry,
    Category,
    MatchTier,
    Recipe,
    RecipeIngredient,
    normalize_name,
)
from recipe_inventory.core.interfaces.recipe_store import IRecipeStore
from recipe_inventory.core.services.units import require_conversion
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


class SQLiteRecipeStore(IRecipeStore):
    """SQLite implementation of recipe, category and catalog entry storage."""

    async def get_recipe(self, recipe_id: int) -> Recipe | None:
        """Get recipe with its ingredients."""
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM recipes WHERE id = ?", (recipe_id,))
            row = await cursor.fetchone()
            if row is None:
                return None
            recipe = self._row_to_recipe(row)
            recipe.ingredients = await self._load_ingredients(conn, recipe_id)
            return recipe

    async def get_recipe_by_template(
        self, store_id: str, template_id: int
    ) -> Recipe | None:
        """Get the recipe deployed from a template into a store."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM recipes WHERE store_id = ? AND template_id = ?",
                (store_id, template_id),
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            recipe = self._row_to_recipe(row)
            recipe.ingredients = await self._load_ingredients(conn, recipe.id)
            return recipe

    async def list_recipes(self, store_id: str) -> list[Recipe]:
        """List a store's active recipes with ingredients."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM recipes
                WHERE store_id = ? AND is_active = 1
                ORDER BY name COLLATE NOCASE, id
                """,
                (store_id,),
            )
            recipes = [self._row_to_recipe(row) for row in await cursor.fetchall()]
            for recipe in recipes:
                recipe.ingredients = await self._load_ingredients(conn, recipe.id)
            return recipes

    async def ensure_category(self, store_id: str, name: str) -> Category:
        """Return the store's active category with this name, creating it if absent."""
        name = name.strip()
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM categories
                WHERE store_id = ? AND name = ? COLLATE NOCASE AND is_active = 1
                ORDER BY id LIMIT 1
                """,
                (store_id, name),
            )
            row = await cursor.fetchone()
            if row is not None:
                return self._row_to_category(row)

            cursor = await conn.execute(
                "INSERT INTO categories (store_id, name, is_active, created_at) VALUES (?, ?, 1, ?)",
                (store_id, name, to_iso(now_utc())),
            )
            logger.info(
                "category_created",
                category_id=cursor.lastrowid,
                store_id=store_id,
                name=name,
            )
            return Category(id=cursor.lastrowid, store_id=store_id, name=name)

    async def create_deployment(
        self, recipe: Recipe, entry: CatalogEntry
    ) -> tuple[Recipe, CatalogEntry] | None:
        """Write recipe, ingredients and catalog entry in one transaction."""
        recipe.created_at = now_utc()
        entry.created_at = recipe.created_at
        try:
            async with get_transaction() as conn:
                cursor = await conn.execute(
                    """
                    INSERT INTO recipes (
                        store_id, template_id, template_version, name, description,
                        instructions, yield_quantity, serving_size, total_cost,
                        suggested_price, is_active, created_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        recipe.store_id,
                        recipe.template_id,
                        recipe.template_version,
                        recipe.name,
                        recipe.description,
                        recipe.instructions,
                        recipe.yield_quantity,
                        recipe.serving_size,
                        recipe.total_cost,
                        recipe.suggested_price,
                        int(recipe.is_active),
                        to_iso(recipe.created_at),
                    ),
                )
                recipe.id = cursor.lastrowid

                for ingredient in recipe.ingredients:
                    ingredient.recipe_id = recipe.id
                    cursor = await conn.execute(
                        """
                        INSERT INTO recipe_ingredients (
                            recipe_id, template_ingredient_id, ingredient_name,
                            normalized_name, quantity, unit, cost_per_unit,
                            inventory_item_id, match_tier, conversion_factor
                        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                        """,
                        (
                            recipe.id,
                            ingredient.template_ingredient_id,
                            ingredient.ingredient_name,
                            normalize_name(ingredient.ingredient_name),
                            ingredient.quantity,
                            ingredient.unit,
                            ingredient.cost_per_unit,
                            ingredient.inventory_item_id,
                            ingredient.match_tier.value,
                            ingredient.conversion_factor,
                        ),
                    )
                    ingredient.id = cursor.lastrowid

                entry.recipe_id = recipe.id
                entry.id = await self._insert_catalog_entry(conn, entry)
        except aiosqlite.IntegrityError as e:
            logger.info(
                "deployment_conflict",
                store_id=recipe.store_id,
                template_id=recipe.template_id,
                error=str(e),
            )
            return None

        logger.info(
            "recipe_deployed",
            recipe_id=recipe.id,
            catalog_entry_id=entry.id,
            store_id=recipe.store_id,
            template_id=recipe.template_id,
        )
        return recipe, entry

    async def create_catalog_entry(self, entry: CatalogEntry) -> CatalogEntry:
        """Create a catalog entry."""
        entry.created_at = now_utc()
        async with get_transaction() as conn:
            entry.id = await self._insert_catalog_entry(conn, entry)
        logger.info(
            "catalog_entry_created",
            catalog_entry_id=entry.id,
            store_id=entry.store_id,
            direct_product=entry.is_direct_product,
        )
        return entry

    async def get_catalog_entry(self, entry_id: int) -> CatalogEntry | None:
        """Get catalog entry by ID."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM catalog_entries WHERE id = ?", (entry_id,)
            )
            row = await cursor.fetchone()
            return self._row_to_catalog_entry(row) if row else None

    async def list_catalog_entries(self, store_id: str) -> list[CatalogEntry]:
        """List a store's catalog entries."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM catalog_entries WHERE store_id = ? ORDER BY name COLLATE NOCASE, id",
                (store_id,),
            )
            rows = await cursor.fetchall()
            return [self._row_to_catalog_entry(row) for row in rows]

    async def list_unmapped_ingredients(self, store_id: str) -> list[RecipeIngredient]:
        """List recipe ingredients in a store without an inventory link."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT ri.* FROM recipe_ingredients ri
                JOIN recipes r ON r.id = ri.recipe_id
                WHERE r.store_id = ? AND r.is_active = 1 AND ri.inventory_item_id IS NULL
                ORDER BY ri.normalized_name, ri.id
                """,
                (store_id,),
            )
            rows = await cursor.fetchall()
            return [self._row_to_ingredient(row) for row in rows]

    async def link_ingredients(
        self,
        store_id: str,
        ingredient_name: str,
        item: InventoryItem,
        match_tier: MatchTier,
        factor_override: float | None = None,
        only_unmapped: bool = False,
    ) -> int:
        """Link every recipe ingredient of this name in the store, one factor per row."""
        query = """
            SELECT ri.id, ri.unit FROM recipe_ingredients ri
            JOIN recipes r ON r.id = ri.recipe_id
            WHERE r.store_id = ? AND ri.normalized_name = ?
        """
        if only_unmapped:
            query += " AND ri.inventory_item_id IS NULL"

        async with get_transaction() as conn:
            cursor = await conn.execute(query, (store_id, normalize_name(ingredient_name)))
            rows = await cursor.fetchall()
            updates = [
                (
                    item.id,
                    match_tier.value,
                    require_conversion(row["unit"], item.unit, factor_override),
                    row["id"],
                )
                for row in rows
            ]
            await conn.executemany(
                """
                UPDATE recipe_ingredients
                SET inventory_item_id = ?, match_tier = ?, conversion_factor = ?
                WHERE id = ?
                """,
                updates,
            )
        logger.info(
            "recipe_ingredients_linked",
            store_id=store_id,
            ingredient=ingredient_name,
            inventory_item_id=item.id,
            changed=len(updates),
        )
        return len(updates)

    @staticmethod
    async def _insert_catalog_entry(conn: aiosqlite.Connection, entry: CatalogEntry) -> int:
        cursor = await conn.execute(
            """
            INSERT INTO catalog_entries (
                store_id, recipe_id, category_id, name, price, is_available, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                entry.store_id,
                entry.recipe_id,
                entry.category_id,
                entry.name,
                entry.price,
                int(entry.is_available),
                to_iso(entry.created_at),
            ),
        )
        return cursor.lastrowid

    async def _load_ingredients(
        self, conn: aiosqlite.Connection, recipe_id: int
    ) -> list[RecipeIngredient]:
        cursor = await conn.execute(
            "SELECT * FROM recipe_ingredients WHERE recipe_id = ? ORDER BY id",
            (recipe_id,),
        )
        return [self._row_to_ingredient(row) for row in await cursor.fetchall()]

    @staticmethod
    def _row_to_ingredient(row: aiosqlite.Row) -> RecipeIngredient:
        return RecipeIngredient(
            id=row["id"],
            recipe_id=row["recipe_id"],
            template_ingredient_id=row["template_ingredient_id"],
            ingredient_name=row["ingredient_name"],
            quantity=float(row["quantity"]),
            unit=row["unit"],
            cost_per_unit=float(row["cost_per_unit"]),
            inventory_item_id=row["inventory_item_id"],
            match_tier=MatchTier(row["match_tier"]),
            conversion_factor=float(row["conversion_factor"]),
        )

    @staticmethod
    def _row_to_recipe(row: aiosqlite.Row) -> Recipe:
        return Recipe(
            id=row["id"],
            store_id=row["store_id"],
            template_id=row["template_id"],
            template_version=row["template_version"],
            name=row["name"],
            description=row["description"],
            instructions=row["instructions"],
            yield_quantity=float(row["yield_quantity"]),
            serving_size=float(row["serving_size"]),
            total_cost=float(row["total_cost"]),
            suggested_price=(
                float(row["suggested_price"]) if row["suggested_price"] is not None else None
            ),
            is_active=bool(row["is_active"]),
            created_at=parse_datetime(row["created_at"]),
        )

    @staticmethod
    def _row_to_category(row: aiosqlite.Row) -> Category:
        return Category(
            id=row["id"],
            store_id=row["store_id"],
            name=row["name"],
            is_active=bool(row["is_active"]),
        )

    @staticmethod
    def _row_to_catalog_entry(row: aiosqlite.Row) -> CatalogEntry:
        return CatalogEntry(
            id=row["id"],
            store_id=row["store_id"],
            recipe_id=row["recipe_id"],
            category_id=row["category_id"],
            name=row["name"],
            price=float(row["price"]),
            is_available=bool(row["is_available"]),
            created_at=parse_datetime(row["created_at"]),
        )
