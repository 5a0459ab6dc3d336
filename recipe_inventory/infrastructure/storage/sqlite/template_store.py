"""SQLite implementation of recipe template storage."""

import aiosqlite

from recipe_inventory.config import get_logger
from recipe_inventory.core.entities.template import RecipeTemplate, TemplateIngredient
from recipe_inventory.core.exceptions import DatabaseError, TemplateNotFoundError
from recipe_inventory.core.interfaces.template_store import ITemplateStore
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


class SQLiteTemplateStore(ITemplateStore):
    """SQLite implementation of recipe template storage."""

    async def create_template(self, template: RecipeTemplate) -> RecipeTemplate:
        """Insert the template row."""
        now = now_utc()
        template.created_at = now
        template.updated_at = now
        try:
            async with get_transaction() as conn:
                cursor = await conn.execute(
                    """
                    INSERT INTO recipe_templates (
                        name, category_name, description, instructions,
                        yield_quantity, serving_size, suggested_price, total_cost,
                        version, is_active, is_complete, incomplete_reason,
                        created_at, updated_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        template.name,
                        template.category_name,
                        template.description,
                        template.instructions,
                        template.yield_quantity,
                        template.serving_size,
                        template.suggested_price,
                        template.total_cost,
                        template.version,
                        int(template.is_active),
                        int(template.is_complete),
                        template.incomplete_reason,
                        to_iso(template.created_at),
                        to_iso(template.updated_at),
                    ),
                )
                template.id = cursor.lastrowid
        except aiosqlite.Error as e:
            raise DatabaseError("create_template", str(e)) from e
        logger.info("template_created", template_id=template.id, name=template.name)
        return template

    async def add_ingredient(
        self, template_id: int, ingredient: TemplateIngredient
    ) -> TemplateIngredient:
        """Insert one template ingredient row."""
        try:
            async with get_transaction() as conn:
                await self._insert_ingredient(conn, template_id, ingredient)
        except aiosqlite.Error as e:
            raise DatabaseError("add_template_ingredient", str(e)) from e
        return ingredient

    async def mark_incomplete(self, template_id: int, reason: str) -> None:
        """Flag a template whose ingredients did not all persist."""
        async with get_transaction() as conn:
            await conn.execute(
                """
                UPDATE recipe_templates
                SET is_complete = 0, incomplete_reason = ?, updated_at = ?
                WHERE id = ?
                """,
                (reason, to_iso(now_utc()), template_id),
            )
        logger.warning("template_marked_incomplete", template_id=template_id, reason=reason)

    async def get_template(self, template_id: int) -> RecipeTemplate | None:
        """Get template with its ingredients."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM recipe_templates WHERE id = ?", (template_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            template = self._row_to_template(row)
            template.ingredients = await self._load_ingredients(conn, template_id)
            return template

    async def get_template_by_name(
        self, name: str, active_only: bool = True
    ) -> RecipeTemplate | None:
        """Get the latest template with this name."""
        query = "SELECT * FROM recipe_templates WHERE name = ? COLLATE NOCASE"
        if active_only:
            query += " AND is_active = 1"
        query += " ORDER BY version DESC, id DESC LIMIT 1"
        async with get_connection() as conn:
            cursor = await conn.execute(query, (name.strip(),))
            row = await cursor.fetchone()
            if row is None:
                return None
            template = self._row_to_template(row)
            template.ingredients = await self._load_ingredients(conn, template.id)
            return template

    async def list_templates(
        self, active_only: bool = True, limit: int = 100, offset: int = 0
    ) -> list[RecipeTemplate]:
        """List templates ordered by name."""
        query = "SELECT * FROM recipe_templates"
        if active_only:
            query += " WHERE is_active = 1"
        query += " ORDER BY name COLLATE NOCASE, id LIMIT ? OFFSET ?"
        async with get_connection() as conn:
            cursor = await conn.execute(query, (limit, offset))
            rows = await cursor.fetchall()
            return [self._row_to_template(row) for row in rows]

    async def replace_template(self, template: RecipeTemplate) -> RecipeTemplate:
        """Overwrite fields and ingredients in one transaction, bumping the version."""
        if template.id is None:
            raise TemplateNotFoundError(0)

        template.updated_at = now_utc()
        try:
            async with get_transaction() as conn:
                cursor = await conn.execute(
                    "SELECT version FROM recipe_templates WHERE id = ?", (template.id,)
                )
                row = await cursor.fetchone()
                if row is None:
                    raise TemplateNotFoundError(template.id)
                template.version = int(row["version"]) + 1

                await conn.execute(
                    """
                    UPDATE recipe_templates SET
                        name = ?, category_name = ?, description = ?, instructions = ?,
                        yield_quantity = ?, serving_size = ?, suggested_price = ?,
                        total_cost = ?, version = ?, is_complete = 1,
                        incomplete_reason = NULL, updated_at = ?
                    WHERE id = ?
                    """,
                    (
                        template.name,
                        template.category_name,
                        template.description,
                        template.instructions,
                        template.yield_quantity,
                        template.serving_size,
                        template.suggested_price,
                        template.total_cost,
                        template.version,
                        to_iso(template.updated_at),
                        template.id,
                    ),
                )
                await conn.execute(
                    "DELETE FROM template_ingredients WHERE template_id = ?", (template.id,)
                )
                for ingredient in template.ingredients:
                    await self._insert_ingredient(conn, template.id, ingredient)
        except aiosqlite.Error as e:
            raise DatabaseError("replace_template", str(e)) from e

        template.is_complete = True
        template.incomplete_reason = None
        logger.info(
            "template_updated",
            template_id=template.id,
            version=template.version,
            ingredients=len(template.ingredients),
        )
        return template

    async def set_active(self, template_id: int, is_active: bool) -> None:
        """Flip the active flag."""
        async with get_transaction() as conn:
            cursor = await conn.execute(
                "UPDATE recipe_templates SET is_active = ?, updated_at = ? WHERE id = ?",
                (int(is_active), to_iso(now_utc()), template_id),
            )
            if cursor.rowcount == 0:
                raise TemplateNotFoundError(template_id)
        logger.info("template_active_changed", template_id=template_id, is_active=is_active)

    @staticmethod
    async def _insert_ingredient(
        conn: aiosqlite.Connection, template_id: int, ingredient: TemplateIngredient
    ) -> None:
        cursor = await conn.execute(
            """
            INSERT INTO template_ingredients (
                template_id, position, ingredient_name, quantity, unit,
                cost_per_unit, ingredient_category
            ) VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                template_id,
                ingredient.position,
                ingredient.ingredient_name,
                ingredient.quantity,
                ingredient.unit,
                ingredient.cost_per_unit,
                ingredient.ingredient_category,
            ),
        )
        ingredient.id = cursor.lastrowid
        ingredient.template_id = template_id

    @staticmethod
    async def _load_ingredients(
        conn: aiosqlite.Connection, template_id: int
    ) -> list[TemplateIngredient]:
        cursor = await conn.execute(
            "SELECT * FROM template_ingredients WHERE template_id = ? ORDER BY position, id",
            (template_id,),
        )
        rows = await cursor.fetchall()
        return [
            TemplateIngredient(
                id=row["id"],
                template_id=row["template_id"],
                position=row["position"],
                ingredient_name=row["ingredient_name"],
                quantity=float(row["quantity"]),
                unit=row["unit"],
                cost_per_unit=float(row["cost_per_unit"]),
                ingredient_category=row["ingredient_category"],
            )
            for row in rows
        ]

    @staticmethod
    def _row_to_template(row: aiosqlite.Row) -> RecipeTemplate:
        """Convert a database row to a RecipeTemplate without ingredients."""
        return RecipeTemplate(
            id=row["id"],
            name=row["name"],
            category_name=row["category_name"],
            description=row["description"],
            instructions=row["instructions"],
            yield_quantity=float(row["yield_quantity"]),
            serving_size=float(row["serving_size"]),
            suggested_price=(
                float(row["suggested_price"]) if row["suggested_price"] is not None else None
            ),
            total_cost=float(row["total_cost"]),
            version=row["version"],
            is_active=bool(row["is_active"]),
            is_complete=bool(row["is_complete"]),
            incomplete_reason=row["incomplete_reason"],
            created_at=parse_datetime(row["created_at"]),
            updated_at=parse_datetime(row["updated_at"]),
        )
