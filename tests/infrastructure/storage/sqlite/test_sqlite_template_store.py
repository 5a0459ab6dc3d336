"""Tests for SQLiteTemplateStore."""

import pytest

from recipe_inventory.application.dto.requests import ImportTemplatesRequest, TemplateRowRequest
from recipe_inventory.application.use_cases.import_templates import ImportTemplatesUseCase
from recipe_inventory.core.entities.template import RecipeTemplate, TemplateIngredient
from recipe_inventory.core.exceptions import DatabaseError, TemplateNotFoundError
from recipe_inventory.infrastructure.storage.sqlite.connection import get_transaction
from recipe_inventory.infrastructure.storage.sqlite.template_store import SQLiteTemplateStore


@pytest.fixture
async def store(db) -> SQLiteTemplateStore:
    return SQLiteTemplateStore()


async def _create_latte(store: SQLiteTemplateStore) -> RecipeTemplate:
    template = await store.create_template(
        RecipeTemplate(name="Latte", category_name="Coffee", total_cost=1.4)
    )
    await store.add_ingredient(
        template.id,
        TemplateIngredient(position=0, ingredient_name="Milk", quantity=200, unit="ml", cost_per_unit=0.002),
    )
    await store.add_ingredient(
        template.id,
        TemplateIngredient(position=1, ingredient_name="Espresso", quantity=2, unit="shots", cost_per_unit=0.5),
    )
    return template


class TestCreate:
    async def test_create_with_ingredients(self, store):
        template = await _create_latte(store)

        loaded = await store.get_template(template.id)

        assert loaded.name == "Latte"
        assert loaded.version == 1
        assert loaded.is_complete is True
        assert [i.ingredient_name for i in loaded.ingredients] == ["Milk", "Espresso"]
        assert all(i.template_id == template.id for i in loaded.ingredients)

    async def test_get_missing(self, store):
        assert await store.get_template(404) is None

    async def test_mark_incomplete(self, store):
        template = await _create_latte(store)
        await store.mark_incomplete(template.id, "1 of 2 ingredients failed to save")

        loaded = await store.get_template(template.id)
        assert loaded.is_complete is False
        assert loaded.incomplete_reason == "1 of 2 ingredients failed to save"


class TestLookup:
    async def test_by_name_is_case_insensitive(self, store):
        template = await _create_latte(store)
        found = await store.get_template_by_name("  LATTE ")
        assert found.id == template.id
        assert len(found.ingredients) == 2

    async def test_by_name_skips_inactive(self, store):
        template = await _create_latte(store)
        await store.set_active(template.id, False)

        assert await store.get_template_by_name("Latte") is None
        assert (await store.get_template_by_name("Latte", active_only=False)).id == template.id

    async def test_list_active_only(self, store):
        latte = await _create_latte(store)
        await store.create_template(RecipeTemplate(name="Americano"))
        await store.set_active(latte.id, False)

        assert [t.name for t in await store.list_templates()] == ["Americano"]
        assert len(await store.list_templates(active_only=False)) == 2


class TestReplace:
    async def test_bumps_version_and_rewrites_ingredients(self, store):
        template = await _create_latte(store)
        await store.mark_incomplete(template.id, "partial")

        replacement = RecipeTemplate(
            id=template.id,
            name="Oat Latte",
            ingredients=[TemplateIngredient(ingredient_name="Oat Milk", quantity=200, unit="ml")],
        )
        updated = await store.replace_template(replacement)

        assert updated.version == 2
        loaded = await store.get_template(template.id)
        assert loaded.name == "Oat Latte"
        assert loaded.version == 2
        assert loaded.is_complete is True
        assert [i.ingredient_name for i in loaded.ingredients] == ["Oat Milk"]

    async def test_unknown_template(self, store):
        with pytest.raises(TemplateNotFoundError):
            await store.replace_template(RecipeTemplate(id=404, name="Ghost"))


class TestSetActive:
    async def test_unknown_template(self, store):
        with pytest.raises(TemplateNotFoundError):
            await store.set_active(404, False)


class TestDriverErrors:
    @pytest.fixture
    async def rejecting_inserts(self, store):
        async with get_transaction() as conn:
            await conn.execute(
                """
                CREATE TRIGGER reject_templates BEFORE INSERT ON recipe_templates
                BEGIN SELECT RAISE(ABORT, 'disk full'); END
                """
            )

    async def test_create_raises_database_error(self, store, rejecting_inserts):
        with pytest.raises(DatabaseError, match="disk full"):
            await store.create_template(RecipeTemplate(name="Latte"))

    async def test_import_records_failed_group(self, store, rejecting_inserts):
        use_case = ImportTemplatesUseCase(template_store=store)
        rows = [
            TemplateRowRequest(recipe_name="Latte", ingredient_name="Milk", quantity=200, unit="ml"),
            TemplateRowRequest(recipe_name="Mocha", ingredient_name="Cocoa", quantity=10, unit="g"),
        ]

        result = await use_case.execute(ImportTemplatesRequest(rows=rows))

        assert [o.outcome for o in result.outcomes] == ["failed", "failed"]
        assert "disk full" in result.outcomes[0].message
