"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator, Generator
from pathlib import Path

import pytest

import recipe_inventory.config.settings as settings_module
import recipe_inventory.infrastructure.storage.sqlite.connection as conn_module
from recipe_inventory.application.services import reset_services
from recipe_inventory.config.settings import Settings, StorageSettings
from recipe_inventory.core.entities.inventory import InventoryItem
from recipe_inventory.core.entities.recipe import (
    CatalogEntry,
    MatchTier,
    Recipe,
    RecipeIngredient,
)
from recipe_inventory.core.entities.template import RecipeTemplate, TemplateIngredient


@pytest.fixture(autouse=True)
def test_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[Settings, None, None]:
    """Settings pointing storage at a per-test directory."""
    settings = Settings(storage=StorageSettings(data_dir=tmp_path, db_name="test.db"))
    monkeypatch.setattr(settings_module, "_settings", settings)
    reset_services()
    yield settings
    reset_services()


@pytest.fixture
async def db(test_settings: Settings) -> AsyncGenerator[Path, None]:
    """Migrated temporary database backing the global connection pool."""
    from recipe_inventory.infrastructure.storage.sqlite.migrations import run_migrations

    conn_module._pool = None
    assert await run_migrations(test_settings.storage.db_path)

    yield test_settings.storage.db_path

    await conn_module.close_pool()


@pytest.fixture
def sample_items() -> dict[str, InventoryItem]:
    """A small cafe's stock, keyed by name."""
    return {
        "milk": InventoryItem(
            id=1, store_id="store-a", name="Milk", unit="ml", on_hand_quantity=1000
        ),
        "croissant": InventoryItem(
            id=2, store_id="store-a", name="Croissant", unit="pieces", on_hand_quantity=50
        ),
        "cream": InventoryItem(
            id=3, store_id="store-a", name="Whipped Cream", unit="g", on_hand_quantity=500
        ),
        "cups": InventoryItem(
            id=4, store_id="store-a", name="Paper Cups", unit="box", on_hand_quantity=10
        ),
    }


@pytest.fixture
def sample_template() -> RecipeTemplate:
    return RecipeTemplate(
        id=7,
        name="Cream Croissant",
        category_name="Pastries",
        suggested_price=12.0,
        total_cost=4.5,
        ingredients=[
            TemplateIngredient(
                id=70, ingredient_name="Croissant", quantity=1, unit="pieces", cost_per_unit=3.0
            ),
            TemplateIngredient(
                id=71, ingredient_name="Whipped Cream", quantity=30, unit="g", cost_per_unit=0.05
            ),
        ],
    )


@pytest.fixture
def sample_recipe() -> Recipe:
    return Recipe(
        id=11,
        store_id="store-a",
        template_id=7,
        template_version=1,
        name="Cream Croissant",
        ingredients=[
            RecipeIngredient(
                id=110,
                ingredient_name="Croissant",
                quantity=1,
                unit="pieces",
                inventory_item_id=2,
                match_tier=MatchTier.EXACT,
            ),
            RecipeIngredient(
                id=111,
                ingredient_name="Whipped Cream",
                quantity=30,
                unit="g",
                inventory_item_id=3,
                match_tier=MatchTier.EXACT,
            ),
        ],
    )


@pytest.fixture
def sample_entry() -> CatalogEntry:
    return CatalogEntry(id=21, store_id="store-a", recipe_id=11, name="Cream Croissant", price=12.0)
