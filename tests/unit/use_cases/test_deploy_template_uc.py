"""Tests for DeployTemplateUseCase."""

from unittest.mock import AsyncMock

import pytest

from recipe_inventory.application.use_cases.deploy_template import (
    DEFAULT_CATEGORY,
    OUTCOME_DEPLOYED,
    OUTCOME_FAILED,
    OUTCOME_SKIPPED,
    DeployTemplateUseCase,
)
from recipe_inventory.core.entities.recipe import Category, IngredientMapping, MatchTier
from recipe_inventory.core.exceptions import (
    TemplateInactiveError,
    TemplateNotFoundError,
    TemplateValidationError,
)
from recipe_inventory.core.services.ingredient_matcher import IngredientMatcher


def _assign_ids(recipe, entry):
    recipe.id = 100
    for offset, ing in enumerate(recipe.ingredients):
        ing.id = 1000 + offset
    entry.id = 200
    entry.recipe_id = recipe.id
    return recipe, entry


@pytest.fixture
def mock_template_store(sample_template):
    store = AsyncMock()
    store.get_template.return_value = sample_template
    return store


@pytest.fixture
def mock_recipe_store():
    store = AsyncMock()
    store.get_recipe_by_template.return_value = None
    store.ensure_category.side_effect = lambda store_id, name: Category(
        id=5, store_id=store_id, name=name
    )
    store.create_deployment.side_effect = _assign_ids
    return store


@pytest.fixture
def mock_mapping_store():
    store = AsyncMock()
    store.get_mapping.return_value = None
    store.upsert_mapping.side_effect = lambda mapping: mapping
    return store


@pytest.fixture
def mock_inventory_store(sample_items):
    store = AsyncMock()
    store.list_recipe_compatible.return_value = [
        item for item in sample_items.values() if item.recipe_compatible
    ]
    return store


@pytest.fixture
def use_case(mock_template_store, mock_recipe_store, mock_mapping_store, mock_inventory_store):
    return DeployTemplateUseCase(
        template_store=mock_template_store,
        recipe_store=mock_recipe_store,
        mapping_store=mock_mapping_store,
        inventory_store=mock_inventory_store,
        matcher=IngredientMatcher(),
        markup=2.0,
    )


class TestDeployTemplateUseCase:
    async def test_deploys_with_matched_ingredients(self, use_case, mock_recipe_store):
        report = await use_case.execute(7, ["store-a"])

        assert report.count(OUTCOME_DEPLOYED) == 1
        result = report.results[0]
        assert result.recipe.id == 100
        assert result.catalog_entry.id == 200
        assert result.unmapped_ingredients == []

        recipe, entry = mock_recipe_store.create_deployment.call_args[0]
        assert recipe.template_id == 7
        assert recipe.template_version == 1
        assert [i.inventory_item_id for i in recipe.ingredients] == [2, 3]
        assert entry.price == 12.0
        assert entry.category_id == 5

    async def test_uses_template_category(self, use_case, mock_recipe_store):
        await use_case.execute(7, ["store-a"])
        mock_recipe_store.ensure_category.assert_called_once_with("store-a", "Pastries")

    async def test_default_category(self, use_case, mock_recipe_store, sample_template):
        sample_template.category_name = None
        await use_case.execute(7, ["store-a"])
        mock_recipe_store.ensure_category.assert_called_once_with("store-a", DEFAULT_CATEGORY)

    async def test_price_from_markup_without_suggested_price(
        self, use_case, mock_recipe_store, sample_template
    ):
        sample_template.suggested_price = None
        await use_case.execute(7, ["store-a"])
        _, entry = mock_recipe_store.create_deployment.call_args[0]
        assert entry.price == 9.0  # 4.5 * 2.0

    async def test_unmatched_ingredient_deploys_unmapped(
        self, use_case, mock_inventory_store, mock_mapping_store
    ):
        mock_inventory_store.list_recipe_compatible.return_value = []
        report = await use_case.execute(7, ["store-a"])

        result = report.results[0]
        assert result.outcome == OUTCOME_DEPLOYED
        assert result.unmapped_ingredients == ["Croissant", "Whipped Cream"]
        remembered = [c[0][0] for c in mock_mapping_store.upsert_mapping.call_args_list]
        assert all(m.inventory_item_id is None for m in remembered)

    async def test_reuses_stored_mapping(self, use_case, mock_mapping_store, mock_recipe_store):
        async def get_mapping(store_id, name):
            if name == "Whipped Cream":
                return IngredientMapping(
                    store_id=store_id,
                    ingredient_name=name,
                    inventory_item_id=3,
                    confidence=MatchTier.MANUAL,
                )
            return None

        mock_mapping_store.get_mapping.side_effect = get_mapping
        await use_case.execute(7, ["store-a"])

        recipe, _ = mock_recipe_store.create_deployment.call_args[0]
        cream = recipe.ingredients[1]
        assert cream.inventory_item_id == 3
        assert cream.match_tier == MatchTier.MANUAL

    async def test_factor_follows_each_template_unit(
        self, use_case, mock_mapping_store, mock_recipe_store, sample_template
    ):
        mock_mapping_store.get_mapping.return_value = IngredientMapping(
            store_id="store-a",
            ingredient_name="Whipped Cream",
            inventory_item_id=3,
            confidence=MatchTier.MANUAL,
        )
        sample_template.ingredients[1].quantity = 0.03
        sample_template.ingredients[1].unit = "kg"
        sample_template.ingredients = sample_template.ingredients[1:]

        await use_case.execute(7, ["store-a"])

        recipe, _ = mock_recipe_store.create_deployment.call_args[0]
        cream = recipe.ingredients[0]
        assert cream.conversion_factor == 1000.0
        assert cream.required_for(1) == pytest.approx(30.0)

    async def test_remembered_mapping_with_incompatible_unit_left_unmapped(
        self, use_case, mock_mapping_store, sample_template
    ):
        mock_mapping_store.get_mapping.return_value = IngredientMapping(
            store_id="store-a",
            ingredient_name="Croissant",
            inventory_item_id=3,  # Whipped Cream, stocked in g
            confidence=MatchTier.MANUAL,
        )
        sample_template.ingredients = sample_template.ingredients[:1]

        report = await use_case.execute(7, ["store-a"])

        assert report.results[0].unmapped_ingredients == ["Croissant"]

    async def test_override_factor_for_unit_without_conversion(
        self, use_case, mock_mapping_store, mock_recipe_store, sample_template
    ):
        mock_mapping_store.get_mapping.return_value = IngredientMapping(
            store_id="store-a",
            ingredient_name="Croissant",
            inventory_item_id=3,
            confidence=MatchTier.MANUAL,
            conversion_factor=25.0,
        )
        sample_template.ingredients = sample_template.ingredients[:1]

        await use_case.execute(7, ["store-a"])

        recipe, _ = mock_recipe_store.create_deployment.call_args[0]
        assert recipe.ingredients[0].inventory_item_id == 3
        assert recipe.ingredients[0].conversion_factor == 25.0

    async def test_mapping_to_inactive_item_falls_back_to_matcher(
        self, use_case, mock_mapping_store, mock_recipe_store
    ):
        async def get_mapping(store_id, name):
            if name == "Whipped Cream":
                return IngredientMapping(
                    store_id=store_id,
                    ingredient_name=name,
                    inventory_item_id=99,  # deactivated, so not a candidate
                    confidence=MatchTier.MANUAL,
                )
            return None

        mock_mapping_store.get_mapping.side_effect = get_mapping
        await use_case.execute(7, ["store-a"])

        recipe, _ = mock_recipe_store.create_deployment.call_args[0]
        cream = recipe.ingredients[1]
        assert cream.inventory_item_id == 3
        assert cream.match_tier == MatchTier.EXACT
        saved = [c[0][0] for c in mock_mapping_store.upsert_mapping.call_args_list]
        assert any(m.ingredient_name == "Whipped Cream" and m.inventory_item_id == 3 for m in saved)

    async def test_existing_deployment_skipped(self, use_case, mock_recipe_store, sample_recipe):
        async def existing(store_id, template_id):
            return sample_recipe if store_id == "store-a" else None

        mock_recipe_store.get_recipe_by_template.side_effect = existing
        report = await use_case.execute(7, ["store-a", "store-b"])

        assert [r.outcome for r in report.results] == [OUTCOME_SKIPPED, OUTCOME_DEPLOYED]
        assert mock_recipe_store.create_deployment.call_count == 1

    async def test_concurrent_deployment_reported_skipped(self, use_case, mock_recipe_store):
        mock_recipe_store.create_deployment.side_effect = None
        mock_recipe_store.create_deployment.return_value = None
        report = await use_case.execute(7, ["store-a"])
        assert report.results[0].outcome == OUTCOME_SKIPPED

    async def test_store_failure_isolated(self, use_case, mock_recipe_store):
        calls = []

        async def ensure_category(store_id, name):
            calls.append(store_id)
            if store_id == "store-b":
                raise RuntimeError("database is locked")
            return Category(id=5, store_id=store_id, name=name)

        mock_recipe_store.ensure_category.side_effect = ensure_category
        report = await use_case.execute(7, ["store-a", "store-b", "store-c"])

        assert [r.outcome for r in report.results] == [
            OUTCOME_DEPLOYED,
            OUTCOME_FAILED,
            OUTCOME_DEPLOYED,
        ]
        assert "database is locked" in report.results[1].message
        assert calls == ["store-a", "store-b", "store-c"]

    async def test_duplicate_store_ids_deployed_once(self, use_case, mock_recipe_store):
        report = await use_case.execute(7, ["store-a", "store-a"])
        assert len(report.results) == 1

    async def test_unknown_template(self, use_case, mock_template_store):
        mock_template_store.get_template.return_value = None
        with pytest.raises(TemplateNotFoundError):
            await use_case.execute(404, ["store-a"])

    async def test_inactive_template(self, use_case, sample_template):
        sample_template.is_active = False
        with pytest.raises(TemplateInactiveError):
            await use_case.execute(7, ["store-a"])

    async def test_to_response(self, use_case):
        report = await use_case.execute(7, ["store-a"])
        response = use_case.to_response(report)
        assert response.deployed == 1
        assert response.results[0].recipe_id == 100
        assert response.results[0].catalog_entry_id == 200

    async def test_template_without_ingredients_rejected(
        self, use_case, sample_template, mock_recipe_store
    ):
        sample_template.ingredients = []
        with pytest.raises(TemplateValidationError):
            await use_case.execute(7, ["store-a"])
        mock_recipe_store.create_deployment.assert_not_called()

    async def test_incomplete_template_rejected(self, use_case, sample_template):
        sample_template.is_complete = False
        sample_template.incomplete_reason = "1 ingredient row failed"
        with pytest.raises(TemplateValidationError, match="1 ingredient row failed"):
            await use_case.execute(7, ["store-a"])
