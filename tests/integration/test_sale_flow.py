"""End-to-end flows over a real migrated database: author, deploy, sell, reverse."""

import pytest

from recipe_inventory.application.dto.requests import (
    CreateTemplateRequest,
    DeductInventoryRequest,
    ReverseDeductionRequest,
    SetMappingRequest,
    TemplateIngredientRequest,
)
from recipe_inventory.application.use_cases.analyze_availability import (
    AnalyzeAvailabilityUseCase,
)
from recipe_inventory.application.use_cases.create_template import CreateTemplateUseCase
from recipe_inventory.application.use_cases.deduct_inventory import DeductInventoryUseCase
from recipe_inventory.application.use_cases.deploy_template import DeployTemplateUseCase
from recipe_inventory.application.use_cases.map_ingredients import SetIngredientMappingUseCase
from recipe_inventory.application.use_cases.reverse_deduction import ReverseDeductionUseCase
from recipe_inventory.core.entities.audit import SyncStatus
from recipe_inventory.core.entities.availability import AvailabilityStatus
from recipe_inventory.core.entities.inventory import InventoryItem, MovementType
from recipe_inventory.core.entities.recipe import MatchTier
from recipe_inventory.infrastructure.storage.sqlite import (
    SQLiteInventoryStore,
    SQLiteRecipeStore,
    SQLiteReplenishmentStore,
    SQLiteSyncAuditStore,
)


@pytest.fixture
def inventory(db) -> SQLiteInventoryStore:
    return SQLiteInventoryStore()


async def _stock(inventory: SQLiteInventoryStore, store_id: str, name: str, unit: str, qty: float, threshold: float = 0):
    return await inventory.create_item(
        InventoryItem(
            store_id=store_id,
            name=name,
            unit=unit,
            on_hand_quantity=qty,
            minimum_threshold=threshold,
        )
    )


async def _author(name: str, *ingredients: tuple[str, float, str], price: float | None = None) -> int:
    result = await CreateTemplateUseCase().execute(
        CreateTemplateRequest(
            name=name,
            category_name="Bakery",
            suggested_price=price,
            ingredients=[
                TemplateIngredientRequest(ingredient_name=n, quantity=q, unit=u)
                for n, q, u in ingredients
            ],
        )
    )
    assert result.outcome == "created"
    return result.template.id


async def _deploy_one(template_id: int, store_id: str = "store-a"):
    report = await DeployTemplateUseCase().execute(template_id, [store_id])
    deployment = report.results[0]
    assert deployment.outcome == "deployed"
    return deployment


def _sell(entry_id: int, quantity: float, tx: str) -> DeductInventoryRequest:
    return DeductInventoryRequest(
        catalog_entry_id=entry_id, quantity=quantity, transaction_reference=tx
    )


class TestDeduction:
    async def test_shortage_leaves_stock_untouched(self, inventory):
        milk = await _stock(inventory, "store-a", "Milk", "ml", 100)
        template_id = await _author("Milkshake", ("Milk", 2, "ml"))
        deployment = await _deploy_one(template_id)

        result = await DeductInventoryUseCase().execute(
            _sell(deployment.catalog_entry.id, 60, "TX-100")
        )

        assert result.success is False
        assert result.error_code == "INSUFFICIENT_STOCK"
        assert "Milk: need 120, have 100" in result.message
        assert (await inventory.get_item(milk.id)).on_hand_quantity == 100
        assert await inventory.list_movements(transaction_reference="TX-100") == []

        audit = await SQLiteSyncAuditStore().list_entries(transaction_reference="TX-100")
        assert [a.status for a in audit] == [SyncStatus.FAILED]

    async def test_every_ingredient_deducted(self, inventory):
        croissant = await _stock(inventory, "store-a", "Croissant", "pieces", 50, threshold=5)
        cream = await _stock(inventory, "store-a", "Whipped Cream", "g", 50, threshold=5)
        template_id = await _author(
            "Cream Croissant", ("Croissant", 1, "pieces"), ("Whipped Cream", 1, "g"), price=12
        )
        deployment = await _deploy_one(template_id)
        assert all(i.match_tier == MatchTier.EXACT for i in deployment.recipe.ingredients)

        result = await DeductInventoryUseCase().execute(
            _sell(deployment.catalog_entry.id, 1, "TX-200")
        )

        assert result.success is True
        assert result.items_processed == 2
        assert (await inventory.get_item(croissant.id)).on_hand_quantity == 49
        assert (await inventory.get_item(cream.id)).on_hand_quantity == 49

        movements = await inventory.list_movements(transaction_reference="TX-200")
        assert len(movements) == 2
        assert {m.movement_type for m in movements} == {MovementType.SALE}
        assert {m.line_reference for m in movements} == {f"entry:{deployment.catalog_entry.id}"}

        audit = await SQLiteSyncAuditStore().list_entries(transaction_reference="TX-200")
        assert audit[0].status == SyncStatus.SUCCESS
        assert audit[0].items_processed == 2

    async def test_retry_of_same_line_is_noop(self, inventory):
        milk = await _stock(inventory, "store-a", "Milk", "ml", 100)
        template_id = await _author("Milkshake", ("Milk", 2, "ml"))
        deployment = await _deploy_one(template_id)
        use_case = DeductInventoryUseCase()

        await use_case.execute(_sell(deployment.catalog_entry.id, 10, "TX-300"))
        retry = await use_case.execute(_sell(deployment.catalog_entry.id, 10, "TX-300"))

        assert retry.success is True
        assert retry.already_processed is True
        assert (await inventory.get_item(milk.id)).on_hand_quantity == 80

    async def test_sale_at_threshold_raises_reorder(self, inventory):
        milk = await _stock(inventory, "store-a", "Milk", "ml", 100, threshold=50)
        template_id = await _author("Milkshake", ("Milk", 2, "ml"))
        deployment = await _deploy_one(template_id)

        result = await DeductInventoryUseCase().execute(
            _sell(deployment.catalog_entry.id, 25, "TX-400")
        )

        assert result.reorder_request_id is not None
        requests = await SQLiteReplenishmentStore().list_requests("store-a")
        assert [i.inventory_item_id for i in requests[0].items] == [milk.id]


class TestReversal:
    async def test_reverse_restores_stock(self, inventory):
        milk = await _stock(inventory, "store-a", "Milk", "ml", 100)
        template_id = await _author("Milkshake", ("Milk", 2, "ml"))
        deployment = await _deploy_one(template_id)
        await DeductInventoryUseCase().execute(_sell(deployment.catalog_entry.id, 10, "TX-500"))

        result = await ReverseDeductionUseCase().execute(
            ReverseDeductionRequest(
                transaction_reference="TX-500", catalog_entry_id=deployment.catalog_entry.id
            )
        )

        assert len(result.movements) == 1
        assert (await inventory.get_item(milk.id)).on_hand_quantity == 100


class TestDeployment:
    async def test_existing_store_skipped(self, inventory):
        template_id = await _author("Milkshake", ("Milk", 2, "ml"))
        await _deploy_one(template_id, "store-a")

        report = await DeployTemplateUseCase().execute(template_id, ["store-a", "store-b"])

        assert [r.outcome for r in report.results] == ["skipped", "deployed"]
        assert len(await SQLiteRecipeStore().list_recipes("store-a")) == 1

    async def test_unmapped_until_operator_maps(self, inventory):
        template_id = await _author("Milkshake", ("Whole Milk", 2, "ml"))
        deployment = await _deploy_one(template_id, "store-b")
        assert deployment.unmapped_ingredients == ["Whole Milk"]

        sale = _sell(deployment.catalog_entry.id, 1, "TX-600")
        blocked = await DeductInventoryUseCase().execute(sale)
        assert blocked.error_code == "INGREDIENT_UNMAPPED"

        milk = await _stock(inventory, "store-b", "Oat Drink", "ml", 100)
        mapped = await SetIngredientMappingUseCase().execute(
            "store-b", SetMappingRequest(ingredient_name="whole milk", inventory_item_id=milk.id)
        )
        assert mapped.relinked == 1

        result = await DeductInventoryUseCase().execute(sale)
        assert result.success is True
        assert (await inventory.get_item(milk.id)).on_hand_quantity == 98


class TestAvailability:
    async def test_limited_by_scarcest_ingredient(self, inventory):
        await _stock(inventory, "store-a", "Flour", "g", 1000)
        await _stock(inventory, "store-a", "Sugar", "g", 1000)
        template_id = await _author("Sweet Bread", ("Flour", 300, "g"), ("Sugar", 200, "g"))
        await _deploy_one(template_id)

        result = await AnalyzeAvailabilityUseCase().execute("store-a")

        assert len(result.products) == 1
        report = result.products[0]
        assert report.status == AvailabilityStatus.READY_TO_SELL
        assert report.max_production == 3


class TestSaleLines:
    async def test_same_product_on_two_lines_of_one_sale(self, inventory):
        milk = await _stock(inventory, "store-a", "Milk", "ml", 10)
        template_id = await _author("Milk Shot", ("Milk", 1, "ml"))
        deployment = await _deploy_one(template_id)
        entry_id = deployment.catalog_entry.id
        use_case = DeductInventoryUseCase()

        first = await use_case.execute(
            DeductInventoryRequest(
                catalog_entry_id=entry_id, quantity=1, transaction_reference="SALE-1", line_id="1"
            )
        )
        second = await use_case.execute(
            DeductInventoryRequest(
                catalog_entry_id=entry_id, quantity=2, transaction_reference="SALE-1", line_id="2"
            )
        )

        assert first.items_processed == 1
        assert second.already_processed is False
        assert second.items_processed == 1
        assert (await inventory.get_item(milk.id)).on_hand_quantity == 7

        reversed_ = await ReverseDeductionUseCase().execute(
            ReverseDeductionRequest(transaction_reference="SALE-1", line_id="2")
        )
        assert len(reversed_.movements) == 1
        assert (await inventory.get_item(milk.id)).on_hand_quantity == 9


class TestUnitsAcrossRecipes:
    async def test_one_name_authored_in_two_units(self, inventory):
        small = await _author("Cortado", ("Leche", 200, "ml"))
        large = await _author("Cafe con Leche", ("Leche", 0.2, "liters"))
        await _deploy_one(small, "store-b")
        deployment = await _deploy_one(large, "store-b")
        assert deployment.unmapped_ingredients == ["Leche"]

        milk = await _stock(inventory, "store-b", "Milk", "ml", 1000)
        mapped = await SetIngredientMappingUseCase().execute(
            "store-b", SetMappingRequest(ingredient_name="Leche", inventory_item_id=milk.id)
        )
        assert mapped.relinked == 2

        result = await DeductInventoryUseCase().execute(
            _sell(deployment.catalog_entry.id, 1, "TX-700")
        )

        assert result.success is True
        assert (await inventory.get_item(milk.id)).on_hand_quantity == 800

    async def test_remembered_mapping_converts_later_deployment(self, inventory):
        milk = await _stock(inventory, "store-b", "Milk", "ml", 1000)
        await SetIngredientMappingUseCase().execute(
            "store-b", SetMappingRequest(ingredient_name="Leche", inventory_item_id=milk.id)
        )
        template_id = await _author("Cafe con Leche", ("Leche", 0.2, "liters"))
        deployment = await _deploy_one(template_id, "store-b")

        await DeductInventoryUseCase().execute(_sell(deployment.catalog_entry.id, 2, "TX-800"))

        assert (await inventory.get_item(milk.id)).on_hand_quantity == 600
