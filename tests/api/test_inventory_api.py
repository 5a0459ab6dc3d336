"""API tests for inventory, store-scoped and health endpoints."""

from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from recipe_inventory.api.dependencies import (
    get_adjust_stock_use_case,
    get_availability_use_case,
    get_create_item_use_case,
    get_inv_item_store,
    get_inventory_status_use_case,
    get_set_mapping_use_case,
)
from recipe_inventory.api.main import app
from recipe_inventory.application.use_cases.analyze_availability import (
    AnalyzeAvailabilityUseCase,
)
from recipe_inventory.application.use_cases.manage_inventory import (
    CreateInventoryItemUseCase,
    GetInventoryStatusUseCase,
)
from recipe_inventory.application.use_cases.map_ingredients import SetIngredientMappingUseCase
from recipe_inventory.application.use_cases.receive_stock import AdjustStockUseCase
from recipe_inventory.core.exceptions import NegativeStockError, UnitMismatchError


@pytest.fixture
def mock_inventory_store(sample_items):
    store = AsyncMock()

    def create_item(item):
        item.id = 42
        return item

    store.create_item.side_effect = create_item
    store.get_item.return_value = sample_items["milk"]
    store.list_items.return_value = list(sample_items.values())
    store.get_items.return_value = {2: sample_items["croissant"], 3: sample_items["cream"]}
    return store


@pytest.fixture
def mock_recipe_store(sample_recipe, sample_entry):
    store = AsyncMock()
    store.list_catalog_entries.return_value = [sample_entry]
    store.get_recipe.return_value = sample_recipe
    store.link_ingredients.return_value = 2
    return store


@pytest.fixture
def mock_mapping_store():
    store = AsyncMock()
    store.upsert_mapping.side_effect = lambda m: m.model_copy(update={"id": 5})
    return store


@pytest.fixture
async def inventory_client(mock_inventory_store, mock_recipe_store, mock_mapping_store):
    overrides = {
        get_inv_item_store: lambda: mock_inventory_store,
        get_create_item_use_case: lambda: CreateInventoryItemUseCase(
            inventory_store=mock_inventory_store
        ),
        get_inventory_status_use_case: lambda: GetInventoryStatusUseCase(
            inventory_store=mock_inventory_store
        ),
        get_adjust_stock_use_case: lambda: AdjustStockUseCase(inventory_store=mock_inventory_store),
        get_availability_use_case: lambda: AnalyzeAvailabilityUseCase(
            recipe_store=mock_recipe_store, inventory_store=mock_inventory_store
        ),
        get_set_mapping_use_case: lambda: SetIngredientMappingUseCase(
            mapping_store=mock_mapping_store,
            recipe_store=mock_recipe_store,
            inventory_store=mock_inventory_store,
        ),
    }
    app.dependency_overrides.update(overrides)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


class TestHealth:
    async def test_root(self, inventory_client: AsyncClient):
        response = await inventory_client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    async def test_api_health(self, inventory_client: AsyncClient):
        response = await inventory_client.get("/api/health")
        assert response.status_code == 200
        assert "uptime_seconds" in response.json()

    async def test_db_health_reports_ledger_checks(self, db, inventory_client: AsyncClient):
        response = await inventory_client.get("/api/health/db")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"]["schema_version"] == "001"
        checks = {c["name"]: c for c in data["database"]["checks"]}
        assert checks["non_negative_stock"]["passed"] is True
        assert checks["recipe_links_within_store"]["violations"] == 0


class TestInventoryItems:
    async def test_create(self, inventory_client: AsyncClient):
        response = await inventory_client.post(
            "/api/inventory/items",
            json={"store_id": "store-a", "name": "Oat Milk", "unit": "ml", "on_hand_quantity": 500},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["id"] == 42
        assert data["minimum_threshold"] == 10.0
        assert data["recipe_compatible"] is True

    async def test_get_missing(self, inventory_client: AsyncClient, mock_inventory_store):
        mock_inventory_store.get_item.return_value = None

        response = await inventory_client.get("/api/inventory/items/404")

        assert response.status_code == 404
        assert response.json()["error_code"] == "INVENTORY_ITEM_NOT_FOUND"

    async def test_status(self, inventory_client: AsyncClient):
        response = await inventory_client.get("/api/inventory/status", params={"store_id": "store-a"})

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 4
        assert data["low_stock_count"] == 0

    async def test_adjust_below_zero_is_conflict(self, inventory_client: AsyncClient, mock_inventory_store):
        mock_inventory_store.apply_movement.side_effect = NegativeStockError(1, 5, -10)

        response = await inventory_client.post(
            "/api/inventory/adjust", json={"inventory_item_id": 1, "quantity_delta": -10}
        )

        assert response.status_code == 409
        assert response.json()["error_code"] == "NEGATIVE_STOCK"


class TestStoreEndpoints:
    async def test_availability(self, inventory_client: AsyncClient):
        response = await inventory_client.get("/api/stores/store-a/availability")

        assert response.status_code == 200
        data = response.json()
        assert data["store_id"] == "store-a"
        assert data["products"][0]["status"] == "ready_to_sell"
        assert data["products"][0]["max_production"] == 16
        assert data["status_counts"] == {"ready_to_sell": 1}

    async def test_set_mapping(self, inventory_client: AsyncClient):
        response = await inventory_client.put(
            "/api/stores/store-a/mappings",
            json={"ingredient_name": "Fresh Milk", "inventory_item_id": 1},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["mapping"]["confidence"] == "manual"
        assert data["mapping"]["conversion_factor"] is None
        assert data["relinked_ingredients"] == 2

    async def test_set_mapping_unit_mismatch(self, inventory_client: AsyncClient, mock_recipe_store):
        mock_recipe_store.link_ingredients.side_effect = UnitMismatchError("slice", "ml")

        response = await inventory_client.put(
            "/api/stores/store-a/mappings",
            json={"ingredient_name": "Milk", "inventory_item_id": 1},
        )

        assert response.status_code == 400
        assert response.json()["error_code"] == "UNIT_MISMATCH"
