"""Inventory item registration and store status use cases."""

from dataclasses import dataclass, field

from recipe_inventory.application.dto.converters import item_to_response
from recipe_inventory.application.dto.requests import CreateInventoryItemRequest
from recipe_inventory.application.dto.responses import (
    InventoryItemResponse,
    InventoryStatusResponse,
)
from recipe_inventory.config import get_logger, get_settings
from recipe_inventory.core.entities.inventory import InventoryItem
from recipe_inventory.core.interfaces.inventory_store import IInventoryStore
from recipe_inventory.core.services.units import is_recipe_unit

logger = get_logger(__name__)


class CreateInventoryItemUseCase:
    """Register a stock item, filling thresholds from settings."""

    def __init__(self, inventory_store: IInventoryStore | None = None):
        self._inventory_store = inventory_store

    async def _get_inventory_store(self) -> IInventoryStore:
        if self._inventory_store is None:
            from recipe_inventory.infrastructure.storage.sqlite import get_inventory_store

            self._inventory_store = await get_inventory_store()
        return self._inventory_store

    async def execute(self, request: CreateInventoryItemRequest) -> InventoryItem:
        settings = get_settings()
        recipe_compatible = request.recipe_compatible
        if recipe_compatible is None:
            recipe_compatible = is_recipe_unit(request.unit, settings.matcher.non_recipe_units)

        item = InventoryItem(
            store_id=request.store_id,
            name=request.name.strip(),
            unit=request.unit.strip(),
            on_hand_quantity=request.on_hand_quantity,
            minimum_threshold=(
                request.minimum_threshold
                if request.minimum_threshold is not None
                else settings.inventory.default_minimum_threshold
            ),
            maximum_capacity=(
                request.maximum_capacity
                if request.maximum_capacity is not None
                else settings.inventory.default_maximum_capacity
            ),
            unit_cost=request.unit_cost,
            recipe_compatible=recipe_compatible,
        )
        store = await self._get_inventory_store()
        return await store.create_item(item)

    def to_response(self, item: InventoryItem) -> InventoryItemResponse:
        return item_to_response(item)


@dataclass
class InventoryStatus:
    """A store's items with the low-stock subset."""

    store_id: str
    items: list[InventoryItem] = field(default_factory=list)

    @property
    def low_stock(self) -> list[InventoryItem]:
        return [i for i in self.items if i.is_active and i.is_low_stock]


class GetInventoryStatusUseCase:
    """List a store's stock levels flagged against their thresholds."""

    def __init__(self, inventory_store: IInventoryStore | None = None):
        self._inventory_store = inventory_store

    async def _get_inventory_store(self) -> IInventoryStore:
        if self._inventory_store is None:
            from recipe_inventory.infrastructure.storage.sqlite import get_inventory_store

            self._inventory_store = await get_inventory_store()
        return self._inventory_store

    async def execute(self, store_id: str, low_stock_only: bool = False) -> InventoryStatus:
        store = await self._get_inventory_store()
        if low_stock_only:
            items = await store.list_low_stock(store_id)
        else:
            items = await store.list_items(store_id)
        status = InventoryStatus(store_id=store_id, items=items)
        logger.debug(
            "inventory_status_computed",
            store_id=store_id,
            items=len(items),
            low_stock=len(status.low_stock),
        )
        return status

    def to_response(self, status: InventoryStatus) -> InventoryStatusResponse:
        return InventoryStatusResponse(
            store_id=status.store_id,
            items=[item_to_response(i) for i in status.items],
            total=len(status.items),
            low_stock_count=len(status.low_stock),
        )
