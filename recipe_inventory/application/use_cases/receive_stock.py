"""Receive Stock and Adjust Stock use cases: the non-sale ledger paths."""

from dataclasses import dataclass

from recipe_inventory.application.dto.converters import item_to_response, movement_to_response
from recipe_inventory.application.dto.requests import AdjustStockRequest, ReceiveStockRequest
from recipe_inventory.application.dto.responses import StockChangeResponse
from recipe_inventory.config import get_logger
from recipe_inventory.core.entities.inventory import InventoryItem, MovementType, StockMovement
from recipe_inventory.core.interfaces.inventory_store import IInventoryStore

logger = get_logger(__name__)


@dataclass
class StockChangeResult:
    """Item state after a receipt or adjustment, with its ledger row."""

    inventory_item: InventoryItem
    movement: StockMovement


class _StockChangeUseCase:
    def __init__(self, inventory_store: IInventoryStore | None = None):
        self._inventory_store = inventory_store

    async def _get_inventory_store(self) -> IInventoryStore:
        if self._inventory_store is None:
            from recipe_inventory.infrastructure.storage.sqlite import get_inventory_store

            self._inventory_store = await get_inventory_store()
        return self._inventory_store

    def to_response(self, result: StockChangeResult) -> StockChangeResponse:
        """Convert result to API response."""
        return StockChangeResponse(
            inventory_item=item_to_response(result.inventory_item),
            movement=movement_to_response(result.movement),
        )


class ReceiveStockUseCase(_StockChangeUseCase):
    """Receive stock (receipt movement)."""

    async def execute(self, request: ReceiveStockRequest) -> StockChangeResult:
        logger.info(
            "receive_stock_started",
            item_id=request.inventory_item_id,
            quantity=request.quantity,
        )
        store = await self._get_inventory_store()
        item, movement = await store.apply_movement(
            request.inventory_item_id,
            request.quantity,
            MovementType.RECEIPT,
            reference=request.reference,
            notes=request.notes,
        )
        logger.info(
            "receive_stock_complete",
            item_id=item.id,
            on_hand=item.on_hand_quantity,
        )
        return StockChangeResult(inventory_item=item, movement=movement)


class AdjustStockUseCase(_StockChangeUseCase):
    """Manual stock correction; refuses to drive stock negative."""

    async def execute(self, request: AdjustStockRequest) -> StockChangeResult:
        logger.info(
            "adjust_stock_started",
            item_id=request.inventory_item_id,
            delta=request.quantity_delta,
        )
        store = await self._get_inventory_store()
        item, movement = await store.apply_movement(
            request.inventory_item_id,
            request.quantity_delta,
            MovementType.ADJUSTMENT,
            reference=request.reference,
            notes=request.notes,
        )
        logger.info(
            "adjust_stock_complete",
            item_id=item.id,
            on_hand=item.on_hand_quantity,
        )
        return StockChangeResult(inventory_item=item, movement=movement)
