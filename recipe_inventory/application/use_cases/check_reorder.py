"""Check Reorder use case: batch low-stock items into one replenishment request."""

from dataclasses import dataclass, field

from recipe_inventory.application.dto.converters import replenishment_item_to_response
from recipe_inventory.application.dto.responses import ReorderResponse
from recipe_inventory.config import get_logger, get_settings
from recipe_inventory.core.entities.audit import ReplenishmentItem, ReplenishmentRequest
from recipe_inventory.core.interfaces.audit_store import IReplenishmentStore
from recipe_inventory.core.interfaces.inventory_store import IInventoryStore

logger = get_logger(__name__)


@dataclass
class ReorderResult:
    store_id: str
    raised: bool = False
    request: ReplenishmentRequest | None = None
    already_pending: list[int] = field(default_factory=list)


class CheckReorderUseCase:
    """
    Scan a store for items at or below their minimum threshold.

    Requested quantity is maximum_capacity - on_hand, or the configured
    default when an item has no capacity. Items already on a pending request
    are left out.
    """

    def __init__(
        self,
        inventory_store: IInventoryStore | None = None,
        replenishment_store: IReplenishmentStore | None = None,
        default_quantity: float | None = None,
    ):
        self._inventory_store = inventory_store
        self._replenishment_store = replenishment_store
        if default_quantity is None:
            default_quantity = get_settings().inventory.default_reorder_quantity
        self._default_quantity = default_quantity

    async def _get_inventory_store(self) -> IInventoryStore:
        if self._inventory_store is None:
            from recipe_inventory.infrastructure.storage.sqlite import get_inventory_store

            self._inventory_store = await get_inventory_store()
        return self._inventory_store

    async def _get_replenishment_store(self) -> IReplenishmentStore:
        if self._replenishment_store is None:
            from recipe_inventory.infrastructure.storage.sqlite import get_replenishment_store

            self._replenishment_store = await get_replenishment_store()
        return self._replenishment_store

    async def execute(self, store_id: str) -> ReorderResult:
        inventory_store = await self._get_inventory_store()
        replenishment_store = await self._get_replenishment_store()

        low_stock = await inventory_store.list_low_stock(store_id)
        pending = await replenishment_store.pending_item_ids(store_id)

        result = ReorderResult(store_id=store_id)
        result.already_pending = sorted(i.id for i in low_stock if i.id in pending)

        items = [
            ReplenishmentItem(
                inventory_item_id=item.id,
                item_name=item.name,
                unit=item.unit,
                current_quantity=item.on_hand_quantity,
                minimum_threshold=item.minimum_threshold,
                requested_quantity=item.reorder_quantity(self._default_quantity),
            )
            for item in low_stock
            if item.id not in pending
        ]
        items = [i for i in items if i.requested_quantity > 0]
        if not items:
            logger.debug(
                "reorder_not_needed",
                store_id=store_id,
                low_stock=len(low_stock),
                already_pending=len(result.already_pending),
            )
            return result

        request = await replenishment_store.create_request(
            ReplenishmentRequest(
                store_id=store_id,
                notes=f"Auto-generated for {len(items)} low-stock items",
                items=items,
            )
        )
        result.raised = True
        result.request = request
        logger.info(
            "reorder_raised",
            store_id=store_id,
            request_id=request.id,
            items=len(items),
        )
        return result

    def to_response(self, result: ReorderResult) -> ReorderResponse:
        return ReorderResponse(
            store_id=result.store_id,
            raised=result.raised,
            request_id=result.request.id if result.request else None,
            items=(
                [replenishment_item_to_response(i) for i in result.request.items]
                if result.request
                else []
            ),
            already_pending=result.already_pending,
        )
