"""Reverse Deduction use case: restore stock for a cancelled or refunded sale."""

from dataclasses import dataclass, field

from recipe_inventory.application.dto.converters import movement_to_response
from recipe_inventory.application.dto.requests import ReverseDeductionRequest
from recipe_inventory.application.dto.responses import ReversalResponse
from recipe_inventory.application.use_cases.deduct_inventory import line_reference_for
from recipe_inventory.config import get_logger
from recipe_inventory.core.entities.inventory import StockMovement
from recipe_inventory.core.interfaces.inventory_store import IInventoryStore

logger = get_logger(__name__)


@dataclass
class ReversalResult:
    transaction_reference: str
    movements: list[StockMovement] = field(default_factory=list)


class ReverseDeductionUseCase:
    """Compensate sale movements with positive adjustments; safe to repeat."""

    def __init__(self, inventory_store: IInventoryStore | None = None):
        self._inventory_store = inventory_store

    async def _get_inventory_store(self) -> IInventoryStore:
        if self._inventory_store is None:
            from recipe_inventory.infrastructure.storage.sqlite import get_inventory_store

            self._inventory_store = await get_inventory_store()
        return self._inventory_store

    async def execute(self, request: ReverseDeductionRequest) -> ReversalResult:
        line_reference = None
        if any(
            ref is not None
            for ref in (request.line_id, request.catalog_entry_id, request.recipe_id)
        ):
            line_reference = line_reference_for(
                request.catalog_entry_id, request.recipe_id, request.line_id
            )

        store = await self._get_inventory_store()
        movements = await store.reverse_sale(request.transaction_reference, line_reference)
        if not movements:
            logger.info(
                "reversal_nothing_to_do",
                transaction_reference=request.transaction_reference,
                line_reference=line_reference,
            )
        return ReversalResult(
            transaction_reference=request.transaction_reference,
            movements=movements,
        )

    def to_response(self, result: ReversalResult) -> ReversalResponse:
        return ReversalResponse(
            transaction_reference=result.transaction_reference,
            reversed=len(result.movements),
            movements=[movement_to_response(m) for m in result.movements],
        )
