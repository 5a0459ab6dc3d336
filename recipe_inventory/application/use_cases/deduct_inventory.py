"""
Deduct Inventory use case.

Called once per sold line of a completed sale. Resolves the product to its
recipe, validates stock for every ingredient, then commits all decrements in
one atomic transaction. Every call, successful or not, leaves a sync audit
entry keyed by the transaction reference.
"""

import time
from dataclasses import dataclass, field

from recipe_inventory.application.dto.converters import (
    movement_to_response,
    shortage_to_response,
)
from recipe_inventory.application.dto.requests import DeductInventoryRequest
from recipe_inventory.application.dto.responses import DeductionResponse
from recipe_inventory.application.use_cases.check_reorder import CheckReorderUseCase
from recipe_inventory.config import get_logger, get_settings
from recipe_inventory.core.entities.audit import SyncAuditEntry, SyncStatus
from recipe_inventory.core.entities.inventory import DeductionLine, Shortage, StockMovement
from recipe_inventory.core.entities.recipe import CatalogEntry, Recipe
from recipe_inventory.core.exceptions import (
    InsufficientStockError,
    ProductNotFoundError,
    RecipeInventoryError,
    RecipeSetupError,
    UnmappedIngredientError,
)
from recipe_inventory.core.interfaces.audit_store import ISyncAuditStore
from recipe_inventory.core.interfaces.inventory_store import IInventoryStore
from recipe_inventory.core.interfaces.recipe_store import IRecipeStore
from recipe_inventory.core.services.stock_check import find_shortages

logger = get_logger(__name__)


def line_reference_for(
    catalog_entry_id: int | None,
    recipe_id: int | None,
    line_id: str | None = None,
) -> str:
    """
    Identify a sold line within its transaction.

    A caller-supplied line id wins, so one sale can carry several lines of
    the same product. Without it the product stands in for the line.
    """
    if line_id is not None:
        return f"line:{line_id}"
    if catalog_entry_id is not None:
        return f"entry:{catalog_entry_id}"
    return f"recipe:{recipe_id}"


@dataclass
class DeductionResult:
    """Outcome of one deduction call; failures are values, not exceptions."""

    transaction_reference: str
    line_reference: str
    success: bool
    error_code: str | None = None
    message: str | None = None
    direct_product: bool = False
    already_processed: bool = False
    shortages: list[Shortage] = field(default_factory=list)
    movements: list[StockMovement] = field(default_factory=list)
    reorder_request_id: int | None = None

    @property
    def items_processed(self) -> int:
        return len(self.movements)


class DeductInventoryUseCase:
    """
    All-or-nothing ingredient deduction for one sold line.

    The pre-commit stock check is advisory and gives the caller a full
    shortage list cheaply. The authoritative check runs again inside the
    store's exclusive commit transaction against freshly read quantities.
    """

    def __init__(
        self,
        inventory_store: IInventoryStore | None = None,
        recipe_store: IRecipeStore | None = None,
        audit_store: ISyncAuditStore | None = None,
        reorder_use_case: CheckReorderUseCase | None = None,
        auto_reorder: bool | None = None,
    ):
        self._inventory_store = inventory_store
        self._recipe_store = recipe_store
        self._audit_store = audit_store
        self._reorder = reorder_use_case
        if auto_reorder is None:
            auto_reorder = get_settings().inventory.auto_reorder_on_sale
        self._auto_reorder = auto_reorder

    async def _get_inventory_store(self) -> IInventoryStore:
        if self._inventory_store is None:
            from recipe_inventory.infrastructure.storage.sqlite import get_inventory_store

            self._inventory_store = await get_inventory_store()
        return self._inventory_store

    async def _get_recipe_store(self) -> IRecipeStore:
        if self._recipe_store is None:
            from recipe_inventory.infrastructure.storage.sqlite import get_recipe_store

            self._recipe_store = await get_recipe_store()
        return self._recipe_store

    async def _get_audit_store(self) -> ISyncAuditStore:
        if self._audit_store is None:
            from recipe_inventory.infrastructure.storage.sqlite import get_sync_audit_store

            self._audit_store = await get_sync_audit_store()
        return self._audit_store

    async def _get_reorder(self) -> CheckReorderUseCase:
        if self._reorder is None:
            self._reorder = CheckReorderUseCase(
                inventory_store=await self._get_inventory_store()
            )
        return self._reorder

    async def execute(self, request: DeductInventoryRequest) -> DeductionResult:
        """
        Deduct stock for one sold line.

        Domain failures (unknown product, setup problems, shortages, commit
        failures) are returned as an unsuccessful result. Unexpected errors
        are audited and re-raised.
        """
        started = time.perf_counter()
        line_reference = line_reference_for(
            request.catalog_entry_id, request.recipe_id, request.line_id
        )
        logger.info(
            "deduction_started",
            transaction_reference=request.transaction_reference,
            line_reference=line_reference,
            quantity=request.quantity,
        )

        try:
            result = await self._deduct(request, line_reference)
        except RecipeInventoryError as e:
            result = DeductionResult(
                transaction_reference=request.transaction_reference,
                line_reference=line_reference,
                success=False,
                error_code=e.code,
                message=e.message,
                shortages=list(getattr(e, "shortages", [])),
            )
            logger.warning(
                "deduction_failed",
                transaction_reference=request.transaction_reference,
                line_reference=line_reference,
                error_code=e.code,
                error=e.message,
            )
        except Exception as e:
            await self._record_audit(
                request.transaction_reference,
                line_reference,
                SyncStatus.FAILED,
                items_processed=0,
                error_details=f"{type(e).__name__}: {e}",
                started=started,
            )
            raise

        await self._record_audit(
            result.transaction_reference,
            result.line_reference,
            SyncStatus.SUCCESS if result.success else SyncStatus.FAILED,
            items_processed=result.items_processed,
            error_details=result.message if not result.success else None,
            started=started,
        )

        if result.success and result.movements:
            result.reorder_request_id = await self._maybe_reorder(request, result)

        logger.info(
            "deduction_complete",
            transaction_reference=result.transaction_reference,
            line_reference=result.line_reference,
            success=result.success,
            items_processed=result.items_processed,
            already_processed=result.already_processed,
        )
        return result

    async def _deduct(
        self, request: DeductInventoryRequest, line_reference: str
    ) -> DeductionResult:
        entry, recipe = await self._resolve(request)

        if recipe is None:
            # Direct product: sold as-is, nothing to draw from stock
            return DeductionResult(
                transaction_reference=request.transaction_reference,
                line_reference=line_reference,
                success=True,
                direct_product=True,
                message=f"{entry.name} has no recipe; no deduction needed",
            )

        if not recipe.ingredients:
            raise RecipeSetupError(recipe.id, "recipe has no ingredients")
        unmapped = recipe.unmapped_ingredients
        if unmapped:
            raise UnmappedIngredientError(
                recipe.id, [ing.ingredient_name for ing in unmapped]
            )

        inventory_store = await self._get_inventory_store()
        if await inventory_store.has_sale(request.transaction_reference, line_reference):
            return self._already_processed(request, line_reference)

        lines = [
            DeductionLine(
                inventory_item_id=ing.inventory_item_id,
                ingredient_name=ing.ingredient_name,
                required=ing.required_for(request.quantity),
                unit=ing.unit,
            )
            for ing in recipe.ingredients
        ]

        # Advisory dry run against a snapshot
        items = await inventory_store.get_items([line.inventory_item_id for line in lines])
        shortages = find_shortages(lines, items)
        if shortages:
            raise InsufficientStockError(shortages)

        commit = await inventory_store.commit_sale(
            lines, request.transaction_reference, line_reference
        )
        if commit.already_processed:
            return self._already_processed(request, line_reference)

        return DeductionResult(
            transaction_reference=request.transaction_reference,
            line_reference=line_reference,
            success=True,
            movements=commit.movements,
        )

    async def _resolve(
        self, request: DeductInventoryRequest
    ) -> tuple[CatalogEntry | None, Recipe | None]:
        recipe_store = await self._get_recipe_store()

        entry = None
        recipe_id = request.recipe_id
        if request.catalog_entry_id is not None:
            entry = await recipe_store.get_catalog_entry(request.catalog_entry_id)
            if entry is None:
                raise ProductNotFoundError(f"catalog entry {request.catalog_entry_id}")
            if entry.is_direct_product:
                return entry, None
            recipe_id = entry.recipe_id

        recipe = await recipe_store.get_recipe(recipe_id)
        if recipe is None:
            raise ProductNotFoundError(f"recipe {recipe_id}")
        return entry, recipe

    @staticmethod
    def _already_processed(
        request: DeductInventoryRequest, line_reference: str
    ) -> DeductionResult:
        logger.info(
            "deduction_already_processed",
            transaction_reference=request.transaction_reference,
            line_reference=line_reference,
        )
        return DeductionResult(
            transaction_reference=request.transaction_reference,
            line_reference=line_reference,
            success=True,
            already_processed=True,
            message="Transaction line already deducted",
        )

    async def _record_audit(
        self,
        transaction_reference: str,
        line_reference: str,
        status: SyncStatus,
        items_processed: int,
        error_details: str | None,
        started: float,
    ) -> None:
        entry = SyncAuditEntry(
            transaction_reference=transaction_reference,
            line_reference=line_reference,
            status=status,
            items_processed=items_processed,
            error_details=error_details,
            duration_ms=int((time.perf_counter() - started) * 1000),
        )
        try:
            audit_store = await self._get_audit_store()
            await audit_store.record(entry)
        except Exception as e:
            logger.warning(
                "sync_audit_failed",
                transaction_reference=transaction_reference,
                error=str(e),
            )

    async def _maybe_reorder(
        self, request: DeductInventoryRequest, result: DeductionResult
    ) -> int | None:
        """Raise a replenishment request if the sale pushed an item to its threshold."""
        if not self._auto_reorder:
            return None

        try:
            inventory_store = await self._get_inventory_store()
            items = await inventory_store.get_items(
                [m.inventory_item_id for m in result.movements]
            )
            low = [
                m
                for m in result.movements
                if m.inventory_item_id in items
                and m.new_quantity <= items[m.inventory_item_id].minimum_threshold
            ]
            if not low:
                return None

            store_id = items[low[0].inventory_item_id].store_id
            reorder = await self._get_reorder()
            outcome = await reorder.execute(store_id)
            return outcome.request.id if outcome.request else None
        except Exception as e:
            logger.warning(
                "auto_reorder_failed",
                transaction_reference=request.transaction_reference,
                error=str(e),
            )
            return None

    def to_response(self, result: DeductionResult) -> DeductionResponse:
        return DeductionResponse(
            success=result.success,
            transaction_reference=result.transaction_reference,
            line_reference=result.line_reference,
            error_code=result.error_code,
            message=result.message,
            direct_product=result.direct_product,
            already_processed=result.already_processed,
            items_processed=result.items_processed,
            shortages=[shortage_to_response(s) for s in result.shortages],
            movements=[movement_to_response(m) for m in result.movements],
            reorder_request_id=result.reorder_request_id,
        )
