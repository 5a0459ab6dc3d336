"""Sale-time endpoints: ingredient deduction, reversal, sync audit."""

from fastapi import APIRouter, Depends, Response, status

from recipe_inventory.api.dependencies import (
    get_audit_store,
    get_deduct_inventory_use_case,
    get_reverse_deduction_use_case,
)
from recipe_inventory.application.dto.converters import audit_entry_to_response
from recipe_inventory.application.dto.requests import (
    DeductInventoryRequest,
    ReverseDeductionRequest,
)
from recipe_inventory.application.dto.responses import (
    DeductionResponse,
    ReversalResponse,
    SyncAuditListResponse,
)
from recipe_inventory.application.use_cases.deduct_inventory import DeductInventoryUseCase
from recipe_inventory.application.use_cases.reverse_deduction import ReverseDeductionUseCase
from recipe_inventory.infrastructure.storage.sqlite import SQLiteSyncAuditStore

router = APIRouter(prefix="/api/sales", tags=["sales"])

# Status codes for unsuccessful deductions, by error code
DEDUCTION_STATUS_MAP: dict[str, int] = {
    "PRODUCT_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "RECIPE_SETUP_INCOMPLETE": 422,
    "INGREDIENT_UNMAPPED": 422,
    "INSUFFICIENT_STOCK": status.HTTP_409_CONFLICT,
    "DEDUCTION_COMMIT_FAILED": status.HTTP_500_INTERNAL_SERVER_ERROR,
}


@router.post(
    "/deduct",
    response_model=DeductionResponse,
    responses={
        404: {"model": DeductionResponse},
        409: {"model": DeductionResponse},
        422: {"model": DeductionResponse},
    },
)
async def deduct_inventory(
    request: DeductInventoryRequest,
    response: Response,
    use_case: DeductInventoryUseCase = Depends(get_deduct_inventory_use_case),
) -> DeductionResponse:
    """
    Deduct ingredient stock for one sold line.

    All ingredients are deducted or none are. A failed deduction still
    returns a DeductionResponse body with success=false, the error code and
    every short ingredient; the caller decides whether the sale completes.
    """
    result = await use_case.execute(request)
    if not result.success:
        response.status_code = DEDUCTION_STATUS_MAP.get(
            result.error_code or "", status.HTTP_400_BAD_REQUEST
        )
    return use_case.to_response(result)


@router.post("/reverse", response_model=ReversalResponse)
async def reverse_deduction(
    request: ReverseDeductionRequest,
    use_case: ReverseDeductionUseCase = Depends(get_reverse_deduction_use_case),
) -> ReversalResponse:
    """Restore stock for a cancelled or refunded transaction; safe to repeat."""
    result = await use_case.execute(request)
    return use_case.to_response(result)


@router.get("/audit", response_model=SyncAuditListResponse)
async def list_audit_entries(
    transaction_reference: str | None = None,
    limit: int = 100,
    store: SQLiteSyncAuditStore = Depends(get_audit_store),
) -> SyncAuditListResponse:
    """Deduction sync results, newest first."""
    entries = await store.list_entries(transaction_reference=transaction_reference, limit=limit)
    return SyncAuditListResponse(
        entries=[audit_entry_to_response(e) for e in entries],
        total=len(entries),
    )
