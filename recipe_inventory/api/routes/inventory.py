"""Inventory management endpoints."""

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status

from recipe_inventory.api.dependencies import (
    get_adjust_stock_use_case,
    get_create_item_use_case,
    get_inv_item_store,
    get_inventory_status_use_case,
    get_receive_stock_use_case,
)
from recipe_inventory.application.dto.converters import item_to_response, movement_to_response
from recipe_inventory.application.dto.requests import (
    AdjustStockRequest,
    CreateInventoryItemRequest,
    ReceiveStockRequest,
)
from recipe_inventory.application.dto.responses import (
    ErrorResponse,
    InventoryItemResponse,
    InventoryStatusResponse,
    MovementListResponse,
    StockChangeResponse,
)
from recipe_inventory.application.use_cases.manage_inventory import (
    CreateInventoryItemUseCase,
    GetInventoryStatusUseCase,
)
from recipe_inventory.application.use_cases.receive_stock import (
    AdjustStockUseCase,
    ReceiveStockUseCase,
)
from recipe_inventory.infrastructure.storage.sqlite import SQLiteInventoryStore

router = APIRouter(prefix="/api/inventory", tags=["inventory"])


@router.post(
    "/items",
    response_model=InventoryItemResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_item(
    request: CreateInventoryItemRequest,
    use_case: CreateInventoryItemUseCase = Depends(get_create_item_use_case),
) -> InventoryItemResponse:
    """Register a stock item for a store."""
    item = await use_case.execute(request)
    return use_case.to_response(item)


@router.get("/items", response_model=list[InventoryItemResponse])
async def list_items(
    store_id: str,
    active_only: bool = False,
    limit: int = 500,
    offset: int = 0,
    store: SQLiteInventoryStore = Depends(get_inv_item_store),
) -> list[InventoryItemResponse]:
    items = await store.list_items(store_id, active_only=active_only, limit=limit, offset=offset)
    return [item_to_response(i) for i in items]


@router.get(
    "/items/{item_id}",
    response_model=InventoryItemResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_item(
    item_id: int,
    store: SQLiteInventoryStore = Depends(get_inv_item_store),
) -> InventoryItemResponse:
    item = await store.get_item(item_id)
    if item is None:
        raise HTTPException(status_code=404, detail=f"Inventory item not found: {item_id}")
    return item_to_response(item)


@router.post(
    "/receive",
    response_model=StockChangeResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def receive_stock(
    request: ReceiveStockRequest,
    use_case: ReceiveStockUseCase = Depends(get_receive_stock_use_case),
) -> StockChangeResponse:
    """Receive stock (receipt movement)."""
    result = await use_case.execute(request)
    return use_case.to_response(result)


@router.post(
    "/adjust",
    response_model=StockChangeResponse,
    responses={
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def adjust_stock(
    request: AdjustStockRequest,
    use_case: AdjustStockUseCase = Depends(get_adjust_stock_use_case),
) -> StockChangeResponse:
    """Correct stock (adjustment movement); never below zero."""
    result = await use_case.execute(request)
    return use_case.to_response(result)


@router.get("/status", response_model=InventoryStatusResponse)
async def get_inventory_status(
    store_id: str,
    low_stock_only: bool = False,
    use_case: GetInventoryStatusUseCase = Depends(get_inventory_status_use_case),
) -> InventoryStatusResponse:
    """Get current stock levels for a store, flagged against thresholds."""
    result = await use_case.execute(store_id, low_stock_only=low_stock_only)
    return use_case.to_response(result)


@router.get("/movements", response_model=MovementListResponse)
async def list_movements(
    transaction_reference: str | None = None,
    inventory_item_id: int | None = None,
    start: datetime | None = None,
    end: datetime | None = None,
    limit: int = 500,
    store: SQLiteInventoryStore = Depends(get_inv_item_store),
) -> MovementListResponse:
    """Query the movement ledger by transaction, item, or date range."""
    movements = await store.list_movements(
        transaction_reference=transaction_reference,
        inventory_item_id=inventory_item_id,
        start=start,
        end=end,
        limit=limit,
    )
    return MovementListResponse(
        movements=[movement_to_response(m) for m in movements],
        total=len(movements),
    )
