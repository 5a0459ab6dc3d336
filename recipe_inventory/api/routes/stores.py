"""Store-scoped endpoints: availability, ingredient mappings, products, reorders."""

from fastapi import APIRouter, Depends, Query, status

from recipe_inventory.api.dependencies import (
    get_auto_map_use_case,
    get_availability_use_case,
    get_check_reorder_use_case,
    get_create_direct_product_use_case,
    get_list_mappings_use_case,
    get_reorder_store,
    get_set_mapping_use_case,
)
from recipe_inventory.application.dto.converters import (
    availability_to_response,
    replenishment_to_response,
)
from recipe_inventory.application.dto.requests import (
    CreateDirectProductRequest,
    SetMappingRequest,
)
from recipe_inventory.application.dto.responses import (
    AutoMapResponse,
    AvailabilityResponse,
    CatalogEntryResponse,
    ErrorResponse,
    MappingListResponse,
    ReorderResponse,
    ReplenishmentListResponse,
    SetMappingResponse,
    StoreAvailabilityResponse,
)
from recipe_inventory.application.use_cases.analyze_availability import (
    AnalyzeAvailabilityUseCase,
)
from recipe_inventory.application.use_cases.check_reorder import CheckReorderUseCase
from recipe_inventory.application.use_cases.create_direct_product import (
    CreateDirectProductUseCase,
)
from recipe_inventory.application.use_cases.map_ingredients import (
    AutoMapIngredientsUseCase,
    ListMappingsUseCase,
    SetIngredientMappingUseCase,
)
from recipe_inventory.core.entities.audit import ReplenishmentStatus
from recipe_inventory.infrastructure.storage.sqlite import SQLiteReplenishmentStore

router = APIRouter(prefix="/api/stores/{store_id}", tags=["stores"])


@router.get("/availability", response_model=StoreAvailabilityResponse)
async def store_availability(
    store_id: str,
    use_case: AnalyzeAvailabilityUseCase = Depends(get_availability_use_case),
) -> StoreAvailabilityResponse:
    """Producibility of every catalog entry in the store."""
    result = await use_case.execute(store_id)
    return use_case.to_response(result)


@router.get(
    "/recipes/{recipe_id}/availability",
    response_model=AvailabilityResponse,
    responses={404: {"model": ErrorResponse}},
)
async def recipe_availability(
    store_id: str,
    recipe_id: int,
    use_case: AnalyzeAvailabilityUseCase = Depends(get_availability_use_case),
) -> AvailabilityResponse:
    report = await use_case.analyze_recipe(recipe_id, store_id=store_id)
    return availability_to_response(report)


@router.post(
    "/products",
    response_model=CatalogEntryResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_direct_product(
    store_id: str,
    request: CreateDirectProductRequest,
    use_case: CreateDirectProductUseCase = Depends(get_create_direct_product_use_case),
) -> CatalogEntryResponse:
    """Add a product sold as-is, without a recipe."""
    entry = await use_case.execute(store_id, request)
    return use_case.to_response(entry)


@router.get("/mappings", response_model=MappingListResponse)
async def list_mappings(
    store_id: str,
    use_case: ListMappingsUseCase = Depends(get_list_mappings_use_case),
) -> MappingListResponse:
    mappings = await use_case.execute(store_id)
    return use_case.to_response(store_id, mappings)


@router.put(
    "/mappings",
    response_model=SetMappingResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def set_mapping(
    store_id: str,
    request: SetMappingRequest,
    use_case: SetIngredientMappingUseCase = Depends(get_set_mapping_use_case),
) -> SetMappingResponse:
    """Manually link an ingredient name to an inventory item."""
    result = await use_case.execute(store_id, request)
    return use_case.to_response(result)


@router.post("/mappings/auto", response_model=AutoMapResponse)
async def auto_map(
    store_id: str,
    use_case: AutoMapIngredientsUseCase = Depends(get_auto_map_use_case),
) -> AutoMapResponse:
    """Re-run the matcher for unresolved recipe ingredients."""
    result = await use_case.execute(store_id)
    return use_case.to_response(result)


@router.post("/reorder", response_model=ReorderResponse)
async def check_reorder(
    store_id: str,
    use_case: CheckReorderUseCase = Depends(get_check_reorder_use_case),
) -> ReorderResponse:
    """Raise one replenishment request for every low-stock item."""
    result = await use_case.execute(store_id)
    return use_case.to_response(result)


@router.get("/reorders", response_model=ReplenishmentListResponse)
async def list_reorders(
    store_id: str,
    status_filter: ReplenishmentStatus | None = Query(default=None, alias="status"),
    store: SQLiteReplenishmentStore = Depends(get_reorder_store),
) -> ReplenishmentListResponse:
    requests = await store.list_requests(store_id, status=status_filter)
    return ReplenishmentListResponse(
        requests=[replenishment_to_response(r) for r in requests],
        total=len(requests),
    )
