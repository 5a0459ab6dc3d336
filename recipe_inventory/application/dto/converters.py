"""Entity -> response DTO conversion shared by use cases and routes."""

from recipe_inventory.application.dto.responses import (
    AvailabilityResponse,
    CatalogEntryResponse,
    IngredientAvailabilityResponse,
    IngredientMappingResponse,
    InventoryItemResponse,
    ReplenishmentItemResponse,
    ReplenishmentRequestResponse,
    ShortageResponse,
    StockMovementResponse,
    SyncAuditEntryResponse,
    TemplateIngredientResponse,
    TemplateResponse,
)
from recipe_inventory.core.entities import (
    AvailabilityReport,
    CatalogEntry,
    IngredientMapping,
    InventoryItem,
    RecipeTemplate,
    ReplenishmentItem,
    ReplenishmentRequest,
    Shortage,
    StockMovement,
    SyncAuditEntry,
)


def item_to_response(item: InventoryItem) -> InventoryItemResponse:
    return InventoryItemResponse(
        id=item.id,  # type: ignore[arg-type]
        store_id=item.store_id,
        name=item.name,
        unit=item.unit,
        on_hand_quantity=item.on_hand_quantity,
        minimum_threshold=item.minimum_threshold,
        maximum_capacity=item.maximum_capacity,
        unit_cost=item.unit_cost,
        is_active=item.is_active,
        recipe_compatible=bool(item.recipe_compatible),
        is_low_stock=item.is_low_stock,
        created_at=item.created_at,
        updated_at=item.updated_at,
    )


def movement_to_response(movement: StockMovement) -> StockMovementResponse:
    return StockMovementResponse(
        id=movement.id,  # type: ignore[arg-type]
        inventory_item_id=movement.inventory_item_id,
        movement_type=movement.movement_type.value,
        quantity_delta=movement.quantity_delta,
        previous_quantity=movement.previous_quantity,
        new_quantity=movement.new_quantity,
        reference=movement.reference,
        line_reference=movement.line_reference,
        notes=movement.notes,
        created_at=movement.created_at,
    )


def template_to_response(template: RecipeTemplate) -> TemplateResponse:
    return TemplateResponse(
        id=template.id,  # type: ignore[arg-type]
        name=template.name,
        category_name=template.category_name,
        description=template.description,
        instructions=template.instructions,
        yield_quantity=template.yield_quantity,
        serving_size=template.serving_size,
        suggested_price=template.suggested_price,
        total_cost=template.total_cost,
        version=template.version,
        is_active=template.is_active,
        is_complete=template.is_complete,
        incomplete_reason=template.incomplete_reason,
        ingredients=[
            TemplateIngredientResponse.model_validate(ing) for ing in template.ingredients
        ],
        created_at=template.created_at,
        updated_at=template.updated_at,
    )


def catalog_entry_to_response(entry: CatalogEntry) -> CatalogEntryResponse:
    return CatalogEntryResponse.model_validate(entry)


def availability_to_response(report: AvailabilityReport) -> AvailabilityResponse:
    return AvailabilityResponse(
        name=report.name,
        recipe_id=report.recipe_id,
        catalog_entry_id=report.catalog_entry_id,
        status=report.status.value,
        available_ingredients=report.available_ingredients,
        total_ingredients=report.total_ingredients,
        missing_ingredients=list(report.missing_ingredients),
        max_production=report.max_production,
        ingredients=[
            IngredientAvailabilityResponse.model_validate(c) for c in report.ingredients
        ],
    )


def mapping_to_response(mapping: IngredientMapping) -> IngredientMappingResponse:
    return IngredientMappingResponse(
        id=mapping.id,
        store_id=mapping.store_id,
        ingredient_name=mapping.ingredient_name,
        inventory_item_id=mapping.inventory_item_id,
        confidence=mapping.confidence.value,
        conversion_factor=mapping.conversion_factor,
        updated_at=mapping.updated_at,
    )


def shortage_to_response(shortage: Shortage) -> ShortageResponse:
    return ShortageResponse.model_validate(shortage)


def audit_entry_to_response(entry: SyncAuditEntry) -> SyncAuditEntryResponse:
    return SyncAuditEntryResponse(
        id=entry.id,  # type: ignore[arg-type]
        transaction_reference=entry.transaction_reference,
        line_reference=entry.line_reference,
        status=entry.status.value,
        items_processed=entry.items_processed,
        error_details=entry.error_details,
        duration_ms=entry.duration_ms,
        created_at=entry.created_at,
    )


def replenishment_item_to_response(item: ReplenishmentItem) -> ReplenishmentItemResponse:
    return ReplenishmentItemResponse.model_validate(item)


def replenishment_to_response(request: ReplenishmentRequest) -> ReplenishmentRequestResponse:
    return ReplenishmentRequestResponse(
        id=request.id,  # type: ignore[arg-type]
        store_id=request.store_id,
        status=request.status.value,
        notes=request.notes,
        items=[replenishment_item_to_response(i) for i in request.items],
        created_at=request.created_at,
    )
