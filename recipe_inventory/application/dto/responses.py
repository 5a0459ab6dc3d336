"""Response DTOs for API endpoints.

Pydantic v2 models for API response serialization.
These are the ONLY contracts between use cases and API layer.
"""

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field

# --- Health / errors ---


class LedgerCheckResponse(BaseModel):
    """Result of one stock ledger consistency rule."""

    name: str
    passed: bool
    violations: int = 0
    examples: list[int] = Field(default_factory=list)


class DatabaseHealthResponse(BaseModel):
    available: bool
    latency_ms: float | None = None
    schema_version: str | None = None
    error: str | None = None
    checks: list[LedgerCheckResponse] = Field(default_factory=list)


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str = "1.0.0"
    uptime_seconds: float
    database: DatabaseHealthResponse | None = None


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. INSUFFICIENT_STOCK)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: str | None = Field(default=None, description="Additional details")
    path: str | None = Field(default=None, description="Request path")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))


# --- Inventory ---


class InventoryItemResponse(BaseModel):
    """Inventory item response DTO."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    store_id: str
    name: str
    unit: str
    on_hand_quantity: float
    minimum_threshold: float
    maximum_capacity: float | None = None
    unit_cost: float
    is_active: bool
    recipe_compatible: bool
    is_low_stock: bool = False
    created_at: datetime
    updated_at: datetime


class StockMovementResponse(BaseModel):
    """Stock movement response DTO."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    inventory_item_id: int
    movement_type: str
    quantity_delta: float
    previous_quantity: float
    new_quantity: float
    reference: str | None = None
    line_reference: str | None = None
    notes: str | None = None
    created_at: datetime


class StockChangeResponse(BaseModel):
    """Response for receipt and adjustment operations."""

    inventory_item: InventoryItemResponse
    movement: StockMovementResponse


class InventoryStatusResponse(BaseModel):
    """Store inventory with low-stock flags."""

    store_id: str
    items: list[InventoryItemResponse]
    total: int
    low_stock_count: int


class MovementListResponse(BaseModel):
    movements: list[StockMovementResponse]
    total: int


# --- Templates ---


class TemplateIngredientResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int | None = None
    position: int
    ingredient_name: str
    quantity: float
    unit: str
    cost_per_unit: float
    ingredient_category: str | None = None


class TemplateResponse(BaseModel):
    """Recipe template response DTO."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    category_name: str | None = None
    description: str | None = None
    instructions: str | None = None
    yield_quantity: float
    serving_size: float
    suggested_price: float | None = None
    total_cost: float
    version: int
    is_active: bool
    is_complete: bool
    incomplete_reason: str | None = None
    ingredients: list[TemplateIngredientResponse] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class TemplateListResponse(BaseModel):
    templates: list[TemplateResponse]
    total: int


class CreateTemplateResponse(BaseModel):
    """Outcome of creating one template; partial means some ingredients failed."""

    outcome: str  # "created" | "partial"
    template: TemplateResponse
    warnings: list[str] = Field(default_factory=list)


class ImportOutcomeResponse(BaseModel):
    recipe_name: str
    outcome: str  # "created" | "partial" | "updated" | "skipped" | "failed"
    template_id: int | None = None
    message: str | None = None


class ImportTemplatesResponse(BaseModel):
    """Per-template outcomes of a bulk import."""

    total: int
    created: int
    updated: int
    partial: int
    skipped: int
    failed: int
    results: list[ImportOutcomeResponse]


# --- Deployment ---


class StoreDeploymentResponse(BaseModel):
    store_id: str
    outcome: str  # "deployed" | "skipped" | "failed"
    recipe_id: int | None = None
    catalog_entry_id: int | None = None
    unmapped_ingredients: list[str] = Field(default_factory=list)
    message: str | None = None


class DeploymentReportResponse(BaseModel):
    """Independent per-store outcomes of a deployment fan-out."""

    template_id: int
    deployed: int
    skipped: int
    failed: int
    results: list[StoreDeploymentResponse]


class CatalogEntryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    store_id: str
    recipe_id: int | None = None
    category_id: int | None = None
    name: str
    price: float
    is_available: bool


# --- Availability ---


class IngredientAvailabilityResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    ingredient_name: str
    inventory_item_id: int | None = None
    inventory_item_name: str | None = None
    required: float
    on_hand: float
    unit: str | None = None
    available: bool
    producible: int


class AvailabilityResponse(BaseModel):
    """Producibility status of one product."""

    model_config = ConfigDict(from_attributes=True)

    name: str
    recipe_id: int | None = None
    catalog_entry_id: int | None = None
    status: str
    available_ingredients: int
    total_ingredients: int
    missing_ingredients: list[str]
    max_production: int
    ingredients: list[IngredientAvailabilityResponse] = Field(default_factory=list)


class StoreAvailabilityResponse(BaseModel):
    store_id: str
    products: list[AvailabilityResponse]
    status_counts: dict[str, int]


# --- Mappings ---


class IngredientMappingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int | None = None
    store_id: str
    ingredient_name: str
    inventory_item_id: int | None = None
    confidence: str
    conversion_factor: float | None = None
    updated_at: datetime


class MappingListResponse(BaseModel):
    store_id: str
    mappings: list[IngredientMappingResponse]
    unresolved: int


class SetMappingResponse(BaseModel):
    mapping: IngredientMappingResponse
    relinked_ingredients: int


class AutoMapResponse(BaseModel):
    store_id: str
    examined: int
    mapped: int
    still_unmapped: list[str]


# --- Sales ---


class ShortageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    ingredient: str
    inventory_item_id: int | None = None
    required: float
    available: float
    unit: str | None = None


class DeductionResponse(BaseModel):
    """Inventory effect of one sold line; success=False means no stock changed."""

    success: bool
    transaction_reference: str
    line_reference: str | None = None
    error_code: str | None = None
    message: str | None = None
    direct_product: bool = False
    already_processed: bool = False
    items_processed: int = 0
    shortages: list[ShortageResponse] = Field(default_factory=list)
    movements: list[StockMovementResponse] = Field(default_factory=list)
    reorder_request_id: int | None = None


class ReversalResponse(BaseModel):
    transaction_reference: str
    reversed: int
    movements: list[StockMovementResponse]


class SyncAuditEntryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    transaction_reference: str
    line_reference: str | None = None
    status: str
    items_processed: int
    error_details: str | None = None
    duration_ms: int
    created_at: datetime


class SyncAuditListResponse(BaseModel):
    entries: list[SyncAuditEntryResponse]
    total: int


# --- Replenishment ---


class ReplenishmentItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    inventory_item_id: int
    item_name: str
    unit: str | None = None
    current_quantity: float
    minimum_threshold: float
    requested_quantity: float


class ReplenishmentRequestResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    store_id: str
    status: str
    notes: str | None = None
    items: list[ReplenishmentItemResponse]
    created_at: datetime


class ReorderResponse(BaseModel):
    """Result of a reorder check."""

    store_id: str
    raised: bool
    request_id: int | None = None
    items: list[ReplenishmentItemResponse] = Field(default_factory=list)
    already_pending: list[int] = Field(default_factory=list)


class ReplenishmentListResponse(BaseModel):
    requests: list[ReplenishmentRequestResponse]
    total: int
