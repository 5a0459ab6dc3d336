"""Data Transfer Objects for API layer.

Request DTOs: Validate and parse incoming API requests.
Response DTOs: Structure and serialize API responses.
"""

from recipe_inventory.application.dto.requests import (
    AdjustStockRequest,
    CreateDirectProductRequest,
    CreateInventoryItemRequest,
    CreateTemplateRequest,
    DeductInventoryRequest,
    DeployTemplateRequest,
    ImportTemplatesRequest,
    ReceiveStockRequest,
    ReverseDeductionRequest,
    SetMappingRequest,
    TemplateIngredientRequest,
    TemplateRowRequest,
    UpdateTemplateRequest,
)
from recipe_inventory.application.dto.responses import (
    AutoMapResponse,
    AvailabilityResponse,
    CatalogEntryResponse,
    CreateTemplateResponse,
    DeductionResponse,
    DeploymentReportResponse,
    ErrorResponse,
    HealthResponse,
    ImportTemplatesResponse,
    InventoryItemResponse,
    InventoryStatusResponse,
    MappingListResponse,
    MovementListResponse,
    DatabaseHealthResponse,
    LedgerCheckResponse,
    ReorderResponse,
    ReplenishmentListResponse,
    ReversalResponse,
    SetMappingResponse,
    StockChangeResponse,
    StockMovementResponse,
    StoreAvailabilityResponse,
    SyncAuditListResponse,
    TemplateListResponse,
    TemplateResponse,
)

__all__ = [
    # Requests
    "AdjustStockRequest",
    "CreateDirectProductRequest",
    "CreateInventoryItemRequest",
    "CreateTemplateRequest",
    "DeductInventoryRequest",
    "DeployTemplateRequest",
    "ImportTemplatesRequest",
    "ReceiveStockRequest",
    "ReverseDeductionRequest",
    "SetMappingRequest",
    "TemplateIngredientRequest",
    "TemplateRowRequest",
    "UpdateTemplateRequest",
    # Responses
    "AutoMapResponse",
    "AvailabilityResponse",
    "CatalogEntryResponse",
    "CreateTemplateResponse",
    "DeductionResponse",
    "DeploymentReportResponse",
    "ErrorResponse",
    "HealthResponse",
    "ImportTemplatesResponse",
    "InventoryItemResponse",
    "InventoryStatusResponse",
    "MappingListResponse",
    "MovementListResponse",
    "DatabaseHealthResponse",
    "LedgerCheckResponse",
    "ReorderResponse",
    "ReplenishmentListResponse",
    "ReversalResponse",
    "SetMappingResponse",
    "StockChangeResponse",
    "StockMovementResponse",
    "StoreAvailabilityResponse",
    "SyncAuditListResponse",
    "TemplateListResponse",
    "TemplateResponse",
]
