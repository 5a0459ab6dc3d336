"""
Application layer - Use cases, DTOs, and service factories.

This layer orchestrates business logic by:
1. Defining request/response DTOs for API contracts
2. Implementing use cases that coordinate core services and stores
3. Providing factory functions for dependency injection

Use cases are the only entry point for API handlers.
"""

from recipe_inventory.application.dto.requests import (
    CreateTemplateRequest,
    DeductInventoryRequest,
    ImportTemplatesRequest,
    ReceiveStockRequest,
)
from recipe_inventory.application.dto.responses import (
    DeductionResponse,
    ErrorResponse,
    HealthResponse,
)
from recipe_inventory.application.services import (
    get_availability_analyzer,
    get_ingredient_matcher,
    reset_services,
)
from recipe_inventory.application.use_cases import (
    AnalyzeAvailabilityUseCase,
    DeductInventoryUseCase,
    DeployTemplateUseCase,
    ImportTemplatesUseCase,
)

__all__ = [
    # Request DTOs
    "CreateTemplateRequest",
    "ImportTemplatesRequest",
    "ReceiveStockRequest",
    "DeductInventoryRequest",
    # Response DTOs
    "DeductionResponse",
    "HealthResponse",
    "ErrorResponse",
    # Use Cases
    "ImportTemplatesUseCase",
    "DeployTemplateUseCase",
    "AnalyzeAvailabilityUseCase",
    "DeductInventoryUseCase",
    # Service factories
    "get_ingredient_matcher",
    "get_availability_analyzer",
    "reset_services",
]
