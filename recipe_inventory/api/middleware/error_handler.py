"""
Error handling middleware.

Standardizes all API error responses to include:
- error_code: machine-readable identifier
- message: human-readable description
- hint: suggested recovery action
"""

import traceback
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from recipe_inventory.application.dto.responses import ErrorResponse
from recipe_inventory.config import get_logger
from recipe_inventory.core.exceptions import (
    CatalogEntryNotFoundError,
    ConfigurationError,
    DeductionError,
    DeploymentError,
    InsufficientStockError,
    InventoryItemNotFoundError,
    NegativeStockError,
    ProductNotFoundError,
    RecipeInventoryError,
    RecipeNotFoundError,
    RecipeSetupError,
    StorageError,
    TemplateInactiveError,
    TemplateNotFoundError,
    TemplateValidationError,
    ValidationError,
)

logger = get_logger(__name__)


# Map exceptions to HTTP status codes; first isinstance match wins
EXCEPTION_STATUS_MAP: dict[type[Exception], int] = {
    InventoryItemNotFoundError: status.HTTP_404_NOT_FOUND,
    TemplateNotFoundError: status.HTTP_404_NOT_FOUND,
    RecipeNotFoundError: status.HTTP_404_NOT_FOUND,
    CatalogEntryNotFoundError: status.HTTP_404_NOT_FOUND,
    ProductNotFoundError: status.HTTP_404_NOT_FOUND,
    TemplateValidationError: 422,
    NegativeStockError: status.HTTP_409_CONFLICT,
    ValidationError: status.HTTP_400_BAD_REQUEST,
    TemplateInactiveError: status.HTTP_409_CONFLICT,
    InsufficientStockError: status.HTTP_409_CONFLICT,
    RecipeSetupError: 422,
    DeploymentError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    DeductionError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    StorageError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ConfigurationError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ValueError: status.HTTP_400_BAD_REQUEST,
    KeyError: status.HTTP_404_NOT_FOUND,
}

# Hint messages per error code / exception type
HINT_MAP: dict[str, str] = {
    "INVENTORY_ITEM_NOT_FOUND": "Check the item ID and try GET /api/inventory/items?store_id=... to list items.",
    "TEMPLATE_NOT_FOUND": "Check the template ID and try GET /api/templates to list templates.",
    "RECIPE_NOT_FOUND": "Deploy the template to the store first.",
    "CATALOG_ENTRY_NOT_FOUND": "Check the catalog entry ID in GET /api/stores/{store_id}/availability.",
    "PRODUCT_NOT_FOUND": "The sold product is not in this store's catalog.",
    "TEMPLATE_INVALID": "Each template needs a name, a positive yield and at least one ingredient with quantity and unit.",
    "TEMPLATE_INACTIVE": "Reactivate or replace the template before deploying it.",
    "UNIT_MISMATCH": "Pass an explicit conversion_factor for units of different families.",
    "NEGATIVE_STOCK": "Adjustments cannot take stock below zero. Check the current quantity.",
    "INSUFFICIENT_STOCK": "Receive stock for the listed ingredients, then retry the sale.",
    "RECIPE_SETUP_INCOMPLETE": "Add ingredients to the recipe template and redeploy.",
    "INGREDIENT_UNMAPPED": "Link the listed ingredients with PUT /api/stores/{store_id}/mappings.",
    "DEDUCTION_COMMIT_FAILED": "No stock was changed. Retry with the same transaction reference.",
    "VALIDATION_ERROR": "Check the request body against the API schema.",
    "DATABASE_ERROR": "A database operation failed. Check server logs.",
    "ValueError": "A parameter value is invalid. Check the request.",
    "KeyError": "The requested key was not found.",
}

# Default hints by HTTP status code
STATUS_HINTS: dict[int, str] = {
    400: "Check the request parameters and body.",
    404: "The requested resource was not found. Verify the ID.",
    409: "The request conflicts with current inventory state.",
    422: "The request could not be processed. Check the input format.",
    500: "An internal error occurred. Check server logs.",
    503: "The service is temporarily unavailable. Retry later.",
}


def _get_hint(error_code: str, status_code: int) -> str:
    """Resolve hint from error code, falling back to status-based hint."""
    return HINT_MAP.get(error_code) or STATUS_HINTS.get(status_code, "")


def status_for(exc: Exception) -> int:
    """HTTP status for an exception, 500 when unmapped."""
    for exc_type, code in EXCEPTION_STATUS_MAP.items():
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _error_response(request: Request, exc: Exception) -> JSONResponse:
    status_code = status_for(exc)

    # Prefer RecipeInventoryError.code, fall back to class name
    if isinstance(exc, RecipeInventoryError):
        error_code = exc.code
        message = exc.message
    else:
        error_code = exc.__class__.__name__
        message = str(exc)

    request_id = getattr(request.state, "request_id", None)

    log = logger.error if status_code >= 500 else logger.warning
    log(
        "request_exception",
        request_id=request_id,
        path=request.url.path,
        error_type=error_code,
        error=message,
        traceback=traceback.format_exc() if status_code >= 500 else None,
    )

    error_response = ErrorResponse(
        error_code=error_code,
        message=message,
        hint=_get_hint(error_code, status_code),
        path=request.url.path,
    )

    return JSONResponse(
        status_code=status_code,
        content=error_response.model_dump(mode="json"),
    )


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Global error handling middleware.

    Converts exceptions that escape the route handlers to standardized
    JSON error responses.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        """Handle request with error catching."""
        try:
            return await call_next(request)

        except Exception as e:
            return _error_response(request, e)


def setup_exception_handlers(app: FastAPI) -> None:
    """Set up FastAPI exception handlers."""
    from fastapi.exceptions import RequestValidationError
    from starlette.exceptions import HTTPException

    @app.exception_handler(RecipeInventoryError)
    async def domain_exception_handler(
        request: Request,
        exc: RecipeInventoryError,
    ) -> JSONResponse:
        """Handle domain errors raised by use cases."""
        return _error_response(request, exc)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Handle Pydantic validation errors."""
        errors = []
        for error in exc.errors():
            loc = " -> ".join(str(part) for part in error["loc"])
            errors.append(f"{loc}: {error['msg']}")

        return JSONResponse(
            status_code=422,
            content=ErrorResponse(
                error_code="VALIDATION_ERROR",
                message="Request validation failed",
                hint="Check the request body fields and types.",
                detail="; ".join(errors),
                path=request.url.path,
            ).model_dump(mode="json"),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(
        request: Request,
        exc: HTTPException,
    ) -> JSONResponse:
        """Handle HTTP exceptions with standardized format."""
        error_code = _infer_error_code(exc.status_code, exc.detail or "")
        hint = _get_hint(error_code, exc.status_code)

        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                error_code=error_code,
                message=exc.detail or "An error occurred",
                hint=hint,
                path=request.url.path,
            ).model_dump(mode="json"),
        )


def _infer_error_code(status_code: int, detail: str) -> str:
    """Infer a machine-readable error code from HTTPException detail."""
    detail_lower = detail.lower()

    if status_code == 404:
        if "inventory item" in detail_lower:
            return "INVENTORY_ITEM_NOT_FOUND"
        if "template" in detail_lower:
            return "TEMPLATE_NOT_FOUND"
        if "recipe" in detail_lower:
            return "RECIPE_NOT_FOUND"
        if "catalog entry" in detail_lower:
            return "CATALOG_ENTRY_NOT_FOUND"
        return "NOT_FOUND"

    if status_code == 400:
        return "BAD_REQUEST"

    if status_code == 422:
        return "UNPROCESSABLE_ENTITY"

    return "HTTP_ERROR"
