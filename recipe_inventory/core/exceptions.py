"""
Domain exceptions for the recipe inventory engine.

Provides specific exception types for different error scenarios.
"""

from typing import Any


class RecipeInventoryError(Exception):
    """Base exception for all recipe inventory errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Storage Exceptions
class StorageError(RecipeInventoryError):
    """Base exception for storage operations."""

    pass


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


class InventoryItemNotFoundError(StorageError):
    """Inventory item not found in storage."""

    def __init__(self, item_id: int):
        super().__init__(
            f"Inventory item not found: {item_id}",
            code="INVENTORY_ITEM_NOT_FOUND",
            details={"item_id": item_id},
        )


class TemplateNotFoundError(StorageError):
    """Recipe template not found in storage."""

    def __init__(self, template_id: int):
        super().__init__(
            f"Recipe template not found: {template_id}",
            code="TEMPLATE_NOT_FOUND",
            details={"template_id": template_id},
        )


class RecipeNotFoundError(StorageError):
    """Store recipe not found in storage."""

    def __init__(self, recipe_id: int):
        super().__init__(
            f"Recipe not found: {recipe_id}",
            code="RECIPE_NOT_FOUND",
            details={"recipe_id": recipe_id},
        )


class CatalogEntryNotFoundError(StorageError):
    """Catalog entry not found in storage."""

    def __init__(self, entry_id: int):
        super().__init__(
            f"Catalog entry not found: {entry_id}",
            code="CATALOG_ENTRY_NOT_FOUND",
            details={"entry_id": entry_id},
        )


# Validation Exceptions
class ValidationError(RecipeInventoryError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value else None,
            },
        )


class TemplateValidationError(ValidationError):
    """Recipe template definition is invalid."""

    def __init__(self, name: str, problems: list[str]):
        super().__init__(
            field="definition",
            message="; ".join(problems),
            value=name,
        )
        self.code = "TEMPLATE_INVALID"
        self.problems = problems
        self.details.update({"name": name, "problems": problems})


class UnitMismatchError(ValidationError):
    """Units cannot be converted into each other."""

    def __init__(self, from_unit: str, to_unit: str):
        super().__init__(
            field="unit",
            message=f"Cannot convert '{from_unit}' to '{to_unit}'",
            value=from_unit,
        )
        self.code = "UNIT_MISMATCH"
        self.details.update({"from_unit": from_unit, "to_unit": to_unit})


class NegativeStockError(ValidationError):
    """A stock change would drive on-hand quantity below zero."""

    def __init__(self, item_id: int, on_hand: float, delta: float):
        super().__init__(
            field="quantity",
            message=f"Adjustment of {delta} would leave item {item_id} below zero (on hand {on_hand})",
            value=delta,
        )
        self.code = "NEGATIVE_STOCK"
        self.details.update({"item_id": item_id, "on_hand": on_hand, "delta": delta})


# Deployment Exceptions
class DeploymentError(RecipeInventoryError):
    """Base exception for template deployment."""

    pass


class TemplateInactiveError(DeploymentError):
    """Deactivated templates cannot be deployed."""

    def __init__(self, template_id: int):
        super().__init__(
            f"Recipe template {template_id} is inactive",
            code="TEMPLATE_INACTIVE",
            details={"template_id": template_id},
        )


# Deduction Exceptions
class DeductionError(RecipeInventoryError):
    """Base exception for sale-time inventory deduction."""

    pass


class ProductNotFoundError(DeductionError):
    """The sold product could not be resolved to a catalog entry or recipe."""

    def __init__(self, reference: str):
        super().__init__(
            f"Product not found: {reference}",
            code="PRODUCT_NOT_FOUND",
            details={"reference": reference},
        )


class RecipeSetupError(DeductionError):
    """A recipe-backed product has no usable ingredient configuration."""

    def __init__(self, recipe_id: int, reason: str):
        super().__init__(
            f"Recipe {recipe_id} is not set up for deduction: {reason}",
            code="RECIPE_SETUP_INCOMPLETE",
            details={"recipe_id": recipe_id, "reason": reason},
        )


class UnmappedIngredientError(RecipeSetupError):
    """One or more recipe ingredients have no inventory link."""

    def __init__(self, recipe_id: int, ingredients: list[str]):
        super().__init__(
            recipe_id,
            f"ingredients not linked to inventory: {', '.join(ingredients)}",
        )
        self.code = "INGREDIENT_UNMAPPED"
        self.details["ingredients"] = ingredients


class InsufficientStockError(DeductionError):
    """Stock does not cover every ingredient of the sale."""

    def __init__(self, shortages: list[Any]):
        summary = ", ".join(
            f"{s.ingredient}: need {s.required:g}, have {s.available:g}" for s in shortages
        )
        super().__init__(
            f"Insufficient stock: {summary}",
            code="INSUFFICIENT_STOCK",
            details={"shortages": [s.model_dump() for s in shortages]},
        )
        self.shortages = shortages


class DeductionCommitError(DeductionError):
    """Persisting the stock decrements failed; the commit was rolled back."""

    def __init__(self, reason: str, processed: int, total: int):
        super().__init__(
            f"Deduction commit failed after {processed} of {total} ingredients: {reason}",
            code="DEDUCTION_COMMIT_FAILED",
            details={"reason": reason, "processed": processed, "total": total},
        )
        self.processed = processed
        self.total = total


class ConfigurationError(RecipeInventoryError):
    """Configuration error."""

    pass
