"""Core domain entities."""

from recipe_inventory.core.entities.audit import (
    ReplenishmentItem,
    ReplenishmentRequest,
    ReplenishmentStatus,
    SyncAuditEntry,
    SyncStatus,
)
from recipe_inventory.core.entities.availability import (
    AvailabilityReport,
    AvailabilityStatus,
    IngredientAvailability,
)
from recipe_inventory.core.entities.inventory import (
    DeductionLine,
    InventoryItem,
    MovementType,
    Shortage,
    StockMovement,
)
from recipe_inventory.core.entities.recipe import (
    CatalogEntry,
    Category,
    IngredientMapping,
    MatchTier,
    Recipe,
    RecipeIngredient,
)
from recipe_inventory.core.entities.template import RecipeTemplate, TemplateIngredient

__all__ = [
    # Inventory entities
    "InventoryItem",
    "StockMovement",
    "MovementType",
    "Shortage",
    "DeductionLine",
    # Template entities
    "RecipeTemplate",
    "TemplateIngredient",
    # Store recipe entities
    "Recipe",
    "RecipeIngredient",
    "IngredientMapping",
    "MatchTier",
    "Category",
    "CatalogEntry",
    # Availability entities
    "AvailabilityReport",
    "AvailabilityStatus",
    "IngredientAvailability",
    # Audit and replenishment entities
    "SyncAuditEntry",
    "SyncStatus",
    "ReplenishmentRequest",
    "ReplenishmentItem",
    "ReplenishmentStatus",
]
