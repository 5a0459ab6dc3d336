"""Availability projection entities."""

from enum import Enum

from pydantic import BaseModel, Field


class AvailabilityStatus(str, Enum):
    """Producibility status of a sellable product."""

    READY_TO_SELL = "ready_to_sell"
    SETUP_NEEDED = "setup_needed"
    MISSING_INGREDIENTS = "missing_ingredients"
    DIRECT_PRODUCT = "direct_product"


class IngredientAvailability(BaseModel):
    """Stock check for a single recipe ingredient."""

    ingredient_name: str
    inventory_item_id: int | None = None
    inventory_item_name: str | None = None
    required: float
    on_hand: float = 0.0
    unit: str | None = None
    available: bool = False
    producible: int = 0


class AvailabilityReport(BaseModel):
    """How many units of a product current stock can produce, and what blocks it."""

    name: str
    recipe_id: int | None = None
    catalog_entry_id: int | None = None
    status: AvailabilityStatus
    available_ingredients: int = 0
    total_ingredients: int = 0
    missing_ingredients: list[str] = Field(default_factory=list)
    max_production: int = 0
    ingredients: list[IngredientAvailability] = Field(default_factory=list)

    @property
    def can_sell(self) -> bool:
        return self.status in (
            AvailabilityStatus.READY_TO_SELL,
            AvailabilityStatus.DIRECT_PRODUCT,
        )
