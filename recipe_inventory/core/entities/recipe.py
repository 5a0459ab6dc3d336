"""Store-scoped recipe, mapping, and catalog entities."""

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, Field, model_validator


def normalize_name(name: str) -> str:
    """Lowercase and collapse whitespace; the key for mapping lookups."""
    return " ".join(name.lower().split())


class MatchTier(str, Enum):
    """
    Confidence tier of an ingredient-to-inventory link.

    MANUAL without a backing item means the ingredient is unmatched and
    waits for an operator; MANUAL with an item is an operator decision.
    """

    EXACT = "exact"
    PARTIAL = "partial"
    SUGGESTED = "suggested"
    MANUAL = "manual"


class IngredientMapping(BaseModel):
    """Store-level link from an authored ingredient name to an inventory item."""

    id: int | None = None
    store_id: str
    ingredient_name: str
    normalized_name: str = ""
    inventory_item_id: int | None = None
    confidence: MatchTier = MatchTier.MANUAL
    # Operator override for authored units with no standard conversion
    conversion_factor: float | None = None
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @model_validator(mode="after")
    def compute_normalized_name(self) -> "IngredientMapping":
        """Auto-compute normalized_name from ingredient_name if not set."""
        if not self.normalized_name:
            self.normalized_name = normalize_name(self.ingredient_name)
        return self

    @property
    def is_resolved(self) -> bool:
        return self.inventory_item_id is not None


class RecipeIngredient(BaseModel):
    """Resolved ingredient link of a store recipe."""

    id: int | None = None
    recipe_id: int | None = None
    template_ingredient_id: int | None = None
    ingredient_name: str
    quantity: float  # per unit sold, in the authored unit
    unit: str
    cost_per_unit: float = 0.0
    inventory_item_id: int | None = None
    match_tier: MatchTier = MatchTier.MANUAL
    conversion_factor: float = 1.0

    @property
    def is_mapped(self) -> bool:
        return self.inventory_item_id is not None

    def required_for(self, units_sold: float) -> float:
        """Quantity to draw from the linked item, in the item's unit."""
        return self.quantity * self.conversion_factor * units_sold


class Recipe(BaseModel):
    """Store-scoped materialization of a recipe template."""

    id: int | None = None
    store_id: str
    template_id: int | None = None
    template_version: int | None = None
    name: str
    description: str | None = None
    instructions: str | None = None
    yield_quantity: float = 1.0
    serving_size: float = 1.0
    total_cost: float = 0.0
    suggested_price: float | None = None
    is_active: bool = True
    ingredients: list[RecipeIngredient] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def unmapped_ingredients(self) -> list[RecipeIngredient]:
        return [ing for ing in self.ingredients if not ing.is_mapped]


class Category(BaseModel):
    """Store-scoped product category."""

    id: int | None = None
    store_id: str
    name: str
    is_active: bool = True


class CatalogEntry(BaseModel):
    """Sellable product row shown at the point of sale."""

    id: int | None = None
    store_id: str
    recipe_id: int | None = None  # None for direct products
    category_id: int | None = None
    name: str
    price: float = 0.0
    is_available: bool = True
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def is_direct_product(self) -> bool:
        return self.recipe_id is None
