"""
Recipe template entities.

A template is the store-independent definition of a product's composition.
It is versioned and never hard-deleted, only deactivated.
"""

from datetime import UTC, datetime

from pydantic import BaseModel, Field


class TemplateIngredient(BaseModel):
    """An ingredient row as authored in a template."""

    id: int | None = None
    template_id: int | None = None
    position: int = 0
    ingredient_name: str
    quantity: float
    unit: str
    cost_per_unit: float = 0.0
    ingredient_category: str | None = None

    @property
    def line_cost(self) -> float:
        return self.quantity * self.cost_per_unit


class RecipeTemplate(BaseModel):
    """Versioned, store-independent recipe definition."""

    id: int | None = None
    name: str
    category_name: str | None = None
    description: str | None = None
    instructions: str | None = None
    yield_quantity: float = 1.0
    serving_size: float = 1.0
    suggested_price: float | None = None
    total_cost: float = 0.0
    version: int = 1
    is_active: bool = True
    is_complete: bool = True
    incomplete_reason: str | None = None
    ingredients: list[TemplateIngredient] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    def compute_total_cost(self) -> float:
        """Sum of quantity * cost_per_unit over all ingredients."""
        return round(sum(ing.line_cost for ing in self.ingredients), 4)

    def catalog_price(self, markup: float) -> float:
        """Suggested price, or total cost times markup when none is set."""
        if self.suggested_price is not None:
            return self.suggested_price
        return round(self.total_cost * markup, 2)
