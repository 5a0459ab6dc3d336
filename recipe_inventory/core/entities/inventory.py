"""Inventory domain entities."""

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, Field, model_validator

# Units that are stocked but never consumed by a recipe
NON_RECIPE_UNITS = frozenset({"box", "boxes", "pack", "packs"})

# Tolerance for float drift when checking movement arithmetic
QUANTITY_EPSILON = 1e-9


class MovementType(str, Enum):
    """Types of stock movements."""

    SALE = "sale"
    ADJUSTMENT = "adjustment"
    RECEIPT = "receipt"


class InventoryItem(BaseModel):
    """Store-scoped physical stock record."""

    id: int | None = None
    store_id: str
    name: str
    unit: str
    on_hand_quantity: float = Field(default=0.0, ge=0)
    minimum_threshold: float = 0.0
    maximum_capacity: float | None = None
    unit_cost: float = 0.0
    is_active: bool = True
    recipe_compatible: bool | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @model_validator(mode="after")
    def derive_recipe_compatibility(self) -> "InventoryItem":
        """Box and pack units are excluded from recipe use unless stated otherwise."""
        if self.recipe_compatible is None:
            self.recipe_compatible = self.unit.strip().lower() not in NON_RECIPE_UNITS
        return self

    @property
    def is_low_stock(self) -> bool:
        """True when on-hand quantity is at or below the minimum threshold."""
        return self.on_hand_quantity <= self.minimum_threshold

    def reorder_quantity(self, default: float) -> float:
        """Quantity needed to refill to capacity, or the default when no capacity is set."""
        if self.maximum_capacity and self.maximum_capacity > 0:
            return max(self.maximum_capacity - self.on_hand_quantity, 0.0)
        return default


class StockMovement(BaseModel):
    """Append-only record of one inventory quantity change."""

    id: int | None = None
    inventory_item_id: int
    movement_type: MovementType
    quantity_delta: float  # signed
    previous_quantity: float
    new_quantity: float = Field(ge=0)
    reference: str | None = None  # originating transaction
    line_reference: str | None = None  # product line within the transaction
    notes: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @model_validator(mode="after")
    def check_arithmetic(self) -> "StockMovement":
        """new_quantity must equal previous_quantity + quantity_delta."""
        if abs(self.previous_quantity + self.quantity_delta - self.new_quantity) > QUANTITY_EPSILON:
            raise ValueError(
                f"new_quantity {self.new_quantity} != previous_quantity "
                f"{self.previous_quantity} + delta {self.quantity_delta}"
            )
        return self


class Shortage(BaseModel):
    """An ingredient whose stock does not cover the required quantity."""

    ingredient: str
    inventory_item_id: int | None = None
    required: float
    available: float
    unit: str | None = None

    @property
    def missing(self) -> float:
        return max(self.required - self.available, 0.0)


class DeductionLine(BaseModel):
    """One ingredient decrement, expressed in the inventory item's unit."""

    inventory_item_id: int
    ingredient_name: str
    required: float = Field(gt=0)
    unit: str | None = None
