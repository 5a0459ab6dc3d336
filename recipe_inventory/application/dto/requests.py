"""Request DTOs for API endpoints.

Pydantic v2 models for API request validation.
These are the ONLY contracts between API and use cases.
"""

from pydantic import BaseModel, Field, model_validator

# --- Inventory ---


class CreateInventoryItemRequest(BaseModel):
    """Request to register a physical stock item in a store."""

    store_id: str = Field(..., min_length=1, description="Owning store")
    name: str = Field(..., min_length=1, description="Canonical item name")
    unit: str = Field(..., min_length=1, description="Unit of measure")
    on_hand_quantity: float = Field(default=0.0, ge=0, description="Opening stock")
    minimum_threshold: float | None = Field(
        default=None, ge=0, description="Reorder threshold (default from settings)"
    )
    maximum_capacity: float | None = Field(
        default=None, gt=0, description="Refill target (default from settings)"
    )
    unit_cost: float = Field(default=0.0, ge=0, description="Cost per unit")
    recipe_compatible: bool | None = Field(
        default=None,
        description="Usable by recipes; derived from the unit when omitted",
    )


class ReceiveStockRequest(BaseModel):
    """Request to receive stock (receipt movement)."""

    inventory_item_id: int = Field(..., description="Inventory item ID")
    quantity: float = Field(..., gt=0, description="Quantity to receive")
    reference: str | None = Field(default=None, description="Delivery or PO reference")
    notes: str | None = Field(default=None, description="Additional notes")


class AdjustStockRequest(BaseModel):
    """Request to correct stock by a signed amount (adjustment movement)."""

    inventory_item_id: int = Field(..., description="Inventory item ID")
    quantity_delta: float = Field(..., description="Signed change; negative removes stock")
    reference: str | None = Field(default=None, description="Count sheet or reason code")
    notes: str | None = Field(default=None, description="Additional notes")

    @model_validator(mode="after")
    def non_zero(self) -> "AdjustStockRequest":
        if self.quantity_delta == 0:
            raise ValueError("quantity_delta must not be zero")
        return self


# --- Templates ---


class TemplateIngredientRequest(BaseModel):
    """One ingredient row of a template definition."""

    ingredient_name: str = Field(..., description="Ingredient name as authored")
    quantity: float = Field(..., description="Quantity per yield unit")
    unit: str = Field(..., description="Unit of measure")
    cost_per_unit: float = Field(default=0.0, ge=0)
    ingredient_category: str | None = None


class CreateTemplateRequest(BaseModel):
    """Request to create (or replace) a recipe template."""

    name: str = Field(..., description="Product name")
    category_name: str | None = Field(default=None, description="Category label")
    description: str | None = None
    instructions: str | None = None
    yield_quantity: float = Field(default=1.0)
    serving_size: float = Field(default=1.0)
    suggested_price: float | None = Field(default=None, ge=0)
    ingredients: list[TemplateIngredientRequest] = Field(default_factory=list)


class UpdateTemplateRequest(CreateTemplateRequest):
    """Replacement definition; bumps the template version."""


class TemplateRowRequest(BaseModel):
    """One flat import row; rows sharing recipe_name form one template."""

    recipe_name: str
    category: str | None = None
    ingredient_name: str
    quantity: float
    unit: str
    cost_per_unit: float = 0.0
    ingredient_category: str | None = None


class ImportTemplatesRequest(BaseModel):
    """Bulk template import from structured rows."""

    rows: list[TemplateRowRequest] = Field(..., min_length=1)
    update_existing: bool = Field(
        default=False,
        description="Version-bump existing templates instead of skipping them",
    )


class DeployTemplateRequest(BaseModel):
    """Request to deploy a template to stores."""

    store_ids: list[str] = Field(..., min_length=1, description="Target stores, in order")


# --- Store setup ---


class SetMappingRequest(BaseModel):
    """Operator decision linking an ingredient name to an inventory item."""

    ingredient_name: str = Field(..., min_length=1)
    inventory_item_id: int
    conversion_factor: float | None = Field(
        default=None,
        gt=0,
        description="Item units per authored unit, for units with no standard conversion",
    )


class CreateDirectProductRequest(BaseModel):
    """Catalog entry sold without a recipe."""

    name: str = Field(..., min_length=1)
    price: float = Field(default=0.0, ge=0)
    category_name: str | None = None


# --- Sales ---


class DeductInventoryRequest(BaseModel):
    """One sold line item of a completed sale."""

    catalog_entry_id: int | None = Field(default=None, description="Sold catalog entry")
    recipe_id: int | None = Field(default=None, description="Sold recipe, if no entry")
    quantity: float = Field(..., gt=0, description="Units sold")
    transaction_reference: str = Field(..., min_length=1, description="Sale transaction ID")
    line_id: str | None = Field(
        default=None,
        min_length=1,
        max_length=100,
        description="Line identifier within the sale; defaults to the product",
    )

    @model_validator(mode="after")
    def one_product_reference(self) -> "DeductInventoryRequest":
        if (self.catalog_entry_id is None) == (self.recipe_id is None):
            raise ValueError("exactly one of catalog_entry_id or recipe_id is required")
        return self


class ReverseDeductionRequest(BaseModel):
    """Compensate the deductions of a cancelled or refunded sale."""

    transaction_reference: str = Field(..., min_length=1)
    catalog_entry_id: int | None = Field(default=None, description="Limit to one line")
    recipe_id: int | None = Field(default=None, description="Limit to one line")
    line_id: str | None = Field(default=None, min_length=1, description="Limit to one line")
