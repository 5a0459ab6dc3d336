"""
Availability analysis service.

Projects how many units of a recipe current stock can produce. Read-only:
"missing" and "zero producible" are normal report values, never errors.
"""

import math
from collections.abc import Mapping

from recipe_inventory.core.entities.availability import (
    AvailabilityReport,
    AvailabilityStatus,
    IngredientAvailability,
)
from recipe_inventory.core.entities.inventory import QUANTITY_EPSILON, InventoryItem
from recipe_inventory.core.entities.recipe import CatalogEntry, Recipe

NOT_IN_INVENTORY = "(not in inventory)"


def producible_units(on_hand: float, required: float) -> int:
    """floor(on_hand / required), tolerant of float drift."""
    if required <= 0:
        return 0
    return max(math.floor(on_hand / required + QUANTITY_EPSILON), 0)


class AvailabilityAnalyzer:
    """Computes producibility of recipes against a snapshot of inventory items."""

    def analyze(
        self,
        recipe: Recipe,
        items: Mapping[int, InventoryItem],
        catalog_entry: CatalogEntry | None = None,
    ) -> AvailabilityReport:
        """
        Analyze one recipe for a single yield unit.

        Args:
            recipe: Recipe with its ingredients loaded.
            items: Inventory items keyed by ID; must cover the linked items.
            catalog_entry: Entry the report is shown for, if any.
        """
        name = catalog_entry.name if catalog_entry else recipe.name
        entry_id = catalog_entry.id if catalog_entry else None

        if not recipe.ingredients:
            return AvailabilityReport(
                name=name,
                recipe_id=recipe.id,
                catalog_entry_id=entry_id,
                status=AvailabilityStatus.SETUP_NEEDED,
            )

        checks: list[IngredientAvailability] = []
        missing: list[str] = []
        bounds: list[int] = []

        for ingredient in recipe.ingredients:
            required = ingredient.required_for(1)
            item = items.get(ingredient.inventory_item_id) if ingredient.is_mapped else None

            if item is None or not item.is_active:
                missing.append(f"{ingredient.ingredient_name} {NOT_IN_INVENTORY}")
                checks.append(
                    IngredientAvailability(
                        ingredient_name=ingredient.ingredient_name,
                        inventory_item_id=ingredient.inventory_item_id,
                        required=required,
                        unit=ingredient.unit,
                    )
                )
                continue

            available = item.on_hand_quantity + QUANTITY_EPSILON >= required
            producible = producible_units(item.on_hand_quantity, required)
            if required > 0:
                bounds.append(producible)
            if not available:
                missing.append(ingredient.ingredient_name)

            checks.append(
                IngredientAvailability(
                    ingredient_name=ingredient.ingredient_name,
                    inventory_item_id=item.id,
                    inventory_item_name=item.name,
                    required=required,
                    on_hand=item.on_hand_quantity,
                    unit=item.unit,
                    available=available,
                    producible=producible,
                )
            )

        if missing:
            status = AvailabilityStatus.MISSING_INGREDIENTS
            max_production = 0
        else:
            status = AvailabilityStatus.READY_TO_SELL
            max_production = min(bounds) if bounds else 0

        return AvailabilityReport(
            name=name,
            recipe_id=recipe.id,
            catalog_entry_id=entry_id,
            status=status,
            available_ingredients=sum(1 for c in checks if c.available),
            total_ingredients=len(checks),
            missing_ingredients=missing,
            max_production=max_production,
            ingredients=checks,
        )

    def analyze_direct_product(self, entry: CatalogEntry) -> AvailabilityReport:
        """Products sold without a recipe carry no ingredient constraints."""
        return AvailabilityReport(
            name=entry.name,
            catalog_entry_id=entry.id,
            status=AvailabilityStatus.DIRECT_PRODUCT,
        )
