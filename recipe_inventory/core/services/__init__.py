"""Pure domain services."""

from recipe_inventory.core.services.availability_analyzer import (
    AvailabilityAnalyzer,
    producible_units,
)
from recipe_inventory.core.services.ingredient_matcher import (
    IngredientMatch,
    IngredientMatcher,
)
from recipe_inventory.core.services.stock_check import find_shortages
from recipe_inventory.core.services.template_rules import validate_definition
from recipe_inventory.core.services.units import (
    conversion_factor,
    is_recipe_unit,
    normalize_unit,
    require_conversion,
    units_compatible,
)

__all__ = [
    "AvailabilityAnalyzer",
    "producible_units",
    "IngredientMatch",
    "IngredientMatcher",
    "find_shortages",
    "validate_definition",
    "conversion_factor",
    "is_recipe_unit",
    "normalize_unit",
    "require_conversion",
    "units_compatible",
]
