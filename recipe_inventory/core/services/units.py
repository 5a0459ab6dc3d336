"""
Unit normalization and conversion.

Ingredient rows are authored with free-form units ("pcs", "Grams", "L");
inventory items use whatever the store stocks in. Quantities can only be
compared after both sides are normalized and, for mass and volume, scaled
into the same unit.
"""

from collections.abc import Iterable

from recipe_inventory.core.exceptions import UnitMismatchError

UNIT_ALIASES: dict[str, str] = {
    "pieces": "pieces",
    "piece": "pieces",
    "pcs": "pieces",
    "pc": "pieces",
    "serving": "serving",
    "servings": "serving",
    "portion": "portion",
    "portions": "portion",
    "scoop": "scoop",
    "scoops": "scoop",
    "slice": "slice",
    "slices": "slice",
    "box": "box",
    "boxes": "box",
    "pack": "pack",
    "packs": "pack",
    "kg": "kg",
    "kilo": "kg",
    "kilogram": "kg",
    "kilograms": "kg",
    "g": "g",
    "gm": "g",
    "gram": "g",
    "grams": "g",
    "l": "liters",
    "liter": "liters",
    "liters": "liters",
    "litre": "liters",
    "litres": "liters",
    "ml": "ml",
    "milliliter": "ml",
    "milliliters": "ml",
    "millilitre": "ml",
    "millilitres": "ml",
}

# Scale of each unit relative to its family's base unit
_FAMILIES: dict[str, dict[str, float]] = {
    "mass": {"g": 1.0, "kg": 1000.0},
    "volume": {"ml": 1.0, "liters": 1000.0},
}


def normalize_unit(unit: str) -> str:
    """Map a unit spelling to its canonical name; unknown units are lowercased."""
    key = " ".join(unit.strip().lower().split())
    return UNIT_ALIASES.get(key, key)


def _family(unit: str) -> str | None:
    for name, scales in _FAMILIES.items():
        if unit in scales:
            return name
    return None


def units_compatible(a: str, b: str) -> bool:
    """True when quantities in unit a can be expressed in unit b."""
    return conversion_factor(a, b) is not None


def conversion_factor(from_unit: str, to_unit: str) -> float | None:
    """
    Factor that converts a quantity in from_unit into to_unit.

    Returns None when the units belong to different families.
    """
    source = normalize_unit(from_unit)
    target = normalize_unit(to_unit)
    if source == target:
        return 1.0

    family = _family(source)
    if family is None or family != _family(target):
        return None

    scales = _FAMILIES[family]
    return scales[source] / scales[target]


def require_conversion(
    from_unit: str, to_unit: str, override: float | None = None
) -> float:
    """
    Like conversion_factor, but raises UnitMismatchError when incompatible.

    An operator override only applies where no standard conversion exists
    (e.g. "slice" into "g"); liters into ml is always 1000.
    """
    factor = conversion_factor(from_unit, to_unit)
    if factor is None:
        factor = override
    if factor is None:
        raise UnitMismatchError(from_unit, to_unit)
    return factor


def is_recipe_unit(unit: str, non_recipe_units: Iterable[str]) -> bool:
    """False for stocking-only units such as boxes and packs."""
    excluded = {normalize_unit(u) for u in non_recipe_units}
    return normalize_unit(unit) not in excluded
