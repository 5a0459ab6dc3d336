"""Sufficiency check shared by the advisory validation and the atomic commit."""

from collections import defaultdict
from collections.abc import Iterable, Mapping

from recipe_inventory.core.entities.inventory import (
    QUANTITY_EPSILON,
    DeductionLine,
    InventoryItem,
    Shortage,
)


def find_shortages(
    lines: Iterable[DeductionLine],
    items: Mapping[int, InventoryItem],
) -> list[Shortage]:
    """
    Every item whose on-hand quantity cannot cover the lines drawing on it.

    Lines that draw on the same item are summed before comparing. Missing
    or inactive items count as zero stock.
    """
    needed: dict[int, float] = defaultdict(float)
    names: dict[int, list[str]] = defaultdict(list)
    for line in lines:
        needed[line.inventory_item_id] += line.required
        names[line.inventory_item_id].append(line.ingredient_name)

    shortages: list[Shortage] = []
    for item_id, required in needed.items():
        item = items.get(item_id)
        available = item.on_hand_quantity if item is not None and item.is_active else 0.0
        if available + QUANTITY_EPSILON < required:
            shortages.append(
                Shortage(
                    ingredient=" / ".join(names[item_id]),
                    inventory_item_id=item_id,
                    required=required,
                    available=available,
                    unit=item.unit if item is not None else None,
                )
            )
    return shortages
