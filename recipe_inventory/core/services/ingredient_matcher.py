"""
Ingredient matching service.

Resolves a free-text ingredient name to one of a store's inventory items
using a prioritized strategy: exact name, partial (substring) name, then
synonym-group suggestion. The first tier that yields a candidate wins.
"""

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from recipe_inventory.config import get_logger
from recipe_inventory.core.entities.inventory import InventoryItem
from recipe_inventory.core.entities.recipe import IngredientMapping, MatchTier
from recipe_inventory.core.services.units import conversion_factor

logger = get_logger(__name__)


@dataclass
class IngredientMatch:
    """Result of matching one ingredient name against a store's inventory."""

    ingredient_name: str
    tier: MatchTier
    item: InventoryItem | None = None
    conversion_factor: float = 1.0

    @property
    def is_unmatched(self) -> bool:
        return self.item is None

    def to_mapping(self, store_id: str) -> IngredientMapping:
        """
        Express the match as a store-level mapping row.

        The row names the target item only. Factors depend on the unit each
        recipe authors, so they are computed per recipe ingredient.
        """
        return IngredientMapping(
            store_id=store_id,
            ingredient_name=self.ingredient_name,
            inventory_item_id=self.item.id if self.item else None,
            confidence=self.tier,
        )


def _normalize(name: str) -> str:
    """Normalize a name for comparison: strip, lowercase, collapse whitespace."""
    result = name.strip().lower()
    result = re.sub(r"\s+", " ", result)
    return result


class IngredientMatcher:
    """
    Service for linking ingredient names to inventory items.

    Matching strategy (priority order):
    1. Exact     -> normalized names are equal
    2. Partial   -> one normalized name contains the other
    3. Suggested -> ingredient contains a synonym-group member and an
                    item name contains any member of the same group

    Pure service: no store access, the synonym table is injected and the
    candidate items are passed per call. Candidates are considered in
    (name, id) order so the same inputs always yield the same result.
    """

    def __init__(self, synonym_groups: Iterable[Iterable[str]] = ()) -> None:
        self._synonym_groups: list[tuple[str, ...]] = []
        for group in synonym_groups:
            members = tuple(sorted({_normalize(m) for m in group if _normalize(m)}))
            if members:
                self._synonym_groups.append(members)

    def match(
        self,
        ingredient_name: str,
        items: Sequence[InventoryItem],
        unit: str | None = None,
    ) -> IngredientMatch:
        """
        Match one ingredient against candidate inventory items.

        Args:
            ingredient_name: Name as authored in the template.
            items: The store's items; inactive or non-recipe items are ignored.
            unit: Authored unit. When given, the match also needs a unit that
                converts into the item's unit.

        Returns:
            IngredientMatch; tier MANUAL with no item when nothing matched
            or the units are incompatible.
        """
        needle = _normalize(ingredient_name)
        unmatched = IngredientMatch(ingredient_name=ingredient_name, tier=MatchTier.MANUAL)
        if not needle:
            return unmatched

        candidates = sorted(
            (i for i in items if i.is_active and i.recipe_compatible),
            key=lambda i: (_normalize(i.name), i.id or 0),
        )

        item, tier = self._find(needle, candidates)
        if item is None:
            logger.debug("ingredient_unmatched", ingredient=ingredient_name)
            return unmatched

        factor = 1.0
        if unit:
            converted = conversion_factor(unit, item.unit)
            if converted is None:
                logger.warning(
                    "unit_mismatch",
                    ingredient=ingredient_name,
                    unit=unit,
                    item_id=item.id,
                    item_unit=item.unit,
                )
                return unmatched
            factor = converted

        return IngredientMatch(
            ingredient_name=ingredient_name,
            tier=tier,
            item=item,
            conversion_factor=factor,
        )

    def match_all(
        self,
        ingredients: Iterable[tuple[str, str | None]],
        items: Sequence[InventoryItem],
    ) -> list[IngredientMatch]:
        """Match several (name, unit) pairs against the same item set."""
        return [self.match(name, items, unit) for name, unit in ingredients]

    def _find(
        self, needle: str, candidates: list[InventoryItem]
    ) -> tuple[InventoryItem | None, MatchTier]:
        # 1. Exact
        for item in candidates:
            if _normalize(item.name) == needle:
                return item, MatchTier.EXACT

        # 2. Partial, either direction
        for item in candidates:
            name = _normalize(item.name)
            if name and (needle in name or name in needle):
                return item, MatchTier.PARTIAL

        # 3. Synonym suggestion
        for group in self._synonym_groups:
            if not any(member in needle for member in group):
                continue
            for item in candidates:
                name = _normalize(item.name)
                if any(member in name for member in group):
                    return item, MatchTier.SUGGESTED

        return None, MatchTier.MANUAL
