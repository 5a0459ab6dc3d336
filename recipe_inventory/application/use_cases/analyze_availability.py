"""Analyze Availability use case: producibility of a store's catalog."""

from collections import Counter
from dataclasses import dataclass, field

from recipe_inventory.application.dto.converters import availability_to_response
from recipe_inventory.application.dto.responses import StoreAvailabilityResponse
from recipe_inventory.application.services import get_availability_analyzer
from recipe_inventory.config import get_logger
from recipe_inventory.core.entities.availability import AvailabilityReport
from recipe_inventory.core.entities.inventory import InventoryItem
from recipe_inventory.core.entities.recipe import Recipe
from recipe_inventory.core.exceptions import RecipeNotFoundError
from recipe_inventory.core.interfaces.inventory_store import IInventoryStore
from recipe_inventory.core.interfaces.recipe_store import IRecipeStore
from recipe_inventory.core.services.availability_analyzer import AvailabilityAnalyzer

logger = get_logger(__name__)


@dataclass
class StoreAvailability:
    store_id: str
    products: list[AvailabilityReport] = field(default_factory=list)

    @property
    def status_counts(self) -> dict[str, int]:
        return dict(Counter(p.status.value for p in self.products))


class AnalyzeAvailabilityUseCase:
    """Recompute availability on demand; nothing is persisted."""

    def __init__(
        self,
        recipe_store: IRecipeStore | None = None,
        inventory_store: IInventoryStore | None = None,
        analyzer: AvailabilityAnalyzer | None = None,
    ):
        self._recipe_store = recipe_store
        self._inventory_store = inventory_store
        self._analyzer = analyzer or get_availability_analyzer()

    async def _get_recipe_store(self) -> IRecipeStore:
        if self._recipe_store is None:
            from recipe_inventory.infrastructure.storage.sqlite import get_recipe_store

            self._recipe_store = await get_recipe_store()
        return self._recipe_store

    async def _get_inventory_store(self) -> IInventoryStore:
        if self._inventory_store is None:
            from recipe_inventory.infrastructure.storage.sqlite import get_inventory_store

            self._inventory_store = await get_inventory_store()
        return self._inventory_store

    async def _linked_items(self, recipes: list[Recipe]) -> dict[int, InventoryItem]:
        ids = sorted(
            {
                ing.inventory_item_id
                for recipe in recipes
                for ing in recipe.ingredients
                if ing.inventory_item_id is not None
            }
        )
        if not ids:
            return {}
        inventory_store = await self._get_inventory_store()
        return await inventory_store.get_items(ids)

    async def execute(self, store_id: str) -> StoreAvailability:
        """Report every catalog entry of a store, in catalog order."""
        recipe_store = await self._get_recipe_store()
        entries = await recipe_store.list_catalog_entries(store_id)

        recipes: dict[int, Recipe] = {}
        for entry in entries:
            if entry.recipe_id is not None and entry.recipe_id not in recipes:
                recipe = await recipe_store.get_recipe(entry.recipe_id)
                if recipe is not None:
                    recipes[entry.recipe_id] = recipe

        items = await self._linked_items(list(recipes.values()))

        result = StoreAvailability(store_id=store_id)
        for entry in entries:
            if entry.is_direct_product:
                result.products.append(self._analyzer.analyze_direct_product(entry))
                continue
            recipe = recipes.get(entry.recipe_id)
            if recipe is None:
                logger.warning(
                    "catalog_entry_recipe_missing",
                    catalog_entry_id=entry.id,
                    recipe_id=entry.recipe_id,
                )
                continue
            result.products.append(self._analyzer.analyze(recipe, items, entry))

        logger.debug(
            "availability_computed",
            store_id=store_id,
            products=len(result.products),
            **result.status_counts,
        )
        return result

    async def analyze_recipe(
        self, recipe_id: int, store_id: str | None = None
    ) -> AvailabilityReport:
        """
        Report a single recipe.

        Raises:
            RecipeNotFoundError: Unknown recipe
        """
        recipe_store = await self._get_recipe_store()
        recipe = await recipe_store.get_recipe(recipe_id)
        if recipe is None or (store_id is not None and recipe.store_id != store_id):
            raise RecipeNotFoundError(recipe_id)
        items = await self._linked_items([recipe])
        return self._analyzer.analyze(recipe, items)

    def to_response(self, result: StoreAvailability) -> StoreAvailabilityResponse:
        return StoreAvailabilityResponse(
            store_id=result.store_id,
            products=[availability_to_response(p) for p in result.products],
            status_counts=result.status_counts,
        )
