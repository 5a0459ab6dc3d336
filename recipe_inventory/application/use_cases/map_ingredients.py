"""Ingredient mapping use cases: manual resolution and matcher re-runs."""

from dataclasses import dataclass, field

from recipe_inventory.application.dto.converters import mapping_to_response
from recipe_inventory.application.dto.requests import SetMappingRequest
from recipe_inventory.application.dto.responses import (
    AutoMapResponse,
    MappingListResponse,
    SetMappingResponse,
)
from recipe_inventory.application.services import get_ingredient_matcher
from recipe_inventory.config import get_logger
from recipe_inventory.core.entities.recipe import IngredientMapping, MatchTier, normalize_name
from recipe_inventory.core.exceptions import (
    InventoryItemNotFoundError,
    UnitMismatchError,
    ValidationError,
)
from recipe_inventory.core.interfaces.inventory_store import IInventoryStore
from recipe_inventory.core.interfaces.recipe_store import IMappingStore, IRecipeStore
from recipe_inventory.core.services.ingredient_matcher import IngredientMatcher

logger = get_logger(__name__)


class _MappingUseCase:
    def __init__(
        self,
        mapping_store: IMappingStore | None = None,
        recipe_store: IRecipeStore | None = None,
        inventory_store: IInventoryStore | None = None,
    ):
        self._mapping_store = mapping_store
        self._recipe_store = recipe_store
        self._inventory_store = inventory_store

    async def _get_mapping_store(self) -> IMappingStore:
        if self._mapping_store is None:
            from recipe_inventory.infrastructure.storage.sqlite import get_mapping_store

            self._mapping_store = await get_mapping_store()
        return self._mapping_store

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


@dataclass
class SetMappingResult:
    mapping: IngredientMapping
    relinked: int = 0


class SetIngredientMappingUseCase(_MappingUseCase):
    """Record an operator's mapping and relink every recipe using the name."""

    async def execute(self, store_id: str, request: SetMappingRequest) -> SetMappingResult:
        """
        Raises:
            InventoryItemNotFoundError: Unknown item, or item of another store
            UnitMismatchError: A recipe authors the name in a unit that cannot
                be converted to the item's unit and no factor was given
        """
        inventory_store = await self._get_inventory_store()
        item = await inventory_store.get_item(request.inventory_item_id)
        if item is None or item.store_id != store_id:
            raise InventoryItemNotFoundError(request.inventory_item_id)
        if not item.is_active:
            raise ValidationError(
                "inventory_item_id",
                f"Inventory item {item.id} is inactive",
                item.id,
            )

        name = request.ingredient_name.strip()
        recipe_store = await self._get_recipe_store()
        relinked = await recipe_store.link_ingredients(
            store_id, name, item, MatchTier.MANUAL, request.conversion_factor
        )

        mapping_store = await self._get_mapping_store()
        mapping = await mapping_store.upsert_mapping(
            IngredientMapping(
                store_id=store_id,
                ingredient_name=name,
                inventory_item_id=item.id,
                confidence=MatchTier.MANUAL,
                conversion_factor=request.conversion_factor,
            )
        )
        logger.info(
            "mapping_set_manual",
            store_id=store_id,
            ingredient=mapping.ingredient_name,
            item_id=item.id,
            factor_override=request.conversion_factor,
            relinked=relinked,
        )
        return SetMappingResult(mapping=mapping, relinked=relinked)

    def to_response(self, result: SetMappingResult) -> SetMappingResponse:
        return SetMappingResponse(
            mapping=mapping_to_response(result.mapping),
            relinked_ingredients=result.relinked,
        )


@dataclass
class AutoMapResult:
    store_id: str
    examined: int = 0
    mapped: int = 0
    still_unmapped: list[str] = field(default_factory=list)


class AutoMapIngredientsUseCase(_MappingUseCase):
    """Re-run the matcher for every unresolved recipe ingredient of a store."""

    def __init__(self, *args, matcher: IngredientMatcher | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self._matcher = matcher or get_ingredient_matcher()

    async def execute(self, store_id: str) -> AutoMapResult:
        recipe_store = await self._get_recipe_store()
        inventory_store = await self._get_inventory_store()
        mapping_store = await self._get_mapping_store()

        unmapped = await recipe_store.list_unmapped_ingredients(store_id)
        candidates = await inventory_store.list_recipe_compatible(store_id)

        # One item decision per distinct name; factors are resolved per row
        by_name: dict[str, str] = {}
        for ing in unmapped:
            by_name.setdefault(normalize_name(ing.ingredient_name), ing.ingredient_name)

        result = AutoMapResult(store_id=store_id, examined=len(by_name))
        for name in by_name.values():
            match = self._matcher.match(name, candidates)
            if match.is_unmatched:
                result.still_unmapped.append(name)
                continue

            try:
                await recipe_store.link_ingredients(
                    store_id, name, match.item, match.tier, only_unmapped=True
                )
            except UnitMismatchError as e:
                logger.warning(
                    "unit_mismatch",
                    store_id=store_id,
                    ingredient=name,
                    item_id=match.item.id,
                    error=e.message,
                )
                result.still_unmapped.append(name)
                continue

            await mapping_store.upsert_mapping(match.to_mapping(store_id))
            result.mapped += 1

        logger.info(
            "auto_map_complete",
            store_id=store_id,
            examined=result.examined,
            mapped=result.mapped,
            still_unmapped=len(result.still_unmapped),
        )
        return result

    def to_response(self, result: AutoMapResult) -> AutoMapResponse:
        return AutoMapResponse(
            store_id=result.store_id,
            examined=result.examined,
            mapped=result.mapped,
            still_unmapped=result.still_unmapped,
        )


class ListMappingsUseCase(_MappingUseCase):
    async def execute(self, store_id: str) -> list[IngredientMapping]:
        mapping_store = await self._get_mapping_store()
        return await mapping_store.list_mappings(store_id)

    def to_response(self, store_id: str, mappings: list[IngredientMapping]) -> MappingListResponse:
        return MappingListResponse(
            store_id=store_id,
            mappings=[mapping_to_response(m) for m in mappings],
            unresolved=sum(1 for m in mappings if not m.is_resolved),
        )
