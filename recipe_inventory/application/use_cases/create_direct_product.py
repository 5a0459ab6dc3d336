"""Create Direct Product use case: a catalog entry sold without a recipe."""

from recipe_inventory.application.dto.converters import catalog_entry_to_response
from recipe_inventory.application.dto.requests import CreateDirectProductRequest
from recipe_inventory.application.dto.responses import CatalogEntryResponse
from recipe_inventory.config import get_logger
from recipe_inventory.core.entities.recipe import CatalogEntry
from recipe_inventory.core.interfaces.recipe_store import IRecipeStore

logger = get_logger(__name__)


class CreateDirectProductUseCase:
    """Add a recipe-less product; deductions for it always succeed as no-ops."""

    def __init__(self, recipe_store: IRecipeStore | None = None):
        self._recipe_store = recipe_store

    async def _get_recipe_store(self) -> IRecipeStore:
        if self._recipe_store is None:
            from recipe_inventory.infrastructure.storage.sqlite import get_recipe_store

            self._recipe_store = await get_recipe_store()
        return self._recipe_store

    async def execute(self, store_id: str, request: CreateDirectProductRequest) -> CatalogEntry:
        store = await self._get_recipe_store()
        category_id = None
        if request.category_name and request.category_name.strip():
            category = await store.ensure_category(store_id, request.category_name.strip())
            category_id = category.id

        entry = await store.create_catalog_entry(
            CatalogEntry(
                store_id=store_id,
                category_id=category_id,
                name=request.name.strip(),
                price=request.price,
            )
        )
        logger.info("direct_product_created", store_id=store_id, catalog_entry_id=entry.id)
        return entry

    def to_response(self, entry: CatalogEntry) -> CatalogEntryResponse:
        return catalog_entry_to_response(entry)
