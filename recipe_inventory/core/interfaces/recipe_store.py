"""Abstract interfaces for store recipes, catalog, and ingredient mappings."""

from abc import ABC, abstractmethod

from recipe_inventory.core.entities.inventory import InventoryItem
from recipe_inventory.core.entities.recipe import (
    CatalogEntry,
    Category,
    IngredientMapping,
    MatchTier,
    Recipe,
    RecipeIngredient,
)


class IRecipeStore(ABC):
    """Interface for store-scoped recipe, category and catalog persistence."""

    @abstractmethod
    async def get_recipe(self, recipe_id: int) -> Recipe | None:
        """Get recipe with its ingredients."""
        pass

    @abstractmethod
    async def get_recipe_by_template(
        self, store_id: str, template_id: int
    ) -> Recipe | None:
        """Get the recipe deployed from a template into a store, if any."""
        pass

    @abstractmethod
    async def list_recipes(self, store_id: str) -> list[Recipe]:
        """List a store's active recipes with ingredients."""
        pass

    @abstractmethod
    async def ensure_category(self, store_id: str, name: str) -> Category:
        """Return the store's active category with this name, creating it if absent."""
        pass

    @abstractmethod
    async def create_deployment(
        self, recipe: Recipe, entry: CatalogEntry
    ) -> tuple[Recipe, CatalogEntry] | None:
        """
        Write recipe, ingredients and catalog entry in one transaction.

        Returns None when the (store, template) pair was deployed concurrently.
        """
        pass

    @abstractmethod
    async def create_catalog_entry(self, entry: CatalogEntry) -> CatalogEntry:
        """Create a catalog entry (used for direct products)."""
        pass

    @abstractmethod
    async def get_catalog_entry(self, entry_id: int) -> CatalogEntry | None:
        """Get catalog entry by ID."""
        pass

    @abstractmethod
    async def list_catalog_entries(self, store_id: str) -> list[CatalogEntry]:
        """List a store's catalog entries."""
        pass

    @abstractmethod
    async def list_unmapped_ingredients(self, store_id: str) -> list[RecipeIngredient]:
        """List recipe ingredients in a store without an inventory link."""
        pass

    @abstractmethod
    async def link_ingredients(
        self,
        store_id: str,
        ingredient_name: str,
        item: InventoryItem,
        match_tier: MatchTier,
        factor_override: float | None = None,
        only_unmapped: bool = False,
    ) -> int:
        """
        Link every recipe ingredient of this name in the store to an item.

        Each row gets the factor for its own authored unit. Raises
        UnitMismatchError, changing nothing, when a row's unit has no
        conversion and no override is given. Returns rows changed.
        """
        pass


class IMappingStore(ABC):
    """Interface for store-level ingredient mapping memory."""

    @abstractmethod
    async def get_mapping(
        self, store_id: str, ingredient_name: str
    ) -> IngredientMapping | None:
        """Get mapping by normalized ingredient name."""
        pass

    @abstractmethod
    async def list_mappings(self, store_id: str) -> list[IngredientMapping]:
        """List all mappings of a store."""
        pass

    @abstractmethod
    async def upsert_mapping(self, mapping: IngredientMapping) -> IngredientMapping:
        """Insert or replace the mapping for (store, normalized name)."""
        pass
