"""Deploy Template use case: project a template into store recipes."""

from dataclasses import dataclass, field

from recipe_inventory.application.dto.responses import (
    DeploymentReportResponse,
    StoreDeploymentResponse,
)
from recipe_inventory.application.services import get_ingredient_matcher
from recipe_inventory.config import get_logger, get_settings
from recipe_inventory.core.entities.inventory import InventoryItem
from recipe_inventory.core.entities.recipe import (
    CatalogEntry,
    IngredientMapping,
    MatchTier,
    Recipe,
    RecipeIngredient,
)
from recipe_inventory.core.entities.template import RecipeTemplate, TemplateIngredient
from recipe_inventory.core.exceptions import (
    TemplateInactiveError,
    TemplateNotFoundError,
    TemplateValidationError,
    UnitMismatchError,
)
from recipe_inventory.core.interfaces.inventory_store import IInventoryStore
from recipe_inventory.core.interfaces.recipe_store import IMappingStore, IRecipeStore
from recipe_inventory.core.interfaces.template_store import ITemplateStore
from recipe_inventory.core.services.ingredient_matcher import IngredientMatcher
from recipe_inventory.core.services.units import require_conversion

logger = get_logger(__name__)

DEFAULT_CATEGORY = "Uncategorized"

OUTCOME_DEPLOYED = "deployed"
OUTCOME_SKIPPED = "skipped"
OUTCOME_FAILED = "failed"


@dataclass
class StoreDeployment:
    """Outcome of deploying one template into one store."""

    store_id: str
    outcome: str
    recipe: Recipe | None = None
    catalog_entry: CatalogEntry | None = None
    message: str | None = None

    @property
    def unmapped_ingredients(self) -> list[str]:
        if self.recipe is None:
            return []
        return [ing.ingredient_name for ing in self.recipe.unmapped_ingredients]


@dataclass
class DeploymentReport:
    template_id: int
    results: list[StoreDeployment] = field(default_factory=list)

    def count(self, outcome: str) -> int:
        return sum(1 for r in self.results if r.outcome == outcome)


class DeployTemplateUseCase:
    """
    Materialize a template as a Recipe plus CatalogEntry in each store.

    Stores are processed sequentially and independently: a failure in one
    store is reported in its own outcome and never touches the others.
    """

    def __init__(
        self,
        template_store: ITemplateStore | None = None,
        recipe_store: IRecipeStore | None = None,
        mapping_store: IMappingStore | None = None,
        inventory_store: IInventoryStore | None = None,
        matcher: IngredientMatcher | None = None,
        markup: float | None = None,
    ):
        self._template_store = template_store
        self._recipe_store = recipe_store
        self._mapping_store = mapping_store
        self._inventory_store = inventory_store
        settings = get_settings()
        self._matcher = matcher or get_ingredient_matcher()
        self._markup = markup if markup is not None else settings.inventory.default_markup

    async def _get_template_store(self) -> ITemplateStore:
        if self._template_store is None:
            from recipe_inventory.infrastructure.storage.sqlite import get_template_store

            self._template_store = await get_template_store()
        return self._template_store

    async def _get_recipe_store(self) -> IRecipeStore:
        if self._recipe_store is None:
            from recipe_inventory.infrastructure.storage.sqlite import get_recipe_store

            self._recipe_store = await get_recipe_store()
        return self._recipe_store

    async def _get_mapping_store(self) -> IMappingStore:
        if self._mapping_store is None:
            from recipe_inventory.infrastructure.storage.sqlite import get_mapping_store

            self._mapping_store = await get_mapping_store()
        return self._mapping_store

    async def _get_inventory_store(self) -> IInventoryStore:
        if self._inventory_store is None:
            from recipe_inventory.infrastructure.storage.sqlite import get_inventory_store

            self._inventory_store = await get_inventory_store()
        return self._inventory_store

    async def execute(self, template_id: int, store_ids: list[str]) -> DeploymentReport:
        """
        Deploy a template to every listed store.

        Raises:
            TemplateNotFoundError: Unknown template
            TemplateInactiveError: Template has been deactivated
            TemplateValidationError: Template is incomplete or has no ingredients
        """
        template_store = await self._get_template_store()
        template = await template_store.get_template(template_id)
        if template is None:
            raise TemplateNotFoundError(template_id)
        if not template.is_active:
            raise TemplateInactiveError(template_id)
        if not template.ingredients:
            raise TemplateValidationError(template.name, ["template has no ingredients"])
        if not template.is_complete:
            raise TemplateValidationError(
                template.name,
                [template.incomplete_reason or "template is incomplete"],
            )

        logger.info(
            "deployment_started",
            template_id=template_id,
            stores=len(store_ids),
        )

        report = DeploymentReport(template_id=template_id)
        for store_id in dict.fromkeys(store_ids):
            try:
                result = await self.deploy(template, store_id)
            except Exception as e:
                logger.exception(
                    "deployment_store_failed",
                    template_id=template_id,
                    store_id=store_id,
                )
                result = StoreDeployment(
                    store_id=store_id,
                    outcome=OUTCOME_FAILED,
                    message=str(e),
                )
            report.results.append(result)

        logger.info(
            "deployment_complete",
            template_id=template_id,
            deployed=report.count(OUTCOME_DEPLOYED),
            skipped=report.count(OUTCOME_SKIPPED),
            failed=report.count(OUTCOME_FAILED),
        )
        return report

    async def deploy(self, template: RecipeTemplate, store_id: str) -> StoreDeployment:
        """Deploy into a single store; a no-op when the store already has it."""
        recipe_store = await self._get_recipe_store()

        existing = await recipe_store.get_recipe_by_template(store_id, template.id)
        if existing is not None:
            logger.debug(
                "deployment_skipped_existing",
                template_id=template.id,
                store_id=store_id,
                recipe_id=existing.id,
            )
            return StoreDeployment(
                store_id=store_id,
                outcome=OUTCOME_SKIPPED,
                recipe=existing,
                message="already deployed",
            )

        category = await recipe_store.ensure_category(
            store_id, template.category_name or DEFAULT_CATEGORY
        )

        inventory_store = await self._get_inventory_store()
        candidates = await inventory_store.list_recipe_compatible(store_id)
        ingredients = [
            await self._resolve_ingredient(store_id, ing, candidates)
            for ing in template.ingredients
        ]

        recipe = Recipe(
            store_id=store_id,
            template_id=template.id,
            template_version=template.version,
            name=template.name,
            description=template.description,
            instructions=template.instructions,
            yield_quantity=template.yield_quantity,
            serving_size=template.serving_size,
            total_cost=template.total_cost,
            suggested_price=template.suggested_price,
            ingredients=ingredients,
        )
        entry = CatalogEntry(
            store_id=store_id,
            category_id=category.id,
            name=template.name,
            price=template.catalog_price(self._markup),
        )

        created = await recipe_store.create_deployment(recipe, entry)
        if created is None:
            # Lost a race with a concurrent deployment of the same pair
            return StoreDeployment(
                store_id=store_id,
                outcome=OUTCOME_SKIPPED,
                message="already deployed",
            )

        recipe, entry = created
        logger.info(
            "deployment_store_complete",
            template_id=template.id,
            store_id=store_id,
            recipe_id=recipe.id,
            catalog_entry_id=entry.id,
            unmapped=len(recipe.unmapped_ingredients),
        )
        return StoreDeployment(
            store_id=store_id,
            outcome=OUTCOME_DEPLOYED,
            recipe=recipe,
            catalog_entry=entry,
        )

    async def _resolve_ingredient(
        self,
        store_id: str,
        ingredient: TemplateIngredient,
        candidates: list[InventoryItem],
    ) -> RecipeIngredient:
        """Link one template ingredient, preferring the store's mapping memory."""
        mapping_store = await self._get_mapping_store()
        mapping = await mapping_store.get_mapping(store_id, ingredient.ingredient_name)

        if mapping is not None and mapping.is_resolved:
            # candidates holds active, recipe-compatible items only
            item = next((i for i in candidates if i.id == mapping.inventory_item_id), None)
            if item is not None:
                return self._remembered(ingredient, mapping, item)
            logger.info(
                "mapping_item_unavailable",
                store_id=store_id,
                ingredient=ingredient.ingredient_name,
                item_id=mapping.inventory_item_id,
            )

        match = self._matcher.match(ingredient.ingredient_name, candidates, ingredient.unit)
        # Unmatched names are remembered once so operators can resolve them
        if not match.is_unmatched or mapping is None:
            await mapping_store.upsert_mapping(match.to_mapping(store_id))

        return self._recipe_ingredient(
            ingredient,
            item_id=match.item.id if match.item else None,
            tier=match.tier,
            factor=match.conversion_factor,
        )

    def _remembered(
        self,
        ingredient: TemplateIngredient,
        mapping: IngredientMapping,
        item: InventoryItem,
    ) -> RecipeIngredient:
        """Apply a remembered mapping with the factor for this ingredient's unit."""
        try:
            factor = require_conversion(ingredient.unit, item.unit, mapping.conversion_factor)
        except UnitMismatchError:
            logger.warning(
                "unit_mismatch",
                store_id=mapping.store_id,
                ingredient=ingredient.ingredient_name,
                unit=ingredient.unit,
                item_id=item.id,
                item_unit=item.unit,
            )
            return self._recipe_ingredient(ingredient)
        return self._recipe_ingredient(
            ingredient, item_id=item.id, tier=mapping.confidence, factor=factor
        )

    @staticmethod
    def _recipe_ingredient(
        ingredient: TemplateIngredient,
        item_id: int | None = None,
        tier: MatchTier = MatchTier.MANUAL,
        factor: float = 1.0,
    ) -> RecipeIngredient:
        return RecipeIngredient(
            template_ingredient_id=ingredient.id,
            ingredient_name=ingredient.ingredient_name,
            quantity=ingredient.quantity,
            unit=ingredient.unit,
            cost_per_unit=ingredient.cost_per_unit,
            inventory_item_id=item_id,
            match_tier=tier,
            conversion_factor=factor,
        )

    def to_response(self, report: DeploymentReport) -> DeploymentReportResponse:
        return DeploymentReportResponse(
            template_id=report.template_id,
            deployed=report.count(OUTCOME_DEPLOYED),
            skipped=report.count(OUTCOME_SKIPPED),
            failed=report.count(OUTCOME_FAILED),
            results=[
                StoreDeploymentResponse(
                    store_id=r.store_id,
                    outcome=r.outcome,
                    recipe_id=r.recipe.id if r.recipe else None,
                    catalog_entry_id=r.catalog_entry.id if r.catalog_entry else None,
                    unmapped_ingredients=r.unmapped_ingredients,
                    message=r.message,
                )
                for r in report.results
            ],
        )
