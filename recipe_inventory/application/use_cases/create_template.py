"""Create Template use case: validate, persist, surface partial success."""

from dataclasses import dataclass, field

from recipe_inventory.application.dto.converters import template_to_response
from recipe_inventory.application.dto.requests import CreateTemplateRequest
from recipe_inventory.application.dto.responses import CreateTemplateResponse
from recipe_inventory.config import get_logger
from recipe_inventory.core.entities.template import RecipeTemplate, TemplateIngredient
from recipe_inventory.core.exceptions import StorageError, TemplateValidationError
from recipe_inventory.core.interfaces.template_store import ITemplateStore
from recipe_inventory.core.services.template_rules import validate_definition

logger = get_logger(__name__)

OUTCOME_CREATED = "created"
OUTCOME_PARTIAL = "partial"


def template_from_request(request: CreateTemplateRequest) -> RecipeTemplate:
    """Build an unsaved template definition from an API request."""
    return RecipeTemplate(
        name=request.name.strip(),
        category_name=request.category_name.strip() if request.category_name else None,
        description=request.description,
        instructions=request.instructions,
        yield_quantity=request.yield_quantity,
        serving_size=request.serving_size,
        suggested_price=request.suggested_price,
        ingredients=[
            TemplateIngredient(
                position=position,
                ingredient_name=ing.ingredient_name.strip(),
                quantity=ing.quantity,
                unit=ing.unit.strip(),
                cost_per_unit=ing.cost_per_unit,
                ingredient_category=ing.ingredient_category,
            )
            for position, ing in enumerate(request.ingredients)
        ],
    )


@dataclass
class CreateTemplateResult:
    """Persisted template plus any ingredient rows that failed to save."""

    template: RecipeTemplate
    outcome: str = OUTCOME_CREATED
    warnings: list[str] = field(default_factory=list)

    @property
    def is_partial(self) -> bool:
        return self.outcome == OUTCOME_PARTIAL


class CreateTemplateUseCase:
    """
    Persist a template and its ingredients as one logical unit.

    If an ingredient row fails to persist, the template row stays in place
    flagged incomplete and the result is reported as partial rather than
    raised, so bulk imports can keep going.
    """

    def __init__(self, template_store: ITemplateStore | None = None):
        self._template_store = template_store

    async def _get_template_store(self) -> ITemplateStore:
        if self._template_store is None:
            from recipe_inventory.infrastructure.storage.sqlite import get_template_store

            self._template_store = await get_template_store()
        return self._template_store

    async def execute(self, request: CreateTemplateRequest) -> CreateTemplateResult:
        """Create a template from an API request."""
        return await self.create(template_from_request(request))

    async def create(self, template: RecipeTemplate) -> CreateTemplateResult:
        """
        Validate and persist a template definition.

        Raises:
            TemplateValidationError: The definition failed validation
        """
        problems = validate_definition(template)
        if problems:
            raise TemplateValidationError(template.name, problems)

        store = await self._get_template_store()
        ingredients = list(template.ingredients)
        template.total_cost = template.compute_total_cost()
        template.is_complete = True
        template.incomplete_reason = None

        template = await store.create_template(template)

        saved: list[TemplateIngredient] = []
        failures: list[str] = []
        for position, ingredient in enumerate(ingredients):
            ingredient.position = position
            try:
                saved.append(await store.add_ingredient(template.id, ingredient))
            except StorageError as e:
                failures.append(f"{ingredient.ingredient_name}: {e.message}")
                logger.warning(
                    "template_ingredient_failed",
                    template_id=template.id,
                    ingredient=ingredient.ingredient_name,
                    error=e.message,
                )
        template.ingredients = saved

        if failures:
            reason = f"{len(failures)} of {len(ingredients)} ingredients failed to save"
            await store.mark_incomplete(template.id, reason)
            template.is_complete = False
            template.incomplete_reason = reason
            return CreateTemplateResult(
                template=template, outcome=OUTCOME_PARTIAL, warnings=failures
            )

        logger.info(
            "template_created_complete",
            template_id=template.id,
            ingredients=len(saved),
            total_cost=template.total_cost,
        )
        return CreateTemplateResult(template=template)

    def to_response(self, result: CreateTemplateResult) -> CreateTemplateResponse:
        return CreateTemplateResponse(
            outcome=result.outcome,
            template=template_to_response(result.template),
            warnings=result.warnings,
        )
