"""Update and Deactivate Template use cases."""

from recipe_inventory.application.dto.requests import UpdateTemplateRequest
from recipe_inventory.application.use_cases.create_template import template_from_request
from recipe_inventory.config import get_logger
from recipe_inventory.core.entities.template import RecipeTemplate
from recipe_inventory.core.exceptions import TemplateNotFoundError, TemplateValidationError
from recipe_inventory.core.interfaces.template_store import ITemplateStore
from recipe_inventory.core.services.template_rules import validate_definition

logger = get_logger(__name__)


class UpdateTemplateUseCase:
    """Replace a template's definition and bump its version."""

    def __init__(self, template_store: ITemplateStore | None = None):
        self._template_store = template_store

    async def _get_template_store(self) -> ITemplateStore:
        if self._template_store is None:
            from recipe_inventory.infrastructure.storage.sqlite import get_template_store

            self._template_store = await get_template_store()
        return self._template_store

    async def execute(self, template_id: int, request: UpdateTemplateRequest) -> RecipeTemplate:
        return await self.replace(template_id, template_from_request(request))

    async def replace(self, template_id: int, definition: RecipeTemplate) -> RecipeTemplate:
        """
        Overwrite a template with a new definition.

        Existing store recipes keep their copy and template_version, so
        history stays traceable.

        Raises:
            TemplateNotFoundError: Unknown template
            TemplateValidationError: The definition failed validation
        """
        problems = validate_definition(definition)
        if problems:
            raise TemplateValidationError(definition.name, problems)

        store = await self._get_template_store()
        current = await store.get_template(template_id)
        if current is None:
            raise TemplateNotFoundError(template_id)

        definition.id = template_id
        definition.is_active = current.is_active
        definition.created_at = current.created_at
        for position, ingredient in enumerate(definition.ingredients):
            ingredient.position = position
        definition.total_cost = definition.compute_total_cost()

        updated = await store.replace_template(definition)
        logger.info(
            "template_version_bumped",
            template_id=template_id,
            previous_version=current.version,
            version=updated.version,
        )
        return updated


class DeactivateTemplateUseCase:
    """Retire a template without deleting it or its deployments."""

    def __init__(self, template_store: ITemplateStore | None = None):
        self._template_store = template_store

    async def _get_template_store(self) -> ITemplateStore:
        if self._template_store is None:
            from recipe_inventory.infrastructure.storage.sqlite import get_template_store

            self._template_store = await get_template_store()
        return self._template_store

    async def execute(self, template_id: int) -> RecipeTemplate:
        store = await self._get_template_store()
        template = await store.get_template(template_id)
        if template is None:
            raise TemplateNotFoundError(template_id)

        if template.is_active:
            await store.set_active(template_id, False)
            template.is_active = False
            logger.info("template_deactivated", template_id=template_id)
        return template
