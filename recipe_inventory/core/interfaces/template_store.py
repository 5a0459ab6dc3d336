"""Abstract interface for recipe template storage."""

from abc import ABC, abstractmethod

from recipe_inventory.core.entities.template import RecipeTemplate, TemplateIngredient


class ITemplateStore(ABC):
    """Interface for recipe template persistence."""

    @abstractmethod
    async def create_template(self, template: RecipeTemplate) -> RecipeTemplate:
        """Insert the template row only; ingredients are added separately."""
        pass

    @abstractmethod
    async def add_ingredient(
        self, template_id: int, ingredient: TemplateIngredient
    ) -> TemplateIngredient:
        """Insert one template ingredient row."""
        pass

    @abstractmethod
    async def mark_incomplete(self, template_id: int, reason: str) -> None:
        """Flag a template whose ingredients did not all persist."""
        pass

    @abstractmethod
    async def get_template(self, template_id: int) -> RecipeTemplate | None:
        """Get template with its ingredients, ordered by position."""
        pass

    @abstractmethod
    async def get_template_by_name(
        self, name: str, active_only: bool = True
    ) -> RecipeTemplate | None:
        """Get the latest template with this name (case-insensitive)."""
        pass

    @abstractmethod
    async def list_templates(
        self, active_only: bool = True, limit: int = 100, offset: int = 0
    ) -> list[RecipeTemplate]:
        """List templates without ingredients."""
        pass

    @abstractmethod
    async def replace_template(self, template: RecipeTemplate) -> RecipeTemplate:
        """Overwrite fields and ingredients, bumping the version."""
        pass

    @abstractmethod
    async def set_active(self, template_id: int, is_active: bool) -> None:
        """Flip the active flag."""
        pass
