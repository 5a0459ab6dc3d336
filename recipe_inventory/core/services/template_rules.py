"""Validation rules for recipe template definitions."""

from recipe_inventory.core.entities.template import RecipeTemplate


def validate_definition(template: RecipeTemplate) -> list[str]:
    """
    Check a template definition before it is persisted.

    Returns every problem found; an empty list means the definition is valid.
    """
    problems: list[str] = []

    if not template.name or not template.name.strip():
        problems.append("name must not be empty")
    if template.yield_quantity <= 0:
        problems.append("yield_quantity must be greater than 0")
    if not template.ingredients:
        problems.append("at least one ingredient is required")

    for position, ingredient in enumerate(template.ingredients, start=1):
        label = ingredient.ingredient_name.strip() or f"#{position}"
        if not ingredient.ingredient_name.strip():
            problems.append(f"ingredient {label}: name must not be empty")
        if ingredient.quantity <= 0:
            problems.append(f"ingredient {label}: quantity must be greater than 0")
        if not ingredient.unit or not ingredient.unit.strip():
            problems.append(f"ingredient {label}: unit must not be empty")

    return problems
