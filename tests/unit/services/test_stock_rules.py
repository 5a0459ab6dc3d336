"""Unit tests for template validation and shortage detection."""

from recipe_inventory.core.entities.inventory import DeductionLine, InventoryItem
from recipe_inventory.core.entities.template import RecipeTemplate, TemplateIngredient
from recipe_inventory.core.services.stock_check import find_shortages
from recipe_inventory.core.services.template_rules import validate_definition


def _line(item_id: int, name: str, required: float) -> DeductionLine:
    return DeductionLine(inventory_item_id=item_id, ingredient_name=name, required=required)


def _item(item_id: int, qty: float, **kwargs) -> InventoryItem:
    return InventoryItem(
        id=item_id, store_id="s1", name=f"Item {item_id}", unit="ml", on_hand_quantity=qty, **kwargs
    )


class TestFindShortages:
    def test_sufficient_stock(self):
        assert find_shortages([_line(1, "Milk", 100)], {1: _item(1, 100)}) == []

    def test_shortage_reported(self):
        shortages = find_shortages([_line(1, "Milk", 120)], {1: _item(1, 100)})
        assert len(shortages) == 1
        assert shortages[0].ingredient == "Milk"
        assert shortages[0].required == 120
        assert shortages[0].available == 100

    def test_lines_on_same_item_are_summed(self):
        lines = [_line(1, "Milk", 60), _line(1, "Milk foam", 60)]
        shortages = find_shortages(lines, {1: _item(1, 100)})
        assert shortages[0].ingredient == "Milk / Milk foam"
        assert shortages[0].required == 120

    def test_missing_item_counts_as_zero(self):
        shortages = find_shortages([_line(9, "Vanilla", 5)], {})
        assert shortages[0].available == 0.0
        assert shortages[0].unit is None

    def test_inactive_item_counts_as_zero(self):
        shortages = find_shortages([_line(1, "Milk", 5)], {1: _item(1, 100, is_active=False)})
        assert shortages[0].available == 0.0


class TestValidateDefinition:
    def _template(self, **kwargs) -> RecipeTemplate:
        defaults = {
            "name": "Latte",
            "ingredients": [TemplateIngredient(ingredient_name="Milk", quantity=200, unit="ml")],
        }
        defaults.update(kwargs)
        return RecipeTemplate(**defaults)

    def test_valid(self):
        assert validate_definition(self._template()) == []

    def test_empty_name(self):
        assert "name must not be empty" in validate_definition(self._template(name="  "))

    def test_no_ingredients(self):
        problems = validate_definition(self._template(ingredients=[]))
        assert problems == ["at least one ingredient is required"]

    def test_non_positive_yield(self):
        problems = validate_definition(self._template(yield_quantity=0))
        assert "yield_quantity must be greater than 0" in problems

    def test_bad_ingredient_rows(self):
        template = self._template(
            ingredients=[
                TemplateIngredient(ingredient_name="Milk", quantity=0, unit="ml"),
                TemplateIngredient(ingredient_name="", quantity=1, unit=""),
            ]
        )
        problems = validate_definition(template)
        assert "ingredient Milk: quantity must be greater than 0" in problems
        assert "ingredient #2: name must not be empty" in problems
        assert "ingredient #2: unit must not be empty" in problems
