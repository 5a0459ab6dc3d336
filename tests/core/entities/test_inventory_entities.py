"""Tests for inventory entities."""

import pytest
from pydantic import ValidationError

from recipe_inventory.core.entities.inventory import (
    DeductionLine,
    InventoryItem,
    MovementType,
    Shortage,
    StockMovement,
)


class TestInventoryItem:
    def test_defaults(self):
        item = InventoryItem(store_id="s1", name="Milk", unit="ml")
        assert item.on_hand_quantity == 0.0
        assert item.is_active is True
        assert item.recipe_compatible is True

    @pytest.mark.parametrize("unit", ["box", "Boxes", " pack ", "PACKS"])
    def test_box_and_pack_units_not_recipe_compatible(self, unit):
        item = InventoryItem(store_id="s1", name="Cups", unit=unit)
        assert item.recipe_compatible is False

    def test_explicit_recipe_compatible_wins(self):
        item = InventoryItem(store_id="s1", name="Sugar sachets", unit="box", recipe_compatible=True)
        assert item.recipe_compatible is True

    def test_negative_quantity_rejected(self):
        with pytest.raises(ValidationError):
            InventoryItem(store_id="s1", name="Milk", unit="ml", on_hand_quantity=-1)

    def test_is_low_stock_at_threshold(self):
        item = InventoryItem(
            store_id="s1", name="Milk", unit="ml", on_hand_quantity=10, minimum_threshold=10
        )
        assert item.is_low_stock is True

    def test_not_low_above_threshold(self):
        item = InventoryItem(
            store_id="s1", name="Milk", unit="ml", on_hand_quantity=11, minimum_threshold=10
        )
        assert item.is_low_stock is False

    def test_reorder_quantity_refills_to_capacity(self):
        item = InventoryItem(
            store_id="s1", name="Milk", unit="ml", on_hand_quantity=30, maximum_capacity=100
        )
        assert item.reorder_quantity(default=50) == 70

    def test_reorder_quantity_default_without_capacity(self):
        item = InventoryItem(store_id="s1", name="Milk", unit="ml", on_hand_quantity=30)
        assert item.reorder_quantity(default=50) == 50

    def test_reorder_quantity_never_negative(self):
        item = InventoryItem(
            store_id="s1", name="Milk", unit="ml", on_hand_quantity=120, maximum_capacity=100
        )
        assert item.reorder_quantity(default=50) == 0.0


class TestStockMovement:
    def test_valid_arithmetic(self):
        movement = StockMovement(
            inventory_item_id=1,
            movement_type=MovementType.SALE,
            quantity_delta=-20,
            previous_quantity=100,
            new_quantity=80,
        )
        assert movement.new_quantity == 80

    def test_inconsistent_arithmetic_rejected(self):
        with pytest.raises(ValidationError, match="new_quantity"):
            StockMovement(
                inventory_item_id=1,
                movement_type=MovementType.SALE,
                quantity_delta=-20,
                previous_quantity=100,
                new_quantity=90,
            )

    def test_negative_result_rejected(self):
        with pytest.raises(ValidationError):
            StockMovement(
                inventory_item_id=1,
                movement_type=MovementType.ADJUSTMENT,
                quantity_delta=-20,
                previous_quantity=10,
                new_quantity=-10,
            )

    def test_float_drift_tolerated(self):
        movement = StockMovement(
            inventory_item_id=1,
            movement_type=MovementType.SALE,
            quantity_delta=-0.1,
            previous_quantity=0.3,
            new_quantity=0.3 - 0.1,
        )
        assert movement.movement_type == MovementType.SALE


class TestShortage:
    def test_missing(self):
        shortage = Shortage(ingredient="Milk", required=120, available=100)
        assert shortage.missing == 20


class TestDeductionLine:
    def test_required_must_be_positive(self):
        with pytest.raises(ValidationError):
            DeductionLine(inventory_item_id=1, ingredient_name="Milk", required=0)
