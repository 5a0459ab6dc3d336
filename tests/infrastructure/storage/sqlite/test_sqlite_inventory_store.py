"""Tests for SQLiteInventoryStore against a migrated temporary database."""

import asyncio

import pytest

from recipe_inventory.core.entities.inventory import DeductionLine, InventoryItem, MovementType
from recipe_inventory.core.exceptions import (
    InsufficientStockError,
    InventoryItemNotFoundError,
    NegativeStockError,
)
from recipe_inventory.core.interfaces.inventory_store import SaleCommit
from recipe_inventory.infrastructure.storage.sqlite.inventory_store import SQLiteInventoryStore


@pytest.fixture
async def store(db) -> SQLiteInventoryStore:
    return SQLiteInventoryStore()


async def _create(store: SQLiteInventoryStore, name: str, qty: float, **kwargs) -> InventoryItem:
    defaults = {"store_id": "store-a", "unit": "ml", "minimum_threshold": 10}
    defaults.update(kwargs)
    return await store.create_item(InventoryItem(name=name, on_hand_quantity=qty, **defaults))


def _line(item: InventoryItem, required: float) -> DeductionLine:
    return DeductionLine(inventory_item_id=item.id, ingredient_name=item.name, required=required)


class TestItems:
    async def test_create_and_get(self, store):
        item = await _create(store, "Milk", 100)
        assert item.id is not None

        loaded = await store.get_item(item.id)
        assert loaded.name == "Milk"
        assert loaded.on_hand_quantity == 100
        assert loaded.recipe_compatible is True

    async def test_get_items_omits_unknown(self, store):
        milk = await _create(store, "Milk", 100)
        items = await store.get_items([milk.id, 9999])
        assert list(items) == [milk.id]

    async def test_list_recipe_compatible_excludes_boxes(self, store):
        await _create(store, "Milk", 100)
        await _create(store, "Cups", 10, unit="box")
        await _create(store, "Sugar", 10, store_id="store-b")

        names = [i.name for i in await store.list_recipe_compatible("store-a")]
        assert names == ["Milk"]

    async def test_list_low_stock(self, store):
        await _create(store, "Milk", 100)
        await _create(store, "Cream", 10)
        names = [i.name for i in await store.list_low_stock("store-a")]
        assert names == ["Cream"]


class TestApplyMovement:
    async def test_receipt(self, store):
        milk = await _create(store, "Milk", 100)
        item, movement = await store.apply_movement(milk.id, 50, MovementType.RECEIPT, reference="PO-1")

        assert item.on_hand_quantity == 150
        assert movement.previous_quantity == 100
        assert movement.new_quantity == 150
        assert movement.movement_type == MovementType.RECEIPT

    async def test_negative_adjustment_rejected(self, store):
        milk = await _create(store, "Milk", 5)
        with pytest.raises(NegativeStockError):
            await store.apply_movement(milk.id, -10, MovementType.ADJUSTMENT)
        assert (await store.get_item(milk.id)).on_hand_quantity == 5

    async def test_unknown_item(self, store):
        with pytest.raises(InventoryItemNotFoundError):
            await store.apply_movement(404, 1, MovementType.RECEIPT)


class TestCommitSale:
    async def test_decrements_all_lines(self, store):
        croissant = await _create(store, "Croissant", 50, unit="pieces")
        cream = await _create(store, "Cream", 50, unit="g")

        commit = await store.commit_sale(
            [_line(croissant, 1), _line(cream, 1)], "TX-1", "entry:1"
        )

        assert len(commit.movements) == 2
        assert {m.new_quantity for m in commit.movements} == {49}
        assert all(m.movement_type == MovementType.SALE for m in commit.movements)
        assert (await store.get_item(croissant.id)).on_hand_quantity == 49
        assert (await store.get_item(cream.id)).on_hand_quantity == 49

    async def test_shortage_leaves_stock_untouched(self, store):
        milk = await _create(store, "Milk", 100)
        sugar = await _create(store, "Sugar", 100, unit="g")

        with pytest.raises(InsufficientStockError) as exc_info:
            await store.commit_sale([_line(sugar, 10), _line(milk, 120)], "TX-2", "entry:1")

        assert exc_info.value.shortages[0].ingredient == "Milk"
        assert (await store.get_item(milk.id)).on_hand_quantity == 100
        assert (await store.get_item(sugar.id)).on_hand_quantity == 100
        assert await store.list_movements(transaction_reference="TX-2") == []

    async def test_same_line_committed_once(self, store):
        milk = await _create(store, "Milk", 100)

        first = await store.commit_sale([_line(milk, 10)], "TX-3", "entry:1")
        second = await store.commit_sale([_line(milk, 10)], "TX-3", "entry:1")

        assert first.already_processed is False
        assert second.already_processed is True
        assert (await store.get_item(milk.id)).on_hand_quantity == 90
        assert await store.has_sale("TX-3", "entry:1") is True
        assert await store.has_sale("TX-3", "entry:2") is False

    async def test_other_line_of_same_transaction(self, store):
        milk = await _create(store, "Milk", 100)
        await store.commit_sale([_line(milk, 10)], "TX-4", "entry:1")
        commit = await store.commit_sale([_line(milk, 10)], "TX-4", "entry:2")

        assert commit.already_processed is False
        assert (await store.get_item(milk.id)).on_hand_quantity == 80


class TestReverseSale:
    async def test_restores_stock_once(self, store):
        milk = await _create(store, "Milk", 100)
        await store.commit_sale([_line(milk, 30)], "TX-5", "entry:1")

        reversed_first = await store.reverse_sale("TX-5")
        reversed_again = await store.reverse_sale("TX-5")

        assert len(reversed_first) == 1
        assert reversed_first[0].movement_type == MovementType.ADJUSTMENT
        assert reversed_first[0].quantity_delta == 30
        assert reversed_again == []
        assert (await store.get_item(milk.id)).on_hand_quantity == 100

    async def test_single_line(self, store):
        milk = await _create(store, "Milk", 100)
        await store.commit_sale([_line(milk, 10)], "TX-6", "entry:1")
        await store.commit_sale([_line(milk, 20)], "TX-6", "entry:2")

        reversals = await store.reverse_sale("TX-6", "entry:2")

        assert [m.quantity_delta for m in reversals] == [20]
        assert (await store.get_item(milk.id)).on_hand_quantity == 90


class TestListMovements:
    async def test_filters(self, store):
        milk = await _create(store, "Milk", 100)
        sugar = await _create(store, "Sugar", 100, unit="g")
        await store.apply_movement(milk.id, 5, MovementType.RECEIPT)
        await store.commit_sale([_line(sugar, 5)], "TX-7", "entry:1")

        assert len(await store.list_movements(inventory_item_id=milk.id)) == 1
        by_tx = await store.list_movements(transaction_reference="TX-7")
        assert [m.inventory_item_id for m in by_tx] == [sugar.id]


class TestConcurrentSales:
    async def test_last_unit_sold_once(self, store):
        cake = await _create(store, "Cheesecake Slice", 1, unit="pieces", minimum_threshold=0)

        outcomes = await asyncio.gather(
            *(
                store.commit_sale([_line(cake, 1)], f"TX-{n}", "entry:1")
                for n in range(5)
            ),
            return_exceptions=True,
        )

        committed = [o for o in outcomes if isinstance(o, SaleCommit)]
        rejected = [o for o in outcomes if isinstance(o, InsufficientStockError)]
        assert len(committed) == 1
        assert len(rejected) == 4
        assert (await store.get_item(cake.id)).on_hand_quantity == 0
        movements = await store.list_movements(inventory_item_id=cake.id)
        assert [m.movement_type for m in movements] == [MovementType.SALE]

    async def test_concurrent_retries_of_one_line(self, store):
        milk = await _create(store, "Milk", 100)

        outcomes = await asyncio.gather(
            *(store.commit_sale([_line(milk, 10)], "TX-9", "line:1") for _ in range(4))
        )

        assert sum(1 for o in outcomes if not o.already_processed) == 1
        assert (await store.get_item(milk.id)).on_hand_quantity == 90
