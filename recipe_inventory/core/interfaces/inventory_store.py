"""Abstract interface for inventory storage."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime

from recipe_inventory.core.entities.inventory import (
    DeductionLine,
    InventoryItem,
    MovementType,
    StockMovement,
)


@dataclass
class SaleCommit:
    """Outcome of an atomic sale commit."""

    movements: list[StockMovement] = field(default_factory=list)
    already_processed: bool = False


class IInventoryStore(ABC):
    """Interface for inventory item and stock movement persistence."""

    @abstractmethod
    async def create_item(self, item: InventoryItem) -> InventoryItem:
        """Create a new inventory item."""
        pass

    @abstractmethod
    async def get_item(self, item_id: int) -> InventoryItem | None:
        """Get inventory item by ID."""
        pass

    @abstractmethod
    async def get_items(self, item_ids: list[int]) -> dict[int, InventoryItem]:
        """Get several inventory items keyed by ID; missing IDs are omitted."""
        pass

    @abstractmethod
    async def list_items(
        self,
        store_id: str,
        active_only: bool = False,
        limit: int = 500,
        offset: int = 0,
    ) -> list[InventoryItem]:
        """List a store's inventory items ordered by name."""
        pass

    @abstractmethod
    async def list_recipe_compatible(self, store_id: str) -> list[InventoryItem]:
        """List a store's active, recipe-compatible items (matcher candidates)."""
        pass

    @abstractmethod
    async def list_low_stock(self, store_id: str) -> list[InventoryItem]:
        """List active items where on_hand_quantity <= minimum_threshold."""
        pass

    @abstractmethod
    async def apply_movement(
        self,
        item_id: int,
        quantity_delta: float,
        movement_type: MovementType,
        reference: str | None = None,
        notes: str | None = None,
    ) -> tuple[InventoryItem, StockMovement]:
        """
        Atomically change an item's quantity and record the movement.

        Raises:
            InventoryItemNotFoundError: Unknown item
            NegativeStockError: The change would drive stock below zero
        """
        pass

    @abstractmethod
    async def commit_sale(
        self,
        lines: list[DeductionLine],
        transaction_reference: str,
        line_reference: str | None = None,
    ) -> SaleCommit:
        """
        Decrement every line in one exclusive transaction.

        Current quantities are re-read inside the transaction and re-checked;
        any shortage aborts the whole commit. A sale already recorded for
        (transaction_reference, line_reference) is reported as processed
        without deducting again.

        Raises:
            InsufficientStockError: Re-check found a shortage
            DeductionCommitError: A write failed; nothing was committed
        """
        pass

    @abstractmethod
    async def has_sale(self, transaction_reference: str, line_reference: str) -> bool:
        """True when a sale movement exists for this transaction line."""
        pass

    @abstractmethod
    async def reverse_sale(
        self,
        transaction_reference: str,
        line_reference: str | None = None,
    ) -> list[StockMovement]:
        """Compensate every not-yet-reversed sale movement of a transaction."""
        pass

    @abstractmethod
    async def list_movements(
        self,
        transaction_reference: str | None = None,
        inventory_item_id: int | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
        limit: int = 500,
    ) -> list[StockMovement]:
        """Query the movement ledger, newest first."""
        pass
