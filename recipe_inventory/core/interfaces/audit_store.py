"""Abstract interfaces for sync audit and replenishment storage."""

from abc import ABC, abstractmethod

from recipe_inventory.core.entities.audit import (
    ReplenishmentRequest,
    ReplenishmentStatus,
    SyncAuditEntry,
)


class ISyncAuditStore(ABC):
    """Interface for deduction sync audit persistence."""

    @abstractmethod
    async def record(self, entry: SyncAuditEntry) -> SyncAuditEntry:
        """Append an audit entry."""
        pass

    @abstractmethod
    async def list_entries(
        self, transaction_reference: str | None = None, limit: int = 100
    ) -> list[SyncAuditEntry]:
        """List entries, newest first, optionally for one transaction."""
        pass


class IReplenishmentStore(ABC):
    """Interface for replenishment request persistence."""

    @abstractmethod
    async def create_request(self, request: ReplenishmentRequest) -> ReplenishmentRequest:
        """Insert a request and its items in one transaction."""
        pass

    @abstractmethod
    async def list_requests(
        self, store_id: str, status: ReplenishmentStatus | None = None
    ) -> list[ReplenishmentRequest]:
        """List a store's requests with items, newest first."""
        pass

    @abstractmethod
    async def pending_item_ids(self, store_id: str) -> set[int]:
        """IDs of inventory items already covered by a pending request."""
        pass
