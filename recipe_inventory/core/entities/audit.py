"""Sync audit and replenishment entities."""

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, Field


class SyncStatus(str, Enum):
    """Outcome of one deduction call."""

    SUCCESS = "success"
    FAILED = "failed"


class SyncAuditEntry(BaseModel):
    """Reconciliation record written for every deduction attempt."""

    id: int | None = None
    transaction_reference: str
    line_reference: str | None = None
    status: SyncStatus
    items_processed: int = 0
    error_details: str | None = None
    duration_ms: int = 0
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class ReplenishmentStatus(str, Enum):
    """Lifecycle of a replenishment request."""

    PENDING = "pending"
    ORDERED = "ordered"
    RECEIVED = "received"
    CANCELLED = "cancelled"


class ReplenishmentItem(BaseModel):
    """One item line of a replenishment request."""

    id: int | None = None
    request_id: int | None = None
    inventory_item_id: int
    item_name: str
    unit: str | None = None
    current_quantity: float
    minimum_threshold: float = 0.0
    requested_quantity: float


class ReplenishmentRequest(BaseModel):
    """Batched request to restock every low item of a store."""

    id: int | None = None
    store_id: str
    status: ReplenishmentStatus = ReplenishmentStatus.PENDING
    notes: str | None = None
    items: list[ReplenishmentItem] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
