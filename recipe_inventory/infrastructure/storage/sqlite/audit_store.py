"""SQLite implementations of sync audit and replenishment storage."""

import aiosqlite

from recipe_inventory.config import get_logger
from recipe_inventory.core.entities.audit import (
    ReplenishmentItem,
    ReplenishmentRequest,
    ReplenishmentStatus,
    SyncAuditEntry,
    SyncStatus,
)
from recipe_inventory.core.interfaces.audit_store import (
    IReplenishmentStore,
    ISyncAuditStore,
)
from recipe_inventory.infrastructure.storage.sqlite.connection import (
    get_connection,
    get_transaction,
)
from recipe_inventory.infrastructure.storage.sqlite.rows import (
    now_utc,
    parse_datetime,
    to_iso,
)

logger = get_logger(__name__)


class SQLiteSyncAuditStore(ISyncAuditStore):
    """Append-only deduction audit log."""

    async def record(self, entry: SyncAuditEntry) -> SyncAuditEntry:
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO inventory_sync_audit (
                    transaction_reference, line_reference, status,
                    items_processed, error_details, duration_ms, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    entry.transaction_reference,
                    entry.line_reference,
                    entry.status.value,
                    entry.items_processed,
                    entry.error_details,
                    entry.duration_ms,
                    to_iso(entry.created_at),
                ),
            )
            entry.id = cursor.lastrowid
        logger.debug(
            "sync_audit_recorded",
            audit_id=entry.id,
            transaction_reference=entry.transaction_reference,
            status=entry.status.value,
        )
        return entry

    async def list_entries(
        self, transaction_reference: str | None = None, limit: int = 100
    ) -> list[SyncAuditEntry]:
        query = "SELECT * FROM inventory_sync_audit"
        params: list = []
        if transaction_reference is not None:
            query += " WHERE transaction_reference = ?"
            params.append(transaction_reference)
        query += " ORDER BY created_at DESC, id DESC LIMIT ?"
        params.append(limit)

        async with get_connection() as conn:
            cursor = await conn.execute(query, params)
            rows = await cursor.fetchall()
            return [
                SyncAuditEntry(
                    id=row["id"],
                    transaction_reference=row["transaction_reference"],
                    line_reference=row["line_reference"],
                    status=SyncStatus(row["status"]),
                    items_processed=row["items_processed"],
                    error_details=row["error_details"],
                    duration_ms=row["duration_ms"],
                    created_at=parse_datetime(row["created_at"]),
                )
                for row in rows
            ]


class SQLiteReplenishmentStore(IReplenishmentStore):
    """Replenishment requests raised by the reorder trigger."""

    async def create_request(self, request: ReplenishmentRequest) -> ReplenishmentRequest:
        request.created_at = now_utc()
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO replenishment_requests (store_id, status, notes, created_at)
                VALUES (?, ?, ?, ?)
                """,
                (
                    request.store_id,
                    request.status.value,
                    request.notes,
                    to_iso(request.created_at),
                ),
            )
            request.id = cursor.lastrowid

            for item in request.items:
                item.request_id = request.id
                cursor = await conn.execute(
                    """
                    INSERT INTO replenishment_request_items (
                        request_id, inventory_item_id, item_name, unit,
                        current_quantity, minimum_threshold, requested_quantity
                    ) VALUES (?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        request.id,
                        item.inventory_item_id,
                        item.item_name,
                        item.unit,
                        item.current_quantity,
                        item.minimum_threshold,
                        item.requested_quantity,
                    ),
                )
                item.id = cursor.lastrowid

        logger.info(
            "replenishment_request_created",
            request_id=request.id,
            store_id=request.store_id,
            items=len(request.items),
        )
        return request

    async def list_requests(
        self, store_id: str, status: ReplenishmentStatus | None = None
    ) -> list[ReplenishmentRequest]:
        query = "SELECT * FROM replenishment_requests WHERE store_id = ?"
        params: list = [store_id]
        if status is not None:
            query += " AND status = ?"
            params.append(status.value)
        query += " ORDER BY created_at DESC, id DESC"

        async with get_connection() as conn:
            cursor = await conn.execute(query, params)
            requests = [
                ReplenishmentRequest(
                    id=row["id"],
                    store_id=row["store_id"],
                    status=ReplenishmentStatus(row["status"]),
                    notes=row["notes"],
                    created_at=parse_datetime(row["created_at"]),
                )
                for row in await cursor.fetchall()
            ]
            for request in requests:
                request.items = await self._load_items(conn, request.id)
            return requests

    async def pending_item_ids(self, store_id: str) -> set[int]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT DISTINCT i.inventory_item_id
                FROM replenishment_request_items i
                JOIN replenishment_requests r ON r.id = i.request_id
                WHERE r.store_id = ? AND r.status = 'pending'
                """,
                (store_id,),
            )
            return {row[0] for row in await cursor.fetchall()}

    @staticmethod
    async def _load_items(
        conn: aiosqlite.Connection, request_id: int
    ) -> list[ReplenishmentItem]:
        cursor = await conn.execute(
            "SELECT * FROM replenishment_request_items WHERE request_id = ? ORDER BY id",
            (request_id,),
        )
        return [
            ReplenishmentItem(
                id=row["id"],
                request_id=row["request_id"],
                inventory_item_id=row["inventory_item_id"],
                item_name=row["item_name"],
                unit=row["unit"],
                current_quantity=float(row["current_quantity"]),
                minimum_threshold=float(row["minimum_threshold"]),
                requested_quantity=float(row["requested_quantity"]),
            )
            for row in await cursor.fetchall()
        ]
