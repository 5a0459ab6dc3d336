"""SQLite implementation of inventory storage."""

from datetime import datetime

import aiosqlite

from recipe_inventory.config import get_logger
from recipe_inventory.core.entities.inventory import (
    QUANTITY_EPSILON,
    DeductionLine,
    InventoryItem,
    MovementType,
    StockMovement,
)
from recipe_inventory.core.exceptions import (
    DeductionCommitError,
    InsufficientStockError,
    InventoryItemNotFoundError,
    NegativeStockError,
)
from recipe_inventory.core.interfaces.inventory_store import IInventoryStore, SaleCommit
from recipe_inventory.core.services.stock_check import find_shortages
from recipe_inventory.infrastructure.storage.sqlite.connection import (
    get_connection,
    get_transaction,
)
from recipe_inventory.infrastructure.storage.sqlite.rows import (
    now_utc,
    parse_datetime,
    placeholders,
    to_iso,
)

logger = get_logger(__name__)

REVERSAL_PREFIX = "reversal:"


class SQLiteInventoryStore(IInventoryStore):
    """SQLite implementation of inventory item and stock movement storage."""

    async def create_item(self, item: InventoryItem) -> InventoryItem:
        """Create a new inventory item."""
        now = now_utc()
        item.created_at = now
        item.updated_at = now
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO inventory_items (
                    store_id, name, unit, on_hand_quantity, minimum_threshold,
                    maximum_capacity, unit_cost, is_active, recipe_compatible,
                    created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    item.store_id,
                    item.name,
                    item.unit,
                    item.on_hand_quantity,
                    item.minimum_threshold,
                    item.maximum_capacity,
                    item.unit_cost,
                    int(item.is_active),
                    int(bool(item.recipe_compatible)),
                    to_iso(item.created_at),
                    to_iso(item.updated_at),
                ),
            )
            item.id = cursor.lastrowid
            logger.info(
                "inventory_item_created",
                item_id=item.id,
                store_id=item.store_id,
                name=item.name,
            )
            return item

    async def get_item(self, item_id: int) -> InventoryItem | None:
        """Get inventory item by ID."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM inventory_items WHERE id = ?", (item_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_inventory_item(row)

    async def get_items(self, item_ids: list[int]) -> dict[int, InventoryItem]:
        """Get several inventory items keyed by ID."""
        if not item_ids:
            return {}
        async with get_connection() as conn:
            return await self._fetch_items(conn, item_ids)

    async def list_items(
        self,
        store_id: str,
        active_only: bool = False,
        limit: int = 500,
        offset: int = 0,
    ) -> list[InventoryItem]:
        """List a store's inventory items ordered by name."""
        query = "SELECT * FROM inventory_items WHERE store_id = ?"
        if active_only:
            query += " AND is_active = 1"
        query += " ORDER BY name COLLATE NOCASE, id LIMIT ? OFFSET ?"
        async with get_connection() as conn:
            cursor = await conn.execute(query, (store_id, limit, offset))
            rows = await cursor.fetchall()
            return [self._row_to_inventory_item(row) for row in rows]

    async def list_recipe_compatible(self, store_id: str) -> list[InventoryItem]:
        """List a store's active, recipe-compatible items."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM inventory_items
                WHERE store_id = ? AND is_active = 1 AND recipe_compatible = 1
                ORDER BY name COLLATE NOCASE, id
                """,
                (store_id,),
            )
            rows = await cursor.fetchall()
            return [self._row_to_inventory_item(row) for row in rows]

    async def list_low_stock(self, store_id: str) -> list[InventoryItem]:
        """List active items at or below their minimum threshold."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM inventory_items
                WHERE store_id = ? AND is_active = 1
                  AND on_hand_quantity <= minimum_threshold
                ORDER BY name COLLATE NOCASE, id
                """,
                (store_id,),
            )
            rows = await cursor.fetchall()
            return [self._row_to_inventory_item(row) for row in rows]

    async def apply_movement(
        self,
        item_id: int,
        quantity_delta: float,
        movement_type: MovementType,
        reference: str | None = None,
        notes: str | None = None,
    ) -> tuple[InventoryItem, StockMovement]:
        """Atomically change an item's quantity and record the movement."""
        async with get_transaction(immediate=True) as conn:
            items = await self._fetch_items(conn, [item_id])
            item = items.get(item_id)
            if item is None:
                raise InventoryItemNotFoundError(item_id)

            previous = item.on_hand_quantity
            new_quantity = previous + quantity_delta
            if new_quantity < -QUANTITY_EPSILON:
                raise NegativeStockError(item_id, previous, quantity_delta)
            new_quantity = max(new_quantity, 0.0)

            now = now_utc()
            await conn.execute(
                "UPDATE inventory_items SET on_hand_quantity = ?, updated_at = ? WHERE id = ?",
                (new_quantity, to_iso(now), item_id),
            )
            movement = StockMovement(
                inventory_item_id=item_id,
                movement_type=movement_type,
                quantity_delta=new_quantity - previous,
                previous_quantity=previous,
                new_quantity=new_quantity,
                reference=reference,
                notes=notes,
                created_at=now,
            )
            movement = await self._insert_movement(conn, movement)

            item.on_hand_quantity = new_quantity
            item.updated_at = now
            logger.info(
                "stock_movement_recorded",
                movement_id=movement.id,
                item_id=item_id,
                type=movement_type.value,
                delta=movement.quantity_delta,
                new_quantity=new_quantity,
            )
            return item, movement

    async def commit_sale(
        self,
        lines: list[DeductionLine],
        transaction_reference: str,
        line_reference: str | None = None,
    ) -> SaleCommit:
        """Decrement every line in one BEGIN IMMEDIATE transaction."""
        total = len(lines)
        processed = 0
        try:
            async with get_transaction(immediate=True) as conn:
                if line_reference is not None and await self._sale_exists(
                    conn, transaction_reference, line_reference
                ):
                    logger.info(
                        "sale_already_processed",
                        transaction_reference=transaction_reference,
                        line_reference=line_reference,
                    )
                    return SaleCommit(already_processed=True)

                # Authoritative check against current quantities under the write lock
                current = await self._fetch_items(
                    conn, list({line.inventory_item_id for line in lines})
                )
                shortages = find_shortages(lines, current)
                if shortages:
                    raise InsufficientStockError(shortages)

                now = now_utc()
                movements: list[StockMovement] = []
                for line in lines:
                    previous = await self._read_quantity(conn, line.inventory_item_id)
                    await conn.execute(
                        """
                        UPDATE inventory_items
                        SET on_hand_quantity = MAX(0, on_hand_quantity - ?), updated_at = ?
                        WHERE id = ?
                        """,
                        (line.required, to_iso(now), line.inventory_item_id),
                    )
                    new_quantity = await self._read_quantity(conn, line.inventory_item_id)
                    movement = StockMovement(
                        inventory_item_id=line.inventory_item_id,
                        movement_type=MovementType.SALE,
                        quantity_delta=new_quantity - previous,
                        previous_quantity=previous,
                        new_quantity=new_quantity,
                        reference=transaction_reference,
                        line_reference=line_reference,
                        notes=f"Sale deduction: {line.ingredient_name}",
                        created_at=now,
                    )
                    movements.append(await self._insert_movement(conn, movement))
                    processed += 1

        except aiosqlite.Error as e:
            logger.error(
                "sale_commit_failed",
                transaction_reference=transaction_reference,
                processed=processed,
                total=total,
                error=str(e),
            )
            raise DeductionCommitError(str(e), processed, total) from e

        logger.info(
            "sale_committed",
            transaction_reference=transaction_reference,
            line_reference=line_reference,
            movements=len(movements),
        )
        return SaleCommit(movements=movements)

    async def has_sale(self, transaction_reference: str, line_reference: str) -> bool:
        """True when a sale movement exists for this transaction line."""
        async with get_connection() as conn:
            return await self._sale_exists(conn, transaction_reference, line_reference)

    async def reverse_sale(
        self,
        transaction_reference: str,
        line_reference: str | None = None,
    ) -> list[StockMovement]:
        """Compensate each not-yet-reversed sale movement with an adjustment."""
        query = (
            "SELECT * FROM stock_movements "
            "WHERE movement_type = 'sale' AND reference = ?"
        )
        params: list = [transaction_reference]
        if line_reference is not None:
            query += " AND line_reference = ?"
            params.append(line_reference)
        query += " ORDER BY id"

        reversals: list[StockMovement] = []
        async with get_transaction(immediate=True) as conn:
            cursor = await conn.execute(query, params)
            sales = [self._row_to_movement(row) for row in await cursor.fetchall()]

            now = now_utc()
            for sale in sales:
                key = f"{REVERSAL_PREFIX}{sale.id}"
                cursor = await conn.execute(
                    "SELECT 1 FROM stock_movements WHERE line_reference = ? LIMIT 1",
                    (key,),
                )
                if await cursor.fetchone():
                    continue

                restore = -sale.quantity_delta
                previous = await self._read_quantity(conn, sale.inventory_item_id)
                new_quantity = previous + restore
                await conn.execute(
                    "UPDATE inventory_items SET on_hand_quantity = ?, updated_at = ? WHERE id = ?",
                    (new_quantity, to_iso(now), sale.inventory_item_id),
                )
                movement = StockMovement(
                    inventory_item_id=sale.inventory_item_id,
                    movement_type=MovementType.ADJUSTMENT,
                    quantity_delta=restore,
                    previous_quantity=previous,
                    new_quantity=new_quantity,
                    reference=transaction_reference,
                    line_reference=key,
                    notes=f"Reversal of sale movement {sale.id}",
                    created_at=now,
                )
                reversals.append(await self._insert_movement(conn, movement))

        logger.info(
            "sale_reversed",
            transaction_reference=transaction_reference,
            line_reference=line_reference,
            reversed=len(reversals),
        )
        return reversals

    async def list_movements(
        self,
        transaction_reference: str | None = None,
        inventory_item_id: int | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
        limit: int = 500,
    ) -> list[StockMovement]:
        """Query the movement ledger, newest first."""
        clauses: list[str] = []
        params: list = []
        if transaction_reference is not None:
            clauses.append("reference = ?")
            params.append(transaction_reference)
        if inventory_item_id is not None:
            clauses.append("inventory_item_id = ?")
            params.append(inventory_item_id)
        if start is not None:
            clauses.append("created_at >= ?")
            params.append(to_iso(start))
        if end is not None:
            clauses.append("created_at <= ?")
            params.append(to_iso(end))

        query = "SELECT * FROM stock_movements"
        if clauses:
            query += " WHERE " + " AND ".join(clauses)
        query += " ORDER BY created_at DESC, id DESC LIMIT ?"
        params.append(limit)

        async with get_connection() as conn:
            cursor = await conn.execute(query, params)
            rows = await cursor.fetchall()
            return [self._row_to_movement(row) for row in rows]

    async def _fetch_items(
        self, conn: aiosqlite.Connection, item_ids: list[int]
    ) -> dict[int, InventoryItem]:
        cursor = await conn.execute(
            f"SELECT * FROM inventory_items WHERE id IN ({placeholders(len(item_ids))})",
            list(item_ids),
        )
        rows = await cursor.fetchall()
        return {row["id"]: self._row_to_inventory_item(row) for row in rows}

    @staticmethod
    async def _read_quantity(conn: aiosqlite.Connection, item_id: int) -> float:
        cursor = await conn.execute(
            "SELECT on_hand_quantity FROM inventory_items WHERE id = ?", (item_id,)
        )
        row = await cursor.fetchone()
        if row is None:
            raise InventoryItemNotFoundError(item_id)
        return float(row[0])

    @staticmethod
    async def _sale_exists(
        conn: aiosqlite.Connection, transaction_reference: str, line_reference: str
    ) -> bool:
        cursor = await conn.execute(
            """
            SELECT 1 FROM stock_movements
            WHERE movement_type = 'sale' AND reference = ? AND line_reference = ?
            LIMIT 1
            """,
            (transaction_reference, line_reference),
        )
        return await cursor.fetchone() is not None

    @staticmethod
    async def _insert_movement(
        conn: aiosqlite.Connection, movement: StockMovement
    ) -> StockMovement:
        cursor = await conn.execute(
            """
            INSERT INTO stock_movements (
                inventory_item_id, movement_type, quantity_delta,
                previous_quantity, new_quantity, reference, line_reference,
                notes, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                movement.inventory_item_id,
                movement.movement_type.value,
                movement.quantity_delta,
                movement.previous_quantity,
                movement.new_quantity,
                movement.reference,
                movement.line_reference,
                movement.notes,
                to_iso(movement.created_at),
            ),
        )
        movement.id = cursor.lastrowid
        return movement

    @staticmethod
    def _row_to_inventory_item(row: aiosqlite.Row) -> InventoryItem:
        """Convert a database row to an InventoryItem entity."""
        return InventoryItem(
            id=row["id"],
            store_id=row["store_id"],
            name=row["name"],
            unit=row["unit"],
            on_hand_quantity=float(row["on_hand_quantity"]),
            minimum_threshold=float(row["minimum_threshold"]),
            maximum_capacity=(
                float(row["maximum_capacity"]) if row["maximum_capacity"] is not None else None
            ),
            unit_cost=float(row["unit_cost"]),
            is_active=bool(row["is_active"]),
            recipe_compatible=bool(row["recipe_compatible"]),
            created_at=parse_datetime(row["created_at"]),
            updated_at=parse_datetime(row["updated_at"]),
        )

    @staticmethod
    def _row_to_movement(row: aiosqlite.Row) -> StockMovement:
        """Convert a database row to a StockMovement entity."""
        return StockMovement(
            id=row["id"],
            inventory_item_id=row["inventory_item_id"],
            movement_type=MovementType(row["movement_type"]),
            quantity_delta=float(row["quantity_delta"]),
            previous_quantity=float(row["previous_quantity"]),
            new_quantity=float(row["new_quantity"]),
            reference=row["reference"],
            line_reference=row["line_reference"],
            notes=row["notes"],
            created_at=parse_datetime(row["created_at"]),
        )
