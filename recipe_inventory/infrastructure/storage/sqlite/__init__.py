"""SQLite storage implementations."""

from recipe_inventory.infrastructure.storage.sqlite.audit_store import (
    SQLiteReplenishmentStore,
    SQLiteSyncAuditStore,
)
from recipe_inventory.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)
from recipe_inventory.infrastructure.storage.sqlite.inventory_store import (
    SQLiteInventoryStore,
)
from recipe_inventory.infrastructure.storage.sqlite.mapping_store import SQLiteMappingStore
from recipe_inventory.infrastructure.storage.sqlite.recipe_store import SQLiteRecipeStore
from recipe_inventory.infrastructure.storage.sqlite.template_store import (
    SQLiteTemplateStore,
)

# Singleton instances
_inventory_store: SQLiteInventoryStore | None = None
_template_store: SQLiteTemplateStore | None = None
_recipe_store: SQLiteRecipeStore | None = None
_mapping_store: SQLiteMappingStore | None = None
_sync_audit_store: SQLiteSyncAuditStore | None = None
_replenishment_store: SQLiteReplenishmentStore | None = None


async def get_inventory_store() -> SQLiteInventoryStore:
    """Get singleton inventory store instance."""
    global _inventory_store
    if _inventory_store is None:
        _inventory_store = SQLiteInventoryStore()
    return _inventory_store


async def get_template_store() -> SQLiteTemplateStore:
    """Get singleton template store instance."""
    global _template_store
    if _template_store is None:
        _template_store = SQLiteTemplateStore()
    return _template_store


async def get_recipe_store() -> SQLiteRecipeStore:
    """Get singleton recipe store instance."""
    global _recipe_store
    if _recipe_store is None:
        _recipe_store = SQLiteRecipeStore()
    return _recipe_store


async def get_mapping_store() -> SQLiteMappingStore:
    """Get singleton mapping store instance."""
    global _mapping_store
    if _mapping_store is None:
        _mapping_store = SQLiteMappingStore()
    return _mapping_store


async def get_sync_audit_store() -> SQLiteSyncAuditStore:
    """Get singleton sync audit store instance."""
    global _sync_audit_store
    if _sync_audit_store is None:
        _sync_audit_store = SQLiteSyncAuditStore()
    return _sync_audit_store


async def get_replenishment_store() -> SQLiteReplenishmentStore:
    """Get singleton replenishment store instance."""
    global _replenishment_store
    if _replenishment_store is None:
        _replenishment_store = SQLiteReplenishmentStore()
    return _replenishment_store


__all__ = [
    # Connection
    "ConnectionPool",
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
    # Stores
    "SQLiteInventoryStore",
    "SQLiteTemplateStore",
    "SQLiteRecipeStore",
    "SQLiteMappingStore",
    "SQLiteSyncAuditStore",
    "SQLiteReplenishmentStore",
    # Singletons
    "get_inventory_store",
    "get_template_store",
    "get_recipe_store",
    "get_mapping_store",
    "get_sync_audit_store",
    "get_replenishment_store",
]
