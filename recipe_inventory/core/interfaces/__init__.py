"""Core interfaces (ports) for dependency injection."""

from recipe_inventory.core.interfaces.audit_store import (
    IReplenishmentStore,
    ISyncAuditStore,
)
from recipe_inventory.core.interfaces.inventory_store import IInventoryStore, SaleCommit
from recipe_inventory.core.interfaces.recipe_store import IMappingStore, IRecipeStore
from recipe_inventory.core.interfaces.template_store import ITemplateStore

__all__ = [
    "IInventoryStore",
    "SaleCommit",
    "ITemplateStore",
    "IRecipeStore",
    "IMappingStore",
    "ISyncAuditStore",
    "IReplenishmentStore",
]
