"""Storage infrastructure implementations."""

from recipe_inventory.infrastructure.storage.sqlite import (
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)

__all__ = [
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
]
