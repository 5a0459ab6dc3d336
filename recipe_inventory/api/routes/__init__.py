"""API route modules."""

from recipe_inventory.api.routes.health import router as health_router
from recipe_inventory.api.routes.inventory import router as inventory_router
from recipe_inventory.api.routes.sales import router as sales_router
from recipe_inventory.api.routes.stores import router as stores_router
from recipe_inventory.api.routes.templates import router as templates_router

__all__ = [
    "health_router",
    "inventory_router",
    "templates_router",
    "stores_router",
    "sales_router",
]
