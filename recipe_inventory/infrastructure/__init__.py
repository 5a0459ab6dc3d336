"""Infrastructure layer implementations."""

from recipe_inventory.infrastructure import storage

__all__ = ["storage"]
