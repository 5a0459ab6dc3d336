"""API middleware."""

from recipe_inventory.api.middleware.error_handler import ErrorHandlerMiddleware
from recipe_inventory.api.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware", "ErrorHandlerMiddleware"]
