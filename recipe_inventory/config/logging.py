"""
Structured logging configuration using structlog.

Development gets colored console output; staging and production emit one JSON
object per line. Quantities derived through unit conversion are rounded
before rendering so 0.2 liters logs as 0.2, not 0.20000000000000004.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import Processor

from recipe_inventory.config.settings import get_settings

QUANTITY_DECIMALS = 4

# Event keys carrying stock quantities
QUANTITY_KEYS = frozenset(
    {
        "quantity",
        "required",
        "available",
        "delta",
        "new_quantity",
        "previous_quantity",
        "on_hand_quantity",
        "requested_quantity",
    }
)


def add_service_context(
    logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    settings = get_settings()
    event_dict.setdefault("service", settings.app_name)
    event_dict.setdefault("environment", settings.environment)
    return event_dict


def round_quantities(
    logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Round float stock quantities in the event."""
    for key in QUANTITY_KEYS.intersection(event_dict):
        value = event_dict[key]
        if isinstance(value, float):
            event_dict[key] = round(value, QUANTITY_DECIMALS)
    return event_dict


def configure_logging() -> None:
    """Configure structlog and the stdlib root logger from settings."""
    settings = get_settings()

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        add_service_context,
        round_quantities,
    ]

    if settings.environment == "development":
        renderer: list[Processor] = [structlog.dev.ConsoleRenderer(colors=True)]
    else:
        renderer = [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=shared_processors + renderer,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.log_level),
    )

    # Requests are logged by LoggingMiddleware
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
