"""
Health check endpoints.

``/api/health/db`` also runs the stock ledger checks, so a database that is
reachable but holds inconsistent stock reports as degraded.
"""

import time

import aiosqlite
from fastapi import APIRouter

from recipe_inventory import __version__
from recipe_inventory.application.dto.responses import (
    DatabaseHealthResponse,
    HealthResponse,
    LedgerCheckResponse,
)
from recipe_inventory.config import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/health", tags=["health"])

_start_time = time.time()


def _uptime() -> float:
    return time.time() - _start_time


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Liveness: the process is up."""
    return HealthResponse(status="healthy", version=__version__, uptime_seconds=_uptime())


@router.get("/db", response_model=HealthResponse)
async def db_health() -> HealthResponse:
    """Database reachability, schema version and stock ledger consistency."""
    from recipe_inventory.infrastructure.storage.sqlite import get_pool
    from recipe_inventory.infrastructure.storage.sqlite.migrations import verify_ledger

    try:
        pool = await get_pool()
        start = time.time()
        async with pool.acquire() as conn:
            cursor = await conn.execute("SELECT MAX(version) FROM schema_migrations")
            row = await cursor.fetchone()
            latency = (time.time() - start) * 1000
            checks = await verify_ledger(conn)
    except (aiosqlite.Error, OSError) as e:
        logger.error("db_health_failed", error=str(e))
        return HealthResponse(
            status="unhealthy",
            version=__version__,
            uptime_seconds=_uptime(),
            database=DatabaseHealthResponse(available=False, error=str(e)),
        )

    database = DatabaseHealthResponse(
        available=True,
        latency_ms=latency,
        schema_version=row[0] if row else None,
        checks=[
            LedgerCheckResponse(
                name=c.name, passed=c.passed, violations=c.violations, examples=c.examples
            )
            for c in checks
        ],
    )
    return HealthResponse(
        status="healthy" if all(c.passed for c in checks) else "degraded",
        version=__version__,
        uptime_seconds=_uptime(),
        database=database,
    )
