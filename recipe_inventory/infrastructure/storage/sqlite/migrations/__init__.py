"""Schema migrations and ledger checks."""

from recipe_inventory.infrastructure.storage.sqlite.migrations.migrator import (
    LedgerCheck,
    Migration,
    MigrationResult,
    discover_migrations,
    run_migrations,
    verify_ledger,
)

__all__ = [
    "LedgerCheck",
    "Migration",
    "MigrationResult",
    "discover_migrations",
    "run_migrations",
    "verify_ledger",
]
