"""
Dependency injection container for FastAPI.

Provides use cases and stores to route handlers.
"""

from functools import lru_cache

from recipe_inventory.application.use_cases import (
    AdjustStockUseCase,
    AnalyzeAvailabilityUseCase,
    AutoMapIngredientsUseCase,
    CheckReorderUseCase,
    CreateDirectProductUseCase,
    CreateInventoryItemUseCase,
    CreateTemplateUseCase,
    DeactivateTemplateUseCase,
    DeductInventoryUseCase,
    DeployTemplateUseCase,
    GetInventoryStatusUseCase,
    ImportTemplatesUseCase,
    ListMappingsUseCase,
    ReceiveStockUseCase,
    ReverseDeductionUseCase,
    SetIngredientMappingUseCase,
    UpdateTemplateUseCase,
)
from recipe_inventory.config import Settings, get_settings
from recipe_inventory.infrastructure.storage.sqlite import (
    SQLiteInventoryStore,
    SQLiteReplenishmentStore,
    SQLiteSyncAuditStore,
    SQLiteTemplateStore,
    get_inventory_store,
    get_replenishment_store,
    get_sync_audit_store,
    get_template_store,
)


@lru_cache
def get_app_settings() -> Settings:
    """Get cached application settings."""
    return get_settings()


# Store dependencies
async def get_inv_item_store() -> SQLiteInventoryStore:
    """Get inventory store."""
    return await get_inventory_store()


async def get_tmpl_store() -> SQLiteTemplateStore:
    """Get template store."""
    return await get_template_store()


async def get_audit_store() -> SQLiteSyncAuditStore:
    """Get sync audit store."""
    return await get_sync_audit_store()


async def get_reorder_store() -> SQLiteReplenishmentStore:
    """Get replenishment store."""
    return await get_replenishment_store()


# Inventory use cases
def get_create_item_use_case() -> CreateInventoryItemUseCase:
    return CreateInventoryItemUseCase()


def get_inventory_status_use_case() -> GetInventoryStatusUseCase:
    return GetInventoryStatusUseCase()


def get_receive_stock_use_case() -> ReceiveStockUseCase:
    """Get receive stock use case."""
    return ReceiveStockUseCase()


def get_adjust_stock_use_case() -> AdjustStockUseCase:
    """Get adjust stock use case."""
    return AdjustStockUseCase()


# Template use cases
def get_create_template_use_case() -> CreateTemplateUseCase:
    return CreateTemplateUseCase()


def get_import_templates_use_case() -> ImportTemplatesUseCase:
    return ImportTemplatesUseCase()


def get_update_template_use_case() -> UpdateTemplateUseCase:
    return UpdateTemplateUseCase()


def get_deactivate_template_use_case() -> DeactivateTemplateUseCase:
    return DeactivateTemplateUseCase()


def get_deploy_template_use_case() -> DeployTemplateUseCase:
    return DeployTemplateUseCase()


# Store-scoped use cases
def get_availability_use_case() -> AnalyzeAvailabilityUseCase:
    return AnalyzeAvailabilityUseCase()


def get_list_mappings_use_case() -> ListMappingsUseCase:
    return ListMappingsUseCase()


def get_set_mapping_use_case() -> SetIngredientMappingUseCase:
    return SetIngredientMappingUseCase()


def get_auto_map_use_case() -> AutoMapIngredientsUseCase:
    return AutoMapIngredientsUseCase()


def get_check_reorder_use_case() -> CheckReorderUseCase:
    return CheckReorderUseCase()


def get_create_direct_product_use_case() -> CreateDirectProductUseCase:
    return CreateDirectProductUseCase()


# Sales use cases
def get_deduct_inventory_use_case() -> DeductInventoryUseCase:
    """Get deduct inventory use case."""
    return DeductInventoryUseCase()


def get_reverse_deduction_use_case() -> ReverseDeductionUseCase:
    """Get reverse deduction use case."""
    return ReverseDeductionUseCase()
