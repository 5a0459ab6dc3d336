"""Application use cases."""

from recipe_inventory.application.use_cases.analyze_availability import (
    AnalyzeAvailabilityUseCase,
    StoreAvailability,
)
from recipe_inventory.application.use_cases.check_reorder import (
    CheckReorderUseCase,
    ReorderResult,
)
from recipe_inventory.application.use_cases.create_direct_product import (
    CreateDirectProductUseCase,
)
from recipe_inventory.application.use_cases.create_template import (
    CreateTemplateResult,
    CreateTemplateUseCase,
)
from recipe_inventory.application.use_cases.deduct_inventory import (
    DeductInventoryUseCase,
    DeductionResult,
    line_reference_for,
)
from recipe_inventory.application.use_cases.deploy_template import (
    DeploymentReport,
    DeployTemplateUseCase,
    StoreDeployment,
)
from recipe_inventory.application.use_cases.import_templates import (
    ImportResult,
    ImportTemplatesUseCase,
)
from recipe_inventory.application.use_cases.manage_inventory import (
    CreateInventoryItemUseCase,
    GetInventoryStatusUseCase,
    InventoryStatus,
)
from recipe_inventory.application.use_cases.map_ingredients import (
    AutoMapIngredientsUseCase,
    ListMappingsUseCase,
    SetIngredientMappingUseCase,
)
from recipe_inventory.application.use_cases.receive_stock import (
    AdjustStockUseCase,
    ReceiveStockUseCase,
    StockChangeResult,
)
from recipe_inventory.application.use_cases.reverse_deduction import (
    ReversalResult,
    ReverseDeductionUseCase,
)
from recipe_inventory.application.use_cases.update_template import (
    DeactivateTemplateUseCase,
    UpdateTemplateUseCase,
)

__all__ = [
    "CreateInventoryItemUseCase",
    "GetInventoryStatusUseCase",
    "InventoryStatus",
    "ReceiveStockUseCase",
    "AdjustStockUseCase",
    "StockChangeResult",
    "CreateTemplateUseCase",
    "CreateTemplateResult",
    "ImportTemplatesUseCase",
    "ImportResult",
    "UpdateTemplateUseCase",
    "DeactivateTemplateUseCase",
    "DeployTemplateUseCase",
    "DeploymentReport",
    "StoreDeployment",
    "AnalyzeAvailabilityUseCase",
    "StoreAvailability",
    "DeductInventoryUseCase",
    "DeductionResult",
    "line_reference_for",
    "ReverseDeductionUseCase",
    "ReversalResult",
    "CheckReorderUseCase",
    "ReorderResult",
    "SetIngredientMappingUseCase",
    "AutoMapIngredientsUseCase",
    "ListMappingsUseCase",
    "CreateDirectProductUseCase",
]
