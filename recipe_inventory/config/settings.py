"""
Application settings with Pydantic v2 validation.

Loads configuration from environment variables with sensible defaults.
"""

from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SYNONYM_GROUPS: list[list[str]] = [
    ["milk", "fresh milk", "whole milk"],
    ["croissant", "regular croissant", "plain croissant", "butter croissant"],
    ["whipped cream", "whip cream", "heavy cream"],
    ["blueberry jam", "blueberry", "blue berry jam"],
    ["strawberry jam", "strawberry", "straw berry jam"],
    ["chocolate syrup", "choco syrup", "chocolate sauce", "cocoa syrup"],
    ["caramel syrup", "caramel sauce", "caramel", "butterscotch syrup"],
    ["nutella", "hazelnut spread", "chocolate hazelnut"],
    ["biscoff spread", "biscoff", "cookie butter", "speculoos"],
    ["oreo cookies", "oreo", "sandwich cookies"],
    ["kitkat", "kit kat", "chocolate wafer"],
    ["chopstick", "chopsticks", "wooden sticks", "bamboo sticks"],
    ["wax paper", "parchment paper", "baking paper"],
]


class StorageSettings(BaseSettings):
    """Storage configuration."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    data_dir: Path = Path("data")
    db_name: str = "recipe_inventory.db"

    # SQLite settings
    pool_size: int = 5
    busy_timeout: int = 30000  # ms

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_name


class MatcherSettings(BaseSettings):
    """Ingredient matcher configuration."""

    model_config = SettingsConfigDict(env_prefix="MATCHER_")

    synonym_groups: list[list[str]] = Field(
        default_factory=lambda: [list(group) for group in DEFAULT_SYNONYM_GROUPS]
    )
    # Units that can be stocked but never consumed by a recipe
    non_recipe_units: list[str] = ["box", "boxes", "pack", "packs"]


class InventorySettings(BaseSettings):
    """Stock-level and replenishment configuration."""

    model_config = SettingsConfigDict(env_prefix="INVENTORY_")

    default_minimum_threshold: float = 10.0
    default_maximum_capacity: float = 1000.0
    # Used when an item has no maximum capacity configured
    default_reorder_quantity: float = 50.0
    auto_reorder_on_sale: bool = True

    # Catalog price = total cost * markup when a template has no suggested price
    default_markup: float = 1.5


class APISettings(BaseSettings):
    """API server configuration."""

    model_config = SettingsConfigDict(env_prefix="API_")

    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    cors_origins: list[str] = ["*"]


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "Recipe Inventory Engine"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Sub-settings
    storage: StorageSettings = Field(default_factory=StorageSettings)
    matcher: MatcherSettings = Field(default_factory=MatcherSettings)
    inventory: InventorySettings = Field(default_factory=InventorySettings)
    api: APISettings = Field(default_factory=APISettings)

    @field_validator("storage", mode="before")
    @classmethod
    def ensure_data_dir(cls, v: Any) -> StorageSettings:
        if isinstance(v, dict):
            settings = StorageSettings(**v)
        else:
            settings = v or StorageSettings()
        settings.data_dir.mkdir(parents=True, exist_ok=True)
        return settings


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings (for testing)."""
    global _settings
    _settings = None
