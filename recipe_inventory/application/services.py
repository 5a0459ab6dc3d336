"""
Service factory functions for dependency injection.

Wires configuration into the pure core services. Use cases import from here
rather than building services themselves.
"""

from recipe_inventory.core.services import AvailabilityAnalyzer, IngredientMatcher

# Singleton service instances
_ingredient_matcher: IngredientMatcher | None = None
_availability_analyzer: AvailabilityAnalyzer | None = None


def get_ingredient_matcher(
    synonym_groups: list[list[str]] | None = None,
) -> IngredientMatcher:
    """
    Get or create the IngredientMatcher.

    Args:
        synonym_groups: Optional synonym table override; bypasses the singleton

    Returns:
        Matcher configured with the synonym table from settings
    """
    global _ingredient_matcher

    if synonym_groups is not None:
        return IngredientMatcher(synonym_groups)

    if _ingredient_matcher is None:
        from recipe_inventory.config import get_settings

        _ingredient_matcher = IngredientMatcher(get_settings().matcher.synonym_groups)
    return _ingredient_matcher


def get_availability_analyzer() -> AvailabilityAnalyzer:
    """Get or create the AvailabilityAnalyzer."""
    global _availability_analyzer

    if _availability_analyzer is None:
        _availability_analyzer = AvailabilityAnalyzer()
    return _availability_analyzer


def reset_services() -> None:
    """Reset all service singletons (for testing)."""
    global _ingredient_matcher, _availability_analyzer

    _ingredient_matcher = None
    _availability_analyzer = None
