"""Recipe cost and menu price calculation."""

from .calculator import (
    calculate,
    calculate_profit_margin,
    generate_cost_optimization_suggestions,
)
from .models import (
    DEFAULT_COST_SETTINGS,
    PREP_REFERENCE_BATCH_SIZE,
    Component,
    CostBreakdownItem,
    CostOptimizationSuggestion,
    CostSettings,
    IngredientComponent,
    PrepComponent,
    PriceRecommendation,
    PricingCalculation,
)
from .pricing import (
    calculate_menu_price,
    format_currency,
    format_percentage,
    generate_price_recommendations,
    round_to_menu_price,
)

__all__ = [
    "calculate",
    "calculate_profit_margin",
    "generate_cost_optimization_suggestions",
    "calculate_menu_price",
    "round_to_menu_price",
    "generate_price_recommendations",
    "format_currency",
    "format_percentage",
    "Component",
    "IngredientComponent",
    "PrepComponent",
    "CostSettings",
    "DEFAULT_COST_SETTINGS",
    "PREP_REFERENCE_BATCH_SIZE",
    "CostBreakdownItem",
    "PricingCalculation",
    "CostOptimizationSuggestion",
    "PriceRecommendation",
]
