"""Recipe cost calculation over ingredient and prep components."""

import dataclasses
import logging
from typing import List, Sequence

from kitchen_utils.costing.models import (
    DEFAULT_COST_SETTINGS,
    Component,
    CostBreakdownItem,
    CostOptimizationSuggestion,
    CostSettings,
    IngredientComponent,
    PricingCalculation,
)

logger = logging.getLogger(__name__)


def tier_key(percentage: int) -> str:
    return f"food_cost_{percentage}"


def calculate_profit_margin(price: float, total_food_cost: float) -> float:
    """Profit margin in percent of ``price``.

    Examples:
        >>> calculate_profit_margin(10.0, 3.0)
        70.0
        >>> calculate_profit_margin(0, 3.0)
        0.0
    """
    if price == 0:
        return 0.0
    return (price - total_food_cost) / price * 100


def cost_efficiency(total_food_cost: float) -> str:
    if total_food_cost <= 5:
        return "excellent"
    if total_food_cost <= 10:
        return "good"
    if total_food_cost <= 15:
        return "moderate"
    return "high"


def component_cost(
    component: Component, settings: CostSettings = DEFAULT_COST_SETTINGS
) -> CostBreakdownItem:
    """Cost one component; ``percentage`` is filled in by ``calculate``."""
    if isinstance(component, IngredientComponent):
        return CostBreakdownItem(
            id=component.ingredient_id,
            name=component.name or component.ingredient_id,
            kind=component.kind,
            quantity=component.quantity,
            unit=component.unit,
            unit_cost=component.cost_per_unit,
            total_cost=component.cost_per_unit * component.quantity,
            percentage=0.0,
            category=component.category,
        )

    unit_cost = component.cost_per_batch / settings.prep_reference_batch_size
    return CostBreakdownItem(
        id=component.prep_id,
        name=component.name or component.prep_id,
        kind=component.kind,
        quantity=component.quantity,
        unit=component.unit,
        unit_cost=unit_cost,
        total_cost=component.cost_per_batch
        * (component.quantity / settings.prep_reference_batch_size),
        percentage=0.0,
        cost_per_batch=component.cost_per_batch,
    )


def calculate(
    components: Sequence[Component],
    prep_time_minutes: float = 15,
    servings: int = 1,
    settings: CostSettings = DEFAULT_COST_SETTINGS,
) -> PricingCalculation:
    """Calculate food cost, suggested prices and a cost breakdown for a dish.

    Args:
        components: Ingredients and preps with the quantity used per dish.
        prep_time_minutes: Hands-on preparation time, charged as labor.
        servings: Number of servings the components make.
        settings: Labor rate, overhead and food-cost targets.

    Returns:
        A new PricingCalculation. Suggested prices divide the total food cost
        by each target food-cost percentage; profit margins are the euro
        difference between each suggested price and the same total food cost.

    Raises:
        ValueError: If ``servings`` is less than 1.
    """
    if servings < 1:
        raise ValueError(f"servings must be at least 1, got {servings}")

    items = [component_cost(component, settings) for component in components]
    total_food_cost = sum(item.total_cost for item in items)
    ingredient_cost = sum(item.total_cost for item in items if item.kind == "ingredient")
    prep_cost = sum(item.total_cost for item in items if item.kind == "prep")

    breakdown = tuple(
        dataclasses.replace(
            item,
            percentage=item.total_cost / total_food_cost * 100 if total_food_cost > 0 else 0.0,
        )
        for item in items
    )

    labor_cost = prep_time_minutes / 60 * settings.labor_cost_per_hour
    overhead_cost = total_food_cost * settings.overhead_percentage / 100
    total_cost = total_food_cost + labor_cost + overhead_cost
    cost_per_serving = total_cost / servings

    suggested_prices = {
        tier_key(tier): total_food_cost / (tier / 100) for tier in settings.food_cost_tiers
    }
    profit_margins = {
        key: price - total_food_cost for key, price in suggested_prices.items()
    }

    most_expensive = None
    for item in breakdown:
        if most_expensive is None or item.total_cost > most_expensive.total_cost:
            most_expensive = item

    logger.debug(
        f"Costed {len(breakdown)} components: food {total_food_cost:.2f}, "
        f"total {total_cost:.2f}"
    )
    return PricingCalculation(
        total_food_cost=total_food_cost,
        suggested_prices=suggested_prices,
        breakdown=breakdown,
        ingredient_cost=ingredient_cost,
        prep_cost=prep_cost,
        labor_cost=labor_cost,
        overhead_cost=overhead_cost,
        total_cost=total_cost,
        cost_per_serving=cost_per_serving,
        profit_margins=profit_margins,
        cost_efficiency=cost_efficiency(total_food_cost),
        most_expensive_component=most_expensive,
        prep_share=prep_cost / total_food_cost * 100 if total_food_cost > 0 else 0.0,
        ingredient_share=(
            ingredient_cost / total_food_cost * 100 if total_food_cost > 0 else 0.0
        ),
    )


def generate_cost_optimization_suggestions(
    calculation: PricingCalculation,
) -> List[CostOptimizationSuggestion]:
    """Point out where a dish's cost could be reduced."""
    suggestions = []

    if calculation.total_food_cost > 15:
        suggestions.append(
            CostOptimizationSuggestion(
                kind="portion",
                title="High Total Cost",
                description=(
                    f"Total food cost of €{calculation.total_food_cost:.2f} is above "
                    "recommended levels. Consider reducing portions or finding "
                    "cost-effective alternatives."
                ),
                potential_saving=calculation.total_food_cost * 0.2,
                difficulty="medium",
                impact="high",
            )
        )

    most_expensive = calculation.most_expensive_component
    if most_expensive is not None and most_expensive.percentage > 30:
        suggestions.append(
            CostOptimizationSuggestion(
                kind="substitution",
                title="High-Cost Component",
                description=(
                    f"{most_expensive.name} accounts for {most_expensive.percentage:.1f}% "
                    "of total cost. Consider alternatives or bulk purchasing."
                ),
                potential_saving=most_expensive.total_cost * 0.15,
                difficulty="medium",
                impact="medium",
            )
        )

    if calculation.prep_share > 50:
        suggestions.append(
            CostOptimizationSuggestion(
                kind="prep",
                title="High Prep Dependency",
                description=(
                    f"Preps account for {calculation.prep_share:.1f}% of total cost. "
                    "Consider making preps in larger batches for better efficiency."
                ),
                potential_saving=calculation.prep_cost * 0.1,
                difficulty="easy",
                impact="medium",
            )
        )

    return suggestions
