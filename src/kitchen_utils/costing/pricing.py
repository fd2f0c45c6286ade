"""Menu price rounding, price recommendations and display formatting."""

import math
from typing import Optional

from kitchen_utils.costing.models import PriceRecommendation


def _round_half_up(value: float, step: float) -> float:
    return math.floor(value / step + 0.5) * step


def round_to_menu_price(price: float) -> float:
    """Round a raw price to a price that looks natural on a menu.

    Below €5 the price goes to the nearest 10 cents. Between €5 and €15 it
    snaps to a whole euro or to .50, .90 or .95. Above that it goes to the
    nearest 50 cents.

    Examples:
        >>> round_to_menu_price(3.14)
        3.1
        >>> round_to_menu_price(7.8)
        7.9
        >>> round_to_menu_price(22.3)
        22.5
    """
    if price <= 0:
        return 0.0
    if price < 5:
        return round(_round_half_up(price, 0.1), 2)
    if price < 15:
        base = math.floor(price)
        decimal = price - base
        if decimal < 0.25:
            return float(base)
        if decimal < 0.75:
            return base + 0.5
        if decimal < 0.85:
            return base + 0.9
        return base + 0.95
    return round(_round_half_up(price, 0.5), 2)


def calculate_menu_price(cost_per_serving: float, target_food_cost_percentage: float) -> float:
    """Menu price at which ``cost_per_serving`` is the target share of the price."""
    if cost_per_serving <= 0:
        return 0.0
    return round_to_menu_price(cost_per_serving / (target_food_cost_percentage / 100))


def generate_price_recommendations(
    total_cost: float, category_average_price: Optional[float] = None
) -> PriceRecommendation:
    """Suggest menu prices at several food-cost targets.

    Args:
        total_cost: Cost of one serving.
        category_average_price: Average menu price of comparable dishes, used
            to place the balanced price in the market.

    Returns:
        Prices at 35 % (conservative), 30 % (balanced), 25 % (competitive)
        and 20 % (premium) food cost plus a recommended range.
    """
    conservative = calculate_menu_price(total_cost, 35)
    balanced = calculate_menu_price(total_cost, 30)
    competitive = calculate_menu_price(total_cost, 25)
    premium = calculate_menu_price(total_cost, 20)
    minimum_viable_price = calculate_menu_price(total_cost, 40)

    position = "mid-market"
    if category_average_price:
        if balanced < category_average_price * 0.8:
            position = "budget"
        elif balanced > category_average_price * 1.3:
            position = "luxury"
        elif balanced > category_average_price * 1.1:
            position = "premium"

    return PriceRecommendation(
        conservative=conservative,
        balanced=balanced,
        competitive=competitive,
        premium=premium,
        minimum_viable_price=minimum_viable_price,
        break_even_price=total_cost,
        recommended_range=(
            max(minimum_viable_price, conservative),
            min(premium, (category_average_price or premium) * 1.2),
        ),
        competitive_position=position,
    )


def format_currency(amount: float) -> str:
    return f"€{amount:.2f}"


def format_percentage(percentage: float) -> str:
    return f"{percentage:.1f}%"
