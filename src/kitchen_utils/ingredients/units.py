"""Unit conversion utilities for ingredient costing."""

from typing import Optional

from kitchen_utils.ingredients.normalization import normalize_unit

# Conversion factors to the base unit of each dimension (g, ml, piece)
UNIT_CONVERSIONS = {
    "weight": {
        "g": 1.0,
        "kg": 1000.0,
    },
    "volume": {
        "ml": 1.0,
        "l": 1000.0,
    },
    "count": {
        "piece": 1.0,
    },
}


class ConversionError(ValueError):
    """Raised when two units cannot be converted into each other."""


def unit_dimension(unit: str) -> Optional[str]:
    """Return the dimension of a unit ("weight", "volume" or "count").

    Args:
        unit: Unit in any recognized spelling

    Returns:
        The dimension name, or None for units without conversion coverage

    Examples:
        >>> unit_dimension("Kilogramm")
        'weight'
        >>> unit_dimension("Stück")
        'count'
        >>> unit_dimension("Bund") is None
        True
    """
    canonical = normalize_unit(unit)
    for dimension, factors in UNIT_CONVERSIONS.items():
        if canonical in factors:
            return dimension
    return None


def convert(amount: float, from_unit: str, to_unit: str) -> float:
    """Convert an amount between two units of the same dimension.

    Args:
        amount: Quantity expressed in ``from_unit``
        from_unit: Source unit, any recognized spelling
        to_unit: Target unit, any recognized spelling

    Returns:
        The quantity expressed in ``to_unit``

    Raises:
        ConversionError: If either unit is unknown or the units measure
            different things (e.g. grams to liters).

    Examples:
        >>> convert(1.5, "kg", "g")
        1500.0
        >>> convert(250, "ml", "Liter")
        0.25
    """
    source = normalize_unit(from_unit)
    target = normalize_unit(to_unit)

    if source == target:
        return float(amount)

    source_dimension = unit_dimension(source)
    target_dimension = unit_dimension(target)
    if source_dimension is None or target_dimension is None:
        unknown = from_unit if source_dimension is None else to_unit
        raise ConversionError(f"Unknown unit '{unknown}'")
    if source_dimension != target_dimension:
        raise ConversionError(
            f"Cannot convert {source_dimension} unit '{from_unit}' "
            f"to {target_dimension} unit '{to_unit}'"
        )

    factors = UNIT_CONVERSIONS[source_dimension]
    return float(amount) * factors[source] / factors[target]
