"""Unit and ingredient-name normalization utilities."""

import re

# Canonical unit -> German and English spellings
UNIT_MAP = {
    # Weight
    "kg": [
        "kg",
        "kilo",
        "kilos",
        "kilogramm",
        "kilogram",
        "kilograms",
        "kilogramme",
        "kilogrammes",
    ],
    "g": ["g", "gr", "gramm", "gram", "grams", "gramme", "grammes"],
    # Volume
    "l": ["l", "ltr", "liter", "litre", "liters", "litres"],
    "ml": [
        "ml",
        "milliliter",
        "millilitre",
        "milliliters",
        "millilitres",
    ],
    # Count
    "piece": [
        "piece",
        "pieces",
        "pc",
        "pcs",
        "stück",
        "stücke",
        "stueck",
        "stk",
        "each",
    ],
}

# Create reverse mapping for lookup
UNIT_LOOKUP = {v: k for k, vs in UNIT_MAP.items() for v in vs}

CANONICAL_UNITS = tuple(UNIT_MAP)


def normalize_unit(unit: str) -> str:
    """Normalize unit names to their canonical code.

    Lookup is case-insensitive and ignores surrounding whitespace and a
    trailing period. Unrecognized units are returned unchanged.

    Args:
        unit: Raw unit string

    Returns:
        Canonical unit code (``kg``, ``g``, ``l``, ``ml`` or ``piece``), or the
        input itself when it is not a known synonym

    Examples:
        >>> normalize_unit("Kilo")
        'kg'
        >>> normalize_unit("Stück")
        'piece'
        >>> normalize_unit("Bund")
        'Bund'
    """
    key = unit.strip().lower().rstrip(".")
    return UNIT_LOOKUP.get(key, unit)


def clean_ingredient_name(name: str) -> str:
    """Collapse whitespace and strip dangling punctuation from an ingredient name.

    Examples:
        >>> clean_ingredient_name("  Tomaten ,")
        'Tomaten'
        >>> clean_ingredient_name("rote   Zwiebeln")
        'rote Zwiebeln'
    """
    name = re.sub(r"\s+", " ", name)
    return name.strip(" \t\n,;:.-")
