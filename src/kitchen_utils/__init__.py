"""Kitchen Utils - Ingredient voice-input parsing and recipe costing."""

__version__ = "0.1.0"

from . import costing, ingredients

__all__ = ["costing", "ingredients"]
