"""Ingredient parsing, classification and tagging utilities."""

from .analysis import (
    DEFAULT_MODEL_ID,
    IngredientAnalyzer,
    analyze_ingredient_batch,
    format_analysis_for_display,
)
from .batch_utils import (
    candidates_to_dataframe,
    load_utterances,
    parse_utterances,
    write_candidates_csv,
)
from .classification import IngredientClassifier, classify, is_known_safe_ingredient
from .extraction import extract_prices, extract_units
from .knowledge import KnowledgeBase, load_knowledge_base
from .matching import (
    extract_ingredients_from_text,
    find_best_ingredient_match,
    suggest_ingredient_corrections,
)
from .models import (
    CatalogMatch,
    Classification,
    ParsedIngredientCandidate,
    PriceMatch,
    TaggingResult,
    UnitMatch,
    ValidationResult,
)
from .normalization import clean_ingredient_name, normalize_unit
from .number_utils import replace_spoken_numbers
from .parsing import IngredientListParser, format_parsed_ingredient, parse, validate
from .segmentation import SEGMENTATION_STRATEGIES, Segmenter, segment
from .units import ConversionError, convert

__all__ = [
    "normalize_unit",
    "convert",
    "ConversionError",
    "clean_ingredient_name",
    "replace_spoken_numbers",
    "extract_prices",
    "extract_units",
    "segment",
    "Segmenter",
    "SEGMENTATION_STRATEGIES",
    "classify",
    "is_known_safe_ingredient",
    "IngredientClassifier",
    "KnowledgeBase",
    "load_knowledge_base",
    "parse",
    "validate",
    "format_parsed_ingredient",
    "IngredientListParser",
    "find_best_ingredient_match",
    "extract_ingredients_from_text",
    "suggest_ingredient_corrections",
    "IngredientAnalyzer",
    "analyze_ingredient_batch",
    "format_analysis_for_display",
    "DEFAULT_MODEL_ID",
    "candidates_to_dataframe",
    "parse_utterances",
    "load_utterances",
    "write_candidates_csv",
    "ParsedIngredientCandidate",
    "PriceMatch",
    "UnitMatch",
    "Classification",
    "ValidationResult",
    "CatalogMatch",
    "TaggingResult",
]
