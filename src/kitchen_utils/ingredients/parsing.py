"""Turn dictated ingredient lists into structured ingredient candidates."""

import logging
import re
from typing import List, Optional

from kitchen_utils.ingredients.classification import IngredientClassifier
from kitchen_utils.ingredients.extraction import (
    MAX_PRICE,
    extract_prices,
    extract_units,
    find_price_unit_spans,
)
from kitchen_utils.ingredients.knowledge import KnowledgeBase, load_knowledge_base
from kitchen_utils.ingredients.models import ParsedIngredientCandidate, ValidationResult
from kitchen_utils.ingredients.normalization import clean_ingredient_name
from kitchen_utils.ingredients.number_utils import replace_spoken_numbers
from kitchen_utils.ingredients.segmentation import Segmenter, default_strategies

logger = logging.getLogger(__name__)

DEFAULT_UNIT = "piece"

# Deliberately short: "premium", "normale" and "frisch" stay in the name
FILLER_WORDS = re.compile(r"\b(pro|per|je|für|organic|bio)\b", re.IGNORECASE)

# Confidence scoring
BASE_SCORE = 50
KNOWN_INGREDIENT_BONUS = 30
PLAUSIBLE_PRICE_BONUS = 20
EXPLICIT_UNIT_BONUS = 10
HIGH_CONFIDENCE = 80
MEDIUM_CONFIDENCE = 60
PLAUSIBLE_PRICE_RANGE = (0.1, 100.0)


def confidence_level(
    known_ingredient: bool, price: Optional[float], unit_detected: bool
) -> str:
    """Combine the three positive signals into 'high', 'medium' or 'low'.

    Examples:
        >>> confidence_level(True, 4.5, True)
        'high'
        >>> confidence_level(False, 2.0, False)
        'medium'
        >>> confidence_level(False, None, False)
        'low'
    """
    score = BASE_SCORE
    if known_ingredient:
        score += KNOWN_INGREDIENT_BONUS
    low, high = PLAUSIBLE_PRICE_RANGE
    if price is not None and low < price < high:
        score += PLAUSIBLE_PRICE_BONUS
    if unit_detected:
        score += EXPLICIT_UNIT_BONUS

    if score >= HIGH_CONFIDENCE:
        return "high"
    if score >= MEDIUM_CONFIDENCE:
        return "medium"
    return "low"


def strip_price_and_unit(segment: str) -> str:
    """Remove price/unit mentions and filler words, leaving the ingredient name.

    Examples:
        >>> strip_price_and_unit("Bio Tomaten 4.50 pro kg")
        'Tomaten'
        >>> strip_price_and_unit("Eier 2.50 für 12 Stück")
        'Eier'
    """
    pieces = []
    cursor = 0
    for start, end in find_price_unit_spans(segment):
        pieces.append(segment[cursor:start])
        cursor = end
    pieces.append(segment[cursor:])
    name = " ".join(pieces)
    name = FILLER_WORDS.sub(" ", name)
    return clean_ingredient_name(name)


class IngredientListParser:
    """Parse spoken or typed ingredient lists such as
    "Bio Tomaten 4.50 pro kg, normale Zwiebeln 1.20".

    Attributes:
        knowledge: Knowledge base shared by the segmenter and classifier.
        segmenter: Splits an utterance into one segment per ingredient.
        classifier: Assigns category, dietary tags and allergens.
        spoken_numbers: Whether to rewrite "zwei Euro" as "2 Euro" first.
        language: Language hint passed to the classifier.
    """

    def __init__(
        self,
        knowledge: Optional[KnowledgeBase] = None,
        spoken_numbers: bool = True,
        language: str = "de",
    ):
        self.knowledge = knowledge or load_knowledge_base()
        self.segmenter = Segmenter(default_strategies(self.knowledge))
        self.classifier = IngredientClassifier(self.knowledge)
        self.spoken_numbers = spoken_numbers
        self.language = language

    def parse(self, utterance: str) -> List[ParsedIngredientCandidate]:
        """Parse one utterance into ingredient candidates, in spoken order.

        Never raises on odd input; segments that leave no name behind are
        dropped.
        """
        if not utterance or not utterance.strip():
            return []

        text = replace_spoken_numbers(utterance) if self.spoken_numbers else utterance
        segments = self.segmenter.segment(text)
        logger.debug(f"Segmented {utterance!r} into {len(segments)} segment(s)")

        candidates = []
        for segment in segments:
            candidate = self.parse_segment(segment)
            if candidate is None:
                logger.debug(f"Dropped segment without ingredient name: {segment!r}")
                continue
            candidates.append(candidate)
        return candidates

    def parse_segment(self, segment: str) -> Optional[ParsedIngredientCandidate]:
        prices = extract_prices(segment)
        units = extract_units(segment)
        name = strip_price_and_unit(segment)
        if not name:
            return None

        price = prices[0].price if prices else None
        unit = units[0].unit if units else None
        classification = self.classifier.classify(name, self.language)

        return ParsedIngredientCandidate(
            name_raw=name,
            price=price,
            unit=unit or DEFAULT_UNIT,
            price_unit=f"per {unit}" if unit else None,
            tags=classification.dietary_properties,
            confidence=confidence_level(
                classification.category is not None, price, unit is not None
            ),
            raw_input=segment,
            category=classification.category,
            allergens=classification.allergens,
        )


_DEFAULT_PARSER = IngredientListParser()


def parse(utterance: str) -> List[ParsedIngredientCandidate]:
    """Parse an utterance with the bundled knowledge base.

    Spoken prices ("zwei Euro", "one twenty") are rewritten as digits first.
    """
    return _DEFAULT_PARSER.parse(utterance)


def validate(candidate: ParsedIngredientCandidate) -> ValidationResult:
    """Check a candidate before it is saved. Errors accumulate."""
    errors = []
    if not candidate.name_raw or len(candidate.name_raw) < 2:
        errors.append("Ingredient name too short")
    if candidate.price is not None and (
        candidate.price <= 0 or candidate.price > MAX_PRICE
    ):
        errors.append("Price out of reasonable range")
    if not candidate.unit:
        errors.append("Unit not specified")
    return ValidationResult(is_valid=not errors, errors=errors)


def format_parsed_ingredient(candidate: ParsedIngredientCandidate) -> str:
    """Render a candidate for display.

    Examples:
        >>> format_parsed_ingredient(parse("Tomaten 4.50 pro kg")[0])
        'Tomaten €4.50 per kg (vegetarian, vegan)'
    """
    parts = [candidate.name_raw]
    if candidate.price:
        parts.append(f"€{candidate.price:.2f}")
    if candidate.price_unit:
        parts.append(candidate.price_unit)
    if candidate.tags:
        parts.append(f"({', '.join(candidate.tags)})")
    return " ".join(parts)
