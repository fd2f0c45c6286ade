"""Rule-based category, dietary-property and allergen classification."""

import logging
from typing import Dict, Optional

from kitchen_utils.ingredients.knowledge import KnowledgeBase, load_knowledge_base
from kitchen_utils.ingredients.models import Classification

logger = logging.getLogger(__name__)

CATEGORY_MATCH_CONFIDENCE = 75
CATEGORY_ALLERGEN_CONFIDENCE = 85
KEYWORD_ALLERGEN_CONFIDENCE = 90

UNRECOGNIZED_WARNING = "Ingredient not recognized - manual review recommended"


class IngredientClassifier:
    """Classify ingredient names against a bilingual knowledge table.

    Categories are tried in table order and the first category with an
    exemplar matching the name wins. Matching is a case-insensitive substring
    test in both directions, so "Tomaten" matches "tomate" and "Käse" matches
    "frischkäse". After that, allergen keywords ("weizen", "milk", "nuss", ...)
    are applied to every name, matched or not.
    """

    def __init__(self, knowledge: Optional[KnowledgeBase] = None):
        self.knowledge = knowledge or load_knowledge_base()

    def classify(self, name: str, language: str = "de") -> Classification:
        normalized = name.strip().lower()
        if not normalized:
            return Classification(None, (), 0, warnings=(UNRECOGNIZED_WARNING,))

        allergens: Dict[str, int] = {}
        category = None
        properties = ()
        for entry in self.knowledge.categories:
            if any(
                item in normalized or normalized in item
                for item in entry.exemplars(language)
            ):
                category = entry.name
                properties = entry.dietary_properties
                for allergen in entry.allergens:
                    allergens[allergen] = CATEGORY_ALLERGEN_CONFIDENCE
                break

        for allergen, keywords in self.knowledge.allergen_keywords:
            if any(keyword in normalized for keyword in keywords):
                allergens[allergen] = max(
                    allergens.get(allergen, 0), KEYWORD_ALLERGEN_CONFIDENCE
                )

        if category is None:
            logger.debug(f"No category for ingredient '{name}'")
            return Classification(
                None,
                (),
                0,
                allergen_confidence=allergens,
                warnings=(UNRECOGNIZED_WARNING,),
            )

        return Classification(
            category=category,
            dietary_properties=tuple(properties),
            confidence=CATEGORY_MATCH_CONFIDENCE,
            allergen_confidence=allergens,
        )

    def is_known_safe_ingredient(self, name: str) -> bool:
        """True when the name contains a whitelisted everyday ingredient."""
        normalized = name.strip().lower()
        return bool(normalized) and any(
            safe in normalized for safe in self.knowledge.known_safe_ingredients
        )


_DEFAULT_CLASSIFIER = IngredientClassifier()


def classify(name: str, language: str = "de") -> Classification:
    """Classify ``name`` with the bundled knowledge base.

    Examples:
        >>> classify("Tomate").category
        'vegetables'
        >>> classify("Käse").allergens
        ('dairy',)
    """
    return _DEFAULT_CLASSIFIER.classify(name, language)


def is_known_safe_ingredient(name: str) -> bool:
    return _DEFAULT_CLASSIFIER.is_known_safe_ingredient(name)
