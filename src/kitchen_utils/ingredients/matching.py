"""Fuzzy matching of dictated ingredient names against a known catalogue.

Callers use these helpers to decide whether a parsed name refers to an
ingredient they already have or should be created as a new one.
"""

import re
from difflib import SequenceMatcher
from typing import List, Optional, Sequence

from kitchen_utils.ingredients.knowledge import load_knowledge_base
from kitchen_utils.ingredients.models import CatalogMatch

FUZZY_THRESHOLD = 0.7
PHONETIC_THRESHOLD = 0.6
SUBSTRING_THRESHOLD = 0.5
CONTEXT_THRESHOLD = 0.6
SUGGESTION_THRESHOLD = 0.3

# Spellings that sound alike
_PHONETIC_REPLACEMENTS = (("ph", "f"), ("ck", "k"), ("ch", "k"), ("th", "t"), ("gh", "g"))


def similarity(a: str, b: str) -> float:
    """Case-insensitive similarity ratio in ``[0, 1]``."""
    if not a and not b:
        return 1.0
    return SequenceMatcher(None, a.lower(), b.lower()).ratio()


def phonetic_key(text: str) -> str:
    """Simplified sound-alike key: first letter plus consonant skeleton.

    Examples:
        >>> phonetic_key("zucchini")
        'zckn'
        >>> phonetic_key("zukini")
        'zkn'
    """
    cleaned = re.sub(r"[^a-z]", "", text.lower())
    if not cleaned:
        return ""
    for pattern, replacement in _PHONETIC_REPLACEMENTS:
        cleaned = cleaned.replace(pattern, replacement)
    cleaned = re.sub(r"(.)\1+", r"\1", cleaned)
    return cleaned[0] + re.sub(r"[aeiou]", "", cleaned[1:])


def phonetic_similarity(a: str, b: str) -> float:
    key_a, key_b = phonetic_key(a), phonetic_key(b)
    if key_a == key_b:
        return 0.9
    return similarity(key_a, key_b) * 0.8


def _default_catalogue() -> Sequence[str]:
    return load_knowledge_base().common_ingredients


def find_best_ingredient_match(
    text: str,
    catalogue: Optional[Sequence[str]] = None,
    dish_type: Optional[str] = None,
) -> Optional[CatalogMatch]:
    """Find the catalogue entry that best matches ``text``.

    Passes run from strict to loose: exact, fuzzy, phonetic and substring.
    The looser passes only run while the best score so far is weak. When a
    dish type is given, that dish's typical ingredients are considered too.

    Args:
        text: Name as dictated, e.g. "tomatoe".
        catalogue: Known ingredient names. Defaults to a built-in list of
            common ingredients.
        dish_type: Optional dish context such as "pasta" or "salad".

    Returns:
        The highest-confidence match, or None when nothing is close enough.
    """
    if not text or not text.strip():
        return None
    catalogue = _default_catalogue() if catalogue is None else catalogue
    query = text.strip().lower()
    matches: List[CatalogMatch] = []

    for ingredient in catalogue:
        if ingredient.lower() == query:
            matches.append(CatalogMatch(ingredient, 1.0, "exact", text))

    if not matches:
        for ingredient in catalogue:
            score = similarity(query, ingredient)
            if score >= FUZZY_THRESHOLD:
                matches.append(CatalogMatch(ingredient, score, "fuzzy", text))

    def best_score() -> float:
        return max((m.confidence for m in matches), default=0.0)

    if best_score() < 0.9:
        for ingredient in catalogue:
            score = phonetic_similarity(query, ingredient)
            if score >= PHONETIC_THRESHOLD:
                matches.append(CatalogMatch(ingredient, score, "phonetic", text))

    if best_score() < 0.8:
        for ingredient in catalogue:
            candidate = ingredient.lower()
            if candidate in query or query in candidate:
                score = min(len(query), len(candidate)) / max(len(query), len(candidate))
                if score >= SUBSTRING_THRESHOLD:
                    matches.append(
                        CatalogMatch(ingredient, score * 0.7, "substring", text)
                    )

    if dish_type:
        combinations = load_knowledge_base().ingredient_combinations
        for ingredient in combinations.get(dish_type.lower(), ()):
            score = similarity(query, ingredient)
            if score >= CONTEXT_THRESHOLD:
                matches.append(CatalogMatch(ingredient, score * 0.9, "context", text))

    if not matches:
        return None
    # max() keeps the first of equal scores, so stricter passes win ties
    return max(matches, key=lambda m: m.confidence)


def extract_ingredients_from_text(
    text: str,
    catalogue: Optional[Sequence[str]] = None,
    dish_type: Optional[str] = None,
) -> List[CatalogMatch]:
    """Find catalogue ingredients mentioned anywhere in free text.

    Single words are tried first (confidence ≥ 0.7), then two-word phrases
    made of words not already used (confidence ≥ 0.8).
    """
    if not text or not text.strip():
        return []

    words = text.lower().split()
    matches: List[CatalogMatch] = []
    used = set()

    for word in words:
        if word in used or len(word) < 3:
            continue
        match = find_best_ingredient_match(word, catalogue, dish_type)
        if match and match.confidence >= 0.7:
            matches.append(match)
            used.add(word)

    for first, second in zip(words, words[1:]):
        if first in used or second in used:
            continue
        match = find_best_ingredient_match(f"{first} {second}", catalogue, dish_type)
        if match and match.confidence >= 0.8:
            matches.append(match)
            used.update((first, second))

    unique = {}
    for match in matches:
        unique.setdefault(match.ingredient.lower(), match)
    return sorted(unique.values(), key=lambda m: m.confidence, reverse=True)


def suggest_ingredient_corrections(
    text: str, catalogue: Optional[Sequence[str]] = None, limit: int = 5
) -> List[CatalogMatch]:
    """Rank catalogue entries as correction candidates for a low-confidence name."""
    catalogue = _default_catalogue() if catalogue is None else catalogue
    query = text.strip().lower()
    suggestions = []
    for ingredient in catalogue:
        fuzzy = similarity(query, ingredient)
        phonetic = phonetic_similarity(query, ingredient)
        score = max(fuzzy, phonetic)
        if score >= SUGGESTION_THRESHOLD:
            match_type = "fuzzy" if fuzzy > phonetic else "phonetic"
            suggestions.append(CatalogMatch(ingredient, score, match_type, text))

    suggestions.sort(key=lambda m: m.confidence, reverse=True)
    return suggestions[:limit]
