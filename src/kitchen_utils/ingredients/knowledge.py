"""Static ingredient knowledge tables loaded from bundled JSON data."""

import dataclasses
import functools
import json
import os
from typing import Dict, Optional, Tuple

DEFAULT_KNOWLEDGE_FILE = os.path.join(
    os.path.dirname(__file__), "data", "ingredient_knowledge.json"
)


@dataclasses.dataclass(frozen=True)
class CategoryEntry:
    name: str
    items: Dict[str, Tuple[str, ...]]  # language -> exemplar names
    dietary_properties: Tuple[str, ...]
    allergens: Tuple[str, ...]

    def exemplars(self, language: str = "de") -> Tuple[str, ...]:
        """All exemplar names, those of ``language`` first."""
        ordered = [language] + sorted(lang for lang in self.items if lang != language)
        return tuple(item for lang in ordered for item in self.items.get(lang, ()))


@dataclasses.dataclass(frozen=True)
class KnowledgeBase:
    """Immutable lookup tables shared by the classifier, segmenter and matcher.

    Attributes:
        categories: Categories in match-priority order.
        dietary_properties: Vocabulary of allowed dietary tags.
        allergens: Vocabulary of allowed allergen labels.
        allergen_keywords: ``(allergen, keywords)`` pairs for the safety override.
        known_safe_ingredients: Conservative whitelist for automatic tagging.
        ingredient_vocabulary: English nouns used to spot ingredient boundaries.
        common_ingredients: Default catalogue for fuzzy ingredient matching.
        ingredient_combinations: Dish type -> typical ingredients.
    """

    categories: Tuple[CategoryEntry, ...]
    dietary_properties: Tuple[str, ...]
    allergens: Tuple[str, ...]
    allergen_keywords: Tuple[Tuple[str, Tuple[str, ...]], ...]
    known_safe_ingredients: Tuple[str, ...]
    ingredient_vocabulary: Tuple[str, ...]
    common_ingredients: Tuple[str, ...]
    ingredient_combinations: Dict[str, Tuple[str, ...]]


def _from_dict(data: dict) -> KnowledgeBase:
    categories = tuple(
        CategoryEntry(
            name=entry["name"],
            items={
                lang: tuple(item.lower() for item in items)
                for lang, items in entry["items"].items()
            },
            dietary_properties=tuple(entry.get("dietary_properties", [])),
            allergens=tuple(entry.get("allergens", [])),
        )
        for entry in data["categories"]
    )
    return KnowledgeBase(
        categories=categories,
        dietary_properties=tuple(data["dietary_properties"]),
        allergens=tuple(data["allergens"]),
        allergen_keywords=tuple(
            (entry["allergen"], tuple(entry["keywords"]))
            for entry in data.get("allergen_keywords", [])
        ),
        known_safe_ingredients=tuple(data.get("known_safe_ingredients", [])),
        ingredient_vocabulary=tuple(data.get("ingredient_vocabulary", [])),
        common_ingredients=tuple(data.get("common_ingredients", [])),
        ingredient_combinations={
            dish: tuple(items)
            for dish, items in data.get("ingredient_combinations", {}).items()
        },
    )


@functools.lru_cache(maxsize=None)
def load_knowledge_base(knowledge_file: Optional[str] = None) -> KnowledgeBase:
    """Load and cache the knowledge base.

    Args:
        knowledge_file: Path to a JSON knowledge file. Defaults to the bundled
            ``data/ingredient_knowledge.json``.

    Returns:
        The parsed, immutable knowledge base. Repeated calls with the same
        path return the same object.
    """
    with open(knowledge_file or DEFAULT_KNOWLEDGE_FILE, "r", encoding="utf-8") as f:
        return _from_dict(json.load(f))
