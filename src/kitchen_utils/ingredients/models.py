import dataclasses
from typing import Dict, List, Optional, Tuple


@dataclasses.dataclass(frozen=True)
class PriceMatch:
    price: float
    position: int
    raw: str
    currency: str = "EUR"
    unit: Optional[str] = None


@dataclasses.dataclass(frozen=True)
class UnitMatch:
    unit: str  # canonical code
    position: int
    raw: str


@dataclasses.dataclass(frozen=True)
class Classification:
    category: Optional[str]
    dietary_properties: Tuple[str, ...]
    confidence: int  # 0-100
    allergen_confidence: Dict[str, int] = dataclasses.field(default_factory=dict)
    warnings: Tuple[str, ...] = ()

    @property
    def allergens(self) -> Tuple[str, ...]:
        return tuple(self.allergen_confidence)


@dataclasses.dataclass(frozen=True)
class ParsedIngredientCandidate:
    name_raw: str
    price: Optional[float]
    unit: str
    price_unit: Optional[str]
    tags: Tuple[str, ...]
    confidence: str  # 'high', 'medium', 'low'
    raw_input: str
    category: Optional[str] = None
    allergens: Tuple[str, ...] = ()


@dataclasses.dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    errors: List[str]


@dataclasses.dataclass(frozen=True)
class CatalogMatch:
    ingredient: str
    confidence: float
    match_type: str  # 'exact', 'fuzzy', 'phonetic', 'substring', 'context'
    original_input: str


@dataclasses.dataclass(frozen=True)
class ScoredLabel:
    label: str
    confidence: int
    reasoning: str = ""


@dataclasses.dataclass(frozen=True)
class IngredientAnalysis:
    ingredient: str
    dietary_properties: Tuple[ScoredLabel, ...]
    allergens: Tuple[ScoredLabel, ...]
    category: ScoredLabel
    overall_confidence: int
    warnings: Tuple[str, ...] = ()


@dataclasses.dataclass(frozen=True)
class TaggingResult:
    suggested_tags: Tuple[str, ...]
    suggested_allergens: Tuple[str, ...]
    suggested_category: str
    analysis: IngredientAnalysis
    should_auto_apply: bool
    source: str  # 'llm:<model id>' or 'local'
