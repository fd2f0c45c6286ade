import dataclasses
from typing import ClassVar, Dict, Optional, Tuple, Union

# A prep's cost_per_batch is read as the cost of this many units of the prep
PREP_REFERENCE_BATCH_SIZE = 100.0


@dataclasses.dataclass(frozen=True)
class IngredientComponent:
    kind: ClassVar[str] = "ingredient"

    ingredient_id: str
    cost_per_unit: float
    quantity: float
    unit: str
    name: Optional[str] = None
    category: Optional[str] = None


@dataclasses.dataclass(frozen=True)
class PrepComponent:
    kind: ClassVar[str] = "prep"

    prep_id: str
    cost_per_batch: float
    quantity: float
    unit: str
    name: Optional[str] = None


Component = Union[IngredientComponent, PrepComponent]


@dataclasses.dataclass(frozen=True)
class CostSettings:
    labor_cost_per_hour: float = 15.0
    overhead_percentage: float = 25.0
    target_food_cost_percentage: float = 30.0
    food_cost_tiers: Tuple[int, ...] = (25, 30, 35)
    prep_reference_batch_size: float = PREP_REFERENCE_BATCH_SIZE


DEFAULT_COST_SETTINGS = CostSettings()


@dataclasses.dataclass(frozen=True)
class CostBreakdownItem:
    id: str
    name: str
    kind: str  # 'ingredient' or 'prep'
    quantity: float
    unit: str
    unit_cost: float
    total_cost: float
    percentage: float  # share of total food cost
    category: Optional[str] = None
    cost_per_batch: Optional[float] = None


@dataclasses.dataclass(frozen=True)
class PricingCalculation:
    total_food_cost: float
    suggested_prices: Dict[str, float]  # "food_cost_30" -> price
    breakdown: Tuple[CostBreakdownItem, ...]
    ingredient_cost: float = 0.0
    prep_cost: float = 0.0
    labor_cost: float = 0.0
    overhead_cost: float = 0.0
    total_cost: float = 0.0
    cost_per_serving: float = 0.0
    profit_margins: Dict[str, float] = dataclasses.field(default_factory=dict)
    cost_efficiency: str = "excellent"
    most_expensive_component: Optional[CostBreakdownItem] = None
    prep_share: float = 0.0
    ingredient_share: float = 0.0

    def profit_margin(self, price: float) -> float:
        """Margin in percent of ``price`` left after food cost; 0 for a zero price."""
        if price == 0:
            return 0.0
        return (price - self.total_food_cost) / price * 100


@dataclasses.dataclass(frozen=True)
class CostOptimizationSuggestion:
    kind: str  # 'substitution', 'portion', 'prep', 'supplier'
    title: str
    description: str
    potential_saving: float
    difficulty: str
    impact: str


@dataclasses.dataclass(frozen=True)
class PriceRecommendation:
    conservative: float
    balanced: float
    competitive: float
    premium: float
    minimum_viable_price: float
    break_even_price: float
    recommended_range: Tuple[float, float]
    competitive_position: str  # 'budget', 'mid-market', 'premium', 'luxury'
