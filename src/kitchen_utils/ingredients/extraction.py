"""Price and unit extraction from dictated ingredient text."""

import dataclasses
import re
from typing import Iterator, List, Optional, Sequence, Tuple

from kitchen_utils.ingredients.models import PriceMatch, UnitMatch
from kitchen_utils.ingredients.normalization import UNIT_MAP, normalize_unit
from kitchen_utils.ingredients.number_utils import parse_decimal

# --- Constants ---

MIN_PRICE = 0.0
MAX_PRICE = 1000.0

NUMBER = r"\d+(?:[,.]\d+)?"


def _unit_alternation(*canonical_units: str) -> str:
    """Regex alternation of every synonym of the given canonical units."""
    synonyms = [s for unit in canonical_units for s in UNIT_MAP[unit]]
    # Longest first so "kilogramm" wins over "kilo"
    return "|".join(re.escape(s) for s in sorted(synonyms, key=len, reverse=True))


WEIGHT_UNITS = _unit_alternation("kg", "g")
VOLUME_UNITS = _unit_alternation("l", "ml")
PIECE_UNITS = _unit_alternation("piece")
ALL_UNITS = "|".join([WEIGHT_UNITS, VOLUME_UNITS, PIECE_UNITS])


@dataclasses.dataclass(frozen=True)
class PricePattern:
    name: str
    regex: re.Pattern
    divisor: float = 1.0  # 100 for amounts spoken in cents


@dataclasses.dataclass(frozen=True)
class UnitPattern:
    name: str
    regex: re.Pattern


# Ordered; every pattern captures the amount in group 1
PRICE_PATTERNS: Tuple[PricePattern, ...] = (
    # "2 Euro", "2,50 €", "3 EUR"
    PricePattern(
        "amount_currency",
        re.compile(rf"({NUMBER})\s*(?:euros?|eur|€)(?![a-zäöüß])", re.IGNORECASE),
    ),
    # "€2.50"
    PricePattern("currency_amount", re.compile(rf"€\s*({NUMBER})", re.IGNORECASE)),
    # "0.80 pro Kilo": a bare number only counts when a preposition follows
    PricePattern(
        "amount_preposition",
        re.compile(
            rf"(?<![\d.,])({NUMBER})(?=\s*(?:pro|per|je|für)\b)", re.IGNORECASE
        ),
    ),
    # "für 12", "je 3,50"
    PricePattern(
        "preposition_amount",
        re.compile(rf"\b(?:für|pro|je)\s*({NUMBER})", re.IGNORECASE),
    ),
    # "Kartoffel 1.50": two decimals read as euros and cents unless a unit or
    # currency word follows
    PricePattern(
        "euro_cent_decimal",
        re.compile(
            rf"(?<![\d.,])(\d+[,.]\d{{2}})(?!\d)(?![.,]\d)(?!\s*(?:{ALL_UNITS})\b)"
            r"(?!\s*(?:euros?|eur|€|cents?)(?![a-zäöüß]))",
            re.IGNORECASE,
        ),
    ),
    # "50 Cent"
    PricePattern(
        "cents",
        re.compile(r"(?<![\d.,])(\d+)\s*cents?\b", re.IGNORECASE),
        divisor=100.0,
    ),
)

# Ordered; every pattern captures the unit word in group 1
UNIT_PATTERNS: Tuple[UnitPattern, ...] = tuple(
    UnitPattern(f"{dimension}_{form}", re.compile(template.format(units), re.IGNORECASE))
    for dimension, units in (
        ("weight", WEIGHT_UNITS),
        ("volume", VOLUME_UNITS),
        ("piece", PIECE_UNITS),
    )
    for form, template in (
        # "pro kg"
        ("per", r"\b(?:pro|per|je)\s*({})\b"),
        # "500 g"
        ("quantity", r"\b" + NUMBER + r"\s*({})\b"),
    )
)

# Unit phrase trailing a price: "pro kg", "/l", "für 12 Stück"
_TRAILING_UNIT_PHRASE = re.compile(
    rf"\s*(?:(?:pro|per|je|für|/)\s*(?:{NUMBER}\s*)?)?({ALL_UNITS})\b", re.IGNORECASE
)

# --- Functions ---


def match_trailing_unit(text: str, pos: int) -> Optional[Tuple[int, str]]:
    """Match a unit phrase starting at ``pos``.

    Returns:
        ``(end, canonical_unit)`` when a unit phrase follows, otherwise None.

    Examples:
        >>> match_trailing_unit("4.50 pro kg Zwiebeln", 4)
        (11, 'kg')
    """
    match = _TRAILING_UNIT_PHRASE.match(text, pos)
    if not match:
        return None
    return match.end(), normalize_unit(match.group(1))


def _price_pattern_matches(
    text: str, patterns: Sequence[PricePattern] = PRICE_PATTERNS
) -> Iterator[Tuple[PricePattern, re.Match]]:
    for pattern in patterns:
        for match in pattern.regex.finditer(text):
            yield pattern, match


def extract_prices(
    text: str, patterns: Sequence[PricePattern] = PRICE_PATTERNS
) -> List[PriceMatch]:
    """Find every price mention in ``text``.

    Each pattern is applied over the whole text; amounts are parsed with
    German decimal commas accepted and only kept inside ``(0, 1000)``.
    Overlapping matches from different patterns are all returned.

    Args:
        text: Dictated text, possibly holding several ingredients.
        patterns: Ordered price patterns to apply.

    Returns:
        Price matches ordered by position (pattern order breaks ties).

    Examples:
        >>> [m.price for m in extract_prices("Avocado 2 Euro, Kartoffel 1,50")]
        [2.0, 1.5]
    """
    prices = []
    for pattern, match in _price_pattern_matches(text, patterns):
        value = parse_decimal(match.group(1))
        if value is None:
            continue
        value = value / pattern.divisor
        if not MIN_PRICE < value < MAX_PRICE:
            continue  # likely a quantity or noise
        trailing = match_trailing_unit(text, match.end())
        prices.append(
            PriceMatch(
                price=value,
                position=match.start(),
                raw=match.group(0),
                unit=trailing[1] if trailing else None,
            )
        )
    return sorted(prices, key=lambda m: m.position)


def extract_units(
    text: str, patterns: Sequence[UnitPattern] = UNIT_PATTERNS
) -> List[UnitMatch]:
    """Find every unit mention in ``text``, canonicalized.

    Examples:
        >>> [(m.unit, m.raw) for m in extract_units("Olivenöl 12 Euro pro Liter")]
        [('l', 'pro Liter')]
    """
    units = []
    for pattern in patterns:
        for match in pattern.regex.finditer(text):
            units.append(
                UnitMatch(
                    unit=normalize_unit(match.group(1)),
                    position=match.start(),
                    raw=match.group(0),
                )
            )
    return sorted(units, key=lambda m: m.position)


def find_price_unit_spans(text: str) -> List[Tuple[int, int]]:
    """Return merged ``(start, end)`` spans covered by price or unit mentions.

    Price phrases are covered even when their amount falls outside the
    accepted price range, so "1000 Euro" never ends up in a name.
    """
    spans = sorted(
        [match.span() for _, match in _price_pattern_matches(text)]
        + [(m.position, m.position + len(m.raw)) for m in extract_units(text)]
    )
    merged: List[Tuple[int, int]] = []
    for start, end in spans:
        if merged and start <= merged[-1][1]:
            merged[-1] = (merged[-1][0], max(merged[-1][1], end))
        else:
            merged.append((start, end))
    return merged
