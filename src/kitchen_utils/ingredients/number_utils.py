"""Number parsing helpers for dictated prices and quantities."""

import re
from typing import Optional

# Spoken number words (English and German) that show up in dictated prices
WORD_TO_NUMBER = {
    # English
    "half": 0.5,
    "quarter": 0.25,
    "one": 1,
    "two": 2,
    "three": 3,
    "four": 4,
    "five": 5,
    "six": 6,
    "seven": 7,
    "eight": 8,
    "nine": 9,
    "ten": 10,
    "eleven": 11,
    "twelve": 12,
    "thirteen": 13,
    "fourteen": 14,
    "fifteen": 15,
    "sixteen": 16,
    "seventeen": 17,
    "eighteen": 18,
    "nineteen": 19,
    "twenty": 20,
    "thirty": 30,
    "forty": 40,
    "fifty": 50,
    "sixty": 60,
    "seventy": 70,
    "eighty": 80,
    "ninety": 90,
    # German
    "halb": 0.5,
    "halbe": 0.5,
    "ein": 1,
    "eine": 1,
    "einen": 1,
    "zwei": 2,
    "drei": 3,
    "vier": 4,
    "fünf": 5,
    "sechs": 6,
    "sieben": 7,
    "acht": 8,
    "neun": 9,
    "zehn": 10,
    "elf": 11,
    "zwölf": 12,
    "dreizehn": 13,
    "vierzehn": 14,
    "fünfzehn": 15,
    "sechzehn": 16,
    "siebzehn": 17,
    "achtzehn": 18,
    "neunzehn": 19,
    "zwanzig": 20,
    "dreißig": 30,
    "vierzig": 40,
    "fünfzig": 50,
    "sechzig": 60,
    "siebzig": 70,
    "achtzig": 80,
    "neunzig": 90,
}

# Longest first so "fünfzehn" is not consumed as "fünf"
_NUMBER_WORD = "|".join(
    re.escape(word) for word in sorted(WORD_TO_NUMBER, key=len, reverse=True)
)
_CURRENCY_WORD = r"(?:euros?|eur|€|cent)"

# "ein Euro fünfzig", "two euro and twenty"
_EURO_AND_CENTS = re.compile(
    rf"\b({_NUMBER_WORD})\s+(euros?|eur)\s+(?:und\s+|and\s+)?({_NUMBER_WORD})\b"
    rf"(?!\s*{_CURRENCY_WORD})",
    re.IGNORECASE,
)
# "one twenty" -> 1.20, "zwei fünfzig" -> 2.50
_UNITS_AND_CENTS = re.compile(
    rf"\b({_NUMBER_WORD})\s+({_NUMBER_WORD})\b", re.IGNORECASE
)
# "two euro", "fünfzig cent"
_BEFORE_CURRENCY = re.compile(
    rf"\b({_NUMBER_WORD})\b(?=\s*{_CURRENCY_WORD}(?![a-zäöüß]))", re.IGNORECASE
)


def _is_number(text: str) -> bool:
    """Check if a string represents a valid number (int or float)."""
    try:
        float(text)
        return True
    except ValueError:
        return False


def parse_decimal(text: str) -> Optional[float]:
    """Parse a number written with either a decimal point or a German decimal comma.

    Examples:
        >>> parse_decimal("2,50")
        2.5
        >>> parse_decimal("12")
        12.0
        >>> parse_decimal("abc") is None
        True
    """
    normalized = text.strip().replace(",", ".")
    if not _is_number(normalized):
        return None
    return float(normalized)


def _word_value(word: str) -> float:
    return WORD_TO_NUMBER[word.lower()]


def _format_amount(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return f"{value:g}"


def _euro_cent_pair(euros: float, cents: float) -> Optional[str]:
    if not float(euros).is_integer() or not float(cents).is_integer():
        return None
    if not 1 <= euros < 100 or not 10 <= cents < 100:
        return None
    return f"{int(euros)}.{int(cents):02d}"


def replace_spoken_numbers(text: str) -> str:
    """Rewrite spoken price amounts as digits.

    Only number words in a price position are touched: directly before a
    currency word, in a "<euros> <cents>" pair, or split around "Euro".
    Articles such as "eine Zwiebel" stay as they are.

    Examples:
        >>> replace_spoken_numbers("avocados two euro tomatoes one twenty")
        'avocados 2 euro tomatoes 1.20'
        >>> replace_spoken_numbers("Butter ein Euro fünfzig")
        'Butter 1.50 Euro'
    """

    def euro_and_cents(match: re.Match) -> str:
        amount = _euro_cent_pair(_word_value(match.group(1)), _word_value(match.group(3)))
        if amount is None:
            return match.group(0)
        return f"{amount} {match.group(2)}"

    def units_and_cents(match: re.Match) -> str:
        amount = _euro_cent_pair(_word_value(match.group(1)), _word_value(match.group(2)))
        return amount if amount is not None else match.group(0)

    def before_currency(match: re.Match) -> str:
        return _format_amount(_word_value(match.group(1)))

    text = _EURO_AND_CENTS.sub(euro_and_cents, text)
    text = _UNITS_AND_CENTS.sub(units_and_cents, text)
    text = _BEFORE_CURRENCY.sub(before_currency, text)
    return text
