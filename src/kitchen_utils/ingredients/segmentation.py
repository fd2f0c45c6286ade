"""Split one dictated utterance into one text segment per ingredient.

Segmentation runs an ordered list of strategies. Each strategy receives the
text and returns its segments; the next strategy is only tried while the
result is still a single segment.
"""

import re
from typing import Callable, List, Optional, Sequence, Tuple

from kitchen_utils.ingredients.extraction import (
    extract_prices,
    match_trailing_unit,
)
from kitchen_utils.ingredients.knowledge import KnowledgeBase, load_knowledge_base

# Only a single segment longer than this gets the vocabulary split
KEYWORD_SPLIT_MIN_LENGTH = 50
KEYWORD_PRICE_WINDOW = 3

# A comma between two digits is a German decimal comma
_DELIMITERS = re.compile(r"(?<!\d),|,(?!\d)|;")
# Dictated pauses: "...", " . ", ". ."
_PAUSES = re.compile(r"\.{2,}|\.\s+\.|\s+\.(?=\s)")
_NEXT_WORD = re.compile(r"\s*[a-zA-ZäöüÄÖÜß]+")

Strategy = Callable[[str], List[str]]


def _clean_pieces(pieces: Sequence[str]) -> List[str]:
    return [piece.strip() for piece in pieces if piece.strip()]


def split_on_delimiters(text: str) -> List[str]:
    """Split on commas and semicolons.

    Examples:
        >>> split_on_delimiters("Avocado 2 Euro, Kartoffel 1,50; Salz")
        ['Avocado 2 Euro', 'Kartoffel 1,50', 'Salz']
    """
    return _clean_pieces(_DELIMITERS.split(text))


def split_on_pauses(text: str) -> List[str]:
    """Split on repeated periods or a period standing between spaces."""
    return _clean_pieces(_PAUSES.split(text))


def split_on_price_boundaries(text: str) -> List[str]:
    """Split unpunctuated text after each price that is followed by a word.

    A price closes a segment when there is text before it and a word right
    after it (after any unit phrase such as "pro kg" that belongs to it).

    Examples:
        >>> split_on_price_boundaries("avocados 2 euro tomatoes 1.20")
        ['avocados 2 euro', 'tomatoes 1.20']
    """
    segments = []
    start = covered = 0
    for match in extract_prices(text):
        if match.position < covered:
            continue  # inside a price phrase already seen
        end = match.position + len(match.raw)
        trailing = match_trailing_unit(text, end)
        if trailing:
            end = trailing[0]
        covered = end
        before = text[start : match.position].strip()
        if before and _NEXT_WORD.match(text, end):
            segments.append(f"{before} {text[match.position:end].strip()}")
            start = end

    rest = text[start:].strip()
    if rest:
        segments.append(rest)
    return segments


def _is_vocabulary_word(token: str, vocabulary: frozenset) -> bool:
    word = token.strip(".,;:!?").lower()
    if word in vocabulary:
        return True
    # Plurals: "tomatoes", "avocados"
    return (word.endswith("s") and word[:-1] in vocabulary) or (
        word.endswith("es") and word[:-2] in vocabulary
    )


def make_keyword_splitter(vocabulary: Sequence[str]) -> Strategy:
    """Build the last-resort splitter for long unpunctuated utterances.

    An ingredient word followed within a few tokens by a price and then by
    another ingredient word starts a new segment at that second word.
    """
    words = frozenset(word.lower() for word in vocabulary)

    def split_on_keywords(text: str) -> List[str]:
        if len(text) <= KEYWORD_SPLIT_MIN_LENGTH:
            return [text.strip()] if text.strip() else []

        tokens = text.split()
        segments = []
        current: List[str] = []
        i = 0
        while i < len(tokens):
            current.append(tokens[i])
            if _is_vocabulary_word(tokens[i], words):
                boundary = _price_then_ingredient(tokens, i, words)
                if boundary is not None:
                    current.extend(tokens[i + 1 : boundary])
                    segments.append(" ".join(current))
                    current = []
                    i = boundary
                    continue
            i += 1
        if current:
            segments.append(" ".join(current))
        return segments

    return split_on_keywords


def _price_then_ingredient(
    tokens: List[str], index: int, words: frozenset
) -> Optional[int]:
    """Index of the ingredient word that follows a price after ``tokens[index]``."""
    for width in range(1, KEYWORD_PRICE_WINDOW + 1):
        following = index + 1 + width
        if following >= len(tokens):
            return None
        window = " ".join(tokens[index + 1 : following])
        if extract_prices(window) and _is_vocabulary_word(tokens[following], words):
            return following
    return None


def default_strategies(
    knowledge: Optional[KnowledgeBase] = None,
) -> Tuple[Tuple[str, Strategy], ...]:
    knowledge = knowledge or load_knowledge_base()
    return (
        ("delimiters", split_on_delimiters),
        ("pauses", split_on_pauses),
        ("price_boundaries", split_on_price_boundaries),
        ("keywords", make_keyword_splitter(knowledge.ingredient_vocabulary)),
    )


SEGMENTATION_STRATEGIES = default_strategies()


class Segmenter:
    """Apply segmentation strategies in order until one of them splits the text."""

    def __init__(self, strategies: Sequence[Tuple[str, Strategy]] = SEGMENTATION_STRATEGIES):
        self.strategies = tuple(strategies)

    def segment(self, text: str) -> List[str]:
        if not text or not text.strip():
            return []

        segments = [text.strip()]
        for _name, strategy in self.strategies:
            if len(segments) != 1:
                break
            segments = strategy(segments[0]) or segments
        return segments


_DEFAULT_SEGMENTER = Segmenter()


def segment(text: str) -> List[str]:
    """Split an utterance into ingredient segments with the default strategies.

    Examples:
        >>> segment("Avocado 2 Euro, Kartoffel 1.50, Zwiebel 0.80 pro Kilo")
        ['Avocado 2 Euro', 'Kartoffel 1.50', 'Zwiebel 0.80 pro Kilo']
        >>> segment("   ")
        []
    """
    return _DEFAULT_SEGMENTER.segment(text)
