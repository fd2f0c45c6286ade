"""Tabular helpers for parsing many dictated ingredient lists at once."""

from typing import Iterable, List, Optional, Sequence

import numpy as np
import pandas as pd
from tqdm import tqdm

from kitchen_utils.ingredients.models import ParsedIngredientCandidate
from kitchen_utils.ingredients.parsing import IngredientListParser, validate

CANDIDATE_COLUMNS = [
    "utterance_id",
    "name",
    "price",
    "unit",
    "price_unit",
    "category",
    "tags",
    "allergens",
    "confidence",
    "is_valid",
    "errors",
    "raw_input",
]


def candidates_to_dataframe(
    candidates: Sequence[ParsedIngredientCandidate], utterance_id: int = 0
) -> pd.DataFrame:
    """One row per candidate; list-valued fields are joined with ``;``."""
    rows = []
    for candidate in candidates:
        validation = validate(candidate)
        rows.append(
            {
                "utterance_id": utterance_id,
                "name": candidate.name_raw,
                "price": candidate.price if candidate.price is not None else np.nan,
                "unit": candidate.unit,
                "price_unit": candidate.price_unit or "",
                "category": candidate.category or "",
                "tags": ";".join(candidate.tags),
                "allergens": ";".join(candidate.allergens),
                "confidence": candidate.confidence,
                "is_valid": validation.is_valid,
                "errors": ";".join(validation.errors),
                "raw_input": candidate.raw_input,
            }
        )
    return pd.DataFrame(rows, columns=CANDIDATE_COLUMNS)


def parse_utterances(
    utterances: Iterable[str],
    parser: Optional[IngredientListParser] = None,
    show_progress: bool = False,
) -> pd.DataFrame:
    """Parse every utterance and stack the candidates into one DataFrame.

    Args:
        utterances: Dictated ingredient lists, one per item
        parser: Parser to use; a default ``IngredientListParser`` otherwise
        show_progress: Display a tqdm progress bar

    Returns:
        DataFrame with ``CANDIDATE_COLUMNS``; ``utterance_id`` is the index
        of the source utterance
    """
    parser = parser or IngredientListParser()
    frames = [
        candidates_to_dataframe(parser.parse(utterance), utterance_id=i)
        for i, utterance in enumerate(
            tqdm(utterances, desc="Parsing utterances", disable=not show_progress)
        )
    ]
    frames = [frame for frame in frames if not frame.empty]
    if not frames:
        return pd.DataFrame(columns=CANDIDATE_COLUMNS)
    return pd.concat(frames, ignore_index=True)


def load_utterances(path: str) -> List[str]:
    """Read one utterance per non-blank line."""
    with open(path, "r", encoding="utf-8") as f:
        return [line.strip() for line in f if line.strip()]


def write_candidates_csv(df: pd.DataFrame, output_file: str) -> None:
    df.to_csv(output_file, index=False)
    print(f"Wrote {len(df)} parsed ingredients to {output_file}")
