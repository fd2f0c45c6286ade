import pytest

from kitchen_utils.ingredients.matching import (
    extract_ingredients_from_text,
    find_best_ingredient_match,
    phonetic_key,
    similarity,
    suggest_ingredient_corrections,
)


@pytest.mark.parametrize(
    "text, expected_key",
    [
        ("zucchini", "zckn"),
        ("zukini", "zkn"),
        ("chili", "kl"),
        ("kili", "kl"),
        ("123", ""),
    ],
)
def test_phonetic_key(text, expected_key):
    assert phonetic_key(text) == expected_key


def test_similarity_is_case_insensitive():
    assert similarity("Tomato", "tomato") == 1.0
    assert similarity("", "") == 1.0


def test_exact_match():
    match = find_best_ingredient_match("Tomato")
    assert match.ingredient == "tomato"
    assert match.confidence == 1.0
    assert match.match_type == "exact"
    assert match.original_input == "Tomato"


def test_fuzzy_match():
    match = find_best_ingredient_match("tomatoe", ["tomato", "potato"])
    assert match.ingredient == "tomato"
    assert match.match_type == "fuzzy"
    assert match.confidence == pytest.approx(12 / 13)


def test_phonetic_match():
    match = find_best_ingredient_match("kili", ["chili", "lime"])
    assert match.ingredient == "chili"
    assert match.match_type == "phonetic"
    assert match.confidence == pytest.approx(0.9)


def test_substring_match():
    match = find_best_ingredient_match("avocado halves", ["avocado", "tomato"])
    assert match.ingredient == "avocado"
    assert match.match_type == "substring"
    assert match.confidence == pytest.approx(0.35)


def test_context_match_uses_dish_type():
    assert find_best_ingredient_match("basel", ["lemon"]) is None
    match = find_best_ingredient_match("basel", ["lemon"], dish_type="Pasta")
    assert match.ingredient == "basil"
    assert match.match_type == "context"
    assert match.confidence == pytest.approx(0.72)


@pytest.mark.parametrize("text", ["", "   ", "xyzzy"])
def test_no_match(text):
    assert find_best_ingredient_match(text, ["tomato"]) is None


def test_extract_ingredients_from_text():
    matches = extract_ingredients_from_text("I need tomatoe and basil", ["tomato", "basil"])
    assert [m.ingredient for m in matches] == ["basil", "tomato"]
    assert extract_ingredients_from_text("", ["tomato"]) == []


def test_suggest_ingredient_corrections():
    suggestions = suggest_ingredient_corrections(
        "tomatoe", ["basil", "potato", "tomato"], limit=2
    )
    assert [s.ingredient for s in suggestions] == ["tomato", "potato"]
    assert suggestions[0].match_type == "fuzzy"


def test_suggest_ingredient_corrections_respects_limit():
    assert len(suggest_ingredient_corrections("a", limit=3)) <= 3
