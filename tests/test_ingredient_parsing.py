import pytest

from kitchen_utils.ingredients.models import ParsedIngredientCandidate
from kitchen_utils.ingredients.parsing import (
    IngredientListParser,
    confidence_level,
    format_parsed_ingredient,
    parse,
    strip_price_and_unit,
    validate,
)

MIXED_UTTERANCE = (
    "Bio Tomaten 4.50 pro kg, normale Zwiebeln 1.20, "
    "Premium Olivenöl 12 Euro pro Liter"
)


def make_candidate(**overrides):
    fields = dict(
        name_raw="Tomaten",
        price=4.5,
        unit="kg",
        price_unit="per kg",
        tags=("vegetarian", "vegan"),
        confidence="high",
        raw_input="Tomaten 4.50 pro kg",
    )
    fields.update(overrides)
    return ParsedIngredientCandidate(**fields)


def test_parse_mixed_utterance():
    tomatoes, onions, oil = parse(MIXED_UTTERANCE)

    assert tomatoes.name_raw == "Tomaten"
    assert tomatoes.price == pytest.approx(4.5)
    assert tomatoes.unit == "kg"
    assert tomatoes.price_unit == "per kg"
    assert tomatoes.category == "vegetables"
    assert tomatoes.tags == ("vegetarian", "vegan")
    assert tomatoes.confidence == "high"
    assert tomatoes.raw_input == "Bio Tomaten 4.50 pro kg"

    assert onions.name_raw == "normale Zwiebeln"
    assert onions.price == pytest.approx(1.2)
    assert onions.unit == "piece"
    assert onions.price_unit is None
    assert onions.category == "vegetables"

    assert oil.price == pytest.approx(12.0)
    assert oil.unit == "l"
    assert oil.category == "oils"


def test_filler_words_are_kept_minimal():
    # Only pro/per/je/für/organic/bio are stripped; qualifiers stay in the name
    names = [c.name_raw for c in parse(MIXED_UTTERANCE)]
    assert names == ["Tomaten", "normale Zwiebeln", "Premium Olivenöl"]
    assert parse("frische Tomaten 3 Euro")[0].name_raw == "frische Tomaten"
    assert parse("organic tomatoes 3 euro")[0].name_raw == "tomatoes"


@pytest.mark.parametrize(
    "utterance, expected",
    [
        (
            "Avocado 2 Euro, Kartoffel 1.50, Zwiebel 0.80 pro Kilo",
            [
                ("Avocado", 2.0, "piece"),
                ("Kartoffel", 1.5, "piece"),
                ("Zwiebel", 0.8, "kg"),
            ],
        ),
        (
            "Hähnchenbrust 8 Euro pro kg, Lachs 15.50 pro kg, Garnelen 22 Euro",
            [
                ("Hähnchenbrust", 8.0, "kg"),
                ("Lachs", 15.5, "kg"),
                ("Garnelen", 22.0, "piece"),
            ],
        ),
        (
            "Mehl 0.89 pro kg, Eier 2.50 für 12 Stück, Milch 1.20 pro Liter",
            [
                ("Mehl", 0.89, "kg"),
                ("Eier", 2.5, "piece"),
                ("Milch", 1.2, "l"),
            ],
        ),
    ],
)
def test_parse_examples(utterance, expected):
    candidates = parse(utterance)
    assert [(c.name_raw, c.unit) for c in candidates] == [
        (name, unit) for name, _, unit in expected
    ]
    for candidate, (_, price, _) in zip(candidates, expected):
        assert candidate.price == pytest.approx(price)


def test_parse_fish_carries_allergens():
    salmon = parse("Lachs 15.50 pro kg")[0]
    assert salmon.category == "fish"
    assert salmon.tags == ()
    assert salmon.allergens == ("fish", "shellfish")


def test_parse_spoken_prices():
    candidates = IngredientListParser().parse("avocados two euro tomatoes one twenty")
    assert [(c.name_raw, c.price) for c in candidates] == [
        ("avocados", 2.0),
        ("tomatoes", 1.2),
    ]


def test_parse_without_spoken_number_rewriting():
    parser = IngredientListParser(spoken_numbers=False)
    candidates = parser.parse("avocados two euro tomatoes one twenty")
    assert len(candidates) == 1
    assert candidates[0].price is None


@pytest.mark.parametrize("utterance", ["", "   ", "4.50 pro kg", "bio", ", ;"])
def test_parse_degenerate_input_yields_nothing(utterance):
    assert parse(utterance) == []


def test_parse_never_raises_on_nonsense():
    for utterance in ["€€€", "1,2,3,4", "... . ...", "pro pro pro 5 5 5", "ä ö ü ß"]:
        assert isinstance(parse(utterance), list)


def test_parse_is_repeatable():
    assert parse(MIXED_UTTERANCE) == parse(MIXED_UTTERANCE)


@pytest.mark.parametrize(
    "utterance, expected_confidence",
    [
        ("Tomaten 4.50 pro kg", "high"),
        ("Tomaten", "high"),
        ("Xylofon 5 Euro", "medium"),
        ("Xylofon", "low"),
        ("Xylofon 150 Euro", "low"),
    ],
)
def test_parse_confidence(utterance, expected_confidence):
    assert parse(utterance)[0].confidence == expected_confidence


@pytest.mark.parametrize(
    "known, price, unit_detected, expected",
    [
        (True, 4.5, True, "high"),
        (True, None, False, "high"),
        (False, 2.0, True, "high"),
        (False, 2.0, False, "medium"),
        (False, None, True, "medium"),
        (False, 0.05, False, "low"),
        (False, None, False, "low"),
    ],
)
def test_confidence_level(known, price, unit_detected, expected):
    assert confidence_level(known, price, unit_detected) == expected


@pytest.mark.parametrize(
    "segment, expected_name",
    [
        ("Bio Tomaten 4.50 pro kg", "Tomaten"),
        ("Eier 2.50 für 12 Stück", "Eier"),
        ("Premium Olivenöl 12 Euro pro Liter", "Premium Olivenöl"),
        ("Sahne 200ml 1,99 €", "Sahne"),
    ],
)
def test_strip_price_and_unit(segment, expected_name):
    assert strip_price_and_unit(segment) == expected_name


def test_validate_accepts_good_candidate():
    result = validate(make_candidate())
    assert result.is_valid
    assert result.errors == []


@pytest.mark.parametrize(
    "overrides, expected_errors",
    [
        ({"name_raw": "T"}, ["Ingredient name too short"]),
        ({"price": 0.0}, ["Price out of reasonable range"]),
        ({"price": 1000.5}, ["Price out of reasonable range"]),
        ({"unit": ""}, ["Unit not specified"]),
        (
            {"name_raw": "", "price": -1.0, "unit": ""},
            [
                "Ingredient name too short",
                "Price out of reasonable range",
                "Unit not specified",
            ],
        ),
    ],
)
def test_validate_accumulates_errors(overrides, expected_errors):
    result = validate(make_candidate(**overrides))
    assert not result.is_valid
    assert result.errors == expected_errors


def test_validate_allows_upper_price_bound_and_missing_price():
    assert validate(make_candidate(price=1000.0)).is_valid
    assert validate(make_candidate(price=None)).is_valid


def test_format_parsed_ingredient():
    assert (
        format_parsed_ingredient(parse("Tomaten 4.50 pro kg")[0])
        == "Tomaten €4.50 per kg (vegetarian, vegan)"
    )
    assert format_parsed_ingredient(parse("Salz")[0]) == "Salz (vegetarian, vegan)"
    assert format_parsed_ingredient(make_candidate(price=None, price_unit=None, tags=())) == (
        "Tomaten"
    )


@pytest.mark.parametrize(
    "utterance, name, price, unit",
    [
        ("Butter 1,50 Euro", "Butter", 1.5, "piece"),
        ("Lachs 15.50 EUR pro kg", "Lachs", 15.5, "kg"),
    ],
)
def test_parse_amount_with_currency_word_is_one_candidate(utterance, name, price, unit):
    candidates = parse(utterance)
    assert len(candidates) == 1
    assert candidates[0].name_raw == name
    assert candidates[0].price == pytest.approx(price)
    assert candidates[0].unit == unit


@pytest.mark.parametrize(
    "segment, expected",
    [("Hähnchen 1000 Euro", "Hähnchen"), ("Mehl 0 Euro", "Mehl")],
)
def test_out_of_range_price_phrase_is_stripped_from_name(segment, expected):
    assert strip_price_and_unit(segment) == expected
    candidate = parse(segment)[0]
    assert candidate.name_raw == expected
    assert candidate.price is None
