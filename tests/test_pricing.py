import pytest

from kitchen_utils.costing.pricing import (
    calculate_menu_price,
    format_currency,
    format_percentage,
    generate_price_recommendations,
    round_to_menu_price,
)


@pytest.mark.parametrize(
    "price, expected",
    [
        (0, 0.0),
        (-2.0, 0.0),
        (3.14, 3.1),
        (4.96, 5.0),
        (7.1, 7.0),
        (7.3, 7.5),
        (7.5, 7.5),
        (7.8, 7.9),
        (7.9, 7.95),
        (22.3, 22.5),
        (22.1, 22.0),
    ],
)
def test_round_to_menu_price(price, expected):
    assert round_to_menu_price(price) == pytest.approx(expected)


def test_calculate_menu_price():
    assert calculate_menu_price(2.0, 25) == pytest.approx(8.0)
    assert calculate_menu_price(0, 30) == 0.0


def test_generate_price_recommendations():
    rec = generate_price_recommendations(2.0)
    assert rec.conservative == pytest.approx(5.5)
    assert rec.balanced == pytest.approx(6.5)
    assert rec.competitive == pytest.approx(8.0)
    assert rec.premium == pytest.approx(10.0)
    assert rec.minimum_viable_price == pytest.approx(5.0)
    assert rec.break_even_price == 2.0
    assert rec.recommended_range == pytest.approx((5.5, 10.0))
    assert rec.competitive_position == "mid-market"


@pytest.mark.parametrize(
    "average, position",
    [(10.0, "budget"), (6.0, "mid-market"), (5.0, "premium"), (4.0, "luxury")],
)
def test_competitive_position(average, position):
    assert generate_price_recommendations(2.0, average).competitive_position == position


def test_formatting():
    assert format_currency(12.5) == "€12.50"
    assert format_percentage(28.333) == "28.3%"
