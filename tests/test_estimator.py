from decimal import Decimal
from types import SimpleNamespace

import pytest

from paintperfect.models.enums import PriceType
from paintperfect.services.estimator import (
    RoomRate,
    adjust_room_count,
    build_rate_table,
    dimensions_payload,
    estimate_cost,
    parse_side,
    resolve_dimensions,
    room_summary,
    selected_rooms,
)


@pytest.fixture
def rates():
    return {
        "Bedroom": RoomRate("Bedroom", PriceType.PER_SQ_FT, Decimal("2.5")),
        "Kitchen": RoomRate("Kitchen", PriceType.PER_ROOM, Decimal("350")),
    }


def test_per_sq_ft_uses_area_and_count(rates):
    assert estimate_cost({"Bedroom": 2}, 12, 10, rates) == Decimal("600.00")


def test_per_room_ignores_area(rates):
    assert estimate_cost({"Kitchen": 1}, 30, 30, rates) == Decimal("350.00")
    assert estimate_cost({"Kitchen": 2}, None, None, rates) == Decimal("700.00")


def test_missing_dimensions_default_to_ten_feet(rates):
    # 10 x 10 = 100 sq ft
    assert estimate_cost({"Bedroom": 1}, None, "", rates) == Decimal("250.00")
    assert estimate_cost({"Bedroom": 1}, "abc", -4, rates) == Decimal("250.00")


def test_one_side_missing_only_defaults_that_side(rates):
    assert estimate_cost({"Bedroom": 1}, 20, None, rates) == Decimal("500.00")


def test_unpriced_rooms_and_zero_counts_contribute_nothing(rates):
    assert estimate_cost({"Attic": 3, "Bedroom": 0, "Kitchen": -2}, 10, 10, rates) == Decimal("0.00")
    assert estimate_cost({}, 10, 10, rates) == Decimal("0.00")
    assert estimate_cost(None, 10, 10, rates) == Decimal("0.00")


def test_mixed_rooms_add_up(rates):
    assert estimate_cost({"Bedroom": 1, "Kitchen": 1}, "12", "15", rates) == Decimal("800.00")


def test_result_is_rounded_half_up_to_cents():
    rates = {"Hall": RoomRate("Hall", PriceType.PER_SQ_FT, Decimal("1.005"))}
    assert estimate_cost({"Hall": 1}, 1, 1, rates) == Decimal("1.01")


def test_build_rate_table_reads_room_categories_and_first_price():
    categories = [
        SimpleNamespace(id="c1", type="room", value="Bedroom"),
        SimpleNamespace(id="c2", type="style", value="Modern"),
        SimpleNamespace(id="c3", type="room", value="Garage"),
    ]
    pricing = [
        SimpleNamespace(category_id="c1", price_type="per_sq_ft", price_value=2.0),
        SimpleNamespace(category_id="c1", price_type="per_room", price_value=999.0),
        SimpleNamespace(category_id="c2", price_type="per_room", price_value=50.0),
        SimpleNamespace(category_id=None, price_type="per_room", price_value=1.0),
    ]
    table = build_rate_table(categories, pricing)

    assert list(table) == ["Bedroom"]
    assert table["Bedroom"].price_type is PriceType.PER_SQ_FT
    assert table["Bedroom"].price_value == Decimal("2.0")


@pytest.mark.parametrize(
    "value,expected",
    [(12, 12.0), ("7.5", 7.5), (" 3 ", 3.0), (None, None), ("", None), ("x", None),
     (0, None), (-1, None), (float("nan"), None), (True, None)],
)
def test_parse_side(value, expected):
    assert parse_side(value) == expected


def test_resolve_and_payload():
    assert resolve_dimensions(None, 8) == (10.0, 8.0)
    assert dimensions_payload(12, 10) == {"length": 12.0, "breadth": 10.0}
    assert dimensions_payload(12, None) is None


def test_selected_rooms_keeps_positive_counts_only():
    assert selected_rooms({"Bedroom": "2", "Kitchen": 0, "Attic": -1, "Hall": "x"}) == {"Bedroom": 2}


def test_adjust_room_count_never_below_zero():
    counts = adjust_room_count({"Bedroom": 1}, "Bedroom", -1)
    assert counts == {"Bedroom": 0}
    assert adjust_room_count(counts, "Bedroom", -1) == {"Bedroom": 0}
    assert adjust_room_count({}, "Kitchen", 1) == {"Kitchen": 1}


def test_room_summary():
    assert room_summary({"Bedroom": 2, "Kitchen": 1}) == "2 Bedrooms, 1 Kitchen"
    assert room_summary({}) == "No rooms specified"
    assert room_summary(None) == "No rooms specified"
