from __future__ import annotations

import pytest

from quotecalc.normalize import map_category, normalize, to_float


def test_normalize_orders_packages_items_labor():
    lines = normalize(
        [{"name": "Silver Tier", "price": 18, "priceType": "FLAT"}],
        [{"name": "Chips & Salsa", "unitPrice": 25, "quantity": 2, "category": "FOOD"}],
        [{"role": "Chef", "rate": 35, "hours": 5}],
    )
    assert [line.kind for line in lines] == ["flat", "unit", "hourly"]
    assert [line.category for line in lines] == ["package", "food", "labor"]
    assert [line.id for line in lines] == ["package-1", "item-1", "labor-1"]
    assert [line.total for line in lines] == [18, 50, 175]


def test_per_person_package_uses_guest_count():
    (line,) = normalize([{"name": "Gold", "price": 25, "priceType": "PER_PERSON"}], guest_count=40)
    assert line.quantity == 40
    assert line.total == 1000


def test_explicit_package_quantity_wins_over_guest_count():
    (line,) = normalize([{"name": "Gold", "price": 25, "priceType": "PER_PERSON", "quantity": 10}], guest_count=40)
    assert line.total == 250


def test_flat_package_billed_once():
    (line,) = normalize([{"name": "Lunch", "price": 450, "priceType": "FLAT"}], guest_count=40)
    assert line.quantity == 1
    assert line.total == 450


def test_labor_minimum_hours_and_staff_count():
    short_shift, no_hours, long_shift = normalize(
        raw_labor=[
            {"role": "Server", "rate": 25, "hours": 2, "minHours": 4, "quantity": 3},
            {"role": "Server", "rate": 25, "minHours": 4},
            {"role": "Chef", "rate": 35, "hours": 6, "minHours": 4},
        ]
    )
    assert short_shift.hours == 4
    assert short_shift.total == 300
    assert no_hours.total == 100
    assert long_shift.total == 210


def test_labor_without_hours_is_quantity_times_rate():
    (line,) = normalize(raw_labor=[{"role": "Coordinator", "rate": 200}])
    assert line.hours is None
    assert line.total == 200


def test_taxable_defaults_by_shape():
    package, item, labor = normalize(
        [{"name": "P", "price": 1}],
        [{"name": "I", "unitPrice": 1}],
        [{"role": "L", "rate": 1}],
    )
    assert package.taxable is True
    assert item.taxable is True
    assert labor.taxable is False


def test_optional_rows_filtered_only_on_request():
    items = [{"name": "A", "unitPrice": 10}, {"name": "B", "unitPrice": 5, "isOptional": True}]
    assert len(normalize(raw_items=items)) == 2
    kept = normalize(raw_items=items, include_optional=False)
    assert [line.description for line in kept] == ["A"]


def test_supplied_total_is_ignored():
    (line,) = normalize(raw_items=[{"name": "A", "unitPrice": 10, "quantity": 3, "total": 999}])
    assert line.total == 30


def test_snake_case_and_string_amounts():
    (line,) = normalize(raw_items=[{"name": "Tent", "unit_price": "$1,200.50", "quantity": "2", "is_optional": "yes"}])
    assert line.unit_price == pytest.approx(1200.50)
    assert line.total == pytest.approx(2401.0)
    assert line.is_optional is True


def test_description_joins_name_and_description():
    (line,) = normalize(raw_items=[{"name": "Tacos", "description": "Carnitas", "unitPrice": 3}])
    assert line.description == "Tacos - Carnitas"


@pytest.mark.parametrize(
    "raw, expected",
    [("FOOD", "food"), ("BEVERAGE", "food"), ("EQUIPMENT", "equipment"), ("labor", "labor"), ("DECOR", "item"), (None, "item")],
)
def test_map_category(raw, expected):
    assert map_category(raw) == expected


def test_to_float_handles_partial_input():
    assert to_float("") == 0.0
    assert to_float("12.") == 12.0
    assert to_float("abc", default=1.0) == 1.0
    assert to_float(None) == 0.0


def test_zero_hours_labor_row():
    zero, floored = normalize(
        raw_labor=[
            {"role": "Server", "rate": 25, "hours": 0, "quantity": 2},
            {"role": "Server", "rate": 25, "hours": 0, "minHours": 4},
        ]
    )
    assert zero.total == 50
    assert floored.hours == 4
    assert floored.total == 100
