from __future__ import annotations

import json
from pathlib import Path

import pytest

from quotecalc.presets import DEFAULT_PRESETS, QuoteConfiguration
from quotecalc.quote import build_quote

DATA_SAMPLE_DIR = Path(__file__).resolve().parents[1] / "data_sample"


def test_defaults_mirror_seed_data():
    presets = QuoteConfiguration.defaults()
    assert len(presets.packages) == len(DEFAULT_PRESETS["packages"])
    assert presets.default_tax_rate() == 8.5
    chef = presets.find_labor("chef")
    assert chef is not None
    assert chef.rate == 35
    assert chef.min_hours == 4
    tent = presets.find_item("Tent (10x10)")
    assert tent is not None and tent.taxable is False


def test_auto_gratuity_by_guest_count():
    presets = QuoteConfiguration.load(DATA_SAMPLE_DIR / "presets.yaml")
    assert presets.auto_gratuity_rate(None) == 0
    assert presets.auto_gratuity_rate(10) == 0
    assert presets.auto_gratuity_rate(20) == 18
    assert presets.auto_gratuity_rate(49) == 18
    assert presets.auto_gratuity_rate(50) == 20


def test_inactive_presets_skipped_and_sorted():
    presets = QuoteConfiguration.load(DATA_SAMPLE_DIR / "presets.yaml")
    assert [p.name for p in presets.packages] == ["Gold Tier Taco Package", "Corporate Lunch Box"]
    assert presets.find_package("Retired Brunch Package") is None


def test_json_presets_and_row_overrides(tmp_path: Path):
    path = tmp_path / "presets.json"
    path.write_text(
        json.dumps({"labor": [{"role": "Bartender", "rate": "30", "minHours": 3}], "taxes": []}),
        encoding="utf-8",
    )
    presets = QuoteConfiguration.load(path)
    assert presets.default_tax_rate() == 0
    row = presets.find_labor("Bartender").to_row(hours=5, quantity=2)
    assert row == {"role": "Bartender", "description": "", "rate": 30.0, "minHours": 3.0, "hours": 5, "quantity": 2}


def test_missing_presets_file(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        QuoteConfiguration.load(tmp_path / "missing.yaml")


def test_to_dict_lists_every_section():
    payload = QuoteConfiguration.defaults().to_dict()
    assert set(payload) == {"packages", "items", "labor", "taxes", "gratuities"}
    assert payload["gratuities"][1]["min_guest_count"] == 50


def test_package_without_price_type_is_flat(tmp_path: Path):
    path = tmp_path / "presets.json"
    path.write_text(json.dumps({"packages": [{"name": "Lunch Buffet", "price": 450}]}), encoding="utf-8")
    presets = QuoteConfiguration.load(path)
    assert presets.find_package("Lunch Buffet").price_type == "FLAT"

    result = build_quote({"guestCount": 40, "packages": [{"preset": "Lunch Buffet"}], "taxRate": 0}, presets)
    (line,) = result.line_items
    assert line.quantity == 1
    assert line.total == 450


@pytest.mark.parametrize("rate_type", ["EVENT", "DAILY"])
def test_non_hourly_labor_bills_quantity_times_rate(rate_type: str):
    presets = QuoteConfiguration.from_dict({"labor": [{"role": "DJ", "rate": 500, "rateType": rate_type}]})
    dj = presets.find_labor("DJ")
    assert "minHours" not in dj.to_row()
    assert "hours" not in dj.to_row(hours=6)

    result = build_quote({"laborItems": [{"preset": "DJ"}, {"preset": "DJ", "quantity": 2}], "taxRate": 0, "gratuityRate": 0}, presets)
    assert [line.total for line in result.line_items] == [500, 1000]
    assert result.line_items[0].hours is None


def test_labor_preset_row_carries_description():
    chef = QuoteConfiguration.defaults().find_labor("Chef")
    row = chef.to_row(hours=5)
    assert row["description"] == "Professional chef for food preparation"
    (line,) = build_quote({"laborItems": [row], "taxRate": 0, "gratuityRate": 0}).line_items
    assert line.description == "Chef - Professional chef for food preparation"
