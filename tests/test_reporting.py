from __future__ import annotations

import math
from pathlib import Path

import pandas as pd
import pytest

from quotecalc.reporting import BREAKDOWN_COLUMNS, category_totals, line_items_frame, make_summary_text, write_breakdown


def test_line_items_frame(quote_result):
    df = line_items_frame(quote_result.line_items)
    assert list(df.columns) == BREAKDOWN_COLUMNS
    assert df["LINE_TOTAL"].tolist() == [180.0, 500.0, 140.0]
    assert math.isnan(df.loc[0, "HOURS"])
    assert df.loc[2, "HOURS"] == 4


def test_category_totals(quote_result):
    totals = category_totals(quote_result.line_items)
    assert totals.to_dict() == {"equipment": 500.0, "labor": 140.0, "package": 180.0}
    assert category_totals([]).empty


def test_summary_text(quote_result):
    text = make_summary_text(quote_result.line_items, quote_result.totals)
    assert "Quote subtotal (3 line items): $820.00." in text
    assert "Tax on $180.00: $15.30" in text
    assert "Total: $835.30" in text
    assert "Deposit due: $417.65" in text
    assert "Balance after payments" not in text


def test_write_breakdown_csv(tmp_path: Path, quote_result):
    path = write_breakdown(quote_result.line_items, quote_result.totals, tmp_path / "out" / "q.csv")
    df = pd.read_csv(path)
    assert df["LINE_TOTAL"].sum() == pytest.approx(820)
    summary = pd.read_csv(tmp_path / "out" / "q_totals.csv")
    assert dict(zip(summary["FIELD"], summary["AMOUNT"]))["TOTAL"] == pytest.approx(835.30)


def test_write_breakdown_xlsx(tmp_path: Path, quote_result):
    pytest.importorskip("openpyxl")
    path = write_breakdown(quote_result.line_items, quote_result.totals, tmp_path / "q.xlsx")
    sheets = pd.read_excel(path, sheet_name=None)
    assert set(sheets) == {"Line Items", "Totals"}
    assert len(sheets["Line Items"]) == 3
