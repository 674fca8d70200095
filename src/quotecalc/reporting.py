from __future__ import annotations

from pathlib import Path
from typing import Sequence

import pandas as pd

from .models import LineItem, Totals
from .money import format_currency, round_money

BREAKDOWN_COLUMNS = [
    "ID",
    "DESCRIPTION",
    "CATEGORY",
    "QUANTITY",
    "UNIT_PRICE",
    "HOURS",
    "TAXABLE",
    "OPTIONAL",
    "LINE_TOTAL",
]


def line_items_frame(items: Sequence[LineItem]) -> pd.DataFrame:
    rows = [
        {
            "ID": item.id,
            "DESCRIPTION": item.description,
            "CATEGORY": item.category,
            "QUANTITY": float(item.quantity),
            "UNIT_PRICE": float(item.unit_price),
            "HOURS": float(item.hours) if item.hours is not None else float("nan"),
            "TAXABLE": bool(item.taxable),
            "OPTIONAL": bool(item.is_optional),
            "LINE_TOTAL": item.total,
        }
        for item in items
    ]
    return pd.DataFrame(rows, columns=BREAKDOWN_COLUMNS)


def category_totals(items: Sequence[LineItem]) -> pd.Series:
    df = line_items_frame(items)
    if df.empty:
        return pd.Series(dtype=float, name="LINE_TOTAL")
    return df.groupby("CATEGORY", sort=True)["LINE_TOTAL"].sum()


def make_summary_text(items: Sequence[LineItem], totals: Totals) -> str:
    df = line_items_frame(items)
    lines = [f"Quote subtotal ({len(df)} line items): {format_currency(totals.subtotal)}."]
    if not df.empty:
        top = df.sort_values("LINE_TOTAL", ascending=False).head(5)[
            ["DESCRIPTION", "QUANTITY", "UNIT_PRICE", "LINE_TOTAL"]
        ]
        lines.append(f"Largest line items:\n{top.to_string(index=False)}")
        by_category = ", ".join(
            f"{category} {format_currency(amount)}" for category, amount in category_totals(items).items()
        )
        lines.append(f"By category: {by_category}")
    if totals.discount_amount:
        lines.append(f"Discount: -{format_currency(totals.discount_amount)}")
    lines.append(f"Tax on {format_currency(max(0.0, totals.taxable_amount - totals.discount_amount))}: {format_currency(totals.tax)}")
    if totals.gratuity:
        lines.append(f"Gratuity: {format_currency(totals.gratuity)}")
    lines.append(f"Total: {format_currency(totals.total)}")
    if totals.deposit:
        lines.append(f"Deposit due: {format_currency(totals.deposit)}")
    if totals.balance != totals.total:
        lines.append(f"Balance after payments: {format_currency(totals.balance)}")
    return "\n".join(lines) + "\n"


def write_breakdown(items: Sequence[LineItem], totals: Totals, path: Path) -> Path:
    """Write line items plus a totals sheet/section to ``.csv`` or ``.xlsx``."""

    path.parent.mkdir(parents=True, exist_ok=True)
    df = line_items_frame(items)
    df["LINE_TOTAL"] = df["LINE_TOTAL"].map(round_money)
    summary = pd.DataFrame(
        [{"FIELD": key.upper(), "AMOUNT": value} for key, value in totals.rounded().items()]
    )
    if path.suffix.lower() == ".xlsx":
        with pd.ExcelWriter(path, engine="openpyxl") as writer:
            df.to_excel(writer, sheet_name="Line Items", index=False)
            summary.to_excel(writer, sheet_name="Totals", index=False)
    else:
        df.to_csv(path, index=False)
        summary_path = path.with_name(f"{path.stem}_totals.csv")
        summary.to_csv(summary_path, index=False)
    return path
