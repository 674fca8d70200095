"""Printable quote document."""

from __future__ import annotations

import logging
import textwrap
from pathlib import Path
from typing import List, Tuple

from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from .money import format_currency
from .quote import QuoteResult

LOGGER = logging.getLogger(__name__)

MARGIN = 54
LINE_HEIGHT = 16
# x offsets of the description, quantity, unit price and total columns
COLUMNS = (MARGIN, 330, 400, 490)


def _quantity_label(quantity: float, hours) -> str:
    qty = f"{quantity:g}"
    if hours:
        return f"{qty} x {float(hours):g}h"
    return qty


def totals_rows(result: QuoteResult) -> List[Tuple[str, str]]:
    totals = result.totals
    rows = [("Subtotal", format_currency(totals.subtotal))]
    if totals.discount_amount:
        rows.append(("Discount", f"-{format_currency(totals.discount_amount)}"))
    if result.request.options.tax_rate:
        rows.append((f"Tax ({result.request.options.tax_rate:g}%)", format_currency(totals.tax)))
    if totals.gratuity:
        rows.append((f"Gratuity ({result.request.options.gratuity_rate:g}%)", format_currency(totals.gratuity)))
    rows.append(("Total", format_currency(totals.total)))
    if result.request.deposit is not None:
        rows.append(("Deposit due", format_currency(totals.deposit)))
    if result.request.payments:
        rows.append(("Balance", format_currency(totals.balance)))
    return rows


class _Page:
    """Tracks the cursor and starts a new page when the bottom margin is reached."""

    def __init__(self, canv: canvas.Canvas) -> None:
        self.canv = canv
        self.width, self.height = letter
        self.y = self.height - MARGIN

    def advance(self, lines: int = 1) -> None:
        self.y -= LINE_HEIGHT * lines
        if self.y < MARGIN:
            self.canv.showPage()
            self.y = self.height - MARGIN


def write_quote_pdf(result: QuoteResult, path: Path, business_name: str = "") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    request = result.request
    canv = canvas.Canvas(str(path), pagesize=letter)
    canv.setTitle(request.title or "Quote")
    page = _Page(canv)

    canv.setFont("Helvetica-Bold", 16)
    canv.drawString(MARGIN, page.y, business_name or "Quote")
    page.advance(2)

    canv.setFont("Helvetica", 10)
    header = [
        ("Quote", request.quote_number or request.title),
        ("Customer", request.customer_name),
        ("Event date", request.event_date),
        ("Location", request.event_location),
        ("Guests", str(request.guest_count) if request.guest_count else ""),
        ("Valid until", request.valid_until.isoformat()),
    ]
    for label, value in header:
        if not value:
            continue
        canv.drawString(MARGIN, page.y, f"{label}: {value}")
        page.advance()
    page.advance()

    canv.setFont("Helvetica-Bold", 10)
    for x, label in zip(COLUMNS, ("Description", "Qty", "Unit price", "Total")):
        canv.drawString(x, page.y, label)
    page.advance()

    canv.setFont("Helvetica", 10)
    for line in result.line_items:
        wrapped = textwrap.wrap(line.description, width=48) or [""]
        if line.is_optional:
            wrapped[0] = f"{wrapped[0]} (optional)"
        canv.drawString(COLUMNS[0], page.y, wrapped[0])
        canv.drawString(COLUMNS[1], page.y, _quantity_label(line.quantity, line.hours))
        canv.drawString(COLUMNS[2], page.y, format_currency(line.unit_price))
        canv.drawString(COLUMNS[3], page.y, format_currency(line.total))
        for extra in wrapped[1:]:
            page.advance()
            canv.drawString(COLUMNS[0] + 10, page.y, extra)
        page.advance()
    page.advance()

    for label, value in totals_rows(result):
        canv.setFont("Helvetica-Bold" if label == "Total" else "Helvetica", 10)
        canv.drawString(COLUMNS[2], page.y, label)
        canv.drawString(COLUMNS[3], page.y, value)
        page.advance()

    if request.notes:
        page.advance()
        canv.setFont("Helvetica-Oblique", 9)
        for note_line in textwrap.wrap(request.notes, width=95):
            canv.drawString(MARGIN, page.y, note_line)
            page.advance()

    canv.save()
    LOGGER.info("Wrote quote PDF to %s", path)
    return path


__all__ = ["totals_rows", "write_quote_pdf"]
