"""Presentation-time rounding. Calculations never round; these helpers do, half away from zero."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")


def cents(value: float) -> Decimal:
    # repr() keeps 347.65 as 347.65 instead of its binary expansion
    return Decimal(repr(float(value))).quantize(CENT, rounding=ROUND_HALF_UP)


def round_money(value: float) -> float:
    return float(cents(value))


def to_cents(value: float) -> int:
    """Integer cents for payment processors."""

    return int(cents(value) * 100)


def format_currency(value: float, symbol: str = "$") -> str:
    """Format ``value`` as ``$1,234.50``; negatives render as ``-$104.70``."""

    amount = cents(value)
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.2f}"


__all__ = ["cents", "format_currency", "round_money", "to_cents"]
