"""Catering quote totals, presets, documents and delivery."""

from .calculator import (
    balance_due,
    calculate_totals,
    deposit_amount,
    format_currency,
    line_total,
    to_cents,
)
from .models import CalculationOptions, Deposit, LineItem, Payment, Totals
from .normalize import normalize
from .presets import QuoteConfiguration
from .quote import QuoteRequest, QuoteResult, QuoteValidationError, build_quote

__all__ = [
    "CalculationOptions",
    "Deposit",
    "LineItem",
    "Payment",
    "QuoteConfiguration",
    "QuoteRequest",
    "QuoteResult",
    "QuoteValidationError",
    "Totals",
    "balance_due",
    "build_quote",
    "calculate_totals",
    "deposit_amount",
    "format_currency",
    "line_total",
    "normalize",
    "to_cents",
]
