"""Quote totals: subtotal, tax, gratuity, discount, deposit and balance.

Every function here is pure. Inputs are assumed non-negative (the quote
payload validator rejects negative quantities and prices before they reach
this module); out-of-range rates are not rejected and simply propagate
through the arithmetic so that half-typed form state still yields a result.
"""

from __future__ import annotations

from typing import Iterable, Optional, Sequence

from .models import CalculationOptions, Deposit, LineItem, Payment, Totals
from .money import format_currency, to_cents

DEFAULT_OPTIONS = CalculationOptions()


def line_total(item: LineItem) -> float:
    """Return ``quantity * unit_price``, times ``hours`` for labor rows with non-zero hours."""

    base = float(item.quantity) * float(item.unit_price)
    if item.category == "labor" and item.hours:
        return base * float(item.hours)
    return base


def discount_amount(subtotal: float, options: CalculationOptions) -> float:
    if options.discount_type == "PERCENTAGE":
        amount = subtotal * float(options.discount) / 100
    else:
        amount = float(options.discount)
    return min(amount, subtotal)


def deposit_amount(total: float, deposit: Optional[Deposit]) -> float:
    if deposit is None:
        return 0.0
    if deposit.deposit_type == "PERCENTAGE":
        return total * float(deposit.deposit_value) / 100
    return float(deposit.deposit_value)


def balance_due(total: float, payments: Iterable[Payment | float] | None = None) -> float:
    """Return ``total`` minus everything paid so far; negative means overpaid."""

    paid = 0.0
    for payment in payments or ():
        paid += float(payment.amount if isinstance(payment, Payment) else payment)
    return total - paid


def calculate_totals(
    items: Sequence[LineItem],
    options: Optional[CalculationOptions] = None,
    deposit: Optional[Deposit] = None,
    payments: Iterable[Payment | float] | None = None,
) -> Totals:
    """Compute the monetary breakdown of a quote.

    Tax applies to taxable rows only, after the discount has been taken off
    the taxable base (floored at zero). Gratuity is charged on the full
    subtotal before discount. Nothing is rounded here.
    """

    opts = options or DEFAULT_OPTIONS

    subtotal = 0.0
    taxable_amount = 0.0
    for item in items:
        amount = line_total(item)
        subtotal += amount
        if item.taxable:
            taxable_amount += amount

    discount = discount_amount(subtotal, opts)
    taxable_after_discount = max(0.0, taxable_amount - discount)
    tax = taxable_after_discount * float(opts.tax_rate) / 100
    gratuity = subtotal * float(opts.gratuity_rate) / 100
    total = (subtotal - discount) + tax + gratuity

    return Totals(
        subtotal=subtotal,
        taxable_amount=taxable_amount,
        discount_amount=discount,
        tax=tax,
        gratuity=gratuity,
        total=total,
        deposit=deposit_amount(total, deposit),
        balance=balance_due(total, payments),
    )


__all__ = [
    "DEFAULT_OPTIONS",
    "balance_due",
    "calculate_totals",
    "deposit_amount",
    "discount_amount",
    "format_currency",
    "line_total",
    "to_cents",
]
