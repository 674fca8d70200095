from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Literal, Optional

from .money import round_money

Category = Literal["food", "labor", "equipment", "package", "item"]
Kind = Literal["flat", "unit", "hourly"]
DiscountType = Literal["FIXED", "PERCENTAGE"]
DepositType = Literal["FIXED", "PERCENTAGE"]


@dataclass(frozen=True)
class LineItem:
    """A single billable row on a quote.

    ``total`` is derived from quantity, price and hours on every access and
    is never accepted from the caller.
    """

    id: str
    description: str
    quantity: float = 1
    unit_price: float = 0.0
    category: Category = "item"
    kind: Kind = "unit"
    hours: Optional[float] = None
    taxable: bool = True
    is_optional: bool = False

    @property
    def total(self) -> float:
        from .calculator import line_total

        return line_total(self)


@dataclass(frozen=True)
class CalculationOptions:
    tax_rate: float = 0.0
    gratuity_rate: float = 0.0
    discount: float = 0.0
    discount_type: DiscountType = "FIXED"


@dataclass(frozen=True)
class Deposit:
    deposit_type: DepositType = "PERCENTAGE"
    deposit_value: float = 0.0


@dataclass(frozen=True)
class Payment:
    amount: float
    reference: str = ""


@dataclass(frozen=True)
class Totals:
    """Unrounded monetary breakdown for a quote."""

    subtotal: float = 0.0
    taxable_amount: float = 0.0
    discount_amount: float = 0.0
    tax: float = 0.0
    gratuity: float = 0.0
    total: float = 0.0
    deposit: float = 0.0
    balance: float = 0.0

    def as_dict(self) -> dict:
        return asdict(self)

    def rounded(self) -> dict:
        """Return the breakdown rounded to cents for display or JSON output."""
        return {key: round_money(value) for key, value in asdict(self).items()}


__all__ = [
    "CalculationOptions",
    "Category",
    "Deposit",
    "DepositType",
    "DiscountType",
    "Kind",
    "LineItem",
    "Payment",
    "Totals",
]
