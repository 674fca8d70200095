"""Quote request parsing, validation and totals.

A quote request is the body of ``POST /quotes``: customer and event fields,
``packages``/``items``/``laborItems`` rows and the pricing modifiers. Rows may
reference a configured preset by name (``{"preset": "Chef", "hours": 6}``);
explicit fields on the row win over the preset's values.
"""
from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass, field
from datetime import date, timedelta
from pathlib import Path
from typing import List, Optional

import yaml
from jsonschema import Draft7Validator

from .calculator import calculate_totals
from .models import CalculationOptions, Deposit, LineItem, Payment, Totals
from .money import round_money
from .normalize import normalize
from .presets import QuoteConfiguration

LOGGER = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parent / "schema" / "quote.schema.json"
DEFAULT_VALID_DAYS = 30


class QuoteValidationError(ValueError):
    """Raised when a quote request does not satisfy the request schema."""

    def __init__(self, errors: List[str]) -> None:
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) or "invalid quote request")


_validator: Optional[Draft7Validator] = None


def _get_validator() -> Draft7Validator:
    global _validator
    if _validator is None:
        with SCHEMA_PATH.open("r", encoding="utf-8") as f:
            schema = json.load(f)
        Draft7Validator.check_schema(schema)
        _validator = Draft7Validator(schema)
    return _validator


def _non_finite(value, path: tuple = ()):
    if isinstance(value, float) and not math.isfinite(value):
        yield path
    elif isinstance(value, dict):
        for key, item in value.items():
            yield from _non_finite(item, path + (key,))
    elif isinstance(value, list):
        for index, item in enumerate(value):
            yield from _non_finite(item, path + (index,))


def validate_payload(payload: dict) -> None:
    """Raise :class:`QuoteValidationError` listing every schema violation in ``payload``."""

    errors = sorted(_get_validator().iter_errors(payload), key=lambda e: [str(part) for part in e.absolute_path])
    messages = []
    for error in errors:
        location = "/".join(str(part) for part in error.absolute_path) or "<root>"
        messages.append(f"{location}: {error.message}")
    for path in _non_finite(payload):
        location = "/".join(str(part) for part in path) or "<root>"
        messages.append(f"{location}: must be a finite number")
    if messages:
        raise QuoteValidationError(messages)


def _iso_dates(value):
    """YAML reads unquoted ``2024-09-14`` as a date; the payload carries ISO strings."""
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, dict):
        return {key: _iso_dates(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_iso_dates(item) for item in value]
    return value


def load_quote_file(path: Path) -> dict:
    if not path.exists():
        raise FileNotFoundError(f"Quote file not found: {path}")
    with path.open("r", encoding="utf-8") as f:
        if path.suffix.lower() in {".yaml", ".yml"}:
            raw = _iso_dates(yaml.safe_load(f))
        else:
            raw = json.load(f)
    if not isinstance(raw, dict):
        raise QuoteValidationError([f"<root>: expected a mapping in {path.name}"])
    return raw


def _resolve_rows(rows: list, lookup, label: str) -> list:
    resolved = []
    for row in rows or []:
        name = row.get("preset")
        if not name:
            resolved.append(row)
            continue
        preset = lookup(name)
        if preset is None:
            raise QuoteValidationError([f"{label}: unknown preset {name!r}"])
        overrides = {key: value for key, value in row.items() if key != "preset"}
        resolved.append(preset.to_row(**overrides))
    return resolved


@dataclass
class QuoteRequest:
    title: str = ""
    quote_number: str = ""
    customer_name: str = ""
    customer_email: str = ""
    event_date: str = ""
    event_location: str = ""
    guest_count: Optional[int] = None
    packages: list = field(default_factory=list)
    items: list = field(default_factory=list)
    labor: list = field(default_factory=list)
    options: CalculationOptions = field(default_factory=CalculationOptions)
    deposit: Optional[Deposit] = None
    payments: List[Payment] = field(default_factory=list)
    include_optional: bool = True
    notes: str = ""
    quote_date: date = field(default_factory=date.today)
    valid_days: int = DEFAULT_VALID_DAYS

    @classmethod
    def from_payload(cls, payload: dict, presets: Optional[QuoteConfiguration] = None) -> "QuoteRequest":
        """Validate ``payload`` and fill unset tax and gratuity rates from ``presets``."""

        validate_payload(payload)
        presets = presets or QuoteConfiguration.defaults()
        guest_count = payload.get("guestCount")

        tax_rate = payload.get("taxRate")
        if tax_rate is None:
            tax_rate = presets.default_tax_rate()
            LOGGER.debug("No tax rate on quote; using default preset rate %s%%", tax_rate)
        gratuity_rate = payload.get("gratuityRate")
        if gratuity_rate is None:
            gratuity_rate = presets.auto_gratuity_rate(guest_count)
            if gratuity_rate:
                LOGGER.info("Auto-applied %s%% gratuity for %s guests", gratuity_rate, guest_count)

        deposit = None
        if payload.get("deposit"):
            deposit = Deposit(
                deposit_type=str(payload["deposit"]["type"]).upper(),  # type: ignore[arg-type]
                deposit_value=float(payload["deposit"]["amount"]),
            )

        quote_date = date.today()
        if payload.get("quoteDate"):
            try:
                quote_date = date.fromisoformat(payload["quoteDate"])
            except ValueError:
                raise QuoteValidationError([f"quoteDate: {payload['quoteDate']!r} is not a calendar date"]) from None

        payments = []
        for entry in payload.get("payments") or []:
            if isinstance(entry, dict):
                payments.append(Payment(amount=float(entry["amount"]), reference=entry.get("reference", "")))
            else:
                payments.append(Payment(amount=float(entry)))

        return cls(
            title=payload.get("title", ""),
            quote_number=payload.get("quoteNumber", ""),
            customer_name=payload.get("customerName", ""),
            customer_email=payload.get("customerEmail", ""),
            event_date=payload.get("eventDate", ""),
            event_location=payload.get("eventLocation", ""),
            guest_count=guest_count,
            packages=_resolve_rows(payload.get("packages"), presets.find_package, "packages"),
            items=_resolve_rows(payload.get("items"), presets.find_item, "items"),
            labor=_resolve_rows(payload.get("laborItems"), presets.find_labor, "laborItems"),
            options=CalculationOptions(
                tax_rate=float(tax_rate),
                gratuity_rate=float(gratuity_rate),
                discount=float(payload.get("discount") or 0),
                discount_type=payload.get("discountType", "FIXED"),
            ),
            deposit=deposit,
            payments=payments,
            include_optional=bool(payload.get("includeOptional", True)),
            notes=payload.get("notes", ""),
            quote_date=quote_date,
            valid_days=int(payload.get("validDays", DEFAULT_VALID_DAYS)),
        )

    @property
    def valid_until(self) -> date:
        return self.quote_date + timedelta(days=self.valid_days)

    def line_items(self) -> List[LineItem]:
        return normalize(
            self.packages,
            self.items,
            self.labor,
            guest_count=self.guest_count,
            include_optional=self.include_optional,
        )


@dataclass(frozen=True)
class QuoteResult:
    request: QuoteRequest
    line_items: List[LineItem]
    totals: Totals

    @property
    def amount(self) -> float:
        """Amount persisted on the quote record."""
        return self.totals.total

    def to_dict(self) -> dict:
        return {
            "title": self.request.title,
            "quoteNumber": self.request.quote_number,
            "customerName": self.request.customer_name,
            "guestCount": self.request.guest_count,
            "quoteDate": self.request.quote_date.isoformat(),
            "validUntil": self.request.valid_until.isoformat(),
            "lineItems": [
                {
                    "id": line.id,
                    "description": line.description,
                    "category": line.category,
                    "quantity": line.quantity,
                    "unitPrice": line.unit_price,
                    "hours": line.hours,
                    "taxable": line.taxable,
                    "isOptional": line.is_optional,
                    "total": round_money(line.total),
                }
                for line in self.line_items
            ],
            "totals": self.totals.rounded(),
            "amount": round_money(self.amount),
        }


def build_quote(payload: dict, presets: Optional[QuoteConfiguration] = None) -> QuoteResult:
    request = QuoteRequest.from_payload(payload, presets)
    lines = request.line_items()
    totals = calculate_totals(lines, request.options, request.deposit, request.payments)
    LOGGER.debug(
        "Quote %s: %d line items, subtotal %.2f, total %.2f",
        request.quote_number or request.title or "<untitled>",
        len(lines),
        totals.subtotal,
        totals.total,
    )
    return QuoteResult(request=request, line_items=lines, totals=totals)


__all__ = [
    "QuoteRequest",
    "QuoteResult",
    "QuoteValidationError",
    "SCHEMA_PATH",
    "build_quote",
    "load_quote_file",
    "validate_payload",
]
