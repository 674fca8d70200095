from __future__ import annotations

import pytest

from quotecalc.quote import QuoteResult, build_quote


@pytest.fixture
def quote_payload() -> dict:
    return {
        "title": "Smith Birthday",
        "quoteNumber": "Q-1001",
        "customerName": "Sam Smith",
        "eventDate": "2024-06-01",
        "guestCount": 10,
        "packages": [{"name": "Taco package", "price": 18, "priceType": "PER_PERSON"}],
        "items": [{"name": "Equipment fee", "category": "EQUIPMENT", "unitPrice": 500, "taxable": False}],
        "laborItems": [{"role": "Chef", "rate": 35, "hours": 4}],
        "taxRate": 8.5,
        "gratuityRate": 0,
        "deposit": {"type": "percentage", "amount": 50},
        "notes": "Setup begins two hours before service.",
    }


@pytest.fixture
def quote_result(quote_payload: dict) -> QuoteResult:
    return build_quote(quote_payload)
