"""Quote configuration presets: packages, items, labor roles, taxes and gratuities."""
from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import List, Optional

import yaml

from .normalize import flag, to_float

LOGGER = logging.getLogger(__name__)


@dataclass
class PackagePreset:
    name: str
    price: float
    price_type: str = "FLAT"
    category: str = "CATERING"
    description: str = ""
    items: List[str] = field(default_factory=list)
    sort_order: int = 0

    def to_row(self, **overrides) -> dict:
        row = {
            "name": self.name,
            "description": self.description,
            "price": self.price,
            "priceType": self.price_type,
        }
        row.update(overrides)
        return row


@dataclass
class ItemPreset:
    name: str
    unit_price: float
    category: str = "FOOD"
    unit: str = "EACH"
    taxable: bool = True
    sort_order: int = 0

    def to_row(self, **overrides) -> dict:
        row = {
            "name": self.name,
            "category": self.category,
            "unitPrice": self.unit_price,
            "taxable": self.taxable,
        }
        row.update(overrides)
        return row


@dataclass
class LaborPreset:
    role: str
    rate: float
    rate_type: str = "HOURLY"
    min_hours: float = 4.0
    description: str = ""
    sort_order: int = 0

    def to_row(self, **overrides) -> dict:
        """Row for a ``laborItems`` entry; DAILY and EVENT roles bill quantity x rate, never hours."""
        row = {
            "role": self.role,
            "description": self.description,
            "rate": self.rate,
        }
        if self.rate_type == "HOURLY":
            row["minHours"] = self.min_hours
        row.update(overrides)
        if self.rate_type != "HOURLY":
            row.pop("hours", None)
            row.pop("minHours", None)
        return row


@dataclass
class TaxPreset:
    name: str
    rate: float
    description: str = ""
    is_default: bool = False


@dataclass
class GratuityPreset:
    name: str
    percentage: float
    min_guest_count: Optional[int] = None
    is_auto_apply: bool = False
    is_default: bool = False
    description: str = ""


DEFAULT_PRESETS: dict = {
    "packages": [
        {"name": "Gold Tier Taco Package", "category": "FOOD_TRUCK", "price": 25, "priceType": "PER_PERSON",
         "description": "Premium taco bar with 3 protein options, sides, and toppings",
         "items": ["3 Protein Options", "Rice & Beans", "Fresh Toppings Bar", "Chips & Salsa"], "sortOrder": 1},
        {"name": "Silver Tier Taco Package", "category": "FOOD_TRUCK", "price": 18, "priceType": "PER_PERSON",
         "description": "Standard taco bar with 2 protein options and sides",
         "items": ["2 Protein Options", "Rice & Beans", "Toppings Bar"], "sortOrder": 2},
        {"name": "Premium Bar Package", "category": "MOBILE_BAR", "price": 35, "priceType": "PER_PERSON",
         "description": "Top shelf liquors, craft cocktails, beer & wine", "sortOrder": 1},
        {"name": "Standard Bar Package", "category": "MOBILE_BAR", "price": 25, "priceType": "PER_PERSON",
         "description": "Well drinks, domestic beer, house wine", "sortOrder": 2},
        {"name": "Full Service Catering", "category": "CATERING", "price": 45, "priceType": "PER_PERSON",
         "description": "Complete catering with appetizers, entrees, and desserts", "sortOrder": 1},
    ],
    "items": [
        {"name": "Guacamole (Large)", "category": "FOOD", "unitPrice": 45, "unit": "BOWL", "sortOrder": 1},
        {"name": "Chips & Salsa", "category": "FOOD", "unitPrice": 25, "unit": "TRAY", "sortOrder": 2},
        {"name": "Quesadillas", "category": "FOOD", "unitPrice": 12, "unit": "DOZEN", "sortOrder": 3},
        {"name": "Margarita Pitcher", "category": "BEVERAGE", "unitPrice": 65, "unit": "PITCHER", "sortOrder": 1},
        {"name": "Bottled Water", "category": "BEVERAGE", "unitPrice": 2, "unit": "EACH", "sortOrder": 2},
        {"name": "Soft Drinks", "category": "BEVERAGE", "unitPrice": 3, "unit": "EACH", "sortOrder": 3},
        {"name": "Tent (10x10)", "category": "EQUIPMENT", "unitPrice": 150, "unit": "DAY", "taxable": False, "sortOrder": 1},
        {"name": "Tables (6ft)", "category": "EQUIPMENT", "unitPrice": 15, "unit": "EACH", "taxable": False, "sortOrder": 2},
        {"name": "Chairs", "category": "EQUIPMENT", "unitPrice": 5, "unit": "EACH", "taxable": False, "sortOrder": 3},
    ],
    "labor": [
        {"role": "Chef", "rate": 35, "minHours": 4, "description": "Professional chef for food preparation", "sortOrder": 1},
        {"role": "Bartender", "rate": 30, "minHours": 4, "description": "Professional bartender", "sortOrder": 2},
        {"role": "Server", "rate": 25, "minHours": 4, "description": "Service staff", "sortOrder": 3},
        {"role": "Event Coordinator", "rate": 40, "minHours": 4, "description": "On-site event coordination", "sortOrder": 4},
    ],
    "taxes": [
        {"name": "Sales Tax", "rate": 8.5, "description": "California state sales tax", "isDefault": True},
        {"name": "Service Tax", "rate": 2, "description": "Optional service tax"},
    ],
    "gratuities": [
        {"name": "Standard Gratuity", "percentage": 18, "description": "Recommended gratuity", "isDefault": True},
        {"name": "Large Party Gratuity", "percentage": 20, "minGuestCount": 50,
         "description": "Automatic for parties of 50+", "isAutoApply": True},
    ],
}


def _active(rows: list | None) -> list:
    return [row for row in rows or [] if flag(row.get("isActive", row.get("is_active")), default=True)]


def _by_sort_order(rows: list, key: str) -> list:
    return sorted(rows, key=lambda row: (int(row.get("sortOrder", row.get("sort_order", 0)) or 0), str(row.get(key, ""))))


@dataclass
class QuoteConfiguration:
    """Active presets offered when composing a quote."""

    packages: List[PackagePreset] = field(default_factory=list)
    items: List[ItemPreset] = field(default_factory=list)
    labor: List[LaborPreset] = field(default_factory=list)
    taxes: List[TaxPreset] = field(default_factory=list)
    gratuities: List[GratuityPreset] = field(default_factory=list)

    @classmethod
    def defaults(cls) -> "QuoteConfiguration":
        return cls.from_dict(DEFAULT_PRESETS)

    @classmethod
    def load(cls, path: Path | None = None) -> "QuoteConfiguration":
        """Load presets from a YAML/JSON file, or the built-in defaults when ``path`` is None."""
        if path is None:
            return cls.defaults()
        if not path.exists():
            raise FileNotFoundError(f"Quote presets file not found: {path}")

        with path.open("r", encoding="utf-8") as f:
            if path.suffix.lower() in {".yaml", ".yml"}:
                raw = yaml.safe_load(f) or {}
            else:
                raw = json.load(f)
        LOGGER.debug("Loaded quote presets from %s", path)
        return cls.from_dict(raw)

    @classmethod
    def from_dict(cls, raw: dict) -> "QuoteConfiguration":
        packages = [
            PackagePreset(
                name=str(row["name"]),
                price=to_float(row.get("price")),
                price_type=str(row.get("priceType", row.get("price_type", "FLAT"))).upper(),
                category=str(row.get("category", "CATERING")),
                description=row.get("description") or "",
                items=list(row.get("items") or []),
                sort_order=int(row.get("sortOrder", row.get("sort_order", 0)) or 0),
            )
            for row in _by_sort_order(_active(raw.get("packages")), "name")
        ]
        items = [
            ItemPreset(
                name=str(row["name"]),
                unit_price=to_float(row.get("unitPrice", row.get("unit_price"))),
                category=str(row.get("category", "FOOD")),
                unit=str(row.get("unit", "EACH")),
                taxable=flag(row.get("taxable"), default=True),
                sort_order=int(row.get("sortOrder", row.get("sort_order", 0)) or 0),
            )
            for row in _by_sort_order(_active(raw.get("items")), "name")
        ]
        labor = [
            LaborPreset(
                role=str(row["role"]),
                rate=to_float(row.get("rate")),
                rate_type=str(row.get("rateType", row.get("rate_type", "HOURLY"))).upper(),
                min_hours=to_float(row.get("minHours", row.get("min_hours")), default=4.0),
                description=row.get("description") or "",
                sort_order=int(row.get("sortOrder", row.get("sort_order", 0)) or 0),
            )
            for row in _by_sort_order(_active(raw.get("labor")), "role")
        ]
        taxes = [
            TaxPreset(
                name=str(row["name"]),
                rate=to_float(row.get("rate")),
                description=row.get("description") or "",
                is_default=flag(row.get("isDefault", row.get("is_default"))),
            )
            for row in _active(raw.get("taxes"))
        ]
        gratuities = []
        for row in _active(raw.get("gratuities")):
            min_guests = row.get("minGuestCount", row.get("min_guest_count"))
            gratuities.append(
                GratuityPreset(
                    name=str(row["name"]),
                    percentage=to_float(row.get("percentage")),
                    min_guest_count=int(min_guests) if min_guests not in (None, "") else None,
                    is_auto_apply=flag(row.get("isAutoApply", row.get("is_auto_apply"))),
                    is_default=flag(row.get("isDefault", row.get("is_default"))),
                    description=row.get("description") or "",
                )
            )

        defaults = [tax.name for tax in taxes if tax.is_default]
        if len(defaults) > 1:
            LOGGER.warning("Multiple default taxes configured (%s); using %s", ", ".join(defaults), defaults[0])

        return cls(packages=packages, items=items, labor=labor, taxes=taxes, gratuities=gratuities)

    def default_tax_rate(self) -> float:
        for tax in self.taxes:
            if tax.is_default:
                return tax.rate
        return 0.0

    def auto_gratuity_rate(self, guest_count: Optional[int]) -> float:
        """Percentage of the auto-apply gratuity with the highest threshold met by ``guest_count``."""
        if not guest_count:
            return 0.0
        best: Optional[GratuityPreset] = None
        for gratuity in self.gratuities:
            if not gratuity.is_auto_apply:
                continue
            threshold = gratuity.min_guest_count or 0
            if guest_count < threshold:
                continue
            if best is None or threshold > (best.min_guest_count or 0):
                best = gratuity
        return best.percentage if best else 0.0

    def find_package(self, name: str) -> Optional[PackagePreset]:
        return next((p for p in self.packages if p.name.lower() == name.strip().lower()), None)

    def find_item(self, name: str) -> Optional[ItemPreset]:
        return next((i for i in self.items if i.name.lower() == name.strip().lower()), None)

    def find_labor(self, role: str) -> Optional[LaborPreset]:
        return next((labor for labor in self.labor if labor.role.lower() == role.strip().lower()), None)

    def to_dict(self) -> dict:
        """The ``quote-config/all`` payload."""
        return {
            "packages": [asdict(p) for p in self.packages],
            "items": [asdict(i) for i in self.items],
            "labor": [asdict(labor) for labor in self.labor],
            "taxes": [asdict(t) for t in self.taxes],
            "gratuities": [asdict(g) for g in self.gratuities],
        }


__all__ = [
    "DEFAULT_PRESETS",
    "GratuityPreset",
    "ItemPreset",
    "LaborPreset",
    "PackagePreset",
    "QuoteConfiguration",
    "TaxPreset",
]
