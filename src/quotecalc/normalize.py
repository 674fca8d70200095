"""Turn package, item and labor rows from a request body into :class:`LineItem` objects."""

from __future__ import annotations

from typing import Iterable, List, Mapping, Optional

from .models import Category, LineItem

_BOOLEAN_TRUE = {"1", "true", "yes", "on"}

_CATEGORY_MAP: dict[str, Category] = {
    "FOOD": "food",
    "BEVERAGE": "food",
    "DRINKS": "food",
    "EQUIPMENT": "equipment",
    "LABOR": "labor",
    "PACKAGE": "package",
}


def _get(row: Mapping, *keys: str, default=None):
    for key in keys:
        if key in row and row[key] is not None:
            return row[key]
    return default


def to_float(value: object | None, default: float = 0.0) -> float:
    """Coerce form values such as ``"$1,200.50"`` or ``""`` to a float."""
    if value is None:
        return default
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        return float(value)
    text = str(value).replace("$", "").replace(",", "").strip()
    if not text:
        return default
    try:
        return float(text)
    except ValueError:
        return default


def _optional_float(value: object | None) -> Optional[float]:
    if value is None or str(value).strip() == "":
        return None
    return to_float(value)


def flag(value: object | None, default: bool = False) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _BOOLEAN_TRUE


def map_category(value: object | None, default: Category = "item") -> Category:
    if not value:
        return default
    text = str(value).strip()
    if text.lower() in {"food", "labor", "equipment", "package", "item"}:
        return text.lower()  # type: ignore[return-value]
    return _CATEGORY_MAP.get(text.upper(), default)


def _description(row: Mapping, fallback: str) -> str:
    name = str(_get(row, "name", "role", default="") or "").strip()
    description = str(_get(row, "description", default="") or "").strip()
    if name and description and name != description:
        return f"{name} - {description}"
    return name or description or fallback


def package_line(row: Mapping, index: int, guest_count: Optional[int] = None) -> LineItem:
    """Flat-priced package. ``PER_PERSON`` packages bill once per guest."""

    price_type = str(_get(row, "priceType", "price_type", default="FLAT")).upper()
    quantity = _optional_float(_get(row, "quantity"))
    if quantity is None:
        if price_type == "PER_PERSON" and guest_count:
            quantity = float(guest_count)
        else:
            quantity = 1.0
    return LineItem(
        id=str(_get(row, "id", default=f"package-{index}")),
        description=_description(row, "Package"),
        quantity=quantity,
        unit_price=to_float(_get(row, "price", "unitPrice", "unit_price")),
        category="package",
        kind="flat",
        taxable=flag(_get(row, "taxable"), default=True),
        is_optional=flag(_get(row, "isOptional", "is_optional")),
    )


def item_line(row: Mapping, index: int) -> LineItem:
    return LineItem(
        id=str(_get(row, "id", default=f"item-{index}")),
        description=_description(row, "Item"),
        quantity=to_float(_get(row, "quantity"), default=1.0),
        unit_price=to_float(_get(row, "unitPrice", "unit_price", "price")),
        category=map_category(_get(row, "category")),
        kind="unit",
        taxable=flag(_get(row, "taxable"), default=True),
        is_optional=flag(_get(row, "isOptional", "is_optional")),
    )


def labor_line(row: Mapping, index: int) -> LineItem:
    """Hourly labor; ``quantity`` is the staff count and ``minHours`` a billing floor."""

    hours = _optional_float(_get(row, "hours"))
    min_hours = _optional_float(_get(row, "minHours", "min_hours"))
    if min_hours is not None:
        hours = max(hours or 0.0, min_hours)
    return LineItem(
        id=str(_get(row, "id", default=f"labor-{index}")),
        description=_description(row, "Labor"),
        quantity=to_float(_get(row, "quantity", "staffCount", "staff_count"), default=1.0),
        unit_price=to_float(_get(row, "rate", "unitPrice", "unit_price")),
        category="labor",
        kind="hourly",
        hours=hours,
        taxable=flag(_get(row, "taxable"), default=False),
        is_optional=flag(_get(row, "isOptional", "is_optional")),
    )


def normalize(
    raw_packages: Iterable[Mapping] | None = None,
    raw_items: Iterable[Mapping] | None = None,
    raw_labor: Iterable[Mapping] | None = None,
    *,
    guest_count: Optional[int] = None,
    include_optional: bool = True,
) -> List[LineItem]:
    """Return packages, then items, then labor as uniform line items.

    Optional rows are kept unless ``include_optional`` is false.
    """

    lines: List[LineItem] = []
    for index, row in enumerate(raw_packages or (), start=1):
        lines.append(package_line(row, index, guest_count))
    for index, row in enumerate(raw_items or (), start=1):
        lines.append(item_line(row, index))
    for index, row in enumerate(raw_labor or (), start=1):
        lines.append(labor_line(row, index))
    if not include_optional:
        lines = [line for line in lines if not line.is_optional]
    return lines


__all__ = [
    "flag",
    "item_line",
    "labor_line",
    "map_category",
    "normalize",
    "package_line",
    "to_float",
]
