"""Line-item normalization and cart totals.

The server's cart entries are untrusted: the product may be missing or null,
the quantity may be absent or not a number, and the price may be a string.
normalize_items() never raises on such input; it drops what cannot be used
and coerces the rest.
"""

import math
from collections.abc import Iterable, Mapping
from typing import Any, Optional, Union

from .models import LineItem

RawEntry = Union[Mapping[str, Any], LineItem]


def _product_id(product: Mapping[str, Any]) -> Optional[str]:
    for key in ("_id", "id"):
        value = product.get(key)
        if value is not None and value != "":
            return str(value)
    return None


def _quantity(value: Any) -> Optional[int]:
    # bool is an int subclass but never a quantity
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return max(1, int(value))


def _price(value: Any) -> float:
    if isinstance(value, bool):
        return 0.0
    try:
        price = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(price) or price < 0:
        return 0.0
    return price


def entry_product_id(entry: Any) -> Optional[str]:
    """Product identifier of a raw entry, or None when it has none."""
    if not isinstance(entry, Mapping):
        return None
    product = entry.get("product")
    if not isinstance(product, Mapping):
        return None
    return _product_id(product)


def normalize_entry(entry: RawEntry) -> Optional[LineItem]:
    """Normalize a single cart entry, or return None when it must be dropped."""
    if isinstance(entry, LineItem):
        entry = entry.as_entry()
    if not isinstance(entry, Mapping):
        return None

    product = entry.get("product")
    if not isinstance(product, Mapping):
        return None
    product_id = _product_id(product)
    if product_id is None:
        return None

    quantity = _quantity(entry.get("quantity"))
    if quantity is None:
        return None

    name = product.get("name")
    return LineItem(
        product_id=product_id,
        name="" if name is None else str(name),
        unit_price=_price(product.get("price")),
        quantity=quantity,
    )


def normalize_items(entries: Optional[Iterable[RawEntry]]) -> list[LineItem]:
    """Turn raw cart entries into line items, preserving order."""
    if entries is None:
        return []
    items = []
    for entry in entries:
        item = normalize_entry(entry)
        if item is not None:
            items.append(item)
    return items


def cart_total(items: Iterable[LineItem]) -> float:
    """Sum of unit price times quantity. No rounding is applied."""
    return sum((item.unit_price * item.quantity for item in items), 0.0)
