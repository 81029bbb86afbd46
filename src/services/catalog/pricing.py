"""Price derivation for inventory items.

Every helper here is pure and total: missing, malformed, negative or
non-finite numbers are read as 0 before any arithmetic, so a NaN can never
reach a `PriceBreakdown`.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

from src.models.product import PriceBreakdown

_UNIT_PRICE_KEYS = ("unitPrice", "currentPrice", "price")


def to_amount(value: Any) -> float:
    """Coerce a loosely typed server value into a non-negative amount."""

    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, str):
        value = value.strip().replace(",", "")
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(amount) or amount < 0:
        return 0.0
    return amount


def resolve_unit_price(pricing: Any, item: Any = None) -> Any:
    """Return the first present unit price candidate, or None.

    Candidates are read from the nested pricing block first and then from the
    item itself, in `unitPrice`, `currentPrice`, `price` order.
    """

    for source in (pricing, item):
        if not isinstance(source, Mapping):
            continue
        for key in _UNIT_PRICE_KEYS:
            if source.get(key) is not None:
                return source[key]
    return None


def discount_percent(base_price: Any, unit_price: Any) -> int:
    base = to_amount(base_price)
    unit = to_amount(unit_price)
    if base > unit and base > 0:
        return min(100, max(0, int(_round_half_up(100 * (base - unit) / base))))
    return 0


def calculate_pricing(
    *,
    base_price: Any = None,
    unit_price: Any = None,
    total_price_from_server: Any = None,
    delivery_context_present: bool = False,
) -> PriceBreakdown:
    """Derive unit, base and total prices plus delivery charge and discount.

    Without a delivery context the server total is ignored and the total equals
    the unit price, so the delivery charge is always 0. A zero or malformed
    server total also falls back to the unit price.
    """

    unit = to_amount(unit_price)
    base = to_amount(base_price)

    server_total = to_amount(total_price_from_server)
    if delivery_context_present and server_total > 0:
        total = server_total
    else:
        total = unit

    delivery_charge = max(0.0, total - unit) if delivery_context_present else 0.0

    return PriceBreakdown(
        unit_price=unit,
        base_price=base,
        total_price=total,
        delivery_charge=delivery_charge,
        discount_percent=discount_percent(base, unit),
    )


def delivery_time_estimate(distance_km: Any) -> str:
    """Human-readable delivery window for a warehouse distance."""

    distance = to_amount(distance_km)
    if distance <= 10:
        return "Same day delivery available"
    if distance <= 50:
        return "1-2 days delivery available"
    if distance <= 100:
        return "2-3 days delivery available"
    if distance <= 200:
        return "3-5 days delivery available"
    return "5-7 days delivery available"


def _round_half_up(value: float) -> float:
    # Half-up; round() would send 12.5 to 12.
    return math.floor(value + 0.5)
