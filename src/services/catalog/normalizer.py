"""Map raw inventory records onto display-ready products."""

from __future__ import annotations

import hashlib
import logging
import re
from collections.abc import Mapping
from typing import Any

from src.models.catalog import CatalogSnapshot
from src.models.product import DeliveryContext, Product, RawInventoryItem
from src.services.catalog.pricing import (
    calculate_pricing,
    resolve_unit_price,
    to_amount,
)

logger = logging.getLogger(__name__)

DEFAULT_BRAND = "Unknown"
DEFAULT_UNITS = "PIECE"
DEFAULT_NAME = "Product"
DEFAULT_WAREHOUSE = "Unknown"
MAX_FEATURES = 2

_FEATURE_FIELDS = ("grade", "specification", "details")
_SLUG_PATTERN = re.compile(r"[^a-z0-9]+")


def normalize_item(
    raw: RawInventoryItem,
    delivery: DeliveryContext | None = None,
) -> Product:
    """Build a `Product` from one raw inventory record. Never raises."""

    if not isinstance(raw, Mapping):
        raw = {}
    delivery_active = bool(delivery and delivery.active)

    pricing = _mapping(raw.get("pricing"))
    prices = calculate_pricing(
        base_price=pricing.get("basePrice"),
        unit_price=resolve_unit_price(pricing, raw),
        total_price_from_server=raw.get("totalPrice"),
        delivery_context_present=delivery_active,
    )

    warehouse = _mapping(raw.get("warehouse"))
    stock = _mapping(warehouse.get("stock"))
    is_delivery_available = raw.get("isDeliveryAvailable") is True
    product_id = resolve_identifier(raw)

    return Product(
        id=product_id,
        name=_text(raw.get("itemDescription")) or DEFAULT_NAME,
        category=_text(raw.get("category")),
        sub_category=_text(raw.get("subCategory")),
        brand=resolve_brand(raw.get("vendor")),
        units=_text(raw.get("units")) or DEFAULT_UNITS,
        features=tuple(extract_features(raw)),
        item_code=(
            _text(raw.get("formattedItemCode"))
            or _text(raw.get("itemCode"))
            or product_id
        ),
        unit_price=prices.unit_price,
        base_price=prices.base_price,
        total_price=prices.total_price,
        delivery_charge=prices.delivery_charge,
        discount_percent=prices.discount_percent,
        is_delivery_available=is_delivery_available,
        delivery_unavailable_reason=_text(raw.get("deliveryReason")),
        is_free_delivery=prices.delivery_charge == 0 and is_delivery_available,
        warehouse_name=(
            _text(raw.get("warehouseName"))
            or _text(warehouse.get("warehouseName"))
            or DEFAULT_WAREHOUSE
        ),
        distance_km=to_amount(raw.get("distance") or warehouse.get("distance")),
        image_url=resolve_image(raw),
        in_stock=to_amount(stock.get("available")) > 0,
    )


def normalize_inventory(
    payload: Any,
    delivery: DeliveryContext | None = None,
) -> CatalogSnapshot:
    """Normalize a paged inventory response into a fresh snapshot.

    A failed or malformed response yields an empty snapshot.
    """

    if not isinstance(payload, Mapping) or payload.get("success") is not True:
        logger.debug("Inventory payload unsuccessful or malformed; empty snapshot")
        return CatalogSnapshot()

    data = _mapping(payload.get("data"))
    inventory = data.get("inventory")
    if not isinstance(inventory, list):
        return CatalogSnapshot(pincode=_text(data.get("pincode")) or None)

    products = []
    for index, raw in enumerate(inventory):
        if not isinstance(raw, Mapping):
            logger.warning("Skipping inventory entry %d: not an object", index)
            continue
        products.append(normalize_item(raw, delivery))

    logger.info("Normalized %d of %d inventory items", len(products), len(inventory))
    return CatalogSnapshot(
        products=tuple(products),
        pagination=dict(_mapping(data.get("pagination"))),
        pincode=_text(data.get("pincode")) or None,
    )


def resolve_identifier(raw: RawInventoryItem) -> str:
    """Return `_id`, then `id`, then a stable placeholder derived from the name."""

    for key in ("_id", "id"):
        value = _text(raw.get(key))
        if value:
            return value

    description = _text(raw.get("itemDescription")) or DEFAULT_NAME
    slug = _SLUG_PATTERN.sub("-", description.lower()).strip("-") or "product"
    digest = hashlib.sha1(description.encode("utf-8")).hexdigest()[:8]
    logger.debug("Inventory item without id; using placeholder for %r", description)
    return f"item-{slug}-{digest}"


def resolve_brand(vendor: Any) -> str:
    vendor = _mapping(vendor)
    return (
        _text(vendor.get("name")) or _text(vendor.get("companyName")) or DEFAULT_BRAND
    )


def resolve_image(raw: RawInventoryItem) -> str:
    primary = _text(raw.get("primaryImage"))
    if primary:
        return primary

    images = raw.get("images")
    if isinstance(images, list) and images:
        first = images[0]
        if isinstance(first, Mapping):
            return _text(first.get("url"))
        return _text(first)
    return ""


def extract_features(raw: RawInventoryItem) -> list[str]:
    """First two non-blank values among grade, specification and details."""

    features = [_text(raw.get(field)) for field in _FEATURE_FIELDS]
    return [feature for feature in features if feature][:MAX_FEATURES]


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _text(value: Any) -> str:
    if value is None or isinstance(value, bool):
        return ""
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        return value.strip()
    return ""
