"""Product domain models and catalog schemas."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

RawInventoryItem = Mapping[str, Any]
"""Inventory record exactly as delivered by the storefront API.

The server shape is loose, so records are read as plain mappings and every
field is treated as optional by the normalizer.
"""


class DeliveryContext(BaseModel):
    """Resolved delivery pincode supplied by the host screen."""

    model_config = ConfigDict(frozen=True)

    pincode: str | None = Field(
        None,
        description="Six digit delivery pincode, or None when not yet chosen",
    )

    @field_validator("pincode")
    @classmethod
    def _validate_pincode(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip()
        if not value:
            return None
        if len(value) != 6 or not value.isdigit():
            raise ValueError("Pincode must be a 6-digit number")
        return value

    @property
    def active(self) -> bool:
        return self.pincode is not None


class PriceBreakdown(BaseModel):
    """Derived prices for a single inventory item."""

    model_config = ConfigDict(frozen=True)

    unit_price: float = Field(0.0, ge=0)
    base_price: float = Field(0.0, ge=0)
    total_price: float = Field(0.0, ge=0)
    delivery_charge: float = Field(0.0, ge=0)
    discount_percent: int = Field(0, ge=0, le=100)


class Product(BaseModel):
    """Display-ready product derived from one raw inventory record."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    name: str
    category: str = ""
    sub_category: str = ""
    brand: str = "Unknown"
    units: str = "PIECE"
    features: tuple[str, ...] = ()
    item_code: str = ""

    unit_price: float = Field(0.0, ge=0)
    base_price: float = Field(0.0, ge=0)
    total_price: float = Field(0.0, ge=0)
    delivery_charge: float = Field(0.0, ge=0)
    discount_percent: int = Field(0, ge=0, le=100)

    is_delivery_available: bool = False
    delivery_unavailable_reason: str = ""
    is_free_delivery: bool = False
    warehouse_name: str = "Unknown"
    distance_km: float = Field(0.0, ge=0)

    image_url: str = ""
    in_stock: bool = False
