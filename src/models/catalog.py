"""Schemas used by the catalog listing API."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from src.models.product import Product


class SortMode(str, Enum):
    """Ordering applied to a catalog view."""

    NONE = "none"
    PRICE_ASC = "priceAsc"
    PRICE_DESC = "priceDesc"


class CatalogSnapshot(BaseModel):
    """Immutable product list produced by one fetch cycle."""

    products: tuple[Product, ...] = ()
    pagination: dict[str, Any] = Field(default_factory=dict)
    pincode: str | None = None


class InventoryFetchResult(BaseModel):
    """Outcome of a single inventory page request."""

    success: bool
    inventory: list[Any] = Field(default_factory=list)
    pagination: dict[str, Any] = Field(default_factory=dict)
    pincode: str | None = None
    error: str | None = None

    def as_payload(self) -> dict[str, Any]:
        """Return the paged response envelope consumed by the normalizer."""

        return {
            "success": self.success,
            "data": {
                "inventory": self.inventory,
                "pagination": self.pagination,
                "pincode": self.pincode,
            },
        }


class CatalogResponse(BaseModel):
    """Response body for GET /catalog."""

    products: list[Product] = Field(default_factory=list)
    count: int = Field(0, ge=0)
    pagination: dict[str, Any] = Field(default_factory=dict)
    pincode: str | None = None
    error: str | None = None


class InventoryLookupResult(BaseModel):
    """Outcome of a category, subcategory or item pricing lookup."""

    success: bool
    data: Any = None
    error: str | None = None


class CategoriesResponse(BaseModel):
    """Response body for GET /catalog/categories."""

    categories: Any = Field(default_factory=dict)
    error: str | None = None


class SubcategoriesResponse(BaseModel):
    """Response body for GET /catalog/categories/{category}/subcategories."""

    category: str
    subcategories: list[Any] = Field(default_factory=list)
    error: str | None = None


class ItemPricingResponse(BaseModel):
    """Response body for GET /catalog/items/{item_id}/pricing."""

    product: Product | None = None
    delivery_estimate: str | None = None
    error: str | None = None
