"""Routes serving filtered, sorted catalog listings."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import ValidationError

from src.models.catalog import (
    CatalogResponse,
    CategoriesResponse,
    ItemPricingResponse,
    SortMode,
    SubcategoriesResponse,
)
from src.models.product import DeliveryContext
from src.services.catalog.normalizer import normalize_inventory, normalize_item
from src.services.catalog.pricing import delivery_time_estimate
from src.services.catalog.store import CatalogStore, get_catalog_store
from src.services.catalog.view import CatalogView, get_catalog_view
from src.services.clients.inventory_client import InventoryDependency

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/catalog", tags=["catalog"])

StoreDependency = Annotated[CatalogStore, Depends(get_catalog_store)]
ViewDependency = Annotated[CatalogView, Depends(get_catalog_view)]


def delivery_context(pincode: str | None) -> DeliveryContext:
    """Build a delivery context, turning a bad pincode into a 422."""

    try:
        return DeliveryContext(pincode=pincode)
    except ValidationError as exc:
        raise HTTPException(
            status_code=422,
            detail="Pincode must be a 6-digit number",
        ) from exc


@router.get(
    "",
    response_model=CatalogResponse,
    summary="Fetch, normalize and filter the current inventory page",
)
async def list_catalog(
    inventory: InventoryDependency,
    store: StoreDependency,
    catalog_view: ViewDependency,
    category: str | None = None,
    sub_category: Annotated[str | None, Query(alias="subCategory")] = None,
    sort: SortMode = SortMode.NONE,
    pincode: str | None = None,
    search: str | None = None,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int | None, Query(ge=1, le=100)] = None,
) -> CatalogResponse:
    delivery = delivery_context(pincode)
    result = await inventory.fetch_inventory(
        pincode=delivery.pincode,
        search=search,
        page=page,
        limit=limit,
    )
    if not result.success:
        logger.info("Inventory fetch failed: %s", result.error)
        return CatalogResponse(error=result.error)

    snapshot = store.replace(normalize_inventory(result.as_payload(), delivery))
    products = catalog_view.apply(
        snapshot.products,
        category,
        sub_category,
        sort,
        delivery_active=delivery.active,
    )
    return CatalogResponse(
        products=products,
        count=len(products),
        pagination=snapshot.pagination,
        pincode=snapshot.pincode or delivery.pincode,
    )


@router.get(
    "/categories",
    response_model=CategoriesResponse,
    summary="List catalog categories for the filter bar",
)
async def list_categories(inventory: InventoryDependency) -> CategoriesResponse:
    result = await inventory.fetch_categories()
    if not result.success:
        return CategoriesResponse(error=result.error)
    return CategoriesResponse(categories=result.data)


@router.get(
    "/categories/{category}/subcategories",
    response_model=SubcategoriesResponse,
    summary="List subcategories for one category",
)
async def list_subcategories(
    category: str,
    inventory: InventoryDependency,
) -> SubcategoriesResponse:
    result = await inventory.fetch_subcategories(category)
    if not result.success:
        return SubcategoriesResponse(category=category, error=result.error)
    return SubcategoriesResponse(category=category, subcategories=result.data)


@router.get(
    "/items/{item_id}/pricing",
    response_model=ItemPricingResponse,
    summary="Price a single item for the given delivery pincode",
)
async def get_item_pricing(
    item_id: str,
    inventory: InventoryDependency,
    pincode: str | None = None,
) -> ItemPricingResponse:
    delivery = delivery_context(pincode)
    result = await inventory.fetch_item_pricing(item_id, delivery.pincode)
    if not result.success:
        return ItemPricingResponse(error=result.error)

    product = normalize_item({"_id": item_id, **result.data}, delivery)
    return ItemPricingResponse(
        product=product,
        delivery_estimate=(
            delivery_time_estimate(product.distance_km) if delivery.active else None
        ),
    )
