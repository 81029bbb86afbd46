"""Inventory client abstractions and implementations."""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from typing import Annotated, Any
from urllib.parse import quote

import httpx
from fastapi import Depends

from src.config import settings
from src.models.catalog import InventoryFetchResult, InventoryLookupResult

logger = logging.getLogger(__name__)

INVENTORY_PRICING_PATH = "/api/inventory/pricing"
INVENTORY_CATEGORIES_PATH = "/api/inventory/categories"
INVENTORY_SUBCATEGORIES_PATH = "/api/inventory/categories/{category}/subcategories"
ITEM_PRICING_PATH = "/api/inventory/items/{item_id}/pricing"

DEFAULT_FETCH_ERROR = "Unable to load products. Please try again."
NETWORK_ERROR = "Network error. Please check your internet connection."
INVALID_RESPONSE_ERROR = "Invalid response format"

CATEGORIES_FAILED = "Failed to load categories"
CATEGORIES_UNAVAILABLE = "Unable to load categories. Please try again."
SUBCATEGORIES_FAILED = "Failed to load subcategories"
SUBCATEGORIES_UNAVAILABLE = "Unable to load subcategories. Please try again."
ITEM_PRICING_FAILED = "Failed to load item pricing"
ITEM_PRICING_UNAVAILABLE = "Unable to load item pricing. Please try again."


class InventoryClient(ABC):
    """Abstract source of inventory, category and pricing data.

    Implementations must not raise; failures come back as unsuccessful
    results carrying a user-facing error string.
    """

    @abstractmethod
    async def fetch_inventory(
        self,
        *,
        pincode: str | None = None,
        category: str | None = None,
        sub_category: str | None = None,
        search: str | None = None,
        page: int = 1,
        limit: int | None = None,
    ) -> InventoryFetchResult:
        """Return one inventory page."""

    @abstractmethod
    async def fetch_categories(self) -> InventoryLookupResult:
        """Return the category table used to build filter choices."""

    @abstractmethod
    async def fetch_subcategories(self, category: str) -> InventoryLookupResult:
        """Return the subcategories available under `category`."""

    @abstractmethod
    async def fetch_item_pricing(
        self, item_id: str, pincode: str | None = None
    ) -> InventoryLookupResult:
        """Return the raw pricing record for one item, priced for `pincode`."""


class HttpInventoryClient(InventoryClient):
    """Inventory client backed by the storefront REST API."""

    def __init__(
        self,
        *,
        base_url: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not base_url:
            raise ValueError("Inventory API base URL is required")
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        async with httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout,
            transport=self._transport,
            headers={"Accept": "application/json"},
        ) as client:
            response = await client.get(path, params=params)
            response.raise_for_status()
            return response.json()

    async def fetch_inventory(
        self,
        *,
        pincode: str | None = None,
        category: str | None = None,
        sub_category: str | None = None,
        search: str | None = None,
        page: int = 1,
        limit: int | None = None,
    ) -> InventoryFetchResult:
        params: dict[str, Any] = {
            "page": page or 1,
            "limit": limit or settings.INVENTORY_PAGE_LIMIT,
        }
        optional = {
            "pincode": pincode,
            "category": category,
            "subCategory": sub_category,
            "search": search,
        }
        params.update({key: value for key, value in optional.items() if value})

        try:
            body = await self._get(INVENTORY_PRICING_PATH, params)
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "Inventory request failed with status %s", exc.response.status_code
            )
            return InventoryFetchResult(
                success=False,
                error=describe_error_body(_safe_json(exc.response)),
            )
        except (httpx.TimeoutException, httpx.NetworkError) as exc:
            logger.warning("Inventory request could not reach the server: %s", exc)
            return InventoryFetchResult(success=False, error=NETWORK_ERROR)
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Inventory request failed: %s", exc)
            return InventoryFetchResult(success=False, error=DEFAULT_FETCH_ERROR)

        return parse_inventory_body(body)

    async def fetch_categories(self) -> InventoryLookupResult:
        return await self._lookup(
            INVENTORY_CATEGORIES_PATH,
            key="categories",
            default=dict,
            failed=CATEGORIES_FAILED,
            unavailable=CATEGORIES_UNAVAILABLE,
        )

    async def fetch_subcategories(self, category: str) -> InventoryLookupResult:
        return await self._lookup(
            INVENTORY_SUBCATEGORIES_PATH.format(category=quote(category, safe="")),
            key="subcategories",
            default=list,
            failed=SUBCATEGORIES_FAILED,
            unavailable=SUBCATEGORIES_UNAVAILABLE,
        )

    async def fetch_item_pricing(
        self, item_id: str, pincode: str | None = None
    ) -> InventoryLookupResult:
        return await self._lookup(
            ITEM_PRICING_PATH.format(item_id=quote(item_id, safe="")),
            params={"pincode": pincode} if pincode else None,
            key="data",
            default=dict,
            failed=ITEM_PRICING_FAILED,
            unavailable=ITEM_PRICING_UNAVAILABLE,
        )

    async def _lookup(
        self,
        path: str,
        *,
        key: str,
        default: type,
        failed: str,
        unavailable: str,
        params: dict[str, Any] | None = None,
    ) -> InventoryLookupResult:
        try:
            body = await self._get(path, params)
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Inventory lookup %s failed: %s", path, exc)
            return InventoryLookupResult(success=False, error=unavailable)

        if not isinstance(body, dict) or body.get("success") is not True:
            return InventoryLookupResult(success=False, error=failed)

        data = body.get(key)
        if not isinstance(data, default):
            data = default()
        return InventoryLookupResult(success=True, data=data)


def parse_inventory_body(body: Any) -> InventoryFetchResult:
    """Validate the envelope returned by the inventory endpoint.

    Entries inside `inventory` are passed through untouched; the normalizer
    skips the ones that are not objects.
    """

    if not isinstance(body, dict) or body.get("success") is not True:
        return InventoryFetchResult(success=False, error=INVALID_RESPONSE_ERROR)
    data = body.get("data")
    if not isinstance(data, dict):
        return InventoryFetchResult(success=False, error=INVALID_RESPONSE_ERROR)

    inventory = data.get("inventory")
    pagination = data.get("pagination")
    pincode = data.get("pincode")
    return InventoryFetchResult(
        success=True,
        inventory=inventory if isinstance(inventory, list) else [],
        pagination=pagination if isinstance(pagination, dict) else {},
        pincode=str(pincode) if pincode else None,
    )


def describe_error_body(body: Any) -> str:
    """Build a user-facing message from an error response body.

    Prefers the server's `error`, then `message`, and appends any validation
    `details` so the user sees which field was rejected.
    """

    if not isinstance(body, dict):
        return DEFAULT_FETCH_ERROR

    message = body.get("error") or body.get("message") or DEFAULT_FETCH_ERROR
    if not isinstance(message, str):
        message = DEFAULT_FETCH_ERROR

    details = body.get("details")
    if isinstance(details, list) and details:
        logger.debug("Inventory validation details: %s", details)
        described = ", ".join(_describe_detail(detail) for detail in details)
        if described:
            message = f"{message}. {described}"
    return message


def _describe_detail(detail: Any) -> str:
    if isinstance(detail, str):
        return detail
    if isinstance(detail, dict):
        text = detail.get("message") or detail.get("msg")
        if text:
            return str(text)
        if detail.get("path"):
            return f"{detail['path']}: {json.dumps(detail, default=str)}"
    return json.dumps(detail, default=str)


def _safe_json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


_inventory_client: InventoryClient | None = None


def _initialize_inventory_client() -> InventoryClient:
    return HttpInventoryClient(
        base_url=settings.INVENTORY_API_URL,
        timeout=settings.API_TIMEOUT_SECONDS,
    )


_inventory_client = _initialize_inventory_client()


def get_inventory_client() -> InventoryClient:
    """FastAPI dependency returning the configured inventory client."""

    return _inventory_client


InventoryDependency = Annotated[InventoryClient, Depends(get_inventory_client)]
