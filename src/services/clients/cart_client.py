"""Cart client abstractions and implementations."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import UTC, datetime, timedelta
from typing import Annotated

import httpx
from fastapi import Depends

from src.config import settings
from src.models.cart import CartMutationResponse
from src.models.product import Product

logger = logging.getLogger(__name__)

ADD_TO_CART_PATH = "/api/orders/cart"


class CartClient(ABC):
    """Abstract cart-mutation boundary used by the add-to-cart flow."""

    @abstractmethod
    async def add_to_cart(
        self,
        product: Product,
        quantity: int,
        *,
        pincode: str | None = None,
    ) -> CartMutationResponse:
        """Create a pending cart entry. May raise on transport failure."""


class HttpCartClient(CartClient):
    """Cart client backed by the storefront orders API."""

    def __init__(
        self,
        *,
        base_url: str,
        timeout: float = 30.0,
        lead_days: int = 3,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not base_url:
            raise ValueError("Cart API base URL is required")
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._lead_days = lead_days
        self._transport = transport

    async def add_to_cart(
        self,
        product: Product,
        quantity: int,
        *,
        pincode: str | None = None,
    ) -> CartMutationResponse:
        expected = datetime.now(UTC) + timedelta(days=self._lead_days)
        body = {
            "itemCode": product.id,
            "qty": quantity or 1,
            "deliveryPincode": pincode or "",
            "deliveryAddress": "",
            "deliveryExpectedDate": expected.isoformat(),
            "custPhoneNum": "",
            "receiverMobileNum": "",
        }

        async with httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout,
            transport=self._transport,
        ) as client:
            response = await client.post(ADD_TO_CART_PATH, json=body)
            try:
                response.raise_for_status()
            except httpx.HTTPStatusError:
                declined = _declined_body(response)
                if declined is None:
                    raise
                logger.info(
                    "Cart declined product %s with status %s",
                    product.id,
                    response.status_code,
                )
                return declined
            payload = response.json() if response.content else {}

        logger.debug(
            "Add to cart response for %s: status=%s body=%s",
            product.id,
            response.status_code,
            payload,
        )
        if not isinstance(payload, dict):
            return CartMutationResponse()
        return CartMutationResponse.model_validate(payload)


def _declined_body(response: httpx.Response) -> CartMutationResponse | None:
    """Read an error response's JSON object as an explicit decline.

    `success` is forced to False so a body carrying only a `message` is never
    mistaken for an added item. Returns None for non-JSON bodies.
    """

    try:
        body = response.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    return CartMutationResponse.model_validate({**body, "success": False})


_cart_client: CartClient | None = None


def _initialize_cart_client() -> CartClient:
    return HttpCartClient(
        base_url=settings.INVENTORY_API_URL,
        timeout=settings.API_TIMEOUT_SECONDS,
        lead_days=settings.CART_DELIVERY_LEAD_DAYS,
    )


_cart_client = _initialize_cart_client()


def get_cart_client() -> CartClient:
    """FastAPI dependency returning the configured cart client."""

    return _cart_client


CartDependency = Annotated[CartClient, Depends(get_cart_client)]
