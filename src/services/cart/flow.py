"""Add-to-cart orchestration and response classification."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel

from src.config import settings
from src.models.cart import (
    Added,
    Blocked,
    CartAdditionOutcome,
    CartAdditionRequest,
    Rejected,
)
from src.models.product import DeliveryContext, Product
from src.services.cart.presentation import (
    DELIVERY_UNAVAILABLE,
    INVALID_QUANTITY,
    PINCODE_REQUIRED,
    TRANSPORT_ERROR,
    UNKNOWN,
    PresentationSink,
    emit,
    present_outcome,
)
from src.services.clients.cart_client import CartClient

logger = logging.getLogger(__name__)


class FlowState(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    BLOCKED = "blocked"
    SUBMITTING = "submitting"
    ADDED = "added"
    REJECTED = "rejected"


TERMINAL_STATES = frozenset({FlowState.BLOCKED, FlowState.ADDED, FlowState.REJECTED})


def classify_response(response: Any, *, strict: bool = False) -> CartAdditionOutcome:
    """Map a cart-mutation response onto exactly one outcome.

    An explicit `success: true` wins. A non-empty `error` rejects. An explicit
    `success: false` rejects with whatever text the server sent. Anything
    else, including a bare `message` or an empty body, counts as added unless
    `strict` is set, in which case silence is rejected as "unknown".
    """

    if isinstance(response, BaseModel):
        response = response.model_dump()
    if not isinstance(response, Mapping):
        response = {}

    if response.get("success") is True:
        return Added()

    error = _text(response.get("error"))
    if error:
        return Rejected(reason=error)

    message = _text(response.get("message"))
    if response.get("success") is False:
        return Rejected(reason=message or UNKNOWN)

    if strict:
        return Rejected(reason=UNKNOWN)
    if not message:
        logger.info("Cart response carried no success or error flag; treating as added")
    return Added()


class CartAddition:
    """One request cycle. Runs at most once and emits at most one signal."""

    def __init__(
        self,
        client: CartClient,
        product: Product,
        quantity: int,
        delivery: DeliveryContext | None,
        *,
        sink: PresentationSink | None = None,
        is_active: Callable[[], bool] | None = None,
        strict: bool = False,
    ) -> None:
        self.request = CartAdditionRequest.model_construct(
            product_id=product.id,
            quantity=quantity,
            delivery_context_present=bool(delivery and delivery.active),
        )
        self.product = product
        self.state = FlowState.IDLE
        self.outcome: CartAdditionOutcome | None = None
        self.network_calls = 0
        self._client = client
        self._delivery = delivery
        self._sink = sink
        self._is_active = is_active
        self._strict = strict

    async def run(self) -> CartAdditionOutcome:
        if self.outcome is not None:
            return self.outcome

        self.state = FlowState.VALIDATING
        blocked = self._validate()
        if blocked is not None:
            return self._finish(blocked, FlowState.BLOCKED)

        self.state = FlowState.SUBMITTING
        self.network_calls += 1
        try:
            response = await self._client.add_to_cart(
                self.product,
                self.request.quantity,
                pincode=self._delivery.pincode if self._delivery else None,
            )
        except Exception as exc:  # pylint: disable=broad-exception-caught
            logger.warning(
                "Add to cart failed for product %s: %s", self.product.id, exc
            )
            return self._finish(Rejected(reason=TRANSPORT_ERROR), FlowState.REJECTED)

        outcome = classify_response(response, strict=self._strict)
        state = FlowState.ADDED if isinstance(outcome, Added) else FlowState.REJECTED
        return self._finish(outcome, state)

    def _validate(self) -> Blocked | None:
        if not self.product.is_delivery_available:
            return Blocked(reason=DELIVERY_UNAVAILABLE)
        if not self.request.delivery_context_present:
            return Blocked(reason=PINCODE_REQUIRED)
        if not isinstance(self.request.quantity, int) or self.request.quantity < 1:
            return Blocked(reason=INVALID_QUANTITY)
        return None

    def _finish(
        self, outcome: CartAdditionOutcome, state: FlowState
    ) -> CartAdditionOutcome:
        self.outcome = outcome
        self.state = state
        logger.info(
            "Add to cart for product %s (qty=%s) ended %s",
            self.product.id,
            self.request.quantity,
            outcome.model_dump(),
        )

        if self._sink is None:
            return outcome
        if self._is_active is not None and not self._is_active():
            logger.debug("Screen torn down; dropping cart presentation signal")
            return outcome

        emit(self._sink, present_outcome(outcome, self.product, self.request.quantity))
        return outcome


class CartAdditionFlow:
    """Entry point screens use to add products to the cart.

    Holds no per-request state; every `add` call starts a fresh cycle so a
    retry after a terminal outcome never resumes the previous one.
    """

    def __init__(
        self,
        client: CartClient,
        sink: PresentationSink | None = None,
        *,
        strict: bool | None = None,
    ) -> None:
        self._client = client
        self._sink = sink
        self._strict = settings.CART_STRICT_SUCCESS if strict is None else strict

    def start(
        self,
        product: Product,
        quantity: int,
        delivery: DeliveryContext | None,
        *,
        is_active: Callable[[], bool] | None = None,
    ) -> CartAddition:
        return CartAddition(
            self._client,
            product,
            quantity,
            delivery,
            sink=self._sink,
            is_active=is_active,
            strict=self._strict,
        )

    async def add(
        self,
        product: Product,
        quantity: int,
        delivery: DeliveryContext | None,
        *,
        is_active: Callable[[], bool] | None = None,
    ) -> CartAdditionOutcome:
        return await self.start(product, quantity, delivery, is_active=is_active).run()


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""
