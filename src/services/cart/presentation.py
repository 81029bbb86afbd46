"""Shared mapping from add-to-cart outcomes to what the user sees."""

from __future__ import annotations

from typing import Protocol

from src.models.cart import (
    Added,
    Blocked,
    CartAdditionOutcome,
    ConfirmationModal,
    ErrorNotice,
    Presentation,
)
from src.models.product import Product

PINCODE_REQUIRED = "pincode-required"
DELIVERY_UNAVAILABLE = "delivery-unavailable"
INVALID_QUANTITY = "invalid-quantity"
TRANSPORT_ERROR = "transport-error"
UNKNOWN = "unknown"

REASON_MESSAGES = {
    PINCODE_REQUIRED: "Please set your delivery pincode to add items to the cart.",
    DELIVERY_UNAVAILABLE: "Delivery is not available for this product at your location.",
    INVALID_QUANTITY: "Please choose a quantity of at least 1.",
    TRANSPORT_ERROR: "Unable to add item to cart. Please try again.",
    UNKNOWN: "Failed to add item to cart",
}


class PresentationSink(Protocol):
    """UI boundary that renders exactly one signal per cart request."""

    def show_confirmation(self, modal: ConfirmationModal) -> None: ...

    def show_error(self, notice: ErrorNotice) -> None: ...


def describe_reason(outcome: CartAdditionOutcome, product: Product | None = None) -> str:
    reason = getattr(outcome, "reason", "") or UNKNOWN
    if (
        isinstance(outcome, Blocked)
        and reason == DELIVERY_UNAVAILABLE
        and product is not None
        and product.delivery_unavailable_reason
    ):
        return product.delivery_unavailable_reason
    return REASON_MESSAGES.get(reason, reason)


def present_outcome(
    outcome: CartAdditionOutcome,
    product: Product,
    quantity: int,
) -> Presentation:
    """Return the confirmation modal for `Added`, otherwise an error notice."""

    if isinstance(outcome, Added):
        return ConfirmationModal(
            product_name=product.name,
            quantity=max(1, quantity),
            unit=product.units,
        )
    return ErrorNotice(message=describe_reason(outcome, product))


def emit(sink: PresentationSink, presentation: Presentation) -> None:
    if isinstance(presentation, ConfirmationModal):
        sink.show_confirmation(presentation)
    else:
        sink.show_error(presentation)
