"""Routes implementing the add-to-cart action."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from src.api.routes.catalog import StoreDependency, delivery_context
from src.models.cart import AddToCartPayload, AddToCartResponse
from src.services.cart.flow import CartAdditionFlow
from src.services.cart.presentation import present_outcome
from src.services.cart.state import CartSuccessState
from src.services.clients.cart_client import CartDependency

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cart", tags=["cart"])


@router.post(
    "/items",
    response_model=AddToCartResponse,
    summary="Add a product from the current catalog snapshot to the cart",
)
async def add_cart_item(
    payload: AddToCartPayload,
    cart: CartDependency,
    store: StoreDependency,
) -> AddToCartResponse:
    product = store.find(payload.product_id)
    if product is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Unknown product id",
        )

    delivery = delivery_context(payload.pincode)
    state = CartSuccessState()
    flow = CartAdditionFlow(cart, state)
    outcome = await flow.add(product, payload.quantity, delivery)

    presentation = state.presentation or present_outcome(
        outcome, product, payload.quantity
    )
    return AddToCartResponse(outcome=outcome, presentation=presentation)
