"""Schemas used by the add-to-cart flow and API."""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class CartAdditionRequest(BaseModel):
    """A single "add N units of product P" request."""

    product_id: str = Field(..., min_length=1)
    quantity: int = Field(1, ge=1)
    delivery_context_present: bool = False


class CartMutationResponse(BaseModel):
    """Body returned by the upstream cart endpoint. Every flag is optional."""

    model_config = ConfigDict(extra="allow")

    success: Any = None
    error: Any = None
    message: Any = None


class Added(BaseModel):
    kind: Literal["added"] = "added"


class Rejected(BaseModel):
    kind: Literal["rejected"] = "rejected"
    reason: str = Field(..., min_length=1)


class Blocked(BaseModel):
    """Precondition failure detected before any network call."""

    kind: Literal["blocked"] = "blocked"
    reason: str = Field(..., min_length=1)


CartAdditionOutcome = Annotated[Added | Rejected | Blocked, Field(discriminator="kind")]


class ConfirmationModal(BaseModel):
    """Success modal shown after an item lands in the cart."""

    kind: Literal["confirmation"] = "confirmation"
    product_name: str
    quantity: int = Field(..., ge=1)
    unit: str


class ErrorNotice(BaseModel):
    """Short, human-readable failure message."""

    kind: Literal["error"] = "error"
    message: str = Field(..., min_length=1)


Presentation = Annotated[
    ConfirmationModal | ErrorNotice, Field(discriminator="kind")
]


class AddToCartPayload(BaseModel):
    """Incoming payload for POST /cart/items."""

    product_id: str = Field(..., min_length=1)
    quantity: int = Field(1, ge=1)
    pincode: str | None = None


class AddToCartResponse(BaseModel):
    """Response body for POST /cart/items."""

    outcome: CartAdditionOutcome
    presentation: Presentation
