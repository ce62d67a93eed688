"""
Cart API endpoints.

Each visitor's cart is addressed by the X-Cart-Id header and persisted
locally after every change.
"""

from decimal import Decimal

from fastapi import APIRouter
from pydantic import BaseModel, Field

from luckyegg.api.deps import BackendDep, CartDep
from luckyegg.cart.store import CartStore
from luckyegg.models.card import Card
from luckyegg.services.catalog import get_card
from luckyegg.services.pricing import calculate_order_totals

router = APIRouter(prefix="/cart", tags=["cart"])


class CartLineResponse(BaseModel):
    card: Card
    quantity: int
    line_total: Decimal


class CartResponse(BaseModel):
    """Response model for cart contents."""

    items: list[CartLineResponse] = Field(default_factory=list)
    is_open: bool = False
    count: int = 0
    total: Decimal = Decimal("0")


class TotalsResponse(BaseModel):
    """Checkout pricing breakdown."""

    subtotal: Decimal
    tax: Decimal
    shipping: Decimal
    total: Decimal


class AddItemRequest(BaseModel):
    card_id: str = Field(..., min_length=1)


class SetQuantityRequest(BaseModel):
    quantity: int = Field(..., description="New quantity; zero or less removes the line")


def cart_response(store: CartStore) -> CartResponse:
    return CartResponse(
        items=[
            CartLineResponse(card=item.card, quantity=item.quantity, line_total=item.line_total)
            for item in store.items
        ],
        is_open=store.is_open,
        count=store.count(),
        total=store.total(),
    )


@router.get("", response_model=CartResponse)
async def get_cart(store: CartDep) -> CartResponse:
    return cart_response(store)


@router.post("/items", response_model=CartResponse)
async def add_item(request: AddItemRequest, store: CartDep, backend: BackendDep) -> CartResponse:
    """
    Add one unit of a card.

    The card is fetched from the catalog and stored as a snapshot. Adding
    a card already in the cart increments it, up to its stock.
    """
    card = await get_card(backend, request.card_id)
    store.add(card)
    return cart_response(store)


@router.put("/items/{card_id}", response_model=CartResponse)
async def set_item_quantity(
    card_id: str, request: SetQuantityRequest, store: CartDep
) -> CartResponse:
    store.set_quantity(card_id, request.quantity)
    return cart_response(store)


@router.delete("/items/{card_id}", response_model=CartResponse)
async def remove_item(card_id: str, store: CartDep) -> CartResponse:
    store.remove(card_id)
    return cart_response(store)


@router.delete("", response_model=CartResponse)
async def clear_cart(store: CartDep) -> CartResponse:
    store.clear()
    return cart_response(store)


@router.post("/open", response_model=CartResponse)
async def open_cart(store: CartDep) -> CartResponse:
    store.open()
    return cart_response(store)


@router.post("/close", response_model=CartResponse)
async def close_cart(store: CartDep) -> CartResponse:
    store.close()
    return cart_response(store)


@router.post("/toggle", response_model=CartResponse)
async def toggle_cart(store: CartDep) -> CartResponse:
    store.toggle()
    return cart_response(store)


@router.get("/totals", response_model=TotalsResponse)
async def get_totals(store: CartDep) -> TotalsResponse:
    totals = calculate_order_totals(store.items).rounded()
    return TotalsResponse(
        subtotal=totals.subtotal,
        tax=totals.tax,
        shipping=totals.shipping,
        total=totals.total,
    )
