"""Checkout endpoint."""

from fastapi import APIRouter, status
from pydantic import BaseModel

from luckyegg.api.cart import TotalsResponse
from luckyegg.api.deps import BackendDep, CartDep
from luckyegg.services.checkout import CheckoutForm, submit_order

router = APIRouter(prefix="/checkout", tags=["checkout"])


class CheckoutResponse(BaseModel):
    """Confirmation data for the order success view."""

    order_id: str
    order_number: str
    totals: TotalsResponse


@router.post("", response_model=CheckoutResponse, status_code=status.HTTP_201_CREATED)
async def checkout(form: CheckoutForm, store: CartDep, backend: BackendDep) -> CheckoutResponse:
    """
    Place an order for the visitor's cart.

    Returns 400 with one aggregate message when required fields are
    missing, 502 if a backend write fails. The cart is emptied only when
    every step succeeds.
    """
    confirmation = await submit_order(backend, store, form)
    totals = confirmation.totals.rounded()
    return CheckoutResponse(
        order_id=confirmation.order_id,
        order_number=confirmation.order_number,
        totals=TotalsResponse(
            subtotal=totals.subtotal,
            tax=totals.tax,
            shipping=totals.shipping,
            total=totals.total,
        ),
    )
