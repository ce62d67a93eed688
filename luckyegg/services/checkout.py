"""
Checkout submission.

Validates the contact/shipping form, then writes the order to the hosted
backend in a fixed order, each step depending on the id created by the
one before it:

    1. customer row
    2. order row (customer id, totals, both addresses)
    3. order item rows (one per cart line)
    4. stock decrement per cart line, keyed by card id

The sequence is NOT atomic. A failure aborts the remaining steps and
raises CheckoutError; completed steps stay written unless
`settings.compensate_failed_checkout` is enabled, in which case they are
undone in reverse order on a best-effort basis.

Stock is decremented from the cart's snapshot of each card, not from the
live row, so a card's stock may have changed since it was added.
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal

from pydantic import BaseModel, Field, model_validator

from luckyegg.backend import BackendClient, Row
from luckyegg.backend.tables import CARDS, CUSTOMERS, ORDER_ITEMS, ORDERS
from luckyegg.cart.store import CartStore
from luckyegg.config import settings
from luckyegg.models.cart import CartLineItem
from luckyegg.models.failure import (
    BackendError,
    CheckoutError,
    CheckoutValidationError,
    EmptyCartError,
)
from luckyegg.models.order import Address, OrderStatus, PaymentStatus
from luckyegg.services.pricing import OrderTotals, calculate_order_totals

logger = logging.getLogger(__name__)


class CheckoutForm(BaseModel):
    """Contact and address details collected at checkout."""

    email: str = ""
    first_name: str = ""
    last_name: str = ""
    phone: str = ""
    shipping_address: Address = Field(default_factory=Address)
    billing_address: Address = Field(default_factory=Address)
    same_as_shipping: bool = True
    payment_method: str = "stripe"
    notes: str | None = None

    @model_validator(mode="after")
    def _copy_shipping_to_billing(self) -> "CheckoutForm":
        if self.same_as_shipping:
            self.billing_address = self.shipping_address.model_copy()
        return self


REQUIRED_FIELDS: tuple[tuple[str, str], ...] = (
    ("email", "email"),
    ("first_name", "first name"),
    ("last_name", "last name"),
    ("shipping_address.address_line1", "address"),
    ("shipping_address.city", "city"),
    ("shipping_address.state", "state"),
    ("shipping_address.postal_code", "postal code"),
)


def missing_required_fields(form: CheckoutForm) -> list[str]:
    """List the labels of required fields that are blank."""
    missing: list[str] = []
    for path, label in REQUIRED_FIELDS:
        value: object = form
        for part in path.split("."):
            value = getattr(value, part)
        if not str(value).strip():
            missing.append(label)
    return missing


def validate_checkout_form(form: CheckoutForm) -> None:
    """
    Check required fields.

    Raises:
        CheckoutValidationError: One aggregate error naming every blank field
    """
    missing = missing_required_fields(form)
    if missing:
        raise CheckoutValidationError(missing)


@dataclass(frozen=True, slots=True)
class OrderConfirmation:
    """What the confirmation view needs after a successful checkout."""

    order_id: str
    order_number: str
    totals: OrderTotals


@dataclass
class _Progress:
    """Writes completed so far, for compensation."""

    customer_id: str | None = None
    order_id: str | None = None
    items_written: bool = False
    stock_updated: list[CartLineItem] = field(default_factory=list)


def _money(value: Decimal) -> str:
    return str(value)


def _customer_row(form: CheckoutForm) -> Row:
    return {
        "email": form.email.strip(),
        "first_name": form.first_name.strip(),
        "last_name": form.last_name.strip(),
        "phone": form.phone.strip() or None,
    }


def _order_row(customer_id: str, form: CheckoutForm, totals: OrderTotals) -> Row:
    return {
        "customer_id": customer_id,
        "subtotal": _money(totals.subtotal),
        "tax_amount": _money(totals.tax),
        "shipping_amount": _money(totals.shipping),
        "total_amount": _money(totals.total),
        "billing_address": form.billing_address.model_dump(by_alias=True),
        "shipping_address": form.shipping_address.model_dump(by_alias=True),
        "payment_method": form.payment_method,
        "status": OrderStatus.PENDING.value,
        "payment_status": PaymentStatus.PENDING.value,
        "notes": form.notes,
    }


def _order_item_rows(order_id: str, items: tuple[CartLineItem, ...]) -> list[Row]:
    return [
        {
            "order_id": order_id,
            "card_id": item.card.id,
            "quantity": item.quantity,
            "unit_price": _money(item.card.price),
            "total_price": _money(item.line_total),
        }
        for item in items
    ]


async def _compensate(client: BackendClient, progress: _Progress) -> None:
    """Undo completed checkout writes in reverse order. Failures are logged only."""
    for item in reversed(progress.stock_updated):
        try:
            await client.update(
                CARDS,
                {"stock_quantity": item.card.stock_quantity},
                filters={"id": item.card.id},
            )
        except BackendError as e:
            logger.error("Compensation: could not restore stock for %s: %s", item.card.id, e)

    if progress.items_written and progress.order_id:
        try:
            await client.delete(ORDER_ITEMS, filters={"order_id": progress.order_id})
        except BackendError as e:
            logger.error("Compensation: could not delete items of %s: %s", progress.order_id, e)

    if progress.order_id:
        try:
            await client.delete(ORDERS, filters={"id": progress.order_id})
        except BackendError as e:
            logger.error("Compensation: could not delete order %s: %s", progress.order_id, e)

    if progress.customer_id:
        try:
            await client.delete(CUSTOMERS, filters={"id": progress.customer_id})
        except BackendError as e:
            logger.error(
                "Compensation: could not delete customer %s: %s", progress.customer_id, e
            )


async def submit_order(
    client: BackendClient,
    store: CartStore,
    form: CheckoutForm,
    *,
    compensate: bool | None = None,
) -> OrderConfirmation:
    """
    Place an order for the cart's contents.

    Args:
        client: Backend client
        store: The visitor's cart; cleared only on full success
        form: Contact and address details
        compensate: Undo completed writes on failure. Defaults to
            settings.compensate_failed_checkout.

    Returns:
        The new order's id, backend-assigned order number, and totals

    Raises:
        CheckoutValidationError: Required fields missing (nothing written)
        EmptyCartError: Cart has no lines (nothing written)
        CheckoutError: A write step failed; the cart is left intact
    """
    validate_checkout_form(form)

    items = store.items
    if not items:
        raise EmptyCartError()

    if compensate is None:
        compensate = settings.compensate_failed_checkout

    totals = calculate_order_totals(items)
    progress = _Progress()
    step = "create customer"

    try:
        customer = await client.insert_one(CUSTOMERS, _customer_row(form))
        progress.customer_id = str(customer["id"])

        step = "create order"
        order = await client.insert_one(ORDERS, _order_row(progress.customer_id, form, totals))
        progress.order_id = str(order["id"])

        step = "create order items"
        await client.insert(ORDER_ITEMS, _order_item_rows(progress.order_id, items))
        progress.items_written = True

        step = "update stock"
        for item in items:
            await client.update(
                CARDS,
                {"stock_quantity": item.card.stock_quantity - item.quantity},
                filters={"id": item.card.id},
            )
            progress.stock_updated.append(item)

    except (BackendError, KeyError) as e:
        logger.error("Checkout failed at step '%s': %s", step, e)
        if compensate:
            await _compensate(client, progress)
        raise CheckoutError(step, e) from e

    store.clear()
    order_number = str(order.get("order_number") or progress.order_id)
    logger.info("Placed order %s (%s items, total %s)", order_number, len(items), totals.total)
    return OrderConfirmation(order_id=progress.order_id, order_number=order_number, totals=totals)
