"""Admin order management."""

import logging

from luckyegg.backend import BackendClient, parse_row, parse_rows
from luckyegg.backend.tables import ORDER_ITEMS, ORDERS
from luckyegg.models.failure import InvalidInputError, NotFoundError
from luckyegg.models.order import Order, OrderItem, OrderStatus, PaymentStatus

logger = logging.getLogger(__name__)


async def list_orders(
    client: BackendClient, status: OrderStatus | None = None, limit: int = 100
) -> list[Order]:
    """Get orders newest first, optionally only those in one status."""
    filters = {"status": status.value} if status else None
    rows = await client.select(
        ORDERS, filters=filters, order="created_at", descending=True, limit=limit
    )
    return parse_rows(Order, rows, ORDERS)


async def get_order(client: BackendClient, order_id: str) -> tuple[Order, list[OrderItem]]:
    """
    Get an order with its line items.

    Raises:
        NotFoundError: If the order does not exist
    """
    row = await client.select_one(ORDERS, {"id": order_id})
    if row is None:
        raise NotFoundError("Order", order_id)
    item_rows = await client.select(ORDER_ITEMS, filters={"order_id": order_id})
    return parse_row(Order, row, ORDERS), parse_rows(OrderItem, item_rows, ORDER_ITEMS)


async def update_order_status(
    client: BackendClient,
    order_id: str,
    status: OrderStatus | None = None,
    payment_status: PaymentStatus | None = None,
) -> Order:
    """
    Change an order's fulfilment and/or payment status.

    Raises:
        InvalidInputError: If neither status is given
        NotFoundError: If the order does not exist
    """
    values: dict[str, str] = {}
    if status is not None:
        values["status"] = status.value
    if payment_status is not None:
        values["payment_status"] = payment_status.value
    if not values:
        raise InvalidInputError("Nothing to update", suggestion="Provide status or payment_status")

    rows = await client.update(ORDERS, values, filters={"id": order_id})
    if not rows:
        raise NotFoundError("Order", order_id)
    logger.info("Order %s updated: %s", order_id, values)
    return parse_row(Order, rows[0], ORDERS)
