"""Tests for admin order management."""

import json
from decimal import Decimal

import httpx
import pytest
import respx

from luckyegg.backend import BackendClient
from luckyegg.models.failure import InvalidInputError, NotFoundError
from luckyegg.models.order import OrderStatus, PaymentStatus
from luckyegg.services.orders import get_order, list_orders, update_order_status
from tests.factories import BACKEND_URL

ROWS = f"{BACKEND_URL}/rest/v1"


def order_row(order_id: str = "o1", **overrides: object) -> dict:
    row: dict[str, object] = {
        "id": order_id,
        "customer_id": "cust-1",
        "order_number": "LE-1001",
        "status": "pending",
        "subtotal": "40.00",
        "tax_amount": "3.20",
        "shipping_amount": "9.99",
        "total_amount": "53.19",
        "currency": "usd",
        "payment_status": "pending",
        "payment_method": "stripe",
        "shipping_address": {
            "address_line1": "1 Route Road",
            "address_line2": "",
            "city": "Pallet Town",
            "state": "KA",
            "postal_code": "00001",
            "country": "US",
        },
        "created_at": "2024-05-01T12:00:00+00:00",
    }
    row.update(overrides)
    return row


class TestListOrders:
    @respx.mock
    async def test_newest_first(self, backend: BackendClient) -> None:
        route = respx.get(f"{ROWS}/orders").mock(
            return_value=httpx.Response(200, json=[order_row("o2"), order_row("o1")])
        )

        orders = await list_orders(backend)

        assert [o.id for o in orders] == ["o2", "o1"]
        assert orders[0].total_amount == Decimal("53.19")
        params = route.calls.last.request.url.params
        assert params["order"] == "created_at.desc"
        assert params["limit"] == "100"
        assert "status" not in params

    @respx.mock
    async def test_filter_by_status(self, backend: BackendClient) -> None:
        route = respx.get(f"{ROWS}/orders").mock(return_value=httpx.Response(200, json=[]))

        await list_orders(backend, status=OrderStatus.SHIPPED, limit=10)

        params = route.calls.last.request.url.params
        assert params["status"] == "eq.shipped"
        assert params["limit"] == "10"

    @respx.mock
    async def test_unknown_status_row_skipped(self, backend: BackendClient) -> None:
        respx.get(f"{ROWS}/orders").mock(
            return_value=httpx.Response(
                200, json=[order_row("o2", status="lost-in-mail"), order_row("o1")]
            )
        )

        orders = await list_orders(backend)

        assert [o.id for o in orders] == ["o1"]


class TestGetOrder:
    @respx.mock
    async def test_with_items(self, backend: BackendClient) -> None:
        respx.get(f"{ROWS}/orders").mock(return_value=httpx.Response(200, json=[order_row()]))
        items = respx.get(f"{ROWS}/order_items").mock(
            return_value=httpx.Response(
                200,
                json=[
                    {
                        "id": "i1",
                        "order_id": "o1",
                        "card_id": "c1",
                        "quantity": 2,
                        "unit_price": "20.00",
                        "total_price": "40.00",
                    }
                ],
            )
        )

        order, lines = await get_order(backend, "o1")

        assert order.shipping_address is not None
        assert order.shipping_address.city == "Pallet Town"
        assert lines[0].total_price == Decimal("40.00")
        assert items.calls.last.request.url.params["order_id"] == "eq.o1"

    @respx.mock
    async def test_missing(self, backend: BackendClient) -> None:
        respx.get(f"{ROWS}/orders").mock(return_value=httpx.Response(200, json=[]))

        with pytest.raises(NotFoundError):
            await get_order(backend, "ghost")


class TestUpdateStatus:
    @respx.mock
    async def test_update_both(self, backend: BackendClient) -> None:
        route = respx.patch(f"{ROWS}/orders").mock(
            return_value=httpx.Response(
                200, json=[order_row(status="shipped", payment_status="paid")]
            )
        )

        order = await update_order_status(
            backend, "o1", status=OrderStatus.SHIPPED, payment_status=PaymentStatus.PAID
        )

        assert order.status == OrderStatus.SHIPPED
        assert json.loads(route.calls.last.request.content) == {
            "status": "shipped",
            "payment_status": "paid",
        }

    async def test_nothing_to_update(self, backend: BackendClient) -> None:
        with pytest.raises(InvalidInputError):
            await update_order_status(backend, "o1")

    @respx.mock
    async def test_missing_order(self, backend: BackendClient) -> None:
        respx.patch(f"{ROWS}/orders").mock(return_value=httpx.Response(200, json=[]))

        with pytest.raises(NotFoundError):
            await update_order_status(backend, "ghost", status=OrderStatus.CANCELLED)
