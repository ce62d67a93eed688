"""Tests for cart and checkout API endpoints."""

from decimal import Decimal

import httpx
import respx
from httpx import AsyncClient

from tests.factories import BACKEND_URL, card_row

ROWS = f"{BACKEND_URL}/rest/v1"
VISITOR = {"X-Cart-Id": "visitor-1"}

CHECKOUT_FORM = {
    "email": "ash@example.com",
    "first_name": "Ash",
    "last_name": "Ketchum",
    "shipping_address": {
        "address_line1": "1 Route Road",
        "city": "Pallet Town",
        "state": "KA",
        "postal_code": "00001",
    },
}


def mock_card(card_id: str = "c1", price: str = "20.00", stock: int = 2) -> respx.Route:
    return respx.get(f"{ROWS}/cards", params={"id": f"eq.{card_id}"}).mock(
        return_value=httpx.Response(200, json=[card_row(card_id, price=price, stock=stock)])
    )


class TestCartId:
    async def test_missing_cart_id(self, client: AsyncClient) -> None:
        response = await client.get("/cart")

        assert response.status_code == 400
        assert response.json()["failure"]["kind"] == "invalid_input"

    async def test_new_visitor_has_empty_cart(self, client: AsyncClient) -> None:
        response = await client.get("/cart", headers=VISITOR)

        assert response.status_code == 200
        data = response.json()
        assert data["items"] == []
        assert data["count"] == 0
        assert data["is_open"] is False


class TestCartEndpoints:
    @respx.mock
    async def test_add_persists_between_requests(self, client: AsyncClient) -> None:
        mock_card("c1", price="20.00", stock=2)

        await client.post("/cart/items", json={"card_id": "c1"}, headers=VISITOR)
        await client.post("/cart/items", json={"card_id": "c1"}, headers=VISITOR)
        response = await client.post("/cart/items", json={"card_id": "c1"}, headers=VISITOR)

        assert response.json()["items"][0]["quantity"] == 2

        data = (await client.get("/cart", headers=VISITOR)).json()
        assert data["count"] == 2
        assert Decimal(data["total"]) == Decimal("40.00")

    @respx.mock
    async def test_carts_are_per_visitor(self, client: AsyncClient) -> None:
        mock_card()

        await client.post("/cart/items", json={"card_id": "c1"}, headers=VISITOR)
        other = await client.get("/cart", headers={"X-Cart-Id": "visitor-2"})

        assert other.json()["items"] == []

    @respx.mock
    async def test_add_unknown_card(self, client: AsyncClient) -> None:
        respx.get(f"{ROWS}/cards").mock(return_value=httpx.Response(200, json=[]))

        response = await client.post("/cart/items", json={"card_id": "ghost"}, headers=VISITOR)

        assert response.status_code == 404
        assert response.json()["failure"]["kind"] == "not_found"

    @respx.mock
    async def test_set_quantity_clamps_and_removes(self, client: AsyncClient) -> None:
        mock_card("c1", stock=3)
        await client.post("/cart/items", json={"card_id": "c1"}, headers=VISITOR)

        clamped = await client.put("/cart/items/c1", json={"quantity": 10}, headers=VISITOR)
        assert clamped.json()["items"][0]["quantity"] == 3

        removed = await client.put("/cart/items/c1", json={"quantity": 0}, headers=VISITOR)
        assert removed.json()["items"] == []

    @respx.mock
    async def test_remove_and_clear(self, client: AsyncClient) -> None:
        mock_card("c1")
        mock_card("c2")
        await client.post("/cart/items", json={"card_id": "c1"}, headers=VISITOR)
        await client.post("/cart/items", json={"card_id": "c2"}, headers=VISITOR)

        response = await client.delete("/cart/items/c1", headers=VISITOR)
        assert [i["card"]["id"] for i in response.json()["items"]] == ["c2"]

        response = await client.delete("/cart", headers=VISITOR)
        assert response.json()["items"] == []
        assert (await client.get("/cart", headers=VISITOR)).json()["items"] == []

    async def test_visibility(self, client: AsyncClient) -> None:
        assert (await client.post("/cart/open", headers=VISITOR)).json()["is_open"] is True
        assert (await client.post("/cart/toggle", headers=VISITOR)).json()["is_open"] is True
        assert (await client.post("/cart/close", headers=VISITOR)).json()["is_open"] is False

    @respx.mock
    async def test_totals(self, client: AsyncClient) -> None:
        mock_card("c1", price="20.00", stock=5)
        for _ in range(2):
            await client.post("/cart/items", json={"card_id": "c1"}, headers=VISITOR)

        data = (await client.get("/cart/totals", headers=VISITOR)).json()

        assert Decimal(data["subtotal"]) == Decimal("40.00")
        assert Decimal(data["tax"]) == Decimal("3.20")
        assert Decimal(data["shipping"]) == Decimal("9.99")
        assert Decimal(data["total"]) == Decimal("53.19")

    @respx.mock
    async def test_totals_are_shown_in_cents(self, client: AsyncClient) -> None:
        mock_card("c1", price="12.34", stock=5)
        await client.post("/cart/items", json={"card_id": "c1"}, headers=VISITOR)

        data = (await client.get("/cart/totals", headers=VISITOR)).json()

        assert data["tax"] == "0.99"
        assert data["total"] == "23.32"


class TestCheckoutEndpoint:
    @respx.mock
    async def test_checkout_success_empties_cart(self, client: AsyncClient) -> None:
        mock_card("c1", price="20.00", stock=2)
        respx.post(f"{ROWS}/customers").mock(
            return_value=httpx.Response(201, json=[{"id": "cust-1"}])
        )
        respx.post(f"{ROWS}/orders").mock(
            return_value=httpx.Response(201, json=[{"id": "o1", "order_number": "LE-7"}])
        )
        respx.post(f"{ROWS}/order_items").mock(return_value=httpx.Response(201, json=[]))
        stock = respx.patch(f"{ROWS}/cards").mock(return_value=httpx.Response(200, json=[]))
        await client.post("/cart/items", json={"card_id": "c1"}, headers=VISITOR)

        response = await client.post("/checkout", json=CHECKOUT_FORM, headers=VISITOR)

        assert response.status_code == 201
        data = response.json()
        assert data["order_number"] == "LE-7"
        assert Decimal(data["totals"]["total"]) == Decimal("31.59")
        assert stock.calls.last.request.url.params["id"] == "eq.c1"
        assert (await client.get("/cart", headers=VISITOR)).json()["items"] == []

    @respx.mock
    async def test_missing_fields(self, client: AsyncClient) -> None:
        mock_card()
        await client.post("/cart/items", json={"card_id": "c1"}, headers=VISITOR)

        response = await client.post(
            "/checkout", json={**CHECKOUT_FORM, "first_name": ""}, headers=VISITOR
        )

        assert response.status_code == 400
        failure = response.json()["failure"]
        assert failure["kind"] == "missing_required"
        assert failure["message"] == "Please fill in all required fields"

    async def test_empty_cart(self, client: AsyncClient) -> None:
        response = await client.post("/checkout", json=CHECKOUT_FORM, headers=VISITOR)

        assert response.status_code == 400
        assert response.json()["failure"]["kind"] == "empty_cart"

    @respx.mock
    async def test_backend_failure_keeps_cart(self, client: AsyncClient) -> None:
        mock_card()
        respx.post(f"{ROWS}/customers").mock(return_value=httpx.Response(500, json={}))
        await client.post("/cart/items", json={"card_id": "c1"}, headers=VISITOR)

        response = await client.post("/checkout", json=CHECKOUT_FORM, headers=VISITOR)

        assert response.status_code == 502
        assert response.json()["failure"]["message"] == (
            "There was an error processing your order. Please try again."
        )
        assert len((await client.get("/cart", headers=VISITOR)).json()["items"]) == 1
