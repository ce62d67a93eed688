"""Tests for storefront catalog, account, and newsletter endpoints."""

import httpx
import respx
from httpx import AsyncClient

from tests.factories import BACKEND_URL, card_row

ROWS = f"{BACKEND_URL}/rest/v1"
AUTH = f"{BACKEND_URL}/auth/v1"


class TestCardEndpoints:
    @respx.mock
    async def test_list_filter_and_sort(self, client: AsyncClient) -> None:
        respx.get(f"{ROWS}/cards").mock(
            return_value=httpx.Response(
                200,
                json=[
                    card_row("c1", price="12.00", name="Charizard", rarity="Rare"),
                    card_row("c2", price="3.00", name="Charmander", rarity="Common"),
                    card_row("c3", price="8.00", name="Squirtle", rarity="Common"),
                ],
            )
        )

        response = await client.get("/cards", params={"search": "char", "sort": "price-low"})

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 2
        assert [c["id"] for c in data["cards"]] == ["c2", "c1"]

    @respx.mock
    async def test_featured(self, client: AsyncClient) -> None:
        respx.get(f"{ROWS}/cards").mock(
            return_value=httpx.Response(
                200, json=[card_row("c1", is_featured=True), card_row("c2")]
            )
        )

        response = await client.get("/cards/featured")

        assert [c["id"] for c in response.json()["cards"]] == ["c1"]

    @respx.mock
    async def test_listing_skips_rows_that_do_not_validate(self, client: AsyncClient) -> None:
        respx.get(f"{ROWS}/cards").mock(
            return_value=httpx.Response(
                200,
                json=[card_row("c1"), card_row("c2", rarity="Mythic"), card_row("c3", price=-1)],
            )
        )

        response = await client.get("/cards")

        assert response.status_code == 200
        assert [c["id"] for c in response.json()["cards"]] == ["c1"]

    @respx.mock
    async def test_detail_of_invalid_row_is_backend_error(self, client: AsyncClient) -> None:
        respx.get(f"{ROWS}/cards").mock(
            return_value=httpx.Response(200, json=[card_row("c2", rarity="Mythic")])
        )

        response = await client.get("/cards/c2")

        assert response.status_code == 502
        assert response.json()["failure"]["kind"] == "external_api_error"

    async def test_unknown_sort_rejected(self, client: AsyncClient) -> None:
        response = await client.get("/cards", params={"sort": "random"})

        assert response.status_code == 422

    @respx.mock
    async def test_card_detail(self, client: AsyncClient) -> None:
        respx.get(f"{ROWS}/cards").mock(
            return_value=httpx.Response(200, json=[card_row("c1", price="12.50")])
        )

        response = await client.get("/cards/c1")

        assert response.status_code == 200
        assert response.json()["id"] == "c1"

    @respx.mock
    async def test_backend_down(self, client: AsyncClient) -> None:
        respx.get(f"{ROWS}/cards").mock(side_effect=httpx.ConnectError("refused"))

        response = await client.get("/cards")

        assert response.status_code == 502
        assert response.json()["failure"]["kind"] == "external_api_error"


class TestAuthEndpoints:
    @respx.mock
    async def test_signup(self, client: AsyncClient) -> None:
        respx.post(f"{AUTH}/signup").mock(
            return_value=httpx.Response(
                200, json={"access_token": "tok", "user": {"id": "u1", "email": "a@b.co"}}
            )
        )
        respx.head(f"{ROWS}/profiles").mock(
            return_value=httpx.Response(200, headers={"Content-Range": "0-4/5"})
        )

        response = await client.post(
            "/auth/signup",
            json={"email": "a@b.co", "password": "secret1", "confirm_password": "secret1"},
        )

        assert response.status_code == 201
        assert response.json()["access_token"] == "tok"

    async def test_signup_password_mismatch(self, client: AsyncClient) -> None:
        response = await client.post(
            "/auth/signup",
            json={"email": "a@b.co", "password": "secret1", "confirm_password": "secret2"},
        )

        assert response.status_code == 400
        assert response.json()["failure"]["message"] == "Passwords do not match"

    @respx.mock
    async def test_login_failure(self, client: AsyncClient) -> None:
        respx.post(f"{AUTH}/token").mock(return_value=httpx.Response(400, json={}))

        response = await client.post("/auth/login", json={"email": "a@b.co", "password": "x"})

        assert response.status_code == 401
        assert response.json()["failure"]["kind"] == "unauthenticated"

    async def test_me_requires_token(self, client: AsyncClient) -> None:
        response = await client.get("/auth/me")

        assert response.status_code == 401

    @respx.mock
    async def test_me(self, client: AsyncClient) -> None:
        respx.get(f"{AUTH}/user").mock(
            return_value=httpx.Response(200, json={"id": "u1", "email": "a@b.co"})
        )
        respx.get(f"{ROWS}/profiles").mock(
            return_value=httpx.Response(
                200, json=[{"id": "u1", "email": "a@b.co", "role": "customer"}]
            )
        )

        response = await client.get("/auth/me", headers={"Authorization": "Bearer tok"})

        assert response.status_code == 200
        assert response.json()["role"] == "customer"

    @respx.mock
    async def test_logout(self, client: AsyncClient) -> None:
        respx.post(f"{AUTH}/logout").mock(return_value=httpx.Response(204))

        response = await client.post("/auth/logout", headers={"Authorization": "Bearer tok"})

        assert response.status_code == 204


class TestNewsletterEndpoint:
    @respx.mock
    async def test_subscribe(self, client: AsyncClient) -> None:
        respx.post(f"{ROWS}/email_subscribers").mock(return_value=httpx.Response(201, json=[]))

        response = await client.post("/newsletter", json={"email": "misty@example.com"})

        assert response.status_code == 200
        assert response.json()["message"] == (
            "Successfully subscribed! Welcome to the Lucky Egg family!"
        )

    @respx.mock
    async def test_already_subscribed(self, client: AsyncClient) -> None:
        respx.post(f"{ROWS}/email_subscribers").mock(
            return_value=httpx.Response(409, json={"code": "23505"})
        )

        response = await client.post("/newsletter", json={"email": "misty@example.com"})

        data = response.json()
        assert data["already_subscribed"] is True
        assert data["message"] == "You're already subscribed!"
