"""
Admin endpoints.

Catalog, order, and subscriber management. Every route requires a bearer
token for an account with the admin role; calls to the backend are made
as that admin.
"""

from typing import Annotated

from fastapi import APIRouter, File, Query, UploadFile, status
from pydantic import BaseModel, Field

from luckyegg.api.deps import AdminBackendDep
from luckyegg.models.card import Card, CardInput
from luckyegg.models.failure import NotFoundError
from luckyegg.models.order import (
    EmailSubscriber,
    Order,
    OrderItem,
    OrderStatus,
    PaymentStatus,
    UserProfile,
)
from luckyegg.services import catalog, newsletter, orders
from luckyegg.services.auth import promote_to_admin

router = APIRouter(prefix="/admin", tags=["admin"])


class AdminCardListResponse(BaseModel):
    cards: list[Card]
    count: int


class ImageUploadResponse(BaseModel):
    image_url: str


class OrderDetailResponse(BaseModel):
    order: Order
    items: list[OrderItem] = Field(default_factory=list)


class OrderStatusUpdate(BaseModel):
    status: OrderStatus | None = None
    payment_status: PaymentStatus | None = None


class PromoteRequest(BaseModel):
    email: str


# --- Cards ---


@router.get("/cards", response_model=AdminCardListResponse)
async def list_cards(backend: AdminBackendDep) -> AdminCardListResponse:
    """Get all cards, including inactive ones."""
    cards = await catalog.list_all_cards(backend)
    return AdminCardListResponse(cards=cards, count=len(cards))


@router.post("/cards", response_model=Card, status_code=status.HTTP_201_CREATED)
async def create_card(card: CardInput, backend: AdminBackendDep) -> Card:
    return await catalog.create_card(backend, card)


@router.put("/cards/{card_id}", response_model=Card)
async def update_card(card_id: str, card: CardInput, backend: AdminBackendDep) -> Card:
    return await catalog.update_card(backend, card_id, card)


@router.delete("/cards/{card_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_card(card_id: str, backend: AdminBackendDep) -> None:
    if not await catalog.delete_card(backend, card_id):
        raise NotFoundError("Card", card_id)


@router.post("/cards/image", response_model=ImageUploadResponse)
async def upload_card_image(
    file: Annotated[UploadFile, File()], backend: AdminBackendDep
) -> ImageUploadResponse:
    content = await file.read()
    url = await catalog.upload_card_image(backend, file.filename or "", content)
    return ImageUploadResponse(image_url=url)


# --- Orders ---


@router.get("/orders", response_model=list[Order])
async def list_orders(
    backend: AdminBackendDep,
    order_status: Annotated[OrderStatus | None, Query(alias="status")] = None,
    limit: Annotated[int, Query(ge=1, le=500)] = 100,
) -> list[Order]:
    return await orders.list_orders(backend, status=order_status, limit=limit)


@router.get("/orders/{order_id}", response_model=OrderDetailResponse)
async def get_order(order_id: str, backend: AdminBackendDep) -> OrderDetailResponse:
    order, items = await orders.get_order(backend, order_id)
    return OrderDetailResponse(order=order, items=items)


@router.patch("/orders/{order_id}", response_model=Order)
async def update_order(
    order_id: str, update: OrderStatusUpdate, backend: AdminBackendDep
) -> Order:
    return await orders.update_order_status(
        backend, order_id, status=update.status, payment_status=update.payment_status
    )


# --- Subscribers and accounts ---


@router.get("/subscribers", response_model=list[EmailSubscriber])
async def list_subscribers(backend: AdminBackendDep) -> list[EmailSubscriber]:
    return await newsletter.list_subscribers(backend)


@router.post("/promote", response_model=UserProfile)
async def promote(request: PromoteRequest, backend: AdminBackendDep) -> UserProfile:
    """Give an existing account the admin role."""
    return await promote_to_admin(backend, request.email)
