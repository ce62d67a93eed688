"""
Catalog API endpoints.

Storefront listing of active cards with search, rarity filter, and sort.
Listings are served from the shared catalog view.
"""

from typing import Annotated

from fastapi import APIRouter, Query
from pydantic import BaseModel

from luckyegg.api.deps import BackendDep, CatalogDep
from luckyegg.models.card import Card
from luckyegg.services.catalog import (
    ALL_RARITIES,
    SortKey,
    featured_cards,
    filter_cards,
    get_card,
    sort_cards,
)

router = APIRouter(prefix="/cards", tags=["cards"])


class CardListResponse(BaseModel):
    cards: list[Card]
    count: int


def _listing(cards: list[Card], search: str, rarity: str, sort: SortKey) -> CardListResponse:
    cards = sort_cards(filter_cards(cards, search=search, rarity=rarity), sort)
    return CardListResponse(cards=cards, count=len(cards))


@router.get("", response_model=CardListResponse)
async def list_cards(
    catalog: CatalogDep,
    search: Annotated[str, Query(max_length=200)] = "",
    rarity: str = ALL_RARITIES,
    sort: SortKey = "newest",
) -> CardListResponse:
    """Get active cards, filtered and sorted."""
    return _listing(await catalog.current(), search, rarity, sort)


@router.get("/featured", response_model=CardListResponse)
async def list_featured_cards(
    catalog: CatalogDep,
    search: Annotated[str, Query(max_length=200)] = "",
    rarity: str = ALL_RARITIES,
    sort: SortKey = "newest",
) -> CardListResponse:
    """Get active featured cards for the homepage."""
    return _listing(featured_cards(await catalog.current()), search, rarity, sort)


@router.get("/{card_id}", response_model=Card)
async def get_card_detail(card_id: str, backend: BackendDep) -> Card:
    """Get one active card. Returns 404 for unknown or inactive cards."""
    return await get_card(backend, card_id)
