"""
Catalog service.

Storefront reads (active cards, featured cards), the cached catalog view,
in-memory search and sorting of a fetched list, and the admin
create/update/delete operations including image upload.
"""

import logging
import secrets
import time
from collections.abc import Callable
from pathlib import PurePosixPath
from typing import Literal

from luckyegg.backend import BackendClient, TableChange, parse_row, parse_rows
from luckyegg.backend.tables import CARDS
from luckyegg.config import settings
from luckyegg.models.card import Card, CardInput
from luckyegg.models.failure import InvalidInputError, NotFoundError

logger = logging.getLogger(__name__)

SortKey = Literal["newest", "price-low", "price-high", "name"]

ALL_RARITIES = "all"

ALLOWED_IMAGE_TYPES = {
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "webp": "image/webp",
}


# --- Storefront reads ---


async def list_active_cards(client: BackendClient) -> list[Card]:
    """
    Get cards visible on the storefront, newest first.

    Rows that do not fit the Card model are skipped with a warning.
    """
    rows = await client.select(
        CARDS, filters={"is_active": True}, order="created_at", descending=True
    )
    logger.debug("Fetched %d active cards", len(rows))
    return parse_rows(Card, rows, CARDS)


def featured_cards(cards: list[Card]) -> list[Card]:
    return [card for card in cards if card.is_featured]


async def list_all_cards(client: BackendClient) -> list[Card]:
    """Get every card including inactive ones, newest first. Admin view."""
    rows = await client.select(CARDS, order="created_at", descending=True)
    return parse_rows(Card, rows, CARDS)


async def get_card(client: BackendClient, card_id: str, active_only: bool = True) -> Card:
    """
    Get one card by id.

    Raises:
        NotFoundError: If the card does not exist, or is inactive and
            active_only is set
    """
    filters: dict[str, object] = {"id": card_id}
    if active_only:
        filters["is_active"] = True
    row = await client.select_one(CARDS, filters)
    if row is None:
        raise NotFoundError("Card", card_id)
    return parse_row(Card, row, CARDS)


def filter_cards(cards: list[Card], search: str = "", rarity: str = ALL_RARITIES) -> list[Card]:
    """
    Filter a card list by search text and rarity.

    Search is a case-insensitive substring match on name or set name.
    Rarity "all" matches everything.
    """
    term = search.strip().lower()

    def matches(card: Card) -> bool:
        if rarity != ALL_RARITIES and card.rarity.value != rarity:
            return False
        if not term:
            return True
        return term in card.name.lower() or term in (card.set_name or "").lower()

    return [card for card in cards if matches(card)]


def sort_cards(cards: list[Card], sort_by: SortKey = "newest") -> list[Card]:
    """Sort a card list. Unknown keys fall back to newest first."""
    if sort_by == "price-low":
        return sorted(cards, key=lambda c: c.price)
    if sort_by == "price-high":
        return sorted(cards, key=lambda c: c.price, reverse=True)
    if sort_by == "name":
        return sorted(cards, key=lambda c: c.name.lower())
    # Cards without a timestamp sort last
    return sorted(
        cards,
        key=lambda c: c.created_at.timestamp() if c.created_at else float("-inf"),
        reverse=True,
    )


class CatalogView:
    """
    Cached storefront card list.

    A write to the cards table marks the cache stale and the next read
    re-fetches. Entries older than max_age seconds are re-fetched as well,
    which covers writes made by other clients of the backend.

    Usage:
        view = CatalogView(client)
        cards = await view.current()
        ...
        view.close()
    """

    def __init__(self, client: BackendClient, max_age: float | None = None):
        self.client = client
        self.max_age = settings.catalog_cache_seconds if max_age is None else max_age
        self.cards: list[Card] = []
        self.refresh_count = 0
        self._loaded_at: float | None = None
        self._unsubscribe: Callable[[], None] | None = client.changes.subscribe(
            CARDS, self._on_change
        )

    @property
    def stale(self) -> bool:
        if self._loaded_at is None:
            return True
        return time.monotonic() - self._loaded_at >= self.max_age

    async def current(self) -> list[Card]:
        """Get the active cards, re-fetching only if the cache is stale."""
        if self.stale:
            await self.refresh()
        return self.cards

    async def refresh(self) -> list[Card]:
        self.cards = await list_active_cards(self.client)
        self._loaded_at = time.monotonic()
        self.refresh_count += 1
        return self.cards

    def _on_change(self, change: TableChange) -> None:
        logger.info("cards %s, invalidating catalog view", change.event)
        self._loaded_at = None

    def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None


# --- Admin ---


def _card_row(card: CardInput) -> dict[str, object]:
    return card.model_dump(mode="json")


async def create_card(client: BackendClient, card: CardInput) -> Card:
    row = await client.insert_one(CARDS, _card_row(card))
    logger.info("Created card %s (%s)", row.get("id"), card.name)
    return parse_row(Card, row, CARDS)


async def update_card(client: BackendClient, card_id: str, card: CardInput) -> Card:
    """
    Replace a card's editable fields.

    Raises:
        NotFoundError: If no card has this id
    """
    rows = await client.update(CARDS, _card_row(card), filters={"id": card_id})
    if not rows:
        raise NotFoundError("Card", card_id)
    logger.info("Updated card %s", card_id)
    return parse_row(Card, rows[0], CARDS)


async def delete_card(client: BackendClient, card_id: str) -> bool:
    """Delete a card. Returns False if it did not exist."""
    rows = await client.delete(CARDS, filters={"id": card_id})
    if rows:
        logger.info("Deleted card %s", card_id)
    return bool(rows)


async def upload_card_image(client: BackendClient, filename: str, content: bytes) -> str:
    """
    Store a card image and return its public URL.

    The object is saved as cards/<random>.<ext> in the image bucket.

    Raises:
        InvalidInputError: If the file is empty or not a supported image type
    """
    ext = PurePosixPath(filename).suffix.lstrip(".").lower()
    content_type = ALLOWED_IMAGE_TYPES.get(ext)
    if content_type is None:
        raise InvalidInputError(
            f"Unsupported image type: {filename}",
            suggestion=f"Upload one of: {', '.join(sorted(ALLOWED_IMAGE_TYPES))}",
        )
    if not content:
        raise InvalidInputError("Image file is empty")

    path = f"cards/{secrets.token_hex(8)}.{ext}"
    await client.upload(settings.image_bucket, path, content, content_type)
    logger.info("Uploaded card image %s", path)
    return client.public_url(settings.image_bucket, path)
