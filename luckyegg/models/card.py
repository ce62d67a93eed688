"""
Catalog records.

Rows arrive from the hosted backend as untyped JSON. These models are the
ingress boundary: prices become Decimal, enums are checked, and unknown
columns are ignored.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Rarity(str, Enum):
    COMMON = "Common"
    UNCOMMON = "Uncommon"
    RARE = "Rare"
    LEGENDARY = "Legendary"


class Condition(str, Enum):
    """Card grading condition, stored by its short code."""

    MINT = "M"
    NEAR_MINT = "NM"
    LIGHTLY_PLAYED = "LP"
    MODERATELY_PLAYED = "MP"
    HEAVILY_PLAYED = "HP"
    DAMAGED = "D"


class CardFields(BaseModel):
    """Editable listing fields shared by stored cards and admin input."""

    model_config = ConfigDict(extra="ignore")

    name: str = Field(..., min_length=1)
    price: Decimal = Field(..., ge=0)
    # Informational "was" price; not required to exceed price
    original_price: Decimal | None = Field(default=None, ge=0)
    image_url: str = ""
    rarity: Rarity = Rarity.COMMON
    condition: Condition = Condition.NEAR_MINT
    stock_quantity: int = Field(default=0, ge=0)
    video_episode: str | None = None
    pull_date: date | None = None
    description: str | None = None
    set_name: str | None = None
    card_number: str | None = None
    is_featured: bool = False
    is_active: bool = True


class CardInput(CardFields):
    """Admin create/update payload."""


class Card(CardFields):
    """
    One sellable card listing.

    Attributes:
        id: Opaque identifier assigned by the backend
        stock_quantity: Units available; never negative
        is_active: Hidden from the storefront when False
        is_featured: Selected for homepage promotion
    """

    id: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def in_stock(self) -> bool:
        return self.stock_quantity > 0
