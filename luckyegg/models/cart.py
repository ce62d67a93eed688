import json
from dataclasses import dataclass, field
from decimal import Decimal

from luckyegg.models.card import Card


@dataclass(frozen=True, slots=True)
class CartLineItem:
    """
    One card in a visitor's cart.

    Attributes:
        card: Snapshot of the card taken when it was added. Stock is not
            re-checked against the backend until checkout.
        quantity: Units requested, kept within [1, card.stock_quantity]
    """

    card: Card
    quantity: int

    @property
    def line_total(self) -> Decimal:
        return self.card.price * self.quantity


@dataclass(frozen=True, slots=True)
class CartState:
    """
    Cart contents plus the visibility flag of the cart panel.

    Items keep insertion order and hold at most one line per card id.
    """

    items: tuple[CartLineItem, ...] = field(default_factory=tuple)
    is_open: bool = False

    def find(self, card_id: str) -> CartLineItem | None:
        """Get the line for a card id, if present."""
        for item in self.items:
            if item.card.id == card_id:
                return item
        return None


def serialize_items(items: tuple[CartLineItem, ...] | list[CartLineItem]) -> str:
    """Serialize line items to the JSON array stored under the cart key."""
    return json.dumps(
        [{"card": item.card.model_dump(mode="json"), "quantity": item.quantity} for item in items]
    )


def deserialize_items(payload: str) -> list[CartLineItem]:
    """
    Parse a stored cart payload.

    Raises:
        ValueError: If the payload is not a JSON array of valid line items
            (pydantic.ValidationError is a ValueError subclass)
    """
    raw = json.loads(payload)
    if not isinstance(raw, list):
        raise ValueError(f"Expected a JSON array, got {type(raw).__name__}")

    items: list[CartLineItem] = []
    for entry in raw:
        if not isinstance(entry, dict):
            raise ValueError(f"Invalid cart line: {entry!r}")
        quantity = entry.get("quantity")
        if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity < 1:
            raise ValueError(f"Invalid cart quantity: {quantity!r}")
        items.append(CartLineItem(card=Card.model_validate(entry.get("card")), quantity=quantity))

    return items
