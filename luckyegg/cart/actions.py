"""
Cart actions and the pure reducer that applies them.

Quantity invariant, enforced on every line-item mutation:
    1 <= quantity <= card.stock_quantity
A mutation that would leave a line at zero removes the line instead.
"""

from dataclasses import dataclass, replace

from luckyegg.models.card import Card
from luckyegg.models.cart import CartLineItem, CartState


@dataclass(frozen=True, slots=True)
class Add:
    card: Card


@dataclass(frozen=True, slots=True)
class Remove:
    card_id: str


@dataclass(frozen=True, slots=True)
class SetQuantity:
    card_id: str
    quantity: int


@dataclass(frozen=True, slots=True)
class Clear:
    pass


@dataclass(frozen=True, slots=True)
class Open:
    pass


@dataclass(frozen=True, slots=True)
class Close:
    pass


@dataclass(frozen=True, slots=True)
class Toggle:
    pass


@dataclass(frozen=True, slots=True)
class Hydrate:
    items: tuple[CartLineItem, ...]


CartAction = Add | Remove | SetQuantity | Clear | Open | Close | Toggle | Hydrate


def _without(items: tuple[CartLineItem, ...], card_id: str) -> tuple[CartLineItem, ...]:
    return tuple(item for item in items if item.card.id != card_id)


def _with_quantity(
    items: tuple[CartLineItem, ...], card_id: str, quantity: int
) -> tuple[CartLineItem, ...]:
    """Replace one line's quantity in place, dropping the line if it hits zero."""
    if quantity <= 0:
        return _without(items, card_id)
    return tuple(
        CartLineItem(card=item.card, quantity=quantity) if item.card.id == card_id else item
        for item in items
    )


def _normalized(items: tuple[CartLineItem, ...]) -> tuple[CartLineItem, ...]:
    """Merge repeated card ids into their first line and clamp each line to its stock."""
    merged: dict[str, CartLineItem] = {}
    for item in items:
        first = merged.get(item.card.id)
        if first is None:
            merged[item.card.id] = item
        else:
            merged[item.card.id] = CartLineItem(
                card=first.card, quantity=first.quantity + item.quantity
            )

    lines: list[CartLineItem] = []
    for item in merged.values():
        quantity = min(item.quantity, item.card.stock_quantity)
        if quantity >= 1:
            lines.append(CartLineItem(card=item.card, quantity=quantity))
    return tuple(lines)


def reduce(state: CartState, action: CartAction) -> CartState:
    """
    Apply one action to a cart state.

    Returns a new state; the input is never mutated.

    Raises:
        TypeError: If the action is not a known cart action
    """
    if isinstance(action, Add):
        card = action.card
        existing = state.find(card.id)
        if existing is not None:
            # The line keeps its original snapshot, so its stock caps the quantity too
            quantity = min(
                existing.quantity + 1, card.stock_quantity, existing.card.stock_quantity
            )
            return replace(state, items=_with_quantity(state.items, card.id, quantity))
        # A zero-stock card clamps to zero and so never enters the cart
        if card.stock_quantity < 1:
            return state
        return replace(state, items=(*state.items, CartLineItem(card=card, quantity=1)))

    if isinstance(action, Remove):
        return replace(state, items=_without(state.items, action.card_id))

    if isinstance(action, SetQuantity):
        existing = state.find(action.card_id)
        if existing is None:
            return state
        quantity = min(action.quantity, existing.card.stock_quantity)
        return replace(state, items=_with_quantity(state.items, action.card_id, quantity))

    if isinstance(action, Clear):
        return replace(state, items=())

    if isinstance(action, Open):
        return replace(state, is_open=True)

    if isinstance(action, Close):
        return replace(state, is_open=False)

    if isinstance(action, Toggle):
        return replace(state, is_open=not state.is_open)

    if isinstance(action, Hydrate):
        return replace(state, items=_normalized(tuple(action.items)))

    raise TypeError(f"Unknown cart action: {action!r}")
