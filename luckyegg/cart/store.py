"""
Cart store: the authoritative in-memory cart for one visitor.

Wraps the pure reducer with persistence. Every dispatched action
re-serializes the full line-item list to storage, overwriting the
previous value. There is no locking; one store serves one visitor and
actions are applied one at a time.
"""

import logging
from decimal import Decimal

from luckyegg.cart.actions import (
    Add,
    CartAction,
    Clear,
    Close,
    Hydrate,
    Open,
    Remove,
    SetQuantity,
    Toggle,
    reduce,
)
from luckyegg.cart.storage import CartStorage
from luckyegg.config import settings
from luckyegg.models.card import Card
from luckyegg.models.cart import CartLineItem, CartState, deserialize_items, serialize_items

logger = logging.getLogger(__name__)


class CartStore:
    """
    Reducer-style cart with write-through persistence.

    Usage:
        store = CartStore.load(storage)
        store.add(card)
        store.total()
    """

    def __init__(self, storage: CartStorage, key: str | None = None):
        self.storage = storage
        self.key = key or settings.cart_storage_key
        self._state = CartState()

    @classmethod
    def load(cls, storage: CartStorage, key: str | None = None) -> "CartStore":
        """
        Create a store hydrated from storage.

        A missing or corrupt payload yields an empty cart; corruption is
        logged and otherwise ignored.
        """
        store = cls(storage, key)
        payload = storage.get_item(store.key)
        if payload is None:
            return store

        try:
            items = deserialize_items(payload)
        except ValueError as e:
            logger.warning("Discarding corrupt persisted cart under %r: %s", store.key, e)
            return store

        store.dispatch(Hydrate(tuple(items)))
        return store

    @property
    def state(self) -> CartState:
        return self._state

    @property
    def items(self) -> tuple[CartLineItem, ...]:
        return self._state.items

    @property
    def is_open(self) -> bool:
        return self._state.is_open

    def dispatch(self, action: CartAction) -> CartState:
        """Apply an action, persist the line items, and return the new state."""
        self._state = reduce(self._state, action)
        self.storage.set_item(self.key, serialize_items(self._state.items))
        return self._state

    # --- Actions ---

    def add(self, card: Card) -> CartState:
        return self.dispatch(Add(card))

    def remove(self, card_id: str) -> CartState:
        return self.dispatch(Remove(card_id))

    def set_quantity(self, card_id: str, quantity: int) -> CartState:
        return self.dispatch(SetQuantity(card_id, quantity))

    def clear(self) -> CartState:
        return self.dispatch(Clear())

    def open(self) -> CartState:
        return self.dispatch(Open())

    def close(self) -> CartState:
        return self.dispatch(Close())

    def toggle(self) -> CartState:
        return self.dispatch(Toggle())

    def hydrate(self, items: list[CartLineItem] | tuple[CartLineItem, ...]) -> CartState:
        return self.dispatch(Hydrate(tuple(items)))

    # --- Derived queries ---

    def total(self) -> Decimal:
        """Sum of price * quantity over all lines. Not rounded."""
        return sum((item.line_total for item in self._state.items), Decimal("0"))

    def count(self) -> int:
        """Total units across all lines."""
        return sum(item.quantity for item in self._state.items)
