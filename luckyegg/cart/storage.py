"""
String-keyed storage adapters for persisted carts.

The cart store writes the whole serialized cart under a single key after
every transition and reads it once at startup. Any object with `get_item`
and `set_item` works.
"""

from typing import Protocol


class CartStorage(Protocol):
    """Key-value storage holding string payloads."""

    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...


class MemoryCartStorage:
    """Process-local storage, used in tests and as a buffer."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._data[key] = value


class SnapshotCartStorage:
    """
    Single-key buffer between a cart store and the `cart_snapshots` table.

    The API layer loads the stored payload into the buffer, lets the cart
    store write through it, then flushes `payload` back when `dirty`.
    """

    def __init__(self, key: str, payload: str | None = None):
        self.key = key
        self.payload = payload
        self.dirty = False

    def get_item(self, key: str) -> str | None:
        return self.payload if key == self.key else None

    def set_item(self, key: str, value: str) -> None:
        if key != self.key:
            raise KeyError(f"Snapshot storage holds only {self.key!r}, not {key!r}")
        self.payload = value
        self.dirty = True
