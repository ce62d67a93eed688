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
from luckyegg.cart.storage import (
    CartStorage,
    MemoryCartStorage,
    SnapshotCartStorage,
)
from luckyegg.cart.store import CartStore

__all__ = [
    "Add",
    "CartAction",
    "CartStorage",
    "CartStore",
    "Clear",
    "Close",
    "Hydrate",
    "MemoryCartStorage",
    "Open",
    "Remove",
    "SetQuantity",
    "SnapshotCartStorage",
    "Toggle",
    "reduce",
]
