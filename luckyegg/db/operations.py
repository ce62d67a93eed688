"""
Cart snapshot persistence.

Loads and saves the serialized cart payload for a storage key. The API
layer pairs these with SnapshotCartStorage so the cart store itself stays
synchronous and database-agnostic.
"""

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from luckyegg.cart.storage import SnapshotCartStorage
from luckyegg.models.db import CartSnapshotDB

EMPTY_PAYLOAD = "[]"


async def get_cart_snapshot(session: AsyncSession, key: str) -> CartSnapshotDB | None:
    """Get the stored snapshot for a key, or None."""
    result = await session.execute(select(CartSnapshotDB).where(CartSnapshotDB.key == key))
    return result.scalar_one_or_none()


async def save_cart_snapshot(session: AsyncSession, key: str, payload: str) -> CartSnapshotDB:
    """Insert or overwrite the payload stored under a key."""
    snapshot = await get_cart_snapshot(session, key)
    if snapshot:
        snapshot.payload = payload
    else:
        snapshot = CartSnapshotDB(key=key, payload=payload)
        session.add(snapshot)
    await session.flush()
    return snapshot


async def delete_cart_snapshot(session: AsyncSession, key: str) -> bool:
    """
    Delete a stored snapshot.

    Returns True if deleted, False if not found.
    """
    result = await session.execute(delete(CartSnapshotDB).where(CartSnapshotDB.key == key))
    # rowcount is available on DELETE results; type stubs incomplete for async
    return bool(result.rowcount)  # type: ignore[attr-defined]


async def load_snapshot_storage(session: AsyncSession, key: str) -> SnapshotCartStorage:
    """Read a key into a single-key storage buffer."""
    snapshot = await get_cart_snapshot(session, key)
    return SnapshotCartStorage(key, snapshot.payload if snapshot else None)


async def flush_snapshot_storage(session: AsyncSession, storage: SnapshotCartStorage) -> bool:
    """
    Write a buffer back if the cart store changed it.

    An emptied cart deletes its row instead of storing "[]".
    Returns True if a write happened.
    """
    if not storage.dirty or storage.payload is None:
        return False
    if storage.payload == EMPTY_PAYLOAD:
        await delete_cart_snapshot(session, storage.key)
    else:
        await save_cart_snapshot(session, storage.key, storage.payload)
    storage.dirty = False
    return True
