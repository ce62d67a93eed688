from luckyegg.db.database import check_connection, dispose_db, get_session, init_db
from luckyegg.db.operations import (
    delete_cart_snapshot,
    flush_snapshot_storage,
    get_cart_snapshot,
    load_snapshot_storage,
    save_cart_snapshot,
)

__all__ = [
    "check_connection",
    "delete_cart_snapshot",
    "dispose_db",
    "flush_snapshot_storage",
    "get_cart_snapshot",
    "get_session",
    "init_db",
    "load_snapshot_storage",
    "save_cart_snapshot",
]
