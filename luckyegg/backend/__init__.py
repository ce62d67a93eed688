from luckyegg.backend.client import AuthSession, BackendClient, Row
from luckyegg.backend.realtime import ChangeFeed, TableChange
from luckyegg.backend.rows import parse_row, parse_rows

__all__ = [
    "AuthSession",
    "BackendClient",
    "ChangeFeed",
    "Row",
    "TableChange",
    "parse_row",
    "parse_rows",
]
