"""
Table change notifications.

Listeners register a callback per table name; the backend client publishes
after every successful write to that table. Callbacks are refresh
triggers (typically "re-fetch the list"), not data carriers.
"""

import inspect
import logging
from collections import defaultdict
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Literal

logger = logging.getLogger(__name__)

ChangeEvent = Literal["INSERT", "UPDATE", "DELETE"]


@dataclass(frozen=True, slots=True)
class TableChange:
    table: str
    event: ChangeEvent


ChangeCallback = Callable[[TableChange], Awaitable[None] | None]


class ChangeFeed:
    """Registry of per-table change callbacks."""

    def __init__(self) -> None:
        self._listeners: dict[str, list[ChangeCallback]] = defaultdict(list)

    def subscribe(self, table: str, callback: ChangeCallback) -> Callable[[], None]:
        """
        Register a callback for changes to a table.

        Returns:
            A function that removes the subscription. Calling it twice is harmless.
        """
        self._listeners[table].append(callback)

        def unsubscribe() -> None:
            listeners = self._listeners.get(table, [])
            if callback in listeners:
                listeners.remove(callback)

        return unsubscribe

    def listener_count(self, table: str) -> int:
        return len(self._listeners.get(table, []))

    async def publish(self, table: str, event: ChangeEvent) -> None:
        """
        Notify every listener of a table.

        A failing listener is logged and does not stop the others or the
        write that triggered it.
        """
        change = TableChange(table=table, event=event)
        for callback in list(self._listeners.get(table, [])):
            try:
                result = callback(change)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.error("Change listener for %s failed on %s: %s", table, event, e)
