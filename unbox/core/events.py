from __future__ import annotations

from collections import defaultdict
from typing import Any, Callable, DefaultDict


EventHandler = Callable[[dict[str, Any]], None]

ROLL_STARTED = "roll_started"
ROLL_REVEALED = "roll_revealed"
ROLL_CANCELLED = "roll_cancelled"
COLLECTION_CHANGED = "collection_changed"
CATALOG_LOADED = "catalog_loaded"
CASE_SELECTED = "case_selected"


class EventBus:
    """Synchronous pub/sub used to notify views of session changes."""

    def __init__(self) -> None:
        self._listeners: DefaultDict[str, list[EventHandler]] = defaultdict(list)

    def on(self, event: str, handler: EventHandler) -> None:
        self._listeners[event].append(handler)

    def off(self, event: str, handler: EventHandler) -> None:
        handlers = self._listeners.get(event)
        if handlers and handler in handlers:
            handlers.remove(handler)

    def emit(self, event: str, payload: dict[str, Any] | None = None) -> None:
        if payload is None:
            payload = {}
        # Copy so a handler may unsubscribe itself while we iterate.
        for handler in list(self._listeners.get(event, [])):
            handler(payload)
