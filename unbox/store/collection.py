from __future__ import annotations

import logging
from concurrent.futures import Future
from typing import Any

from unbox.cases.items import Item
from unbox.config import INVENTORY_PATH
from unbox.core.events import COLLECTION_CHANGED, EventBus
from unbox.errors import RemoteUnavailable
from unbox.remote.documents import DocumentStore
from unbox.remote.sync import SyncQueue

log = logging.getLogger(__name__)


class CollectionStore:
    """The user's won items, mirrored wholesale to the `inventory` document.

    Local state is authoritative for the session. Every mutation schedules a
    full-replace write; failures are logged and never roll anything back.
    """

    def __init__(
        self,
        documents: DocumentStore,
        sync_queue: SyncQueue | None = None,
        events: EventBus | None = None,
        path: str = INVENTORY_PATH,
    ) -> None:
        self.documents = documents
        self.sync_queue = sync_queue or SyncQueue()
        self.events = events or EventBus()
        self.path = path
        self._items: list[Item] = []
        self.revision = 0

    def __len__(self) -> int:
        return len(self._items)

    def list(self) -> list[Item]:
        return list(self._items)

    def push(self, item: Item) -> Future:
        # Items are frozen, so storing the reference is already a snapshot.
        self._items.append(item)
        self._changed("push")
        return self.sync()

    def remove(self, index: int) -> Future | None:
        """Drop the entry at `index`; out-of-range indices are ignored."""
        if not 0 <= index < len(self._items):
            log.debug("remove(%d) ignored; collection has %d items", index, len(self._items))
            return None
        removed = self._items.pop(index)
        log.debug("removed %s at %d", removed.name, index)
        self._changed("remove")
        return self.sync()

    def to_document(self) -> list[dict[str, Any]]:
        return [item.to_dict() for item in self._items]

    def sync(self) -> Future:
        """Queue a full-replace write of the collection. Resolves to success.

        The document is built here, on the caller's thread; the worker only
        sends it.
        """
        document = self.to_document()
        return self.sync_queue.request(lambda: self._write(document))

    def _write(self, document: list[dict[str, Any]]) -> bool:
        try:
            self.documents.put(self.path, document)
        except RemoteUnavailable as exc:
            log.warning("collection sync failed: %s", exc)
            return False
        log.debug("collection synced (%d items)", len(document))
        return True

    def load(self) -> int:
        """Replace local items with the remote document. Never raises."""
        try:
            document = self.documents.get(self.path)
        except RemoteUnavailable as exc:
            log.warning("collection load failed: %s", exc)
            document = None
        items: list[Item] = []
        if isinstance(document, list):
            for raw in document:
                if not isinstance(raw, dict):
                    log.warning("skipping malformed collection entry: %r", raw)
                    continue
                try:
                    items.append(Item.from_dict(raw))
                except ValueError as exc:
                    log.warning("skipping malformed collection entry: %s", exc)
        elif document is not None:
            log.warning("collection document is not a list; starting empty")
        self._items = items
        log.info("loaded %d collection items", len(items))
        self._changed("load")
        return len(items)

    def _changed(self, reason: str) -> None:
        self.revision += 1
        self.events.emit(COLLECTION_CHANGED, {"reason": reason, "count": len(self._items)})
