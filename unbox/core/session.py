from __future__ import annotations

import logging
import random
from concurrent.futures import Future
from typing import Callable

from unbox.cases.items import Case, Item
from unbox.cases.reveal import RevealEngine, RollPlan
from unbox.config import SEED
from unbox.core.events import CASE_SELECTED, CATALOG_LOADED, EventBus
from unbox.core.scheduler import Scheduler
from unbox.errors import CredentialStorageError, MalformedCredential
from unbox.remote.credentials import CredentialStore, ServiceAccount
from unbox.remote.documents import DocumentStore, open_document_store
from unbox.remote.sync import SyncQueue
from unbox.store.catalog import Catalog, CatalogStore
from unbox.store.collection import CollectionStore

log = logging.getLogger(__name__)

StoreFactory = Callable[[CredentialStore], DocumentStore]


class Session:
    """Owns all mutable state of one running client.

    Views read from here and call its operations; nothing else holds the
    catalog, the collection or the engine.
    """

    def __init__(
        self,
        credentials: CredentialStore,
        *,
        rng: random.Random | None = None,
        scheduler: Scheduler | None = None,
        events: EventBus | None = None,
        sync_queue: SyncQueue | None = None,
        store_factory: StoreFactory = open_document_store,
    ) -> None:
        self.credentials = credentials
        self.rng = rng or random.Random(SEED)
        self.scheduler = scheduler or Scheduler()
        self.events = events or EventBus()
        self.sync_queue = sync_queue or SyncQueue()
        self.store_factory = store_factory
        self.engine = RevealEngine(self.scheduler, self.rng, self.events)
        self.engine.on_reveal(self._on_reveal)
        self.current_case_id: str | None = None
        self.last_sync: Future | None = None
        self._bind_stores()

    def _bind_stores(self) -> None:
        documents = self.store_factory(self.credentials)
        self.catalog_store = CatalogStore(documents)
        self.collection = CollectionStore(documents, self.sync_queue, self.events)

    @property
    def catalog(self) -> Catalog:
        return self.catalog_store.catalog

    @property
    def rolling(self) -> bool:
        return self.engine.rolling

    def start(self) -> None:
        """Load the catalog, then the collection, then pick the first case."""
        catalog = self.catalog_store.load()
        self.events.emit(CATALOG_LOADED, {"count": len(catalog.order)})
        self.collection.load()
        self.current_case_id = None
        first = catalog.first_id()
        if first is not None:
            self.select_case(first)

    def account(self) -> ServiceAccount | None:
        return self.credentials.credentials()

    def login(self, token: str) -> bool:
        """Store new credentials and reload from the matching project."""
        if self.rolling:
            return False
        try:
            self.credentials.login(token)
        except (MalformedCredential, CredentialStorageError) as exc:
            log.warning("login rejected: %s", exc)
            return False
        self.reload()
        return True

    def logout(self) -> None:
        if self.rolling:
            return
        self.credentials.logout()
        self.reload()

    def reload(self) -> None:
        if self.rolling:
            return
        self.sync_queue.flush()
        self._bind_stores()
        self.start()

    def current_case(self) -> Case | None:
        if self.current_case_id is None:
            return None
        return self.catalog.get(self.current_case_id)

    def current_pool(self) -> list[Item]:
        case = self.current_case()
        return list(case.items) if case else []

    def select_case(self, case_id: str) -> bool:
        if self.rolling:
            return False
        if self.catalog.get(case_id) is None:
            log.warning("unknown case %s", case_id)
            return False
        self.current_case_id = case_id
        self.events.emit(CASE_SELECTED, {"case_id": case_id})
        return True

    def open_case(self, viewport_width: float | None = None) -> RollPlan | None:
        """Start a roll on the selected case. None if nothing was started."""
        if self.rolling:
            return None
        pool = self.current_pool()
        if not pool:
            return None
        return self.engine.start_roll(pool, viewport_width)

    def delete_item(self, index: int) -> None:
        future = self.collection.remove(index)
        if future is not None:
            self.last_sync = future

    def update(self, dt_ms: float) -> None:
        self.scheduler.advance(dt_ms)

    def shutdown(self) -> None:
        self.sync_queue.shutdown()

    def _on_reveal(self, item: Item) -> None:
        self.last_sync = self.collection.push(item)
