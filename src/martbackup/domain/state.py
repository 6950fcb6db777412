"""In-memory application state."""

import copy
import logging
import time
from typing import Callable, Iterable, Optional

from martbackup.database.base import DocumentStore, check_collection
from martbackup.domain.entities import COLLECTION_NAMES, Record

logger = logging.getLogger(__name__)

RefreshListener = Callable[[int, list[str]], None]


class AppState:
    """Holder of the thirteen in-memory collections.

    Only the importer replaces a collection wholesale (set); other features
    go through upsert and remove. Consumers that cache derived data
    subscribe to refresh notifications instead of polling.
    """

    def __init__(self):
        self._collections: dict[str, list[Record]] = {name: [] for name in COLLECTION_NAMES}
        self._listeners: list[RefreshListener] = []
        self.refresh_token: Optional[int] = None

    def get(self, name: str) -> list[Record]:
        """Return a copy of one collection."""
        check_collection(name)
        return copy.deepcopy(self._collections[name])

    def collections(self) -> dict[str, list[Record]]:
        """Return a copy of all collections."""
        return {name: copy.deepcopy(records) for name, records in self._collections.items()}

    def set(self, name: str, records: Iterable[Record]) -> None:
        """Replace a whole collection."""
        check_collection(name)
        self._collections[name] = copy.deepcopy(list(records))

    def upsert(self, name: str, record: Record) -> None:
        """Insert a record, or replace the one with the same id."""
        check_collection(name)
        record = copy.deepcopy(record)
        records = self._collections[name]
        record_id = record.get("id")
        if record_id is not None:
            for index, existing in enumerate(records):
                if existing.get("id") == record_id:
                    records[index] = record
                    return
        records.append(record)

    def remove(self, name: str, record_id: str) -> bool:
        """Remove the record with the given id. Returns True if one was removed."""
        check_collection(name)
        records = self._collections[name]
        for index, existing in enumerate(records):
            if existing.get("id") == record_id:
                del records[index]
                return True
        return False

    def load_from_store(self, store: DocumentStore) -> None:
        """Populate every collection from the store."""
        for name in COLLECTION_NAMES:
            self._collections[name] = store.list_all(name)
        logger.debug("Loaded %d collections from store", len(COLLECTION_NAMES))

    def subscribe(self, listener: RefreshListener) -> Callable[[], None]:
        """Register a refresh listener. Returns a function that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def notify_data_refreshed(self, names: Iterable[str]) -> int:
        """Issue a new refresh token and tell every listener which collections changed."""
        token = time.monotonic_ns()
        if self.refresh_token is not None and token <= self.refresh_token:
            token = self.refresh_token + 1
        self.refresh_token = token

        changed = list(names)
        for listener in list(self._listeners):
            listener(token, changed)
        return token
