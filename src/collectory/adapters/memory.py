#!/usr/bin/env python3
"""
Purpose:
    In-memory repositories for collections and items. Each repository guards
    its store with a lock so concurrent use cases see whole aggregates only.

    Collections support optimistic concurrency on the schema version: a save
    that states the version it started from is refused if another writer
    has moved the schema on in the meantime.
"""
from __future__ import annotations

import logging
import threading
from typing import Dict, List, Optional

from collectory.core.errors import ConcurrencyError
from collectory.core.values.metadata_values import MetadataValue
from collectory.domain.collection import Collection
from collectory.domain.item import Item

logger = logging.getLogger(__name__)


class InMemoryCollectionRepository:
    def __init__(self):
        self._store: Dict[str, Collection] = {}
        self._lock = threading.Lock()

    def save(self, collection: Collection, expected_version: Optional[int] = None) -> None:
        """
        Insert or replace `collection`.

        Raises:
            ConcurrencyError: if `expected_version` is given and the stored
                schema version differs from it.
        """
        with self._lock:
            current = self._store.get(collection.id)
            if expected_version is not None and current is not None:
                if current.schema_version != expected_version:
                    raise ConcurrencyError(expected_version, current.schema_version)
            self._store[collection.id] = collection
        logger.debug("Saved collection %s (schema v%d)", collection.id, collection.schema_version)

    def find_by_id(self, collection_id: str) -> Optional[Collection]:
        with self._lock:
            return self._store.get(collection_id)

    def find_by_owner_id(self, owner_id: str) -> List[Collection]:
        with self._lock:
            found = [c for c in self._store.values() if c.owner_id == owner_id]
        return sorted(found, key=lambda c: c.created_at)

    def find_by_name_and_owner_id(self, name: str, owner_id: str) -> Optional[Collection]:
        """Case-insensitive name match within one owner's collections."""
        wanted = name.strip().lower()
        with self._lock:
            for c in self._store.values():
                if c.owner_id == owner_id and c.name.strip().lower() == wanted:
                    return c
        return None

    def exists(self, collection_id: str) -> bool:
        with self._lock:
            return collection_id in self._store

    def delete(self, collection_id: str) -> None:
        with self._lock:
            self._store.pop(collection_id, None)


class InMemoryItemRepository:
    def __init__(self):
        self._store: Dict[str, Item] = {}
        self._lock = threading.Lock()

    def save(self, item: Item) -> None:
        with self._lock:
            self._store[item.id] = item

    def find_by_id(self, item_id: str) -> Optional[Item]:
        with self._lock:
            return self._store.get(item_id)

    def find_by_collection_id(self, collection_id: str) -> List[Item]:
        with self._lock:
            found = [i for i in self._store.values() if i.collection_id == collection_id]
        return sorted(found, key=lambda i: i.created_at)

    def find_by_owner_id(self, owner_id: str) -> List[Item]:
        with self._lock:
            found = [i for i in self._store.values() if i.owner_id == owner_id]
        return sorted(found, key=lambda i: i.created_at)

    def find_by_metadata_field(
        self, name: str, value: MetadataValue, owner_id: Optional[str] = None
    ) -> List[Item]:
        """Items whose metadata holds exactly `value` for field `name`."""
        with self._lock:
            items = list(self._store.values())
        return [
            i for i in items
            if (owner_id is None or i.owner_id == owner_id)
            and i.metadata.has_value(name)
            and _same_value(i.metadata.get_value(name), value)
        ]

    def count_by_collection_id(self, collection_id: str) -> int:
        with self._lock:
            return sum(1 for i in self._store.values() if i.collection_id == collection_id)

    def exists(self, item_id: str) -> bool:
        with self._lock:
            return item_id in self._store

    def delete(self, item_id: str) -> None:
        with self._lock:
            self._store.pop(item_id, None)

    def delete_by_collection_id(self, collection_id: str) -> int:
        with self._lock:
            doomed = [k for k, i in self._store.items() if i.collection_id == collection_id]
            for k in doomed:
                del self._store[k]
        return len(doomed)


def _same_value(a: object, b: object) -> bool:
    # True == 1 in Python; a boolean never matches a number
    return isinstance(a, bool) == isinstance(b, bool) and a == b
