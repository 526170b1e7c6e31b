#!/usr/bin/env python3
"""
Purpose:
    Item use cases. Metadata arriving from callers is decoded (ISO date
    strings become dates) and validated against the owning collection's
    current schema before anything is stored.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

from collectory.adapters.memory import InMemoryCollectionRepository, InMemoryItemRepository
from collectory.core.errors import NotFoundError
from collectory.core.schema.metadata_schema import MetadataSchema
from collectory.core.values.codec import decode_values
from collectory.core.values.metadata_values import MetadataValues
from collectory.domain.item import Item
from collectory.services.collections import owned_collection

logger = logging.getLogger(__name__)


class ItemService:
    def __init__(self, collections: InMemoryCollectionRepository, items: InMemoryItemRepository):
        self._collections = collections
        self._items = items

    # --- Queries --- #

    def get_item(self, item_id: str, owner_id: str) -> Item:
        item = self._items.find_by_id(item_id)
        if item is None or not item.belongs_to_user(owner_id):
            raise NotFoundError("Item not found")
        return item

    def list_items(self, collection_id: str, owner_id: str) -> List[Item]:
        collection = owned_collection(self._collections, collection_id, owner_id)
        return self._items.find_by_collection_id(collection.id)

    def revalidate_items(self, collection_id: str, owner_id: str) -> Dict[str, List[str]]:
        """Item id → error messages, for items that fail the collection's current schema."""
        collection = owned_collection(self._collections, collection_id, owner_id)
        schema = collection.metadata_schema
        report: Dict[str, List[str]] = {}
        for item in self._items.find_by_collection_id(collection.id):
            result = MetadataValues.check(item.metadata.get_all_values(), schema)
            if not result.is_valid():
                report[item.id] = result.messages
        if report:
            logger.info("%d item(s) in collection %s fail schema v%d", len(report), collection.id, schema.version)
        return report

    # --- Commands --- #

    def add_item(
        self, collection_id: str, owner_id: str, name: str, metadata: Mapping[str, Any]
    ) -> Item:
        collection = owned_collection(self._collections, collection_id, owner_id)
        schema = collection.metadata_schema
        values = MetadataValues.create(decode_values(metadata, schema), schema)
        item = Item.create(
            name=name, collection_id=collection.id, owner_id=owner_id, metadata=values
        )
        self._items.save(item)
        logger.info("Added item %s to collection %s", item.id, collection.id)
        return item

    def update_item(
        self,
        item_id: str,
        owner_id: str,
        *,
        name: Optional[str] = None,
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> Item:
        """Rename and/or replace the whole metadata set."""
        item = self.get_item(item_id, owner_id)
        updated = item
        if name is not None:
            updated = updated.update_name(name)
        if metadata is not None:
            schema = self._schema_for(item)
            values = MetadataValues.create(decode_values(metadata, schema), schema)
            updated = updated.update_metadata(values, schema)
        self._items.save(updated)
        logger.info("Updated item %s", updated.id)
        return updated

    def set_item_value(self, item_id: str, owner_id: str, field_name: str, value: Any) -> Item:
        item = self.get_item(item_id, owner_id)
        schema = self._schema_for(item)
        decoded = decode_values({field_name: value}, schema)[field_name]
        updated = item.update_metadata(item.metadata.update_value(field_name, decoded, schema), schema)
        self._items.save(updated)
        return updated

    def clear_item_value(self, item_id: str, owner_id: str, field_name: str) -> Item:
        item = self.get_item(item_id, owner_id)
        schema = self._schema_for(item)
        values = item.metadata.remove_value(field_name, schema)
        if values is item.metadata:
            return item
        updated = item.update_metadata(values, schema)
        self._items.save(updated)
        return updated

    def delete_item(self, item_id: str, owner_id: str) -> None:
        item = self.get_item(item_id, owner_id)
        self._items.delete(item.id)
        logger.info("Deleted item %s from collection %s", item.id, item.collection_id)

    # --- Internals --- #

    def _schema_for(self, item: Item) -> MetadataSchema:
        collection = self._collections.find_by_id(item.collection_id)
        if collection is None:
            raise NotFoundError("Collection not found")
        return collection.metadata_schema
