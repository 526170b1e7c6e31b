#!/usr/bin/env python3
"""
Purpose:
    Collection use cases: creation, lookup, renaming and schema evolution.

    Schema changes are checked against the items already stored in the
    collection. A change is refused when any existing item would stop being
    valid; fields that disappear from the schema are stripped from items.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional

from collectory.adapters.memory import InMemoryCollectionRepository, InMemoryItemRepository
from collectory.core.errors import ConflictError, NotFoundError, SchemaEvolutionError
from collectory.core.schema.metadata_schema import DefinitionInput, MetadataSchema
from collectory.core.values.metadata_values import MetadataValues
from collectory.domain.collection import Collection

logger = logging.getLogger(__name__)


class CollectionService:
    def __init__(self, collections: InMemoryCollectionRepository, items: InMemoryItemRepository):
        self._collections = collections
        self._items = items

    # --- Queries --- #

    def get_collection(self, collection_id: str, owner_id: str) -> Collection:
        return owned_collection(self._collections, collection_id, owner_id)

    def list_collections(self, owner_id: str) -> List[Collection]:
        return self._collections.find_by_owner_id(owner_id)

    # --- Commands --- #

    def create_collection(
        self,
        owner_id: str,
        name: str,
        fields: Mapping[str, DefinitionInput],
        description: str = "",
    ) -> Collection:
        """
        Raises:
            ConflictError: the owner already has a collection with this name.
            SchemaValidationError, EntityValidationError: invalid input.
        """
        if self._collections.find_by_name_and_owner_id(name, owner_id) is not None:
            raise ConflictError(f'Collection with name "{name}" already exists')
        schema = MetadataSchema.create(fields)
        collection = Collection.create(
            name=name, description=description, owner_id=owner_id, metadata_schema=schema
        )
        self._collections.save(collection)
        logger.info("Created collection %s (%r) with %d field(s)", collection.id, name, len(schema))
        return collection

    def update_collection(
        self,
        collection_id: str,
        owner_id: str,
        *,
        name: Optional[str] = None,
        description: Optional[str] = None,
        fields: Optional[Mapping[str, DefinitionInput]] = None,
    ) -> Collection:
        """
        Update any of name, description and the full field set.

        Raises:
            NotFoundError, ConflictError, SchemaEvolutionError
        """
        collection = owned_collection(self._collections, collection_id, owner_id)
        started_at = collection.schema_version
        updated = collection

        if name is not None and name != collection.name:
            other = self._collections.find_by_name_and_owner_id(name, owner_id)
            if other is not None and other.id != collection.id:
                raise ConflictError(f'Collection with name "{name}" already exists')
            updated = updated.update_name(name)

        if description is not None:
            updated = updated.update_description(description)

        if fields is not None:
            new_schema = collection.metadata_schema.redefine(fields)
            self._check_evolution(collection, new_schema)
            updated = updated.update_metadata_schema(new_schema)

        self._collections.save(updated, expected_version=started_at)
        if fields is not None:
            self._strip_removed_fields(updated)
        logger.info("Updated collection %s (schema v%d)", updated.id, updated.schema_version)
        return updated

    def add_schema_field(
        self, collection_id: str, owner_id: str, name: str, definition: DefinitionInput
    ) -> Collection:
        """
        Raises:
            SchemaEvolutionError: adding a required field while items exist.
        """
        collection = owned_collection(self._collections, collection_id, owner_id)
        new_schema = collection.metadata_schema.add_field(name, definition)
        if new_schema.is_field_required(name) and self._items.count_by_collection_id(collection.id):
            raise SchemaEvolutionError(
                f"Cannot add required fields to schema when items exist: {name}", name
            )
        updated = collection.update_metadata_schema(new_schema)
        self._collections.save(updated, expected_version=collection.schema_version)
        logger.info("Added field %r to collection %s (schema v%d)", name, updated.id, updated.schema_version)
        return updated

    def remove_schema_field(self, collection_id: str, owner_id: str, name: str) -> Collection:
        """Drop a field from the schema and its value from every item."""
        collection = owned_collection(self._collections, collection_id, owner_id)
        updated = collection.update_metadata_schema(collection.metadata_schema.remove_field(name))
        self._collections.save(updated, expected_version=collection.schema_version)
        stripped = self._strip_removed_fields(updated)
        logger.info(
            "Removed field %r from collection %s (schema v%d, %d item(s) updated)",
            name, updated.id, updated.schema_version, stripped,
        )
        return updated

    def delete_collection(self, collection_id: str, owner_id: str) -> int:
        """Delete the collection and its items; returns the number of items removed."""
        collection = owned_collection(self._collections, collection_id, owner_id)
        removed = self._items.delete_by_collection_id(collection.id)
        self._collections.delete(collection.id)
        logger.info("Deleted collection %s and %d item(s)", collection.id, removed)
        return removed

    # --- Internals --- #

    def _check_evolution(self, collection: Collection, new_schema: MetadataSchema) -> None:
        items = self._items.find_by_collection_id(collection.id)
        if not items:
            return

        added_required = [
            n for n in new_schema.get_required_fields()
            if not collection.metadata_schema.has_field(n)
        ]
        if added_required:
            raise SchemaEvolutionError(
                f"Cannot add required fields to schema when items exist: {', '.join(added_required)}"
            )

        failures: Dict[str, List[str]] = {}
        for item in items:
            kept = item.metadata.without_unknown(new_schema).get_all_values()
            result = MetadataValues.check(kept, new_schema)
            if not result.is_valid():
                failures[item.id] = result.messages
        if failures:
            first_id, first_errors = next(iter(failures.items()))
            raise SchemaEvolutionError(
                f"Schema change would invalidate {len(failures)} existing item(s); "
                f"item {first_id}: {first_errors[0]}"
            )

    def _strip_removed_fields(self, collection: Collection) -> int:
        schema = collection.metadata_schema
        count = 0
        for item in self._items.find_by_collection_id(collection.id):
            kept = item.metadata.without_unknown(schema)
            if kept is item.metadata:
                continue
            self._items.save(item.update_metadata(kept, schema))
            count += 1
        return count


def owned_collection(
    collections: InMemoryCollectionRepository, collection_id: str, owner_id: str
) -> Collection:
    """Fetch a collection for its owner; someone else's collection is reported as missing."""
    collection = collections.find_by_id(collection_id)
    if collection is None or not collection.belongs_to_user(owner_id):
        raise NotFoundError("Collection not found")
    return collection

