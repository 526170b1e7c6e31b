#!/usr/bin/env python3
"""
Purpose:
    Defines the Item aggregate: one member of a Collection carrying
    MetadataValues validated against the collection's schema.
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Optional

from collectory.core.constants import ITEM_NAME_MAX_LENGTH
from collectory.core.errors import EntityValidationError
from collectory.core.schema.metadata_schema import MetadataSchema
from collectory.core.utils import utc_now
from collectory.core.values.metadata_values import MetadataValue, MetadataValues


@dataclass(frozen=True)
class Item:
    """Immutable; every update returns a new instance with a fresh `updated_at`."""

    id: str
    name: str
    collection_id: str
    owner_id: str
    metadata: MetadataValues
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    @classmethod
    def create(
        cls,
        *,
        name: str,
        collection_id: str,
        owner_id: str,
        metadata: MetadataValues,
    ) -> "Item":
        """
        Raises:
            EntityValidationError: blank/overlong name, or missing ids/metadata.
        """
        _check_name(name)
        if not collection_id:
            raise EntityValidationError("Item collection_id is required")
        if not owner_id or not owner_id.strip():
            raise EntityValidationError("Item owner_id is required")
        if metadata is None:
            raise EntityValidationError("Item metadata is required")
        now = utc_now()
        return cls(
            id=uuid.uuid4().hex,
            name=name,
            collection_id=collection_id,
            owner_id=owner_id,
            metadata=metadata,
            created_at=now,
            updated_at=now,
        )

    # --- Updates --- #

    def update_name(self, name: str) -> "Item":
        _check_name(name)
        return replace(self, name=name, updated_at=utc_now())

    def update_metadata(self, metadata: MetadataValues, schema: MetadataSchema) -> "Item":
        """Replace metadata after re-validating it against `schema`."""
        if metadata is None:
            raise EntityValidationError("Item metadata is required")
        MetadataValues.create(metadata.get_all_values(), schema)
        return replace(self, metadata=metadata, updated_at=utc_now())

    # --- Queries --- #

    def belongs_to_user(self, user_id: str) -> bool:
        return self.owner_id == user_id

    def belongs_to_collection(self, collection_id: str) -> bool:
        return self.collection_id == collection_id

    def get_metadata_value(self, name: str) -> Optional[MetadataValue]:
        return self.metadata.get_value(name)

    def has_metadata_value(self, name: str) -> bool:
        return self.metadata.has_value(name)


def _check_name(name: str) -> None:
    if not name or not name.strip():
        raise EntityValidationError("Item name is required")
    if len(name) > ITEM_NAME_MAX_LENGTH:
        raise EntityValidationError(f"Item name must be {ITEM_NAME_MAX_LENGTH} characters or less")
