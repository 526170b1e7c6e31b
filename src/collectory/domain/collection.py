#!/usr/bin/env python3
"""
Purpose:
    Defines the Collection aggregate: a user-owned, named container governed
    by one MetadataSchema.
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime

from collectory.core.constants import COLLECTION_DESCRIPTION_MAX_LENGTH, COLLECTION_NAME_MAX_LENGTH
from collectory.core.errors import EntityValidationError
from collectory.core.schema.metadata_schema import MetadataSchema
from collectory.core.utils import utc_now


@dataclass(frozen=True)
class Collection:
    """Immutable; every update returns a new instance with a fresh `updated_at`."""

    id: str
    name: str
    description: str
    owner_id: str
    metadata_schema: MetadataSchema
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    @classmethod
    def create(
        cls,
        *,
        name: str,
        owner_id: str,
        metadata_schema: MetadataSchema,
        description: str = "",
    ) -> "Collection":
        """
        Raises:
            EntityValidationError: blank/overlong name, overlong description,
                blank owner, or missing schema.
        """
        _check_name(name)
        _check_description(description)
        if not owner_id or not owner_id.strip():
            raise EntityValidationError("Collection owner_id is required")
        if metadata_schema is None:
            raise EntityValidationError("Collection metadata_schema is required")
        now = utc_now()
        return cls(
            id=uuid.uuid4().hex,
            name=name,
            description=description,
            owner_id=owner_id,
            metadata_schema=metadata_schema,
            created_at=now,
            updated_at=now,
        )

    # --- Updates --- #

    def update_name(self, name: str) -> "Collection":
        _check_name(name)
        return replace(self, name=name, updated_at=utc_now())

    def update_description(self, description: str) -> "Collection":
        _check_description(description)
        return replace(self, description=description, updated_at=utc_now())

    def update_metadata_schema(self, schema: MetadataSchema) -> "Collection":
        if schema is None:
            raise EntityValidationError("Collection metadata_schema is required")
        return replace(self, metadata_schema=schema, updated_at=utc_now())

    # --- Queries --- #

    @property
    def schema_version(self) -> int:
        return self.metadata_schema.version

    def belongs_to_user(self, user_id: str) -> bool:
        return self.owner_id == user_id


def _check_name(name: str) -> None:
    if not name or not name.strip():
        raise EntityValidationError("Collection name is required")
    if len(name) > COLLECTION_NAME_MAX_LENGTH:
        raise EntityValidationError(
            f"Collection name must be {COLLECTION_NAME_MAX_LENGTH} characters or less"
        )


def _check_description(description: str) -> None:
    if len(description or "") > COLLECTION_DESCRIPTION_MAX_LENGTH:
        raise EntityValidationError(
            f"Collection description must be {COLLECTION_DESCRIPTION_MAX_LENGTH} characters or less"
        )
