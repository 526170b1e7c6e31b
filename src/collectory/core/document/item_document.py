#!/usr/bin/env python3
"""
Purpose:
    Represents an item authored as a YAML document. Validates its metadata
    against the collection schema named by its `collection` key.

        collection: books
        name: Dune
        metadata:
          title: Dune
          pages: 412
          read_on: 2024-05-01
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from collectory.core.constants import DEFAULT_TEXT_ENCODING, SUPPORTED_ITEM_EXT
from collectory.core.annotated_types import CollectionKey, ItemName
from collectory.core.errors import MetadataError
from collectory.core.schema.metadata_schema import MetadataSchema
from collectory.core.schema.registry import SchemaRegistry
from collectory.core.values.codec import decode_values
from collectory.core.values.metadata_values import MetadataValues


class ItemDocument(BaseModel):
    """
    A concrete item file.

    Typical use:
        >>> doc = ItemDocument.from_file("dune.yaml")
        >>> errors = doc.validate(registry=my_registry)   # resolve by `collection`
        >>> if not errors:
        ...     pass  # ready to import
    """

    model_config = ConfigDict(extra="forbid")

    collection: CollectionKey = Field(..., description="Name of the collection schema.")
    name: ItemName = Field(..., description="Item name.")
    metadata: Dict[str, Any] = Field(default_factory=dict, description="Metadata to validate.")

    # Keep last validation result (not serialized)
    _last_errors: List[str] = PrivateAttr(default_factory=list)

    # --- IO --- #

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "ItemDocument":
        """
        Load an item from a YAML file (.yml/.yaml).

        Raises:
            FileNotFoundError: if the file does not exist
            ValueError: if the extension is not .yml/.yaml
            ValidationError: if the loaded payload fails model validation
        """
        p = Path(path)
        if not p.exists():
            raise FileNotFoundError(f"The file {str(p)!r} does not exist")
        if p.suffix.lower() not in SUPPORTED_ITEM_EXT:
            raise ValueError(f"Invalid item file extension for {p.name!r}; expected a .yml/.yaml file")
        data = yaml.safe_load(p.read_text(encoding=DEFAULT_TEXT_ENCODING)) or {}
        return cls.model_validate(data)

    # --- Validation --- #

    def validate(  # type: ignore[override]
        self,
        schema: Optional[MetadataSchema] = None,
        registry: Optional[SchemaRegistry] = None,
    ) -> List[str]:
        """
        Validate this item's metadata, collecting every failure.

        Resolution:
        - If `schema` is provided, validate against it.
        - Else if `registry` is provided, resolve using `collection`.
        - Else, return an error prompting for a schema or registry.

        Returns:
            List of human-readable error messages (empty list = valid).
        """
        resolved, errors = self._resolve_schema(schema, registry)
        if resolved is not None:
            errors = self._validate_metadata(resolved)
        self._last_errors = errors
        return errors

    def to_values(self, schema: MetadataSchema) -> MetadataValues:
        """Decode and validate strictly; raises the first MetadataError."""
        return MetadataValues.create(decode_values(self.metadata, schema), schema)

    def _resolve_schema(
        self, schema: Optional[MetadataSchema], registry: Optional[SchemaRegistry]
    ) -> tuple[Optional[MetadataSchema], list[str]]:
        """Centralized schema resolution. Returns (schema, errors)."""
        if schema is not None:
            return schema, []
        if registry is None:
            return None, ["No schema provided and no registry available for resolution"]
        try:
            return registry.require(self.collection).metadata_schema, []
        except LookupError as e:
            return None, [f"Schema resolution failed: {e}"]

    def _validate_metadata(self, schema: MetadataSchema) -> list[str]:
        try:
            decoded = decode_values(self.metadata, schema)
        except MetadataError as e:
            return [str(e)]
        return MetadataValues.check(decoded, schema).messages

    # --- Convenience --- #

    @property
    def is_valid(self) -> bool:
        """True if the last `validate()` call produced no errors."""
        return len(self._last_errors) == 0
