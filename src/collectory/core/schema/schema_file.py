#!/usr/bin/env python3
"""
Purpose:
    Defines the SchemaFile model: a collection's metadata schema as authored
    on disk (JSON), compiled into a MetadataSchema on load.

    {
      "name": "books",
      "description": "My library",
      "fields": {
        "title": {"type": "text", "required": true, "validation": {"maxLength": 200}},
        "read_on": {"type": "date"}
      }
    }
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Union

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, model_validator

from collectory.core.annotated_types import CollectionKey, OptionalText
from collectory.core.constants import DEFAULT_TEXT_ENCODING, SUPPORTED_SCHEMA_EXT
from collectory.core.schema.metadata_schema import MetadataSchema


class SchemaFile(BaseModel):
    """
    Authored schema document.

    Notes:
    ------
    On construction the `fields` mapping is compiled with `MetadataSchema.create`,
    so an invalid field set surfaces as a pydantic ValidationError here.
    """

    model_config = ConfigDict(extra="forbid")

    name: CollectionKey = Field(..., description="Collection schema name (lowercased, validated).")
    description: OptionalText = Field(default=None, description="Free-form description.")
    fields: Dict[str, Any] = Field(..., description="Field name → definition mapping.")

    _schema: MetadataSchema | None = PrivateAttr(default=None)

    @model_validator(mode="after")
    def _compile(self) -> "SchemaFile":
        self._schema = MetadataSchema.create(self.fields)
        return self

    @property
    def metadata_schema(self) -> MetadataSchema:
        assert self._schema is not None
        return self._schema

    def to_dict(self) -> Dict[str, Any]:
        """Normalized authoring shape (definitions re-emitted from the compiled schema)."""
        data: Dict[str, Any] = {"name": self.name}
        if self.description is not None:
            data["description"] = self.description
        data["fields"] = self.metadata_schema.to_data()["fields"]
        return data

    # --- File IO --- #

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "SchemaFile":
        """
        Load a SchemaFile from a JSON file.

        Raises:
            FileNotFoundError: if the file does not exist
            ValueError: if the file extension is not supported
            ValidationError: if the payload fails model or schema validation
        """
        p = Path(path)
        if not p.exists():
            raise FileNotFoundError(f"The file {str(p)!r} does not exist")
        if p.suffix.lower() not in SUPPORTED_SCHEMA_EXT:
            raise ValueError(
                f"Invalid schema file extension for {p.name!r}; expected one of {sorted(SUPPORTED_SCHEMA_EXT)}"
            )
        data = json.loads(p.read_text(encoding=DEFAULT_TEXT_ENCODING))
        return cls.model_validate(data)
