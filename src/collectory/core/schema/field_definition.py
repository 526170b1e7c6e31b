#!/usr/bin/env python3
"""
Purpose:
    Implements the FieldDefinition model: one named, typed slot in a metadata
    schema. It is a transparent data carrier; name and type validity are
    enforced by the owning `MetadataSchema` when the definition is admitted.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from collectory.core.schema.field_type import FieldType
from collectory.core.schema.validation_rules import ValidationRules


class FieldDefinition(BaseModel):
    """
    One field in a collection's metadata schema.

    Authoring shape (as stored in schema files and passed to `MetadataSchema.create`,
    where the name is the mapping key):

        {"type": "number", "required": false,
         "validation": {"minValue": 0, "maxValue": 1000},
         "description": "Price paid"}
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(..., description="Name of the field (identifier-like).")
    type: FieldType = Field(..., description="Field type.")
    required: bool = Field(default=False, description="Whether items must carry a value.")
    validation: Optional[ValidationRules] = Field(default=None, description="Type-specific rules.")
    description: Optional[str] = Field(default=None, description="Human-readable description.")

    # --- Validators --- #

    @field_validator("type", mode="before")
    @classmethod
    def _parse_type(cls, v: Any) -> FieldType:
        """Coerce incoming values to FieldType (unknowns → INVALID)."""
        return FieldType.parse(v)

    # --- Convenience --- #

    @property
    def has_rules(self) -> bool:
        return self.validation is not None

    def to_data(self) -> Dict[str, Any]:
        """Authoring shape without the name (the name is the mapping key)."""
        data: Dict[str, Any] = {"type": self.type.value, "required": self.required}
        if self.validation is not None:
            data["validation"] = self.validation.to_data()
        if self.description is not None:
            data["description"] = self.description
        return data
