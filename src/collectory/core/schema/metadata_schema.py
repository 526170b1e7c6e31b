#!/usr/bin/env python3
"""
Purpose:
    Implements MetadataSchema, the immutable per-collection contract for item
    metadata: which fields exist, their types, which are required, and the
    rules their values must satisfy.

    Validation happens once, when definitions are admitted (`create`,
    `add_field`, `redefine`), so every getter is a total function. Evolution
    never mutates the receiver: each structural change returns a new schema
    with `version + 1` and a fresh `last_modified`.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Optional, Union

from pydantic import ValidationError

from collectory.core.errors import (
    DuplicateFieldError,
    LastFieldRemovalError,
    RequiredFieldRemovalError,
    SchemaValidationError,
    UnknownFieldError,
)
from collectory.core.formatting import format_pydantic_errors_simple
from collectory.core.schema.field_definition import FieldDefinition
from collectory.core.schema.field_type import FieldType
from collectory.core.utils import is_valid_fieldname_pattern, utc_now

logger = logging.getLogger(__name__)

# A definition as authored (mapping without "name") or an existing FieldDefinition
DefinitionInput = Union[Mapping[str, Any], FieldDefinition]

_TYPE_CHOICES = ", ".join(ft.value for ft in FieldType.valid_types())


@dataclass(frozen=True)
class MetadataSchema:
    """
    Field definitions for one collection, keyed by field name (insertion ordered).

    `required_fields` is derived from the definitions, so the two can never
    diverge.

    Example
    -------
    >>> schema = MetadataSchema.create({"title": {"type": "text", "required": True}})
    >>> schema.is_field_required("title"), schema.version
    (True, 1)
    >>> schema.add_field("pages", {"type": "number"}).version
    2
    """

    fields: Mapping[str, FieldDefinition]
    version: int = 1
    last_modified: datetime = field(default_factory=utc_now)

    # compared by content; never hashed
    __hash__ = None  # type: ignore[assignment]

    def __post_init__(self) -> None:
        # private read-only copy of the caller's mapping
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    # --- Construction --- #

    @classmethod
    def create(cls, fields: Mapping[str, DefinitionInput]) -> "MetadataSchema":
        """
        Build a validated schema (version 1) from a name → definition mapping.

        Raises:
            SchemaValidationError: invalid field name or type, malformed
                definition or rules, or an empty mapping.
        """
        definitions = cls._admit_all(fields)
        return cls(fields=definitions, version=1, last_modified=utc_now())

    @classmethod
    def from_data(cls, data: Mapping[str, Any]) -> "MetadataSchema":
        """
        Rebuild a schema from persisted state without schema-level validation.

        Only for trusted internal state (e.g. the output of `to_data`); never
        feed untrusted input through here.
        """
        raw_fields = data["fields"]
        fields = {
            name: fd if isinstance(fd, FieldDefinition) else FieldDefinition.model_validate({**fd, "name": name})
            for name, fd in raw_fields.items()
        }
        last_modified = data.get("last_modified") or utc_now()
        if isinstance(last_modified, str):
            last_modified = datetime.fromisoformat(last_modified)
        return cls(fields=fields, version=int(data.get("version", 1)), last_modified=last_modified)

    def to_data(self) -> Dict[str, Any]:
        """JSON-friendly state; the inverse of `from_data`."""
        return {
            "fields": {name: fd.to_data() for name, fd in self.fields.items()},
            "version": self.version,
            "last_modified": self.last_modified.isoformat(),
        }

    # --- Queries --- #

    @property
    def required_fields(self) -> frozenset[str]:
        """Names of the fields whose definition is marked required."""
        return frozenset(self.get_required_fields())

    def has_field(self, name: str) -> bool:
        return name in self.fields

    def is_field_required(self, name: str) -> bool:
        """False for unknown fields (not an error)."""
        fd = self.fields.get(name)
        return fd is not None and fd.required

    def get_field(self, name: str) -> Optional[FieldDefinition]:
        return self.fields.get(name)

    def get_all_fields(self) -> List[FieldDefinition]:
        return list(self.fields.values())

    def get_required_fields(self) -> List[str]:
        return [name for name, fd in self.fields.items() if fd.required]

    def __contains__(self, name: object) -> bool:
        return name in self.fields

    def __iter__(self) -> Iterator[str]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    # --- Evolution --- #

    def add_field(self, name: str, definition: DefinitionInput) -> "MetadataSchema":
        """
        Return a new schema with `name` appended.

        Raises:
            DuplicateFieldError: if `name` is already defined.
            SchemaValidationError: if the name, type or rules are invalid.
        """
        if self.has_field(name):
            raise DuplicateFieldError(name)
        fd = self._admit(name, definition)
        logger.debug("Adding field %r (%s) to schema v%d", name, fd.type.value, self.version)
        return self._evolve({**self.fields, name: fd})

    def remove_field(self, name: str) -> "MetadataSchema":
        """
        Return a new schema without `name`.

        Raises:
            UnknownFieldError: if `name` is not defined.
            RequiredFieldRemovalError: if the field is required.
            LastFieldRemovalError: if it is the only remaining field.
        """
        if not self.has_field(name):
            raise UnknownFieldError(name, f"Field {name} does not exist")
        if self.is_field_required(name):
            raise RequiredFieldRemovalError(name)
        if len(self.fields) == 1:
            raise LastFieldRemovalError(name)
        logger.debug("Removing field %r from schema v%d", name, self.version)
        return self._evolve({k: v for k, v in self.fields.items() if k != name})

    def redefine(self, fields: Mapping[str, DefinitionInput]) -> "MetadataSchema":
        """
        Return a new schema with a wholesale replacement field set.

        Validated exactly like `create`, but continues this schema's version line.
        """
        definitions = self._admit_all(fields)
        logger.debug("Redefining schema v%d with %d field(s)", self.version, len(definitions))
        return self._evolve(definitions)

    # --- Internals --- #

    def _evolve(self, fields: Dict[str, FieldDefinition]) -> "MetadataSchema":
        return MetadataSchema(fields=fields, version=self.version + 1, last_modified=utc_now())

    @classmethod
    def _admit_all(cls, fields: Mapping[str, DefinitionInput]) -> Dict[str, FieldDefinition]:
        if not isinstance(fields, Mapping):
            raise SchemaValidationError(
                f"MetadataSchema fields must be a mapping of name to definition, got {type(fields).__name__}"
            )
        definitions = {name: cls._admit(name, definition) for name, definition in fields.items()}
        if not definitions:
            raise SchemaValidationError("MetadataSchema must contain at least one field definition")
        return definitions

    @staticmethod
    def _admit(name: Any, definition: DefinitionInput) -> FieldDefinition:
        """Validate one definition for inclusion under `name`."""
        if not is_valid_fieldname_pattern(name):
            raise SchemaValidationError(
                f"Invalid field name: {name}. Must be alphanumeric with underscores only", str(name)
            )

        if isinstance(definition, FieldDefinition):
            raw_type: Any = definition.type
            payload: Dict[str, Any] = definition.model_dump(exclude={"name"}, exclude_none=True)
        elif isinstance(definition, Mapping):
            raw_type = definition.get("type")
            payload = {k: v for k, v in definition.items() if k != "name"}
        else:
            raise SchemaValidationError(
                f"Invalid definition for field {name}: expected a mapping, got {type(definition).__name__}",
                name,
            )

        if FieldType.try_parse(raw_type) is None:
            shown = raw_type.value if isinstance(raw_type, FieldType) else raw_type
            raise SchemaValidationError(
                f"Invalid field type: {shown}. Must be one of: {_TYPE_CHOICES}", name
            )

        try:
            return FieldDefinition.model_validate({**payload, "name": name})
        except ValidationError as e:
            details = "; ".join(format_pydantic_errors_simple(e))
            raise SchemaValidationError(f"Invalid definition for field {name}: {details}", name) from e
