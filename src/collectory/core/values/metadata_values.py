#!/usr/bin/env python3
"""
Purpose:
    Implements MetadataValues, the immutable set of field → value bindings
    carried by one item, validated against its collection's MetadataSchema.

    Validation order for a full value set:
        1) every required field is present and not None
        2) no field outside the schema
        3) each value's runtime type matches its field type
        4) each value satisfies its field's validation rules

    The same checks drive strict construction (raise the first failure) and
    `check` (collect every failure into a ValidationResult).
"""
from __future__ import annotations

import logging
import math
import numbers
from dataclasses import dataclass
from datetime import date, datetime
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Union

from collectory.core.errors import (
    MissingRequiredFieldError,
    NullRequiredFieldError,
    RequiredValueRemovalError,
    TypeMismatchError,
    UnknownFieldError,
    ValidationRuleError,
)
from collectory.core.schema.field_definition import FieldDefinition
from collectory.core.schema.field_type import FieldType
from collectory.core.schema.metadata_schema import MetadataSchema
from collectory.core.utils import format_bound
from collectory.core.validation import ValidationResult
from collectory.core.values.codec import decode_values, encode_values

logger = logging.getLogger(__name__)

MetadataValue = Union[str, int, float, date, datetime, bool]


@dataclass(frozen=True)
class MetadataValues:
    """
    Typed metadata for one item.

    Instances carry no reference to the schema they were validated against;
    re-validating after the schema evolves is the caller's job.

    Example
    -------
    >>> schema = MetadataSchema.create({"title": {"type": "text", "required": True}})
    >>> values = MetadataValues.create({"title": "Dune"}, schema)
    >>> values.get_value("title")
    'Dune'
    """

    values: Mapping[str, MetadataValue]

    # compared by content; never hashed
    __hash__ = None  # type: ignore[assignment]

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", MappingProxyType(dict(self.values)))

    # --- Construction --- #

    @classmethod
    def create(cls, values: Mapping[str, Any], schema: MetadataSchema) -> "MetadataValues":
        """
        Validate `values` against `schema` and freeze them.

        `None` for an optional field means "no value" and is dropped.

        Raises:
            MissingRequiredFieldError, NullRequiredFieldError, UnknownFieldError,
            TypeMismatchError, ValidationRuleError
        """
        validate_values(values, schema, strict=True)
        return cls(values={k: v for k, v in values.items() if v is not None})

    @classmethod
    def check(cls, values: Mapping[str, Any], schema: MetadataSchema) -> ValidationResult:
        """Run the `create` checks without raising; returns every failure found."""
        return validate_values(values, schema, strict=False)

    @classmethod
    def from_data(
        cls, data: Mapping[str, Any], schema: Optional[MetadataSchema] = None
    ) -> "MetadataValues":
        """
        Rebuild from trusted persisted state, skipping validation.

        Accepts either `{"values": {...}}` or the bare value mapping. With a
        `schema`, ISO-8601 strings in date fields are decoded back into dates,
        making this the inverse of `to_data`; without one, values are kept as
        given.

        Raises:
            TypeMismatchError: a date field holds a string that is not a date.
        """
        raw = data["values"] if isinstance(data.get("values"), Mapping) else data
        if schema is not None:
            raw = decode_values(raw, schema)
        return cls(values=dict(raw))

    def to_data(self) -> Dict[str, Any]:
        """JSON-friendly state (dates as ISO-8601 strings)."""
        return {"values": encode_values(self.values)}

    # --- Queries --- #

    def get_value(self, name: str) -> Optional[MetadataValue]:
        return self.values.get(name)

    def has_value(self, name: str) -> bool:
        return name in self.values

    def get_all_values(self) -> Dict[str, MetadataValue]:
        """A fresh dict of every present field → value pair."""
        return dict(self.values)

    def __len__(self) -> int:
        return len(self.values)

    # --- Mutation (copy-on-write) --- #

    def update_value(self, name: str, value: Any, schema: MetadataSchema) -> "MetadataValues":
        """
        Return a new instance with `name` set to `value`.

        `None` clears an optional field (see `remove_value`).

        Raises:
            UnknownFieldError: if the schema does not define `name`.
            NullRequiredFieldError: if `value` is None for a required field.
            TypeMismatchError, ValidationRuleError: if the value is invalid.
        """
        fd = schema.get_field(name)
        if fd is None:
            raise UnknownFieldError(name)
        if value is None:
            if fd.required:
                raise NullRequiredFieldError(name)
            return self.remove_value(name, schema)
        validate_field_value(name, value, fd, ValidationResult(), strict=True)
        logger.debug("Updating metadata value %r", name)
        return MetadataValues(values={**self.values, name: value})

    def remove_value(self, name: str, schema: MetadataSchema) -> "MetadataValues":
        """
        Return a new instance without `name`; `self` when no value is present.

        Raises:
            RequiredValueRemovalError: if the schema marks `name` required.
        """
        if not self.has_value(name):
            return self
        if schema.is_field_required(name):
            raise RequiredValueRemovalError(name)
        logger.debug("Removing metadata value %r", name)
        return MetadataValues(values={k: v for k, v in self.values.items() if k != name})

    def without_unknown(self, schema: MetadataSchema) -> "MetadataValues":
        """Return a copy keeping only fields the schema still defines."""
        kept = {k: v for k, v in self.values.items() if schema.has_field(k)}
        return self if len(kept) == len(self.values) else MetadataValues(values=kept)


# --- Validation --- #

def validate_values(
    values: Mapping[str, Any],
    schema: MetadataSchema,
    collector: Optional[ValidationResult] = None,
    strict: bool = True,
) -> ValidationResult:
    """Validate a full value set against `schema` (see module docstring for order)."""
    if collector is None:
        collector = ValidationResult()

    for name in schema.get_required_fields():
        if name not in values:
            collector.report(MissingRequiredFieldError(name), strict)
        elif values[name] is None:
            collector.report(NullRequiredFieldError(name), strict)

    for name in values:
        if not schema.has_field(name):
            collector.report(UnknownFieldError(name), strict)

    for name, value in values.items():
        fd = schema.get_field(name)
        if fd is None or value is None:
            continue
        validate_field_value(name, value, fd, collector, strict)

    return collector


def validate_field_value(
    name: str,
    value: Any,
    fd: FieldDefinition,
    collector: ValidationResult,
    strict: bool = True,
) -> ValidationResult:
    """Type-check one value, then apply its rules when the type is right."""
    mismatch = _type_mismatch(name, value, fd.type)
    if mismatch is not None:
        collector.report(mismatch, strict)
        return collector
    if fd.validation is not None:
        for error in _rule_violations(name, value, fd):
            collector.report(error, strict)
    return collector


def _type_mismatch(name: str, value: Any, ft: FieldType) -> Optional[TypeMismatchError]:
    if ft is FieldType.TEXT:
        if not isinstance(value, str):
            return TypeMismatchError(name, ft.value, f"Field '{name}' must be a string, got {type(value).__name__}")
    elif ft is FieldType.NUMBER:
        # bool is an int subclass; only floats can be NaN
        if (
            isinstance(value, bool)
            or not isinstance(value, numbers.Real)
            or (isinstance(value, float) and math.isnan(value))
        ):
            return TypeMismatchError(name, ft.value, f"Field '{name}' must be a valid number")
    elif ft is FieldType.DATE:
        if not isinstance(value, date):
            return TypeMismatchError(name, ft.value, f"Field '{name}' must be a valid date")
    elif ft is FieldType.BOOLEAN:
        if not isinstance(value, bool):
            return TypeMismatchError(name, ft.value, f"Field '{name}' must be a boolean")
    else:
        return TypeMismatchError(name, ft.value, f"Field '{name}' has unsupported type {ft.value!r}")
    return None


def _rule_violations(name: str, value: Any, fd: FieldDefinition) -> list[ValidationRuleError]:
    rules = fd.validation
    errors: list[ValidationRuleError] = []
    if rules is None:
        return errors

    if fd.type.supports_length_rules():
        if rules.min_length is not None and len(value) < rules.min_length:
            errors.append(ValidationRuleError(
                name, "minLength", rules.min_length,
                f"Field '{name}' must be at least {rules.min_length} characters long",
            ))
        if rules.max_length is not None and len(value) > rules.max_length:
            errors.append(ValidationRuleError(
                name, "maxLength", rules.max_length,
                f"Field '{name}' must be at most {rules.max_length} characters long",
            ))
        pattern = rules.compiled_pattern()
        if pattern is not None and not pattern.search(value):
            errors.append(ValidationRuleError(
                name, "pattern", rules.pattern,
                f"Field '{name}' does not match required pattern",
            ))

    if fd.type.supports_range_rules():
        if rules.min_value is not None and value < rules.min_value:
            errors.append(ValidationRuleError(
                name, "minValue", rules.min_value,
                f"Field '{name}' must be at least {format_bound(rules.min_value)}",
            ))
        if rules.max_value is not None and value > rules.max_value:
            errors.append(ValidationRuleError(
                name, "maxValue", rules.max_value,
                f"Field '{name}' must be at most {format_bound(rules.max_value)}",
            ))

    return errors
