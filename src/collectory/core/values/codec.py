#!/usr/bin/env python3
"""
Purpose:
    Converts metadata values between their typed Python form and the plain
    JSON/YAML form used by schema files, item documents and persistence.

    Only `date` fields need translation: they travel as ISO-8601 strings
    ("2024-05-01" or "2024-05-01T09:30:00+00:00").
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Mapping

from collectory.core.errors import TypeMismatchError
from collectory.core.schema.field_type import FieldType
from collectory.core.schema.metadata_schema import MetadataSchema


def decode_values(raw: Mapping[str, Any], schema: MetadataSchema) -> Dict[str, Any]:
    """
    Turn ISO-8601 strings in `date` fields into `date`/`datetime` objects.

    Everything else is passed through untouched; type and rule checks are
    left to `MetadataValues`.

    Raises:
        TypeMismatchError: a date string that is not a real calendar date.
    """
    decoded: Dict[str, Any] = {}
    for name, value in raw.items():
        fd = schema.get_field(name)
        if fd is not None and fd.type is FieldType.DATE and isinstance(value, str):
            decoded[name] = parse_date(name, value)
        else:
            decoded[name] = value
    return decoded


def encode_values(values: Mapping[str, Any]) -> Dict[str, Any]:
    """Inverse of `decode_values`: dates and datetimes become ISO-8601 strings."""
    return {
        name: value.isoformat() if isinstance(value, date) else value
        for name, value in values.items()
    }


def parse_date(name: str, text: str) -> date:
    """
    Parse an ISO-8601 date or timestamp for field `name`.

    A bare `YYYY-MM-DD` yields a `date`; anything longer yields a `datetime`.
    A trailing 'Z' is read as UTC.
    """
    s = text.strip()
    try:
        if len(s) == 10:
            return date.fromisoformat(s)
        if s.endswith(("Z", "z")):
            s = s[:-1] + "+00:00"
        return datetime.fromisoformat(s)
    except ValueError as e:
        raise TypeMismatchError(name, FieldType.DATE.value, f"Field '{name}' must be a valid date") from e
