#!/usr/bin/env python3
"""
Purpose:
    Defines the FieldType enumeration for Collectory metadata schemas,
    along with helpers for parsing and introspection of field types.
"""

from __future__ import annotations

from enum import Enum


class FieldType(str, Enum):
    """
    Supported field types in a metadata schema.

    - text    : string scalar
    - number  : real number (int or float, never bool, never NaN)
    - date    : calendar date or timestamp
    - boolean : true/false scalar
    - invalid : unrecognized/unsupported type (returned by `parse`)
    """

    TEXT = "text"
    NUMBER = "number"
    DATE = "date"
    BOOLEAN = "boolean"
    INVALID = "invalid"

    # --- Parsing helpers --- #

    @classmethod
    def parse(cls, value: str | FieldType | None) -> FieldType:
        """
        Coerce arbitrary input to a `FieldType`.

        - `FieldType` instance → returned as-is
        - `None` or unknown strings → `FieldType.INVALID`
        - strings are trimmed and lowercased before lookup

        Examples
        --------
        >>> FieldType.parse(" Text ")
        <FieldType.TEXT: 'text'>
        >>> FieldType.parse(None)
        <FieldType.INVALID: 'invalid'>
        >>> FieldType.parse("string")
        <FieldType.INVALID: 'invalid'>
        """
        if isinstance(value, FieldType):
            return value
        if value is None:
            return cls.INVALID
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.INVALID

    @classmethod
    def try_parse(cls, value: str | FieldType | None) -> FieldType | None:
        """
        Like `parse`, but returns `None` for unknowns instead of `FieldType.INVALID`.
        """
        ft = cls.parse(value)
        return None if ft is cls.INVALID else ft

    @classmethod
    def valid_types(cls) -> list[FieldType]:
        """All accepted field types, in declaration order."""
        return [ft for ft in cls if ft is not cls.INVALID]

    # --- Introspection helpers --- #

    def supports_length_rules(self) -> bool:
        """True if minLength/maxLength/pattern apply (`text`)."""
        return self is FieldType.TEXT

    def supports_range_rules(self) -> bool:
        """True if minValue/maxValue apply (`number`)."""
        return self is FieldType.NUMBER
