#!/usr/bin/env python3
"""
Purpose:
    Defines the ValidationRules model: optional, type-specific constraints
    attached to a field definition.

    text   : min_length, max_length, pattern
    number : min_value, max_value

Keys are accepted in authoring (camelCase) and Python (snake_case) spelling.
"""

from __future__ import annotations

import re
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, model_validator


class ValidationRules(BaseModel):
    """Constraint bounds for one field; rules foreign to the field type are ignored."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    min_length: Optional[NonNegativeInt] = Field(
        default=None, alias="minLength", description="Minimum text length (inclusive)."
    )
    max_length: Optional[NonNegativeInt] = Field(
        default=None, alias="maxLength", description="Maximum text length (inclusive)."
    )
    pattern: Optional[str] = Field(
        default=None, description="Regex searched within text values."
    )
    min_value: Optional[float] = Field(
        default=None, alias="minValue", description="Minimum numeric value (inclusive)."
    )
    max_value: Optional[float] = Field(
        default=None, alias="maxValue", description="Maximum numeric value (inclusive)."
    )

    # --- Validators --- #

    @model_validator(mode="after")
    def _check_consistency(self) -> "ValidationRules":
        """Pattern must compile; lower bounds must not exceed upper bounds."""
        if self.pattern is not None:
            try:
                re.compile(self.pattern)
            except re.error as e:
                raise ValueError(f"Invalid pattern {self.pattern!r}: {e}") from e
        if _both(self.min_length, self.max_length) and self.min_length > self.max_length:
            raise ValueError("minLength must not exceed maxLength")
        if _both(self.min_value, self.max_value) and self.min_value > self.max_value:
            raise ValueError("minValue must not exceed maxValue")
        return self

    # --- Helpers --- #

    def compiled_pattern(self) -> Optional[re.Pattern[str]]:
        return re.compile(self.pattern) if self.pattern is not None else None

    def to_data(self) -> Dict[str, Any]:
        """Authoring-shaped dict with unset rules omitted."""
        return self.model_dump(by_alias=True, exclude_none=True)


def _both(a: Any, b: Any) -> bool:
    return a is not None and b is not None
