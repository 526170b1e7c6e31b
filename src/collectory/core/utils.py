#!/usr/bin/env python3
"""
Purpose:
    Provides common utility functions such as field name validation,
    timestamps, number formatting, dictionary merge, and file I/O helpers.
"""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Any

from collectory.core.constants import FIELDNAME_ALLOWED_RE, DEFAULT_TEXT_ENCODING


# --- Validation Helpers --- #

def is_valid_fieldname_pattern(name: Any) -> bool:
    """Return True if the field name is a string fully matching the allowed pattern."""
    return isinstance(name, str) and bool(FIELDNAME_ALLOWED_RE.fullmatch(name))


# --- Time & Formatting --- #

def utc_now() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


def format_bound(value: Any) -> str:
    """
    Render a numeric bound for messages: integral floats lose their '.0'.

    >>> format_bound(0.0), format_bound(2.5), format_bound(10)
    ('0', '2.5', '10')
    """
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


# --- Generic Utilities --- #

def merge_dicts(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Recursively merge two dictionaries (values from 'override' take precedence).
    Non-dict values are overwritten; dict values are merged depth-first.
    """
    result = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = merge_dicts(result[k], v)
        else:
            result[k] = v
    return result


# --- File I/O Helpers --- #

def load_json_file(path: Path) -> Dict[str, Any]:
    """
    Load a JSON file from 'path'. Returns an empty dict if the file is missing.

    Raises:
        ValueError: if the file exists but contains invalid JSON.
    """
    if not path.exists():
        return {}
    try:
        with path.open("r", encoding=DEFAULT_TEXT_ENCODING) as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(
            f"Invalid JSON in {str(path)!r}: {e.msg} (line {e.lineno}, col {e.colno})"
        ) from e
