#!/usr/bin/env python3
"""
Purpose:
    Annotated string types shared by the file-backed models (`SchemaFile`,
    `ItemDocument`): the collection key that ties an item file to its schema
    file, display names, and optional prose.
"""

from typing import Annotated, Any, Optional

from pydantic import BeforeValidator

from collectory.core.constants import ITEM_NAME_MAX_LENGTH, SCHEMA_NAME_ALLOWED_RE


def _stripped(v: Any) -> str:
    return "" if v is None else str(v).strip()


# --- Normalizers --- #

def _collection_key(v: Any) -> str:
    """Lowercased, trimmed key; case-insensitive lookups in the registry rely on it."""
    key = _stripped(v).lower()
    if not key:
        raise ValueError("Invalid name: must be a non-empty string")
    if not SCHEMA_NAME_ALLOWED_RE.fullmatch(key):
        raise ValueError(
            f"Invalid name: {key!r}. Use lowercase letters, digits, '.', '_' or '-'"
        )
    return key


def _display_name(v: Any) -> str:
    name = _stripped(v)
    if not name:
        raise ValueError("Name is required")
    if len(name) > ITEM_NAME_MAX_LENGTH:
        raise ValueError(f"Name must be {ITEM_NAME_MAX_LENGTH} characters or less")
    return name


def _optional_prose(v: Any) -> Optional[str]:
    return _stripped(v) or None


# --- Annotated types --- #

CollectionKey = Annotated[str, BeforeValidator(_collection_key)]
ItemName = Annotated[str, BeforeValidator(_display_name)]
OptionalText = Annotated[Optional[str], BeforeValidator(_optional_prose)]
