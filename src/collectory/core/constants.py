#!/usr/bin/env python3
"""
Core constants used across Collectory.

- Limits: length bounds for collection and item attributes.
- File handling: supported extensions and default text encoding.
- Regular expressions: compiled patterns used by validators and normalizers.
"""

import re
from typing import Final

# --- Collectory constants --- #

# Aggregate attribute limits
COLLECTION_NAME_MAX_LENGTH: Final[int] = 100
COLLECTION_DESCRIPTION_MAX_LENGTH: Final[int] = 500
ITEM_NAME_MAX_LENGTH: Final[int] = 200

# Supported schema file extensions
SUPPORTED_SCHEMA_EXT: Final[frozenset[str]] = frozenset({".json"})

# Supported item document extensions
SUPPORTED_ITEM_EXT: Final[frozenset[str]] = frozenset({".yml", ".yaml"})

# Default text encoding
DEFAULT_TEXT_ENCODING: Final[str] = "utf-8"


# --- Regular Expressions --- #

# Matches valid field names: leading letter, then letters/numbers/underscores
FIELDNAME_ALLOWED_RE: re.Pattern[str] = re.compile(r"^[A-Za-z][A-Za-z0-9_]*$")

# Allowed schema (collection file) names: lowercase letters, digits, dot, underscore, hyphen
SCHEMA_NAME_ALLOWED_RE: re.Pattern[str] = re.compile(r"^[a-z0-9._-]+$")
