#!/usr/bin/env python3
"""
Exception hierarchy for Collectory.

The metadata engine raises subclasses of `MetadataError` (also a `ValueError`)
whose messages identify the offending field. The use-case layer adds lookup,
conflict and evolution failures on top. Every error carries a stable `code`
used when errors are rendered for callers (see `formatting.error_envelope`).
"""

from typing import Any, Optional


class CollectoryError(Exception):
    """Base exception for all Collectory errors."""

    code: str = "COLLECTORY_ERROR"

    def __init__(self, message: str, field_name: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field_name = field_name


# --- Metadata engine --- #

class MetadataError(CollectoryError, ValueError):
    """Base exception for schema and value validation failures."""

    code = "METADATA_ERROR"


class SchemaValidationError(MetadataError):
    """Raised when a schema is built from malformed field definitions."""

    code = "SCHEMA_VALIDATION_ERROR"


class DuplicateFieldError(MetadataError):
    """Raised when adding a field that already exists in the schema."""

    code = "DUPLICATE_FIELD"

    def __init__(self, field_name: str):
        super().__init__(f"Field {field_name} already exists", field_name)


class UnknownFieldError(MetadataError):
    """Raised when a field is referenced that the schema does not define."""

    code = "UNKNOWN_FIELD"

    def __init__(self, field_name: str, message: Optional[str] = None):
        message = message or f"Field '{field_name}' is not defined in schema"
        super().__init__(message, field_name)


class RequiredFieldRemovalError(MetadataError):
    """Raised when removing a required field from a schema."""

    code = "REQUIRED_FIELD_REMOVAL"

    def __init__(self, field_name: str):
        super().__init__(f"Cannot remove required field {field_name}", field_name)


class LastFieldRemovalError(MetadataError):
    """Raised when removing the only remaining field from a schema."""

    code = "LAST_FIELD_REMOVAL"

    def __init__(self, field_name: str):
        super().__init__("Cannot remove the last field from schema", field_name)


class MissingRequiredFieldError(MetadataError):
    """Raised when a value set omits a required field."""

    code = "MISSING_REQUIRED_FIELD"

    def __init__(self, field_name: str):
        super().__init__(f"Required field '{field_name}' is missing", field_name)


class NullRequiredFieldError(MetadataError):
    """Raised when a required field is present but None."""

    code = "NULL_REQUIRED_FIELD"

    def __init__(self, field_name: str):
        super().__init__(f"Required field '{field_name}' cannot be null", field_name)


class TypeMismatchError(MetadataError):
    """Raised when a value's runtime type disagrees with its field type."""

    code = "TYPE_MISMATCH"

    def __init__(self, field_name: str, expected: str, message: str):
        super().__init__(message, field_name)
        self.expected = expected


class ValidationRuleError(MetadataError):
    """Raised when a value violates a length, range or pattern rule."""

    code = "VALIDATION_RULE"

    def __init__(self, field_name: str, rule: str, bound: Any, message: str):
        super().__init__(message, field_name)
        self.rule = rule
        self.bound = bound


class RequiredValueRemovalError(MetadataError):
    """Raised when clearing the value of a required field."""

    code = "REQUIRED_VALUE_REMOVAL"

    def __init__(self, field_name: str):
        super().__init__(f"Cannot remove required field '{field_name}'", field_name)


# --- Use-case layer --- #

class EntityValidationError(CollectoryError, ValueError):
    """Raised when a collection or item attribute is out of bounds."""

    code = "ENTITY_VALIDATION_ERROR"


class NotFoundError(CollectoryError, LookupError):
    """Raised when a collection or item cannot be found for its owner."""

    code = "NOT_FOUND"


class ConflictError(CollectoryError):
    """Raised when creating something that already exists."""

    code = "CONFLICT"


class SchemaEvolutionError(CollectoryError):
    """Raised when a schema change would invalidate existing items."""

    code = "SCHEMA_EVOLUTION_ERROR"


class ConcurrencyError(CollectoryError):
    """Raised when saving against a schema version that is no longer current."""

    code = "CONCURRENT_MODIFICATION"

    def __init__(self, expected_version: int, actual_version: int):
        super().__init__(
            f"Schema version mismatch: expected {expected_version}, found {actual_version}"
        )
        self.expected_version = expected_version
        self.actual_version = actual_version
