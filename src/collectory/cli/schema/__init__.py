# cli/schema/__init__.py
from .tools import register, list_schemas, validate_schema, show_schema

__all__ = ["register", "list_schemas", "validate_schema", "show_schema"]
