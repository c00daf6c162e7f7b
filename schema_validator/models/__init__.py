"""Data model: documents, compiled schemas and validation results."""

from .document import JsonValue, json_equal, json_type, load_yaml_document, parse_json
from .result import ValidationError, ValidationResult
from .schema_node import CompiledSchema, SchemaNode

__all__ = [
    "CompiledSchema",
    "JsonValue",
    "SchemaNode",
    "ValidationError",
    "ValidationResult",
    "json_equal",
    "json_type",
    "load_yaml_document",
    "parse_json",
]
