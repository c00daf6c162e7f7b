"""JSON Schema validation for JSON and YAML documents."""

__version__ = "0.1.0"

from .compiler import SchemaCompiler, compile_schema
from .config import ValidatorConfig, validator_config
from .evaluator import Validator, validate
from .exceptions import (
    CompileError,
    DepthExceededError,
    InputError,
    InvalidKeywordValueError,
    ParseError,
    SchemaValidatorError,
    UnresolvedReferenceError,
    UnsupportedSchemaVersionError,
)
from .models import CompiledSchema, ValidationError, ValidationResult
from .models.parsing import load_document
from .reporter import format_errors

__all__ = [
    "CompileError",
    "CompiledSchema",
    "DepthExceededError",
    "InputError",
    "InvalidKeywordValueError",
    "ParseError",
    "SchemaCompiler",
    "SchemaValidatorError",
    "UnresolvedReferenceError",
    "UnsupportedSchemaVersionError",
    "ValidationError",
    "ValidationResult",
    "Validator",
    "ValidatorConfig",
    "compile_schema",
    "format_errors",
    "load_document",
    "validate",
    "validator_config",
]
