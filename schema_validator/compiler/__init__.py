"""Schema compiler: schema documents to immutable compiled schemas."""

from .draft_version import DraftCheckResult, check_schema_version
from .schema_compiler import SchemaCompiler, compile_schema

__all__ = ["DraftCheckResult", "SchemaCompiler", "check_schema_version", "compile_schema"]
