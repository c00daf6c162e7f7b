# Copyright 2026 TIER IV, inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Custom exceptions for the schema validator.

Validation failures of a document are not exceptions; they are returned as
``ValidationResult`` values. Everything here aborts an invocation.
"""

from typing import Optional


class SchemaValidatorError(Exception):
    """Base exception for schema-validator related errors."""
    pass


class InputError(SchemaValidatorError):
    """Exception raised when an input document cannot be read."""
    pass


class ParseError(InputError):
    """Exception raised for malformed JSON or YAML input."""

    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        self.message = message
        self.line = line  # 1-based
        self.column = column  # 1-based
        location = f" (line {line}, column {column})" if line is not None else ""
        super().__init__(f"{message}{location}")


class CompileError(SchemaValidatorError):
    """Exception raised when a schema document cannot be compiled."""

    def __init__(self, message: str, path: str = ""):
        self.path = path
        super().__init__(message)


class UnresolvedReferenceError(CompileError):
    """Exception raised when a ``$ref`` does not point at any schema."""

    def __init__(self, reference: str, path: str = ""):
        self.reference = reference
        super().__init__(f"Unresolved reference '{reference}'", path=path)


class InvalidKeywordValueError(CompileError):
    """Exception raised for a keyword whose value is not allowed."""

    def __init__(self, path: str, keyword: str, reason: str = ""):
        self.keyword = keyword
        detail = f": {reason}" if reason else ""
        super().__init__(f"Invalid value for keyword '{keyword}' at '{path or '#'}'{detail}", path=path)


class UnsupportedSchemaVersionError(CompileError):
    """Exception raised in strict mode for an unrecognized ``$schema``."""

    def __init__(self, identifier: str, path: str = ""):
        self.identifier = identifier
        super().__init__(f"Unsupported schema version '{identifier}'", path=path)


class DepthExceededError(SchemaValidatorError):
    """Exception raised when compilation or evaluation nests too deeply."""

    def __init__(self, max_depth: int, path: str = ""):
        self.max_depth = max_depth
        self.path = path
        super().__init__(f"Maximum depth {max_depth} exceeded at '{path or '#'}'")
