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

"""Per-invocation report: the validation result plus where it came from."""

from pathlib import Path
from typing import Any, Dict, List, Optional

from ..models.result import ValidationError, ValidationResult
from ..utils.source_location import SourceLocation, SourceMap, lookup_source


class ValidationReport:
    """Container for the outcome of validating one data file against one schema file."""

    def __init__(
        self,
        data_path: Path,
        schema_path: Path,
        result: ValidationResult,
        source_map: Optional[SourceMap] = None,
    ):
        """Initialize the report.

        Args:
            data_path: Path of the validated document
            schema_path: Path of the schema it was validated against
            result: Evaluation outcome
            source_map: Optional pointer -> line/column map of the data file
        """
        self.data_path = data_path
        self.schema_path = schema_path
        self.result = result
        self.source_map = source_map or {}
        self.warnings: List[Dict[str, Any]] = []

    @property
    def valid(self) -> bool:
        return self.result.valid

    def add_warning(self, message: str, pointer: Optional[str] = None):
        """Add a warning that does not affect the outcome (e.g. an unknown draft).

        Args:
            message: Warning message
            pointer: Optional JSON pointer the warning refers to
        """
        warning = {'message': message}
        if pointer is not None:
            warning['pointer'] = pointer
        self.warnings.append(warning)

    def locate(self, error: ValidationError) -> SourceLocation:
        """Find where in the data file an error points."""
        return lookup_source(self.source_map, error.pointer, file_path=self.data_path)
