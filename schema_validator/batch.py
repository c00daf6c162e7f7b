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

"""Validate many data files against one compiled schema."""

import logging
from pathlib import Path
from typing import Iterable, List, Optional

from .config import ValidatorConfig, validator_config
from .evaluator import Validator
from .exceptions import DepthExceededError, InputError
from .models.parsing import DocumentLoader
from .models.result import ValidationError, ValidationResult
from .models.schema_node import CompiledSchema
from .reporter import ValidationReport

logger = logging.getLogger(__name__)

DOCUMENT_EXTENSIONS = (".json", ".yaml", ".yml")


def find_documents(paths: Iterable[Path]) -> List[Path]:
    """Expand files and directories into the sorted set of JSON/YAML files."""
    found: List[Path] = []
    for path in paths:
        if not path.exists():
            logger.warning(f"Path does not exist: {path}")
            continue
        if path.is_file():
            found.append(path)
        elif path.is_dir():
            for ext in DOCUMENT_EXTENSIONS:
                found.extend(path.rglob(f"*{ext}"))
        else:
            logger.warning(f"Path is neither file nor directory: {path}")
    return sorted(set(found))


def validate_files(
    files: Iterable[Path],
    compiled: CompiledSchema,
    schema_path: Path,
    config: Optional[ValidatorConfig] = None,
    loader: Optional[DocumentLoader] = None,
) -> List[ValidationReport]:
    """Validate each file and return one report per file.

    A file that cannot be read or parsed does not stop the batch; its report
    carries a single ``load`` error at the document root.
    """
    config = config or validator_config
    loader = loader or DocumentLoader(cache_enabled=config.cache_enabled)
    validator = Validator(compiled, config)

    reports = []
    for path in files:
        try:
            data, source_map = loader.load_with_source(path)
            result = validator.validate(data)
        except (InputError, DepthExceededError) as exc:
            logger.debug(f"Skipping {path}: {exc}")
            result = ValidationResult(errors=(ValidationError((), "load", str(exc)),))
            source_map = None
        report = ValidationReport(path, schema_path, result, source_map=source_map)
        for warning in compiled.warnings:
            report.add_warning(warning)
        reports.append(report)

    logger.debug(
        f"Validated {len(reports)} file(s) against {schema_path} "
        f"(draft {compiled.draft})"
    )
    return reports
