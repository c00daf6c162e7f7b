import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Callable

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from schema_validator.compiler import compile_schema  # noqa: E402
from schema_validator.config import ValidatorConfig  # noqa: E402
from schema_validator.evaluator import validate  # noqa: E402
from schema_validator.models.result import ValidationResult  # noqa: E402


@pytest.fixture
def config() -> ValidatorConfig:
    """Defaults, independent of SCHEMA_VALIDATOR_* in the environment."""
    return ValidatorConfig()


@pytest.fixture
def check(config: ValidatorConfig) -> Callable[..., ValidationResult]:
    def _check(schema: Any, data: Any, **overrides: Any) -> ValidationResult:
        cfg = replace(config, **overrides)
        return validate(compile_schema(schema, config=cfg), data, config=cfg)

    return _check


@pytest.fixture
def write_file(tmp_path: Path) -> Callable[[str, Any], Path]:
    def _write(name: str, content: Any) -> Path:
        path = tmp_path / name
        text = content if isinstance(content, str) else json.dumps(content)
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture(autouse=True)
def restore_root_logging():
    """The CLI reconfigures the root logger; undo it after each test."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
