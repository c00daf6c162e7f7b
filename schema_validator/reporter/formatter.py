"""Render validation results for people and for machines."""

from __future__ import annotations

import json
from typing import Any, Dict, Iterable, List, Tuple

from ..models.result import ValidationError, ValidationResult
from ..utils.json_pointer import PathSegment
from .report import ValidationReport

ROOT_LABEL = "<root>"


def _segment_key(segment: PathSegment) -> Tuple[int, int, str]:
    # indices sort before names at the same depth
    if isinstance(segment, int):
        return (0, segment, "")
    return (1, 0, segment)


def sort_errors(errors: Iterable[ValidationError]) -> List[ValidationError]:
    """Stable sort by path, then keyword."""
    return sorted(errors, key=lambda e: (tuple(_segment_key(s) for s in e.path), e.keyword))


def format_path(error: ValidationError) -> str:
    return error.pointer or ROOT_LABEL


def format_error(error: ValidationError) -> str:
    return f"{format_path(error)}: {error.keyword} — {error.message}"


def format_errors(result: ValidationResult) -> List[str]:
    """One line per error, in deterministic order."""
    return [format_error(e) for e in sort_errors(result.errors)]


def result_to_dict(result: ValidationResult) -> Dict[str, Any]:
    return {
        "valid": result.valid,
        "errors": [e.to_dict() for e in sort_errors(result.errors)],
    }


def result_to_json(result: ValidationResult, indent: int = 2) -> str:
    return json.dumps(result_to_dict(result), indent=indent, ensure_ascii=False)


def report_to_dict(report: ValidationReport) -> Dict[str, Any]:
    output = {
        "data": str(report.data_path),
        "schema": str(report.schema_path),
        **result_to_dict(report.result),
        "warnings": report.warnings,
    }
    for entry, error in zip(output["errors"], sort_errors(report.result.errors)):
        loc = report.locate(error)
        if loc.line is not None:
            entry["line"] = loc.line
            entry["column"] = loc.column
    return output


def format_github_annotations(report: ValidationReport) -> List[str]:
    """GitHub Actions workflow commands, one per error, pointing at the data file."""
    lines = []
    for warning in report.warnings:
        lines.append(f"::warning file={report.schema_path}::{warning['message']}")
    for error in sort_errors(report.result.errors):
        loc = report.locate(error)
        lines.append(f"::error file={report.data_path},line={loc.line or 1}::{format_error(error)}")
    return lines
