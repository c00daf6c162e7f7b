"""Error reporter: stable human-readable lines and machine-readable output."""

from .formatter import (
    format_errors,
    format_github_annotations,
    report_to_dict,
    result_to_dict,
    result_to_json,
    sort_errors,
)
from .report import ValidationReport

__all__ = [
    "ValidationReport",
    "format_errors",
    "format_github_annotations",
    "report_to_dict",
    "result_to_dict",
    "result_to_json",
    "sort_errors",
]
