import json
from pathlib import Path

from schema_validator.models.result import ValidationError, ValidationResult
from schema_validator.reporter import (
    ValidationReport,
    format_errors,
    format_github_annotations,
    report_to_dict,
    result_to_json,
    sort_errors,
)


def _result(*errors):
    return ValidationResult(errors=tuple(errors))


def test_lines_are_sorted_by_path_then_keyword():
    result = _result(
        ValidationError(("b",), "type", "bad b"),
        ValidationError((), "required", "missing 'x'"),
        ValidationError(("a", 1), "minimum", "too small"),
        ValidationError(("a", 0), "type", "bad a0"),
        ValidationError((), "maxProperties", "too many"),
    )
    assert format_errors(result) == [
        "<root>: maxProperties — too many",
        "<root>: required — missing 'x'",
        "/a/0: type — bad a0",
        "/a/1: minimum — too small",
        "/b: type — bad b",
    ]


def test_indices_sort_before_names():
    errors = [ValidationError(("x",), "type", ""), ValidationError((3,), "type", "")]
    assert [e.path for e in sort_errors(errors)] == [(3,), ("x",)]


def test_pointer_escaping_in_lines():
    result = _result(ValidationError(("a/b", "c~d"), "type", "m"))
    assert format_errors(result) == ["/a~1b/c~0d: type — m"]


def test_valid_result_has_no_lines():
    assert format_errors(ValidationResult()) == []
    assert json.loads(result_to_json(ValidationResult())) == {"valid": True, "errors": []}


def test_json_output():
    result = _result(ValidationError(("age",), "minimum", "-1 is less than 0", "#/properties/age/minimum"))
    payload = json.loads(result_to_json(result))
    assert payload == {
        "valid": False,
        "errors": [
            {
                "path": ["age"],
                "pointer": "/age",
                "keyword": "minimum",
                "message": "-1 is less than 0",
                "schemaPath": "#/properties/age/minimum",
            }
        ],
    }


def test_report_adds_source_lines():
    source_map = {"": {"line": 1, "column": 1}, "/age": {"line": 3, "column": 10}}
    result = _result(
        ValidationError(("age",), "minimum", "too small"),
        ValidationError(("name",), "required", "missing"),
    )
    report = ValidationReport(Path("data.yaml"), Path("schema.json"), result, source_map=source_map)
    report.add_warning("unknown draft", pointer="/$schema")

    payload = report_to_dict(report)
    assert payload["data"] == "data.yaml"
    assert payload["warnings"] == [{"message": "unknown draft", "pointer": "/$schema"}]
    assert (payload["errors"][0]["line"], payload["errors"][0]["column"]) == (3, 10)
    # missing location falls back to the closest ancestor
    assert payload["errors"][1]["line"] == 1


def test_github_annotations():
    source_map = {"/age": {"line": 3, "column": 10}}
    report = ValidationReport(
        Path("data.yaml"), Path("schema.json"), _result(ValidationError(("age",), "minimum", "too small")),
        source_map=source_map,
    )
    report.add_warning("unknown draft")
    assert format_github_annotations(report) == [
        "::warning file=schema.json::unknown draft",
        "::error file=data.yaml,line=3::/age: minimum — too small",
    ]
