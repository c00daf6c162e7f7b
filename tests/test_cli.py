import json

import pytest

from schema_validator.cli.run_validate import EXIT_FAILURE, EXIT_INVALID, EXIT_VALID, main

PERSON_SCHEMA = {
    "type": "object",
    "required": ["name"],
    "properties": {"name": {"type": "string"}, "age": {"type": "integer", "minimum": 0}},
}


@pytest.fixture
def person_schema(write_file):
    return write_file("person.schema.json", PERSON_SCHEMA)


def test_valid_document(write_file, person_schema, capsys):
    data = write_file("person.json", {"name": "Ada", "age": 36})
    assert main([str(data), str(person_schema)]) == EXIT_VALID
    captured = capsys.readouterr()
    assert f"{data} conforms to {person_schema}" in captured.out


def test_invalid_document_lists_errors(write_file, person_schema, capsys):
    data = write_file("person.json", {"age": -1})
    assert main([str(data), str(person_schema)]) == EXIT_INVALID
    err = capsys.readouterr().err
    assert "does not conform" in err
    assert "<root>: required — missing required property 'name'" in err
    assert "/age: minimum" in err


def test_yaml_schema_and_data(write_file, capsys):
    schema = write_file("schema.yaml", "type: object\nproperties:\n  when:\n    type: string\n")
    data = write_file("data.yml", "when: 2024-01-02\n")
    assert main([str(data), str(schema)]) == EXIT_VALID


def test_json_output(write_file, person_schema, capsys):
    data = write_file("person.yaml", "name: Ada\nage: -1\n")
    assert main([str(data), str(person_schema), "--format", "json"]) == EXIT_INVALID
    payload = json.loads(capsys.readouterr().out)
    assert payload["valid"] is False
    assert [(e["pointer"], e["keyword"], e["line"]) for e in payload["errors"]] == [("/age", "minimum", 2)]


def test_github_actions_output(write_file, person_schema, capsys):
    data = write_file("person.yaml", "name: 3\n")
    assert main([str(data), str(person_schema), "--format", "github-actions"]) == EXIT_INVALID
    out = capsys.readouterr().out.strip().splitlines()
    assert out == [f"::error file={data},line=1::/name: type — 3 is not of type string (got integer)"]


def test_malformed_data(write_file, person_schema, capsys):
    data = write_file("broken.json", '{"name": ')
    assert main([str(data), str(person_schema)]) == EXIT_FAILURE
    err = capsys.readouterr().err
    assert "cannot load data" in err
    assert "line 1" in err


def test_missing_schema_file(write_file, tmp_path, capsys):
    data = write_file("person.json", {})
    assert main([str(data), str(tmp_path / "absent.json")]) == EXIT_FAILURE
    assert "cannot load schema" in capsys.readouterr().err


def test_unusable_schema_points_at_source(write_file, capsys):
    schema = write_file("bad.schema.yaml", "type: object\nproperties:\n  age:\n    minimum: zero\n")
    data = write_file("data.json", {})
    assert main([str(data), str(schema)]) == EXIT_FAILURE
    err = capsys.readouterr().err
    assert "Invalid value for keyword 'minimum'" in err
    assert f"source= {schema}:4" in err


def test_unresolved_reference(write_file, capsys):
    schema = write_file("ref.schema.json", {"$ref": "#/$defs/missing"})
    data = write_file("data.json", 1)
    assert main([str(data), str(schema)]) == EXIT_FAILURE
    assert "Unresolved reference '#/$defs/missing'" in capsys.readouterr().err


def test_strict_mode_rejects_unknown_draft(write_file, capsys):
    schema = write_file("custom.schema.json", {"$schema": "http://example.com/meta", "type": "string"})
    data = write_file("data.json", json.dumps("x"))
    assert main([str(data), str(schema)]) == EXIT_VALID
    assert main([str(data), str(schema), "--strict"]) == EXIT_FAILURE
    assert "Unsupported schema version" in capsys.readouterr().err


def test_ref_files(write_file, capsys):
    defs = write_file("defs.json", {"$defs": {"id": {"type": "integer", "minimum": 1}}})
    schema = write_file("item.schema.json", {"properties": {"id": {"$ref": "defs.json#/$defs/id"}}})
    good = write_file("good.json", {"id": 3})
    bad = write_file("bad.json", {"id": 0})
    assert main([str(good), str(schema), "--ref", str(defs)]) == EXIT_VALID
    assert main([str(bad), str(schema), "--ref", str(defs)]) == EXIT_INVALID
    assert main([str(good), str(schema)]) == EXIT_FAILURE


def test_assert_formats_flag(write_file, capsys):
    schema = write_file("date.schema.json", {"format": "date"})
    data = write_file("data.json", json.dumps("2023-02-30"))
    assert main([str(data), str(schema)]) == EXIT_VALID
    assert main([str(data), str(schema), "--assert-formats"]) == EXIT_INVALID


def test_max_depth_flag(write_file, capsys):
    schema = write_file("self.schema.json", {"$ref": "#"})
    data = write_file("data.json", 1)
    assert main([str(data), str(schema), "--max-depth", "10"]) == EXIT_FAILURE
    assert "Maximum depth 10 exceeded" in capsys.readouterr().err


def test_deeply_nested_data_is_a_load_failure(write_file, person_schema, capsys):
    data = write_file("deep.json", "[" * 100000 + "]" * 100000)
    assert main([str(data), str(person_schema)]) == EXIT_FAILURE
    err = capsys.readouterr().err
    assert "cannot load data" in err
    assert "nested too deeply" in err


def test_recursive_yaml_data_is_a_load_failure(write_file, person_schema, capsys):
    data = write_file("loop.yaml", "&a [*a]\n")
    assert main([str(data), str(person_schema)]) == EXIT_FAILURE
    assert "Recursive alias" in capsys.readouterr().err
