import pytest

from schema_validator.exceptions import InputError, ParseError
from schema_validator.models.document import json_equal, json_type, load_yaml_document, parse_json
from schema_validator.models.parsing import DocumentLoader, is_yaml_path


def test_parse_json_reports_line_and_column():
    with pytest.raises(ParseError) as exc_info:
        parse_json('{\n  "a": tru\n}')
    assert exc_info.value.line == 2
    assert exc_info.value.column is not None
    assert "line 2" in str(exc_info.value)


@pytest.mark.parametrize("text", ["[NaN]", "[Infinity]", "[-Infinity]", "[1e400]"])
def test_parse_json_rejects_non_finite_numbers(text):
    with pytest.raises(ParseError):
        parse_json(text)


def test_parse_json_accepts_bytes_with_bom():
    assert parse_json('\ufeff{"a": [1, 2.5, null]}'.encode("utf-8")) == {"a": [1, 2.5, None]}


def test_yaml_timestamps_stay_strings():
    assert load_yaml_document("when: 2024-01-02\nat: 2024-01-02T10:00:00Z\n") == {
        "when": "2024-01-02",
        "at": "2024-01-02T10:00:00Z",
    }


def test_yaml_scalar_keys_become_strings():
    assert load_yaml_document("1: a\ntrue: b\nnull: c\n") == {"1": "a", "true": "b", "null": "c"}


def test_empty_yaml_is_null():
    assert load_yaml_document("") is None


def test_invalid_yaml_has_location():
    with pytest.raises(ParseError) as exc_info:
        load_yaml_document("a: [1, 2\nb: 3\n")
    assert exc_info.value.line is not None


def test_yaml_infinity_has_no_json_equivalent():
    with pytest.raises(ParseError):
        load_yaml_document("limit: .inf\n")


@pytest.mark.parametrize(
    "left, right, expected",
    [
        (1, 1.0, True),
        (True, 1, False),
        (False, 0, False),
        (None, None, True),
        ("1", 1, False),
        ([1, 2], [2, 1], False),
        ({"a": 1, "b": [1]}, {"b": [1.0], "a": 1}, True),
        ({"a": 1}, {"a": 1, "b": 2}, False),
    ],
)
def test_json_equal(left, right, expected):
    assert json_equal(left, right) is expected


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, "null"),
        (True, "boolean"),
        (3, "integer"),
        (3.0, "integer"),
        (3.5, "number"),
        ("x", "string"),
        ([], "array"),
        ({}, "object"),
    ],
)
def test_json_type(value, expected):
    assert json_type(value) == expected


def test_loader_picks_parser_by_suffix(write_file):
    yaml_path = write_file("doc.yml", "a: 1\n")
    json_path = write_file("doc.json", '{"a": 1}')
    loader = DocumentLoader(cache_enabled=False)
    assert is_yaml_path(yaml_path)
    assert not is_yaml_path(json_path)
    assert loader.load(yaml_path) == loader.load(json_path) == {"a": 1}


def test_loader_builds_source_map(write_file):
    path = write_file("doc.yaml", "name: demo\nitems:\n  - first\n  - second\n")
    document, source_map = DocumentLoader(cache_enabled=False).load_with_source(path)
    assert document == {"name": "demo", "items": ["first", "second"]}
    assert source_map["/name"] == {"line": 1, "column": 7}
    assert source_map["/items/1"]["line"] == 4


def test_loader_caches_until_cleared(write_file):
    path = write_file("doc.json", '{"v": 1}')
    loader = DocumentLoader(cache_enabled=True)
    assert loader.load(path) == {"v": 1}
    path.write_text('{"v": 2}', encoding="utf-8")
    assert loader.load(path) == {"v": 1}
    loader.clear_cache()
    assert loader.load(path) == {"v": 2}


def test_loader_missing_file(tmp_path):
    with pytest.raises(InputError, match="File not found"):
        DocumentLoader().load(tmp_path / "absent.json")


def test_loader_rejects_directory(tmp_path):
    with pytest.raises(InputError, match="not a file"):
        DocumentLoader().load(tmp_path)


def test_yaml_keys_colliding_after_conversion_are_rejected():
    with pytest.raises(ParseError) as exc_info:
        load_yaml_document("true: a\nyes: b\n")
    assert "duplicate key 'true'" in str(exc_info.value)
    assert exc_info.value.line == 2


def test_yaml_numeric_keys_keep_their_spelling():
    assert load_yaml_document("1: a\n1.5: b\n0x10: c\n") == {"1": "a", "1.5": "b", "16": "c"}


def test_yaml_merge_keys_can_be_overridden():
    document = load_yaml_document("base: &b {x: 1, y: 2}\nchild:\n  <<: *b\n  y: 3\n")
    assert document["child"] == {"x": 1, "y": 3}


def test_deeply_nested_json_is_a_parse_error():
    with pytest.raises(ParseError, match="nested too deeply"):
        parse_json("[" * 100000 + "]" * 100000)


def test_deeply_nested_yaml_is_a_parse_error():
    with pytest.raises(ParseError, match="nested too deeply"):
        load_yaml_document("[" * 20000 + "]" * 20000)


def test_recursive_yaml_alias_is_a_parse_error():
    with pytest.raises(ParseError, match="Recursive alias"):
        load_yaml_document("&a [*a]\n")


def test_shared_yaml_alias_is_copied():
    assert load_yaml_document("a: &x [1]\nb: *x\n") == {"a": [1], "b": [1]}


def test_source_map_uses_converted_key_spelling(write_file):
    path = write_file("keys.yaml", "yes: 1\n0x10: 2\nname: x\n")
    document, source_map = DocumentLoader(cache_enabled=False).load_with_source(path)
    assert document == {"true": 1, "16": 2, "name": "x"}
    assert source_map["/true"]["line"] == 1
    assert source_map["/16"]["line"] == 2
    assert source_map["/name"]["line"] == 3


def test_source_map_survives_recursive_alias():
    source_map = DocumentLoader.build_source_map("&a [*a]\n")
    assert source_map[""] == {"line": 1, "column": 1}
