"""Cross-check validity against the ``jsonschema`` library on shared ground."""

import pytest

from schema_validator.compiler import compile_schema
from schema_validator.evaluator import validate

jsonschema = pytest.importorskip("jsonschema")

ORACLE_CASES = [
    ({"type": "integer"}, [1, 1.0, 1.5, "1", True, None]),
    ({"type": ["number", "string"]}, [0, -2.5, "x", [], {}, False]),
    ({"enum": [1, [1, 2], {"a": None}]}, [1, 1.0, [1, 2], [2, 1], {"a": None}, True]),
    ({"minimum": 1, "exclusiveMaximum": 3}, [0, 1, 2.999, 3, "2"]),
    ({"multipleOf": 0.5}, [0, 1.5, 1.25, 10]),
    ({"minLength": 1, "maxLength": 3, "pattern": "[0-9]"}, ["", "1", "a1", "abcd1", "abc", 5]),
    ({"items": {"type": "string"}, "minItems": 1, "uniqueItems": True}, [[], ["a"], ["a", "a"], ["a", 1], "a"]),
    ({"prefixItems": [{"type": "integer"}, {"type": "string"}], "items": False}, [[], [1], [1, "a"], [1, "a", 2], ["a"]]),
    ({"contains": {"minimum": 5}, "maxContains": 1}, [[], [5], [5, 6], [1, 6], {}]),
    (
        {"properties": {"a": {"type": "integer"}}, "patternProperties": {"^b": {"type": "string"}},
         "additionalProperties": False},
        [{}, {"a": 1}, {"b1": "x"}, {"b1": 1}, {"c": 1}, {"a": "1"}],
    ),
    ({"required": ["a"], "dependentRequired": {"a": ["b"]}, "maxProperties": 2}, [{}, {"a": 1}, {"a": 1, "b": 2}, {"a": 1, "b": 2, "c": 3}]),
    ({"propertyNames": {"pattern": "^[a-z]+$"}}, [{}, {"abc": 1}, {"aB": 1}]),
    ({"allOf": [{"type": "integer"}, {"minimum": 0}], "not": {"const": 3}}, [0, 3, -1, 4.5]),
    ({"anyOf": [{"type": "string"}, {"maximum": 0}]}, ["x", -1, 1, None]),
    ({"oneOf": [{"type": "integer"}, {"minimum": 2}]}, [1, 2, 2.5, 0.5]),
    ({"if": {"type": "integer"}, "then": {"minimum": 0}, "else": {"type": "string"}}, [1, -1, "s", 1.5]),
    (
        {"$defs": {"tree": {"type": "object", "properties": {"children": {"type": "array", "items": {"$ref": "#/$defs/tree"}}}}},
         "$ref": "#/$defs/tree"},
        [{}, {"children": []}, {"children": [{"children": [{}]}]}, {"children": [1]}],
    ),
]


@pytest.mark.parametrize("schema, instances", ORACLE_CASES)
def test_agrees_with_jsonschema(config, schema, instances):
    compiled = compile_schema(schema, config=config)
    reference = jsonschema.validators.validator_for(schema)(schema)
    for instance in instances:
        assert validate(compiled, instance).valid == reference.is_valid(instance), instance
