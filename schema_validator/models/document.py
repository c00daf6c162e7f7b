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

"""In-memory document model shared by JSON and YAML inputs.

Documents are plain Python values: ``None``, ``bool``, ``int``, ``float``,
``str``, ``list`` and ``dict`` with string keys. Integers parsed from the input
stay ``int`` so that ``type: integer`` can tell them apart from fractional
numbers. Nothing in this package mutates a document after it has been parsed.
"""

from __future__ import annotations

import json
import math
from typing import Any, Dict, List, Optional, Tuple, Union

import yaml

from ..exceptions import ParseError
from ..utils.json_pointer import join_pointer

JsonValue = Union[None, bool, int, float, str, List[Any], Dict[str, Any]]

JSON_TYPES = ("null", "boolean", "integer", "number", "string", "array", "object")


class _JsonCompatibleLoader(yaml.SafeLoader):
    """SafeLoader that keeps timestamps as plain strings, as JSON would.

    Mapping keys are turned into their JSON spelling while the mapping is
    built, so ``1`` and ``true`` stay distinct keys instead of colliding.
    """

    def construct_mapping(self, node: yaml.MappingNode, deep: bool = False) -> Dict[str, Any]:
        if not isinstance(node, yaml.MappingNode):
            raise yaml.constructor.ConstructorError(
                None, None, f"expected a mapping node, but found {node.id}", node.start_mark
            )
        explicit = sum(1 for key_node, _ in node.value if key_node.tag != "tag:yaml.org,2002:merge")
        self.flatten_mapping(node)
        merged = len(node.value) - explicit

        mapping: Dict[str, Any] = {}
        explicit_names = set()
        for index, (key_node, value_node) in enumerate(node.value):
            name = _json_key(self.construct_object(key_node, deep=deep), "")
            if index >= merged:
                # keys pulled in by "<<" may be overridden, explicit ones may not repeat
                if name in explicit_names:
                    raise yaml.constructor.ConstructorError(
                        "while constructing a mapping", node.start_mark,
                        f"found duplicate key '{name}'", key_node.start_mark,
                    )
                explicit_names.add(name)
            mapping[name] = self.construct_object(value_node, deep=deep)
        return mapping


_JsonCompatibleLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != "tag:yaml.org,2002:timestamp"]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not a valid JSON number")


def _parse_finite_float(text: str) -> float:
    value = float(text)
    if not math.isfinite(value):
        raise ValueError(f"Number {text} is out of range")
    return value


def parse_json(content: Union[str, bytes]) -> JsonValue:
    """Parse JSON text into a document.

    Raises:
        ParseError: If the content is not valid JSON.
    """
    try:
        if isinstance(content, bytes):
            content = content.decode("utf-8-sig")
        return json.loads(content, parse_constant=_reject_constant, parse_float=_parse_finite_float)
    except json.JSONDecodeError as exc:
        raise ParseError(f"Invalid JSON: {exc.msg}", line=exc.lineno, column=exc.colno) from exc
    except UnicodeDecodeError as exc:
        raise ParseError(f"Input is not valid UTF-8: {exc.reason}") from exc
    except ValueError as exc:
        raise ParseError(f"Invalid JSON: {exc}") from exc
    except RecursionError as exc:
        raise ParseError("Invalid JSON: document is nested too deeply") from exc


def load_yaml_document(content: Union[str, bytes]) -> JsonValue:
    """Parse YAML text into the same document shape :func:`parse_json` produces.

    Raises:
        ParseError: If the content is not valid YAML or holds values with no
            JSON equivalent.
    """
    try:
        raw = yaml.load(content, Loader=_JsonCompatibleLoader)
        return _to_json_value(raw, "", ())
    except yaml.YAMLError as exc:
        mark = getattr(exc, "problem_mark", None)
        problem = getattr(exc, "problem", None) or str(exc)
        if mark is not None:
            # PyYAML marks are 0-based
            raise ParseError(f"Invalid YAML: {problem}", line=mark.line + 1, column=mark.column + 1) from exc
        raise ParseError(f"Invalid YAML: {problem}") from exc
    except RecursionError as exc:
        raise ParseError("Invalid YAML: document is nested too deeply") from exc


def compose_yaml(content: Union[str, bytes]) -> Optional[yaml.Node]:
    """Compose the YAML node tree with the same scalar resolution as :func:`load_yaml_document`."""
    return yaml.compose(content, Loader=_JsonCompatibleLoader)


def yaml_key_name(key_node: yaml.Node) -> Optional[str]:
    """JSON spelling of a scalar mapping key node (``yes`` -> ``true``); None for other keys."""
    if not isinstance(key_node, yaml.ScalarNode):
        return None
    if key_node.tag == "tag:yaml.org,2002:str":
        return key_node.value
    loader = _JsonCompatibleLoader("")
    try:
        return _json_key(loader.construct_object(key_node), "")
    except (yaml.YAMLError, ParseError):
        return None
    finally:
        loader.dispose()


def _json_key(key: Any, pointer: str) -> str:
    if isinstance(key, str):
        return key
    if isinstance(key, bool):
        return "true" if key else "false"
    if key is None:
        return "null"
    if isinstance(key, (int, float)):
        return str(key)
    raise ParseError(f"Unsupported mapping key of type {type(key).__name__} at '{pointer or '/'}'")


def _to_json_value(value: Any, pointer: str, ancestors: Tuple[int, ...]) -> JsonValue:
    if value is None or isinstance(value, (bool, str, int)):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ParseError(f"Non-finite number at '{pointer or '/'}' has no JSON equivalent")
        return value
    if isinstance(value, (list, dict)):
        # a YAML alias may point back at one of its own ancestors
        if id(value) in ancestors:
            raise ParseError(f"Recursive alias at '{pointer or '/'}' has no JSON equivalent")
        ancestors = ancestors + (id(value),)
    if isinstance(value, list):
        return [_to_json_value(item, join_pointer(pointer, idx), ancestors) for idx, item in enumerate(value)]
    if isinstance(value, dict):
        result: Dict[str, Any] = {}
        for key, item in value.items():
            name = _json_key(key, pointer)
            result[name] = _to_json_value(item, join_pointer(pointer, name), ancestors)
        return result
    raise ParseError(f"Value of type {type(value).__name__} at '{pointer or '/'}' has no JSON equivalent")


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_integer(value: Any) -> bool:
    """True for ints and for floats without a fractional part."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and value.is_integer()


def json_type(value: Any) -> str:
    """Return the JSON Schema type name of a document value."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if is_integer(value):
        return "integer"
    if isinstance(value, float):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    raise TypeError(f"Not a document value: {type(value).__name__}")


def json_equal(left: Any, right: Any) -> bool:
    """Structural equality: numbers compare by value, object key order is ignored."""
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if is_number(left) and is_number(right):
        return left == right
    if isinstance(left, list) and isinstance(right, list):
        return len(left) == len(right) and all(json_equal(a, b) for a, b in zip(left, right))
    if isinstance(left, dict) and isinstance(right, dict):
        if left.keys() != right.keys():
            return False
        return all(json_equal(item, right[key]) for key, item in left.items())
    if type(left) is not type(right):
        return False
    return left == right
