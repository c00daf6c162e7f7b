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

"""Assertion keywords that look at a single value without descending into it.

Each check yields ``(keyword, message)`` pairs; the evaluator attaches the
instance path and schema location.
"""

from __future__ import annotations

import json
import math
from decimal import Decimal, InvalidOperation
from typing import Any, Iterator, Tuple

from ..models.document import is_integer, is_number, json_equal, json_type
from ..models.schema_node import Number, SchemaNode
from .formats import check_format

KeywordFailure = Tuple[str, str]

# Relative tolerance for multipleOf on values that are not exactly representable.
MULTIPLE_OF_EPSILON = 1e-9


def _show(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False)


def _type_matches(type_name: str, value: Any) -> bool:
    if type_name == "integer":
        return is_integer(value)
    if type_name == "number":
        return is_number(value)
    return json_type(value) == type_name


def is_multiple_of(value: Number, divisor: Number) -> bool:
    """True if ``value`` is a multiple of ``divisor`` within a small tolerance."""
    if isinstance(value, int) and isinstance(divisor, int):
        return value % divisor == 0
    try:
        dividend = Decimal(repr(value))
        step = abs(Decimal(repr(divisor)))
        remainder = abs(dividend % step)
        tolerance = step * Decimal(str(MULTIPLE_OF_EPSILON))
        return remainder <= tolerance or step - remainder <= tolerance
    except InvalidOperation:
        # quotient too large for the decimal context
        try:
            quotient = value / divisor
        except OverflowError:
            return False
        if math.isinf(quotient):
            return False
        return abs(quotient - round(quotient)) <= MULTIPLE_OF_EPSILON


def check_type(node: SchemaNode, value: Any) -> Iterator[KeywordFailure]:
    if node.types is None:
        return
    if not any(_type_matches(t, value) for t in node.types):
        expected = " | ".join(node.types) if node.types else "nothing"
        yield "type", f"{_show(value)} is not of type {expected} (got {json_type(value)})"


def check_enum(node: SchemaNode, value: Any) -> Iterator[KeywordFailure]:
    if node.enum is not None and not any(json_equal(value, option) for option in node.enum):
        yield "enum", f"{_show(value)} is not one of {_show(list(node.enum))}"
    if node.const is not None and not json_equal(value, node.const[0]):
        yield "const", f"{_show(value)} is not equal to {_show(node.const[0])}"


def check_numeric(node: SchemaNode, value: Any) -> Iterator[KeywordFailure]:
    if not is_number(value):
        return
    if node.minimum is not None and value < node.minimum:
        yield "minimum", f"{_show(value)} is less than the minimum of {node.minimum}"
    if node.maximum is not None and value > node.maximum:
        yield "maximum", f"{_show(value)} is greater than the maximum of {node.maximum}"
    if node.exclusive_minimum is not None and value <= node.exclusive_minimum:
        yield "exclusiveMinimum", f"{_show(value)} is not greater than {node.exclusive_minimum}"
    if node.exclusive_maximum is not None and value >= node.exclusive_maximum:
        yield "exclusiveMaximum", f"{_show(value)} is not less than {node.exclusive_maximum}"
    if node.multiple_of is not None and not is_multiple_of(value, node.multiple_of):
        yield "multipleOf", f"{_show(value)} is not a multiple of {node.multiple_of}"


def check_string(node: SchemaNode, value: Any, assert_formats: bool = False) -> Iterator[KeywordFailure]:
    if not isinstance(value, str):
        return
    # len() counts code points
    length = len(value)
    if node.min_length is not None and length < node.min_length:
        yield "minLength", f"{_show(value)} is shorter than {node.min_length} characters"
    if node.max_length is not None and length > node.max_length:
        yield "maxLength", f"{_show(value)} is longer than {node.max_length} characters"
    if node.pattern is not None and node.pattern.search(value) is None:
        yield "pattern", f"{_show(value)} does not match pattern '{node.pattern.pattern}'"
    if assert_formats and node.format is not None and check_format(node.format, value) is False:
        yield "format", f"{_show(value)} is not a valid '{node.format}'"


def check_array(node: SchemaNode, value: Any) -> Iterator[KeywordFailure]:
    if not isinstance(value, list):
        return
    if node.min_items is not None and len(value) < node.min_items:
        yield "minItems", f"array has {len(value)} items, fewer than the minimum of {node.min_items}"
    if node.max_items is not None and len(value) > node.max_items:
        yield "maxItems", f"array has {len(value)} items, more than the maximum of {node.max_items}"
    if node.unique_items:
        for i in range(len(value)):
            for j in range(i + 1, len(value)):
                if json_equal(value[i], value[j]):
                    yield "uniqueItems", f"items at index {i} and {j} are equal"
                    return


def check_object(node: SchemaNode, value: Any) -> Iterator[KeywordFailure]:
    if not isinstance(value, dict):
        return
    for name in node.required:
        if name not in value:
            yield "required", f"missing required property '{name}'"
    if node.min_properties is not None and len(value) < node.min_properties:
        yield "minProperties", f"object has {len(value)} properties, fewer than the minimum of {node.min_properties}"
    if node.max_properties is not None and len(value) > node.max_properties:
        yield "maxProperties", f"object has {len(value)} properties, more than the maximum of {node.max_properties}"
    for trigger, dependencies in node.dependent_required.items():
        if trigger not in value:
            continue
        for name in dependencies:
            if name not in value:
                yield "dependentRequired", f"property '{name}' is required when '{trigger}' is present"
