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

"""Evaluate a compiled schema against a document.

Evaluation is a recursion over ``(node, value, path)``. Every applicable
keyword of a node is checked and all failures are collected; nothing stops at
the first error. The validator holds no per-call state, so one instance can
serve concurrent callers.
"""

import logging
from typing import Any, Iterator, List, Optional, Tuple

from ..config import ValidatorConfig, validator_config
from ..exceptions import DepthExceededError
from ..models.result import ValidationError, ValidationResult
from ..models.schema_node import ROOT_NODE_ID, CompiledSchema, SchemaNode
from ..utils.json_pointer import PathSegment, to_pointer
from ..utils.recursion import recursion_headroom
from .keywords import check_array, check_enum, check_numeric, check_object, check_string, check_type

logger = logging.getLogger(__name__)

Path = Tuple[PathSegment, ...]

# _evaluate -> _evaluate_object -> _descend -> _evaluate is the longest chain per level
FRAMES_PER_LEVEL = 4


class Validator:
    """Validates documents against one compiled schema."""

    def __init__(
        self,
        schema: CompiledSchema,
        config: Optional[ValidatorConfig] = None,
        *,
        max_depth: Optional[int] = None,
        assert_formats: Optional[bool] = None,
    ):
        config = config or validator_config
        self.schema = schema
        self.max_depth = config.max_depth if max_depth is None else max_depth
        self.assert_formats = config.assert_formats if assert_formats is None else assert_formats

    def validate(self, value: Any) -> ValidationResult:
        """Validate ``value`` and return every failure.

        Raises:
            DepthExceededError: If evaluation nests deeper than ``max_depth``.
        """
        try:
            with recursion_headroom(self.max_depth, FRAMES_PER_LEVEL):
                errors = self._evaluate(ROOT_NODE_ID, value, (), 0)
        except RecursionError as exc:
            # interpreter stack ran out before max_depth was reached
            raise DepthExceededError(self.max_depth) from exc
        logger.debug(f"Validation finished with {len(errors)} error(s)")
        return ValidationResult(errors=tuple(errors))

    def is_valid(self, value: Any) -> bool:
        return self.validate(value).valid

    def iter_errors(self, value: Any) -> Iterator[ValidationError]:
        yield from self.validate(value).errors

    # ---- recursion ---------------------------------------------------------

    def _evaluate(self, node_id: int, value: Any, path: Path, depth: int) -> List[ValidationError]:
        if depth > self.max_depth:
            raise DepthExceededError(self.max_depth, path=to_pointer(path))

        node = self.schema.node(node_id)
        if node.boolean is not None:
            if node.boolean:
                return []
            return [ValidationError(path, "false", "no value is allowed by this schema", node.source_path)]

        errors: List[ValidationError] = []

        if node.ref_target is not None:
            errors.extend(self._evaluate(node.ref_target, value, path, depth + 1))

        for check in (check_type, check_enum, check_numeric, check_array, check_object):
            for keyword, message in check(node, value):
                errors.append(ValidationError(path, keyword, message, node.keyword_path(keyword)))
        for keyword, message in check_string(node, value, self.assert_formats):
            errors.append(ValidationError(path, keyword, message, node.keyword_path(keyword)))

        if isinstance(value, list):
            errors.extend(self._evaluate_array(node, value, path, depth))
        elif isinstance(value, dict):
            errors.extend(self._evaluate_object(node, value, path, depth))

        errors.extend(self._evaluate_composition(node, value, path, depth))
        return errors

    def _descend(
        self,
        node: SchemaNode,
        keyword: str,
        child_id: int,
        value: Any,
        path: Path,
        depth: int,
        message: Optional[str] = None,
    ) -> List[ValidationError]:
        """Apply a subschema, naming the applicator when the subschema is ``false``."""
        child = self.schema.node(child_id)
        if child.boolean is False:
            return [ValidationError(
                path,
                keyword,
                message or f"value is not allowed by '{keyword}'",
                node.keyword_path(keyword),
            )]
        return self._evaluate(child_id, value, path, depth + 1)

    def _evaluate_array(self, node: SchemaNode, value: list, path: Path, depth: int) -> List[ValidationError]:
        errors: List[ValidationError] = []
        for idx, item in enumerate(value):
            item_path = path + (idx,)
            if idx < len(node.prefix_items):
                errors.extend(self._descend(node, node.prefix_items_keyword, node.prefix_items[idx], item, item_path, depth))
            elif node.items is not None:
                errors.extend(self._descend(
                    node, node.items_keyword, node.items, item, item_path, depth,
                    message=f"additional item at index {idx} is not allowed",
                ))

        if node.contains is not None:
            matches = sum(
                1 for idx, item in enumerate(value)
                if not self._evaluate(node.contains, item, path + (idx,), depth + 1)
            )
            if node.min_contains is None and matches < 1:
                errors.append(ValidationError(
                    path, "contains", "no item matches the 'contains' schema", node.keyword_path("contains"),
                ))
            elif node.min_contains is not None and matches < node.min_contains:
                errors.append(ValidationError(
                    path, "minContains",
                    f"{matches} item(s) match the 'contains' schema, fewer than {node.min_contains}",
                    node.keyword_path("minContains"),
                ))
            if node.max_contains is not None and matches > node.max_contains:
                errors.append(ValidationError(
                    path, "maxContains",
                    f"{matches} item(s) match the 'contains' schema, more than {node.max_contains}",
                    node.keyword_path("maxContains"),
                ))
        return errors

    def _evaluate_object(self, node: SchemaNode, value: dict, path: Path, depth: int) -> List[ValidationError]:
        errors: List[ValidationError] = []
        for key, item in value.items():
            item_path = path + (key,)
            covered = False
            if key in node.properties:
                covered = True
                errors.extend(self._descend(node, "properties", node.properties[key], item, item_path, depth))
            for entry in node.pattern_properties:
                if entry.matcher.search(key):
                    covered = True
                    errors.extend(self._descend(node, "patternProperties", entry.node_id, item, item_path, depth))
            if not covered and node.additional_properties is not None:
                errors.extend(self._descend(
                    node, "additionalProperties", node.additional_properties, item, item_path, depth,
                    message=f"additional property '{key}' is not allowed",
                ))

        if node.property_names is not None:
            for key in value:
                errors.extend(self._descend(
                    node, "propertyNames", node.property_names, key, path, depth,
                    message=f"property name '{key}' is not allowed",
                ))

        for trigger, dependent_id in node.dependent_schemas.items():
            if trigger in value:
                errors.extend(self._descend(
                    node, "dependentSchemas", dependent_id, value, path, depth,
                    message=f"property '{trigger}' is not allowed",
                ))
        return errors

    def _evaluate_composition(self, node: SchemaNode, value: Any, path: Path, depth: int) -> List[ValidationError]:
        errors: List[ValidationError] = []

        for sub_id in node.all_of:
            errors.extend(self._descend(node, "allOf", sub_id, value, path, depth))

        if node.any_of:
            failures: List[List[ValidationError]] = []
            for sub_id in node.any_of:
                sub_errors = self._evaluate(sub_id, value, path, depth + 1)
                if not sub_errors:
                    failures = []
                    break
                failures.append(sub_errors)
            if failures:
                errors.append(ValidationError(
                    path, "anyOf",
                    f"value does not match any of the {len(node.any_of)} subschemas",
                    node.keyword_path("anyOf"),
                ))
                errors.extend(_closest_branch(failures))

        if node.one_of:
            outcomes = [self._evaluate(sub_id, value, path, depth + 1) for sub_id in node.one_of]
            matched = [idx for idx, sub_errors in enumerate(outcomes) if not sub_errors]
            if len(matched) != 1:
                detail = f" (indices {matched})" if matched else ""
                errors.append(ValidationError(
                    path, "oneOf",
                    f"value matches {len(matched)} of {len(node.one_of)} subschemas{detail}, expected exactly one",
                    node.keyword_path("oneOf"),
                ))
                if not matched:
                    errors.extend(_closest_branch(outcomes))

        if node.not_ is not None and not self._evaluate(node.not_, value, path, depth + 1):
            errors.append(ValidationError(
                path, "not", "value must not match the 'not' schema", node.keyword_path("not"),
            ))

        if node.if_ is not None:
            # only pass/fail of "if" matters; its errors are discarded
            passed = not self._evaluate(node.if_, value, path, depth + 1)
            keyword, branch = ("then", node.then) if passed else ("else", node.else_)
            if branch is not None:
                errors.extend(self._descend(node, keyword, branch, value, path, depth))

        return errors


def _closest_branch(failures: List[List[ValidationError]]) -> List[ValidationError]:
    """Pick the failing branch with the fewest errors; the first one on ties."""
    return min(failures, key=len)


def validate(schema: CompiledSchema, value: Any, *, config: Optional[ValidatorConfig] = None) -> ValidationResult:
    """Validate ``value`` against ``schema`` with a throwaway :class:`Validator`."""
    return Validator(schema, config).validate(value)
