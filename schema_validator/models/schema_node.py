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

"""Compiled schema representation.

A compiled schema is an arena: every schema location becomes one
:class:`SchemaNode` stored in a tuple, and nodes refer to each other by index.
``$ref`` targets are indices too, which lets mutually recursive schemas exist
without ownership cycles.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Pattern, Tuple, Union

Number = Union[int, float]

ROOT_NODE_ID = 0


@dataclass(frozen=True)
class PatternSchema:
    """A ``patternProperties`` entry with its compiled matcher."""

    source: str
    matcher: Pattern[str]
    node_id: int


@dataclass(frozen=True)
class SchemaNode:
    node_id: int
    source_path: str

    # true/false schemas
    boolean: Optional[bool] = None

    # $ref placeholder and its resolved arena index
    ref: Optional[str] = None
    ref_target: Optional[int] = None

    # generic
    types: Optional[Tuple[str, ...]] = None
    enum: Optional[Tuple[Any, ...]] = None
    const: Optional[Tuple[Any]] = None  # 1-tuple so that `const: null` is representable

    # numbers
    minimum: Optional[Number] = None
    maximum: Optional[Number] = None
    exclusive_minimum: Optional[Number] = None
    exclusive_maximum: Optional[Number] = None
    multiple_of: Optional[Number] = None

    # strings
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    pattern: Optional[Pattern[str]] = None
    format: Optional[str] = None

    # arrays
    min_items: Optional[int] = None
    max_items: Optional[int] = None
    unique_items: bool = False
    prefix_items: Tuple[int, ...] = ()
    prefix_items_keyword: str = "prefixItems"
    items: Optional[int] = None
    items_keyword: str = "items"
    contains: Optional[int] = None
    min_contains: Optional[int] = None
    max_contains: Optional[int] = None

    # objects
    required: Tuple[str, ...] = ()
    properties: Mapping[str, int] = field(default_factory=dict)
    pattern_properties: Tuple[PatternSchema, ...] = ()
    additional_properties: Optional[int] = None
    min_properties: Optional[int] = None
    max_properties: Optional[int] = None
    property_names: Optional[int] = None
    dependent_required: Mapping[str, Tuple[str, ...]] = field(default_factory=dict)
    dependent_schemas: Mapping[str, int] = field(default_factory=dict)

    # composition and conditionals
    all_of: Tuple[int, ...] = ()
    any_of: Tuple[int, ...] = ()
    one_of: Tuple[int, ...] = ()
    not_: Optional[int] = None
    if_: Optional[int] = None
    then: Optional[int] = None
    else_: Optional[int] = None

    # keywords the evaluator does not act on
    annotations: Mapping[str, Any] = field(default_factory=dict)

    def keyword_path(self, keyword: str) -> str:
        return f"{self.source_path}/{keyword}"


@dataclass(frozen=True)
class CompiledSchema:
    """Immutable, fully resolved schema ready for repeated evaluation."""

    nodes: Tuple[SchemaNode, ...]
    draft: str
    locations: Mapping[str, int] = field(default_factory=dict)
    warnings: Tuple[str, ...] = ()

    @property
    def root(self) -> SchemaNode:
        return self.nodes[ROOT_NODE_ID]

    def node(self, node_id: int) -> SchemaNode:
        return self.nodes[node_id]

    def node_at(self, location: str) -> Optional[SchemaNode]:
        """Look a node up by its schema location (e.g. ``#/$defs/item``)."""
        node_id = self.locations.get(location)
        return None if node_id is None else self.nodes[node_id]

    def __len__(self) -> int:
        return len(self.nodes)

    def describe(self) -> Dict[str, Any]:
        return {
            "draft": self.draft,
            "nodes": len(self.nodes),
            "references": sum(1 for n in self.nodes if n.ref is not None),
            "warnings": list(self.warnings),
        }
