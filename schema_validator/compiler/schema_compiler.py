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

"""Compile a schema document into an arena of :class:`SchemaNode`.

The walk is depth-first. Every object or boolean schema found under an
applicator keyword (or under ``$defs``/``definitions``) gets a node id.
``$ref`` values are collected as placeholders and resolved once the walk is
done, so references may point forwards, backwards or at themselves.
"""

import logging
import re
from collections import deque
from dataclasses import replace
from typing import Any, Deque, Dict, List, Mapping, Optional, Tuple
from urllib.parse import urldefrag, urljoin

from ..config import ValidatorConfig, validator_config
from ..exceptions import (
    CompileError,
    DepthExceededError,
    InvalidKeywordValueError,
    UnresolvedReferenceError,
    UnsupportedSchemaVersionError,
)
from ..models.document import JSON_TYPES, is_integer, is_number
from ..models.schema_node import CompiledSchema, PatternSchema, SchemaNode
from ..utils.json_pointer import PointerLookupError, join_pointer, resolve_pointer, split_pointer, to_pointer
from ..utils.recursion import recursion_headroom
from .draft_version import DRAFT_06, DRAFT_2020_12, DraftCheckResult, check_schema_version, draft_at_least

logger = logging.getLogger(__name__)

_ANCHOR_RE = re.compile(r"[A-Za-z_][-A-Za-z0-9._]*")

# compile_node -> read -> _read_* -> comprehension -> _sub -> compile_node
FRAMES_PER_LEVEL = 6

# Keywords that only carry information for humans or tooling.
ANNOTATION_KEYWORDS = frozenset({
    "$schema", "$id", "$anchor", "$comment", "$vocabulary", "$defs", "definitions",
    "title", "description", "default", "examples", "deprecated", "readOnly", "writeOnly",
    "contentEncoding", "contentMediaType", "contentSchema",
})

ASSERTION_KEYWORDS = frozenset({
    "$ref", "type", "enum", "const",
    "minimum", "maximum", "exclusiveMinimum", "exclusiveMaximum", "multipleOf",
    "minLength", "maxLength", "pattern", "format",
    "minItems", "maxItems", "uniqueItems", "items", "prefixItems", "additionalItems",
    "contains", "minContains", "maxContains",
    "required", "properties", "patternProperties", "additionalProperties",
    "minProperties", "maxProperties", "propertyNames",
    "dependentRequired", "dependentSchemas", "dependencies",
    "allOf", "anyOf", "oneOf", "not", "if", "then", "else",
})


def _location(doc_key: str, pointer: str) -> str:
    return f"{doc_key}#{pointer}"


class _CompileSession:
    """Mutable state of one compilation; discarded once the arena is frozen."""

    def __init__(self, registry: Mapping[str, Any], config: ValidatorConfig):
        self.config = config
        self.registry = registry
        self.documents: Dict[str, Any] = {}
        self.base_uris: Dict[str, str] = {}
        self.aliases: Dict[str, str] = {}
        self.drafts: Dict[str, DraftCheckResult] = {}
        self.nodes: List[Optional[SchemaNode]] = []
        self.locations: Dict[str, int] = {}
        self.anchors: Dict[Tuple[str, str], int] = {}
        self.pending: Deque[Tuple[int, str, str]] = deque()
        self.ref_targets: Dict[int, int] = {}
        self.warnings: List[str] = []

    # ---- documents ---------------------------------------------------------

    def add_document(self, doc_key: str, document: Any) -> None:
        base = ""
        if isinstance(document, dict) and isinstance(document.get("$id"), str):
            base, _ = urldefrag(urljoin(doc_key, document["$id"]) if doc_key else document["$id"])
        self.documents[doc_key] = document
        self.base_uris[doc_key] = base or doc_key
        self.aliases[doc_key] = doc_key
        if base:
            self.aliases[base] = doc_key
        self.drafts[doc_key] = self._check_draft(doc_key, document)

    def _check_draft(self, doc_key: str, document: Any) -> DraftCheckResult:
        raw = document.get("$schema") if isinstance(document, dict) else None
        result = check_schema_version(raw)
        if not result.supported:
            if self.config.strict:
                raise UnsupportedSchemaVersionError(str(raw), path=_location(doc_key, "/$schema"))
            logger.warning(result.message)
            self.warnings.append(result.message)
        else:
            logger.debug(result.message)
        return result

    def compile_document_root(self, doc_key: str) -> int:
        location = _location(doc_key, "")
        if location in self.locations:
            return self.locations[location]
        document = self.documents[doc_key]
        if not isinstance(document, (dict, bool)):
            raise CompileError(
                f"Schema root must be an object or boolean, got {type(document).__name__}",
                path=location,
            )
        return self.compile_node(document, doc_key, "", depth=0)

    # ---- walk --------------------------------------------------------------

    def compile_node(
        self, raw: Any, doc_key: str, pointer: str, depth: int, keyword: str = "", owner: Optional[str] = None
    ) -> int:
        location = _location(doc_key, pointer)
        if location in self.locations:
            return self.locations[location]

        if not isinstance(raw, (dict, bool)):
            raise InvalidKeywordValueError(owner or location, keyword or "$ref", "subschema must be an object or boolean")

        if depth > self.config.max_depth:
            raise DepthExceededError(self.config.max_depth, path=location)

        node_id = len(self.nodes)
        self.nodes.append(None)
        self.locations[location] = node_id

        if isinstance(raw, bool):
            self.nodes[node_id] = SchemaNode(node_id=node_id, source_path=location, boolean=raw)
            return node_id

        reader = _KeywordReader(self, raw, doc_key, pointer, depth)
        self.nodes[node_id] = SchemaNode(node_id=node_id, source_path=location, **reader.read(node_id))
        return node_id

    # ---- references --------------------------------------------------------

    def resolve_pending(self) -> None:
        while self.pending:
            node_id, ref, doc_key = self.pending.popleft()
            target = self.resolve_reference(ref, doc_key)
            logger.debug(f"Resolved $ref '{ref}' at {self.nodes[node_id].source_path} -> node {target}")
            self.ref_targets[node_id] = target

    def resolve_reference(self, ref: str, doc_key: str) -> int:
        base = self.base_uris.get(doc_key, "")
        full = urljoin(base, ref) if base else ref
        uri, fragment = urldefrag(full)

        if not uri or uri == base:
            target_key = doc_key
        else:
            target_key = self.aliases.get(uri)
            if target_key is None:
                if uri not in self.registry:
                    raise UnresolvedReferenceError(ref, path=_location(doc_key, ""))
                self.add_document(uri, self.registry[uri])
                target_key = uri
            self.compile_document_root(target_key)

        if fragment and not fragment.startswith("/"):
            anchor_id = self.anchors.get((target_key, fragment))
            if anchor_id is None:
                raise UnresolvedReferenceError(ref)
            return anchor_id

        try:
            tokens = split_pointer("#" + fragment)
        except PointerLookupError as exc:
            raise UnresolvedReferenceError(ref) from exc
        pointer = to_pointer(tokens)
        location = _location(target_key, pointer)
        if location in self.locations:
            return self.locations[location]

        try:
            target = resolve_pointer(self.documents[target_key], tokens)
        except PointerLookupError as exc:
            raise UnresolvedReferenceError(ref) from exc
        if not isinstance(target, (dict, bool)):
            raise UnresolvedReferenceError(ref)

        # A location that exists but was never walked as a schema.
        logger.debug(f"Compiling $ref target on demand: {location}")
        return self.compile_node(target, target_key, pointer, depth=0, keyword="$ref")

    def freeze(self) -> CompiledSchema:
        nodes = []
        for node in self.nodes:
            if node.node_id in self.ref_targets:
                node = replace(node, ref_target=self.ref_targets[node.node_id])
            nodes.append(node)
        return CompiledSchema(
            nodes=tuple(nodes),
            draft=self.drafts[""].draft,
            locations=dict(self.locations),
            warnings=tuple(self.warnings),
        )


class _KeywordReader:
    """Validates and extracts the recognized keywords of one schema object."""

    def __init__(self, session: _CompileSession, schema: Dict[str, Any], doc_key: str, pointer: str, depth: int):
        self.session = session
        self.schema = schema
        self.doc_key = doc_key
        self.pointer = pointer
        self.depth = depth
        self.location = _location(doc_key, pointer)
        self.draft = session.drafts[doc_key]

    def _invalid(self, keyword: str, reason: str) -> InvalidKeywordValueError:
        return InvalidKeywordValueError(self.location, keyword, reason)

    def _sub(self, raw: Any, keyword: str, *tokens: Any) -> int:
        return self.session.compile_node(
            raw, self.doc_key, join_pointer(self.pointer, keyword, *tokens), self.depth + 1,
            keyword=keyword, owner=self.location,
        )

    # ---- typed getters -----------------------------------------------------

    def _number(self, keyword: str) -> Optional[Any]:
        if keyword not in self.schema:
            return None
        value = self.schema[keyword]
        if not is_number(value):
            raise self._invalid(keyword, "expected a number")
        return value

    def _count(self, keyword: str) -> Optional[int]:
        if keyword not in self.schema:
            return None
        value = self.schema[keyword]
        if not is_integer(value) or value < 0:
            raise self._invalid(keyword, "expected a non-negative integer")
        return int(value)

    def _bool(self, keyword: str) -> bool:
        value = self.schema.get(keyword, False)
        if not isinstance(value, bool):
            raise self._invalid(keyword, "expected a boolean")
        return value

    def _mapping(self, keyword: str) -> Dict[str, Any]:
        value = self.schema.get(keyword, {})
        if not isinstance(value, dict):
            raise self._invalid(keyword, "expected an object")
        return value

    def _string_list(self, keyword: str, value: Any) -> Tuple[str, ...]:
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise self._invalid(keyword, "expected an array of strings")
        return tuple(value)

    def _schema_list(self, keyword: str) -> Tuple[int, ...]:
        if keyword not in self.schema:
            return ()
        value = self.schema[keyword]
        if not isinstance(value, list) or not value:
            raise self._invalid(keyword, "expected a non-empty array of schemas")
        return tuple(self._sub(item, keyword, idx) for idx, item in enumerate(value))

    def _optional_schema(self, keyword: str) -> Optional[int]:
        if keyword not in self.schema:
            return None
        return self._sub(self.schema[keyword], keyword)

    def _regex(self, keyword: str, source: Any) -> "re.Pattern[str]":
        if not isinstance(source, str):
            raise self._invalid(keyword, "expected a regular expression string")
        try:
            return re.compile(source)
        except re.error as exc:
            raise self._invalid(keyword, f"invalid regular expression '{source}': {exc}") from exc

    # ---- keyword groups ----------------------------------------------------

    def read(self, node_id: int) -> Dict[str, Any]:
        fields: Dict[str, Any] = {}
        self._read_identity(node_id, fields)
        self._read_generic(fields)
        self._read_numeric(fields)
        self._read_string(fields)
        self._read_array(fields)
        self._read_object(fields)
        self._read_composition(fields)
        self._read_definitions()
        fields["annotations"] = self._annotations()
        return fields

    def _read_identity(self, node_id: int, fields: Dict[str, Any]) -> None:
        schema = self.schema
        if "$ref" in schema:
            ref = schema["$ref"]
            if not isinstance(ref, str):
                raise self._invalid("$ref", "expected a string")
            fields["ref"] = ref
            self.session.pending.append((node_id, ref, self.doc_key))

        anchor = schema.get("$anchor")
        if anchor is not None:
            if not isinstance(anchor, str) or not _ANCHOR_RE.fullmatch(anchor):
                raise self._invalid("$anchor", "expected a plain-name anchor")
            self.session.anchors[(self.doc_key, anchor)] = node_id

        # draft-06/07 style "$id": "#name" anchors
        schema_id = schema.get("$id")
        if isinstance(schema_id, str) and schema_id.startswith("#") and len(schema_id) > 1:
            self.session.anchors[(self.doc_key, schema_id[1:])] = node_id

    def _read_generic(self, fields: Dict[str, Any]) -> None:
        schema = self.schema
        if "type" in schema:
            raw = schema["type"]
            types = (raw,) if isinstance(raw, str) else raw
            if not isinstance(types, list) and not isinstance(types, tuple):
                raise self._invalid("type", "expected a type name or an array of type names")
            unknown = [t for t in types if t not in JSON_TYPES]
            if unknown:
                raise self._invalid("type", f"unknown type(s) {unknown}; expected one of {list(JSON_TYPES)}")
            fields["types"] = tuple(types)

        if "enum" in schema:
            if not isinstance(schema["enum"], list):
                raise self._invalid("enum", "expected an array")
            fields["enum"] = tuple(schema["enum"])

        if "const" in schema:
            fields["const"] = (schema["const"],)

    def _read_numeric(self, fields: Dict[str, Any]) -> None:
        schema = self.schema
        fields["minimum"] = self._number("minimum")
        fields["maximum"] = self._number("maximum")

        for keyword, bound, target in (
            ("exclusiveMinimum", "minimum", "exclusive_minimum"),
            ("exclusiveMaximum", "maximum", "exclusive_maximum"),
        ):
            raw = schema.get(keyword)
            if isinstance(raw, bool):
                # draft-04: a boolean that turns the sibling bound exclusive
                if self.draft.declared and draft_at_least(self.draft.draft, DRAFT_06):
                    raise self._invalid(keyword, "boolean form is only valid in draft-04")
                if raw and fields[bound] is not None:
                    fields[target] = fields[bound]
                    fields[bound] = None
            else:
                fields[target] = self._number(keyword)

        multiple_of = self._number("multipleOf")
        if multiple_of is not None and multiple_of <= 0:
            raise self._invalid("multipleOf", "expected a number greater than 0")
        fields["multiple_of"] = multiple_of

    def _read_string(self, fields: Dict[str, Any]) -> None:
        fields["min_length"] = self._count("minLength")
        fields["max_length"] = self._count("maxLength")
        if "pattern" in self.schema:
            fields["pattern"] = self._regex("pattern", self.schema["pattern"])
        if "format" in self.schema:
            if not isinstance(self.schema["format"], str):
                raise self._invalid("format", "expected a string")
            fields["format"] = self.schema["format"]

    def _read_array(self, fields: Dict[str, Any]) -> None:
        schema = self.schema
        fields["min_items"] = self._count("minItems")
        fields["max_items"] = self._count("maxItems")
        fields["unique_items"] = self._bool("uniqueItems")

        items = schema.get("items")
        latest = not self.draft.declared or self.draft.draft == DRAFT_2020_12
        legacy = not self.draft.declared or self.draft.draft != DRAFT_2020_12

        if isinstance(items, list):
            if not legacy:
                raise self._invalid("items", "array form is replaced by 'prefixItems' in draft 2020-12")
            if "prefixItems" in schema:
                raise self._invalid("items", "array form cannot be combined with 'prefixItems'")
            fields["prefix_items"] = tuple(self._sub(item, "items", idx) for idx, item in enumerate(items))
            fields["prefix_items_keyword"] = "items"
            if "additionalItems" in schema:
                fields["items"] = self._sub(schema["additionalItems"], "additionalItems")
                fields["items_keyword"] = "additionalItems"
        else:
            if latest and "prefixItems" in schema:
                fields["prefix_items"] = self._schema_list("prefixItems")
            if "items" in schema:
                fields["items"] = self._sub(items, "items")

        fields["contains"] = self._optional_schema("contains")
        fields["min_contains"] = self._count("minContains")
        fields["max_contains"] = self._count("maxContains")

    def _read_object(self, fields: Dict[str, Any]) -> None:
        schema = self.schema
        if "required" in schema:
            fields["required"] = self._string_list("required", schema["required"])

        fields["properties"] = {
            name: self._sub(sub, "properties", name) for name, sub in self._mapping("properties").items()
        }
        fields["pattern_properties"] = tuple(
            PatternSchema(
                source=source,
                matcher=self._regex("patternProperties", source),
                node_id=self._sub(sub, "patternProperties", source),
            )
            for source, sub in self._mapping("patternProperties").items()
        )
        fields["additional_properties"] = self._optional_schema("additionalProperties")
        fields["min_properties"] = self._count("minProperties")
        fields["max_properties"] = self._count("maxProperties")
        fields["property_names"] = self._optional_schema("propertyNames")

        dependent_required: Dict[str, Tuple[str, ...]] = {
            name: self._string_list("dependentRequired", deps)
            for name, deps in self._mapping("dependentRequired").items()
        }
        dependent_schemas: Dict[str, int] = {
            name: self._sub(sub, "dependentSchemas", name)
            for name, sub in self._mapping("dependentSchemas").items()
        }
        # draft-07 "dependencies" mixes both forms
        for name, dep in self._mapping("dependencies").items():
            if isinstance(dep, list):
                dependent_required[name] = self._string_list("dependencies", dep)
            else:
                dependent_schemas[name] = self._sub(dep, "dependencies", name)
        fields["dependent_required"] = dependent_required
        fields["dependent_schemas"] = dependent_schemas

    def _read_composition(self, fields: Dict[str, Any]) -> None:
        fields["all_of"] = self._schema_list("allOf")
        fields["any_of"] = self._schema_list("anyOf")
        fields["one_of"] = self._schema_list("oneOf")
        fields["not_"] = self._optional_schema("not")
        fields["if_"] = self._optional_schema("if")
        fields["then"] = self._optional_schema("then")
        fields["else_"] = self._optional_schema("else")

    def _read_definitions(self) -> None:
        for keyword in ("$defs", "definitions"):
            for name, sub in self._mapping(keyword).items():
                self._sub(sub, keyword, name)

    def _annotations(self) -> Dict[str, Any]:
        annotations = {}
        for keyword, value in self.schema.items():
            if keyword in ASSERTION_KEYWORDS:
                continue
            if keyword not in ANNOTATION_KEYWORDS and self.session.config.strict:
                message = f"Unknown keyword '{keyword}' at {self.location} is ignored"
                logger.warning(message)
                self.session.warnings.append(message)
            annotations[keyword] = value
        return annotations


class SchemaCompiler:
    """Compiles schema documents, resolving references against a registry.

    The registry maps document URIs to already-parsed schema documents. The
    compiler never reads files or the network; hosts preload everything a
    schema may reference.
    """

    def __init__(self, config: Optional[ValidatorConfig] = None, registry: Optional[Mapping[str, Any]] = None):
        self.config = config or validator_config
        self._registry: Dict[str, Any] = {}
        for uri, document in (registry or {}).items():
            self.add_schema(document, uri)

    def add_schema(self, document: Any, uri: Optional[str] = None) -> str:
        """Register a document for non-local ``$ref`` resolution.

        Args:
            document: Parsed schema document
            uri: Key to register under; defaults to the document's ``$id``

        Returns:
            The normalized URI the document was registered under
        """
        if uri is None:
            uri = document.get("$id") if isinstance(document, dict) else None
        if not isinstance(uri, str) or not uri:
            raise CompileError("Registered schema needs a URI or an '$id'")
        key, _ = urldefrag(uri)
        self._registry[key] = document
        logger.debug(f"Registered schema document: {key}")
        return key

    @property
    def registry(self) -> Mapping[str, Any]:
        return dict(self._registry)

    def compile(self, schema_doc: Any) -> CompiledSchema:
        """Compile ``schema_doc``.

        Raises:
            CompileError: For unresolved references, invalid keyword values
                and (in strict mode) unsupported drafts.
            DepthExceededError: If the schema nests deeper than ``max_depth``.
        """
        session = _CompileSession(self._registry, self.config)
        session.add_document("", schema_doc)
        try:
            with recursion_headroom(self.config.max_depth, FRAMES_PER_LEVEL):
                session.compile_document_root("")
                session.resolve_pending()
        except RecursionError as exc:
            # interpreter stack ran out before max_depth was reached
            raise DepthExceededError(self.config.max_depth) from exc
        compiled = session.freeze()
        logger.debug(
            f"Compiled schema: {len(compiled)} nodes, draft {compiled.draft}, "
            f"{len(session.ref_targets)} references"
        )
        return compiled


def compile_schema(
    schema_doc: Any,
    *,
    registry: Optional[Mapping[str, Any]] = None,
    config: Optional[ValidatorConfig] = None,
) -> CompiledSchema:
    """Compile a schema document with a throwaway :class:`SchemaCompiler`."""
    return SchemaCompiler(config=config, registry=registry).compile(schema_doc)
