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

"""JSON/YAML document loader with caching and source maps."""

import logging
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

import yaml

from ...config import validator_config
from ...exceptions import InputError
from ...utils.json_pointer import escape_token
from ...utils.source_location import SourceMap
from ..document import JsonValue, compose_yaml, load_yaml_document, parse_json, yaml_key_name

logger = logging.getLogger(__name__)

YAML_SUFFIXES = (".yaml", ".yml")


def is_yaml_path(path: Union[str, Path]) -> bool:
    return Path(path).suffix.lower() in YAML_SUFFIXES


class DocumentLoader:
    """Reads documents from disk; ``.yaml``/``.yml`` as YAML, everything else as JSON."""

    def __init__(self, cache_enabled: Optional[bool] = None):
        """Initialize the loader.

        Args:
            cache_enabled: Whether to cache parsed files. If None, uses global config.
        """
        self.cache_enabled = cache_enabled if cache_enabled is not None else validator_config.cache_enabled
        self._cache: Dict[Path, JsonValue] = {}
        self._source_cache: Dict[Path, SourceMap] = {}

    @staticmethod
    def build_source_map(content: str) -> SourceMap:
        """Build a mapping from JSON pointers to 1-based line/column.

        This walks PyYAML's node tree (yaml.compose), which also accepts JSON,
        so locations are available without changing the parsed values. Keys
        are spelled the way the parsed document spells them.
        """
        source_map: SourceMap = {}

        try:
            root = compose_yaml(content)
        except (yaml.YAMLError, RecursionError):
            # Parse errors are reported by the parser itself.
            return source_map

        if root is None:
            return source_map

        def _walk(node: yaml.Node, pointer: str, ancestors: Tuple[int, ...]) -> None:
            # PyYAML uses 0-based line/column
            source_map[pointer] = {"line": node.start_mark.line + 1, "column": node.start_mark.column + 1}
            if id(node) in ancestors:
                return
            ancestors = ancestors + (id(node),)

            if isinstance(node, yaml.MappingNode):
                for key_node, value_node in node.value:
                    key = yaml_key_name(key_node)
                    if key is None:
                        continue
                    _walk(value_node, f"{pointer}/{escape_token(key)}", ancestors)
            elif isinstance(node, yaml.SequenceNode):
                for idx, item_node in enumerate(node.value):
                    _walk(item_node, f"{pointer}/{idx}", ancestors)

        try:
            _walk(root, "", ())
        except RecursionError:
            logger.debug("Source map truncated: document is nested too deeply")
        return source_map

    def _read_text(self, path: Path) -> str:
        if not path.exists():
            raise InputError(f"File not found: {path}")
        if not path.is_file():
            raise InputError(f"Path is not a file: {path}")
        try:
            return path.read_text(encoding="utf-8-sig")
        except UnicodeDecodeError as exc:
            raise InputError(f"File is not valid UTF-8: {path}") from exc
        except OSError as exc:
            raise InputError(f"Failed to read file {path}: {exc}") from exc

    def load_string(self, content: str, yaml_syntax: bool = False) -> JsonValue:
        """Parse document content.

        Raises:
            ParseError: If the content is malformed.
        """
        return load_yaml_document(content) if yaml_syntax else parse_json(content)

    def load(self, file_path: Union[str, Path]) -> JsonValue:
        """Load and parse a document file.

        Args:
            file_path: Path to a JSON or YAML file

        Returns:
            Parsed document

        Raises:
            InputError: If the file cannot be read
            ParseError: If the file content is malformed
        """
        path = Path(file_path)

        if self.cache_enabled and path in self._cache:
            logger.debug(f"Loading document from cache: {path}")
            return self._cache[path]

        logger.debug(f"Loading document: {path}")
        document = self.load_string(self._read_text(path), yaml_syntax=is_yaml_path(path))

        if self.cache_enabled:
            self._cache[path] = document
        return document

    def load_with_source(self, file_path: Union[str, Path]) -> Tuple[JsonValue, SourceMap]:
        """Load a document file and return (document, source_map)."""
        path = Path(file_path)

        if self.cache_enabled and path in self._cache and path in self._source_cache:
            logger.debug(f"Loading document (with source) from cache: {path}")
            return self._cache[path], self._source_cache[path]

        logger.debug(f"Loading document (with source): {path}")
        content = self._read_text(path)
        document = self.load_string(content, yaml_syntax=is_yaml_path(path))
        source_map = self.build_source_map(content)

        if self.cache_enabled:
            self._cache[path] = document
            self._source_cache[path] = source_map
        return document, source_map

    def clear_cache(self) -> None:
        """Clear the document cache."""
        self._cache.clear()
        self._source_cache.clear()
        logger.debug("Document cache cleared")


# Global loader instance
document_loader = DocumentLoader()


def load_document(file_path: Union[str, Path]) -> JsonValue:
    """Load a document with the global loader."""
    return document_loader.load(file_path)
