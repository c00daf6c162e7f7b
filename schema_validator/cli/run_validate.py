#!/usr/bin/env python3
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

"""CLI entry point: validate one data file against one schema file."""

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from ..compiler import SchemaCompiler
from ..config import ValidatorConfig, validator_config
from ..evaluator import Validator
from ..exceptions import CompileError, DepthExceededError, InputError
from ..models.parsing import DocumentLoader
from ..reporter import ValidationReport, format_errors, format_github_annotations, report_to_dict
from ..utils.source_location import format_source, lookup_source

logger = logging.getLogger(__name__)

EXIT_VALID = 0
EXIT_INVALID = 1
EXIT_FAILURE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='schema-validator',
        description='Validate a JSON document against a JSON Schema (JSON or YAML)',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='Exit status: 0 valid, 1 invalid, 2 unreadable input or unusable schema.',
    )
    parser.add_argument('data', help='Data document to validate')
    parser.add_argument('schema', help='Schema document (.json, .yaml or .yml)')
    parser.add_argument(
        '--ref',
        action='append',
        default=[],
        metavar='FILE',
        help='Additional schema document that $ref may point to (repeatable)',
    )
    parser.add_argument(
        '--format',
        choices=['human', 'json', 'github-actions'],
        default='human',
        help='Output format (default: human)',
    )
    parser.add_argument('--strict', action='store_true', help='Fail on unsupported $schema drafts')
    parser.add_argument('--assert-formats', action='store_true', help='Treat "format" as an assertion')
    parser.add_argument('--max-depth', type=int, default=None, help='Maximum schema/evaluation depth')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')
    return parser


def _config_from_args(args: argparse.Namespace) -> ValidatorConfig:
    config = replace(
        validator_config,
        strict=args.strict or validator_config.strict,
        assert_formats=args.assert_formats or validator_config.assert_formats,
    )
    if args.max_depth is not None:
        config = replace(config, max_depth=args.max_depth)
    if args.verbose:
        config = replace(config, log_level='DEBUG')
    if args.format != 'human':
        # stdout carries the report only
        config = replace(config, print_level='DEBUG')
    return config


def _reference_keys(path: Path, document) -> List[str]:
    keys = [str(path), path.name, path.resolve().as_uri()]
    if isinstance(document, dict) and isinstance(document.get('$id'), str):
        keys.append(document['$id'])
    return keys


def _fail(message: str) -> int:
    print(f"Error: {message}", file=sys.stderr)
    return EXIT_FAILURE


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the validator CLI."""
    args = build_parser().parse_args(argv)
    config = _config_from_args(args)
    config.set_logging()

    data_path = Path(args.data)
    schema_path = Path(args.schema)
    loader = DocumentLoader(cache_enabled=config.cache_enabled)
    logger.debug(f"Validating {data_path} against {schema_path}")

    try:
        data, data_map = loader.load_with_source(data_path)
    except InputError as exc:
        return _fail(f"cannot load data {data_path}: {exc}")
    try:
        schema_doc, schema_map = loader.load_with_source(schema_path)
    except InputError as exc:
        return _fail(f"cannot load schema {schema_path}: {exc}")

    compiler = SchemaCompiler(config=config)
    for ref in args.ref:
        ref_path = Path(ref)
        try:
            ref_doc = loader.load(ref_path)
        except InputError as exc:
            return _fail(f"cannot load referenced schema {ref_path}: {exc}")
        for key in _reference_keys(ref_path, ref_doc):
            compiler.add_schema(ref_doc, key)

    try:
        compiled = compiler.compile(schema_doc)
    except CompileError as exc:
        pointer = exc.path.split('#', 1)[1] if exc.path.startswith('#') else None
        loc = lookup_source(schema_map, pointer, file_path=schema_path) if pointer is not None else None
        return _fail(f"invalid schema {schema_path}: {exc}{format_source(loc)}")
    except DepthExceededError as exc:
        return _fail(f"invalid schema {schema_path}: {exc}")

    try:
        result = Validator(compiled, config).validate(data)
    except DepthExceededError as exc:
        return _fail(f"cannot validate {data_path}: {exc}")

    report = ValidationReport(data_path, schema_path, result, source_map=data_map)
    for warning in compiled.warnings:
        report.add_warning(warning)

    if args.format == 'json':
        print(json.dumps(report_to_dict(report), indent=2, ensure_ascii=False))
    elif args.format == 'github-actions':
        for line in format_github_annotations(report):
            print(line)
    elif report.valid:
        print(f"{data_path} conforms to {schema_path}")
    else:
        print(f"{data_path} does not conform to {schema_path}:", file=sys.stderr)
        for line in format_errors(result):
            print(f"  {line}", file=sys.stderr)

    return EXIT_VALID if report.valid else EXIT_INVALID


def run() -> None:
    sys.exit(main())


if __name__ == '__main__':
    run()
