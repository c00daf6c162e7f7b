#!/usr/bin/env python3

import argparse
import json
import sys
from pathlib import Path
from typing import List


SCRIPT_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = SCRIPT_DIR.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from schema_validator import SchemaValidatorError, compile_schema, validator_config  # noqa: E402
from schema_validator.batch import find_documents, validate_files  # noqa: E402
from schema_validator.models.parsing import DocumentLoader  # noqa: E402
from schema_validator.reporter import format_errors, format_github_annotations, report_to_dict  # noqa: E402


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Validate every JSON/YAML document under the given paths against one schema",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("schema", help="Schema document")
    parser.add_argument(
        "paths",
        nargs="*",
        default=["."],
        help="Files or directories to validate (default: current directory)",
    )
    parser.add_argument(
        "--format",
        choices=["human", "json", "github-actions"],
        default="human",
        help="Output format (default: human)",
    )

    args = parser.parse_args()
    validator_config.set_logging()

    schema_path = Path(args.schema).resolve()
    loader = DocumentLoader()
    try:
        compiled = compile_schema(loader.load(schema_path))
    except SchemaValidatorError as exc:
        print(f"Error: invalid schema {schema_path}: {exc}", file=sys.stderr)
        sys.exit(2)

    files: List[Path] = [f for f in find_documents(Path(p).resolve() for p in args.paths) if f != schema_path]
    if not files:
        print("No JSON/YAML documents found.", file=sys.stderr)
        sys.exit(2)

    reports = validate_files(files, compiled, schema_path, loader=loader)

    if args.format == "json":
        output = {
            "files": len(reports),
            "invalid": sum(1 for r in reports if not r.valid),
            "results": [report_to_dict(r) for r in reports],
        }
        print(json.dumps(output, indent=2))
    elif args.format == "github-actions":
        for report in reports:
            for line in format_github_annotations(report):
                print(line)
    else:
        for report in reports:
            if not report.valid:
                print(f"\n{report.data_path}:")
                for line in format_errors(report.result):
                    print(f"  {line}")

    invalid = sum(1 for r in reports if not r.valid)
    print(f"\n{len(reports)} file(s) checked, {invalid} invalid.", file=sys.stderr)
    sys.exit(1 if invalid else 0)


if __name__ == "__main__":
    main()
