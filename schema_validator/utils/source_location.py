from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

SourceMap = Dict[str, Dict[str, int]]


@dataclass(frozen=True)
class SourceLocation:
    file_path: Optional[Path] = None
    pointer: Optional[str] = None
    line: Optional[int] = None  # 1-based
    column: Optional[int] = None  # 1-based


def lookup_source(
    source_map: Optional[SourceMap],
    pointer: Optional[str],
    file_path: Optional[Path] = None,
) -> SourceLocation:
    """Find the line/column for ``pointer``.

    Falls back to the closest recorded ancestor, so a missing property still
    points at the object that should have contained it.
    """
    if not source_map or pointer is None:
        return SourceLocation(file_path=file_path, pointer=pointer)

    candidate = pointer
    while True:
        entry = source_map.get(candidate)
        if entry:
            return SourceLocation(
                file_path=file_path,
                pointer=pointer,
                line=entry.get("line"),
                column=entry.get("column"),
            )
        if not candidate:
            break
        candidate = candidate.rsplit("/", 1)[0]

    return SourceLocation(file_path=file_path, pointer=pointer)


def format_source(loc: Optional[SourceLocation]) -> str:
    if not loc:
        return ""

    parts = []
    if loc.file_path is not None:
        if loc.line is not None and loc.column is not None:
            parts.append(f"source= {loc.file_path}:{loc.line}:{loc.column}")
        elif loc.line is not None:
            parts.append(f"source= {loc.file_path}:{loc.line}")
        else:
            parts.append(f"source= {loc.file_path}")

    if loc.pointer:
        parts.append(f"pointer= {loc.pointer}")

    if not parts:
        return ""

    return " (" + " ".join(parts) + ")"
