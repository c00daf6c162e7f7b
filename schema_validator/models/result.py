from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple

from ..utils.json_pointer import PathSegment, to_pointer


@dataclass(frozen=True)
class ValidationError:
    """One failed keyword at one location of the validated document."""

    path: Tuple[PathSegment, ...]
    keyword: str
    message: str
    schema_path: str = ""

    @property
    def pointer(self) -> str:
        return to_pointer(self.path)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": list(self.path),
            "pointer": self.pointer,
            "keyword": self.keyword,
            "message": self.message,
            "schemaPath": self.schema_path,
        }


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating one document; ``errors`` is empty iff ``valid``."""

    errors: Tuple[ValidationError, ...] = field(default_factory=tuple)

    @property
    def valid(self) -> bool:
        return not self.errors

    def __bool__(self) -> bool:
        return self.valid
