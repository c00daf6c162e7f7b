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

"""JSON Schema draft detection from the ``$schema`` keyword.

Compatibility rule:
  * Missing ``$schema`` → the latest draft's semantics, with the legacy array
    form of ``items`` and boolean exclusive bounds still accepted.
  * A recognized identifier → that draft's semantics.
  * Anything else → unsupported. The compiler warns, or fails in strict mode.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Optional


DRAFT_04 = "draft-04"
DRAFT_06 = "draft-06"
DRAFT_07 = "draft-07"
DRAFT_2019_09 = "2019-09"
DRAFT_2020_12 = "2020-12"

# oldest first
DRAFT_ORDER = (DRAFT_04, DRAFT_06, DRAFT_07, DRAFT_2019_09, DRAFT_2020_12)
LATEST_DRAFT = DRAFT_2020_12

_IDENTIFIER_RE = re.compile(
    r"^https?://json-schema\.org/(?:(draft-0[467])/schema|draft/(2019-09|2020-12)/schema)#?$"
)


@dataclass(frozen=True)
class DraftCheckResult:
    """Result of a ``$schema`` compatibility check."""

    supported: bool
    message: str
    draft: str = LATEST_DRAFT
    declared: bool = False
    identifier: Optional[str] = None


def parse_draft_identifier(identifier: str) -> Optional[str]:
    """Map a ``$schema`` URI to a draft name, or None if it is not recognized."""
    m = _IDENTIFIER_RE.fullmatch(identifier.strip())
    if m is None:
        return None
    return m.group(1) or m.group(2)


def check_schema_version(raw: Any) -> DraftCheckResult:
    """Check whether the ``$schema`` value *raw* names a supported draft.

    Returns:
        A :class:`DraftCheckResult`. Unsupported identifiers still carry the
        latest draft so callers running in lenient mode can proceed.
    """
    if raw is None:
        return DraftCheckResult(
            supported=True,
            message=f"No '$schema' declared; using draft {LATEST_DRAFT} semantics.",
        )

    if not isinstance(raw, str):
        return DraftCheckResult(
            supported=False,
            message=f"'$schema' must be a string, got {type(raw).__name__}: {raw!r}",
            declared=True,
        )

    draft = parse_draft_identifier(raw)
    if draft is None:
        return DraftCheckResult(
            supported=False,
            message=(
                f"Unsupported schema version '{raw}'. "
                f"Supported drafts: {', '.join(DRAFT_ORDER)}. "
                f"Falling back to draft {LATEST_DRAFT} semantics."
            ),
            declared=True,
            identifier=raw,
        )

    return DraftCheckResult(
        supported=True,
        message=f"Schema declares draft {draft}.",
        draft=draft,
        declared=True,
        identifier=raw,
    )


def draft_at_least(draft: str, minimum: str) -> bool:
    return DRAFT_ORDER.index(draft) >= DRAFT_ORDER.index(minimum)
