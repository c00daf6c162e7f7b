"""JSON Pointer (RFC 6901) helpers shared by the loader, compiler and reporter."""

from __future__ import annotations

from typing import Any, Iterable, List, Sequence, Union
from urllib.parse import unquote

PathSegment = Union[str, int]


class PointerLookupError(LookupError):
    """Raised when a pointer does not address a location in a document."""


def escape_token(token: PathSegment) -> str:
    # "~" -> "~0", "/" -> "~1"
    return str(token).replace("~", "~0").replace("/", "~1")


def unescape_token(token: str) -> str:
    return token.replace("~1", "/").replace("~0", "~")


def join_pointer(base: str, *tokens: PathSegment) -> str:
    """Append escaped tokens to an existing pointer string."""
    return base + "".join(f"/{escape_token(t)}" for t in tokens)


def to_pointer(path: Iterable[PathSegment]) -> str:
    """Render a path sequence as a JSON pointer; the empty path is ``""``."""
    return join_pointer("", *path)


def split_pointer(pointer: str) -> List[str]:
    """Split a JSON pointer (optionally URI-fragment encoded) into raw tokens."""
    if pointer.startswith("#"):
        pointer = unquote(pointer[1:])
    if not pointer:
        return []
    if not pointer.startswith("/"):
        raise PointerLookupError(f"JSON pointer must start with '/': '{pointer}'")
    return [unescape_token(t) for t in pointer[1:].split("/")]


def resolve_pointer(document: Any, tokens: Sequence[str]) -> Any:
    """Walk ``document`` along ``tokens``.

    Raises:
        PointerLookupError: If a token does not exist in the document.
    """
    target = document
    for token in tokens:
        if isinstance(target, dict):
            if token not in target:
                raise PointerLookupError(f"Key '{token}' not found")
            target = target[token]
        elif isinstance(target, list):
            if not token.isdigit() or (len(token) > 1 and token.startswith("0")):
                raise PointerLookupError(f"Invalid array index '{token}'")
            index = int(token)
            if index >= len(target):
                raise PointerLookupError(f"Array index {index} out of range")
            target = target[index]
        else:
            raise PointerLookupError(f"Cannot descend into scalar with '{token}'")
    return target
