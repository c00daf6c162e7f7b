"""Interpreter stack headroom for the recursive compiler and evaluator."""

import sys
import threading
from contextlib import contextmanager
from typing import Iterator

# Above this the C stack may overflow before Python notices.
RECURSION_LIMIT_CAP = 100_000

_lock = threading.Lock()
_active = 0
_saved_limit = 0


@contextmanager
def recursion_headroom(max_depth: int, frames_per_level: int) -> Iterator[None]:
    """Raise the recursion limit so ``max_depth`` levels fit, restoring it afterwards.

    Nested and concurrent users share one raised limit; the original value is
    restored when the last of them exits.
    """
    global _active, _saved_limit
    with _lock:
        current = sys.getrecursionlimit()
        if _active == 0:
            _saved_limit = current
        wanted = min(_saved_limit + max_depth * frames_per_level, RECURSION_LIMIT_CAP)
        if wanted > current:
            sys.setrecursionlimit(wanted)
        _active += 1
    try:
        yield
    finally:
        with _lock:
            _active -= 1
            if _active == 0:
                sys.setrecursionlimit(_saved_limit)
