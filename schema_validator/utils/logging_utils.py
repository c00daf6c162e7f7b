import logging
import sys
from typing import Optional, TextIO, Union

LevelLike = Union[int, str]


class _MaxLevelFilter(logging.Filter):
    def __init__(self, max_level: int) -> None:
        super().__init__()
        self._max_level = max_level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno <= self._max_level


def resolve_level(level: LevelLike, default: int = logging.INFO) -> int:
    """Turn a level name such as ``"debug"`` (or an int) into a logging level."""
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).strip().upper())
    return resolved if isinstance(resolved, int) else default


def _stream_handler(
    stream: TextIO,
    min_level: int,
    formatter: logging.Formatter,
    max_level: Optional[int] = None,
) -> logging.Handler:
    handler = logging.StreamHandler(stream=stream)
    handler.setLevel(min_level)
    if max_level is not None:
        handler.addFilter(_MaxLevelFilter(max_level))
    handler.setFormatter(formatter)
    return handler


def configure_split_stream_logging(
    *,
    level: LevelLike = logging.INFO,
    stderr_level: LevelLike = logging.WARNING,
    formatter: Optional[logging.Formatter] = None,
) -> None:
    """Configure root logging:

    - records below ``stderr_level`` go to stdout
    - records at or above ``stderr_level`` go to stderr

    The CLI prints validation reports on stderr, so lower-level diagnostics
    stay on stdout and do not interleave with them.
    """
    root_level = resolve_level(level)
    split_level = max(resolve_level(stderr_level, default=logging.WARNING), logging.DEBUG)

    if formatter is None:
        formatter = logging.Formatter("%(name)s - %(levelname)s - %(message)s")

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(root_level)
    root.addHandler(_stream_handler(sys.stdout, logging.DEBUG, formatter, max_level=split_level - 1))
    root.addHandler(_stream_handler(sys.stderr, split_level, formatter))
