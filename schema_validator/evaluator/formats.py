"""Checkers for the ``format`` keyword.

Formats are annotations unless format assertion is enabled in the
configuration. Unknown format names always pass.
"""

from __future__ import annotations

import ipaddress
import re
from datetime import date
from typing import Callable, Dict, Optional
from urllib.parse import urlsplit

_DATE_RE = re.compile(r"(\d{4})-(\d{2})-(\d{2})")
_TIME_RE = re.compile(r"(\d{2}):(\d{2}):(\d{2})(?:\.\d+)?(?:[Zz]|[+-](\d{2}):(\d{2}))")
_EMAIL_RE = re.compile(r"[^@\s]+@[^@\s]+\.[^@\s]+")
_UUID_RE = re.compile(r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}")
_SCHEME_RE = re.compile(r"[A-Za-z][A-Za-z0-9+.-]*")
_POINTER_RE = re.compile(r"(?:/(?:[^~/]|~[01])*)*")


def is_date(value: str) -> bool:
    m = _DATE_RE.fullmatch(value)
    if m is None:
        return False
    try:
        date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
    except ValueError:
        return False
    return True


def is_time(value: str) -> bool:
    m = _TIME_RE.fullmatch(value)
    if m is None:
        return False
    hour, minute, second = int(m.group(1)), int(m.group(2)), int(m.group(3))
    if hour > 23 or minute > 59 or second > 60:  # 60 is a leap second
        return False
    if m.group(4) is not None and (int(m.group(4)) > 23 or int(m.group(5)) > 59):
        return False
    return True


def is_date_time(value: str) -> bool:
    if len(value) < 11 or value[10] not in "Tt ":
        return False
    return is_date(value[:10]) and is_time(value[11:])


def is_ipv4(value: str) -> bool:
    try:
        ipaddress.IPv4Address(value)
    except ValueError:
        return False
    return True


def is_ipv6(value: str) -> bool:
    try:
        ipaddress.IPv6Address(value)
    except ValueError:
        return False
    return True


def is_uri(value: str) -> bool:
    if any(ch.isspace() for ch in value):
        return False
    try:
        parts = urlsplit(value)
    except ValueError:
        return False
    return bool(parts.scheme) and bool(_SCHEME_RE.fullmatch(parts.scheme))


def is_regex(value: str) -> bool:
    try:
        re.compile(value)
    except re.error:
        return False
    return True


FORMAT_CHECKERS: Dict[str, Callable[[str], bool]] = {
    "date-time": is_date_time,
    "date": is_date,
    "time": is_time,
    "email": lambda v: bool(_EMAIL_RE.fullmatch(v)),
    "ipv4": is_ipv4,
    "ipv6": is_ipv6,
    "uri": is_uri,
    "uuid": lambda v: bool(_UUID_RE.fullmatch(v)),
    "regex": is_regex,
    "json-pointer": lambda v: bool(_POINTER_RE.fullmatch(v)),
}


def check_format(name: str, value: str) -> Optional[bool]:
    """Return whether ``value`` conforms to format ``name``; None if unknown."""
    checker = FORMAT_CHECKERS.get(name)
    if checker is None:
        return None
    return checker(value)
