"""Dot-path access and text forms of JSON-like values.

JSON values are plain Python objects (dict, list, str, int, float, bool, None).
``None`` stands for JSON ``null``; a value that is absent altogether is
represented by the :data:`MISSING` sentinel so that the two can be told apart
when rendering templates and reporting extracted fields.
"""

import json
import math
from collections.abc import Mapping
from typing import Any, Final


class _Missing:
    """Marker for a value that is absent (as opposed to ``null``)."""

    _instance: "_Missing | None" = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> str:
        return "MISSING"


MISSING: Final = _Missing()


def split_path(path: str) -> list[str]:
    return path.split(".")


def get_segment(value: Any, key: str) -> Any:
    """Look up one path segment; list indices are given as decimal digits."""
    match value:
        case Mapping():
            return value.get(key, MISSING)
        case list():
            if key.isascii() and key.isdigit():
                index = int(key)
                if index < len(value):
                    return value[index]
            return MISSING
        case _:
            return MISSING


def resolve_path(value: Any, path: str | list[str]) -> Any:
    """Walk ``path`` through ``value``.

    Returns :data:`MISSING` as soon as an intermediate value is absent or
    ``None``. A ``None`` found at the end of the path is returned as is.
    """
    segments = split_path(path) if isinstance(path, str) else path
    current = value
    for segment in segments:
        if current is None or current is MISSING:
            return MISSING
        current = get_segment(current, segment)
    return current


def _normalize(value: Any) -> Any:
    match value:
        case bool() | None:
            return value
        case float() if not math.isfinite(value):
            return None
        case float() if value.is_integer():
            return int(value)
        case dict():
            return {str(key): _normalize(item) for key, item in value.items() if item is not MISSING}
        case list() | tuple():
            return [None if item is MISSING else _normalize(item) for item in value]
        case _:
            return value


def canonical_json(value: Any) -> str | None:
    """Compact JSON text of ``value``, or ``None`` when the value is missing.

    Key order is preserved and integral floats are written as integers, so
    ``{"id": 1.0}`` and ``{"id": 1}`` serialise identically.
    """
    if value is MISSING:
        return None
    return json.dumps(_normalize(value), separators=(",", ":"), ensure_ascii=False, default=str)


def render_value(value: Any) -> str:
    """Text used when a value is interpolated into a string."""
    match value:
        case _Missing():
            return ""
        case None:
            return "null"
        case bool():
            return "true" if value else "false"
        case float() if value.is_integer():
            return str(int(value))
        case int() | float():
            return str(value)
        case str():
            return value
        case _:
            return canonical_json(value) or ""
