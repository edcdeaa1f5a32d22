"""Lenient value coercion for loosely-typed remote payloads.

The remote database stores numbers as strings in some rows and strings as
numbers in others; each helper accepts either and falls back to ``default``.
"""

from __future__ import annotations

from typing import Any


def as_str(value: Any, default: str = "") -> str:
    if value is None:
        return default
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def as_int(value: Any, default: int = 0) -> int:
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        try:
            return int(value)
        except (ValueError, OverflowError):
            return default
    if isinstance(value, str):
        candidate = value.strip()
        try:
            return int(candidate)
        except ValueError:
            pass
        try:
            return int(float(candidate))
        except (ValueError, OverflowError):
            return default
    return default


def as_float(value: Any, default: float = 0.0) -> float:
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return default
    return default


__all__ = ["as_str", "as_int", "as_float"]
