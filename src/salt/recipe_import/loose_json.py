"""Total accessors for loosely-typed JSON values.

Structured data embedded in web pages rarely matches its schema exactly.
Every accessor here returns None (or an empty container) on a shape
mismatch instead of raising.
"""

from typing import Any, Union

JSONValue = Union[dict[str, Any], list[Any], str, int, float, bool, None]


def as_str(value: JSONValue) -> str | None:
    return value if isinstance(value, str) else None


def as_non_empty_str(value: JSONValue) -> str | None:
    """String with at least one non-whitespace character, stripped."""
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def as_int(value: JSONValue) -> int | None:
    """Integer value; integral floats are accepted, booleans are not."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def as_dict(value: JSONValue) -> dict[str, Any] | None:
    return value if isinstance(value, dict) else None


def as_list(value: JSONValue) -> list[Any] | None:
    return value if isinstance(value, list) else None


def as_str_list(value: JSONValue) -> list[str] | None:
    """List whose elements are all strings, else None."""
    if isinstance(value, list) and all(isinstance(item, str) for item in value):
        return value
    return None


def first(value: JSONValue) -> JSONValue:
    """First element of a list, or the value itself when not a list."""
    if isinstance(value, list):
        return value[0] if value else None
    return value
