"""
Coercion of loosely-typed input into canonical enum values.

A canonical enum value is an interned ``str``. String-valued ``Enum``
members are accepted anywhere a string is and collapse to their value.

Both functions are total: input that cannot be made canonical is passed
through untouched so that validation, not assignment, rejects it.
"""

from __future__ import annotations

import sys
from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any


def _is_symbolic(value: Any) -> bool:
    return isinstance(value, str) or (isinstance(value, Enum) and isinstance(value.value, str))


def coerce_scalar(value: Any) -> Any:
    """
    Coerce a single value for a scalar enum field.

    Examples:
        - "banned" -> "banned"
        - Status.BANNED -> "banned"
        - None -> None
        - 42 -> 42 (left for validation to reject)
    """
    if value is None or value == "":
        return value
    if isinstance(value, Enum) and isinstance(value.value, str):
        value = value.value
    if isinstance(value, str):
        return sys.intern(str(value))
    return value


def coerce_set(value: Any) -> list[Any]:
    """
    Coerce input for a multi-valued enum field.

    Returns a new list with duplicates removed, keeping the order in which
    each value first appears.

    Examples:
        - None -> []
        - "author" -> ["author"]
        - ["author", "editor", "author"] -> ["author", "editor"]
    """
    if value is None:
        return []
    if _is_symbolic(value):
        items: list[Any] = [value]
    elif isinstance(value, Iterable) and not isinstance(value, (Mapping, bytes)):
        items = list(value)
    else:
        items = [value]

    result: list[Any] = []
    for item in items:
        coerced = coerce_scalar(item)
        # list membership rather than a set: elements may be unhashable
        if coerced not in result:
            result.append(coerced)
    return result
