"""Small helpers used when rendering component templates."""

from __future__ import annotations

import secrets
from collections.abc import Mapping
from typing import Any, TypeVar

T = TypeVar("T")

_ID_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"
_ID_LENGTH = 26


def if_value(condition: bool, value: T) -> T | None:
    """Return ``value`` when ``condition`` holds, otherwise the empty value of its type."""
    if condition:
        return value
    try:
        return type(value)()
    except TypeError:
        return None


def if_else(condition: bool, true_value: Any, false_value: Any) -> Any:
    """Return ``true_value`` when ``condition`` holds, else ``false_value``."""
    return true_value if condition else false_value


def merge_attributes(*args: Mapping[str, Any] | None) -> dict[str, Any]:
    """Combine attribute mappings; later mappings win on conflicting keys."""
    merged: dict[str, Any] = {}
    for attrs in args:
        if attrs:
            merged.update(attrs)
    return merged


def random_id() -> str:
    """Return a random element id such as 'id-' followed by 26 base32 characters."""
    token = "".join(secrets.choice(_ID_ALPHABET) for _ in range(_ID_LENGTH))
    return f"id-{token}"