"""Parameter assertions shared by the public helpers."""
from __future__ import annotations

from collections.abc import Sized
from typing import TypeVar

T = TypeVar("T")


def require_not_none(name: str, value: T | None) -> T:
    """Return ``value`` or raise ``ValueError`` when it is None."""
    if value is None:
        raise ValueError(f"Parameter '{name}' may not be None")
    return value


def require_not_empty(name: str, value: T | None) -> T:
    """Return ``value`` or raise ``ValueError`` when it is None or empty.

    Works for strings and any sized collection.
    """
    checked = require_not_none(name, value)
    if isinstance(checked, Sized) and len(checked) == 0:
        raise ValueError(f"Parameter '{name}' may not be empty")
    return checked


__all__ = ["require_not_empty", "require_not_none"]
