"""Deep merge used when layering configuration sources."""
from __future__ import annotations

from typing import Any, Dict, Mapping


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any] | None) -> Dict[str, Any]:
    """Recursively merge mappings without mutating inputs.

    Nested mappings are merged; any other value in ``override`` replaces the
    one in ``base``.

    Example:
        >>> deep_merge({"a": 1, "b": {"c": 2}}, {"b": {"d": 3}})
        {'a': 1, 'b': {'c': 2, 'd': 3}}
    """
    result: Dict[str, Any] = dict(base)
    for key, value in (override or {}).items():
        current = result.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            result[key] = deep_merge(current, value)
        else:
            result[key] = value
    return result


__all__ = ["deep_merge"]
