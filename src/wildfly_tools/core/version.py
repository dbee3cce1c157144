"""Release-aware ordering of free-form server version strings.

Versions are split into integer and qualifier parts on ``.``, ``-`` and on
every digit/non-digit transition, so ``1.0.0.Beta1`` becomes
``[1, 0, 0, "beta", 1]``. Qualifiers are ranked by release type::

    snapshot < alpha < beta < milestone < rc < final

Qualifiers that are not a known release type sort above ``final``, below
every other release type and alphabetically against each other.

Examples:
    >>> compare_versions("1.0.0.Final", "1.0.0")
    0
    >>> compare_versions("1.0.0.Beta1", "1.0.0")
    -1
    >>> sorted(["2.0", "1.0-rc1", "1.0"], key=version_key)
    ['1.0-rc1', '1.0', '2.0']
"""
from __future__ import annotations

import functools
from dataclasses import dataclass, field
from enum import IntEnum
from types import MappingProxyType
from typing import Mapping, Optional, Tuple, Union


class ReleaseType(IntEnum):
    SNAPSHOT = 1
    ALPHA = 2
    BETA = 3
    MILESTONE = 4
    RELEASE_CANDIDATE = 5
    FINAL = 6


_RELEASE_TYPE_ALIASES: Mapping[str, ReleaseType] = MappingProxyType(
    {
        "snapshot": ReleaseType.SNAPSHOT,
        "alpha": ReleaseType.ALPHA,
        "a": ReleaseType.ALPHA,
        "beta": ReleaseType.BETA,
        "b": ReleaseType.BETA,
        "milestone": ReleaseType.MILESTONE,
        "m": ReleaseType.MILESTONE,
        "rc": ReleaseType.RELEASE_CANDIDATE,
        "cr": ReleaseType.RELEASE_CANDIDATE,
        "final": ReleaseType.FINAL,
        "ga": ReleaseType.FINAL,
        "": ReleaseType.FINAL,
    }
)

_SEPARATORS = frozenset(".-")

Part = Union[int, str]


def release_type(qualifier: str) -> Optional[ReleaseType]:
    """Return the release type for a qualifier, or None when it is unranked."""
    return _RELEASE_TYPE_ALIASES.get(qualifier.lower())


def tokenize(raw: str) -> Tuple[Part, ...]:
    """Split a version string into integer and lowercase qualifier parts."""
    parts: list[Part] = []
    buf: list[str] = []
    digits = False

    def _flush() -> None:
        text = "".join(buf)
        parts.append(int(text) if digits else text.lower())
        buf.clear()

    for ch in raw:
        if ch in _SEPARATORS:
            _flush()
            digits = False
            continue
        is_digit = ch.isdecimal()
        if buf and is_digit != digits:
            _flush()
        digits = is_digit
        buf.append(ch)

    if buf:
        _flush()
    return tuple(parts)


def _compare_qualifiers(left: str, right: str) -> int:
    left_type = release_type(left)
    right_type = release_type(right)
    if left_type is None and right_type is None:
        return _sign((left > right) - (left < right))
    if left_type is None:
        # Unranked qualifiers sit directly above FINAL.
        return 1 if right_type is ReleaseType.FINAL else -1
    if right_type is None:
        return -1 if left_type is ReleaseType.FINAL else 1
    return _sign(int(left_type) - int(right_type))


def _compare_parts(left: Optional[Part], right: Optional[Part]) -> int:
    if left is None:
        left = 0 if isinstance(right, int) else ""
    if right is None:
        right = 0 if isinstance(left, int) else ""
    if isinstance(left, int) and isinstance(right, int):
        return _sign(left - right)
    if isinstance(left, int):
        return 1
    if isinstance(right, int):
        return -1
    return _compare_qualifiers(left, right)


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


@dataclass(frozen=True)
class Version:
    """A parsed version.

    Equality and hashing use the raw string, ordering uses release semantics,
    so ``Version.parse("1.0") == Version.parse("1.0.0")`` is False while
    neither is less than the other.
    """

    raw: str
    parts: Tuple[Part, ...] = field(compare=False, repr=False)

    @classmethod
    def parse(cls, raw: str) -> "Version":
        return cls(raw=raw, parts=tokenize(raw))

    def compare(self, other: "Version") -> int:
        length = max(len(self.parts), len(other.parts))
        for idx in range(length):
            left = self.parts[idx] if idx < len(self.parts) else None
            right = other.parts[idx] if idx < len(other.parts) else None
            result = _compare_parts(left, right)
            if result != 0:
                return result
        return 0

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.compare(other) < 0

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.compare(other) <= 0

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.compare(other) > 0

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.compare(other) >= 0

    def __str__(self) -> str:
        return self.raw


@functools.lru_cache(maxsize=256)
def parse_version(raw: str) -> Version:
    return Version.parse(raw)


def compare_versions(first: str, second: str) -> int:
    """Compare two version strings.

    Returns:
        ``0`` if the versions are equal, ``-1`` if ``first`` is lower than
        ``second`` and ``1`` if ``first`` is greater than ``second``.
    """
    return parse_version(first).compare(parse_version(second))


version_key = functools.cmp_to_key(compare_versions)


__all__ = [
    "ReleaseType",
    "Version",
    "compare_versions",
    "parse_version",
    "release_type",
    "tokenize",
    "version_key",
]
