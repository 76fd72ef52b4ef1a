"""Sequence helpers: wrapping navigation, shuffling, merge sorting and splitting."""

from __future__ import annotations

import enum
import random
from collections.abc import Callable, Sequence
from typing import Any, TypeVar

T = TypeVar("T")

__all__ = ["Direction", "jump", "randomize", "merge_sort", "string_split"]


class Direction(enum.Enum):
    """Direction of travel through a sequence."""

    FORWARD = 0
    BACK = 1


def jump(
    items: Sequence[Any], index: int | None, direction: Direction, num: int
) -> int | None:
    """Move ``num`` steps from ``index`` in ``direction``, wrapping at both ends.

    Returns ``None`` for an empty sequence and ``0`` when no start index is given.
    """
    if not items:
        return None
    if index is None:
        return 0
    last = len(items) - 1
    current = index
    for _ in range(num):
        if direction is Direction.FORWARD:
            current = current + 1 if current < last else 0
        else:
            current = current - 1 if current > 0 else last
    return current


def randomize(items: Sequence[T], rng: random.Random | None = None) -> list[T]:
    """Return a shuffled copy of ``items`` using a Fisher-Yates shuffle."""
    shuffled = list(items)
    if len(shuffled) <= 1:
        return shuffled
    source = rng if rng is not None else random.Random()
    length = len(shuffled)
    for i in range(length - 1):
        r = i + source.randrange(length - i)
        shuffled[i], shuffled[r] = shuffled[r], shuffled[i]
    return shuffled


def _merge(left: list[T], right: list[T], cmp: Callable[[T, T], int]) -> list[T]:
    merged: list[T] = []
    i = j = 0
    while i < len(left) and j < len(right):
        if cmp(left[i], right[j]) < 0:
            merged.append(left[i])
            i += 1
        else:
            merged.append(right[j])
            j += 1
    merged.extend(left[i:])
    merged.extend(right[j:])
    return merged


def merge_sort(items: Sequence[T], cmp: Callable[[T, T], int]) -> list[T]:
    """Sort ``items`` with a three-way comparison function.

    On equal comparison the element from the right half is taken first, so the
    sort is not stable.
    """
    values = list(items)
    if len(values) <= 1:
        return values
    mid = len(values) // 2
    return _merge(merge_sort(values[:mid], cmp), merge_sort(values[mid:], cmp), cmp)


def string_split(string: str, delimiter: str) -> list[str]:
    """Split ``string`` on ``delimiter``, dropping an empty trailing piece."""
    if not delimiter:
        raise ValueError("delimiter must not be empty")
    parts = string.split(delimiter)
    if parts[-1] == "":
        parts.pop()
    return parts