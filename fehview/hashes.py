"""An insertion-ordered mapping with case-insensitive string keys."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, MutableMapping
from typing import Any

__all__ = ["CaseInsensitiveDict"]


class CaseInsensitiveDict(MutableMapping):
    """Mapping whose keys compare without regard to case.

    The spelling of a key is the one used when it was first inserted; setting
    an existing key under another spelling replaces only the value.
    """

    def __init__(
        self, items: Mapping[str, Any] | Iterable[tuple[str, Any]] | None = None
    ) -> None:
        self._store: dict[str, tuple[str, Any]] = {}
        if items is not None:
            self.update(items)

    @staticmethod
    def _fold(key: str) -> str:
        if not isinstance(key, str):
            raise TypeError(f"keys must be strings, not {type(key).__name__}")
        return key.lower()

    def __getitem__(self, key: str) -> Any:
        return self._store[self._fold(key)][1]

    def __setitem__(self, key: str, value: Any) -> None:
        folded = self._fold(key)
        existing = self._store.get(folded)
        original = existing[0] if existing is not None else key
        self._store[folded] = (original, value)

    def __delitem__(self, key: str) -> None:
        del self._store[self._fold(key)]

    def __iter__(self) -> Iterator[str]:
        return (original for original, _ in self._store.values())

    def __len__(self) -> int:
        return len(self._store)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({dict(self.items())!r})"