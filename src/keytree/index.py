"""Key to handle lookup table, maintained alongside the tree's links."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .errors import DuplicateKeyError

if TYPE_CHECKING:
    from collections.abc import Iterator


class KeyIndex:
    __slots__ = ("_map",)

    def __init__(self) -> None:
        self._map: dict[str, int] = {}

    def add(self, key: str, handle: int) -> None:
        if key in self._map:
            raise DuplicateKeyError(key)
        self._map[key] = handle

    def remove(self, key: str) -> int:
        return self._map.pop(key)

    def get(self, key: str) -> int | None:
        return self._map.get(key)

    def clear(self) -> None:
        self._map.clear()

    def items(self):
        return self._map.items()

    def __contains__(self, key: object) -> bool:
        return key in self._map

    def __len__(self) -> int:
        return len(self._map)

    def __iter__(self) -> Iterator[str]:
        return iter(self._map)
