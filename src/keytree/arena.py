"""Slot storage for tree nodes.

Nodes are addressed by stable integer handles. Releasing a node frees its
slot for reuse; a freed slot holds None until a later allocation takes it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

    from .node import Node


class Arena:
    __slots__ = ("_free", "_live", "_slots")

    def __init__(self) -> None:
        self._slots: list[Node | None] = []
        self._free: list[int] = []
        self._live = 0

    def alloc(self, node: Node) -> int:
        if self._free:
            handle = self._free.pop()
            self._slots[handle] = node
        else:
            handle = len(self._slots)
            self._slots.append(node)
        node.handle = handle
        self._live += 1
        return handle

    def release(self, handle: int) -> Node:
        node = self._slots[handle]
        if node is None:
            msg = f"arena slot {handle} is already free"
            raise KeyError(msg)
        self._slots[handle] = None
        self._free.append(handle)
        self._live -= 1
        node.unlink()
        return node

    def get(self, handle: int | None) -> Node | None:
        if handle is None or handle < 0 or handle >= len(self._slots):
            return None
        return self._slots[handle]

    def __getitem__(self, handle: int) -> Node:
        node = self._slots[handle]
        if node is None:
            msg = f"arena slot {handle} is free"
            raise KeyError(msg)
        return node

    def __len__(self) -> int:
        return self._live

    def __iter__(self) -> Iterator[Node]:
        for node in self._slots:
            if node is not None:
                yield node

    @property
    def capacity(self) -> int:
        return len(self._slots)
