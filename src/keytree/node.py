from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .arena import Arena


class Node:
    """Represents one tree element.
    - key: unique string key (None for the two sentinels)
    - attributes: dict of JSON-like values, insertion ordered
    - handle: arena slot holding this node
    - parent: handle of the structural parent, or None at top level
    - first_child/last_child: handles bounding the child chain, or None
    - prev_sibling/next_sibling: handles of adjacent nodes sharing the parent
    """

    __slots__ = (
        "_arena",
        "attributes",
        "first_child",
        "handle",
        "key",
        "last_child",
        "next_sibling",
        "parent",
        "prev_sibling",
    )

    def __init__(self, key: str | None, arena: Arena, attributes: dict[str, Any] | None = None):
        self.key = key
        self.attributes = attributes if attributes is not None else {}
        self._arena = arena
        self.handle = -1
        self.parent: int | None = None
        self.first_child: int | None = None
        self.last_child: int | None = None
        self.prev_sibling: int | None = None
        self.next_sibling: int | None = None

    @property
    def is_sentinel(self) -> bool:
        return self.key is None

    @property
    def has_children(self) -> bool:
        return self.first_child is not None

    def depth(self) -> int:
        """Number of parent hops to reach a top-level node."""
        depth = 0
        current = self.parent
        while current is not None:
            depth += 1
            current = self._arena[current].parent
        return depth

    def unlink(self) -> None:
        """Clear all structural links. Used when the node is released."""
        self.parent = None
        self.first_child = None
        self.last_child = None
        self.prev_sibling = None
        self.next_sibling = None

    def __repr__(self):
        if self.key is None:
            return f"Node(<sentinel {self.handle}>)"
        return f"Node({self.key!r}, attributes={len(self.attributes)})"
