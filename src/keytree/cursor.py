"""Forward-only depth-first cursor over a Tree."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .constants import HEAD, SENTINEL_HANDLES, TAIL
from .errors import InvalidCursorError, StaleCursorError

if TYPE_CHECKING:
    from collections.abc import Iterator

    from .node import Node
    from .tree import Tree


class Cursor:
    """A position in a Tree: a node, the before-first sentinel or past-the-end.

    Cursors compare equal when they refer to the same node of the same tree.
    Use `same_key` to compare by key, which also works across trees.
    The hash follows the position, so a cursor used as a set member or dict
    key must not be advanced.
    """

    __slots__ = ("_handle", "_node", "_tree")

    def __init__(self, tree: Tree, handle: int):
        self._tree = tree
        self._handle = handle
        self._node = tree._arena[handle]

    @property
    def tree(self) -> Tree:
        return self._tree

    @property
    def handle(self) -> int:
        return self._handle

    @property
    def is_end(self) -> bool:
        return self._handle == TAIL

    @property
    def is_before_begin(self) -> bool:
        return self._handle == HEAD

    @property
    def is_sentinel(self) -> bool:
        return self._handle in SENTINEL_HANDLES

    @property
    def is_valid(self) -> bool:
        """False once the referenced node has been erased."""
        return self._tree._arena.get(self._handle) is self._node

    def _resolve(self) -> Node:
        if self._tree._arena.get(self._handle) is not self._node:
            msg = f"cursor refers to erased node {self._node.key!r}"
            raise StaleCursorError(msg)
        return self._node

    @property
    def node(self) -> Node:
        node = self._resolve()
        if node.key is None:
            msg = "sentinel cursor does not refer to a node"
            raise InvalidCursorError(msg)
        return node

    @property
    def key(self) -> str:
        return self.node.key

    @property
    def attributes(self) -> dict[str, Any]:
        return self.node.attributes

    @property
    def depth(self) -> int:
        return self.node.depth()

    def advance(self) -> Cursor:
        """Step to the next node in pre-order, in place. Returns self."""
        node = self._resolve()
        if self._handle == TAIL:
            return self
        if self._handle == HEAD:
            self._set(node.next_sibling)
            return self
        if node.first_child is not None:
            self._set(node.first_child)
            return self
        arena = self._tree._arena
        current = node
        # Top-level nodes always have a next sibling (another node or TAIL),
        # so the climb ends before running out of parents.
        while current.next_sibling is None:
            current = arena[current.parent]
        self._set(current.next_sibling)
        return self

    def next(self) -> Cursor:
        """Return a new cursor one step further in pre-order."""
        return self.copy().advance()

    def copy(self) -> Cursor:
        self._resolve()
        return Cursor(self._tree, self._handle)

    def _set(self, handle: int) -> None:
        self._handle = handle
        self._node = self._tree._arena[handle]

    def _neighbour(self, handle: int | None) -> Cursor | None:
        if handle is None or handle in SENTINEL_HANDLES:
            return None
        return Cursor(self._tree, handle)

    def parent(self) -> Cursor | None:
        return self._neighbour(self.node.parent)

    def first_child(self) -> Cursor | None:
        return self._neighbour(self.node.first_child)

    def last_child(self) -> Cursor | None:
        return self._neighbour(self.node.last_child)

    def prev_sibling(self) -> Cursor | None:
        return self._neighbour(self.node.prev_sibling)

    def next_sibling(self) -> Cursor | None:
        return self._neighbour(self.node.next_sibling)

    def same_key(self, other: Cursor) -> bool:
        """Compare by key. Two past-the-end cursors also match."""
        return self._resolve().key == other._resolve().key and self.is_end == other.is_end

    def __iter__(self) -> Iterator[Node]:
        """Yield nodes from this position to the end of the tree."""
        cursor = self.copy()
        if cursor.is_before_begin:
            cursor.advance()
        while not cursor.is_end:
            yield cursor.node
            cursor.advance()

    def __eq__(self, other):
        if not isinstance(other, Cursor):
            return NotImplemented
        return self._tree is other._tree and self._handle == other._handle and self._node is other._node

    def __hash__(self):
        # advance() changes the position, and with it the hash. Key sets and
        # dicts with copies (`copy()`, `next()`) rather than cursors that move.
        return hash((id(self._tree), self._handle))

    def __repr__(self):
        if self._handle == HEAD:
            return "Cursor(<before-begin>)"
        if self._handle == TAIL:
            return "Cursor(<end>)"
        if not self.is_valid:
            return f"Cursor(<erased {self._node.key!r}>)"
        return f"Cursor({self._node.key!r})"
