"""Ordered tree container with a key index.

Nodes live in an arena and refer to each other by integer handles. The
top-level sibling chain is bounded by two sentinel nodes (before-first and
after-last), so top-level nodes are linked exactly like the children of any
other node except that their parent is None.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .arena import Arena
from .config import DEFAULT_CONFIG, TreeConfig
from .constants import HEAD, TAIL, Direction
from .cursor import Cursor
from .errors import CorruptTreeError, CyclicMoveError, DuplicateKeyError, InvalidCursorError
from .index import KeyIndex
from .node import Node
from .serialize import dump_tree, tree_to_text
from .values import copy_attributes, validate_attributes

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping
    from typing import TextIO

logger = logging.getLogger(__name__)


class Tree:
    """An ordered tree of uniquely keyed nodes.

    Passing another Tree as `source` builds an independent deep copy of it.
    """

    __slots__ = ("_arena", "_index", "config")

    def __init__(self, source: Tree | None = None, *, config: TreeConfig | None = None):
        if source is not None and not isinstance(source, Tree):
            msg = f"cannot build a Tree from {type(source).__name__}"
            raise TypeError(msg)
        if config is None:
            config = source.config if source is not None else DEFAULT_CONFIG
        self.config = config
        self._arena = Arena()
        self._index = KeyIndex()

        head = Node(None, self._arena)
        tail = Node(None, self._arena)
        self._arena.alloc(head)
        self._arena.alloc(tail)
        head.next_sibling = TAIL
        tail.prev_sibling = HEAD

        if source is not None:
            self._copy_from(source)

    # -----------------
    # Cursors
    # -----------------

    def begin(self) -> Cursor:
        return Cursor(self, self._arena[HEAD].next_sibling)

    def end(self) -> Cursor:
        return Cursor(self, TAIL)

    def before_begin(self) -> Cursor:
        return Cursor(self, HEAD)

    def find(self, key: str) -> Cursor:
        """Return a cursor on the node with `key`, or `end()` if there is none."""
        handle = self._index.get(key)
        if handle is None:
            return self.end()
        return Cursor(self, handle)

    def _node_at(self, pos: Cursor) -> Node:
        if not isinstance(pos, Cursor):
            msg = f"expected a Cursor, got {type(pos).__name__}"
            raise TypeError(msg)
        if pos._tree is not self:
            msg = f"{pos!r} belongs to a different tree"
            raise InvalidCursorError(msg)
        return pos._resolve()

    # -----------------
    # Link primitives
    # -----------------

    def _create(self, key: str) -> Node:
        if not isinstance(key, str):
            msg = f"node keys must be strings, got {type(key).__name__}"
            raise TypeError(msg)
        if key in self._index:
            raise DuplicateKeyError(key)
        node = Node(key, self._arena)
        self._arena.alloc(node)
        self._index.add(key, node.handle)
        return node

    def _link_after(self, anchor: Node, node: Node) -> None:
        arena = self._arena
        node.parent = anchor.parent
        node.prev_sibling = anchor.handle
        node.next_sibling = anchor.next_sibling
        if anchor.next_sibling is not None:
            arena[anchor.next_sibling].prev_sibling = node.handle
        elif anchor.parent is not None:
            arena[anchor.parent].last_child = node.handle
        anchor.next_sibling = node.handle

    def _link_before(self, anchor: Node, node: Node) -> None:
        arena = self._arena
        node.parent = anchor.parent
        node.next_sibling = anchor.handle
        node.prev_sibling = anchor.prev_sibling
        if anchor.prev_sibling is not None:
            arena[anchor.prev_sibling].next_sibling = node.handle
        elif anchor.parent is not None:
            arena[anchor.parent].first_child = node.handle
        anchor.prev_sibling = node.handle

    def _link_first_child(self, parent: Node, node: Node) -> None:
        node.parent = parent.handle
        node.prev_sibling = None
        node.next_sibling = parent.first_child
        if parent.first_child is not None:
            self._arena[parent.first_child].prev_sibling = node.handle
        else:
            parent.last_child = node.handle
        parent.first_child = node.handle

    def _link_last_child(self, parent: Node, node: Node) -> None:
        node.parent = parent.handle
        node.next_sibling = None
        node.prev_sibling = parent.last_child
        if parent.last_child is not None:
            self._arena[parent.last_child].next_sibling = node.handle
        else:
            parent.first_child = node.handle
        parent.last_child = node.handle

    def _unlink(self, node: Node) -> None:
        """Detach `node` from its siblings and parent, keeping its own children."""
        arena = self._arena
        prev, nxt = node.prev_sibling, node.next_sibling
        if prev is not None:
            arena[prev].next_sibling = nxt
        elif node.parent is not None:
            arena[node.parent].first_child = nxt
        if nxt is not None:
            arena[nxt].prev_sibling = prev
        elif node.parent is not None:
            arena[node.parent].last_child = prev
        node.parent = None
        node.prev_sibling = None
        node.next_sibling = None

    def _is_ancestor(self, ancestor: Node, node: Node) -> bool:
        current = node.parent
        while current is not None:
            if current == ancestor.handle:
                return True
            current = self._arena[current].parent
        return False

    def _skip_subtree(self, node: Node) -> int:
        """Handle of the first node after `node`'s subtree in pre-order."""
        current = node
        while current.next_sibling is None:
            current = self._arena[current.parent]
        return current.next_sibling

    def _iter_subtree(self, root: Node) -> Iterator[Node]:
        arena = self._arena
        yield root
        current = root
        while True:
            if current.first_child is not None:
                current = arena[current.first_child]
            else:
                while current is not root and current.next_sibling is None:
                    current = arena[current.parent]
                if current is root:
                    return
                current = arena[current.next_sibling]
            yield current

    def _after_mutation(self) -> None:
        if self.config.check_invariants:
            self.check_invariants()

    # -----------------
    # Mutators
    # -----------------

    def insert(self, pos: Cursor, key: str) -> Cursor:
        """Create `key` as the next sibling of `pos`.

        Inserting at `end()` or `before_begin()` makes the new node the first
        top-level node.
        """
        anchor = self._node_at(pos)
        if anchor.handle == TAIL:
            anchor = self._arena[HEAD]
        node = self._create(key)
        self._link_after(anchor, node)
        logger.debug("insert %r after %r", key, anchor.key)
        self._after_mutation()
        return Cursor(self, node.handle)

    def add_child(self, pos: Cursor, key: str) -> Cursor:
        """Create `key` as the last child of `pos`.

        On an empty tree there is nothing to attach to, so the node is
        inserted at the top level instead.
        """
        parent = self._node_at(pos)
        if not self._index:
            return self.insert(self.end(), key)
        if parent.key is None:
            msg = "cannot add a child to a sentinel cursor"
            raise InvalidCursorError(msg)
        node = self._create(key)
        self._link_last_child(parent, node)
        logger.debug("add_child %r under %r", key, parent.key)
        self._after_mutation()
        return Cursor(self, node.handle)

    def erase(self, pos: Cursor) -> Cursor:
        """Destroy the node at `pos` together with its subtree.

        Returns a cursor on the node that followed the erased subtree in
        pre-order. Erasing a sentinel does nothing.
        """
        node = self._node_at(pos)
        if node.handle == HEAD:
            return self.begin()
        if node.handle == TAIL:
            return self.end()
        following = self._skip_subtree(node)
        count = self._erase_node(node)
        logger.debug("erase %r (%d nodes)", node.key, count)
        self._after_mutation()
        return Cursor(self, following)

    def _erase_node(self, node: Node) -> int:
        handles = [n.handle for n in self._iter_subtree(node)]
        self._unlink(node)
        # Reverse pre-order releases every child before its parent.
        for handle in reversed(handles):
            released = self._arena.release(handle)
            self._index.remove(released.key)
        return len(handles)

    def move(self, dst: Cursor, src: Cursor, direction: Direction | str) -> Cursor:
        """Relocate `src` with its subtree to a position relative to `dst`.

        BEFORE/AFTER make `src` a sibling of `dst`; FIRST_CHILD/LAST_CHILD make
        it a child. AFTER `before_begin()` and BEFORE `end()` address the
        edges of the top level. Returns `src`.
        """
        direction = Direction(direction)
        dst_node = self._node_at(dst)
        src_node = self._node_at(src)
        if src_node.key is None:
            msg = "cannot move a sentinel"
            raise InvalidCursorError(msg)
        if dst_node is src_node:
            return src
        if direction is Direction.AFTER and dst_node.next_sibling == src_node.handle:
            return src

        if dst_node.key is None:
            if not (
                (dst_node.handle == HEAD and direction is Direction.AFTER)
                or (dst_node.handle == TAIL and direction is Direction.BEFORE)
            ):
                msg = f"cannot move {direction.value} {dst!r}"
                raise InvalidCursorError(msg)
        elif self._is_ancestor(src_node, dst_node):
            raise CyclicMoveError(src_node.key, dst_node.key)

        self._unlink(src_node)
        if direction is Direction.BEFORE:
            self._link_before(dst_node, src_node)
        elif direction is Direction.AFTER:
            self._link_after(dst_node, src_node)
        elif direction is Direction.FIRST_CHILD:
            self._link_first_child(dst_node, src_node)
        else:
            self._link_last_child(dst_node, src_node)
        logger.debug("move %r %s %r", src_node.key, direction.value, dst_node.key)
        self._after_mutation()
        return src

    def clear(self) -> None:
        """Erase every node."""
        head = self._arena[HEAD]
        count = 0
        while head.next_sibling != TAIL:
            count += self._erase_node(self._arena[head.next_sibling])
        logger.debug("clear (%d nodes)", count)
        self._after_mutation()

    # -----------------
    # Attributes
    # -----------------

    def set_attribute(self, pos: Cursor, name: str, value: Any) -> None:
        node = self._node_at(pos)
        if node.key is None:
            msg = "sentinels carry no attributes"
            raise InvalidCursorError(msg)
        if self.config.validate_values:
            validate_attributes({name: value})
        node.attributes[name] = value

    def update_attributes(self, pos: Cursor, attributes: Mapping[str, Any]) -> None:
        node = self._node_at(pos)
        if node.key is None:
            msg = "sentinels carry no attributes"
            raise InvalidCursorError(msg)
        attributes = dict(attributes)
        if self.config.validate_values:
            validate_attributes(attributes)
        node.attributes.update(attributes)

    # -----------------
    # Copy / assign
    # -----------------

    def _copy_from(self, source: Tree) -> None:
        # Pre-order guarantees a node's parent was re-created before the node.
        last_top = self._arena[HEAD]
        source_arena = source._arena
        count = 0
        for node in source:
            created = self._create(node.key)
            if node.parent is None:
                self._link_after(last_top, created)
                last_top = created
            else:
                parent_key = source_arena[node.parent].key
                self._link_last_child(self._arena[self._index.get(parent_key)], created)
            created.attributes = copy_attributes(node.attributes)
            count += 1
        logger.debug("copied %d nodes", count)
        self._after_mutation()

    def copy(self) -> Tree:
        return Tree(self)

    def __copy__(self):
        return Tree(self)

    def __deepcopy__(self, memo):
        return Tree(self)

    def assign(self, other: Tree) -> Tree:
        """Replace this tree's contents with a deep copy of `other`."""
        if not isinstance(other, Tree):
            msg = f"cannot assign {type(other).__name__} to a Tree"
            raise TypeError(msg)
        if other is self:
            return self
        self.clear()
        self._copy_from(other)
        return self

    # -----------------
    # Traversal
    # -----------------

    def walk(self) -> Iterator[tuple[Node, int]]:
        """Yield `(node, depth)` pairs in depth-first pre-order."""
        arena = self._arena
        handle = arena[HEAD].next_sibling
        depth = 0
        while handle != TAIL:
            node = arena[handle]
            yield node, depth
            if node.first_child is not None:
                handle = node.first_child
                depth += 1
                continue
            while node.next_sibling is None:
                node = arena[node.parent]
                depth -= 1
            handle = node.next_sibling

    def __iter__(self) -> Iterator[Node]:
        for node, _ in self.walk():
            yield node

    def keys(self) -> list[str]:
        return [node.key for node in self]

    def subtree(self, pos: Cursor) -> Iterator[Node]:
        """Yield the node at `pos` and its descendants in pre-order."""
        node = self._node_at(pos)
        if node.key is None:
            msg = "sentinel cursor has no subtree"
            raise InvalidCursorError(msg)
        return self._iter_subtree(node)

    def children(self, pos: Cursor | None = None) -> Iterator[Cursor]:
        """Yield cursors on the children of `pos`, or on the top-level nodes."""
        if pos is None:
            handle = self._arena[HEAD].next_sibling
        else:
            node = self._node_at(pos)
            if node.key is None:
                msg = "sentinel cursor has no children"
                raise InvalidCursorError(msg)
            handle = node.first_child
        while handle is not None and handle != TAIL:
            yield Cursor(self, handle)
            handle = self._arena[handle].next_sibling

    def __len__(self) -> int:
        return len(self._index)

    def __contains__(self, key: object) -> bool:
        return key in self._index

    def __eq__(self, other):
        if not isinstance(other, Tree):
            return NotImplemented
        if len(self) != len(other):
            return False
        for (a, da), (b, db) in zip(self.walk(), other.walk()):
            if a.key != b.key or da != db or a.attributes != b.attributes:
                return False
        return True

    __hash__ = None  # Unhashable since we define __eq__

    def __repr__(self):
        return f"Tree(size={len(self)})"

    # -----------------
    # Rendering
    # -----------------

    def to_text(self, *, with_attributes: bool = True) -> str:
        return tree_to_text(self, with_attributes=with_attributes, indent=self.config.indent)

    def dump(self, stream: TextIO | None = None, *, with_attributes: bool = True, header: bool = True) -> None:
        """Write the pre-order rendering of the tree to `stream` (stdout by default)."""
        dump_tree(self, stream, with_attributes=with_attributes, header=header, indent=self.config.indent)

    # -----------------
    # Validation
    # -----------------

    def check_invariants(self) -> None:
        """Raise CorruptTreeError if any structural invariant does not hold."""
        arena = self._arena
        index = self._index

        if len(arena) != len(index) + 2:
            msg = f"arena holds {len(arena) - 2} nodes but index holds {len(index)}"
            raise CorruptTreeError(msg)
        for key, handle in index.items():
            node = arena.get(handle)
            if node is None or node.key != key:
                msg = f"index entry {key!r} points at {node!r}"
                raise CorruptTreeError(msg)

        head = arena[HEAD]
        tail = arena[TAIL]
        if head.prev_sibling is not None or tail.next_sibling is not None:
            msg = "sentinels are linked outside the top-level chain"
            raise CorruptTreeError(msg)

        seen: set[int] = set()
        # Each entry is (parent handle, first handle, expected prev of first, expected last).
        stack = [(None, head.next_sibling, HEAD, TAIL)]
        while stack:
            parent, handle, prev, expected_last = stack.pop()
            while handle is not None and handle != TAIL:
                node = arena.get(handle)
                if node is None or node.key is None:
                    msg = f"sibling chain reaches invalid handle {handle}"
                    raise CorruptTreeError(msg)
                if handle in seen:
                    msg = f"node {node.key!r} is reachable twice"
                    raise CorruptTreeError(msg)
                seen.add(handle)
                if node.parent != parent:
                    msg = f"node {node.key!r} has parent {node.parent}, expected {parent}"
                    raise CorruptTreeError(msg)
                if node.prev_sibling != prev:
                    msg = f"node {node.key!r} has prev_sibling {node.prev_sibling}, expected {prev}"
                    raise CorruptTreeError(msg)
                if (node.first_child is None) != (node.last_child is None):
                    msg = f"node {node.key!r} has only one child bound set"
                    raise CorruptTreeError(msg)
                if node.first_child is not None:
                    first = arena.get(node.first_child)
                    if first is None or first.prev_sibling is not None:
                        msg = f"first child of {node.key!r} has a previous sibling"
                        raise CorruptTreeError(msg)
                    stack.append((handle, node.first_child, None, node.last_child))
                prev = handle
                if node.next_sibling is None:
                    break
                handle = node.next_sibling
            # The chain must end at the bound recorded by its parent.
            if parent is None:
                if handle != TAIL or tail.prev_sibling != prev:
                    msg = "top-level chain does not end at the after-last sentinel"
                    raise CorruptTreeError(msg)
            elif handle == TAIL or prev != expected_last:
                msg = f"last_child of node {arena[parent].key!r} does not end its child chain"
                raise CorruptTreeError(msg)

        if len(seen) != len(index):
            msg = f"{len(index) - len(seen)} indexed nodes are unreachable"
            raise CorruptTreeError(msg)
