"""Tests for the arena, the key index, node links and the invariant checker."""

import logging
import unittest

from keytree import CorruptTreeError, DuplicateKeyError, Tree, TreeConfig
from keytree.arena import Arena
from keytree.constants import HEAD, TAIL
from keytree.index import KeyIndex
from keytree.node import Node


class TestArena(unittest.TestCase):
    """Test slot allocation and reuse."""

    def test_alloc_assigns_handles(self):
        """Handles are handed out in order and stored on the node."""
        arena = Arena()
        a = Node("a", arena)
        b = Node("b", arena)
        assert arena.alloc(a) == 0
        assert arena.alloc(b) == 1
        assert a.handle == 0
        assert len(arena) == 2
        assert arena[1] is b

    def test_release_reuses_slot(self):
        """A released slot is reused by the next allocation."""
        arena = Arena()
        for key in "abc":
            arena.alloc(Node(key, arena))
        released = arena.release(1)
        assert released.key == "b"
        assert arena.get(1) is None
        assert len(arena) == 2
        assert arena.alloc(Node("d", arena)) == 1
        assert arena.capacity == 3

    def test_free_slot_access(self):
        """Indexing or releasing a free slot raises KeyError; get() returns None."""
        arena = Arena()
        arena.alloc(Node("a", arena))
        arena.release(0)
        with self.assertRaises(KeyError):
            _ = arena[0]
        with self.assertRaises(KeyError):
            arena.release(0)
        assert arena.get(None) is None
        assert arena.get(99) is None


class TestKeyIndex(unittest.TestCase):
    """Test the key to handle table."""

    def test_add_get_remove(self):
        """Keys map to handles until removed."""
        index = KeyIndex()
        index.add("a", 3)
        assert index.get("a") == 3
        assert "a" in index
        assert len(index) == 1
        assert index.remove("a") == 3
        assert index.get("a") is None
        assert len(index) == 0

    def test_duplicate(self):
        """A second add of a live key fails and keeps the first handle."""
        index = KeyIndex()
        index.add("a", 3)
        with self.assertRaises(DuplicateKeyError):
            index.add("a", 4)
        assert index.get("a") == 3


class TestNode(unittest.TestCase):
    """Test node links and depth."""

    def test_depth_walks_parents(self):
        """depth() counts parent links."""
        tree = Tree()
        a = tree.insert(tree.end(), "A")
        b = tree.add_child(a, "B")
        c = tree.add_child(b, "C")
        assert a.node.depth() == 0
        assert c.node.depth() == 2
        assert c.node.parent == b.handle
        assert b.node.first_child == c.handle == b.node.last_child

    def test_sentinels(self):
        """A new tree holds only the two linked sentinels."""
        tree = Tree()
        head = tree._arena[HEAD]
        tail = tree._arena[TAIL]
        assert head.is_sentinel
        assert tail.is_sentinel
        assert head.next_sibling == TAIL
        assert tail.prev_sibling == HEAD

    def test_top_level_links_reach_sentinels(self):
        """A lone top-level node sits between the sentinels without a parent."""
        tree = Tree()
        a = tree.insert(tree.end(), "A")
        assert a.node.prev_sibling == HEAD
        assert a.node.next_sibling == TAIL
        assert a.node.parent is None


class TestCheckInvariants(unittest.TestCase):
    """Test detection of corrupted links."""

    def build(self):
        tree = Tree()
        a = tree.insert(tree.end(), "A")
        tree.add_child(a, "B")
        tree.add_child(a, "C")
        tree.insert(a, "D")
        return tree

    def test_detects_broken_sibling_link(self):
        """A missing back link is reported."""
        tree = self.build()
        tree.find("C").node.prev_sibling = None
        with self.assertRaises(CorruptTreeError):
            tree.check_invariants()

    def test_detects_wrong_last_child(self):
        """A last_child that is not the last sibling is reported."""
        tree = self.build()
        a = tree.find("A").node
        a.last_child = tree.find("B").handle
        with self.assertRaises(CorruptTreeError):
            tree.check_invariants()

    def test_detects_index_mismatch(self):
        """An index entry pointing at the wrong node is reported."""
        tree = self.build()
        tree._index.remove("C")
        tree._index.add("C", tree.find("B").handle)
        with self.assertRaises(CorruptTreeError):
            tree.check_invariants()

    def test_detects_wrong_parent(self):
        """A child without its parent link is reported."""
        tree = self.build()
        tree.find("B").node.parent = None
        with self.assertRaises(CorruptTreeError):
            tree.check_invariants()

    def test_config_runs_checks_after_mutations(self):
        """check_invariants=True verifies the tree after each mutation."""
        tree = Tree(config=TreeConfig(check_invariants=True))
        a = tree.insert(tree.end(), "A")
        tree.add_child(a, "B")
        tree.find("B").node.parent = None
        with self.assertRaises(CorruptTreeError):
            tree.insert(a, "C")


class TestLogging(unittest.TestCase):
    """Test mutation logging."""

    def test_mutations_log_at_debug(self):
        """Every mutation writes a DEBUG record."""
        tree = Tree()
        with self.assertLogs("keytree.tree", level=logging.DEBUG) as logs:
            a = tree.insert(tree.end(), "A")
            tree.add_child(a, "B")
            tree.move(tree.end(), tree.find("B"), "before")
            tree.erase(a)
        messages = "\n".join(logs.output)
        assert "insert 'A'" in messages
        assert "add_child 'B' under 'A'" in messages
        assert "move 'B' before None" in messages
        assert "erase 'A' (1 nodes)" in messages
