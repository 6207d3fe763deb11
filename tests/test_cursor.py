"""Tests for cursor traversal, navigation, equality and staleness."""

import unittest

from keytree import InvalidCursorError, StaleCursorError, Tree


class TestCursor(unittest.TestCase):
    """Test Cursor against A > [B > [C]], D > [E, F]."""

    def setUp(self):
        self.tree = Tree()
        a = self.tree.insert(self.tree.end(), "A")
        b = self.tree.add_child(a, "B")
        self.tree.add_child(b, "C")
        d = self.tree.insert(a, "D")
        self.tree.add_child(d, "E")
        self.tree.add_child(d, "F")

    def test_advance_visits_preorder(self):
        """Advancing from begin() to end() visits every node in pre-order."""
        keys = []
        cursor = self.tree.begin()
        while cursor != self.tree.end():
            keys.append(cursor.key)
            cursor.advance()
        assert keys == ["A", "B", "C", "D", "E", "F"]

    def test_advance_past_end_stays_at_end(self):
        """end() does not advance any further."""
        cursor = self.tree.end()
        assert cursor.advance().is_end

    def test_advance_from_before_begin(self):
        """The before-first sentinel advances onto begin()."""
        cursor = self.tree.before_begin()
        assert cursor.advance() == self.tree.begin()

    def test_next_does_not_move_original(self):
        """next() returns a new cursor and leaves the receiver in place."""
        cursor = self.tree.begin()
        following = cursor.next()
        assert cursor.key == "A"
        assert following.key == "B"

    def test_iterating_a_cursor(self):
        """Iterating a cursor yields the nodes from its position to the end."""
        assert [node.key for node in self.tree.find("C")] == ["C", "D", "E", "F"]
        assert [node.key for node in self.tree.before_begin()] == ["A", "B", "C", "D", "E", "F"]
        assert list(self.tree.end()) == []

    def test_navigation(self):
        """Parent, sibling and child accessors return None past the edges."""
        e = self.tree.find("E")
        assert e.parent().key == "D"
        assert e.prev_sibling() is None
        assert e.next_sibling().key == "F"
        assert self.tree.find("F").next_sibling() is None
        assert self.tree.find("A").prev_sibling() is None
        assert self.tree.find("D").next_sibling() is None
        assert self.tree.find("A").next_sibling().key == "D"
        assert self.tree.find("D").first_child().key == "E"
        assert self.tree.find("D").last_child().key == "F"
        assert self.tree.find("C").first_child() is None

    def test_depth(self):
        """depth counts ancestors."""
        assert self.tree.find("A").depth == 0
        assert self.tree.find("C").depth == 2
        assert self.tree.find("F").depth == 1

    def test_equality_is_identity(self):
        """Cursors are equal only on the same node of the same tree."""
        other = Tree(self.tree)
        assert self.tree.find("B") == self.tree.find("B")
        assert self.tree.find("B") != self.tree.find("C")
        assert self.tree.find("B") != other.find("B")
        assert self.tree.end() != other.end()

    def test_same_key_compares_across_trees(self):
        """same_key() compares keys, and sentinels by kind."""
        other = Tree(self.tree)
        assert self.tree.find("B").same_key(other.find("B"))
        assert not self.tree.find("B").same_key(other.find("C"))
        assert self.tree.end().same_key(other.end())
        assert not self.tree.end().same_key(other.before_begin())

    def test_hashable(self):
        """Equal cursors collapse in a set."""
        seen = {self.tree.find("A"), self.tree.find("A"), self.tree.find("B")}
        assert len(seen) == 2

    def test_copied_cursor_works_as_dict_key(self):
        """A copy() stored as a key stays findable while the original advances."""
        cursor = self.tree.find("B")
        labels = {cursor.copy(): "b"}
        cursor.advance()
        assert cursor.key == "C"
        assert labels[self.tree.find("B")] == "b"
        assert cursor not in labels

    def test_sentinel_has_no_node(self):
        """Sentinels have no node, key or attributes."""
        with self.assertRaises(InvalidCursorError):
            _ = self.tree.end().node
        with self.assertRaises(InvalidCursorError):
            _ = self.tree.before_begin().key

    def test_stale_cursor(self):
        """A cursor on an erased node raises StaleCursorError."""
        c = self.tree.find("C")
        self.tree.erase(self.tree.find("B"))
        assert not c.is_valid
        with self.assertRaises(StaleCursorError):
            _ = c.key
        with self.assertRaises(StaleCursorError):
            self.tree.erase(c)

    def test_stale_cursor_survives_slot_reuse(self):
        """A stale cursor stays stale after its slot is handed to a new node."""
        c = self.tree.find("C")
        self.tree.erase(c)
        reused = self.tree.insert(self.tree.end(), "Z")
        assert reused.handle == c.handle
        assert c != reused
        with self.assertRaises(StaleCursorError):
            _ = c.node

    def test_cursor_survives_moves(self):
        """Moving a subtree keeps cursors into it valid."""
        c = self.tree.find("C")
        self.tree.move(self.tree.find("F"), self.tree.find("B"), "after")
        assert c.is_valid
        assert c.depth == 2
        assert c.parent().parent().key == "D"

    def test_repr(self):
        """repr shows the key or the sentinel kind."""
        assert repr(self.tree.find("A")) == "Cursor('A')"
        assert repr(self.tree.end()) == "Cursor(<end>)"
        assert repr(self.tree.before_begin()) == "Cursor(<before-begin>)"
