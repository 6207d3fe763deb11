"""Exceptions raised by tree operations."""

from __future__ import annotations


class TreeError(Exception):
    """Base class for every error raised by keytree."""


class DuplicateKeyError(TreeError, KeyError):
    """Raised when a node is created with a key that is already live."""

    def __init__(self, key):
        self.key = key
        super().__init__(key)

    def __str__(self):
        return f"duplicate key: {self.key!r}"


class CyclicMoveError(TreeError, ValueError):
    """Raised when a node would be moved into its own subtree."""

    def __init__(self, src_key, dst_key):
        self.src_key = src_key
        self.dst_key = dst_key
        super().__init__(f"cannot move {src_key!r} relative to {dst_key!r}: destination is inside the moved subtree")


class InvalidCursorError(TreeError, ValueError):
    """Raised for cursors from another tree, or sentinels where a node is required."""


class StaleCursorError(InvalidCursorError):
    """Raised when a cursor refers to a node that has been erased."""


class AttributeValueError(TreeError, TypeError):
    """Raised when an attribute value is not JSON-like."""

    def __init__(self, path, value):
        self.path = path
        self.value = value
        super().__init__(f"unsupported attribute value at {path}: {type(value).__name__}")


class CorruptTreeError(TreeError):
    """Raised by `Tree.check_invariants` when a structural invariant is violated."""
