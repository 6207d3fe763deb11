"""Constants shared across the tree modules."""

from __future__ import annotations

from enum import Enum

# Arena slots reserved for the sentinels that bound the top-level sibling chain.
HEAD = 0
TAIL = 1

SENTINEL_HANDLES = frozenset((HEAD, TAIL))

DEFAULT_INDENT = "  "

DUMP_HEADER = "=== Tree Dump ==="


class _StrEnum(str, Enum):
    """Backport of enum.StrEnum (Python 3.11+)."""


class Direction(_StrEnum):
    """Where `Tree.move` attaches the relocated node relative to the destination."""

    BEFORE = "before"
    AFTER = "after"
    FIRST_CHILD = "first_child"
    LAST_CHILD = "last_child"
