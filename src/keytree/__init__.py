import logging

from .config import TreeConfig
from .constants import Direction
from .cursor import Cursor
from .errors import (
    AttributeValueError,
    CorruptTreeError,
    CyclicMoveError,
    DuplicateKeyError,
    InvalidCursorError,
    StaleCursorError,
    TreeError,
)
from .node import Node
from .serialize import format_attributes
from .tree import Tree
from .values import validate_value

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "AttributeValueError",
    "CorruptTreeError",
    "Cursor",
    "CyclicMoveError",
    "Direction",
    "DuplicateKeyError",
    "InvalidCursorError",
    "Node",
    "StaleCursorError",
    "Tree",
    "TreeConfig",
    "TreeError",
    "format_attributes",
    "validate_value",
]
