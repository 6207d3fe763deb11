"""Text rendering of trees."""

from __future__ import annotations

import json
import math
import sys
from typing import TYPE_CHECKING, Any

from .constants import DEFAULT_INDENT, DUMP_HEADER

if TYPE_CHECKING:
    from collections.abc import Iterator
    from typing import TextIO

    from .tree import Tree


def _plain(value: Any) -> Any:
    # Values written without validation render as their repr; so do NaN and
    # infinities, which have no JSON form.
    if isinstance(value, float):
        return value if math.isfinite(value) else repr(value)
    if isinstance(value, (str, int, bool, type(None))):
        return value
    if isinstance(value, list):
        return [_plain(item) for item in value]
    if isinstance(value, dict):
        return {k if isinstance(k, str) else repr(k): _plain(v) for k, v in value.items()}
    return repr(value)


def format_attributes(attributes: dict[str, Any]) -> str:
    """Render an attribute mapping as compact JSON, keeping insertion order."""
    return json.dumps(_plain(attributes), separators=(",", ":"), ensure_ascii=False, allow_nan=False)


def iter_lines(tree: Tree, *, with_attributes: bool = True, indent: str = DEFAULT_INDENT) -> Iterator[str]:
    for node, depth in tree.walk():
        line = f"{indent * depth}{node.key}"
        if with_attributes:
            line = f"{line}  {format_attributes(node.attributes)}"
        yield line


def tree_to_text(tree: Tree, *, with_attributes: bool = True, indent: str = DEFAULT_INDENT) -> str:
    return "\n".join(iter_lines(tree, with_attributes=with_attributes, indent=indent))


def dump_tree(
    tree: Tree,
    stream: TextIO | None = None,
    *,
    with_attributes: bool = True,
    header: bool = True,
    indent: str = DEFAULT_INDENT,
) -> None:
    if stream is None:
        stream = sys.stdout
    if header:
        stream.write(f"{DUMP_HEADER}\n")
    for line in iter_lines(tree, with_attributes=with_attributes, indent=indent):
        stream.write(f"{line}\n")
    if header:
        stream.write("\n")
