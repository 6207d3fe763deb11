"""JSON-like attribute values.

Attribute values are strings, numbers (int or float, not bool), booleans,
None, lists of values, and dicts with string keys mapping to values.
"""

from __future__ import annotations

import copy
import math
from typing import Any, Union

from .errors import AttributeValueError

Value = Union[str, int, float, bool, None, list, dict]

_SCALARS = (str, int, float, bool, type(None))


def validate_value(value: Any, path: str = "$") -> None:
    """Raise AttributeValueError if `value` is not JSON-like.

    `path` names the offending position in nested containers, e.g. ``$.birth[2]``.
    """
    if isinstance(value, float):
        if not math.isfinite(value):
            raise AttributeValueError(path, value)
        return
    if isinstance(value, _SCALARS):
        return
    if isinstance(value, list):
        for i, item in enumerate(value):
            validate_value(item, f"{path}[{i}]")
        return
    if isinstance(value, dict):
        for k, item in value.items():
            if not isinstance(k, str):
                raise AttributeValueError(f"{path} key {k!r}", k)
            validate_value(item, f"{path}.{k}")
        return
    raise AttributeValueError(path, value)


def validate_attributes(attributes: dict[str, Any]) -> None:
    for name, value in attributes.items():
        if not isinstance(name, str):
            raise AttributeValueError(f"attribute name {name!r}", name)
        validate_value(value, f"$.{name}")


def copy_value(value: Value) -> Value:
    """Deep copy a JSON-like value. Scalars are immutable and returned as-is.

    Anything else (stored with validation disabled) goes through copy.deepcopy.
    """
    if isinstance(value, _SCALARS):
        return value
    if isinstance(value, list):
        return [copy_value(item) for item in value]
    if isinstance(value, dict):
        return {k: copy_value(v) for k, v in value.items()}
    return copy.deepcopy(value)


def copy_attributes(attributes: dict[str, Value]) -> dict[str, Value]:
    return {name: copy_value(value) for name, value in attributes.items()}
