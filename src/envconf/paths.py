"""Dotted-path access into nested configuration mappings."""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

from envconf.core.errors import KeyNotFoundError


def is_absent_or_falsy(value: Any) -> bool:
    """True for values a lookup treats as missing.

    None, False, numeric zero, NaN and the empty string count as missing.
    Empty mappings and empty lists do not.
    """
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, (int, float)):
        return value == 0 or (isinstance(value, float) and math.isnan(value))
    return False


def child(node: Any, segment: str) -> Any:
    """Return node[segment] or None when node cannot be indexed by segment."""
    if isinstance(node, Mapping):
        return node.get(segment)
    if isinstance(node, list) and segment.isascii() and segment.isdigit():
        index = int(segment)
        return node[index] if index < len(node) else None
    return None


def read_dict_value(root: Any, key: str) -> Any:
    """Read a dot-separated key from root or raise KeyNotFoundError.

    Every segment must resolve to a value that is not absent or falsy, so
    a stored 0, '' or False cannot be read back through this path.
    """
    current = root
    for segment in key.split("."):
        value = child(current, segment)
        if is_absent_or_falsy(value):
            raise KeyNotFoundError(key, segment)
        current = value
    return current
