"""Deep merge of nested configuration mappings."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


def _copy(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {k: _copy(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_copy(v) for v in value]
    return value


def deep_merge(base: Mapping[str, Any] | None, override: Mapping[str, Any] | None) -> dict[str, Any]:
    """Recursively merge override into a copy of base.

    Mappings present on both sides merge key by key; any other override
    value (scalars, lists) replaces the base value. Base key order is kept
    and override-only keys are appended in override order. Neither input is
    mutated and the result shares no containers with them.
    """
    result = _copy(base or {})
    for key, value in (override or {}).items():
        current = result.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            result[key] = deep_merge(current, value)
        else:
            result[key] = _copy(value)
    return result
