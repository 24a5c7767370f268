from __future__ import annotations

from collections.abc import Mapping
from typing import Any


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """
    Field-by-field merge; `override` wins per field.

    Nested mappings are merged recursively. Anything else (lists, sets,
    callables, scalars) is replaced.
    """
    out = dict(base)
    for key, value in override.items():
        current = out.get(key)
        if isinstance(value, Mapping) and isinstance(current, Mapping):
            out[key] = deep_merge(current, value)
        else:
            out[key] = value
    return out


def merge_declarations(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """
    Merge two declarations of the same action.

    - `opts` is deep-merged (see deep_merge).
    - `prompts` is atomic: an override that provides prompts replaces them.
    - every other top-level field is last-write-wins.
    """
    out = dict(base)
    for key, value in override.items():
        if key == "opts" and isinstance(value, Mapping) and isinstance(out.get("opts"), Mapping):
            out["opts"] = deep_merge(out["opts"], value)
        elif key == "prompts":
            out["prompts"] = list(value) if isinstance(value, (list, tuple)) else value
        else:
            out[key] = value
    return out
