"""
Path and node helpers shared by the tree store adapters.

Stored trees are nested dicts only.  On write, lists become dicts keyed by
index, ``None`` values are dropped and empty mappings are pruned, so writing
``None`` deletes a node.  On read, dicts whose keys are mostly array indices
come back as lists (missing indices are ``None``), which is what the realtime
database wire format does too.
"""

from __future__ import annotations

import copy
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence


def split_path(path: str) -> list[str]:
    """``"/posts/3/"`` -> ``["posts", "3"]``."""
    return [part for part in str(path).split("/") if part]


def join_path(*parts: object) -> str:
    segments: list[str] = []
    for part in parts:
        segments.extend(split_path(str(part)))
    return "/".join(segments)


def paths_overlap(a: Sequence[str], b: Sequence[str]) -> bool:
    """True when one path is the other or one of its ancestors."""
    shortest = min(len(a), len(b))
    return list(a[:shortest]) == list(b[:shortest])


def normalise(value: Any) -> Any:
    """Convert *value* to its stored form; ``None`` means "no node"."""
    if isinstance(value, list | tuple):
        value = {str(i): item for i, item in enumerate(value)}
    if isinstance(value, dict):
        out: dict[str, Any] = {}
        for key, item in value.items():
            child = normalise(item)
            if child is not None:
                out[str(key)] = child
        return out or None
    return copy.deepcopy(value)


def materialise(value: Any) -> Any:
    """Deep copy of a stored node with array-like mappings restored to lists."""
    if not isinstance(value, dict):
        return copy.deepcopy(value)
    children = {key: materialise(item) for key, item in value.items()}
    indices = [int(key) for key in children if key.isdigit() and str(int(key)) == key]
    if children and len(indices) == len(children):
        size = max(indices) + 1
        if len(children) * 2 > size:
            items: list[Any] = [None] * size
            for key, item in children.items():
                items[int(key)] = item
            return items
    return children


def get_node(root: Any, segments: Sequence[str]) -> Any:
    """Return the stored node at *segments*, or ``None``."""
    node = root
    for segment in segments:
        if not isinstance(node, dict):
            return None
        node = node.get(segment)
    return node


def set_node(root: Any, segments: Sequence[str], value: Any) -> Any:
    """
    Write *value* at *segments* and return the new root.

    *root* is modified in place when it is a dict.  Scalars found on the way
    down are replaced by mappings; parents left empty by a delete are pruned.
    """
    value = normalise(value)
    if not segments:
        return value
    if not isinstance(root, dict):
        if value is None:
            return root
        root = {}

    node = root
    trail: list[tuple[dict[str, Any], str]] = []
    for segment in segments[:-1]:
        child = node.get(segment)
        if not isinstance(child, dict):
            if value is None:
                return root
            child = {}
            node[segment] = child
        trail.append((node, segment))
        node = child

    if value is None:
        node.pop(segments[-1], None)
    else:
        node[segments[-1]] = value

    for parent, segment in reversed(trail):
        if parent[segment]:
            break
        del parent[segment]
    return root or None


def update_node(
    root: Any,
    segments: Sequence[str],
    values: Mapping[str, Any],
) -> Any:
    """Apply a multi-path partial update below *segments*."""
    for key, value in values.items():
        root = set_node(root, [*segments, *split_path(key)], value)
    return root


def child_values(node: Any) -> list[Any]:
    """Children of a collection node in key order, skipping empty slots."""
    if isinstance(node, list):
        return [item for item in node if item is not None]
    if isinstance(node, dict):
        numeric = sorted((k for k in node if k.isdigit()), key=int)
        named = sorted(k for k in node if not k.isdigit())
        return [node[k] for k in (*numeric, *named) if node[k] is not None]
    return []
