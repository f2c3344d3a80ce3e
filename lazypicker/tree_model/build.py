"""Tree construction from JSON-shaped catalog data."""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from pathlib import Path

from .store import validate_unique_ids
from .types import Nodes, TreeNode


def node_from_dict(data: Mapping[str, object]) -> TreeNode:
    """Build a ``TreeNode`` from one catalog record.

    Accepts ``type`` (catalog wire name) or ``kind`` for the tag. A missing
    ``children`` key marks an intrinsic leaf; a list, even empty, marks a
    container.
    """
    if not isinstance(data, Mapping):
        raise ValueError(f"catalog node must be an object, got {type(data).__name__}")
    node_id = data.get("id")
    name = data.get("name")
    if not isinstance(node_id, str) or not node_id:
        raise ValueError(f"catalog node has invalid id: {node_id!r}")
    if not isinstance(name, str):
        raise ValueError(f"catalog node {node_id!r} has invalid name: {name!r}")

    kind = data.get("kind", data.get("type", "folder"))
    raw_children = data.get("children")
    children: tuple[TreeNode, ...] | None = None
    if raw_children is not None:
        if not isinstance(raw_children, list):
            raise ValueError(f"children of {node_id!r} must be a list")
        children = nodes_from_list(raw_children)

    return TreeNode(
        id=node_id,
        name=name,
        kind=str(kind),
        children=children,
        checked=bool(data.get("checked", False)),
        loaded=bool(data.get("loaded", False)),
        loading=bool(data.get("loading", False)),
    )


def nodes_from_list(items: Iterable[Mapping[str, object]]) -> Nodes:
    """Build an ordered snapshot level from catalog records."""
    return tuple(node_from_dict(item) for item in items)


def node_to_dict(node: TreeNode) -> dict[str, object]:
    """Serialize ``node`` back into the catalog record shape."""
    out: dict[str, object] = {
        "id": node.id,
        "name": node.name,
        "type": node.kind,
        "checked": node.checked,
        "loaded": node.loaded,
        "loading": node.loading,
    }
    if node.children is not None:
        out["children"] = [node_to_dict(child) for child in node.children]
    return out


def load_catalog(path: Path) -> tuple[Nodes, dict[str, Nodes]]:
    """Read a catalog file into ``(roots, children_by_parent)``.

    The file holds ``{"roots": [...], "children": {"<parent id>": [...]}}``.
    ``children`` feeds the simulated resolver and may be omitted. Raises
    ``ValueError`` for malformed content and ``DuplicateNodeIdError`` when the
    roots reuse an id.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"{path}: invalid JSON ({exc})") from exc
    if not isinstance(data, dict):
        raise ValueError(f"{path}: catalog must be a JSON object")

    raw_roots = data.get("roots")
    if not isinstance(raw_roots, list):
        raise ValueError(f"{path}: 'roots' must be a list")
    roots = nodes_from_list(raw_roots)
    validate_unique_ids(roots)

    raw_children = data.get("children", {})
    if not isinstance(raw_children, dict):
        raise ValueError(f"{path}: 'children' must be an object")
    children_by_parent: dict[str, Nodes] = {}
    for parent_id, items in raw_children.items():
        if not isinstance(items, list):
            raise ValueError(f"{path}: children of {parent_id!r} must be a list")
        children_by_parent[str(parent_id)] = nodes_from_list(items)
    return roots, children_by_parent


__all__ = [
    "node_from_dict",
    "nodes_from_list",
    "node_to_dict",
    "load_catalog",
]
