"""Search projection that keeps matches and the ancestors leading to them."""

from __future__ import annotations

from dataclasses import replace

from .types import Nodes, TreeNode


def node_matches_query(node: TreeNode, query: str) -> bool:
    """Case-insensitive substring match on the name or any descendant name."""
    folded_query = query.lower()
    if folded_query in node.name.lower():
        return True
    return any(node_matches_query(child, query) for child in node.children or ())


def filter_tree_for_query(nodes: Nodes, query: str) -> tuple[Nodes, set[str]]:
    """Prune ``nodes`` to entries matching ``query``.

    Returns ``(filtered_nodes, force_expanded)``. Containers survive when their
    name matches or a child survives, and carry only surviving children.
    Containers with surviving children are reported in ``force_expanded``.
    A blank query returns ``nodes`` itself and an empty set.
    """
    if not query.strip():
        return nodes, set()

    folded_query = query.lower()
    force_expanded: set[str] = set()

    def prune(level: Nodes) -> Nodes:
        kept: list[TreeNode] = []
        for node in level:
            name_matches = folded_query in node.name.lower()
            if node.children is None:
                if name_matches:
                    kept.append(node)
                continue
            surviving = prune(node.children)
            if not surviving and not name_matches:
                continue
            if surviving:
                force_expanded.add(node.id)
            kept.append(replace(node, children=surviving))
        return tuple(kept)

    return prune(nodes), force_expanded


__all__ = [
    "node_matches_query",
    "filter_tree_for_query",
]
