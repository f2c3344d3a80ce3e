"""Copy-on-write mutations of catalog snapshots addressed by node id.

Snapshots are tuples of frozen ``TreeNode`` values. Every mutation rebuilds
only the path from the root to the target and shares all other sub-trees with
the previous snapshot, so holders of older snapshots never observe edits.
Unknown ids are silent no-ops that return the snapshot unchanged.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass, replace

from .check_state import aggregate_check_state
from .types import CheckState, DuplicateNodeIdError, Nodes, TreeNode


@dataclass(frozen=True)
class TreeIndex:
    """Id lookups for one snapshot: node by id and parent id by id."""

    nodes_by_id: dict[str, TreeNode]
    parent_by_id: dict[str, str | None]

    def __contains__(self, node_id: object) -> bool:
        return node_id in self.nodes_by_id

    def get(self, node_id: str) -> TreeNode | None:
        return self.nodes_by_id.get(node_id)

    def ancestor_ids(self, node_id: str) -> list[str]:
        """Return ancestor ids nearest-first, excluding ``node_id`` itself."""
        out: list[str] = []
        parent = self.parent_by_id.get(node_id)
        while parent is not None:
            out.append(parent)
            parent = self.parent_by_id.get(parent)
        return out

    def path_ids(self, node_id: str) -> list[str]:
        """Return ids from the root-level ancestor down to ``node_id``."""
        return [*reversed(self.ancestor_ids(node_id)), node_id]

    def location(self, node_id: str) -> list[str]:
        """Return display names from the root-level ancestor down to the node."""
        if node_id not in self.nodes_by_id:
            return []
        return [self.nodes_by_id[path_id].name for path_id in self.path_ids(node_id)]


def iter_nodes(nodes: Nodes) -> Iterator[TreeNode]:
    """Yield every node in document (depth-first, pre-order) order."""
    for node in nodes:
        yield node
        if node.children:
            yield from iter_nodes(node.children)


def build_tree_index(nodes: Nodes) -> TreeIndex:
    """Index ``nodes`` by id in one pass, rejecting duplicate ids."""
    nodes_by_id: dict[str, TreeNode] = {}
    parent_by_id: dict[str, str | None] = {}

    def walk(level: Nodes, parent_id: str | None) -> None:
        for node in level:
            if node.id in nodes_by_id:
                raise DuplicateNodeIdError(node.id)
            nodes_by_id[node.id] = node
            parent_by_id[node.id] = parent_id
            if node.children:
                walk(node.children, node.id)

    walk(nodes, None)
    return TreeIndex(nodes_by_id=nodes_by_id, parent_by_id=parent_by_id)


def validate_unique_ids(nodes: Nodes) -> None:
    """Raise ``DuplicateNodeIdError`` when two nodes share an id."""
    build_tree_index(nodes)


def find_by_id(nodes: Nodes, node_id: str) -> TreeNode | None:
    """Depth-first search for ``node_id``."""
    for node in nodes:
        if node.id == node_id:
            return node
        if node.children:
            found = find_by_id(node.children, node_id)
            if found is not None:
                return found
    return None


def container_ids(nodes: Nodes) -> list[str]:
    """Return every container id in document order."""
    return [node.id for node in iter_nodes(nodes) if node.is_container]


def checked_items(nodes: Nodes) -> list[TreeNode]:
    """Return nodes whose own ``checked`` flag is set, in document order."""
    return [node for node in iter_nodes(nodes) if node.checked]


def _rebuild_path(
    level: Nodes,
    path: list[str],
    update: Callable[[TreeNode], TreeNode],
    refresh_ancestor: Callable[[TreeNode], TreeNode] | None = None,
) -> Nodes:
    """Copy ``level`` replacing the node at ``path`` and its ancestors only."""
    head, rest = path[0], path[1:]
    rebuilt: list[TreeNode] = []
    for node in level:
        if node.id != head:
            rebuilt.append(node)
            continue
        if not rest:
            rebuilt.append(update(node))
            continue
        assert node.children is not None
        ancestor = replace(node, children=_rebuild_path(node.children, rest, update, refresh_ancestor))
        if refresh_ancestor is not None:
            ancestor = refresh_ancestor(ancestor)
        rebuilt.append(ancestor)
    return tuple(rebuilt)


def _all_children_checked(node: TreeNode) -> bool:
    assert node.children is not None
    return all(aggregate_check_state(child) is CheckState.CHECKED for child in node.children)


def _refresh_cached_flag(node: TreeNode) -> TreeNode:
    """Recompute a container's cached "fully checked" flag from its children."""
    if not node.children:
        return node
    fully_checked = _all_children_checked(node)
    if fully_checked == node.checked:
        return node
    return replace(node, checked=fully_checked)


def _force_checked(node: TreeNode, checked: bool) -> TreeNode:
    if node.children is None:
        return replace(node, checked=checked)
    return replace(
        node,
        checked=checked,
        children=tuple(_force_checked(child, checked) for child in node.children),
    )


def _update_node(nodes: Nodes, node_id: str, update: Callable[[TreeNode], TreeNode], *, refresh_ancestors: bool) -> Nodes:
    index = build_tree_index(nodes)
    if node_id not in index:
        return nodes
    return _rebuild_path(
        nodes,
        index.path_ids(node_id),
        update,
        _refresh_cached_flag if refresh_ancestors else None,
    )


def set_loading(nodes: Nodes, node_id: str, flag: bool) -> Nodes:
    """Return a snapshot with ``loading`` set on ``node_id``."""
    return _update_node(nodes, node_id, lambda node: replace(node, loading=flag), refresh_ancestors=False)


def set_checked(nodes: Nodes, node_id: str, checked: bool) -> Nodes:
    """Check or uncheck ``node_id``, cascading down and reconciling ancestors.

    Containers force ``checked`` onto every descendant. Each ancestor's flag
    then becomes true only when all of its immediate children aggregate to
    checked; partially selected ancestors are stored as unchecked.
    """
    return _update_node(nodes, node_id, lambda node: _force_checked(node, checked), refresh_ancestors=True)


def replace_children(nodes: Nodes, node_id: str, children: Nodes) -> Nodes:
    """Install fetched ``children`` under ``node_id`` and mark it loaded.

    ``children``, ``loaded`` and ``loading`` change in the same snapshot. A
    checked container passes its check down to the new children. Raises
    ``DuplicateNodeIdError`` when a new id collides with one elsewhere in the
    tree; ids of the replaced sub-tree may be reused.
    """
    index = build_tree_index(nodes)
    target = index.get(node_id)
    if target is None:
        return nodes

    incoming = build_tree_index(tuple(children))
    replaced_ids = {node.id for node in iter_nodes(target.children or ())}
    for child_id in incoming.nodes_by_id:
        if child_id == node_id or (child_id in index and child_id not in replaced_ids):
            raise DuplicateNodeIdError(child_id)

    def install(node: TreeNode) -> TreeNode:
        new_children = tuple(children)
        if node.checked:
            new_children = tuple(_force_checked(child, True) for child in new_children)
        return _refresh_cached_flag(replace(node, children=new_children, loaded=True, loading=False))

    return _rebuild_path(nodes, index.path_ids(node_id), install, _refresh_cached_flag)


__all__ = [
    "TreeIndex",
    "iter_nodes",
    "build_tree_index",
    "validate_unique_ids",
    "find_by_id",
    "container_ids",
    "checked_items",
    "set_loading",
    "set_checked",
    "replace_children",
]
