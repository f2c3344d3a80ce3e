"""Catalog node datatypes shared by store, projections, and runtime."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class TreeNode:
    """One catalog object (database, schema, table, file, ...).

    ``children is None`` marks an intrinsic leaf. A tuple, even an empty one,
    marks a container that is either unloaded, genuinely empty, or populated.
    """

    id: str
    name: str
    kind: str = "folder"
    children: tuple["TreeNode", ...] | None = None
    checked: bool = False
    loaded: bool = False
    loading: bool = False

    @property
    def is_container(self) -> bool:
        return self.children is not None


Nodes = tuple[TreeNode, ...]


class CheckState(str, Enum):
    """Tri-state checkbox value derived from a node and its descendants."""

    CHECKED = "checked"
    UNCHECKED = "unchecked"
    INDETERMINATE = "indeterminate"


class DuplicateNodeIdError(ValueError):
    """Raised when a tree would contain two nodes with the same id."""

    def __init__(self, node_id: str) -> None:
        super().__init__(f"duplicate node id: {node_id!r}")
        self.node_id = node_id


__all__ = [
    "TreeNode",
    "Nodes",
    "CheckState",
    "DuplicateNodeIdError",
]
