"""Catalog tree state engine: data model, mutations, and derived views.

This package contains non-UI tree primitives:
- node datatypes and tri-state values
- copy-on-write store operations addressed by node id
- check-state aggregation and regex bulk-apply
- selected-only and search projections
- JSON catalog loading and text row formatting
"""

from __future__ import annotations

from .types import CheckState, DuplicateNodeIdError, Nodes, TreeNode
from .store import (
    TreeIndex,
    build_tree_index,
    checked_items,
    container_ids,
    find_by_id,
    iter_nodes,
    replace_children,
    set_checked,
    set_loading,
    validate_unique_ids,
)
from .check_state import aggregate_check_state, apply_pattern_to_children, next_checked_state
from .projection import project_selected, selected_expanded_ids
from .filtering import filter_tree_for_query, node_matches_query
from .build import load_catalog, node_from_dict, node_to_dict, nodes_from_list
from .rendering import format_tree_node, format_tree_rows

__all__ = [
    "TreeNode",
    "Nodes",
    "CheckState",
    "DuplicateNodeIdError",
    "TreeIndex",
    "build_tree_index",
    "validate_unique_ids",
    "iter_nodes",
    "find_by_id",
    "container_ids",
    "checked_items",
    "set_loading",
    "set_checked",
    "replace_children",
    "aggregate_check_state",
    "next_checked_state",
    "apply_pattern_to_children",
    "project_selected",
    "selected_expanded_ids",
    "filter_tree_for_query",
    "node_matches_query",
    "node_from_dict",
    "nodes_from_list",
    "node_to_dict",
    "load_catalog",
    "format_tree_node",
    "format_tree_rows",
]
