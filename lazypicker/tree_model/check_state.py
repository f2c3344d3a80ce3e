"""Tri-state aggregation, toggle semantics, and regex bulk-apply."""

from __future__ import annotations

import re

from .types import CheckState, Nodes, TreeNode


def aggregate_check_state(node: TreeNode) -> CheckState:
    """Return the tri-state of ``node`` derived bottom-up from its subtree.

    Leaves and containers without children report their own flag. A populated
    container is checked only when every child is checked, indeterminate when
    any child is checked or indeterminate, and unchecked otherwise.
    """
    if not node.children:
        return CheckState.CHECKED if node.checked else CheckState.UNCHECKED

    checked_count = 0
    partial = False
    for child in node.children:
        child_state = aggregate_check_state(child)
        if child_state is CheckState.CHECKED:
            checked_count += 1
        elif child_state is CheckState.INDETERMINATE:
            partial = True

    if checked_count == len(node.children):
        return CheckState.CHECKED
    if checked_count > 0 or partial:
        return CheckState.INDETERMINATE
    return CheckState.UNCHECKED


def next_checked_state(node: TreeNode) -> bool:
    """Return the flag a checkbox click should apply to ``node``.

    Indeterminate always promotes to fully checked.
    """
    return aggregate_check_state(node) is not CheckState.CHECKED


def apply_pattern_to_children(
    nodes: Nodes,
    container_id: str,
    pattern: str,
) -> tuple[Nodes, str | None]:
    """Check each direct child of ``container_id`` whose name matches ``pattern``.

    Non-matching children are unchecked. Returns ``(nodes, error)``; ``error``
    is the compile message for an invalid pattern, in which case the snapshot
    is returned untouched.
    """
    from .store import find_by_id, set_checked

    if not pattern.strip():
        return nodes, None
    try:
        regex = re.compile(pattern)
    except re.error as exc:
        return nodes, str(exc)

    container = find_by_id(nodes, container_id)
    if container is None or not container.children:
        return nodes, None

    updated = nodes
    for child in container.children:
        updated = set_checked(updated, child.id, regex.search(child.name) is not None)
    return updated, None


__all__ = [
    "aggregate_check_state",
    "next_checked_state",
    "apply_pattern_to_children",
]
