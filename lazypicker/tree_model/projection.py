"""Selected-only mirror projection of the canonical catalog tree."""

from __future__ import annotations

from dataclasses import replace

from .store import container_ids
from .types import Nodes


def project_selected(nodes: Nodes) -> Nodes:
    """Build the mirror tree holding checked nodes and their ancestors.

    Containers keep their own ``checked`` flag for display and carry only the
    projected children. Containers with nothing selected beneath them (and not
    checked themselves) are omitted.
    """
    projected = []
    for node in nodes:
        if node.children:
            selected_children = project_selected(node.children)
            if node.checked or selected_children:
                projected.append(replace(node, children=selected_children, loaded=True))
            continue
        if node.checked:
            projected.append(replace(node, checked=True, loaded=True))
    return tuple(projected)


def selected_expanded_ids(projected: Nodes) -> set[str]:
    """Return container ids to force-expand in the mirror view."""
    return set(container_ids(projected))


__all__ = [
    "project_selected",
    "selected_expanded_ids",
]
