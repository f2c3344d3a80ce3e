"""Formatting helpers for catalog tree rows."""

from __future__ import annotations

from collections.abc import Callable

from ..ui_theme import DEFAULT_THEME, UITheme
from .check_state import aggregate_check_state
from .types import CheckState, Nodes, TreeNode

NodeLookup = Callable[[str], TreeNode | None]

CHECKBOX_GLYPHS = {
    CheckState.CHECKED: "[x]",
    CheckState.UNCHECKED: "[ ]",
    CheckState.INDETERMINATE: "[-]",
}


def highlight_substring(text: str, query: str, theme: UITheme | None = None) -> str:
    """Highlight first case-insensitive substring match in ``text``."""
    active_theme = theme or DEFAULT_THEME
    if not query.strip():
        return text
    idx = text.lower().find(query.lower())
    if idx < 0:
        return text
    end = idx + len(query)
    return text[:idx] + active_theme.search_highlight + text[idx:end] + active_theme.search_highlight_end + text[end:]


def format_checkbox(node: TreeNode, theme: UITheme | None = None, lookup: NodeLookup | None = None) -> str:
    """Render the tri-state glyph for ``node``.

    ``lookup`` resolves the full-tree node by id, so rows from a pruned
    projection still show the state of the whole subtree.
    """
    active_theme = theme or DEFAULT_THEME
    source = lookup(node.id) if lookup is not None else None
    state = aggregate_check_state(source or node)
    color = {
        CheckState.CHECKED: active_theme.checkbox_checked,
        CheckState.INDETERMINATE: active_theme.checkbox_partial,
        CheckState.UNCHECKED: active_theme.checkbox_unchecked,
    }[state]
    return f"{color}{CHECKBOX_GLYPHS[state]}{active_theme.reset}"


def format_tree_node(
    node: TreeNode,
    depth: int,
    expanded_ids: set[str],
    *,
    show_checkboxes: bool = True,
    checkbox_position: str = "left",
    search_query: str = "",
    theme: UITheme | None = None,
    lookup: NodeLookup | None = None,
) -> str:
    """Render one catalog row as ANSI-styled display text."""
    active_theme = theme or DEFAULT_THEME
    reset = active_theme.reset
    indent = "  " * depth
    if node.loading:
        marker = f"{active_theme.tree_loading}… {reset}"
    elif node.is_container:
        marker = f"{active_theme.tree_marker}{'▾ ' if node.id in expanded_ids else '▸ '}{reset}"
    else:
        marker = "  "

    name_color = active_theme.tree_container if node.is_container else active_theme.tree_leaf
    name = f"{name_color}{highlight_substring(node.name, search_query, active_theme)}{reset}"
    kind = f" {active_theme.tree_kind}({node.kind}){reset}"
    if not show_checkboxes:
        return f"{indent}{marker}{name}{kind}"
    checkbox = format_checkbox(node, active_theme, lookup)
    if checkbox_position == "right":
        return f"{indent}{marker}{name}{kind} {checkbox}"
    return f"{indent}{marker}{checkbox} {name}{kind}"


def format_tree_rows(
    nodes: Nodes,
    expanded_ids: set[str],
    *,
    show_checkboxes: bool = True,
    checkbox_position: str = "left",
    search_query: str = "",
    theme: UITheme | None = None,
    lookup: NodeLookup | None = None,
) -> list[str]:
    """Render visible rows, descending into expanded containers only."""
    rows: list[str] = []

    def walk(level: Nodes, depth: int) -> None:
        for node in level:
            rows.append(
                format_tree_node(
                    node,
                    depth,
                    expanded_ids,
                    show_checkboxes=show_checkboxes,
                    checkbox_position=checkbox_position,
                    search_query=search_query,
                    theme=theme,
                    lookup=lookup,
                )
            )
            if node.children and node.id in expanded_ids:
                walk(node.children, depth + 1)

    walk(nodes, 0)
    return rows
