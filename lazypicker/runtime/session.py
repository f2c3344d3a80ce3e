"""Host-facing session owning the canonical catalog snapshot.

``TreeSession`` is the single writer of the canonical tree. Presentation code
reads ``nodes``/``visible_nodes``/``selected_nodes`` and the expansion sets,
and reports user intent through ``on_toggle_expand``/``on_check_change``.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field

from ..tree_model.check_state import aggregate_check_state, apply_pattern_to_children, next_checked_state
from ..tree_model.filtering import filter_tree_for_query
from ..tree_model.projection import project_selected, selected_expanded_ids
from ..tree_model.store import (
    TreeIndex,
    build_tree_index,
    checked_items,
    container_ids,
    set_checked,
)
from ..tree_model.types import CheckState, Nodes, TreeNode
from .lazy_load import LazyLoadDeps, LazyLoadOrchestrator, log_fetch_failure
from .resolver import FetchChildren


@dataclass
class SessionState:
    nodes: Nodes
    expanded_ids: set[str] = field(default_factory=set)
    search_query: str = ""
    selected_expanded_ids: set[str] = field(default_factory=set)


class TreeSession:
    def __init__(
        self,
        nodes: Nodes,
        fetch_children: FetchChildren,
        *,
        report_failure: Callable[[str, BaseException], None] = log_fetch_failure,
    ) -> None:
        self.state = SessionState(nodes=tuple(nodes))
        self._index: TreeIndex | None = build_tree_index(self.state.nodes)
        self._selected: Nodes | None = None
        self._visible: tuple[Nodes, set[str]] | None = None
        self.loader = LazyLoadOrchestrator(
            LazyLoadDeps(
                get_nodes=lambda: self.state.nodes,
                set_nodes=self._set_nodes,
                fetch_children=fetch_children,
                report_failure=report_failure,
            )
        )
        self._refresh_selected_expansion()

    # Canonical snapshot

    @property
    def nodes(self) -> Nodes:
        return self.state.nodes

    @property
    def index(self) -> TreeIndex:
        """Id lookups for the current snapshot, rebuilt once per snapshot."""
        if self._index is None:
            self._index = build_tree_index(self.state.nodes)
        return self._index

    def _set_nodes(self, nodes: Nodes) -> None:
        if nodes is self.state.nodes:
            return
        self.state.nodes = nodes
        self._index = None
        self._selected = None
        self._visible = None
        self._refresh_selected_expansion()
        if self.state.search_query.strip():
            self.state.expanded_ids |= self._search_projection()[1]

    def get_node(self, node_id: str) -> TreeNode | None:
        return self.index.get(node_id)

    def node_location(self, node_id: str) -> list[str]:
        return self.index.location(node_id)

    # Expansion and lazy loading

    @property
    def expanded_ids(self) -> set[str]:
        return self.state.expanded_ids

    def set_expanded_ids(self, expanded_ids: set[str]) -> None:
        self.state.expanded_ids = set(expanded_ids)

    def on_toggle_expand(
        self,
        node_id: str,
        is_open: bool,
        node: TreeNode | None = None,
    ) -> asyncio.Task[bool] | None:
        """Open or close ``node_id``; opening an unloaded container starts a fetch.

        ``node`` is the row the host rendered and is not consulted: the loading
        check always reads the current snapshot. Returns the fetch task when one
        was started. Closing never cancels an in-flight fetch.
        """
        if is_open:
            self.state.expanded_ids.add(node_id)
            return self.loader.request_children(node_id)
        self.state.expanded_ids.discard(node_id)
        return None

    def expand_all(self) -> list[asyncio.Task[bool]]:
        tasks = []
        for node_id in container_ids(self.state.nodes):
            task = self.on_toggle_expand(node_id, True)
            if task is not None:
                tasks.append(task)
        return tasks

    def collapse_all(self) -> None:
        for node_id in container_ids(self.state.nodes):
            self.on_toggle_expand(node_id, False)

    async def wait_idle(self) -> None:
        await self.loader.wait_idle()

    # Selection

    def check_state(self, node_id: str) -> CheckState:
        node = self.get_node(node_id)
        if node is None:
            return CheckState.UNCHECKED
        return aggregate_check_state(node)

    def on_check_change(self, node: TreeNode | str, checked: bool) -> None:
        node_id = node if isinstance(node, str) else node.id
        self._set_nodes(set_checked(self.state.nodes, node_id, checked))

    def toggle_check(self, node_id: str) -> None:
        """Apply a checkbox click: indeterminate and unchecked become checked."""
        node = self.get_node(node_id)
        if node is None:
            return
        self.on_check_change(node_id, next_checked_state(node))

    def apply_pattern(self, node_id: str, pattern: str) -> str | None:
        """Bulk-check children of ``node_id`` by regex; returns an error message or ``None``."""
        nodes, error = apply_pattern_to_children(self.state.nodes, node_id, pattern)
        self._set_nodes(nodes)
        return error

    def get_checked_items(self, nodes: Nodes | None = None) -> list[TreeNode]:
        return checked_items(self.state.nodes if nodes is None else nodes)

    # Search projection

    @property
    def search_query(self) -> str:
        return self.state.search_query

    def _search_projection(self) -> tuple[Nodes, set[str]]:
        if self._visible is None:
            self._visible = filter_tree_for_query(self.state.nodes, self.state.search_query)
        return self._visible

    def set_search_query(self, query: str) -> None:
        """Narrow ``visible_nodes`` and union matching ancestors into ``expanded_ids``."""
        self.state.search_query = query
        self._visible = None
        self.state.expanded_ids |= self._search_projection()[1]

    @property
    def visible_nodes(self) -> Nodes:
        return self._search_projection()[0]

    # Selected-only mirror

    @property
    def selected_nodes(self) -> Nodes:
        if self._selected is None:
            self._selected = project_selected(self.state.nodes)
        return self._selected

    @property
    def selected_expanded_ids(self) -> set[str]:
        return self.state.selected_expanded_ids

    def _refresh_selected_expansion(self) -> None:
        self.state.selected_expanded_ids = selected_expanded_ids(self.selected_nodes)

    def on_selected_toggle_expand(self, node_id: str, is_open: bool) -> None:
        if is_open:
            self.state.selected_expanded_ids.add(node_id)
        else:
            self.state.selected_expanded_ids.discard(node_id)

    def selected_visible_nodes(self, query: str) -> Nodes:
        """Search within the mirror tree, force-expanding matching ancestors there."""
        filtered, force_expanded = filter_tree_for_query(self.selected_nodes, query)
        self.state.selected_expanded_ids |= force_expanded
        return filtered


__all__ = [
    "SessionState",
    "TreeSession",
]
