"""Simulated child-fetch backend with an artificial network delay."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Mapping, Sequence

from ..tree_model.types import Nodes, TreeNode

FetchChildren = Callable[[str], Awaitable[Sequence[TreeNode]]]

DEFAULT_FETCH_DELAY_SECONDS = 0.7


class FetchError(RuntimeError):
    """Raised by a resolver when children of a container cannot be fetched."""


class TimedCatalogResolver:
    """Serve children from an in-memory catalog after ``delay_seconds``.

    Unknown parents resolve to an empty sequence (a genuinely empty folder).
    Parents listed in ``failing_ids`` raise ``FetchError`` instead.
    """

    def __init__(
        self,
        children_by_parent: Mapping[str, Nodes],
        delay_seconds: float = DEFAULT_FETCH_DELAY_SECONDS,
        failing_ids: frozenset[str] = frozenset(),
    ) -> None:
        self._children_by_parent = dict(children_by_parent)
        self.delay_seconds = max(0.0, float(delay_seconds))
        self.failing_ids = set(failing_ids)
        self.calls: list[str] = []

    async def __call__(self, parent_id: str) -> Nodes:
        self.calls.append(parent_id)
        await asyncio.sleep(self.delay_seconds)
        if parent_id in self.failing_ids:
            raise FetchError(f"failed to load children of {parent_id!r}")
        return self._children_by_parent.get(parent_id, ())


def _folder(node_id: str, name: str) -> TreeNode:
    return TreeNode(id=node_id, name=name, kind="folder", children=(), loaded=False)


def demo_catalog() -> tuple[Nodes, dict[str, Nodes]]:
    """Return ``(roots, children_by_parent)`` for the bundled demo databases."""
    roots: Nodes = (
        _folder("1", "Database A"),
        _folder("2", "Database B"),
        TreeNode(id="3", name="External Data Source", kind="file"),
    )
    children_by_parent: dict[str, Nodes] = {
        "1": (
            _folder("1.1", "Schema Public"),
            _folder("1.2", "Schema Analytics"),
            TreeNode(id="1.3", name="Database Config", kind="file"),
        ),
        "2": (_folder("2.1", "Schema HR"),),
        "1.1": (
            TreeNode(id="1.1.1", name="users", kind="table"),
            TreeNode(id="1.1.2", name="products", kind="table"),
            TreeNode(id="1.1.3", name="orders", kind="table"),
            TreeNode(id="1.1.4", name="get_user_by_id", kind="function"),
        ),
        "1.2": (
            TreeNode(id="1.2.1", name="daily_sales", kind="view"),
            TreeNode(id="1.2.2", name="customer_segments", kind="table"),
        ),
        "2.1": (
            TreeNode(id="2.1.1", name="employees", kind="table"),
            TreeNode(id="2.1.2", name="departments", kind="table"),
        ),
    }
    return roots, children_by_parent


__all__ = [
    "FetchChildren",
    "FetchError",
    "TimedCatalogResolver",
    "DEFAULT_FETCH_DELAY_SECONDS",
    "demo_catalog",
]
