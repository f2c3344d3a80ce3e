"""Lazy child loading for containers expanded for the first time.

Each container moves ``unloaded -> loading -> loaded``; a failed fetch moves it
back to ``unloaded`` so the next expansion retries. The ``loading`` flag in the
snapshot is the only guard against duplicate fetches.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass

from ..tree_model.store import find_by_id, replace_children, set_loading
from ..tree_model.types import DuplicateNodeIdError, Nodes, TreeNode
from .resolver import FetchChildren

logger = logging.getLogger(__name__)


def should_load_children(node: TreeNode) -> bool:
    """Return whether expanding ``node`` must fetch its children."""
    return node.children is not None and not node.children and not node.loaded and not node.loading


def log_fetch_failure(parent_id: str, exc: BaseException) -> None:
    logger.warning("Failed to load children of %s: %s", parent_id, exc)


@dataclass(frozen=True)
class LazyLoadDeps:
    """Snapshot accessors and collaborators used by ``LazyLoadOrchestrator``."""

    get_nodes: Callable[[], Nodes]
    set_nodes: Callable[[Nodes], None]
    fetch_children: FetchChildren
    report_failure: Callable[[str, BaseException], None] = log_fetch_failure


class LazyLoadOrchestrator:
    """Start at most one child fetch per container and apply its outcome."""

    def __init__(self, deps: LazyLoadDeps) -> None:
        self._deps = deps
        self._tasks: dict[str, asyncio.Task[bool]] = {}

    def request_children(self, node_id: str) -> asyncio.Task[bool] | None:
        """Mark ``node_id`` loading and schedule its fetch when needed.

        Must run inside the event loop. The check and the ``loading = True``
        update happen in one synchronous step against the current snapshot,
        before the fetch is issued. Returns ``None`` when nothing is fetched.
        """
        nodes = self._deps.get_nodes()
        node = find_by_id(nodes, node_id)
        if node is None or not should_load_children(node):
            return None

        loop = asyncio.get_running_loop()
        self._deps.set_nodes(set_loading(nodes, node_id, True))
        task = loop.create_task(self._load(node_id), name=f"lazypicker-load-{node_id}")
        self._tasks[node_id] = task

        def forget(done: asyncio.Task[bool]) -> None:
            if self._tasks.get(node_id) is done:
                del self._tasks[node_id]

        task.add_done_callback(forget)
        return task

    async def _load(self, node_id: str) -> bool:
        try:
            children = tuple(await self._deps.fetch_children(node_id))
        except Exception as exc:
            self._fail(node_id, exc)
            return False

        current = self._deps.get_nodes()
        node = find_by_id(current, node_id)
        if node is None or not node.loading:
            logger.debug("Discarding stale children for %s", node_id)
            return False
        try:
            updated = replace_children(current, node_id, children)
        except DuplicateNodeIdError as exc:
            self._fail(node_id, exc)
            return False
        self._deps.set_nodes(updated)
        logger.debug("Loaded %d children for %s", len(children), node_id)
        return True

    def _fail(self, node_id: str, exc: BaseException) -> None:
        self._deps.set_nodes(set_loading(self._deps.get_nodes(), node_id, False))
        self._deps.report_failure(node_id, exc)

    def in_flight_ids(self) -> set[str]:
        return {node_id for node_id, task in self._tasks.items() if not task.done()}

    async def wait_idle(self) -> None:
        """Wait until every in-flight fetch, including ones started meanwhile, settles."""
        while True:
            pending = [task for task in self._tasks.values() if not task.done()]
            if not pending:
                return
            await asyncio.gather(*pending)


__all__ = [
    "LazyLoadDeps",
    "LazyLoadOrchestrator",
    "log_fetch_failure",
    "should_load_children",
]
