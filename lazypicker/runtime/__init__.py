"""Runtime pieces driving the catalog tree: session, lazy loading, resolver.

The session is the single writer of the canonical snapshot; the orchestrator
runs child fetches on the asyncio event loop.
"""

from __future__ import annotations

from .lazy_load import LazyLoadDeps, LazyLoadOrchestrator, should_load_children
from .resolver import FetchChildren, FetchError, TimedCatalogResolver, demo_catalog
from .session import SessionState, TreeSession

__all__ = [
    "FetchChildren",
    "FetchError",
    "LazyLoadDeps",
    "LazyLoadOrchestrator",
    "SessionState",
    "TimedCatalogResolver",
    "TreeSession",
    "demo_catalog",
    "should_load_children",
]
