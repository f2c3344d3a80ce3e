"""Tests for the simulated timed catalog resolver."""

from __future__ import annotations

import unittest

from lazypicker.runtime.resolver import FetchError, TimedCatalogResolver, demo_catalog
from lazypicker.tree_model import build_tree_index


class TimedCatalogResolverTests(unittest.IsolatedAsyncioTestCase):
    async def test_returns_configured_children_in_order(self) -> None:
        _roots, children_by_parent = demo_catalog()
        resolver = TimedCatalogResolver(children_by_parent, delay_seconds=0)

        children = await resolver("1")

        self.assertEqual([child.id for child in children], ["1.1", "1.2", "1.3"])
        self.assertEqual(children[0].children, ())
        self.assertIsNone(children[2].children)
        self.assertEqual(resolver.calls, ["1"])

    async def test_unknown_parent_resolves_to_empty_folder(self) -> None:
        resolver = TimedCatalogResolver({}, delay_seconds=0)

        self.assertEqual(await resolver("nope"), ())

    async def test_failing_ids_raise_fetch_error(self) -> None:
        resolver = TimedCatalogResolver({}, delay_seconds=0, failing_ids=frozenset({"2"}))

        with self.assertRaises(FetchError):
            await resolver("2")

    def test_negative_delay_is_clamped(self) -> None:
        self.assertEqual(TimedCatalogResolver({}, delay_seconds=-3).delay_seconds, 0.0)


class DemoCatalogTests(unittest.TestCase):
    def test_demo_ids_are_globally_unique(self) -> None:
        roots, children_by_parent = demo_catalog()
        everything = roots + tuple(child for children in children_by_parent.values() for child in children)

        build_tree_index(everything)


if __name__ == "__main__":
    unittest.main()
