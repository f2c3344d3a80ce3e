"""End-to-end scenarios over a session backed by a gated fetch collaborator."""

from __future__ import annotations

import asyncio
import unittest

from lazypicker.runtime.session import TreeSession
from lazypicker.tree_model import CheckState, TreeNode, build_tree_index, iter_nodes


class _NamedCollaborator:
    def __init__(self) -> None:
        self.calls: list[str] = []
        self.gate = asyncio.Event()

    async def __call__(self, parent_id: str) -> tuple[TreeNode, ...]:
        self.calls.append(parent_id)
        await self.gate.wait()
        if parent_id == "1":
            return (
                TreeNode(id="1.1", name="Schema Public", kind="folder", children=(), loaded=False),
                TreeNode(id="1.3", name="Database Config", kind="file"),
            )
        if parent_id == "1.1":
            return (
                TreeNode(id="1.1.1", name="users", kind="table"),
                TreeNode(id="1.1.2", name="products", kind="table"),
            )
        return ()


class CatalogScenarioTests(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self) -> None:
        self.fetch = _NamedCollaborator()
        self.session = TreeSession(
            (
                TreeNode(id="1", name="Database A", kind="folder", children=(), loaded=False),
                TreeNode(id="3", name="External Data Source", kind="file"),
            ),
            self.fetch,
        )

    async def test_expand_unloaded_database_then_resolve(self) -> None:
        self.session.on_toggle_expand("1", True)
        self.assertTrue(self.session.get_node("1").loading)
        self.session.on_toggle_expand("1", True)

        self.fetch.gate.set()
        await self.session.wait_idle()

        node = self.session.get_node("1")
        self.assertTrue(node.loaded)
        self.assertFalse(node.loading)
        self.assertEqual([child.id for child in node.children], ["1.1", "1.3"])
        self.assertEqual(self.fetch.calls, ["1"])

    async def test_checking_nested_leaf_propagates_indeterminate(self) -> None:
        self.fetch.gate.set()
        self.session.on_toggle_expand("1", True)
        await self.session.wait_idle()
        self.session.on_toggle_expand("1.1", True)
        await self.session.wait_idle()

        self.session.on_check_change("1.1.1", True)

        self.assertEqual(self.session.check_state("1.1"), CheckState.INDETERMINATE)
        self.assertEqual(self.session.check_state("1"), CheckState.INDETERMINATE)
        self.assertFalse(self.session.get_node("1").checked)
        self.assertEqual([node.id for node in iter_nodes(self.session.selected_nodes)], ["1", "1.1", "1.1.1"])

        self.session.on_check_change("1.1", True)
        self.assertEqual(self.session.check_state("1.1.1"), CheckState.CHECKED)
        self.assertEqual(self.session.check_state("1.1.2"), CheckState.CHECKED)

    async def test_search_then_select_then_clear(self) -> None:
        self.fetch.gate.set()
        self.session.expand_all()
        await self.session.wait_idle()
        self.session.expand_all()
        await self.session.wait_idle()

        self.session.set_search_query("PRODUCTS")
        self.assertEqual(
            [node.id for node in iter_nodes(self.session.visible_nodes)],
            ["1", "1.1", "1.1.2"],
        )
        self.session.on_check_change("1.1.2", True)
        self.assertEqual(
            [node.id for node in iter_nodes(self.session.visible_nodes)],
            ["1", "1.1", "1.1.2"],
        )
        self.assertTrue(self.session.get_node("1.1.2").checked)

        self.session.set_search_query("")
        build_tree_index(self.session.nodes)
        self.assertEqual(len(list(iter_nodes(self.session.visible_nodes))), 6)


if __name__ == "__main__":
    unittest.main()
