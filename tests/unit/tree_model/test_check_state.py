"""Tests for tri-state aggregation, toggling, and regex bulk-apply."""

from __future__ import annotations

import unittest

from lazypicker.tree_model import (
    CheckState,
    TreeNode,
    aggregate_check_state,
    apply_pattern_to_children,
    find_by_id,
    next_checked_state,
    set_checked,
)


def _container(*flags: bool) -> TreeNode:
    return TreeNode(
        id="c",
        name="schema",
        children=tuple(
            TreeNode(id=f"c.{idx}", name=f"t{idx}", kind="table", checked=flag) for idx, flag in enumerate(flags)
        ),
        loaded=True,
    )


class AggregateCheckStateTests(unittest.TestCase):
    def test_leaf_reports_its_own_flag(self) -> None:
        self.assertEqual(aggregate_check_state(TreeNode(id="a", name="a", checked=True)), CheckState.CHECKED)
        self.assertEqual(aggregate_check_state(TreeNode(id="a", name="a")), CheckState.UNCHECKED)

    def test_empty_container_behaves_like_leaf(self) -> None:
        empty_checked = TreeNode(id="e", name="e", children=(), loaded=True, checked=True)
        empty_unchecked = TreeNode(id="e", name="e", children=(), loaded=True)

        self.assertEqual(aggregate_check_state(empty_checked), CheckState.CHECKED)
        self.assertEqual(aggregate_check_state(empty_unchecked), CheckState.UNCHECKED)

    def test_three_leaf_children_cover_every_state(self) -> None:
        self.assertEqual(aggregate_check_state(_container(True, False, False)), CheckState.INDETERMINATE)
        self.assertEqual(aggregate_check_state(_container(True, True, True)), CheckState.CHECKED)
        self.assertEqual(aggregate_check_state(_container(False, False, False)), CheckState.UNCHECKED)

    def test_indeterminate_grandchild_makes_ancestor_indeterminate(self) -> None:
        outer = TreeNode(
            id="o",
            name="db",
            children=(_container(True, False), TreeNode(id="o.x", name="x")),
            loaded=True,
        )

        self.assertEqual(aggregate_check_state(outer), CheckState.INDETERMINATE)

    def test_container_flag_is_ignored_when_children_disagree(self) -> None:
        stale = TreeNode(
            id="s",
            name="s",
            checked=True,
            children=(TreeNode(id="s.1", name="x"),),
            loaded=True,
        )

        self.assertEqual(aggregate_check_state(stale), CheckState.UNCHECKED)


class ToggleTests(unittest.TestCase):
    def test_next_state_from_each_state(self) -> None:
        self.assertFalse(next_checked_state(_container(True, True)))
        self.assertTrue(next_checked_state(_container(False, False)))
        self.assertTrue(next_checked_state(_container(True, False)))

    def test_toggling_indeterminate_container_yields_checked(self) -> None:
        nodes = (_container(True, False, False),)

        updated = set_checked(nodes, "c", next_checked_state(nodes[0]))

        self.assertEqual(aggregate_check_state(find_by_id(updated, "c")), CheckState.CHECKED)


class ApplyPatternTests(unittest.TestCase):
    def _schema(self) -> tuple[TreeNode, ...]:
        return (
            TreeNode(
                id="1.1",
                name="Schema Public",
                children=(
                    TreeNode(id="1.1.1", name="users", kind="table", checked=False),
                    TreeNode(id="1.1.2", name="products", kind="table", checked=True),
                    TreeNode(id="1.1.3", name="user_roles", kind="table"),
                ),
                loaded=True,
            ),
        )

    def test_matching_children_are_checked_and_others_unchecked(self) -> None:
        updated, error = apply_pattern_to_children(self._schema(), "1.1", "^user")

        self.assertIsNone(error)
        self.assertTrue(find_by_id(updated, "1.1.1").checked)
        self.assertFalse(find_by_id(updated, "1.1.2").checked)
        self.assertTrue(find_by_id(updated, "1.1.3").checked)
        self.assertEqual(aggregate_check_state(find_by_id(updated, "1.1")), CheckState.INDETERMINATE)

    def test_pattern_searches_anywhere_in_name(self) -> None:
        updated, _error = apply_pattern_to_children(self._schema(), "1.1", "duct")

        self.assertTrue(find_by_id(updated, "1.1.2").checked)
        self.assertFalse(find_by_id(updated, "1.1.1").checked)

    def test_invalid_pattern_reports_error_and_leaves_tree(self) -> None:
        nodes = self._schema()

        updated, error = apply_pattern_to_children(nodes, "1.1", "user(")

        self.assertIs(updated, nodes)
        self.assertIsNotNone(error)

    def test_blank_pattern_is_ignored(self) -> None:
        nodes = self._schema()

        updated, error = apply_pattern_to_children(nodes, "1.1", "   ")

        self.assertIs(updated, nodes)
        self.assertIsNone(error)


if __name__ == "__main__":
    unittest.main()
