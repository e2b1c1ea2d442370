"""Tests for local search, creatable decoration, and multi-select pinning."""

from __future__ import annotations

import unittest

from lazyselect.option_tree import (
    CREATABLE,
    Group,
    Leaf,
    append_creatable,
    normalize_query,
    pin_selected,
    search_local,
)

FRUIT_TREE = (
    Leaf("Apple", "apple"),
    Group(
        "Citrus",
        (
            Leaf("Lemon", "lemon"),
            Leaf("Orange", "orange"),
        ),
    ),
    Group("Berries", (Leaf("Blueberry", "blueberry"),)),
    Leaf(42, "forty-two"),
)


class SearchLocalTests(unittest.TestCase):
    def test_empty_and_blank_queries_return_the_same_tree(self) -> None:
        self.assertIs(search_local(FRUIT_TREE, ""), FRUIT_TREE)
        self.assertIs(search_local(FRUIT_TREE, "   "), FRUIT_TREE)

    def test_match_is_case_insensitive_and_trimmed(self) -> None:
        self.assertEqual(normalize_query("  LeM "), "lem")
        self.assertEqual(
            search_local(FRUIT_TREE, " LEM "),
            (Group("Citrus", (Leaf("Lemon", "lemon"),)),),
        )

    def test_groups_without_matching_children_are_dropped(self) -> None:
        self.assertEqual(search_local(FRUIT_TREE, "apple"), (Leaf("Apple", "apple"),))

    def test_group_labels_do_not_match_by_themselves(self) -> None:
        self.assertEqual(search_local(FRUIT_TREE, "citrus"), ())

    def test_matches_across_several_groups_keep_tree_order(self) -> None:
        self.assertEqual(
            search_local(FRUIT_TREE, "e"),
            (
                Leaf("Apple", "apple"),
                Group("Citrus", (Leaf("Lemon", "lemon"), Leaf("Orange", "orange"))),
                Group("Berries", (Leaf("Blueberry", "blueberry"),)),
            ),
        )

    def test_non_text_labels_never_match(self) -> None:
        self.assertEqual(search_local(FRUIT_TREE, "42"), ())

    def test_input_tree_is_not_mutated(self) -> None:
        before = FRUIT_TREE
        search_local(FRUIT_TREE, "o")
        self.assertEqual(FRUIT_TREE, before)
        self.assertEqual(len(FRUIT_TREE[1].options), 2)


class CreatableTests(unittest.TestCase):
    def test_sentinel_is_appended_only_when_enabled_with_text(self) -> None:
        tree = (Leaf("A", 1),)
        self.assertEqual(append_creatable(tree, "x", True), (Leaf("A", 1), CREATABLE))
        self.assertIs(append_creatable(tree, "", True), tree)
        self.assertIs(append_creatable(tree, "x", False), tree)

    def test_sentinel_is_appended_even_to_empty_results(self) -> None:
        self.assertEqual(append_creatable((), "xyz", True), (CREATABLE,))


class PinSelectedTests(unittest.TestCase):
    def test_selected_leaves_move_to_the_head_without_duplicates(self) -> None:
        picked = [Leaf("Orange", "orange"), Leaf("Apple", "apple")]
        self.assertEqual(
            pin_selected(FRUIT_TREE, picked),
            (
                Leaf("Orange", "orange"),
                Leaf("Apple", "apple"),
                Group("Citrus", (Leaf("Lemon", "lemon"),)),
                Group("Berries", (Leaf("Blueberry", "blueberry"),)),
                Leaf(42, "forty-two"),
            ),
        )

    def test_group_emptied_by_dedupe_is_dropped(self) -> None:
        tree = (Leaf("A", 1), Group("Group", (Leaf("B", 2),)))
        self.assertEqual(pin_selected(tree, [Leaf("B", 2)]), (Leaf("B", 2), Leaf("A", 1)))

    def test_originally_empty_group_survives(self) -> None:
        tree = (Group("Empty", ()), Leaf("A", 1))
        self.assertEqual(pin_selected(tree, [Leaf("A", 1)]), (Leaf("A", 1), Group("Empty", ())))

    def test_no_selection_returns_the_same_tree(self) -> None:
        self.assertIs(pin_selected(FRUIT_TREE, []), FRUIT_TREE)

    def test_repinning_the_unpinned_result_restores_deselected_entries(self) -> None:
        pinned = pin_selected(FRUIT_TREE, [Leaf("Apple", "apple"), Leaf("Lemon", "lemon")])
        self.assertNotIn(Leaf("Apple", "apple"), pinned[2:])

        repinned = pin_selected(FRUIT_TREE, [Leaf("Lemon", "lemon")])
        self.assertEqual(
            repinned,
            (
                Leaf("Lemon", "lemon"),
                Leaf("Apple", "apple"),
                Group("Citrus", (Leaf("Orange", "orange"),)),
                Group("Berries", (Leaf("Blueberry", "blueberry"),)),
                Leaf(42, "forty-two"),
            ),
        )


if __name__ == "__main__":
    unittest.main()
