"""Tests for plain-text row formatting."""

from __future__ import annotations

import unittest

from lazypicker.selection import SelectionState
from lazypicker.tree_model.rendering import format_flat_row, highlight_substring
from lazypicker.tree_model.types import FlatRow


class FormatFlatRowTests(unittest.TestCase):
    def test_collapsed_parent_row_in_multi_select(self) -> None:
        row = FlatRow(id="1", label="Documents", level=0, index=0, path=("1",), has_children=True)

        text = format_flat_row(row, SelectionState(), multi_select=True)

        self.assertEqual(text, "  ▸ [ ] Documents")

    def test_expanded_focused_indeterminate_row(self) -> None:
        row = FlatRow(
            id="1",
            label="Documents",
            level=1,
            index=0,
            path=("0", "1"),
            has_children=True,
            is_expanded=True,
        )

        text = format_flat_row(row, SelectionState(indeterminate=frozenset({"1"})), focused=True, multi_select=True)

        self.assertEqual(text, ">   ▾ [-] Documents")

    def test_single_select_marks_selected_leaf(self) -> None:
        row = FlatRow(id="f", label="Reports.pdf", level=2, index=3, path=("1", "1-1", "f"))

        text = format_flat_row(row, SelectionState(selected=frozenset({"f"})))

        self.assertEqual(text, "        * Reports.pdf")

    def test_loading_suffix_and_search_highlight(self) -> None:
        row = FlatRow(id="1", label="Documents", level=0, index=0, path=("1",), has_children=True, is_loading=True)

        text = format_flat_row(row, SelectionState(), search_query="CUM")

        self.assertTrue(text.endswith("Do[cum]ents (loading…)"))

    def test_highlight_substring_without_match_is_identity(self) -> None:
        self.assertEqual(highlight_substring("Photos", "doc"), "Photos")
        self.assertEqual(highlight_substring("Photos", ""), "Photos")


if __name__ == "__main__":
    unittest.main()
