"""Tests for filter-expression composition."""

from __future__ import annotations

import unittest

from revpicker.vcs.revsets import combine_revsets, jj_range_start_filter, range_start_filter


class RevsetTests(unittest.TestCase):
    def test_combine_ands_both_sides_in_parentheses(self) -> None:
        self.assertEqual(combine_revsets("::abc", "mine()"), "(::abc) & (mine())")

    def test_combine_with_one_side_unset(self) -> None:
        self.assertEqual(combine_revsets("::abc", None), "::abc")
        self.assertEqual(combine_revsets("", "mine()"), "mine()")
        self.assertIsNone(combine_revsets(None, ""))

    def test_jj_start_filter_bounds_ancestors_by_trunk(self) -> None:
        self.assertEqual(range_start_filter("jj", "abc123"), "(::abc123) & (trunk()::)")
        self.assertEqual(jj_range_start_filter("abc123", "main"), "(::abc123) & (main::)")

    def test_git_start_filter_adds_nothing(self) -> None:
        self.assertIsNone(range_start_filter("git", "abc123"))


if __name__ == "__main__":
    unittest.main()
