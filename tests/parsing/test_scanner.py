"""
Tests for the quote-aware scanning helpers.
"""

import pytest

from htmldsl.exceptions import GrammarError
from htmldsl.parsing.scanner import (
    find_matching_paren,
    find_unquoted,
    iter_unquoted,
    split_constraint_entries,
    split_unquoted,
    unquote,
)


class TestIterUnquoted:
    def test_skips_quoted_regions(self):
        chars = "".join(char for _, char in iter_unquoted("a'b'c\"d\"e"))
        assert chars == "ace"

    def test_other_quote_inside_quoted_region(self):
        chars = "".join(char for _, char in iter_unquoted("x\"it's\"y"))
        assert chars == "xy"

    def test_unterminated_quote_raises(self):
        with pytest.raises(GrammarError, match="Unterminated"):
            list(iter_unquoted("a 'b"))


class TestSplitUnquoted:
    def test_split_outside_quotes(self):
        assert split_unquoted('a|"b|c"|d', "|") == ["a", '"b|c"', "d"]

    def test_keeps_empty_pieces(self):
        assert split_unquoted("a,,b", ",") == ["a", "", "b"]

    def test_empty_text(self):
        assert split_unquoted("", "|") == []


class TestParentheses:
    def test_find_unquoted(self):
        assert find_unquoted("')' )", ")") == 4
        assert find_unquoted("abc", ")") == -1

    def test_matching_paren_with_nesting(self):
        text = "(a (b) ')')"
        assert find_matching_paren(text, 0) == len(text) - 1

    def test_unclosed_paren(self):
        assert find_matching_paren("(a (b)", 0) == -1


class TestSplitConstraintEntries:
    """A comma separates entries only before a known keyword."""

    KEYWORDS = ("enum", "min", "max")

    def test_value_list_stays_intact(self):
        assert split_constraint_entries("enum:A,B, min:1", self.KEYWORDS) == [
            "enum:A,B",
            "min:1",
        ]

    def test_quoted_keyword_is_not_a_boundary(self):
        assert split_constraint_entries("enum:'a, max:1',b", self.KEYWORDS) == [
            "enum:'a, max:1',b"
        ]

    def test_blank_entries_dropped(self):
        assert split_constraint_entries("  ", self.KEYWORDS) == []


class TestUnquote:
    @pytest.mark.parametrize(
        "token,expected",
        [("'a'", "a"), ('"a b"', "a b"), ("'a\"", "'a\""), ("a", "a"), ("'", "'"), ("''", "")],
    )
    def test_unquote(self, token, expected):
        assert unquote(token) == expected
