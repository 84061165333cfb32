# tests/test_core/test_line.py
"""Unit tests for the grapheme-aware `Line`.
===========================================

Covers segmentation into fragments (widths and placeholders), column-window
slicing, editing by grapheme index, and substring search.
"""

import pytest

from tedit.core.Line import (
    CONTROL_REPLACEMENT,
    TRUNCATION_MARKER,
    WHITESPACE_REPLACEMENT,
    ZERO_WIDTH_REPLACEMENT,
    Fragment,
    GraphemeWidth,
    Line,
    replacement_character,
)


TEXTS = [
    "",
    "hello",
    "héllo wörld",
    "e\u0301tude",  # decomposed e + combining acute
    "日本語テキスト",
    "tab\there",
    "family: 👨\u200d👩\u200d👧",
    "bell\x07char",
    "nbsp\u00a0here",
]


# --- Segmentation ---------------------------------------------------------------
@pytest.mark.parametrize("text", TEXTS)
def test_str_round_trip(text: str) -> None:
    """`str(Line(s))` reproduces `s` exactly, placeholders never leak into it."""
    assert str(Line(text)) == text
    assert Line.from_text(text).to_display_string() == text


def test_combining_mark_is_one_cluster() -> None:
    line = Line("e\u0301a")
    assert line.grapheme_count() == 2
    assert line.get_fragment(0).grapheme == "e\u0301"
    assert line.width_until(2) == 2


def test_wide_glyphs_take_two_columns() -> None:
    line = Line("a日b")
    assert [f.render_width for f in line.fragments] == [
        GraphemeWidth.HALF,
        GraphemeWidth.FULL,
        GraphemeWidth.HALF,
    ]
    assert line.width() == 4
    assert line.width_until(2) == 3
    assert line.render_width_until(99) == 4


def test_zwj_sequence_is_one_cluster() -> None:
    line = Line("👨\u200d👩\u200d👧")
    assert line.grapheme_count() == 1


@pytest.mark.parametrize(
    "grapheme, expected",
    [
        ("\t", " "),
        (" ", None),
        ("\u00a0", WHITESPACE_REPLACEMENT),
        ("\u3000", WHITESPACE_REPLACEMENT),
        ("\x07", CONTROL_REPLACEMENT),
        ("\x1c", CONTROL_REPLACEMENT),
        ("\x1f", CONTROL_REPLACEMENT),
        ("\x0c", WHITESPACE_REPLACEMENT),
        ("\u2028", WHITESPACE_REPLACEMENT),
        ("\u200b", ZERO_WIDTH_REPLACEMENT),
        ("a", None),
        ("日", None),
    ],
)
def test_replacement_rules(grapheme: str, expected) -> None:
    assert replacement_character(grapheme) == expected


def test_replaced_fragments_are_half_width() -> None:
    fragment = Fragment.from_grapheme("\u3000")
    assert fragment.replacement == WHITESPACE_REPLACEMENT
    assert fragment.render_width is GraphemeWidth.HALF


@pytest.mark.parametrize("grapheme", [" ", "\t", "\u00a0"])
def test_whitespace_fragments(grapheme: str) -> None:
    assert Fragment.from_grapheme(grapheme).is_whitespace()


def test_non_whitespace_fragment() -> None:
    assert not Fragment.from_grapheme("x").is_whitespace()
    assert not Fragment.from_grapheme("\x07").is_whitespace()
    assert not Fragment.from_grapheme("\x1e").is_whitespace()


# --- Visible slices -------------------------------------------------------------
def test_visible_slice_plain() -> None:
    line = Line("hello world")
    assert line.visible_slice(0, 5) == "hello"
    assert line.visible_slice(6, 11) == "world"
    assert line.visible_slice(6, 100) == "world"


def test_visible_slice_empty_window() -> None:
    line = Line("hello")
    assert line.visible_slice(3, 3) == ""
    assert line.visible_slice(4, 2) == ""
    assert line.visible_slice(10, 20) == ""


def test_visible_slice_uses_placeholders() -> None:
    assert Line("a\tb\x07").visible_slice(0, 10) == "a b" + CONTROL_REPLACEMENT


def test_visible_slice_truncates_wide_glyph_at_right_edge() -> None:
    # "a" occupies column 0, "日" columns 1-2: a window of 2 cuts it in half.
    assert Line("a日b").visible_slice(0, 2) == "a" + TRUNCATION_MARKER


def test_visible_slice_truncates_wide_glyph_at_left_edge() -> None:
    # The window starts in the middle of "日"; the walk stops at the marker.
    assert Line("日本").visible_slice(1, 4) == TRUNCATION_MARKER


def test_get_visible_graphemes_takes_a_range() -> None:
    assert Line("abcdef").get_visible_graphemes(range(1, 4)) == "bcd"


def test_scrolled_window_over_accented_text() -> None:
    """A 5-column window scrolled right by 3 shows whole glyphs only."""
    line = Line("héllo wörld")
    assert line.visible_slice(0, 5) == "héllo"
    assert line.visible_slice(3, 8) == "lo wö"
    for left in range(line.width()):
        window = line.visible_slice(left, left + 5)
        assert len(Line(window).fragments) <= 5
        assert TRUNCATION_MARKER not in window


# --- Mutation -------------------------------------------------------------------
def test_insert_char_in_the_middle() -> None:
    line = Line("hllo")
    line.insert_char("e", 1)
    assert str(line) == "hello"


def test_insert_at_end_equals_append() -> None:
    inserted = Line("héllo")
    inserted.insert_char("!", inserted.grapheme_count())
    appended = Line("héllo")
    appended.append(Line("!"))
    assert inserted == appended


def test_insert_past_end_appends() -> None:
    line = Line("ab")
    line.insert_char("c", 10)
    assert str(line) == "abc"


def test_inserting_combining_mark_merges_with_base() -> None:
    line = Line("e")
    line.insert_char("\u0301", 1)
    assert line.grapheme_count() == 1
    assert str(line) == "e\u0301"


def test_delete_removes_a_whole_cluster() -> None:
    line = Line("ae\u0301b")
    line.delete(1)
    assert str(line) == "ab"


@pytest.mark.parametrize("index", [-1, 3, 99])
def test_delete_out_of_range_is_noop(index: int) -> None:
    line = Line("abc")
    line.delete(index)
    assert str(line) == "abc"


@pytest.mark.parametrize("text", TEXTS)
def test_split_then_append_reconstructs(text: str) -> None:
    line = Line(text)
    for at in range(line.grapheme_count() + 1):
        head = Line(text)
        tail = head.split(at)
        assert head.grapheme_count() == at
        head.append(tail)
        assert str(head) == text


def test_split_past_end_returns_empty_line() -> None:
    line = Line("abc")
    tail = line.split(5)
    assert tail.is_empty()
    assert str(line) == "abc"


def test_append_resegments_across_the_seam() -> None:
    line = Line("e")
    line.append(Line("\u0301x"))
    assert line.grapheme_count() == 2


# --- Search ---------------------------------------------------------------------
def test_search_forward_returns_grapheme_index() -> None:
    line = Line("héllo héllo")
    assert line.search_forward("llo") == 2
    assert line.search_forward("llo", 3) == 8
    assert line.search_forward("llo", 9) is None


def test_search_forward_match_at_from_is_kept() -> None:
    assert Line("abcabc").search_forward("abc", 3) == 3


def test_search_backward_is_strictly_before() -> None:
    line = Line("abcabc")
    assert line.search_backward("abc", 6) == 3
    assert line.search_backward("abc", 3) == 0
    assert line.search_backward("abc", 0) is None


def test_search_with_wide_glyphs() -> None:
    assert Line("日本語テキスト").search_forward("テキ") == 3


def test_search_ignores_matches_inside_a_cluster() -> None:
    # "e" alone is only the first code point of the cluster "é" (decomposed).
    line = Line("e\u0301e")
    assert line.search_forward("e") == 1


def test_empty_query_never_matches() -> None:
    line = Line("abc")
    assert line.search_forward("") is None
    assert line.search_backward("", 3) is None
