# tests/test_core/test_row_store.py
"""RowStore Tests
=================

Unit tests for `wee.core.RowStore`:

1. Row numbering after structural edits.
2. Character/render column mapping with tabs.
3. In-row and multi-row edits, including their exact inverses.
4. Multi-line comment cascades through `SyntaxEngine`.
5. Validation: out-of-range positions raise before anything changes.
6. Search and whole-word replacement.
"""

from unittest.mock import patch

import pytest

from wee.core.RowStore import (
    InvalidPositionError,
    RowStore,
    char_to_render_column,
    expand_tabs,
    render_to_char_column,
)
from wee.core.Syntax import Highlight, SyntaxEngine


def make_store(lines, profile=None) -> RowStore:
    store = RowStore(SyntaxEngine(profile))
    store.load_rows(lines)
    return store


def assert_indices(store: RowStore) -> None:
    assert [row.idx for row in store] == list(range(store.numrows))


# --------------------------------------------------------------------------
# Row numbering
# --------------------------------------------------------------------------
def test_idx_invariant_after_structural_edits():
    """Every structural operation leaves ``rows[i].idx == i``."""
    store = make_store(["zero", "one", "two", "three"])

    store.insert_row(1, "inserted")
    assert_indices(store)
    store.delete_row(0)
    assert_indices(store)
    store.split_row(1, 2)
    assert_indices(store)
    store.join_row(0)
    assert_indices(store)
    store.move_block(1, 2, 1)
    assert_indices(store)
    store.insert_text(0, 2, "a\nb\nc")
    assert_indices(store)
    store.delete_range((0, 1), (2, 0))
    assert_indices(store)


def test_insert_row_at_end_appends():
    store = make_store(["a"])
    store.insert_row(1, "b")
    assert store.lines() == ["a", "b"]
    assert store.dirty is True


# --------------------------------------------------------------------------
# Column mapping
# --------------------------------------------------------------------------
def test_expand_tabs_to_next_stop():
    assert expand_tabs("a\tb") == "a   b"
    assert expand_tabs("\t") == "    "
    assert expand_tabs("abcd\te") == "abcd    e"


@pytest.mark.parametrize("chars", ["", "plain", "a\tb", "\t\tx", "ab\tc\td", "abcd\t"])
def test_column_round_trip(chars):
    """render_to_char_column inverts char_to_render_column for every char column."""
    for cx in range(len(chars) + 1):
        rx = char_to_render_column(chars, cx)
        assert render_to_char_column(chars, rx) == cx


def test_render_column_inside_tab_maps_to_tab():
    # "a\tb" renders as "a   b": render columns 1..3 belong to the tab
    assert char_to_render_column("a\tb", 2) == 4
    for rx in (1, 2, 3):
        assert render_to_char_column("a\tb", rx) == 1


def test_store_column_mapping_on_virtual_row():
    store = make_store(["x"])
    assert store.char_to_render_column(1, 0) == 0
    assert store.render_to_char_column(1, 5) == 0


# --------------------------------------------------------------------------
# Edits and their inverses
# --------------------------------------------------------------------------
def test_insert_then_delete_char_is_identity():
    store = make_store(["hello", "world"])
    for col in range(len("hello") + 1):
        store.insert_char(0, col, "X")
        assert store.delete_char(0, col) == "X"
        assert store.lines() == ["hello", "world"]


def test_split_then_join_is_identity():
    original = ["first line", "second\tline"]
    for col in range(len(original[1]) + 1):
        store = make_store(original)
        store.split_row(1, col)
        assert store.numrows == 3
        assert store.join_row(1) == col
        assert store.lines() == original
        assert store[1].render == expand_tabs(original[1])


def test_render_and_highlight_follow_chars():
    store = make_store(["x"])
    store.insert_string(0, 1, "\ty")
    row = store[0]
    assert row.chars == "x\ty"
    assert row.render == "x   y"
    assert len(row.hl) == len(row.render)


def test_replace_at_and_append_string():
    store = make_store(["hello world"])
    store.replace_at(0, 6, 5, "there")
    assert store[0].chars == "hello there"
    store.append_string(0, "!")
    assert store[0].chars == "hello there!"
    with pytest.raises(InvalidPositionError):
        store.replace_at(0, 10, 5, "x")


def test_move_block_transfers_row_objects():
    store = make_store(["a", "b", "c", "d"])
    row_b, row_c = store[1], store[2]

    store.move_block(1, 2, -1)

    assert store.lines() == ["b", "c", "a", "d"]
    assert store[0] is row_b
    assert store[1] is row_c
    assert_indices(store)


def test_move_block_rejects_edges():
    store = make_store(["a", "b"])
    with pytest.raises(InvalidPositionError):
        store.move_block(0, 0, -1)
    with pytest.raises(InvalidPositionError):
        store.move_block(1, 1, 1)
    with pytest.raises(ValueError):
        store.move_block(0, 0, 2)
    assert store.lines() == ["a", "b"]


def test_text_in_range_and_delete_range_multi_row():
    store = make_store(["abc", "def", "ghi"])
    assert store.text_in_range((0, 1), (2, 1)) == "bc\ndef\ng"

    removed = store.delete_range((0, 1), (2, 1))

    assert removed == "bc\ndef\ng"
    assert store.lines() == ["ahi"]


def test_delete_range_single_row():
    store = make_store(["abcdef"])
    assert store.delete_range((0, 1), (0, 4)) == "bcd"
    assert store.lines() == ["aef"]


def test_delete_range_empty_is_noop():
    store = make_store(["abc"])
    store.dirty = False
    assert store.delete_range((0, 1), (0, 1)) == ""
    assert store.lines() == ["abc"]
    assert store.dirty is False


def test_insert_text_with_newlines():
    store = make_store(["abc"])
    end = store.insert_text(0, 1, "X\nY\nZ")
    assert store.lines() == ["aX", "Y", "Zbc"]
    assert end == (2, 1)


def test_insert_text_on_virtual_row_creates_it():
    store = make_store(["abc"])
    end = store.insert_text(1, 0, "tail")
    assert store.lines() == ["abc", "tail"]
    assert end == (1, 4)


def test_insert_then_delete_range_is_identity():
    store = make_store(["abc", "def"])
    end = store.insert_text(0, 2, "1\n2\n3")
    store.delete_range((0, 2), end)
    assert store.lines() == ["abc", "def"]


# --------------------------------------------------------------------------
# Validation
# --------------------------------------------------------------------------
def test_invalid_positions_raise_without_mutation():
    store = make_store(["abc"])
    store.dirty = False

    with pytest.raises(InvalidPositionError):
        store.insert_char(5, 0, "x")
    with pytest.raises(InvalidPositionError):
        store.insert_char(0, 4, "x")
    with pytest.raises(InvalidPositionError):
        store.delete_char(0, 3)
    with pytest.raises(InvalidPositionError):
        store.join_row(0)
    with pytest.raises(InvalidPositionError):
        store.delete_range((0, 0), (3, 0))

    assert store.lines() == ["abc"]
    assert store.dirty is False


def test_invalid_position_error_is_index_error():
    assert issubclass(InvalidPositionError, IndexError)


# --------------------------------------------------------------------------
# Highlighting
# --------------------------------------------------------------------------
def test_opening_comment_cascades_to_following_rows(c_profile):
    store = make_store(["a", "b", "c"], c_profile)
    store.set_row_text(0, "/* a")

    assert [row.hl_open_comment for row in store] == [True, True, True]
    assert set(store[1].hl) == {Highlight.MLCOMMENT}
    assert set(store[2].hl) == {Highlight.MLCOMMENT}


def test_removing_comment_opener_stops_at_real_extent(c_profile):
    """Only rows whose entering comment state changed are recomputed."""
    store = make_store(["/* start", "middle", "end */", "int x;"], c_profile)
    assert [row.hl_open_comment for row in store] == [True, True, False, False]

    engine = store.syntax
    with patch.object(engine, "highlight_line", wraps=engine.highlight_line) as spy:
        store.set_row_text(0, "start")

    assert [row.hl_open_comment for row in store] == [False, False, False, False]
    assert set(store[1].hl) == {Highlight.NORMAL}
    assert set(store[2].hl) == {Highlight.NORMAL}
    # row 0 itself, row 1 (state changed) and row 2 (state unchanged: stop)
    assert spy.call_count == 3
    assert store[3].hl[:3] == [Highlight.KEYWORD2] * 3


def test_inserting_row_inside_comment_is_highlighted(c_profile):
    store = make_store(["/* open", "close */"], c_profile)
    store.insert_row(1, "inside")
    assert store[1].hl_open_comment is True
    assert set(store[1].hl) == {Highlight.MLCOMMENT}
    assert store[2].hl_open_comment is False


def test_move_block_recomputes_comment_state(c_profile):
    store = make_store(["x", "/* open", "y"], c_profile)
    assert store[2].hl_open_comment is True

    store.move_block(1, 1, 1)

    assert store.lines() == ["x", "y", "/* open"]
    assert store[1].hl_open_comment is False
    assert set(store[1].hl) == {Highlight.NORMAL}
    assert store[2].hl_open_comment is True


# --------------------------------------------------------------------------
# Persistence boundary
# --------------------------------------------------------------------------
def test_rows_to_text_terminates_every_row():
    store = make_store(["a", "", "b"])
    assert store.rows_to_text() == "a\n\nb\n"
    assert make_store([]).rows_to_text() == ""


def test_load_rows_strips_line_endings_and_clears_dirty():
    store = make_store([])
    store.insert_row(0, "junk")
    store.load_rows(["one\r\n", "two\n", "three"])
    assert store.lines() == ["one", "two", "three"]
    assert store.dirty is False
    assert_indices(store)


def test_load_text_accepts_bytes():
    store = make_store([])
    store.load_text("héllo\nwörld ñandú çà\n".encode("utf-8"))
    assert store.lines() == ["héllo", "wörld ñandú çà"]


# --------------------------------------------------------------------------
# Search and replace
# --------------------------------------------------------------------------
def test_find_wraps_around():
    store = make_store(["foo", "bar foo"])
    assert store.find("foo", -1, 1) == (0, 0, 0)
    assert store.find("foo", 0, 1) == (1, 4, 4)
    assert store.find("foo", 1, 1) == (0, 0, 0)
    assert store.find("foo", 0, -1) == (1, 4, 4)
    assert store.find("missing") is None


def test_find_reports_char_and_render_columns():
    store = make_store(["\tfoo"])
    assert store.find("foo") == (0, 1, 4)


def test_count_and_replace_whole_words_only():
    store = make_store(["foo food foo_bar (foo)", "foo"])
    assert store.count_occurrences("foo") == 3
    assert store.count_occurrences("foo", 0) == 2

    assert store.replace_all("foo", "x") == 3
    assert store.lines() == ["x food foo_bar (x)", "x"]
    assert store.count_occurrences("foo") == 0
