# tests/test_core/test_selection.py
"""Selection Tests
==================

Tests for `wee.core.Selection` and the selection operations reached through
the editor (`wee.core.SelectionManager`):

1. Normalisation and value semantics of `Selection`.
2. Creating selections: quick extension, marks, select all, row text, delimiters.
3. Range edits: delete, copy, cut, paste, typing over a selection.
4. Indent/unindent and block moves.
"""

from unittest.mock import PropertyMock, patch

import pytest

from wee.core.Clipboard import Clipboard
from wee.core.Selection import EditMode, Selection


def place(ed, row, col):
    ed.cursor_y, ed.cursor_x = row, col


# --------------------------------------------------------------------------
# Selection model
# --------------------------------------------------------------------------
class TestSelectionModel:
    def test_normalized_orders_endpoints(self):
        sel = Selection()
        assert sel.normalized() is None

        sel.start((2, 1), (0, 4))
        assert sel.normalized() == ((0, 4), (2, 1))
        sel.start((0, 1), (0, 3))
        assert sel.normalized() == ((0, 1), (0, 3))

    def test_copy_is_independent(self):
        sel = Selection((0, 0), (1, 1), True, EditMode.SELECTING)
        clone = sel.copy()
        assert clone == sel
        clone.clear()
        assert sel.active is True
        assert sel.mode is EditMode.SELECTING

    def test_clear_returns_to_normal_mode(self):
        sel = Selection((0, 0), (0, 2), True, EditMode.SELECTING)
        sel.clear()
        assert sel.active is False
        assert sel.mode is EditMode.NORMAL
        assert sel.is_empty

    def test_set_normalized_keeps_orientation(self):
        sel = Selection((3, 0), (1, 0), True)
        sel.set_normalized((0, 0), (2, 0))
        assert sel.anchor == (2, 0)
        assert sel.cursor == (0, 0)


# --------------------------------------------------------------------------
# Creating selections
# --------------------------------------------------------------------------
def test_quick_select_char_crosses_rows_and_clears_at_anchor(make_editor):
    ed = make_editor(["abc", "def"])
    place(ed, 0, 2)

    assert ed.extend_selection_right()
    assert ed.selection.normalized() == ((0, 2), (0, 3))
    assert ed.status_message == "Selection active"

    ed.extend_selection_right()
    assert ed.cursor == (1, 0)
    assert ed.get_selected_text() == "c\n"

    ed.extend_selection_left()
    ed.extend_selection_left()
    assert ed.selection.active is False
    assert ed.cursor == (0, 2)
    assert ed.status_message == "Selection cleared"


def test_quick_select_char_on_virtual_row(make_editor):
    ed = make_editor(["abc"])
    place(ed, 1, 0)
    assert ed.extend_selection_right() is False
    assert ed.status_message == "No text to select"


def test_quick_select_line_down_then_back(make_editor):
    ed = make_editor(["a", "bb", "ccc"])
    place(ed, 0, 0)

    ed.extend_selection_down()
    assert ed.selection.normalized() == ((0, 0), (1, 2))
    assert ed.cursor == (1, 2)
    assert ed.status_message == "Selected: lines 1-2"

    ed.extend_selection_up()
    assert ed.selection.active is False
    assert ed.cursor == (0, 0)


def test_quick_select_line_up_selects_whole_rows(make_editor):
    ed = make_editor(["a", "bb", "ccc"])
    place(ed, 1, 1)

    ed.extend_selection_up()

    assert ed.selection.anchor == (1, 2)
    assert ed.selection.cursor == (0, 0)
    assert ed.get_selected_text() == "a\nbb"


def test_quick_select_line_stops_at_document_edges(make_editor):
    ed = make_editor(["only"])
    assert ed.extend_selection_up() is False
    assert ed.status_message == "Cannot move up - at beginning of file"
    assert ed.extend_selection_down() is False


def test_mark_end_requires_start(make_editor):
    ed = make_editor(["hello world"])
    assert ed.mark_selection_end() is False
    assert ed.selection.active is False

    place(ed, 0, 6)
    ed.mark_selection_start()
    place(ed, 0, 11)
    assert ed.mark_selection_end()
    assert ed.get_selected_text() == "world"
    assert ed.mode is EditMode.SELECTING


def test_select_all(make_editor):
    ed = make_editor(["ab", "cd"])
    assert ed.select_all()
    assert ed.selection.normalized() == ((0, 0), (1, 2))
    assert ed.mode is EditMode.SELECTING
    assert make_editor([]).select_all() is False


def test_select_row_text_trims_whitespace(make_editor):
    ed = make_editor(["   foo bar  ", "    "])
    place(ed, 0, 0)
    assert ed.select_row_text()
    assert ed.selection.normalized() == ((0, 3), (0, 10))
    assert ed.cursor_x == 3

    place(ed, 1, 0)
    assert ed.select_row_text() is False
    assert ed.status_message == "Line contains only whitespace - nothing to select"


@pytest.mark.parametrize(
    "line, cursor_x, expected",
    [
        ("call(a, [b])", 9, "b"),
        ("call(a, [b])", 6, "a, [b]"),
        ('x = "hi there"', 7, "hi there"),
    ],
)
def test_select_inside_delimiters(make_editor, line, cursor_x, expected):
    ed = make_editor([line])
    place(ed, 0, cursor_x)
    assert ed.select_inside_delimiters()
    assert ed.get_selected_text() == expected
    assert ed.mode is EditMode.SELECTING


def test_select_inside_delimiters_without_pair(make_editor):
    ed = make_editor(["plain text"])
    place(ed, 0, 3)
    assert ed.select_inside_delimiters() is False
    assert ed.status_message == "No surrounding delimiters found"


# --------------------------------------------------------------------------
# Range edits
# --------------------------------------------------------------------------
def test_delete_selection_then_undo_restores_rows_and_selection(make_editor):
    ed = make_editor(["abc", "def"])
    ed.selection.start((0, 1), (1, 2))

    assert ed.delete_selection()
    assert ed.rows.lines() == ["af"]
    assert ed.cursor == (0, 1)
    assert ed.selection.active is False

    assert ed.undo()
    assert ed.rows.lines() == ["abc", "def"]
    assert ed.selection == Selection((0, 1), (1, 2), True, EditMode.NORMAL)


def test_delete_selection_ending_before_second_char(make_editor):
    ed = make_editor(["abc", "def"])
    ed.selection.start((0, 1), (1, 1))
    ed.delete_selection()
    assert ed.rows.lines() == ["aef"]


def test_delete_empty_selection_is_noop(make_editor):
    ed = make_editor(["abc"])
    ed.selection.start((0, 1), (0, 1))

    assert ed.delete_selection() is False
    assert ed.rows.lines() == ["abc"]
    assert ed.selection.active is False
    assert ed.status_message == "Empty selection"
    assert len(ed.history) == 0


def test_copy_and_cut_selection(make_editor):
    ed = make_editor(["hello world"])
    ed.selection.start((0, 0), (0, 5))

    assert ed.copy_selection()
    assert ed.clipboard.get() == "hello"
    assert ed.selection.active is False
    assert ed.rows.lines() == ["hello world"]

    ed.selection.start((0, 5), (0, 11))
    assert ed.cut_selection()
    assert ed.clipboard.get() == " world"
    assert ed.rows.lines() == ["hello"]
    assert ed.status_message == "Selection cut."


def test_paste_multiline_selects_pasted_text(make_editor):
    ed = make_editor(["abc"])
    ed.clipboard.set("X\r\nY")
    place(ed, 0, 1)

    assert ed.paste()

    assert ed.rows.lines() == ["aX", "Ybc"]
    assert ed.cursor == (1, 1)
    assert ed.selection.normalized() == ((0, 1), (1, 1))
    assert ed.mode is EditMode.SELECTING
    assert ed.status_message == "Pasted and selected."


def test_paste_replaces_selection(make_editor):
    ed = make_editor(["abc"])
    ed.clipboard.set("Z")
    ed.selection.start((0, 0), (0, 2))
    ed.paste()
    assert ed.rows.lines() == ["Zc"]


def test_paste_with_empty_clipboard(make_editor):
    ed = make_editor(["abc"])
    assert ed.paste() is False
    assert ed.status_message == "Clipboard is empty"


def test_paste_consults_clipboard_emptiness(make_editor):
    ed = make_editor(["abc"])
    ed.clipboard.set("x")
    with patch.object(Clipboard, "is_empty", new_callable=PropertyMock, return_value=True):
        assert ed.paste() is False
    assert ed.rows.lines() == ["abc"]
    assert ed.status_message == "Clipboard is empty"


def test_typing_replaces_selection(make_editor):
    ed = make_editor(["hello", "x"])
    ed.selection.start((0, 0), (0, 5))
    ed.selection.mode = EditMode.SELECTING

    assert ed.insert_char("J")

    assert ed.rows.lines() == ["J", "x"]
    assert ed.selection.active is False
    assert ed.mode is EditMode.NORMAL
    assert ed.history.descriptions()[-1] == "Replace selection"


# --------------------------------------------------------------------------
# Indentation and block moves
# --------------------------------------------------------------------------
def test_indent_then_unindent_round_trip(make_editor):
    ed = make_editor(["one", "two", "three"])
    ed.selection.start((0, 0), (1, 3))

    assert ed.indent_selection()
    assert ed.rows.lines() == ["    one", "    two", "three"]
    assert ed.selection.normalized() == ((0, 4), (1, 7))

    assert ed.unindent_selection()
    assert ed.rows.lines() == ["one", "two", "three"]
    assert ed.selection.normalized() == ((0, 0), (1, 3))


def test_unindent_partial_indentation(make_editor):
    ed = make_editor(["  a", "b"])
    ed.selection.start((0, 0), (1, 1))
    assert ed.unindent_selection()
    assert ed.rows.lines() == ["a", "b"]
    assert ed.unindent_selection() is False
    assert ed.status_message == "Nothing to unindent"


def test_move_full_lines_up(make_editor):
    ed = make_editor(["a", "b", "c"])
    ed.selection.start((1, 0), (1, 1))

    assert ed.move_selection_up()
    assert ed.rows.lines() == ["b", "a", "c"]
    assert ed.selection.normalized() == ((0, 0), (0, 1))

    assert ed.move_selection_up() is False
    assert ed.status_message == "Cannot move selection up - already at top"


def test_move_vertical_requires_full_lines(make_editor):
    ed = make_editor(["abc", "d"])
    ed.selection.start((0, 1), (0, 2))

    assert ed.move_selection_down() is False
    assert ed.status_message == "Cannot move selection down - selection must be full lines"
    assert ed.rows.lines() == ["abc", "d"]
    assert len(ed.history) == 0


def test_move_right_then_left_round_trip(make_editor):
    ed = make_editor(["ab", "cd"])
    ed.selection.start((0, 1), (1, 1))

    assert ed.move_selection_right()
    assert ed.rows.lines() == ["a b", " cd"]
    assert ed.selection.normalized() == ((0, 2), (1, 2))

    assert ed.move_selection_left()
    assert ed.rows.lines() == ["ab", "cd"]
    assert ed.selection.normalized() == ((0, 1), (1, 1))


def test_move_left_needs_spaces(make_editor):
    ed = make_editor(["ab"])
    ed.selection.start((0, 1), (0, 2))
    assert ed.move_selection_left() is False
    assert ed.status_message == "Cannot move selection left - not enough spaces"


def test_block_ops_with_end_on_virtual_row(make_editor):
    ed = make_editor(["  ab", "  cd"])
    place(ed, 0, 2)
    ed.mark_selection_start()
    place(ed, 2, 0)
    ed.mark_selection_end()

    assert ed.move_selection_left()
    assert ed.rows.lines() == [" ab", " cd"]
    assert ed.selection.normalized() == ((0, 1), (2, 0))

    assert ed.indent_selection()
    assert ed.rows.lines() == ["     ab", "     cd"]
    assert ed.selection.normalized() == ((0, 5), (2, 0))

    assert ed.unindent_selection()
    assert ed.rows.lines() == [" ab", " cd"]
    assert ed.selection.normalized() == ((0, 1), (2, 0))

    assert ed.copy_selection()
    assert ed.clipboard.get() == "ab\n cd\n"


def test_move_left_refused_when_selection_starts_on_virtual_row(make_editor):
    ed = make_editor(["  ab"])
    ed.selection.start((1, 0), (1, 0))
    assert ed.move_selection_left() is False
    assert ed.rows.lines() == ["  ab"]


def test_move_unknown_direction_raises(make_editor):
    ed = make_editor(["ab"])
    ed.selection.start((0, 0), (0, 2))
    with pytest.raises(ValueError):
        ed.selection_manager.move("sideways")
