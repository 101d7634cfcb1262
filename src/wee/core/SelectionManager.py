# wee/core/SelectionManager.py
"""wee.core.SelectionManager
============================

Selection-driven editing for the wee editor.

The manager reads and updates the editor's `Selection`, cursor and
`RowStore`. Every range operation works on the normalised range
``start <= end``; the stored anchor/cursor orientation is preserved whenever
both endpoints are rewritten.

Key Features
------------
- Quick extension by character (crossing row boundaries) and by whole rows.
  Returning to the anchor clears the selection.
- Explicit marks (start/end), select all, select the trimmed text of the
  current row, select inside the nearest enclosing delimiter pair.
- Delete, copy, cut and paste of ranges.
- Indent/unindent of every touched row by one tab stop of spaces.
- Moving the selected block one row up/down (whole rows only) or one column
  left/right.

Methods return True when the editor state changed and the screen needs a
redraw. Snapshots for undo are taken by the editor before it calls the
mutating methods here.
"""

import logging
from typing import TYPE_CHECKING, Optional

from wee.core.RowStore import Position
from wee.core.Selection import EditMode

if TYPE_CHECKING:
    from wee.core.Wee import Wee


BRACKET_PAIRS = {"(": ")", "[": "]", "{": "}", "<": ">"}
QUOTE_CHARS = ('"', "'")


def find_matching_right(chars: str, start: int, open_ch: str, close_ch: str) -> int:
    """Index of the bracket closing the one at ``start``, honouring nesting, or -1."""
    depth = 1
    for i in range(start + 1, len(chars)):
        ch = chars[i]
        if ch == open_ch:
            depth += 1
        elif ch == close_ch:
            depth -= 1
            if depth == 0:
                return i
    return -1


def find_next_quote(chars: str, start: int, quote: str) -> int:
    """Index of the next unescaped ``quote`` after ``start``, or -1."""
    escaped = False
    for i in range(start + 1, len(chars)):
        ch = chars[i]
        if not escaped and ch == "\\":
            escaped = True
            continue
        if not escaped and ch == quote:
            return i
        escaped = False
    return -1


## ==================== SelectionManager Class ====================
class SelectionManager:
    """
    Class SelectionManager
    ======================
    Range queries and range-mutating operations on the editor's selection.

    Attributes:
        editor (Wee): Editor state object owning rows, cursor and selection.

    Methods:
        get_normalized_range(): Ordered ``(start, end)`` or None.
        get_selected_text(): Text of the active range.
        quick_select_char(direction), quick_select_line(direction):
            Shift+arrow style extension.
        mark_start(), mark_end(), select_all(), select_row_text(),
        select_inside_delimiters(): Ways of creating a selection.
        enter_selection_mode(), cancel(): Mode switches.
        delete_selection(), copy_selection(), cut_selection(), paste(text):
            Range edits.
        indent(), unindent(): Shift touched rows by one tab stop.
        can_move_left(), is_full_lines(), move(direction): Block moves.
    """

    def __init__(self, editor: "Wee") -> None:
        self.editor = editor

    # ----- Queries -----
    def get_normalized_range(self) -> Optional[tuple[Position, Position]]:
        return self.editor.selection.normalized()

    def get_selected_text(self) -> str:
        rng = self.get_normalized_range()
        if rng is None:
            return ""
        return self.editor.rows.text_in_range(*rng)

    def _sync_cursor(self) -> None:
        """Places the editor cursor on the selection's moving end."""
        self.editor.cursor_y, self.editor.cursor_x = self.editor.selection.cursor

    # ----- Quick selection -----
    def quick_select_char(self, direction: int) -> bool:
        """Extends the selection one character left (-1) or right (+1)."""
        ed = self.editor
        rows = ed.rows
        if ed.cursor_y >= rows.numrows:
            ed._set_status_message("No text to select")
            return False

        sel = ed.selection
        if not sel.active:
            sel.start((ed.cursor_y, ed.cursor_x))

        if direction < 0:
            if ed.cursor_x > 0:
                ed.cursor_x -= 1
            elif ed.cursor_y > 0:
                ed.cursor_y -= 1
                ed.cursor_x = rows.row_length(ed.cursor_y)
        else:
            if ed.cursor_x < rows.row_length(ed.cursor_y):
                ed.cursor_x += 1
            elif ed.cursor_y < rows.numrows - 1:
                ed.cursor_y += 1
                ed.cursor_x = 0

        sel.cursor = (ed.cursor_y, ed.cursor_x)
        if sel.cursor == sel.anchor:
            sel.clear()
            ed._set_status_message("Selection cleared")
        else:
            ed._set_status_message("Selection active")
        return True

    def quick_select_line(self, direction: int) -> bool:
        """Extends the selection by whole rows up (-1) or down (+1) from a fixed anchor row."""
        ed = self.editor
        rows = ed.rows
        if ed.cursor_y >= rows.numrows:
            ed._set_status_message("No line to select")
            return False

        sel = ed.selection
        if not sel.active:
            sel.start((ed.cursor_y, 0), (ed.cursor_y, rows.row_length(ed.cursor_y)))
        anchor_row = sel.anchor[0]
        moving_row = sel.cursor[0]

        if direction < 0:
            if moving_row == 0:
                ed._set_status_message("Cannot move up - at beginning of file")
                return False
            moving_row -= 1
        else:
            if moving_row >= rows.numrows - 1:
                ed._set_status_message("Cannot move down - at end of file")
                return False
            moving_row += 1

        if moving_row == anchor_row:
            sel.clear()
            ed.cursor_y, ed.cursor_x = moving_row, 0
            ed._set_status_message("Selection cleared")
            return True

        # whole rows: the anchor sits on the edge of its row facing away from the moving end
        if moving_row < anchor_row:
            sel.anchor = (anchor_row, rows.row_length(anchor_row))
            sel.cursor = (moving_row, 0)
        else:
            sel.anchor = (anchor_row, 0)
            sel.cursor = (moving_row, rows.row_length(moving_row))
        self._sync_cursor()
        first, last = sorted((anchor_row, moving_row))
        ed._set_status_message(f"Selected: lines {first + 1}-{last + 1}")
        return True

    # ----- Explicit selection -----
    def mark_start(self) -> bool:
        ed = self.editor
        ed.selection.start((ed.cursor_y, ed.cursor_x))
        ed._set_status_message("Selection start set")
        return True

    def mark_end(self) -> bool:
        ed = self.editor
        if not ed.selection.active:
            ed._set_status_message("Set the selection start first (Ctrl-B)")
            return False
        ed.selection.cursor = (ed.cursor_y, ed.cursor_x)
        ed.selection.mode = EditMode.SELECTING
        ed._set_status_message("Selection end set. Entering SELECTING mode.")
        return True

    def select_all(self) -> bool:
        ed = self.editor
        rows = ed.rows
        if rows.numrows == 0:
            ed._set_status_message("No text to select.")
            return False
        last = rows.numrows - 1
        ed.selection.start((0, 0), (last, rows.row_length(last)))
        ed.selection.mode = EditMode.SELECTING
        ed._set_status_message("All text selected.")
        return True

    def select_row_text(self) -> bool:
        """Selects the current row from its first to its last non-whitespace character."""
        ed = self.editor
        if ed.cursor_y >= ed.rows.numrows:
            ed._set_status_message("No line to select")
            return False
        chars = ed.rows[ed.cursor_y].chars
        if not chars:
            ed._set_status_message("Empty line - nothing to select")
            return False
        stripped = chars.strip()
        if not stripped:
            ed._set_status_message("Line contains only whitespace - nothing to select")
            return False
        start = len(chars) - len(chars.lstrip())
        end = start + len(stripped)
        ed.selection.start((ed.cursor_y, start), (ed.cursor_y, end))
        ed.selection.mode = EditMode.SELECTING
        ed.cursor_x = start
        ed._set_status_message(f"Row text selected (chars {start}-{end - 1})")
        return True

    def select_inside_delimiters(self) -> bool:
        """Selects the interior of the nearest delimiter pair around the cursor on its row.

        Openers are scanned leftwards from the cursor. A candidate pair is
        used when its closer satisfies ``left < cursor_x <= right`` and the
        interior is not empty.
        """
        ed = self.editor
        if ed.cursor_y >= ed.rows.numrows:
            ed._set_status_message("No line to operate on")
            return False
        chars = ed.rows[ed.cursor_y].chars
        if not chars:
            ed._set_status_message("Empty line")
            return False

        cx = ed.cursor_x
        for left in range(min(cx, len(chars)) - 1, -1, -1):
            ch = chars[left]
            if ch in BRACKET_PAIRS:
                close_ch = BRACKET_PAIRS[ch]
                right = find_matching_right(chars, left, ch, close_ch)
            elif ch in QUOTE_CHARS:
                close_ch = ch
                right = find_next_quote(chars, left, ch)
            else:
                continue
            if right < 0 or not (left < cx <= right) or right - left <= 1:
                continue
            ed.selection.start((ed.cursor_y, left + 1), (ed.cursor_y, right))
            ed.selection.mode = EditMode.SELECTING
            ed._set_status_message(f"Selected inside {ch}{close_ch}")
            return True

        ed._set_status_message("No surrounding delimiters found")
        return False

    # ----- Mode switches -----
    def enter_selection_mode(self) -> bool:
        ed = self.editor
        if not ed.selection.active:
            return False
        ed.selection.mode = EditMode.SELECTING
        ed._set_status_message("Entered SELECTING mode. Selection ready for operations.")
        return True

    def cancel(self) -> bool:
        ed = self.editor
        ed.selection.clear()
        ed._set_status_message("Selection cancelled.")
        return True

    # ----- Range edits -----
    def delete_selection(self) -> bool:
        """Deletes the selected range and leaves the cursor at its start."""
        ed = self.editor
        rng = self.get_normalized_range()
        if rng is None:
            ed._set_status_message("No active selection")
            return False
        start, end = rng
        if start == end:
            ed.selection.clear()
            ed._set_status_message("Empty selection")
            return False
        ed.rows.delete_range(start, end)
        ed.cursor_y, ed.cursor_x = start
        ed.selection.clear()
        logging.debug(f"SelectionManager: deleted range {start}-{end}")
        return True

    def copy_selection(self) -> bool:
        ed = self.editor
        text = self.get_selected_text()
        if not text:
            ed._set_status_message("Nothing to copy")
            return False
        ed.clipboard.set(text)
        ed.selection.clear()
        ed._set_status_message("Selection copied.")
        return True

    def cut_selection(self) -> bool:
        ed = self.editor
        text = self.get_selected_text()
        if not text:
            ed._set_status_message("Nothing to cut")
            return False
        ed.clipboard.set(text)
        self.delete_selection()
        ed._set_status_message("Selection cut.")
        return True

    def paste(self, text: str) -> bool:
        """Inserts ``text`` at the cursor (replacing an active selection) and selects it."""
        ed = self.editor
        if not text:
            ed._set_status_message("Clipboard is empty")
            return False
        text = text.replace("\r\n", "\n").replace("\r", "\n")
        if ed.selection.active:
            if ed.selection.is_empty:
                ed.selection.clear()
            else:
                self.delete_selection()

        start = (ed.cursor_y, ed.cursor_x)
        end = ed.rows.insert_text(ed.cursor_y, ed.cursor_x, text)
        ed.cursor_y, ed.cursor_x = end
        ed.selection.start(start, end)
        ed.selection.mode = EditMode.SELECTING
        ed._set_status_message("Pasted and selected.")
        return True

    # ----- Indentation -----
    def _touched_rows(self) -> Optional[range]:
        rng = self.get_normalized_range()
        if rng is None:
            return None
        (sy, _), (ey, _) = rng
        ey = min(ey, self.editor.rows.numrows - 1)
        return range(sy, ey + 1)

    def indent(self) -> bool:
        """Prefixes every touched row with one tab stop of spaces."""
        ed = self.editor
        touched = self._touched_rows()
        if touched is None or not touched:
            return False
        pad = " " * ed.tab_stop
        for i in touched:
            ed.rows.insert_string(i, 0, pad)
        sel = ed.selection
        # an endpoint on the virtual row after the document stays at column 0
        if sel.anchor[0] in touched:
            sel.anchor = (sel.anchor[0], sel.anchor[1] + ed.tab_stop)
        if sel.cursor[0] in touched:
            sel.cursor = (sel.cursor[0], sel.cursor[1] + ed.tab_stop)
        self._sync_cursor()
        ed._set_status_message(f"Indented {len(touched)} line(s)")
        return True

    def unindent(self) -> bool:
        """Removes up to one tab stop of leading spaces from every touched row."""
        ed = self.editor
        touched = self._touched_rows()
        if touched is None or not touched:
            return False
        sel = ed.selection
        changed = False
        for i in touched:
            chars = ed.rows[i].chars
            removed = len(chars[: ed.tab_stop]) - len(chars[: ed.tab_stop].lstrip(" "))
            if not removed:
                continue
            ed.rows.set_row_text(i, chars[removed:])
            changed = True
            if sel.anchor[0] == i:
                sel.anchor = (i, max(0, sel.anchor[1] - removed))
            if sel.cursor[0] == i:
                sel.cursor = (i, max(0, sel.cursor[1] - removed))
        self._sync_cursor()
        if changed:
            ed._set_status_message(f"Unindented {len(touched)} line(s)")
        else:
            ed._set_status_message("Nothing to unindent")
        return changed

    # ----- Block moves -----
    def can_move_left(self) -> bool:
        """True when every touched row has a space that can be removed before the range."""
        rng = self.get_normalized_range()
        if rng is None:
            return False
        (sy, sx), (ey, _) = rng
        rows = self.editor.rows
        if sy >= rows.numrows:
            return False
        ey = min(ey, rows.numrows - 1)
        if not (sx > 0 and rows[sy].chars[sx - 1] == " "):
            return False
        return all(rows[i].chars.startswith(" ") for i in range(sy + 1, ey + 1))

    def is_full_lines(self) -> bool:
        rng = self.get_normalized_range()
        if rng is None:
            return False
        (sy, sx), (ey, ex) = rng
        return sx == 0 and ey < self.editor.rows.numrows and ex == self.editor.rows.row_length(ey)

    def cannot_move_reason(self, direction: str) -> Optional[str]:
        """Why the block cannot move in ``direction``, or None when it can."""
        rng = self.get_normalized_range()
        if rng is None:
            return "No active selection"
        (sy, _), (ey, _) = rng
        if direction == "left":
            if not self.can_move_left():
                return "Cannot move selection left - not enough spaces"
        elif direction == "right":
            if ey >= self.editor.rows.numrows:
                return "Cannot move selection right - past end of file"
        elif direction in ("up", "down"):
            if not self.is_full_lines():
                return f"Cannot move selection {direction} - selection must be full lines"
            if direction == "up" and sy == 0:
                return "Cannot move selection up - already at top"
            if direction == "down" and ey >= self.editor.rows.numrows - 1:
                return "Cannot move selection down - already at bottom"
        else:
            raise ValueError(f"Unknown move direction: {direction!r}")
        return None

    def move(self, direction: str) -> bool:
        """Moves the selected block one step in ``direction`` (up, down, left, right)."""
        ed = self.editor
        reason = self.cannot_move_reason(direction)
        if reason:
            ed._set_status_message(reason)
            return False
        (sy, sx), (ey, ex) = self.get_normalized_range()
        rows = ed.rows

        if direction == "left":
            rows.delete_char(sy, sx - 1)
            last = min(ey, rows.numrows - 1)
            for i in range(sy + 1, last + 1):
                rows.delete_char(i, 0)
            end = (ey, ex) if ey > last else (ey, max(0, ex - 1))
            ed.selection.set_normalized((sy, sx - 1), end)
            message = "Selection moved left"
        elif direction == "right":
            rows.insert_char(sy, sx, " ")
            for i in range(sy + 1, ey + 1):
                rows.insert_char(i, 0, " ")
            ed.selection.set_normalized((sy, sx + 1), (ey, ex + 1))
            message = "Selection moved right"
        else:
            offset = -1 if direction == "up" else 1
            rows.move_block(sy, ey, offset)
            ed.selection.set_normalized((sy + offset, sx), (ey + offset, ex))
            message = f"Selection moved {direction}"

        self._sync_cursor()
        ed._set_status_message(message)
        return True
