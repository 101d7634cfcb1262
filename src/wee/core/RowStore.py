# wee/core/RowStore.py
"""wee.core.RowStore
====================

Document storage for the wee editor: an ordered list of `Row` objects, each
holding its raw characters, the tab-expanded *render* form, and one highlight
class per rendered character.

Key Features
------------
- Every mutation keeps three things in sync before it returns: the row's
  render text, its highlight classes (through `SyntaxEngine`, including
  multi-line comment cascades), and the ``idx`` of every row
  (``rows[i].idx == i``).
- Out-of-range positions raise `InvalidPositionError` *before* anything is
  changed. New content is fully computed first and then committed, so a
  failure part-way leaves the document as it was.
- Column mapping between character columns and render columns.
- Plain-text conversion (`rows_to_text`, `load_rows`, `load_text`) for the
  persistence layer.
- Search helpers: `find` on render text, whole-word `count_occurrences` and
  `replace_all`.

Intended Usage
--------------
The editor state object (`wee.core.Wee`) owns a single `RowStore`. Selection
and history components reach it through the editor.

Classes
-------
- Row: One line of the document.
- RowStore: The document.
- InvalidPositionError: Raised for positions outside the document.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterator, Optional, Sequence, Union

from wee.core.Syntax import Highlight, SyntaxEngine, is_separator
from wee.utils.utils import decode_bytes

TAB_STOP = 4

Position = tuple[int, int]


class InvalidPositionError(IndexError):
    """A row or column outside the document was addressed."""


@dataclass(slots=True)
class Row:
    idx: int
    chars: str = ""
    render: str = ""
    hl: list[Highlight] = field(default_factory=list)
    hl_open_comment: bool = False

    def __len__(self) -> int:
        return len(self.chars)

    def clone(self) -> "Row":
        """Independent copy; strings are immutable, the highlight list is copied."""
        return Row(self.idx, self.chars, self.render, list(self.hl), self.hl_open_comment)


def expand_tabs(chars: str, tab_stop: int = TAB_STOP) -> str:
    """Returns ``chars`` with each tab expanded to the next multiple of ``tab_stop``."""
    if "\t" not in chars:
        return chars
    out = []
    col = 0
    for ch in chars:
        if ch == "\t":
            out.append(" ")
            col += 1
            while col % tab_stop != 0:
                out.append(" ")
                col += 1
        else:
            out.append(ch)
            col += 1
    return "".join(out)


def char_to_render_column(chars: str, cx: int, tab_stop: int = TAB_STOP) -> int:
    rx = 0
    for ch in chars[:cx]:
        if ch == "\t":
            rx += (tab_stop - 1) - (rx % tab_stop)
        rx += 1
    return rx


def render_to_char_column(chars: str, rx: int, tab_stop: int = TAB_STOP) -> int:
    """Inverse of `char_to_render_column`: the char whose render span contains ``rx``."""
    cur_rx = 0
    for cx, ch in enumerate(chars):
        if ch == "\t":
            cur_rx += (tab_stop - 1) - (cur_rx % tab_stop)
        cur_rx += 1
        if cur_rx > rx:
            return cx
    return len(chars)


## ==================== RowStore Class ====================
class RowStore:
    """
    Class RowStore
    ==============
    Ordered rows of a document plus the dirty flag.

    Attributes:
        rows (list[Row]): The document, ``rows[i].idx == i``.
        syntax (SyntaxEngine): Highlighter used for every row update.
        tab_stop (int): Render width of a tab.
        dirty (bool): True when the content differs from the last load/save.

    Methods:
        insert_row, delete_row, split_row, join_row:
            Structural edits.
        insert_char, delete_char, insert_string, append_string,
        set_row_text, replace_at:
            Edits inside one row.
        insert_text, delete_range, text_in_range:
            Multi-row text operations used by selections and paste.
        char_to_render_column, render_to_char_column:
            Column mapping for one row.
        rows_to_text, load_rows, load_text:
            Plain-text boundary for persistence.
        find, count_occurrences, replace_all:
            Search and whole-word replacement.
    """

    def __init__(self, syntax: Optional[SyntaxEngine] = None, tab_stop: int = TAB_STOP):
        self.rows: list[Row] = []
        self.syntax = syntax if syntax is not None else SyntaxEngine()
        self.tab_stop = tab_stop
        self.dirty = False

    def __len__(self) -> int:
        return len(self.rows)

    def __getitem__(self, at: int) -> Row:
        return self.rows[at]

    def __iter__(self) -> Iterator[Row]:
        return iter(self.rows)

    @property
    def numrows(self) -> int:
        return len(self.rows)

    def lines(self) -> list[str]:
        return [row.chars for row in self.rows]

    def row_length(self, at: int) -> int:
        """Length of row ``at``; the virtual row after the last one has length 0."""
        if 0 <= at < len(self.rows):
            return len(self.rows[at].chars)
        return 0

    # ----- Validation -----
    def _check_row(self, at: int, allow_end: bool = False) -> None:
        limit = len(self.rows) if allow_end else len(self.rows) - 1
        if not 0 <= at <= limit:
            logging.error(f"RowStore: row {at} out of range (0..{limit})")
            raise InvalidPositionError(f"row {at} out of range")

    def _check_col(self, at: int, col: int, allow_end: bool = True) -> None:
        self._check_row(at)
        limit = len(self.rows[at].chars) if allow_end else len(self.rows[at].chars) - 1
        if not 0 <= col <= limit:
            logging.error(f"RowStore: column {col} out of range for row {at} (0..{limit})")
            raise InvalidPositionError(f"column {col} out of range for row {at}")

    # ----- Internal commit helpers -----
    def _renumber(self, start: int) -> None:
        for i in range(start, len(self.rows)):
            self.rows[i].idx = i

    def _new_row(self, at: int, chars: str) -> Row:
        return Row(idx=at, chars=chars, render=expand_tabs(chars, self.tab_stop))

    def _layout(self, at: int, chars: str) -> tuple[str, list[Highlight], bool]:
        """Builds render text, classes and exit comment state of ``chars`` placed at row ``at``."""
        render = expand_tabs(chars, self.tab_stop)
        entering = self.rows[at - 1].hl_open_comment if at > 0 else False
        hl, open_comment = self.syntax.highlight_line(render, entering)
        return render, hl, open_comment

    def _commit(
        self, at: int, chars: str, layout: Optional[tuple[str, list[Highlight], bool]] = None
    ) -> None:
        """Replaces the text of row ``at``; render, classes and comment state change together.

        ``layout`` is a result of `_layout` computed before a structural change
        that leaves row ``at`` and its predecessor in place.
        """
        row = self.rows[at]
        render, hl, open_comment = layout or self._layout(at, chars)
        changed = open_comment != row.hl_open_comment
        row.chars, row.render, row.hl, row.hl_open_comment = chars, render, hl, open_comment
        self.dirty = True
        if changed:
            self.syntax.update(self.rows, at + 1)

    # ----- Structural operations -----
    def insert_row(self, at: int, chars: str = "") -> Row:
        """Inserts a row holding ``chars`` before position ``at`` (``at == numrows`` appends)."""
        self._check_row(at, allow_end=True)
        row = self._new_row(at, chars)
        self.rows.insert(at, row)
        self._renumber(at + 1)
        # the row after the new one has a new predecessor
        self.syntax.update(self.rows, at, min_rows=2)
        self.dirty = True
        return row

    def delete_row(self, at: int) -> Row:
        self._check_row(at)
        removed = self.rows.pop(at)
        self._renumber(at)
        if at < len(self.rows):
            self.syntax.update(self.rows, at)
        self.dirty = True
        return removed

    def split_row(self, at: int, col: int) -> Row:
        """Moves the text right of ``col`` onto a new row inserted after ``at``."""
        self._check_col(at, col)
        chars = self.rows[at].chars
        new_row = self._new_row(at + 1, chars[col:])
        self._commit(at, chars[:col])
        self.rows.insert(at + 1, new_row)
        self._renumber(at + 2)
        self.syntax.update(self.rows, at + 1, min_rows=2)
        return new_row

    def join_row(self, at: int) -> int:
        """Appends row ``at + 1`` to row ``at`` and removes it.

        Returns:
            The column where the joined text starts.
        """
        self._check_row(at)
        self._check_row(at + 1)
        join_col = len(self.rows[at].chars)
        merged = self.rows[at].chars + self.rows[at + 1].chars
        layout = self._layout(at, merged)
        self.rows.pop(at + 1)
        self._renumber(at + 1)
        self._commit(at, merged, layout)
        if at + 1 < len(self.rows):
            self.syntax.update(self.rows, at + 1)
        return join_col

    def move_block(self, start: int, end: int, offset: int) -> None:
        """Swaps rows ``start..end`` with the single row above (``offset=-1``) or below (``+1``).

        Row objects are moved, not copied.
        """
        if offset not in (-1, 1):
            raise ValueError(f"offset must be -1 or 1, got {offset}")
        self._check_row(start)
        self._check_row(end)
        self._check_row(start - 1 if offset < 0 else end + 1)
        block = self.rows[start : end + 1]
        if offset < 0:
            first = start - 1
            self.rows[first : end + 1] = block + [self.rows[first]]
        else:
            first = start
            self.rows[start : end + 2] = [self.rows[end + 1]] + block
        self._renumber(first)
        self.syntax.update(self.rows, first, min_rows=end - start + 2)
        self.dirty = True

    # ----- In-row operations -----
    def insert_char(self, at: int, col: int, ch: str) -> None:
        self._check_col(at, col)
        chars = self.rows[at].chars
        self._commit(at, chars[:col] + ch + chars[col:])

    def delete_char(self, at: int, col: int) -> str:
        """Removes and returns the character at ``col``."""
        self._check_col(at, col, allow_end=False)
        chars = self.rows[at].chars
        self._commit(at, chars[:col] + chars[col + 1 :])
        return chars[col]

    def insert_string(self, at: int, col: int, text: str) -> None:
        self._check_col(at, col)
        chars = self.rows[at].chars
        self._commit(at, chars[:col] + text + chars[col:])

    def append_string(self, at: int, text: str) -> None:
        self._check_row(at)
        self._commit(at, self.rows[at].chars + text)

    def set_row_text(self, at: int, text: str) -> None:
        self._check_row(at)
        if self.rows[at].chars != text:
            self._commit(at, text)

    def replace_at(self, at: int, col: int, length: int, text: str) -> None:
        """Replaces ``length`` characters starting at ``col`` with ``text``."""
        self._check_col(at, col)
        chars = self.rows[at].chars
        if length < 0 or col + length > len(chars):
            raise InvalidPositionError(f"span {col}+{length} out of range for row {at}")
        self._commit(at, chars[:col] + text + chars[col + length :])

    # ----- Multi-row text operations -----
    def _check_position(self, pos: Position) -> None:
        row, col = pos
        if row == len(self.rows) and col == 0:
            return
        self._check_col(row, col)

    def text_in_range(self, start: Position, end: Position) -> str:
        """Text between two ordered positions, rows separated by ``\\n``."""
        self._check_position(start)
        self._check_position(end)
        (sy, sx), (ey, ex) = start, end
        if (sy, sx) >= (ey, ex):
            return ""
        if sy == ey:
            return self.rows[sy].chars[sx:ex]
        parts = [self.rows[sy].chars[sx:]]
        parts.extend(self.rows[i].chars for i in range(sy + 1, ey))
        parts.append(self.rows[ey].chars[:ex] if ey < len(self.rows) else "")
        return "\n".join(parts)

    def delete_range(self, start: Position, end: Position) -> str:
        """Deletes text between two ordered positions and returns it.

        Single row: the substring is removed. Several rows: the first row is
        cut at the start column, the covered rows are dropped, and the
        remainder of the last row is appended.
        """
        removed = self.text_in_range(start, end)
        if not removed:
            return ""
        (sy, sx), (ey, ex) = start, end
        if ey == len(self.rows):
            # range ends on the virtual row after the document
            ey, ex = ey - 1, len(self.rows[ey - 1].chars)
        if sy == ey:
            chars = self.rows[sy].chars
            self._commit(sy, chars[:sx] + chars[ex:])
            return removed
        merged = self.rows[sy].chars[:sx] + self.rows[ey].chars[ex:]
        layout = self._layout(sy, merged)
        del self.rows[sy + 1 : ey + 1]
        self._renumber(sy + 1)
        self._commit(sy, merged, layout)
        if sy + 1 < len(self.rows):
            self.syntax.update(self.rows, sy + 1)
        logging.debug(f"RowStore: deleted range {start}-{end} ({len(removed)} chars)")
        return removed

    def insert_text(self, at: int, col: int, text: str) -> Position:
        """Inserts text that may contain newlines; each newline splits the row.

        Inserting on the virtual row after the document creates it first.

        Returns:
            Position just after the inserted text.
        """
        if at == len(self.rows) and col == 0:
            self.insert_row(at, "")
        self._check_col(at, col)
        lines = text.split("\n")
        if len(lines) == 1:
            self.insert_string(at, col, text)
            return at, col + len(text)

        chars = self.rows[at].chars
        new_texts = [chars[:col] + lines[0], *lines[1:-1], lines[-1] + chars[col:]]
        new_rows = [self._new_row(at + i, t) for i, t in enumerate(new_texts)]
        self.rows[at : at + 1] = new_rows
        self._renumber(at)
        self.syntax.update(self.rows, at, min_rows=len(new_rows) + 1)
        self.dirty = True
        return at + len(lines) - 1, len(lines[-1])

    # ----- Column mapping -----
    def char_to_render_column(self, at: int, cx: int) -> int:
        if not 0 <= at < len(self.rows):
            return 0
        return char_to_render_column(self.rows[at].chars, cx, self.tab_stop)

    def render_to_char_column(self, at: int, rx: int) -> int:
        if not 0 <= at < len(self.rows):
            return 0
        return render_to_char_column(self.rows[at].chars, rx, self.tab_stop)

    # ----- Persistence boundary -----
    def rows_to_text(self) -> str:
        """Every row followed by a newline."""
        return "".join(row.chars + "\n" for row in self.rows)

    def load_rows(self, lines: Sequence[str]) -> None:
        """Replaces the document with ``lines`` (trailing CR/LF stripped) and clears dirty."""
        self.rows = [
            self._new_row(i, line.rstrip("\r\n")) for i, line in enumerate(lines)
        ]
        self.syntax.update_all(self.rows)
        self.dirty = False
        logging.debug(f"RowStore: loaded {len(self.rows)} rows")

    def load_text(self, text: Union[str, bytes]) -> None:
        """Loads a whole file's content; bytes are decoded first."""
        if isinstance(text, bytes):
            text, encoding = decode_bytes(text)
            logging.debug(f"RowStore: decoded content as {encoding}")
        self.load_rows(text.splitlines())

    def replace_rows(self, rows: list[Row]) -> None:
        """Takes ownership of ``rows`` as the new document and recomputes highlighting."""
        self.rows = rows
        self._renumber(0)
        self.syntax.update_all(self.rows)

    def clear(self) -> None:
        self.rows = []
        self.dirty = False

    # ----- Search and replace -----
    def find(
        self, query: str, start_row: int = -1, direction: int = 1
    ) -> Optional[tuple[int, int, int]]:
        """Searches render text row by row, starting after ``start_row`` and wrapping.

        Returns:
            ``(row, char_col, render_col)`` of the first match, or None.
        """
        if not query or not self.rows:
            return None
        step = 1 if direction >= 0 else -1
        current = start_row
        for _ in range(len(self.rows)):
            current += step
            if current == -1:
                current = len(self.rows) - 1
            elif current == len(self.rows):
                current = 0
            rx = self.rows[current].render.find(query)
            if rx != -1:
                return current, self.render_to_char_column(current, rx), rx
        return None

    def _whole_word_at(self, chars: str, pos: int, length: int) -> bool:
        left_ok = pos == 0 or is_separator(chars[pos - 1])
        right_ok = pos + length >= len(chars) or is_separator(chars[pos + length])
        return left_ok and right_ok

    def count_occurrences(self, needle: str, at: Optional[int] = None) -> int:
        """Counts whole-word occurrences of ``needle`` in one row or in the document."""
        if not needle:
            return 0
        targets = self.rows if at is None else [self.rows[at]]
        count = 0
        for row in targets:
            pos = row.chars.find(needle)
            while pos != -1:
                if self._whole_word_at(row.chars, pos, len(needle)):
                    count += 1
                    pos = row.chars.find(needle, pos + len(needle))
                else:
                    pos = row.chars.find(needle, pos + 1)
        return count

    def replace_all(self, needle: str, replacement: str) -> int:
        """Replaces every whole-word occurrence of ``needle``; returns the count."""
        if not needle:
            return 0
        total = 0
        for at, row in enumerate(self.rows):
            chars = row.chars
            pieces = []
            last = 0
            replaced = 0
            pos = chars.find(needle)
            while pos != -1:
                if self._whole_word_at(chars, pos, len(needle)):
                    pieces.append(chars[last:pos])
                    pieces.append(replacement)
                    last = pos + len(needle)
                    replaced += 1
                    pos = chars.find(needle, last)
                else:
                    pos = chars.find(needle, pos + 1)
            if replaced:
                pieces.append(chars[last:])
                self._commit(at, "".join(pieces))
                total += replaced
        logging.debug(f"RowStore: replaced {total} occurrence(s) of {needle!r}")
        return total
