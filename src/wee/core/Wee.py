# wee/core/Wee.py
"""wee.core.Wee
===============
Wee: the editor state object of the wee terminal text editor.

One `Wee` instance owns everything a session edits:

- the document (`RowStore`) and its syntax highlighter (`SyntaxEngine`),
- the cursor, the scroll offsets and the viewport size,
- the selection and the selection operations (`SelectionManager`),
- the snapshot history (`History`) and the clipboard (`Clipboard`),
- the status message, pending prompt and host requests (save, open, quit).

Input arrives one event at a time through `wee.ui.KeyBinder`, which calls the
action methods below. Every action runs to completion and returns True when
the screen needs a redraw. Actions that change the document take a history
snapshot first. Invalid positions and allocation failures never escape an
action: they are logged, reported in the status bar and the action returns
False with the document unchanged.

Rendering, raw terminal handling, prompts and file I/O belong to the host. The
host reads `scroll()`, `row_view()`, `visible_status_message()` and
`pending_prompt`, and feeds results back through `open_document()`,
`submit_prompt()` and `mark_saved()`.
"""

import logging
import time
from typing import Any, Callable, NamedTuple, Optional, Sequence, Union

from wee.core.Clipboard import Clipboard
from wee.core.History import History
from wee.core.Prompt import (
    GenericPrompt,
    JumpToLinePrompt,
    Prompt,
    ReplacePrompt,
    SaveAsPrompt,
    SearchPrompt,
)
from wee.core.RowStore import InvalidPositionError, Position, RowStore
from wee.core.Selection import EditMode, Selection
from wee.core.SelectionManager import SelectionManager
from wee.core.Syntax import Highlight, SyntaxEngine
from wee.core.SyntaxRules import SyntaxRuleProvider
from wee.utils.utils import DEFAULT_CONFIG, deep_merge

AUTO_CLOSE_PAIRS = {"(": ")", "[": "]", "{": "}", '"': '"', "'": "'"}


class RowView(NamedTuple):
    """What a renderer needs for one document row."""

    render: str
    hl: list[Highlight]


## ==================== Wee Class ====================
class Wee:
    """
    Class Wee
    =========
    Editor state object and action surface.

    Attributes:
        config (dict): Effective configuration (defaults merged with user values).
        rows (RowStore): The document.
        syntax (SyntaxEngine): Highlighter shared with `rows`.
        syntax_rules (SyntaxRuleProvider): Profile lookup by file name.
        selection (Selection): Current selection; replaced wholesale on undo/redo.
        selection_manager (SelectionManager): Range operations.
        history (History): Snapshot-based undo/redo.
        clipboard (Clipboard): Internal/system clipboard.
        cursor_y, cursor_x (int): Cursor row and character column.
        render_x (int): Cursor column in render space, updated by `scroll()`.
        scroll_top, scroll_left (int): Viewport offsets.
        screen_rows, screen_cols (int): Text area size.
        filename (Optional[str]): Name of the open file.
        status_message (str): Last status text; expires after the configured timeout.
        pending_prompt (Optional[Prompt]): Prompt the host should collect text for.
        save_requested, open_requested, quit_requested (bool): Requests for the host.
    """

    def __init__(
        self,
        config: Optional[dict[str, Any]] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.config = deep_merge(DEFAULT_CONFIG, config or {})
        editor_config = self.config["editor"]
        history_config = self.config["history"]
        self._clock = clock

        self.tab_stop = int(editor_config.get("tab_stop", 4))
        self.quit_times = int(editor_config.get("quit_times", 2))
        self.status_timeout = float(editor_config.get("status_message_timeout", 5.0))
        self.show_line_numbers = bool(editor_config.get("show_line_numbers", True))
        self.auto_close_pairs = bool(editor_config.get("auto_close_pairs", True))

        self.syntax = SyntaxEngine()
        self.rows = RowStore(self.syntax, tab_stop=self.tab_stop)
        self.syntax_rules = SyntaxRuleProvider(self.config)
        self.selection = Selection()
        self.selection_manager = SelectionManager(self)
        self.clipboard = Clipboard(bool(editor_config.get("use_system_clipboard", True)))
        self.history = History(
            self,
            capacity=history_config.get("capacity", 50),
            debounce_interval=float(history_config.get("debounce_interval", 1.0)),
            typing_idle_threshold=float(history_config.get("typing_idle_threshold", 2.0)),
            clock=clock,
        )

        self.cursor_y = 0
        self.cursor_x = 0
        self.render_x = 0
        self.scroll_top = 0
        self.scroll_left = 0
        self.screen_rows = 22
        self.screen_cols = 80

        self.filename: Optional[str] = None
        self.status_message = ""
        self._status_time = 0.0
        self.pending_prompt: Optional[Prompt] = None
        self.save_requested = False
        self.open_requested = False
        self.quit_requested = False
        self._quit_times_left = self.quit_times
        self._new_file_confirmed = False

        self.last_search = ""
        self.last_match: Optional[tuple[int, int, int]] = None  # (row, render col, length)
        logging.debug("Wee: editor state initialised")

    # ----- State helpers -----
    @property
    def cursor(self) -> Position:
        return self.cursor_y, self.cursor_x

    @property
    def mode(self) -> EditMode:
        return self.selection.mode

    @property
    def dirty(self) -> bool:
        return self.rows.dirty

    def _set_status_message(self, message_for_statusbar: str) -> None:
        message_for_statusbar = str(message_for_statusbar)
        if self.status_message != message_for_statusbar:
            logging.debug(f"Status message set to: '{message_for_statusbar}'")
        self.status_message = message_for_statusbar
        self._status_time = self._clock()

    def visible_status_message(self) -> str:
        """The status message, or "" once it is older than the timeout."""
        if self.status_message and self._clock() - self._status_time < self.status_timeout:
            return self.status_message
        return ""

    def _clamp_cursor(self) -> None:
        numrows = self.rows.numrows
        self.cursor_y = min(max(self.cursor_y, 0), numrows)
        self.cursor_x = min(max(self.cursor_x, 0), self.rows.row_length(self.cursor_y))

    def _run_edit(self, description: Optional[str], action: Callable[[], Any]) -> bool:
        """Snapshots (when ``description`` is given) and runs a document-changing action."""
        if description:
            self.history.capture(description)
        try:
            changed = bool(action())
        except InvalidPositionError as e:
            logging.error(f"{description or 'Edit'} rejected: {e}", exc_info=True)
            self._set_status_message(f"{description or 'Edit'} failed: invalid position")
            return False
        except MemoryError:
            logging.critical(f"{description or 'Edit'} failed: out of memory", exc_info=True)
            self._set_status_message(f"{description or 'Edit'} failed: out of memory")
            return False
        self._clamp_cursor()
        return changed

    def reset_confirmations(self) -> None:
        """Re-arms the dirty-buffer confirmations after any other key."""
        self._quit_times_left = self.quit_times
        self._new_file_confirmed = False

    # ----- Viewport -----
    def handle_resize(self, rows: int, cols: int) -> bool:
        """Sets the terminal size; two lines are reserved for the status and message bars."""
        self.screen_rows = max(1, rows - 2)
        self.screen_cols = max(1, cols)
        self.scroll()
        return True

    def toggle_line_numbers(self) -> bool:
        self.show_line_numbers = not self.show_line_numbers
        self._set_status_message(
            f"Line numbers {'on' if self.show_line_numbers else 'off'}"
        )
        return True

    def line_number_width(self) -> int:
        if not self.show_line_numbers:
            return 0
        return max(4, len(str(max(self.rows.numrows, 1))) + 1)

    def text_columns(self) -> int:
        return max(1, self.screen_cols - self.line_number_width())

    def scroll(self) -> bool:
        """Updates ``render_x`` and the scroll offsets so the cursor stays visible."""
        old = (self.scroll_top, self.scroll_left)
        self.render_x = self.rows.char_to_render_column(self.cursor_y, self.cursor_x)
        if self.cursor_y < self.scroll_top:
            self.scroll_top = self.cursor_y
        if self.cursor_y >= self.scroll_top + self.screen_rows:
            self.scroll_top = self.cursor_y - self.screen_rows + 1
        text_cols = self.text_columns()
        if self.render_x < self.scroll_left:
            self.scroll_left = self.render_x
        if self.render_x >= self.scroll_left + text_cols:
            self.scroll_left = self.render_x - text_cols + 1
        return (self.scroll_top, self.scroll_left) != old

    def effective_selection(self) -> Optional[tuple[Position, Position]]:
        return self.selection.normalized()

    def row_view(self, filerow: int) -> RowView:
        """Render text and highlight classes of a row with MATCH/SELECTION overlays."""
        row = self.rows[filerow]
        hl = list(row.hl)

        rng = self.selection.normalized()
        if rng is not None:
            (sy, sx), (ey, ex) = rng
            if sy <= filerow <= ey:
                start_cx = sx if filerow == sy else 0
                end_cx = ex if filerow == ey else len(row.chars)
                start_rx = self.rows.char_to_render_column(filerow, start_cx)
                end_rx = self.rows.char_to_render_column(filerow, end_cx)
                for i in range(start_rx, min(end_rx, len(hl))):
                    hl[i] = Highlight.SELECTION

        if self.last_match is not None and self.last_match[0] == filerow:
            _, rx, length = self.last_match
            for i in range(rx, min(rx + length, len(hl))):
                hl[i] = Highlight.MATCH

        return RowView(row.render, hl)

    # ----- Cursor movement -----
    def move_cursor(self, direction: str) -> bool:
        """Moves the cursor one step; left/right wrap across rows, vertical moves clamp the column."""
        old = self.cursor
        numrows = self.rows.numrows
        if direction == "left":
            if self.cursor_x > 0:
                self.cursor_x -= 1
            elif self.cursor_y > 0:
                self.cursor_y -= 1
                self.cursor_x = self.rows.row_length(self.cursor_y)
        elif direction == "right":
            if self.cursor_y < numrows:
                if self.cursor_x < self.rows.row_length(self.cursor_y):
                    self.cursor_x += 1
                else:
                    self.cursor_y += 1
                    self.cursor_x = 0
        elif direction == "up":
            if self.cursor_y > 0:
                self.cursor_y -= 1
        elif direction == "down":
            if self.cursor_y < numrows:
                self.cursor_y += 1
        else:
            logging.warning(f"Wee: unknown cursor direction {direction!r}")
            return False
        self._clamp_cursor()
        return self.cursor != old

    def handle_up(self) -> bool:
        return self.move_cursor("up")

    def handle_down(self) -> bool:
        return self.move_cursor("down")

    def handle_left(self) -> bool:
        return self.move_cursor("left")

    def handle_right(self) -> bool:
        return self.move_cursor("right")

    def handle_home(self) -> bool:
        old_x = self.cursor_x
        self.cursor_x = 0
        return self.cursor_x != old_x

    def handle_end(self) -> bool:
        old_x = self.cursor_x
        self.cursor_x = self.rows.row_length(self.cursor_y)
        return self.cursor_x != old_x

    def page_up(self) -> bool:
        old = self.cursor
        self.cursor_y = self.scroll_top
        for _ in range(self.screen_rows):
            self.move_cursor("up")
        return self.cursor != old

    def page_down(self) -> bool:
        old = self.cursor
        self.cursor_y = min(self.scroll_top + self.screen_rows - 1, self.rows.numrows)
        self._clamp_cursor()
        for _ in range(self.screen_rows):
            self.move_cursor("down")
        return self.cursor != old

    # ----- Typing -----
    def _insert_char_at_cursor(self, ch: str) -> None:
        if self.cursor_y == self.rows.numrows:
            self.rows.insert_row(self.rows.numrows, "")
        self.rows.insert_char(self.cursor_y, self.cursor_x, ch)
        self.cursor_x += 1
        closing = AUTO_CLOSE_PAIRS.get(ch) if self.auto_close_pairs else None
        if closing:
            self.rows.insert_char(self.cursor_y, self.cursor_x, closing)

    def insert_char(self, ch: str) -> bool:
        """Types one character; an active selection is replaced by it."""
        if self.selection.active and not self.selection.is_empty:
            return self.replace_selection(ch)
        if self.selection.active:
            self.selection.clear()

        def action() -> bool:
            self._insert_char_at_cursor(ch)
            return True

        self.history.capture_typing()
        return self._run_edit(None, action)

    def insert_tab(self) -> bool:
        def action() -> bool:
            if self.cursor_y == self.rows.numrows:
                self.rows.insert_row(self.rows.numrows, "")
            self.rows.insert_string(self.cursor_y, self.cursor_x, " " * self.tab_stop)
            self.cursor_x += self.tab_stop
            return True

        self.history.capture_typing()
        return self._run_edit(None, action)

    def insert_newline(self) -> bool:
        """Splits the row at the cursor and carries the row's indentation to the new row."""

        def action() -> bool:
            y, x = self.cursor
            if y >= self.rows.numrows:
                self.rows.insert_row(self.rows.numrows, "")
                self.cursor_y, self.cursor_x = y + 1, 0
                return True
            chars = self.rows[y].chars
            indent = len(chars) - len(chars.lstrip(" "))
            self.rows.split_row(y, x)
            self.cursor_y, self.cursor_x = y + 1, 0
            if indent and x > indent:
                self.rows.insert_string(self.cursor_y, 0, " " * indent)
                self.cursor_x = indent
            return True

        return self._run_edit("Insert newline", action)

    def replace_selection(self, ch: str) -> bool:
        def action() -> bool:
            self.selection_manager.delete_selection()
            self._insert_char_at_cursor(ch)
            self.selection.clear()
            self._set_status_message("")
            return True

        return self._run_edit("Replace selection", action)

    # ----- Deletion -----
    def backspace(self) -> bool:
        """Deletes left of the cursor, joining rows at column 0.

        On the first non-space column of an indented row the indentation is
        reduced to the previous tab stop instead.
        """
        y, x = self.cursor
        if y >= self.rows.numrows:
            return False
        chars = self.rows[y].chars
        first_non_space = len(chars) - len(chars.lstrip(" "))
        if x == first_non_space and first_non_space > 0:
            target = (first_non_space - 1) // self.tab_stop * self.tab_stop

            def outdent() -> bool:
                self.rows.set_row_text(y, chars[first_non_space - target :])
                self.cursor_x = target
                return True

            return self._run_edit("Outdent", outdent)

        if x == 0 and y == 0:
            return False

        def action() -> bool:
            if x > 0:
                self.rows.delete_char(y, x - 1)
                self.cursor_x = x - 1
            else:
                self.cursor_x = self.rows.join_row(y - 1)
                self.cursor_y = y - 1
            return True

        return self._run_edit("Delete character", action)

    def delete_forward(self) -> bool:
        """Deletes the character under the cursor, joining with the next row at end of line."""
        y, x = self.cursor
        if y >= self.rows.numrows:
            return False
        at_row_end = x >= self.rows.row_length(y)
        if at_row_end and y == self.rows.numrows - 1:
            return False

        def action() -> bool:
            if at_row_end:
                self.rows.join_row(y)
            else:
                self.rows.delete_char(y, x)
            return True

        return self._run_edit("Delete character", action)

    # ----- Line clipboard -----
    def copy_line(self) -> bool:
        if self.cursor_y >= self.rows.numrows:
            return False
        self.clipboard.set(self.rows[self.cursor_y].chars)
        self._set_status_message("Line copied.")
        return True

    def cut_line(self) -> bool:
        if self.cursor_y >= self.rows.numrows:
            return False

        def action() -> bool:
            self.clipboard.set(self.rows[self.cursor_y].chars)
            self.rows.delete_row(self.cursor_y)
            if self.rows.numrows == 0:
                self.cursor_y, self.cursor_x = 0, 0
            elif self.cursor_y >= self.rows.numrows:
                self.cursor_y = self.rows.numrows - 1
                self.cursor_x = self.rows.row_length(self.cursor_y)
            self._set_status_message("Line cut.")
            return True

        return self._run_edit("Cut line", action)

    # ----- Selection actions -----
    def extend_selection_left(self) -> bool:
        return self.selection_manager.quick_select_char(-1)

    def extend_selection_right(self) -> bool:
        return self.selection_manager.quick_select_char(1)

    def extend_selection_up(self) -> bool:
        return self.selection_manager.quick_select_line(-1)

    def extend_selection_down(self) -> bool:
        return self.selection_manager.quick_select_line(1)

    def mark_selection_start(self) -> bool:
        return self.selection_manager.mark_start()

    def mark_selection_end(self) -> bool:
        return self.selection_manager.mark_end()

    def select_all(self) -> bool:
        return self.selection_manager.select_all()

    def select_row_text(self) -> bool:
        return self.selection_manager.select_row_text()

    def select_inside_delimiters(self) -> bool:
        return self.selection_manager.select_inside_delimiters()

    def enter_selection_mode(self) -> bool:
        return self.selection_manager.enter_selection_mode()

    def cancel_selection(self) -> bool:
        return self.selection_manager.cancel()

    def get_selected_text(self) -> str:
        return self.selection_manager.get_selected_text()

    def _has_selected_text(self) -> bool:
        if self.selection.is_empty:
            self.selection_manager.delete_selection()  # reports and clears
            return False
        return True

    def delete_selection(self) -> bool:
        if not self._has_selected_text():
            return False

        def action() -> bool:
            deleted = self.selection_manager.delete_selection()
            if deleted:
                self._set_status_message("Selection deleted.")
            return deleted

        return self._run_edit("Delete selection", action)

    def copy_selection(self) -> bool:
        return self.selection_manager.copy_selection()

    def cut_selection(self) -> bool:
        if not self._has_selected_text():
            return False
        return self._run_edit("Cut selection", self.selection_manager.cut_selection)

    def cut(self) -> bool:
        """Cuts the selection when there is one, otherwise the current line."""
        if self.selection.active:
            return self.cut_selection()
        return self.cut_line()

    def paste(self) -> bool:
        if self.clipboard.is_empty:
            self._set_status_message("Clipboard is empty")
            return False
        text = self.clipboard.get()
        return self._run_edit("Paste", lambda: self.selection_manager.paste(text))

    def indent_selection(self) -> bool:
        if not self.selection.active:
            return False
        return self._run_edit("Indent selection", self.selection_manager.indent)

    def unindent_selection(self) -> bool:
        if not self.selection.active:
            return False
        return self._run_edit("Unindent selection", self.selection_manager.unindent)

    def move_selection(self, direction: str) -> bool:
        reason = self.selection_manager.cannot_move_reason(direction)
        if reason:
            self._set_status_message(reason)
            return False
        return self._run_edit("Move selection", lambda: self.selection_manager.move(direction))

    def move_selection_up(self) -> bool:
        return self.move_selection("up")

    def move_selection_down(self) -> bool:
        return self.move_selection("down")

    def move_selection_left(self) -> bool:
        return self.move_selection("left")

    def move_selection_right(self) -> bool:
        return self.move_selection("right")

    # ----- Undo / redo -----
    def undo(self) -> bool:
        changed = self.history.undo()
        if changed:
            self.last_match = None
            self._clamp_cursor()
        return changed

    def redo(self) -> bool:
        changed = self.history.redo()
        if changed:
            self.last_match = None
            self._clamp_cursor()
        return changed

    # ----- Search, replace, jump -----
    def find(self, query: str, direction: int = 1) -> bool:
        """Finds the next match of ``query`` in render text and selects it.

        Repeated searches for the same query continue after the previous
        match; a new query starts at the cursor row. The search wraps.
        """
        if not query:
            return False
        step = 1 if direction >= 0 else -1
        if self.last_match is not None and query == self.last_search:
            start_row = self.last_match[0]
        else:
            start_row = min(self.cursor_y - step, self.rows.numrows)
        self.last_search = query

        found = self.rows.find(query, start_row, step)
        if found is None:
            self.last_match = None
            self.selection.clear()
            self._set_status_message(f"'{query}' not found")
            return True

        row, cx, rx = found
        end_cx = self.rows.render_to_char_column(row, rx + len(query))
        self.cursor_y, self.cursor_x = row, cx
        self.last_match = (row, rx, len(query))
        self.selection.start((row, cx), (row, end_cx))
        self.scroll()
        self._set_status_message(f"Found '{query}' at line {row + 1}")
        return True

    def find_next(self, direction: int = 1) -> bool:
        if not self.last_search:
            self._set_status_message("No previous search")
            return False
        return self.find(self.last_search, direction)

    def end_search(self) -> bool:
        self.last_match = None
        self.selection.clear()
        return True

    def replace_all(self, needle: str, replacement: str) -> bool:
        """Replaces every whole-word occurrence of ``needle`` in the document."""
        total = self.rows.count_occurrences(needle)
        if total == 0:
            self._set_status_message(f"No occurrences of '{needle}' found.")
            return False

        def action() -> bool:
            replaced = self.rows.replace_all(needle, replacement)
            self.selection.clear()
            self.last_match = None
            self._set_status_message(f"Replaced {replaced} occurrence(s).")
            return replaced > 0

        return self._run_edit("Replace all", action)

    def jump_to_line(self, line: Union[int, str]) -> bool:
        try:
            target = int(str(line).strip())
        except ValueError:
            self._set_status_message(f"Invalid line number: {line}")
            return False
        if target <= 0 or target > self.rows.numrows:
            self._set_status_message(
                f"Invalid line number: {target}. Total lines: {self.rows.numrows}."
            )
            return False
        self.cursor_y, self.cursor_x = target - 1, 0
        self.scroll()
        self._set_status_message(f"Jumped to line {target}.")
        return True

    # ----- Prompts -----
    def request_find(self) -> bool:
        self.pending_prompt = SearchPrompt()
        return True

    def request_replace(self) -> bool:
        if not self.last_search:
            self._set_status_message("Enter a search term first (Ctrl-F), then replace.")
            return False
        self.pending_prompt = ReplacePrompt(needle=self.last_search)
        return True

    def request_goto_line(self) -> bool:
        self.pending_prompt = JumpToLinePrompt()
        return True

    def submit_prompt(self, prompt: Prompt, text: Optional[str]) -> bool:
        """Completes a prompt with the text the host collected (None when cancelled)."""
        if self.pending_prompt is prompt:
            self.pending_prompt = None
        if text is None:
            match prompt:
                case SearchPrompt():
                    self.end_search()
                    self._set_status_message("Search cancelled.")
                case ReplacePrompt():
                    self._set_status_message("Replace cancelled.")
                case SaveAsPrompt():
                    self._set_status_message("Save aborted.")
                case JumpToLinePrompt():
                    self._set_status_message("Jump cancelled.")
                case GenericPrompt():
                    self._set_status_message("Cancelled.")
            return True

        match prompt:
            case SearchPrompt(direction=direction):
                return self.find(text, direction)
            case ReplacePrompt(needle=needle):
                return self.replace_all(needle, text)
            case SaveAsPrompt():
                if not text.strip():
                    self._set_status_message("Save aborted.")
                    return True
                self.filename = text.strip()
                self.syntax.set_profile(self.syntax_rules.profile_for(self.filename))
                self.syntax.update_all(self.rows.rows)
                self.save_requested = True
                return True
            case JumpToLinePrompt():
                return self.jump_to_line(text)
            case GenericPrompt():
                self._set_status_message(text)
                return True
        raise TypeError(f"Unknown prompt kind: {prompt!r}")

    # ----- Files and session -----
    def open_document(
        self, filename: Optional[str], content: Union[Sequence[str], str, bytes]
    ) -> bool:
        """Replaces the session's document with loaded content.

        Args:
            filename: Name used for syntax selection and the status bar.
            content: Lines, or the whole file as text or bytes.
        """
        self.filename = filename
        self.syntax.set_profile(self.syntax_rules.profile_for(filename))
        if isinstance(content, (str, bytes)):
            self.rows.load_text(content)
        else:
            self.rows.load_rows(content)
        self.cursor_y = self.cursor_x = 0
        self.scroll_top = self.scroll_left = 0
        self.selection = Selection()
        self.last_match = None
        self.history.clear()
        self.open_requested = False
        self.reset_confirmations()
        self._set_status_message(f'"{filename or "[No Name]"}" opened ({self.rows.numrows} lines).')
        return True

    def document_text(self) -> str:
        return self.rows.rows_to_text()

    def mark_saved(self, byte_count: int) -> bool:
        self.rows.dirty = False
        self.save_requested = False
        self._set_status_message(f"{byte_count} bytes written to disk")
        return True

    def request_save(self) -> bool:
        if not self.filename:
            self.pending_prompt = SaveAsPrompt()
        else:
            self.save_requested = True
        return True

    def save_as(self) -> bool:
        self.pending_prompt = SaveAsPrompt()
        return True

    def request_open(self) -> bool:
        self.open_requested = True
        return True

    def new_file(self, force: bool = False) -> bool:
        """Starts an empty, unnamed document. A dirty buffer needs a second request."""
        if self.rows.dirty and not force and not self._new_file_confirmed:
            self._new_file_confirmed = True
            self._set_status_message(
                "File has unsaved changes. Press Ctrl-T again to discard them."
            )
            return True
        self.rows.clear()
        self.syntax.set_profile(None)
        self.filename = None
        self.cursor_y = self.cursor_x = 0
        self.scroll_top = self.scroll_left = 0
        self.selection = Selection()
        self.last_match = None
        self.history.clear()
        self._new_file_confirmed = False
        self._set_status_message("New empty file. Ctrl-S to save.")
        return True

    def request_quit(self) -> bool:
        """Asks to quit; a dirty buffer needs ``quit_times`` extra requests in a row."""
        if self.rows.dirty and self._quit_times_left > 0:
            self._set_status_message(
                "WARNING!!! File has unsaved changes. "
                f"Press Ctrl-Q {self._quit_times_left} more times to quit."
            )
            self._quit_times_left -= 1
            return True
        self.quit_requested = True
        return True
