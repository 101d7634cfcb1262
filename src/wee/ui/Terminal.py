# wee/ui/Terminal.py
"""wee.ui.Terminal
==================

Curses host for the wee editor: reads keys, draws the document, collects
prompt text and performs the file I/O the editor asks for.

The editor core never touches the terminal or the file system. After each
key event this host:

1. forwards the key (or a resize) to `KeyBinder`,
2. answers ``editor.pending_prompt`` by reading a line on the message bar,
3. writes the file when ``editor.save_requested`` is set, asks for a file
   name when ``editor.open_requested`` is set,
4. stops when ``editor.quit_requested`` is set,
5. redraws from ``editor.row_view()``, the status bar and the message bar.

Key reading follows the escape-sequence parsing used by curses TUIs: a lone
ESC, ESC + printable (Alt chord) and CSI/SS3 sequences are told apart by
draining the input queue in no-delay mode.
"""

import curses
import logging
import os
import re
from typing import Optional, Union

from wee.core.Prompt import SearchPrompt
from wee.core.Syntax import Highlight, syntax_to_color
from wee.core.Wee import Wee
from wee.ui.KeyBinder import KeyBinder

KeyEvent = Union[str, int]

# Escape sequences without the leading ESC.
ESCAPE_SEQUENCE_MAP: dict[str, str] = {
    "[A": "up", "[B": "down", "[C": "right", "[D": "left",
    "OA": "up", "OB": "down", "OC": "right", "OD": "left",
    "[1;2A": "shift+up", "[1;2B": "shift+down",
    "[1;2C": "shift+right", "[1;2D": "shift+left",
    "[H": "home", "[F": "end", "OH": "home", "OF": "end",
    "[1~": "home", "[4~": "end", "[7~": "home", "[8~": "end",
    "[3~": "del", "[5~": "pageup", "[6~": "pagedown",
    "[Z": "shift+tab",
}

CURSES_KEY_NAMES: dict[int, str] = {
    curses.KEY_UP: "up",
    curses.KEY_DOWN: "down",
    curses.KEY_LEFT: "left",
    curses.KEY_RIGHT: "right",
    curses.KEY_HOME: "home",
    curses.KEY_END: "end",
    curses.KEY_PPAGE: "pageup",
    curses.KEY_NPAGE: "pagedown",
    curses.KEY_DC: "del",
    curses.KEY_BACKSPACE: "backspace",
    curses.KEY_ENTER: "enter",
    curses.KEY_SLEFT: "shift+left",
    curses.KEY_SRIGHT: "shift+right",
    curses.KEY_SR: "shift+up",
    curses.KEY_SF: "shift+down",
    curses.KEY_BTAB: "shift+tab",
}

# SGR foreground colour -> curses colour constant.
SGR_TO_CURSES: dict[int, int] = {
    31: curses.COLOR_RED,
    32: curses.COLOR_GREEN,
    33: curses.COLOR_YELLOW,
    34: curses.COLOR_BLUE,
    35: curses.COLOR_MAGENTA,
    36: curses.COLOR_CYAN,
}


def read_key(window: "curses.window") -> Optional[KeyEvent]:
    """Reads one logical key event; returns None when no key could be read.

    Returns:
        A key name (``"up"``, ``"alt-b"``...), a printable character, a control
        code (int) or ``curses.KEY_RESIZE``.
    """
    try:
        ch = window.get_wch()
    except curses.error:
        return None

    if isinstance(ch, str):
        if ch == "\x1b":
            return _read_escape(window)
        if ord(ch) < 32 or ord(ch) == 127:
            return ord(ch)
        return ch

    if ch == curses.KEY_RESIZE:
        return ch
    name = CURSES_KEY_NAMES.get(ch)
    if name is None:
        logging.debug(f"read_key: unmapped curses key code {ch}")
        return None
    return name


def _read_escape(window: "curses.window") -> KeyEvent:
    seq = ""
    window.nodelay(True)
    try:
        while True:
            try:
                nx = window.get_wch()
            except curses.error:
                break
            seq += nx if isinstance(nx, str) else f"<{nx}>"
    finally:
        window.nodelay(False)

    if not seq:
        return 27
    if len(seq) == 1 and seq.isprintable():
        return f"alt-{seq.lower()}"

    mapped = ESCAPE_SEQUENCE_MAP.get(seq)
    if mapped is None:
        cleaned = "".join(re.findall(r"[\[O0-9;~A-Za-z]", seq))
        mapped = ESCAPE_SEQUENCE_MAP.get(cleaned)
    if mapped is None:
        logging.warning("read_key: unknown escape sequence: ESC + %r", seq)
        return 27
    return mapped


## ==================== TerminalApp Class ====================
class TerminalApp:
    """
    Class TerminalApp
    =================
    Runs one editor session inside a curses window.

    Attributes:
        stdscr (curses.window): The curses screen.
        editor (Wee): The editor state object.
        keybinder (KeyBinder): Input dispatcher.
        running (bool): Main loop flag.
    """

    def __init__(self, stdscr: "curses.window", editor: Wee) -> None:
        self.stdscr = stdscr
        self.editor = editor
        self.keybinder = KeyBinder(editor)
        self.running = True
        self._color_pairs: dict[int, int] = {}
        self._init_colors()
        height, width = stdscr.getmaxyx()
        self.keybinder.handle_resize(height, width)

    def _init_colors(self) -> None:
        if not curses.has_colors():
            return
        try:
            curses.start_color()
            curses.use_default_colors()
        except curses.error:
            logging.debug("TerminalApp: default colours not supported")
        for pair_number, (sgr, color) in enumerate(SGR_TO_CURSES.items(), start=1):
            try:
                curses.init_pair(pair_number, color, -1)
                self._color_pairs[sgr] = pair_number
            except curses.error as e:
                logging.warning(f"TerminalApp: cannot init colour pair for SGR {sgr}: {e}")

    def _attr_for(self, hl: Highlight) -> int:
        sgr = syntax_to_color(hl)
        if sgr == 7:
            return curses.A_REVERSE
        pair = self._color_pairs.get(sgr)
        return curses.color_pair(pair) if pair else curses.A_NORMAL

    # ----- Files -----
    def open_file(self, filename: str) -> None:
        path = os.path.expanduser(filename)
        try:
            with open(path, "rb") as f:
                content = f.read()
        except FileNotFoundError:
            self.editor.open_document(filename, [])
            self.editor._set_status_message(f'New file "{filename}"')
            return
        except OSError as e:
            logging.error(f"TerminalApp: cannot open {path}: {e}")
            self.editor._set_status_message(f"Cannot open file: {e}")
            return
        self.editor.open_document(filename, content)

    def save_file(self) -> None:
        ed = self.editor
        ed.save_requested = False
        if not ed.filename:
            return
        data = ed.document_text().encode("utf-8")
        try:
            with open(os.path.expanduser(ed.filename), "wb") as f:
                f.write(data)
        except OSError as e:
            logging.error(f"TerminalApp: cannot save {ed.filename}: {e}")
            ed._set_status_message(f"Can't save! I/O error: {e}")
            return
        ed.mark_saved(len(data))

    # ----- Prompts -----
    def prompt(self, message: str) -> Optional[str]:
        """Reads a line on the message bar; returns None when cancelled with ESC."""
        buffer = ""
        while True:
            self.editor._set_status_message(message % buffer if "%s" in message else message + buffer)
            self.draw()
            key = read_key(self.stdscr)
            if key is None:
                continue
            if key == curses.KEY_RESIZE:
                height, width = self.stdscr.getmaxyx()
                self.keybinder.handle_resize(height, width)
            elif key == 27:
                self.editor._set_status_message("")
                return None
            elif key in (10, 13, "enter"):
                if buffer:
                    self.editor._set_status_message("")
                    return buffer
            elif key in (8, 127, "backspace", "del"):
                buffer = buffer[:-1]
            elif isinstance(key, str) and len(key) == 1:
                buffer += key

    def _service_requests(self) -> None:
        ed = self.editor
        while ed.pending_prompt is not None:
            pending = ed.pending_prompt
            text = self.prompt(pending.message)
            ed.submit_prompt(pending, text)
            if isinstance(pending, SearchPrompt) and text is not None:
                self._search_loop()
        if ed.open_requested:
            ed.open_requested = False
            name = self.prompt("Open file: %s (ESC to cancel)")
            if name:
                self.open_file(name)
        if ed.save_requested:
            self.save_file()
        if ed.quit_requested:
            self.running = False

    def _search_loop(self) -> None:
        """Arrow keys step through matches until any other key ends the search."""
        while True:
            self.draw()
            key = read_key(self.stdscr)
            if key in ("down", "right"):
                self.editor.find_next(1)
            elif key in ("up", "left"):
                self.editor.find_next(-1)
            else:
                self.editor.end_search()
                return

    # ----- Drawing -----
    def draw(self) -> None:
        ed = self.editor
        ed.scroll()
        self.stdscr.erase()
        gutter = ed.line_number_width()
        text_cols = ed.text_columns()

        for y in range(ed.screen_rows):
            filerow = y + ed.scroll_top
            if filerow >= ed.rows.numrows:
                if ed.rows.numrows == 0 and y == ed.screen_rows // 3:
                    welcome = "wee editor -- version 0.1.0"
                    self._addstr(y, max(0, (ed.screen_cols - len(welcome)) // 2), welcome)
                else:
                    self._addstr(y, 0, "~")
                continue
            if gutter:
                self._addstr(y, 0, f"{filerow + 1:>{gutter - 1}} ", curses.A_DIM)
            view = ed.row_view(filerow)
            visible = view.render[ed.scroll_left : ed.scroll_left + text_cols]
            for i, ch in enumerate(visible):
                self._addstr(y, gutter + i, ch, self._attr_for(view.hl[ed.scroll_left + i]))

        self._draw_status_bar()
        self._addstr(ed.screen_rows + 1, 0, ed.visible_status_message()[: ed.screen_cols])
        cursor_row = ed.cursor_y - ed.scroll_top
        cursor_col = ed.render_x - ed.scroll_left + gutter
        try:
            self.stdscr.move(cursor_row, min(cursor_col, ed.screen_cols - 1))
        except curses.error:
            pass
        self.stdscr.refresh()

    def _draw_status_bar(self) -> None:
        ed = self.editor
        name = ed.filename or "[No Name]"
        left = f"{name[:20]} - {ed.rows.numrows} lines {'(modified)' if ed.dirty else ''}"
        language = ed.syntax.profile.language if ed.syntax.profile else "no ft"
        right = f"{ed.mode.name} | {language} | {ed.cursor_y + 1}/{ed.rows.numrows}"
        width = ed.screen_cols
        bar = left[:width].ljust(width)
        if len(left) + len(right) < width:
            bar = left + " " * (width - len(left) - len(right)) + right
        self._addstr(ed.screen_rows, 0, bar[:width], curses.A_REVERSE)

    def _addstr(self, y: int, x: int, text: str, attr: int = 0) -> None:
        try:
            self.stdscr.addstr(y, x, text, attr)
        except curses.error:
            # writing the bottom-right cell raises after the text is drawn
            pass

    # ----- Main loop -----
    def run(self) -> None:
        logging.info("TerminalApp: main loop started")
        self.editor._set_status_message(
            "HELP: Ctrl-S save | Ctrl-Q quit | Ctrl-F find | Ctrl-Z undo"
        )
        while self.running:
            self.draw()
            key = read_key(self.stdscr)
            if key is None:
                continue
            if key == curses.KEY_RESIZE:
                height, width = self.stdscr.getmaxyx()
                self.keybinder.handle_resize(height, width)
                continue
            self.keybinder.handle_input(key)
            self._service_requests()
        logging.info("TerminalApp: main loop finished")
