# wee/ui/KeyBinder.py
"""KeyBinder.py
==================
Description:
-----------------------
The KeyBinder class translates key events into editor actions for the wee text
editor. It works on *logical* key events: the host's terminal layer turns raw
escape sequences into names such as ``"up"``, ``"shift+left"``, ``"pageup"`` or
``"alt-b"``, hands printable characters over as one-character strings, and
may pass control bytes through as integers (``17`` for Ctrl+Q).

Key Features:
- Loads the NORMAL and SELECTING mode keybinding tables from configuration.
- Normalizes key specifications (``"Ctrl+Q"``, ``"alt+b"``, ``17``) to one canonical form.
- Dispatches to the action bound in the current mode; SELECTING mode falls
  back to the NORMAL table for keys it does not bind.
- Inserts printable characters (replacing the selection when one is active).
- Re-arms the quit and new-file confirmations after any other key.
- Records every dispatched key in the key trace log when enabled.

Main Methods:
1. handle_input: Processes a single key event and dispatches it to the appropriate editor action.
2. _load_keybindings: Parses a keybinding table from configuration.
3. _decode_keystring: Decodes a key specification into its canonical form.
4. _setup_action_map: Builds the key -> action tables for both modes.
5. handle_resize: Forwards a terminal resize to the editor.

Intended Usage:
---------------
Instantiate KeyBinder with a reference to the `Wee` instance and call
`handle_input` once per key event. The return value tells the host whether
the screen must be redrawn.
"""

import logging
from typing import TYPE_CHECKING, Callable, Optional, Union

from wcwidth import wcswidth

from wee.core.Selection import EditMode
from wee.utils.logging_config import KEY_LOGGER

if TYPE_CHECKING:
    from wee.core.Wee import Wee


KeySpec = Union[str, int]

# Control bytes with a dedicated name; other bytes 1..26 become "ctrl+<letter>".
CONTROL_CODE_NAMES: dict[int, str] = {
    9: "tab",
    10: "enter",
    13: "enter",
    27: "esc",
    127: "backspace",
}

KEY_ALIASES: dict[str, str] = {
    "delete": "del",
    "return": "enter",
    "escape": "esc",
    "bs": "backspace",
    "pgup": "pageup",
    "page_up": "pageup",
    "pgdn": "pagedown",
    "page_down": "pagedown",
}

MODIFIERS = ("ctrl", "alt", "shift")

# Actions whose repeated presses must not reset their own confirmation counter.
CONFIRMING_ACTIONS = frozenset({"quit", "new_file"})


# ==================== KeyBinder Class ====================
class KeyBinder:
    """Class KeyBinder
    ====================
    KeyBinder manages keybindings and input dispatch for the wee editor.

    Attributes:
        editor (Wee): Reference to the editor instance whose actions are called.
        config (dict): Editor configuration holding the keybinding tables.
        keybindings (dict): Mode -> action name -> list of canonical keys.
        action_map (dict): Mode -> canonical key -> (action name, callable).

    Methods:
        handle_input(key): Processes one key event; returns True when a redraw is needed.
        lookup(key, mode): Returns the action name bound to a key, or None.
        handle_resize(rows, cols): Forwards a terminal resize.
    """

    def __init__(self, editor: "Wee"):
        logging.debug("KeyBinder initialized with editor: %s", editor)
        self.editor = editor
        self.config = editor.config

        self.keybindings: dict[EditMode, dict[str, list[str]]] = {
            EditMode.NORMAL: self._load_keybindings("keybindings"),
            EditMode.SELECTING: self._load_keybindings("selection_keybindings"),
        }
        self.action_map = self._setup_action_map()

    def _load_keybindings(self, section: str) -> dict[str, list[str]]:
        """Parses one keybinding table (action -> key specs) from configuration.

        A spec may be a list, a single key, or several keys joined with ``|``.
        An empty value disables the action. Invalid specs are logged and skipped.
        """
        table: dict[str, object] = self.config.get(section, {})
        parsed: dict[str, list[str]] = {}

        for action, spec in table.items():
            if not spec and spec != 0:
                logging.debug("Keybinding for action %r is disabled or empty.", action)
                continue

            specs_to_process: list[KeySpec]
            if isinstance(spec, list):
                specs_to_process = spec
            elif isinstance(spec, str) and "|" in spec and len(spec) > 1:
                specs_to_process = [s.strip() for s in spec.split("|")]
            else:
                specs_to_process = [spec]  # type: ignore[list-item]

            keys: list[str] = []
            for item in specs_to_process:
                try:
                    key = self._decode_keystring(item)
                except ValueError as e:
                    logging.error(
                        "Error parsing keybinding item %r for action %r: %s. "
                        "This specific binding for the action will be ignored.",
                        item, action, e,
                    )
                    continue
                if key not in keys:
                    keys.append(key)

            if keys:
                parsed[action] = keys
            else:
                logging.warning(
                    "No valid keys found for action %r in [%s]. It will not be bound.",
                    action, section,
                )

        logging.debug("Loaded keybindings from [%s]: %s", section, parsed)
        return parsed

    def _decode_keystring(self, key_input: KeySpec) -> str:
        """Decodes a key specification string or integer into its canonical logical name.

        Canonical names are lowercase. Modifiers come first in the order
        ``ctrl``, ``shift`` joined with ``+``; Alt combinations use the
        ``alt-<key>`` form. Single characters are kept as they are.

        Raises:
            ValueError: If the specification is empty, of the wrong type, or uses an unknown modifier.
        """
        if isinstance(key_input, bool) or not isinstance(key_input, (str, int)):
            raise ValueError(
                f"Invalid key_input type: {type(key_input)}. Expected str or int."
            )

        if isinstance(key_input, int):
            if key_input in CONTROL_CODE_NAMES:
                return CONTROL_CODE_NAMES[key_input]
            if 1 <= key_input <= 26:
                return f"ctrl+{chr(ord('a') + key_input - 1)}"
            if 32 <= key_input < 0x110000:
                return chr(key_input)
            raise ValueError(f"Unsupported key code: {key_input}")

        if len(key_input) == 1:
            if ord(key_input) < 32 or ord(key_input) == 127:
                return self._decode_keystring(ord(key_input))
            return key_input

        s = key_input.strip().lower()
        if not s:
            raise ValueError("Key string cannot be empty.")
        if s.startswith("alt-"):
            s = "alt+" + s[4:]

        parts = s.split("+")
        base = KEY_ALIASES.get(parts[-1], parts[-1])
        if not base:
            raise ValueError(f"Key string {key_input!r} has no base key.")
        mods = parts[:-1]
        for mod in mods:
            if mod not in MODIFIERS:
                raise ValueError(f"Unknown modifier {mod!r} in {key_input!r}")

        if "alt" in mods:
            others = [m for m in MODIFIERS if m in mods and m != "alt"]
            return "alt-" + "".join(f"{m}+" for m in others) + base
        ordered = [m for m in MODIFIERS if m in mods]
        return "+".join([*ordered, base])

    def _setup_action_map(self) -> dict[EditMode, dict[str, tuple[str, Callable[[], bool]]]]:
        """Builds the key -> action tables for both modes from the loaded keybindings."""
        ed = self.editor
        actions: dict[str, Callable[[], bool]] = {
            # NORMAL mode
            "insert_newline": ed.insert_newline,
            "insert_tab": ed.insert_tab,
            "quit": ed.request_quit,
            "save_file": ed.request_save,
            "save_as": ed.save_as,
            "open_file": ed.request_open,
            "new_file": ed.new_file,
            "copy_line": ed.copy_line,
            "cut": ed.cut,
            "paste": ed.paste,
            "toggle_line_numbers": ed.toggle_line_numbers,
            "find": ed.request_find,
            "replace": ed.request_replace,
            "goto_line": ed.request_goto_line,
            "undo": ed.undo,
            "redo": ed.redo,
            "handle_home": ed.handle_home,
            "handle_end": ed.handle_end,
            "select_row_text": ed.select_row_text,
            "backspace": ed.backspace,
            "delete": ed.delete_forward,
            "page_up": ed.page_up,
            "page_down": ed.page_down,
            "handle_up": ed.handle_up,
            "handle_down": ed.handle_down,
            "handle_left": ed.handle_left,
            "handle_right": ed.handle_right,
            "extend_selection_left": ed.extend_selection_left,
            "extend_selection_right": ed.extend_selection_right,
            "extend_selection_up": ed.extend_selection_up,
            "extend_selection_down": ed.extend_selection_down,
            "select_inside_delimiters": ed.select_inside_delimiters,
            "enter_selection_mode": ed.enter_selection_mode,
            "mark_selection_start": ed.mark_selection_start,
            "mark_selection_end": ed.mark_selection_end,
            "select_all": ed.select_all,
            # SELECTING mode
            "cancel_selection": ed.cancel_selection,
            "indent_selection": ed.indent_selection,
            "unindent_selection": ed.unindent_selection,
            "delete_selection": ed.delete_selection,
            "move_selection_up": ed.move_selection_up,
            "move_selection_down": ed.move_selection_down,
            "move_selection_left": ed.move_selection_left,
            "move_selection_right": ed.move_selection_right,
            "copy_selection": ed.copy_selection,
            "cut_selection": ed.cut_selection,
        }

        action_map: dict[EditMode, dict[str, tuple[str, Callable[[], bool]]]] = {}
        for mode, bindings in self.keybindings.items():
            table: dict[str, tuple[str, Callable[[], bool]]] = {}
            for action_name, keys in bindings.items():
                method = actions.get(action_name)
                if method is None:
                    logging.warning(
                        "Keybinding references unknown action %r; ignoring.", action_name
                    )
                    continue
                for key in keys:
                    if key in table and table[key][0] != action_name:
                        logging.warning(
                            "Key %r in %s mode rebound from %r to %r.",
                            key, mode.name, table[key][0], action_name,
                        )
                    table[key] = (action_name, method)
            action_map[mode] = table
        return action_map

    def lookup(self, key: KeySpec, mode: Optional[EditMode] = None) -> Optional[str]:
        """Returns the action name bound to ``key`` in ``mode`` (default: current mode)."""
        try:
            canonical = self._decode_keystring(key)
        except ValueError:
            return None
        entry = self._resolve(canonical, mode or self.editor.mode)
        return entry[0] if entry else None

    def _resolve(self, key: str, mode: EditMode) -> Optional[tuple[str, Callable[[], bool]]]:
        entry = self.action_map.get(mode, {}).get(key)
        if entry is None and mode is not EditMode.NORMAL:
            entry = self.action_map[EditMode.NORMAL].get(key)
        return entry

    def _handle_printable_character(self, key: str) -> bool:
        """Inserts ``key`` if it is a single visible character."""
        if len(key) != 1 or wcswidth(key) <= 0:
            return False
        logging.debug(f"handle_input: Treating {key!r} as printable character for insertion.")
        return self.editor.insert_char(key)

    # ---------------------- Handle Input --------------------
    def handle_input(self, key: KeySpec) -> bool:
        """Processes a single key event and triggers the corresponding editor action.

        Args:
            key (Union[str, int]): Logical key name, printable character or control code.

        Returns:
            bool: True if the event changed anything visible (including the status bar).
        """
        original_status = self.editor.status_message
        mode = self.editor.mode
        visual_change = False
        action_name = "insert_char"

        try:
            try:
                canonical = self._decode_keystring(key)
            except ValueError as e:
                logging.debug("handle_input: undecodable key %r: %s", key, e)
                self.editor._set_status_message(f"Ignored unhandled input: {key!r}")
                return True

            entry = self._resolve(canonical, mode)
            if entry is not None:
                action_name, action = entry
                logging.debug(
                    f"handle_input: Key {canonical!r} in {mode.name} mode. Calling: {action_name}"
                )
                visual_change = bool(action())
            elif self._handle_printable_character(canonical):
                visual_change = True
            else:
                action_name = "unhandled"
                logging.debug("Unhandled input: %r (canonical %r)", key, canonical)
                self.editor._set_status_message(f"Ignored unhandled input: {canonical!r}")

            KEY_LOGGER.debug(
                "key=%r canonical=%r mode=%s action=%s", key, canonical, mode.name, action_name
            )
        except Exception as e_handler:
            logging.exception("Input handler error while processing key %r.", key)
            self.editor._set_status_message(f"Input handler error: {str(e_handler)[:50]}")
            return True
        finally:
            if action_name not in CONFIRMING_ACTIONS:
                self.editor.reset_confirmations()

        self.editor.scroll()
        if self.editor.status_message != original_status:
            visual_change = True
        return visual_change

    def handle_resize(self, rows: int, cols: int) -> bool:
        logging.debug(f"KeyBinder: terminal resized to {rows}x{cols}")
        return self.editor.handle_resize(rows, cols)
