# wee/utils/utils.py
"""
wee.utils.utils.py
==================

This module provides a collection of core utility functions for the wee editor.

Key functionalities include:
- Automatic User Configuration: Manages the creation and loading of user-specific
  configuration files (`config.toml`, `.env`) in `~/.config/wee`, ensuring a
  seamless first-run experience.
- Robust Configuration Loading: Loads the hardcoded, built-in default
  configuration, then recursively merges it with user-defined settings from
  `~/.config/wee/config.toml`. The `.env` file is loaded into the process
  environment first so switches such as `WEE_KEYTRACE` take effect.
- Text Decoding: Turns raw file bytes into text using `chardet` detection with
  UTF-8 and Latin-1 fallbacks.
- Helper Utilities: Includes a function for deep-merging dictionaries.

This architecture ensures the editor is always runnable, even if user
configuration files are missing or corrupted, by falling back to the
embedded defaults.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import chardet
import toml
from dotenv import load_dotenv

logger = logging.getLogger("wee")

# --- Constants ---
CONFIG_DIR_NAME = "wee"

ENV_TEMPLATE = """# Environment switches for the wee editor.
# Set to 1 to record every dispatched key in keytrace.log.
WEE_KEYTRACE=0
"""

# This dictionary is the built-in configuration.
# It serves as the ultimate fallback, ensuring the editor can ALWAYS start.
DEFAULT_CONFIG: Dict[str, Any] = {
    "editor": {
        "tab_stop": 4,
        "quit_times": 2,
        "status_message_timeout": 5.0,
        "show_line_numbers": True,
        "auto_close_pairs": True,
        "use_system_clipboard": True,
    },
    "history": {
        "capacity": 50,
        "debounce_interval": 1.0,
        "typing_idle_threshold": 2.0,
    },
    "logging": {
        "file_level": "DEBUG",
        "console_level": "WARNING",
        "log_to_console": False,
        "separate_error_log": False,
    },
    # Bindings active while the editor is in NORMAL mode.
    "keybindings": {
        "insert_newline": ["enter"],
        "insert_tab": ["tab"],
        "quit": ["ctrl+q"],
        "save_file": ["ctrl+s"],
        "save_as": ["ctrl+y"],
        "open_file": ["ctrl+o"],
        "new_file": ["ctrl+t"],
        "copy_line": ["ctrl+w"],
        "cut": ["ctrl+k"],
        "paste": ["ctrl+u"],
        "toggle_line_numbers": ["ctrl+n"],
        "find": ["ctrl+f"],
        "replace": ["ctrl+g"],
        "goto_line": ["ctrl+l"],
        "undo": ["ctrl+z"],
        "redo": ["ctrl+r"],
        "handle_home": ["home", "alt-b"],
        "handle_end": ["end", "alt-e"],
        "select_row_text": ["alt-r"],
        "backspace": ["backspace", "ctrl+h"],
        "delete": ["del"],
        "page_up": ["pageup"],
        "page_down": ["pagedown"],
        "handle_up": ["up"],
        "handle_down": ["down"],
        "handle_left": ["left"],
        "handle_right": ["right"],
        "extend_selection_left": ["shift+left"],
        "extend_selection_right": ["shift+right"],
        "extend_selection_up": ["shift+up"],
        "extend_selection_down": ["shift+down"],
        "select_inside_delimiters": ["shift+tab"],
        "enter_selection_mode": ["esc"],
        "mark_selection_start": ["ctrl+b"],
        "mark_selection_end": ["ctrl+e"],
        "select_all": ["ctrl+a"],
    },
    # Bindings active while a selection is being manipulated (SELECTING mode).
    "selection_keybindings": {
        "cancel_selection": ["esc"],
        "indent_selection": ["tab"],
        "unindent_selection": ["backspace", "ctrl+h"],
        "delete_selection": ["del"],
        "move_selection_up": ["up"],
        "move_selection_down": ["down"],
        "move_selection_left": ["left"],
        "move_selection_right": ["right"],
        "copy_selection": ["ctrl+w"],
        "cut_selection": ["ctrl+k"],
        "select_inside_delimiters": ["shift+tab"],
    },
    # Syntax profiles use the keys of the classic JSON rule files.
    # A keyword ending in "|" belongs to the secondary keyword class.
    "syntax": {
        "c": {
            "language": "c",
            "filematch": [".c", ".h", ".cpp", ".hpp", ".cc"],
            "keywords": [
                "switch", "if", "while", "for", "break", "continue", "return",
                "else", "struct", "union", "typedef", "static", "enum", "class",
                "case", "const", "sizeof", "goto", "default", "do",
                "int|", "long|", "double|", "float|", "char|", "unsigned|",
                "signed|", "void|", "short|", "size_t|", "bool|",
            ],
            "singleline_comment_start": "//",
            "multiline_comment_start": "/*",
            "multiline_comment_end": "*/",
            "flags": 3,
        },
        "python": {
            "language": "python",
            "filematch": [".py", ".pyw"],
            "keywords": [
                "def", "class", "if", "elif", "else", "for", "while", "return",
                "import", "from", "as", "with", "try", "except", "finally",
                "raise", "yield", "lambda", "pass", "break", "continue", "in",
                "is", "not", "and", "or", "global", "nonlocal", "assert", "del",
                "async", "await", "match", "case",
                "None|", "True|", "False|", "self|", "int|", "str|", "list|",
                "dict|", "tuple|", "set|", "bool|", "float|",
            ],
            "singleline_comment_start": "#",
            "multiline_comment_start": '"""',
            "multiline_comment_end": '"""',
            "flags": 3,
        },
        "javascript": {
            "language": "javascript",
            "filematch": [".js", ".mjs", ".cjs"],
            "keywords": [
                "function", "return", "if", "else", "for", "while", "do",
                "switch", "case", "break", "continue", "new", "delete", "try",
                "catch", "finally", "throw", "class", "extends", "import",
                "export", "default", "const", "let", "var", "async", "await",
                "typeof", "instanceof",
                "true|", "false|", "null|", "undefined|", "this|",
            ],
            "singleline_comment_start": "//",
            "multiline_comment_start": "/*",
            "multiline_comment_end": "*/",
            "flags": 3,
        },
        "shell": {
            "language": "shell",
            "filematch": [".sh", ".bash", ".zsh"],
            "keywords": [
                "if", "then", "else", "elif", "fi", "for", "while", "do",
                "done", "case", "esac", "function", "return", "in",
                "echo|", "export|", "local|", "readonly|",
            ],
            "singleline_comment_start": "#",
            "flags": 2,
        },
    },
}


# --- Helper Functions ---

def get_config_dir() -> Path:
    """Returns the per-user configuration directory (`~/.config/wee`)."""
    return Path.home() / ".config" / CONFIG_DIR_NAME


def ensure_user_config_exists() -> None:
    """Checks for user config files in `~/.config/wee` and creates them if missing."""
    try:
        config_dir = get_config_dir()
        user_config_path = config_dir / "config.toml"
        user_env_path = config_dir / ".env"

        config_dir.mkdir(parents=True, exist_ok=True)

        if not user_config_path.exists():
            with open(user_config_path, "w", encoding="utf-8") as f:
                toml.dump({"editor": DEFAULT_CONFIG["editor"]}, f)
            logger.info(f"Created user config template at: {user_config_path}")

        if not user_env_path.exists():
            user_env_path.write_text(ENV_TEMPLATE, encoding="utf-8")
            logger.info(f"Created user .env template at: {user_env_path}")

    except Exception as e:
        logger.critical(f"Could not create user configuration files: {e}", exc_info=True)


def load_config(config_dir: Optional[Path] = None) -> Dict[str, Any]:
    """
    Loads and merges configurations, ensuring the editor can always run.

    Args:
        config_dir: Directory holding `config.toml` and `.env`. Defaults to
            `~/.config/wee`, which is created on first use.
    """
    final_config = deep_merge({}, DEFAULT_CONFIG)
    logger.debug("Loaded embedded default configuration.")

    if config_dir is None:
        ensure_user_config_exists()
        config_dir = get_config_dir()

    env_path = config_dir / ".env"
    if env_path.is_file():
        load_dotenv(dotenv_path=env_path, override=False)
        logger.debug(f"Loaded environment overrides from {env_path}")

    user_config_path = config_dir / "config.toml"
    if user_config_path.is_file():
        try:
            user_config = toml.load(user_config_path)
            final_config = deep_merge(final_config, user_config)
            logger.info(f"Successfully loaded and merged user config from {user_config_path}")
        except Exception as e:
            logger.error(f"Could not parse user config '{user_config_path}': {e}. Using defaults.")

    return final_config


def deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Recursively merges the `override` dictionary into the `base` dictionary.
    """
    result = base.copy()
    for key, value in override.items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def decode_bytes(raw: bytes, min_confidence: float = 0.75) -> tuple[str, str]:
    """Decodes raw file content into text.

    The encoding guessed by `chardet` is tried first when its confidence is at
    least `min_confidence`, followed by UTF-8 and Latin-1. Latin-1 maps every
    byte, so decoding never fails.

    Returns:
        A `(text, encoding)` tuple naming the encoding that succeeded.
    """
    if not raw:
        return "", "utf-8"

    detected = chardet.detect(raw)
    encoding_guess = detected.get("encoding")
    confidence = detected.get("confidence") or 0.0
    logger.debug(
        f"Chardet detected encoding '{encoding_guess}' with confidence {confidence:.2f}."
    )

    candidates: list[str] = []
    if encoding_guess and confidence >= min_confidence:
        candidates.append(encoding_guess)
    for fallback in ("utf-8", "latin-1"):
        if fallback not in (c.lower() for c in candidates):
            candidates.append(fallback)

    for encoding in candidates:
        try:
            return raw.decode(encoding), encoding
        except (UnicodeDecodeError, LookupError) as e:
            logger.debug(f"Decoding with '{encoding}' failed: {e}")

    # latin-1 accepts any byte sequence, this is unreachable in practice
    return raw.decode("utf-8", errors="replace"), "utf-8"
