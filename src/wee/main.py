# wee/main.py
"""
wee Main Entry Point
====================

Launches the wee editor in the terminal:
1) Configuration & Logging: loads config (``~/.config/wee``) and initializes logging first.
2) Curses Wrapper: safely initializes/tears down curses to avoid terminal corruption.
3) Application Run: creates the editor, opens the file named on the command line, runs the loop.
"""

import curses
import locale
import logging
import os
import signal
import sys
from typing import Any, Optional

from wee.core.Wee import Wee
from wee.ui.Terminal import TerminalApp
from wee.utils.logging_config import setup_logging
from wee.utils.utils import load_config

logger = logging.getLogger("wee")


def main_app_runner(stdscr: "curses.window", config: dict[str, Any], file_to_open: Optional[str]) -> None:
    """Target for `curses.wrapper`: builds the session and runs it until quit."""
    try:
        curses.set_escdelay(25)
    except Exception:
        os.environ.setdefault("ESCDELAY", "25")
    curses.raw()

    # Ctrl+Z is undo, not suspend.
    if hasattr(signal, "SIGTSTP"):
        signal.signal(signal.SIGTSTP, signal.SIG_IGN)

    editor = Wee(config=config)
    app = TerminalApp(stdscr, editor)
    if file_to_open:
        app.open_file(file_to_open)
    app.run()


def start() -> None:
    try:
        config = load_config()
        setup_logging(config)
    except Exception as e:
        print(f"FATAL: Could not initialize configuration or logging system: {e}", file=sys.stderr)
        sys.exit(1)

    logger.info("wee editor starting up...")
    try:
        locale.setlocale(locale.LC_ALL, "")
    except locale.Error:
        logger.warning("Could not set system locale. Character rendering may be affected.")

    file_to_open = sys.argv[1] if len(sys.argv) > 1 else None
    try:
        curses.wrapper(main_app_runner, config, file_to_open)
        logger.info("wee editor shut down gracefully.")
    except Exception:
        logger.critical("Unhandled exception at the top level.", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    start()
