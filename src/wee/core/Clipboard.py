# wee/core/Clipboard.py
"""wee.core.Clipboard
=====================

Plain-text clipboard with an internal buffer and optional mirroring to the
system clipboard through `pyperclip`.

The internal buffer always holds the last copied text. When system clipboard
use is enabled and pyperclip works on this machine, copies are also sent to
the system clipboard and pastes prefer its content, falling back to the
internal buffer on any error.
"""

import logging

import pyperclip


class Clipboard:
    """Internal clipboard mirrored to the system clipboard when available."""

    def __init__(self, use_system_clipboard: bool = True) -> None:
        self._text = ""
        self.use_system_clipboard = use_system_clipboard
        self.system_available = self._check_pyclip_availability() if use_system_clipboard else False

    def _check_pyclip_availability(self) -> bool:
        """Checks that pyperclip can reach a clipboard backend (xclip, wl-copy, pbcopy...)."""
        try:
            pyperclip.copy(pyperclip.paste())
            logging.debug("Clipboard: system clipboard available via pyperclip.")
            return True
        except pyperclip.PyperclipException as e:
            logging.warning(
                f"System clipboard unavailable via pyperclip: {e}. "
                f"Falling back to internal clipboard."
            )
            return False
        except Exception as e:
            logging.warning(
                f"Unexpected error while checking system clipboard availability: {e}. "
                f"Falling back to internal clipboard.",
                exc_info=True,
            )
            return False

    @property
    def is_empty(self) -> bool:
        return not self.get()

    def set(self, text: str) -> None:
        self._text = text
        logging.info(f"Clipboard: copied {len(text)} chars to internal clipboard.")
        if self.use_system_clipboard and self.system_available:
            try:
                pyperclip.copy(text)
            except Exception as e:
                logging.error(f"Failed to copy to system clipboard: {e}", exc_info=True)

    def get(self) -> str:
        if self.use_system_clipboard and self.system_available:
            try:
                text = pyperclip.paste()
                if text:
                    return text
            except Exception as e:
                logging.error(f"Failed to paste from system clipboard: {e}", exc_info=True)
        return self._text
